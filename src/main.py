#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
main.py

Entry point for Seismogenic Index estimation.

Steps:
  1. Load injection history and earthquake catalog
  2. Resolve b-value, magnitude cutoff and volume window
  3. Compute the seismogenic index and print the summary line
  4. Save the per-event table and the diagnostic plots
"""

import argparse
import logging
import os
import sys

import matplotlib
matplotlib.use('Agg')

import config
from analysis import plot_seismogenic_index
from data_io import load_series
from seismogenic import seismogenic_index
from utils import estimate_b_value

log = logging.getLogger('seisindex')

HERE = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(HERE, '..'))


def parse_args(argv=None):
    """Parse command-line arguments for user flexibility and guidance."""
    parser = argparse.ArgumentParser(
        description="Seismogenic Index of fluid injection from an injection history and earthquake catalog."
    )
    parser.add_argument('-i', '--input', required=True,
                        help="Dataset (.mat with injection and catalog), or injection history (.csv)")
    parser.add_argument('-c', '--catalog', default=None,
                        help="Earthquake catalog (.csv); required when --input is a CSV file")
    parser.add_argument('-o', '--output_prefix', default='results',
                        help="Prefix for output files (default: results)")
    parser.add_argument('--output_dir', default=PROJECT_ROOT,
                        help="Directory holding the results/ and plots/ folders (default: project root)")
    parser.add_argument('--mag_cutoff', type=float, default=None,
                        help="Magnitude cutoff Mc (default: config.MAG_CUTOFF)")
    parser.add_argument('--b', type=float, default=None,
                        help="b-value (default: config.B, else auto-estimate)")
    parser.add_argument('--v_start', type=float, default=None,
                        help="Start volume of the fit window in m³; 0 = first event (default: 0)")
    parser.add_argument('--v_end', type=float, default=None,
                        help="End volume of the fit window in m³; 0 = unbounded (default: 0)")
    parser.add_argument('--inj_time_key', default=None,
                        help="MAT variable of injection times (default: Top)")
    parser.add_argument('--inj_volume_key', default=None,
                        help="MAT variable of cumulative volume (default: Vcum)")
    parser.add_argument('--eq_time_key', default=None,
                        help="MAT variable of event times (default: T)")
    parser.add_argument('--eq_mag_key', default=None,
                        help="MAT variable of magnitudes (default: M)")
    parser.add_argument('--inj_time_col', default='time',
                        help="Time column of the injection CSV (default: time)")
    parser.add_argument('--volume_col', default='volume',
                        help="Cumulative volume column of the injection CSV (default: volume)")
    parser.add_argument('--eq_time_col', default='time',
                        help="Time column of the catalog CSV (default: time)")
    parser.add_argument('--mag_col', default='mag',
                        help="Magnitude column of the catalog CSV (default: mag)")
    parser.add_argument('--time_format', default=None,
                        help="Optional datetime format for parsing (e.g., '%%Y-%%m-%%d %%H:%%M:%%S')")
    parser.add_argument('--no_plots', action='store_true',
                        help="Skip figure generation")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Debug logging")
    return parser.parse_args(argv)


def resolve_config_param(name, cli_value, config_value, fallback_fn=None, default=None):
    """
    Resolves a config parameter priority:
        1. CLI value (explicit user input)
        2. Config value (from config.py)
        3. Fallback function (auto-calc)
        4. Hardcoded default

    Sets and returns the resolved value.
    """
    if cli_value is not None:
        final_value = cli_value
        log.info(f"[CONFIG] {name} set by user input: {final_value}")
    elif config_value is not None:
        final_value = config_value
        log.info(f"[CONFIG] {name} from config file: {final_value}")
    elif fallback_fn is not None:
        final_value = fallback_fn()
        log.info(f"[CONFIG] {name} estimated: {final_value:.3f}")
    elif default is not None:
        final_value = default
        log.info(f"[CONFIG] {name} defaulted: {final_value}")
    else:
        final_value = None
        log.warning(f"{name} remains unset")
    setattr(config, name, final_value)
    return final_value


def run(argv=None):
    """
    Run the full workflow and return the SeismogenicIndexResult.

    Exits with status 1 when loading fails, Mc is missing, the b-value cannot be
    estimated, or the result is degenerate.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(levelname)s] %(message)s',
    )

    # 1. Load data
    log.info(f"[STEP 1] Loading dataset: {args.input}")
    try:
        inj_time, inj_volume, eq_time, eq_mag = load_series(
            args.input,
            catalog_path=args.catalog,
            inj_time_key=args.inj_time_key,
            inj_volume_key=args.inj_volume_key,
            eq_time_key=args.eq_time_key,
            eq_mag_key=args.eq_mag_key,
            inj_time_col=args.inj_time_col,
            volume_col=args.volume_col,
            eq_time_col=args.eq_time_col,
            mag_col=args.mag_col,
            time_format=args.time_format,
        )
    except (RuntimeError, ValueError) as e:
        log.error(f"Failed to load dataset: {e}")
        sys.exit(1)

    # 2. Resolve parameters
    mc = resolve_config_param('MAG_CUTOFF', args.mag_cutoff, getattr(config, 'MAG_CUTOFF', None))
    if mc is None:
        log.error("A magnitude cutoff is required (--mag_cutoff or config.MAG_CUTOFF).")
        sys.exit(1)
    try:
        b = resolve_config_param('B', args.b, getattr(config, 'B', None),
                                 fallback_fn=lambda: estimate_b_value(eq_mag, mc=mc))
    except ValueError as e:
        log.error(f"Failed to estimate b-value: {e}")
        sys.exit(1)
    v_start = resolve_config_param('V_START', args.v_start, getattr(config, 'V_START', None), default=0.0)
    v_end = resolve_config_param('V_END', args.v_end, getattr(config, 'V_END', None), default=0.0)

    # 3. Seismogenic index
    log.info("[STEP 2] Computing seismogenic index...")
    result = seismogenic_index(inj_time, inj_volume, eq_time, eq_mag, b, mc,
                               v_start=v_start, v_end=v_end)
    print(result.summary())
    if not result.ok:
        sys.exit(1)

    # 4. Outputs
    results_dir = os.path.join(args.output_dir, 'results')
    os.makedirs(results_dir, exist_ok=True)
    table_csv = os.path.join(results_dir, f"{args.output_prefix}_si.csv")
    result.to_frame().to_csv(table_csv, index=False)
    log.info(f"    Per-event seismogenic index saved to {table_csv}")

    if not args.no_plots:
        log.info("[STEP 3] Generating and saving plots...")
        plots_dir = os.path.join(args.output_dir, 'plots')
        os.makedirs(plots_dir, exist_ok=True)
        fig, _ = plot_seismogenic_index(result)
        fig_png = os.path.join(plots_dir, f"{args.output_prefix}_si.png")
        fig.savefig(fig_png, dpi=300, bbox_inches='tight')
        log.info(f"    Plots saved to {plots_dir}")

    return result


def main(argv=None):
    """Console entry point; a clean return means success."""
    run(argv)


if __name__ == '__main__':
    main()
