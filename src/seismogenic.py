#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
seismogenic.py

Core routines for the Seismogenic Index (Shapiro et al., 2007; 2010):

- align_catalog: flatten inputs, sort the catalog by time, interpolate injected volume
- truncate_catalog: magnitude cutoff and injection-volume window
- estimate_index: per-event index, weighted estimate, uncertainty, R² and fit curves
- seismogenic_index: the three stages chained, returning a SeismogenicIndexResult

The model is log10(N) = log10(V) - b*Mc + sigma, with N the cumulative count of
events at or above Mc and V the cumulative injected volume.

References:
    Shapiro, Dinske & Kummerow (2007) GRL 34(22), doi:10.1029/2007GL031615.
    Shapiro, Dinske, Langenbruch & Wenzel (2010) TLE 29(3), 304-309, doi:10.1190/1.3353727.
"""

from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

log = logging.getLogger(__name__)

# Reasons for a degenerate ("no usable data") result
IMPROPER_INPUT_LENGTHS = 'improper_input_lengths'
NO_EVENTS_ABOVE_MC = 'no_events_above_mc'
NO_EVENTS_IN_INTERVAL = 'no_events_in_interval'

REASON_MESSAGES = {
    IMPROPER_INPUT_LENGTHS: "improper input lengths.",
    NO_EVENTS_ABOVE_MC: "No earthquakes above given magnitude threshold.",
    NO_EVENTS_IN_INTERVAL: "No earthquakes during injection interval.",
}


@dataclass
class SeismogenicIndexResult:
    """
    Output of seismogenic_index().

    On success `reason` is None. On the degenerate path `veq` and
    `sigma_trajectory` hold the scalar 0 and every other field is None.

    Attributes:
        veq: Rebased cumulative injected volume at each retained earthquake.
        sigma_trajectory: Seismogenic index of each retained earthquake.
        sigma: Weighted single-value seismogenic index.
        sigma_err: Weighted standard deviation of the trajectory.
        r2: Goodness-of-fit in linear count space (nan if undefined).
        v_fit: Volume samples of the fitted line, for plotting.
        n_fit: Cumulative count of the fitted line at v_fit.
        vs: Injected volume at the first truncated earthquake, before rebasing.
        reason: None, or one of the module-level reason constants.
    """
    veq: np.ndarray | int = 0
    sigma_trajectory: np.ndarray | int = 0
    sigma: float | None = None
    sigma_err: float | None = None
    r2: float | None = None
    v_fit: np.ndarray | None = None
    n_fit: np.ndarray | None = None
    vs: float | None = None
    reason: str | None = None

    @classmethod
    def degenerate(cls, reason):
        return cls(reason=reason)

    @property
    def ok(self):
        return self.reason is None

    @property
    def message(self):
        return REASON_MESSAGES.get(self.reason, "")

    @property
    def count(self):
        """Cumulative event count Nm = 1..N (empty for a degenerate result)."""
        if not self.ok:
            return np.array([], dtype=int)
        return np.arange(1, len(self.veq) + 1)

    @property
    def weights(self):
        if not self.ok:
            return np.array([])
        return event_weights(self.count)

    def to_frame(self):
        """Per-event table of volume, count, index and weight."""
        if not self.ok:
            return pd.DataFrame(columns=['volume', 'count', 'sigma', 'weight'])
        return pd.DataFrame({
            'volume': self.veq,
            'count': self.count,
            'sigma': self.sigma_trajectory,
            'weight': self.weights,
        })

    def summary(self):
        """One-line human-readable summary of the estimate."""
        if not self.ok:
            return f"Sigma: undefined ({self.message})"
        return f"Sigma: {self.sigma:0.3f} ± {self.sigma_err:0.3f} (R² {self.r2:0.3f})"


def _as_flat(values):
    """Return values as a flat 1-D float array, whatever the input orientation."""
    return np.asarray(values, dtype=float).ravel()


def align_catalog(inj_time, inj_volume, eq_time, eq_mag):
    """
    Normalize the input series and sort the earthquake catalog by time.

    Args:
        inj_time (array-like): Injection time axis (same units as eq_time).
        inj_volume (array-like): Cumulative injected volume (m³).
        eq_time (array-like): Earthquake times.
        eq_mag (array-like): Earthquake magnitudes.

    Returns:
        tuple or None: (inj_time, inj_volume, eq_time, eq_mag) as flat float arrays
        with the catalog sorted by time, or None if paired series differ in length.
    """
    inj_time = _as_flat(inj_time)
    inj_volume = _as_flat(inj_volume)
    eq_time = _as_flat(eq_time)
    eq_mag = _as_flat(eq_mag)

    if inj_time.size != inj_volume.size or eq_time.size != eq_mag.size:
        return None

    # Stable sort keeps each magnitude with its time
    order = np.argsort(eq_time, kind='stable')
    return inj_time, inj_volume, eq_time[order], eq_mag[order]


def interpolate_volume(inj_time, inj_volume, eq_time):
    """
    Linearly interpolate cumulative injected volume at each earthquake time.

    Times outside [inj_time.min(), inj_time.max()] give nan; nothing is extrapolated.
    """
    if inj_time.size == 0:
        return np.full(eq_time.shape, np.nan)
    order = np.argsort(inj_time, kind='stable')
    return np.interp(eq_time, inj_time[order], inj_volume[order], left=np.nan, right=np.nan)


def truncate_catalog(inj_time, inj_volume, eq_time, eq_mag, mc, v_start=0.0, v_end=0.0,
                     logger=None):
    """
    Apply the magnitude cutoff and the injection-volume window, in that order.

    Args:
        inj_time, inj_volume (np.ndarray): Injection series.
        eq_time, eq_mag (np.ndarray): Time-sorted catalog.
        mc (float): Magnitude cutoff; events with magnitude < mc are dropped.
        v_start (float): Start volume. 0 means "rebase to the first event's volume".
        v_end (float): Shut-in volume. 0 means no upper bound.
        logger (logging.Logger, optional): Diagnostic channel.

    Returns:
        tuple: (veq, mags, vs, reason). On success reason is None and veq holds
        the rebased volumes; otherwise veq and mags are empty.

    Notes:
        - With v_start == 0 only strictly positive rebased volumes survive.
        - With v_start != 0 volumes >= v_start survive and are then rebased.
    """
    logger = logger or log
    empty = np.array([])

    keep = eq_mag >= mc
    eq_time, eq_mag = eq_time[keep], eq_mag[keep]
    logger.debug(f"Magnitude cutoff {mc}: kept {eq_mag.size} of {keep.size} events.")
    if eq_mag.size == 0:
        return empty, empty, None, NO_EVENTS_ABOVE_MC

    veq = interpolate_volume(inj_time, inj_volume, eq_time)

    # Comparisons against nan are False, so undefined volumes drop out here too
    with np.errstate(invalid='ignore'):
        if v_end != 0:
            keep = veq <= v_end
            eq_mag, veq = eq_mag[keep], veq[keep]
            logger.debug(f"End volume {v_end}: kept {veq.size} events.")

        vs = float(veq[0]) if veq.size else None
        if v_start == 0:
            if vs is not None:
                veq = veq - vs
            keep = veq > 0
            eq_mag, veq = eq_mag[keep], veq[keep]
        else:
            keep = veq >= v_start
            eq_mag, veq = eq_mag[keep], veq[keep]
            veq = veq - v_start

    keep = ~np.isnan(veq)
    eq_mag, veq = eq_mag[keep], veq[keep]
    logger.debug(f"Volume window: {veq.size} events remain (Vs={vs}).")

    if eq_mag.size == 0:
        return empty, empty, vs, NO_EVENTS_IN_INTERVAL
    return veq, eq_mag, vs, None


def event_weights(count):
    """Weights w = Nm² / sum(Nm²); later events dominate."""
    count = np.asarray(count, dtype=float)
    w = count ** 2
    total = w.sum()
    if total == 0:
        return np.zeros_like(w)
    return w / total


def estimate_index(veq, b, mc, logger=None):
    """
    Estimate the seismogenic index from rebased, time-ordered event volumes.

    Args:
        veq (np.ndarray): Rebased cumulative volume of each event (non-empty).
        b (float): Gutenberg-Richter b-value.
        mc (float): Magnitude cutoff.
        logger (logging.Logger, optional): Diagnostic channel.

    Returns:
        dict:
            'sigma_trajectory' : np.ndarray, log10(Nm) - log10(V) + b*Mc per event
            'sigma'            : float, weighted mean of the trajectory
            'sigma_err'        : float, weighted standard deviation (radicand clamped at 0)
            'r2'               : float, weighted R² of Nm against the fitted count (nan if SStot == 0)
            'v_fit', 'n_fit'   : np.ndarray, fitted line sampled at N volumes
    """
    logger = logger or log
    veq = np.asarray(veq, dtype=float)
    n = veq.size
    nm = np.arange(1, n + 1, dtype=float)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        log_v = np.log10(veq)
        trajectory = np.log10(nm) - log_v + b * mc

        w = event_weights(nm)
        n_bad = int(np.count_nonzero(~np.isfinite(trajectory)))
        if n_bad:
            logger.warning(f"{n_bad} event(s) at zero rebased volume; "
                           f"single-value index and R² are undefined.")
            sigma = sigma_err = r2 = np.nan
        else:
            sigma = float(np.sum(w * trajectory))
            radicand = float(np.sum(w * trajectory ** 2)) - sigma ** 2
            sigma_err = float(np.sqrt(max(radicand, 0.0)))

            # Goodness-of-fit in linear space
            n_pred = 10 ** (log_v - b * mc + sigma)
            ss_tot = float(np.sum(w * (nm - nm.mean()) ** 2))
            ss_res = float(np.sum(w * (nm - n_pred) ** 2))
            if ss_tot == 0:
                logger.warning("Zero count variance (single event); R² is undefined.")
                r2 = np.nan
            else:
                r2 = 1.0 - ss_res / ss_tot

        v_fit = np.linspace(veq[0], veq[-1], n)
        n_fit = 10 ** (np.log10(v_fit) - b * mc + sigma)

    return {
        'sigma_trajectory': trajectory,
        'sigma': sigma,
        'sigma_err': sigma_err,
        'r2': r2,
        'v_fit': v_fit,
        'n_fit': n_fit,
    }


def seismogenic_index(inj_time, inj_volume, eq_time, eq_mag, b, mc, v_start=0.0, v_end=0.0,
                      logger=None):
    """
    Compute the Seismogenic Index of an injection and its earthquake catalog.

    Args:
        inj_time (array-like): Cumulative volume injected time axis (same units as eq_time).
        inj_volume (array-like): Cumulative volume injected (m³).
        eq_time (array-like): Earthquake time axis (same units as inj_time).
        eq_mag (array-like): Earthquake magnitudes.
        b (float): Seismic b-value.
        mc (float): Magnitude cut-off.
        v_start (float): Start volume of the fit window (0: first earthquake's volume).
        v_end (float): End (shut-in) volume of the fit window (0: unbounded).
        logger (logging.Logger, optional): Where diagnostics go. Defaults to this module's logger.

    Returns:
        SeismogenicIndexResult: Full result, or the degenerate result with `reason` set.

    Notes:
        - Never raises for bad lengths or empty selections; check `result.ok`.
        - Pure function of its inputs; safe to call concurrently.
    """
    logger = logger or log

    aligned = align_catalog(inj_time, inj_volume, eq_time, eq_mag)
    if aligned is None:
        logger.warning(REASON_MESSAGES[IMPROPER_INPUT_LENGTHS])
        return SeismogenicIndexResult.degenerate(IMPROPER_INPUT_LENGTHS)

    veq, _, vs, reason = truncate_catalog(*aligned, mc=mc, v_start=v_start, v_end=v_end,
                                          logger=logger)
    if reason is not None:
        logger.warning(REASON_MESSAGES[reason])
        return SeismogenicIndexResult.degenerate(reason)

    fit = estimate_index(veq, b, mc, logger=logger)
    logger.info(f"Seismogenic index from {veq.size} events: sigma={fit['sigma']:.3f}")

    return SeismogenicIndexResult(veq=veq, vs=vs, **fit)


def seismogenic_index_from_frames(injection, catalog, b, mc, v_start=0.0, v_end=0.0,
                                  logger=None):
    """
    Convenience wrapper taking DataFrames from data_io.

    Args:
        injection (pd.DataFrame): Columns ['time', 'volume'].
        catalog (pd.DataFrame): Columns ['time', 'mag'].

    Returns:
        SeismogenicIndexResult
    """
    for df, cols in ((injection, ('time', 'volume')), (catalog, ('time', 'mag'))):
        for col in cols:
            if col not in df.columns:
                raise ValueError(f"Column '{col}' required in input DataFrame.")
    return seismogenic_index(
        injection['time'].to_numpy(), injection['volume'].to_numpy(),
        catalog['time'].to_numpy(), catalog['mag'].to_numpy(),
        b, mc, v_start=v_start, v_end=v_end, logger=logger,
    )
