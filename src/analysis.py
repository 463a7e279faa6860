#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
analysis.py

Diagnostic plots for a Seismogenic Index fit.
Includes:
- Cumulative event count vs. injected volume (log-log), with the fitted line
- Seismogenic index trajectory vs. injected volume, with sigma ± sigma_err
"""

import numpy as np
import matplotlib.pyplot as plt

RED = np.array([247, 96, 96]) / 256


def _check_result(result):
    if not result.ok:
        raise ValueError(f"Cannot plot a degenerate result: {result.message}")


def plot_count_vs_volume(result, ax=None):
    """
    Plot cumulative seismic event count against rebased injection volume (log-log).

    Args:
        result (SeismogenicIndexResult): Successful output of seismogenic_index().
        ax (matplotlib.axes.Axes or None): Axes to draw on. A new figure is made if None.

    Returns:
        fig, ax: Matplotlib Figure and Axes objects.
    """
    _check_result(result)
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 5))
    else:
        fig = ax.figure

    veq = np.asarray(result.veq)
    n = veq.size
    ax.loglog(veq, np.arange(1, n + 1), 'o', color='k', markerfacecolor=RED, markersize=6,
              label='Observed')
    ax.loglog(result.v_fit, result.n_fit, '-', color='k', label=rf'Fit: $\Sigma={result.sigma:.2f}$')
    ax.set_xlabel(r'Injection Volume (m$^3$)')
    ax.set_ylabel('Cumulative Seismic Event Count')
    ax.set_ylim(0.7, 1.3 * n)
    ax.set_xlim(0.7 * veq.min(), 1.3 * veq.max())
    ax.legend()
    ax.grid(True, which='both', linestyle=':', alpha=0.5)
    return fig, ax


def plot_index_vs_volume(result, ax=None):
    """
    Plot the per-event seismogenic index against rebased injection volume,
    with the single-value estimate (solid) and its ±1 error band (dashed).

    Args:
        result (SeismogenicIndexResult): Successful output of seismogenic_index().
        ax (matplotlib.axes.Axes or None): Axes to draw on. A new figure is made if None.

    Returns:
        fig, ax: Matplotlib Figure and Axes objects.
    """
    _check_result(result)
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 5))
    else:
        fig = ax.figure

    v_fit = result.v_fit
    ax.plot(result.veq, result.sigma_trajectory, '-o', color=RED, label='Per event')
    ax.plot(v_fit, np.full(v_fit.shape, result.sigma), '-', color='k', label=r'$\Sigma$')
    ax.plot(v_fit, np.full(v_fit.shape, result.sigma + result.sigma_err), '--', color='k',
            label=r'$\Sigma \pm \sigma$')
    ax.plot(v_fit, np.full(v_fit.shape, result.sigma - result.sigma_err), '--', color='k')
    ax.set_xlabel(r'Injection Volume (m$^3$)')
    ax.set_ylabel('Seismogenic Index')
    ax.legend()
    ax.grid(True, linestyle=':', alpha=0.5)
    return fig, ax


def plot_seismogenic_index(result):
    """
    Side-by-side count-vs-volume and index-vs-volume panels.

    Returns:
        fig, axs: Matplotlib Figure and array of two Axes.
    """
    _check_result(result)
    fig, axs = plt.subplots(1, 2, figsize=(13, 5))
    plot_count_vs_volume(result, ax=axs[0])
    plot_index_vs_volume(result, ax=axs[1])
    fig.suptitle(result.summary())
    plt.tight_layout()
    return fig, axs
