"""
utils.py

Helper estimators for the seismogenic index workflow:

- Gutenberg-Richter b-value estimation (used when no b-value is configured)
"""

import numpy as np


def magnitude_bin_width(mags, default=0.1):
    """Smallest spacing between distinct magnitudes (catalog rounding), or `default`."""
    unique_mags = np.unique(np.round(np.asarray(mags, dtype=float), 3))
    if len(unique_mags) < 2:
        return default
    return float(np.min(np.diff(unique_mags)))


def estimate_b_value(mags, mc=None, bin_width=None):
    """
    Maximum-likelihood Gutenberg-Richter b-value of the complete part of a catalog.

        b = log10(e) / (mean(m) - (Mc - bin_width/2)),   m >= Mc

    Args:
        mags (array-like): Event magnitudes.
        mc (float, optional): Magnitude of completeness. If None, the minimum magnitude.
        bin_width (float, optional): Magnitude bin width. If None, taken from the data.

    Returns:
        float: Estimated b-value.

    Raises:
        ValueError: If no magnitudes reach mc, or their mean does not exceed the lower bin edge.

    Reference:
        Aki, K. (1965). Maximum likelihood estimate of b in the formula log N = a - bM
        and its confidence limits. Bull. Earthq. Res. Inst. 43, 237-239.
    """
    mags = np.asarray(mags, dtype=float).ravel()
    mags = mags[np.isfinite(mags)]
    if mc is None:
        if mags.size == 0:
            raise ValueError("Empty magnitude array passed to estimate_b_value.")
        mc = mags.min()
    mags = mags[mags >= mc]
    if mags.size == 0:
        raise ValueError(f"No magnitudes at or above Mc={mc} for b-value estimation.")
    if bin_width is None:
        bin_width = magnitude_bin_width(mags)

    spread = mags.mean() - (mc - bin_width / 2)
    if spread <= 0:
        raise ValueError("Magnitudes too concentrated to estimate a b-value.")
    return float(np.log10(np.e) / spread)
