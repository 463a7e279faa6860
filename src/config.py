"""
config.py

Configuration constants for Seismogenic Index estimation.

Edit these defaults directly, or set/override them programmatically from your main script
(using `config.<PARAM> = value`).

Parameters
----------
B : float or None
    Gutenberg-Richter b-value. If None, estimated from magnitudes at or above MAG_CUTOFF.
MAG_CUTOFF : float or None
    Magnitude of completeness Mc. Events with m < Mc are discarded. Must be set here or on
    the command line.
V_START : float
    Injected volume (m³) at which the fit window opens. 0 uses the volume at the first event.
V_END : float
    Injected volume (m³) at which the fit window closes (e.g. shut-in). 0 means no limit.
INJ_TIME_KEY, INJ_VOLUME_KEY, EQ_TIME_KEY, EQ_MAG_KEY : str
    Variable names of the four series in a .mat dataset.

Notes
-----
- The estimator itself never reads this module; values are passed explicitly.
- All parameters can be overridden by command-line arguments in the main script.
"""

B: float | None = None      # Will be estimated if not set
MAG_CUTOFF: float | None = None
V_START: float = 0.0
V_END: float = 0.0

INJ_TIME_KEY: str = 'Top'
INJ_VOLUME_KEY: str = 'Vcum'
EQ_TIME_KEY: str = 'T'
EQ_MAG_KEY: str = 'M'
