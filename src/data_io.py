"""
data_io.py

Utility functions for loading injection histories and earthquake catalogs.

Supports:
    - MATLAB .mat files holding all four series (injection time, cumulative volume,
      event time, magnitude) as 1D arrays
    - CSV files (standard pandas format), one for injection and one for the catalog

Standardizes columns to ['time', 'volume'] for injection and ['time', 'mag'] for the catalog.
"""

import logging
import os

import numpy as np
import pandas as pd
import scipy.io

import config

log = logging.getLogger(__name__)


def _read_csv(file_path):
    try:
        return pd.read_csv(file_path)
    except Exception as e:
        raise RuntimeError(f"Failed to load CSV file '{file_path}': {e}")


def _parse_time(df, file_path, time_format=None):
    """Convert the 'time' column to epoch seconds when a datetime format is given."""
    if time_format:
        try:
            parsed = pd.to_datetime(df['time'], format=time_format)
            df['time'] = (parsed - pd.Timestamp(0)).dt.total_seconds().to_numpy()
        except Exception as e:
            raise RuntimeError(f"Failed to parse time column of '{file_path}' with format '{time_format}': {e}")
    return df


def _standardize(df, file_path, columns):
    """Check the required columns exist and rename them to the standard names."""
    for req_col in columns:
        if req_col not in df.columns:
            raise ValueError(f"Required column '{req_col}' not found in input file: {file_path}")
    return df.rename(columns=columns)[list(columns.values())].copy()


def load_injection(
    file_path: str,
    time_col: str = 'time',
    volume_col: str = 'volume',
    time_format: str = None,
) -> pd.DataFrame:
    """
    Load a cumulative injection history from CSV.

    Args:
        file_path (str): Path to input .csv file.
        time_col (str): Name of time column in file.
        volume_col (str): Name of cumulative volume column in file (m³).
        time_format (str or None): Optional datetime format for time parsing.

    Returns:
        pd.DataFrame: Columns ['time', 'volume'], in file order.
    """
    df = _standardize(_read_csv(file_path), file_path, {time_col: 'time', volume_col: 'volume'})
    return _parse_time(df, file_path, time_format)


def load_catalog(
    file_path: str,
    time_col: str = 'time',
    mag_col: str = 'mag',
    time_format: str = None,
) -> pd.DataFrame:
    """
    Load an earthquake catalog from CSV.

    Events are returned in file order; sorting and magnitude filtering are part of the
    estimation so that the catalog stays paired with its magnitudes.

    Args:
        file_path (str): Path to input .csv catalog.
        time_col (str): Name of time column in file.
        mag_col (str): Name of magnitude column in file.
        time_format (str or None): Optional datetime format for time parsing.

    Returns:
        pd.DataFrame: Columns ['time', 'mag'].
    """
    df = _standardize(_read_csv(file_path), file_path, {time_col: 'time', mag_col: 'mag'})
    return _parse_time(df, file_path, time_format)


def _series_from_mat(raw, key, file_path):
    if key not in raw:
        raise ValueError(f"Variable '{key}' not found in MAT file: {file_path}")
    v = np.atleast_1d(raw[key]).squeeze()
    if v.ndim == 0:
        v = v.reshape(1)
    if v.ndim != 1:
        raise ValueError(f"Variable '{key}' in '{file_path}' has shape {v.shape} (not 1D)")
    return v.astype(float)


def load_mat_series(
    file_path: str,
    inj_time_key: str = None,
    inj_volume_key: str = None,
    eq_time_key: str = None,
    eq_mag_key: str = None,
):
    """
    Read the four series of a MATLAB .mat dataset as flat float arrays.

    Variable names default to the values in config (Top, Vcum, T, M). Paired series
    are not checked against each other; seismogenic_index() reports unequal lengths
    as a degenerate result.

    Returns:
        tuple: (inj_time, inj_volume, eq_time, eq_mag) as 1D np.ndarray.

    Raises:
        RuntimeError: if the file cannot be read.
        ValueError: if a variable is missing or not 1D.
    """
    keys = (
        inj_time_key or config.INJ_TIME_KEY,
        inj_volume_key or config.INJ_VOLUME_KEY,
        eq_time_key or config.EQ_TIME_KEY,
        eq_mag_key or config.EQ_MAG_KEY,
    )

    try:
        raw = scipy.io.loadmat(file_path)
    except Exception as e:
        raise RuntimeError(f"Failed to load MAT file '{file_path}': {e}")

    series = tuple(_series_from_mat(raw, key, file_path) for key in keys)
    log.info(f"Loaded {series[0].size} injection samples and {series[2].size} events from {file_path}")
    return series


def load_mat_dataset(
    file_path: str,
    inj_time_key: str = None,
    inj_volume_key: str = None,
    eq_time_key: str = None,
    eq_mag_key: str = None,
):
    """
    Load injection history and catalog from a single MATLAB .mat file as DataFrames.

    Args:
        file_path (str): Path to input .mat file.
        inj_time_key, inj_volume_key, eq_time_key, eq_mag_key (str or None): Variable names.

    Returns:
        (pd.DataFrame, pd.DataFrame): Injection ['time', 'volume'] and catalog ['time', 'mag'].

    Raises:
        RuntimeError: if the file cannot be read.
        ValueError: if a variable is missing, not 1D, or paired variables differ in length
            (a DataFrame cannot hold unequal columns; use load_mat_series to keep them).
    """
    t_inj, v_inj, t_eq, mags = load_mat_series(file_path, inj_time_key, inj_volume_key,
                                               eq_time_key, eq_mag_key)
    if t_inj.size != v_inj.size or t_eq.size != mags.size:
        raise ValueError(f"Paired variables differ in length in '{file_path}'.")
    return (pd.DataFrame({'time': t_inj, 'volume': v_inj}),
            pd.DataFrame({'time': t_eq, 'mag': mags}))


def load_dataset(file_path: str, catalog_path: str = None, **kwargs):
    """
    Load an injection history and catalog from a .mat file or a pair of CSV files.

    Args:
        file_path (str): .mat dataset, or the injection .csv when catalog_path is given.
        catalog_path (str or None): Catalog .csv (required with a CSV injection file).
        **kwargs: Column/variable names and time_format, passed to the loaders.

    Returns:
        (pd.DataFrame, pd.DataFrame): Injection and catalog frames.
    """
    ext = os.path.splitext(file_path)[1].lower()
    if ext == '.mat':
        keys = ('inj_time_key', 'inj_volume_key', 'eq_time_key', 'eq_mag_key')
        return load_mat_dataset(file_path, **{k: kwargs.get(k) for k in keys})
    if ext == '.csv':
        if catalog_path is None:
            raise ValueError("A catalog CSV file is required together with an injection CSV file.")
        time_format = kwargs.get('time_format')
        injection = load_injection(
            file_path,
            time_col=kwargs.get('inj_time_col') or 'time',
            volume_col=kwargs.get('volume_col') or 'volume',
            time_format=time_format,
        )
        catalog = load_catalog(
            catalog_path,
            time_col=kwargs.get('eq_time_col') or 'time',
            mag_col=kwargs.get('mag_col') or 'mag',
            time_format=time_format,
        )
        log.info(f"Loaded {len(injection)} injection samples and {len(catalog)} events.")
        return injection, catalog
    raise ValueError(f"Unsupported file extension '{ext}'. Only .csv and .mat are supported.")


def load_series(file_path: str, catalog_path: str = None, **kwargs):
    """
    Load the four input series of seismogenic_index() from a .mat file or a CSV pair.

    Args:
        file_path (str): .mat dataset, or the injection .csv when catalog_path is given.
        catalog_path (str or None): Catalog .csv (required with a CSV injection file).
        **kwargs: Column/variable names and time_format, as for load_dataset.

    Returns:
        tuple: (inj_time, inj_volume, eq_time, eq_mag) as 1D np.ndarray.
    """
    if os.path.splitext(file_path)[1].lower() == '.mat':
        keys = ('inj_time_key', 'inj_volume_key', 'eq_time_key', 'eq_mag_key')
        return load_mat_series(file_path, **{k: kwargs.get(k) for k in keys})
    injection, catalog = load_dataset(file_path, catalog_path=catalog_path, **kwargs)
    return (injection['time'].to_numpy(dtype=float), injection['volume'].to_numpy(dtype=float),
            catalog['time'].to_numpy(dtype=float), catalog['mag'].to_numpy(dtype=float))
