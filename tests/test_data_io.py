import numpy as np
import pandas as pd
import pytest
import scipy.io

import config
from data_io import (load_catalog, load_dataset, load_injection, load_mat_dataset,
                     load_mat_series, load_series)


@pytest.fixture
def mat_file(tmp_path, injection, catalog):
    path = tmp_path / "SI_data.mat"
    scipy.io.savemat(str(path), {
        'Top': injection[0], 'Vcum': injection[1], 'T': catalog[0], 'M': catalog[1],
    })
    return str(path)


@pytest.fixture
def csv_files(tmp_path, injection, catalog):
    inj = tmp_path / "injection.csv"
    cat = tmp_path / "catalog.csv"
    pd.DataFrame({'t': injection[0], 'vcum': injection[1]}).to_csv(inj, index=False)
    pd.DataFrame({'t': catalog[0], 'ml': catalog[1], 'depth': [1.0, 2.0, 3.0]}).to_csv(cat, index=False)
    return str(inj), str(cat)


class TestMatDataset:

    def test_default_keys(self, mat_file, injection, catalog):
        inj, cat = load_mat_dataset(mat_file)
        assert list(inj.columns) == ['time', 'volume']
        assert list(cat.columns) == ['time', 'mag']
        np.testing.assert_array_equal(inj['volume'], injection[1])
        np.testing.assert_array_equal(cat['mag'], catalog[1])

    def test_custom_keys(self, tmp_path, injection, catalog):
        path = tmp_path / "custom.mat"
        scipy.io.savemat(str(path), {'tv': injection[0], 'vc': injection[1], 'tm': catalog[0], 'm': catalog[1]})
        inj, cat = load_dataset(str(path), inj_time_key='tv', inj_volume_key='vc',
                                eq_time_key='tm', eq_mag_key='m')
        assert len(inj) == 4 and len(cat) == 3

    def test_config_keys(self, tmp_path, injection, catalog, monkeypatch):
        monkeypatch.setattr(config, 'EQ_MAG_KEY', 'Mw')
        path = tmp_path / "mw.mat"
        scipy.io.savemat(str(path), {'Top': injection[0], 'Vcum': injection[1], 'T': catalog[0], 'Mw': catalog[1]})
        _, cat = load_mat_dataset(str(path))
        np.testing.assert_array_equal(cat['mag'], catalog[1])

    def test_column_vectors(self, tmp_path, injection, catalog):
        path = tmp_path / "columns.mat"
        scipy.io.savemat(str(path), {
            'Top': injection[0][:, None], 'Vcum': injection[1][:, None],
            'T': catalog[0][:, None], 'M': catalog[1][:, None],
        })
        inj, cat = load_mat_dataset(str(path))
        assert inj.shape == (4, 2) and cat.shape == (3, 2)

    def test_missing_variable(self, tmp_path, injection):
        path = tmp_path / "partial.mat"
        scipy.io.savemat(str(path), {'Top': injection[0], 'Vcum': injection[1]})
        with pytest.raises(ValueError, match="'T'"):
            load_mat_dataset(str(path))

    def test_length_mismatch(self, tmp_path, injection, catalog):
        path = tmp_path / "mismatch.mat"
        scipy.io.savemat(str(path), {'Top': injection[0], 'Vcum': injection[1][:3],
                                'T': catalog[0], 'M': catalog[1]})
        with pytest.raises(ValueError, match="differ in length"):
            load_mat_dataset(str(path))

    def test_series_keep_unequal_lengths(self, tmp_path, injection, catalog):
        """Unequal paired series are passed through for the estimator to report."""
        path = tmp_path / "uneven.mat"
        scipy.io.savemat(str(path), {'Top': injection[0], 'Vcum': injection[1][:3],
                                     'T': catalog[0], 'M': catalog[1]})
        t_inj, v_inj, t_eq, mags = load_mat_series(str(path))
        assert (t_inj.size, v_inj.size, t_eq.size, mags.size) == (4, 3, 3, 3)

    def test_load_series_matches_frames(self, mat_file, csv_files, injection, catalog):
        from_mat = load_series(mat_file)
        from_csv = load_series(csv_files[0], catalog_path=csv_files[1], inj_time_col='t',
                               volume_col='vcum', eq_time_col='t', mag_col='ml')
        for expected, a, b in zip((*injection, *catalog), from_mat, from_csv):
            np.testing.assert_array_equal(a, expected)
            np.testing.assert_array_equal(b, expected)

    def test_unreadable(self, tmp_path):
        path = tmp_path / "broken.mat"
        path.write_text("not a mat file")
        with pytest.raises(RuntimeError):
            load_mat_dataset(str(path))


class TestCsv:

    def test_pair(self, csv_files, injection, catalog):
        inj, cat = load_dataset(csv_files[0], catalog_path=csv_files[1], inj_time_col='t',
                                volume_col='vcum', eq_time_col='t', mag_col='ml')
        np.testing.assert_array_equal(inj['volume'], injection[1])
        assert list(cat.columns) == ['time', 'mag']
        np.testing.assert_array_equal(cat['time'], catalog[0])

    def test_catalog_required(self, csv_files):
        with pytest.raises(ValueError, match="catalog"):
            load_dataset(csv_files[0])

    def test_missing_column(self, csv_files):
        with pytest.raises(ValueError, match="'mag'"):
            load_catalog(csv_files[1], time_col='t')

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuntimeError):
            load_injection(str(tmp_path / "nope.csv"))

    def test_time_format(self, tmp_path):
        path = tmp_path / "dated.csv"
        pd.DataFrame({
            'time': ['2020-01-01 00:00:00', '2020-01-01 00:01:00'],
            'mag': [1.0, 2.0],
        }).to_csv(path, index=False)
        cat = load_catalog(str(path), time_format='%Y-%m-%d %H:%M:%S')
        assert cat['time'].iloc[1] - cat['time'].iloc[0] == pytest.approx(60.0)

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            load_dataset(str(tmp_path / "data.xlsx"))
