"""
Strain file readers and writers.

Supported formats, selected by suffix:

- ``.h5`` / ``.hdf5``: dataset ``strain`` with a ``sample_rate`` attribute
- ``.npy``: raw strain values; the sample rate must be supplied
- ``.txt`` / ``.dat`` / ``.csv``: two columns (time, value); the sample
  rate is inferred from the time column
"""

import logging
from pathlib import Path
from typing import Optional, Union

import h5py
import numpy as np

from .gw_signal_params import StrainSeries

logger = logging.getLogger(__name__)

HDF5_SUFFIXES = (".h5", ".hdf5")
TEXT_SUFFIXES = (".txt", ".dat", ".csv")
STRAIN_DATASET = "strain"


def load_strain(path: Union[str, Path],
                sample_rate: Optional[float] = None,
                dataset: str = STRAIN_DATASET,
                tolerance: float = 1e-6) -> StrainSeries:
    """
    Load a strain series from disk.

    Args:
        path: Input file
        sample_rate: Sampling rate (Hz); overrides the rate stored in HDF5
            files and is required for ``.npy`` input
        dataset: HDF5 dataset name
        tolerance: Relative spacing tolerance for text input

    Returns:
        StrainSeries
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Strain file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in HDF5_SUFFIXES:
        with h5py.File(str(path), "r") as h5:
            if dataset not in h5:
                raise KeyError(f"Dataset '{dataset}' not found in {path}")
            values = np.asarray(h5[dataset][()], dtype=np.float64)
            stored_rate = h5[dataset].attrs.get("sample_rate", h5.attrs.get("sample_rate"))
            start_time = float(h5[dataset].attrs.get("start_time", 0.0))
        if sample_rate is None:
            if stored_rate is None:
                raise ValueError(f"No sample_rate attribute in {path}; pass sample_rate explicitly")
            sample_rate = float(stored_rate)
        series = StrainSeries.from_values(values, sample_rate, start_time=start_time)

    elif suffix == ".npy":
        if sample_rate is None:
            raise ValueError("sample_rate is required for .npy strain files")
        series = StrainSeries.from_values(np.load(path), sample_rate)

    elif suffix in TEXT_SUFFIXES:
        delimiter = "," if suffix == ".csv" else None
        table = np.loadtxt(path, delimiter=delimiter, ndmin=2)
        if table.shape[1] == 1:
            if sample_rate is None:
                raise ValueError(f"Single-column file {path} needs an explicit sample_rate")
            series = StrainSeries.from_values(table[:, 0], sample_rate)
        else:
            series = StrainSeries.from_arrays(table[:, 0], table[:, 1], tolerance=tolerance)

    else:
        raise ValueError(f"Unsupported strain file format: {suffix}")

    logger.info(f"Loaded {len(series)} samples @ {series.sample_rate:g} Hz from {path}")
    return series


def save_strain(series: StrainSeries, path: Union[str, Path],
                dataset: str = STRAIN_DATASET) -> Path:
    """Write a strain series in the format implied by the file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    suffix = path.suffix.lower()
    if suffix in HDF5_SUFFIXES:
        with h5py.File(str(path), "w") as h5:
            dset = h5.create_dataset(dataset, data=np.asarray(series.values))
            dset.attrs["sample_rate"] = series.sample_rate
            dset.attrs["start_time"] = float(series.times[0]) if len(series) else 0.0
    elif suffix == ".npy":
        np.save(path, np.asarray(series.values))
    elif suffix in TEXT_SUFFIXES:
        delimiter = "," if suffix == ".csv" else " "
        np.savetxt(path, np.column_stack([series.times, series.values]), delimiter=delimiter)
    else:
        raise ValueError(f"Unsupported strain file format: {suffix}")

    logger.info(f"Saved {len(series)} samples to {path}")
    return path
