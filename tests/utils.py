import h5py
import numpy as np


def assert_allclose(actual, desired, rtol=1e-7, atol=0.0, **kwargs):
    """``numpy.testing.assert_allclose`` accepting scalars, lists and arrays."""
    np.testing.assert_allclose(
        np.asarray(actual), np.asarray(desired), rtol=rtol, atol=atol, **kwargs
    )


# Small tables in the native unit of each material, wavelengths deliberately
# not sorted for aluminum.
TABLES = {
    "aluminum": {
        "lambda": np.array([600e-9, 200e-9, 400e-9, 1000e-9, 800e-9]),
        "n": np.array([1.20, 0.11, 0.49, 1.99, 2.80]),
        "k": np.array([7.26, 2.39, 4.86, 9.58, 8.45]),
    },
    "gold": {
        "lambda": np.array([300.0, 500.0, 700.0, 900.0]),
        "n": np.array([1.53, 0.97, 0.13, 0.17]),
        "k": np.array([1.89, 1.87, 4.10, 5.66]),
    },
    "h2o": {
        "lambda": np.array([0.2, 0.5, 1.0, 2.0]),
        "n": np.array([1.396, 1.335, 1.327, 1.306]),
        "k": np.array([1.1e-8, 1.0e-9, 2.9e-6, 1.1e-3]),
    },
    "fusedsilicauv": {
        "lambda": np.array([170.0, 500.0, 1000.0, 3240.0]),
        "n": np.array([1.59, 1.462, 1.450, 1.412]),
        "k": np.array([0.0, 0.0, 0.0, 0.0]),
    },
    "silicontemperature": {
        "lambda": np.array([264.0, 400.0, 600.0, 826.5]),
        "n20": np.array([1.60, 5.00, 3.94, 3.67]),
        "k20": np.array([3.95, 0.40, 0.02, 0.005]),
        "n450": np.array([1.80, 5.43, 4.10, 3.80]),
        "k450": np.array([4.10, 0.83, 0.05, 0.010]),
    },
}


def write_store(path, tables=TABLES):
    with h5py.File(path, "w") as f:
        for key, arrays in tables.items():
            group = f.create_group(key)
            for name, values in arrays.items():
                group.create_dataset(name, data=values)
    return path


