"""Tabulated refractive-index data store.

The store is an HDF5 file with one group per material. Each group holds 1-D
datasets, ``lambda``, ``n`` and ``k`` for plain tables and ``lambda``,
``n20``, ``k20``, ``n450``, ``k450`` for temperature-dependent silicon.

Tables are read at most once per store and kept in memory as read-only
arrays, so a store can be shared between threads.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Sequence
from pathlib import Path

import h5py
import numpy as np

from tmmoptics.errors import DataStoreUnavailable

logger = logging.getLogger(__name__)

ENV_VAR = "TMMOPTICS_RIDB"
DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "RefractiveIndicesDB.h5"


class RefractiveIndexStore:
    """Read-only, load-once view of an HDF5 refractive-index database.

    Args:
        path: Location of the HDF5 file. The file is not opened until the
            first table is requested.

    Examples:
        >>> store = RefractiveIndexStore("RefractiveIndicesDB.h5")
        >>> table = store.read("gold")
        >>> table["lambda"], table["n"], table["k"]
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._tables: dict[str, dict[str, np.ndarray]] = {}
        self._lock = threading.Lock()

    def read(self, key: str, columns: Sequence[str] = ()) -> dict[str, np.ndarray]:
        """Return the named arrays stored under ``key``.

        Args:
            key: Table name.
            columns: Datasets the table must hold, all of the same length.

        Raises:
            DataStoreUnavailable: If the file or the key cannot be read, or
                the table lacks one of ``columns``.
        """
        table = self._tables.get(key)
        if table is None:
            with self._lock:
                # another thread may have loaded it while we waited
                table = self._tables.get(key)
                if table is None:
                    table = self._load(key)
                    self._tables[key] = table
        if columns:
            self._check_columns(key, table, columns)
        return table

    def _check_columns(self, key, table, columns):
        missing = [name for name in columns if name not in table]
        if missing:
            raise DataStoreUnavailable(
                f"Table {key!r} lacks {', '.join(missing)} in data store {self.path}"
            )
        sizes = {table[name].size for name in columns}
        if len(sizes) != 1:
            raise DataStoreUnavailable(
                f"Table {key!r} has columns of different lengths in data store "
                f"{self.path}"
            )

    def keys(self) -> list[str]:
        """Names of all tables in the file."""
        with self._open() as f:
            return sorted(f.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._tables or key in self.keys()

    def __repr__(self):
        return f"RefractiveIndexStore({str(self.path)!r}, {len(self._tables)} loaded)"

    def _open(self) -> h5py.File:
        if not self.path.is_file():
            raise DataStoreUnavailable(f"Data store not found: {self.path}")
        try:
            return h5py.File(self.path, "r")
        except OSError as exc:
            raise DataStoreUnavailable(
                f"Cannot open data store {self.path}: {exc}"
            ) from exc

    def _load(self, key: str) -> dict[str, np.ndarray]:
        with self._open() as f:
            if key not in f:
                raise DataStoreUnavailable(
                    f"Table {key!r} not found in data store {self.path}"
                )
            node = f[key]
            if not isinstance(node, h5py.Group):
                raise DataStoreUnavailable(
                    f"Entry {key!r} in data store {self.path} is not a table"
                )
            table = {}
            for name, dataset in node.items():
                if not isinstance(dataset, h5py.Dataset):
                    continue
                try:
                    array = np.asarray(dataset[()], dtype=float).ravel()
                except (TypeError, ValueError) as exc:
                    raise DataStoreUnavailable(
                        f"Dataset {key}/{name} in data store {self.path} "
                        f"is not numeric"
                    ) from exc
                array.setflags(write=False)
                table[name] = array
        logger.debug(
            "Loaded table %r from %s (%s)", key, self.path, ", ".join(sorted(table))
        )
        return table


_default_store: RefractiveIndexStore | None = None
_default_lock = threading.Lock()


def open_store(path: str | os.PathLike) -> RefractiveIndexStore:
    """Return a new store reading from ``path``."""
    return RefractiveIndexStore(path)


def default_store() -> RefractiveIndexStore:
    """Return the process-wide store.

    Its path is taken from the ``TMMOPTICS_RIDB`` environment variable, or
    defaults to ``data/RefractiveIndicesDB.h5`` inside the package. The store
    is created on first call and reused afterwards.
    """
    global _default_store
    with _default_lock:
        if _default_store is None:
            path = os.environ.get(ENV_VAR) or DEFAULT_PATH
            logger.debug("Using refractive index store %s", path)
            _default_store = RefractiveIndexStore(path)
        return _default_store


def reset_default_store() -> None:
    """Forget the process-wide store, so the next call re-reads the path."""
    global _default_store
    with _default_lock:
        _default_store = None
