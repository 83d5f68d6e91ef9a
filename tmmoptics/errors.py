"""Exceptions raised by tmmoptics.

All errors derive from ``TMMError`` and from the builtin exception that best
describes them, so callers may catch either.
"""

from __future__ import annotations


class TMMError(Exception):
    """Base class for every error raised by tmmoptics."""


class MaterialNotFound(TMMError, KeyError):
    """The requested material is not in the catalog."""

    def __str__(self):
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0]) if self.args else ""


class DataStoreUnavailable(TMMError, OSError):
    """The tabulated-data store, or one of its tables, cannot be read."""


class InvalidParameter(TMMError, ValueError):
    """A parameter is outside its documented domain."""


class StructuralMismatch(TMMError, ValueError):
    """Array lengths or stack structure are inconsistent."""


class UnitMismatch(StructuralMismatch):
    """A wavelength grid is given in a unit the material does not accept."""
