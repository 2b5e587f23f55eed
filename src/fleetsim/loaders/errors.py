"""Exceptions raised while building the catalog.

A catalog that fails any of these checks cannot be trusted for simulation,
so every one of them is fatal.
"""


class CatalogError(Exception):
    """Base exception for catalog loading."""


class CatalogValidationError(CatalogError):
    """Raised when an entity definition has missing or invalid fields."""


class CatalogReferenceError(CatalogError):
    """Raised when an entity references a weapon or unit that is not defined."""


class UnknownTargetTypeError(CatalogValidationError):
    """Raised for a target-type tag outside the known enumeration."""
