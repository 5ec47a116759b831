"""
Engine error kinds.

These are value-level failures: the caller shows an "awaiting pricing"
placeholder and asks for corrected input. Nothing here is worth retrying.
"""


class TabletopError(Exception):
    """Base class for all engine failures."""

    kind = "tabletop_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": self.kind,
            "message": self.message,
            "status": "awaiting_pricing",
        }


class InvalidOutlineError(TabletopError):
    """Custom outline is malformed or has not been imported yet."""

    kind = "invalid_outline"


class InvalidDimensionError(TabletopError):
    """A required numeric parameter is missing or non-positive."""

    kind = "invalid_dimension"


class NoCatalogDataError(TabletopError):
    """Material catalog entry has no thickness records."""

    kind = "no_catalog_data"


class NothingToRepriceError(TabletopError):
    """Quantity change requested with neither a costing basis nor a stored price."""

    kind = "nothing_to_reprice"
