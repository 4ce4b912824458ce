"""
Exceptions raised while materializing records.

Schema violations abort the whole partition, resolution failures abort the
row being processed. Soft absences (no ordering value, no location) are
never exceptions.
"""

from typing import Sequence


class MaterializationError(Exception):
    """Base class for record materialization failures."""
    pass


class MissingMetadataFieldsError(MaterializationError):
    """Raised when a prepped row is missing reserved metadata fields."""

    def __init__(self, missing_fields: Sequence[str], row_format: str):
        self.missing_fields = list(missing_fields)
        self.row_format = row_format
        path = row_format.replace("_", "-")
        super().__init__(
            f"Metadata fields missing from {path} prepared record: "
            f"{', '.join(self.missing_fields)}"
        )


class KeyResolutionError(MaterializationError):
    """Raised when a record key or partition path cannot be resolved for a row."""
    pass


class KeyGeneratorConfigError(MaterializationError):
    """Raised when the key generator cannot be resolved or constructed."""
    pass
