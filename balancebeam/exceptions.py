"""Exception types raised by BalanceBeam operations."""

from __future__ import annotations

from typing import Dict


class BalanceBeamError(ValueError):
    """Base class for recoverable budget errors."""


class ItemValidationError(BalanceBeamError):
    """One or more fields of a manually entered item are invalid.

    ``errors`` maps a field name (``category`` or ``amount``) to an error
    code (``required`` or ``invalid``). Every invalid field is reported.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        details = ", ".join(f"{field}: {code}" for field, code in sorted(self.errors.items()))
        super().__init__(f"Invalid budget item ({details})")


class CSVParseError(BalanceBeamError):
    """A CSV import failed on a specific line; nothing was imported."""

    def __init__(self, line: int, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Line {line}: {reason}")


class CSVFileTypeError(BalanceBeamError):
    """An uploaded file is not a CSV file."""


class EmptySnapshotError(BalanceBeamError):
    """A save, export or share was attempted on a budget with no items."""


class SharePayloadError(BalanceBeamError):
    """A share token could not be decoded into a budget."""
