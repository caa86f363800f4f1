"""
Error types raised by the fuel tracker.
"""


class FuelTrackerError(Exception):
    """Base class for fuel tracker errors."""


class InvalidEntryError(FuelTrackerError, ValueError):
    """Raised when submitted fields do not parse to valid values."""


class SubmissionCancelled(FuelTrackerError):
    """Raised when the user declines a confirmation gate."""


class EntryNotFoundError(FuelTrackerError, LookupError):
    """Raised when no entry has the requested id."""
    def __init__(self, entry_id: int):
        super().__init__(f"No entry with id {entry_id}")
        self.entry_id = entry_id
