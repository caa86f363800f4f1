"""
Validation of submitted fill-up fields.

Runs before any mutation so a rejected submission never changes state.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union

from fuel_tracker.storage.models import FuelEntry, coerce_float, coerce_int

from .errors import InvalidEntryError

INVALID_FIELDS_MESSAGE = "Please fill in valid values for all fields."

# Largest accepted liters, amount, rate or meter reading
MAX_FIELD_VALUE = 1_000_000_000


@dataclass(frozen=True)
class Submission:
    """Validated user-supplied fields of a fill-up."""
    date: date
    liters: float
    amount: float
    rate: float
    meter: int
    
    def to_entry(self, entry_id: int) -> FuelEntry:
        """Build an entry with no derived values under ``entry_id``."""
        return FuelEntry(
            id=entry_id,
            date=self.date,
            liters=self.liters,
            amount=self.amount,
            rate=self.rate,
            meter=self.meter,
        )


def validate_submission(
    date_value: Union[str, date, None],
    liters: Any,
    amount: Any,
    rate: Any,
    meter: Any
) -> Submission:
    """Parse and validate the five input fields.
    
    Args:
        date_value: ISO date string (``YYYY-MM-DD``) or date
        liters: Volume added
        amount: Money paid
        rate: Price per liter
        meter: Odometer reading; decimals are truncated
        
    Returns:
        Validated Submission
        
    Raises:
        InvalidEntryError: If the date is empty or any field is invalid
    """
    parsed_date = _parse_date(date_value)
    
    try:
        parsed_liters = coerce_float(liters)
        parsed_amount = coerce_float(amount)
        parsed_rate = coerce_float(rate)
        parsed_meter = coerce_int(meter)
    except (TypeError, ValueError):
        raise InvalidEntryError(INVALID_FIELDS_MESSAGE)
    
    for name, value in (
        ("liters", parsed_liters),
        ("amount", parsed_amount),
        ("rate", parsed_rate),
        ("meter", parsed_meter),
    ):
        if value < 0:
            raise InvalidEntryError(f"{INVALID_FIELDS_MESSAGE} '{name}' cannot be negative.")
        if value > MAX_FIELD_VALUE:
            raise InvalidEntryError(f"{INVALID_FIELDS_MESSAGE} '{name}' is too large.")
    
    return Submission(
        date=parsed_date,
        liters=parsed_liters,
        amount=parsed_amount,
        rate=parsed_rate,
        meter=parsed_meter
    )


def exceeds_tank_capacity(liters: float, tank_capacity: float) -> bool:
    """True when a fill adds more fuel than the tank holds."""
    return liters > tank_capacity


def tank_capacity_warning(liters: float, tank_capacity: float) -> str:
    """Confirmation prompt shown when a fill exceeds the tank capacity."""
    return (
        f"You entered {liters:g} L which is more than tank capacity "
        f"({tank_capacity:g} L). Continue?"
    )


def _parse_date(value: Union[str, date, None]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        raise InvalidEntryError(INVALID_FIELDS_MESSAGE)
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidEntryError(f"{INVALID_FIELDS_MESSAGE} Date must be YYYY-MM-DD.")
