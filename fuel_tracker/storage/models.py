"""
Data models for storage layer.

Defines the fuel entry record and its serialized shape.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

# Field names of a serialized record, in persisted order
RECORD_FIELDS = ("date", "liters", "amount", "rate", "meter", "id", "mileage", "cost")


@dataclass(frozen=True)
class FuelEntry:
    """One refueling event.
    
    ``mileage`` and ``cost`` are derived by the recompute engine and are
    never supplied by the user. ``id`` is the only stable reference to an
    entry; positions change on every re-sort.
    """
    id: int
    date: date
    liters: float
    amount: float
    rate: float
    meter: int
    mileage: Optional[float] = None
    cost: Optional[float] = None
    
    def to_record(self) -> Dict[str, Any]:
        """Serialize the entry into a JSON-compatible record."""
        return {
            "date": self.date.isoformat(),
            "liters": self.liters,
            "amount": self.amount,
            "rate": self.rate,
            "meter": self.meter,
            "id": self.id,
            "mileage": self.mileage,
            "cost": self.cost,
        }
    
    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "FuelEntry":
        """Build an entry from a persisted record.
        
        Numbers stored as strings are coerced to their numeric types.
        
        Args:
            record: Mapping with the persisted field names
            
        Returns:
            The coerced FuelEntry
            
        Raises:
            ValueError: If a required field is missing or cannot be coerced
            TypeError: If a numeric field holds a non-numeric type
        """
        if not isinstance(record, dict):
            raise ValueError(f"Record must be an object, got {type(record).__name__}")
        
        missing = [name for name in ("id", "date", "liters", "amount", "rate", "meter")
                   if record.get(name) is None]
        if missing:
            raise ValueError(f"Record is missing fields: {missing}")
        
        return cls(
            id=coerce_int(record["id"]),
            date=date.fromisoformat(str(record["date"]).strip()[:10]),
            liters=coerce_float(record["liters"]),
            amount=coerce_float(record["amount"]),
            rate=coerce_float(record["rate"]),
            meter=coerce_int(record["meter"]),
            mileage=_optional_float(record.get("mileage")),
            cost=_optional_float(record.get("cost")),
        )


def coerce_float(value: Any) -> float:
    """Convert a number or numeric string to a finite float."""
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def coerce_int(value: Any) -> int:
    """Convert a number or numeric string to an int, truncating decimals."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(coerce_float(value))


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return coerce_float(value)
    except (TypeError, ValueError):
        return None
