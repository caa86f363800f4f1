"""
Monthly summary of the fuel log.

A derived view over the canonical collection; never persisted.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from fuel_tracker.storage.models import FuelEntry

from .recompute import round2, round_optional


@dataclass(frozen=True)
class MonthlySummary:
    """Totals and averages for one calendar month."""
    year: int
    month: int
    entry_count: int
    total_cost: float
    total_liters: float
    avg_mileage: Optional[float] = None
    avg_cost: Optional[float] = None
    
    @property
    def label(self) -> str:
        """Human readable month, e.g. ``October 2026``."""
        return date(self.year, self.month, 1).strftime("%B %Y")


def entries_in_month(entries: Iterable[FuelEntry], reference: date) -> List[FuelEntry]:
    """Select entries dated in the same month and year as ``reference``."""
    return [
        entry for entry in entries
        if entry.date.year == reference.year and entry.date.month == reference.month
    ]


def monthly_summary(entries: Iterable[FuelEntry], reference: date) -> MonthlySummary:
    """Summarize the month containing ``reference``.
    
    Averages only consider entries with a derived value; when none has one
    the average is None. Totals over an empty month are 0.
    
    Args:
        entries: Canonical (recomputed) collection
        reference: Any date within the month to summarize
        
    Returns:
        MonthlySummary with every number rounded to 2 decimals
    """
    monthly = entries_in_month(entries, reference)
    
    mileages = [entry.mileage for entry in monthly if entry.mileage is not None]
    costs = [entry.cost for entry in monthly if entry.cost is not None]
    
    return MonthlySummary(
        year=reference.year,
        month=reference.month,
        entry_count=len(monthly),
        total_cost=round2(sum(entry.amount for entry in monthly)),
        total_liters=round2(sum(entry.liters for entry in monthly)),
        avg_mileage=round_optional(_mean(mileages)),
        avg_cost=round_optional(_mean(costs)),
    )


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)
