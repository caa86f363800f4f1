"""
Recompute engine for derived fuel statistics.

Orders entries by odometer and derives mileage and cost per distance
between consecutive fills. Liters added on a fill are taken as the fuel
consumed since the previous fill, so derivation always follows odometer
order rather than insertion order.
"""

import math
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, List, Optional

from fuel_tracker.storage.models import FuelEntry

_ROUNDING_PRECISION = 320


def recompute(entries: Iterable[FuelEntry]) -> List[FuelEntry]:
    """Return the canonical collection with derived fields recomputed.
    
    Entries are sorted ascending by ``meter``; entries sharing a meter value
    keep their input order. The first entry never has derived values, and
    any entry whose distance from its predecessor is not positive, or whose
    liters are not positive, has both derived values cleared.
    
    Never mutates its input, and never raises for entries whose numeric
    fields hold numbers or numeric strings.
    
    Args:
        entries: Entries in any order
        
    Returns:
        New list of entries in odometer order
    """
    normalized = [_normalize(entry) for entry in entries]
    # sorted() is stable, equal meters keep insertion order
    ordered = sorted(normalized, key=lambda e: e.meter)
    
    result = ordered[:1]
    for previous, current in zip(ordered, ordered[1:]):
        result.append(derive(previous, current))
    return result


def derive(previous: FuelEntry, current: FuelEntry) -> FuelEntry:
    """Fill ``current``'s mileage and cost relative to ``previous``.
    
    A ratio too large to represent is left absent.
    """
    distance = current.meter - previous.meter
    if distance > 0 and current.liters > 0:
        return replace(
            current,
            mileage=_ratio(distance, current.liters),
            cost=_ratio(current.amount, distance),
        )
    return replace(current, mileage=None, cost=None)


def round2(value: float) -> float:
    """Round half-up to 2 decimal places.
    
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        # a double has at most 309 integer digits
        ctx.prec = _ROUNDING_PRECISION
        rounded = Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(rounded)


def round_optional(value: Optional[float]) -> Optional[float]:
    """Round a value that may be absent."""
    return None if value is None else round2(value)


def _normalize(entry: FuelEntry) -> FuelEntry:
    return replace(
        entry,
        liters=float(entry.liters),
        amount=float(entry.amount),
        rate=float(entry.rate),
        meter=entry.meter if isinstance(entry.meter, int) else int(float(entry.meter)),
        mileage=None,
        cost=None,
    )


def _ratio(numerator: float, denominator: float) -> Optional[float]:
    try:
        value = round2(numerator / denominator)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None
