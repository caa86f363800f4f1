"""
Unit tests for the monthly summary.
"""

from datetime import date

from fuel_tracker.core.recompute import recompute
from fuel_tracker.core.summary import entries_in_month, monthly_summary
from fuel_tracker.storage.models import FuelEntry


def make_entry(entry_id, on, meter, liters=5.0, amount=500.0):
    """Create a test fuel entry."""
    return FuelEntry(
        id=entry_id,
        date=on,
        liters=liters,
        amount=amount,
        rate=100.0,
        meter=meter
    )


class TestMonthlySummary:
    """Test totals and averages for a calendar month."""
    
    def test_empty_month(self):
        """No entries in the month gives zero totals and absent averages."""
        entries = recompute([make_entry(1, date(2026, 9, 30), 100)])
        
        result = monthly_summary(entries, date(2026, 10, 19))
        
        assert result.entry_count == 0
        assert result.total_cost == 0
        assert result.total_liters == 0
        assert result.avg_mileage is None
        assert result.avg_cost is None
    
    def test_empty_collection(self):
        """An empty log summarizes like an empty month."""
        result = monthly_summary([], date(2026, 10, 19))
        
        assert result.total_cost == 0
        assert result.total_liters == 0
        assert result.avg_mileage is None
        assert result.avg_cost is None
    
    def test_totals_and_averages(self):
        """Totals cover all month entries, averages only derived ones."""
        entries = recompute([
            make_entry(1, date(2026, 9, 28), 100),
            make_entry(2, date(2026, 10, 3), 300, liters=10.0, amount=1000.0),
            make_entry(3, date(2026, 10, 17), 400, liters=4.0, amount=300.0),
        ])
        
        result = monthly_summary(entries, date(2026, 10, 19))
        
        assert result.entry_count == 2
        assert result.total_cost == 1300.0
        assert result.total_liters == 14.0
        # mileages 20.0 and 25.0, costs 5.0 and 3.0
        assert result.avg_mileage == 22.5
        assert result.avg_cost == 4.0
    
    def test_entries_without_derived_values_excluded_from_averages(self):
        """The first fill of the log adds to totals but not to averages."""
        entries = recompute([
            make_entry(1, date(2026, 10, 1), 100, liters=2.5, amount=250.0),
            make_entry(2, date(2026, 10, 9), 250, liters=3.0, amount=300.0),
        ])
        
        result = monthly_summary(entries, date(2026, 10, 1))
        
        assert result.total_cost == 550.0
        assert result.total_liters == 5.5
        assert result.avg_mileage == 50.0
        assert result.avg_cost == 2.0
    
    def test_same_month_other_year_excluded(self):
        """Bucketing uses both month and year."""
        entries = [
            make_entry(1, date(2025, 10, 5), 100),
            make_entry(2, date(2026, 10, 5), 200),
        ]
        
        assert [e.id for e in entries_in_month(entries, date(2026, 10, 1))] == [2]
    
    def test_values_rounded(self):
        """Averages are rounded to two decimals."""
        entries = recompute([
            make_entry(1, date(2026, 10, 1), 0),
            make_entry(2, date(2026, 10, 2), 100, liters=3.0, amount=100.0),
            make_entry(3, date(2026, 10, 3), 200, liters=3.0, amount=100.0),
            make_entry(4, date(2026, 10, 4), 300, liters=2.0, amount=100.0),
        ])
        
        result = monthly_summary(entries, date(2026, 10, 1))
        
        # mileages 33.33, 33.33, 50.0
        assert result.avg_mileage == 38.89
        assert result.total_liters == 13.0
    
    def test_label(self):
        """The label names the month and year."""
        result = monthly_summary([], date(2026, 10, 19))
        
        assert result.label == "October 2026"
    
    def test_extreme_values_do_not_raise(self):
        """Huge totals and absent mileages still summarize."""
        entries = recompute([
            make_entry(1, date(2026, 10, 1), 0, amount=1e27),
            make_entry(2, date(2026, 10, 2), 100, liters=1e-320, amount=1e27),
            make_entry(3, date(2026, 10, 3), 200, liters=2.0, amount=1.7e308),
            make_entry(4, date(2026, 10, 4), 300, liters=2.0, amount=1.7e308),
        ])
        
        result = monthly_summary(entries, date(2026, 10, 1))
        
        assert result.entry_count == 4
        assert result.total_cost == float("inf")
        assert result.total_liters == 9.0
        assert result.avg_mileage == 50.0
        assert result.avg_cost is not None
