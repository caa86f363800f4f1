"""
Unit tests for submission validation.
"""

from datetime import date, datetime

import pytest

from fuel_tracker.core.errors import InvalidEntryError
from fuel_tracker.core.validation import (
    exceeds_tank_capacity,
    tank_capacity_warning,
    validate_submission,
)


class TestValidateSubmission:
    """Test parsing of the five input fields."""
    
    def test_valid_strings(self):
        """Form-style string input parses to typed values."""
        submission = validate_submission("2026-10-19", "4.5", "450", "100", "1200")
        
        assert submission.date == date(2026, 10, 19)
        assert submission.liters == 4.5
        assert submission.amount == 450.0
        assert submission.rate == 100.0
        assert submission.meter == 1200
    
    def test_valid_numbers(self):
        """Already-typed values pass through."""
        submission = validate_submission(date(2026, 10, 19), 4, 400, 100, 1200)
        
        assert submission.liters == 4.0
        assert isinstance(submission.meter, int)
    
    def test_datetime_reduced_to_date(self):
        """Time components are dropped."""
        submission = validate_submission(datetime(2026, 10, 19, 8, 30), 4, 400, 100, 1200)
        
        assert submission.date == date(2026, 10, 19)
    
    def test_meter_decimals_truncated(self):
        """Odometer readings are integers."""
        submission = validate_submission("2026-10-19", 4, 400, 100, "1200.9")
        
        assert submission.meter == 1200
    
    @pytest.mark.parametrize("date_value", ["", "   ", None])
    def test_missing_date_rejected(self, date_value):
        """Date must be non-empty."""
        with pytest.raises(InvalidEntryError, match="valid values for all fields"):
            validate_submission(date_value, 4, 400, 100, 1200)
    
    def test_malformed_date_rejected(self):
        """Date must be ISO formatted."""
        with pytest.raises(InvalidEntryError, match="YYYY-MM-DD"):
            validate_submission("19/10/2026", 4, 400, 100, 1200)
    
    @pytest.mark.parametrize("field_index", range(4))
    def test_non_numeric_rejected(self, field_index):
        """Each numeric field must parse."""
        values = ["4", "400", "100", "1200"]
        values[field_index] = "abc"
        
        with pytest.raises(InvalidEntryError):
            validate_submission("2026-10-19", *values)
    
    @pytest.mark.parametrize("bad", ["", None, "nan", "inf"])
    def test_empty_or_non_finite_rejected(self, bad):
        """Blank and non-finite numbers are invalid."""
        with pytest.raises(InvalidEntryError):
            validate_submission("2026-10-19", bad, 400, 100, 1200)
    
    def test_negative_rejected(self):
        """Negative quantities are invalid."""
        with pytest.raises(InvalidEntryError, match="'meter' cannot be negative"):
            validate_submission("2026-10-19", 4, 400, 100, -5)
    
    def test_too_large_rejected(self):
        """Absurd magnitudes are invalid."""
        with pytest.raises(InvalidEntryError, match="'amount' is too large"):
            validate_submission("2026-10-19", 4, "1e27", 100, 1200)
    
    def test_tiny_liters_accepted(self):
        """Very small positive volumes still parse."""
        submission = validate_submission("2026-10-19", "1e-320", 1, 1, 100)
        
        assert submission.liters > 0
    
    def test_zero_liters_accepted(self):
        """Zero is a valid (if unusual) reading."""
        submission = validate_submission("2026-10-19", 0, 0, 100, 1200)
        
        assert submission.liters == 0.0
    
    def test_to_entry(self):
        """A submission becomes an entry without derived values."""
        entry = validate_submission("2026-10-19", 4, 400, 100, 1200).to_entry(77)
        
        assert entry.id == 77
        assert entry.meter == 1200
        assert entry.mileage is None
        assert entry.cost is None


class TestTankCapacity:
    """Test the tank capacity warning."""
    
    def test_exceeds(self):
        """Only strictly larger fills exceed the tank."""
        assert exceeds_tank_capacity(5.1, 5.0)
        assert not exceeds_tank_capacity(5.0, 5.0)
    
    def test_warning_message(self):
        """The prompt names both amounts."""
        message = tank_capacity_warning(7.5, 5.0)
        
        assert message == "You entered 7.5 L which is more than tank capacity (5 L). Continue?"
