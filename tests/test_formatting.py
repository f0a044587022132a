"""
Tests for display formatting.
"""

import math
from decimal import Decimal
from uuid import uuid4

from cazen.dashboard import aggregator
from cazen.formatting import amount_from_input, format_currency, format_percentage
from cazen.models.planning import Expense, ExpenseDraft


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_brazilian_grouping(self):
        """Test thousands and decimal separators."""
        assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"
        assert format_currency(Decimal("1234567.89")) == "R$ 1.234.567,89"

    def test_small_amounts(self):
        assert format_currency(0) == "R$ 0,00"
        assert format_currency(Decimal("999.999")) == "R$ 1.000,00"

    def test_negative(self):
        """Test over-budget amounts keep their sign."""
        assert format_currency(Decimal("-200")) == "-R$ 200,00"

    def test_other_currencies(self):
        """Test known and unknown currency codes."""
        assert format_currency(10, "usd") == "US$ 10,00"
        assert format_currency(10, "GBP") == "GBP 10,00"


class TestFormatPercentage:
    """Tests for format_percentage."""

    def test_finite(self):
        assert format_percentage(12.345) == "12.3%"
        assert format_percentage(50, digits=0) == "50%"

    def test_non_finite(self):
        """Test NaN and infinity are shown as not available."""
        assert format_percentage(math.nan) == "n/a"
        assert format_percentage(math.inf) == "n/a"


class TestAmountFromInput:
    """Tests for amount_from_input."""

    def test_empty_field(self):
        assert amount_from_input(None) is None

    def test_zero_is_kept(self):
        """Test a typed zero stays a zero amount."""
        amount = amount_from_input(0.0)
        assert amount is not None
        assert amount == Decimal("0.00")

    def test_rounds_to_cents(self):
        """Test float noise from the widget is rounded away."""
        assert amount_from_input(10.1) == Decimal("10.10")
        assert amount_from_input(19.999) == Decimal("20.00")

    def test_zero_actual_reaches_breakdown(self):
        """Test an expense saved with actual 0 counts as 0, not its estimate."""
        draft = ExpenseDraft(
            category="Venue",
            estimated_amount=amount_from_input(500.0),
            actual_amount=amount_from_input(0.0),
        )
        assert draft.actual_amount == Decimal("0.00")

        saved = Expense(organization_id=uuid4(), **draft.model_dump())
        breakdown = aggregator.category_breakdown([saved])
        assert breakdown[0].value == Decimal("0")
