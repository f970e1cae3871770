"""
Tests for the CIS labour breakdown.
"""

from decimal import Decimal
import logging

import pytest

from totals_engine.cis import breakdown_text, cis_breakdown
from totals_engine.errors import ConfigError


class TestCisBreakdown:

    def test_labour_excludes_materials(self):
        result = cis_breakdown(1200, 200, 20, 5)
        assert result.labour == Decimal("1000.00")
        assert result.cis_deduction == Decimal("200.00")
        assert result.retention == Decimal("60.00")
        assert result.net_payment == Decimal("940.00")

    def test_materials_above_gross_means_no_labour(self):
        result = cis_breakdown(500, 800, 30)
        assert result.labour == Decimal("0.00")
        assert result.cis_deduction == Decimal("0.00")
        assert result.net_payment == Decimal("500.00")

    def test_rounding_only_at_the_end(self):
        result = cis_breakdown("100.05", 0, 30)
        # 30.015 -> 30.02 half-up; net 70.035 -> 70.04
        assert result.cis_deduction == Decimal("30.02")
        assert result.net_payment == Decimal("70.04")

    def test_non_standard_rate_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="totals_engine.cis"):
            cis_breakdown(100, 0, 25)
        assert "Non-standard CIS rate" in caplog.text

    def test_standard_rate_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="totals_engine.cis"):
            cis_breakdown(100, 0, 20)
        assert caplog.text == ""

    def test_invalid_inputs(self):
        with pytest.raises(ConfigError) as exc_info:
            cis_breakdown(-1, "abc", 120, -5)
        assert exc_info.value.errors == [
            "config: gross_negative",
            "config: materials_not_numeric",
            "config: cis_rate_out_of_range",
            "config: retention_percent_out_of_range",
        ]

    def test_gross_over_limit(self):
        with pytest.raises(ConfigError) as exc_info:
            cis_breakdown("1e27")
        assert exc_info.value.errors == ["config: gross_too_large"]

    def test_breakdown_text(self):
        text = breakdown_text(cis_breakdown(1200, 200, 20, 5))
        assert text.splitlines() == [
            "Gross: £1,200.00",
            "Materials: £200.00",
            "Labour: £1,000.00",
            "CIS @ 20%: -£200.00",
            "Retention @ 5%: -£60.00",
            "Net payment: £940.00",
        ]
