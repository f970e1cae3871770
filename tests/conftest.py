"""
Shared pytest fixtures for the totals engine test suite.

All tests are pure unit tests over the engine modules, plus in-process CLI and
HTTP tests; nothing touches the network or a database.
"""

import logging

import pytest

from totals_engine.calculator import DocumentTotalsCalculator
from totals_engine.schemas import TotalsRequest


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

@pytest.fixture
def site_items():
    """
    Three-line works invoice used by the worked examples.

      40 days labour  @  75.00 = 3000.00
       1 roof trusses @ 2750.00 = 2750.00
      20 days skip    @ 100.00 = 2000.00
                        subtotal = 7750.00
    """
    return [
        {"description": "Bricklayer (days)", "quantity": 40, "unit_price": 75},
        {"description": "Roof trusses supply", "quantity": 1, "unit_price": 2750},
        {"description": "Skip hire (days)", "quantity": 20, "unit_price": 100},
    ]


@pytest.fixture
def thousand_items():
    """Single line totalling exactly 1000.00."""
    return [{"description": "Kitchen fit-out", "quantity": 1, "unit_price": "1000.00"}]


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def calculator():
    """DocumentTotalsCalculator with the default £ symbol."""
    return DocumentTotalsCalculator()


@pytest.fixture
def make_request():
    """Build a TotalsRequest with zeroed deductions unless overridden."""

    def _make(items, vat_mode="STANDARD_20", discount=0, retention=0, cis=0, **extra):
        return TotalsRequest.model_validate(
            {
                "items": items,
                "vat_mode": vat_mode,
                "discount_amount": discount,
                "retention_percent": retention,
                "cis_percent": cis,
                **extra,
            }
        )

    return _make


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture
def restore_root_logging():
    """Put the root logger's handlers and level back after a test reconfigures them."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)
