"""CIS labour breakdown for subcontractor payments.

CIS is deducted from the labour element only, so materials are taken off the
gross before the rate applies. Retention comes off the full gross.
"""
from __future__ import annotations

import logging
from decimal import Decimal, localcontext
from typing import List, Optional

from .errors import ConfigError
from .schemas import CisBreakdown, RawNumber
from .utils import (
    DEFAULT_CURRENCY_SYMBOL,
    HUNDRED,
    WORKING_PRECISION,
    format_currency,
    format_percent,
    round_money,
    safe_decimal,
    too_large,
)

logger = logging.getLogger(__name__)

CIS_STANDARD_RATES = (Decimal("0"), Decimal("20"), Decimal("30"))


def _amount(name: str, value: Optional[RawNumber], errors: List[str]) -> Decimal:
    parsed = safe_decimal(0 if value is None else value)
    if parsed is None:
        errors.append(f"config: {name}_not_numeric")
        return Decimal("0")
    if parsed < 0:
        errors.append(f"config: {name}_negative")
    elif too_large(parsed):
        errors.append(f"config: {name}_too_large")
    return parsed


def _percent(name: str, value: Optional[RawNumber], errors: List[str]) -> Decimal:
    parsed = safe_decimal(0 if value is None else value)
    if parsed is None:
        errors.append(f"config: {name}_not_numeric")
        return Decimal("0")
    if parsed < 0 or parsed > HUNDRED:
        errors.append(f"config: {name}_out_of_range")
    return parsed


def cis_breakdown(
    gross: RawNumber,
    materials: Optional[RawNumber] = 0,
    rate: Optional[RawNumber] = 20,
    retention_percent: Optional[RawNumber] = 0,
) -> CisBreakdown:
    errors: List[str] = []
    gross_d = _amount("gross", gross, errors)
    materials_d = _amount("materials", materials, errors)
    rate_d = _percent("cis_rate", rate, errors)
    retention_d = _percent("retention_percent", retention_percent, errors)
    if errors:
        raise ConfigError(errors)

    if rate_d not in CIS_STANDARD_RATES:
        logger.warning("Non-standard CIS rate %s used", rate_d)

    with localcontext() as ctx:
        ctx.prec = WORKING_PRECISION
        labour = max(Decimal("0"), gross_d - materials_d)
        cis_deduction = labour * (rate_d / HUNDRED)
        retention = gross_d * (retention_d / HUNDRED)
        net_payment = gross_d - cis_deduction - retention

    return CisBreakdown(
        gross=round_money(gross_d),
        materials=round_money(materials_d),
        labour=round_money(labour),
        rate=rate_d,
        cis_deduction=round_money(cis_deduction),
        retention_percent=retention_d,
        retention=round_money(retention),
        net_payment=round_money(net_payment),
    )


def breakdown_text(breakdown: CisBreakdown, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Plain-text breakdown suitable for pasting into an email or note."""
    return "\n".join(
        [
            f"Gross: {format_currency(breakdown.gross, symbol)}",
            f"Materials: {format_currency(breakdown.materials, symbol)}",
            f"Labour: {format_currency(breakdown.labour, symbol)}",
            f"CIS @ {format_percent(breakdown.rate)}: -{format_currency(breakdown.cis_deduction, symbol)}",
            f"Retention @ {format_percent(breakdown.retention_percent)}: "
            f"-{format_currency(breakdown.retention, symbol)}",
            f"Net payment: {format_currency(breakdown.net_payment, symbol)}",
        ]
    )
