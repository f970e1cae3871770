"""Totals pipeline: subtotal, discount, VAT, retention, CIS, amount due.

Stages run in a fixed order on exact, unrounded decimals. Retention is taken
from the VAT-inclusive total; CIS is taken from what remains after retention.
Swapping those two stages changes the amount due.
"""
from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Sequence

from .schemas import LineItem, ResolvedConfig, Totals
from .utils import HUNDRED, WORKING_PRECISION


def compute(line_items: Sequence[LineItem], config: ResolvedConfig) -> Totals:
    with localcontext() as ctx:
        ctx.prec = WORKING_PRECISION

        subtotal = sum((item.line_total for item in line_items), Decimal("0"))
        # A discount larger than the bill stops at zero, never below.
        discount = min(config.discount_amount, subtotal)
        net_after_discount = subtotal - discount

        vat_amount = net_after_discount * config.vat_rate
        total_before_retention = net_after_discount + vat_amount

        retention = total_before_retention * (config.retention_percent / HUNDRED)
        total_after_retention = total_before_retention - retention

        cis_deduction = total_after_retention * (config.cis_percent / HUNDRED)
        total_due = total_after_retention - cis_deduction

    return Totals(
        subtotal=subtotal,
        discount=discount,
        net_after_discount=net_after_discount,
        vat_rate=config.vat_rate,
        vat_amount=vat_amount,
        total_before_retention=total_before_retention,
        retention=retention,
        total_after_retention=total_after_retention,
        cis_deduction=cis_deduction,
        cis_percent=config.cis_percent,
        total_due=total_due,
    )
