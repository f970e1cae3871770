"""Rounding and presentation adapter.

Rounding happens here and nowhere else. Each currency field is rounded on its
own, so the displayed total due can sit one penny away from the difference of
the displayed intermediate figures. That gap is expected and is not corrected.
"""
from __future__ import annotations

from typing import Dict, List

from .schemas import SummaryRow, Totals, VatPolicy
from .utils import DEFAULT_CURRENCY_SYMBOL, HUNDRED, format_currency, format_percent, round_money

CURRENCY_FIELDS = (
    "subtotal",
    "discount",
    "net_after_discount",
    "vat_amount",
    "total_before_retention",
    "retention",
    "total_after_retention",
    "cis_deduction",
    "total_due",
)


def present(totals: Totals) -> Totals:
    """Round every currency field half-up to pennies. Idempotent."""
    return totals.model_copy(
        update={name: round_money(getattr(totals, name)) for name in CURRENCY_FIELDS}
    )


def _vat_label(totals: Totals, policy: VatPolicy) -> str:
    if policy.reverse_charge_notice:
        return "VAT (Reverse Charge)"
    return f"VAT ({format_percent(totals.vat_rate * HUNDRED)})"


def render_summary(
    totals: Totals, policy: VatPolicy, symbol: str = DEFAULT_CURRENCY_SYMBOL
) -> List[SummaryRow]:
    """Ordered summary rows for a document, deductions shown as negatives."""
    rounded = present(totals)
    rows: List[tuple] = [("subtotal", "Subtotal", rounded.subtotal)]
    if rounded.discount:
        rows.append(("discount", "Discount", rounded.discount.copy_negate()))
    rows.append(("net_after_discount", "Net after discount", rounded.net_after_discount))
    if policy.show_vat_row:
        rows.append(("vat_amount", _vat_label(rounded, policy), rounded.vat_amount))
    rows.append(("total_before_retention", "Total before retention", rounded.total_before_retention))
    if rounded.retention:
        rows.append(("retention", "Retention", rounded.retention.copy_negate()))
    if rounded.cis_deduction:
        label = f"CIS deduction ({format_percent(rounded.cis_percent)})"
        rows.append(("cis_deduction", label, rounded.cis_deduction.copy_negate()))
    rows.append(("total_due", "Total due", rounded.total_due))

    return [
        SummaryRow(key=key, label=label, amount=amount, display=format_currency(amount, symbol))
        for key, label, amount in rows
    ]


def format_totals(
    totals: Totals, policy: VatPolicy, symbol: str = DEFAULT_CURRENCY_SYMBOL
) -> Dict[str, str]:
    """Currency strings keyed by field; no VAT entry when the policy hides the VAT row."""
    rounded = present(totals)
    formatted = {name: format_currency(getattr(rounded, name), symbol) for name in CURRENCY_FIELDS}
    if not policy.show_vat_row:
        formatted.pop("vat_amount")
    return formatted
