"""Configuration resolver: VAT mode and deduction inputs to pipeline coefficients."""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Union

from .errors import ConfigError
from .schemas import RawNumber, ResolvedConfig, VatMode, VatPolicy
from .utils import HUNDRED, format_percent, safe_decimal, too_large

STANDARD_VAT_RATE = Decimal("0.20")

# One entry per VatMode; tests assert nothing is missing.
VAT_POLICIES: Dict[VatMode, VatPolicy] = {
    VatMode.STANDARD_20: VatPolicy(
        rate=STANDARD_VAT_RATE,
        label="Standard VAT (20%)",
        show_vat_row=True,
    ),
    VatMode.REVERSE_CHARGE_20: VatPolicy(
        rate=Decimal("0"),
        label="Reverse Charge (20%)",
        show_vat_row=True,
        reverse_charge_notice=True,
        reportable_rate=STANDARD_VAT_RATE,
    ),
    VatMode.ZERO_RATED: VatPolicy(
        rate=Decimal("0"),
        label="Zero Rated (0%)",
        show_vat_row=True,
    ),
    VatMode.NOT_REGISTERED: VatPolicy(
        rate=Decimal("0"),
        label="Not VAT Registered",
        show_vat_row=False,
    ),
}

REVERSE_CHARGE_NOTICE = (
    "VAT Reverse Charge (Construction Services): Customer to account for VAT at {rate} "
    "to HM Revenue & Customs."
)


def parse_vat_mode(mode: Union[VatMode, str]) -> VatMode:
    """Accept an enum member or its name in any case, e.g. ``"zero_rated"``."""
    if isinstance(mode, VatMode):
        return mode
    try:
        return VatMode(str(mode).strip().upper())
    except ValueError:
        raise ConfigError([f"config: vat_mode_unknown ({mode})"]) from None


def vat_policy(mode: Union[VatMode, str]) -> VatPolicy:
    return VAT_POLICIES[parse_vat_mode(mode)]


def notice_text(policy: VatPolicy) -> Optional[str]:
    """Compliance text the document must carry, if any."""
    if not policy.reverse_charge_notice:
        return None
    return REVERSE_CHARGE_NOTICE.format(rate=format_percent(policy.reportable_rate * HUNDRED))


def _percent(name: str, value: Optional[RawNumber], errors: List[str]) -> Decimal:
    parsed = safe_decimal(0 if value is None else value)
    if parsed is None:
        errors.append(f"config: {name}_not_numeric")
        return Decimal("0")
    if parsed < 0 or parsed > HUNDRED:
        errors.append(f"config: {name}_out_of_range")
    return parsed


def resolve(
    vat_mode: Union[VatMode, str],
    discount_amount: Optional[RawNumber] = 0,
    retention_percent: Optional[RawNumber] = 0,
    cis_percent: Optional[RawNumber] = 0,
) -> ResolvedConfig:
    """Validate configuration and map it to the coefficients the pipeline consumes.

    Nothing is clamped: every bad value is reported in one ``ConfigError``.
    """
    errors: List[str] = []

    mode: Optional[VatMode] = None
    try:
        mode = parse_vat_mode(vat_mode)
    except ConfigError as exc:
        errors.extend(exc.errors)

    discount = safe_decimal(0 if discount_amount is None else discount_amount)
    if discount is None:
        errors.append("config: discount_amount_not_numeric")
    elif discount < 0:
        errors.append("config: discount_amount_negative")
    elif too_large(discount):
        errors.append("config: discount_amount_too_large")

    retention = _percent("retention_percent", retention_percent, errors)
    cis = _percent("cis_percent", cis_percent, errors)

    if errors:
        raise ConfigError(errors)

    return ResolvedConfig(
        vat_mode=mode,
        vat_policy=VAT_POLICIES[mode],
        discount_amount=discount,
        retention_percent=retention,
        cis_percent=cis,
    )
