"""Error taxonomy raised before any totals arithmetic runs."""
from __future__ import annotations

from typing import Iterable, List


class TotalsError(Exception):
    """Base error carrying machine-readable codes such as ``"config: vat_mode_unknown"``."""

    category = "error"

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or self.category)


class ValidationError(TotalsError):
    """Bad line item input: empty description, non-positive quantity, negative price."""

    category = "validation"


class ConfigError(TotalsError):
    """Bad calculation configuration: negative discount, out-of-range percentage, unknown VAT mode."""

    category = "config"


def shape_error_codes(exc, base: str = "") -> List[str]:
    """Turn a pydantic validation error into ``"validation: items[1].quantity_invalid"`` codes."""
    codes: List[str] = []
    for err in exc.errors():
        path = base
        for part in err["loc"]:
            if isinstance(part, int):
                path += f"[{part}]"
            else:
                path += f".{part}" if path else str(part)
        codes.append(f"validation: {path or 'request'}_invalid")
    return codes
