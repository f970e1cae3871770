"""Line-item normalizer: validates raw items and coerces them to exact decimals."""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError as ShapeError

from .errors import ValidationError, shape_error_codes
from .schemas import LineItem, RawLineItem
from .utils import safe_decimal, too_large

RawItemLike = Union[RawLineItem, Mapping[str, Any]]


def _coerce(raw: RawItemLike, index: int) -> RawLineItem:
    if isinstance(raw, RawLineItem):
        return raw
    try:
        return RawLineItem.model_validate(raw)
    except ShapeError as exc:
        raise ValidationError(shape_error_codes(exc, base=f"items[{index}]")) from None


def _amount(prefix: str, name: str, value: Any, errors: List[str]) -> Optional[Decimal]:
    parsed = safe_decimal(value)
    if parsed is None:
        errors.append(f"{prefix}.{name}_not_numeric")
    elif too_large(parsed):
        errors.append(f"{prefix}.{name}_too_large")
    return parsed


def normalize(raw_items: Iterable[RawItemLike]) -> List[LineItem]:
    """Turn raw line items into validated ``LineItem`` values.

    Every problem across all items is collected and raised as one
    ``ValidationError``. Zero-quantity lines are rejected, never dropped.
    """
    items: List[LineItem] = []
    errors: List[str] = []

    raw_list = list(raw_items)
    if not raw_list:
        raise ValidationError(["validation: items_empty"])

    for index, raw in enumerate(raw_list):
        try:
            item = _coerce(raw, index)
        except ValidationError as exc:
            errors.extend(exc.errors)
            continue
        prefix = f"validation: items[{index}]"
        item_errors: List[str] = []

        description = item.description
        if description is not None and not isinstance(description, str):
            item_errors.append(f"{prefix}.description_invalid")
        elif not (description or "").strip():
            item_errors.append(f"{prefix}.description_empty")

        quantity = _amount(prefix, "quantity", item.quantity, item_errors)
        if quantity is not None and quantity <= 0:
            item_errors.append(f"{prefix}.quantity_not_positive")

        unit_price = _amount(prefix, "unit_price", item.unit_price, item_errors)
        if unit_price is not None and unit_price < 0:
            item_errors.append(f"{prefix}.unit_price_negative")

        if item_errors:
            errors.extend(item_errors)
            continue
        items.append(LineItem(description=description.strip(), quantity=quantity, unit_price=unit_price))

    if errors:
        raise ValidationError(errors)
    return items
