"""Data models used across the normalizer, pipeline, presenter, CLI, and API."""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

RawNumber = Union[Decimal, int, float, str]


class VatMode(str, Enum):
    STANDARD_20 = "STANDARD_20"
    REVERSE_CHARGE_20 = "REVERSE_CHARGE_20"
    ZERO_RATED = "ZERO_RATED"
    NOT_REGISTERED = "NOT_REGISTERED"


class DocumentKind(str, Enum):
    INVOICE = "invoice"
    QUOTE = "quote"


class RawLineItem(BaseModel):
    """A line item as typed into a form or posted by a client, before normalization."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # Left untyped so the normalizer sees exactly what was sent (a bool stays a bool).
    description: Any = None
    quantity: Any = None
    unit_price: Any = Field(
        default=None, validation_alias=AliasChoices("unit_price", "unitPrice")
    )


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    quantity: Decimal
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        """Exact, unrounded quantity * unit price."""
        return self.quantity * self.unit_price


class VatPolicy(BaseModel):
    """How a VAT mode contributes numerically and how it must be displayed."""

    model_config = ConfigDict(frozen=True)

    rate: Decimal
    label: str
    show_vat_row: bool
    reverse_charge_notice: bool = False
    reportable_rate: Decimal = Decimal("0")


class ResolvedConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    vat_mode: VatMode
    vat_policy: VatPolicy
    discount_amount: Decimal
    retention_percent: Decimal
    cis_percent: Decimal

    @property
    def vat_rate(self) -> Decimal:
        return self.vat_policy.rate


class Totals(BaseModel):
    """Derived totals for one document; a fresh instance per calculation."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    discount: Decimal
    net_after_discount: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    total_before_retention: Decimal
    retention: Decimal
    total_after_retention: Decimal
    cis_deduction: Decimal
    cis_percent: Decimal
    total_due: Decimal


class SummaryRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    amount: Decimal
    display: str


class DocumentTotals(BaseModel):
    """Boundary result handed to preview, PDF, and persistence collaborators."""

    model_config = ConfigDict(frozen=True)

    document_id: Optional[str] = None
    document_kind: DocumentKind = DocumentKind.INVOICE
    totals: Totals
    vat_mode: VatMode
    vat_label: str
    show_vat_row: bool
    reverse_charge_notice: bool
    notice_text: Optional[str] = None
    summary: List[SummaryRow] = Field(default_factory=list)


class TotalsRequest(BaseModel):
    """Calculation input: line items plus the tax/deduction configuration."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    document_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("document_id", "documentId")
    )
    document_kind: DocumentKind = Field(
        default=DocumentKind.INVOICE, validation_alias=AliasChoices("document_kind", "documentKind")
    )
    items: List[RawLineItem] = Field(default_factory=list)
    vat_mode: str = Field(
        default=VatMode.STANDARD_20.value, validation_alias=AliasChoices("vat_mode", "vatMode")
    )
    discount_amount: Any = Field(
        default=0, validation_alias=AliasChoices("discount_amount", "discountAmount")
    )
    retention_percent: Any = Field(
        default=0, validation_alias=AliasChoices("retention_percent", "retentionPercent")
    )
    cis_percent: Any = Field(
        default=0, validation_alias=AliasChoices("cis_percent", "cisPercent")
    )


class DocumentResult(BaseModel):
    document_id: str
    ok: bool
    totals: Optional[DocumentTotals] = None
    errors: List[str] = Field(default_factory=list)


class BatchSummary(BaseModel):
    total_documents: int
    calculated_documents: int
    failed_documents: int
    reverse_charge_documents: int
    total_due_sum: Decimal
    error_counts: Dict[str, int] = Field(default_factory=dict)


class BatchResponse(BaseModel):
    summary: BatchSummary
    results: List[DocumentResult]


class CisBreakdownRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    gross: Any
    materials: Any = 0
    rate: Any = 20
    retention_percent: Any = Field(
        default=0, validation_alias=AliasChoices("retention_percent", "retentionPercent", "retention")
    )


class CisBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    gross: Decimal
    materials: Decimal
    labour: Decimal
    rate: Decimal
    cis_deduction: Decimal
    retention_percent: Decimal
    retention: Decimal
    net_payment: Decimal
