"""Calculation façade running normalize, resolve, compute, and present for documents."""
from __future__ import annotations

import logging
from collections import Counter
from decimal import Decimal, localcontext
from typing import Any, Iterable, List, Mapping, Union

from pydantic import ValidationError as ShapeError

from .config_resolver import notice_text, resolve
from .errors import TotalsError, ValidationError, shape_error_codes
from .normalizer import normalize
from .pipeline import compute
from .presenter import present, render_summary
from .schemas import BatchResponse, BatchSummary, DocumentResult, DocumentTotals, TotalsRequest
from .utils import DEFAULT_CURRENCY_SYMBOL, WORKING_PRECISION

RequestLike = Union[TotalsRequest, Mapping[str, Any]]

logger = logging.getLogger(__name__)


class DocumentTotalsCalculator:
    def __init__(self, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> None:
        self.currency_symbol = currency_symbol

    def calculate(self, request: TotalsRequest) -> DocumentTotals:
        """Produce the rounded totals for one invoice or quote.

        Raises ``ValidationError`` or ``ConfigError`` before any arithmetic runs;
        there is no partial result.
        """
        items = normalize(request.items)
        config = resolve(
            request.vat_mode,
            request.discount_amount,
            request.retention_percent,
            request.cis_percent,
        )
        exact = compute(items, config)
        policy = config.vat_policy

        logger.debug(
            "Calculated %s totals over %d items",
            request.document_kind.value,
            len(items),
            extra={"document_id": request.document_id, "document_kind": request.document_kind.value},
        )
        return DocumentTotals(
            document_id=request.document_id,
            document_kind=request.document_kind,
            totals=present(exact),
            vat_mode=config.vat_mode,
            vat_label=policy.label,
            show_vat_row=policy.show_vat_row,
            reverse_charge_notice=policy.reverse_charge_notice,
            notice_text=notice_text(policy),
            summary=render_summary(exact, policy, self.currency_symbol),
        )

    @staticmethod
    def parse_request(payload: RequestLike) -> TotalsRequest:
        """Validate the shape of a raw request, reporting problems as ``ValidationError`` codes."""
        if isinstance(payload, TotalsRequest):
            return payload
        try:
            return TotalsRequest.model_validate(payload)
        except ShapeError as exc:
            raise ValidationError(shape_error_codes(exc)) from None

    @staticmethod
    def _document_id(payload: RequestLike, index: int) -> str:
        if isinstance(payload, TotalsRequest):
            document_id = payload.document_id
        elif isinstance(payload, Mapping):
            document_id = payload.get("document_id") or payload.get("documentId")
        else:
            document_id = None
        return str(document_id) if document_id else f"document[{index}]"

    def calculate_many(self, requests: Iterable[RequestLike]) -> BatchResponse:
        """Calculate every document; a bad document is recorded as failed, never raised."""
        results: List[DocumentResult] = []
        error_counter: Counter[str] = Counter()
        total_due_sum = Decimal("0.00")

        for index, payload in enumerate(requests):
            document_id = self._document_id(payload, index)
            try:
                document = self.calculate(self.parse_request(payload))
            except TotalsError as exc:
                logger.debug(
                    "Document failed validation",
                    extra={"document_id": document_id, "error_codes": exc.errors},
                )
                results.append(DocumentResult(document_id=document_id, ok=False, errors=exc.errors))
                error_counter.update(exc.errors)
                continue
            with localcontext() as ctx:
                ctx.prec = WORKING_PRECISION
                total_due_sum += document.totals.total_due
            results.append(DocumentResult(document_id=document_id, ok=True, totals=document))

        summary = BatchSummary(
            total_documents=len(results),
            calculated_documents=sum(1 for r in results if r.ok),
            failed_documents=sum(1 for r in results if not r.ok),
            reverse_charge_documents=sum(1 for r in results if r.ok and r.totals.reverse_charge_notice),
            total_due_sum=total_due_sum,
            error_counts=dict(error_counter),
        )
        logger.info(
            "Batch calculated: %d ok, %d failed",
            summary.calculated_documents,
            summary.failed_documents,
        )
        return BatchResponse(summary=summary, results=results)
