"""FastAPI application exposing totals endpoints."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .calculator import DocumentTotalsCalculator
from .cis import cis_breakdown
from .config import config
from .errors import TotalsError
from .logging_config import setup_logging
from .schemas import BatchResponse, CisBreakdown, CisBreakdownRequest, DocumentTotals, TotalsRequest


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_JSON)
    yield


app = FastAPI(title="Document Totals Service", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(TotalsError)
async def totals_error_handler(request: Request, exc: TotalsError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.errors})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/totals", response_model=DocumentTotals)
def calculate_totals(request: TotalsRequest):
    calculator = DocumentTotalsCalculator(currency_symbol=config.CURRENCY_SYMBOL)
    return calculator.calculate(request)


@app.post("/totals/batch", response_model=BatchResponse)
def calculate_totals_batch(requests: List[Dict[str, Any]]):
    calculator = DocumentTotalsCalculator(currency_symbol=config.CURRENCY_SYMBOL)
    return calculator.calculate_many(requests)


@app.post("/cis-breakdown", response_model=CisBreakdown)
def calculate_cis_breakdown(request: CisBreakdownRequest):
    return cis_breakdown(request.gross, request.materials, request.rate, request.retention_percent)
