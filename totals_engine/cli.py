"""Command-line entrypoints for document totals and CIS breakdowns."""
from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .calculator import DocumentTotalsCalculator
from .cis import breakdown_text, cis_breakdown
from .config import config
from .errors import TotalsError
from .logging_config import setup_logging
from .schemas import BatchResponse, DocumentTotals

app = typer.Typer(add_completion=False, help="Document totals CLI")


def _load_requests(json_path: Path) -> list:
    """Raw request payloads; each one is validated as its own document."""
    data = json.loads(json_path.read_text(encoding="utf-8"), parse_float=Decimal)
    if isinstance(data, dict):
        data = [data]
    return data


def _print_document(document: DocumentTotals) -> None:
    title = f"{document.document_kind.value.title()} {document.document_id or ''}".strip()
    table = Table(title=f"{title} ({document.vat_label})")
    table.add_column("Item")
    table.add_column("Amount", justify="right")
    for row in document.summary:
        label = f"[bold]{row.label}[/bold]" if row.key == "total_due" else row.label
        table.add_row(label, row.display)
    print(table)
    if document.notice_text:
        print(f"[yellow]{document.notice_text}[/yellow]")


def _print_summary(response: BatchResponse) -> None:
    summary = response.summary
    print(f"[bold]Documents:[/bold] {summary.total_documents}")
    print(f"[green]Calculated:[/green] {summary.calculated_documents}  [red]Failed:[/red] {summary.failed_documents}")
    if summary.error_counts:
        print("Errors:")
        for err, count in sorted(summary.error_counts.items(), key=lambda x: x[1], reverse=True):
            print(f"- {err}: {count}")


@app.command()
def calculate(
    input: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON file with one request or a list"),
    report: Optional[Path] = typer.Option(None, help="Optional path to write the JSON batch report"),
    symbol: str = typer.Option(config.CURRENCY_SYMBOL, help="Currency symbol for display"),
) -> None:
    """Calculate totals for invoices or quotes in a JSON file."""
    requests = _load_requests(input)
    calculator = DocumentTotalsCalculator(currency_symbol=symbol)
    response = calculator.calculate_many(requests)

    for result in response.results:
        if result.ok:
            _print_document(result.totals)
        else:
            print(f"[red]{result.document_id} failed:[/red]")
            for err in result.errors:
                print(f"  - {err}")

    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(response.model_dump_json(indent=2), encoding="utf-8")
        print(f"Report written to {report}")
    _print_summary(response)
    if response.summary.failed_documents > 0:
        raise typer.Exit(code=1)


@app.command()
def cis(
    gross: str = typer.Option(..., help="Gross amount of the payment"),
    materials: str = typer.Option("0", help="Materials element, excluded from CIS"),
    rate: str = typer.Option("20", help="CIS deduction rate in percent"),
    retention: str = typer.Option("0", help="Retention percent of the gross"),
    symbol: str = typer.Option(config.CURRENCY_SYMBOL, help="Currency symbol for display"),
) -> None:
    """Break a subcontractor payment into labour, CIS deduction, retention, and net."""
    try:
        breakdown = cis_breakdown(gross, materials, rate, retention)
    except TotalsError as exc:
        for err in exc.errors:
            print(f"[red]{err}[/red]")
        raise typer.Exit(code=1)
    print(breakdown_text(breakdown, symbol))


def main():
    setup_logging(config.LOG_LEVEL, config.LOG_JSON)
    app()


if __name__ == "__main__":
    main()
