"""
Tests for the typer command line, run in-process with CliRunner.
"""

import json

from typer.testing import CliRunner

from totals_engine.cli import app

runner = CliRunner()


class TestCalculateCommand:

    def test_single_document(self, tmp_path, site_items):
        path = tmp_path / "invoice.json"
        path.write_text(
            json.dumps({"document_id": "INV-1", "items": site_items, "retention_percent": 5, "cis_percent": 20}),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["calculate", "--input", str(path)])
        assert result.exit_code == 0, result.output
        assert "£7,068.00" in result.output
        assert "Calculated: 1" in result.output

    def test_reverse_charge_notice_printed(self, tmp_path, site_items):
        path = tmp_path / "quote.json"
        path.write_text(
            json.dumps([{"document_kind": "quote", "items": site_items, "vat_mode": "REVERSE_CHARGE_20"}]),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["calculate", "--input", str(path)])
        assert result.exit_code == 0, result.output
        assert "VAT Reverse Charge" in result.output

    def test_report_written_and_failure_exit_code(self, tmp_path, site_items):
        path = tmp_path / "batch.json"
        report = tmp_path / "out" / "report.json"
        path.write_text(
            json.dumps(
                [
                    {"document_id": "INV-1", "items": site_items},
                    {"document_id": "INV-2", "items": [{"description": "Paint", "quantity": 0, "unit_price": 5}]},
                ]
            ),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["calculate", "--input", str(path), "--report", str(report)])
        assert result.exit_code == 1
        assert "validation: items[0].quantity_not_positive" in result.output

        data = json.loads(report.read_text(encoding="utf-8"))
        assert data["summary"]["calculated_documents"] == 1
        assert data["summary"]["failed_documents"] == 1
        assert data["results"][0]["totals"]["totals"]["total_due"] == "9300.00"

    def test_custom_symbol(self, tmp_path, thousand_items):
        path = tmp_path / "invoice.json"
        path.write_text(json.dumps({"items": thousand_items, "vat_mode": "ZERO_RATED"}), encoding="utf-8")
        result = runner.invoke(app, ["calculate", "--input", str(path), "--symbol", "€"])
        assert result.exit_code == 0, result.output
        assert "€1,000.00" in result.output


class TestCisCommand:

    def test_breakdown(self):
        result = runner.invoke(app, ["cis", "--gross", "1200", "--materials", "200", "--retention", "5"])
        assert result.exit_code == 0, result.output
        assert "Net payment: £940.00" in result.output

    def test_invalid_rate(self):
        result = runner.invoke(app, ["cis", "--gross", "1200", "--rate", "150"])
        assert result.exit_code == 1
        assert "config: cis_rate_out_of_range" in result.output


class TestCalculateCommandBadDocuments:

    def test_one_bad_document_is_reported_and_others_still_print(self, tmp_path, site_items):
        path = tmp_path / "batch.json"
        path.write_text(
            json.dumps(
                [
                    {"document_id": "OK", "items": site_items},
                    {"document_id": "BAD", "items": [{"description": "Paint", "quantity": [1], "unit_price": 5}]},
                    {"document_id": "SHAPE", "items": "forty bricks"},
                ]
            ),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["calculate", "--input", str(path)])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "£9,300.00" in result.output
        assert "BAD failed" in result.output
        assert "validation: items[0].quantity_not_numeric" in result.output
        assert "SHAPE failed" in result.output
        assert "validation: items_invalid" in result.output
