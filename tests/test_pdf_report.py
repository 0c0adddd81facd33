"""
Tests for market study PDF generation and the reporting CLI.
"""

import json
import pytest

from core.market_study import ValuationService, build_market_study
from reporting import (
    MarketStudyReportGenerator,
    ReportSuccess,
    create_sample_study_data,
    generate_report,
)
from reporting import cli


@pytest.fixture
def study(study_data):
    return build_market_study(study_data, ValuationService())


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch, tmp_path):
    """Keep the CLI from reconfiguring logging and writing into the repo."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setenv("REPORTS_DIR", str(tmp_path / "reports"))


# =============================================================================
# PDF Generation
# =============================================================================

class TestReportGenerator:
    """Tests for MarketStudyReportGenerator."""

    def test_generate_to_buffer(self, study):
        pdf_bytes = MarketStudyReportGenerator(study).generate_to_buffer()
        assert pdf_bytes.startswith(b"%PDF")
        assert len(pdf_bytes) > 1000

    def test_generate_report_writes_file(self, study, tmp_path):
        result = generate_report(study, output_dir=tmp_path, filename="estudo.pdf")

        assert isinstance(result, ReportSuccess)
        assert result.path == tmp_path / "estudo.pdf"
        assert result.path.read_bytes().startswith(b"%PDF")
        assert result.samples_included == 3
        assert result.size_bytes == result.path.stat().st_size

    def test_default_filename_uses_study_id(self, study, tmp_path):
        result = generate_report(study, output_dir=tmp_path)
        assert result.path.name == f"estudo-de-mercado-{study.id[:8]}.pdf"

    def test_report_with_rejected_samples_and_markup(self, study_data, tmp_path):
        template = study_data["samples"][0]
        study_data["samples"] = [dict(template, id=f"s{i}") for i in range(9)]
        study_data["samples"].append(dict(template, id="outlier", price=4500000))
        study_data["address"] = "Rua A & B <bloco 2>"

        study = build_market_study(study_data, ValuationService())
        assert study.analysis.rejected_ids == ["outlier"]

        pdf_bytes = MarketStudyReportGenerator(study).generate_to_buffer()
        assert pdf_bytes.startswith(b"%PDF")

    def test_sample_data_builds(self):
        study = build_market_study(create_sample_study_data(), ValuationService())
        assert len(study.samples) == 5
        assert MarketStudyReportGenerator(study).generate_to_buffer().startswith(b"%PDF")


# =============================================================================
# CLI
# =============================================================================

class TestCli:
    """Tests for python -m reporting.cli."""

    @pytest.fixture
    def study_file(self, study_data, tmp_path):
        path = tmp_path / "study.json"
        path.write_text(json.dumps(study_data), encoding="utf-8")
        return path

    def test_valuate(self, study_file, capsys):
        assert cli.main(["valuate", str(study_file)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["recommended_valuation"]["standard"] == "renovated"

    def test_report(self, study_file, tmp_path, capsys):
        output = tmp_path / "out" / "report.pdf"
        assert cli.main(["report", str(study_file), "-o", str(output)]) == 0
        assert output.read_bytes().startswith(b"%PDF")
        assert "Report generated" in capsys.readouterr().out

    def test_sample(self, tmp_path):
        assert cli.main(["sample"]) == 0
        assert list((tmp_path / "reports").glob("*.pdf"))

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main(["valuate", str(tmp_path / "missing.json")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert cli.main(["valuate", str(path)]) == 1
        assert "Invalid JSON" in capsys.readouterr().err

    def test_invalid_study(self, study_data, tmp_path, capsys):
        study_data["samples"] = study_data["samples"][:1]
        path = tmp_path / "short.json"
        path.write_text(json.dumps(study_data), encoding="utf-8")

        assert cli.main(["valuate", str(path)]) == 1
        assert "Invalid study data" in capsys.readouterr().err

    def test_missing_subject_characteristic(self, study_data, tmp_path, capsys):
        study_data["property_characteristics"] = {"bathrooms": 2}
        path = tmp_path / "partial.json"
        path.write_text(json.dumps(study_data), encoding="utf-8")

        assert cli.main(["valuate", str(path)]) == 1
        assert "Invalid study data" in capsys.readouterr().err

    def test_currency_from_environment(self, study_file, monkeypatch, capsys):
        monkeypatch.setenv("CURRENCY", "EUR")
        assert cli.main(["valuate", str(study_file)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["recommended_valuation"]["total_value_formatted"].startswith("€ ")
