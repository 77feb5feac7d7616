"""
Analysis Report Job Test Module

Tests for chat_analytics/jobs/analysis_report.py covering:
- Markdown sections and figures rendered from a summary
- Empty-batch placeholders
- Writing to an explicit path and to the configured default path
- Command line entry point
"""

import json
from datetime import datetime, timezone

from chat_analytics.jobs.analysis_report import (
    generate_analysis_report,
    main,
    write_analysis_report,
)
from chat_analytics.services.insights import calculate_advanced_analytics


GENERATED_AT = datetime(2025, 3, 7, 9, 30, tzinfo=timezone.utc)


class TestGenerateAnalysisReport:
    """Tests for generate_analysis_report()."""

    def test_sections_present(self, sample_records) -> None:
        summary = calculate_advanced_analytics(sample_records)

        content = generate_analysis_report(summary, generated_at=GENERATED_AT)

        for heading in (
            "# Chat Analytics Report",
            "## Key Performance Indicators",
            "### Traffic Split",
            "### Top Traffic Sources",
            "### Top Campaigns",
            "### Click ID Distribution",
            "### Top Referrer Domains",
            "## Channel Performance",
            "## Job Type Performance",
            "## Customer Insights",
            "## Quality",
            "### Data Quality",
        ):
            assert heading in content

    def test_figures(self, sample_records) -> None:
        summary = calculate_advanced_analytics(sample_records)

        content = generate_analysis_report(summary, generated_at=GENERATED_AT)

        assert "**Generated:** 2025-03-07 09:30:00 UTC" in content
        assert "**Total Records Analyzed:** 6" in content
        assert "| Booking Rate | 66.7% | Booked / Bookable |" in content
        assert "| Avg Duration | 2:40 | Chats with a duration |" in content
        assert "| Direct | 2 | 33.3% |" in content
        assert "| google-paid | Google Ads | yes | 1 | 1 | 1 | 100.0% |" in content
        assert "| Outside Service Area | Out of Area | 1 |" in content
        assert "| No WebSession Data | 1 | Records missing webSession |" in content

    def test_job_type_limit(self, make_record) -> None:
        records = [make_record(jobType=f"job {i}") for i in range(8)]
        summary = calculate_advanced_analytics(records)

        content = generate_analysis_report(summary, job_type_limit=2)

        assert "| job 1 |" in content
        assert "| job 2 |" not in content

    def test_empty_batch_placeholders(self) -> None:
        summary = calculate_advanced_analytics([])

        content = generate_analysis_report(summary, generated_at=GENERATED_AT, title="Weekly")

        assert content.startswith("# Weekly")
        assert "_No attribution source data found in records_" in content
        assert "_No campaign data found_" in content
        assert "_No click identifiers found_" in content
        assert "_No referrer data found_" in content
        assert "| Avg Duration | - |" in content


class TestWriteAnalysisReport:
    """Tests for write_analysis_report()."""

    def test_writes_explicit_path(self, tmp_path, sample_records) -> None:
        target = tmp_path / "reports" / "report.md"

        path = write_analysis_report(sample_records, target, generated_at=GENERATED_AT)

        assert path == target
        assert "**Total Records Analyzed:** 6" in target.read_text(encoding="utf-8")

    def test_uses_configured_path(self, tmp_path, monkeypatch, sample_records) -> None:
        target = tmp_path / "configured.md"
        monkeypatch.setenv("CHAT_ANALYTICS_REPORT_OUTPUT_PATH", str(target))

        path = write_analysis_report(sample_records)

        assert path == target
        assert target.exists()


class TestCommandLine:
    """Tests for the main() entry point."""

    def test_generates_report(self, tmp_path, sample_rows, capsys) -> None:
        source = tmp_path / "records.json"
        source.write_text(json.dumps({"list": sample_rows}), encoding="utf-8")
        target = tmp_path / "out.md"

        exit_code = main([str(source), "-o", str(target)])

        assert exit_code == 0
        assert target.exists()
        assert "Report generated" in capsys.readouterr().out

    def test_missing_input(self, tmp_path) -> None:
        assert main([str(tmp_path / "missing.json"), "-o", str(tmp_path / "out.md")]) == 1

    def test_invalid_json_input(self, tmp_path) -> None:
        source = tmp_path / "broken.json"
        source.write_text("[", encoding="utf-8")

        assert main([str(source)]) == 1
