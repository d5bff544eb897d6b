"""
Unit tests for the orchestrator and command-line entry point.
"""

import pytest
from artemis import config
from artemis import orchestrator as orchestrator_module
from artemis.analyzers.keyword_resolver import KeywordResolver
from artemis.analyzers.match_scorer import EditDistanceScorer
from artemis.analyzers.pathway_resolver import PathwayResolver
from artemis.api.local_sources import CsvDatasetSource, StaticDatasetSource
from artemis.api.sheets_client import GoogleSheetsSource
from artemis.models.pathway import ResolutionStatus
from artemis.orchestrator import (
    TargetingOrchestrator,
    build_dataset_source,
    build_resolver,
    main,
)


@pytest.fixture
def sample_env(tmp_path, monkeypatch):
    """Point configuration at the bundled sample CSV and a temp audit log."""
    monkeypatch.setattr(config, "GOOGLE_SHEET_ID", "")
    monkeypatch.setattr(config, "ARTEMIS_DATASET_CSV", str(config.SAMPLE_DATASET_CSV))
    monkeypatch.setattr(config, "AUDIT_LOG_FILE", str(tmp_path / "audit.jsonl"))


@pytest.fixture
def orchestrator(tmp_path):
    return TargetingOrchestrator(
        dataset_source=CsvDatasetSource(config.SAMPLE_DATASET_CSV),
        profile="column_priority",
        audit_log_file=str(tmp_path / "audit.jsonl")
    )


class TestBuilders:
    """Test profile and source selection."""

    def test_build_resolver(self):
        assert type(build_resolver("column_priority")) is PathwayResolver
        assert isinstance(build_resolver("keyword"), KeywordResolver)

        resolver = build_resolver("column_priority", "edit_distance")
        assert isinstance(resolver.scorer, EditDistanceScorer)

    def test_unknown_profile(self):
        with pytest.raises(ValueError, match="Unknown profile"):
            build_resolver("semantic")

    def test_sheets_source_preferred(self, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_SHEET_ID", "sheet123")
        monkeypatch.setattr(config, "ARTEMIS_DATASET_CSV", "audiences.csv")

        source = build_dataset_source()
        assert isinstance(source, GoogleSheetsSource)
        assert source.spreadsheet_id == "sheet123"

    def test_csv_fallback(self, sample_env):
        assert isinstance(build_dataset_source(), CsvDatasetSource)

    def test_nothing_configured(self, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_SHEET_ID", "")
        monkeypatch.setattr(config, "ARTEMIS_DATASET_CSV", "")

        with pytest.raises(ValueError, match="No dataset configured"):
            build_dataset_source()


class TestTargetingOrchestrator:
    """Test running queries against the sample sheet."""

    def test_run_queries(self, orchestrator, capsys):
        results = orchestrator.run_queries(["car enthusiasts", "xyz nonsense"])

        assert [r.status for r in results] == [
            ResolutionStatus.MATCHED,
            ResolutionStatus.NO_MATCH,
        ]
        output = capsys.readouterr().out
        assert "Auto → Vehicle Owners → Age 25-34" in output
        assert "Query Summary" in output
        assert "Audit log entries" in output

    def test_run_query(self, orchestrator):
        result = orchestrator.run_query("gardening hobbyists")
        assert result.rendered_pathways() == ["Home & Garden → Gardening → Age 55+"]

    def test_demographic_fallback_on_sample(self, orchestrator):
        result = orchestrator.run_query("age 55+")

        assert result.matched_column.label == "Demographic"
        # "age" alone also pulls in the other age bands at 40
        assert result.rendered_pathways()[0] == "Home & Garden → Gardening → Age 55+"
        assert result.top_score == 100.0
        assert result.total_matches == 3

    def test_keyword_profile(self, tmp_path):
        orchestrator = TargetingOrchestrator(
            dataset_source=StaticDatasetSource([
                ["Category", "Grouping", "Demographic", "Description"],
                ["Pets", "Pet Owners", "Dog Owners", "Dog owners"],
            ]),
            profile="keyword",
            audit_log_file=str(tmp_path / "audit.jsonl")
        )
        result = orchestrator.run_query("dog owners")

        assert result.profile == "keyword"
        assert result.status == ResolutionStatus.MATCHED


class TestMain:
    """Test the command-line entry point."""

    def test_no_queries(self, capsys):
        assert main([]) == 2
        assert "Usage" in capsys.readouterr().out

    def test_successful_run(self, sample_env):
        assert main(["car enthusiasts", "xyz nonsense"]) == 0

    def test_unconfigured(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "GOOGLE_SHEET_ID", "")
        monkeypatch.setattr(config, "ARTEMIS_DATASET_CSV", "")

        assert main(["car enthusiasts"]) == 1
        assert "No dataset configured" in capsys.readouterr().out

    def test_fetch_failure_exit_code(self, sample_env, monkeypatch, tmp_path):
        monkeypatch.setattr(config, "ARTEMIS_DATASET_CSV", str(tmp_path / "missing.csv"))
        assert main(["car enthusiasts"]) == 1

    def test_unknown_profile_exit_code(self, sample_env, monkeypatch):
        monkeypatch.setattr(config, "ARTEMIS_PROFILE", "semantic")
        assert main(["car enthusiasts"]) == 1

    def test_module_has_entry_point(self):
        assert callable(orchestrator_module.main)
