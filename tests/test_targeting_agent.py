"""
Unit tests for TargetingAgent.

Tests the LangGraph workflow end to end against in-memory dataset sources:
routing per outcome, the tool payload, and the audit trail.
"""

import pytest
from artemis.agents.targeting_agent import TargetingAgent, TOOL_SPEC
from artemis.analyzers.keyword_resolver import KeywordResolver
from artemis.api.local_sources import StaticDatasetSource
from artemis.models.pathway import ResolutionStatus
from artemis.utils.audit_logger import AuditLogger


VALUES = [
    ["Category", "Grouping", "Demographic", "Description", "Region"],
    ["Auto", "Vehicle Owners", "Age 25-34", "Car enthusiasts interested in performance vehicles", "Texas"],
    ["Pets", "Pet Owners", "Dog Owners", "Dog owners purchasing premium pet food", "California"],
]


@pytest.fixture
def audit_logger(tmp_path):
    """Create AuditLogger writing into a temp directory."""
    return AuditLogger(log_file="test_audit.jsonl", log_dir=str(tmp_path))


@pytest.fixture
def source():
    return StaticDatasetSource(VALUES)


@pytest.fixture
def agent(source, audit_logger):
    """Create TargetingAgent with the default column-priority resolver."""
    return TargetingAgent(dataset_source=source, audit_logger=audit_logger)


class TestWorkflowOutcomes:
    """Test each route through the graph."""

    def test_matched(self, agent):
        result = agent.run("car enthusiasts")

        assert result.status == ResolutionStatus.MATCHED
        assert result.rendered_pathways() == ["Auto → Vehicle Owners → Age 25-34"]
        assert result.confidence == "High"
        assert result.response.startswith("🎯")

    def test_no_match(self, agent):
        result = agent.run("xyz nonsense")

        assert result.status == ResolutionStatus.NO_MATCH
        assert result.success is True
        assert result.suggestions

    def test_missing_columns(self, audit_logger):
        source = StaticDatasetSource([
            ["Category", "Grouping", "Description"],
            ["Auto", "Vehicle Owners", "Car enthusiasts"],
        ])
        agent = TargetingAgent(dataset_source=source, audit_logger=audit_logger)
        result = agent.run("car enthusiasts")

        assert result.status == ResolutionStatus.MISSING_COLUMNS
        assert result.success is False
        assert result.missing_columns == ["Demographic"]

    def test_empty_sheet(self, audit_logger):
        agent = TargetingAgent(dataset_source=StaticDatasetSource([]), audit_logger=audit_logger)
        result = agent.run("car enthusiasts")

        assert result.status == ResolutionStatus.NO_DATA
        assert result.message == "No data found in the Google Sheet"

    def test_fetch_error(self, audit_logger):
        source = StaticDatasetSource(VALUES, fail_with="403 The caller does not have permission")
        agent = TargetingAgent(dataset_source=source, audit_logger=audit_logger)
        result = agent.run("car enthusiasts")

        assert result.status == ResolutionStatus.FETCH_ERROR
        assert result.success is False
        assert result.message == (
            "Error accessing Google Sheet: 403 The caller does not have permission"
        )
        assert "Check Google Sheets API credentials" in result.suggestions
        assert result.pathways == []


class TestRunBehavior:
    """Test query validation and per-call fetching."""

    def test_empty_query_raises_without_fetch(self, agent, source):
        with pytest.raises(ValueError, match="empty"):
            agent.run("   ")
        assert source.fetch_count == 0

    def test_fetches_on_every_run(self, agent, source):
        agent.run("car enthusiasts")
        agent.run("dog owners")
        assert source.fetch_count == 2

    def test_run_batch(self, agent):
        results = agent.run_batch(["car enthusiasts", "dog owners", "xyz nonsense"])

        assert [r.status for r in results] == [
            ResolutionStatus.MATCHED,
            ResolutionStatus.MATCHED,
            ResolutionStatus.NO_MATCH,
        ]
        assert results[1].rendered_pathways() == ["Pets → Pet Owners → Dog Owners"]

    def test_keyword_profile_with_location(self, source, audit_logger):
        agent = TargetingAgent(
            dataset_source=source,
            resolver=KeywordResolver(),
            audit_logger=audit_logger
        )
        result = agent.run("car enthusiasts", location="Texas")

        assert result.profile == "keyword"
        assert result.status == ResolutionStatus.MATCHED
        # 5 + 5 + 12 in Description, 8 for Texas in Region, 3 Region boost
        assert result.message == (
            'Found 1 pathway(s) for "car enthusiasts" in Texas. Top match has score 33.'
        )
        assert any("Location" in d for d in result.top_match.match_details)

    def test_column_priority_ignores_focus(self, agent):
        """Test that an unscored focus is not claimed in the summary."""
        plain = agent.run("car enthusiasts")
        focused = agent.run("car enthusiasts", location="Texas", demographic="25-34")

        assert focused.top_score == plain.top_score
        assert focused.message == plain.message
        assert "Texas" not in focused.message
        assert "demographics" not in focused.response


class TestToolInterface:
    """Test the tool-call payload."""

    def test_tool_spec(self):
        assert TOOL_SPEC["name"] == "fetch-geotargeting-tool"
        assert TOOL_SPEC["parameters"]["required"] == ["query"]

    def test_execute(self, agent):
        payload = agent.execute({"query": "car enthusiasts"})

        assert payload["success"] is True
        assert payload["status"] == "matched"
        assert payload["matchedColumn"] == "Description"
        assert payload["pathways"] == ["Auto → Vehicle Owners → Age 25-34"]
        assert payload["topMatch"]["row"] == 2

    def test_execute_fetch_error(self, audit_logger):
        agent = TargetingAgent(
            dataset_source=StaticDatasetSource(fail_with="timeout"),
            audit_logger=audit_logger
        )
        payload = agent.execute({"query": "car enthusiasts"})

        assert payload["success"] is False
        assert payload["status"] == "fetch_error"
        assert "timeout" in payload["message"]

    def test_execute_missing_query(self, agent):
        with pytest.raises(ValueError):
            agent.execute({})


class TestAuditTrail:
    """Test what the workflow writes to the audit log."""

    def test_search_and_decision_logged(self, agent, audit_logger):
        agent.run("car enthusiasts")

        searches = audit_logger.get_events(event_type="search")
        decisions = audit_logger.get_events(event_type="agent_decision")

        assert len(searches) == 1
        assert searches[0]["status"] == "matched"
        assert searches[0]["matched_column"] == "Description"
        assert searches[0]["source"] == "static"
        assert decisions[0]["decision"] == "format_pathways"

    def test_no_match_decision(self, agent, audit_logger):
        agent.run("xyz nonsense")

        decisions = audit_logger.get_events(event_type="agent_decision")
        assert decisions[0]["decision"] == "suggest_alternatives"

    def test_fetch_error_logged(self, audit_logger):
        agent = TargetingAgent(
            dataset_source=StaticDatasetSource(fail_with="quota exceeded"),
            audit_logger=audit_logger
        )
        agent.run("car enthusiasts")

        errors = audit_logger.get_events(event_type="error")
        assert errors[0]["error_type"] == "dataset_fetch_error"
        assert errors[0]["error_message"] == "quota exceeded"

        decisions = audit_logger.get_events(event_type="agent_decision")
        assert decisions[0]["decision"] == "handle_fetch_error"

        searches = audit_logger.get_events(event_type="search")
        assert searches[0]["status"] == "fetch_error"

    def test_dataset_issue_logged(self, audit_logger):
        agent = TargetingAgent(
            dataset_source=StaticDatasetSource([["Category"], ["Auto"]]),
            audit_logger=audit_logger
        )
        agent.run("car")

        errors = audit_logger.get_events(event_type="error")
        assert errors[0]["error_type"] == "missing_columns"
        assert errors[0]["context"]["missing_columns"] == ["Grouping", "Demographic", "Description"]

        decisions = audit_logger.get_events(event_type="agent_decision")
        assert decisions[0]["decision"] == "report_dataset_issue"
