"""
TargetingAgent: LangGraph workflow behind the geotargeting tool.

This module implements the tool the hosted agent calls. Each query runs
through a small state machine: fetch the sheet, resolve pathways, route on the
outcome, and write the audit trail. Every outcome, including upstream
failures, comes back as a ResolutionResult rather than an exception.
"""

from typing import TypedDict, Optional, Dict, Any, List, Literal
from langgraph.graph import StateGraph, END

from artemis.analyzers.keyword_resolver import KeywordResolver
from artemis.analyzers.pathway_resolver import PathwayResolver
from artemis.api.sheets_client import DatasetFetchError
from artemis.models.pathway import Dataset, ResolutionResult, ResolutionStatus
from artemis.utils.audit_logger import AuditLogger


TOOL_NAME = "fetch-geotargeting-tool"

TOOL_SPEC = {
    "name": TOOL_NAME,
    "description": (
        "Search and analyze the June 5th Addressable Audience Curation "
        "Demographics Google Sheet for geotargeting insights"
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search query for demographic and geotargeting data"
            },
            "location": {
                "type": "string",
                "description": "Specific location or geographic area to focus on (optional)"
            },
            "demographic": {
                "type": "string",
                "description": "Specific demographic criteria to filter by (optional)"
            }
        },
        "required": ["query"]
    },
}

FETCH_ERROR_SUGGESTIONS = [
    "Check Google Sheets API credentials",
    "Verify GOOGLE_SHEET_ID environment variable",
    "Ensure sheet permissions are set correctly",
]


class AgentState(TypedDict):
    """
    State passed between nodes in the LangGraph workflow.

    Created fresh for every query; nothing carries over between runs.
    """
    query: str
    location: Optional[str]
    demographic: Optional[str]
    dataset: Optional[Dataset]
    error: Optional[str]
    result: Optional[ResolutionResult]


class TargetingAgent:
    """
    LangGraph-based tool workflow for audience pathway lookups.

    Workflow:
    1. Fetch the audience sheet from the dataset source
    2. Resolve the query with the configured profile
    3. Route on the outcome (matched / no match / dataset issue / fetch error)
    4. Write the audit trail and return the tool payload
    """

    def __init__(
        self,
        dataset_source,
        resolver: Optional[PathwayResolver] = None,
        audit_logger: Optional[AuditLogger] = None
    ):
        """
        Initialize TargetingAgent.

        Args:
            dataset_source: Object with fetch_dataset() -> Dataset
                (GoogleSheetsSource, CsvDatasetSource, StaticDatasetSource)
            resolver: PathwayResolver or KeywordResolver (default PathwayResolver)
            audit_logger: Optional AuditLogger instance
        """
        self.dataset_source = dataset_source
        self.resolver = resolver or PathwayResolver()
        self.audit_logger = audit_logger or AuditLogger()

        self.graph = self._build_graph()

    def _build_graph(self):
        """
        Construct the LangGraph state machine.

        Returns:
            Compiled StateGraph ready for execution
        """
        workflow = StateGraph(AgentState)

        workflow.add_node("fetch_dataset", self.fetch_dataset)
        workflow.add_node("handle_fetch_error", self.handle_fetch_error)
        workflow.add_node("resolve_pathways", self.resolve_pathways)
        workflow.add_node("format_pathways", self.format_pathways)
        workflow.add_node("suggest_alternatives", self.suggest_alternatives)
        workflow.add_node("report_dataset_issue", self.report_dataset_issue)
        workflow.add_node("audit_and_respond", self.audit_and_respond)

        workflow.set_entry_point("fetch_dataset")

        # Fetch gate: upstream failures skip resolution entirely
        workflow.add_conditional_edges(
            "fetch_dataset",
            self.route_after_fetch,
            {
                "fetch_failed": "handle_fetch_error",
                "fetched": "resolve_pathways"
            }
        )

        workflow.add_conditional_edges(
            "resolve_pathways",
            self.route_by_status,
            {
                "matched": "format_pathways",
                "no_match": "suggest_alternatives",
                "dataset_issue": "report_dataset_issue"
            }
        )

        workflow.add_edge("handle_fetch_error", "audit_and_respond")
        workflow.add_edge("format_pathways", "audit_and_respond")
        workflow.add_edge("suggest_alternatives", "audit_and_respond")
        workflow.add_edge("report_dataset_issue", "audit_and_respond")
        workflow.add_edge("audit_and_respond", END)

        return workflow.compile()

    # ===================
    # Node Implementations
    # ===================

    def fetch_dataset(self, state: AgentState) -> AgentState:
        """Fetch the sheet; record the error instead of raising."""
        try:
            state["dataset"] = self.dataset_source.fetch_dataset()
        except DatasetFetchError as e:
            state["error"] = str(e)
            self.audit_logger.log_error(
                error_type="dataset_fetch_error",
                error_message=str(e),
                query=state["query"],
                context={"source": self.source_name()}
            )
        return state

    def resolve_pathways(self, state: AgentState) -> AgentState:
        """Run the configured resolver profile."""
        if isinstance(self.resolver, KeywordResolver):
            result = self.resolver.resolve(
                state["query"],
                state["dataset"],
                location=state.get("location"),
                demographic=state.get("demographic")
            )
        else:
            result = self.resolver.resolve(state["query"], state["dataset"])

        state["result"] = result
        return state

    # ================
    # Routing Functions
    # ================

    def route_after_fetch(self, state: AgentState) -> Literal["fetch_failed", "fetched"]:
        if state.get("error"):
            return "fetch_failed"
        return "fetched"

    def route_by_status(self, state: AgentState) -> Literal["matched", "no_match", "dataset_issue"]:
        """
        Route on the resolution status.

        MISSING_COLUMNS and NO_DATA share one node; both mean the sheet itself
        needs attention rather than the query.
        """
        status = state["result"].status
        if status == ResolutionStatus.MATCHED:
            return "matched"
        if status == ResolutionStatus.NO_MATCH:
            return "no_match"
        return "dataset_issue"

    # =============
    # Action Nodes
    # =============

    def handle_fetch_error(self, state: AgentState) -> AgentState:
        """Upstream failure: opaque error with the underlying message attached."""
        result = ResolutionResult(
            status=ResolutionStatus.FETCH_ERROR,
            query=state["query"],
            profile=self.resolver.profile,
            suggestions=list(FETCH_ERROR_SUGGESTIONS),
            message=f"Error accessing Google Sheet: {state['error']}",
        )
        result.response = self.resolver.generate_response(result)
        state["result"] = result

        self.audit_logger.log_decision(
            query=state["query"],
            status=result.status.value,
            decision="handle_fetch_error",
            reasoning=state["error"]
        )
        return state

    def format_pathways(self, state: AgentState) -> AgentState:
        """Matched: record where the pathways came from."""
        result = state["result"]

        self.audit_logger.log_decision(
            query=state["query"],
            status=result.status.value,
            decision="format_pathways",
            reasoning=(
                f"{result.total_matches} candidate(s) in "
                f"{result.matched_column.label if result.matched_column else 'all columns'}, "
                f"top score {result.top_score:.0f} ({result.confidence})"
            )
        )
        return state

    def suggest_alternatives(self, state: AgentState) -> AgentState:
        """No match: hand suggestions back for the user."""
        result = state["result"]

        self.audit_logger.log_decision(
            query=state["query"],
            status=result.status.value,
            decision="suggest_alternatives",
            reasoning=(
                "No candidate reached the relevance threshold in: "
                + (", ".join(role.label for role in result.searched_columns) or "all columns")
            )
        )
        return state

    def report_dataset_issue(self, state: AgentState) -> AgentState:
        """Missing columns or empty sheet: the sheet needs fixing, not the query."""
        result = state["result"]

        self.audit_logger.log_error(
            error_type=result.status.value,
            error_message=result.message,
            query=state["query"],
            context={
                "source": self.source_name(),
                "missing_columns": list(result.missing_columns)
            }
        )
        self.audit_logger.log_decision(
            query=state["query"],
            status=result.status.value,
            decision="report_dataset_issue",
            reasoning=result.message
        )
        return state

    def audit_and_respond(self, state: AgentState) -> AgentState:
        """Write the search event to the audit trail."""
        self.audit_logger.log_search(state["result"], source=self.source_name())
        return state

    # ===================
    # Public Interface
    # ===================

    def run(
        self,
        query: str,
        location: Optional[str] = None,
        demographic: Optional[str] = None
    ) -> ResolutionResult:
        """
        Execute the full workflow for one query.

        Args:
            query: Free-text audience description
            location: Optional geographic focus (keyword profile only)
            demographic: Optional demographic focus (keyword profile only)

        Returns:
            ResolutionResult for the query

        Raises:
            ValueError: If the query is empty after trimming
        """
        query = (query or "").strip()
        if not query:
            raise ValueError("Query must not be empty")

        initial_state = AgentState(
            query=query,
            location=location,
            demographic=demographic,
            dataset=None,
            error=None,
            result=None
        )

        final_state = self.graph.invoke(initial_state)

        return final_state["result"]

    def run_batch(self, queries: List[str]) -> List[ResolutionResult]:
        """
        Execute the workflow for multiple queries.

        Args:
            queries: List of free-text queries

        Returns:
            List of ResolutionResult objects
        """
        return [self.run(query) for query in queries]

    def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Tool-call entry point matching TOOL_SPEC.

        Args:
            params: {"query": ..., "location": ..., "demographic": ...}

        Returns:
            Tool payload dictionary (ResolutionResult.to_dict())
        """
        result = self.run(
            params.get("query", ""),
            location=params.get("location"),
            demographic=params.get("demographic")
        )
        return result.to_dict()

    def source_name(self) -> str:
        return getattr(self.dataset_source, "name", type(self.dataset_source).__name__)
