"""
Main orchestrator for running the Artemis targeting agent.

This module wires configuration, the dataset source, the resolver profile and
the audit logger together, and provides a command-line entry point for
answering one or more audience queries.
"""

import sys
from typing import List, Optional
from datetime import datetime

from artemis import config
from artemis.agents.targeting_agent import TargetingAgent
from artemis.analyzers.keyword_resolver import KeywordResolver
from artemis.analyzers.match_scorer import get_scorer
from artemis.analyzers.pathway_resolver import PathwayResolver
from artemis.api.local_sources import CsvDatasetSource
from artemis.api.sheets_client import GoogleSheetsSource
from artemis.models.pathway import ResolutionResult, ResolutionStatus
from artemis.utils.audit_logger import AuditLogger


PROFILES = ("column_priority", "keyword")


def build_resolver(profile: str = "column_priority", scorer: str = "phrase_overlap") -> PathwayResolver:
    """
    Build the resolver for a configuration profile.

    Args:
        profile: "column_priority" or "keyword"
        scorer: Scorer name for the column_priority profile

    Returns:
        PathwayResolver or KeywordResolver
    """
    if profile == "keyword":
        return KeywordResolver()
    if profile == "column_priority":
        return PathwayResolver(scorer=get_scorer(scorer))
    raise ValueError(f"Unknown profile '{profile}'. Choose one of: {', '.join(PROFILES)}")


def build_dataset_source():
    """
    Pick a dataset source from the environment.

    Google Sheets when GOOGLE_SHEET_ID is set, else ARTEMIS_DATASET_CSV.
    """
    if config.GOOGLE_SHEET_ID:
        return GoogleSheetsSource()
    if config.ARTEMIS_DATASET_CSV:
        return CsvDatasetSource(config.ARTEMIS_DATASET_CSV)
    raise ValueError(
        "No dataset configured: set GOOGLE_SHEET_ID or ARTEMIS_DATASET_CSV"
    )


class TargetingOrchestrator:
    """
    Orchestrates audience queries against the curation sheet.

    Responsibilities:
    - Choose the dataset source and resolver profile
    - Run TargetingAgent for each query
    - Print per-query results and a summary report
    """

    def __init__(
        self,
        dataset_source=None,
        profile: Optional[str] = None,
        scorer: Optional[str] = None,
        audit_log_file: Optional[str] = None
    ):
        """
        Initialize orchestrator.

        Args:
            dataset_source: Dataset source (default: from environment)
            profile: Resolver profile (default ARTEMIS_PROFILE)
            scorer: Scorer name (default ARTEMIS_SCORER)
            audit_log_file: Path to audit log file (default AUDIT_LOG_FILE)
        """
        self.profile = profile or config.ARTEMIS_PROFILE
        self.scorer = scorer or config.ARTEMIS_SCORER

        self.audit_logger = AuditLogger(log_file=audit_log_file or config.AUDIT_LOG_FILE)
        self.dataset_source = dataset_source or build_dataset_source()
        self.resolver = build_resolver(self.profile, self.scorer)

        self.agent = TargetingAgent(
            dataset_source=self.dataset_source,
            resolver=self.resolver,
            audit_logger=self.audit_logger
        )

    def run_queries(self, queries: List[str]) -> List[ResolutionResult]:
        """
        Answer every query and print a summary.

        Args:
            queries: Free-text audience descriptions

        Returns:
            List of ResolutionResult, one per query
        """
        print(f"\n{'=' * 70}")
        print(f"{config.APP_NAME} Targeting Agent - {len(queries)} quer{'y' if len(queries) == 1 else 'ies'}")
        print(f"Profile: {self.profile}  |  Source: {self.agent.source_name()}")
        print(f"Timestamp: {datetime.utcnow().strftime('%Y-%m-%d %H:%M:%S UTC')}")
        print(f"{'=' * 70}\n")

        results = []
        for query in queries:
            print(f"🔍 {query}")
            result = self.agent.run(query)
            results.append(result)
            print(self._indent(result.response or result.message))
            print()

        self._print_summary(results)
        return results

    def run_query(
        self,
        query: str,
        location: Optional[str] = None,
        demographic: Optional[str] = None
    ) -> ResolutionResult:
        """Answer a single query without printing."""
        return self.agent.run(query, location=location, demographic=demographic)

    def _indent(self, text: str) -> str:
        return "\n".join(f"   {line}" for line in text.splitlines())

    def _get_status_emoji(self, status: ResolutionStatus) -> str:
        return {
            ResolutionStatus.MATCHED: "✅",
            ResolutionStatus.NO_MATCH: "🤷",
            ResolutionStatus.MISSING_COLUMNS: "⚠️",
            ResolutionStatus.NO_DATA: "⚠️",
            ResolutionStatus.FETCH_ERROR: "❌",
        }.get(status, "❓")

    def _print_summary(self, results: List[ResolutionResult]):
        """Print summary report of the run."""
        print(f"{'=' * 70}")
        print("📊 Query Summary")
        print(f"{'=' * 70}\n")

        total = len(results)
        if total == 0:
            print("No queries were run.\n")
            return

        for status in ResolutionStatus:
            count = sum(1 for r in results if r.status == status)
            if count:
                print(f"{self._get_status_emoji(status)} {status.value:<16} {count} ({count/total*100:.1f}%)")

        confidences = [r.confidence for r in results if r.has_matches]
        if confidences:
            breakdown = ", ".join(
                f"{label}: {confidences.count(label)}"
                for label in ("High", "Medium", "Low")
            )
            print(f"\n🎯 Confidence:       {breakdown}")

        audit_stats = self.audit_logger.get_summary_stats()
        print(f"\n📝 Audit log entries: {audit_stats['total_events']}")
        print(f"\n{'=' * 70}\n")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for running the targeting agent.

    Usage:
        python -m artemis.orchestrator "car enthusiasts" "dog owners"
    """
    queries = [q for q in (argv if argv is not None else sys.argv[1:]) if q.strip()]
    if not queries:
        print('Usage: python -m artemis.orchestrator "audience description" [...]')
        return 2

    try:
        orchestrator = TargetingOrchestrator()
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    results = orchestrator.run_queries(queries)
    return 0 if all(r.success for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
