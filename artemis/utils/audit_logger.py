"""
Audit trail for targeting lookups.

Every query the agent answers is appended to a JSON Lines file together with
the route the workflow took and any upstream failure, so a pathway handed to a
media buyer can be traced back to the sheet row that produced it.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


class AuditLogger:
    """
    Append-only JSONL log of agent activity.

    Event types:
    - search: one per resolved query (status, matched column, pathways, top row)
    - agent_decision: the node the workflow routed to and why
    - error: dataset fetch failures and dataset configuration problems
    """

    def __init__(
        self,
        log_file: str = "audit_log.jsonl",
        log_dir: Optional[str] = None
    ):
        """
        Args:
            log_file: JSONL file name (or path when log_dir is not given)
            log_dir: Directory to create and write into
        """
        if log_dir:
            directory = Path(log_dir)
            directory.mkdir(parents=True, exist_ok=True)
            self.log_path = directory / log_file
        else:
            self.log_path = Path(log_file)

    @staticmethod
    def _timestamp() -> str:
        return datetime.utcnow().isoformat()

    def log_event(self, event: Dict[str, Any]):
        """Append one event, stamping it if the caller did not."""
        event.setdefault("timestamp", self._timestamp())
        with self.log_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(event, ensure_ascii=False) + "\n")

    def log_search(self, result, source: Optional[str] = None):
        """
        Record a finished resolution.

        Args:
            result: ResolutionResult returned by the agent
            source: Dataset source name (e.g. "google_sheets:<id>")
        """
        top = result.top_match
        self.log_event({
            "event_type": "search",
            "query": result.query,
            "profile": result.profile,
            "status": result.status.value,
            "success": result.success,
            "matched_column": result.matched_column.label if result.matched_column else "none",
            "pathways": result.rendered_pathways(),
            "confidence": result.confidence,
            "top_score": top.score if top else None,
            "top_row": top.sheet_row if top else None,
            "total_matches": result.total_matches,
            "missing_columns": list(result.missing_columns),
            "source": source,
        })

    def log_decision(self, query: str, status: str, decision: str, reasoning: str):
        """Record which workflow node handled a query."""
        self.log_event({
            "event_type": "agent_decision",
            "query": query,
            "status": status,
            "decision": decision,
            "reasoning": reasoning,
        })

    def log_error(
        self,
        error_type: str,
        error_message: str,
        query: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Record a failure.

        Args:
            error_type: "dataset_fetch_error", "missing_columns" or "no_data"
            error_message: Underlying message
            query: Query being answered when it happened
            context: Extra fields (source name, missing columns)
        """
        self.log_event({
            "event_type": "error",
            "error_type": error_type,
            "error_message": error_message,
            "query": query,
            "context": dict(context or {}),
        })

    def _read_events(self) -> Iterator[Dict[str, Any]]:
        """Yield parsed events, skipping lines that are not valid JSON."""
        if not self.log_path.exists():
            return
        with self.log_path.open("r", encoding="utf-8") as handle:
            for raw in handle:
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    yield json.loads(raw)
                except json.JSONDecodeError:
                    continue

    def get_events(
        self,
        event_type: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Read events back in the order they were written.

        Args:
            event_type: Only events of this type
            query: Only events for this exact query text
            limit: Stop after this many events

        Returns:
            List of event dictionaries
        """
        selected = []
        for event in self._read_events():
            if event_type and event.get("event_type") != event_type:
                continue
            if query and event.get("query") != query:
                continue
            selected.append(event)
            if limit and len(selected) >= limit:
                break
        return selected

    def get_summary_stats(self) -> Dict[str, Any]:
        """
        Aggregate the log for the CLI summary and the UI.

        Returns:
            Counts per event type, searches per status, and matched
            searches per column
        """
        stats: Dict[str, Any] = {
            "total_events": 0,
            "event_types": {},
            "searches_by_status": {},
            "matches_by_column": {},
        }
        if not self.log_path.exists():
            return stats

        for event in self._read_events():
            stats["total_events"] += 1
            kind = event.get("event_type", "unknown")
            stats["event_types"][kind] = stats["event_types"].get(kind, 0) + 1

            if kind != "search":
                continue
            status = event.get("status", "unknown")
            by_status = stats["searches_by_status"]
            by_status[status] = by_status.get(status, 0) + 1
            if status == "matched":
                column = event.get("matched_column", "none")
                by_column = stats["matches_by_column"]
                by_column[column] = by_column.get(column, 0) + 1

        stats["log_file"] = str(self.log_path)
        stats["log_size_bytes"] = self.log_path.stat().st_size
        return stats

    def clear_log(self):
        """Delete the log file. All audit records are lost."""
        if self.log_path.exists():
            self.log_path.unlink()
        print(f"🗑️  Audit log cleared: {self.log_path}")

    def export_to_json(self, output_file: str):
        """Write every event to a pretty-printed JSON array."""
        events = self.get_events()
        Path(output_file).write_text(
            json.dumps(events, indent=2, ensure_ascii=False),
            encoding="utf-8"
        )
        print(f"✅ Exported {len(events)} audit events to {output_file}")
