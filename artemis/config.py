"""
Environment configuration for the Artemis targeting agent.

Every setting can be overridden through an environment variable; nothing is
read from disk.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SAMPLE_DATASET_CSV = PROJECT_ROOT / "data" / "sample_audiences.csv"

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Artemis"
APP_VERSION = "0.1.0"
SHEET_TITLE = "June 5th Addressable Audience Curation Demographics"

# ---------------------------------------------------------------------------
# Google Sheets (service account)
#
# GOOGLE_PRIVATE_KEY is usually stored with literal "\n" sequences; the
# sheets client restores real newlines before building credentials.
# ---------------------------------------------------------------------------

GOOGLE_SHEET_ID = os.getenv("GOOGLE_SHEET_ID", "").strip()
GOOGLE_CLIENT_EMAIL = os.getenv("GOOGLE_CLIENT_EMAIL", "").strip()
GOOGLE_PRIVATE_KEY = os.getenv("GOOGLE_PRIVATE_KEY", "")
GOOGLE_SHEET_RANGE = os.getenv("GOOGLE_SHEET_RANGE", "A:Z").strip()
SHEETS_TIMEOUT_SECONDS = float(os.getenv("SHEETS_TIMEOUT_SECONDS", "30"))

# ---------------------------------------------------------------------------
# Local dataset fallback and agent behavior
# ---------------------------------------------------------------------------

ARTEMIS_DATASET_CSV = os.getenv("ARTEMIS_DATASET_CSV", "").strip()

# "column_priority" (default) or "keyword"
ARTEMIS_PROFILE = os.getenv("ARTEMIS_PROFILE", "column_priority").strip()

# "phrase_overlap" (default) or "edit_distance"
ARTEMIS_SCORER = os.getenv("ARTEMIS_SCORER", "phrase_overlap").strip()

AUDIT_LOG_FILE = os.getenv("AUDIT_LOG_FILE", "audit_log.jsonl").strip()
