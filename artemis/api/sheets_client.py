"""
Google Sheets dataset source.

Reads the audience curation sheet through the Sheets v4 API client using a
service account. Credentials come from the environment (see artemis.config).
"""

import logging
from typing import Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from artemis import config
from artemis.models.pathway import Dataset

logger = logging.getLogger(__name__)

READONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"


class DatasetFetchError(Exception):
    """Raised when the dataset cannot be fetched (transport, auth, config)."""


class GoogleSheetsSource:
    """
    Dataset source backed by a Google Sheet.

    The sheet is fetched fresh on every call; nothing is cached. Failures are
    raised as DatasetFetchError with the underlying message; there is no retry.
    """

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        client_email: Optional[str] = None,
        private_key: Optional[str] = None,
        sheet_range: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        http=None
    ):
        """
        Initialize Sheets source.

        Args:
            spreadsheet_id: Sheet ID (default GOOGLE_SHEET_ID)
            client_email: Service account email (default GOOGLE_CLIENT_EMAIL)
            private_key: Service account key (default GOOGLE_PRIVATE_KEY)
            sheet_range: A1 range to read, e.g. "Audiences!A:Z"
                (default GOOGLE_SHEET_RANGE, "A:Z")
            timeout_seconds: HTTP timeout (default SHEETS_TIMEOUT_SECONDS)
            http: Pre-built httplib2-compatible transport (skips credential setup)
        """
        self.spreadsheet_id = spreadsheet_id if spreadsheet_id is not None else config.GOOGLE_SHEET_ID
        self.client_email = client_email if client_email is not None else config.GOOGLE_CLIENT_EMAIL
        self.private_key = private_key if private_key is not None else config.GOOGLE_PRIVATE_KEY
        self.sheet_range = sheet_range or config.GOOGLE_SHEET_RANGE
        self.timeout_seconds = timeout_seconds or config.SHEETS_TIMEOUT_SECONDS
        self._http = http
        self._service = None

    @property
    def name(self) -> str:
        return f"google_sheets:{self.spreadsheet_id or 'unset'}"

    def _build_http(self):
        """Build an authorized transport from the service account fields."""
        if not self.client_email or not self.private_key:
            raise DatasetFetchError(
                "GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY environment variables must be set"
            )

        info = {
            "type": "service_account",
            "client_email": self.client_email,
            "private_key": self.private_key.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        try:
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=[READONLY_SCOPE]
            )
        except ValueError as e:
            raise DatasetFetchError(f"Invalid service account credentials: {e}") from e

        return AuthorizedHttp(credentials, http=httplib2.Http(timeout=self.timeout_seconds))

    def _get_service(self):
        if self._service is None:
            http = self._http if self._http is not None else self._build_http()
            self._service = build(
                "sheets", "v4",
                http=http,
                cache_discovery=False,
                static_discovery=True
            )
        return self._service

    def fetch_dataset(self) -> Dataset:
        """
        Fetch header row and data rows from the sheet.

        Returns:
            Dataset (may be empty if the sheet has no values)

        Raises:
            DatasetFetchError: On missing configuration, auth or HTTP failure
        """
        if not self.spreadsheet_id:
            raise DatasetFetchError("GOOGLE_SHEET_ID environment variable not set")

        service = self._get_service()

        try:
            payload = (
                service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=self.sheet_range)
                .execute()
            )
        except HttpError as e:
            logger.warning(
                "Sheets API returned HTTP %s for %s: %s",
                e.resp.status, self.spreadsheet_id, e.reason
            )
            raise DatasetFetchError(f"Sheets API request failed: {e}") from e
        except GoogleAuthError as e:
            raise DatasetFetchError(f"Google authentication failed: {e}") from e
        except (httplib2.HttpLib2Error, OSError) as e:
            logger.warning("Sheets API transport failure: %s", e)
            raise DatasetFetchError(f"Sheets API request failed: {e}") from e

        values = payload.get("values") or []
        logger.info("Fetched %d row(s) from sheet %s", len(values), self.spreadsheet_id)
        return Dataset.from_values(values)
