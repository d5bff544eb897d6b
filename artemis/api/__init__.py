"""Dataset sources for the audience curation sheet."""

from artemis.api.sheets_client import GoogleSheetsSource, DatasetFetchError
from artemis.api.local_sources import StaticDatasetSource, CsvDatasetSource

__all__ = [
    "GoogleSheetsSource",
    "DatasetFetchError",
    "StaticDatasetSource",
    "CsvDatasetSource",
]
