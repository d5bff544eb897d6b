"""
Local dataset sources for demos and tests.

StaticDatasetSource serves an in-memory grid and can simulate fetch failures;
CsvDatasetSource reads a CSV export of the audience sheet with pandas.
"""

from pathlib import Path
from typing import Any, List, Optional, Union

import pandas as pd

from artemis.api.sheets_client import DatasetFetchError
from artemis.models.pathway import Dataset


class StaticDatasetSource:
    """
    In-memory dataset source.

    Mirrors GoogleSheetsSource.fetch_dataset() without any network access.
    """

    def __init__(
        self,
        values: Optional[List[List[Any]]] = None,
        fail_with: Optional[str] = None
    ):
        """
        Initialize static source.

        Args:
            values: Grid whose first row is the header
            fail_with: If set, fetch_dataset() raises DatasetFetchError with
                this message
        """
        self.values = values or []
        self.fail_with = fail_with
        self.fetch_count = 0

    @property
    def name(self) -> str:
        return "static"

    def fetch_dataset(self) -> Dataset:
        self.fetch_count += 1
        if self.fail_with:
            raise DatasetFetchError(self.fail_with)
        return Dataset.from_values(self.values)


class CsvDatasetSource:
    """Dataset source reading a CSV export of the audience sheet."""

    def __init__(self, path_or_buffer: Union[str, Path, Any]):
        """
        Initialize CSV source.

        Args:
            path_or_buffer: File path or file-like object (e.g. an upload)
        """
        self.path_or_buffer = path_or_buffer

    @property
    def name(self) -> str:
        if isinstance(self.path_or_buffer, (str, Path)):
            return f"csv:{self.path_or_buffer}"
        return "csv:upload"

    def fetch_dataset(self) -> Dataset:
        """
        Read the CSV with every cell as a string and blanks as "".

        Raises:
            DatasetFetchError: If the file is missing or unreadable
        """
        if hasattr(self.path_or_buffer, "seek"):
            self.path_or_buffer.seek(0)

        try:
            df = pd.read_csv(self.path_or_buffer, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            return Dataset(headers=[], rows=[])
        except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
            raise DatasetFetchError(f"Could not read CSV dataset: {e}") from e

        headers = [str(column) for column in df.columns]
        rows = df.values.tolist()
        return Dataset.from_values([headers] + rows)
