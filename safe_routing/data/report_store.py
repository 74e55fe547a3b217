"""
Read-only access to the incident report database.

Reports are written by the submission service; this module only reads the
`reports` table (id, lat, lon, description, occurred_at).
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional, Union

from ..errors import InputError, ProviderUnavailableError
from .data_loader import report_from_record
from .models import IncidentReport

logger = logging.getLogger(__name__)


class ReportStore:
    """
    SQLite-backed report snapshot provider.
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Args:
            db_path: Path to the SQLite database holding the reports table
        """
        self.db_path = Path(db_path)

    @contextmanager
    def _get_db_connection(self):
        """Get a read-only database connection with proper cleanup."""
        if not self.db_path.exists():
            raise ProviderUnavailableError(
                f"Report database not found: {self.db_path}", provider="report_store"
            )
        conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        try:
            yield conn
        finally:
            conn.close()

    def fetch_reports(self, since: Optional[str] = None) -> List[IncidentReport]:
        """
        Read the current report set.

        Args:
            since: Optional SQLite timestamp; only reports at or after it are returned

        Returns:
            List of IncidentReport ordered by id
        """
        query = "SELECT id, lat, lon, description, occurred_at FROM reports"
        params = ()
        if since is not None:
            query += " WHERE occurred_at >= ?"
            params = (since,)
        query += " ORDER BY id"

        try:
            with self._get_db_connection() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise ProviderUnavailableError(f"Report store query failed: {e}",
                                           provider="report_store") from e

        reports = []
        for row in rows:
            try:
                reports.append(report_from_record(dict(row)))
            except InputError as e:
                logger.warning(f"Skipping malformed report {row['id']}: {e}")

        logger.info(f"Read {len(reports)} reports from {self.db_path}")
        return reports

    def count(self) -> int:
        try:
            with self._get_db_connection() as conn:
                return conn.execute("SELECT COUNT(*) FROM reports").fetchone()[0]
        except sqlite3.Error as e:
            raise ProviderUnavailableError(f"Report store query failed: {e}",
                                           provider="report_store") from e
