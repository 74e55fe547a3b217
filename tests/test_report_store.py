import sqlite3
from datetime import datetime, timezone

import pytest

from safe_routing.data.report_store import ReportStore
from safe_routing.errors import ProviderUnavailableError

SCHEMA = """
CREATE TABLE reports (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    lat REAL NOT NULL,
    lon REAL NOT NULL,
    description TEXT,
    occurred_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "reports.db"
    conn = sqlite3.connect(path)
    conn.execute(SCHEMA)
    conn.executemany(
        "INSERT INTO reports (lat, lon, description, occurred_at) VALUES (?, ?, ?, ?)",
        [
            (43.6532, -79.3832, 'Followed by a stranger', '2025-05-30 22:15:00'),
            (43.6540, -79.3800, 'Poorly lit underpass', '2025-06-01 08:00:00'),
            (95.0, -79.3800, 'Bad coordinates', '2025-06-01 09:00:00'),
        ]
    )
    conn.commit()
    conn.close()
    return path


def test_fetch_reports(db_path):
    reports = ReportStore(db_path).fetch_reports()

    # the out-of-range row is skipped
    assert [r.id for r in reports] == ['1', '2']
    assert reports[0].description == 'Followed by a stranger'
    assert reports[0].occurred_at == datetime(2025, 5, 30, 22, 15, tzinfo=timezone.utc)


def test_fetch_reports_since(db_path):
    reports = ReportStore(db_path).fetch_reports(since='2025-06-01 00:00:00')
    assert [r.id for r in reports] == ['2']


def test_count_includes_every_row(db_path):
    assert ReportStore(db_path).count() == 3


def test_store_is_read_only(db_path):
    store = ReportStore(db_path)
    with store._get_db_connection() as conn:
        with pytest.raises(sqlite3.OperationalError):
            conn.execute("DELETE FROM reports")


def test_missing_database(tmp_path):
    store = ReportStore(tmp_path / "absent.db")
    with pytest.raises(ProviderUnavailableError) as excinfo:
        store.fetch_reports()
    assert excinfo.value.provider == "report_store"


def test_missing_table(tmp_path):
    path = tmp_path / "empty.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE submissions (id INTEGER PRIMARY KEY)")
    conn.commit()
    conn.close()
    with pytest.raises(ProviderUnavailableError):
        ReportStore(path).fetch_reports()
