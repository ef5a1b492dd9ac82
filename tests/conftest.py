import sqlite3
import threading

import pytest
from fastapi.testclient import TestClient

from floatdash.dependencies import get_registry, get_warehouse
from floatdash.main import app
from floatdash.registry import Registry

PROFILE_SCHEMA = """
CREATE TABLE profiles (
    profile_id INTEGER PRIMARY KEY,
    platform_number TEXT,
    cycle_number INTEGER,
    latitude REAL,
    longitude REAL,
    juld REAL,
    date_creation TEXT,
    data_centre TEXT,
    data_mode TEXT,
    platform_type TEXT,
    project_name TEXT,
    pi_name TEXT,
    profile_temp_qc TEXT,
    profile_psal_qc TEXT,
    profile_pres_qc TEXT,
    position_qc TEXT,
    juld_qc TEXT
)
"""

MEASUREMENT_SCHEMA = """
CREATE TABLE measurements (
    profile_id INTEGER,
    level_index INTEGER,
    pres_adjusted REAL,
    temp_adjusted REAL,
    psal_adjusted REAL,
    temp_qc TEXT,
    psal_qc TEXT,
    pres_qc TEXT,
    temp_adjusted_error REAL,
    psal_adjusted_error REAL,
    pres_adjusted_error REAL
)
"""

# 25 profiles from data centre ME, 10 from AO.
ME_PROFILES = 25
AO_PROFILES = 10
ME_MEASUREMENTS = (ME_PROFILES - 1) * 2 + 3


def _profile_rows():
    rows = []
    for pid in range(1, ME_PROFILES + 1):
        rows.append((
            pid, f"59{pid:05d}", pid, -60.0 + pid * 4, pid * 10.0 - 120, 27000.0 + pid,
            f"2024-01-{pid:02d}T00:00:00Z", "ME", "R" if pid % 2 else "A", "APEX",
            "US ARGO PROJECT", "BRECK OWENS",
            "C" if pid == 3 else "A", "A", "A",
            "2" if pid == 2 else "1", "1",
        ))
    qcs = {26: ("B", "1", "2"), 27: ("F", "F", "F")}
    for pid in range(ME_PROFILES + 1, ME_PROFILES + AO_PROFILES + 1):
        temp, psal, pres = qcs.get(pid, ("1", "1", "1"))
        rows.append((
            pid, f"69{pid:05d}", 1, 50.0, 150.0, 26000.0 + pid,
            f"2023-06-{pid - ME_PROFILES:02d}T00:00:00Z", "AO", "D", "ARVOR",
            "CORIOLIS", "SUSAN WIJFFELS", temp, psal, pres, "1", "1",
        ))
    return rows


def _measurement_rows():
    rows = [
        (1, 2, 20.0, 14.1, 35.2, "1", "1", "1", 0.002, 0.01, 2.4),
        (1, 0, 5.0, 18.3, 35.0, None, "1", "1", 0.002, 0.01, 2.4),
        (1, 1, 10.0, 16.7, 35.1, "1", "1", "1", 0.002, 0.01, 2.4),
    ]
    for pid in range(2, ME_PROFILES + AO_PROFILES + 1):
        rows.append((pid, 0, 5.0, 20.0, 34.9, "1", "1", "1", None, None, None))
        rows.append((pid, 1, 10.0, 19.0, 35.0, "1", "1", "1", None, None, None))
    return rows


def seed(path):
    conn = sqlite3.connect(path)
    try:
        conn.execute(PROFILE_SCHEMA)
        conn.execute(MEASUREMENT_SCHEMA)
        conn.executemany(f"INSERT INTO profiles VALUES ({', '.join('?' * 17)})", _profile_rows())
        conn.executemany(f"INSERT INTO measurements VALUES ({', '.join('?' * 11)})", _measurement_rows())
        conn.commit()
    finally:
        conn.close()


class SqliteWarehouse:
    """Runs the generated SQL against a seeded SQLite file."""

    def __init__(self, path):
        self.path = str(path)
        self.executed = []
        self._lock = threading.Lock()

    def execute(self, sql, params=None):
        with self._lock:
            self.executed.append((sql, list(params or [])))
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            cur = conn.execute(sql, list(params or []))
            return [{k.lower(): r[k] for k in r.keys()} for r in cur.fetchall()]
        finally:
            conn.close()


@pytest.fixture
def registry():
    return Registry(entities={
        "profiles": {"view": "profiles"},
        "measurements": {"view": "measurements"},
    })


@pytest.fixture
def warehouse(tmp_path):
    path = tmp_path / "argo.db"
    seed(path)
    return SqliteWarehouse(path)


@pytest.fixture
def client_for(registry):
    """Build a TestClient whose routes use the given warehouse."""

    def make(warehouse):
        app.dependency_overrides[get_warehouse] = lambda: warehouse
        app.dependency_overrides[get_registry] = lambda: registry
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for, warehouse):
    return client_for(warehouse)
