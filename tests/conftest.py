import os
import tempfile

# Keep log files out of the package directory during tests
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="slip_engine_logs_"))

import pytest

from slip_engine.engine import Match


def make_matches(n, odds=None):
    return [
        Match(
            match_id=f"m-{i}",
            home_team=f"Home {i}",
            away_team=f"Away {i}",
            odds=dict(odds) if odds is not None else {"1": 1.5, "X": 3.2, "2": 4.0},
        )
        for i in range(n)
    ]


@pytest.fixture
def matches():
    return make_matches(6)


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from slip_engine.app import app

    with TestClient(app) as c:
        yield c
