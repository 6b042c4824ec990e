import itertools
import os
import shutil
import tempfile
from collections import Counter

import pytest

# Must be set before config is imported so the static mount sees it
UPLOAD_ROOT = tempfile.mkdtemp(prefix="candidate-uploads-")
os.environ["UPLOAD_DIR"] = UPLOAD_ROOT

from fastapi.testclient import TestClient  # noqa: E402

from main import app, get_db  # noqa: E402
from models import FRESHER  # noqa: E402


class InMemoryDatabase:
    """Stands in for Database with the same method surface"""

    def __init__(self):
        self.rows = {}
        self._ids = itertools.count(1)

    def create_candidate(self, candidate, resume_url=""):
        row = {"id": next(self._ids), "resume_url": resume_url, **candidate.model_dump()}
        self.rows[row["id"]] = row
        return dict(row)

    def list_candidates(self):
        return [dict(self.rows[k]) for k in sorted(self.rows)]

    def update_candidate(self, candidate_id, candidate):
        if candidate_id not in self.rows:
            return None
        self.rows[candidate_id].update(candidate.model_dump())
        return dict(self.rows[candidate_id])

    def delete_candidate(self, candidate_id):
        return self.rows.pop(candidate_id, None) is not None

    def get_dashboard_stats(self):
        rows = list(self.rows.values())
        total = len(rows)
        freshers = sum(1 for r in rows if r["specialization"] == FRESHER)
        by_location = Counter(r["location"] for r in rows)
        by_experience = Counter(r["years_experience"] for r in rows)
        return {
            "total_candidates": total,
            "freshers": freshers,
            "experienced": total - freshers,
            "employee_referrals": sum(1 for r in rows if r["employee_referral"]),
            "consultancy_referrals": sum(1 for r in rows if r["consultancy_referral"]),
            "candidates_by_location": [{"location": k, "count": v} for k, v in by_location.items()],
            "candidates_by_experience": [{"years_experience": k, "count": v} for k, v in by_experience.items()],
        }


@pytest.fixture
def store():
    return InMemoryDatabase()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_db] = lambda: store
    # No context manager: the lifespan would open a real connection pool
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session", autouse=True)
def clean_upload_root():
    yield
    shutil.rmtree(UPLOAD_ROOT, ignore_errors=True)


@pytest.fixture
def upload_dir():
    return UPLOAD_ROOT


@pytest.fixture
def fresher_form():
    return {
        "name": "A",
        "specialization": "Fresher",
        "location": "X",
        "years_experience": "0",
        "employee_referral": "false",
        "consultancy_referral": "false",
    }
