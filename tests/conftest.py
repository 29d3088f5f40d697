import os

import pytest

os.environ["CATALOG_SOURCE"] = "builtin"

from fastapi.testclient import TestClient  # noqa: E402

from gradeplanner import app as app_module  # noqa: E402


class FakeAppwriteService:
    """Records what the API persists instead of talking to Appwrite."""

    def __init__(self):
        self.grade_results = []
        self.snapshots = []

    def save_grade_result(self, uid, level, subject_key, values, result):
        row = {
            "id": f"grade-{len(self.grade_results) + 1}",
            "user_id": uid,
            "level": level,
            "subject_key": subject_key,
            "values": dict(values),
            "score": result.score,
            "letter_grade": result.letter,
            "grade_point": result.points,
        }
        self.grade_results.append(row)
        return {key: value for key, value in row.items() if key not in ("user_id", "values")}

    def list_grade_results(self, uid):
        return [row for row in self.grade_results if row["user_id"] == uid]

    def save_cgpa_snapshot(self, uid, summary):
        self.snapshots.append((uid, summary))
        return {"id": f"cgpa-{len(self.snapshots)}", "cumulative_cgpa": summary.cumulative_cgpa}

    def get_cached_cgpa(self, uid):
        for saved_uid, summary in reversed(self.snapshots):
            if saved_uid == uid:
                return summary.cumulative_cgpa
        return None


@pytest.fixture()
def fake_service(monkeypatch):
    service = FakeAppwriteService()
    monkeypatch.setattr(app_module.AppwriteService, "from_settings", classmethod(lambda cls: service))
    return service


@pytest.fixture()
def client():
    return TestClient(app_module.app)
