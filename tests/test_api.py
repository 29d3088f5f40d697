from gradeplanner import app as app_module
from gradeplanner.services.appwrite_service import AppwriteServiceError


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_catalog_for_level_and_branch(client):
    body = client.get("/catalog/foundation").json()
    assert body["catalog_key"] == "foundation"
    maths1 = next(subject for subject in body["subjects"] if subject["key"] == "maths1")
    assert [item["id"] for item in maths1["fields"]] == ["Qz1", "Qz2", "F"]
    assert maths1["formula"].startswith("max(")

    es = client.get("/catalog/diploma", params={"branch": "Electronic Systems"}).json()
    assert es["catalog_key"] == "diploma-electronic-systems"
    assert all(subject["key"].startswith("es_") for subject in es["subjects"])


def test_catalog_empty_state(client):
    body = client.get("/catalog/postgrad", params={"branch": "data-science"}).json()
    assert body["subjects"] == []
    assert body["message"] == "No subjects found for postgrad (data-science)"


def test_evaluate(client):
    resp = client.post(
        "/grades/evaluate",
        json={"level": "foundation", "subject_key": "python", "values": {"Qz1": 80, "OPPE1": 90, "OPPE2": 70, "F": 0}},
    )
    assert resp.status_code == 200
    assert resp.json() == {"score": 48.5, "letter": "E", "points": 4}


def test_evaluate_clamps_out_of_range_values(client):
    resp = client.post(
        "/grades/evaluate",
        json={"subject_key": "maths1", "values": {"Qz1": 500, "Qz2": 500, "F": 500}},
    )
    assert resp.json()["score"] == 100


def test_evaluate_unknown_subject(client):
    resp = client.post("/grades/evaluate", json={"level": "degree", "subject_key": "maths1", "values": {}})
    assert resp.status_code == 404
    assert "maths1" in resp.json()["detail"]


def test_predict_single_target(client):
    resp = client.post(
        "/grades/predict",
        json={"subject_key": "maths1", "values": {"Qz1": 60, "Qz2": 60}, "target_grade": "s"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"S": {"required": None, "possible": False, "final_grade": 78.0, "guaranteed": False}}


def test_predict_all_targets(client):
    resp = client.post("/grades/predict", json={"subject_key": "maths1", "values": {"Qz1": 80, "Qz2": 70}})
    body = resp.json()
    assert list(body) == ["S", "A", "B", "C", "D", "E"]
    assert body["A"]["required"] == 86.67
    assert body["A"]["possible"] is True


def test_cgpa_summary(client):
    resp = client.post(
        "/cgpa/summary",
        json={
            "courses": [{"name": "Course 1", "credits": 4, "grade": "10"}],
            "current_cgpa": 8.0,
            "credits_completed": 40,
            "target_cgpa": 8.5,
            "future_credits": 0,
        },
    )
    body = resp.json()
    assert body["cumulative_cgpa"] == 8.18
    assert body["total_credits"] == 44
    assert body["distribution"]["S"] == 1
    assert body["tier"] == "Very Good"
    assert body["projection"] == {"required_gpa": None, "possible": False}


def test_cgpa_summary_rejects_unknown_grade(client):
    resp = client.post("/cgpa/summary", json={"courses": [{"credits": 4, "grade": "11"}]})
    assert resp.status_code == 422


def test_results_require_user(client):
    resp = client.get("/results/grades")
    assert resp.status_code == 401


def test_save_then_list_grade_results(client, fake_service):
    headers = {"x-user-id": "user-1"}
    resp = client.post(
        "/results/grades",
        json={"subject_key": "maths1", "values": {"Qz1": 100, "Qz2": 100, "F": 100}},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["letter_grade"] == "S"

    rows = client.get("/results/grades", headers=headers).json()
    assert len(rows) == 1
    assert rows[0]["subject_key"] == "maths1"
    assert client.get("/results/grades", headers={"x-user-id": "user-2"}).json() == []


def test_save_cgpa_snapshot(client, fake_service):
    resp = client.post(
        "/results/cgpa",
        json={"courses": [{"name": "Course 1", "credits": 4, "grade": "9"}]},
        headers={"x-user-id": "user-1"},
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == "cgpa-1"
    assert fake_service.snapshots[0][1].cumulative_cgpa == 9


def test_cached_cgpa_follows_latest_snapshot(client, fake_service):
    headers = {"x-user-id": "user-1"}
    assert client.get("/results/cgpa", headers=headers).json() == {"cumulative_cgpa": None}
    client.post("/results/cgpa", json={"courses": [{"credits": 4, "grade": "8"}]}, headers=headers)
    resp = client.get("/results/cgpa", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"cumulative_cgpa": 8}
    assert client.get("/results/cgpa").status_code == 401


def test_service_errors_become_bad_request(client, monkeypatch):
    def unavailable(cls):
        raise AppwriteServiceError("Missing APPWRITE_ENDPOINT in environment")

    monkeypatch.setattr(app_module.AppwriteService, "from_settings", classmethod(unavailable))
    resp = client.get("/results/grades", headers={"x-user-id": "user-1"})
    assert resp.status_code == 400
    assert "APPWRITE_ENDPOINT" in resp.json()["detail"]
