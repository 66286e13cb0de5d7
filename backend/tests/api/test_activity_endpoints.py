"""Tests for activity, review and appeal endpoints."""

from unittest.mock import patch

from tests.fixtures import load_fixture

API = "/api/v1/activities"


def _payload(name: str = "clean", **overrides) -> dict:
    data = dict(load_fixture("scenarios.json")[name])
    data.update(overrides)
    return data


def _submit(client, name: str = "clean", **overrides) -> dict:
    response = client.post(f"{API}/", json=_payload(name, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


class TestSubmitActivity:
    def test_clean_submission(self, client):
        data = _submit(client)

        assert data["id"] > 0
        assert data["verification"]["ai_confidence_score"] == 99
        assert data["verification"]["status"] == "verified"
        assert data["verification"]["verification_date"] is not None
        assert data["confidence_band"] == "high"
        assert data["evidence"][0]["filename"] == "internship_letter.pdf"

    def test_low_confidence_submission(self, client, base_score):
        base_score.value = 40.0
        data = _submit(client, "low_confidence")

        assert data["verification"]["ai_confidence_score"] == 46
        assert data["verification"]["status"] == "under_review"
        assert data["verification"]["verification_date"] is None

    def test_empty_evidence_rejected_by_schema(self, client):
        response = client.post(f"{API}/", json=_payload(evidence=[]))
        assert response.status_code == 422

    def test_unknown_type_rejected(self, client):
        response = client.post(f"{API}/", json=_payload(type="hobby"))
        assert response.status_code == 422

    def test_unexpected_failure_is_500(self, client):
        with patch("app.api.activities.get_submission_service", side_effect=RuntimeError("db down")):
            response = client.post(f"{API}/", json=_payload())
        assert response.status_code == 500
        assert "db down" in response.json()["detail"]


class TestReadActivities:
    def test_get(self, client):
        created = _submit(client)
        response = client.get(f"{API}/{created['id']}")
        assert response.status_code == 200
        assert response.json()["title"] == created["title"]

    def test_get_unknown(self, client):
        response = client.get(f"{API}/999")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["details"]["resource_type"] == "activity"

    def test_list_filters(self, client, base_score):
        _submit(client)
        base_score.value = 40.0
        other = _submit(client, "low_confidence")

        assert len(client.get(f"{API}/").json()) == 2
        queue = client.get(f"{API}/", params={"status": "under_review"}).json()
        assert [a["id"] for a in queue] == [other["id"]]
        mine = client.get(f"{API}/", params={"student_id": "stu-001"}).json()
        assert [a["student_id"] for a in mine] == ["stu-001"]

    def test_list_bad_status(self, client):
        assert client.get(f"{API}/", params={"status": "done"}).status_code == 422


class TestReview:
    def _pending(self, client, base_score) -> dict:
        base_score.value = 45.0
        return _submit(client, evidence=[{"filename": "a.pdf", "gps_verified": True, "biometric_match_score": 25}])

    def test_mentor_decision(self, client, base_score):
        activity = self._pending(client, base_score)
        response = client.post(f"{API}/{activity['id']}/review", json={
            "mentor_id": "mentor-1", "status": "rejected", "comments": "insufficient proof",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["verification"]["status"] == "rejected"
        assert data["verification"]["mentor_comments"] == "insufficient proof"

    def test_second_decision_conflicts(self, client, base_score):
        activity = self._pending(client, base_score)
        client.post(f"{API}/{activity['id']}/review", json={"mentor_id": "m-1", "status": "verified"})

        response = client.post(f"{API}/{activity['id']}/review", json={"mentor_id": "m-1", "status": "rejected"})
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"

    def test_missing_mentor_id(self, client, base_score):
        activity = self._pending(client, base_score)
        response = client.post(f"{API}/{activity['id']}/review", json={"status": "verified"})
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_unknown_activity(self, client):
        response = client.post(f"{API}/5/review", json={"mentor_id": "m-1", "status": "verified"})
        assert response.status_code == 404


class TestEvidenceResubmission:
    def test_rescores(self, client, base_score):
        base_score.value = 40.0
        activity = _submit(client, "low_confidence")
        base_score.value = 70.0

        response = client.post(f"{API}/{activity['id']}/evidence", json={
            "student_id": "stu-002",
            "evidence": [{"filename": "new.pdf", "gps_verified": True, "biometric_match_score": 95}],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["verification"]["status"] == "verified"
        assert [e["filename"] for e in data["evidence"]] == ["new.pdf"]

    def test_wrong_student(self, client):
        activity = _submit(client)
        response = client.post(f"{API}/{activity['id']}/evidence", json={
            "student_id": "someone-else",
            "evidence": [{"filename": "new.pdf"}],
        })
        assert response.status_code == 422


class TestAppeals:
    def test_appeal_after_rejection(self, client, base_score):
        base_score.value = 45.0
        activity = _submit(client, evidence=[{"filename": "a.pdf", "gps_verified": True, "biometric_match_score": 25}])
        client.post(f"{API}/{activity['id']}/review", json={
            "mentor_id": "m-1", "status": "rejected", "comments": "insufficient proof",
        })

        response = client.post(f"{API}/{activity['id']}/appeals", json={
            "student_id": "stu-001", "message": "additional certificate attached",
        })
        assert response.status_code == 201
        assert response.json()["status"] == "pending"

        current = client.get(f"{API}/{activity['id']}").json()
        assert current["verification"]["status"] == "under_review"
        assert current["verification"]["verification_date"] is None
        assert current["verification"]["mentor_comments"] == "insufficient proof"

        appeals = client.get(f"{API}/{activity['id']}/appeals").json()
        assert len(appeals) == 1

    def test_ineligible_appeal(self, client):
        activity = _submit(client)  # verified with 99
        response = client.post(f"{API}/{activity['id']}/appeals", json={
            "student_id": "stu-001", "message": "please",
        })
        assert response.status_code == 409
        assert response.json()["error"] == "ineligible_appeal"

    def test_empty_message(self, client, base_score):
        base_score.value = 20.0
        activity = _submit(client, "low_confidence")  # rejected
        response = client.post(f"{API}/{activity['id']}/appeals", json={"student_id": "stu-002", "message": ""})
        assert response.status_code == 422

    def test_list_for_unknown_activity(self, client):
        assert client.get(f"{API}/77/appeals").status_code == 404
