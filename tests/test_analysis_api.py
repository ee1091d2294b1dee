import pytest
from fastapi import status

from hireline.core.exceptions import AIKillSwitchError
from hireline.models.analysis import Analysis
from tests.factories import CANONICAL_FEEDBACK

def test_analyze_with_job(client, resume, job, candidate, auth_headers, fake_llm):
    response = client.post(
        f"/api/analysis/analyze/{resume.id}",
        json={"jobId": job.id},
        headers=auth_headers(candidate),
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    assert data["degraded"] is False
    assert data["feedback"] == CANONICAL_FEEDBACK
    assert isinstance(data["analysisId"], int)
    assert len(fake_llm.calls) == 1

def test_analyze_without_body(client, resume, candidate, auth_headers, db_session):
    response = client.post(f"/api/analysis/analyze/{resume.id}", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_200_OK
    stored = db_session.query(Analysis).filter(Analysis.id == response.json()["analysisId"]).one()
    assert stored.job_id is None

def test_degraded_analysis_is_still_success(client, resume, candidate, auth_headers, fake_llm):
    fake_llm.reply = "Sorry, I cannot produce JSON today."
    response = client.post(f"/api/analysis/analyze/{resume.id}", json={}, headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["degraded"] is True
    assert data["feedback"]["summary"]["overallMatch"] == "N/A"

def test_unknown_resume(client, candidate, auth_headers, db_session, fake_llm):
    response = client.post("/api/analysis/analyze/999999", json={}, headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["errors"][0]["code"] == "NOT_FOUND"
    assert db_session.query(Analysis).count() == 0
    assert fake_llm.calls == []

def test_unknown_application_reports_not_found_after_persisting(client, resume, candidate, auth_headers, db_session):
    response = client.post(
        f"/api/analysis/analyze/{resume.id}",
        json={"applicationId": "777777"},
        headers=auth_headers(candidate),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["errors"][0]["msg"] == "Application not found"
    assert db_session.query(Analysis).filter(Analysis.resume_id == resume.id).count() == 1

def test_malformed_resume_id(client, candidate, auth_headers):
    response = client.post("/api/analysis/analyze/abc", json={}, headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["code"] == "VALIDATION_ERROR"

def test_provider_outage(client, resume, candidate, auth_headers, fake_llm, db_session):
    fake_llm.reply = AIKillSwitchError()
    response = client.post(f"/api/analysis/analyze/{resume.id}", json={}, headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["errors"][0]["code"] == "AI_KILL_SWITCH_ACTIVE"
    assert db_session.query(Analysis).count() == 0

def test_candidate_cannot_analyze_foreign_resume(client, resume, auth_headers, db_session):
    from hireline.models.user import User, UserRole

    stranger = User(email="other@example.com", username="Other", hashed_password="x", role=UserRole.CANDIDATE)
    db_session.add(stranger)
    db_session.commit()

    response = client.post(f"/api/analysis/analyze/{resume.id}", json={}, headers=auth_headers(stranger))
    assert response.status_code == status.HTTP_403_FORBIDDEN

def test_requires_authentication(client, resume):
    response = client.post(f"/api/analysis/analyze/{resume.id}", json={})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

def test_read_analysis_and_history(client, resume, recruiter, candidate, auth_headers):
    first = client.post(f"/api/analysis/analyze/{resume.id}", json={}, headers=auth_headers(candidate)).json()
    second = client.post(
        f"/api/analysis/analyze/{resume.id}",
        json={"jobDescription": "Platform engineer"},
        headers=auth_headers(candidate),
    ).json()

    response = client.get(f"/api/analysis/{first['analysisId']}", headers=auth_headers(recruiter))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["feedback"] == CANONICAL_FEEDBACK
    assert response.json()["normalization_status"] == "normalized"

    history = client.get(f"/api/analysis/resume/{resume.id}", headers=auth_headers(candidate))
    assert history.status_code == status.HTTP_200_OK
    assert [a["id"] for a in history.json()] == [second["analysisId"], first["analysisId"]]
    assert history.json()[0]["job_description"] == "Platform engineer"

def test_read_missing_analysis(client, candidate, auth_headers):
    response = client.get("/api/analysis/999999", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_404_NOT_FOUND

@pytest.mark.parametrize("field, value", [
    ("jobId", True),
    ("jobId", 1.5),
    ("jobId", [1]),
    ("applicationId", False),
    ("applicationId", 2.0),
])
def test_malformed_body_identifiers_are_rejected(client, resume, job, candidate, auth_headers, db_session, fake_llm, field, value):
    response = client.post(
        f"/api/analysis/analyze/{resume.id}",
        json={field: value},
        headers=auth_headers(candidate),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["code"] == "VALIDATION_ERROR"
    assert db_session.query(Analysis).count() == 0
    assert fake_llm.calls == []

def test_string_identifiers_in_body_are_accepted(client, resume, job, candidate, auth_headers, db_session):
    response = client.post(
        f"/api/analysis/analyze/{resume.id}",
        json={"jobId": str(job.id)},
        headers=auth_headers(candidate),
    )
    assert response.status_code == status.HTTP_200_OK
    stored = db_session.query(Analysis).filter(Analysis.id == response.json()["analysisId"]).one()
    assert stored.job_id == job.id
