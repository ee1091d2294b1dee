import pytest
from fastapi import status

from hireline.models.application import Application

def test_apply_uses_latest_resume(client, candidate, job, resume, auth_headers):
    response = client.post(f"/api/applications/apply/{job.id}", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["resume_id"] == resume.id
    assert data["status"] == "APPLIED"
    assert data["analysis_id"] is None

def test_apply_twice_conflicts(client, candidate, job, resume, auth_headers):
    client.post(f"/api/applications/apply/{job.id}", headers=auth_headers(candidate))
    response = client.post(f"/api/applications/apply/{job.id}", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_409_CONFLICT

def test_apply_without_resume(client, candidate, job, auth_headers):
    response = client.post(f"/api/applications/apply/{job.id}", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_404_NOT_FOUND

def test_recruiter_cannot_apply(client, recruiter, job, auth_headers):
    response = client.post(f"/api/applications/apply/{job.id}", headers=auth_headers(recruiter))
    assert response.status_code == status.HTTP_403_FORBIDDEN

def test_lists_for_both_roles(client, candidate, recruiter, application, auth_headers):
    mine = client.get("/api/applications/applicant/me", headers=auth_headers(candidate))
    assert [a["id"] for a in mine.json()] == [application.id]
    assert mine.json()[0]["job"]["title"] == "Backend Engineer"

    received = client.get("/api/applications/recruiter/me", headers=auth_headers(recruiter))
    assert [a["id"] for a in received.json()] == [application.id]

def test_recruiter_updates_status(client, recruiter, application, auth_headers):
    response = client.put(
        f"/api/applications/{application.id}/status",
        json={"status": "ACCEPTED"},
        headers=auth_headers(recruiter),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ACCEPTED"

def test_invalid_status(client, recruiter, application, auth_headers):
    response = client.put(
        f"/api/applications/{application.id}/status",
        json={"status": "HIRED"},
        headers=auth_headers(recruiter),
    )
    assert response.status_code == 422

def test_analysis_link_is_visible_on_application(client, candidate, job, resume, application, auth_headers):
    analyzed = client.post(
        f"/api/analysis/analyze/{resume.id}",
        json={"jobId": job.id, "applicationId": application.id},
        headers=auth_headers(candidate),
    )
    assert analyzed.status_code == status.HTTP_200_OK

    response = client.get(f"/api/applications/{application.id}", headers=auth_headers(candidate))
    assert response.json()["analysis_id"] == analyzed.json()["analysisId"]
    assert response.json()["status"] == "APPLIED"

def test_candidate_withdraws(client, candidate, application, auth_headers, db_session):
    response = client.delete(f"/api/applications/{application.id}", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_200_OK
    assert db_session.query(Application).count() == 0

def test_unknown_application(client, candidate, auth_headers):
    response = client.get("/api/applications/999999", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_404_NOT_FOUND
