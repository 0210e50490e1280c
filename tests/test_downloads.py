from pathlib import Path

from fastapi.testclient import TestClient

from campusvault.core.config import settings
from campusvault.main import app
from campusvault.models.resource import Resource, Download

from conftest import PDF_BYTES, upload, login, make_user


def download_count(db, resource_id):
    db.expire_all()
    return db.query(Resource).filter(Resource.id == resource_id).one().download_count


def test_download_streams_file_and_logs(client, db, student, student_headers, resource):
    response = client.get(f"/api/download/{resource['id']}", headers=student_headers)

    assert response.status_code == 200
    assert response.content == PDF_BYTES
    assert "ds-notes.pdf" in response.headers["content-disposition"]
    assert download_count(db, resource["id"]) == 1

    rows = db.query(Download).all()
    assert len(rows) == 1
    assert rows[0].user_id == student.id
    assert rows[0].resource_id == resource["id"]


def test_each_download_increments_by_exactly_one(client, db, student_headers, resource):
    for expected in range(1, 4):
        assert client.get(f"/api/download/{resource['id']}", headers=student_headers).status_code == 200
        assert download_count(db, resource["id"]) == expected
        assert db.query(Download).count() == expected


def test_download_requires_login(resource):
    anonymous = TestClient(app)
    assert anonymous.get(f"/api/download/{resource['id']}").status_code == 401


def test_download_unknown_resource(client, db, student_headers):
    assert client.get("/api/download/missing", headers=student_headers).status_code == 404
    assert db.query(Download).count() == 0


def test_download_missing_blob_does_not_log(client, db, student_headers, resource):
    (Path(settings.UPLOAD_DIR) / f"{resource['id']}.pdf").unlink()

    response = client.get(f"/api/download/{resource['id']}", headers=student_headers)
    assert response.status_code == 404
    assert response.json()["msg"] == "File not found"
    assert download_count(db, resource["id"]) == 0
    assert db.query(Download).count() == 0


def test_record_download_without_streaming(client, db, student_headers, resource):
    response = client.post("/api/downloads", json={"resourceId": resource["id"]}, headers=student_headers)
    assert response.status_code == 201
    assert response.json()["data"]["resourceId"] == resource["id"]
    assert download_count(db, resource["id"]) == 1

    missing = client.post("/api/downloads", json={"resourceId": "missing"}, headers=student_headers)
    assert missing.status_code == 404


def test_download_history(client, student, student_headers, admin_headers, resource):
    client.get(f"/api/download/{resource['id']}", headers=student_headers)
    client.get(f"/api/download/{resource['id']}", headers=student_headers)

    history = client.get(f"/api/downloads/user/{student.id}", headers=student_headers)
    assert history.status_code == 200
    assert len(history.json()["data"]) == 2

    # Admins may look at anyone's history, other students may not
    assert client.get(f"/api/downloads/user/{student.id}", headers=admin_headers).status_code == 200


def test_download_history_forbidden_for_others(client, db, student, resource):
    make_user(db, "other")
    headers = login(client, "other")
    assert client.get(f"/api/downloads/user/{student.id}", headers=headers).status_code == 403


def test_upload_then_download_scenario(client, db, admin_headers):
    """Admin uploads DS Notes to CS201 (year 2, sem 1, CSE); a CSE second-year downloads it"""
    subject = client.post(
        "/api/subjects",
        json={"name": "Data Structures", "code": "CS201", "year": 2, "semester": 1, "branch": "CSE"},
        headers=admin_headers,
    ).json()["data"]
    content = PDF_BYTES * 50
    created = upload(client, admin_headers, subject["id"], filename="DS Notes.pdf", content=content).json()["data"]
    assert created["downloadCount"] == 0

    make_user(db, "priya", year=2, branch="CSE")
    student_headers = login(client, "priya")

    listed = client.get("/api/subjects/2/1", params={"branch": "CSE"}, headers=student_headers).json()["data"]
    assert [s["id"] for s in listed] == [subject["id"]]

    response = client.get(f"/api/download/{created['id']}", headers=student_headers)
    assert response.content == content

    resources = client.get(f"/api/resources/{subject['id']}").json()["data"]
    assert resources[0]["downloadCount"] == 1
    assert db.query(Download).count() == 1
