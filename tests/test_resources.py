from pathlib import Path

import pytest

from campusvault.core.config import settings
from campusvault.models.resource import Resource, Download
from campusvault.utils import storage

from conftest import PDF_BYTES, upload, login, make_user


def uploaded_files():
    return sorted(p.name for p in Path(settings.UPLOAD_DIR).iterdir())


def test_upload_creates_row_and_renames_file(client, db, admin, admin_headers, subject):
    response = upload(client, admin_headers, subject["id"])
    assert response.status_code == 201
    data = response.json()["data"]

    assert data["title"] == "DS Notes"
    assert data["fileName"] == "ds-notes.pdf"
    assert data["fileType"] == ".pdf"
    assert data["fileSize"] == len(PDF_BYTES)
    assert data["resourceType"] == "notes"
    assert data["subjectId"] == subject["id"]
    assert data["uploadedBy"] == admin.id
    assert data["downloadCount"] == 0
    assert data["isApproved"] is True

    assert uploaded_files() == [f"{data['id']}.pdf"]
    assert (Path(settings.UPLOAD_DIR) / f"{data['id']}.pdf").read_bytes() == PDF_BYTES


def test_upload_extension_is_case_insensitive(client, admin_headers, subject):
    response = upload(client, admin_headers, subject["id"], filename="Slides.PPTX")
    assert response.status_code == 201
    assert response.json()["data"]["fileType"] == ".pptx"


@pytest.mark.parametrize("filename", ["notes.exe", "notes.txt", "notes", "archive.pdf.zip"])
def test_upload_rejects_disallowed_extension(client, admin_headers, subject, filename):
    response = upload(client, admin_headers, subject["id"], filename=filename)
    assert response.status_code == 400
    assert "Invalid file type" in response.json()["msg"]
    assert uploaded_files() == []


def test_upload_rejects_oversized_file(client, db, admin_headers, subject, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 1024)
    response = upload(client, admin_headers, subject["id"], content=b"x" * 2048)
    assert response.status_code == 413
    assert uploaded_files() == []
    assert db.query(Resource).count() == 0


def test_upload_requires_file(client, admin_headers, subject):
    response = client.post(
        "/api/resources",
        data={"title": "No file", "resourceType": "notes", "subjectId": subject["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["msg"] == "No file uploaded"


def test_upload_rejects_blank_title(client, db, admin_headers, subject):
    response = upload(client, admin_headers, subject["id"], title="   ")
    assert response.status_code == 400
    assert response.json()["msg"] == "Title is required"
    assert db.query(Resource).count() == 0
    assert uploaded_files() == []


def test_upload_title_is_trimmed(client, admin_headers, subject):
    response = upload(client, admin_headers, subject["id"], title="  DS Notes  ")
    assert response.json()["data"]["title"] == "DS Notes"


def test_failed_rename_removes_row_and_temp_file(client, db, admin_headers, subject, monkeypatch):
    def broken_finalize(temp_path, upload_dir, stored_name):
        raise OSError("disk full")

    monkeypatch.setattr(storage, "finalize", broken_finalize)
    response = upload(client, admin_headers, subject["id"])

    assert response.status_code == 500
    assert response.json()["msg"] == "Could not store the uploaded file"
    assert db.query(Resource).count() == 0
    assert uploaded_files() == []


def test_upload_rejects_unknown_resource_type(client, admin_headers, subject):
    response = upload(client, admin_headers, subject["id"], resource_type="memes")
    assert response.status_code == 400
    assert uploaded_files() == []


def test_upload_rejects_unknown_subject(client, admin_headers):
    response = upload(client, admin_headers, "no-such-subject")
    assert response.status_code == 404
    assert uploaded_files() == []


def test_upload_is_admin_only(client, student_headers, subject):
    response = upload(client, student_headers, subject["id"])
    assert response.status_code == 403


def test_upload_requires_login(client, subject):
    client.cookies.clear()
    assert upload(client, {}, subject["id"]).status_code == 401


def test_list_resources_by_subject_and_type(client, admin_headers, subject):
    upload(client, admin_headers, subject["id"], title="Unit 1", resource_type="notes")
    upload(client, admin_headers, subject["id"], title="2023 paper", resource_type="pyqs")
    upload(client, admin_headers, subject["id"], title="Unit 2", resource_type="notes")

    everything = client.get(f"/api/resources/{subject['id']}").json()["data"]
    assert [r["title"] for r in everything] == ["Unit 2", "2023 paper", "Unit 1"]

    pyqs = client.get(f"/api/resources/{subject['id']}", params={"type": "pyqs"}).json()["data"]
    assert [r["title"] for r in pyqs] == ["2023 paper"]

    assert client.get("/api/resources/other-subject").json()["data"] == []


def test_list_user_resources(client, admin, admin_headers, student_headers, subject, resource):
    response = client.get(f"/api/resources/user/{admin.id}", headers=admin_headers)
    assert response.status_code == 200
    assert [r["id"] for r in response.json()["data"]] == [resource["id"]]

    assert client.get(f"/api/resources/user/{admin.id}", headers=student_headers).status_code == 403


def test_owner_deletes_resource_and_file(client, db, admin_headers, resource):
    client.post("/api/downloads", json={"resourceId": resource["id"]}, headers=admin_headers)

    response = client.delete(f"/api/resources/{resource['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert db.query(Resource).count() == 0
    assert db.query(Download).count() == 0
    assert uploaded_files() == []


def test_non_owner_cannot_delete(client, db, student_headers, resource):
    response = client.delete(f"/api/resources/{resource['id']}", headers=student_headers)
    assert response.status_code == 403
    assert db.query(Resource).count() == 1
    assert len(uploaded_files()) == 1


def test_student_owner_can_delete_own_upload(client, db, admin_headers, subject, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_ADMIN_ONLY", False)
    make_user(db, "uploader")
    uploader_headers = login(client, "uploader")
    created = upload(client, uploader_headers, subject["id"]).json()["data"]

    other = make_user(db, "bystander")
    bystander_headers = login(client, other.username)
    assert client.delete(f"/api/resources/{created['id']}", headers=bystander_headers).status_code == 403

    assert client.delete(f"/api/resources/{created['id']}", headers=uploader_headers).status_code == 200


def test_admin_can_delete_any_resource(client, db, admin_headers, subject, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_ADMIN_ONLY", False)
    make_user(db, "uploader")
    created = upload(client, login(client, "uploader"), subject["id"]).json()["data"]

    assert client.delete(f"/api/resources/{created['id']}", headers=admin_headers).status_code == 200
    assert uploaded_files() == []


def test_delete_missing_resource(client, admin_headers):
    assert client.delete("/api/resources/missing", headers=admin_headers).status_code == 404
