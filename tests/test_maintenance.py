from campusvault.crud import subject as subject_crud
from campusvault.models.resource import Resource
from campusvault.models.subject import Subject
from campusvault.utils.seed import SAMPLE_SUBJECTS, seed_subjects

from conftest import upload


def add_subject(db, name="Algorithms", code="CS201", branch="CSE", year=2, semester=1):
    subject = Subject(name=name, code=code, year=year, semester=semester, branch=branch)
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


def test_cleanup_merges_duplicates_into_oldest(client, db, admin_headers):
    keep = add_subject(db)
    dup = add_subject(db)
    other = add_subject(db, name="Databases", code="CS202")

    dup_resource = upload(client, admin_headers, dup.id).json()["data"]

    result = subject_crud.cleanup_duplicate_subjects(db)
    assert result == {"removed": 1, "kept": 2}

    db.expire_all()
    assert {s.id for s in db.query(Subject).all()} == {keep.id, other.id}
    moved = db.query(Resource).filter(Resource.id == dup_resource["id"]).one()
    assert moved.subject_id == keep.id


def test_cleanup_without_duplicates_is_noop(db):
    add_subject(db)
    assert subject_crud.cleanup_duplicate_subjects(db) == {"removed": 0, "kept": 1}


def test_normalize_branches(db):
    canonical = add_subject(db, branch="CSE")
    legacy = add_subject(db, branch="Computer Science")
    mae = add_subject(db, name="Thermodynamics", code="ME201", branch="MAE")

    result = subject_crud.normalize_branches(db)
    assert result == {"changes": 2, "removed": 1}

    db.expire_all()
    subjects = db.query(Subject).all()
    assert {s.branch for s in subjects} == {"CSE"}
    assert {s.id for s in subjects} == {canonical.id, mae.id}
    assert db.query(Subject).filter(Subject.id == legacy.id).first() is None


def test_normalize_branches_custom_aliases(db):
    add_subject(db, branch="EE")
    result = subject_crud.normalize_branches(db, aliases={"EE": "EEE"})
    assert result == {"changes": 1, "removed": 0}
    db.expire_all()
    assert db.query(Subject).one().branch == "EEE"


def test_legacy_rows_visible_after_normalization(client, db):
    add_subject(db, branch="Computer Science")
    assert client.get("/api/subjects/2/1", params={"branch": "CSE"}).json()["data"] == []

    subject_crud.normalize_branches(db)
    listed = client.get("/api/subjects/2/1", params={"branch": "CSE"}).json()["data"]
    assert [s["code"] for s in listed] == ["CS201"]


def test_admin_maintenance_endpoints(client, db, admin_headers, student_headers):
    add_subject(db)
    add_subject(db)
    add_subject(db, branch="MAE")

    assert client.post("/api/admin/subjects/cleanup", headers=student_headers).status_code == 403

    cleanup = client.post("/api/admin/subjects/cleanup", headers=admin_headers)
    assert cleanup.status_code == 200
    assert cleanup.json()["data"] == {"removed": 1, "kept": 2}

    normalize = client.post("/api/admin/subjects/normalize-branches", headers=admin_headers)
    assert normalize.status_code == 200
    assert normalize.json()["data"] == {"changes": 1, "removed": 1}


def test_seed_subjects_once(db):
    assert seed_subjects(db) == len(SAMPLE_SUBJECTS)
    assert db.query(Subject).count() == len(SAMPLE_SUBJECTS)
    assert {s.branch for s in db.query(Subject).all()} == {"CSE"}

    assert seed_subjects(db) == 0
    assert db.query(Subject).count() == len(SAMPLE_SUBJECTS)


def test_seed_subjects_for_branch(db):
    seed_subjects(db, branch="ECE")
    assert {s.branch for s in db.query(Subject).all()} == {"ECE"}
