# test/pytest/test_assignment.py
import asyncio
import copy
from pathlib import Path

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.database.document_store import DocumentStore, empty_document
from app.database.json_assignment import JsonAssignmentRepository
from app.schemas.assignment import AssignmentCreate
from app.schemas.submission import StoredUpload
from app.services.assignment_service import AssignmentService
from app.services.identity_service import AnonymousIdentityProvider

def _in_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


# ------------------------- Fake document store -------------------------
class FakeDocumentStore(DocumentStore):
    def __init__(self):
        self.doc = empty_document()
        self.saves = 0
        self.calls_in_loop = []

    def load(self):
        # copia: come il file, ogni load parte da uno snapshot indipendente
        self.calls_in_loop.append(_in_event_loop())
        return copy.deepcopy(self.doc)

    def save(self, doc):
        self.calls_in_loop.append(_in_event_loop())
        self.doc = copy.deepcopy(doc)
        self.saves += 1


class FixedIdentity(AnonymousIdentityProvider):
    def student_id(self, student_name: str) -> str:
        return "anonymous-user-7"


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def store():
    return FakeDocumentStore()

@pytest.fixture
def repo(store):
    return JsonAssignmentRepository(store)

@pytest.fixture
def identity():
    return FixedIdentity()


def _make_create(**overrides):
    base = dict(title="Compito", description="Desc", dueDate="2025-01-01")
    base.update(overrides)
    return AssignmentCreate(**base)


def _make_upload(name="relazione.pdf"):
    stored = f"1700000000000-42-{name}"
    return StoredUpload(
        file_path=Path("/srv/uploads") / stored,
        file_name=name,
        stored_name=stored,
        download_url=f"/uploads/{stored}",
    )


# --------------------------------- Tests --------------------------------------
@pytest.mark.asyncio
async def test_create_ok(repo, store):
    created = await AssignmentService.create_assignment(_make_create(), repo)
    assert created.id.startswith("id-")
    assert created.createdAt.endswith("Z")
    assert store.doc["assignments"] == [created.model_dump()]
    assert store.saves == 1

@pytest.mark.asyncio
async def test_create_ids_are_unique(repo):
    ids = [
        (await AssignmentService.create_assignment(_make_create(title=f"A{i}"), repo)).id
        for i in range(20)
    ]
    assert len(set(ids)) == 20

@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [{"title": ""}, {"title": None}, {"dueDate": None}, {"dueDate": ""}])
async def test_create_requires_title_and_due_date(repo, store, overrides):
    with pytest.raises(ValidationError):
        await AssignmentService.create_assignment(_make_create(**overrides), repo)
    assert store.doc["assignments"] == []
    assert store.saves == 0

@pytest.mark.asyncio
async def test_list_sorted_by_due_date_desc(repo):
    for due in ("2025-01-01", "2025-03-01", "2025-02-01"):
        await AssignmentService.create_assignment(_make_create(dueDate=due), repo)

    items = await AssignmentService.list_assignments(repo)
    assert [a.dueDate for a in items] == ["2025-03-01", "2025-02-01", "2025-01-01"]

@pytest.mark.asyncio
async def test_list_ties_keep_insertion_order_and_bad_dates_last(repo):
    await AssignmentService.create_assignment(_make_create(title="bad", dueDate="domani"), repo)
    await AssignmentService.create_assignment(_make_create(title="first", dueDate="2025-02-01T00:00:00Z"), repo)
    await AssignmentService.create_assignment(_make_create(title="second", dueDate="2025-02-01"), repo)
    await AssignmentService.create_assignment(_make_create(title="later", dueDate="2025-02-01T10:30:00.000Z"), repo)

    items = await AssignmentService.list_assignments(repo)
    assert [a.title for a in items] == ["later", "first", "second", "bad"]

@pytest.mark.asyncio
async def test_list_does_not_mutate(repo, store):
    await AssignmentService.create_assignment(_make_create(dueDate="2025-01-01"), repo)
    await AssignmentService.create_assignment(_make_create(dueDate="2025-03-01"), repo)
    saves = store.saves
    await AssignmentService.list_assignments(repo)
    assert store.saves == saves
    # l'ordine su disco resta quello di inserimento
    assert [a["dueDate"] for a in store.doc["assignments"]] == ["2025-01-01", "2025-03-01"]

@pytest.mark.asyncio
async def test_create_submission_ok(repo, store, identity):
    upload = _make_upload()
    sub = await AssignmentService.create_submission("id-1", "Mario Rossi", upload, repo, identity)

    assert sub.id.startswith("sub-")
    assert sub.studentId == "anonymous-user-7"
    assert sub.filePath == str(upload.file_path)
    assert sub.fileName == "relazione.pdf"
    assert sub.downloadUrl == "/uploads/1700000000000-42-relazione.pdf"
    assert store.doc["submissions"] == [sub.model_dump()]

@pytest.mark.asyncio
async def test_create_submission_for_unknown_assignment_is_accepted(repo, identity):
    sub = await AssignmentService.create_submission("id-nope", "Anna", _make_upload(), repo, identity)
    assert [s.id for s in await AssignmentService.list_submissions(repo)] == [sub.id]

@pytest.mark.asyncio
@pytest.mark.parametrize("assignment_id,student_name,with_file", [
    ("id-1", "Anna", False),
    ("", "Anna", True),
    ("id-1", None, True),
])
async def test_create_submission_requires_all_fields(repo, store, identity, assignment_id, student_name, with_file):
    upload = _make_upload() if with_file else None
    with pytest.raises(ValidationError):
        await AssignmentService.create_submission(assignment_id, student_name, upload, repo, identity)
    assert store.doc["submissions"] == []

@pytest.mark.asyncio
async def test_list_submissions_keeps_insertion_order(repo, identity):
    s1 = await AssignmentService.create_submission("id-2", "B", _make_upload("b.txt"), repo, identity)
    s2 = await AssignmentService.create_submission("id-1", "A", _make_upload("a.txt"), repo, identity)
    items = await AssignmentService.list_submissions(repo)
    assert [s.id for s in items] == [s1.id, s2.id]

@pytest.mark.asyncio
async def test_delete_cascades_and_not_found(repo, store, identity):
    keep = await AssignmentService.create_assignment(_make_create(title="keep"), repo)
    gone = await AssignmentService.create_assignment(_make_create(title="gone"), repo)
    await AssignmentService.create_submission(gone.id, "A", _make_upload(), repo, identity)
    kept_sub = await AssignmentService.create_submission(keep.id, "B", _make_upload(), repo, identity)
    await AssignmentService.create_submission(gone.id, "C", _make_upload(), repo, identity)

    await AssignmentService.delete_assignment(gone.id, repo)

    assert [a["id"] for a in store.doc["assignments"]] == [keep.id]
    assert store.doc["submissions"] == [kept_sub.model_dump()]

    with pytest.raises(NotFoundError):
        await AssignmentService.delete_assignment(gone.id, repo)

@pytest.mark.asyncio
async def test_delete_unknown_does_not_save(repo, store):
    with pytest.raises(NotFoundError):
        await AssignmentService.delete_assignment("id-0", repo)
    assert store.saves == 0

@pytest.mark.asyncio
async def test_overlapping_writes_last_write_wins(store):
    # limite noto: due cicli load->save sovrapposti, vince l'ultimo
    repo = JsonAssignmentRepository(store)
    snapshot = store.load()
    await AssignmentService.create_assignment(_make_create(title="A"), repo)
    store.save(snapshot)
    assert store.doc["assignments"] == []


def test_anonymous_identity_format():
    sid = AnonymousIdentityProvider().student_id("Anna")
    prefix, _, suffix = sid.rpartition("-")
    assert prefix == "anonymous-user"
    assert 0 <= int(suffix) <= 999


@pytest.mark.asyncio
async def test_whitespace_title_is_accepted(repo, store):
    created = await AssignmentService.create_assignment(_make_create(title="   "), repo)
    assert created.title == "   "
    assert len(store.doc["assignments"]) == 1

@pytest.mark.asyncio
async def test_list_returns_legacy_records_as_stored(repo, store):
    legacy = [
        {"id": "id-1", "title": "vecchio", "dueDate": 20250101},
        {"id": "id-2", "title": "nuovo", "dueDate": "2025-03-01", "createdAt": "2025-01-01T00:00:00.000Z"},
        {"id": "id-3", "title": "senza data"},
        {"id": "id-4", "title": "data strana", "dueDate": {"giorno": 1}},
    ]
    store.doc["assignments"] = copy.deepcopy(legacy)
    store.doc["submissions"] = [{"id": "sub-1", "assignmentId": "id-1", "voto": 30}]

    items = await AssignmentService.list_assignments(repo)
    assert [a.title for a in items] == ["nuovo", "vecchio", "senza data", "data strana"]
    assert [a.model_dump(exclude_unset=True) for a in items] == [legacy[1], legacy[0], legacy[2], legacy[3]]

    subs = await AssignmentService.list_submissions(repo)
    assert [s.model_dump(exclude_unset=True) for s in subs] == store.doc["submissions"]

@pytest.mark.asyncio
async def test_store_io_runs_outside_event_loop(repo, store, identity):
    a = await AssignmentService.create_assignment(_make_create(), repo)
    await AssignmentService.create_submission(a.id, "Anna", _make_upload(), repo, identity)
    await AssignmentService.list_assignments(repo)
    await AssignmentService.list_submissions(repo)
    await AssignmentService.delete_assignment(a.id, repo)

    assert store.calls_in_loop
    assert not any(store.calls_in_loop)
