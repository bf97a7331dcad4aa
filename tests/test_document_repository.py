"""Repository tests against a throwaway sqlite database."""

import pydantic
import pytest

from app.core.exceptions import NotFoundError
from app.db.models.document import DocumentType
from app.db.repositories.document_repository import DocumentRepository
from app.utils.dto.document import DocumentUpdate, NewFileDocument, NewTextDocument


def new_file(original_name="report.pdf", description=None):
    return NewFileDocument(
        original_name=original_name,
        file_name="report-1-2.pdf",
        file_path="uploads/report-1-2.pdf",
        mime_type="application/pdf",
        file_size=1234,
        description=description,
    )


@pytest.fixture
def repository(db_session):
    return DocumentRepository(db_session)


@pytest.mark.asyncio
async def test_create_and_find_text_document(repository):
    created = await repository.create(NewTextDocument(title="Notes", content="Hello world"))

    found = await repository.find_by_id(created.id)
    assert found is not None
    assert found.type == DocumentType.TEXT
    assert found.title == "Notes"
    assert found.content == "Hello world"
    assert found.file_path is None
    assert found.created_at == found.updated_at


@pytest.mark.asyncio
async def test_file_document_keeps_internal_path(repository):
    created = await repository.create(new_file())

    found = await repository.get(created.id)
    assert found.type == DocumentType.FILE
    assert found.file_path == "uploads/report-1-2.pdf"
    assert found.title is None


def test_payloads_reject_missing_fields():
    with pytest.raises(pydantic.ValidationError):
        NewTextDocument(title="", content="body")
    with pytest.raises(pydantic.ValidationError):
        NewFileDocument(original_name="a.pdf", file_name="a.pdf", mime_type="application/pdf", file_size=1)


@pytest.mark.asyncio
async def test_find_by_id_unknown_returns_none(repository):
    assert await repository.find_by_id("missing") is None
    with pytest.raises(NotFoundError):
        await repository.get("missing")


@pytest.mark.asyncio
async def test_find_all_newest_first(repository):
    first = await repository.create(NewTextDocument(title="first", content="1"))
    second = await repository.create(NewTextDocument(title="second", content="2"))
    third = await repository.create(new_file())

    ids = [document.id for document in await repository.find_all()]
    assert ids == [third.id, second.id, first.id]


@pytest.mark.asyncio
async def test_update_text_document(repository):
    created = await repository.create(NewTextDocument(title="Draft", content="v1"))

    updated = await repository.update(created.id, DocumentUpdate(content="v2", description="edited"))
    assert updated.title == "Draft"
    assert updated.content == "v2"
    assert updated.description == "edited"
    assert updated.updated_at > updated.created_at


@pytest.mark.asyncio
async def test_update_file_document_only_touches_description(repository):
    created = await repository.create(new_file(description="old"))

    updated = await repository.update(created.id, DocumentUpdate(title="ignored", description="new"))
    assert updated.title is None
    assert updated.original_name == "report.pdf"
    assert updated.description == "new"


@pytest.mark.asyncio
async def test_update_unknown_raises(repository):
    with pytest.raises(NotFoundError):
        await repository.update("missing", DocumentUpdate(content="x"))


@pytest.mark.asyncio
async def test_delete(repository):
    created = await repository.create(NewTextDocument(title="gone", content="soon"))

    await repository.delete(created.id)
    assert await repository.find_by_id(created.id) is None
    with pytest.raises(NotFoundError):
        await repository.delete(created.id)


@pytest.mark.asyncio
async def test_search_matches_any_field_case_insensitively(repository):
    by_title = await repository.create(NewTextDocument(title="Needle in title", content="x"))
    by_content = await repository.create(NewTextDocument(title="t", content="a NEEDLE here"))
    by_name = await repository.create(new_file(original_name="needle.pdf"))
    by_description = await repository.create(new_file(original_name="b.pdf", description="has needle"))
    await repository.create(NewTextDocument(title="hay", content="stack"))

    found = [document.id for document in await repository.search("needle")]
    assert found == [by_description.id, by_name.id, by_content.id, by_title.id]


@pytest.mark.asyncio
async def test_search_type_filter(repository):
    text = await repository.create(NewTextDocument(title="needle", content="x"))
    await repository.create(new_file(original_name="needle.pdf"))

    found = await repository.search("needle", DocumentType.TEXT)
    assert [document.id for document in found] == [text.id]


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(repository):
    await repository.create(NewTextDocument(title="plain", content="nothing special"))
    percent = await repository.create(NewTextDocument(title="100% done", content="x"))

    found = await repository.search("%")
    assert [document.id for document in found] == [percent.id]
