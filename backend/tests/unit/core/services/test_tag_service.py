"""Tag service tests against SQLite."""

import uuid

import pytest

from src.noteboard.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.noteboard.core.models.tag import TagColor
from src.noteboard.core.schemas.notes import NoteCreate
from src.noteboard.core.schemas.tags import TagCreate, TagUpdate
from src.noteboard.core.services.note_service import NoteService
from src.noteboard.core.services.position_store import PositionStore
from src.noteboard.core.services.tag_service import TagService


@pytest.fixture
def positions(test_session, owner_locks):
    return PositionStore(test_session, locks=owner_locks)


@pytest.fixture
def tag_service(test_session, positions):
    return TagService(test_session, positions)


@pytest.fixture
def note_service(test_session, positions):
    return NoteService(test_session, positions)


async def test_create_tag_derives_label_and_code(tag_service, test_user):
    tag = await tag_service.create_tag(test_user.id, TagCreate(name="work ITEMS", color=TagColor.GREEN))
    assert tag.label == "Work items"
    assert tag.code == "work-items"
    assert tag.color == "green"
    assert tag.owner_id == test_user.id
    assert tag.is_system is False


async def test_default_color_is_blue(tag_service, test_user):
    tag = await tag_service.create_tag(test_user.id, TagCreate(name="Later"))
    assert tag.color == "blue"


async def test_duplicate_code_conflicts(tag_service, test_user):
    await tag_service.create_tag(test_user.id, TagCreate(name="Work Items"))
    with pytest.raises(ConflictError):
        await tag_service.create_tag(test_user.id, TagCreate(name="workItems"))


async def test_system_code_cannot_be_shadowed(tag_service, test_user, system_tag):
    with pytest.raises(ConflictError):
        await tag_service.create_tag(test_user.id, TagCreate(name="general"))


async def test_same_code_for_different_users_is_fine(tag_service, test_user, other_user):
    await tag_service.create_tag(test_user.id, TagCreate(name="Home"))
    tag = await tag_service.create_tag(other_user.id, TagCreate(name="Home"))
    assert tag.owner_id == other_user.id


async def test_list_shows_system_and_own_tags_only(tag_service, test_user, other_user, system_tag):
    await tag_service.create_tag(test_user.id, TagCreate(name="Mine"))
    await tag_service.create_tag(other_user.id, TagCreate(name="Theirs"))

    codes = {tag.code for tag in await tag_service.list_tags(test_user.id)}
    assert codes == {"general", "mine"}


async def test_update_rederives_code(tag_service, test_user):
    tag = await tag_service.create_tag(test_user.id, TagCreate(name="Todo"))
    updated = await tag_service.update_tag(tag.id, test_user.id, TagUpdate(name="to do", color=TagColor.RED))
    assert (updated.label, updated.code, updated.color) == ("To do", "to-do", "red")


async def test_update_to_taken_code_conflicts(tag_service, test_user):
    await tag_service.create_tag(test_user.id, TagCreate(name="Alpha"))
    beta = await tag_service.create_tag(test_user.id, TagCreate(name="Beta"))
    with pytest.raises(ConflictError):
        await tag_service.update_tag(beta.id, test_user.id, TagUpdate(name="ALPHA"))


async def test_system_tags_are_read_only(tag_service, test_user, system_tag):
    with pytest.raises(ForbiddenError):
        await tag_service.update_tag(system_tag.id, test_user.id, TagUpdate(color=TagColor.RED))
    with pytest.raises(ForbiddenError):
        await tag_service.delete_tag(system_tag.id, test_user.id)


async def test_other_users_tags_are_invisible(tag_service, test_user, other_user):
    theirs = await tag_service.create_tag(other_user.id, TagCreate(name="Theirs"))
    with pytest.raises(NotFoundError):
        await tag_service.update_tag(theirs.id, test_user.id, TagUpdate(color=TagColor.RED))
    with pytest.raises(NotFoundError):
        await tag_service.delete_tag(uuid.uuid4(), test_user.id)


async def test_delete_tag_removes_its_notes_and_compacts(
    tag_service, note_service, test_user, system_tag, board
):
    errands = await tag_service.create_tag(test_user.id, TagCreate(name="Errands"))
    for title, tag in [("A", "general"), ("B", "errands"), ("C", "general"), ("D", "errands"), ("E", "general")]:
        await note_service.create_note(test_user.id, NoteCreate(title=title, content="x", tag=tag))

    affected = await tag_service.delete_tag(errands.id, test_user.id)

    assert affected == 1
    assert await board(test_user) == {"A": 0, "C": 1, "E": 2}
    codes = {tag.code for tag in await tag_service.list_tags(test_user.id)}
    assert codes == {"general"}
