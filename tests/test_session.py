"""Tests for the resume editing session."""

import asyncio
from typing import List, Optional
import pytest
from resume_builder.core.errors import InvalidResumeIdError, ResumeStorageError
from resume_builder.models.request_models import ResumeCreateRequest
from resume_builder.services import editor
from resume_builder.services.gateways import LocalResumeGateway
from resume_builder.services.resume_list import ResumeListModel
from resume_builder.services.session import ResumeSession, SessionState


class RecordingNotifier:
    """Notifier that keeps every message."""

    def __init__(self):
        self.messages: List[tuple] = []

    def success(self, message: str, description: Optional[str] = None) -> None:
        self.messages.append(("success", message))

    def error(self, message: str, description: Optional[str] = None) -> None:
        self.messages.append(("error", message))

    def info(self, message: str, description: Optional[str] = None) -> None:
        self.messages.append(("info", message))

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.messages]


class ScriptedConfirm:
    """Confirmation prompt answering with a fixed choice."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.prompts: List[str] = []

    async def __call__(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer


class FlakyGateway(LocalResumeGateway):
    """Local gateway whose writes can be made to fail."""

    fail_updates = False
    fail_creates = False

    async def update_resume(self, resume_id, resume):
        if self.fail_updates:
            raise ResumeStorageError("disk full")
        return await super().update_resume(resume_id, resume)

    async def create_resume(self, body):
        if self.fail_creates:
            raise ResumeStorageError("disk full")
        return await super().create_resume(body)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def gateway(store):
    return FlakyGateway(store)


def make_session(gateway, notifier, confirm_answer=True):
    return ResumeSession(
        gateway,
        notifier=notifier,
        confirm=ScriptedConfirm(confirm_answer),
        resume_list=ResumeListModel(search_delay=0),
    )


@pytest.mark.asyncio
async def test_start_with_empty_storage(gateway, notifier):
    session = make_session(gateway, notifier)

    await session.start()

    assert session.state == SessionState.EMPTY
    assert session.current_id is None
    assert session.resume_list.items == []


@pytest.mark.asyncio
async def test_start_opens_most_recent_resume(gateway, notifier, store):
    """Test the auto-select rule on the first listing."""
    store.create_resume(ResumeCreateRequest(title="older"))
    newer = store.create_resume(ResumeCreateRequest(title="newer"))
    session = make_session(gateway, notifier)

    await session.start()

    assert session.current_id == newer.id
    assert session.data.title == "newer"
    assert session.state == SessionState.READY
    assert session.resume_list.selected_id == newer.id
    assert not session.is_dirty


@pytest.mark.asyncio
async def test_create_resume_opens_it(gateway, notifier):
    """Test creating a resume from the default skeleton."""
    session = make_session(gateway, notifier)

    resume_id = await session.create_resume("Test")

    assert session.current_id == resume_id
    assert session.data.createdAt == session.data.updatedAt
    assert len(session.data.sections) == 4
    assert all(section.visible is True for section in session.data.sections)
    assert [meta.id for meta in session.resume_list.items] == [resume_id]
    assert notifier.kinds() == ["success"]


@pytest.mark.asyncio
async def test_create_failure_propagates(gateway, notifier):
    gateway.fail_creates = True
    session = make_session(gateway, notifier)

    with pytest.raises(ResumeStorageError):
        await session.create_resume("Test")

    assert session.current_id is None
    assert notifier.kinds() == ["error"]


@pytest.mark.asyncio
async def test_dirty_tracking(gateway, notifier):
    """Test dirty state across edit, save and a no-op edit."""
    session = make_session(gateway, notifier)
    await session.create_resume("Test")

    session.update_data(editor.set_profile_field(session.data, editor.ProfileField.NAME, "Jane"))
    assert session.is_dirty

    assert await session.save_resume() is True
    assert not session.is_dirty

    session.update_data(session.data.model_copy())
    assert not session.is_dirty

    reverted = editor.set_profile_field(session.data, editor.ProfileField.NAME, "Someone")
    session.update_data(reverted)
    session.update_data(editor.set_profile_field(reverted, editor.ProfileField.NAME, "Jane"))
    assert not session.is_dirty


@pytest.mark.asyncio
async def test_save_persists_and_refreshes_listing(gateway, notifier, store):
    session = make_session(gateway, notifier)
    resume_id = await session.create_resume("Test")
    before = session.resume_list.get(resume_id).updatedAt

    session.update_data(editor.set_section_title(session.data, "exp", "Work"))
    await session.save_resume()

    assert store.get_resume(resume_id).sections[0].title == "Work"
    assert session.resume_list.get(resume_id).updatedAt > before


@pytest.mark.asyncio
async def test_save_failure_keeps_edits(gateway, notifier):
    """Test that a failed save leaves the document dirty for a retry."""
    session = make_session(gateway, notifier)
    await session.create_resume("Test")
    edited = editor.set_section_title(session.data, "exp", "Work")
    session.update_data(edited)

    gateway.fail_updates = True
    assert await session.save_resume() is False

    assert session.data is edited
    assert session.is_dirty
    assert notifier.kinds()[-1] == "error"
    assert session.state == SessionState.READY

    gateway.fail_updates = False
    assert await session.save_resume() is True
    assert not session.is_dirty


@pytest.mark.asyncio
async def test_save_without_document_is_noop(gateway, notifier):
    session = make_session(gateway, notifier)

    assert await session.save_resume() is False
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_select_clean_switches_without_prompt(gateway, notifier, store):
    other = store.create_resume(ResumeCreateRequest(title="other"))
    session = make_session(gateway, notifier)
    await session.create_resume("current")

    assert await session.select_resume(other.id) is True

    assert session.current_id == other.id
    assert session.confirm.prompts == []


@pytest.mark.asyncio
async def test_select_same_resume_is_noop(gateway, notifier):
    session = make_session(gateway, notifier)
    resume_id = await session.create_resume("current")

    assert await session.select_resume(resume_id) is False
    assert session.current_id == resume_id


@pytest.mark.asyncio
async def test_select_dirty_declined_stays(gateway, notifier, store):
    """Test that declining the prompt abandons the switch."""
    other = store.create_resume(ResumeCreateRequest(title="other"))
    session = make_session(gateway, notifier, confirm_answer=False)
    current_id = await session.create_resume("current")
    edited = editor.set_section_title(session.data, "exp", "Unsaved")
    session.update_data(edited)

    assert await session.select_resume(other.id) is False

    assert session.current_id == current_id
    assert session.data is edited
    assert session.is_dirty
    assert len(session.confirm.prompts) == 1
    assert store.get_resume(current_id).sections[0].title == "Experience"


@pytest.mark.asyncio
async def test_select_dirty_accepted_saves_then_switches(gateway, notifier, store):
    other = store.create_resume(ResumeCreateRequest(title="other"))
    session = make_session(gateway, notifier, confirm_answer=True)
    current_id = await session.create_resume("current")
    session.update_data(editor.set_section_title(session.data, "exp", "Saved on switch"))

    assert await session.select_resume(other.id) is True

    assert session.current_id == other.id
    assert store.get_resume(current_id).sections[0].title == "Saved on switch"


@pytest.mark.asyncio
async def test_select_dirty_switches_even_if_save_fails(gateway, notifier, store):
    other = store.create_resume(ResumeCreateRequest(title="other"))
    session = make_session(gateway, notifier, confirm_answer=True)
    await session.create_resume("current")
    session.update_data(editor.set_section_title(session.data, "exp", "Lost"))
    gateway.fail_updates = True

    assert await session.select_resume(other.id) is True

    assert session.current_id == other.id
    assert "error" in notifier.kinds()


@pytest.mark.asyncio
async def test_select_missing_resume_resets(gateway, notifier):
    """Test that a failed fetch leaves the session empty."""
    session = make_session(gateway, notifier)
    await session.create_resume("current")

    assert await session.select_resume("missing") is False

    assert session.state == SessionState.EMPTY
    assert session.data is None
    assert session.current_id is None
    assert notifier.kinds()[-1] == "error"


@pytest.mark.asyncio
async def test_delete_current_resume_discards_unsaved_changes(gateway, notifier, store):
    """Test that deleting the open resume never prompts."""
    session = make_session(gateway, notifier, confirm_answer=False)
    resume_id = await session.create_resume("current")
    session.update_data(editor.set_section_title(session.data, "exp", "Unsaved"))

    await session.delete_resume(resume_id)

    assert session.state == SessionState.EMPTY
    assert session.current_id is None
    assert session.confirm.prompts == []
    assert store.list_resumes() == []


@pytest.mark.asyncio
async def test_delete_other_resume_keeps_session(gateway, notifier, store):
    other = store.create_resume(ResumeCreateRequest(title="other"))
    session = make_session(gateway, notifier)
    resume_id = await session.create_resume("current")

    await session.delete_resume(other.id)

    assert session.current_id == resume_id
    assert [meta.id for meta in session.resume_list.items] == [resume_id]


class SlowGateway(LocalResumeGateway):
    """Gateway that holds back loads of one resume until released."""

    def __init__(self, store, slow_id):
        super().__init__(store)
        self.slow_id = slow_id
        self.release = asyncio.Event()

    async def get_resume(self, resume_id):
        if resume_id == self.slow_id:
            await self.release.wait()
        return await super().get_resume(resume_id)


@pytest.mark.asyncio
async def test_stale_load_is_discarded(store, notifier):
    """Test that a slow response for an abandoned resume is ignored."""
    slow = store.create_resume(ResumeCreateRequest(title="slow"))
    fast = store.create_resume(ResumeCreateRequest(title="fast"))
    gateway = SlowGateway(store, slow.id)
    session = make_session(gateway, notifier)

    slow_load = asyncio.create_task(session.select_resume(slow.id))
    await asyncio.sleep(0)
    assert session.state == SessionState.LOADING

    assert await session.select_resume(fast.id) is True
    gateway.release.set()
    assert await slow_load is False

    assert session.current_id == fast.id
    assert session.data.title == "fast"
    assert session.state == SessionState.READY


class CountingGateway(LocalResumeGateway):
    """Gateway recording overlapping updates."""

    def __init__(self, store):
        super().__init__(store)
        self.active = 0
        self.max_active = 0
        self.saved_titles: List[str] = []

    async def update_resume(self, resume_id, resume):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0.01)
            self.saved_titles.append(resume.sections[0].title)
            return await super().update_resume(resume_id, resume)
        finally:
            self.active -= 1


@pytest.mark.asyncio
async def test_saves_are_serialized(store, notifier):
    """Test that overlapping saves run one after another."""
    gateway = CountingGateway(store)
    session = make_session(gateway, notifier)
    resume_id = await session.create_resume("current")

    session.update_data(editor.set_section_title(session.data, "exp", "first"))
    first = asyncio.create_task(session.save_resume())
    await asyncio.sleep(0)
    session.update_data(editor.set_section_title(session.data, "exp", "second"))
    second = asyncio.create_task(session.save_resume())
    await asyncio.gather(first, second)

    assert gateway.max_active == 1
    assert gateway.saved_titles == ["first", "second"]
    assert store.get_resume(resume_id).sections[0].title == "second"
    assert not session.is_dirty


@pytest.mark.asyncio
async def test_delete_failure_propagates(gateway, notifier):
    session = make_session(gateway, notifier)

    with pytest.raises(InvalidResumeIdError):
        await session.delete_resume("bad.id")

    assert notifier.kinds() == ["error"]
