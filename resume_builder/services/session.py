"""Editing session: the open resume, its unsaved changes and persistence."""

import asyncio
import logging
from enum import Enum
from typing import Optional
from resume_builder.core.errors import ResumeError
from resume_builder.models.request_models import ResumeCreateRequest
from resume_builder.models.resume_models import (
    Resume,
    new_resume_skeleton,
    serialize_resume,
)
from resume_builder.services.gateways import ResumeGateway
from resume_builder.services.notifications import (
    ConfirmPrompt,
    LoggingNotifier,
    Notifier,
    always_confirm,
)
from resume_builder.services.resume_list import ResumeListModel

logger = logging.getLogger(__name__)

UNSAVED_CHANGES_PROMPT = "You have unsaved changes. Save before switching?"


class SessionState(str, Enum):
    """Lifecycle states of an editing session."""

    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"


class ResumeSession:
    """
    Holds the resume being edited and coordinates loading and saving it.

    The session remembers the serialized form of the last document that was
    loaded or saved; the document is dirty whenever its serialized form
    differs from that snapshot. Switching away from a dirty document asks for
    confirmation first, deleting the open document never does.

    Saves are serialized: a save started while another is in flight waits for
    it and then writes the latest document. Every load bumps a generation
    counter, so a response for a resume that is no longer current is dropped.
    """

    def __init__(
        self,
        gateway: ResumeGateway,
        notifier: Optional[Notifier] = None,
        confirm: Optional[ConfirmPrompt] = None,
        resume_list: Optional[ResumeListModel] = None
    ):
        """
        Initialize the session.

        Args:
            gateway: Resume storage
            notifier: User feedback sink. Defaults to logging
            confirm: Prompt used before leaving unsaved changes. Defaults to accepting
            resume_list: Picker view model kept in sync with the storage listing
        """
        self.gateway = gateway
        self.notifier = notifier or LoggingNotifier()
        self.confirm = confirm or always_confirm
        self.resume_list = resume_list or ResumeListModel()

        self.data: Optional[Resume] = None
        self.current_id: Optional[str] = None
        self._last_saved = ""
        self._loading = False
        self._saving = False
        self._save_lock = asyncio.Lock()
        self._generation = 0

    @property
    def state(self) -> SessionState:
        if self._saving:
            return SessionState.SAVING
        if self._loading:
            return SessionState.LOADING
        if self.data is not None:
            return SessionState.READY
        return SessionState.EMPTY

    @property
    def is_dirty(self) -> bool:
        """True when the open document differs from the last saved one."""
        return self.data is not None and serialize_resume(self.data) != self._last_saved

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_saving(self) -> bool:
        return self._saving

    async def start(self) -> None:
        """Load the listing and open the most recently updated resume."""
        await self.refresh_resumes()

    async def refresh_resumes(self) -> None:
        """
        Reload the metadata listing.

        When no resume is open, the first entry of the listing is opened.
        """
        try:
            resumes = await self.gateway.list_resumes()
        except ResumeError as e:
            logger.error("Failed to fetch resumes: %s", e)
            self.notifier.error("Failed to load the resume list.")
            return

        self.resume_list.set_items(resumes)
        if self.current_id is None:
            first_id = self.resume_list.first_id()
            if first_id is not None:
                await self._open(first_id)

    async def select_resume(self, resume_id: str) -> bool:
        """
        Switch to another resume.

        With unsaved changes the user is asked to save first; declining
        abandons the switch. When accepted, a save is attempted and the
        switch goes ahead whatever its outcome.

        Args:
            resume_id: Resume to open

        Returns:
            bool: True if the resume was opened
        """
        if resume_id == self.current_id:
            return False

        if self.is_dirty:
            if not await self.confirm(UNSAVED_CHANGES_PROMPT):
                return False
            await self.save_resume()

        return await self._open(resume_id)

    def update_data(self, resume: Resume) -> None:
        """Replace the open document with an edited version. Nothing is persisted."""
        self.data = resume

    async def save_resume(self) -> bool:
        """
        Persist the open document.

        Does nothing when no resume is open. On failure the document and its
        dirty state are left as they are so the save can be retried.

        Returns:
            bool: True if the document was saved
        """
        async with self._save_lock:
            if self.current_id is None or self.data is None:
                return False

            resume_id, resume = self.current_id, self.data
            self._saving = True
            try:
                await self.gateway.update_resume(resume_id, resume)
            except ResumeError as e:
                logger.error("Failed to save resume %s: %s", resume_id, e)
                self.notifier.error("Failed to save the resume.")
                return False
            finally:
                self._saving = False

            if self.current_id == resume_id:
                self._last_saved = serialize_resume(resume)

        self.notifier.success("Saved!")
        await self.refresh_resumes()
        return True

    async def create_resume(self, title: str) -> str:
        """
        Create a resume from the default skeleton and open it.

        Unsaved changes of the previously open resume are discarded.

        Args:
            title: Resume title

        Returns:
            str: Id of the new resume

        Raises:
            ResumeError: If the resume could not be created
        """
        skeleton = new_resume_skeleton(title)
        body = ResumeCreateRequest(
            title=title,
            profile=skeleton.profile,
            sections=skeleton.sections,
            styles=skeleton.styles,
        )
        try:
            created = await self.gateway.create_resume(body)
        except ResumeError as e:
            logger.error("Failed to create resume %r: %s", title, e)
            self.notifier.error("Failed to create the resume.", "Please try again.")
            raise

        self._generation += 1
        self.current_id = created.id
        self.resume_list.select(created.id)
        self._set_loaded(created)

        await self.refresh_resumes()
        self.notifier.success("Resume created", f'"{title}" was created.')
        return created.id

    async def delete_resume(self, resume_id: str) -> None:
        """
        Delete a resume.

        Deleting the open resume closes it, even with unsaved changes.

        Raises:
            ResumeError: If the resume could not be deleted
        """
        try:
            await self.gateway.delete_resume(resume_id)
        except ResumeError as e:
            logger.error("Failed to delete resume %s: %s", resume_id, e)
            self.notifier.error("Failed to delete the resume.", "Please try again.")
            raise

        await self.refresh_resumes()
        if self.current_id == resume_id:
            self._generation += 1
            self._reset()
        self.notifier.success("Resume deleted")

    async def _open(self, resume_id: str) -> bool:
        self._generation += 1
        generation = self._generation
        self.current_id = resume_id
        self.resume_list.select(resume_id)
        # the previous document must not be saved under the new id while loading
        self.data = None
        self._last_saved = ""
        self._loading = True
        try:
            resume = await self.gateway.get_resume(resume_id)
        except ResumeError as e:
            if generation != self._generation:
                return False
            logger.error("Failed to fetch resume %s: %s", resume_id, e)
            self.notifier.error("Failed to load the resume.")
            self._reset()
            return False
        finally:
            if generation == self._generation:
                self._loading = False

        if generation != self._generation:
            logger.debug("Discarding stale response for resume %s", resume_id)
            return False

        self._set_loaded(resume)
        return True

    def _set_loaded(self, resume: Resume) -> None:
        self.data = resume
        self._last_saved = serialize_resume(resume)

    def _reset(self) -> None:
        self.data = None
        self.current_id = None
        self._last_saved = ""
        self.resume_list.select(None)
