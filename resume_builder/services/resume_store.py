"""Service for storing resumes as JSON files on disk."""

import json
import logging
import os
import re
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional
from pydantic import ValidationError
from resume_builder.core.config import get_settings
from resume_builder.core.errors import (
    InvalidResumeIdError,
    ResumeNotFoundError,
    ResumeStorageError,
)
from resume_builder.models.request_models import ResumeCreateRequest
from resume_builder.models.resume_models import (
    Resume,
    ResumeMeta,
    dump_resume,
    new_resume_skeleton,
)

logger = logging.getLogger(__name__)

_RESUME_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

DEFAULT_TITLE = "Untitled"


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp as sortable ISO-8601 text with microseconds."""
    return moment.isoformat(timespec="microseconds")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stored timestamp.

    Accepts the ISO-8601 forms written by this service and by JavaScript's
    ``toISOString`` (trailing ``Z``). Naive values are taken as UTC.

    Returns:
        Optional[datetime]: Parsed timestamp, or None when absent or unparseable
    """
    if not value or not isinstance(value, str):
        return None
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class ResumeStore:
    """Persist one JSON document per resume, keyed by resume id."""

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the resume store.

        Args:
            data_dir: Directory holding the resume files. Defaults to the configured data_dir
            clock: Source of the current UTC time. Defaults to the system clock
        """
        if data_dir is None:
            data_dir = get_settings().data_dir
        self.data_dir = Path(data_dir)
        self._clock = clock or utc_now

    def list_resumes(self) -> List[ResumeMeta]:
        """
        List metadata of all stored resumes.

        Creates the storage root when it does not exist yet. Files that
        cannot be read are skipped.

        Returns:
            List[ResumeMeta]: Metadata ordered by updatedAt, most recent first;
                resumes without updatedAt come last
        """
        self._ensure_data_dir()

        resumes: List[ResumeMeta] = []
        for path in sorted(self.data_dir.glob("*.json")):
            try:
                data = self._read(path)
            except ResumeStorageError as e:
                logger.warning("Skipping unreadable resume file %s: %s", path, e)
                continue

            created_at = data.get("createdAt")
            updated_at = data.get("updatedAt")
            resumes.append(ResumeMeta(
                id=str(data.get("id") or path.stem),
                title=str(data.get("title") or DEFAULT_TITLE),
                createdAt=created_at if isinstance(created_at, str) else None,
                updatedAt=updated_at if isinstance(updated_at, str) else None,
            ))

        resumes.sort(
            key=lambda meta: parse_timestamp(meta.updatedAt) or _OLDEST,
            reverse=True
        )
        return resumes

    def get_resume(self, resume_id: str) -> Resume:
        """
        Load a stored resume.

        Args:
            resume_id: Resume id

        Returns:
            Resume: The stored document

        Raises:
            ResumeNotFoundError: If no resume with that id exists
            ResumeStorageError: If the file cannot be read or is not a valid resume
        """
        path = self._path_for(resume_id)
        if not path.exists():
            raise ResumeNotFoundError(resume_id)

        data = self._read(path)
        data["id"] = resume_id
        try:
            return Resume.model_validate(data)
        except ValidationError as e:
            raise ResumeStorageError(
                f"Invalid resume data in {path}. Validation error: {e}"
            ) from e

    def create_resume(self, body: ResumeCreateRequest) -> Resume:
        """
        Create a new resume.

        The body is merged over the default skeleton; a new id and fresh
        createdAt/updatedAt are always generated.

        Args:
            body: Partial resume

        Returns:
            Resume: The stored document including generated fields
        """
        self._ensure_data_dir()

        skeleton = new_resume_skeleton(body.title or DEFAULT_TITLE)
        now = self._stamp(None)
        resume = Resume(
            id=self._claim_id(),
            title=skeleton.title,
            createdAt=now,
            updatedAt=now,
            profile=body.profile or skeleton.profile,
            sections=body.sections if body.sections is not None else skeleton.sections,
            styles=body.styles or skeleton.styles,
        )

        path = self._path_for(resume.id)
        try:
            self._write(path, dump_resume(resume))
        except ResumeStorageError:
            path.unlink(missing_ok=True)
            raise
        logger.info("Created resume %s (%r)", resume.id, resume.title)
        return resume

    def update_resume(self, resume_id: str, resume: Resume) -> Resume:
        """
        Replace a stored resume.

        The whole document is replaced. The id is forced to ``resume_id``,
        updatedAt is refreshed and createdAt is kept from the stored copy
        when the body has none.

        Args:
            resume_id: Resume id
            resume: Full resume document

        Returns:
            Resume: The stored document

        Raises:
            ResumeNotFoundError: If no resume with that id exists
        """
        path = self._path_for(resume_id)
        if not path.exists():
            raise ResumeNotFoundError(resume_id)

        try:
            previous = self._read(path)
        except ResumeStorageError as e:
            logger.warning("Overwriting unreadable resume file %s: %s", path, e)
            previous = {}

        updated = resume.model_copy(update={
            "id": resume_id,
            "createdAt": resume.createdAt or previous.get("createdAt"),
            "updatedAt": self._stamp(previous.get("updatedAt")),
        })

        self._write(path, dump_resume(updated))
        logger.info("Updated resume %s", resume_id)
        return updated

    def delete_resume(self, resume_id: str) -> None:
        """
        Delete a stored resume. Deleting a missing resume is not an error.

        Args:
            resume_id: Resume id
        """
        path = self._path_for(resume_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise ResumeStorageError(f"Error deleting file {path}: {e}") from e
        logger.info("Deleted resume %s", resume_id)

    def _path_for(self, resume_id: str) -> Path:
        if not resume_id or not _RESUME_ID_PATTERN.match(resume_id):
            raise InvalidResumeIdError(resume_id)
        return self.data_dir / f"{resume_id}.json"

    def _ensure_data_dir(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResumeStorageError(f"Error creating data directory {self.data_dir}: {e}") from e

    def _claim_id(self) -> str:
        """
        Reserve a new id by exclusively creating its (empty) file.

        Ids are millisecond epoch strings, bumped past any id already on disk.
        The exclusive create makes concurrent creates pick distinct ids.
        """
        candidate = int(self._clock().timestamp() * 1000)
        while True:
            path = self.data_dir / f"{candidate}.json"
            try:
                with open(path, "x", encoding="utf-8"):
                    pass
            except FileExistsError:
                candidate += 1
                continue
            except OSError as e:
                raise ResumeStorageError(f"Error creating file {path}: {e}") from e
            return str(candidate)

    def _stamp(self, previous: Optional[str]) -> str:
        """Current timestamp, strictly later than ``previous``."""
        now = self._clock()
        before = parse_timestamp(previous)
        if before is not None and now <= before:
            now = before + timedelta(microseconds=1)
        return format_timestamp(now)

    def _read(self, path: Path) -> dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ResumeStorageError(f"Invalid JSON format in {path}: {e}") from e
        except OSError as e:
            raise ResumeStorageError(f"Error reading file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ResumeStorageError(f"Expected a JSON object in {path}")
        return data

    def _write(self, path: Path, data: dict) -> None:
        # temp file in the same directory, then atomic replace
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.stem}.",
                suffix=".tmp",
                delete=False
            ) as f:
                tmp_path = f.name
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ResumeStorageError(f"Error writing file {path}: {e}") from e


# Singleton instance
_resume_store: Optional[ResumeStore] = None


def get_resume_store() -> ResumeStore:
    """
    Get or create the resume store singleton.

    Returns:
        ResumeStore: The store instance for the configured data_dir
    """
    global _resume_store
    if _resume_store is None:
        _resume_store = ResumeStore()
    return _resume_store
