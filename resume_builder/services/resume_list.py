"""View model for the resume picker: metadata list, selection and search."""

import asyncio
from typing import Generic, List, Optional, TypeVar
from resume_builder.core.config import get_settings
from resume_builder.models.resume_models import ResumeMeta

T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    Hold a value that only settles once it stops changing for ``delay`` seconds.

    Settling is scheduled on the running event loop; without one, or with a
    zero delay, new values settle immediately.
    """

    def __init__(self, value: T, delay: float):
        self.delay = delay
        self._value = value
        self._pending = value
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def value(self) -> T:
        """The settled value."""
        return self._value

    @property
    def pending_value(self) -> T:
        """The most recently set value, settled or not."""
        return self._pending

    @property
    def is_pending(self) -> bool:
        return self._handle is not None

    def set(self, value: T) -> None:
        """Set a new value, restarting the delay."""
        self._pending = value
        self._cancel()
        if self.delay <= 0:
            self._settle()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._settle()
            return
        self._handle = loop.call_later(self.delay, self._settle)

    def flush(self) -> None:
        """Settle the pending value now."""
        self._cancel()
        self._settle()

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _settle(self) -> None:
        self._handle = None
        self._value = self._pending


class ResumeListModel:
    """Metadata list shown in the resume picker."""

    def __init__(self, search_delay: Optional[float] = None):
        """
        Initialize the list model.

        Args:
            search_delay: Seconds the search query must be stable before
                filtering uses it. Defaults to the configured search_debounce_seconds
        """
        if search_delay is None:
            search_delay = get_settings().search_debounce_seconds
        self.items: List[ResumeMeta] = []
        self.selected_id: Optional[str] = None
        self._query: Debouncer[str] = Debouncer("", search_delay)

    def set_items(self, items: List[ResumeMeta]) -> None:
        """Replace the listing, keeping the order it was given in."""
        self.items = list(items)

    def select(self, resume_id: Optional[str]) -> None:
        self.selected_id = resume_id

    def first_id(self) -> Optional[str]:
        """Id of the first entry, i.e. the most recently updated resume."""
        return self.items[0].id if self.items else None

    def get(self, resume_id: str) -> Optional[ResumeMeta]:
        return next((meta for meta in self.items if meta.id == resume_id), None)

    @property
    def query(self) -> str:
        """Search text as typed."""
        return self._query.pending_value

    @property
    def active_query(self) -> str:
        """Search text currently applied to the listing."""
        return self._query.value

    def set_query(self, query: str) -> None:
        """Update the search text; filtering follows after the debounce delay."""
        self._query.set(query)

    def flush_query(self) -> None:
        """Apply the typed search text immediately."""
        self._query.flush()

    @property
    def filtered(self) -> List[ResumeMeta]:
        """Entries whose title contains the active query, case-insensitively."""
        needle = self.active_query.lower()
        if not needle:
            return list(self.items)
        return [meta for meta in self.items if needle in meta.title.lower()]
