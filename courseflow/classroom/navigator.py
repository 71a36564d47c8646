"""
Navigator - Section cursor, resume and write-through persistence.

Provides:
- Next/back navigation within one module
- Resume from the persisted cursor (with stale-progress clamping)
- A fresh QuestionAttempt on every move
- Section-changed notifications for the presentation layer
"""

import logging
from typing import Callable, Optional

from courseflow.config import MAX_RETRIES
from courseflow.schemas import ModuleProgress, Section

from .assessment import QuestionAttempt
from .progress import ProgressStore


logger = logging.getLogger(__name__)

SectionChangedCallback = Callable[[int, Optional[Section]], None]


class SectionNavigator:
    """
    Move a cursor across the ordered sections of one module.

    The cursor lives in [0, section_count]; section_count itself means the
    module is completed. Every cursor change is written to the progress
    store before the call returns.
    """

    def __init__(
        self,
        module_id: str,
        sections: list[Section],
        store: ProgressStore,
        max_retries: int = MAX_RETRIES,
    ):
        """
        Initialize navigator.

        Args:
            module_id: Module the sections belong to
            sections: Sections already sorted by order
            store: Progress store for cursor persistence
            max_retries: Retry budget for each knowledge check attempt
        """
        self.module_id = module_id
        self.sections = list(sections)
        self.store = store
        self.max_retries = max_retries
        self.cursor = 0
        self.transition_key = 0
        self.closed = False
        self._listeners: list[SectionChangedCallback] = []
        self.attempt = self._new_attempt()

    # -------------------------------------------------------------------------
    # Read-side
    # -------------------------------------------------------------------------

    @property
    def section_count(self) -> int:
        return len(self.sections)

    @property
    def is_empty(self) -> bool:
        return not self.sections

    @property
    def is_completed(self) -> bool:
        return not self.is_empty and self.cursor == self.section_count

    @property
    def current_section(self) -> Optional[Section]:
        if 0 <= self.cursor < self.section_count:
            return self.sections[self.cursor]
        return None

    @property
    def is_last_section(self) -> bool:
        return not self.is_empty and self.cursor == self.section_count - 1

    @property
    def controls_suppressed(self) -> bool:
        """Exam sections replace next/back with an explicit finish action."""
        section = self.current_section
        return section is not None and section.is_exam

    @property
    def position(self) -> tuple[int, int]:
        """Current page as (step, total); step is 1-based."""
        return (self.cursor + 1, self.section_count)

    @property
    def progress_fraction(self) -> float:
        if self.is_completed:
            return 1.0
        if self.section_count <= 1:
            return 0.0
        return self.cursor / (self.section_count - 1)

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def subscribe(self, callback: SectionChangedCallback):
        """Register a callback fired after every cursor change."""
        self._listeners.append(callback)

    def _emit_section_changed(self):
        self.transition_key += 1
        for callback in self._listeners:
            callback(self.cursor, self.current_section)

    # -------------------------------------------------------------------------
    # Resume
    # -------------------------------------------------------------------------

    def resume(self) -> int:
        """
        Seed the cursor from the progress store.

        A persisted cursor beyond the freshly loaded section count (content
        got shorter) is clamped to the count and written back.

        Returns:
            The resumed cursor
        """
        if self.is_empty:
            # Nothing to show; leave any stored progress for a later load
            self.cursor = 0
            self.attempt = self._new_attempt()
            return self.cursor

        self.store.set_section_count(self.module_id, self.section_count)
        saved = self.store.get(self.module_id)
        if saved is None:
            self.cursor = 0
        elif saved.current_section_index > self.section_count:
            logger.warning(
                "Clamping stale progress for %s: cursor %d beyond %d sections",
                self.module_id, saved.current_section_index, self.section_count,
            )
            self.cursor = self.section_count
            self._persist()
        else:
            self.cursor = saved.current_section_index

        self.attempt = self._new_attempt()
        return self.cursor

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def go_to(self, delta: int) -> bool:
        """
        Move the cursor by one section.

        No-op (attempt kept) when the destination is outside
        [0, section_count - 1] or the navigator was closed.

        Returns:
            True if the cursor moved
        """
        if delta not in (1, -1):
            raise ValueError(f"Navigation delta must be +1 or -1, got {delta}")
        if self.closed:
            return False

        destination = self.cursor + delta
        if not 0 <= destination < self.section_count:
            return False

        self.cursor = destination
        self.attempt = self._new_attempt()
        self._persist()
        self._emit_section_changed()
        return True

    def next(self) -> bool:
        return self.go_to(1)

    def back(self) -> bool:
        return self.go_to(-1)

    def mark_completed(self) -> bool:
        """Move the cursor past the last section (module completed)."""
        if self.closed or self.is_empty:
            return False
        self.cursor = self.section_count
        self.attempt = self._new_attempt()
        self._persist()
        self._emit_section_changed()
        return True

    def close(self):
        """Detach; a closed navigator no longer moves or writes progress."""
        self.closed = True
        self._listeners.clear()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _new_attempt(self) -> QuestionAttempt:
        return QuestionAttempt(self.current_section, max_retries=self.max_retries)

    def _persist(self):
        self.store.set(
            self.module_id,
            ModuleProgress(
                module_id=self.module_id,
                current_section_index=self.cursor,
                section_count=self.section_count,
            ),
        )
