"""
ProgressionEngine - One learner's pass through a module.

Combines the content provider, progress store, navigator, assessment and
exam scorer behind the actions the presentation layer triggers.
"""

import logging
from typing import Optional, Protocol

from courseflow.config import Settings
from courseflow.errors import ContentLoadFailure
from courseflow.schemas import FinishOutcome, Section

from .assessment import Evaluation, QuestionAttempt, RetryDecision
from .loader import ContentProvider
from .navigator import SectionChangedCallback, SectionNavigator
from .progress import ProgressStore
from .scoring import ExamScorer, ResultSink


logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    def current_user_id(self) -> Optional[str]:
        ...


class StaticIdentity:
    """Identity provider returning a fixed user id (None when signed out)."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    def current_user_id(self) -> Optional[str]:
        return self.user_id


class ProgressionEngine:
    """
    Drive module progression for the presentation layer.

    Content loads and result submissions are awaited; learner actions may
    arrive while either is pending. A load that finishes after another
    module was requested is discarded.
    """

    def __init__(
        self,
        provider: ContentProvider,
        store: ProgressStore,
        sink: ResultSink,
        identity: IdentityProvider,
        settings: Optional[Settings] = None,
    ):
        self.provider = provider
        self.store = store
        self.identity = identity
        self.settings = settings or Settings()
        self.scorer = ExamScorer(sink)

        self.module_id: Optional[str] = None
        self.navigator: Optional[SectionNavigator] = None
        self.load_error: Optional[ContentLoadFailure] = None
        self.loading = False
        self.last_outcome: Optional[FinishOutcome] = None
        self._listeners: list[SectionChangedCallback] = []
        self._generation = 0

    # -------------------------------------------------------------------------
    # Module lifecycle
    # -------------------------------------------------------------------------

    async def load_module(self, module_id: str) -> bool:
        """
        Load a module and resume the learner's position.

        Returns:
            True if this load was applied (content or empty-state), False if
            it was discarded because another module was requested meanwhile
        """
        self._detach()
        self._generation += 1
        generation = self._generation
        self.module_id = module_id
        self.load_error = None
        self.last_outcome = None
        self.loading = True

        try:
            sections = await self.provider.load(module_id)
        except ContentLoadFailure as e:
            if not self._is_current_load(module_id, generation):
                return False
            logger.error("Could not load module %s: %s", module_id, e)
            self.load_error = e
            self.loading = False
            self.navigator = SectionNavigator(module_id, [], self.store, self.settings.max_retries)
            return True

        if not self._is_current_load(module_id, generation):
            return False

        navigator = SectionNavigator(module_id, sections, self.store, self.settings.max_retries)
        navigator.resume()
        for callback in self._listeners:
            navigator.subscribe(callback)
        self.navigator = navigator
        self.loading = False
        return True

    def _is_current_load(self, module_id: str, generation: int) -> bool:
        if self.module_id == module_id and self._generation == generation:
            return True
        logger.info("Discarding stale load of %s; %s requested since", module_id, self.module_id)
        return False

    def close_module(self):
        """Return to the module list."""
        self._detach()
        self.module_id = None
        self.load_error = None
        self.loading = False
        self.last_outcome = None

    def _detach(self):
        if self.navigator is not None:
            self.navigator.close()
        self.navigator = None

    def subscribe(self, callback: SectionChangedCallback):
        """Register a section-changed callback for this and later modules."""
        self._listeners.append(callback)
        if self.navigator is not None:
            self.navigator.subscribe(callback)

    # -------------------------------------------------------------------------
    # Read-side
    # -------------------------------------------------------------------------

    @property
    def has_content(self) -> bool:
        return self.navigator is not None and not self.navigator.is_empty

    @property
    def current_section(self) -> Optional[Section]:
        return self.navigator.current_section if self.navigator else None

    @property
    def attempt(self) -> Optional[QuestionAttempt]:
        return self.navigator.attempt if self.navigator else None

    # -------------------------------------------------------------------------
    # Learner actions
    # -------------------------------------------------------------------------

    def _require_attempt(self) -> QuestionAttempt:
        if self.navigator is None:
            raise RuntimeError("No module loaded")
        return self.navigator.attempt

    def select_option(self, key: str) -> bool:
        return self._require_attempt().select(key)

    def toggle_option(self, key: str, checked: bool) -> bool:
        return self._require_attempt().toggle(key, checked)

    def reveal_answer(self) -> Evaluation:
        return self._require_attempt().reveal_answer()

    def request_retry(self) -> RetryDecision:
        return self._require_attempt().request_retry()

    def next(self) -> bool:
        """Move forward; refused on exam sections, which use finish_module."""
        if self.navigator is None or self.navigator.controls_suppressed:
            return False
        return self.navigator.next()

    def back(self) -> bool:
        """Move backward; refused on exam sections."""
        if self.navigator is None or self.navigator.controls_suppressed:
            return False
        return self.navigator.back()

    async def finish_module(self, score: int) -> FinishOutcome:
        """
        Finish the current exam section with the exam sub-flow's final score.

        The current user is read from the identity provider at call time.
        """
        navigator = self.navigator
        if navigator is None:
            return FinishOutcome()
        outcome = await self.scorer.finish_module(navigator, score, self.identity.current_user_id())
        if self.navigator is navigator:
            self.last_outcome = outcome
        return outcome
