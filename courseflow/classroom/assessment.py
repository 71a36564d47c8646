"""
Assessment - Knowledge check grading and the bounded retry policy.

Provides:
- Canonical answer key parsing and set-equality evaluation
- QuestionAttempt: selection, reveal and retry state for one question instance
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from courseflow.config import MAX_RETRIES
from courseflow.errors import MalformedAnswerKey, NoSelection, RetryContractViolation
from courseflow.schemas import AttemptState, Feedback, Section


logger = logging.getLogger(__name__)

CORRECT_MESSAGE = "Correct answer!"
INCORRECT_MESSAGE = "Wrong answer. Try again."


@dataclass(frozen=True)
class Evaluation:
    correct: bool


@dataclass(frozen=True)
class RetryDecision:
    allowed: bool


# -----------------------------------------------------------------------------
# Answer evaluation
# -----------------------------------------------------------------------------

def parse_answer_key(canonical: Optional[str]) -> frozenset[str]:
    """
    Parse a comma-separated answer key into its set of option keys.

    Raises:
        MalformedAnswerKey: If the key is empty, has an empty entry,
            or repeats a key after trimming
    """
    if canonical is None or not canonical.strip():
        raise MalformedAnswerKey(canonical, "Answer key is empty")

    tokens = [token.strip() for token in canonical.split(",")]
    if any(not token for token in tokens):
        raise MalformedAnswerKey(canonical, f"Answer key {canonical!r} has an empty entry")

    keys = frozenset(tokens)
    if len(keys) != len(tokens):
        raise MalformedAnswerKey(canonical, f"Answer key {canonical!r} repeats a key")
    return keys


def evaluate(selected: Iterable[str], canonical: Optional[str]) -> Evaluation:
    """
    Grade a selection against the canonical answer key.

    Correct only when the selection equals the canonical set: no missing
    keys and no extra keys.
    """
    canonical_keys = parse_answer_key(canonical)
    selected_keys = set(selected)
    correct = (
        len(selected_keys) == len(canonical_keys)
        and selected_keys <= canonical_keys
        and canonical_keys <= selected_keys
    )
    return Evaluation(correct=correct)


# -----------------------------------------------------------------------------
# Question attempt
# -----------------------------------------------------------------------------

class QuestionAttempt:
    """
    Learner interaction with one knowledge check between resets.

    Created fresh whenever the section cursor moves. Input is frozen from
    reveal until the next retry.
    """

    def __init__(self, section: Optional[Section], max_retries: int = MAX_RETRIES):
        self.section = section
        self.max_retries = max_retries
        self.state = AttemptState()

    # -------------------------------------------------------------------------
    # Read-side helpers for the presentation layer
    # -------------------------------------------------------------------------

    @property
    def selected_answers(self) -> set[str]:
        return set(self.state.selected_answers)

    @property
    def retry_count(self) -> int:
        return self.state.retry_count

    @property
    def feedback(self) -> Feedback:
        return self.state.feedback

    @property
    def input_locked(self) -> bool:
        return self.state.is_revealed

    @property
    def can_show_answer(self) -> bool:
        return bool(self.state.selected_answers) and self.state.feedback == Feedback.NONE

    @property
    def can_retry(self) -> bool:
        """Retry is offered after a wrong answer until one retry has been refused."""
        return self.state.feedback == Feedback.INCORRECT and not self.state.exhausted

    @property
    def feedback_message(self) -> Optional[str]:
        if self.state.feedback == Feedback.CORRECT:
            return CORRECT_MESSAGE
        if self.state.feedback == Feedback.INCORRECT:
            return INCORRECT_MESSAGE
        return None

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def _check_option(self, key: str):
        options = self.section.question_selection if self.section else None
        if not options or key not in options:
            raise ValueError(f"Unknown option {key!r} for this question")

    def select(self, key: str) -> bool:
        """Select an option. Single-select replaces any previous choice."""
        return self.toggle(key, True)

    def toggle(self, key: str, checked: bool) -> bool:
        """
        Add or remove an option from the selection.

        Returns False without changing anything while input is locked.
        """
        self._check_option(key)
        if self.state.is_revealed:
            return False

        selected = set(self.state.selected_answers)
        if checked:
            if self.section.is_multi_select:
                selected.add(key)
            else:
                selected = {key}
        else:
            selected.discard(key)

        self.state.selected_answers = selected
        self.state.feedback = Feedback.NONE
        return True

    # -------------------------------------------------------------------------
    # Reveal / retry
    # -------------------------------------------------------------------------

    def reveal_answer(self) -> Evaluation:
        """
        Grade the current selection and lock input.

        A malformed answer key is logged and graded as incorrect so a
        content defect never passes the learner.

        Raises:
            NoSelection: If nothing is selected (state is left untouched)
        """
        if not self.state.selected_answers:
            raise NoSelection("Select at least one option before showing the answer")

        canonical = self.section.question_answer if self.section else None
        try:
            result = evaluate(self.state.selected_answers, canonical)
        except MalformedAnswerKey as e:
            title = self.section.title if self.section else "<no section>"
            logger.error("Malformed answer key in section %r: %s", title, e)
            result = Evaluation(correct=False)

        self.state.is_revealed = True
        if result.correct:
            self.state.feedback = Feedback.CORRECT
            self.state.retry_count = 0
        else:
            self.state.feedback = Feedback.INCORRECT
        return result

    def request_retry(self) -> RetryDecision:
        """
        Clear the attempt for another try.

        Allowed while retry_count is under the budget. Past it, the attempt
        is reset to zero retries, marked exhausted and the retry refused.

        Raises:
            RetryContractViolation: If the last evaluation was not incorrect
        """
        if self.state.feedback != Feedback.INCORRECT:
            raise RetryContractViolation("Retry is only available after an incorrect answer")

        self.state.selected_answers = set()
        self.state.feedback = Feedback.NONE
        self.state.is_revealed = False

        if not self.state.exhausted and self.state.retry_count < self.max_retries:
            self.state.retry_count += 1
            return RetryDecision(allowed=True)

        self.state.retry_count = 0
        self.state.exhausted = True
        return RetryDecision(allowed=False)
