"""
Error taxonomy for courseflow.

Only ContentLoadFailure and ResultSubmissionFailure are ever shown to the
learner. The rest signal caller or content-authoring defects.
"""

from typing import Optional


class CourseflowError(Exception):
    """Base class for all courseflow errors."""


# -----------------------------------------------------------------------------
# Content loading
# -----------------------------------------------------------------------------

class ContentLoadFailure(CourseflowError):
    """Module content could not be loaded."""

    def __init__(self, module_id: str, message: str):
        super().__init__(message)
        self.module_id = module_id


class NotFound(ContentLoadFailure):
    """No content exists for the requested module identifier."""


class ParseError(ContentLoadFailure):
    """Module payload is malformed."""


# -----------------------------------------------------------------------------
# Assessment
# -----------------------------------------------------------------------------

class MalformedAnswerKey(CourseflowError, ValueError):
    """Canonical answer string is empty or contains duplicate keys."""

    def __init__(self, answer_key: Optional[str], message: str):
        super().__init__(message)
        self.answer_key = answer_key


class NoSelection(CourseflowError):
    """Grading was requested before any option was selected."""


class RetryContractViolation(CourseflowError):
    """Retry was requested when the last evaluation was not incorrect."""


# -----------------------------------------------------------------------------
# Exam submission
# -----------------------------------------------------------------------------

class IdentityUnavailable(CourseflowError):
    """No current user is known, so exam results cannot be attributed."""


class ResultSubmissionFailure(CourseflowError):
    """The result sink rejected or failed an exam submission."""

    def __init__(self, exam_id: str, error: str):
        super().__init__(f"Failed to save exam result for {exam_id}: {error}")
        self.exam_id = exam_id
        self.error = error
