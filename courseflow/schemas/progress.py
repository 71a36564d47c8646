"""
Progress schemas for courseflow.

Defines Pydantic models for:
- Persisted module progress (cursor + section count snapshot)
- Ephemeral attempt state for one question instance
- Exam submissions and finish outcomes
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Feedback(str, Enum):
    NONE = "none"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class ModuleProgress(BaseModel):
    """
    Persisted cursor for one module.

    current_section_index == section_count means the module was completed.
    section_count is None when only the cursor has ever been stored.
    """
    module_id: str
    current_section_index: int = Field(0, ge=0)
    section_count: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def index_within_count(self):
        if self.section_count is not None and self.current_section_index > self.section_count:
            raise ValueError(
                f"current_section_index {self.current_section_index} "
                f"exceeds section_count {self.section_count}"
            )
        return self

    @property
    def is_completed(self) -> bool:
        return self.section_count is not None and self.current_section_index == self.section_count


class AttemptState(BaseModel):
    """Selection, feedback and retry state for one question instance."""
    model_config = ConfigDict(validate_assignment=True)

    selected_answers: set[str] = set()
    retry_count: int = Field(0, ge=0)
    is_revealed: bool = False
    feedback: Feedback = Feedback.NONE
    exhausted: bool = False  # retry budget spent; Retry stays hidden until navigation


# -----------------------------------------------------------------------------
# Exam results
# -----------------------------------------------------------------------------

class ExamSubmission(BaseModel):
    exam_id: str
    exam_title: str
    user_id: str
    total_questions: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0)


class SubmissionResult(BaseModel):
    ok: bool
    error: Optional[str] = None


class FinishOutcome(BaseModel):
    """What happened when the learner finished an exam section."""
    handled: bool = False  # False when the current section is not an exam
    exam_id: Optional[str] = None
    total_questions: int = 0
    percentage: float = 0.0
    submitted: bool = False
    error: Optional[str] = None
    completed: bool = False
    advanced: bool = False
