"""
Module content schemas for courseflow.

Defines Pydantic models for module content including:
- Sections (content pages, knowledge checks, exam boundaries)
- Exams and exam questions
- Whole-module payloads as served by the content files

Wire payloads use the legacy field names (q_selection, q_answer, moduleId, ...);
both those and the Python names are accepted.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


PRE_EXAM_TITLE = "Module Pre-Examination"
POST_EXAM_TITLE = "Module Post-Examination"


class Layout(str, Enum):
    COL_1 = "col-1"
    COL_2 = "col-2"
    COL_3 = "col-3"


class QuestionFieldType(str, Enum):
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"


class SectionKind(str, Enum):
    """Discriminates what a section is; assigned once when content is loaded."""
    CONTENT = "content"
    KNOWLEDGE_CHECK = "knowledge_check"
    PRE_EXAM = "pre_exam"
    POST_EXAM = "post_exam"


def _split_items(value: Optional[str]) -> list[str]:
    """Split a `;`-separated list field into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(";") if item.strip()]


# -----------------------------------------------------------------------------
# Exams
# -----------------------------------------------------------------------------

class ExamQuestion(BaseModel):
    """One exam question; worth exactly one point."""
    model_config = ConfigDict(extra="allow")

    question: str = ""
    choices: dict[str, str] = {}
    answer: Optional[str] = None


class Exam(BaseModel):
    exam_id: str = Field(..., validation_alias=AliasChoices("exam_id", "examId"))
    title: str = ""
    questions: list[ExamQuestion] = []

    @field_validator("exam_id", mode="before")
    @classmethod
    def exam_id_as_str(cls, v):
        return str(v) if isinstance(v, int) else v

    @property
    def question_count(self) -> int:
        return len(self.questions)


# -----------------------------------------------------------------------------
# Sections
# -----------------------------------------------------------------------------

class Section(BaseModel):
    """One navigable page of a module."""

    order: float = 0
    title: str = ""
    layout: Layout = Layout.COL_1

    # Presentational content
    subheader: Optional[str] = None
    body: Optional[str] = None
    image: Optional[str] = None
    col1: Optional[str] = None
    col2: Optional[str] = None
    col3: Optional[str] = None
    list1: Optional[str] = None
    numberedlist: Optional[str] = None

    # Knowledge check
    question_selection: Optional[dict[str, str]] = Field(
        default=None,
        validation_alias=AliasChoices("question_selection", "questionSelection", "q_selection"),
    )
    question_field_type: QuestionFieldType = Field(
        default=QuestionFieldType.SINGLE_SELECT,
        validation_alias=AliasChoices("question_field_type", "questionFieldType", "q_field_type"),
    )
    question_answer: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("question_answer", "questionAnswer", "q_answer"),
    )

    # Exam boundary
    exams: list[Exam] = []

    kind: SectionKind = SectionKind.CONTENT

    @field_validator("layout", mode="before")
    @classmethod
    def layout_default(cls, v):
        if isinstance(v, Layout):
            return v
        if isinstance(v, str) and v in {layout.value for layout in Layout}:
            return v
        return Layout.COL_1

    @field_validator("question_field_type", mode="before")
    @classmethod
    def field_type_default(cls, v):
        return v or QuestionFieldType.SINGLE_SELECT

    @field_validator("question_selection", mode="before")
    @classmethod
    def unwrap_selection(cls, v: Any):
        # Content files wrap the option mapping in a one-element list
        if isinstance(v, list):
            if not v:
                return None
            v = v[0]
        if isinstance(v, dict):
            return {str(key): str(text) for key, text in v.items()} or None
        return v

    @field_validator("exams", mode="before")
    @classmethod
    def exams_default(cls, v):
        return v or []

    @model_validator(mode="after")
    def assign_kind(self):
        self.kind = classify_section(self)
        return self

    @property
    def is_exam(self) -> bool:
        return self.kind in (SectionKind.PRE_EXAM, SectionKind.POST_EXAM)

    @property
    def is_knowledge_check(self) -> bool:
        return self.kind == SectionKind.KNOWLEDGE_CHECK

    @property
    def is_multi_select(self) -> bool:
        return self.question_field_type == QuestionFieldType.MULTI_SELECT

    @property
    def bullet_items(self) -> list[str]:
        return _split_items(self.list1)

    @property
    def numbered_items(self) -> list[str]:
        return _split_items(self.numberedlist)


def classify_section(section: Section) -> SectionKind:
    """
    Derive the section kind from its content.

    Exam boundaries carry one of the reserved titles AND at least one exam;
    a reserved title without exams is rendered as ordinary content.
    """
    if section.exams:
        if section.title == PRE_EXAM_TITLE:
            return SectionKind.PRE_EXAM
        if section.title == POST_EXAM_TITLE:
            return SectionKind.POST_EXAM
    if section.question_selection:
        return SectionKind.KNOWLEDGE_CHECK
    return SectionKind.CONTENT


def sort_sections(sections: list[Section]) -> list[Section]:
    """Sort ascending by order; ties keep their original relative order."""
    return sorted(sections, key=lambda section: section.order)


# -----------------------------------------------------------------------------
# Module payload
# -----------------------------------------------------------------------------

class ModuleContent(BaseModel):
    module_id: str = Field(..., validation_alias=AliasChoices("module_id", "moduleId"))
    title: str = ""
    sections: list[Section] = []
