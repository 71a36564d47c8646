"""
courseflow Schemas - Pydantic models for module progression and assessment.

This module exports all schema classes for:
- Section: sections, exams, module payloads
- Catalog: courses and module summaries
- Progress: persisted progress, attempt state, exam results
"""

# Section schemas
from .section import (
    Layout,
    QuestionFieldType,
    SectionKind,
    ExamQuestion,
    Exam,
    Section,
    ModuleContent,
    PRE_EXAM_TITLE,
    POST_EXAM_TITLE,
    classify_section,
    sort_sections,
)

# Catalog schemas
from .catalog import (
    ModuleSummary,
    Course,
)

# Progress schemas
from .progress import (
    Feedback,
    ModuleProgress,
    AttemptState,
    ExamSubmission,
    SubmissionResult,
    FinishOutcome,
)

__all__ = [
    # Section
    'Layout',
    'QuestionFieldType',
    'SectionKind',
    'ExamQuestion',
    'Exam',
    'Section',
    'ModuleContent',
    'PRE_EXAM_TITLE',
    'POST_EXAM_TITLE',
    'classify_section',
    'sort_sections',
    # Catalog
    'ModuleSummary',
    'Course',
    # Progress
    'Feedback',
    'ModuleProgress',
    'AttemptState',
    'ExamSubmission',
    'SubmissionResult',
    'FinishOutcome',
]
