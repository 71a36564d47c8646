"""
courseflow Classroom - Runtime components for module progression.

This module provides:
- JsonContentProvider: Load module sections from content files
- ProgressStore: Persist section cursors per module
- QuestionAttempt: Knowledge check grading with bounded retries
- SectionNavigator: Section cursor and resume
- ExamScorer: Exam percentages and result submission
- ProgressionEngine: Orchestrates all of the above
"""

from .loader import (
    ContentProvider,
    JsonContentProvider,
    load_module_mapping,
    load_course_catalog,
    get_course,
)

from .progress import (
    ProgressStore,
    current_page_key,
    section_length_key,
)

from .assessment import (
    Evaluation,
    RetryDecision,
    QuestionAttempt,
    parse_answer_key,
    evaluate,
)

from .navigator import (
    SectionNavigator,
)

from .scoring import (
    ResultSink,
    SqliteResultSink,
    ExamScorer,
    total_questions,
    compute_percentage,
)

from .engine import (
    IdentityProvider,
    StaticIdentity,
    ProgressionEngine,
)

__all__ = [
    # Loader
    "ContentProvider",
    "JsonContentProvider",
    "load_module_mapping",
    "load_course_catalog",
    "get_course",
    # Progress
    "ProgressStore",
    "current_page_key",
    "section_length_key",
    # Assessment
    "Evaluation",
    "RetryDecision",
    "QuestionAttempt",
    "parse_answer_key",
    "evaluate",
    # Navigator
    "SectionNavigator",
    # Scoring
    "ResultSink",
    "SqliteResultSink",
    "ExamScorer",
    "total_questions",
    "compute_percentage",
    # Engine
    "IdentityProvider",
    "StaticIdentity",
    "ProgressionEngine",
]
