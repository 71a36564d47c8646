"""
courseflow Viewer - Rendering components for module display.

This module provides:
- Section rendering for the three column layouts
- Knowledge check feedback and exam score cards
"""

from .section import (
    get_section_css,
    render_page_header,
    render_item_list,
    render_columns,
    render_section,
)

from .quiz import (
    get_quiz_css,
    render_feedback,
    render_exam_summary,
    render_finish_outcome,
)

__all__ = [
    # Section rendering
    "get_section_css",
    "render_page_header",
    "render_item_list",
    "render_columns",
    "render_section",
    # Quiz
    "get_quiz_css",
    "render_feedback",
    "render_exam_summary",
    "render_finish_outcome",
]
