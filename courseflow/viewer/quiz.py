"""
Quiz renderer - Knowledge check feedback and exam summaries.

Provides:
- Feedback boxes for revealed knowledge checks
- Exam section summary
- Finish outcome card
"""

import html
from typing import Optional

from courseflow.schemas import Feedback, FinishOutcome, Section


def get_quiz_css() -> str:
    """Get CSS styles for quiz display."""
    return """
    <style>
    .quiz-feedback {
        font-size: 1.4em;
        font-weight: 600;
        margin-top: 1em;
        padding: 0.6em 1em;
        border-radius: 8px;
    }
    .quiz-feedback.correct {
        background: #e8f5e9;
        color: #388E3C;
    }
    .quiz-feedback.incorrect {
        background: #ffebee;
        color: #C62828;
    }
    .exam-summary {
        background: #e3f2fd;
        border-left: 4px solid #1976D2;
        border-radius: 12px;
        padding: 1em 1.5em;
        margin: 1em 0;
    }
    .quiz-score-box {
        background: #e8f5e9;
        border-radius: 8px;
        padding: 1em;
        margin-top: 1.5em;
        text-align: center;
    }
    .quiz-score-value {
        font-size: 2em;
        font-weight: 700;
        color: #388E3C;
    }
    .quiz-score-label {
        color: #666;
        font-size: 0.9em;
    }
    .quiz-score-error {
        color: #C62828;
        margin-top: 0.5em;
    }
    </style>
    """


def render_feedback(feedback: Feedback, message: Optional[str]) -> str:
    """Render the feedback box; empty when nothing was revealed."""
    if feedback == Feedback.NONE or not message:
        return ""
    icon = "✅" if feedback == Feedback.CORRECT else "❌"
    return f'<div class="quiz-feedback {feedback.value}">{icon} {html.escape(message)}</div>'


def render_exam_summary(section: Section) -> str:
    """Describe the exams in an exam section."""
    parts = ['<div class="exam-summary">']
    for exam in section.exams:
        parts.append(
            f"<div><strong>{html.escape(exam.title or exam.exam_id)}</strong>"
            f" &middot; {exam.question_count} questions</div>"
        )
    parts.append("</div>")
    return "".join(parts)


def render_finish_outcome(outcome: FinishOutcome) -> str:
    """Render the score card shown after an exam is finished."""
    if not outcome.handled:
        return ""
    parts = [
        '<div class="quiz-score-box">',
        f'<div class="quiz-score-value">{outcome.percentage:.2f}%</div>',
        f'<div class="quiz-score-label">{outcome.total_questions} questions</div>',
    ]
    if outcome.error:
        parts.append(f'<div class="quiz-score-error">Result not saved: {html.escape(outcome.error)}</div>')
    parts.append("</div>")
    return "".join(parts)
