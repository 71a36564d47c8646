"""
Rendering tests for section pages and quiz feedback.
"""

from courseflow.schemas import Feedback, FinishOutcome, Section
from courseflow.viewer import (
    render_exam_summary,
    render_feedback,
    render_finish_outcome,
    render_item_list,
    render_page_header,
    render_section,
)

from conftest import content_section, exam_section


class TestSectionRendering:

    def test_page_header(self):
        assert "Page 2 / 7" in render_page_header(2, 7)

    def test_lists_split_and_escaped(self):
        section = Section.model_validate(content_section(1, list1="One; Two <b>; ", numberedlist="First;Second"))
        html = render_section(section)
        assert "<ul" in html and "<ol" in html
        assert "<li>One</li>" in html
        assert "Two &lt;b&gt;" in html
        assert "<li>Second</li>" in html

    def test_empty_list_renders_nothing(self):
        assert render_item_list([]) == ""

    def test_body_html_kept(self):
        section = Section.model_validate(content_section(1, "Intro & more"))
        html = render_section(section)
        assert "<p>Intro & more</p>" in html
        assert "Intro &amp; more</div>" in html

    def test_three_columns(self):
        section = Section.model_validate(
            content_section(1, layout="col-3", col1="<p>A</p>", col2="<p>B</p>", col3="<p>C</p>")
        )
        html = render_section(section)
        assert "section-columns col-3" in html
        assert html.count('class="prose"') == 3

    def test_two_columns_ignore_third(self):
        section = Section.model_validate(
            content_section(1, layout="col-2", col1="A", col2="B", col3="C")
        )
        html = render_section(section)
        assert html.count('class="prose"') == 2


class TestQuizRendering:

    def test_no_feedback_before_reveal(self):
        assert render_feedback(Feedback.NONE, None) == ""

    def test_feedback_boxes(self):
        assert "✅ Correct answer!" in render_feedback(Feedback.CORRECT, "Correct answer!")
        incorrect = render_feedback(Feedback.INCORRECT, "Wrong answer. Try again.")
        assert "incorrect" in incorrect
        assert "❌" in incorrect

    def test_exam_summary(self):
        section = Section.model_validate(exam_section(1, exam_id="POST", question_counts=(3, 2)))
        html = render_exam_summary(section)
        assert "3 questions" in html
        assert "2 questions" in html

    def test_finish_outcome_with_error(self):
        outcome = FinishOutcome(handled=True, total_questions=10, percentage=70.0, error="offline")
        html = render_finish_outcome(outcome)
        assert "70.00%" in html
        assert "Result not saved: offline" in html

    def test_unhandled_outcome_renders_nothing(self):
        assert render_finish_outcome(FinishOutcome()) == ""
