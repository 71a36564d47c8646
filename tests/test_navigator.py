"""
SectionNavigator tests: guards, attempt reset, persistence and resume.
"""

import logging

import pytest

from courseflow.classroom import SectionNavigator
from courseflow.schemas import Feedback, ModuleProgress

from conftest import build_sections, content_section, exam_section


def make_navigator(store, sections, module_id="M1"):
    navigator = SectionNavigator(module_id, sections, store)
    navigator.resume()
    return navigator


class TestGuards:

    def test_back_at_start_is_noop(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        assert navigator.back() is False
        assert navigator.cursor == 0

    def test_next_at_last_is_noop(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        navigator.next()
        navigator.next()
        assert navigator.cursor == 2
        assert navigator.next() is False
        assert navigator.cursor == 2

    def test_noop_keeps_attempt(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        navigator.next()
        navigator.attempt.select("a")
        navigator.next()
        navigator.back()
        navigator.back()
        assert navigator.cursor == 0
        attempt = navigator.attempt
        navigator.back()
        assert navigator.attempt is attempt

    @pytest.mark.parametrize("delta", [0, 2, -2])
    def test_invalid_delta(self, store, three_sections, delta):
        navigator = make_navigator(store, three_sections)
        with pytest.raises(ValueError):
            navigator.go_to(delta)

    def test_empty_module(self, store):
        navigator = make_navigator(store, [])
        assert navigator.is_empty
        assert navigator.current_section is None
        assert navigator.next() is False
        assert navigator.mark_completed() is False
        assert store.get("M1") is None


class TestMoves:

    def test_successful_move_clears_attempt(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        navigator.next()
        navigator.attempt.select("c")
        navigator.attempt.reveal_answer()
        assert navigator.attempt.feedback == Feedback.INCORRECT

        assert navigator.next()
        assert navigator.attempt.selected_answers == set()
        assert navigator.attempt.feedback == Feedback.NONE
        assert navigator.attempt.retry_count == 0

    def test_move_writes_through(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        navigator.next()
        assert store.get("M1").current_section_index == 1
        navigator.back()
        assert store.get("M1").current_section_index == 0

    def test_section_changed_signal(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        events = []
        navigator.subscribe(lambda cursor, section: events.append((cursor, section.title if section else None)))
        navigator.next()
        navigator.back()
        navigator.back()
        assert events == [(1, "Knowledge Check"), (0, "Welcome")]
        assert navigator.transition_key == 2

    def test_position_and_progress(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        assert navigator.position == (1, 3)
        assert navigator.progress_fraction == 0.0
        navigator.next()
        assert navigator.progress_fraction == 0.5

    def test_mark_completed(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        navigator.next()
        navigator.next()
        assert navigator.mark_completed()
        assert navigator.is_completed
        assert navigator.current_section is None
        assert navigator.progress_fraction == 1.0
        assert store.get("M1").is_completed
        assert navigator.next() is False

    def test_back_from_completed(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        navigator.mark_completed()
        assert navigator.back()
        assert navigator.cursor == 2

    def test_closed_navigator_does_not_write(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        navigator.next()
        navigator.close()
        assert navigator.next() is False
        assert store.get("M1").current_section_index == 1

    def test_exam_suppresses_controls(self, store):
        sections = build_sections([content_section(1), exam_section(2)])
        navigator = make_navigator(store, sections)
        assert not navigator.controls_suppressed
        navigator.next()
        assert navigator.controls_suppressed


class TestResume:

    def test_fresh_module_starts_at_zero(self, store, three_sections):
        navigator = make_navigator(store, three_sections)
        assert navigator.cursor == 0
        assert store.get_value("sectionlength-M1") == "3"

    @pytest.mark.parametrize("k", [0, 1, 2, 3])
    def test_resume_at_persisted_cursor(self, store, three_sections, k):
        store.set("M1", ModuleProgress(module_id="M1", current_section_index=k, section_count=3))
        navigator = make_navigator(store, three_sections)
        assert navigator.cursor == k
        assert navigator.is_completed == (k == 3)

    def test_resume_after_moves(self, store, three_sections):
        first = make_navigator(store, three_sections)
        first.next()
        first.next()
        second = make_navigator(store, three_sections)
        assert second.cursor == 2

    def test_stale_progress_clamped_and_rewritten(self, store, three_sections, caplog):
        store.set("M1", ModuleProgress(module_id="M1", current_section_index=8, section_count=10))
        with caplog.at_level(logging.WARNING):
            navigator = make_navigator(store, three_sections)
        assert navigator.cursor == 3
        assert navigator.is_completed
        progress = store.get("M1")
        assert progress.current_section_index == 3
        assert progress.section_count == 3
        assert "Clamping stale progress" in caplog.text

    def test_empty_load_keeps_stored_progress(self, store):
        store.set("M1", ModuleProgress(module_id="M1", current_section_index=2, section_count=4))
        make_navigator(store, [])
        assert store.get("M1").current_section_index == 2
