"""
courseflow - Paginated course modules with knowledge checks and exams.

Streamlit application presenting a module one section at a time, grading
knowledge checks and recording pre/post examination results.

Usage:
    streamlit run app.py
"""

import asyncio
import logging

import streamlit as st

from courseflow.classroom import (
    JsonContentProvider,
    ProgressStore,
    ProgressionEngine,
    SqliteResultSink,
    StaticIdentity,
    load_course_catalog,
    get_course,
)
from courseflow.config import Settings
from courseflow.errors import NoSelection
from courseflow.schemas import Feedback, Section
from courseflow.viewer import (
    get_section_css,
    get_quiz_css,
    render_page_header,
    render_section,
    render_feedback,
    render_exam_summary,
    render_finish_outcome,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)

st.set_page_config(
    page_title="courseflow",
    page_icon="📘",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        st.session_state.settings = Settings.from_env()
    settings = st.session_state.settings

    if "catalog" not in st.session_state:
        try:
            st.session_state.catalog = load_course_catalog(settings.catalog)
        except (FileNotFoundError, ValueError) as e:
            logging.getLogger(__name__).error("Could not load course catalog: %s", e)
            st.session_state.catalog = []

    if "identity" not in st.session_state:
        st.session_state.identity = StaticIdentity()

    if "engine" not in st.session_state:
        try:
            provider = JsonContentProvider.from_mapping_file(settings.content_dir, settings.module_map)
        except (FileNotFoundError, ValueError) as e:
            logging.getLogger(__name__).error("Could not load module mapping: %s", e)
            provider = JsonContentProvider(settings.content_dir, {})
        st.session_state.engine = ProgressionEngine(
            provider,
            ProgressStore(settings.progress_db),
            SqliteResultSink(settings.results_db),
            st.session_state.identity,
            settings,
        )

    if "course_id" not in st.session_state:
        st.session_state.course_id = None


# -----------------------------------------------------------------------------
# Sidebar: Sign-in and Courses
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with sign-in and the course list."""
    st.sidebar.title("📘 courseflow")

    email = st.sidebar.text_input("Email", value=st.session_state.identity.user_id or "")
    st.session_state.identity.user_id = email.strip() or None

    st.sidebar.divider()
    st.sidebar.subheader("Courses")

    if not st.session_state.catalog:
        st.sidebar.error("Course catalog not found.")
        return

    for course in st.session_state.catalog:
        if st.sidebar.button(course.title, key=f"course_{course.course_id}", use_container_width=True):
            st.session_state.engine.close_module()
            st.session_state.course_id = course.course_id
            st.rerun()


# -----------------------------------------------------------------------------
# Module List
# -----------------------------------------------------------------------------

def render_module_list():
    """Render module cards for the selected course."""
    course = get_course(st.session_state.catalog, st.session_state.course_id)
    if not course:
        st.info("Select a course from the sidebar to begin.")
        return

    st.title(course.title)
    if course.description:
        st.markdown(course.description)

    if not course.modules:
        st.info("No modules available for this course.")
        return

    for module in course.modules:
        with st.container(border=True):
            st.subheader(module.title)
            if module.description:
                st.markdown(module.description)
            if st.button("Open module", key=f"module_{module.module_id}"):
                asyncio.run(st.session_state.engine.load_module(module.module_id))
                st.rerun()


def back_to_modules():
    st.session_state.engine.close_module()
    st.rerun()


# -----------------------------------------------------------------------------
# Section View
# -----------------------------------------------------------------------------

def render_module_view():
    """Render the current section of the open module."""
    engine = st.session_state.engine
    nav = engine.navigator

    if st.button("✕ Back to Modules"):
        back_to_modules()

    if not engine.has_content:
        st.header("No content available")
        if engine.load_error:
            st.caption(str(engine.load_error))
        if st.button("Back to Modules", type="primary"):
            back_to_modules()
        return

    if nav.is_completed:
        render_completed_view()
        return

    section = nav.current_section
    step, total = nav.position

    st.markdown(get_section_css(), unsafe_allow_html=True)
    st.markdown(get_quiz_css(), unsafe_allow_html=True)
    st.markdown(render_page_header(step, total), unsafe_allow_html=True)
    st.progress(nav.progress_fraction)

    with st.container(key=f"section_{nav.transition_key}"):
        st.markdown(render_section(section), unsafe_allow_html=True)

        if section.is_knowledge_check:
            render_knowledge_check(section)
        elif section.is_exam:
            render_exam_section(section)

    if not nav.controls_suppressed:
        render_navigation_bar()


def render_navigation_bar():
    """Render back/next buttons."""
    engine = st.session_state.engine
    nav = engine.navigator

    col1, _, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("← Back", disabled=nav.cursor == 0, use_container_width=True):
            engine.back()
            st.rerun()
    with col3:
        if st.button("Next →", type="primary", use_container_width=True):
            engine.next()
            st.rerun()


def render_knowledge_check(section: Section):
    """Render option widgets with Show Answer / Retry controls."""
    engine = st.session_state.engine
    nav = engine.navigator
    attempt = engine.attempt
    options = section.question_selection or {}
    prefix = f"kc_{nav.module_id}_{nav.cursor}_{nav.transition_key}_{attempt.retry_count}_{attempt.state.exhausted}"

    if section.is_multi_select:
        for key, text in options.items():
            checked = st.checkbox(
                text,
                value=key in attempt.selected_answers,
                key=f"{prefix}_{key}",
                disabled=attempt.input_locked,
            )
            if checked != (key in attempt.selected_answers):
                engine.toggle_option(key, checked)
                st.rerun()
    else:
        keys = list(options)
        current = next(iter(attempt.selected_answers), None)
        choice = st.radio(
            "Select one",
            keys,
            index=keys.index(current) if current in keys else None,
            format_func=lambda key: options[key],
            key=f"{prefix}_radio",
            disabled=attempt.input_locked,
            label_visibility="collapsed",
        )
        if choice is not None and choice != current:
            engine.select_option(choice)
            st.rerun()

    if attempt.can_show_answer:
        if st.button("Show Answer", use_container_width=True):
            try:
                engine.reveal_answer()
                st.rerun()
            except NoSelection:
                st.warning("Select an answer first.")

    if attempt.can_retry:
        if st.button("Retry", use_container_width=True):
            engine.request_retry()
            st.rerun()
    elif attempt.state.exhausted:
        st.caption("No retries left for this question.")

    if attempt.feedback != Feedback.NONE:
        st.markdown(render_feedback(attempt.feedback, attempt.feedback_message), unsafe_allow_html=True)


def render_exam_section(section: Section):
    """
    Render exam questions and the Finish action.

    Tallies correct answers locally and hands the final count to the engine.
    """
    engine = st.session_state.engine
    nav = engine.navigator

    st.markdown(render_exam_summary(section), unsafe_allow_html=True)

    score = 0
    for exam in section.exams:
        st.subheader(exam.title or exam.exam_id)
        for index, question in enumerate(exam.questions):
            keys = list(question.choices)
            choice = st.radio(
                question.question or f"Question {index + 1}",
                keys,
                index=None,
                format_func=lambda key, choices=question.choices: choices[key],
                key=f"exam_{nav.module_id}_{exam.exam_id}_{index}",
            )
            if choice is not None and question.answer is not None and choice == question.answer:
                score += 1

    if st.button("Finish", type="primary", use_container_width=True):
        outcome = asyncio.run(engine.finish_module(score))
        if outcome.error:
            st.warning(outcome.error)
        st.rerun()


def render_completed_view():
    """Render the module completed screen."""
    engine = st.session_state.engine

    st.header("Module completed")
    if engine.last_outcome:
        st.markdown(get_quiz_css(), unsafe_allow_html=True)
        st.markdown(render_finish_outcome(engine.last_outcome), unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Review last section", use_container_width=True):
            engine.back()
            st.rerun()
    with col2:
        if st.button("Back to Modules", type="primary", use_container_width=True):
            back_to_modules()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()

    if st.session_state.engine.module_id:
        render_module_view()
    else:
        render_module_list()


if __name__ == "__main__":
    main()
