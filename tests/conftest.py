"""
Shared fixtures for courseflow tests.
"""

import asyncio
import json
from typing import Optional

import pytest

from courseflow.classroom import ProgressStore
from courseflow.schemas import Section, SubmissionResult


def content_section(order, title="Overview", **extra) -> dict:
    return {"order": order, "title": title, "layout": "col-1", "body": f"<p>{title}</p>", **extra}


def knowledge_check(order, answer="a", field_type="single_select", options=None) -> dict:
    return {
        "order": order,
        "title": "Knowledge Check",
        "layout": "col-1",
        "q_selection": [options or {"a": "Alpha", "b": "Beta", "c": "Gamma"}],
        "q_field_type": field_type,
        "q_answer": answer,
    }


def exam_section(order, title="Module Post-Examination", exam_id="EXAM_1", question_counts=(10,)) -> dict:
    return {
        "order": order,
        "title": title,
        "layout": "col-1",
        "exams": [
            {
                "exam_id": f"{exam_id}" if index == 0 else f"{exam_id}_{index}",
                "title": f"{title} {index + 1}",
                "questions": [{"question": f"Q{n}", "choices": {"a": "x"}, "answer": "a"} for n in range(count)],
            }
            for index, count in enumerate(question_counts)
        ],
    }


def build_sections(raw: list[dict]) -> list[Section]:
    return [Section.model_validate(item) for item in raw]


class MemorySink:
    """Result sink recording submissions; optionally failing or gated."""

    def __init__(self, ok: bool = True, error: Optional[str] = None, raises: Optional[Exception] = None):
        self.ok = ok
        self.error = error
        self.raises = raises
        self.calls: list[tuple] = []
        self.gate: Optional[asyncio.Event] = None

    async def submit(self, exam_title, user_id, exam_id, total_questions, percentage):
        self.calls.append((exam_title, user_id, exam_id, total_questions, percentage))
        if self.gate is not None:
            await self.gate.wait()
        if self.raises is not None:
            raise self.raises
        return SubmissionResult(ok=self.ok, error=self.error)


class MemoryProvider:
    """Content provider serving prepared sections; loads can be gated per module."""

    def __init__(self, modules: dict[str, list[Section]]):
        self.modules = modules
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: dict[str, Exception] = {}

    async def load(self, module_id):
        gate = self.gates.get(module_id)
        if gate is not None:
            await gate.wait()
        if module_id in self.failures:
            raise self.failures[module_id]
        return list(self.modules[module_id])


@pytest.fixture
def store(tmp_path):
    return ProgressStore(tmp_path / "progress.db")


@pytest.fixture
def three_sections():
    return build_sections([
        content_section(1, "Welcome"),
        knowledge_check(2, answer="a, c", field_type="multi_select"),
        content_section(3, "Wrap up"),
    ])


@pytest.fixture
def content_dir(tmp_path):
    """Content directory with one module file and its mapping."""
    directory = tmp_path / "courses"
    directory.mkdir()
    module = {
        "moduleId": "CM_INTRO",
        "title": "Intro",
        "sections": [
            content_section("3", "Third"),
            content_section("1", "First"),
            knowledge_check("2"),
            content_section("1", "First tie"),
        ],
    }
    other = {"moduleId": "CM_OTHER", "title": "Other", "sections": [content_section(1)]}
    (directory / "intro.json").write_text(json.dumps([other, module]), encoding="utf-8")
    return directory
