"""
Exam scoring - Percentages, result submission and the finish-module flow.

Provides:
- Question totals and percentage computation
- ResultSink protocol and a SQLite-backed implementation
- ExamScorer: scores an exam section, records completion, submits and advances
"""

import asyncio
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from courseflow.config import DEFAULT_RESULTS_DB
from courseflow.errors import IdentityUnavailable, ResultSubmissionFailure
from courseflow.schemas import ExamSubmission, FinishOutcome, Section, SubmissionResult

from .navigator import SectionNavigator


logger = logging.getLogger(__name__)


def total_questions(section: Section) -> int:
    """Count questions across every exam in a section."""
    return sum(exam.question_count for exam in section.exams)


def compute_percentage(score: int, total: int) -> float:
    """
    Score as a percentage rounded to two decimals.

    A zero-question exam scores 0.0 instead of dividing by zero.
    """
    if total == 0:
        logger.warning("Exam has no questions; reporting 0%% for score %d", score)
        return 0.0
    return round(score / total * 100, 2)


# -----------------------------------------------------------------------------
# Result sinks
# -----------------------------------------------------------------------------

class ResultSink(Protocol):
    """Durable destination for exam results."""

    async def submit(
        self,
        exam_title: str,
        user_id: str,
        exam_id: str,
        total_questions: int,
        percentage: float,
    ) -> SubmissionResult:
        ...


class SqliteResultSink:
    """
    Store exam results in SQLite.

    Database errors are returned as failed SubmissionResults, never raised.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else DEFAULT_RESULTS_DB
        self._ensure_database()

    def _ensure_database(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS exam_results (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    exam_id TEXT NOT NULL,
                    exam_title TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    total_questions INTEGER NOT NULL,
                    percentage REAL NOT NULL,
                    submitted_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_exam_results_user
                ON exam_results(user_id);
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _insert(self, submission: ExamSubmission):
        conn = self._get_connection()
        try:
            conn.execute(
                """INSERT INTO exam_results
                   (exam_id, exam_title, user_id, total_questions, percentage, submitted_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    submission.exam_id,
                    submission.exam_title,
                    submission.user_id,
                    submission.total_questions,
                    submission.percentage,
                    datetime.now().isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    async def submit(
        self,
        exam_title: str,
        user_id: str,
        exam_id: str,
        total_questions: int,
        percentage: float,
    ) -> SubmissionResult:
        submission = ExamSubmission(
            exam_id=exam_id,
            exam_title=exam_title,
            user_id=user_id,
            total_questions=total_questions,
            percentage=percentage,
        )
        try:
            await asyncio.to_thread(self._insert, submission)
        except sqlite3.Error as e:
            return SubmissionResult(ok=False, error=str(e))
        return SubmissionResult(ok=True)

    def list_results(self, user_id: Optional[str] = None) -> list[ExamSubmission]:
        """Get stored submissions, oldest first, optionally for one user."""
        conn = self._get_connection()
        try:
            query = "SELECT exam_id, exam_title, user_id, total_questions, percentage FROM exam_results"
            params: tuple = ()
            if user_id is not None:
                query += " WHERE user_id = ?"
                params = (user_id,)
            cursor = conn.execute(query + " ORDER BY id", params)
            return [
                ExamSubmission(
                    exam_id=row["exam_id"],
                    exam_title=row["exam_title"],
                    user_id=row["user_id"],
                    total_questions=row["total_questions"],
                    percentage=row["percentage"],
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()


# -----------------------------------------------------------------------------
# Finish module
# -----------------------------------------------------------------------------

class ExamScorer:
    """Score a finished exam section and move the learner on."""

    def __init__(self, sink: ResultSink):
        self.sink = sink

    @staticmethod
    def find_exam_section(sections: list[Section], title: Optional[str]) -> Optional[Section]:
        """First exam section carrying the given title."""
        if title is None:
            return None
        return next(
            (section for section in sections if section.is_exam and section.title == title),
            None,
        )

    async def finish_module(
        self,
        navigator: SectionNavigator,
        score: int,
        user_id: Optional[str],
    ) -> FinishOutcome:
        """
        Finish the exam section under the navigator's cursor.

        Completion is recorded before submitting. A failed or skipped
        submission is reported in the outcome and never blocks advancing.
        The advance is skipped if the learner moved while the submission
        was pending or the navigator was replaced.
        """
        current = navigator.current_section
        exam_section = self.find_exam_section(navigator.sections, current.title if current else None)
        if exam_section is None:
            logger.warning("finish_module called outside an exam section in %s", navigator.module_id)
            return FinishOutcome()

        total = total_questions(exam_section)
        percentage = compute_percentage(score, total)
        exam = exam_section.exams[0]
        outcome = FinishOutcome(
            handled=True,
            exam_id=exam.exam_id,
            total_questions=total,
            percentage=percentage,
        )

        if navigator.is_last_section:
            outcome.completed = navigator.mark_completed()
        cursor_before_submit = navigator.cursor

        error = await self._submit(exam.title, exam.exam_id, user_id, total, percentage)
        if error is None:
            outcome.submitted = True
            logger.info("Saved exam result %s for %s: %.2f%%", exam.exam_id, user_id, percentage)
        else:
            outcome.error = str(error)
            logger.error("%s", error)

        if navigator.closed or navigator.cursor != cursor_before_submit:
            logger.info("Learner moved during submission of %s; not advancing", exam.exam_id)
        else:
            outcome.advanced = navigator.next()
        return outcome

    async def _submit(
        self,
        exam_title: str,
        exam_id: str,
        user_id: Optional[str],
        total: int,
        percentage: float,
    ) -> Optional[Exception]:
        """Submit once; return the failure instead of raising it."""
        if not user_id:
            return IdentityUnavailable(f"No current user; result for {exam_id} not saved")
        try:
            result = await self.sink.submit(exam_title, user_id, exam_id, total, percentage)
        except Exception as e:  # sink transport errors are reported, not propagated
            return ResultSubmissionFailure(exam_id, str(e))
        if not result.ok:
            return ResultSubmissionFailure(exam_id, result.error or "unknown error")
        return None
