"""
Answer evaluation and retry policy tests.
"""

import logging

import pytest

from courseflow.classroom import QuestionAttempt, evaluate, parse_answer_key
from courseflow.errors import MalformedAnswerKey, NoSelection, RetryContractViolation
from courseflow.schemas import Feedback, Section

from conftest import content_section, knowledge_check


def multi_select(answer="a, b") -> Section:
    return Section.model_validate(knowledge_check(1, answer=answer, field_type="multi_select"))


def single_select(answer="a") -> Section:
    return Section.model_validate(knowledge_check(1, answer=answer))


def answer_wrong(attempt: QuestionAttempt):
    attempt.select("c")
    result = attempt.reveal_answer()
    assert not result.correct


class TestParseAnswerKey:

    def test_trims_tokens(self):
        assert parse_answer_key(" a , b,c ") == frozenset({"a", "b", "c"})

    @pytest.mark.parametrize("canonical", [None, "", "   "])
    def test_empty_key(self, canonical):
        with pytest.raises(MalformedAnswerKey):
            parse_answer_key(canonical)

    def test_duplicate_after_trim(self):
        with pytest.raises(MalformedAnswerKey):
            parse_answer_key("a, a")

    def test_empty_entry(self):
        with pytest.raises(MalformedAnswerKey):
            parse_answer_key("a,,b")


class TestEvaluate:

    def test_exact_set_is_correct(self):
        assert evaluate({"a", "b"}, "a, b").correct

    def test_order_irrelevant(self):
        assert evaluate(["b", "a"], "a,b").correct

    def test_subset_rejected(self):
        assert not evaluate({"a"}, "a,b").correct

    def test_superset_rejected(self):
        assert not evaluate({"a", "b", "c"}, "a,b").correct

    def test_repeated_selection_counts_once(self):
        assert evaluate(["a", "a"], "a").correct
        assert not evaluate(["a", "a"], "a,b").correct

    def test_disjoint_rejected(self):
        assert not evaluate({"c"}, "a").correct

    def test_malformed_key_raises(self):
        with pytest.raises(MalformedAnswerKey):
            evaluate({"a"}, "")


class TestSelection:

    def test_single_select_replaces(self):
        attempt = QuestionAttempt(single_select())
        attempt.select("a")
        attempt.select("b")
        assert attempt.selected_answers == {"b"}

    def test_multi_select_accumulates_and_removes(self):
        attempt = QuestionAttempt(multi_select())
        attempt.toggle("a", True)
        attempt.toggle("b", True)
        attempt.toggle("a", False)
        assert attempt.selected_answers == {"b"}

    def test_unknown_option(self):
        attempt = QuestionAttempt(single_select())
        with pytest.raises(ValueError):
            attempt.select("z")

    def test_section_without_question(self):
        attempt = QuestionAttempt(Section.model_validate(content_section(1)))
        with pytest.raises(ValueError):
            attempt.select("a")

    def test_input_locked_after_reveal(self):
        attempt = QuestionAttempt(multi_select())
        attempt.select("a")
        attempt.reveal_answer()
        assert attempt.input_locked
        assert attempt.select("b") is False
        assert attempt.selected_answers == {"a"}


class TestReveal:

    def test_no_selection_refused_without_mutation(self):
        attempt = QuestionAttempt(single_select())
        with pytest.raises(NoSelection):
            attempt.reveal_answer()
        assert not attempt.state.is_revealed
        assert attempt.feedback == Feedback.NONE

    def test_correct(self):
        attempt = QuestionAttempt(multi_select("a, b"))
        attempt.select("a")
        attempt.select("b")
        assert attempt.reveal_answer().correct
        assert attempt.feedback == Feedback.CORRECT
        assert attempt.feedback_message == "Correct answer!"
        assert not attempt.can_retry

    def test_incorrect(self):
        attempt = QuestionAttempt(single_select("a"))
        answer_wrong(attempt)
        assert attempt.feedback == Feedback.INCORRECT
        assert attempt.feedback_message == "Wrong answer. Try again."
        assert attempt.can_retry
        assert not attempt.can_show_answer

    def test_malformed_key_graded_incorrect(self, caplog):
        attempt = QuestionAttempt(single_select("a, a"))
        attempt.select("a")
        with caplog.at_level(logging.ERROR):
            result = attempt.reveal_answer()
        assert not result.correct
        assert attempt.feedback == Feedback.INCORRECT
        assert "Malformed answer key" in caplog.text


class TestRetryPolicy:

    def test_retry_sequence_then_refusal(self):
        attempt = QuestionAttempt(single_select("a"))
        counts = []
        for _ in range(3):
            answer_wrong(attempt)
            assert attempt.request_retry().allowed
            counts.append(attempt.retry_count)
        assert counts == [1, 2, 3]

        answer_wrong(attempt)
        assert attempt.can_retry
        decision = attempt.request_retry()
        assert not decision.allowed
        assert attempt.retry_count == 0

    def test_retry_clears_selection_and_unlocks(self):
        attempt = QuestionAttempt(single_select("a"))
        answer_wrong(attempt)
        attempt.request_retry()
        assert attempt.selected_answers == set()
        assert attempt.feedback == Feedback.NONE
        assert not attempt.input_locked

    def test_exhausted_attempt_hides_retry(self):
        attempt = QuestionAttempt(single_select("a"), max_retries=1)
        answer_wrong(attempt)
        assert attempt.request_retry().allowed
        answer_wrong(attempt)
        assert not attempt.request_retry().allowed

        # New selection can still be graded, but no further retries
        attempt.select("b")
        assert attempt.can_show_answer
        attempt.reveal_answer()
        assert not attempt.can_retry
        assert not attempt.request_retry().allowed
        assert attempt.retry_count == 0

    def test_retry_after_correct_is_contract_violation(self):
        attempt = QuestionAttempt(single_select("a"))
        attempt.select("a")
        attempt.reveal_answer()
        with pytest.raises(RetryContractViolation):
            attempt.request_retry()

    def test_retry_before_reveal_is_contract_violation(self):
        attempt = QuestionAttempt(single_select("a"))
        attempt.select("a")
        with pytest.raises(RetryContractViolation):
            attempt.request_retry()

    def test_correct_on_third_attempt_resets_retries(self):
        attempt = QuestionAttempt(multi_select("a, b"))
        for _ in range(2):
            answer_wrong(attempt)
            assert attempt.request_retry().allowed
        assert attempt.retry_count == 2

        attempt.select("a")
        attempt.select("b")
        assert attempt.reveal_answer().correct
        assert attempt.retry_count == 0
        assert attempt.feedback == Feedback.CORRECT
