"""
End-to-end tests for question generation
"""
import asyncio
import random

import pytest

from quizsmith.models import TRUE_FALSE_OPTIONS, Question, QuestionKind, QuizType
from quizsmith.services.quiz_generator import (
    assemble, build_question_set, fit_plan, generate_questions, plan_distribution,
)

PHOTOSYNTHESIS = (
    "Photosynthesis is the process by which plants convert light into chemical energy. "
    "This process is critical for life on Earth."
)


def generate(text, count, quiz_type=QuizType.MCQ, seed=0):
    return asyncio.run(generate_questions(text, count, quiz_type, rng=random.Random(seed)))


def assert_well_formed(questions):
    assert [q.id for q in questions] == list(range(1, len(questions) + 1))
    for q in questions:
        assert len(set(q.options)) == len(q.options)
        if q.kind is QuestionKind.MULTI:
            assert isinstance(q.answer_key, frozenset)
            assert len(q.answer_key) >= 2
            assert q.answer_key < set(q.options)
        else:
            assert isinstance(q.answer_key, str)
            assert q.answer_key in q.options
        if q.kind is QuestionKind.TRUE_FALSE:
            assert q.options == TRUE_FALSE_OPTIONS


class TestPlanDistribution:
    def test_balanced_split(self):
        assert plan_distribution(10) == (4, 3, 3)
        assert plan_distribution(5) == (2, 2, 1)
        assert plan_distribution(2) == (1, 1, 0)
        assert plan_distribution(1) == (1, 1, 0)

    def test_fit_plan_drops_overshoot(self):
        assert fit_plan((1, 1, 0), 1) == (1, 0, 0)
        assert fit_plan((3, 3, 2), 7) == (3, 3, 1)
        assert fit_plan((4, 3, 3), 10) == (4, 3, 3)


class TestAssemble:
    def test_drops_repeats_and_renumbers(self):
        q = Question(prompt="Which gas?", options=["Oxygen", "Neon", "Argon", "Xenon"],
                     answer_key="Oxygen", kind=QuestionKind.SINGLE)
        other = q.model_copy(update={"answer_key": "Neon"})
        result = assemble([q, q, other], 5)
        assert [r.id for r in result] == [1, 2]
        assert [r.answer_key for r in result] == ["Oxygen", "Neon"]


class TestGenerateQuestions:
    @pytest.mark.parametrize("quiz_type", list(QuizType))
    def test_well_formed_for_every_type(self, biology_text, quiz_type):
        questions = generate(biology_text, 6, quiz_type)
        assert 1 <= len(questions) <= 6
        assert_well_formed(questions)

    def test_exact_count_for_mcq(self, biology_text):
        questions = generate(biology_text, 5)
        assert len(questions) == 5
        assert all(q.kind is QuestionKind.SINGLE for q in questions)

    def test_true_false_only(self, biology_text):
        questions = generate(biology_text, 6, QuizType.TRUE_FALSE)
        assert len(questions) == 6
        assert all(q.kind is QuestionKind.TRUE_FALSE for q in questions)

    def test_multi_select_contains_multi(self, biology_text):
        questions = generate(biology_text, 3, QuizType.MULTI_SELECT)
        assert any(q.kind is QuestionKind.MULTI for q in questions)

    def test_mixed(self, biology_text):
        questions = generate(biology_text, 10, QuizType.MIXED)
        assert len(questions) == 10
        assert any(q.kind is QuestionKind.TRUE_FALSE for q in questions)
        assert any(q.kind is QuestionKind.SINGLE for q in questions)

    def test_deterministic_with_same_seed(self, biology_text):
        first = generate(biology_text, 6, QuizType.MIXED, seed=42)
        second = generate(biology_text, 6, QuizType.MIXED, seed=42)
        assert [q.model_dump() for q in first] == [q.model_dump() for q in second]

    def test_sources_never_repeat(self, biology_text):
        for quiz_type in QuizType:
            questions = generate(biology_text, 8, quiz_type, seed=3)
            sources = [q.source for q in questions if q.source]
            assert len(sources) == len(set(sources))

    def test_empty_text(self):
        assert generate("", 5) == []
        assert generate("   \n  ", 5, QuizType.TRUE_FALSE) == []

    def test_count_must_be_positive(self, biology_text):
        with pytest.raises(ValueError):
            build_question_set(biology_text, 0)

    def test_fallback_on_tiny_text(self):
        questions = generate("Cells divide slowly.", 5)
        assert len(questions) >= 1
        assert_well_formed(questions)

    def test_photosynthesis_scenario(self):
        questions = generate(PHOTOSYNTHESIS, 2)
        assert len(questions) == 2
        for q in questions:
            assert len(q.options) == 4
            assert q.answer_key in q.options
        mentioned = " ".join(q.prompt + " " + q.answer_key for q in questions).lower()
        assert "photosynthesis" in mentioned or "process" in mentioned

    def test_photosynthesis_true_false(self):
        for seed in range(20):
            questions = generate(PHOTOSYNTHESIS, 1, QuizType.TRUE_FALSE, seed=seed)
            assert len(questions) == 1
            q = questions[0]
            assert q.options == TRUE_FALSE_OPTIONS
            if q.answer_key == "False":
                assert q.prompt != q.source

    @pytest.mark.parametrize("quiz_type", list(QuizType))
    def test_no_repeated_questions(self, biology_text, quiz_type):
        for text, count in ((biology_text, 20), ("Cells divide slowly.", 5)):
            questions = generate(text, count, quiz_type, seed=1)
            pairs = [(q.prompt, q.answer_key) for q in questions]
            assert len(pairs) == len(set(pairs))

    def test_mixed_leaves_sentences_for_true_false(self):
        questions = generate(PHOTOSYNTHESIS, 2, QuizType.MIXED)
        assert [q.kind for q in questions] == [QuestionKind.SINGLE, QuestionKind.TRUE_FALSE]
        assert questions[0].source != questions[1].source
