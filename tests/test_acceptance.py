from datetime import timedelta

import pytest
from django.utils import timezone

from qa import acceptance, consistency
from qa.enhancement import EnhancementPipeline
from qa.exceptions import Forbidden, NotFound
from qa.models import Answer, Question


@pytest.fixture
def answers(question, u2, u3):
    return [
        consistency.create_answer(question.id, author, content, EnhancementPipeline()).instance
        for author, content in ((u2, "Use list.reverse()."), (u3, "Use reversed(items)."))
    ]


def test_author_accepts_answer(question, answers, u1):
    updated, answer = acceptance.accept_answer(question.id, answers[0].id, u1)
    assert updated.accepted_answer_id == answers[0].id
    assert answer.is_accepted is True


def test_accepting_another_moves_the_flag(question, answers, u1):
    acceptance.accept_answer(question.id, answers[0].id, u1)
    acceptance.accept_answer(question.id, answers[1].id, u1)

    question.refresh_from_db()
    assert question.accepted_answer_id == answers[1].id
    assert list(Answer.objects.filter(is_accepted=True).values_list("id", flat=True)) == [answers[1].id]


def test_accepting_twice_is_idempotent(question, answers, u1):
    acceptance.accept_answer(question.id, answers[0].id, u1)
    updated, answer = acceptance.accept_answer(question.id, answers[0].id, u1)
    assert updated.accepted_answer_id == answers[0].id
    assert Answer.objects.filter(is_accepted=True).count() == 1


def test_only_question_author_accepts(question, answers, u2):
    with pytest.raises(Forbidden):
        acceptance.accept_answer(question.id, answers[0].id, u2)
    question.refresh_from_db()
    assert question.accepted_answer is None


def test_answer_from_another_question(question, answers, u1, u2):
    other = Question.objects.create(author=u2, title="Other question", description="Something else")
    foreign = consistency.create_answer(other.id, u1, "An answer elsewhere", EnhancementPipeline()).instance
    with pytest.raises(NotFound):
        acceptance.accept_answer(question.id, foreign.id, u1)


def test_missing_question(u1, db):
    with pytest.raises(NotFound):
        acceptance.accept_answer(999, 1, u1)


def test_deleting_accepted_answer_clears_acceptance(question, answers, u1, u2):
    acceptance.accept_answer(question.id, answers[0].id, u1)
    consistency.delete_answer(answers[0].id, u2)
    question.refresh_from_db()
    assert question.accepted_answer is None
    assert question.answer_ids == [answers[1].id]


def test_acceptance_bumps_answer_timestamps(question, answers, u1):
    stale = timezone.now() - timedelta(days=1)
    Answer.objects.filter(question=question).update(updated_at=stale)

    acceptance.accept_answer(question.id, answers[0].id, u1)
    acceptance.accept_answer(question.id, answers[1].id, u1)

    for answer in answers:
        answer.refresh_from_db()
        assert answer.updated_at > stale
