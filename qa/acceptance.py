"""
Accept-answer transition.

A question goes from "no accepted answer" to "has accepted answer" and
stays there; accepting a different answer moves the flag, there is no
unaccept. Only the question author may accept, and only one of the
question's own answers.
"""

import logging

from django.db import transaction
from django.utils import timezone

from .consistency import get_question
from .exceptions import Forbidden, NotFound
from .models import Answer

logger = logging.getLogger(__name__)


def accept_answer(question_id, answer_id, requester):
    """
    Mark answer_id as the accepted answer of question_id.

    Returns:
        tuple: (question, answer) after the transition

    Raises:
        NotFound: question missing, or answer missing / not under this question
        Forbidden: requester did not write the question
    """
    with transaction.atomic():
        question = get_question(question_id, lock=True)
        if question.author_id != requester.id:
            raise Forbidden("You can only accept answers for your own questions.")

        try:
            answer = Answer.objects.select_for_update().get(pk=answer_id, question=question)
        except Answer.DoesNotExist:
            raise NotFound("Answer not found.")

        previous = question.accepted_answer_id
        Answer.objects.filter(question=question, is_accepted=True).exclude(pk=answer.pk).update(
            is_accepted=False, updated_at=timezone.now()
        )
        if not answer.is_accepted:
            answer.is_accepted = True
            answer.save(update_fields=["is_accepted", "updated_at"])
        if previous != answer.pk:
            question.accepted_answer = answer
            question.save(update_fields=["accepted_answer", "updated_at"])

    logger.info(f"Question {question.id}: accepted answer {previous} -> {answer.id}")
    return question, answer
