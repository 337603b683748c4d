"""
Question/Answer lifecycle and the bidirectional Question.answer_ids linkage.

Each multi-row mutation runs in one transaction with the Question row
locked, and still writes in a fixed order: the answer_ids list is updated
before an Answer row is deleted, and all Answers are deleted before their
Question. repair_answer_links() reconciles rows written outside these paths.
"""

import logging
from dataclasses import dataclass
from typing import Any

from django.db import transaction

from . import notifications
from .enhancement import Enhancement
from .exceptions import Forbidden, NotFound
from .models import Answer, Question, normalize_tags

logger = logging.getLogger(__name__)


@dataclass
class Created:
    """A freshly created Question or Answer plus what enrichment did to it."""

    instance: Any
    enhancement: Enhancement
    enhanced: bool


def get_question(question_id, lock=False):
    queryset = Question.objects.select_for_update() if lock else Question.objects.all()
    try:
        return queryset.get(pk=question_id)
    except Question.DoesNotExist:
        raise NotFound("Question not found.")


def get_answer(answer_id, lock=False):
    queryset = Answer.objects.select_for_update() if lock else Answer.objects.all()
    try:
        return queryset.get(pk=answer_id)
    except Answer.DoesNotExist:
        raise NotFound("Answer not found.")


def _ensure_author(instance, requester, message):
    if instance.author_id != requester.id:
        raise Forbidden(message)


# ============================================================================
# QUESTIONS
# ============================================================================

def create_question(author, title, description, tags, pipeline):
    """
    Create a question, enriched by the pipeline when it can.

    Tags given by the caller win; suggested tags are only used when the
    caller sent none.
    """
    enhancement = pipeline.enhance_question(title, description)
    draft = enhancement.value_or_original()
    caller_tags = normalize_tags(tags or [])
    final_tags = caller_tags or list(draft.tags)

    with transaction.atomic():
        question = Question.objects.create(
            author=author,
            title=draft.title,
            description=draft.description,
        )
        question.set_tags(final_tags)

    enhanced = (draft.title, draft.description) != (title, description) or final_tags != caller_tags
    logger.info(f"User {author.id} created question {question.id} (enhanced={enhanced})")
    return Created(question, enhancement, enhanced)


def update_question(question_id, requester, title=None, description=None, tags=None):
    """Update author-editable fields only. Links, votes and acceptance stay untouched."""
    with transaction.atomic():
        question = get_question(question_id, lock=True)
        _ensure_author(question, requester, "You can only update your own questions.")

        changed = []
        if title:
            question.title = title
            changed.append("title")
        if description:
            question.description = description
            changed.append("description")
        if tags is not None:
            question.set_tags(tags)
        if changed or tags is not None:
            question.save(update_fields=changed + ["updated_at"])
    return question


def delete_question(question_id, requester):
    """Delete a question and, before it, every answer pointing at it."""
    with transaction.atomic():
        question = get_question(question_id, lock=True)
        _ensure_author(question, requester, "You can only delete your own questions.")

        deleted, _ = Answer.objects.filter(question=question).delete()
        question.delete()
    logger.info(f"User {requester.id} deleted question {question_id} and {deleted} related rows")


# ============================================================================
# ANSWERS
# ============================================================================

def create_answer(question_id, author, content, pipeline):
    """
    Post an answer and link it into the question's answer list.

    Enrichment happens before the transaction so no lock is held while the
    capability is called. The question author is notified afterwards.
    """
    get_question(question_id)

    enhancement = pipeline.enhance_answer(content)
    final_content = enhancement.value_or_original()

    with transaction.atomic():
        question = get_question(question_id, lock=True)
        answer = Answer.objects.create(
            content=final_content,
            author=author,
            question=question,
        )
        question.answer_ids = [i for i in question.answer_ids if i != answer.id] + [answer.id]
        question.save(update_fields=["answer_ids"])

    logger.info(f"User {author.id} answered question {question.id} with answer {answer.id}")
    notifications.on_answer_created(question, answer)
    return Created(answer, enhancement, final_content != content)


def update_answer(answer_id, requester, content):
    with transaction.atomic():
        answer = get_answer(answer_id, lock=True)
        _ensure_author(answer, requester, "You can only update your own answers.")
        answer.content = content
        answer.save(update_fields=["content", "updated_at"])
    return answer


def delete_answer(answer_id, requester):
    """Unlink the answer from its question, then delete it."""
    with transaction.atomic():
        answer = get_answer(answer_id, lock=True)
        _ensure_author(answer, requester, "You can only delete your own answers.")

        question = Question.objects.select_for_update().filter(pk=answer.question_id).first()
        if question is not None:
            question.answer_ids = [i for i in question.answer_ids if i != answer.id]
            question.save(update_fields=["answer_ids"])
        answer.delete()
    logger.info(f"User {requester.id} deleted answer {answer_id}")


# ============================================================================
# RECONCILIATION
# ============================================================================

def repair_answer_links(question):
    """
    Bring answer_ids and the accepted flags back in line with the Answer rows.

    Drops ids with no matching Answer (and duplicates), appends Answers
    missing from the list in creation order, and clears is_accepted on
    every Answer other than accepted_answer.

    Returns:
        dict: counts under "removed", "added" and "flags_cleared"
    """
    with transaction.atomic():
        question = get_question(question.pk, lock=True)
        actual = list(
            Answer.objects.filter(question=question)
            .order_by("created_at", "id")
            .values_list("id", flat=True)
        )
        existing = set(actual)

        kept = []
        for answer_id in question.answer_ids:
            if answer_id in existing and answer_id not in kept:
                kept.append(answer_id)
        added = [answer_id for answer_id in actual if answer_id not in kept]
        removed = len(question.answer_ids) - len(kept)

        if removed or added:
            question.answer_ids = kept + added
            question.save(update_fields=["answer_ids"])

        stale = Answer.objects.filter(question=question, is_accepted=True)
        if question.accepted_answer_id is not None:
            stale = stale.exclude(pk=question.accepted_answer_id)
            Answer.objects.filter(pk=question.accepted_answer_id).update(is_accepted=True)
        flags_cleared = stale.update(is_accepted=False)

    if removed or added or flags_cleared:
        logger.warning(
            f"Repaired question {question.id}: removed={removed} added={len(added)} "
            f"flags_cleared={flags_cleared}"
        )
    return {"removed": removed, "added": len(added), "flags_cleared": flags_cleared}
