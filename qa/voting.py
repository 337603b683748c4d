"""
Answer voting.

There is no per-user vote ledger: every accepted vote bumps a counter by
one, so the same user can vote repeatedly. Counters are incremented with
F() expressions so concurrent votes are not lost.
"""

import logging

from django.db.models import F

from .consistency import get_answer
from .exceptions import Forbidden, InvalidInput
from .models import Answer

logger = logging.getLogger(__name__)

UPVOTE = "upvote"
DOWNVOTE = "downvote"

VOTE_FIELDS = {
    UPVOTE: "upvotes",
    DOWNVOTE: "downvotes",
}


def vote(answer_id, voter, vote_type):
    """
    Record one vote on an answer and return the refreshed Answer.

    Raises:
        InvalidInput: vote_type is not "upvote" or "downvote"
        NotFound: no such answer
        Forbidden: the voter wrote the answer
    """
    field = VOTE_FIELDS.get(vote_type) if isinstance(vote_type, str) else None
    if field is None:
        raise InvalidInput(
            'Invalid vote type. Must be "upvote" or "downvote".',
            errors={"voteType": ['Vote type must be either "upvote" or "downvote"']},
        )

    answer = get_answer(answer_id)
    if answer.author_id == voter.id:
        raise Forbidden("You cannot vote on your own answer.")

    Answer.objects.filter(pk=answer.pk).update(**{field: F(field) + 1})
    answer.refresh_from_db()
    logger.info(f"User {voter.id} cast {vote_type} on answer {answer.id}")
    return answer
