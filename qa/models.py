"""
================================================================================
STACKIT Q&A - DATABASE MODELS
================================================================================

@file        models.py
@description Django ORM models defining the question/answer schema
@version     1.0.0

MODULE PURPOSE
================================================================================
This module defines all database models for the StackIt Q&A platform:
- User model (extended from AbstractUser)
- Tags
- Questions and their ordered answer list
- Answers with vote counters and acceptance flag
- Notifications

DATABASE STRUCTURE
================================================================================
1. User & Authentication
   - User (AbstractUser extension, owned by the auth layer)

2. Content Models
   - Tag (short lowercase label)
   - Question (user-generated question, up to 10 tags)
   - Answer (answer to exactly one question)

3. Notifications
   - Notification (activity alerts for a single recipient)

MODEL RELATIONSHIPS
================================================================================
User (1) ──────> (N) Question
User (1) ──────> (N) Answer
User (1) ──────> (N) Notification

Question (N) <──> (N) Tag
Question (1) ──────> (N) Answer        (Answer.question, PROTECT)
Question (1) ──────> (0..1) Answer     (Question.accepted_answer, SET_NULL)

LINKAGE INVARIANTS
================================================================================
- Question.answer_ids lists the id of every Answer whose `question` is this
  Question exactly once, in insertion order.
- Question.accepted_answer, if set, points at one of its own Answers, and that
  Answer is the only one under the Question with is_accepted=True.
- Answer.question is PROTECT: a Question cannot be deleted while Answers still
  reference it, so the cascade in qa.consistency must run first.
- Deleting the accepted Answer clears Question.accepted_answer (SET_NULL).

Vote counters are only ever changed through F() increments in qa.voting.

================================================================================
"""

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


# ============================================================================
# CONSTANTS
# ============================================================================

MAX_TAGS = 10
TAG_MAX_LENGTH = 30

# Field limits shared by request validation and enhanced output
TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 200
DESCRIPTION_MIN_LENGTH = 20
DESCRIPTION_MAX_LENGTH = 5000
ANSWER_MIN_LENGTH = 10
ANSWER_MAX_LENGTH = 10000


def normalize_tags(names):
    """Lowercase, strip and de-duplicate tag labels, keeping first-seen order."""
    tags = []
    for name in names:
        name = str(name).strip().lower()
        if name and len(name) <= TAG_MAX_LENGTH and name not in tags:
            tags.append(name)
    return tags


def _author_payload(user):
    if user is None:
        return None
    return {"id": user.id, "username": user.username}


# ============================================================================
# SECTION 1: USER & AUTHENTICATION MODELS
# ============================================================================

class User(AbstractUser):
    """
    Platform user.

    Owned and mutated by django.contrib.auth. The workflow code only reads
    users (identity, username) and checks they exist.

    Related Names:
        questions: QuerySet of authored Question objects
        answers: QuerySet of authored Answer objects
        notifications: QuerySet of received Notification objects
    """

    def serialize(self):
        return {"id": self.id, "username": self.username, "email": self.email}


# ============================================================================
# SECTION 2: CONTENT MODELS (Tags, Questions, Answers)
# ============================================================================

class Tag(models.Model):
    """
    Short lowercase label attached to questions.

    Tags are created on demand by Question.set_tags() and never edited.
    """

    name = models.CharField(
        max_length=TAG_MAX_LENGTH,
        unique=True,
        help_text="Lowercase tag label"
    )

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Question(models.Model):
    """
    User-submitted question.

    Attributes:
        title (CharField): Question title
        description (TextField): Question body
        tags (ManyToManyField): Up to MAX_TAGS labels
        author (ForeignKey): Question author, immutable after creation
        answer_ids (JSONField): Answer ids in insertion order
        accepted_answer (ForeignKey): The accepted Answer, if any
        created_at (DateTimeField): Creation timestamp
        updated_at (DateTimeField): Last modification timestamp

    Related Names:
        answers: QuerySet of Answer objects pointing at this question

    Meta:
        ordering: Newest first (descending created_at)

    Example:
        question = Question.objects.create(
            author=request.user,
            title="How do I reverse a list in Python?",
            description="I have a list and want it backwards without copying."
        )
        question.set_tags(["python", "lists"])
    """

    title = models.CharField(
        max_length=200,
        help_text="Question title"
    )
    description = models.TextField(
        help_text="Question body"
    )
    tags = models.ManyToManyField(
        Tag,
        related_name='questions',
        blank=True,
        help_text="Labels used for filtering"
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='questions',
        help_text="Author of this question"
    )
    answer_ids = models.JSONField(
        default=list,
        blank=True,
        help_text="Answer ids in the order they were posted"
    )
    accepted_answer = models.ForeignKey(
        'Answer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="Answer the author marked as the solution"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Creation timestamp"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Last modification timestamp"
    )

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.author} - {self.title[:50]}"

    @property
    def tag_names(self):
        return [tag.name for tag in self.tags.all()]

    def set_tags(self, names):
        """Replace the question's tags, creating unknown tags on the way."""
        tags = [Tag.objects.get_or_create(name=name)[0] for name in normalize_tags(names)[:MAX_TAGS]]
        self.tags.set(tags)

    def serialize(self, answers=None):
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "tags": self.tag_names,
            "author": _author_payload(self.author),
            "answers": list(self.answer_ids),
            "answerCount": len(self.answer_ids),
            "acceptedAnswerId": self.accepted_answer_id,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if answers is not None:
            data["answers"] = [answer.serialize() for answer in answers]
        return data


class Answer(models.Model):
    """
    Answer to a question.

    Attributes:
        content (TextField): Answer body
        author (ForeignKey): Answer author, immutable
        question (ForeignKey): Question answered, immutable
        upvotes (PositiveIntegerField): Upvote counter
        downvotes (PositiveIntegerField): Downvote counter
        is_accepted (BooleanField): True for the question's accepted answer
        created_at (DateTimeField): Creation timestamp
        updated_at (DateTimeField): Last modification timestamp

    Meta:
        ordering: Accepted first, then most upvoted, then oldest
    """

    content = models.TextField(
        help_text="Answer body"
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='answers',
        help_text="Author of this answer"
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.PROTECT,
        related_name='answers',
        help_text="Question this answer belongs to"
    )
    upvotes = models.PositiveIntegerField(
        default=0,
        help_text="Number of upvotes received"
    )
    downvotes = models.PositiveIntegerField(
        default=0,
        help_text="Number of downvotes received"
    )
    is_accepted = models.BooleanField(
        default=False,
        help_text="Whether the question author accepted this answer"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Creation timestamp"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Last modification timestamp"
    )

    class Meta:
        ordering = ['-is_accepted', '-upvotes', 'created_at']

    def __str__(self):
        return f"{self.author} on #{self.question_id} - {self.content[:50]}"

    def serialize(self, include_question=False):
        data = {
            "id": self.id,
            "content": self.content,
            "author": _author_payload(self.author),
            "question": self.question_id,
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
            "isAccepted": self.is_accepted,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if include_question:
            data["question"] = {"id": self.question_id, "title": self.question.title}
        return data


# ============================================================================
# SECTION 3: NOTIFICATION MODELS
# ============================================================================

class NotificationQuerySet(models.QuerySet):

    def unread(self):
        return self.filter(is_read=False)

    def mark_all_as_read(self):
        return self.unread().update(is_read=True, updated_at=timezone.now())


class Notification(models.Model):
    """
    User activity notification.

    Created only by qa.notifications as a side effect of workflow events.
    Read state and deletion belong to the recipient.

    Attributes:
        user (ForeignKey): User receiving the notification
        actor (ForeignKey): User who triggered it (if any)
        question (ForeignKey): Related question (if any)
        message (CharField): Human-readable text
        is_read (BooleanField): Read status
        created_at (DateTimeField): Creation timestamp
        updated_at (DateTimeField): Last modification timestamp

    Meta:
        ordering: Newest first (descending created_at)

    Example:
        request.user.notifications.mark_all_as_read()
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text="User receiving this notification"
    )
    actor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="User who performed the action"
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications',
        help_text="Associated question (if applicable)"
    )
    message = models.CharField(
        max_length=300,
        help_text="Notification text"
    )
    is_read = models.BooleanField(
        default=False,
        help_text="Whether notification has been read"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Notification creation timestamp"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Last modification timestamp"
    )

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"To {self.user}: {self.message[:50]}"

    def serialize(self):
        return {
            "id": self.id,
            "message": self.message,
            "user": self.user_id,
            "question": self.question_id,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
