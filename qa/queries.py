"""
Filter, sort and pagination for question/answer listings.

Sort keys are named policies. Unknown keys fall back to the listing's
default ordering instead of failing. Every ordering ends with the primary
key so pages stay stable when timestamps tie.
"""

import math
from dataclasses import dataclass, field

from django.core.paginator import EmptyPage, Paginator
from django.db.models import Q

from .exceptions import InvalidInput
from .models import Answer, Question, normalize_tags


QUESTION_SORTS = {
    "newest": ("-created_at", "-id"),
    "oldest": ("created_at", "id"),
    "updated": ("-updated_at", "-id"),
    "title": ("title", "id"),
}
DEFAULT_QUESTION_SORT = "newest"

ANSWER_SORTS = {
    "relevance": ("-is_accepted", "-upvotes", "created_at", "id"),
    "votes": ("-upvotes", "downvotes", "created_at", "id"),
    "newest": ("-created_at", "-id"),
    "oldest": ("created_at", "id"),
}
DEFAULT_ANSWER_SORT = "relevance"

# sortBy=<field>&sortOrder=asc|desc, as older clients send it
FIELD_SORTS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
}


@dataclass
class ListParams:
    page: int = 1
    limit: int = 10
    search: str = ""
    tags: list = field(default_factory=list)
    sort: str = ""
    sort_order: str = "desc"

    @property
    def offset(self):
        return (self.page - 1) * self.limit


@dataclass
class Page:
    items: list
    page: int
    limit: int
    total: int
    total_pages: int

    @property
    def pagination(self):
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


def _positive_int(raw, name, default):
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise InvalidInput(errors={name: [f"{name} must be an integer."]})
    if value < 1:
        raise InvalidInput(errors={name: [f"{name} must be at least 1."]})
    return value


def _getlist(query, key):
    if hasattr(query, "getlist"):
        return query.getlist(key)
    value = query.get(key)
    if value is None:
        return []
    return value if isinstance(value, (list, tuple)) else [value]


def parse_tags(values):
    """Split repeated and comma-separated tag params into clean labels."""
    return normalize_tags(name for value in values for name in str(value).split(","))


def parse_list_params(query, default_limit=10, max_limit=100):
    """
    Build ListParams from a request query (QueryDict or plain dict).

    page and limit are 1-based positive integers; limit is capped at
    max_limit. Raises InvalidInput for anything that is not.
    """
    limit = min(_positive_int(query.get("limit"), "limit", default_limit), max_limit)
    sort_order = (query.get("sortOrder") or "desc").strip().lower()
    return ListParams(
        page=_positive_int(query.get("page"), "page", 1),
        limit=limit,
        search=(query.get("search") or "").strip(),
        tags=parse_tags(_getlist(query, "tags")),
        sort=(query.get("sortBy") or query.get("sort") or "").strip(),
        sort_order="asc" if sort_order == "asc" else "desc",
    )


def question_ordering(params):
    if params.sort in QUESTION_SORTS:
        return QUESTION_SORTS[params.sort]
    if params.sort in FIELD_SORTS:
        column = FIELD_SORTS[params.sort]
        if params.sort_order == "asc":
            return (column, "id")
        return (f"-{column}", "-id")
    return QUESTION_SORTS[DEFAULT_QUESTION_SORT]


def answer_ordering(params):
    return ANSWER_SORTS.get(params.sort, ANSWER_SORTS[DEFAULT_ANSWER_SORT])


def filter_questions(queryset, params):
    if params.search:
        queryset = queryset.filter(
            Q(title__icontains=params.search) | Q(description__icontains=params.search)
        )
    if params.tags:
        queryset = queryset.filter(tags__name__in=params.tags).distinct()
    return queryset


def paginate(queryset, params):
    """Return at most params.limit items starting at (page - 1) * limit."""
    paginator = Paginator(queryset, params.limit)
    total = paginator.count
    try:
        items = list(paginator.page(params.page).object_list)
    except EmptyPage:
        items = []
    return Page(
        items=items,
        page=params.page,
        limit=params.limit,
        total=total,
        total_pages=math.ceil(total / params.limit),
    )


# ============================================================================
# LISTINGS
# ============================================================================

def list_questions(params, author_id=None):
    queryset = Question.objects.select_related("author").prefetch_related("tags")
    if author_id is not None:
        queryset = queryset.filter(author_id=author_id)
    queryset = filter_questions(queryset, params)
    return paginate(queryset.order_by(*question_ordering(params)), params)


def list_answers(question, params):
    queryset = Answer.objects.filter(question=question).select_related("author")
    return paginate(queryset.order_by(*answer_ordering(params)), params)


def list_user_answers(author_id, params):
    queryset = (
        Answer.objects.filter(author_id=author_id)
        .select_related("author", "question")
        .order_by(*ANSWER_SORTS["newest"])
    )
    return paginate(queryset, params)


def ordered_answers(question):
    """All answers of a question in the default relevance order."""
    return list(
        question.answers.select_related("author").order_by(*ANSWER_SORTS[DEFAULT_ANSWER_SORT])
    )
