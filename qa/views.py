import json
import logging
from functools import wraps

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from . import acceptance, consistency, notifications, queries, voting
from .enhancement import get_pipeline
from .exceptions import InvalidInput, NotFound, Unauthorized
from .forms import (
    AnalyzeCodeForm, AnswerForm, EnhanceAnswerForm, EnhanceQuestionForm, LoginForm,
    QuestionForm, QuestionUpdateForm, RegisterForm, SuggestionForm, clean_or_raise,
)
from .models import Question, User


# Logger
logger = logging.getLogger(__name__)


def api_login_required(view):
    """Like login_required, but answers 401 instead of redirecting."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        _require_user(request)
        return view(request, *args, **kwargs)
    return wrapper


def _require_user(request):
    if not request.user.is_authenticated:
        raise Unauthorized("Access denied. Please log in.")
    return request.user


def _json_body(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError:
        raise InvalidInput("Malformed JSON body.")
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object.")
    return data


def _ok(data=None, message=None, status=200):
    payload = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    return JsonResponse(payload, status=status)


def _list_params(request, default_limit=None):
    return queries.parse_list_params(
        request.GET,
        default_limit=default_limit or settings.QA_PAGE_SIZE,
        max_limit=settings.QA_MAX_PAGE_SIZE,
    )


def _ensure_user_exists(user_id):
    if not User.objects.filter(pk=user_id).exists():
        raise NotFound("User not found.")


@require_GET
def health(request):
    return JsonResponse({"status": "OK", "aiAvailable": get_pipeline().is_available()})


# ============================================================================
# AUTH
# ============================================================================

@csrf_exempt
@require_POST
def register(request):
    data = clean_or_raise(RegisterForm, _json_body(request))
    user = User.objects.create_user(
        username=data["username"],
        email=data["email"],
        password=data["password"],
    )
    login(request, user)
    logger.info(f"Registration success for {user.username}")
    return _ok({"user": user.serialize()}, "User registered successfully", status=201)


@csrf_exempt
@require_POST
def login_view(request):
    data = clean_or_raise(LoginForm, _json_body(request))
    identifier = data["identifier"].strip()

    # Try to find user by username or email
    user = User.objects.filter(username=identifier).first()
    if user is None:
        users = User.objects.filter(email__iexact=identifier)
        if users.count() == 1:
            user = users.first()

    if user is not None:
        user = authenticate(request, username=user.username, password=data["password"])
    if user is None:
        raise Unauthorized("Invalid credentials.")

    login(request, user)
    return _ok({"user": user.serialize()}, "Login successful")


@csrf_exempt
@require_POST
def logout_view(request):
    logout(request)
    return _ok(message="Logged out")


@require_GET
@api_login_required
def me(request):
    return _ok({"user": request.user.serialize()})


# ============================================================================
# QUESTIONS
# ============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def questions(request):
    if request.method == "POST":
        return _create_question(request)

    page = queries.list_questions(_list_params(request))
    return _ok({
        "questions": [question.serialize() for question in page.items],
        "pagination": page.pagination,
    })


def _create_question(request):
    user = _require_user(request)
    data = clean_or_raise(QuestionForm, _json_body(request))
    created = consistency.create_question(
        author=user,
        title=data["title"],
        description=data["description"],
        tags=data["tags"] or [],
        pipeline=get_pipeline(),
    )

    ai_enhancement = None
    if created.enhancement.ok:
        ai_enhancement = {
            "originalTitle": data["title"],
            "originalDescription": data["description"],
            "suggestedTags": created.enhancement.value.tags,
        }
    return _ok({
        "question": created.instance.serialize(),
        "aiEnhanced": created.enhanced,
        "aiEnhancement": ai_enhancement,
    }, "Question created successfully", status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def question_detail(request, question_id):
    if request.method == "PUT":
        user = _require_user(request)
        data = clean_or_raise(QuestionUpdateForm, _json_body(request))
        question = consistency.update_question(
            question_id, user,
            title=data["title"],
            description=data["description"],
            tags=data["tags"],
        )
        return _ok({"question": question.serialize()}, "Question updated successfully")

    if request.method == "DELETE":
        consistency.delete_question(question_id, _require_user(request))
        return _ok(message="Question deleted successfully")

    try:
        question = (
            Question.objects.select_related("author")
            .prefetch_related("tags")
            .get(pk=question_id)
        )
    except Question.DoesNotExist:
        raise NotFound("Question not found.")
    return _ok({"question": question.serialize(answers=queries.ordered_answers(question))})


@require_GET
def user_questions(request, user_id):
    _ensure_user_exists(user_id)
    params = _list_params(request)
    page = queries.list_questions(params, author_id=user_id)
    return _ok({
        "questions": [question.serialize() for question in page.items],
        "pagination": page.pagination,
    })


@csrf_exempt
@require_http_methods(["PUT"])
@api_login_required
def accept_answer(request, question_id, answer_id):
    question, answer = acceptance.accept_answer(question_id, answer_id, request.user)
    return _ok({
        "acceptedAnswerId": question.accepted_answer_id,
        "answer": answer.serialize(),
    }, "Answer accepted successfully")


# ============================================================================
# ANSWERS
# ============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def answers(request, question_id):
    if request.method == "POST":
        user = _require_user(request)
        data = clean_or_raise(AnswerForm, _json_body(request))
        created = consistency.create_answer(question_id, user, data["content"], get_pipeline())
        return _ok({
            "answer": created.instance.serialize(),
            "aiEnhanced": created.enhanced,
        }, "Answer created successfully", status=201)

    question = consistency.get_question(question_id)
    page = queries.list_answers(question, _list_params(request))
    return _ok({
        "answers": [answer.serialize() for answer in page.items],
        "pagination": page.pagination,
    })


@require_GET
def user_answers(request, user_id):
    _ensure_user_exists(user_id)
    page = queries.list_user_answers(user_id, _list_params(request))
    return _ok({
        "answers": [answer.serialize(include_question=True) for answer in page.items],
        "pagination": page.pagination,
    })


@csrf_exempt
@require_http_methods(["PUT", "DELETE"])
@api_login_required
def answer_detail(request, answer_id):
    if request.method == "DELETE":
        consistency.delete_answer(answer_id, request.user)
        return _ok(message="Answer deleted successfully")

    data = clean_or_raise(AnswerForm, _json_body(request))
    answer = consistency.update_answer(answer_id, request.user, data["content"])
    return _ok({"answer": answer.serialize()}, "Answer updated successfully")


@csrf_exempt
@require_POST
@api_login_required
def vote_answer(request, answer_id):
    vote_type = _json_body(request).get("voteType")
    answer = voting.vote(answer_id, request.user, vote_type)
    return _ok({"answer": answer.serialize()}, f"{vote_type} recorded successfully")


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@csrf_exempt
@require_http_methods(["GET", "DELETE"])
@api_login_required
def notification_list(request):
    if request.method == "DELETE":
        deleted = notifications.delete_all(request.user)
        return _ok({"deleted": deleted}, "All notifications deleted.")

    unread_only = request.GET.get("unreadOnly", "").lower() == "true"
    params = _list_params(request, default_limit=settings.QA_NOTIFICATION_PAGE_SIZE)
    page = notifications.list_notifications(request.user, params, unread_only=unread_only)
    return _ok({
        "notifications": [notification.serialize() for notification in page.items],
        "pagination": page.pagination,
    })


@require_GET
@api_login_required
def notification_count(request):
    return _ok({"count": notifications.unread_count(request.user)})


@csrf_exempt
@require_http_methods(["PUT"])
@api_login_required
def mark_all_notifications_read(request):
    updated = notifications.mark_all_read(request.user)
    return _ok({"updated": updated}, "All notifications marked as read.")


@csrf_exempt
@require_http_methods(["PUT"])
@api_login_required
def mark_notification_read(request, notification_id):
    notification = notifications.mark_read(request.user, notification_id)
    return _ok({"notification": notification.serialize()}, "Notification marked as read.")


@csrf_exempt
@require_http_methods(["DELETE"])
@api_login_required
def delete_notification(request, notification_id):
    notifications.delete_notification(request.user, notification_id)
    return _ok(message="Notification deleted.")


# ============================================================================
# AI ENHANCEMENT
# ============================================================================

@require_GET
def ai_status(request):
    return _ok(get_pipeline().status())


@csrf_exempt
@require_POST
@api_login_required
def ai_enhance_question(request):
    data = clean_or_raise(EnhanceQuestionForm, _json_body(request))
    draft = get_pipeline().enhance_question(data["title"], data["description"]).unwrap()
    return _ok({
        "original": {"title": data["title"], "description": data["description"]},
        "enhanced": {
            "enhancedTitle": draft.title,
            "enhancedDescription": draft.description,
            "suggestedTags": draft.tags,
        },
    })


@csrf_exempt
@require_POST
@api_login_required
def ai_enhance_answer(request):
    data = clean_or_raise(EnhanceAnswerForm, _json_body(request))
    enhanced = get_pipeline().enhance_answer(data["content"]).unwrap()
    return _ok({"original": data["content"], "enhanced": enhanced})


@csrf_exempt
@require_POST
@api_login_required
def ai_generate_suggestion(request):
    data = clean_or_raise(SuggestionForm, _json_body(request))
    suggestion = get_pipeline().suggest_answer(
        data["questionTitle"], data["questionDescription"]
    ).unwrap()
    return _ok({"suggestion": suggestion})


@csrf_exempt
@require_POST
@api_login_required
def ai_analyze_code(request):
    data = clean_or_raise(AnalyzeCodeForm, _json_body(request))
    analysis = get_pipeline().analyze_code(data["code"], data["language"]).unwrap()
    return _ok({"code": data["code"], "language": data["language"], "analysis": analysis})
