"""
================================================================================
STACKIT Q&A - URL CONFIGURATION
================================================================================

@file        urls.py
@description JSON API routing for questions, answers, notifications and AI
@version     1.0.0

URL STRUCTURE OVERVIEW
================================================================================
1. Authentication (register, login, logout, me)
2. Questions (list, create, detail, update, delete, accept)
3. Answers (list, create, update, delete, vote)
4. Notifications (list, count, mark read, delete)
5. AI Enhancement (status, enhance, suggest, analyze)

URL PARAMETER TYPES
================================================================================
- <int:question_id>: Question primary key
- <int:answer_id>: Answer primary key
- <int:user_id>: User primary key
- <int:notification_id>: Notification primary key

Every view answers with the {"success": ..., "message": ..., "data": ...}
envelope; errors are rendered by qa.middleware.ApiErrorMiddleware.

================================================================================
"""

from django.urls import path
from . import views


urlpatterns = [

    # ========================================================================
    # SECTION 1: AUTHENTICATION
    # ========================================================================

    path("api/auth/register", views.register, name="register"),  # Create account and log in
    path("api/auth/login", views.login_view, name="login"),  # Username or email + password
    path("api/auth/logout", views.logout_view, name="logout"),
    path("api/auth/me", views.me, name="me"),  # Current session user


    # ========================================================================
    # SECTION 2: QUESTIONS
    # ========================================================================

    path(
        "api/questions",
        views.questions,
        name="questions"
    ),  # GET list (search/tags/sort/page), POST create

    path(
        "api/questions/user/<int:user_id>",
        views.user_questions,
        name="user_questions"
    ),  # Questions written by one user

    path(
        "api/questions/<int:question_id>",
        views.question_detail,
        name="question_detail"
    ),  # GET with answers, PUT update, DELETE with answers

    path(
        "api/questions/<int:question_id>/accept/<int:answer_id>",
        views.accept_answer,
        name="accept_answer"
    ),  # Question author accepts one answer


    # ========================================================================
    # SECTION 3: ANSWERS
    # ========================================================================

    path(
        "api/answers/question/<int:question_id>",
        views.answers,
        name="answers"
    ),  # GET list for a question, POST create

    path(
        "api/answers/user/<int:user_id>",
        views.user_answers,
        name="user_answers"
    ),  # Answers written by one user

    path(
        "api/answers/<int:answer_id>",
        views.answer_detail,
        name="answer_detail"
    ),  # PUT update, DELETE

    path(
        "api/answers/<int:answer_id>/vote",
        views.vote_answer,
        name="vote_answer"
    ),  # {"voteType": "upvote" | "downvote"}


    # ========================================================================
    # SECTION 4: NOTIFICATIONS
    # ========================================================================

    path(
        "api/notifications",
        views.notification_list,
        name="notifications"
    ),  # GET own notifications, DELETE all

    path(
        "api/notifications/count",
        views.notification_count,
        name="notification_count"
    ),  # Unread count

    path(
        "api/notifications/mark-all-read",
        views.mark_all_notifications_read,
        name="mark_all_notifications_read"
    ),

    path(
        "api/notifications/<int:notification_id>/read",
        views.mark_notification_read,
        name="mark_notification_read"
    ),

    path(
        "api/notifications/<int:notification_id>",
        views.delete_notification,
        name="delete_notification"
    ),


    # ========================================================================
    # SECTION 5: AI ENHANCEMENT
    # ========================================================================

    path("api/ai/status", views.ai_status, name="ai_status"),  # Public capability report
    path("api/ai/enhance-question", views.ai_enhance_question, name="ai_enhance_question"),
    path("api/ai/enhance-answer", views.ai_enhance_answer, name="ai_enhance_answer"),
    path("api/ai/generate-suggestion", views.ai_generate_suggestion, name="ai_generate_suggestion"),
    path("api/ai/analyze-code", views.ai_analyze_code, name="ai_analyze_code"),
]
