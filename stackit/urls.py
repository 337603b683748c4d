"""
Root URL configuration for the stackit project.

    /admin/     Django admin (answer-link repair lives on the Question admin)
    /health     liveness probe
    /api/...    qa.urls
"""

from django.contrib import admin
from django.urls import include, path

from qa import views

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health", views.health, name="health"),
    path("", include("qa.urls")),
]
