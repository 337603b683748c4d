"""
Shared fixtures.

Database tests use pytest-django's `db` fixture. The enhancement pipeline
is replaced per test with a FakeCapability so nothing leaves the process.
"""

import json

import pytest
from django.test import Client

from qa.enhancement import EnhancementPipeline, configure_pipeline
from qa.models import Question, User


class FakeCapability:
    """Stand-in for GeminiCapability: canned replies or a raised error."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(autouse=True)
def _isolated_settings(settings):
    """No HTTPS redirect in tests and no real AI backend."""
    settings.SECURE_SSL_REDIRECT = False
    configure_pipeline(EnhancementPipeline())
    yield
    configure_pipeline(None)


@pytest.fixture
def use_capability():
    """Install a FakeCapability-backed pipeline and return the capability."""

    def install(reply="", error=None):
        capability = FakeCapability(reply=reply, error=error)
        configure_pipeline(EnhancementPipeline(capability))
        return capability

    return install


@pytest.fixture
def u1(db):
    return User.objects.create_user("alice", "alice@example.com", "password123")


@pytest.fixture
def u2(db):
    return User.objects.create_user("bob", "bob@example.com", "password123")


@pytest.fixture
def u3(db):
    return User.objects.create_user("carol", "carol@example.com", "password123")


@pytest.fixture
def question(u1):
    q = Question.objects.create(
        author=u1,
        title="How do I reverse a list?",
        description="I have a list of integers and need it reversed in place.",
    )
    q.set_tags(["python", "lists"])
    return q


@pytest.fixture
def pipeline():
    return EnhancementPipeline()


class ApiClient(Client):
    """Django test client that sends JSON bodies with post/put/delete."""

    def send(self, method, path, data=None):
        body = json.dumps(data) if data is not None else ""
        return getattr(self, method)(path, data=body, content_type="application/json")


@pytest.fixture
def anon_client():
    return ApiClient()


@pytest.fixture
def client_for():
    def make(user):
        client = ApiClient()
        client.force_login(user)
        return client

    return make
