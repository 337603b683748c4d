"""
================================================================================
STACKIT Q&A - AI ENHANCEMENT PIPELINE
================================================================================

@file        enhancement.py
@description Best-effort Gemini enrichment of questions, answers and code
@version     1.0.0

MODULE PURPOSE
================================================================================
Wraps the optional text-generation capability (Google Gemini through the
google-genai SDK) behind four operations:

1. enhance_question(title, description) -> QuestionDraft
2. enhance_answer(content)              -> str
3. suggest_answer(title, description)   -> str
4. analyze_code(code, language)         -> str

Every operation returns an Enhancement instead of raising:

    status = "enhanced"     capability answered with usable output
    status = "unavailable"  no capability configured, nothing was called
    status = "failed"       capability raised, timed out or returned junk

Creation paths call value_or_original() and carry on with the caller's own
content when enrichment does not work out. The explicit /api/ai endpoints
call unwrap(), which raises CapabilityUnavailable or UpstreamFailure.

CONFIGURATION
================================================================================
Availability is decided once, when the pipeline is built:

    GEMINI_API_KEY      empty -> pipeline without capability (unavailable)
    GEMINI_MODEL        model name (default gemini-2.0-flash)
    GEMINI_TEMPERATURE  sampling temperature
    GEMINI_MAX_TOKENS   max output tokens
    GEMINI_TIMEOUT_MS   HTTP timeout for a single call

get_pipeline() returns the process-wide pipeline built from settings.
configure_pipeline() swaps it (tests, management shells).

================================================================================
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from django.conf import settings
from google import genai
from google.genai import types

from .exceptions import CapabilityUnavailable, UpstreamFailure
from .models import (
    ANSWER_MAX_LENGTH, ANSWER_MIN_LENGTH, DESCRIPTION_MAX_LENGTH, DESCRIPTION_MIN_LENGTH,
    MAX_TAGS, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH, normalize_tags,
)

logger = logging.getLogger(__name__)


ENHANCED = "enhanced"
UNAVAILABLE = "unavailable"
FAILED = "failed"

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class QuestionDraft:
    title: str
    description: str
    tags: list = field(default_factory=list)


@dataclass(frozen=True)
class Enhancement:
    """Outcome of one enrichment attempt."""

    status: str
    original: Any
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, original, value):
        return cls(ENHANCED, original, value=value)

    @classmethod
    def unavailable(cls, original):
        return cls(UNAVAILABLE, original)

    @classmethod
    def failed(cls, original, error):
        return cls(FAILED, original, error=error)

    @property
    def ok(self):
        return self.status == ENHANCED

    def value_or_original(self):
        return self.value if self.ok else self.original

    def unwrap(self):
        if self.status == UNAVAILABLE:
            raise CapabilityUnavailable()
        if self.status == FAILED:
            raise UpstreamFailure(f"AI enhancement failed: {self.error}")
        return self.value


# ============================================================================
# GEMINI CAPABILITY
# ============================================================================

class GeminiCapability:
    """Thin google-genai wrapper: prompt in, text out."""

    def __init__(self, api_key, model="gemini-2.0-flash", temperature=0.3,
                 max_tokens=2048, timeout_ms=15000):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_ms = timeout_ms
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.timeout_ms),
            )
            logger.info(f"Gemini client initialized for model {self.model}")
        return self._client

    def generate(self, prompt):
        response = self._get_client().models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                max_output_tokens=self.max_tokens,
                temperature=self.temperature,
            ),
        )
        return response.text or ""


# ============================================================================
# PROMPTS & PARSING
# ============================================================================

QUESTION_PROMPT = """Improve this programming question so it is clear and specific.
Title: {title}
Description: {description}

Keep the author's intent. Mention the technologies involved when they are obvious.
Reply with JSON only, no commentary:
{{"enhancedTitle": "...", "enhancedDescription": "...", "suggestedTags": ["tag1", "tag2"]}}"""

ANSWER_PROMPT = """Improve this answer to a programming question so it is clearer and more complete.
Answer: {content}

Keep it correct and on topic, add a short code example where it helps.
Reply with the improved answer as plain text."""

SUGGESTION_PROMPT = """Write a helpful answer to this programming question.
Title: {title}
Description: {description}

Address the main problem, explain the reasoning and include code where useful.
Reply with plain text."""

CODE_PROMPT = """Review this {language} code.
Code:
{code}

Cover code quality, possible improvements, best practices and security concerns.
Reply with plain text."""


def _strip_fences(text):
    return _FENCE_RE.sub("", text.strip()).strip()


def _clean_text(text, max_length=None, min_length=1):
    text = _strip_fences(text or "")
    if not text:
        raise ValueError("empty response from model")
    if len(text) < min_length:
        raise ValueError(f"response shorter than {min_length} characters")
    if max_length and len(text) > max_length:
        raise ValueError(f"response longer than {max_length} characters")
    return text


def parse_question_draft(text):
    """Parse the model's JSON reply into a QuestionDraft or raise ValueError."""
    body = _strip_fences(text or "")
    start, end = body.find("{"), body.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("no JSON object in model response")
    try:
        data = json.loads(body[start:end + 1])
    except json.JSONDecodeError as e:
        raise ValueError(f"malformed JSON in model response: {e}")

    title = data.get("enhancedTitle") or data.get("title")
    description = data.get("enhancedDescription") or data.get("description")
    tags = data.get("suggestedTags") or data.get("tags") or []
    if not isinstance(title, str) or not isinstance(description, str):
        raise ValueError("model response is missing title or description")
    if not isinstance(tags, list):
        raise ValueError("suggested tags must be a list")

    title, description = title.strip(), description.strip()
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise ValueError("enhanced title out of range")
    if not DESCRIPTION_MIN_LENGTH <= len(description) <= DESCRIPTION_MAX_LENGTH:
        raise ValueError("enhanced description out of range")
    return QuestionDraft(title, description, normalize_tags(tags)[:MAX_TAGS])


# ============================================================================
# PIPELINE
# ============================================================================

class EnhancementPipeline:
    """
    Best-effort wrapper around an optional capability.

    Args:
        capability: object with generate(prompt) -> str, or None when the
            deployment has no text-generation backend configured.
    """

    def __init__(self, capability=None):
        self._capability = capability

    def is_available(self):
        return self._capability is not None

    def status(self):
        available = self.is_available()
        return {
            "available": available,
            "features": {
                "questionEnhancement": available,
                "answerEnhancement": available,
                "answerSuggestions": available,
                "codeAnalysis": available,
            },
        }

    def _run(self, operation, original, prompt, parse):
        if not self.is_available():
            return Enhancement.unavailable(original)
        try:
            value = parse(self._capability.generate(prompt))
        except Exception as e:
            logger.warning(f"{operation} failed, keeping original content: {e}")
            return Enhancement.failed(original, str(e))
        return Enhancement.success(original, value)

    def enhance_question(self, title, description):
        return self._run(
            "enhance_question",
            QuestionDraft(title, description, []),
            QUESTION_PROMPT.format(title=title, description=description),
            parse_question_draft,
        )

    def enhance_answer(self, content):
        return self._run(
            "enhance_answer",
            content,
            ANSWER_PROMPT.format(content=content),
            lambda text: _clean_text(text, ANSWER_MAX_LENGTH, ANSWER_MIN_LENGTH),
        )

    def suggest_answer(self, title, description):
        return self._run(
            "suggest_answer",
            None,
            SUGGESTION_PROMPT.format(title=title, description=description),
            _clean_text,
        )

    def analyze_code(self, code, language):
        return self._run(
            "analyze_code",
            None,
            CODE_PROMPT.format(code=code, language=language),
            _clean_text,
        )


_pipeline = None


def build_pipeline():
    """Build a pipeline from Django settings."""
    api_key = getattr(settings, "GEMINI_API_KEY", "")
    if not api_key:
        logger.info("GEMINI_API_KEY not set - AI enhancement disabled")
        return EnhancementPipeline()
    return EnhancementPipeline(GeminiCapability(
        api_key=api_key,
        model=settings.GEMINI_MODEL,
        temperature=settings.GEMINI_TEMPERATURE,
        max_tokens=settings.GEMINI_MAX_TOKENS,
        timeout_ms=settings.GEMINI_TIMEOUT_MS,
    ))


def get_pipeline():
    """Get the configured pipeline instance."""
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline()
    return _pipeline


def configure_pipeline(pipeline):
    """Replace the process-wide pipeline. Pass None to rebuild from settings."""
    global _pipeline
    _pipeline = pipeline
