"""
Field-level validation for JSON request bodies.

Forms are bound to the decoded JSON dict. clean_or_raise() turns form
errors into InvalidInput with a {field: [messages]} payload.
"""

from django import forms
from django.core.exceptions import ValidationError

from .exceptions import InvalidInput
from .models import (
    ANSWER_MAX_LENGTH, ANSWER_MIN_LENGTH, DESCRIPTION_MAX_LENGTH, DESCRIPTION_MIN_LENGTH,
    MAX_TAGS, TAG_MAX_LENGTH, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH, User, normalize_tags,
)


def _length_messages(label, low, high):
    message = f"{label} must be between {low} and {high} characters"
    return {"required": f"{label} is required", "min_length": message, "max_length": message}


class JSONCharField(forms.CharField):
    """CharField that refuses JSON numbers, lists and objects instead of str()-ing them."""

    default_error_messages = {"not_string": "Must be a string"}

    def to_python(self, value):
        if value not in self.empty_values and not isinstance(value, str):
            raise ValidationError(self.error_messages["not_string"], code="not_string")
        return super().to_python(value)


class TagListField(forms.Field):
    """
    A list of tag labels, or a comma-separated string.

    None means "not supplied"; an empty list is a real value (clear tags).
    """

    default_error_messages = {
        "invalid": "Tags must be an array of strings",
        "max_tags": f"Tags must be an array with maximum {MAX_TAGS} items",
        "tag_length": f"Each tag must be between 1 and {TAG_MAX_LENGTH} characters",
    }

    def to_python(self, value):
        if value is None or value == "":
            return None
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ValidationError(self.error_messages["invalid"], code="invalid")
        for name in value:
            if not 1 <= len(name.strip()) <= TAG_MAX_LENGTH:
                raise ValidationError(self.error_messages["tag_length"], code="tag_length")
        tags = normalize_tags(value)
        if len(tags) > MAX_TAGS:
            raise ValidationError(self.error_messages["max_tags"], code="max_tags")
        return tags


class QuestionForm(forms.Form):
    title = JSONCharField(
        min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH,
        error_messages=_length_messages("Title", TITLE_MIN_LENGTH, TITLE_MAX_LENGTH),
    )
    description = JSONCharField(
        min_length=DESCRIPTION_MIN_LENGTH, max_length=DESCRIPTION_MAX_LENGTH,
        error_messages=_length_messages("Description", DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH),
    )
    tags = TagListField(required=False)


class QuestionUpdateForm(QuestionForm):
    title = JSONCharField(
        required=False, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH,
        error_messages=_length_messages("Title", TITLE_MIN_LENGTH, TITLE_MAX_LENGTH),
    )
    description = JSONCharField(
        required=False, min_length=DESCRIPTION_MIN_LENGTH, max_length=DESCRIPTION_MAX_LENGTH,
        error_messages=_length_messages("Description", DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH),
    )


class AnswerForm(forms.Form):
    content = JSONCharField(
        min_length=ANSWER_MIN_LENGTH, max_length=ANSWER_MAX_LENGTH,
        error_messages=_length_messages("Answer content", ANSWER_MIN_LENGTH, ANSWER_MAX_LENGTH),
    )


# ============================================================================
# AI ENDPOINTS
# ============================================================================

class EnhanceQuestionForm(forms.Form):
    title = JSONCharField(min_length=5, max_length=200, error_messages=_length_messages("Title", 5, 200))
    description = JSONCharField(
        min_length=10, max_length=2000, error_messages=_length_messages("Description", 10, 2000)
    )


class EnhanceAnswerForm(forms.Form):
    content = JSONCharField(
        min_length=10, max_length=5000, error_messages=_length_messages("Content", 10, 5000)
    )


class SuggestionForm(forms.Form):
    questionTitle = JSONCharField(
        min_length=5, max_length=200, error_messages=_length_messages("Question title", 5, 200)
    )
    questionDescription = JSONCharField(
        min_length=10, max_length=2000, error_messages=_length_messages("Question description", 10, 2000)
    )


class AnalyzeCodeForm(forms.Form):
    code = JSONCharField(max_length=10000, error_messages={"required": "Code is required"})
    language = JSONCharField(max_length=50, error_messages={"required": "Programming language is required"})


# ============================================================================
# AUTH
# ============================================================================

class RegisterForm(forms.Form):
    username = JSONCharField(min_length=3, max_length=150)
    email = forms.EmailField()
    password = JSONCharField(min_length=8, strip=False)

    def clean_username(self):
        username = self.cleaned_data["username"]
        if User.objects.filter(username__iexact=username).exists():
            raise ValidationError("Username already taken.")
        return username

    def clean_email(self):
        email = self.cleaned_data["email"]
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError("An account with this email already exists.")
        return email


class LoginForm(forms.Form):
    identifier = JSONCharField(error_messages={"required": "Username or email is required"})
    password = JSONCharField(strip=False)


def clean_or_raise(form_class, data):
    form = form_class(data=data)
    if not form.is_valid():
        raise InvalidInput.from_form(form)
    return form.cleaned_data
