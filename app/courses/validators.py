"""
Validators for course content.

A course is a list of classes. Each class needs a video URL and may carry
an audio URL, a text body and quiz questions. Each quiz question has
non-empty text, exactly COURSE_QUIZ_OPTION_COUNT options and an answer
that is one of those options.

Usage:
    from courses.validators import validate_course_content

    validate_course_content(title="Intro", price=900, classes=[...])
    # raises core.exceptions.ValidationError with per-field details
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from typing import Any

# Upper bound of the price column (PositiveIntegerField) on every supported backend
MAX_COURSE_PRICE = 2_147_483_647


def quiz_errors(quiz: Any, option_count: int | None = None) -> list[str]:
    """
    Return error messages for a quiz (empty list when valid).

    Args:
        quiz: List of {"question", "options", "answer"} dicts
        option_count: Required number of options per question
    """
    if option_count is None:
        option_count = settings.COURSE_QUIZ_OPTION_COUNT
    if quiz in (None, ""):
        return []
    if not isinstance(quiz, list):
        return ["Quiz must be a list of questions."]

    errors: list[str] = []
    for index, item in enumerate(quiz, start=1):
        if not isinstance(item, dict):
            errors.append(f"Question {index}: must be an object.")
            continue

        question = item.get("question")
        options = item.get("options")
        answer = item.get("answer")

        if not isinstance(question, str) or not question.strip():
            errors.append(f"Question {index}: question text is required.")
        if not isinstance(options, list) or len(options) != option_count:
            errors.append(f"Question {index}: exactly {option_count} options are required.")
            continue
        if any(not isinstance(option, str) or not option.strip() for option in options):
            errors.append(f"Question {index}: options must be non-empty text.")
        if answer not in options:
            errors.append(f"Question {index}: answer must be one of the options.")
    return errors


def class_errors(course_class: Any) -> list[str]:
    """Return error messages for one class entry (empty list when valid)."""
    if not isinstance(course_class, dict):
        return ["Class must be an object."]

    errors: list[str] = []
    video_url = course_class.get("video_url")
    if not isinstance(video_url, str) or not video_url.strip():
        errors.append("video_url is required.")
    errors.extend(quiz_errors(course_class.get("quiz")))
    return errors


def validate_course_content(*, title: Any, price: Any, classes: Any) -> None:
    """
    Validate a full course submission.

    Raises:
        ValidationError: details maps field names (and "classes.<n>") to
            lists of messages
    """
    details: dict[str, list[str]] = {}

    if not isinstance(title, str) or not title.strip():
        details["title"] = ["Title is required."]

    if not isinstance(price, int) or isinstance(price, bool) or price <= 0:
        details["price"] = ["Price must be a positive integer."]
    elif price > MAX_COURSE_PRICE:
        details["price"] = [f"Price must not exceed {MAX_COURSE_PRICE}."]

    if not isinstance(classes, list) or not classes:
        details["classes"] = ["At least one class is required."]
    else:
        for index, course_class in enumerate(classes):
            errors = class_errors(course_class)
            if errors:
                details[f"classes.{index}"] = errors

    if details:
        raise ValidationError(
            "Course validation failed",
            error_code="INVALID_COURSE",
            details=details,
        )
