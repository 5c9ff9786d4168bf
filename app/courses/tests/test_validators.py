"""
Tests for course content validators.
"""

import pytest

from core.exceptions import ValidationError
from courses.tests.factories import class_payload, quiz_question
from courses.validators import (
    MAX_COURSE_PRICE,
    class_errors,
    quiz_errors,
    validate_course_content,
)


class TestQuizErrors:
    def test_valid_quiz(self):
        assert quiz_errors([quiz_question()], option_count=4) == []

    @pytest.mark.parametrize("quiz", [None, "", []])
    def test_empty_quiz_is_allowed(self, quiz):
        assert quiz_errors(quiz, option_count=4) == []

    def test_answer_must_be_an_option(self):
        errors = quiz_errors([quiz_question(answer="Gold")], option_count=4)

        assert errors == ["Question 1: answer must be one of the options."]

    def test_option_count_is_enforced(self):
        errors = quiz_errors([quiz_question(options=["A", "B"], answer="A")], option_count=4)

        assert errors == ["Question 1: exactly 4 options are required."]

    def test_option_count_comes_from_settings(self, settings):
        settings.COURSE_QUIZ_OPTION_COUNT = 2

        assert quiz_errors([quiz_question(options=["A", "B"], answer="A")]) == []

    def test_blank_question_and_option(self):
        errors = quiz_errors(
            [quiz_question(question=" ", options=["A", "", "C", "D"], answer="A")],
            option_count=4,
        )

        assert "Question 1: question text is required." in errors
        assert "Question 1: options must be non-empty text." in errors

    def test_reports_question_number(self):
        errors = quiz_errors([quiz_question(), "oops"], option_count=4)

        assert errors == ["Question 2: must be an object."]

    def test_quiz_must_be_list(self):
        assert quiz_errors({"question": "x"}, option_count=4) == [
            "Quiz must be a list of questions."
        ]


class TestClassErrors:
    def test_video_url_required(self):
        assert class_errors(class_payload(video_url="")) == ["video_url is required."]

    def test_class_must_be_object(self):
        assert class_errors(["video"]) == ["Class must be an object."]


class TestValidateCourseContent:
    def test_valid_course_passes(self):
        validate_course_content(title="Intro", price=900, classes=[class_payload()])

    def test_collects_all_field_errors(self):
        """
        Given a submission with a blank title, zero price and a bad second class
        When it is validated
        Then one ValidationError lists every problem by field
        """
        # Act
        with pytest.raises(ValidationError) as exc_info:
            validate_course_content(
                title="",
                price=0,
                classes=[class_payload(), class_payload(video_url="")],
            )

        # Assert
        error = exc_info.value
        assert error.error_code == "INVALID_COURSE"
        assert set(error.details) == {"title", "price", "classes.1"}

    @pytest.mark.parametrize("classes", [[], None, "video"])
    def test_requires_classes(self, classes):
        with pytest.raises(ValidationError) as exc_info:
            validate_course_content(title="Intro", price=900, classes=classes)

        assert "classes" in exc_info.value.details

    @pytest.mark.parametrize("price", [-1, 1.5, "900", True])
    def test_price_must_be_positive_integer(self, price):
        with pytest.raises(ValidationError) as exc_info:
            validate_course_content(title="Intro", price=price, classes=[class_payload()])

        assert "price" in exc_info.value.details

    def test_price_at_column_limit_passes(self):
        validate_course_content(
            title="Intro", price=MAX_COURSE_PRICE, classes=[class_payload()]
        )

    @pytest.mark.parametrize("price", [MAX_COURSE_PRICE + 1, 2**63])
    def test_price_above_column_limit(self, price):
        with pytest.raises(ValidationError) as exc_info:
            validate_course_content(title="Intro", price=price, classes=[class_payload()])

        assert exc_info.value.details["price"] == [f"Price must not exceed {MAX_COURSE_PRICE}."]
