"""
Tests for Course model state transitions.
"""

import pytest
from django_fsm import TransitionNotAllowed

from courses.models import Course
from courses.states import CourseStatus
from courses.tests.factories import (
    ApprovedCourseFactory,
    CourseFactory,
    DeclinedCourseFactory,
)


class TestCourseTransitions:
    def test_approve_from_pending(self, db):
        course = CourseFactory()

        course.approve()
        course.save()

        stored = Course.objects.get(id=course.id)
        assert stored.status == CourseStatus.APPROVED
        assert stored.approved_at is not None

    def test_decline_records_reason(self, db):
        course = CourseFactory()

        course.decline(reason="Missing audio")

        assert course.status == CourseStatus.DECLINED
        assert course.decline_reason == "Missing audio"

    @pytest.mark.parametrize("factory_class", [ApprovedCourseFactory, DeclinedCourseFactory])
    def test_resubmit_returns_to_pending(self, db, factory_class):
        course = factory_class()

        course.resubmit()

        assert course.status == CourseStatus.PENDING
        assert course.approved_at is None
        assert course.declined_at is None

    def test_cannot_approve_twice(self, db):
        course = ApprovedCourseFactory()

        with pytest.raises(TransitionNotAllowed):
            course.approve()

    def test_cannot_decline_approved_course(self, db):
        course = ApprovedCourseFactory()

        with pytest.raises(TransitionNotAllowed):
            course.decline()

    def test_status_is_protected(self, db):
        course = CourseFactory()

        with pytest.raises(AttributeError):
            course.status = CourseStatus.APPROVED


class TestCourseVersion:
    def test_version_increments_on_save(self, db):
        course = CourseFactory()
        assert course.version == 1

        course.title = "Renamed"
        course.save()

        assert course.version == 2
        assert Course.objects.get(id=course.id).version == 2

    def test_classes_are_ordered(self, db):
        course = CourseFactory(classes=3)

        assert [c.position for c in course.classes.all()] == [0, 1, 2]
