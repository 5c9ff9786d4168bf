"""
Tests for course API endpoints.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from courses.models import Course
from courses.states import CourseStatus
from courses.tests.factories import ApprovedCourseFactory, CourseFactory, class_payload


def _course_body(**overrides):
    body = {
        "title": "Intro to Escrow",
        "description": "Money held in trust",
        "price": 900,
        "classes": [class_payload()],
    }
    body.update(overrides)
    return body


class TestCourseList:
    url_name = "courses:course-list"

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse(self.url_name))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_lists_only_approved(self, learner_client, instructor):
        approved = ApprovedCourseFactory(instructor=instructor)
        CourseFactory(instructor=instructor)

        response = learner_client.get(reverse(self.url_name))

        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in response.data] == [str(approved.id)]
        assert "classes" not in response.data[0]


class TestCourseCreate:
    url_name = "courses:course-list"

    def test_instructor_submits_course(self, instructor_client, instructor):
        response = instructor_client.post(reverse(self.url_name), _course_body(), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == CourseStatus.PENDING
        assert len(response.data["classes"]) == 1
        assert Course.objects.filter(instructor=instructor).count() == 1

    def test_learner_forbidden(self, learner_client):
        response = learner_client.post(reverse(self.url_name), _course_body(), format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_quiz_answer_must_be_option(self, instructor_client):
        body = _course_body(
            classes=[
                class_payload(
                    quiz=[{"question": "Q", "options": ["A", "B", "C", "D"], "answer": "E"}]
                )
            ]
        )

        response = instructor_client.post(reverse(self.url_name), body, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "INVALID_COURSE"
        assert "classes.0" in response.data["details"]

    def test_missing_video_url(self, instructor_client):
        body = _course_body(classes=[{"title": "No video"}])

        response = instructor_client.post(reverse(self.url_name), body, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_price_above_column_limit(self, instructor_client):
        body = _course_body(price=2_147_483_648)

        response = instructor_client.post(reverse(self.url_name), body, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Course.objects.exists()


class TestCourseDetail:
    def test_learner_sees_approved_course_with_classes(self, learner_client, approved_course):
        url = reverse("courses:course-detail", args=[approved_course.id])

        response = learner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data["classes"]) == 1

    def test_learner_cannot_see_pending_course(self, learner_client, pending_course):
        url = reverse("courses:course-detail", args=[pending_course.id])

        response = learner_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "COURSE_NOT_FOUND"

    def test_owner_updates_approved_course(self, instructor_client, approved_course):
        url = reverse("courses:course-detail", args=[approved_course.id])

        response = instructor_client.put(url, _course_body(title="Edited"), format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == CourseStatus.PENDING
        assert response.data["title"] == "Edited"

    def test_stale_version_conflict(self, instructor_client, pending_course):
        url = reverse("courses:course-detail", args=[pending_course.id])
        body = _course_body(version=pending_course.version + 5)

        response = instructor_client.put(url, body, format="json")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "STALE_RECORD"

    def test_owner_deletes_course(self, instructor_client, pending_course):
        url = reverse("courses:course-detail", args=[pending_course.id])

        response = instructor_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Course.objects.filter(id=pending_course.id).exists()


class TestReviewEndpoints:
    def test_mine_lists_own_courses(self, instructor_client, pending_course):
        response = instructor_client.get(reverse("courses:course-mine"))

        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in response.data] == [str(pending_course.id)]

    def test_pending_queue_admin_only(self, admin_client_api, instructor_client, pending_course):
        url = reverse("courses:course-pending")

        assert instructor_client.get(url).status_code == status.HTTP_403_FORBIDDEN
        response = admin_client_api.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1

    def test_approve_with_secret(
        self, admin_client_api, pending_course, instructor_account, operator_secret
    ):
        url = reverse("courses:course-approve", args=[pending_course.id])

        response = admin_client_api.post(url, {"operator_secret": operator_secret}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == CourseStatus.APPROVED

    def test_approve_with_wrong_secret(self, admin_client_api, pending_course, operator_secret):
        url = reverse("courses:course-approve", args=[pending_course.id])

        response = admin_client_api.post(url, {"operator_secret": "nope"}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "INVALID_SECRET"

    def test_approve_without_instructor_account(
        self, admin_client_api, pending_course, operator_secret
    ):
        url = reverse("courses:course-approve", args=[pending_course.id])

        response = admin_client_api.post(url, {"operator_secret": operator_secret}, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "NO_ACCOUNT"
        assert Course.objects.get(id=pending_course.id).status == CourseStatus.PENDING

    def test_decline(self, admin_client_api, pending_course):
        url = reverse("courses:course-decline", args=[pending_course.id])

        response = admin_client_api.post(url, {"reason": "Audio missing"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["decline_reason"] == "Audio missing"

    @pytest.mark.parametrize("name", ["courses:course-approve", "courses:course-decline"])
    def test_learner_forbidden(self, learner_client, pending_course, name):
        response = learner_client.post(reverse(name, args=[pending_course.id]), {}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
