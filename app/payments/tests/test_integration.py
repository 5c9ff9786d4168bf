"""
End-to-end tests through the HTTP API.

Each test drives a full course lifecycle with real role clients:
instructor submits, admin approves with the operator secret, learner
buys, admin and instructor arbitrate. Balances are checked through the
account endpoint the users themselves see.
"""

from django.db.models import Sum
from django.urls import reverse
from rest_framework import status

from courses.tests.factories import class_payload
from payments.ledger.models import LedgerAccount
from payments.state_machines import EscrowState


def _open_account(client, number, secret):
    response = client.post(
        reverse("payments:account-create"),
        {"account_number": number, "secret": secret},
        format="json",
    )
    assert response.status_code == status.HTTP_201_CREATED


def _balance(client):
    return client.get(reverse("payments:account-me")).data["balance"]


def _publish_course(instructor_client, admin_client, secret, price=1000):
    response = instructor_client.post(
        reverse("courses:course-list"),
        {"title": "Escrow 101", "price": price, "classes": [class_payload()]},
        format="json",
    )
    assert response.status_code == status.HTTP_201_CREATED
    course_id = response.data["id"]

    response = admin_client.post(
        reverse("courses:course-approve", args=[course_id]),
        {"operator_secret": secret},
        format="json",
    )
    assert response.status_code == status.HTTP_200_OK
    return course_id


def _act(client, tx_id, action):
    return client.post(
        reverse("payments:transaction-action", args=[tx_id]),
        {"action": action},
        format="json",
    )


class TestCourseSaleLifecycle:
    def test_purchase_accepted_by_instructor(
        self, learner_client, instructor_client, admin_client_api, settings
    ):
        """
        Given an instructor and a learner who both opened accounts (bonus 5000)
        When a 1000 course is approved, bought, forwarded and accepted
        Then the learner paid 1000, the instructor earned incentive + 600
        """
        # Arrange
        settings.LEDGER_OPENING_BONUS = 5000
        settings.COURSE_APPROVAL_INCENTIVE = 1000
        settings.COURSE_APPROVAL_PASSPHRASE = "ops"
        _open_account(learner_client, "L-1", "lp")
        _open_account(instructor_client, "I-1", "ip")
        course_id = _publish_course(instructor_client, admin_client_api, "ops")
        assert _balance(instructor_client) == 6000

        catalog = learner_client.get(reverse("courses:course-list")).data
        assert [c["id"] for c in catalog] == [course_id]

        # Act
        response = learner_client.post(
            reverse("payments:purchase-create"),
            {"course_id": course_id, "secret": "lp"},
            format="json",
        )
        tx_id = response.data["id"]
        assert _act(admin_client_api, tx_id, "approve").status_code == status.HTTP_200_OK
        final = _act(instructor_client, tx_id, "accept")

        # Assert
        assert final.data["state"] == EscrowState.COMPLETED
        assert _balance(learner_client) == 4000
        assert _balance(instructor_client) == 6600
        assert LedgerAccount.objects.aggregate(total=Sum("balance"))["total"] == 0

    def test_purchase_declined_by_admin(
        self, learner_client, instructor_client, admin_client_api, settings
    ):
        settings.COURSE_APPROVAL_PASSPHRASE = "ops"
        _open_account(learner_client, "L-1", "lp")
        _open_account(instructor_client, "I-1", "ip")
        course_id = _publish_course(instructor_client, admin_client_api, "ops")
        learner_start = _balance(learner_client)

        response = learner_client.post(
            reverse("payments:purchase-create"),
            {"course_id": course_id, "secret": "lp"},
            format="json",
        )
        tx_id = response.data["id"]
        declined = _act(admin_client_api, tx_id, "decline")

        assert declined.data["state"] == EscrowState.DECLINED
        assert _balance(learner_client) == learner_start
        assert _act(instructor_client, tx_id, "accept").status_code == status.HTTP_409_CONFLICT

    def test_edited_course_leaves_catalog(
        self, learner_client, instructor_client, admin_client_api, settings
    ):
        settings.COURSE_APPROVAL_PASSPHRASE = "ops"
        _open_account(instructor_client, "I-1", "ip")
        course_id = _publish_course(instructor_client, admin_client_api, "ops")
        _open_account(learner_client, "L-1", "lp")

        instructor_client.put(
            reverse("courses:course-detail", args=[course_id]),
            {"title": "Escrow 102", "price": 1000, "classes": [class_payload()]},
            format="json",
        )
        response = learner_client.post(
            reverse("payments:purchase-create"),
            {"course_id": course_id, "secret": "lp"},
            format="json",
        )

        assert learner_client.get(reverse("courses:course-list")).data == []
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "COURSE_NOT_APPROVED"
