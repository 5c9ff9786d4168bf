"""
State enums for escrow models.

These are Django TextChoices for database storage and admin integration,
driven by django-fsm transitions on EscrowTransaction.

State Machine Overview:

EscrowTransaction States:
    pending_admin → pending_instructor → completed      (happy path)
    pending_admin → declined                            (admin declines, learner refunded)
    pending_admin → refunded                            (admin/operator cancels, learner refunded)
    pending_instructor → declined                       (instructor declines, learner refunded)
"""

from django.db import models


class EscrowState(models.TextChoices):
    """
    States for the EscrowTransaction lifecycle.

    Terminal states: COMPLETED, DECLINED, REFUNDED
    Only terminal transactions with COMPLETED or DECLINED can be archived.

    Money location per state:
        PENDING_ADMIN, PENDING_INSTRUCTOR: platform escrow
        COMPLETED: instructor share + platform revenue
        DECLINED, REFUNDED: back with the learner
    """

    PENDING_ADMIN = "pending_admin", "Pending Admin Review"
    PENDING_INSTRUCTOR = "pending_instructor", "Pending Instructor Review"
    COMPLETED = "completed", "Completed"
    DECLINED = "declined", "Declined"
    REFUNDED = "refunded", "Refunded"

    @classmethod
    def terminal(cls) -> tuple[str, ...]:
        return (cls.COMPLETED, cls.DECLINED, cls.REFUNDED)

    @classmethod
    def archivable(cls) -> tuple[str, ...]:
        return (cls.COMPLETED, cls.DECLINED)

    @classmethod
    def live(cls) -> tuple[str, ...]:
        """States in which the learner holds or is acquiring the course."""
        return (cls.PENDING_ADMIN, cls.PENDING_INSTRUCTOR, cls.COMPLETED)
