"""
Status enum for the course review lifecycle.

Course States:
    pending → approved        (admin approves with operator secret)
    pending → declined        (admin declines)
    approved/declined → pending (instructor edits the course)
"""

from django.db import models


class CourseStatus(models.TextChoices):
    """
    Review status of a course.

    Only APPROVED courses are listed in the learner catalog and can be
    purchased.
    """

    PENDING = "pending", "Pending Review"
    APPROVED = "approved", "Approved"
    DECLINED = "declined", "Declined"
