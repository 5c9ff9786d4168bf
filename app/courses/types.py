"""
Data types handed from the course catalog to other apps.

Types:
    CourseSnapshot: Price, status, instructor and title of a course as read
        at purchase time
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from courses.states import CourseStatus


@dataclass(frozen=True)
class CourseSnapshot:
    """
    Read-only view of a course consumed by the escrow engine.

    The escrow transaction copies title, price and instructor from this
    snapshot, so later edits or deletion of the course do not change a
    purchase that is already in flight.
    """

    course_id: uuid.UUID
    title: str
    price: int
    instructor_id: uuid.UUID
    status: str

    @property
    def is_approved(self) -> bool:
        return self.status == CourseStatus.APPROVED
