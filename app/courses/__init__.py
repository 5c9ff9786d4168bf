"""
Courses application.

Key components:
    - Course / CourseClass models: authored content with quiz questions
    - CourseService: create, update (re-submits for review), delete, catalog reads
    - CourseApprovalGate: admin approval guarded by an operator capability,
      paying the one-time instructor incentive from the platform treasury

Usage:
    from courses.services import CourseApprovalGate, CourseService
"""
