"""
Authentication application.

Key components:
    - User model: Email-based login with a learner / instructor / lms_admin role
    - CallerContext: Explicit caller identity passed to every service call
    - Role permissions for DRF views
    - JWT token endpoints (djangorestframework-simplejwt)

Usage:
    from authentication.models import User, UserRole
    from authentication.context import CallerContext, resolve_caller
"""
