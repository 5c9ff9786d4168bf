"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints (simplejwt)
        token/                     - Obtain access/refresh pair
        token/refresh/             - Refresh access token
        me/                        - Current user
    /api/v1/courses/               - Course endpoints
        mine/                      - Instructor's courses
        pending/                   - Admin review queue
        {id}/                      - Detail / update / delete
        {id}/approve/              - Approve (operator secret required)
        {id}/decline/              - Decline
    /api/v1/payments/              - Bank and escrow endpoints
        accounts/                  - Open bank account
        accounts/me/               - Balance
        purchases/                 - Buy a course
        transactions/              - Transaction list
        transactions/history/      - Archive terminal history (DELETE)
        transactions/{id}/         - Transaction detail
        transactions/{id}/action/  - Approve / decline / refund / accept

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication (JWT)
    path("auth/", include("authentication.urls")),
    # Courses and course approval
    path("courses/", include("courses.urls")),
    # Bank accounts, purchases and arbitration
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "LMS Escrow Admin"
admin.site.site_title = "LMS Escrow Admin"
admin.site.index_title = "Courses, ledger and escrow"
