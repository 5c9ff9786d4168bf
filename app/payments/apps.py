"""
Payments app configuration.

This app provides the money side of the LMS:
- Double-entry ledger (simulated bank accounts and platform accounts)
- Escrow transaction engine for course purchases
- Admin and instructor arbitration endpoints
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
