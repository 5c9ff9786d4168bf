"""
Tests for operator capabilities used by course approval.
"""

import pytest

from authentication.context import CallerContext
from authentication.models import UserRole
from core.exceptions import PermissionDeniedError
from courses.capabilities import SharedPassphraseCapability, get_operator_capability
from payments.ledger.exceptions import InvalidSecret

ADMIN = CallerContext.system()


class TestSharedPassphraseCapability:
    def test_matching_passphrase(self):
        SharedPassphraseCapability("open-sesame").verify(ADMIN, "open-sesame")

    @pytest.mark.parametrize("secret", ["wrong", "", None, "open-sesame "])
    def test_mismatch_raises_invalid_secret(self, secret):
        with pytest.raises(InvalidSecret):
            SharedPassphraseCapability("open-sesame").verify(ADMIN, secret)

    def test_empty_passphrase_never_matches(self):
        with pytest.raises(InvalidSecret):
            SharedPassphraseCapability("").verify(ADMIN, "")

    def test_requires_admin_role(self):
        caller = CallerContext(id=None, role=UserRole.INSTRUCTOR)

        with pytest.raises(PermissionDeniedError) as exc_info:
            SharedPassphraseCapability("open-sesame").verify(caller, "open-sesame")

        assert not isinstance(exc_info.value, InvalidSecret)

    def test_reads_passphrase_from_settings(self, settings):
        settings.COURSE_APPROVAL_PASSPHRASE = "from-settings"

        SharedPassphraseCapability().verify(ADMIN, "from-settings")


def test_get_operator_capability_uses_setting(settings):
    settings.COURSE_APPROVAL_CAPABILITY = "courses.capabilities.SharedPassphraseCapability"

    assert isinstance(get_operator_capability(), SharedPassphraseCapability)
