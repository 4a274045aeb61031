"""Tests for normalization helpers."""

from app.core.permissions import Permission, has_permission
from app.utils.validators import (
    mask_email,
    normalize_access_code,
    normalize_email,
    normalize_phone,
)


def test_normalize_email():
    assert normalize_email("  A@X.Com ") == "a@x.com"
    assert normalize_email("   ") is None
    assert normalize_email(None) is None


def test_normalize_access_code():
    assert normalize_access_code(" ab12cd34") == "AB12CD34"
    assert normalize_access_code(None) == ""


def test_normalize_phone():
    assert normalize_phone("+82 (10) 1234-5678") == "+821012345678"
    assert normalize_phone("010-1234+5678") == "01012345678"
    assert normalize_phone("n/a") is None
    assert normalize_phone(None) is None


def test_mask_email():
    assert mask_email("alice@example.com") == "a***@example.com"
    assert mask_email(None) == "***"


def test_role_permissions():
    assert has_permission("operator", Permission.UPDATE_BOOKING_STATUS)
    assert not has_permission("operator", Permission.MANAGE_OPS_USERS)
    assert has_permission("admin", Permission.MANAGE_OPS_USERS)
    assert not has_permission("intern", Permission.VIEW_QUEUE)
