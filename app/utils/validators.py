"""Normalization helpers shared by every write and comparison path."""

import re


def normalize_email(email: str | None) -> str | None:
    """Normalize an email address for storage and comparison.

    Args:
        email: Raw email address (may be None or blank)

    Returns:
        str | None: Trimmed, lowercased email, or None if blank
    """
    if email is None:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def normalize_access_code(code: str | None) -> str:
    """Access codes are case-insensitive; stored and compared uppercase."""
    if not code:
        return ""
    return code.strip().upper()


def normalize_phone(phone: str | None) -> str | None:
    """Normalize phone number keeping only digits and a leading +.

    Args:
        phone: Phone number in any format

    Returns:
        str | None: Phone like '+821012345678', or None if no digits remain
    """
    if not phone:
        return None
    cleaned = re.sub(r"[^\d+]", "", phone.strip())
    # Only a leading + is meaningful
    if cleaned.startswith("+"):
        cleaned = "+" + cleaned[1:].replace("+", "")
    else:
        cleaned = cleaned.replace("+", "")
    return cleaned if any(c.isdigit() for c in cleaned) else None


def mask_email(email: str | None) -> str:
    """Mask an email address for logs, e.g. 'a***@x.com'."""
    if not email or "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    return f"{local[:1]}***@{domain}"
