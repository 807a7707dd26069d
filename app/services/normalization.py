from __future__ import annotations


def normalize_key(value: str | None) -> str:
    """Trim + lowercase; used for role, permission, resource and action names."""
    return str(value or "").strip().lower()


def normalize_email(value: str | None) -> str:
    return str(value or "").strip().lower()
