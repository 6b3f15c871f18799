from __future__ import annotations

from ..core.exceptions import AuthenticationError, DomainError, DuplicateError, NotFoundError

EMAIL_EXISTS_MESSAGE = "Email sudah terdaftar. Gunakan email lain."
NOT_FOUND_MESSAGE = "Data tidak ditemukan"
INVALID_CREDENTIAL_MESSAGE = "Email atau password salah"


def to_user_message(exc: Exception, fallback: str) -> str:
    """Map an error to the text shown to the user.

    Known categories get friendlier wording; everything else falls back to the
    caller's generic failure message.
    """
    if isinstance(exc, DuplicateError):
        return str(exc) or EMAIL_EXISTS_MESSAGE
    if isinstance(exc, NotFoundError):
        return str(exc) or NOT_FOUND_MESSAGE
    if isinstance(exc, AuthenticationError):
        return INVALID_CREDENTIAL_MESSAGE
    if isinstance(exc, DomainError) and str(exc):
        return str(exc)
    return fallback
