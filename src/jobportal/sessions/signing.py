"""Signing for session cookie values, via itsdangerous."""

import hashlib

from itsdangerous import BadSignature, Signer

PREFIX = "s:"
SALT = "jobportal.session"


def _signer(secret: str) -> Signer:
    return Signer(secret, salt=SALT, digest_method=hashlib.sha256)


def sign(value: str, secret: str) -> str:
    """
    Sign a cookie value.

    Args:
        value: Plain value (a session id)
        secret: Signing key

    Returns:
        ``s:<value>.<signature>``

    Examples:
        >>> sign("abc", "secret").startswith("s:abc.")
        True
    """
    return PREFIX + _signer(secret).sign(value).decode("ascii")


def unsign(signed: str, secret: str) -> str | None:
    """
    Verify a signed cookie value.

    Args:
        signed: Value previously produced by ``sign``
        secret: Signing key

    Returns:
        The original value, or None if the input is malformed or tampered with
    """
    if not signed or not signed.startswith(PREFIX):
        return None
    try:
        value = _signer(secret).unsign(signed[len(PREFIX):]).decode("utf-8")
    except (BadSignature, UnicodeDecodeError):
        return None
    return value or None
