"""Slug generation utilities."""

import secrets
from pathlib import PurePath

from slugify import slugify


def create_slug(text: str) -> str:
    """
    Create a URL-friendly slug from text.

    Args:
        text: The text to convert to a slug

    Returns:
        A lowercase, hyphenated slug

    Examples:
        >>> create_slug("Jane Doe CV")
        'jane-doe-cv'
        >>> create_slug("AT&T Inc.")
        'at-t-inc'
    """
    return slugify(text, lowercase=True, separator="-")


def upload_filename(original: str) -> str:
    """
    Turn a client-supplied file name into a safe, unique stored name.

    Directory parts are discarded, the stem is slugified and a random
    token keeps two uploads of ``resume.pdf`` apart.

    Args:
        original: File name as sent by the client

    Returns:
        Name like ``3f9c1a2b-jane-doe-cv.pdf``
    """
    name = PurePath(original.replace("\\", "/")).name
    stem, dot, ext = name.rpartition(".")
    if not dot:
        stem, ext = name, ""
    slug = create_slug(stem) or "file"
    ext = create_slug(ext).replace("-", "")
    token = secrets.token_hex(4)
    return f"{token}-{slug}.{ext}" if ext else f"{token}-{slug}"
