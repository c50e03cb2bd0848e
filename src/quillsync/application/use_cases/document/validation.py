"""Input validation shared by document mutations."""

from typing import Any

from quillsync.domain.exceptions import ValidationError

MAX_TITLE_LENGTH = 500


def validate_title(title: Any) -> str:
    if not isinstance(title, str):
        raise ValidationError("Title must be a string")
    title = title.strip()
    if not title:
        raise ValidationError("Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title exceeds {MAX_TITLE_LENGTH} characters")
    return title


def validate_content(content: Any) -> dict | str:
    """Content is a rich-text tree (object) or a non-empty string."""
    if content is None or content == "":
        raise ValidationError("Content is required")
    if not isinstance(content, (dict, str)):
        raise ValidationError("Content must be an object or a string")
    return content
