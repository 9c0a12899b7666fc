"""Input rules shared by the mutation services and the client layer."""

from core.exceptions import ValidationFailedError
from domain.entities.post import POST_CONTENT_MAX_LENGTH
from domain.entities.profile import FULL_NAME_MAX_LENGTH


def clean_post_content(raw: str) -> str:
    """Trim post content and enforce the 1..500 character rule."""
    content = raw.strip()
    if not content:
        raise ValidationFailedError("content", "Post content cannot be empty")
    if len(content) > POST_CONTENT_MAX_LENGTH:
        raise ValidationFailedError(
            "content",
            f"Post content cannot exceed {POST_CONTENT_MAX_LENGTH} characters",
        )
    return content


def clean_full_name(raw: str) -> str:
    """Trim a full name; it must not be blank."""
    full_name = raw.strip()
    if not full_name:
        raise ValidationFailedError("full_name", "Full name cannot be empty")
    if len(full_name) > FULL_NAME_MAX_LENGTH:
        raise ValidationFailedError(
            "full_name",
            f"Full name cannot exceed {FULL_NAME_MAX_LENGTH} characters",
        )
    return full_name


def clean_bio(raw: str | None) -> str | None:
    """Trim a bio; blank collapses to None."""
    if raw is None:
        return None
    bio = raw.strip()
    return bio or None
