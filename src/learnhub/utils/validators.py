"""Input validation helpers.

Upload rules per kind:
- pdf:   application/pdf                         (.pdf)
- cover: image/jpeg, image/png, image/jpg         (.jpg .jpeg .png)
- video: any video/*                             (.mp4 .webm .avi .mov .mkv)
- image: any image/*                             (.png .jpg .jpeg .gif .webp)

Functions:
- is_allowed(kind, content_type, filename) -> bool
- validate_upload(kind, filename, content_type, size) -> None (raises)
- parse_time_of_day(value) -> datetime.time
- validate_time_range(start, end) -> (time, time) (raises)
- normalize_time_range(start, end) -> ("HH:MM", "HH:MM")
- validate_hex_color(value) -> str
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time
from pathlib import PurePath

from learnhub.config.app_config import UploadLimits

# Types browsers send when they cannot tell; the extension decides instead
GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class UploadRule:
    """What one upload kind accepts."""

    kind: str
    label: str
    content_types: frozenset[str]
    extensions: frozenset[str]
    content_type_prefix: str | None = None

    def accepts_content_type(self, content_type: str) -> bool:
        if content_type in self.content_types:
            return True
        if self.content_type_prefix and content_type.startswith(self.content_type_prefix):
            return len(content_type) > len(self.content_type_prefix)
        return False


UPLOAD_RULES: dict[str, UploadRule] = {
    "pdf": UploadRule(
        kind="pdf",
        label="PDF file",
        content_types=frozenset({"application/pdf"}),
        extensions=frozenset({".pdf"}),
    ),
    "cover": UploadRule(
        kind="cover",
        label="JPG or PNG image file",
        content_types=frozenset({"image/jpeg", "image/png", "image/jpg"}),
        extensions=frozenset({".jpg", ".jpeg", ".png"}),
    ),
    "video": UploadRule(
        kind="video",
        label="video file",
        content_types=frozenset(),
        extensions=frozenset({".mp4", ".webm", ".avi", ".mov", ".mkv"}),
        content_type_prefix="video/",
    ),
    "image": UploadRule(
        kind="image",
        label="image file",
        content_types=frozenset(),
        extensions=frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"}),
        content_type_prefix="image/",
    ),
}


class UploadValidationError(Exception):
    """Base exception for rejected uploads."""

    pass


class UnknownUploadKindError(UploadValidationError):
    """Raised for an upload kind with no rule."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(
            f"Unknown upload kind '{kind}'. Expected one of: {', '.join(sorted(UPLOAD_RULES))}"
        )


class InvalidFileTypeError(UploadValidationError):
    """Raised when a file is not of the declared type."""

    def __init__(self, kind: str, filename: str, content_type: str | None):
        self.kind = kind
        self.filename = filename
        self.content_type = content_type
        label = UPLOAD_RULES[kind].label
        super().__init__(f"Invalid file type for '{filename}'. Please select a {label}.")


class FileTooLargeError(UploadValidationError):
    """Raised when a file exceeds the size limit of its kind."""

    def __init__(self, kind: str, size: int, limit: int):
        self.kind = kind
        self.size = size
        self.limit = limit
        label = UPLOAD_RULES[kind].label
        super().__init__(
            f"{label[0].upper()}{label[1:]} must be less than "
            f"{limit // (1024 * 1024)}MB"
        )


class TimeRangeError(ValueError):
    """Raised for malformed times or an end time not after the start."""

    pass


def get_upload_rule(kind: str) -> UploadRule:
    """Look up the rule for an upload kind.

    Raises:
        UnknownUploadKindError: If kind has no rule
    """
    try:
        return UPLOAD_RULES[kind]
    except KeyError:
        raise UnknownUploadKindError(kind) from None


def _normalize_content_type(content_type: str | None) -> str:
    # Drop parameters such as "; charset=binary"
    return (content_type or "").split(";", 1)[0].strip().lower()


def file_extension(filename: str) -> str:
    """Lower-cased extension including the dot, or "" if none."""
    return PurePath(filename or "").suffix.lower()


def is_allowed(kind: str, content_type: str | None, filename: str) -> bool:
    """Check a file against the declared types of an upload kind.

    A specific content type must match the rule exactly. A missing or
    generic content type falls back to the file extension.
    """
    rule = get_upload_rule(kind)
    normalized = _normalize_content_type(content_type)

    if normalized in GENERIC_CONTENT_TYPES:
        return file_extension(filename) in rule.extensions

    return rule.accepts_content_type(normalized)


def max_bytes_for(kind: str, limits: UploadLimits | None = None) -> int:
    """Size limit for an upload kind."""
    limits = limits or UploadLimits()
    get_upload_rule(kind)
    if kind == "pdf":
        return limits.pdf_max_bytes
    if kind == "video":
        return limits.video_max_bytes
    return limits.image_max_bytes


def validate_upload(
    kind: str,
    filename: str,
    content_type: str | None,
    size: int,
    limits: UploadLimits | None = None,
) -> None:
    """Reject an upload before it reaches storage.

    Raises:
        UnknownUploadKindError: If kind has no rule
        InvalidFileTypeError: If the file is not of the declared type
        FileTooLargeError: If size exceeds the limit for the kind
    """
    if not is_allowed(kind, content_type, filename):
        raise InvalidFileTypeError(kind, filename, content_type)

    limit = max_bytes_for(kind, limits)
    if size > limit:
        raise FileTooLargeError(kind, size, limit)


def parse_time_of_day(value: str) -> time:
    """Parse "HH:MM" (or "HH:MM:SS") as used by the calendar form.

    Raises:
        TimeRangeError: If value is not a valid time of day
    """
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except (ValueError, AttributeError):
            continue
    raise TimeRangeError(f"Invalid time '{value}'. Expected HH:MM")


def validate_time_range(start: str, end: str) -> tuple[time, time]:
    """Check that both times parse and end is after start.

    Raises:
        TimeRangeError: If either value is malformed or end <= start
    """
    start_time = parse_time_of_day(start)
    end_time = parse_time_of_day(end)
    if end_time <= start_time:
        raise TimeRangeError(f"End time {end} must be after start time {start}")
    return start_time, end_time


def validate_hex_color(value: str) -> str:
    """Return value if it is a #RRGGBB color.

    Raises:
        ValueError: If value is not a #RRGGBB color
    """
    if not HEX_COLOR_RE.match(value or ""):
        raise ValueError(f"Invalid color '{value}'. Expected #RRGGBB")
    return value.upper()


def normalize_time_range(start: str, end: str) -> tuple[str, str]:
    """Validated range as zero-padded "HH:MM" strings, so stored times sort.

    Raises:
        TimeRangeError: If either value is malformed or end <= start
    """
    start_time, end_time = validate_time_range(start, end)
    return start_time.strftime("%H:%M"), end_time.strftime("%H:%M")
