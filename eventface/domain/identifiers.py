"""
External identifier codec.

The face index only accepts external identifiers drawn from
``[A-Za-z0-9_.\\-:]``. Images are tagged with their sanitized file name and
video frames with ``<sanitized video name>_frame_<n>`` so a frame hit can be
traced back to its parent video.
"""

# Standard library imports
import hashlib
import re
from dataclasses import dataclass
from typing import Optional, Tuple

FRAME_MARKER = "_frame_"

# Face index limit on ExternalImageId
MAX_IDENTIFIER_LENGTH = 255
# Sanitized names stay shorter, leaving room for "-<digest>" and "_frame_<n>"
MAX_NAME_LENGTH = 200
_MAX_EXTENSION_LENGTH = 16
_LONG_NAME_DIGEST_LENGTH = 10

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_.\-:]")
_UNDERSCORE_RUNS = re.compile(r"_{2,}")
_TRAILING_COUNTER = re.compile(r"\((\d+)\)$")
_FRAME_SUFFIX = re.compile(r"^(.*)_frame_(\d+)$")
_VALID_IDENTIFIER = re.compile(r"^[A-Za-z0-9_.\-:]+$")
_DISAMBIGUATION_SUFFIX = re.compile(r"^(.*)-([0-9a-f]{8})$")


@dataclass(frozen=True)
class FrameIdentifier:
    """Result of decoding an external identifier."""
    is_frame: bool
    video_stem: Optional[str] = None
    frame_number: Optional[int] = None


def _clean(value: str) -> str:
    value = _INVALID_CHARS.sub("_", value)
    value = _UNDERSCORE_RUNS.sub("_", value)
    return value.strip("_")


def split_extension(name: str) -> Tuple[str, str]:
    """Split at the last dot. A leading dot does not start an extension."""
    dot = name.rfind(".")
    if dot > 0:
        return name[:dot], name[dot:]
    return name, ""


def sanitize(name: str) -> str:
    """
    Turn a human file name into a valid external identifier.

    A trailing ``(n)`` counter on the stem survives as ``_n``. Names longer than
    ``MAX_NAME_LENGTH`` are cut and end with a digest of the full name. The result only
    contains ``[A-Za-z0-9_.\\-:]`` and ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    if not name:
        return ""

    stem, extension = split_extension(name)

    counter = ""
    counter_match = _TRAILING_COUNTER.search(stem)
    if counter_match:
        counter = counter_match.group(1)
        stem = stem[:counter_match.start()]

    base = _clean(stem)
    if counter:
        base = f"{base}_{counter}" if base else counter

    extension_body = _clean(extension[1:]) if extension else ""

    if not base:
        return f".{extension_body}" if extension_body else ""
    if extension_body:
        return _shorten(base, extension_body)
    # "a." would lose its dot on the next pass
    return _shorten(base.rstrip(".") or base, "")


def _shorten(base: str, extension_body: str) -> str:
    """Cut over-long names to MAX_NAME_LENGTH, keeping the extension and a digest of the full name."""
    name = f"{base}.{extension_body}" if extension_body else base
    if len(name) <= MAX_NAME_LENGTH:
        return name

    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:_LONG_NAME_DIGEST_LENGTH]
    extension_body = extension_body[:_MAX_EXTENSION_LENGTH].rstrip("_")
    room = MAX_NAME_LENGTH - len(digest) - 1 - (len(extension_body) + 1 if extension_body else 0)
    # a trailing "_" would merge with the digest separator on the next pass
    head = base[:room].rstrip("_.")
    shortened = f"{head}_{digest}" if head else digest
    return f"{shortened}.{extension_body}" if extension_body else shortened


def frame_identifier(video_name: str, frame_number: int) -> str:
    """External identifier of frame ``frame_number`` of ``video_name``."""
    return f"{sanitize(video_name)}{FRAME_MARKER}{frame_number}"


def parse_frame_identifier(identifier: str) -> FrameIdentifier:
    """Decode the trailing ``_frame_<n>`` suffix, if present."""
    match = _FRAME_SUFFIX.match(identifier or "")
    if not match:
        return FrameIdentifier(is_frame=False)
    return FrameIdentifier(
        is_frame=True,
        video_stem=match.group(1),
        frame_number=int(match.group(2)),
    )


def is_valid_identifier(identifier: str) -> bool:
    return (
        bool(identifier)
        and len(identifier) <= MAX_IDENTIFIER_LENGTH
        and bool(_VALID_IDENTIFIER.match(identifier))
    )


def asset_digest(asset_key: str) -> str:
    return hashlib.sha1(asset_key.encode("utf-8")).hexdigest()[:8]


def disambiguate(identifier: str, asset_key: str) -> str:
    """
    Derive a collision-free variant of ``identifier`` for ``asset_key``.

    The asset key digest goes before the ``_frame_<n>`` suffix of a frame
    identifier and before the extension of an image identifier, so both keep
    decoding the same way.
    """
    digest = asset_digest(asset_key)

    frame = parse_frame_identifier(identifier)
    if frame.is_frame:
        return f"{frame.video_stem}-{digest}{FRAME_MARKER}{frame.frame_number}"

    stem, extension = split_extension(identifier)
    return f"{stem}-{digest}{extension}"


def split_disambiguation(stem: str) -> Tuple[str, Optional[str]]:
    """``photo-1a2b3c4d`` -> ``("photo", "1a2b3c4d")``; other stems come back unchanged with None."""
    match = _DISAMBIGUATION_SUFFIX.match(stem or "")
    if not match:
        return stem, None
    return match.group(1), match.group(2)
