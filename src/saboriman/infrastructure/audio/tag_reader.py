"""Embedded tag extraction with mutagen.

Hey future me - ONE mapping table covers ID3 (mp3/wav), Vorbis comments
(flac/ogg) and MP4 atoms (m4a). Vorbis keys are case-insensitive in mutagen,
ID3 and MP4 keys are not, so list them exactly as mutagen exposes them.
"""

import base64
import logging
import re
from typing import Any

from mutagen import File as MutagenFile  # type: ignore[attr-defined]
from mutagen.flac import Picture
from mutagen.mp4 import MP4Cover

from saboriman.domain.entities import EmbeddedPicture, TagFacts
from saboriman.domain.exceptions import TagReadError

logger = logging.getLogger(__name__)

_ITUNES = "----:com.apple.iTunes:"

# Canonical field → tag keys to try, first hit wins
TAG_MAPPINGS: dict[str, tuple[str, ...]] = {
    "title": ("TIT2", "title", "©nam"),
    "artist": ("TPE1", "artist", "©ART"),
    "album_artist": ("TPE2", "albumartist", "album artist", "aART"),
    "album": ("TALB", "album", "©alb"),
    "genre": ("TCON", "genre", "©gen"),
    "composer": ("TCOM", "composer", "©wrt"),
    "track_number": ("TRCK", "tracknumber", "trkn"),
    "disc_number": ("TPOS", "discnumber", "disk"),
}

# Raw fields kept verbatim (lower-case key → first value)
RAW_MAPPINGS: dict[str, tuple[str, ...]] = {
    "date": ("TDRC", "TYER", "date", "year", "©day"),
    "performer": ("TXXX:PERFORMER", "performer"),
    "label": ("TPUB", "TXXX:LABEL", "label", f"{_ITUNES}LABEL"),
    "organization": ("organization", "publisher"),
    "copyright": ("TCOP", "copyright", "cprt"),
    "isrc": ("TSRC", "isrc", f"{_ITUNES}ISRC"),
    "upc": ("TXXX:UPC", "upc", f"{_ITUNES}UPC"),
    "barcode": ("TXXX:BARCODE", "barcode", f"{_ITUNES}BARCODE"),
}

_MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/webp": "webp",
}

_FRONT_COVER = 3  # APIC/FLAC picture type "Cover (front)"

_YEAR_RE = re.compile(r"(\d{4})")


def read_tags(path: str) -> TagFacts:
    """Read embedded tags of an audio file.

    Args:
        path: Absolute path of the audio file

    Returns:
        Parsed TagFacts (empty TagFacts when the file simply has no tags)

    Raises:
        TagReadError: If mutagen can't open or parse the file
    """
    try:
        audio = MutagenFile(path)
    except Exception as e:
        raise TagReadError(f"Failed to parse tags: {e}", path=path) from e

    if audio is None:
        raise TagReadError("Unrecognized audio format", path=path)

    tags = getattr(audio, "tags", None)
    if not tags:
        logger.debug("No tags found in %s", path)
        return TagFacts(picture=_extract_picture(audio, None))

    facts = TagFacts(
        title=_lookup(tags, TAG_MAPPINGS["title"]),
        artist=_lookup(tags, TAG_MAPPINGS["artist"]),
        album_artist=_lookup(tags, TAG_MAPPINGS["album_artist"]),
        album=_lookup(tags, TAG_MAPPINGS["album"]),
        genre=_lookup_genre(tags),
        composer=_lookup(tags, TAG_MAPPINGS["composer"]),
        track_number=parse_number(_lookup_raw(tags, TAG_MAPPINGS["track_number"])),
        disc_number=parse_number(_lookup_raw(tags, TAG_MAPPINGS["disc_number"])),
        picture=_extract_picture(audio, tags),
    )
    for raw_key, keys in RAW_MAPPINGS.items():
        value = _lookup(tags, keys)
        if value:
            facts.raw[raw_key] = value
    facts.year = parse_year(facts.raw.get("date", ""))
    return facts


def parse_number(value: Any) -> int:
    """Parse a track/disc number ("3", "3/12", (3, 12)) into an int, 0 if unusable."""
    if value is None:
        return 0
    if isinstance(value, tuple):
        value = value[0] if value else 0
    text = str(value).strip()
    if "/" in text:
        text = text.split("/", 1)[0].strip()
    try:
        return max(int(text), 0)
    except ValueError:
        return 0


def parse_year(value: str) -> int:
    """Extract the leading four-digit year from a date string, 0 if none."""
    match = _YEAR_RE.search(value or "")
    return int(match.group(1)) if match else 0


def mime_to_extension(mime: str | None) -> str:
    """Map an image MIME type to a file extension without dot ("" if unknown)."""
    return _MIME_EXTENSIONS.get((mime or "").lower().strip(), "")


def _lookup_raw(tags: Any, keys: tuple[str, ...]) -> Any:
    for key in keys:
        try:
            if key in tags:
                value = tags[key]
            else:
                continue
        except (KeyError, ValueError):
            continue
        if isinstance(value, list):
            if not value:
                continue
            value = value[0]
        if hasattr(value, "text"):
            text = value.text
            if isinstance(text, list):
                if not text:
                    continue
                text = text[0]
            value = text
        if value is None or value == "":
            continue
        return value
    return None


def _lookup(tags: Any, keys: tuple[str, ...]) -> str:
    value = _lookup_raw(tags, keys)
    if value is None:
        return ""
    if isinstance(value, bytes):
        # MP4 freeform atoms are raw bytes
        value = value.decode("utf-8", errors="replace")
    return str(value).strip()


def _lookup_genre(tags: Any) -> str:
    # ID3 TCON may hold "(17)" style references, the frame resolves them for us
    if "TCON" in tags:
        genres = getattr(tags["TCON"], "genres", None)
        if genres:
            return str(genres[0]).strip()
    return _lookup(tags, TAG_MAPPINGS["genre"])


def _extract_picture(audio: Any, tags: Any) -> EmbeddedPicture | None:
    """Pick the embedded front cover (or first picture) of any supported format."""
    # FLAC keeps pictures in metadata blocks, not in the tags
    pictures = getattr(audio, "pictures", None)
    if pictures:
        return _best_picture(pictures)

    if tags is None:
        return None

    # ID3 (mp3, wav)
    if hasattr(tags, "getall"):
        frames = tags.getall("APIC")
        if frames:
            return _best_picture(frames)
        return None

    # MP4 (m4a)
    covers = tags.get("covr") if hasattr(tags, "get") else None
    if covers:
        cover = covers[0]
        ext = "png" if getattr(cover, "imageformat", None) == MP4Cover.FORMAT_PNG else "jpg"
        return EmbeddedPicture(data=bytes(cover), ext=ext)

    # Ogg Vorbis/Opus: base64 FLAC picture blocks in a comment
    encoded = _lookup_raw(tags, ("metadata_block_picture",))
    if encoded:
        try:
            picture = Picture(base64.b64decode(encoded))
        except Exception as e:
            logger.debug("Ignoring broken METADATA_BLOCK_PICTURE: %s", e)
            return None
        return EmbeddedPicture(data=picture.data, ext=mime_to_extension(picture.mime))

    return None


def _best_picture(pictures: list[Any]) -> EmbeddedPicture | None:
    chosen = next(
        (p for p in pictures if getattr(p, "type", None) == _FRONT_COVER), pictures[0]
    )
    data = getattr(chosen, "data", b"")
    if not data:
        return None
    return EmbeddedPicture(data=data, ext=mime_to_extension(getattr(chosen, "mime", "")))
