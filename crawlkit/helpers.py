"""Small helpers for building request bodies, hashing requests and naming files."""

from __future__ import annotations

import re
import secrets
import unicodedata
from typing import Iterable, Mapping, Pattern
from urllib.parse import urlencode

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF

_BASE_NAME_SEPARATORS = re.compile(r"[./]")
_SEPARATORS = re.compile(r"[ &_=+:]")
_ILLEGAL_NAME = re.compile(r"[^A-Za-z0-9\-.]")
_DASHES = re.compile(r"-+")

_YES_STRINGS = frozenset({"1", "yes", "true", "y"})


def _flatten_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _base_name(text: str) -> str:
    """Turn ``text`` into a string made only of ASCII letters, digits, dots and dashes."""
    text = _BASE_NAME_SEPARATORS.sub("-", text)
    text = text.strip(" ")
    text = _flatten_accents(text)
    text = _SEPARATORS.sub("-", text)
    text = _ILLEGAL_NAME.sub("", text)
    return _DASHES.sub("-", text)


def _extension(path: str) -> str:
    """Return the suffix of the last path element, starting at its last dot."""
    last_element = path.rsplit("/", 1)[-1]
    dot = last_element.rfind(".")
    return last_element[dot:] if dot >= 0 else ""


def sanitize_file_name(file_name: str) -> str:
    """Replace dangerous characters so the result can be used as a file name.

    A name without an extension gets the extension ``unknown``.
    """
    ext = _extension(file_name)
    clean_ext = _base_name(ext) or ".unknown"
    stem = file_name[: len(file_name) - len(ext)]
    return f"{_base_name(stem)}.{clean_ext[1:]}".replace("-", "_")


def encode_form(data: Mapping[str, str] | None) -> str:
    """Encode form fields as ``application/x-www-form-urlencoded``, sorted by key."""
    if not data:
        return ""
    return urlencode(sorted(data.items()))


def create_multipart_body(boundary: str, data: Mapping[str, bytes]) -> bytes:
    """Build a multipart form body with one part per field."""
    dash_boundary = f"--{boundary}"
    parts = [f"Content-type: multipart/form-data; boundary={boundary}\n\n".encode()]
    for name, content in data.items():
        parts.append(f"{dash_boundary}\n".encode())
        parts.append(f"Content-Disposition: form-data; name={name}\n".encode())
        parts.append(f"Content-Length: {len(content)} \n\n".encode())
        parts.append(bytes(content))
        parts.append(b"\n")
    parts.append(f"{dash_boundary}--\n\n".encode())
    return b"".join(parts)


def random_boundary() -> str:
    """Return a random multipart boundary of 60 hexadecimal characters."""
    return secrets.token_hex(30)


def is_yes_string(s: str) -> bool:
    """Tell whether ``s`` spells an affirmative value such as "yes" or "1"."""
    return s.lower() in _YES_STRINGS


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def request_hash(url: str, body: str | bytes | None = None) -> int:
    """Return the 64-bit FNV-1a hash of the URL followed by the body."""
    h = _FNV64_OFFSET
    data = _as_bytes(url)
    if body is not None:
        data += _as_bytes(body)
    for byte in data:
        h ^= byte
        h = (h * _FNV64_PRIME) & _MASK64
    return h


def is_matching_filter(filters: Iterable[Pattern[str]], url: str) -> bool:
    """Tell whether any of the regular expressions matches somewhere in ``url``."""
    return any(pattern.search(url) for pattern in filters)