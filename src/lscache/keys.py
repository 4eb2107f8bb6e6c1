"""
Flat key layout for cache records.

Every entry is stored as up to two flat records sharing a suffix:

    ls-cache:<bucket path>:<key>          -> serialized value
    ls-cache-expiry:<bucket path>:<key>   -> expiry stamp

The root bucket path is "/" and a child path is its parent path plus the
percent-encoded child name plus "/", e.g. "/db/" or "/db/rows%3Aold/".
Encoded segments never contain ":" or "/", so the first ":" after the
prefix always ends the bucket path.
"""

from __future__ import annotations

from enum import Enum
from urllib.parse import quote

DATA_PREFIX = "ls-cache:"
EXPIRY_PREFIX = "ls-cache-expiry:"
ROOT_PATH = "/"
PATH_SEPARATOR = "/"
KEY_SEPARATOR = ":"

# encodeURIComponent leaves these unescaped in addition to quote()'s defaults
_SEGMENT_SAFE = "!*'()"


class RecordKind(str, Enum):
    """Classification of a raw store key."""

    DATA = "data"
    EXPIRY = "expiry"
    FOREIGN = "foreign"


def encode_segment(name: str) -> str:
    """Percent-encode one bucket name."""
    return quote(name, safe=_SEGMENT_SAFE)


def child_path(parent_path: str, name: str) -> str:
    """Return the path of bucket ``name`` nested under ``parent_path``."""
    return parent_path + encode_segment(name) + PATH_SEPARATOR


def data_key(bucket_path: str, key: str) -> str:
    return DATA_PREFIX + bucket_path + KEY_SEPARATOR + key


def expiry_key(bucket_path: str, key: str) -> str:
    return EXPIRY_PREFIX + bucket_path + KEY_SEPARATOR + key


def classify(raw_key: str) -> RecordKind:
    """Tell data, expiry and foreign records apart by prefix."""
    if raw_key.startswith(DATA_PREFIX):
        return RecordKind.DATA
    if raw_key.startswith(EXPIRY_PREFIX):
        return RecordKind.EXPIRY
    return RecordKind.FOREIGN


def _strip_prefix(raw_key: str) -> str:
    kind = classify(raw_key)
    if kind is RecordKind.DATA:
        return raw_key[len(DATA_PREFIX):]
    if kind is RecordKind.EXPIRY:
        return raw_key[len(EXPIRY_PREFIX):]
    raise ValueError(f"Not a cache record key: {raw_key!r}")


def split_key(raw_key: str) -> tuple[str, str]:
    """Split a data or expiry key into (bucket path, logical key).

    Raises:
        ValueError: If the key is foreign or has no key separator.
    """
    rest = _strip_prefix(raw_key)
    bucket_path, sep, key = rest.partition(KEY_SEPARATOR)
    if not sep:
        raise ValueError(f"Malformed cache record key: {raw_key!r}")
    return bucket_path, key


def bucket_path_of(raw_key: str) -> str:
    return split_key(raw_key)[0]


def data_key_for(expiry_raw_key: str) -> str:
    """Map an expiry record key to its paired data record key."""
    return DATA_PREFIX + expiry_raw_key[len(EXPIRY_PREFIX):]


def expiry_key_for(data_raw_key: str) -> str:
    """Map a data record key to its paired expiry record key."""
    return EXPIRY_PREFIX + data_raw_key[len(DATA_PREFIX):]


def bucket_prefixes(bucket_path: str, recursive: bool = False) -> tuple[str, str]:
    """Raw key prefixes (data, expiry) covering a bucket.

    Non-recursive prefixes end in the key separator so they only match the
    bucket's own records; recursive ones also match every descendant path.
    """
    suffix = bucket_path if recursive else bucket_path + KEY_SEPARATOR
    return DATA_PREFIX + suffix, EXPIRY_PREFIX + suffix
