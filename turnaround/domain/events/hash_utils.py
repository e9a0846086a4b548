"""SHA-256 helpers for the audit chain and the certification commitment.

Everything hashed goes through ``canonical_json`` first: keys sorted at
every level, compact separators, strings kept byte-for-byte, datetimes as
ISO 8601 and non-finite floats rejected. Two parties encoding the same
values therefore always hash the same bytes, and any change to a string
changes the hash.
"""

from __future__ import annotations

import hashlib
import json
import math
import re
from datetime import datetime
from typing import Any

# prev_hash of the first record in every turnaround's chain.
GENESIS_HASH: str = "0" * 64

HASH_ALG_VERSION: int = 1
HASH_ALG_NAME: str = "SHA-256"

_SHA256_HEX = re.compile(r"[0-9a-f]{64}")

# Fields of an audit record covered by its content hash, in no particular order.
RECORD_HASH_FIELDS: tuple[str, ...] = (
    "turnaround_id",
    "sequence",
    "event_type",
    "payload",
    "recorded_at",
    "prev_hash",
)


def _normalize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Cannot hash non-finite float {value!r}")
    if isinstance(value, dict):
        return {_normalize(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    return value


def canonical_json(data: Any) -> str:
    """Deterministic JSON encoding of ``data``.

    Raises:
        ValueError: If ``data`` contains NaN or an infinity.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        _normalize(data), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def sha256_canonical(data: Any) -> str:
    """Lowercase hex SHA-256 of the canonical JSON form of ``data``."""
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()


def compute_record_hash(record_data: dict[str, Any]) -> str:
    """Content hash of an audit record.

    Covers every field in RECORD_HASH_FIELDS. Because prev_hash is one of
    them, each record commits to its entire history.
    """
    hashable = {name: record_data[name] for name in RECORD_HASH_FIELDS}
    hashable["payload"] = dict(hashable["payload"])
    return sha256_canonical(hashable)


def is_valid_sha256_hex(value: str) -> bool:
    return isinstance(value, str) and _SHA256_HEX.fullmatch(value) is not None


def get_prev_hash(sequence: int, previous_content_hash: str | None) -> str:
    """prev_hash for the record at ``sequence``.

    Returns:
        GENESIS_HASH for sequence 1, ``previous_content_hash`` otherwise.

    Raises:
        ValueError: If sequence < 1, or a later record has a missing or
            malformed predecessor hash.
    """
    if sequence < 1:
        raise ValueError("sequence must be >= 1")
    if sequence == 1:
        return GENESIS_HASH
    if previous_content_hash is None:
        raise ValueError("previous_content_hash required for sequence > 1")
    if not is_valid_sha256_hex(previous_content_hash):
        raise ValueError(
            "previous_content_hash must be a 64-character lowercase hex string, "
            f"got: {previous_content_hash!r}"
        )
    return previous_content_hash
