"""Normalizer — rewrites store-native values in an outgoing tree into JSON-safe forms.

Invariants:
    - PURE: never mutates its input, always builds a new tree
    - Idempotent: normalize(normalize(x)) == normalize(x)
    - The identifier encodings (ObjectId, 12 raw bytes, Buffer descriptor,
      {"buffer": ...} wrapper, {"__t": "ObjectId", ...} tag) all yield the same
      24-char lowercase hex string
    - Binaries whose length is not 12 become base64, never identifiers
    - Leaves outside the JSON scalar types (Decimal128, Decimal, UUID...) become
      their string form
    - Recursion is capped at max_depth; overflow raises NormalizationError
    - safe_normalize() never raises and returns the input on any failure

Design Decisions:
    - classify() resolves every value to one ValueKind before recursion, so the
      walk dispatches on a closed set of variants instead of ad-hoc type checks
    - The _id key has its own ladder (normalize_identifier) and degrades to a
      string rather than failing; the timestamp keys treat an empty mapping as
      an unset ORM default and stamp the current time
"""

import base64
import json
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from bson import ObjectId

from app.core.envelope import utc_timestamp
from app.core.errors import NormalizationError

MAX_DEPTH = 64
IDENTIFIER_LENGTH = 12
IDENTIFIER_KEY = "_id"
TIMESTAMP_KEYS = frozenset({"createdAt", "updatedAt", "deletedAt"})
TAG_KEY = "__t"

_BINARY_TYPES = (bytes, bytearray, memoryview)
_JSON_SCALAR_TYPES = (str, int, float)
_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class ValueKind(str, Enum):
    """Tagged variants of a raw value tree node."""
    SCALAR = "scalar"
    IDENTIFIER = "identifier"
    DATE = "date"
    BINARY = "binary"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


# ─── Classification ─────────────────────────────────────────────

def buffer_descriptor_bytes(value: Any) -> bytes | None:
    """Bytes of a JSON-revived {"type": "Buffer", "data": [...]} descriptor."""
    if not isinstance(value, Mapping) or set(value.keys()) != {"type", "data"}:
        return None
    if value.get("type") != "Buffer":
        return None
    data = value.get("data")
    if not isinstance(data, list):
        return None
    if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in data):
        return None
    return bytes(data)


def binary_bytes(value: Any) -> bytes | None:
    """Raw bytes of any binary encoding, or None when value is not binary."""
    if isinstance(value, _BINARY_TYPES):
        return bytes(value)
    return buffer_descriptor_bytes(value)


def _wrapped_identifier_bytes(value: Any) -> bytes | None:
    """12 bytes held by a {"buffer": <binary>} wrapper whose only key is buffer."""
    if not isinstance(value, Mapping) or set(value.keys()) != {"buffer"}:
        return None
    raw = binary_bytes(value["buffer"])
    if raw is not None and len(raw) == IDENTIFIER_LENGTH:
        return raw
    return None


def _tagged_identifier_bytes(value: Any) -> bytes | None:
    """12 bytes of a {"__t": "ObjectId", ...} tag carrying "$oid" hex or a buffer."""
    if not isinstance(value, Mapping) or value.get(TAG_KEY) != "ObjectId":
        return None
    oid = value.get("$oid")
    if isinstance(oid, str) and ObjectId.is_valid(oid):
        return ObjectId(oid).binary
    raw = binary_bytes(value.get("buffer"))
    if raw is not None and len(raw) == IDENTIFIER_LENGTH:
        return raw
    return None


def identifier_bytes(value: Any) -> bytes | None:
    """12 bytes of a mapping-shaped identifier (buffer wrapper or tag), if any."""
    return _wrapped_identifier_bytes(value) or _tagged_identifier_bytes(value)


def classify(value: Any) -> ValueKind:
    """Resolve a raw value to its variant."""
    if isinstance(value, ObjectId):
        return ValueKind.IDENTIFIER
    if isinstance(value, (datetime, date)):
        return ValueKind.DATE
    if isinstance(value, _JSON_SCALAR_TYPES) or value is None:
        return ValueKind.SCALAR
    if isinstance(value, _BINARY_TYPES):
        return ValueKind.BINARY
    if isinstance(value, _SEQUENCE_TYPES):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        if buffer_descriptor_bytes(value) is not None:
            return ValueKind.BINARY
        if identifier_bytes(value) is not None:
            return ValueKind.IDENTIFIER
        return ValueKind.MAPPING
    return ValueKind.SCALAR


# ─── Leaf conversions ───────────────────────────────────────────

def format_date(value: date) -> str:
    """ISO-8601; datetimes in UTC with milliseconds, naive ones taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return value.isoformat()


def format_binary(raw: bytes) -> str:
    """12 bytes read as an identifier (hex); anything else as base64."""
    if len(raw) == IDENTIFIER_LENGTH:
        return str(ObjectId(raw))
    return base64.b64encode(raw).decode("ascii")


def format_scalar(value: Any) -> Any:
    """JSON scalars as-is; any other leaf (Decimal128, UUID...) as its string."""
    if value is None or isinstance(value, _JSON_SCALAR_TYPES):
        return value
    return str(value)


def json_default(value: Any) -> Any:
    """json.dumps default= hook for store-native leaves left in a raw tree."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return format_date(value)
    if isinstance(value, _BINARY_TYPES):
        return format_binary(bytes(value))
    if isinstance(value, _SEQUENCE_TYPES):
        return list(value)
    return str(value)


def _identifier_hex(value: Any) -> str:
    if isinstance(value, ObjectId):
        return str(value)
    return str(ObjectId(identifier_bytes(value)))


def _stringify(value: Any) -> str:
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, default=json_default)
    return str(value)


def normalize_identifier(value: Any) -> str | None:
    """Normalize whatever sits under an _id key into a string.

    Ladder: ObjectId, a {"__t": "ObjectId"} tag, 12-byte binary (raw or Buffer
    descriptor), then a {"buffer": ...} wrapper. A wrapper whose bytes are not
    12 long yields the raw bytes as hex; a wrapper with no recognizable bytes
    yields its JSON text.
    Anything else falls back to its string form.
    """
    if value is None:
        return None
    if isinstance(value, ObjectId):
        return str(value)
    tagged = _tagged_identifier_bytes(value)
    if tagged is not None:
        return str(ObjectId(tagged))

    raw = binary_bytes(value)
    if raw is not None and len(raw) == IDENTIFIER_LENGTH:
        return str(ObjectId(raw))

    if isinstance(value, Mapping) and "buffer" in value:
        inner = binary_bytes(value["buffer"])
        if inner is None:
            return json.dumps(value, default=json_default)
        if len(inner) == IDENTIFIER_LENGTH:
            return str(ObjectId(inner))
        return inner.hex()

    if raw is not None:
        return raw.hex()
    return _stringify(value)


# ─── Tree walk ──────────────────────────────────────────────────

def _normalize_timestamp(value: Any, depth: int, max_depth: int) -> Any:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return format_date(value)
    if isinstance(value, Mapping) and len(value) == 0:
        return utc_timestamp()
    return _walk(value, depth, max_depth)


def _walk(value: Any, depth: int, max_depth: int) -> Any:
    if depth > max_depth:
        raise NormalizationError(f"value nested deeper than {max_depth} levels")

    kind = classify(value)
    if kind is ValueKind.SCALAR:
        return format_scalar(value)
    if kind is ValueKind.IDENTIFIER:
        return _identifier_hex(value)
    if kind is ValueKind.DATE:
        return format_date(value)
    if kind is ValueKind.BINARY:
        return format_binary(binary_bytes(value))
    if kind is ValueKind.SEQUENCE:
        return [_walk(item, depth + 1, max_depth) for item in value]

    result: dict[str, Any] = {}
    for key, item in value.items():
        if key == IDENTIFIER_KEY:
            result[key] = normalize_identifier(item)
        elif key in TIMESTAMP_KEYS:
            result[key] = _normalize_timestamp(item, depth + 1, max_depth)
        else:
            result[key] = _walk(item, depth + 1, max_depth)
    return result


def normalize(value: Any, max_depth: int = MAX_DEPTH) -> Any:
    """Return a JSON-safe copy of value. Raises NormalizationError on overflow."""
    return _walk(value, 0, max_depth)


def safe_normalize(value: Any, max_depth: int = MAX_DEPTH) -> Any:
    """normalize(), falling back to the untouched input on any failure."""
    try:
        return normalize(value, max_depth)
    except Exception:
        return value
