"""Decoding of treasury request snapshots.

``list_requests`` entries do not arrive in one stable shape: depending on the
SDK and runtime they may be a map (a dict or a list of key/value pairs), a
positional tuple, or a plain object with attributes. Each shape has its own
normalizer; all of them feed the same decode path.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from smartremit.accounts import AccountDirectory, AccountLabel
from smartremit.currency import from_fixed_point
from smartremit.models import MultisigRequestRecord

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = (
    "id",
    "to",
    "amount",
    "approvals",
    "executed",
    "initiator",
    "created_at",
    "completed_at",
)

_ALIASES = {
    "createdAt": "created_at",
    "completedAt": "completed_at",
}
_KNOWN_KEYS = set(SNAPSHOT_FIELDS) | set(_ALIASES)


def _key(key: Any) -> str:
    if isinstance(key, bytes):
        key = key.decode("utf-8", errors="replace")
    key = str(key)
    return _ALIASES.get(key, key)


def from_mapping(entry: Mapping) -> dict[str, Any]:
    """Normalize a dict-like snapshot."""
    return {_key(k): v for k, v in entry.items()}


def is_pair_sequence(entry: Any) -> bool:
    """Check whether a sequence is a list of (field, value) pairs."""
    if not isinstance(entry, (list, tuple)) or not entry:
        return False
    for item in entry:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            return False
        if not isinstance(item[0], (str, bytes)) or _key(item[0]) not in _KNOWN_KEYS:
            return False
    return True


def from_pairs(entry: Iterable) -> dict[str, Any]:
    """Normalize map entries given as (field, value) pairs."""
    return {_key(k): v for k, v in entry}


def from_positional(entry: Iterable) -> dict[str, Any]:
    """Normalize a positional tuple using the contract's field order."""
    return dict(zip(SNAPSHOT_FIELDS, entry))


def from_object(entry: Any) -> dict[str, Any]:
    """Normalize an object exposing snapshot fields as attributes."""
    return {_key(k): v for k, v in vars(entry).items() if not k.startswith("_")}


def normalize_entry(entry: Any) -> Optional[dict[str, Any]]:
    """Turn any supported snapshot shape into a field -> value dict.

    Returns None for shapes that cannot be interpreted.
    """
    if isinstance(entry, Mapping):
        return from_mapping(entry)
    if is_pair_sequence(entry):
        return from_pairs(entry)
    if isinstance(entry, (list, tuple)):
        return from_positional(entry)
    if hasattr(entry, "__dict__"):
        return from_object(entry)
    return None


def stringify(value: Any) -> str:
    """Render an address-like value (str, bytes, number or Address) as text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    address = getattr(value, "address", None)
    if isinstance(address, str):
        return address
    return str(value)


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_bool(value: Any) -> bool:
    if isinstance(value, (str, bytes)):
        text = value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value
        return text.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _decode_amount(value: Any) -> str:
    if value is None:
        return "0"
    try:
        return from_fixed_point(int(value))
    except (TypeError, ValueError):
        return "0"


def _decode_approvals(value: Any, directory: AccountDirectory) -> tuple[AccountLabel, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    approvals: list[AccountLabel] = []
    for item in value:
        label = directory.label_of(stringify(item))
        if label is not None and label not in approvals:
            approvals.append(label)
    return tuple(approvals)


def decode_request(entry: Any, directory: AccountDirectory) -> Optional[MultisigRequestRecord]:
    """Decode one snapshot into a request record.

    Returns None when the entry's shape is unknown or when its ``to`` or
    ``initiator`` address does not belong to a known account.
    """
    fields = normalize_entry(entry)
    if fields is None:
        logger.debug(f"Skipping snapshot with unsupported shape: {type(entry).__name__}")
        return None

    to_label = directory.label_of(stringify(fields.get("to")))
    initiator = directory.label_of(stringify(fields.get("initiator")))
    if to_label is None or initiator is None:
        logger.debug(f"Skipping snapshot {fields.get('id')} with unknown address")
        return None

    completed_at = _to_int(fields.get("completed_at"))

    return MultisigRequestRecord(
        id=_to_int(fields.get("id")),
        to=to_label,
        amount=_decode_amount(fields.get("amount")),
        approvals=_decode_approvals(fields.get("approvals"), directory),
        executed=_to_bool(fields.get("executed")),
        initiator=initiator,
        created_at=_to_int(fields.get("created_at")),
        completed_at=completed_at or None,
    )


def decode_requests(entries: Any, directory: AccountDirectory) -> list[MultisigRequestRecord]:
    """Decode a ``list_requests`` result, latest request first."""
    if not isinstance(entries, (list, tuple)):
        return []

    records = [decode_request(entry, directory) for entry in entries]
    decoded = [record for record in records if record is not None]
    decoded.sort(key=lambda record: record.id, reverse=True)
    return decoded
