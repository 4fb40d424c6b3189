"""Conversion of contract return values into plain Python values."""

from typing import Any, Optional

from stellar_sdk import scval
from stellar_sdk import xdr as stellar_xdr

_Type = stellar_xdr.SCValType

_SCALARS = {
    _Type.SCV_BOOL: scval.from_bool,
    _Type.SCV_U32: scval.from_uint32,
    _Type.SCV_I32: scval.from_int32,
    _Type.SCV_U64: scval.from_uint64,
    _Type.SCV_I64: scval.from_int64,
    _Type.SCV_U128: scval.from_uint128,
    _Type.SCV_I128: scval.from_int128,
    _Type.SCV_U256: scval.from_uint256,
    _Type.SCV_I256: scval.from_int256,
    _Type.SCV_SYMBOL: scval.from_symbol,
    _Type.SCV_BYTES: scval.from_bytes,
}


def to_native(sc_val: Optional[stellar_xdr.SCVal]) -> Any:
    """Convert an SCVal into Python primitives.

    Maps become dicts, vecs become lists, addresses become strkey strings and
    strings are decoded as UTF-8. Types with no natural Python form are
    returned unchanged.
    """
    if sc_val is None or sc_val.type == _Type.SCV_VOID:
        return None

    converter = _SCALARS.get(sc_val.type)
    if converter is not None:
        return converter(sc_val)

    if sc_val.type == _Type.SCV_STRING:
        value = scval.from_string(sc_val)
        return value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value

    if sc_val.type == _Type.SCV_ADDRESS:
        return scval.from_address(sc_val).address

    if sc_val.type == _Type.SCV_VEC:
        items = sc_val.vec.sc_vec if sc_val.vec is not None else []
        return [to_native(item) for item in items]

    if sc_val.type == _Type.SCV_MAP:
        entries = sc_val.map.sc_map if sc_val.map is not None else []
        return {_map_key(to_native(entry.key)): to_native(entry.val) for entry in entries}

    return sc_val


def _map_key(key: Any) -> Any:
    # dict keys must be hashable; fall back to the repr for lists
    if isinstance(key, (list, dict)):
        return repr(key)
    return key
