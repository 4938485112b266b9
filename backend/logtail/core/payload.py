"""
Decoding and positional projection of serialized log payloads.

The payload column holds the output of PHP's ``serialize()`` applied to an
array. Decoding is delegated to ``phpserialize``; this module only decides
in which order the decoded values are handed to the template.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

import phpserialize

from logtail.core.format_errors import PayloadDecodeError
from logtail.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

NULL_TEXT = "(null)"

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_NUMERIC_KEY = re.compile(r"[+-]?[0-9]+")

_MISSING = object()


class ValueKind(str, Enum):
    """Kinds of decoded payload values"""
    NULL = "null"
    STRING = "string"
    INTEGER = "integer"
    OPAQUE = "opaque"  # floats, booleans, nested arrays, objects


def _opaque_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        items = ", ".join(
            f"{PayloadValue.wrap(k).to_text()}: {PayloadValue.wrap(v).to_text()}"
            for k, v in value.items()
        )
        return "{" + items + "}"
    return str(value)


_COERCIONS: Dict[ValueKind, Callable[[Any], str]] = {
    ValueKind.NULL: lambda raw: NULL_TEXT,
    ValueKind.STRING: lambda raw: raw,
    ValueKind.INTEGER: lambda raw: str(raw),
    ValueKind.OPAQUE: _opaque_text,
}


@dataclass(frozen=True)
class PayloadValue:
    """A decoded value tagged with its kind"""
    kind: ValueKind
    raw: Any

    @classmethod
    def wrap(cls, value: Any) -> "PayloadValue":
        if value is None:
            return cls(ValueKind.NULL, None)
        if isinstance(value, str):
            return cls(ValueKind.STRING, value)
        # bool is an int subclass but PHP keeps it a separate type
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(ValueKind.INTEGER, value)
        return cls(ValueKind.OPAQUE, value)

    def to_text(self) -> str:
        return _COERCIONS[self.kind](self.raw)


def decode_payload(serialized: Union[str, bytes]) -> Any:
    """
    Decode a PHP-serialized payload.

    Raises:
        PayloadDecodeError: the payload is not valid serialized data
    """
    data = serialized.encode("utf-8") if isinstance(serialized, str) else serialized
    try:
        return phpserialize.loads(data, decode_strings=True)
    except (ValueError, TypeError, RecursionError) as exc:
        raise PayloadDecodeError(
            f"Could not decode serialized payload: {exc}",
            metadata={"length": len(data)},
        ) from exc


def _numeric_key(key: str):
    """Return the integer spelled by ``key`` if it is a 32-bit decimal, else None"""
    if not _NUMERIC_KEY.fullmatch(key):
        return None
    value = int(key)
    if value < INT32_MIN or value > INT32_MAX:
        return None
    return value


def partition_keys(payload: Mapping[Any, Any]) -> Tuple[List[int], List[str]]:
    """
    Split payload keys into sorted integer keys and sorted string keys.

    String keys spelling a decimal integer count as integer keys. Keys of
    any other type are ignored.
    """
    integer_keys: List[int] = []
    string_keys: List[str] = []

    for key in payload:
        if isinstance(key, bool):
            continue
        if isinstance(key, int):
            integer_keys.append(key)
        elif isinstance(key, str):
            index = _numeric_key(key)
            if index is None:
                string_keys.append(key)
            else:
                integer_keys.append(index)

    integer_keys.sort()
    string_keys.sort()
    return integer_keys, string_keys


def _lookup_index(payload: Mapping[Any, Any], index: int) -> Any:
    if index in payload:
        return payload[index]
    return payload.get(str(index), _MISSING)


def project(payload: Mapping[Any, Any], needed_slots: int) -> List[Any]:
    """
    Project a decoded array into positional values.

    Integer-indexed values are read by dense index ``0 .. n-1`` (``n`` being
    the number of integer keys), so a gap in the indices drops a value
    rather than shifting the rest. They are converted to text. Values under
    string keys follow in key order, unconverted.

    Args:
        payload: Decoded array
        needed_slots: Number of verbs in the template

    Returns:
        Values in substitution order
    """
    integer_keys, string_keys = partition_keys(payload)

    values: List[Any] = []
    for index in range(len(integer_keys)):
        value = _lookup_index(payload, index)
        if value is _MISSING:
            continue
        values.append(PayloadValue.wrap(value).to_text())

    for key in string_keys:
        values.append(payload[key])

    if len(values) != needed_slots:
        logger.debug(
            "Payload arity does not match template",
            extra={"needed_slots": needed_slots, "values": len(values)},
        )

    return values
