"""Dynamic JSON values.

``DynamicValue`` is a tagged union able to hold any JSON value. It is used for
free-form metadata and for payload fields whose shape the SDK cannot know in
advance. Typed accessors return ``None`` on mismatch so callers can chain
lookups without guarding every step::

    price = obj.metadata.lookup("price")
    if price is not None and price.as_float() is not None:
        ...
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Type, Union

from .exceptions import ValueDecodingError
from .types import JSONType


class ValueKind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    DOUBLE = "double"
    STRING = "string"
    ARRAY = "array"
    MAP = "map"


class DynamicValue:
    """A JSON value tagged with its kind.

    Arrays and maps own their children as ``DynamicValue`` instances.
    """

    __slots__ = ("kind", "_payload")

    def __init__(self, kind: ValueKind, payload: Any = None):
        self.kind = kind
        self._payload = payload

    # -------------------------
    # Construction
    # -------------------------
    @classmethod
    def null(cls) -> "DynamicValue":
        return cls(ValueKind.NULL)

    @classmethod
    def from_json(cls, node: Any) -> "DynamicValue":
        """Decode a parsed JSON node.

        The first matching variant wins: null, bool, int, double, string,
        array, map. ``bool`` must be tested before ``int`` since Python's
        ``True`` is also an ``int``.

        Raises:
            ValueDecodingError: If ``node`` is not a JSON-representable value
        """
        if node is None:
            return cls(ValueKind.NULL)
        if isinstance(node, bool):
            return cls(ValueKind.BOOL, node)
        if isinstance(node, int):
            return cls(ValueKind.INT, node)
        if isinstance(node, float):
            return cls(ValueKind.DOUBLE, node)
        if isinstance(node, str):
            return cls(ValueKind.STRING, node)
        if isinstance(node, (list, tuple)):
            return cls(ValueKind.ARRAY, [cls.from_json(item) for item in node])
        if isinstance(node, dict):
            items: Dict[str, DynamicValue] = {}
            for key, item in node.items():
                if not isinstance(key, str):
                    raise ValueDecodingError(f"Map keys must be strings, got {type(key).__name__}")
                items[key] = cls.from_json(item)
            return cls(ValueKind.MAP, items)
        raise ValueDecodingError(f"Cannot represent {type(node).__name__} as a JSON value")

    @classmethod
    def of(cls, value: Any) -> "DynamicValue":
        """Wrap a native value, passing DynamicValue instances through."""
        if isinstance(value, DynamicValue):
            return value
        if isinstance(value, (list, tuple)):
            return cls(ValueKind.ARRAY, [cls.of(item) for item in value])
        if isinstance(value, dict):
            return cls(ValueKind.MAP, {str(k): cls.of(v) for k, v in value.items()})
        return cls.from_json(value)

    # -------------------------
    # Encoding
    # -------------------------
    def to_json(self) -> JSONType:
        """Return the native JSON tree this value was decoded from."""
        if self.kind is ValueKind.ARRAY:
            return [item.to_json() for item in self._payload]
        if self.kind is ValueKind.MAP:
            return {key: item.to_json() for key, item in self._payload.items()}
        return self._payload

    # -------------------------
    # Typed accessors
    # -------------------------
    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def as_string(self) -> Optional[str]:
        return self._payload if self.kind is ValueKind.STRING else None

    def as_int(self) -> Optional[int]:
        return self._payload if self.kind is ValueKind.INT else None

    def as_bool(self) -> Optional[bool]:
        return self._payload if self.kind is ValueKind.BOOL else None

    def as_float(self) -> Optional[float]:
        if self.kind is ValueKind.DOUBLE:
            return self._payload
        if self.kind is ValueKind.INT:
            return float(self._payload)
        return None

    def as_list(self, item_type: Optional[Type] = None) -> Optional[List[Any]]:
        """Return the array as native values.

        Args:
            item_type: If given, every element must be an instance of this type
                       (``bool`` elements never count as ``int``)
        """
        if self.kind is not ValueKind.ARRAY:
            return None
        items = [item.to_json() for item in self._payload]
        if item_type is not None and not all(_matches(item, item_type) for item in items):
            return None
        return items

    def as_dict(self, value_type: Optional[Type] = None) -> Optional[Dict[str, Any]]:
        if self.kind is not ValueKind.MAP:
            return None
        items = {key: item.to_json() for key, item in self._payload.items()}
        if value_type is not None and not all(_matches(item, value_type) for item in items.values()):
            return None
        return items

    def items(self) -> List["DynamicValue"]:
        """Children of an array value (empty for any other kind)."""
        return list(self._payload) if self.kind is ValueKind.ARRAY else []

    def entries(self) -> Dict[str, "DynamicValue"]:
        """Children of a map value (empty for any other kind)."""
        return dict(self._payload) if self.kind is ValueKind.MAP else {}

    # -------------------------
    # Nested access
    # -------------------------
    def get(self, key: Union[str, int]) -> Optional["DynamicValue"]:
        if self.kind is ValueKind.MAP and isinstance(key, str):
            return self._payload.get(key)
        if self.kind is ValueKind.ARRAY and isinstance(key, int) and not isinstance(key, bool):
            if -len(self._payload) <= key < len(self._payload):
                return self._payload[key]
        return None

    def exists(self, key: Union[str, int]) -> bool:
        """True when ``key`` is present, even if it holds JSON null."""
        return self.get(key) is not None

    def __getitem__(self, key: Union[str, int]) -> "DynamicValue":
        found = self.get(key)
        if found is None:
            raise KeyError(key)
        return found

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (str, int)) and self.exists(key)

    def __iter__(self) -> Iterator[Any]:
        if self.kind is ValueKind.MAP:
            return iter(self._payload)
        return iter(self.items())

    def __len__(self) -> int:
        if self.kind in (ValueKind.ARRAY, ValueKind.MAP):
            return len(self._payload)
        return 0

    def __bool__(self) -> bool:
        return self.kind is not ValueKind.NULL

    # -------------------------
    # Comparison
    # -------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DynamicValue):
            try:
                other = DynamicValue.of(other)
            except ValueDecodingError:
                return NotImplemented
        return self.kind is other.kind and self._payload == other._payload

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DynamicValue({self.kind.value}, {self.to_json()!r})"


def _matches(item: Any, expected: Type) -> bool:
    if expected is int and isinstance(item, bool):
        return False
    if expected is float and isinstance(item, int) and not isinstance(item, bool):
        return True
    return isinstance(item, expected)
