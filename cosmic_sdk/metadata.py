"""Object metadata model.

The service has shipped two shapes for an object's custom fields over time:

* an array of typed field descriptors ("metafields"), each carrying its type,
  title, key, value and type-specific extras;
* a plain dictionary of key -> value.

Older payloads put either shape under ``metafields``; current payloads use
``metadata``. :class:`ObjectMetadata` reads both and always writes back under
``metadata``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import ValueDecodingError
from .types import JSONType
from .values import DynamicValue, ValueKind

METADATA_KEY = "metadata"
LEGACY_METADATA_KEY = "metafields"

log = logging.getLogger(__name__)


class MetafieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    HTML_TEXTAREA = "html-textarea"
    MARKDOWN = "markdown"
    SELECT_DROPDOWN = "select-dropdown"
    OBJECT = "object"
    OBJECTS = "objects"
    FILE = "file"
    FILES = "files"
    DATE = "date"
    JSON = "json"
    RADIO_BUTTONS = "radio-buttons"
    CHECK_BOXES = "check-boxes"
    SWITCH = "switch"
    COLOR = "color"
    PARENT = "parent"
    REPEATER = "repeater"

    @classmethod
    def parse(cls, value: Any) -> "MetafieldType":
        try:
            return cls(value)
        except ValueError as e:
            raise ValueDecodingError(f"Unknown metafield type: {value!r}") from e


# Types whose value is a list of ids/urls/choices
ARRAY_VALUE_TYPES = (MetafieldType.OBJECTS, MetafieldType.FILES, MetafieldType.CHECK_BOXES)


def _require(data: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in data:
        raise ValueDecodingError(f"{where}: missing required field '{key}'")
    value = data[key]
    if not isinstance(value, kind) or isinstance(value, bool) and kind is not bool:
        raise ValueDecodingError(f"{where}: field '{key}' must be {kind.__name__}")
    return value


def _optional(data: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, kind):
        raise ValueDecodingError(f"{where}: field '{key}' must be {kind.__name__}")
    return value


def _expect_dict(data: Any, where: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueDecodingError(f"{where}: expected a JSON object, got {type(data).__name__}")
    return data


def _prune(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class MetafieldOption:
    """A choice of a select-dropdown, radio-buttons or check-boxes field."""

    value: str
    key: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "MetafieldOption":
        data = _expect_dict(data, "option")
        return cls(
            value=_require(data, "value", str, "option"),
            key=_optional(data, "key", str, "option"),
        )

    def to_json(self) -> Dict[str, Any]:
        return _prune({"key": self.key, "value": self.value})


@dataclass(frozen=True)
class RepeaterField:
    """Sub-field template of a repeater field."""

    title: str
    key: str
    type: MetafieldType
    value: Optional[str] = None
    required: Optional[bool] = None

    @classmethod
    def from_json(cls, data: Any) -> "RepeaterField":
        data = _expect_dict(data, "repeater field")
        return cls(
            title=_require(data, "title", str, "repeater field"),
            key=_require(data, "key", str, "repeater field"),
            type=MetafieldType.parse(data.get("type")),
            value=_optional(data, "value", str, "repeater field"),
            required=_optional(data, "required", bool, "repeater field"),
        )

    def to_json(self) -> Dict[str, Any]:
        return _prune({
            "title": self.title,
            "key": self.key,
            "value": self.value,
            "type": self.type.value,
            "required": self.required,
        })


@dataclass
class Metafield:
    """A typed field descriptor from the array-shaped metadata."""

    type: MetafieldType
    title: str
    key: str
    value: Optional[DynamicValue] = None
    required: Optional[bool] = None
    options: Optional[List[MetafieldOption]] = None
    object_type: Optional[str] = None
    children: Optional[List["Metafield"]] = None
    repeater_fields: Optional[List[RepeaterField]] = None

    @classmethod
    def from_json(cls, data: Any) -> "Metafield":
        data = _expect_dict(data, "metafield")
        field_type = MetafieldType.parse(data.get("type"))
        options = _optional(data, "options", list, "metafield")
        children = _optional(data, "children", list, "metafield")
        repeater_fields = _optional(data, "repeater_fields", list, "metafield")
        return cls(
            type=field_type,
            title=_require(data, "title", str, "metafield"),
            key=_require(data, "key", str, "metafield"),
            value=_decode_field_value(field_type, data),
            required=_optional(data, "required", bool, "metafield"),
            options=[MetafieldOption.from_json(o) for o in options] if options is not None else None,
            object_type=_optional(data, "object_type", str, "metafield"),
            children=[cls.from_json(c) for c in children] if children is not None else None,
            repeater_fields=(
                [RepeaterField.from_json(r) for r in repeater_fields]
                if repeater_fields is not None else None
            ),
        )

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.type.value,
            "title": self.title,
            "key": self.key,
            "required": self.required,
            "options": [o.to_json() for o in self.options] if self.options is not None else None,
            "object_type": self.object_type,
            "children": [c.to_json() for c in self.children] if self.children is not None else None,
            "repeater_fields": (
                [r.to_json() for r in self.repeater_fields] if self.repeater_fields is not None else None
            ),
        }
        out = _prune(out)
        if self.value is not None:
            out["value"] = self.value.to_json()
        return out


def _decode_field_value(field_type: MetafieldType, data: Dict[str, Any]) -> Optional[DynamicValue]:
    if "value" not in data:
        return None
    raw = data["value"]
    if field_type in ARRAY_VALUE_TYPES and isinstance(raw, list):
        return DynamicValue(ValueKind.ARRAY, [DynamicValue.from_json(item) for item in raw])
    if field_type is MetafieldType.JSON and isinstance(raw, dict):
        return DynamicValue.from_json(raw)
    if field_type is MetafieldType.SWITCH and isinstance(raw, bool):
        return DynamicValue(ValueKind.BOOL, raw)
    return DynamicValue.from_json(raw)


class ObjectMetadata:
    """Custom fields of an object, in either list or dictionary form.

    Exactly one of ``fields`` (list variant) or ``values`` (dict variant) is
    set. Use :meth:`lookup` and :meth:`to_dict` to read it without caring
    which shape the service sent.
    """

    __slots__ = ("fields", "values")

    def __init__(
        self,
        fields: Optional[List[Metafield]] = None,
        values: Optional[Dict[str, DynamicValue]] = None,
    ):
        if (fields is None) == (values is None):
            raise ValueError("ObjectMetadata needs exactly one of fields or values")
        self.fields = fields
        self.values = values

    @classmethod
    def from_fields(cls, fields: List[Metafield]) -> "ObjectMetadata":
        return cls(fields=list(fields))

    @classmethod
    def from_values(cls, values: Dict[str, Any]) -> "ObjectMetadata":
        return cls(values={key: DynamicValue.of(v) for key, v in values.items()})

    @classmethod
    def from_json(cls, node: Any) -> "ObjectMetadata":
        """Decode the bare metadata node: array => list variant, object => dict variant."""
        if isinstance(node, list):
            return cls(fields=[Metafield.from_json(item) for item in node])
        if isinstance(node, dict):
            return cls(values={key: DynamicValue.from_json(v) for key, v in node.items()})
        raise ValueDecodingError(f"metadata must be an array or an object, got {type(node).__name__}")

    @classmethod
    def from_container(
        cls,
        container: Dict[str, Any],
        primary_key: str = METADATA_KEY,
        legacy_key: str = LEGACY_METADATA_KEY,
    ) -> Optional["ObjectMetadata"]:
        """Read metadata from an object payload.

        ``primary_key`` is checked first, then ``legacy_key``. Returns None if
        neither is present.
        """
        node = container.get(primary_key)
        if node is None:
            node = container.get(legacy_key)
            if node is not None:
                log.debug(f"Reading metadata from legacy '{legacy_key}' key")
        if node is None:
            return None
        return cls.from_json(node)

    @property
    def is_list(self) -> bool:
        return self.fields is not None

    def lookup(self, key: str) -> Optional[DynamicValue]:
        """Value stored under ``key``, or None.

        For the list variant the first descriptor with a matching key wins.
        """
        if self.fields is not None:
            for metafield in self.fields:
                if metafield.key == key:
                    return metafield.value
            return None
        return self.values.get(key)

    get = lookup

    def field(self, key: str) -> Optional[Metafield]:
        """Full descriptor for ``key`` (list variant only)."""
        if self.fields is None:
            return None
        return next((f for f in self.fields if f.key == key), None)

    def keys(self) -> List[str]:
        if self.fields is not None:
            return [f.key for f in self.fields]
        return list(self.values)

    def to_dict(self) -> Optional[Dict[str, DynamicValue]]:
        """Project either shape onto ``{key: value}``.

        Descriptors without a value are skipped. Returns None when there is
        nothing to project.
        """
        if self.fields is not None:
            projected = {}
            for f in self.fields:
                if f.value is not None:
                    projected.setdefault(f.key, f.value)
        else:
            projected = dict(self.values)
        return projected or None

    def to_native(self) -> Optional[Dict[str, JSONType]]:
        projected = self.to_dict()
        if projected is None:
            return None
        return {key: value.to_json() for key, value in projected.items()}

    def value_json(self) -> JSONType:
        if self.fields is not None:
            return [f.to_json() for f in self.fields]
        return {key: value.to_json() for key, value in self.values.items()}

    def to_json(self) -> Dict[str, JSONType]:
        """Encode under the ``metadata`` key; ``metafields`` is never written."""
        return {METADATA_KEY: self.value_json()}

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self.keys()

    def __getitem__(self, key: str) -> DynamicValue:
        found = self.lookup(key)
        if found is None:
            raise KeyError(key)
        return found

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.fields) if self.fields is not None else len(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectMetadata):
            return NotImplemented
        return self.value_json() == other.value_json()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        shape = "fields" if self.fields is not None else "values"
        return f"ObjectMetadata({shape}={self.keys()!r})"
