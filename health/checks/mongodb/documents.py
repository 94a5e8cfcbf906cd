# ============================================================================
# MONGODB QUERY RESULT DOCUMENTS
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Structured query result values
# PURPOSE: Typed view over BSON documents returned by watcher queries
# CREATED: 19 OCT 2026
# ============================================================================
"""
Query Result Documents

Every document returned by a watcher query is converted into a Document:
an immutable mapping from field name to DocumentValue. A DocumentValue is
tagged with its ValueKind so predicates can branch on the kind of a field
instead of guessing at raw driver types.

Values compare equal to the plain Python values they wrap, so simple
predicates read naturally:

    any(doc["id"] == 1 for doc in documents)
    all(doc["tags"].kind is ValueKind.ARRAY for doc in documents)
    doc.value("name", default="")
"""

import json
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, Tuple
from dataclasses import dataclass

from bson import Decimal128, ObjectId
from bson.json_util import RELAXED_JSON_OPTIONS, dumps


class ValueKind(str, Enum):
    """Kinds of values a document field can hold."""
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DOUBLE = "double"
    DECIMAL = "decimal"
    STRING = "string"
    OBJECT_ID = "object_id"
    DATETIME = "datetime"
    BINARY = "binary"
    ARRAY = "array"
    DOCUMENT = "document"
    OTHER = "other"


@dataclass(frozen=True, eq=False)
class DocumentValue:
    """
    A single tagged field value.

    For ARRAY the value is a tuple of DocumentValue, for DOCUMENT it is a
    Document, for DECIMAL a decimal.Decimal; scalars hold the driver value.
    """
    kind: ValueKind
    value: Any

    @classmethod
    def from_bson(cls, raw: Any) -> "DocumentValue":
        """Tag a raw value decoded by the driver."""
        if raw is None:
            return cls(ValueKind.NULL, None)
        # bool before int: bool is an int subclass
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, int):
            return cls(ValueKind.INTEGER, int(raw))
        if isinstance(raw, float):
            return cls(ValueKind.DOUBLE, raw)
        if isinstance(raw, Decimal128):
            return cls(ValueKind.DECIMAL, raw.to_decimal())
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        if isinstance(raw, ObjectId):
            return cls(ValueKind.OBJECT_ID, raw)
        if isinstance(raw, datetime):
            return cls(ValueKind.DATETIME, raw)
        if isinstance(raw, (bytes, bytearray)):
            return cls(ValueKind.BINARY, bytes(raw))
        if isinstance(raw, Mapping):
            return cls(ValueKind.DOCUMENT, Document.from_bson(raw))
        if isinstance(raw, (list, tuple)):
            return cls(ValueKind.ARRAY, tuple(cls.from_bson(item) for item in raw))
        return cls(ValueKind.OTHER, raw)

    def unwrap(self) -> Any:
        """Return the plain Python value, recursively for arrays and documents."""
        if self.kind is ValueKind.ARRAY:
            return [item.unwrap() for item in self.value]
        if self.kind is ValueKind.DOCUMENT:
            return self.value.to_dict()
        return self.value

    def to_bson(self) -> Any:
        """Value as the driver encodes it; DECIMAL goes back to Decimal128."""
        if self.kind is ValueKind.DECIMAL:
            return Decimal128(self.value)
        if self.kind is ValueKind.ARRAY:
            return [item.to_bson() for item in self.value]
        if self.kind is ValueKind.DOCUMENT:
            return self.value.to_bson()
        return self.value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DocumentValue):
            return self.kind == other.kind and self.value == other.value
        return self.unwrap() == other

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        # Hashes like the wrapped value so set/dict lookups with plain values work
        if self.kind in (ValueKind.ARRAY, ValueKind.DOCUMENT):
            raise TypeError(f"unhashable DocumentValue kind: '{self.kind.value}'")
        return hash(self.value)

    def __repr__(self) -> str:
        return f"DocumentValue({self.kind.value}, {self.value!r})"


class Document(Mapping):
    """Immutable mapping of field name to DocumentValue."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping = None):
        self._fields: Dict[str, DocumentValue] = dict(fields or {})

    @classmethod
    def from_bson(cls, raw: Mapping) -> "Document":
        """Convert a document decoded by the driver."""
        return cls({str(key): DocumentValue.from_bson(value) for key, value in raw.items()})

    def __getitem__(self, key: str) -> DocumentValue:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def value(self, key: str, default: Any = None) -> Any:
        """Plain value of a field, or default when the field is missing."""
        field_value = self._fields.get(key)
        if field_value is None:
            return default
        return field_value.unwrap()

    def fields_of_kind(self, kind: ValueKind) -> Tuple[str, ...]:
        """Names of the fields holding values of the given kind."""
        return tuple(name for name, value in self._fields.items() if value.kind is kind)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with driver values (ObjectId, datetime, ...) left intact."""
        return {key: value.unwrap() for key, value in self._fields.items()}

    def to_bson(self) -> Dict[str, Any]:
        """Dict the driver can encode again, with Decimal128 restored."""
        return {key: value.to_bson() for key, value in self._fields.items()}

    def to_json_dict(self) -> Dict[str, Any]:
        """JSON-safe dict using relaxed MongoDB Extended JSON for BSON types."""
        return json.loads(dumps(self.to_bson(), json_options=RELAXED_JSON_OPTIONS))

    def __repr__(self) -> str:
        return f"Document({self._fields!r})"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ValueKind",
    "DocumentValue",
    "Document",
]
