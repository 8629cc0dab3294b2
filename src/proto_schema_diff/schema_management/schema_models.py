"""Schema management entities."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum


class FieldLabel(str, Enum):
    """Cardinality label declared on a message field."""

    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"


class ValueKind(str, Enum):
    """In-memory representation shared by one or more field types."""

    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    DOUBLE = "double"
    FLOAT = "float"
    BOOL = "bool"
    ENUM = "enum"
    STRING = "string"
    MESSAGE = "message"


class FieldType(str, Enum):
    """Declared protobuf field type."""

    DOUBLE = "double"
    FLOAT = "float"
    INT64 = "int64"
    UINT64 = "uint64"
    INT32 = "int32"
    FIXED64 = "fixed64"
    FIXED32 = "fixed32"
    BOOL = "bool"
    STRING = "string"
    GROUP = "group"
    MESSAGE = "message"
    BYTES = "bytes"
    UINT32 = "uint32"
    ENUM = "enum"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    SINT32 = "sint32"
    SINT64 = "sint64"

    @property
    def value_kind(self) -> ValueKind:
        """Return the value representation used for this field type."""
        return _VALUE_KIND_BY_FIELD_TYPE[self]


_VALUE_KIND_BY_FIELD_TYPE: Mapping[FieldType, ValueKind] = {
    FieldType.DOUBLE: ValueKind.DOUBLE,
    FieldType.FLOAT: ValueKind.FLOAT,
    FieldType.INT64: ValueKind.INT64,
    FieldType.UINT64: ValueKind.UINT64,
    FieldType.INT32: ValueKind.INT32,
    FieldType.FIXED64: ValueKind.UINT64,
    FieldType.FIXED32: ValueKind.UINT32,
    FieldType.BOOL: ValueKind.BOOL,
    FieldType.STRING: ValueKind.STRING,
    FieldType.GROUP: ValueKind.MESSAGE,
    FieldType.MESSAGE: ValueKind.MESSAGE,
    FieldType.BYTES: ValueKind.STRING,
    FieldType.UINT32: ValueKind.UINT32,
    FieldType.ENUM: ValueKind.ENUM,
    FieldType.SFIXED32: ValueKind.INT32,
    FieldType.SFIXED64: ValueKind.INT64,
    FieldType.SINT32: ValueKind.INT32,
    FieldType.SINT64: ValueKind.INT64,
}


@dataclass(frozen=True)
class FieldDescriptor:  # pylint: disable=too-many-instance-attributes
    """One message field.

    ``type_name`` holds the qualified name of the referenced enum or message
    for ``enum``/``message``/``group`` fields and is resolved through the
    registry of the schema version the field belongs to. ``default_value`` is
    typed per value kind; enum defaults hold the referenced value name.
    """

    name: str
    full_name: str
    number: int
    label: FieldLabel
    field_type: FieldType
    type_name: str | None = None
    default_value: int | float | bool | str | None = None

    @property
    def value_kind(self) -> ValueKind:
        return self.field_type.value_kind

    @property
    def has_default_value(self) -> bool:
        return self.default_value is not None


@dataclass(frozen=True)
class MessageDescriptor:
    """Message type with its fields in declaration order."""

    name: str
    full_name: str
    fields: tuple[FieldDescriptor, ...] = ()

    def find_field_by_name(self, name: str) -> FieldDescriptor | None:
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        return None


@dataclass(frozen=True)
class EnumValueDescriptor:
    """Named numeric enum value."""

    name: str
    number: int


@dataclass(frozen=True)
class EnumDescriptor:
    """Enum type with its values in declaration order."""

    name: str
    full_name: str
    values: tuple[EnumValueDescriptor, ...] = ()

    def find_value_by_name(self, name: str) -> EnumValueDescriptor | None:
        for candidate in self.values:
            if candidate.name == name:
                return candidate
        return None


@dataclass(frozen=True)
class SchemaRegistry:
    """Every message and enum of one schema version keyed by qualified name."""

    messages: Mapping[str, MessageDescriptor] = field(default_factory=dict)
    enums: Mapping[str, EnumDescriptor] = field(default_factory=dict)

    @classmethod
    def from_descriptors(
        cls,
        messages: Iterable[MessageDescriptor] = (),
        enums: Iterable[EnumDescriptor] = (),
    ) -> SchemaRegistry:
        """Build a registry, rejecting duplicate qualified names."""
        message_index: dict[str, MessageDescriptor] = {}
        enum_index: dict[str, EnumDescriptor] = {}
        for message in messages:
            _register(message.full_name, message, message_index, enum_index)
        for enum in enums:
            _register(enum.full_name, enum, enum_index, message_index)
        return cls(messages=message_index, enums=enum_index)

    def find_message_type_by_name(self, full_name: str) -> MessageDescriptor | None:
        return self.messages.get(full_name)

    def find_enum_type_by_name(self, full_name: str) -> EnumDescriptor | None:
        return self.enums.get(full_name)


def _register(full_name: str, descriptor, index: dict, other_index: Mapping) -> None:
    if full_name in index or full_name in other_index:
        raise ValueError(f"Duplicate type name in schema registry: {full_name}")
    index[full_name] = descriptor


@dataclass(frozen=True)
class SchemaFile:
    """Top-level messages and enums of one schema file plus its registry."""

    name: str
    package: str = ""
    message_types: tuple[MessageDescriptor, ...] = ()
    enum_types: tuple[EnumDescriptor, ...] = ()
    registry: SchemaRegistry = field(default_factory=SchemaRegistry)

    def find_message_type_by_name(self, name: str) -> MessageDescriptor | None:
        """Return the top-level message declared with the unqualified ``name``."""
        for message in self.message_types:
            if message.name == name:
                return message
        return None

    def find_enum_type_by_name(self, name: str) -> EnumDescriptor | None:
        """Return the top-level enum declared with the unqualified ``name``."""
        for enum in self.enum_types:
            if enum.name == name:
                return enum
        return None
