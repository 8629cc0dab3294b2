"""Structural comparison of two schema versions.

Entities are paired by declared name, never by numeric tag or id: a field or
enum value that keeps its number but changes its name is reported as one
removal plus one addition. Sibling sections and items follow the declaration
order of the first schema, with entities only present in the second schema
appended afterwards.
"""

from __future__ import annotations

import logging
import struct

from proto_schema_diff.schema_management.schema_models import (
    EnumDescriptor,
    FieldDescriptor,
    FieldType,
    MessageDescriptor,
    SchemaFile,
    SchemaRegistry,
    ValueKind,
)

from .comparison_models import ItemType, Section, SectionType

_LOGGER = logging.getLogger(__name__)

COMPARE_ALL = "."

_MESSAGE_FIELD_TYPES = (FieldType.MESSAGE, FieldType.GROUP)
_FLOAT_FORMATS = {ValueKind.FLOAT: "<f", ValueKind.DOUBLE: "<d"}


class SchemaComparator:
    """Builds report sections for corresponding entities of two schema versions.

    Field type references are resolved through ``registry_a`` for the first
    version and ``registry_b`` for the second.
    """

    def __init__(self, registry_a: SchemaRegistry, registry_b: SchemaRegistry) -> None:
        self._registry_a = registry_a
        self._registry_b = registry_b
        self._messages_in_progress: set[tuple[str, str]] = set()

    def compare_enums(self, enum_a: EnumDescriptor, enum_b: EnumDescriptor) -> Section:
        section = Section(SectionType.ENUM_COMPARISON, enum_a.full_name, enum_b.full_name)

        for value_a in enum_a.values:
            value_b = enum_b.find_value_by_name(value_a.name)
            if value_b is None:
                section.add_item(ItemType.ENUM_VALUE_REMOVED, value_a.name, "")
                continue
            subsection = section.add_subsection(
                SectionType.ENUM_VALUE_COMPARISON, value_a.name, value_b.name
            )
            if value_a.number != value_b.number:
                subsection.add_item(
                    ItemType.ENUM_VALUE_ID_CHANGED, str(value_a.number), str(value_b.number)
                )

        for value_b in enum_b.values:
            if enum_a.find_value_by_name(value_b.name) is None:
                section.add_item(ItemType.ENUM_VALUE_ADDED, "", value_b.name)

        return section

    def compare_fields(self, field_a: FieldDescriptor, field_b: FieldDescriptor) -> Section:
        section = Section(
            SectionType.MESSAGE_FIELD_COMPARISON, field_a.full_name, field_b.full_name
        )

        if field_a.name != field_b.name:
            section.add_item(ItemType.MESSAGE_FIELD_NAME_CHANGED, field_a.name, field_b.name)

        if field_a.number != field_b.number:
            section.add_item(
                ItemType.MESSAGE_FIELD_ID_CHANGED, str(field_a.number), str(field_b.number)
            )

        if field_a.label != field_b.label:
            section.add_item(ItemType.MESSAGE_FIELD_LABEL_CHANGED)

        if field_a.field_type != field_b.field_type:
            section.add_item(
                ItemType.MESSAGE_FIELD_TYPE_CHANGED,
                field_a.field_type.value,
                field_b.field_type.value,
            )
        elif field_a.field_type == FieldType.ENUM:
            self._compare_referenced_enums(section, field_a, field_b)
        elif field_a.field_type in _MESSAGE_FIELD_TYPES:
            self._compare_referenced_messages(section, field_a, field_b)

        if field_a.value_kind == field_b.value_kind and not self._default_values_equal(
            field_a, field_b
        ):
            section.add_item(ItemType.MESSAGE_FIELD_DEFAULT_VALUE_CHANGED)

        return section

    def compare_messages(
        self, message_a: MessageDescriptor, message_b: MessageDescriptor
    ) -> Section:
        section = Section(
            SectionType.MESSAGE_COMPARISON, message_a.full_name, message_b.full_name
        )
        pair = (message_a.full_name, message_b.full_name)
        if pair in self._messages_in_progress:
            # Recursive type: this pair is already being compared further up.
            return section

        self._messages_in_progress.add(pair)
        try:
            for field_a in message_a.fields:
                field_b = message_b.find_field_by_name(field_a.name)
                if field_b is None:
                    section.add_item(ItemType.MESSAGE_FIELD_REMOVED, field_a.name, "")
                else:
                    section.subsections.append(self.compare_fields(field_a, field_b))

            for field_b in message_b.fields:
                if message_a.find_field_by_name(field_b.name) is None:
                    section.add_item(ItemType.MESSAGE_FIELD_ADDED, "", field_b.name)
        finally:
            self._messages_in_progress.discard(pair)

        return section

    def _compare_referenced_enums(
        self, section: Section, field_a: FieldDescriptor, field_b: FieldDescriptor
    ) -> None:
        enum_a = self._find_enum(self._registry_a, field_a)
        enum_b = self._find_enum(self._registry_b, field_b)
        if enum_a is None or enum_b is None:
            _LOGGER.debug(
                "Skipping unresolved enum reference: %s -> %s", field_a.type_name, field_b.type_name
            )
            return
        if enum_a.full_name != enum_b.full_name:
            section.add_item(
                ItemType.MESSAGE_FIELD_TYPE_CHANGED, enum_a.full_name, enum_b.full_name
            )
        section.subsections.append(self.compare_enums(enum_a, enum_b))

    def _compare_referenced_messages(
        self, section: Section, field_a: FieldDescriptor, field_b: FieldDescriptor
    ) -> None:
        message_a = self._registry_a.find_message_type_by_name(field_a.type_name or "")
        message_b = self._registry_b.find_message_type_by_name(field_b.type_name or "")
        if message_a is None or message_b is None:
            _LOGGER.debug(
                "Skipping unresolved message reference: %s -> %s",
                field_a.type_name,
                field_b.type_name,
            )
            return
        if message_a.full_name != message_b.full_name:
            section.add_item(
                ItemType.MESSAGE_FIELD_TYPE_CHANGED, message_a.full_name, message_b.full_name
            )
        section.subsections.append(self.compare_messages(message_a, message_b))

    def _default_values_equal(self, field_a: FieldDescriptor, field_b: FieldDescriptor) -> bool:
        """Compare field_a's default against field_b's default."""
        if field_a.has_default_value != field_b.has_default_value:
            return False
        if not field_a.has_default_value:
            return True

        kind = field_a.value_kind
        if kind in _FLOAT_FORMATS:
            return _same_float_bits(field_a.default_value, field_b.default_value, kind)
        if kind == ValueKind.ENUM:
            number_a = self._enum_default_number(self._registry_a, field_a)
            number_b = self._enum_default_number(self._registry_b, field_b)
            if number_a is None or number_b is None:
                return field_a.default_value == field_b.default_value
            return number_a == number_b
        if kind == ValueKind.MESSAGE:
            return False
        return field_a.default_value == field_b.default_value

    def _enum_default_number(self, registry: SchemaRegistry, field: FieldDescriptor) -> int | None:
        enum = self._find_enum(registry, field)
        if enum is None:
            return None
        value = enum.find_value_by_name(str(field.default_value))
        return value.number if value is not None else None

    @staticmethod
    def _find_enum(registry: SchemaRegistry, field: FieldDescriptor) -> EnumDescriptor | None:
        if field.type_name is None:
            return None
        return registry.find_enum_type_by_name(field.type_name)


def _same_float_bits(value_a, value_b, kind: ValueKind) -> bool:
    fmt = _FLOAT_FORMATS[kind]
    try:
        return struct.pack(fmt, float(value_a)) == struct.pack(fmt, float(value_b))
    except OverflowError:
        return float(value_a) == float(value_b)


def compare_files(file_a: SchemaFile, file_b: SchemaFile) -> Section:
    """Compare every top-level message and enum of two schema files."""
    comparator = SchemaComparator(file_a.registry, file_b.registry)
    root = Section(SectionType.ROOT)

    for message_a in file_a.message_types:
        message_b = file_b.find_message_type_by_name(message_a.name)
        if message_b is None:
            root.add_item(ItemType.FILE_MESSAGE_REMOVED, message_a.full_name, "")
        else:
            root.subsections.append(comparator.compare_messages(message_a, message_b))

    for message_b in file_b.message_types:
        if file_a.find_message_type_by_name(message_b.name) is None:
            root.add_item(ItemType.FILE_MESSAGE_ADDED, "", message_b.full_name)

    for enum_a in file_a.enum_types:
        enum_b = file_b.find_enum_type_by_name(enum_a.name)
        if enum_b is None:
            root.add_item(ItemType.FILE_ENUM_REMOVED, enum_a.full_name, "")
        else:
            root.subsections.append(comparator.compare_enums(enum_a, enum_b))

    for enum_b in file_b.enum_types:
        if file_a.find_enum_type_by_name(enum_b.name) is None:
            root.add_item(ItemType.FILE_ENUM_ADDED, "", enum_b.full_name)

    return root


def compare_named(file_a: SchemaFile, file_b: SchemaFile, name: str) -> Section:
    """Compare one message or enum resolved by qualified name in both versions."""
    comparator = SchemaComparator(file_a.registry, file_b.registry)
    root = Section(SectionType.ROOT)

    message_a = file_a.registry.find_message_type_by_name(name)
    message_b = file_b.registry.find_message_type_by_name(name)
    enum_a = file_a.registry.find_enum_type_by_name(name)
    enum_b = file_b.registry.find_enum_type_by_name(name)

    if message_a is not None and message_b is not None:
        root.subsections.append(comparator.compare_messages(message_a, message_b))
    elif enum_a is not None and enum_b is not None:
        root.subsections.append(comparator.compare_enums(enum_a, enum_b))
    else:
        _LOGGER.info("Type %s does not resolve to the same kind in both schemas", name)
        root.add_item(ItemType.NAME_MISSING, name, name)

    return root


def compare_schemas(file_a: SchemaFile, file_b: SchemaFile, name: str = COMPARE_ALL) -> Section:
    """Compare two schema versions, either entirely or for one named type."""
    if not name or name == COMPARE_ALL:
        return compare_files(file_a, file_b)
    return compare_named(file_a, file_b, name)
