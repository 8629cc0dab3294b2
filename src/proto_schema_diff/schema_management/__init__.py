"""Schema management exports."""

from .schema_loading import (
    SchemaDiagnostic,
    SchemaError,
    build_schema_file,
    load_schema_file,
    parse_protoc_diagnostics,
)
from .schema_models import (
    EnumDescriptor,
    EnumValueDescriptor,
    FieldDescriptor,
    FieldLabel,
    FieldType,
    MessageDescriptor,
    SchemaFile,
    SchemaRegistry,
    ValueKind,
)

__all__ = [
    "EnumDescriptor",
    "EnumValueDescriptor",
    "FieldDescriptor",
    "FieldLabel",
    "FieldType",
    "MessageDescriptor",
    "SchemaDiagnostic",
    "SchemaError",
    "SchemaFile",
    "SchemaRegistry",
    "ValueKind",
    "build_schema_file",
    "load_schema_file",
    "parse_protoc_diagnostics",
]
