"""Schema loading service backed by protoc descriptor sets."""

from __future__ import annotations

import logging
import re
import subprocess
import sys
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

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

_LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[tuple[str, ...]], subprocess.CompletedProcess]

_LOCATED_DIAGNOSTIC = re.compile(
    r"^(?P<filename>[^:]+):(?P<line>\d+):(?P<column>\d+):\s*(?P<message>.*)$"
)
_FILE_DIAGNOSTIC = re.compile(r"^(?P<filename>[^\s:]+\.proto):\s*(?P<message>.*)$")
_WARNING_PREFIX = "warning:"


@dataclass(frozen=True)
class SchemaDiagnostic:
    """One problem reported while loading a schema."""

    filename: str
    line: int
    column: int
    message: str
    severity: str = "error"

    def __str__(self) -> str:
        return f"{self.filename}@{self.line},{self.column}: {self.message}"


class SchemaError(Exception):
    """Raised when a schema cannot be loaded or resolved."""

    def __init__(self, message: str, diagnostics: Sequence[SchemaDiagnostic] = ()) -> None:
        super().__init__(message)
        self.diagnostics = tuple(diagnostics)


def load_schema_file(
    file_path: Path | str,
    root_dir: Path | str,
    *,
    run_command: CommandRunner | None = None,
) -> SchemaFile:
    """Load one schema version.

    Args:
      file_path: Schema file relative to ``root_dir``. ``.proto`` sources are
        compiled with protoc; any other suffix is read as a serialized
        ``FileDescriptorSet``.
      root_dir: Import root used to resolve the file and its imports.
      run_command: Optional override for executing protoc.

    Returns:
      The resolved schema file with a registry of every reachable type.

    Raises:
      SchemaError: If compilation fails or the descriptor set is unreadable.
    """
    root = Path(root_dir)
    relative = Path(file_path)
    if relative.suffix == ".proto":
        descriptor_set = _compile_descriptor_set(relative, root, run_command or _run_command)
        return build_schema_file(descriptor_set, relative.as_posix())

    set_path = relative if relative.is_absolute() else root / relative
    _LOGGER.debug("Reading descriptor set %s", set_path)
    try:
        payload = set_path.read_bytes()
    except OSError as exc:
        raise SchemaError(f"Failed to read descriptor set {set_path}: {exc}") from exc
    descriptor_set = descriptor_pb2.FileDescriptorSet()
    try:
        descriptor_set.ParseFromString(payload)
    except DecodeError as exc:
        raise SchemaError(f"Invalid descriptor set {set_path}: {exc}") from exc
    return build_schema_file(descriptor_set)


def build_schema_file(
    descriptor_set: descriptor_pb2.FileDescriptorSet, file_name: str | None = None
) -> SchemaFile:
    """Convert a descriptor set into the schema model.

    The registry covers every file of the set. The returned top-level entities
    belong to ``file_name``, or to the last file of the set when no name is
    given (protoc emits dependencies before the files that import them).
    """
    if not descriptor_set.file:
        raise SchemaError("Descriptor set does not contain any files.")

    target = descriptor_set.file[-1]
    if file_name is not None:
        matches = [proto for proto in descriptor_set.file if proto.name == file_name]
        if not matches:
            raise SchemaError(f"Descriptor set does not contain {file_name}.")
        target = matches[0]

    messages: list[MessageDescriptor] = []
    enums: list[EnumDescriptor] = []
    top_level: dict[str, tuple[tuple[MessageDescriptor, ...], tuple[EnumDescriptor, ...]]] = {}
    for file_proto in descriptor_set.file:
        file_messages = tuple(
            _collect_message(proto, _qualify(file_proto.package, proto.name), messages, enums)
            for proto in file_proto.message_type
        )
        file_enums = tuple(
            _convert_enum(proto, _qualify(file_proto.package, proto.name))
            for proto in file_proto.enum_type
        )
        enums.extend(file_enums)
        top_level[file_proto.name] = (file_messages, file_enums)

    try:
        registry = SchemaRegistry.from_descriptors(messages=messages, enums=enums)
    except ValueError as exc:
        raise SchemaError(str(exc)) from exc

    message_types, enum_types = top_level[target.name]
    _LOGGER.info(
        "Loaded schema %s: %d messages, %d enums (%d registered types)",
        target.name,
        len(message_types),
        len(enum_types),
        len(registry.messages) + len(registry.enums),
    )
    return SchemaFile(
        name=target.name,
        package=target.package,
        message_types=message_types,
        enum_types=enum_types,
        registry=registry,
    )


def parse_protoc_diagnostics(
    text: str, root_dir: Path | str | None = None, file_path: str = ""
) -> tuple[SchemaDiagnostic, ...]:
    """Parse protoc stderr output into diagnostics.

    File names under ``root_dir`` are reported relative to it, the way they
    were imported. Lines without a file location are attributed to
    ``file_path`` and kept whole.
    """
    diagnostics: list[SchemaDiagnostic] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        located = _LOCATED_DIAGNOSTIC.match(line)
        if located:
            diagnostics.append(
                _diagnostic(
                    _import_name(located["filename"], root_dir),
                    int(located["line"]),
                    int(located["column"]),
                    located["message"],
                )
            )
            continue
        file_only = _FILE_DIAGNOSTIC.match(line)
        if file_only:
            filename = _import_name(file_only["filename"], root_dir)
            diagnostics.append(_diagnostic(filename, 0, 0, file_only["message"]))
            continue
        diagnostics.append(_diagnostic(file_path, 0, 0, line))
    return tuple(diagnostics)


def _import_name(filename: str, root_dir: Path | str | None) -> str:
    if root_dir is None:
        return filename
    reported = Path(filename)
    root = Path(root_dir)
    candidates = [root]
    if reported.is_absolute():
        reported = reported.resolve()
        candidates.append(root.resolve())
    for candidate in candidates:
        try:
            return reported.relative_to(candidate).as_posix()
        except ValueError:
            continue
    return filename


def _diagnostic(filename: str, line: int, column: int, message: str) -> SchemaDiagnostic:
    if message.lower().startswith(_WARNING_PREFIX):
        return SchemaDiagnostic(
            filename=filename,
            line=line,
            column=column,
            message=message[len(_WARNING_PREFIX) :].strip(),
            severity="warning",
        )
    return SchemaDiagnostic(filename=filename, line=line, column=column, message=message)


def _compile_descriptor_set(
    file_path: Path, root_dir: Path, run_command: CommandRunner
) -> descriptor_pb2.FileDescriptorSet:
    with tempfile.TemporaryDirectory(prefix="proto-schema-diff-") as temp_dir:
        output = Path(temp_dir) / "descriptor_set.pb"
        command = (
            sys.executable,
            "-m",
            "grpc_tools.protoc",
            f"-I{root_dir}",
            f"-I{_well_known_include_dir()}",
            "--include_imports",
            f"--descriptor_set_out={output}",
            file_path.as_posix(),
        )
        _LOGGER.debug("Running protoc: %s", " ".join(command))
        try:
            completed = run_command(command)
        except OSError as exc:
            raise SchemaError(f"Failed to run protoc: {exc}") from exc

        diagnostics = parse_protoc_diagnostics(
            completed.stderr or "", root_dir, file_path.as_posix()
        )
        for diagnostic in diagnostics:
            if diagnostic.severity == "warning":
                _LOGGER.warning("%s", diagnostic)
        if completed.returncode != 0 or not output.exists():
            raise SchemaError(
                f"Failed to load schema {file_path} from {root_dir}.",
                diagnostics=[item for item in diagnostics if item.severity == "error"],
            )

        descriptor_set = descriptor_pb2.FileDescriptorSet()
        descriptor_set.ParseFromString(output.read_bytes())
        return descriptor_set


def _run_command(command: tuple[str, ...]) -> subprocess.CompletedProcess:
    return subprocess.run(command, capture_output=True, text=True, check=False)


def _well_known_include_dir() -> Path:
    return Path(str(resources.files("grpc_tools") / "_proto"))


def _collect_message(
    proto: descriptor_pb2.DescriptorProto,
    full_name: str,
    messages: list[MessageDescriptor],
    enums: list[EnumDescriptor],
) -> MessageDescriptor:
    for nested in proto.nested_type:
        _collect_message(nested, f"{full_name}.{nested.name}", messages, enums)
    for nested_enum in proto.enum_type:
        enums.append(_convert_enum(nested_enum, f"{full_name}.{nested_enum.name}"))

    message = MessageDescriptor(
        name=proto.name,
        full_name=full_name,
        fields=tuple(_convert_field(field, full_name) for field in proto.field),
    )
    messages.append(message)
    return message


def _convert_enum(proto: descriptor_pb2.EnumDescriptorProto, full_name: str) -> EnumDescriptor:
    return EnumDescriptor(
        name=proto.name,
        full_name=full_name,
        values=tuple(
            EnumValueDescriptor(name=value.name, number=value.number) for value in proto.value
        ),
    )


def _convert_field(
    proto: descriptor_pb2.FieldDescriptorProto, message_name: str
) -> FieldDescriptor:
    type_label = descriptor_pb2.FieldDescriptorProto.Type.Name(proto.type)
    label_name = descriptor_pb2.FieldDescriptorProto.Label.Name(proto.label)
    field_type = FieldType[type_label.removeprefix("TYPE_")]
    type_name = proto.type_name.lstrip(".") if proto.type_name else None
    default_value = (
        _parse_default_value(proto.default_value, field_type.value_kind, proto.name)
        if proto.HasField("default_value")
        else None
    )
    return FieldDescriptor(
        name=proto.name,
        full_name=f"{message_name}.{proto.name}",
        number=proto.number,
        label=FieldLabel[label_name.removeprefix("LABEL_")],
        field_type=field_type,
        type_name=type_name,
        default_value=default_value,
    )


def _parse_default_value(text: str, kind: ValueKind, field_name: str) -> int | float | bool | str:
    try:
        if kind in (ValueKind.INT32, ValueKind.INT64, ValueKind.UINT32, ValueKind.UINT64):
            return int(text, 0)
        if kind in (ValueKind.FLOAT, ValueKind.DOUBLE):
            return float(text)
    except ValueError as exc:
        raise SchemaError(f"Invalid default value for field {field_name}: {text!r}") from exc
    if kind == ValueKind.BOOL:
        return text == "true"
    return text


def _qualify(package: str, name: str) -> str:
    return f"{package}.{name}" if package else name
