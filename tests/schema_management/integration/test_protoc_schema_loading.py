"""Schema loading integration tests against the bundled protoc."""

from __future__ import annotations

from pathlib import Path

import pytest
from proto_schema_diff.comparison import Item, ItemType, compare_schemas
from proto_schema_diff.schema_management import SchemaError, load_schema_file

pytest.importorskip("grpc_tools")

_COMMON_PROTO = """
syntax = "proto2";
package shop;

enum Currency {
  EUR = 0;
  USD = 1;
}
"""

_ORDER_PROTO_V1 = """
syntax = "proto2";
package shop;

import "common.proto";
import "google/protobuf/timestamp.proto";

message Order {
  required int64 id = 1;
  optional Currency currency = 2 [default = USD];
  repeated Line lines = 3;
  optional google.protobuf.Timestamp created = 4;

  message Line {
    optional string sku = 1;
    optional uint32 quantity = 2 [default = 1];
  }
}
"""

_ORDER_PROTO_V2 = """
syntax = "proto2";
package shop;

import "common.proto";
import "google/protobuf/timestamp.proto";

message Order {
  required int64 id = 1;
  optional Currency currency = 2 [default = EUR];
  repeated Line lines = 3;
  optional google.protobuf.Timestamp created = 5;

  message Line {
    optional string sku = 1;
    optional uint32 quantity = 2 [default = 2];
  }
}

message Refund {
  optional int64 order_id = 1;
}
"""


def _write_tree(root: Path, order_text: str) -> Path:
    root.mkdir(parents=True)
    (root / "common.proto").write_text(_COMMON_PROTO, encoding="utf-8")
    (root / "order.proto").write_text(order_text, encoding="utf-8")
    return root


def test_protoc_sources_load_with_imports_and_compare(tmp_path: Path) -> None:
    root_a = _write_tree(tmp_path / "v1", _ORDER_PROTO_V1)
    root_b = _write_tree(tmp_path / "v2", _ORDER_PROTO_V2)

    schema_a = load_schema_file("order.proto", root_a)
    schema_b = load_schema_file("order.proto", root_b)
    report = compare_schemas(schema_a, schema_b)
    report.trim()

    assert schema_a.registry.find_enum_type_by_name("shop.Currency") is not None
    assert schema_a.registry.find_message_type_by_name("google.protobuf.Timestamp") is not None
    assert report.items == [Item(ItemType.FILE_MESSAGE_ADDED, "", "shop.Refund")]
    reported = [(path[-1].name_a, item) for path, item in report.iter_items()]
    assert ("shop.Order.created", Item(ItemType.MESSAGE_FIELD_ID_CHANGED, "4", "5")) in reported
    assert ("shop.Order.currency", Item(ItemType.MESSAGE_FIELD_DEFAULT_VALUE_CHANGED)) in reported
    assert (
        "shop.Order.Line.quantity",
        Item(ItemType.MESSAGE_FIELD_DEFAULT_VALUE_CHANGED),
    ) in reported


def test_protoc_parse_failures_carry_diagnostics(tmp_path: Path) -> None:
    (tmp_path / "broken.proto").write_text(
        'syntax = "proto2";\nmessage Broken {\n  optional int32 x = 1\n}\n', encoding="utf-8"
    )

    with pytest.raises(SchemaError) as excinfo:
        load_schema_file("broken.proto", tmp_path)

    assert excinfo.value.diagnostics
    first = excinfo.value.diagnostics[0]
    assert first.filename == "broken.proto"
    assert first.line > 0


def test_protoc_missing_file_is_reported_against_requested_name(tmp_path: Path) -> None:
    with pytest.raises(SchemaError) as excinfo:
        load_schema_file("missing.proto", tmp_path)

    assert excinfo.value.diagnostics
    assert {item.filename for item in excinfo.value.diagnostics} == {"missing.proto"}
