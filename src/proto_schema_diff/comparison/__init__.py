"""Schema comparison exports."""

from .comparator import (
    COMPARE_ALL,
    SchemaComparator,
    compare_files,
    compare_named,
    compare_schemas,
)
from .comparison_models import Item, ItemType, Section, SectionType, count_items_by_type

__all__ = [
    "COMPARE_ALL",
    "Item",
    "ItemType",
    "SchemaComparator",
    "Section",
    "SectionType",
    "compare_files",
    "compare_named",
    "compare_schemas",
    "count_items_by_type",
]
