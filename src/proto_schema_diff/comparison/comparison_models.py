"""Comparison report entities."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum


class ItemType(str, Enum):
    """Kind of one pointwise structural difference."""

    ENUM_VALUE_ID_CHANGED = "Enum_Value_Id_Changed"
    ENUM_VALUE_ADDED = "Enum_Value_Added"
    ENUM_VALUE_REMOVED = "Enum_Value_Removed"
    MESSAGE_FIELD_NAME_CHANGED = "Message_Field_Name_Changed"
    MESSAGE_FIELD_ID_CHANGED = "Message_Field_Id_Changed"
    MESSAGE_FIELD_LABEL_CHANGED = "Message_Field_Label_Changed"
    MESSAGE_FIELD_TYPE_CHANGED = "Message_Field_Type_Changed"
    MESSAGE_FIELD_DEFAULT_VALUE_CHANGED = "Message_Field_Default_Value_Changed"
    MESSAGE_FIELD_ADDED = "Message_Field_Added"
    MESSAGE_FIELD_REMOVED = "Message_Field_Removed"
    FILE_MESSAGE_ADDED = "File_Message_Added"
    FILE_MESSAGE_REMOVED = "File_Message_Removed"
    FILE_ENUM_ADDED = "File_Enum_Added"
    FILE_ENUM_REMOVED = "File_Enum_Removed"
    NAME_MISSING = "Name_Missing"

    @property
    def label(self) -> str:
        """Return the human-readable label used in rendered reports."""
        return _ITEM_LABELS[self]


_ITEM_LABELS: Mapping[ItemType, str] = {
    ItemType.ENUM_VALUE_ID_CHANGED: "Value ID changed",
    ItemType.ENUM_VALUE_ADDED: "Value added",
    ItemType.ENUM_VALUE_REMOVED: "Value removed",
    ItemType.MESSAGE_FIELD_NAME_CHANGED: "Name changed",
    ItemType.MESSAGE_FIELD_ID_CHANGED: "ID changed",
    ItemType.MESSAGE_FIELD_LABEL_CHANGED: "Label changed",
    ItemType.MESSAGE_FIELD_TYPE_CHANGED: "Type changed",
    ItemType.MESSAGE_FIELD_DEFAULT_VALUE_CHANGED: "Default value changed",
    ItemType.MESSAGE_FIELD_ADDED: "Field added",
    ItemType.MESSAGE_FIELD_REMOVED: "Field removed",
    ItemType.FILE_MESSAGE_ADDED: "Message added",
    ItemType.FILE_MESSAGE_REMOVED: "Message removed",
    ItemType.FILE_ENUM_ADDED: "Enum added",
    ItemType.FILE_ENUM_REMOVED: "Enum removed",
    ItemType.NAME_MISSING: "Name missing",
}


class SectionType(str, Enum):
    """Kind of entity pair a report section describes."""

    ROOT = "Root"
    MESSAGE_COMPARISON = "Message_Comparison"
    MESSAGE_FIELD_COMPARISON = "Message_Field_Comparison"
    ENUM_COMPARISON = "Enum_Comparison"
    ENUM_VALUE_COMPARISON = "Enum_Value_Comparison"

    @property
    def heading(self) -> str:
        """Return the heading prefix used in rendered reports."""
        return _SECTION_HEADINGS[self]


_SECTION_HEADINGS: Mapping[SectionType, str] = {
    SectionType.ROOT: "/",
    SectionType.MESSAGE_COMPARISON: "Comparing messages",
    SectionType.MESSAGE_FIELD_COMPARISON: "Comparing message fields",
    SectionType.ENUM_COMPARISON: "Comparing enums",
    SectionType.ENUM_VALUE_COMPARISON: "Comparing enum values",
}

_INDENT = "  "


@dataclass(frozen=True)
class Item:
    """One atomic structural difference.

    ``before`` and ``after`` carry kind-specific text: old and new ids for id
    changes, the entity name on the present side for additions and removals,
    and empty strings for kinds that carry no payload.
    """

    kind: ItemType
    before: str = ""
    after: str = ""

    def message(self) -> str:
        return f"{self.kind.label}: {self.before} -> {self.after}"


@dataclass
class Section:
    """One node of the comparison tree pairing two corresponding entities."""

    kind: SectionType
    name_a: str = ""
    name_b: str = ""
    subsections: list[Section] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)

    def add_subsection(self, kind: SectionType, name_a: str, name_b: str) -> Section:
        """Append and return a new child section."""
        subsection = Section(kind=kind, name_a=name_a, name_b=name_b)
        self.subsections.append(subsection)
        return subsection

    def add_item(self, kind: ItemType, before: str = "", after: str = "") -> Item:
        item = Item(kind=kind, before=before, after=after)
        self.items.append(item)
        return item

    def is_empty(self) -> bool:
        return not self.subsections and not self.items

    def trim(self) -> None:
        """Remove children that carry no items anywhere in their subtree."""
        kept: list[Section] = []
        for subsection in self.subsections:
            subsection.trim()
            if not subsection.is_empty():
                kept.append(subsection)
        self.subsections = kept

    def message(self) -> str:
        if self.kind == SectionType.ROOT:
            return self.kind.heading
        return f"{self.kind.heading}: {self.name_a} -> {self.name_b}"

    def render_lines(self, level: int = 0) -> list[str]:
        """Return the pre-order, depth-indented dump of this subtree."""
        lines = [f"{_INDENT * level}{self.message()}"]
        prefix = _INDENT * (level + 1)
        lines.extend(f"{prefix}* {item.message()}" for item in self.items)
        for subsection in self.subsections:
            lines.extend(subsection.render_lines(level + 1))
        return lines

    def render(self, level: int = 0) -> str:
        return "\n".join(self.render_lines(level))

    def iter_items(
        self, path: tuple[Section, ...] = ()
    ) -> Iterator[tuple[tuple[Section, ...], Item]]:
        """Yield ``(section_path, item)`` pairs in render order."""
        current_path = (*path, self)
        for item in self.items:
            yield current_path, item
        for subsection in self.subsections:
            yield from subsection.iter_items(current_path)


def count_items_by_type(section: Section) -> dict[ItemType, int]:
    """Count report items per kind, in ``ItemType`` declaration order."""
    counts = Counter(item.kind for _, item in section.iter_items())
    return {kind: counts[kind] for kind in ItemType if counts[kind]}
