"""Data types for the multi-select picker lists."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Candidate:
    """One entry of a picker's source snapshot (a user or a project).

    Attributes:
        id: Entity identifier
        display_text: Text shown in the picker and matched by its filter
    """

    id: int
    display_text: str


@dataclass(frozen=True)
class SelectableItem:
    """A candidate with its selected flag derived from the working set.

    Attributes:
        id: Entity identifier
        display_text: Text shown in the picker
        selected: Whether the ID is in the picker's working set
    """

    id: int
    display_text: str
    selected: bool


@dataclass(frozen=True)
class SelectionList:
    """Ordered picker view produced by build_selection_list.

    Attributes:
        items: Selected items first, then unselected items matching the filter
        cursor: Cursor position into items, -1 when items is empty
        source_indices: For each position in items, the index of that item
            in the source collection
    """

    items: tuple[SelectableItem, ...]
    cursor: int
    source_indices: tuple[int, ...]

    def source_index(self, position: int) -> int | None:
        """Map a position in the ordered view back to the source collection.

        Args:
            position: Index into items

        Returns:
            Source index, or None if position is out of range
        """
        if position < 0 or position >= len(self.source_indices):
            return None
        return self.source_indices[position]
