"""Pure logic for the visible slice of the issue list and picker lists."""

from dataclasses import dataclass

LINES_PER_ISSUE = 4


@dataclass(frozen=True)
class PaneWindow:
    """Half-open range [start, end) of visible list positions."""

    start: int
    end: int

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.end

    def __len__(self) -> int:
        return self.end - self.start


def compute_window(total: int, selected_index: int, window_size: int) -> PaneWindow:
    """Compute the visible window that keeps the selection centered.

    The selection sits at the top of the window near the start of the list,
    at the bottom near the end, and in the middle otherwise.

    Args:
        total: Number of items in the filtered list
        selected_index: Position of the selected item
        window_size: Number of items that fit; values below 1 count as 1

    Returns:
        PaneWindow with 0 <= start <= end <= total

    Example:
        >>> compute_window(50, 25, 10)
        PaneWindow(start=20, end=30)
    """
    size = max(window_size, 1)
    half = size // 2

    if selected_index < half:
        start = 0
    elif selected_index >= total - half:
        start = max(0, total - size)
    else:
        start = selected_index - half

    return PaneWindow(start=start, end=min(total, start + size))


def picker_window(total: int, cursor: int, max_visible: int) -> PaneWindow:
    """Compute the visible slice of a picker list centered on the cursor.

    Args:
        total: Number of items in the picker list
        cursor: Cursor position, -1 for an empty list
        max_visible: Maximum rows the picker shows

    Returns:
        PaneWindow covering at most max_visible items
    """
    size = min(max(max_visible, 1), total)
    if total <= size:
        return PaneWindow(start=0, end=total)

    start = max(cursor - size // 2, 0)
    end = start + size
    if end > total:
        end = total
        start = max(end - size, 0)
    return PaneWindow(start=start, end=end)


def banner_line_count(filter_line_count: int) -> int:
    """Lines taken by the filter banner: one per filter plus a separator and a blank line."""
    if filter_line_count <= 0:
        return 0
    return filter_line_count + 2


def issues_per_pane(pane_height: int, banner_lines: int, lines_per_issue: int = LINES_PER_ISSUE) -> int:
    """Number of whole issues that fit in the list pane.

    The last issue does not need its trailing blank line, hence the +1.

    Args:
        pane_height: Content lines available in the list pane
        banner_lines: Lines consumed by the filter banner
        lines_per_issue: Lines per issue including the blank separator

    Returns:
        Window size, at least 1
    """
    visible_lines = pane_height - banner_lines
    return max((visible_lines + 1) // lines_per_issue, 1)
