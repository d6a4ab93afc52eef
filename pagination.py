def clamp(value: int, lower: int, upper: int) -> int:
    if upper < lower:
        return lower
    return max(lower, min(value, upper))


def clamp_index(index: int, extent: int) -> int:
    """Clamp into ``[0, extent - 1]``; an empty extent pins to 0."""
    if extent <= 0:
        return 0
    return clamp(index, 0, extent - 1)


def max_offset(content: int, viewport: int) -> int:
    return max(0, content - max(0, viewport))


def scroll_to_show(row: int, scroll: int, visible: int, extent: int) -> int:
    """Smallest adjustment of ``scroll`` that keeps ``row`` on screen."""
    visible = max(1, visible)
    if row < scroll:
        scroll = row
    elif row >= scroll + visible:
        scroll = row - visible + 1
    return clamp(scroll, 0, max_offset(extent, visible))


def page_bounds(scroll: int, visible: int, extent: int) -> tuple[int, int]:
    start = clamp(scroll, 0, max(0, extent))
    end = min(extent, start + max(0, visible))
    return start, end
