from __future__ import annotations

from .errors import ArgumentError


def _parse_page_number(value: str, *, param: str) -> int:
    try:
        page = int(value.strip())
    except ValueError:
        raise ArgumentError(
            f"invalid page number {value!r}",
            code="INPUT_BAD_PAGE_SELECTION",
            detail={"param": param},
        ) from None
    if page <= 0:
        raise ArgumentError("page numbers must be >= 1", code="INPUT_BAD_PAGE_SELECTION", detail={"param": param})
    return page


def parse_page_range(param: str | None) -> tuple[int | None, int | None]:
    """
    Parse "3" or "2-5" into (first, last). Either end of a range may be left
    open ("3-", "-5"); None or "" selects all pages.
    """

    if param is None or param.strip() == "":
        return None, None

    s = "".join(param.split())
    if "-" not in s:
        page = _parse_page_number(s, param=param)
        return page, page

    parts = s.split("-")
    if len(parts) != 2:
        raise ArgumentError(f"invalid page range {param!r}", code="INPUT_BAD_PAGE_SELECTION", detail={"param": param})
    first = _parse_page_number(parts[0], param=param) if parts[0] else None
    last = _parse_page_number(parts[1], param=param) if parts[1] else None
    if first is not None and last is not None and last < first:
        raise ArgumentError(f"invalid page range {param!r}", code="INPUT_BAD_PAGE_SELECTION", detail={"param": param})
    return first, last


def parse_page_set(param: str | None) -> frozenset[int]:
    """
    Parse a comma-separated list of pages and page ranges, e.g. "1-3,5-6,8,10".
    Reversed ranges ("6-5") are accepted and normalized.
    """

    if param is None or param.strip() == "":
        return frozenset()

    pages: set[int] = set()
    for part in param.split(","):
        part = part.strip()
        if not part:
            continue
        bounds = part.split("-")
        if len(bounds) == 1:
            pages.add(_parse_page_number(bounds[0], param=param))
        elif len(bounds) == 2:
            a = _parse_page_number(bounds[0], param=param)
            b = _parse_page_number(bounds[1], param=param)
            pages.update(range(min(a, b), max(a, b) + 1))
        else:
            raise ArgumentError(f"invalid page list entry {part!r}", code="INPUT_BAD_PAGE_SELECTION", detail={"param": param})
    return frozenset(pages)
