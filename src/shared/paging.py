"""Read a Protean DAO query to the end, one page at a time.

DAO queries are capped (Protean applies a default limit), so callers that
need every match page through with ``offset``/``limit`` until a short page
comes back.
"""

from collections.abc import Iterator

PAGE_SIZE = 500


def each_item(query, page_size: int | None = None) -> Iterator:
    page_size = page_size or PAGE_SIZE
    offset = 0
    while True:
        items = query.offset(offset).limit(page_size).all().items
        yield from items
        if len(items) < page_size:
            return
        offset += page_size
