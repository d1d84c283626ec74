"""Page arithmetic for 0-based paginated listings."""

import math

DEFAULT_PAGE_SIZE = 50
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


def get_page_offset(page: int, page_size: int) -> int:
    return page * page_size


def get_total_pages(total_count: int, page_size: int) -> int:
    """Return the number of pages needed for ``total_count`` items."""
    return math.ceil(total_count / page_size) if page_size > 0 else 0


def get_next_page(page: int, total_pages: int) -> int | None:
    """Return the following page index, or None on the last page."""
    return None if page + 1 >= total_pages else page + 1
