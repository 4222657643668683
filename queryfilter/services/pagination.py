from __future__ import annotations

import math
from dataclasses import dataclass

from queryfilter.core.config import Settings, settings as default_settings
from queryfilter.schemas.filter_params import PageMeta

TOTAL_COUNT_HEADER = "X-Total-Count"
TOTAL_PAGES_HEADER = "X-Total-Pages"
PAGE_HEADER = "X-Page"
PAGE_SIZE_HEADER = "X-Page-Size"


@dataclass(frozen=True)
class PageWindow:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def paginate(page: int, page_size: int, all_rows: bool = False, app_settings: Settings | None = None) -> PageWindow | None:
    """Normalise page/page_size into a window; None means no limit at all."""
    if all_rows:
        return None
    cfg = app_settings or default_settings
    if page is None or page <= 0:
        page = 1
    if page_size is None or page_size <= 0:
        page_size = cfg.FILTER_DEFAULT_PAGE_SIZE
    elif page_size > cfg.FILTER_MAX_PAGE_SIZE:
        page_size = cfg.FILTER_MAX_PAGE_SIZE
    return PageWindow(page=page, page_size=page_size)


def page_meta(total: int, window: PageWindow) -> PageMeta:
    total = max(int(total or 0), 0)
    return PageMeta(
        total=total,
        total_pages=math.ceil(total / window.page_size),
        page=window.page,
        page_size=window.page_size,
    )


def pagination_headers(meta: PageMeta) -> dict[str, str]:
    return {
        TOTAL_COUNT_HEADER: str(meta.total),
        TOTAL_PAGES_HEADER: str(meta.total_pages),
        PAGE_HEADER: str(meta.page),
        PAGE_SIZE_HEADER: str(meta.page_size),
    }
