"""
Pagination Cursor.

The cursor is an immutable (page, y) value threaded through every drawing
call. `Paginator` decides when a block no longer fits and opens a new
page through the `on_new_page` callback, which draws the page decoration.
"""
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from .styles import LayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cursor:
    page: int = 1
    y: float = 0.0


class Paginator:
    """Page-break rule over a fixed usable height."""

    def __init__(self, config: Optional[LayoutConfig] = None,
                 on_new_page: Optional[Callable[[int], None]] = None):
        self.config = config or LayoutConfig()
        self.on_new_page = on_new_page

    @property
    def content_start(self) -> float:
        return self.config.content_start_y

    @property
    def usable_height(self) -> float:
        return self.config.usable_height

    def _open_page(self, page: int) -> Cursor:
        if self.on_new_page is not None:
            self.on_new_page(page)
        return Cursor(page=page, y=self.content_start)

    def start(self) -> Cursor:
        """Open page 1 and return the cursor at the content start."""
        return self._open_page(1)

    def fits(self, cursor: Cursor, height: float) -> bool:
        return cursor.y + height <= self.usable_height

    def ensure_space(self, cursor: Cursor, height: float) -> Cursor:
        """Return a cursor where `height` mm fit, breaking the page if needed.

        A block taller than a whole page is left at the top of the current
        page when that page is still empty; breaking again would only add
        blank pages.
        """
        if self.fits(cursor, height):
            return cursor
        if cursor.y <= self.content_start:
            logger.warning(
                f"Block of {height:.1f} mm exceeds page capacity "
                f"({self.config.page_capacity:.1f} mm) on page {cursor.page}"
            )
            return cursor
        return self.new_page(cursor)

    def new_page(self, cursor: Cursor) -> Cursor:
        return self._open_page(cursor.page + 1)

    def advance(self, cursor: Cursor, gap: float) -> Cursor:
        return replace(cursor, y=cursor.y + gap)
