# src/pagination.py
"""
Page/page-size contract shared by every paginated read.

Pages are 1-based. Both values are coerced with max(1, floor(x)), so 0,
negative and fractional inputs still yield a valid page.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

Number = Union[int, float]


def coerce_positive(value: Optional[Number], default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return max(1, math.floor(value))


def has_next_page(current_page: int, page_size: int, total_count: int) -> bool:
    return current_page * page_size < total_count


@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int

    @classmethod
    def normalize(
        cls,
        page: Optional[Number] = None,
        page_size: Optional[Number] = None,
        default_page_size: int = 10,
    ) -> "PageRequest":
        return cls(
            page=coerce_positive(page, 1),
            page_size=coerce_positive(page_size, default_page_size),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def has_next(self, total_count: int) -> bool:
        return has_next_page(self.page, self.page_size, total_count)


__all__ = ["PageRequest", "coerce_positive", "has_next_page"]
