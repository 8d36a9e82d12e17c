"""Paginated result container returned by repository list queries."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Page:
    """One page of results with total count and page metadata."""

    items: list[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 15

    @property
    def last_page(self) -> int:
        if self.total <= 0:
            return 1
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def has_more(self) -> bool:
        return self.page < self.last_page
