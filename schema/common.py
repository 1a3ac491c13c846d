from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


# ------------------------------------------------------------
# Envelope returned by every server action
# ------------------------------------------------------------
class ActionResult(BaseModel):
    success: bool
    error: Optional[str] = None


class PageEnvelope(ActionResult):
    total_count: int = 0
    current_page: int = 1
    page_size: int
    has_next_page: bool = False


__all__ = ["ActionResult", "PageEnvelope"]
