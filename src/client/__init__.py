"""
Client-side list and optimistic-update controllers.
"""

from .incremental_list import IncrementalList, InvalidListTransitionError, ListState, PageResult
from .optimistic import (
    InvalidOptimisticTransitionError,
    OptimisticState,
    OptimisticToggle,
    OptimisticUpdate,
)

__all__ = [
    "IncrementalList",
    "InvalidListTransitionError",
    "ListState",
    "PageResult",
    "InvalidOptimisticTransitionError",
    "OptimisticState",
    "OptimisticToggle",
    "OptimisticUpdate",
]
