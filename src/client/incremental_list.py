"""
Incremental List Controller

Holds the accumulated items of a paginated listing (feed, explore) and
drives page fetches from filter changes, a scroll sentinel or a
"load more" button.

    IDLE -> LOADING_INITIAL -> LOADED <-> LOADING_MORE
    LOADING_INITIAL | LOADING_MORE -> ERROR
    LOADED | ERROR -> LOADING_INITIAL    (filter change, refresh, retry)
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from src.client.optimistic import OptimisticUpdate, envelope_outcome

logger = logging.getLogger(__name__)

FETCH_ERROR = "Failed to load items."


class ListState(str, Enum):
    IDLE = "idle"
    LOADING_INITIAL = "loading_initial"
    LOADED = "loaded"
    LOADING_MORE = "loading_more"
    ERROR = "error"


class InvalidListTransitionError(Exception):
    """Raised when the list is moved to a state it cannot reach."""
    pass


def _field(source: Any, name: str, default=None):
    if isinstance(source, dict):
        return source.get(name, default)
    return getattr(source, name, default)


def item_id(item: Any) -> Any:
    return _field(item, "id")


@dataclass
class PageResult:
    success: bool
    items: List[Any] = field(default_factory=list)
    current_page: int = 1
    has_next_page: bool = False
    total_count: int = 0
    error: Optional[str] = None

    @classmethod
    def from_envelope(cls, envelope: Any, items_field: str = "items") -> "PageResult":
        """Read a paginated envelope (model or dict) whose list lives in `items_field`."""
        success, error = envelope_outcome(envelope)
        return cls(
            success=success,
            items=list(_field(envelope, items_field) or []),
            current_page=_field(envelope, "current_page", 1) or 1,
            has_next_page=bool(_field(envelope, "has_next_page", False)),
            total_count=_field(envelope, "total_count", 0) or 0,
            error=error,
        )


class IncrementalList:
    """
    `fetch_page(page, page_size, filters)` returns a paginated envelope.
    Calls are synchronous; the state is LOADING_* for the duration of a call.
    """

    TRANSITIONS: Dict[ListState, Set[ListState]] = {
        ListState.IDLE: {ListState.LOADING_INITIAL},
        ListState.LOADING_INITIAL: {ListState.LOADED, ListState.ERROR},
        ListState.LOADED: {ListState.LOADING_MORE, ListState.LOADING_INITIAL},
        ListState.LOADING_MORE: {ListState.LOADED, ListState.ERROR},
        ListState.ERROR: {ListState.LOADING_INITIAL},
    }

    def __init__(
        self,
        fetch_page: Callable[[int, int, Any], Any],
        page_size: int = 10,
        items_field: str = "items",
        filters: Any = None,
        notify_error: Optional[Callable[[str], None]] = None,
    ):
        self.fetch_page = fetch_page
        self.page_size = page_size
        self.items_field = items_field
        self.filters = filters
        self.notify_error = notify_error

        self.state = ListState.IDLE
        self.items: List[Any] = []
        self.current_page = 0
        self.has_next_page = False
        self.total_count = 0
        self.error: Optional[str] = None
        self._sentinel_visible = False

    # --------------------------------------------------------
    # State
    # --------------------------------------------------------
    def _transition(self, new_state: ListState) -> None:
        if new_state not in self.TRANSITIONS[self.state]:
            raise InvalidListTransitionError(
                f"Cannot transition from {self.state.value} to {new_state.value}"
            )
        logger.debug("list %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    @property
    def is_loading(self) -> bool:
        return self.state in (ListState.LOADING_INITIAL, ListState.LOADING_MORE)

    @property
    def is_complete(self) -> bool:
        return self.state == ListState.LOADED and not self.has_next_page

    def _fail(self, message: Optional[str]) -> None:
        self.error = message or FETCH_ERROR
        self._transition(ListState.ERROR)
        if self.notify_error:
            self.notify_error(self.error)

    def _fetch(self, page: int) -> PageResult:
        try:
            envelope = self.fetch_page(page, self.page_size, self.filters)
        except Exception as exc:
            logger.warning("Page %s fetch raised: %s", page, exc)
            return PageResult(success=False, error=str(exc) or None)
        return PageResult.from_envelope(envelope, self.items_field)

    # --------------------------------------------------------
    # Fetch triggers
    # --------------------------------------------------------
    def _load_first_page(self, clear: bool) -> bool:
        self._transition(ListState.LOADING_INITIAL)
        self.error = None
        if clear:
            self.items = []
            self.current_page = 0
            self.has_next_page = False
            self.total_count = 0

        result = self._fetch(1)
        if not result.success:
            self._fail(result.error)
            return False

        self.items = self._dedupe(result.items)
        self.current_page = result.current_page
        self.has_next_page = result.has_next_page
        self.total_count = result.total_count
        self._transition(ListState.LOADED)
        return True

    def load_initial(self) -> bool:
        return self._load_first_page(clear=True)

    def apply_filters(self, filters: Any) -> bool:
        """New filters: drop everything and start again from page 1."""
        self.filters = filters
        return self._load_first_page(clear=True)

    def refresh(self) -> bool:
        """Re-fetch page 1 and replace the accumulated items wholesale."""
        return self._load_first_page(clear=False)

    def retry(self) -> bool:
        if self.state != ListState.ERROR:
            raise InvalidListTransitionError("Only a failed list can be retried")
        return self._load_first_page(clear=False)

    def load_more(self) -> bool:
        """Fetch and append the next page. Ignored unless loaded with more to come."""
        if self.state != ListState.LOADED or not self.has_next_page:
            return False

        self._transition(ListState.LOADING_MORE)
        result = self._fetch(self.current_page + 1)
        if not result.success:
            self._fail(result.error)
            return False

        self.items = self._dedupe(self.items + list(result.items))
        self.current_page = result.current_page
        self.has_next_page = result.has_next_page
        self.total_count = result.total_count
        self._transition(ListState.LOADED)
        return True

    def on_sentinel_visible(self, visible: bool = True) -> bool:
        """
        Viewport signal for the end-of-list sentinel. A page is requested only
        when the sentinel becomes visible, never again while it stays visible.
        """
        became_visible = visible and not self._sentinel_visible
        self._sentinel_visible = visible
        if not became_visible:
            return False
        return self.load_more()

    # --------------------------------------------------------
    # Items
    # --------------------------------------------------------
    @staticmethod
    def _dedupe(items: List[Any]) -> List[Any]:
        seen = set()
        unique = []
        for item in items:
            key = item_id(item)
            if key in seen:
                continue
            seen.add(key)
            unique.append(item)
        return unique

    def _index_of(self, key: Any) -> Optional[int]:
        for index, item in enumerate(self.items):
            if item_id(item) == key:
                return index
        return None

    def _replace(self, key: Any, value: Any) -> None:
        index = self._index_of(key)
        if index is not None:
            self.items[index] = value

    def apply_optimistic(
        self,
        key: Any,
        mutate: Callable[[Any], Any],
        commit: Callable[[], Any],
    ) -> Optional[OptimisticUpdate]:
        """
        Replace the item with `mutate(item)` right away, call `commit`, and
        put the original back if the server rejects the change.
        """
        index = self._index_of(key)
        if index is None:
            return None

        update = OptimisticUpdate(self.items[index], commit)
        self._replace(key, update.apply(mutate(self.items[index])))
        if not update.settle():
            logger.info("Rolled back optimistic change on %s: %s", key, update.error)
            if self.notify_error:
                self.notify_error(update.error)
        self._replace(key, update.value)
        return update
