"""
Incremental list and optimistic update controllers, driven by a fake
paginated backend.
"""
import pytest

from src.client import (
    IncrementalList,
    InvalidListTransitionError,
    InvalidOptimisticTransitionError,
    ListState,
    OptimisticState,
    OptimisticToggle,
    OptimisticUpdate,
)
from src.client.optimistic import DEFAULT_ERROR


class FakeBackend:
    """Serves `items` in pages; `fail_pages` answer with an error envelope."""

    def __init__(self, items, fail_pages=()):
        self.items = list(items)
        self.fail_pages = set(fail_pages)
        self.calls = []

    def __call__(self, page, page_size, filters):
        self.calls.append((page, page_size, filters))
        if page in self.fail_pages:
            return {"success": False, "error": "Server unavailable"}
        items = [i for i in self.items if not filters or filters in i["tag"]]
        start = (page - 1) * page_size
        chunk = items[start:start + page_size]
        return {
            "success": True,
            "items": chunk,
            "current_page": page,
            "page_size": page_size,
            "total_count": len(items),
            "has_next_page": start + page_size < len(items),
        }


def _items(n, tag="a"):
    return [{"id": f"P{i}", "tag": tag, "liked": False, "likes": 0} for i in range(1, n + 1)]


def _ids(listing):
    return [i["id"] for i in listing.items]


# ===================================================================
# Incremental list
# ===================================================================

class TestIncrementalList:

    def test_initial_then_more_until_complete(self):
        backend = FakeBackend(_items(5))
        listing = IncrementalList(backend, page_size=2)
        assert listing.state == ListState.IDLE

        assert listing.load_initial()
        assert listing.state == ListState.LOADED
        assert _ids(listing) == ["P1", "P2"]

        listing.load_more()
        listing.load_more()
        assert _ids(listing) == ["P1", "P2", "P3", "P4", "P5"]
        assert listing.is_complete
        assert listing.load_more() is False
        assert len(backend.calls) == 3

    def test_load_more_ignored_before_initial(self):
        backend = FakeBackend(_items(3))
        listing = IncrementalList(backend, page_size=2)
        assert listing.load_more() is False
        assert backend.calls == []

    def test_duplicates_across_pages_are_dropped(self):
        backend = FakeBackend(_items(4))
        listing = IncrementalList(backend, page_size=2)
        listing.load_initial()
        # A new item shifts the listing, so page 2 repeats P2
        backend.items.insert(0, {"id": "P0", "tag": "a"})
        listing.load_more()
        assert _ids(listing) == ["P1", "P2", "P3"]

    def test_sentinel_fires_once_per_appearance(self):
        backend = FakeBackend(_items(10))
        listing = IncrementalList(backend, page_size=2)
        listing.load_initial()

        assert listing.on_sentinel_visible(True)
        assert listing.on_sentinel_visible(True) is False
        listing.on_sentinel_visible(False)
        assert listing.on_sentinel_visible(True)
        assert listing.current_page == 3

    def test_failed_page_keeps_items_and_can_retry(self):
        errors = []
        backend = FakeBackend(_items(4), fail_pages={2})
        listing = IncrementalList(backend, page_size=2, notify_error=errors.append)
        listing.load_initial()

        assert listing.load_more() is False
        assert listing.state == ListState.ERROR
        assert listing.error == "Server unavailable"
        assert errors == ["Server unavailable"]
        assert _ids(listing) == ["P1", "P2"]
        assert listing.load_more() is False

        backend.fail_pages.clear()
        assert listing.retry()
        assert listing.state == ListState.LOADED
        assert listing.error is None

    def test_retry_only_after_error(self):
        listing = IncrementalList(FakeBackend(_items(1)))
        listing.load_initial()
        with pytest.raises(InvalidListTransitionError):
            listing.retry()

    def test_fetch_exception_becomes_error_state(self):
        def broken(page, page_size, filters):
            raise ConnectionError("offline")

        listing = IncrementalList(broken)
        assert listing.load_initial() is False
        assert listing.state == ListState.ERROR
        assert listing.error == "offline"

    def test_apply_filters_restarts_from_first_page(self):
        backend = FakeBackend(_items(3, "a") + [{"id": "Q1", "tag": "b"}])
        listing = IncrementalList(backend, page_size=2)
        listing.load_initial()
        listing.load_more()

        listing.apply_filters("b")
        assert _ids(listing) == ["Q1"]
        assert listing.total_count == 1
        assert backend.calls[-1] == (1, 2, "b")

    def test_refresh_replaces_items(self):
        backend = FakeBackend(_items(3))
        listing = IncrementalList(backend, page_size=2)
        listing.load_initial()
        listing.load_more()
        backend.items = [{"id": "N1", "tag": "a"}]

        assert listing.refresh()
        assert _ids(listing) == ["N1"]
        assert listing.has_next_page is False

    def test_custom_items_field(self):
        def posts(page, page_size, filters):
            return {"success": True, "posts": [{"id": "X"}], "current_page": 1, "has_next_page": False}

        listing = IncrementalList(posts, items_field="posts")
        listing.load_initial()
        assert _ids(listing) == ["X"]


class TestApplyOptimistic:

    def _like(self, item):
        return dict(item, liked=True, likes=item["likes"] + 1)

    def test_confirmed_change_sticks(self):
        listing = IncrementalList(FakeBackend(_items(2)))
        listing.load_initial()

        update = listing.apply_optimistic("P1", self._like, lambda: {"success": True})
        assert update.state == OptimisticState.CONFIRMED
        assert listing.items[0]["liked"] is True
        assert listing.items[0]["likes"] == 1

    def test_rejected_change_is_rolled_back(self):
        errors = []
        listing = IncrementalList(FakeBackend(_items(2)), notify_error=errors.append)
        listing.load_initial()

        update = listing.apply_optimistic("P2", self._like, lambda: {"success": False, "error": "Post not found"})
        assert update.state == OptimisticState.ROLLED_BACK
        assert listing.items[1] == {"id": "P2", "tag": "a", "liked": False, "likes": 0}
        assert errors == ["Post not found"]

    def test_unknown_item(self):
        listing = IncrementalList(FakeBackend(_items(1)))
        listing.load_initial()
        assert listing.apply_optimistic("missing", self._like, lambda: {"success": True}) is None


# ===================================================================
# Optimistic updates
# ===================================================================

class TestOptimisticUpdate:

    def test_exception_rolls_back_with_message(self):
        def commit():
            raise RuntimeError("network down")

        update = OptimisticUpdate("old", commit)
        assert update.run("new") is False
        assert update.value == "old"
        assert update.error == "network down"

    def test_missing_error_uses_default(self):
        update = OptimisticUpdate(1, lambda: {"success": False})
        update.run(2)
        assert update.error == DEFAULT_ERROR

    def test_settle_requires_applied_value(self):
        update = OptimisticUpdate(1, lambda: {"success": True})
        with pytest.raises(InvalidOptimisticTransitionError):
            update.settle()

    def test_confirm_from_idle_is_invalid(self):
        with pytest.raises(InvalidOptimisticTransitionError):
            OptimisticUpdate(1, lambda: None).confirm()


class TestOptimisticToggle:

    def test_like_then_unlike(self):
        responses = iter([{"success": True}, {"success": True}])
        toggle = OptimisticToggle(False, 3, lambda: next(responses))

        assert toggle.toggle()
        assert (toggle.active, toggle.count) == (True, 4)
        assert toggle.toggle()
        assert (toggle.active, toggle.count) == (False, 3)

    def test_failed_toggle_restores_count(self):
        toggle = OptimisticToggle(True, 1, lambda: {"success": False, "error": "Error toggling follow"})
        assert toggle.toggle() is False
        assert (toggle.active, toggle.count) == (True, 1)
        assert toggle.error == "Error toggling follow"

    def test_count_never_negative(self):
        toggle = OptimisticToggle(True, 0, lambda: {"success": True})
        toggle.toggle()
        assert toggle.count == 0
