"""
Optimistic Updates

A local value is changed immediately, then the server call decides whether
the change is confirmed or rolled back.

    IDLE -> APPLIED -> CONFIRMED
                    -> ROLLED_BACK

CONFIRMED and ROLLED_BACK may be re-applied (the user clicks again).
"""
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, Set, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_ERROR = "Something went wrong. Please try again."


class OptimisticState(str, Enum):
    IDLE = "idle"
    APPLIED = "applied"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


class InvalidOptimisticTransitionError(Exception):
    """Raised when an optimistic update is moved to a state it cannot reach."""
    pass


def envelope_outcome(result: Any) -> Tuple[bool, Optional[str]]:
    """Read (success, error) from an envelope object or dict."""
    if result is None:
        return False, None
    if isinstance(result, dict):
        return bool(result.get("success")), result.get("error")
    return bool(getattr(result, "success", False)), getattr(result, "error", None)


class OptimisticUpdate(Generic[T]):
    """
    Holds one value and the state of the pending change to it.

    `commit` is called without arguments and returns the server envelope;
    a falsy `success` or a raised exception rolls the value back and keeps
    the user-facing error.
    """

    TRANSITIONS: Dict[OptimisticState, Set[OptimisticState]] = {
        OptimisticState.IDLE: {OptimisticState.APPLIED},
        OptimisticState.APPLIED: {OptimisticState.CONFIRMED, OptimisticState.ROLLED_BACK},
        OptimisticState.CONFIRMED: {OptimisticState.APPLIED},
        OptimisticState.ROLLED_BACK: {OptimisticState.APPLIED},
    }

    def __init__(self, value: T, commit: Callable[[], Any]):
        self.value = value
        self.commit = commit
        self.state = OptimisticState.IDLE
        self.error: Optional[str] = None
        self.result: Any = None
        self._previous: Optional[T] = None

    def _transition(self, new_state: OptimisticState) -> None:
        if new_state not in self.TRANSITIONS[self.state]:
            raise InvalidOptimisticTransitionError(
                f"Cannot transition from {self.state.value} to {new_state.value}"
            )
        self.state = new_state

    @property
    def pending(self) -> bool:
        return self.state == OptimisticState.APPLIED

    def apply(self, new_value: T) -> T:
        self._transition(OptimisticState.APPLIED)
        self._previous = self.value
        self.value = new_value
        self.error = None
        return self.value

    def confirm(self) -> None:
        self._transition(OptimisticState.CONFIRMED)
        self._previous = None

    def rollback(self, error: Optional[str] = None) -> None:
        self._transition(OptimisticState.ROLLED_BACK)
        self.value = self._previous
        self._previous = None
        self.error = error or DEFAULT_ERROR

    def settle(self) -> bool:
        """Call the server and confirm or roll back the applied value."""
        if not self.pending:
            raise InvalidOptimisticTransitionError("Nothing applied to settle")
        try:
            self.result = self.commit()
        except Exception as exc:
            self.rollback(str(exc) or None)
            return False

        ok, error = envelope_outcome(self.result)
        if ok:
            self.confirm()
        else:
            self.rollback(error)
        return ok

    def run(self, new_value: T) -> bool:
        self.apply(new_value)
        return self.settle()


class OptimisticToggle(OptimisticUpdate[Tuple[bool, int]]):
    """
    Like/follow button state: whether it is on and the count shown next
    to it. Toggling flips the flag and moves the count by one.
    """

    def __init__(self, active: bool, count: int, commit: Callable[[], Any]):
        super().__init__((bool(active), max(0, int(count))), commit)

    @property
    def active(self) -> bool:
        return self.value[0]

    @property
    def count(self) -> int:
        return self.value[1]

    def toggle(self) -> bool:
        active, count = self.value
        flipped = (not active, max(0, count - 1) if active else count + 1)
        return self.run(flipped)
