"""
Intcode VM — I/O Channel

FIFO of integers on one communication edge: stage -> stage, or process
boundary -> stage.

Capacity and overflow:
  capacity=None      unbounded (default between pipeline stages)
  BLOCK policy       push() on a full channel raises ChannelFull.  The
                     orchestrator checks `full` before scheduling a producer,
                     so a full edge holds the producer back (backpressure).
  DRAIN policy       overflow values go straight to the sink (stdout by
                     default) instead of being queued.

Empty channel:
  With a `source` (e.g. ConsoleSource) pop() falls back to it, so a lone
  machine can run interactively.  Without one, pop() raises ChannelEmpty
  and `ready` is False, which the engine turns into a NEED_INPUT suspension.
"""

from collections import deque
from enum import Enum
from typing import Callable, Iterable, List, Optional

from .console import write_int


class OverflowPolicy(Enum):
    BLOCK = 'BLOCK'
    DRAIN = 'DRAIN'


class ChannelFull(Exception):
    """Push onto a full BLOCK-policy channel."""


class ChannelEmpty(Exception):
    """Pop from an empty channel with no fallback source."""


class Channel:
    """Bounded or unbounded integer FIFO with boundary fallbacks."""

    def __init__(self, capacity: Optional[int] = None,
                 policy: OverflowPolicy = OverflowPolicy.BLOCK,
                 source: Optional[Callable[[], int]] = None,
                 sink: Optional[Callable[[int], None]] = None,
                 name: str = ''):
        if capacity is not None and capacity < 1:
            raise ValueError(f"Channel capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.policy = policy
        self.source = source
        self.sink = sink if sink is not None else write_int
        self.name = name
        self._queue: deque = deque()

    # --- Producer side ---

    def push(self, value: int):
        if self.full:
            if self.policy is OverflowPolicy.DRAIN:
                self.sink(value)
                return
            raise ChannelFull(f"Channel {self.name or '?'} full ({self.capacity})")
        self._queue.append(value)

    def extend(self, values: Iterable[int]):
        for value in values:
            self.push(value)

    @property
    def full(self) -> bool:
        return self.capacity is not None and len(self._queue) >= self.capacity

    # --- Consumer side ---

    def pop(self) -> int:
        if self._queue:
            return self._queue.popleft()
        if self.source is not None:
            return self.source()
        raise ChannelEmpty(f"Channel {self.name or '?'} empty")

    @property
    def ready(self) -> bool:
        """True if pop() would return a value instead of raising."""
        return bool(self._queue) or self.source is not None

    # --- Inspection ---

    def __len__(self) -> int:
        return len(self._queue)

    def peek_all(self) -> List[int]:
        return list(self._queue)

    def clear(self):
        self._queue.clear()

    def __repr__(self) -> str:
        return (f"Channel({self.name!r}, {list(self._queue)}, "
                f"capacity={self.capacity}, policy={self.policy.value})")
