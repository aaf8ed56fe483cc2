"""
Intcode VM — Phase Configuration Search

Exhaustive search over every permutation of the phase values.  N is small
(5 stages -> 120 trials), so trying them all is both exact and cheap.
Permutations come out in lexicographic order from next_permutation().
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .config import DEFAULT_SIGNAL, PIPELINE_PROFILES
from .pipeline import Pipeline
from .periph.channel import OverflowPolicy

log = logging.getLogger(__name__)


def next_permutation(a: List[int]) -> bool:
    """Rearrange `a` in place into the next lexicographic permutation.

    Returns False (and leaves `a` untouched) if `a` is already the last one.
    """
    n = len(a)
    # 1. longest non-increasing suffix starts at k
    k = n - 1
    while k > 0 and a[k - 1] >= a[k]:
        k -= 1
    if k <= 0:
        return False
    pivot = k - 1

    # 2. rightmost element greater than the pivot
    j = n - 1
    while a[j] <= a[pivot]:
        j -= 1

    # 3. swap, 4. reverse the suffix
    a[pivot], a[j] = a[j], a[pivot]
    a[k:] = a[k:][::-1]
    return True


def permutations(values: Iterable[int]) -> Iterator[Tuple[int, ...]]:
    """Every distinct permutation of values, lexicographic from sorted order."""
    a = sorted(values)
    yield tuple(a)
    while next_permutation(a):
        yield tuple(a)


@dataclass
class SearchResult:
    signal: Optional[int]
    phases: Optional[Tuple[int, ...]]
    trials: int

    @property
    def found(self) -> bool:
        return self.signal is not None


def search(program: Sequence[int], phases: Iterable[int] = range(5),
           feedback: bool = False, signal: int = DEFAULT_SIGNAL,
           capacity: Optional[int] = None,
           policy: OverflowPolicy = OverflowPolicy.BLOCK,
           max_steps: Optional[int] = None) -> SearchResult:
    """Find the phase assignment that maximizes the pipeline output."""
    values = list(phases)
    pipeline = Pipeline(program, stages=len(values), feedback=feedback,
                        capacity=capacity, policy=policy, max_steps=max_steps)
    best = SearchResult(None, None, 0)
    for perm in permutations(values):
        best.trials += 1
        out = pipeline.run(perm, signal)
        if out is not None and (best.signal is None or out > best.signal):
            best.signal = out
            best.phases = perm
    log.info("best signal %s from phases %s (%d trials, %s)",
             best.signal, best.phases, best.trials,
             "feedback" if feedback else "chain")
    return best


def search_profile(program: Sequence[int], mode: str, **kwargs) -> SearchResult:
    """search() with phases and feedback taken from PIPELINE_PROFILES[mode]."""
    profile = PIPELINE_PROFILES[mode]
    kwargs.setdefault('phases', profile['phases'])
    kwargs.setdefault('feedback', profile['feedback'])
    return search(program, **kwargs)
