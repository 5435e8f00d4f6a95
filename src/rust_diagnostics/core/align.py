"""Pair the items of an original document with the items of its auto-fixed counterpart.

Alignment is prefix-drift matching, not a sequence diff: both item maps are
walked in offset order, and an original item at ``k1`` is matched with the
fixed item at ``k1 + drift``. Whenever a matched pair differs, ``drift``
grows by the length change of that item, which re-projects every later
original offset onto the fixed document. Reordered, duplicated, or split
items are not recognised.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from rust_diagnostics.core.items import SourceItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemPair:
    offset: int
    before: bytes
    after: bytes


@dataclass
class AlignmentState:
    drift: int = 0
    pairs: list[ItemPair] = field(default_factory=list)

    def accept(self, offset: int, before: SourceItem, after: SourceItem) -> None:
        self.pairs.append(ItemPair(offset, bytes(before.content), bytes(after.content)))
        self.drift += len(after) - len(before)


def align_items(original: Mapping[int, SourceItem], fixed: Mapping[int, SourceItem]) -> AlignmentState:
    state = AlignmentState()
    fixed_keys = sorted(fixed)
    for k1 in sorted(original):
        v1 = original[k1]
        for k2 in fixed_keys:
            if k1 + state.drift != k2:
                continue
            v2 = fixed[k2]
            if v1.content != v2.content:
                state.accept(k1, v1, v2)
                break
    logger.debug("Aligned %d changed item(s), final drift %+d", len(state.pairs), state.drift)
    return state


def align(original: Mapping[int, SourceItem], fixed: Mapping[int, SourceItem]) -> list[ItemPair]:
    """Return ``(offset, before, after)`` pairs for every aligned item whose content changed."""
    return align_items(original, fixed).pairs
