"""
Teyaku evaluation for Hachi-Hachi.

Teyaku are judged on the seven cards a player was dealt, before any play.
Two independent groups are checked and the best combination of each is
kept:

- Group A looks at month structure (triplets, pairs, four of a kind).
- Group B looks at card categories. November (willow) cards count as chaff.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from hanafuda.logic.cards import card_category, card_month
from hanafuda.logic.enums import CardCategory
from hanafuda.logic.types import TeyakuResult

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

TEYAKU_HAND_SIZE = 7
WILLOW_MONTH = 11
# months whose triplet is a "standing" triplet
STANDING_MONTHS = frozenset({4, 5, 7, 12})


def _month_counts(hand: Sequence[int]) -> Counter[int]:
    return Counter(card_month(card_id) for card_id in hand)


def _triplet_months(counts: Counter[int], *, exact: bool = True) -> list[int]:
    if exact:
        return [month for month, count in counts.items() if count == 3]
    return [month for month, count in counts.items() if count >= 3]


def _pair_count(counts: Counter[int]) -> int:
    return sum(1 for count in counts.values() if count == 2)


def _four_three(counts: Counter[int]) -> bool:
    return 4 in counts.values() and 3 in counts.values()


def _one_two_four(counts: Counter[int]) -> bool:
    return 4 in counts.values() and _pair_count(counts) == 1 and 1 in counts.values()


def _two_standing_triplets(counts: Counter[int]) -> bool:
    return sum(1 for month in _triplet_months(counts) if month in STANDING_MONTHS) >= 2


def _triplet_and_two_pairs(counts: Counter[int]) -> bool:
    return len(_triplet_months(counts)) == 1 and _pair_count(counts) == 2


def _triplet_and_standing_triplet(counts: Counter[int]) -> bool:
    triplets = _triplet_months(counts)
    standing = [month for month in triplets if month in STANDING_MONTHS]
    return len(triplets) >= 2 and len(standing) == 1


def _two_triplets(counts: Counter[int]) -> bool:
    return len(_triplet_months(counts)) >= 2


def _four_of_a_kind(counts: Counter[int]) -> bool:
    return 4 in counts.values()


def _three_pairs(counts: Counter[int]) -> bool:
    return _pair_count(counts) == 3


def _standing_triplet(counts: Counter[int]) -> bool:
    return any(month in STANDING_MONTHS for month in _triplet_months(counts, exact=False))


def _triplet(counts: Counter[int]) -> bool:
    return bool(_triplet_months(counts, exact=False))


# ordered by value; the first satisfied entry is the group's teyaku
GROUP_A: tuple[tuple[str, int, Callable[[Counter[int]], bool]], ...] = (
    ("Four-Three", 20, _four_three),
    ("One-Two-Four", 8, _one_two_four),
    ("Two Standing Triplets", 8, _two_standing_triplets),
    ("Triplet and Two Pairs", 7, _triplet_and_two_pairs),
    ("Triplet and Standing Triplet", 7, _triplet_and_standing_triplet),
    ("Two Triplets", 6, _two_triplets),
    ("Four of a Kind", 6, _four_of_a_kind),
    ("Three Pairs", 4, _three_pairs),
    ("Standing Triplet", 3, _standing_triplet),
    ("Triplet", 2, _triplet),
)


def _category_counts(hand: Sequence[int]) -> Counter[CardCategory]:
    counts: Counter[CardCategory] = Counter()
    for card_id in hand:
        if card_month(card_id) == WILLOW_MONTH:
            counts[CardCategory.CHAFF] += 1
        else:
            counts[card_category(card_id)] += 1
    return counts


def _empty_hand(counts: Counter[CardCategory]) -> bool:
    return counts[CardCategory.CHAFF] == TEYAKU_HAND_SIZE


def _one_bright(counts: Counter[CardCategory]) -> bool:
    return counts[CardCategory.BRIGHT] == 1 and counts[CardCategory.CHAFF] == TEYAKU_HAND_SIZE - 1


def _one_animal(counts: Counter[CardCategory]) -> bool:
    return counts[CardCategory.ANIMAL] == 1 and counts[CardCategory.CHAFF] == TEYAKU_HAND_SIZE - 1


def _one_ribbon(counts: Counter[CardCategory]) -> bool:
    return counts[CardCategory.RIBBON] == 1 and counts[CardCategory.CHAFF] == TEYAKU_HAND_SIZE - 1


def _red(counts: Counter[CardCategory]) -> bool:
    return counts[CardCategory.RIBBON] >= 2 and counts[CardCategory.CHAFF] > 0


GROUP_B: tuple[tuple[str, int, Callable[[Counter[CardCategory]], bool]], ...] = (
    ("Empty Hand", 4, _empty_hand),
    ("One Bright", 4, _one_bright),
    ("One Animal", 3, _one_animal),
    ("One Ribbon", 3, _one_ribbon),
    ("Red", 2, _red),
)


def evaluate_teyaku(hand: Sequence[int]) -> tuple[TeyakuResult, ...]:
    """Return the best group A and best group B teyaku for a dealt hand."""
    if len(hand) != TEYAKU_HAND_SIZE:
        return ()
    results: list[TeyakuResult] = []
    month_counts = _month_counts(hand)
    for name, points, check in GROUP_A:
        if check(month_counts):
            results.append(TeyakuResult(name=name, points=points))
            break
    category_counts = _category_counts(hand)
    for name, points, check in GROUP_B:
        if check(category_counts):
            results.append(TeyakuResult(name=name, points=points))
            break
    return tuple(results)


def teyaku_value(results: Sequence[TeyakuResult]) -> int:
    return sum(result.points for result in results)
