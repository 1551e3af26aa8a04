"""
Yaku (and dekiyaku) evaluation over a captured pile.

A single evaluator is driven by the declarative rule tables in variants.py.
Every rule is a pool of candidate card ids plus a minimum count: exact-set
combinations use the whole pool as the minimum, open-ended combinations
score a bonus per card beyond the threshold. Rules sharing an exclusive
group are mutually exclusive and only the most valuable satisfied one is
kept.

Evaluation is pure and idempotent: the same captured pile always yields
the same results in the same order.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hanafuda.logic.cards import SAKE_CUP
from hanafuda.logic.enums import SakeViewingMode
from hanafuda.logic.types import YakuProgress, YakuResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from hanafuda.logic.settings import GameSettings


class SakeViewing(str, Enum):
    """Which viewing-sake option governs a rule."""

    VIEWING = "viewing"
    MOON_VIEWING = "moon_viewing"


class YakuRule(BaseModel):
    """A named scoring rule."""

    model_config = ConfigDict(frozen=True)

    name: str
    pool: frozenset[int]
    min_count: int
    points: int
    bonus_per_extra: int = 0
    required: frozenset[int] = frozenset()
    exclusive_group: str | None = None
    sake_viewing: SakeViewing | None = None
    sake_cup_as_chaff: bool = False


def _rule_pool(rule: YakuRule, settings: GameSettings | None) -> frozenset[int]:
    if rule.sake_cup_as_chaff and settings is not None and settings.sake_cup_counts_as_chaff:
        return rule.pool | {SAKE_CUP}
    return rule.pool


def _sake_mode(rule: YakuRule, settings: GameSettings | None) -> SakeViewingMode:
    if rule.sake_viewing is None or settings is None:
        return SakeViewingMode.ALWAYS
    if rule.sake_viewing == SakeViewing.VIEWING:
        return settings.viewing_sake_mode
    return settings.moon_viewing_sake_mode


def match_rule(
    rule: YakuRule,
    captured: Sequence[int],
    settings: GameSettings | None = None,
) -> YakuResult | None:
    """Return the result for one rule, or None when it is not satisfied."""
    captured_set = set(captured)
    if not rule.required <= captured_set:
        return None
    pool = _rule_pool(rule, settings)
    held = tuple(card_id for card_id in captured if card_id in pool)
    if len(held) < rule.min_count:
        return None
    points = rule.points + rule.bonus_per_extra * (len(held) - rule.min_count)
    return YakuResult(name=rule.name, points=points, card_ids=held)


def evaluate_yaku(
    captured: Sequence[int],
    rules: Sequence[YakuRule],
    settings: GameSettings | None = None,
) -> tuple[YakuResult, ...]:
    """
    Evaluate every rule against a captured pile.

    Results keep table order. Within an exclusive group only the highest
    scoring satisfied rule survives; equal points go to the rule listed first.
    Viewing-sake rules are dropped or kept according to their mode.
    """
    matched: list[tuple[YakuRule, YakuResult]] = []
    for rule in rules:
        if _sake_mode(rule, settings) == SakeViewingMode.NEVER:
            continue
        result = match_rule(rule, captured, settings)
        if result is not None:
            matched.append((rule, result))

    best_in_group: dict[str, YakuResult] = {}
    for rule, result in matched:
        if rule.exclusive_group is None:
            continue
        current = best_in_group.get(rule.exclusive_group)
        if current is None or result.points > current.points:
            best_in_group[rule.exclusive_group] = result

    kept = [
        (rule, result)
        for rule, result in matched
        if rule.exclusive_group is None or best_in_group[rule.exclusive_group] is result
    ]

    has_other = any(rule.sake_viewing is None for rule, _ in kept)
    return tuple(
        result
        for rule, result in kept
        if _sake_mode(rule, settings) != SakeViewingMode.REQUIRE_OTHER or has_other
    )


def evaluate_progress(
    captured: Sequence[int],
    opponents_captured: Iterable[int],
    rules: Sequence[YakuRule],
    settings: GameSettings | None = None,
) -> tuple[YakuProgress, ...]:
    """
    Report progress toward combinations that are started but not complete.

    is_possible turns False once opponents hold enough of the rule's cards
    (or one of its required cards) that the threshold can no longer be met.
    """
    completed = {result.name for result in evaluate_yaku(captured, rules, settings)}
    captured_set = set(captured)
    lost = set(opponents_captured)
    progress: list[YakuProgress] = []
    for rule in rules:
        if rule.name in completed or _sake_mode(rule, settings) == SakeViewingMode.NEVER:
            continue
        pool = _rule_pool(rule, settings)
        current = len(captured_set & pool)
        if current == 0:
            continue
        obtainable = len(pool - lost)
        is_possible = obtainable >= rule.min_count and not (rule.required & lost)
        progress.append(
            YakuProgress(name=rule.name, current=current, needed=rule.min_count, is_possible=is_possible),
        )
    return tuple(progress)


def find_new_yaku(
    before: Sequence[YakuResult],
    after: Sequence[YakuResult],
) -> tuple[YakuResult, ...]:
    """Return yaku that were completed or grew in value between two evaluations."""
    previous = {result.name: result.points for result in before}
    return tuple(result for result in after if result.points > previous.get(result.name, 0))


def total_yaku_points(results: Iterable[YakuResult]) -> int:
    return sum(result.points for result in results)
