"""
AI player decision making for hanafuda.

Heuristic AI player: greedy on immediate captured value and cautious about
continuing. Every choice is a pure function of the state passed in, so
the same state always produces the same decision.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from hanafuda.logic.capture import find_capture_candidates, requires_choice, wild_restrictions
from hanafuda.logic.cards import ALL_CARD_IDS, card_category
from hanafuda.logic.enums import CATEGORY_PRIORITY, Decision
from hanafuda.logic.scoring import card_points
from hanafuda.logic.types import AIPlayerAction
from hanafuda.logic.yaku import evaluate_progress, total_yaku_points

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hanafuda.logic.settings import GameSettings
    from hanafuda.logic.state import HanafudaPlayer, HanafudaRoundState
    from hanafuda.logic.variants import VariantRules


class AIPlayerStrategy(Enum):
    """Available AI player strategies."""

    HEURISTIC = "heuristic"


def _card_key(card_id: int, rules: VariantRules) -> tuple[int, int, int]:
    """Ranking key, larger is better: value, then bright > animal > ribbon > chaff, then lower id."""
    category = card_category(card_id)
    return rules.card_value(category), -CATEGORY_PRIORITY[category], -card_id


class AIPlayer:
    """
    AI player with configurable decision-making strategy.

    All decision methods live on this class so alternative strategies can
    override them.
    """

    def __init__(self, strategy: AIPlayerStrategy = AIPlayerStrategy.HEURISTIC) -> None:
        self.strategy = strategy

    def select_capture(self, candidates: Sequence[int], rules: VariantRules) -> int:
        """Pick the most valuable field card among capture candidates."""
        return max(candidates, key=lambda card_id: _card_key(card_id, rules))

    def select_play(
        self,
        player: HanafudaPlayer,
        round_state: HanafudaRoundState,
        rules: VariantRules,
        settings: GameSettings | None = None,
    ) -> AIPlayerAction:
        """
        Choose which hand card to play and, when needed, its capture target.

        Captures beat placing a card on the field. Among captures the highest
        immediate captured value wins, tie-broken by the best field card taken
        and then the lowest hand card id. Without any capture the least
        valuable card is thrown to the field. Given settings, a wild gaji is
        weighed against every field card it may take.
        """
        best: tuple[tuple[int, int, int, int], AIPlayerAction] | None = None
        for card_id in sorted(player.hand):
            wild_blocked = (
                wild_restrictions(round_state, settings, player.seat, card_id) if settings is not None else None
            )
            candidates = find_capture_candidates(card_id, round_state.field, wild_blocked=wild_blocked)
            if not candidates:
                continue
            choose = requires_choice(card_id, round_state.field, wild_blocked=wild_blocked)
            target = self.select_capture(candidates, rules) if choose else None
            taken = (target,) if target is not None else candidates
            best_taken = max(taken, key=lambda taken_id: _card_key(taken_id, rules))
            _, category_rank, taken_id_rank = _card_key(best_taken, rules)
            key = (card_points((card_id, *taken), rules), category_rank, taken_id_rank, -card_id)
            if best is None or key > best[0]:
                best = (key, AIPlayerAction(card_id=card_id, target_card_id=target))

        if best is not None:
            return best[1]

        discard = min(player.hand, key=lambda card_id: _card_key(card_id, rules))
        return AIPlayerAction(card_id=discard)

    def _can_still_improve(
        self,
        player: HanafudaPlayer,
        round_state: HanafudaRoundState,
        rules: VariantRules,
        settings: GameSettings,
        turns_left: int,
    ) -> bool:
        """Whether some combination is still within reach with the turns left."""
        opponents_captured = [
            card_id for other in round_state.players if other.seat != player.seat for card_id in other.captured
        ]
        unseen = set(ALL_CARD_IDS) - set(player.captured) - set(opponents_captured)
        pools = {rule.name: rule.pool for rule in rules.yaku_rules}

        for progress in evaluate_progress(player.captured, opponents_captured, rules.yaku_rules, settings):
            if not progress.is_possible:
                continue
            missing = progress.needed - progress.current
            if missing <= turns_left and len(pools[progress.name] & unseen) >= missing:
                return True

        # open-ended combinations already held grow by one card at a time
        held = {result.name for result in player.yaku}
        return any(
            rule.bonus_per_extra > 0 and rule.name in held and rule.pool & unseen for rule in rules.yaku_rules
        )

    def decide_continuation(
        self,
        player: HanafudaPlayer,
        round_state: HanafudaRoundState,
        rules: VariantRules,
        settings: GameSettings,
    ) -> Decision:
        """
        Stop when the held value is safe or improvement looks unlikely, otherwise continue.

        The safe value is the variant's threshold unless ai_stop_threshold
        overrides it.
        """
        points = total_yaku_points(player.yaku)
        threshold = settings.ai_stop_threshold or rules.safe_threshold
        if points >= threshold:
            return Decision.STOP

        turns_left = round_state.turns_remaining_for(player.seat) - 1
        if turns_left <= 0:
            return Decision.STOP

        if self._can_still_improve(player, round_state, rules, settings, turns_left):
            return Decision.CONTINUE
        return Decision.STOP
