"""
Self-play regression tests.

Whole matches are played by AI seats through the service; every
transition checks card conservation, so finishing a match is itself an
invariant check across every variant.
"""

import pytest

from hanafuda.logic.enums import GamePhase, Variant
from hanafuda.logic.match_game import MATCH_POINTS
from hanafuda.logic.settings import default_settings
from hanafuda.simulation import run_simulated_concentration, run_simulated_match
from hanafuda.tests.conftest import FIXED_SEED


class TestSimulatedMatch:
    @pytest.mark.parametrize(
        ("variant", "num_players"),
        [
            (Variant.KOIKOI, 2),
            (Variant.SAKURA, 2),
            (Variant.SAKURA, 3),
            (Variant.SAKURA, 4),
            (Variant.HACHI_HACHI, 3),
        ],
    )
    def test_runs_every_round(self, variant, num_players):
        settings = default_settings(variant, num_players=num_players, total_rounds=3)

        game_state = run_simulated_match(settings, seed=FIXED_SEED)

        assert game_state.phase == GamePhase.FINISHED
        assert len(game_state.ledger) == 3
        assert [record.round_number for record in game_state.ledger] == [1, 2, 3]
        assert game_state.ledger[-1].scores_after == game_state.scores

    def test_sakura_optional_rules(self):
        settings = default_settings(
            Variant.SAKURA,
            total_rounds=3,
            sakura_gaji=True,
            sakura_chitsiobiki=True,
            sakura_victory_scoring=True,
            sakura_basa_chu=True,
        )

        game_state = run_simulated_match(settings, seed=FIXED_SEED)

        assert game_state.phase == GamePhase.FINISHED
        assert all(sum(record.round_wins) in (1, 2) for record in game_state.ledger)
        assert sum(game_state.round_wins) == sum(sum(record.round_wins) for record in game_state.ledger)

    def test_same_seed_same_match(self):
        settings = default_settings(Variant.KOIKOI, total_rounds=4)

        first = run_simulated_match(settings, seed=FIXED_SEED)
        second = run_simulated_match(settings, seed=FIXED_SEED)

        assert first.ledger == second.ledger
        assert first.scores == second.scores

    def test_koikoi_rounds_never_take_points(self):
        settings = default_settings(Variant.KOIKOI, total_rounds=6)

        game_state = run_simulated_match(settings, seed=FIXED_SEED)

        for record in game_state.ledger:
            assert all(delta >= 0 for delta in record.deltas)

    def test_early_win_threshold_cuts_match_short(self):
        settings = default_settings(Variant.KOIKOI, total_rounds=12, early_win_threshold=1)

        game_state = run_simulated_match(settings, seed=FIXED_SEED)

        assert game_state.phase == GamePhase.FINISHED
        reached = [index for index, record in enumerate(game_state.ledger) if max(record.scores_after) >= 1]
        if reached:
            assert reached[0] == len(game_state.ledger) - 1
        else:
            assert len(game_state.ledger) == 12


class TestSimulatedConcentration:
    def test_clears_the_layout(self):
        state = run_simulated_concentration(FIXED_SEED)

        assert state.finished
        assert state.moves >= 48
        assert state.score >= 24 * MATCH_POINTS

    def test_without_bonus_scores_flat(self):
        state = run_simulated_concentration(FIXED_SEED, consecutive_bonus=False)

        assert state.score == 24 * MATCH_POINTS
