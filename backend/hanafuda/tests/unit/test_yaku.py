"""Unit tests for yaku evaluation against the variant rule tables."""

import pytest

from hanafuda.logic.enums import SakeViewingMode
from hanafuda.logic.settings import GameSettings
from hanafuda.logic.types import YakuResult
from hanafuda.logic.variants import HACHI_HACHI_DEKIYAKU, KOIKOI_YAKU, SAKURA_YAKU
from hanafuda.logic.yaku import evaluate_progress, evaluate_yaku, find_new_yaku, total_yaku_points

CHAFF_TEN = (3, 4, 7, 8, 11, 12, 15, 16, 19, 20)


def _names(results):
    return [result.name for result in results]


class TestKoikoiBrights:
    @pytest.mark.parametrize(
        ("captured", "expected"),
        [
            ((1, 9, 29), ("Three Brights", 6)),
            ((1, 9, 29, 41), ("Rainy Four Brights", 8)),
            ((1, 9, 29, 45), ("Four Brights", 10)),
            ((1, 9, 29, 41, 45), ("Five Brights", 15)),
        ],
    )
    def test_only_best_bright_combination_counts(self, captured, expected):
        results = evaluate_yaku(captured, KOIKOI_YAKU)

        assert [(result.name, result.points) for result in results] == [expected]

    def test_rain_man_does_not_make_three_brights(self):
        assert evaluate_yaku((1, 9, 41), KOIKOI_YAKU) == ()


class TestKoikoiCountedYaku:
    def test_ribbons_bonus_per_extra(self):
        results = evaluate_yaku((2, 6, 10, 14, 18, 22), KOIKOI_YAKU)

        assert _names(results) == ["Poetry Ribbons", "Ribbons"]
        assert results[1].points == 6

    def test_animals(self):
        results = evaluate_yaku((5, 13, 17, 30, 42), KOIKOI_YAKU)

        assert [(result.name, result.points) for result in results] == [("Animals", 5)]

    def test_boar_deer_butterfly(self):
        assert _names(evaluate_yaku((25, 37, 21), KOIKOI_YAKU)) == ["Boar-Deer-Butterfly"]

    def test_chaff_threshold_is_ten(self):
        assert evaluate_yaku(CHAFF_TEN[:9], KOIKOI_YAKU) == ()
        assert total_yaku_points(evaluate_yaku(CHAFF_TEN, KOIKOI_YAKU)) == 1
        assert total_yaku_points(evaluate_yaku((*CHAFF_TEN, 23, 24), KOIKOI_YAKU)) == 3

    def test_sake_cup_counts_as_chaff_when_enabled(self):
        captured = (*CHAFF_TEN[:9], 33)
        assert evaluate_yaku(captured, KOIKOI_YAKU) == ()

        results = evaluate_yaku(captured, KOIKOI_YAKU, GameSettings(sake_cup_counts_as_chaff=True))

        assert _names(results) == ["Chaff"]

    def test_result_lists_the_scoring_cards(self):
        results = evaluate_yaku((3, 1, 9, 29), KOIKOI_YAKU)

        assert results[0].card_ids == (1, 9, 29)


class TestViewingSake:
    def test_always(self):
        results = evaluate_yaku((9, 33), KOIKOI_YAKU)

        assert [(result.name, result.points) for result in results] == [("Viewing Sake", 3)]

    def test_both_viewings(self):
        assert _names(evaluate_yaku((9, 29, 33), KOIKOI_YAKU)) == ["Viewing Sake", "Moon Viewing Sake"]

    def test_never(self):
        settings = GameSettings(viewing_sake_mode=SakeViewingMode.NEVER)

        assert evaluate_yaku((9, 33), KOIKOI_YAKU, settings) == ()

    def test_require_other_alone(self):
        settings = GameSettings(moon_viewing_sake_mode=SakeViewingMode.REQUIRE_OTHER)

        assert evaluate_yaku((29, 33), KOIKOI_YAKU, settings) == ()

    def test_require_other_with_another_yaku(self):
        settings = GameSettings(moon_viewing_sake_mode=SakeViewingMode.REQUIRE_OTHER)

        results = evaluate_yaku((29, 33, 2, 6, 10), KOIKOI_YAKU, settings)

        assert _names(results) == ["Poetry Ribbons", "Moon Viewing Sake"]


class TestOtherTables:
    def test_sakura_flat_values(self):
        results = evaluate_yaku((14, 18, 26, 25, 37, 21), SAKURA_YAKU)

        assert [(result.name, result.points) for result in results] == [("Tanzaku", 50), ("Ino-Shika-Cho", 50)]

    def test_hachi_hachi_four_brights_includes_rain_man(self):
        results = evaluate_yaku((1, 9, 29, 41), HACHI_HACHI_DEKIYAKU)

        assert [(result.name, result.points) for result in results] == [("Four Brights", 10)]

    def test_hachi_hachi_seven_ribbons_excludes_willow(self):
        assert evaluate_yaku((2, 6, 14, 18, 22, 26, 43), HACHI_HACHI_DEKIYAKU) == ()

        results = evaluate_yaku((2, 6, 14, 18, 22, 26, 34), HACHI_HACHI_DEKIYAKU)

        assert _names(results) == ["Seven Ribbons"]


class TestEvaluationProperties:
    def test_idempotent(self):
        captured = (1, 9, 29, 33, 2, 6, 10, *CHAFF_TEN)

        assert evaluate_yaku(captured, KOIKOI_YAKU) == evaluate_yaku(captured, KOIKOI_YAKU)

    def test_find_new_yaku_reports_growth(self):
        before = (YakuResult(name="Ribbons", points=5, card_ids=(2, 6, 10, 14, 18)),)
        after = (
            YakuResult(name="Ribbons", points=6, card_ids=(2, 6, 10, 14, 18, 22)),
            YakuResult(name="Poetry Ribbons", points=6, card_ids=(2, 6, 10)),
        )

        assert find_new_yaku(before, after) == after

    def test_find_new_yaku_ignores_unchanged(self):
        held = (YakuResult(name="Animals", points=5, card_ids=(5, 13, 17, 30, 42)),)

        assert find_new_yaku(held, held) == ()


class TestProgress:
    def test_blocked_when_opponent_holds_too_many(self):
        progress = {item.name: item for item in evaluate_progress((1, 9), (29, 45), KOIKOI_YAKU)}

        assert progress["Three Brights"].current == 2
        assert not progress["Three Brights"].is_possible

    def test_possible_when_cards_remain(self):
        progress = {item.name: item for item in evaluate_progress((9,), (), KOIKOI_YAKU)}

        assert progress["Viewing Sake"].is_possible
        assert progress["Viewing Sake"].needed == 2

    def test_completed_yaku_not_reported(self):
        progress = evaluate_progress((9, 33), (), KOIKOI_YAKU)

        assert "Viewing Sake" not in _names(progress)
