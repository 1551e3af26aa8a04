"""Unit tests for Hachi-Hachi teyaku on the dealt hand."""

from hanafuda.logic.teyaku import evaluate_teyaku, teyaku_value


def _teyaku(hand):
    return [(result.name, result.points) for result in evaluate_teyaku(hand)]


class TestGroupA:
    def test_four_three(self):
        # January complete, three February cards
        assert _teyaku((1, 2, 3, 4, 5, 6, 7)) == [("Four-Three", 20), ("Red", 2)]

    def test_triplet(self):
        assert _teyaku((2, 3, 4, 7, 15, 23, 31)) == [("Triplet", 2), ("One Ribbon", 3)]

    def test_standing_triplet(self):
        assert _teyaku((13, 14, 15, 3, 7, 19, 23)) == [("Standing Triplet", 3)]

    def test_three_pairs(self):
        assert _teyaku((3, 4, 7, 8, 11, 12, 15)) == [("Three Pairs", 4), ("Empty Hand", 4)]


class TestGroupB:
    def test_empty_hand(self):
        assert _teyaku((3, 7, 11, 15, 19, 23, 27)) == [("Empty Hand", 4)]

    def test_willow_counts_as_chaff(self):
        assert _teyaku((42, 3, 7, 11, 15, 19, 23)) == [("Empty Hand", 4)]

    def test_one_bright(self):
        assert _teyaku((1, 7, 11, 15, 19, 23, 27)) == [("One Bright", 4)]


class TestTeyakuValue:
    def test_wrong_hand_size_has_no_teyaku(self):
        assert evaluate_teyaku((3, 7, 11)) == ()

    def test_value_sums_both_groups(self):
        assert teyaku_value(evaluate_teyaku((1, 2, 3, 4, 5, 6, 7))) == 22
