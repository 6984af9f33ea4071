"""Tests for turn_order.py — snake order and season rotation."""

from cabindraft.turn_order import (
    next_season_order, round_for_turn, season_order, snake_order,
    verify_turn_order,
)

BASE = ["A", "B", "C", "D"]


class TestSnakeOrder:
    def test_length(self):
        assert len(snake_order(BASE)) == 8

    def test_round_two_reversed(self):
        assert snake_order(["A", "B", "C"]) == ["A", "B", "C", "C", "B", "A"]

    def test_last_picker_opens_round_two(self):
        for n in range(1, 13):
            participants = [f"P{i}" for i in range(1, n + 1)]
            order = snake_order(participants)
            assert order[n] == participants[n - 1]

    def test_single_participant(self):
        assert snake_order(["Solo"]) == ["Solo", "Solo"]

    def test_does_not_mutate_input(self):
        participants = list(BASE)
        snake_order(participants)
        assert participants == BASE

    def test_verifies(self):
        result = verify_turn_order(snake_order(BASE), BASE)
        assert result["valid"], result["errors"]
        assert all(c == 2 for c in result["turns_per_participant"].values())


class TestRoundForTurn:
    def test_rounds(self):
        assert [round_for_turn(i, 3) for i in range(6)] == [1, 1, 1, 2, 2, 2]


class TestSeasonOrder:
    def test_base_year(self):
        assert season_order(BASE, 2025, 2025) == BASE

    def test_before_base_year(self):
        assert season_order(BASE, 2025, 2020) == BASE

    def test_one_year_later_first_becomes_last(self):
        assert season_order(BASE, 2025, 2026) == ["B", "C", "D", "A"]
        assert season_order(BASE, 2025, 2026) == next_season_order(BASE)

    def test_two_years_later(self):
        assert season_order(BASE, 2025, 2027) == ["C", "D", "A", "B"]

    def test_full_cycle(self):
        assert season_order(BASE, 2025, 2029) == BASE

    def test_override_wins(self):
        overrides = {2026: ["D", "C", "B", "A"]}
        assert season_order(BASE, 2025, 2026, overrides) == ["D", "C", "B", "A"]
        assert season_order(BASE, 2025, 2027, overrides) == ["C", "D", "A", "B"]

    def test_empty(self):
        assert season_order([], 2025, 2030) == []
        assert next_season_order([]) == []


class TestVerifyTurnOrder:
    def test_wrong_length(self):
        result = verify_turn_order(BASE, BASE)
        assert not result["valid"]
        assert any("expected 8" in e for e in result["errors"])

    def test_not_mirrored(self):
        order = BASE + BASE
        result = verify_turn_order(order, BASE)
        assert not result["valid"]
        assert any("does not mirror" in e for e in result["errors"])

    def test_unknown_participant(self):
        order = snake_order(["A", "B", "C", "X"])
        result = verify_turn_order(order, BASE)
        assert not result["valid"]
        assert any("X is not a participant" in e for e in result["errors"])

    def test_alias_tolerant(self):
        participants = ["Melanie and Dom", "Barb"]
        order = ["Dom & Melanie", "Barb", "Barb", "Melanie and Dom"]
        result = verify_turn_order(order, participants, {"Dom & Melanie": "Melanie and Dom"})
        assert result["valid"], result["errors"]
