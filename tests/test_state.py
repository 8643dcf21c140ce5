from __future__ import annotations

from game.state import BODY, EMPTY, FOOD, HEAD, Direction, Status

from helpers import make_state


def test_direction_deltas_and_opposites() -> None:
    assert Direction.UP.delta == (0, -1)
    assert Direction.DOWN.delta == (0, 1)
    assert Direction.LEFT.delta == (-1, 0)
    assert Direction.RIGHT.delta == (1, 0)
    for d in Direction:
        assert d.opposite.opposite == d
        dx, dy = d.delta
        ox, oy = d.opposite.delta
        assert (dx + ox, dy + oy) == (0, 0)


def test_exploding_statuses() -> None:
    assert Status.EXPLODING_10.is_exploding
    assert Status.EXPLODING_20.is_exploding
    assert not any(s.is_exploding for s in (Status.START, Status.PLAYING, Status.GAME_OVER, Status.INFO))


def test_to_dict_snapshot() -> None:
    state = make_state(food=(3, 4), score=7, pucci_active=True)
    data = state.to_dict()

    assert data["snake"][0] == {"x": 10, "y": 10}
    assert data["food"] == {"x": 3, "y": 4}
    assert data["status"] == "PLAYING"
    assert data["direction"] == "UP"
    assert data["score"] == 7
    assert data["pucci_active"] is True
    assert data["grid_size"] == 20
    assert len(data["colors"]) == 3

    # The snapshot is detached from the state
    data["colors"].append("#000")
    assert len(state.colors) == 3


def test_to_grid_marks_head_body_and_food() -> None:
    grid = make_state(food=(3, 4)).to_grid()

    assert grid.shape == (20, 20)
    assert grid[10, 10] == HEAD
    assert grid[11, 10] == BODY
    assert grid[12, 10] == BODY
    assert grid[4, 3] == FOOD
    assert (grid != EMPTY).sum() == 4
