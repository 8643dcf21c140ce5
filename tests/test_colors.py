from __future__ import annotations

import re

import numpy as np

from game.colors import GLITCH_COLOR, color_for_score, grayscale, monochrome_trail, random_color


def test_grayscale_fades_and_clamps() -> None:
    assert grayscale(0) == "rgb(255, 255, 255)"
    assert grayscale(5) == "rgb(205, 205, 205)"
    assert grayscale(20) == "rgb(55, 55, 55)"
    assert grayscale(21) == "rgb(50, 50, 50)"
    assert grayscale(100) == "rgb(50, 50, 50)"


def test_random_color_is_six_hex_digits(rng: np.random.Generator) -> None:
    colors = {random_color(rng) for _ in range(50)}
    assert all(re.match(r"^#[0-9A-F]{6}$", c) for c in colors)
    assert len(colors) > 1


def test_color_for_score_bands(rng: np.random.Generator) -> None:
    assert color_for_score(1, rng).startswith("#")
    assert color_for_score(10, rng).startswith("#")
    assert color_for_score(11, rng) == "rgb(145, 145, 145)"
    assert color_for_score(20, rng) == "rgb(55, 55, 55)"
    assert color_for_score(21, rng) == GLITCH_COLOR
    assert color_for_score(99, rng) == GLITCH_COLOR


def test_monochrome_trail() -> None:
    assert monochrome_trail(3) == ["rgb(255, 255, 255)", "rgb(245, 245, 245)", "rgb(235, 235, 235)"]
    assert monochrome_trail(0) == []
