"""Tests for mapfence.editor.palette module."""

from __future__ import annotations

import pytest

from mapfence.editor import ColorPalette


class TestColorPalette:
    """Tests for round-robin colour assignment."""

    def test_rotates(self) -> None:
        palette = ColorPalette(colors=("#111111", "#222222"))
        assert [palette.next_color() for _ in range(3)] == [
            "#111111",
            "#222222",
            "#111111",
        ]

    def test_consecutive_colours_differ(self) -> None:
        palette = ColorPalette()
        colours = [palette.next_color() for _ in range(20)]
        assert all(a != b for a, b in zip(colours, colours[1:], strict=False))

    def test_seed_continues_rotation(self) -> None:
        palette = ColorPalette(colors=("#111111", "#222222", "#333333"))
        palette.seed(4)
        assert palette.next_color() == "#222222"

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one colour"):
            ColorPalette(colors=())
