"""Tests for mapfence.cli.runners module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from mapfence.cli.runners import load_snapshot, run_query, run_render
from mapfence.regions import Region, StoreDocument, StoreError


@pytest.fixture
def store_path(tmp_path: Path, make_region: Callable[..., Region]) -> Path:
    document = StoreDocument(
        regions=[make_region("hall", (0, 0, 50, 50), floors=(2,), name="Hall")]
    )
    path = tmp_path / "regions.json"
    path.write_text(document.model_dump_json(), encoding="utf-8")
    return path


class TestLoadSnapshot:
    """Tests for load_snapshot."""

    def test_reads_document(self, store_path: Path) -> None:
        snapshot = load_snapshot(store_path)
        assert [r.id for r in snapshot.regions] == ["hall"]
        assert snapshot.playing_area is None

    def test_bad_document(self, tmp_path: Path) -> None:
        path = tmp_path / "regions.json"
        path.write_text('{"regions": [{"id": ""}]}', encoding="utf-8")
        with pytest.raises(StoreError):
            load_snapshot(path)


class TestRunQuery:
    """Tests for run_query."""

    def test_no_playing_area_accepts(self, store_path: Path) -> None:
        result = run_query(store_path, 25, 25, override=False)
        assert result.accepted
        assert result.region is not None
        assert result.region.name == "Hall"
        assert result.floors == (2,)

    def test_outside_regions(self, store_path: Path) -> None:
        result = run_query(store_path, 75, 75, override=False)
        assert result.accepted
        assert result.to_dict()["region_id"] is None
        assert result.to_dict()["floors"] is None


class TestRunRender:
    """Tests for run_render."""

    def test_saves_output(self, store_path: Path, tmp_path: Path) -> None:
        plan = tmp_path / "plan.png"
        Image.new("RGB", (40, 40), (255, 255, 255)).save(plan)

        saved = run_render(plan, store_path, tmp_path / "overlay.png")

        assert saved.exists()
        with Image.open(saved) as rendered:
            assert rendered.getpixel((5, 5)) != (255, 255, 255)
