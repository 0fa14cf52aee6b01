"""Tests for the effect modules, run through the registry."""

from pathlib import Path

import numpy as np
import pytest
from palette_remap.core.palette import build_palette, load_image, to_image
from palette_remap.core.remap import remap_image
from palette_remap.core.sampler import Sampler
from palette_remap.core.types import Effect, Job, Report
from palette_remap.registry import discover, get
from PIL import Image

COLUMNS = [
    ('#102030', '#c04080', '#20e0a0'),
    ('#000000', '#ffffff', '#ff0000'),
]


def _sprite(w: int = 6, h: int = 4) -> np.ndarray:
    """Background left half, foreground right half, accent bottom row; palette column 0."""
    arr = np.zeros((h, w, 4), dtype=np.float32)
    arr[..., 3] = 1.0
    arr[:, w // 2 :, 0] = 1.0
    arr[h - 1, :, 1] = 1.0
    return arr


def _job(tmp_path: Path, image: np.ndarray | None = None, palette: np.ndarray | None = None) -> Job:
    return Job(
        image_path=str(tmp_path / 'sprite.png'),
        image=_sprite() if image is None else image,
        out_dir=str(tmp_path / 'out'),
        palette_path=str(tmp_path / 'palette.png') if palette is not None else None,
        palette=palette,
    )


class Args:
    ref = None
    index = None
    max_index = None
    fail_on_mismatch = None


class TestRegistry:
    def test_discovers_all_effects(self):
        names = set(discover())
        assert {'remap', 'encode', 'swatch', 'compare'} <= names

    def test_unknown_effect(self):
        with pytest.raises(KeyError, match='Unknown effect'):
            get('blur')

    def test_effect_without_run(self):
        with pytest.raises(RuntimeError, match='no run function'):
            Effect('empty').execute(None, Report(), Args())


class TestRemapEffect:
    def test_writes_remapped_png(self, tmp_path: Path) -> None:
        pal = build_palette(COLUMNS)
        job = _job(tmp_path, palette=pal)
        report = Report()
        get('remap').execute(job, report, Args())

        data = report.effects['remap']
        out = Path(data['output'])
        assert out.name == 'sprite_remapped.png'
        assert out.exists()
        assert data['width'] == 6
        assert data['height'] == 4
        assert data['columns_used'] == [0]
        assert data['source_sampler'] == 'nearest/clamp'

        expected = to_image(remap_image(job.image, pal))
        assert np.array_equal(np.asarray(Image.open(out)), np.asarray(expected))

    def test_pixels_take_palette_colours(self, tmp_path: Path) -> None:
        pal = build_palette(COLUMNS)
        job = _job(tmp_path, palette=pal)
        report = Report()
        get('remap').execute(job, report, Args())
        out = load_image(report.effects['remap']['output'])
        assert np.allclose(out[0, 0], pal[0, 0])  # background
        assert np.allclose(out[0, 5], pal[1, 0])  # foreground
        assert np.allclose(out[3, 0], pal[2, 0])  # accent
        assert np.allclose(out[3, 5], pal[2, 0])  # accent wins over foreground

    def test_tint_reported_not_applied(self, tmp_path: Path) -> None:
        pal = build_palette(COLUMNS)
        job = _job(tmp_path, palette=pal)
        job.tint = (1.0, 0.0, 0.0, 1.0)
        report = Report()
        get('remap').execute(job, report, Args())
        data = report.effects['remap']
        assert data['tint_applied'] is False
        out = load_image(data['output'])
        assert np.allclose(out[0, 0], pal[0, 0])

    def test_columns_used_follows_repeat_wrap(self, tmp_path: Path) -> None:
        pal = build_palette(COLUMNS)
        texel = np.array([[[0.0, 0.0, 1.0, 1.0]]], dtype=np.float32)
        job = _job(tmp_path, image=texel, palette=pal)
        job.palette_sampler = Sampler(wrap='repeat')
        report = Report()
        get('remap').execute(job, report, Args())

        data = report.effects['remap']
        # blue 1.0 is one past the last column and wraps back to column 0
        assert data['columns_used'] == [0]
        assert data['palette_sampler'] == 'nearest/repeat'
        out = load_image(data['output'])
        assert np.allclose(out[0, 0], pal[0, 0], atol=1 / 255)

    def test_columns_used_lists_both_linear_neighbours(self, tmp_path: Path) -> None:
        pal = build_palette(COLUMNS)
        texel = np.array([[[0.0, 0.0, 0.5, 1.0]]], dtype=np.float32)
        job = _job(tmp_path, image=texel, palette=pal)
        job.palette_sampler = Sampler(filter='linear')
        report = Report()
        get('remap').execute(job, report, Args())
        assert report.effects['remap']['columns_used'] == [0, 1]

    def test_missing_palette(self, tmp_path: Path) -> None:
        report = Report()
        get('remap').execute(_job(tmp_path), report, Args())
        assert 'error' in report.effects['remap']


class TestEncodeEffect:
    def test_sets_blue_channel(self, tmp_path: Path) -> None:
        args = Args()
        args.index = 1
        args.max_index = 1
        report = Report()
        get('encode').execute(_job(tmp_path), report, args)

        data = report.effects['encode']
        assert data['blue'] == 1.0
        encoded = load_image(data['output'])
        assert np.all(encoded[..., 2] == 1.0)
        # red and green weights untouched
        assert np.array_equal(encoded[..., :2], _sprite()[..., :2])

    def test_encoded_sprite_remaps_to_selected_column(self, tmp_path: Path) -> None:
        args = Args()
        args.index = 1
        args.max_index = 1
        report = Report()
        get('encode').execute(_job(tmp_path), report, args)

        pal = build_palette(COLUMNS)
        encoded = load_image(report.effects['encode']['output'])
        out = remap_image(encoded, pal)
        assert np.array_equal(out[0, 0], pal[0, 1])

    def test_default_max_index_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('PALETTE_REMAP_MAX_INDEX', '4')
        args = Args()
        args.index = 2
        report = Report()
        get('encode').execute(_job(tmp_path), report, args)
        assert report.effects['encode']['max_index'] == 4
        assert report.effects['encode']['blue'] == 0.5

    def test_default_max_index(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('PALETTE_REMAP_MAX_INDEX', raising=False)
        args = Args()
        args.index = 8
        report = Report()
        get('encode').execute(_job(tmp_path), report, args)
        assert report.effects['encode']['max_index'] == 32
        assert report.effects['encode']['blue'] == 0.25

    def test_missing_index(self, tmp_path: Path) -> None:
        report = Report()
        get('encode').execute(_job(tmp_path), report, Args())
        assert report.effects['encode']['error'] == '--index required'

    def test_index_out_of_range(self, tmp_path: Path) -> None:
        args = Args()
        args.index = 9
        args.max_index = 3
        report = Report()
        get('encode').execute(_job(tmp_path), report, args)
        assert 'out of range' in report.effects['encode']['error']


class TestSwatchEffect:
    def test_lists_columns(self, tmp_path: Path) -> None:
        report = Report()
        get('swatch').execute(_job(tmp_path, palette=build_palette(COLUMNS)), report, Args())
        columns = report.effects['swatch']['columns']
        assert len(columns) == 2
        assert columns[0] == {
            'column': 0,
            'background': '#102030ff',
            'foreground': '#c04080ff',
            'accent': '#20e0a0ff',
        }
        assert columns[1]['accent'] == '#ff0000ff'

    def test_missing_palette(self, tmp_path: Path) -> None:
        report = Report()
        get('swatch').execute(_job(tmp_path), report, Args())
        assert 'error' in report.effects['swatch']


class TestCompareEffect:
    def _save_ref(self, tmp_path: Path, arr: np.ndarray) -> str:
        path = tmp_path / 'ref.png'
        to_image(arr).save(path)
        return str(path)

    def test_identical_is_zero(self, tmp_path: Path) -> None:
        args = Args()
        args.ref = self._save_ref(tmp_path, _sprite())
        args.fail_on_mismatch = 0.0
        report = Report()
        get('compare').execute(_job(tmp_path), report, args)

        data = report.effects['compare']
        assert data['mismatch_pct'] == 0.0
        assert data['pass'] is True
        assert report.pass_count == 1
        assert Path(data['diff_image']).exists()

    def test_detects_mismatch(self, tmp_path: Path) -> None:
        ref = _sprite()
        ref[0, :, :3] = 0.5  # 6 of 24 pixels differ
        args = Args()
        args.ref = self._save_ref(tmp_path, ref)
        args.fail_on_mismatch = 10.0
        report = Report()
        get('compare').execute(_job(tmp_path), report, args)

        data = report.effects['compare']
        assert data['mismatch_pixels'] == 6
        assert data['mismatch_pct'] == 25.0
        assert data['pass'] is False
        assert report.fail_count == 1

        diff = np.asarray(Image.open(data['diff_image']))
        assert tuple(diff[0, 0]) == (200, 0, 0)
        assert tuple(diff[1, 0]) == (0, 200, 0)

    def test_no_threshold_no_pass_fail(self, tmp_path: Path) -> None:
        args = Args()
        args.ref = self._save_ref(tmp_path, _sprite())
        report = Report()
        get('compare').execute(_job(tmp_path), report, args)
        assert 'pass' not in report.effects['compare']
        assert report.pass_count == 0
        assert report.fail_count == 0

    def test_resizes_reference(self, tmp_path: Path) -> None:
        big = np.zeros((8, 12, 4), dtype=np.float32)
        big[..., 3] = 1.0
        args = Args()
        args.ref = self._save_ref(tmp_path, big)
        report = Report()
        job = _job(tmp_path, image=big[:4, :6].copy())
        get('compare').execute(job, report, args)
        assert report.effects['compare']['mismatch_pct'] == 0.0

    def test_missing_ref(self, tmp_path: Path) -> None:
        report = Report()
        get('compare').execute(_job(tmp_path), report, Args())
        assert 'error' in report.effects['compare']
