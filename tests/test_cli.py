import json
from types import SimpleNamespace

import pytest

import lensgrid.__main__ as cli
from lensgrid import Point, Region


def _write_event(tmp_path):
    path = tmp_path / "event.json"
    path.write_text(
        json.dumps(
            {
                "name": "Massless",
                "resolution": 0.125,
                "lenses": [{"position": [50.0, 50.0], "mass": 0.0}],
                "source": {"radius": 0.25},
                "region": {"x": -1.0, "y": -1.0, "size": 2.0},
                "trajectory": {"start": [0.0, 0.0], "end": [0.5, 0.0], "frames": 4},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_main_reports_search_and_writes_tikz(tmp_path, capsys):
    event_path = _write_event(tmp_path)
    tikz_path = tmp_path / "out" / "frame.tex"

    cli.main([str(event_path), "--frame", "2", "--tikz-output-path", str(tikz_path), "--show-grid"])

    out = capsys.readouterr().out
    assert "Event: Massless" in out
    assert "Frame: 2/4" in out
    assert "Source: (0.250000, 0.000000) r=0.250000" in out
    assert "Magnification estimate:" in out
    assert "Unresolved regions: 0" in out
    document = tikz_path.read_text(encoding="utf-8")
    assert document.startswith("\\documentclass")
    assert "Massless, frame 2" in document
    assert "\\draw[cell]" in document


def test_main_clamps_frame_and_overrides_resolution(tmp_path, capsys, monkeypatch):
    event_path = _write_event(tmp_path)
    calls = []

    def _search(lens_field, source, region, *, stats, options):
        calls.append((lens_field.resolution, source.origin, region))
        stats.record(0, region.area)
        return SimpleNamespace(
            snapshot=stats.snapshot,
            terminals=[],
            unresolved=[],
            hit_area=0.0,
            eliminated_area=region.area,
            area_fraction=1.0,
            source=source,
        )

    monkeypatch.setattr(cli, "search", _search)
    monkeypatch.setattr(cli, "estimate_magnification", lambda result: 0.0)

    cli.main([str(event_path), "--frame", "9", "--resolution", "0.5"])

    assert calls == [(0.5, Point(0.5, 0.0), Region(-1.0, -1.0, 2.0))]
    out = capsys.readouterr().out
    assert "Frame: 4/4" in out
    assert "    0: area=4.000000 calls=0" in out


@pytest.mark.parametrize("value", ["0", "-0.5", "nan"])
def test_main_rejects_non_positive_resolution(tmp_path, capsys, value):
    event_path = _write_event(tmp_path)

    with pytest.raises(SystemExit) as exc:
        cli.main([str(event_path), "--resolution", value])

    assert exc.value.code == 2
    captured = capsys.readouterr()
    assert "--resolution must be a positive number" in captured.err
    assert "Event:" not in captured.out
