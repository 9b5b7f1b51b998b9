from __future__ import annotations

import runpy
from pathlib import Path

import numpy as np
import pytest
from typer.testing import CliRunner

from bs1770 import cli
from bs1770.infrastructure.flac_tags import FlacLoudnessTagger
from bs1770.infrastructure.pedalboard_codec import write_audio_file

runner = CliRunner()


def test_analyze_prints_tracks_and_album(flac_track) -> None:
    first = flac_track("01 intro.flac", -20.0)
    second = flac_track("02 song.flac", -23.0)

    result = runner.invoke(cli.app, ["analyze", str(first), str(second)])

    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if "LKFS" in line]
    assert lines[0] == "-20.0 LKFS  01 intro.flac"
    assert lines[1] == "-23.0 LKFS  02 song.flac"
    assert lines[2].endswith(" LKFS  ALBUM")


def test_analyze_writes_tags_when_asked(flac_track) -> None:
    path = flac_track("01.flac", -18.0)

    result = runner.invoke(cli.app, ["analyze", "--write-tags", "--jobs", "2", str(path)])

    assert result.exit_code == 0, result.output
    tags = FlacLoudnessTagger().read(path)
    assert tags.track_lkfs == pytest.approx(-18.0, abs=0.15)
    assert tags.album_lkfs == pytest.approx(tags.track_lkfs)


def test_analyze_reports_undefined_loudness_as_negative_infinity(tmp_path: Path) -> None:
    path = tmp_path / "silence.flac"
    write_audio_file(path, np.zeros((2, 44_100)), 44_100)

    result = runner.invoke(cli.app, ["analyze", str(path)])

    assert result.exit_code == 0, result.output
    assert " -inf LKFS  silence.flac" in result.output
    assert " -inf LKFS  ALBUM" in result.output


def test_analyze_rejects_bad_layout(flac_track) -> None:
    path = flac_track("01.flac", -18.0)

    result = runner.invoke(cli.app, ["analyze", "--layout", "L,R,C", str(path)])

    assert result.exit_code == 1
    assert "Failed to analyze album" in result.output


def test_waveform_writes_svg(flac_track, tmp_path: Path) -> None:
    path = flac_track("01.flac", -18.0, duration_s=2.0)
    output = tmp_path / "wave.svg"

    result = runner.invoke(cli.app, ["waveform", str(path), "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8").startswith("<svg")


def test_module_entrypoint_calls_cli_main(monkeypatch) -> None:
    called = {"value": False}

    def fake_main():
        called["value"] = True

    monkeypatch.setattr(cli, "main", fake_main)

    with pytest.raises(SystemExit) as exc_info:
        runpy.run_module("bs1770.__main__", run_name="__main__")

    assert called["value"]
    assert exc_info.value.code == 0
