"""
Tests for probeshim/shim.py - routing between synthesis and passthrough
"""
import json
import sys
from unittest.mock import patch

import pytest

from probeshim import shim
from probeshim.errors import SubprocessFailure

TV_NAME = "Show.Name.S01E02.1080p.x264-GROUP.mkv"
MOVIE_NAME = "Movie.Title.2020.2160p.x265-GROUP.mkv"


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Isolated environment with the shim enabled."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USE_FFPROBE_SHIM", "1")
    monkeypatch.setenv("FFPROBE_SHIM_LOG", str(tmp_path / "shim.log"))
    monkeypatch.setenv("REAL_FFPROBE_PATH", str(tmp_path / "ffprobe.real"))
    monkeypatch.delenv("FFPROBE_SHIM_REDUCE_PROBING", raising=False)
    return tmp_path


@pytest.fixture
def real(env):
    with patch("probeshim.shim.run_real_ffprobe", return_value=7) as run:
        yield run


def media(directory, name):
    path = directory / name
    path.write_bytes(b"")
    return str(path)


def probe_args(path, output_format="json"):
    return ["-v", "quiet", "-print_format", output_format, "-show_format", "-show_streams", path]


class TestSynthesis:

    def test_tv_report(self, env, real, capsys):
        path = media(env, TV_NAME)
        assert shim.main(probe_args(path)) == 0
        report = json.loads(capsys.readouterr().out)
        video = report["streams"][0]
        assert (video["width"], video["height"], video["codec_name"]) == (1920, 1080, "h264")
        assert report["format"]["duration"] == "2700.000000"
        assert report["format"]["filename"] == path
        real.assert_not_called()

    def test_movie_report(self, env, real, capsys):
        path = media(env, MOVIE_NAME)
        assert shim.main(probe_args(path)) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["streams"][0]["codec_name"] == "hevc"
        assert report["streams"][0]["bit_rate"] == "25000000"
        assert report["format"]["size"] == "15000000000"

    def test_stdout_holds_only_the_report(self, env, real, capsys):
        path = media(env, TV_NAME)
        shim.main(probe_args(path))
        out = capsys.readouterr().out
        assert out.startswith("{") and out.endswith("}")

    def test_identical_output_for_repeated_calls(self, env, real, capsys):
        path = media(env, MOVIE_NAME)
        shim.main(probe_args(path))
        first = capsys.readouterr().out
        shim.main(probe_args(path))
        assert capsys.readouterr().out == first

    def test_logs_go_to_file(self, env, real, capsys):
        shim.main(probe_args(media(env, TV_NAME)))
        assert "Processing file" in (env / "shim.log").read_text()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX byte file names")
    def test_undecodable_file_name(self, env, real, capsysbinary):
        path = media(env, "Show.Name.S01E02.1080p.\udcff.x264-GROUP.mkv")
        assert shim.main(probe_args(path)) == 0
        captured = capsysbinary.readouterr()
        assert captured.err == b""
        assert b"\xff" in captured.out
        assert json.loads(captured.out.decode("utf-8", errors="replace"))["streams"]
        assert "\\udcff" in (env / "shim.log").read_text(encoding="utf-8")
        real.assert_not_called()

    def test_config_warnings_reach_the_log(self, env, real, monkeypatch):
        monkeypatch.setenv("FFPROBE_SHIM_TIMEOUT", "abc")
        shim.main(["-version"])
        assert "FFPROBE_SHIM_TIMEOUT" in (env / "shim.log").read_text()


class TestPassthrough:

    def test_disabled_shim(self, env, real, monkeypatch, capsys):
        monkeypatch.delenv("USE_FFPROBE_SHIM")
        args = probe_args(media(env, TV_NAME))
        assert shim.main(args) == 7
        real.assert_called_once()
        assert real.call_args.args[1] == args
        assert capsys.readouterr().out == ""

    def test_unknown_name(self, env, real, capsys):
        args = probe_args(media(env, "vacation.mkv"))
        assert shim.main(args) == 7
        assert real.call_args.args[1] == args
        assert capsys.readouterr().out == ""

    def test_unsupported_writer(self, env, real, capsys):
        args = probe_args(media(env, TV_NAME), output_format="xml")
        assert shim.main(args) == 7
        assert capsys.readouterr().out == ""

    def test_pixel_format_listing(self, env, real):
        assert shim.main(["-pix_fmts"]) == 7

    def test_no_input_file(self, env, real):
        assert shim.main(["-version"]) == 7

    def test_bad_arguments(self, env, real, capsys):
        assert shim.main([media(env, TV_NAME), "-of"]) == 7
        assert capsys.readouterr().out == ""

    def test_unexpected_error(self, env, real, capsys):
        with patch("probeshim.shim.build_report", side_effect=RuntimeError("boom")):
            assert shim.main(probe_args(media(env, TV_NAME))) == 7
        assert capsys.readouterr().out == ""

    def test_tuning_rewrite_when_enabled(self, env, real, monkeypatch):
        monkeypatch.setenv("FFPROBE_SHIM_REDUCE_PROBING", "1")
        shim.main(["-probesize", "5000000", "-version"])
        assert real.call_args.args[1] == [
            "-analyzeduration", "500000", "-probesize", "500000", "-version",
        ]

    def test_missing_real_binary(self, env, capsys):
        assert shim.main(["-version"]) == 0
        assert capsys.readouterr().out == ""

    def test_unencodable_report(self, env, real, capsys):
        with patch("probeshim.shim.serialize", return_value="\ud800"):
            assert shim.main(probe_args(media(env, TV_NAME))) == 7
        assert capsys.readouterr().out == ""

    def test_subprocess_failure(self, env, capsys):
        with patch("probeshim.shim.run_real_ffprobe", side_effect=SubprocessFailure("timed out")):
            assert shim.main(["-version"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "timed out" in captured.err
