import io

import pytest

import cli.slow_copy as slow_copy_mod
from cli.slow_copy import build_parser, copy_stream, main
from core.throttle import throttle


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.source == "-"
    assert args.kbps == slow_copy_mod.THROTTLE_KBPS


def test_copy_stream_copies_everything(clock):
    data = bytes(range(256)) * 2
    out = io.BytesIO()

    total = copy_stream(throttle(io.BytesIO(data), 32), out)

    assert total == len(data)
    assert out.getvalue() == data


def test_main_copies_stdin(clock):
    stdin = io.BytesIO(b"through the slow pipe")
    stdout = io.BytesIO()

    assert main(["--kbps", "8"], stdin=stdin, stdout=stdout) == 0
    assert stdout.getvalue() == b"through the slow pipe"
    # one data chunk plus end of stream
    assert clock.sleeps == [pytest.approx(0.125), pytest.approx(0.125)]
    assert not stdin.closed


def test_main_copies_file(clock, tmp_path, monkeypatch):
    (tmp_path / "in.bin").write_bytes(b"file body")
    monkeypatch.setattr(slow_copy_mod, "PROJECT_ROOT", tmp_path)
    stdout = io.BytesIO()

    assert main(["--kbps", "100", "in.bin"], stdin=io.BytesIO(), stdout=stdout) == 0
    assert stdout.getvalue() == b"file body"


def test_main_invalid_rate(clock):
    stdout = io.BytesIO()
    assert main(["--kbps", "0"], stdin=io.BytesIO(b"x"), stdout=stdout) == 2
    assert stdout.getvalue() == b""
    assert clock.sleeps == []


def test_main_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(slow_copy_mod, "PROJECT_ROOT", tmp_path)
    assert main(["nope.bin"], stdin=io.BytesIO(), stdout=io.BytesIO()) == 2


def test_help_documents_project_root_restriction():
    text = build_parser().format_help()
    assert "PROJECT_ROOT" in text
    assert "refused" in text


def test_main_absolute_path_inside_root(clock, tmp_path, monkeypatch):
    target = tmp_path / "in.bin"
    target.write_bytes(b"abs body")
    monkeypatch.setattr(slow_copy_mod, "PROJECT_ROOT", tmp_path)
    stdout = io.BytesIO()

    assert main([str(target)], stdin=io.BytesIO(), stdout=stdout) == 0
    assert stdout.getvalue() == b"abs body"


def test_main_absolute_path_outside_root_refused(tmp_path, monkeypatch):
    target = tmp_path / "x.bin"
    target.write_bytes(b"secret")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.setattr(slow_copy_mod, "PROJECT_ROOT", elsewhere)
    stdout = io.BytesIO()

    assert main([str(target)], stdin=io.BytesIO(), stdout=stdout) == 2
    assert stdout.getvalue() == b""
