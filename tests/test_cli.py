import json

import main as cli
from tests.fakes import FakeTranscoderFactory


def test_optimize_file_prints_summary(tmp_path, monkeypatch, capsys):
    source = tmp_path / "clip.mp4"
    source.write_bytes(b"\1" * 4000)
    monkeypatch.setattr(cli, "get_transcoder", FakeTranscoderFactory(output_size=1000))

    assert cli.main([str(source), "--json"]) == 0

    out = capsys.readouterr().out
    assert "Size reduction: 75.00%" in out
    record = json.loads(out[out.index("{"):])
    assert record["originalSize"] == 4000
    assert record["optimizedSize"] == 1000
    assert (tmp_path / "optimized-clip.mp4").exists()


def test_missing_input(tmp_path, capsys):
    assert cli.main([str(tmp_path / "nope.mp4")]) == 1
    assert "not found" in capsys.readouterr().out


def test_encoder_failure(tmp_path, monkeypatch, capsys):
    source = tmp_path / "clip.mp4"
    source.write_bytes(b"\1" * 10)
    monkeypatch.setattr(cli, "get_transcoder", FakeTranscoderFactory(output_size=10, fail=True))

    assert cli.main([str(source), "-m", "handbrake"]) == 1
    assert "encoder crashed" in capsys.readouterr().out
