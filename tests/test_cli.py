import io
import json

import numpy as np
import pytest

import sentence_stop_aligner as cli


@pytest.fixture
def silent_pair(wav_factory, text_factory):
    audio = wav_factory(np.zeros(32_000, dtype=np.int16), sample_rate=16_000)
    text = text_factory("One. Two? Three!")
    return audio, text


def test_positional_args_print_json(silent_pair, capsys):
    audio, text = silent_pair
    assert cli.main([audio, text]) == cli.EXIT_OK

    out = json.loads(capsys.readouterr().out)
    assert out["audio_path"] == audio
    assert out["text_path"] == text
    assert out["stops"] == [
        {"sentence": "One.", "audio_stop": 0.0},
        {"sentence": "Two?", "audio_stop": 1.0},
        {"sentence": "Three!", "audio_stop": 1.5},
    ]


def test_stdin_mode_with_period_policy(silent_pair, capsys, monkeypatch):
    audio, text = silent_pair
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{audio}\n{text}\n"))

    code = cli.main(["--input_mode", "stdin", "--policy", "period", "--edge_correction", "none"])

    assert code == cli.EXIT_OK
    out = json.loads(capsys.readouterr().out)
    assert out["stops"] == [
        {"sentence": "One", "audio_stop": 0.5},
        {"sentence": "Two? Three!", "audio_stop": 1.0},
    ]


def test_shift_and_tuning_flags(silent_pair, capsys):
    audio, text = silent_pair
    code = cli.main([audio, text, "--edge_correction", "shift", "--min_silence_duration", "1.0"])
    assert code == cli.EXIT_OK
    stops = json.loads(capsys.readouterr().out)["stops"]
    assert [s["audio_stop"] for s in stops] == [0.0, 1.0]


def test_output_file(silent_pair, tmp_path, capsys):
    audio, text = silent_pair
    target = tmp_path / "result.json"
    assert cli.main([audio, text, "--output", str(target), "--indent", "2"]) == cli.EXIT_OK
    assert capsys.readouterr().out == ""
    assert len(json.loads(target.read_text(encoding="utf-8"))["stops"]) == 3


def test_missing_positional_is_argument_error(silent_pair, capsys):
    audio, _ = silent_pair
    assert cli.main([audio]) == cli.EXIT_ARGUMENT
    assert capsys.readouterr().out == ""


def test_short_stdin_is_argument_error(silent_pair, monkeypatch, capsys):
    audio, _ = silent_pair
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{audio}\n"))
    assert cli.main(["--input_mode", "stdin"]) == cli.EXIT_ARGUMENT
    assert capsys.readouterr().out == ""


def test_bad_duration_is_argument_error(silent_pair):
    audio, text = silent_pair
    assert cli.main([audio, text, "--min_silence_duration", "0"]) == cli.EXIT_ARGUMENT


def test_missing_files_exit_not_found(silent_pair, tmp_path, capsys):
    audio, text = silent_pair
    assert cli.main([str(tmp_path / "gone.wav"), text]) == cli.EXIT_NOT_FOUND
    assert cli.main([audio, str(tmp_path / "gone.txt")]) == cli.EXIT_NOT_FOUND
    assert capsys.readouterr().out == ""


def test_corrupt_audio_exit_decode(text_factory, tmp_path, capsys):
    bogus = tmp_path / "bogus.wav"
    bogus.write_bytes(b"RIFX0000WAVE")
    assert cli.main([str(bogus), text_factory("One.")]) == cli.EXIT_DECODE
    assert capsys.readouterr().out == ""


def test_unknown_policy_rejected_by_argparse(silent_pair):
    audio, text = silent_pair
    with pytest.raises(SystemExit) as exc:
        cli.main([audio, text, "--policy", "nlp"])
    assert exc.value.code == 2


def test_invalid_utf8_transcript_exits_cleanly(silent_pair, tmp_path, capsys):
    audio, _ = silent_pair
    bad = tmp_path / "bad.txt"
    bad.write_bytes(b"One. \xff\xfe Two.")
    assert cli.main([audio, str(bad)]) == cli.EXIT_ERROR
    assert capsys.readouterr().out == ""


def test_stdin_mode_rejects_positional_paths(silent_pair, monkeypatch, capsys):
    audio, text = silent_pair
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{audio}\n{text}\n"))
    assert cli.main([audio, text, "--input_mode", "stdin"]) == cli.EXIT_ARGUMENT
    assert capsys.readouterr().out == ""
