import json

from ringabell.cli import main

from conftest import make_wav, sine


def test_match_command(tmp_path, capsys, sine_wav, noise_wav):
    songs = tmp_path / "songs"
    songs.mkdir()
    (songs / "a440.wav").write_bytes(sine_wav)
    (songs / "notes.txt").write_text("not audio")

    query = tmp_path / "query.wav"
    query.write_bytes(sine_wav)
    noise = tmp_path / "noise.wav"
    noise.write_bytes(noise_wav)

    assert main(["match", "--songs", str(songs), "--query", str(query), str(noise)]) == 0

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
    assert lines[0]["query"] == "query.wav"
    assert lines[0]["songName"] == "a440.wav"
    assert lines[1] == {"query": "noise.wav", "songName": "Not found", "score": 0}


def test_fingerprint_command_with_plots(tmp_path, capsys):
    path = tmp_path / "clip.wav"
    path.write_bytes(make_wav(sine(duration=1.0)))
    plots = tmp_path / "plots"

    assert main(["fingerprint", str(path), "--plot-dir", str(plots)]) == 0

    stats = json.loads(capsys.readouterr().out.splitlines()[-1])
    assert stats["frames"] == 21
    assert stats["fingerprints"] > 0
    assert (plots / "spectrogram.png").exists()
    assert (plots / "constellation.png").exists()


def test_bad_config_exits_with_error(tmp_path):
    assert main(["--config", str(tmp_path / "missing.yaml"), "match", "--songs", ".", "-q", "x.wav"]) == 2
