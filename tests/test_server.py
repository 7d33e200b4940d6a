import pytest
from fastapi.testclient import TestClient

from ringabell.config import Config
from ringabell.server import create_app


@pytest.fixture
def client():
    return TestClient(create_app(Config()))


def _upload(data, filename="clip.wav"):
    return {"audio": (filename, data, "audio/wav")}


def test_register_then_search(client, sine_wav):
    resp = client.post("/register", files=_upload(sine_wav), data={"name": "A"})
    assert resp.status_code == 200
    assert resp.json() == {"songName": "A", "registered": 1}

    resp = client.post("/search", files=_upload(sine_wav))
    assert resp.status_code == 200
    body = resp.json()
    assert body["songName"] == "A"
    assert body["score"] >= 10


def test_register_defaults_to_filename(client, sine_wav):
    client.post("/register", files=_upload(sine_wav, "a440.wav"))
    assert client.get("/songs").json() == {"songs": ["a440.wav"]}


def test_search_not_found(client, sine_wav, noise_wav):
    client.post("/register", files=_upload(sine_wav), data={"name": "A"})
    resp = client.post("/search", files=_upload(noise_wav))
    assert resp.json() == {"songName": "Not found", "score": 0}


def test_malformed_audio_is_rejected(client, sine_wav):
    resp = client.post("/register", files=_upload(sine_wav[:-1]), data={"name": "bad"})
    assert resp.status_code == 400
    assert client.get("/songs").json() == {"songs": []}

    resp = client.post("/search", files=_upload(b"RIFF" + b"\x00" * 40))
    assert resp.status_code == 400


def test_upload_size_limit(sine_wav):
    client = TestClient(create_app(Config(max_upload_bytes=1000)))
    resp = client.post("/search", files=_upload(sine_wav))
    assert resp.status_code == 413
