"""
Integration tests for the audio HTTP routes.

Runs the FastAPI app in-process with in-memory backends installed through
AudioBootstrap.set_instance.
"""

from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from audio.tts import tts_cache_key, tts_object_key
from infra import AudioBootstrap, AudioConfig
from main import app
from services.datasets import AudioEntry, InMemoryAudioDataset, InMemoryPitchDataset, PitchEntry
from services.storage import InMemoryObjectStore
from services.tts import StubTTSBackend


AUDIO_ROWS = [
    AudioEntry(expression="猫", reading="びょう", source="jpod", file="byou/cat.mp3"),
    AudioEntry(expression="猫", reading="ねこ", source="nhk16", file="neko.mp3", display="ねこ"),
    AudioEntry(expression="根子", reading="ねこ", source="forvo", file="neko2.mp3"),
]

PITCH_ROWS = [
    PitchEntry(id="7", expression="箸", reading="はし", pitch="ハ'シ", count=4),
]


@pytest.fixture
def store():
    return InMemoryObjectStore({
        "nhk16_files/neko.mp3": b"ID3-neko",
        "jpod_files/byou/cat.mp3": b"ID3-byou",
    })


@pytest.fixture
def stub_tts():
    return StubTTSBackend()


def install(config, store, stub_tts, audio_dataset=None, pitch_dataset=None):
    bootstrap = AudioBootstrap(
        config,
        tts_backend=stub_tts,
        object_store=store,
        audio_dataset=audio_dataset or InMemoryAudioDataset(AUDIO_ROWS),
        pitch_dataset=pitch_dataset or InMemoryPitchDataset(PITCH_ROWS),
    )
    AudioBootstrap.set_instance(bootstrap)
    return bootstrap


@pytest.fixture
def client(store, stub_tts):
    install(AudioConfig(), store, stub_tts)
    yield TestClient(app)
    AudioBootstrap.reset()


class TestListAudio:
    """GET /audio/list"""

    def test_ranked_recordings_then_tts(self, client):
        response = client.get("/audio/list", params={"term": "猫", "reading": "ねこ"})

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "audioSourceList"

        names = [source["name"] for source in body["audioSources"]]
        assert names == [
            "nhk16: ねこ (E+R)",
            "jpod (E)",
            "forvo (R)",
            "TTS (Default - No DB)",
            "TTS (ネコ Forced)",
            "TTS (ネ'コ Forced)",
        ]

    def test_recording_urls(self, client):
        body = client.get("/audio/list", params={"term": "猫", "reading": "ねこ"}).json()
        urls = [source["url"] for source in body["audioSources"][:3]]

        assert urls == [
            "http://testserver/audio/get/nhk16/neko.mp3",
            "http://testserver/audio/get/jpod/byou/cat.mp3",
            "http://testserver/audio/get/forvo/neko2.mp3",
        ]

    def test_term_only_match_is_expression(self, client):
        body = client.get("/audio/list", params={"term": "猫"}).json()

        assert "jpod (E)" in [source["name"] for source in body["audioSources"]]

    def test_katakana_reading_normalized(self, client):
        body = client.get("/audio/list", params={"term": "猫", "reading": "ネコ"}).json()

        assert body["audioSources"][0]["name"] == "nhk16: ねこ (E+R)"

    def test_tts_candidates_without_dataset_rows(self, client):
        body = client.get("/audio/list", params={"term": "行く", "reading": "いく"}).json()

        assert [source["name"] for source in body["audioSources"]] == [
            "TTS (Default - No DB)",
            "TTS (イク Forced)",
            "TTS (イ'ク Forced)",
        ]

    def test_tts_candidates_with_dataset_rows(self, client):
        body = client.get("/audio/list", params={"term": "箸", "reading": "はし"}).json()

        assert [source["name"] for source in body["audioSources"]] == [
            "TTS (ハ'シ Pitch DB)",
            "TTS (ハシ Forced)",
        ]

    def test_source_filter(self, client):
        body = client.get("/audio/list", params={"term": "猫", "reading": "ねこ", "sources": "jpod"}).json()

        assert [source["name"] for source in body["audioSources"]] == ["jpod (E)"]

    def test_tts_only(self, client):
        body = client.get("/audio/list", params={"term": "猫", "reading": "ねこ", "sources": "tts"}).json()

        assert all(source["name"].startswith("TTS (") for source in body["audioSources"])

    def test_missing_parameters(self, client):
        response = client.get("/audio/list")

        assert response.status_code == 400
        assert "message" in response.json()

    def test_term_too_long(self, client):
        response = client.get("/audio/list", params={"term": "猫" * 121})

        assert response.status_code == 400

    def test_dataset_failure_hides_detail(self, store, stub_tts, failing_audio_dataset):
        install(AudioConfig(), store, stub_tts, audio_dataset=failing_audio_dataset)
        try:
            response = TestClient(app).get("/audio/list", params={"term": "猫"})
        finally:
            AudioBootstrap.reset()

        assert response.status_code == 502
        assert response.json() == {"message": "Database query failed"}


class TestGetAudio:
    """GET /audio/get/..."""

    def test_get_recording(self, client):
        response = client.get("/audio/get/nhk16/neko.mp3")

        assert response.status_code == 200
        assert response.headers["content-type"] == "audio/mpeg"
        assert response.content == b"ID3-neko"

    def test_get_recording_in_folder(self, client):
        response = client.get("/audio/get/jpod/byou/cat.mp3")

        assert response.status_code == 200
        assert response.content == b"ID3-byou"

    def test_missing_file(self, client):
        response = client.get("/audio/get/nhk16/missing.mp3")

        assert response.status_code == 404
        assert response.json() == {"message": "File not found"}

    def test_unknown_route(self, client):
        response = client.get("/audio/unknown")

        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}

    def test_wrong_method_uses_message_body(self, client):
        response = client.post("/audio/list")

        assert response.status_code == 405
        assert response.json() == {"message": "Method Not Allowed"}

    def test_nested_folder_url_from_list_is_playable(self, stub_tts):
        rows = [AudioEntry(expression="狐", reading="きつね", source="jpod", file="a/b c/kitsune.mp3")]
        store = InMemoryObjectStore({"jpod_files/a/b c/kitsune.mp3": b"ID3-kitsune"})
        install(AudioConfig(), store, stub_tts, audio_dataset=InMemoryAudioDataset(rows))
        try:
            client = TestClient(app)
            body = client.get("/audio/list", params={"term": "狐", "sources": "jpod"}).json()
            url = body["audioSources"][0]["url"]
            response = client.get(url)
        finally:
            AudioBootstrap.reset()

        assert url == "http://testserver/audio/get/jpod/a/b%20c/kitsune.mp3"
        assert response.status_code == 200
        assert response.content == b"ID3-kitsune"


class TestTTSAudio:
    """GET /audio/tts"""

    def test_first_request_synthesizes_and_caches(self, client, store, stub_tts):
        params = {"term": "行く", "reading": "いく", "pitch": "イ'ク"}

        first = client.get("/audio/tts", params=params)
        second = client.get("/audio/tts", params=params)

        assert first.status_code == 200
        assert first.headers["content-type"] == "audio/mpeg"
        assert first.content == second.content
        assert stub_tts.calls == 1
        key = tts_object_key(tts_cache_key("行く", "いく", "イ'ク"))
        assert store.objects[key] == first.content

    def test_candidate_url_is_playable(self, client, stub_tts):
        body = client.get("/audio/list", params={"term": "行く", "reading": "いく"}).json()
        url = body["audioSources"][-1]["url"]

        response = client.get(url)

        assert response.status_code == 200
        assert stub_tts.calls == 1

    def test_different_pitch_different_audio(self, client):
        flat = client.get("/audio/tts", params={"term": "行く", "reading": "いく", "pitch": "イク"})
        drop = client.get("/audio/tts", params={"term": "行く", "reading": "いく", "pitch": "イ'ク"})

        assert flat.content != drop.content

    def test_tts_disabled(self, store):
        install(AudioConfig(tts_enabled=False), store, None)
        try:
            client = TestClient(app)
            listed = client.get("/audio/list", params={"term": "行く", "reading": "いく"})
            response = client.get("/audio/tts", params={"term": "行く", "reading": "いく"})
        finally:
            AudioBootstrap.reset()

        assert listed.json()["audioSources"] == []
        assert response.status_code == 503


class TestAuthentication:
    """API key checks on every route."""

    @pytest.fixture
    def auth_client(self, store, stub_tts, auth_config):
        install(auth_config, store, stub_tts)
        yield TestClient(app)
        AudioBootstrap.reset()

    def test_missing_key(self, auth_client):
        response = auth_client.get("/audio/list", params={"term": "猫"})

        assert response.status_code == 400

    def test_invalid_key(self, auth_client):
        response = auth_client.get("/audio/list", params={"term": "猫", "apiKey": "wrong"})

        assert response.status_code == 403
        assert response.json() == {"message": "Invalid API key"}

    def test_repeated_key(self, auth_client):
        response = auth_client.get("/audio/list?term=%E7%8C%AB&apiKey=key-one&apiKey=key-two")

        assert response.status_code == 400

    def test_valid_key_propagated_to_urls(self, auth_client):
        response = auth_client.get("/audio/list", params={"term": "猫", "reading": "ねこ", "apiKey": "key-two"})

        assert response.status_code == 200
        for source in response.json()["audioSources"]:
            assert parse_qs(urlsplit(source["url"]).query)["apiKey"] == ["key-two"]

    def test_get_and_tts_require_key(self, auth_client):
        assert auth_client.get("/audio/get/nhk16/neko.mp3").status_code == 400
        assert auth_client.get("/audio/get/nhk16/neko.mp3", params={"apiKey": "key-one"}).status_code == 200
        assert auth_client.get("/audio/tts", params={"term": "猫", "apiKey": "nope"}).status_code == 403


class TestHealth:
    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_ready(self, client):
        assert client.get("/health/ready").json()["status"] == "ready"
