"""
Unit tests for response assembly and playback URLs.
"""

from audio.response import (
    YomitanAudioSource,
    assemble_response,
    audio_entry_path,
    build_url,
)
from services.datasets import AudioEntry


def entry(source="nhk16", file="neko.mp3", display=None):
    return AudioEntry(expression="猫", reading="ねこ", source=source, file=file, display=display)


class TestBuildUrl:
    def test_joins_base_and_path(self, audio_config):
        assert build_url("http://h:8000/", "/audio/tts", config=audio_config) == "http://h:8000/audio/tts"

    def test_percent_encodes_params(self, audio_config):
        url = build_url("http://h/", "/audio/tts", {"term": "行く", "pitch": "イ'ク"}, config=audio_config)

        assert url == "http://h/audio/tts?term=%E8%A1%8C%E3%81%8F&pitch=%E3%82%A4%27%E3%82%AF"

    def test_api_key_only_with_auth(self, audio_config, auth_config):
        assert "apiKey" not in build_url("http://h/", "/audio/list", api_key="key-one", config=audio_config)
        assert build_url("http://h/", "/audio/list", api_key="key-one", config=auth_config).endswith(
            "?apiKey=key-one"
        )


class TestAudioEntryPath:
    def test_flat_file(self):
        assert audio_entry_path(entry()) == "/audio/get/nhk16/neko.mp3"

    def test_nested_folders_keep_slashes(self):
        assert audio_entry_path(entry(file="a/b/c.mp3")) == "/audio/get/nhk16/a/b/c.mp3"

    def test_segments_escaped(self):
        assert audio_entry_path(entry(source="forvo", file="ユーザー 1.mp3")) == (
            "/audio/get/forvo/%E3%83%A6%E3%83%BC%E3%82%B6%E3%83%BC%201.mp3"
        )


class TestAssembleResponse:
    def test_recordings_precede_tts(self, audio_config):
        tts = [YomitanAudioSource(name="TTS (Default - No DB)", url="http://h/audio/tts?term=x")]

        response = assemble_response(
            [entry(display="nhk16 (E+R)"), entry(source="jpod", file="x/y.mp3")],
            tts,
            "http://h/",
            None,
            audio_config,
        )

        assert response.type == "audioSourceList"
        assert [s.name for s in response.audioSources] == ["nhk16 (E+R)", "jpod", "TTS (Default - No DB)"]
        assert response.audioSources[1].url == "http://h/audio/get/jpod/x/y.mp3"

    def test_empty(self, audio_config):
        response = assemble_response([], [], "http://h/", None, audio_config)

        assert response.model_dump() == {"type": "audioSourceList", "audioSources": []}
