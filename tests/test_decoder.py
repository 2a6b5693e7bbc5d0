"""Tests for the response decoder."""

from __future__ import annotations

import base64
import json

import pytest

from academia import decoder, schemas
from academia.errors import DecodeError
from academia.gemini_client import InlineMedia


class TestDecodeStructured:
    def test_valid_json_is_returned_untouched(self):
        raw = json.dumps([{"term": "Mitochondria", "definition": "The powerhouse of the cell"}])
        value = decoder.decode_structured(raw, schemas.FLASHCARDS)
        assert value == [{"term": "Mitochondria", "definition": "The powerhouse of the cell"}]

    def test_missing_required_field_fails_with_message(self):
        raw = json.dumps([{"term": "Mitochondria"}])
        with pytest.raises(DecodeError) as exc:
            decoder.decode_structured(raw, schemas.FLASHCARDS, message="Could not generate flashcards.")
        assert exc.value.message == "Could not generate flashcards."

    def test_invalid_json_fails(self):
        with pytest.raises(DecodeError) as exc:
            decoder.decode_structured("Here are your slides: ...", schemas.SLIDES)
        assert "invalid format" in exc.value.message

    def test_empty_text_fails(self):
        with pytest.raises(DecodeError):
            decoder.decode_structured("", schemas.SLIDES)

    def test_code_fence_is_tolerated(self):
        raw = "```json\n[{\"term\": \"a\", \"definition\": \"b\"}]\n```"
        assert decoder.decode_structured(raw, schemas.FLASHCARDS) == [{"term": "a", "definition": "b"}]

    def test_no_type_coercion(self):
        raw = json.dumps({"topic": "x", "durationDays": "7", "dailyTasks": []})
        with pytest.raises(DecodeError):
            decoder.decode_structured(raw, schemas.STUDY_PLAN)


class TestDecodeMedia:
    def test_base64_payload_becomes_bytes(self):
        payload = base64.b64encode(b"\x00\x01pcm").decode()
        assert decoder.decode_media(InlineMedia("audio/L16;rate=24000", payload)) == b"\x00\x01pcm"

    def test_missing_payload(self):
        with pytest.raises(DecodeError) as exc:
            decoder.decode_media(InlineMedia("audio/L16", ""), message="No audio data received.")
        assert exc.value.message == "No audio data received."

    def test_garbage_payload(self):
        with pytest.raises(DecodeError):
            decoder.decode_media(InlineMedia("image/jpeg", "not base64!!"))


class TestDecodeReferences:
    @pytest.mark.parametrize("chunks", [None, []])
    def test_absent_or_empty_means_no_sources(self, chunks):
        assert decoder.decode_references(chunks) == []

    def test_web_and_maps_chunks(self):
        refs = decoder.decode_references([
            {"web": {"uri": "https://example.org/a", "title": "A"}},
            {"maps": {"uri": "https://maps.example/p"}},
            {"web": {"title": "no uri"}},
        ])
        assert [(r.kind, r.uri, r.title) for r in refs] == [
            ("web", "https://example.org/a", "A"),
            ("maps", "https://maps.example/p", None),
        ]
        assert refs[1].label == "https://maps.example/p"


def test_data_url():
    assert decoder.data_url("image/jpeg", b"hi") == "data:image/jpeg;base64,aGk="
