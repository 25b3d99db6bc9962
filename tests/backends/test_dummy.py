"""Tests for the dummy translation backend."""

import asyncio

from verbi.backends.base import TranslationRequest
from verbi.backends.dummy import DummyBackend


def _req(text, target="es", key=None):
    return TranslationRequest(key=key or text, source_text=text, source_locale="en", target_locale=target)


class TestDummyBackend:
    def test_translate(self):
        backend = DummyBackend()
        [resp] = asyncio.run(backend.translate([_req("Hello")]))
        assert resp.key == "Hello"
        assert resp.text == "[ES] Hello"
        assert resp.confidence == 1.0

    def test_keys_preserved(self):
        backend = DummyBackend()
        responses = asyncio.run(backend.translate([_req("Hello", key="a"), _req("World", key="b")]))
        assert [(r.key, r.text) for r in responses] == [("a", "[ES] Hello"), ("b", "[ES] World")]

    def test_empty(self):
        assert asyncio.run(DummyBackend().translate([])) == []

    def test_tag_uppercase(self):
        [resp] = asyncio.run(DummyBackend().translate([_req("Test", target="pt-br")]))
        assert resp.text == "[PT-BR] Test"

    def test_validate_config(self):
        assert asyncio.run(DummyBackend().validate_config()) is True
