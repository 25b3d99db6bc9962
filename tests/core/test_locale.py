"""Tests for locale helpers."""

from verbi.core.locale import (
    get_language_code,
    get_locale_display_name,
    is_valid_locale,
    normalize_locale,
)


class TestLocale:
    def test_normalize(self):
        assert normalize_locale("en_us") == "en-US"
        assert normalize_locale("PT-br") == "pt-BR"
        assert normalize_locale("FR") == "fr"

    def test_language_code(self):
        assert get_language_code("pt-BR") == "pt"
        assert get_language_code("zh_TW") == "zh"

    def test_display_name(self):
        assert get_locale_display_name("pt_br") == "Portuguese (Brazil)"
        assert get_locale_display_name("xx") == "xx"

    def test_valid_locale(self):
        assert is_valid_locale("es")
        assert is_valid_locale("en-US")
        assert is_valid_locale("fil")
        assert not is_valid_locale("english")
        assert not is_valid_locale("e")
