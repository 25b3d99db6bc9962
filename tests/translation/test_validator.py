"""Tests for post-translation validation."""

from tests.conftest import make_config
from verbi.translation.validator import validate_translations


def _validate(tmp_path, source, target, **overrides):
    return validate_translations(source, target, "es", make_config(tmp_path, **overrides))


class TestValidateTranslations:
    def test_all_valid(self, tmp_path):
        report = _validate(tmp_path, {"Hello {name}": "Hello {name}"}, {"Hello {name}": "Hola {name}"})
        assert report.stats == {"total": 1, "valid": 1, "invalid": 0, "missing": 0}
        assert report.errors == []
        assert not report.has_blocking_errors

    def test_missing_counted_without_error(self, tmp_path):
        report = _validate(tmp_path, {"Save": "Save", "Open": "Open"}, {"Save": "Guardar", "Open": ""})
        assert report.missing == 1
        assert report.valid == 1
        assert report.errors == []

    def test_fail_on_missing(self, tmp_path):
        report = _validate(tmp_path, {"Save": "Save"}, {}, validate={"fail_on_missing": True})
        [issue] = report.errors
        assert issue.type == "missing"
        assert issue.message == "Missing translation for key: Save"
        assert report.has_blocking_errors

    def test_icu_missing_placeholder(self, tmp_path):
        report = _validate(tmp_path, {"k": "Hello {name}"}, {"k": "Hola"})
        [issue] = report.errors
        assert issue.type == "icu"
        assert "Missing: name" in issue.message
        assert report.invalid == 1
        assert report.valid == 0
        assert report.has_blocking_errors

    def test_icu_extra_placeholder(self, tmp_path):
        report = _validate(tmp_path, {"k": "Hello"}, {"k": "Hola {foo}"})
        assert report.errors[0].message == "Extra: foo"

    def test_icu_failure_skips_other_checks(self, tmp_path):
        # would also trip the length ratio
        report = _validate(tmp_path, {"k": "Hi {name}"}, {"k": "x" * 100})
        assert len(report.errors) == 1
        assert report.warnings == []

    def test_placeholder_check_when_icu_disabled(self, tmp_path):
        report = _validate(
            tmp_path, {"k": "Hi {a}"}, {"k": "Hola {b}"}, validate={"icu": False},
        )
        [issue] = report.errors
        assert issue.type == "placeholder"
        assert issue.message == "Missing: a; Extra: b"

    def test_no_placeholder_checks(self, tmp_path):
        report = _validate(
            tmp_path, {"k": "Hi {a}"}, {"k": "Hola {b}"},
            validate={"icu": False, "placeholders": False},
        )
        assert report.errors == []
        assert report.valid == 1

    def test_glossary_term_not_blocking(self, tmp_path):
        report = _validate(tmp_path, {"k": "Welcome to Verbi"}, {"k": "Bienvenido a Verbo"})
        [issue] = report.errors
        assert issue.type == "glossary"
        assert "Verbi" in issue.message
        assert report.valid == 1
        assert not report.has_blocking_errors

    def test_glossary_term_preserved(self, tmp_path):
        report = _validate(tmp_path, {"k": "Welcome to Verbi"}, {"k": "Bienvenido a Verbi"})
        assert report.errors == []

    def test_length_warning(self, tmp_path):
        report = _validate(tmp_path, {"k": "Hi"}, {"k": "Hola, que tal estas"})
        [warning] = report.warnings
        assert warning.type == "length"
        assert "950% of original" in warning.message
        assert report.valid == 1

    def test_short_translation_warning(self, tmp_path):
        report = _validate(tmp_path, {"k": "Configuration settings"}, {"k": "Conf"})
        assert report.warnings[0].type == "length"

    def test_to_dict(self, tmp_path):
        report = _validate(tmp_path, {"k": "Hello {name}"}, {"k": "Hola"})
        data = report.to_dict()
        assert data["locale"] == "es"
        assert data["stats"]["invalid"] == 1
        assert data["errors"][0]["translated_text"] == "Hola"
