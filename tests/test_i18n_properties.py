"""
Property-based tests for internationalization (i18n) module.

Uses Hypothesis to verify translation coverage and message lookup.
"""

import re

from hypothesis import given, settings
from hypothesis import strategies as st

from domain_grid.enums import DomainStatus
from domain_grid.i18n import (
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
    get_message,
    get_all_message_keys,
    has_translation,
    get_missing_translations,
    validate_translations,
)


PLACEHOLDER = re.compile(r"\{(\w+)[^}]*\}")


class TestTranslationCoverageProperty:
    """Property-based tests for translation coverage."""

    def test_all_languages_have_all_translations(self) -> None:
        """
        *For any* message key used in the system, translations SHALL exist
        for both "en" and "de".
        """
        assert len(get_all_message_keys()) > 0, "No translations defined"

        for language in SUPPORTED_LANGUAGES:
            missing = get_missing_translations(language)
            assert len(missing) == 0, (
                f"Language '{language}' is missing translations for: {missing}"
            )

    @given(key=st.sampled_from(list(TRANSLATIONS.keys())))
    @settings(max_examples=100)
    def test_every_key_has_both_languages(self, key: str) -> None:
        """
        *For any* message key, both languages SHALL be present and non-empty.
        """
        for language in SUPPORTED_LANGUAGES:
            assert has_translation(key, language)
            assert TRANSLATIONS[key][language].strip()

    @given(key=st.sampled_from(list(TRANSLATIONS.keys())))
    @settings(max_examples=100)
    def test_placeholders_match_across_languages(self, key: str) -> None:
        """
        *For any* message key, every language SHALL use the same set of
        format placeholders.
        """
        placeholders = {
            language: set(PLACEHOLDER.findall(TRANSLATIONS[key][language]))
            for language in SUPPORTED_LANGUAGES
        }

        assert placeholders["en"] == placeholders["de"]

    @given(
        key=st.sampled_from(list(TRANSLATIONS.keys())),
        language=st.sampled_from(sorted(SUPPORTED_LANGUAGES)),
    )
    @settings(max_examples=100)
    def test_get_message_returns_string(self, key: str, language: str) -> None:
        """
        *For any* key and supported language, get_message SHALL return a
        non-empty string even when format arguments are missing.
        """
        message = get_message(key, language)

        assert isinstance(message, str)
        assert message

    def test_validate_translations_returns_empty_sets(self) -> None:
        result = validate_translations()

        assert set(result) == set(SUPPORTED_LANGUAGES)
        assert all(missing == set() for missing in result.values())


class TestGetMessageFunction:
    """Tests for message lookup and formatting."""

    def test_default_language_is_english(self) -> None:
        assert DEFAULT_LANGUAGE == "en"

    def test_get_message_with_no_language_uses_default(self) -> None:
        assert get_message("status.taken") == "Taken"

    def test_get_message_with_invalid_language_uses_default(self) -> None:
        assert get_message("status.taken", "fr") == "Taken"

    def test_get_message_with_unknown_key_returns_key(self) -> None:
        assert get_message("nope.missing", "de") == "nope.missing"

    def test_get_message_with_format_args(self) -> None:
        message = get_message("submission.too_many_combinations", "en", limit=50_000)

        assert message == (
            "Generated more than 50,000 domain combinations. Please reduce base names or TLDs."
        )

    def test_get_message_with_missing_format_args(self) -> None:
        template = TRANSLATIONS["submission.invalid_tlds"]["de"]

        assert get_message("submission.invalid_tlds", "de", unrelated="x") == template

    @given(
        status=st.sampled_from(list(DomainStatus)),
        language=st.sampled_from(sorted(SUPPORTED_LANGUAGES)),
    )
    @settings(max_examples=20)
    def test_status_messages_exist(self, status: DomainStatus, language: str) -> None:
        """
        *For any* cell status and language, a status label SHALL exist.
        """
        key = f"status.{status.name.lower()}"

        assert has_translation(key, language)
        if language == "en":
            assert get_message(key, language) == status.value


class TestSupportedLanguages:
    """Tests for the supported language set."""

    def test_supported_languages(self) -> None:
        assert SUPPORTED_LANGUAGES == {"en", "de"}

    def test_supported_languages_is_frozen(self) -> None:
        assert isinstance(SUPPORTED_LANGUAGES, frozenset)
