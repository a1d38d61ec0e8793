"""
Internationalization (i18n) module for the domain grid system.

Provides translations for all user-facing messages in English (en) and
German (de). Classifier audit trails stay in English; they are diagnostic
text rather than interface copy.
"""

from typing import Optional


SUPPORTED_LANGUAGES = frozenset({"en", "de"})
DEFAULT_LANGUAGE = "en"


# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Submission errors
    "submission.empty_base_names": {
        "en": "Please enter at least one base name.",
        "de": "Bitte mindestens einen Basisnamen eingeben.",
    },
    "submission.empty_tlds": {
        "en": "Please enter at least one TLD.",
        "de": "Bitte mindestens eine TLD eingeben.",
    },
    "submission.invalid_base_names": {
        "en": (
            "Invalid base name(s): {names}. Base names cannot contain dots "
            "and must be valid DNS labels."
        ),
        "de": (
            "Ungültige Basisnamen: {names}. Basisnamen dürfen keine Punkte "
            "enthalten und müssen gültige DNS-Labels sein."
        ),
    },
    "submission.invalid_tlds": {
        "en": "Invalid TLD(s): {tlds}. TLDs must be valid (e.g., com, co.uk).",
        "de": "Ungültige TLDs: {tlds}. TLDs müssen gültig sein (z. B. com, co.uk).",
    },
    "submission.too_many_combinations": {
        "en": (
            "Generated more than {limit:,} domain combinations. "
            "Please reduce base names or TLDs."
        ),
        "de": (
            "Mehr als {limit:,} Domain-Kombinationen erzeugt. "
            "Bitte Basisnamen oder TLDs reduzieren."
        ),
    },
    "submission.no_combinations": {
        "en": "No valid domain combinations to check.",
        "de": "Keine gültigen Domain-Kombinationen zu prüfen.",
    },

    # Cell statuses
    "status.idle": {
        "en": "Idle",
        "de": "Bereit",
    },
    "status.checking": {
        "en": "Checking",
        "de": "Wird geprüft",
    },
    "status.available": {
        "en": "Available",
        "de": "Verfügbar",
    },
    "status.taken": {
        "en": "Taken",
        "de": "Belegt",
    },
    "status.invalid": {
        "en": "Invalid",
        "de": "Ungültig",
    },

    # Run summary
    "summary.running": {
        "en": "Checking {total} domains... ({percent}% processed, {checking} pending updates)",
        "de": "Prüfe {total} Domains... ({percent}% verarbeitet, {checking} ausstehende Updates)",
    },
    "summary.finished": {
        "en": "{total} domains processed: {available} Available, {taken} Taken, {invalid} Invalid.",
        "de": "{total} Domains verarbeitet: {available} verfügbar, {taken} belegt, {invalid} ungültig.",
    },
    "summary.time_taken": {
        "en": " Time taken: {seconds:.2f} seconds.",
        "de": " Dauer: {seconds:.2f} Sekunden.",
    },

    # CLI messages
    "cli.checking": {
        "en": "Checking {total} domain(s): {names} base name(s) x {tlds} TLD(s)...",
        "de": "Prüfe {total} Domain(s): {names} Basisname(n) x {tlds} TLD(s)...",
    },
    "cli.no_results_match": {
        "en": "No results match your current filters.",
        "de": "Keine Ergebnisse entsprechen den aktuellen Filtern.",
    },
    "cli.results_written": {
        "en": "Results written to: {path}",
        "de": "Ergebnisse geschrieben nach: {path}",
    },
    "cli.base_name_header": {
        "en": "Base name",
        "de": "Basisname",
    },

    # Simulation mode
    "simulation.enabled": {
        "en": "Simulation mode active - no network requests are made.",
        "de": "Simulationsmodus aktiv - es werden keine Netzwerkanfragen gesendet.",
    },

    # Self-test
    "selftest.header": {
        "en": "Resolver self-test:",
        "de": "Resolver-Selbsttest:",
    },
    "selftest.provider_ok": {
        "en": "  OK   {provider}: DNS status {status} ({ms:.0f}ms)",
        "de": "  OK   {provider}: DNS-Status {status} ({ms:.0f}ms)",
    },
    "selftest.provider_failed": {
        "en": "  FAIL {provider}: {error}",
        "de": "  FEHLER {provider}: {error}",
    },
    "selftest.config_invalid": {
        "en": "Configuration is invalid:",
        "de": "Konfiguration ist ungültig:",
    },
    "selftest.duration": {
        "en": "Duration: {ms:.0f}ms",
        "de": "Dauer: {ms:.0f}ms",
    },
    "selftest.passed": {
        "en": "Self-test passed.",
        "de": "Selbsttest bestanden.",
    },
    "selftest.failed": {
        "en": "Self-test failed.",
        "de": "Selbsttest fehlgeschlagen.",
    },
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'status.available')
        language: Language code ('en' or 'de'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string.
        If the key is not found, returns the key itself.
        If the language is not found, falls back to DEFAULT_LANGUAGE.

    Examples:
        >>> get_message('status.available', 'de')
        'Verfügbar'
        >>> get_message('submission.invalid_tlds', 'en', tlds='x')
        'Invalid TLD(s): x. TLDs must be valid (e.g., com, co.uk).'
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language) or translations.get(DEFAULT_LANGUAGE)
    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except (KeyError, ValueError):
            # If formatting fails, return the unformatted message
            pass

    return message


def get_all_message_keys() -> set[str]:
    """Get all available message keys."""
    return set(TRANSLATIONS.keys())


def get_missing_translations(language: str) -> set[str]:
    """Get all message keys that are missing translations for a language."""
    return {key for key, translations in TRANSLATIONS.items() if language not in translations}


def has_translation(key: str, language: str) -> bool:
    """Check if a translation exists for a key and language."""
    translations = TRANSLATIONS.get(key)
    if translations is None:
        return False
    return language in translations


def validate_translations() -> dict[str, set[str]]:
    """
    Validate that all languages have all translations.

    Returns:
        Dictionary mapping language codes to sets of missing message keys.
        Empty sets indicate complete translations.
    """
    return {language: get_missing_translations(language) for language in SUPPORTED_LANGUAGES}
