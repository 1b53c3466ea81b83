"""Message translation with per-locale catalogs."""

from typing import Optional

# Messages used by the API, overridable per locale
DEFAULT_MESSAGES: dict[str, str] = {
    "transition_rejected": "Transition rejected",
    "transition_scheduled": "Transition scheduled",
    "nothing_to_rollback": "Nothing to roll back",
    "authentication_required": "Authentication required",
    "not_authorized": "Not authorized",
}


class Translator:
    """Looks up message keys in the active locale, falling back to the key."""

    def __init__(self, default_locale: str = "en"):
        self.locale = default_locale
        self._translations: dict[str, dict[str, str]] = {}

    @property
    def locales(self) -> list[str]:
        return list(self._translations)

    def add_translations(self, locale: str, translations: dict[str, str]) -> None:
        """Merge ``translations`` into the catalog for ``locale``."""
        self._translations.setdefault(locale, {}).update(translations)

    def set_locale(self, locale: str) -> None:
        self.locale = locale

    def translate(self, key: str, locale: Optional[str] = None) -> str:
        catalog = self._translations.get(locale or self.locale, {})
        return catalog.get(key, key)


def create_translator(
    default_locale: str = "en",
    translations: Optional[dict[str, dict[str, str]]] = None,
) -> Translator:
    """Translator seeded with English defaults plus extra catalogs."""
    translator = Translator(default_locale)
    translator.add_translations("en", DEFAULT_MESSAGES)
    for locale, catalog in (translations or {}).items():
        translator.add_translations(locale, catalog)
    return translator
