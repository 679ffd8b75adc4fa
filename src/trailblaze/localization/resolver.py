"""
Text resolver with per-language fallback and template expansion.
"""

import logging
from typing import Mapping, Sequence

from .models import TextHandle
from .templates import apply_params

logger = logging.getLogger(__name__)


class TextResolver:
    """Resolves text handles to display strings for a chosen language.

    The resolver wraps an already-loaded text map: a mapping from text key to
    a per-language mapping of strings. It never raises for a missing
    translation; the fallback chain is the requested language, then the
    handle's declared fallback language, then the resolver's fallback
    language, then the empty string.

    Example:
        >>> resolver = TextResolver({"101": {"en": "Increases DMG by {0}%"}})
        >>> handle = TextHandle(key="101", dynamic=True)
        >>> resolver.resolve(handle, "en", [50])
        'Increases DMG by 50%'
        >>> resolver.resolve(handle, "en")
        'Increases DMG by {0}%'
    """

    def __init__(
        self,
        texts: Mapping[str, Mapping[str, str]],
        fallback_language: str = "en",
    ) -> None:
        self._texts = texts
        self.fallback_language = fallback_language

    def with_fallback(self, fallback_language: str) -> "TextResolver":
        """Return a resolver over the same text map with another fallback language."""
        if fallback_language == self.fallback_language:
            return self
        return TextResolver(self._texts, fallback_language=fallback_language)

    def lookup(self, key: str, language: str) -> str | None:
        """Return the raw text for ``key`` in exactly ``language``, if any."""
        entry = self._texts.get(key)
        if not entry:
            return None
        text = entry.get(language)
        return text if text else None

    def _raw_text(self, handle: TextHandle, language: str) -> str:
        chain = [language, handle.fallback_language, self.fallback_language]
        for lang in chain:
            if lang is None:
                continue
            text = self.lookup(handle.key, lang)
            if text is not None:
                if lang != language:
                    logger.debug(f"Text {handle.key} missing in '{language}', using '{lang}'")
                return text
        logger.debug(f"Text {handle.key} has no translation in any fallback language")
        return ""

    def resolve(
        self,
        handle: TextHandle | None,
        language: str,
        params: Sequence[float] | None = None,
    ) -> str:
        """Resolve a handle to its display string.

        Args:
            handle: Text handle; None resolves to the empty string
            language: Requested language code
            params: Positional parameters for dynamic handles. Ignored for
                plain handles. Absent or empty leaves a dynamic template
                unexpanded.

        Returns:
            The resolved text (possibly empty). Never raises for missing
            translations or malformed templates.
        """
        if handle is None:
            return ""
        text = self._raw_text(handle, language)
        if not handle.dynamic:
            return text
        return apply_params(text, params)
