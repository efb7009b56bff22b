"""Runtime gettext translations for user-facing transcript strings."""

from __future__ import annotations

import gettext as _gettext
import logging
import os
from collections.abc import Iterable, Sequence
from gettext import GNUTranslations, NullTranslations, _expand_lang
from io import BytesIO
from pathlib import Path
from typing import Final

import polib

__all__ = ["_", "DOMAIN", "LOCALE_DIR", "gettext", "install", "ngettext", "reset"]

DOMAIN: Final = "chatbridge"
LOCALE_DIR: Final = Path(__file__).resolve().parent / "locale"

logger = logging.getLogger(__name__)

_TRANSLATION: NullTranslations = NullTranslations()


def gettext(message: str) -> str:
    """Translate *message* using the active catalogue."""
    return _TRANSLATION.gettext(message)


def ngettext(singular: str, plural: str, number: int) -> str:
    """Translate a pluralisable message based on *number*."""
    return _TRANSLATION.ngettext(singular, plural, number)


_: Final = gettext


def install(
    domain: str = DOMAIN,
    localedir: str | os.PathLike[str] | None = None,
    languages: Iterable[str] | None = None,
) -> NullTranslations:
    """Activate the catalogue for *domain* and return it.

    Compiled ``.mo`` files are preferred. When none is found the matching
    ``.po`` source is compiled in memory so development checkouts work without
    running ``msgfmt`` first.
    """
    directory = Path(localedir) if localedir is not None else LOCALE_DIR
    requested = _requested_languages(languages)
    translation = _gettext.translation(
        domain,
        localedir=str(directory),
        languages=requested or None,
        fallback=True,
    )
    if type(translation) is NullTranslations:
        compiled = _compile_po_catalogue(domain, directory, requested)
        if compiled is not None:
            translation = compiled
    _activate(translation)
    return translation


def reset() -> None:
    """Drop the active catalogue and return to untranslated messages."""
    _activate(NullTranslations())


def _activate(translation: NullTranslations) -> None:
    global _TRANSLATION
    _TRANSLATION = translation


_LANGUAGE_ENV: Final = ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")


def _environment_languages() -> list[str]:
    for name in _LANGUAGE_ENV:
        value = os.environ.get(name, "")
        parts = [part.strip() for part in value.split(":") if part.strip()]
        if parts:
            return parts
    return []


def _requested_languages(languages: Iterable[str] | None) -> list[str]:
    """Expand ``ru_RU.UTF-8`` style names into gettext lookup candidates."""
    if languages is None:
        languages = _environment_languages()
    candidates: dict[str, None] = {}
    for language in filter(None, languages):
        candidates.update(dict.fromkeys(c for c in _expand_lang(language) if c))
    return list(candidates)


def _compile_po_catalogue(
    domain: str,
    localedir: Path,
    languages: Sequence[str],
) -> GNUTranslations | None:
    po_paths = (localedir / lang / "LC_MESSAGES" / f"{domain}.po" for lang in languages)
    for po_path in po_paths:
        if not po_path.is_file():
            continue
        try:
            catalogue = polib.pofile(str(po_path))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable catalogue %s", po_path)
            continue
        return GNUTranslations(BytesIO(catalogue.to_binary()))
    return None
