"""Tests for gettext integration helpers."""

from __future__ import annotations

import os
from pathlib import Path

import polib
import pytest

from chatbridge import i18n
from chatbridge.transcript.errors import format_process_error

pytestmark = pytest.mark.unit


def _make_catalog(base: Path, language: str) -> Path:
    directory = base / language / "LC_MESSAGES"
    directory.mkdir(parents=True)
    po_path = directory / "chatbridge.po"
    catalog = polib.POFile()
    catalog.metadata = {
        "Content-Type": "text/plain; charset=UTF-8",
        "Language": language,
        "Plural-Forms": "nplurals=2; plural=(n != 1);",
    }
    catalog.append(polib.POEntry(msgid="Interrupted", msgstr="Interrompu"))
    catalog.append(
        polib.POEntry(
            msgid="message",
            msgid_plural="messages",
            msgstr_plural={0: "message", 1: "messages"},
        )
    )
    catalog.save(str(po_path))
    return po_path


def test_untranslated_by_default() -> None:
    assert i18n.gettext("Interrupted") == "Interrupted"
    assert i18n._("Process error") == "Process error"


def test_install_falls_back_to_po_catalog(tmp_path: Path) -> None:
    _make_catalog(tmp_path, "fr")

    i18n.install(localedir=tmp_path, languages=["fr"])

    assert i18n.gettext("Interrupted") == "Interrompu"
    assert format_process_error("claude exited: exit status 143") == "Interrompu"


def test_install_detects_language_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setitem(os.environ, "LANGUAGE", "fr")
    _make_catalog(tmp_path, "fr")

    i18n.install(localedir=tmp_path)

    assert i18n.gettext("Interrupted") == "Interrompu"


def test_missing_catalog_keeps_english(tmp_path: Path) -> None:
    i18n.install(localedir=tmp_path, languages=["de"])

    assert i18n.gettext("Interrupted") == "Interrupted"


def test_plural_translations(tmp_path: Path) -> None:
    _make_catalog(tmp_path, "fr")
    i18n.install(localedir=tmp_path, languages=["fr"])

    assert i18n.ngettext("message", "messages", 1) == "message"
    assert i18n.ngettext("message", "messages", 4) == "messages"


def test_reset_restores_english(tmp_path: Path) -> None:
    _make_catalog(tmp_path, "fr")
    i18n.install(localedir=tmp_path, languages=["fr"])

    i18n.reset()

    assert i18n.gettext("Interrupted") == "Interrupted"


@pytest.mark.quality
def test_bundled_catalogues_translate_error_messages() -> None:
    po_files = sorted(i18n.LOCALE_DIR.glob(f"*/LC_MESSAGES/{i18n.DOMAIN}.po"))
    assert po_files

    for po_path in po_files:
        catalog = polib.pofile(str(po_path))
        translated = {entry.msgid for entry in catalog.translated_entries()}
        assert {"Interrupted", "Process error", "Unknown error"} <= translated


@pytest.mark.quality
def test_bundled_russian_catalogue_loads() -> None:
    i18n.install(languages=["ru"])

    assert i18n.gettext("Interrupted") == "Прервано"
