"""Composition root building shared dependencies for chatbridge."""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .controller import ChatController, Dispatcher
from .log import configure_logging
from .settings import AppSettings, load_app_settings
from .transcript.engine import TranscriptEngine
from .transport import ScriptedTransport, Transport


class ApplicationContext:
    """Central dependency registry shared by frontends and tests."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport_factory: Callable[[], Transport] | None = None,
    ) -> None:
        self._settings = settings
        self._transport_factory = transport_factory or ScriptedTransport

    @property
    def settings(self) -> AppSettings:
        """Return settings, falling back to defaults when none were supplied."""
        if self._settings is None:
            self._settings = AppSettings()
        return self._settings

    def create_engine(self) -> TranscriptEngine:
        """Return a new engine configured from the transcript settings."""
        transcript = self.settings.transcript
        return TranscriptEngine(
            id_prefix=transcript.id_prefix,
            strict_request_ids=transcript.strict_request_ids,
        )

    def create_controller(
        self,
        transport: Transport | None = None,
        *,
        dispatch: Dispatcher | None = None,
    ) -> ChatController:
        """Return a started controller owning a fresh engine."""
        controller = ChatController(
            self.create_engine(),
            transport if transport is not None else self._transport_factory(),
            dispatch=dispatch,
        )
        controller.start()
        return controller

    def configure_logging(self) -> None:
        """Install log handlers according to the logging settings."""
        configure_logging(self.settings.log.level, log_dir=self.settings.log.log_dir)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        transport_factory: Callable[[], Transport] | None = None,
    ) -> "ApplicationContext":
        """Load settings from *path* and configure logging from them."""
        context = cls(load_app_settings(path), transport_factory=transport_factory)
        context.configure_logging()
        return context


__all__ = ["ApplicationContext"]
