"""Facade wiring setup, mode discovery and pipeline execution together."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from apertium_native.config import Settings
from apertium_native.exceptions import SetupError
from apertium_native.executor import PipelineExecutor, describe_pair, no_mode_message
from apertium_native.installation import load_installation, run_setup
from apertium_native.models import Installation, TranslationResult
from apertium_native.modes import ModeCatalog, ModeRegistry
from apertium_native.settings_store import SettingsStore

logger = logging.getLogger(__name__)

# Invoked on reinstall with the current installation; expected to (re)populate
# the toolchain tree under installation.pipeline_root.
Installer = Callable[[Installation], None]


class ApertiumNative:
    def __init__(
        self,
        store: SettingsStore,
        settings: Settings | None = None,
        *,
        installer: Installer | None = None,
        environ: Mapping[str, str] | None = None,
        system: str | None = None,
        home: str | Path | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.installer = installer
        self.catalog = ModeCatalog()
        self._environ = environ
        self._system = system
        self._home = home
        self._installation: Installation | None = None
        self._executor: PipelineExecutor | None = None

    @property
    def name(self) -> str:
        return self.settings.plugin_name

    @property
    def installation(self) -> Installation:
        if self._installation is None:
            self._bind(load_installation(self.store, self.settings))
        assert self._installation is not None
        return self._installation

    @property
    def executor(self) -> PipelineExecutor:
        if self._executor is None:
            self._bind(self.installation)
        assert self._executor is not None
        return self._executor

    def _bind(self, installation: Installation) -> None:
        self._installation = installation
        self._executor = PipelineExecutor(self.catalog, installation, self.settings.pipeline)

    def initialize(self) -> ModeRegistry:
        """Run setup, then discover modes.

        A SetupError leaves the registry empty and is re-raised.
        """
        try:
            installation = run_setup(
                self.store,
                self.settings,
                system=self._system,
                environ=self._environ,
                home=self._home,
            )
        except SetupError:
            self.catalog.clear()
            self._installation = None
            self._executor = None
            raise
        self._bind(installation)
        return self.refresh_modes()

    def refresh_modes(self) -> ModeRegistry:
        registry = self.catalog.refresh(self.installation)
        logger.info("%s: %d mode(s) available", self.name, len(registry))
        return registry

    def reinstall(self) -> ModeRegistry:
        """Trigger the installer, then rebuild the registry from disk."""
        if self.installer is None:
            logger.warning("%s: no installer configured; refreshing modes only", self.name)
        else:
            logger.info("%s: running installer for %s", self.name, self.installation.pipeline_root)
            self.installer(self.installation)
        return self.refresh_modes()

    def available_pairs(self) -> list[str]:
        return self.catalog.snapshot.pairs()

    def execute(self, source_language: str, target_language: str, text: str) -> TranslationResult:
        return self.executor.execute(source_language, target_language, text)

    def translate(self, source_language: str, target_language: str, text: str) -> str:
        # No modes (setup failed, never ran, or nothing installed): nothing can
        # match, and the installation may not even be loadable.
        if not self.catalog.snapshot:
            return no_mode_message(describe_pair(source_language, target_language))
        return self.executor.translate(source_language, target_language, text)

    async def atranslate(self, source_language: str, target_language: str, text: str) -> str:
        return await asyncio.to_thread(self.translate, source_language, target_language, text)
