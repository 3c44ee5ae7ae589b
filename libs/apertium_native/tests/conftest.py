from __future__ import annotations

import pytest

from apertium_native.config import PipelineConfig, Settings, ToolchainConfig


@pytest.fixture()
def os_release(tmp_path):
    path = tmp_path / "os-release"
    path.write_text('NAME="Ubuntu"\nID=ubuntu\n', encoding="utf-8")
    return path


@pytest.fixture()
def settings(tmp_path, os_release) -> Settings:
    return Settings(
        settings_file=str(tmp_path / "settings.json"),
        toolchain=ToolchainConfig(
            data_home=str(tmp_path / "data"),
            os_release_path=str(os_release),
        ),
        # "C" always exists, so shells never warn about the locale on stderr.
        pipeline=PipelineConfig(locale="C", timeout_s=30.0),
    )
