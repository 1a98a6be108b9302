# -----------------------------------------------------------------------------
# rv - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of rv.
#
# rv is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------

from pathlib import Path

import pytest

from rv.context import GlobalConfig
from rv.core.config.config_loader import ConfigLoader
from rv.core.data.review_target import BranchAgainst
from rv.core.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.lower().startswith("rv_"):
            monkeypatch.delenv(key)
    return monkeypatch


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_when_nothing_is_configured(tmp_path, clean_env):
    config, used, used_defaults = ConfigLoader.get_full_config(
        GlobalConfig, {}, tmp_path / "local.toml", "rv_", tmp_path / "global.toml"
    )

    assert config == GlobalConfig()
    assert used == []
    assert used_defaults


def test_priority_order(tmp_path, clean_env):
    local = _write(tmp_path / "local.toml", "report_sources = false\nfind_renames = true\n")
    global_ = _write(
        tmp_path / "global.toml",
        "report_sources = true\nfind_renames = false\npr_timeout_seconds = 30\n",
    )
    clean_env.setenv("RV_FIND_RENAMES", "false")

    config, used, _ = ConfigLoader.get_full_config(
        GlobalConfig, {"verbose": True}, local, "rv_", global_
    )

    assert config.verbose is True
    assert config.report_sources is False
    assert config.find_renames is True
    assert config.pr_timeout_seconds == 30
    assert used == ["Input Args", "Local Config", "Global Config"]


def test_env_values_are_parsed(tmp_path, clean_env):
    clean_env.setenv("RV_REPORT_DIFFS", "false")
    clean_env.setenv("RV_DEFAULT_BRANCH_MODE", "CURRENT")
    clean_env.setenv("RV_LOCKFILE_PATTERNS", "go.sum, *.lock")

    config, used, _ = ConfigLoader.get_full_config(
        GlobalConfig, {}, tmp_path / "none.toml", "rv_", tmp_path / "none2.toml"
    )

    assert config.report_diffs is False
    assert config.default_branch_mode == BranchAgainst.CURRENT
    assert config.lockfile_patterns == ["go.sum", "*.lock"]
    assert used == ["Environment Variables"]


def test_custom_config_beats_local(tmp_path, clean_env):
    local = _write(tmp_path / "local.toml", "report_diffs = true\n")
    custom = _write(tmp_path / "custom.toml", "report_diffs = false\n")

    config, used, _ = ConfigLoader.get_full_config(
        GlobalConfig, {}, local, "rv_", tmp_path / "global.toml", custom
    )

    assert config.report_diffs is False
    assert used == ["Custom Config"]


def test_missing_custom_config(tmp_path, clean_env):
    with pytest.raises(ConfigurationError):
        ConfigLoader.get_full_config(
            GlobalConfig, {}, tmp_path / "a.toml", "rv_", tmp_path / "b.toml", tmp_path / "nope.toml"
        )


def test_invalid_value(tmp_path, clean_env):
    local = _write(tmp_path / "local.toml", 'default_branch_mode = "sideways"\n')

    with pytest.raises(ConfigurationError) as excinfo:
        ConfigLoader.get_full_config(GlobalConfig, {}, local, "rv_", tmp_path / "g.toml")
    assert excinfo.value.message == "Invalid configuration"


def test_broken_toml_is_ignored(tmp_path):
    broken = _write(tmp_path / "broken.toml", "this is = = not toml")

    assert ConfigLoader.load_toml(broken) == {}


def test_load_env_strips_prefix(clean_env):
    clean_env.setenv("RV_SILENT", "1")
    clean_env.setenv("OTHER_SILENT", "1")

    assert ConfigLoader.load_env("rv_") == {"silent": "1"}
