from __future__ import annotations

from pathlib import Path

import pytest

from reviewbuddy.config import (
    DEFAULT_RULE_GROUPS,
    ConfigError,
    ReviewBuddyConfig,
    RulesConfig,
    compute_enabled_rule_ids,
    load_config,
)
from reviewbuddy.rules.registry import rule_ids


def _write(tmp_path: Path, body: str) -> Path:
    (tmp_path / "pyproject.toml").write_text(body.lstrip(), encoding="utf-8")
    return tmp_path


def test_missing_pyproject_returns_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path) == ReviewBuddyConfig()


def test_pyproject_without_table_returns_defaults(tmp_path: Path) -> None:
    _write(tmp_path, '[project]\nname = "x"\n')
    assert load_config(tmp_path) == ReviewBuddyConfig()


def test_loads_thresholds_and_language(tmp_path: Path) -> None:
    _write(
        tmp_path,
        """
[tool.reviewbuddy]
max-line-length = 100
max-loop-depth = 3
language = "js"

[tool.reviewbuddy.rules]
enable = ["security", "logic"]
disable = ["L03"]
""",
    )
    config = load_config(tmp_path)
    assert config.max_line_length == 100
    assert config.max_loop_depth == 3
    assert config.language == "JavaScript"
    assert config.rules.enable == ("security", "logic")
    assert config.rules.disable == ("L03",)


def test_invalid_toml_raises(tmp_path: Path) -> None:
    _write(tmp_path, "[tool.reviewbuddy\n")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    ("body", "fragment"),
    [
        ("max-line-length = \"long\"\n", "max-line-length` must be an integer"),
        ("max-line-length = true\n", "max-line-length` must be an integer"),
        ("max-loop-depth = 0\n", "max-loop-depth` must be >= 1"),
        ("language = \"Rust\"\n", "language` must be `auto`"),
        ("rules = 3\n", "rules` must be a table"),
    ],
)
def test_invalid_values_name_the_key(tmp_path: Path, body: str, fragment: str) -> None:
    _write(tmp_path, "[tool.reviewbuddy]\n" + body)
    with pytest.raises(ConfigError, match=fragment):
        load_config(tmp_path)


def test_unknown_rule_token_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, '[tool.reviewbuddy.rules]\ndisable = ["nonsense"]\n')
    with pytest.raises(ConfigError, match="unknown rule group"):
        load_config(tmp_path)


def test_default_groups_cover_every_builtin_rule() -> None:
    assert set(DEFAULT_RULE_GROUPS["all"]) == rule_ids()


def test_compute_enabled_rule_ids_groups_and_ids() -> None:
    config = ReviewBuddyConfig(rules=RulesConfig(enable=("python", "S01"), disable=("P07",)))
    enabled = compute_enabled_rule_ids(config)
    assert "P01" in enabled
    assert "S01" in enabled
    assert "P07" not in enabled
    assert "J01" not in enabled


def test_cpp_group_accepts_plus_spelling() -> None:
    config = ReviewBuddyConfig(rules=RulesConfig(enable=("c++",)))
    assert compute_enabled_rule_ids(config) == set(DEFAULT_RULE_GROUPS["cpp"])


def test_available_rule_ids_intersection() -> None:
    enabled = compute_enabled_rule_ids(ReviewBuddyConfig(), available_rule_ids=["T01", "Z99"])
    assert enabled == {"T01", "Z99"}
