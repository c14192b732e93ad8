from __future__ import annotations

import re
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from reviewbuddy.languages.catalog import Language


class ConfigError(ValueError):
    """Raised when a reviewbuddy configuration file is invalid."""


RuleId = str
RuleGroup = str

_RULE_ID_RE = re.compile(r"^[A-Z][0-9]{2,}$")

DEFAULT_MAX_INPUT_CHARS = 100_000
DEFAULT_LANGUAGE = "auto"

# Keep this list in config (not in rules) so configuration can be resolved
# without importing the rule modules.
DEFAULT_RULE_GROUPS: dict[RuleGroup, tuple[RuleId, ...]] = {
    "shape": ("T01", "T02", "T03"),
    "python": ("P01", "P02", "P03", "P04", "P05", "P06", "P07"),
    "javascript": ("J01", "J02", "J03", "J04", "J05", "J06", "J07", "J08"),
    "java": ("V01", "V02", "V03", "V04", "V05", "V06", "V07"),
    "cpp": ("C01", "C02", "C03", "C04", "C05", "C06"),
    "security": ("S01", "S02", "S03", "S04"),
    "performance": ("F01", "F02", "F03"),
    "quality": ("Q01", "Q02", "Q03", "Q04"),
    "logic": ("L01", "L02", "L03", "L04"),
}
DEFAULT_RULE_GROUPS["all"] = tuple(
    rule_id
    for group in ("shape", "python", "javascript", "java", "cpp", "security", "performance", "quality", "logic")
    for rule_id in DEFAULT_RULE_GROUPS[group]
)

# Integer settings: (toml key, attribute name, minimum value).
_INT_SETTINGS: tuple[tuple[str, str, int], ...] = (
    ("max-input-chars", "max_input_chars", 1),
    ("max-line-length", "max_line_length", 1),
    ("max-function-lines", "max_function_lines", 1),
    ("max-loop-depth", "max_loop_depth", 1),
    ("duplicate-min-length", "duplicate_min_length", 0),
    ("duplicate-min-count", "duplicate_min_count", 2),
    ("comment-required-lines", "comment_required_lines", 0),
    ("java-class-threshold", "java_class_threshold", 0),
    ("java-main-threshold", "java_main_threshold", 0),
    ("cpp-include-threshold", "cpp_include_threshold", 0),
    ("cpp-main-threshold", "cpp_main_threshold", 0),
)


def _normalize_group(value: str) -> str:
    return value.strip().lower().replace("-", "_").replace("+", "p")


def _normalize_rule_id(value: str) -> str:
    return value.strip().upper()


def _validate_str_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError(f"`{field_name}` must be a list of strings.")
    return tuple(v.strip() for v in value if v.strip())


@dataclass(frozen=True, slots=True)
class RulesConfig:
    enable: str | tuple[str, ...] = "all"
    disable: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReviewBuddyConfig:
    """
    Analysis thresholds and rule selection.

    The thresholds only keep short snippets from tripping whole-file checks;
    they carry no deeper meaning and may be tuned per project.
    """

    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS
    max_line_length: int = 120
    max_function_lines: int = 50
    max_loop_depth: int = 2
    duplicate_min_length: int = 10
    duplicate_min_count: int = 3
    comment_required_lines: int = 20
    java_class_threshold: int = 50
    java_main_threshold: int = 100
    cpp_include_threshold: int = 50
    cpp_main_threshold: int = 100
    language: str = DEFAULT_LANGUAGE
    rules: RulesConfig = field(default_factory=RulesConfig)


def load_config(project_dir: Path | str = ".") -> ReviewBuddyConfig:
    """
    Load configuration from `pyproject.toml` within `project_dir`.

    If no file / no `[tool.reviewbuddy]` table exists, returns defaults.
    """

    pyproject_path = Path(project_dir) / "pyproject.toml"
    if not pyproject_path.exists():
        return ReviewBuddyConfig()

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {exc}") from exc

    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return ReviewBuddyConfig()

    table = tool_table.get("reviewbuddy", {})
    if not isinstance(table, dict) or not table:
        return ReviewBuddyConfig()

    return parse_config_table(table)


def parse_config_table(table: dict[str, Any]) -> ReviewBuddyConfig:
    values: dict[str, Any] = {}
    for key, attr, minimum in _INT_SETTINGS:
        raw = table.get(key, table.get(attr))
        if raw is None:
            continue
        # bool is an int subclass; reject it explicitly.
        if not isinstance(raw, int) or isinstance(raw, bool):
            raise ConfigError(f"`tool.reviewbuddy.{key}` must be an integer.")
        if raw < minimum:
            raise ConfigError(f"`tool.reviewbuddy.{key}` must be >= {minimum}.")
        values[attr] = raw

    language = table.get("language", DEFAULT_LANGUAGE)
    if not isinstance(language, str):
        raise ConfigError("`tool.reviewbuddy.language` must be a string.")
    values["language"] = _parse_language(language)

    values["rules"] = _parse_rules_config(table.get("rules", {}))
    return ReviewBuddyConfig(**values)


def _parse_language(value: str) -> str:
    stripped = value.strip()
    if not stripped or stripped.lower() == DEFAULT_LANGUAGE:
        return DEFAULT_LANGUAGE
    language = Language.parse(stripped)
    if language is None:
        valid = ", ".join(lang.value for lang in Language)
        raise ConfigError(f"`tool.reviewbuddy.language` must be `auto` or one of: {valid}.")
    return language.value


def _parse_rules_config(value: Any) -> RulesConfig:
    if value is None:
        return RulesConfig()
    if not isinstance(value, dict):
        raise ConfigError("`tool.reviewbuddy.rules` must be a table.")

    enable: str | tuple[str, ...]
    enable_raw = value.get("enable", "all")
    if isinstance(enable_raw, str):
        enable = enable_raw.strip() or "all"
        _validate_rule_tokens((enable,), field_name="tool.reviewbuddy.rules.enable")
    elif isinstance(enable_raw, list) and all(isinstance(v, str) for v in enable_raw):
        enable = tuple(v.strip() for v in enable_raw if v.strip())
        _validate_rule_tokens(enable, field_name="tool.reviewbuddy.rules.enable")
    else:
        raise ConfigError("`tool.reviewbuddy.rules.enable` must be a string or a list of strings.")

    disable = _validate_str_list(value.get("disable", []), field_name="tool.reviewbuddy.rules.disable")
    _validate_rule_tokens(disable, field_name="tool.reviewbuddy.rules.disable")
    return RulesConfig(enable=enable, disable=disable)


def _validate_rule_tokens(tokens: Iterable[str], *, field_name: str) -> None:
    for token in tokens:
        if _normalize_group(token) in DEFAULT_RULE_GROUPS:
            continue
        if _RULE_ID_RE.match(_normalize_rule_id(token)):
            continue
        groups = ", ".join(sorted(DEFAULT_RULE_GROUPS))
        raise ConfigError(
            f"`{field_name}` contains unknown rule group or invalid rule id: {token!r}. "
            f"Valid groups: {groups}. Valid ids look like P01/S03."
        )


def compute_enabled_rule_ids(
    config: ReviewBuddyConfig,
    *,
    available_rule_ids: Iterable[RuleId] | None = None,
) -> set[RuleId]:
    """
    Resolve the final enabled rules set from `rules.enable` + `rules.disable`.

    - `enable = "all"` enables every built-in rule.
    - `enable = ["shape", "security"]` enables group(s) and/or explicit IDs.
    - `disable = ["Q04"]` disables specific IDs (or groups).

    If `available_rule_ids` is provided, the result is intersected with it.
    """

    available: set[RuleId] | None = set(available_rule_ids) if available_rule_ids is not None else None

    enable_setting = config.rules.enable
    enable_tokens = (enable_setting,) if isinstance(enable_setting, str) else enable_setting

    enabled: set[RuleId] = set()
    for token in enable_tokens:
        group = _normalize_group(token)
        if group == "all":
            enabled.update(available if available is not None else DEFAULT_RULE_GROUPS["all"])
        elif group in DEFAULT_RULE_GROUPS:
            enabled.update(DEFAULT_RULE_GROUPS[group])
        else:
            enabled.add(_normalize_rule_id(token))

    for token in config.rules.disable:
        group = _normalize_group(token)
        if group in DEFAULT_RULE_GROUPS:
            enabled.difference_update(DEFAULT_RULE_GROUPS[group])
        else:
            enabled.discard(_normalize_rule_id(token))

    if available is not None:
        enabled.intersection_update(available)

    return enabled
