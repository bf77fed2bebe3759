#!/usr/bin/env python3
"""
Overview pipeline configuration.

Prefer setting environment variables:
  - OVERVIEW_TRUNCATION_BUDGET      collapsed preview budget (visible chars)
  - OVERVIEW_STRIP_PASTE_ARTIFACTS  1/0, strip platform paste artifacts
  - OVERVIEW_HIGHLIGHT_COLOR        accent used for pasted yellow highlights
  - OVERVIEW_CACHE_SIZE             memoized renders kept per renderer

Optional config file:
  - OVERVIEW_CONFIG_FILE pointing at a JSON object with the same keys:
      {"truncation_budget": 800, "strip_platform_artifacts": false}
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path

from .constants.markup_tokens import DEFAULT_HIGHLIGHT_COLOR, DEFAULT_TRUNCATION_BUDGET


_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _first_env(*names: str) -> str | None:
    for name in names:
        v = os.getenv(name)
        if v and v.strip():
            return v.strip()
    return None


def _parse_bool(value, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {value!r}")


def _parse_int(value, name: str, *, minimum: int = 0) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {number}")
    return number


def _load_config_file(path: Path) -> dict:
    path = path.expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(path)

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return data


@dataclass(frozen=True)
class OverviewConfig:
    truncation_budget: int = DEFAULT_TRUNCATION_BUDGET
    strip_platform_artifacts: bool = True
    highlight_color: str = DEFAULT_HIGHLIGHT_COLOR
    cache_size: int = 256

    @classmethod
    def resolve(
        cls,
        *,
        truncation_budget: int | None = None,
        strip_platform_artifacts: bool | None = None,
        highlight_color: str | None = None,
        cache_size: int | None = None,
        config_path: Path | None = None,
    ) -> "OverviewConfig":
        if config_path is None:
            env_path = _first_env("OVERVIEW_CONFIG_FILE")
            config_path = Path(env_path) if env_path else None

        file_cfg: dict = _load_config_file(config_path) if config_path is not None else {}

        budget_raw = (
            truncation_budget
            if truncation_budget is not None
            else _first_env("OVERVIEW_TRUNCATION_BUDGET") or file_cfg.get("truncation_budget")
        )
        strip_raw = (
            strip_platform_artifacts
            if strip_platform_artifacts is not None
            else _first_env("OVERVIEW_STRIP_PASTE_ARTIFACTS") or file_cfg.get("strip_platform_artifacts")
        )
        color_raw = (
            (highlight_color.strip() if highlight_color else None)
            or _first_env("OVERVIEW_HIGHLIGHT_COLOR")
            or (str(file_cfg.get("highlight_color")).strip() if file_cfg.get("highlight_color") else None)
            or DEFAULT_HIGHLIGHT_COLOR
        )
        cache_raw = (
            cache_size
            if cache_size is not None
            else _first_env("OVERVIEW_CACHE_SIZE") or file_cfg.get("cache_size")
        )

        if not _HEX_COLOR_RE.match(color_raw):
            raise ValueError(f"highlight_color must be a hex color like #d3e3fd, got {color_raw!r}")

        return cls(
            truncation_budget=(
                _parse_int(budget_raw, "truncation_budget")
                if budget_raw is not None
                else DEFAULT_TRUNCATION_BUDGET
            ),
            strip_platform_artifacts=(
                _parse_bool(strip_raw, "strip_platform_artifacts") if strip_raw is not None else True
            ),
            highlight_color=color_raw.lower(),
            cache_size=_parse_int(cache_raw, "cache_size") if cache_raw is not None else 256,
        )
