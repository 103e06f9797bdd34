"""ビルダー設定の読み込み.

設定ファイル（YAML）の形式:

    work_dir: /tmp/builds
    cmake: cmake
    make: make
    download_timeout: 300
    inputs:
      url: https://github.com/Warchant/blake2s/archive/1.0.0.tar.gz
      cmake_args:
        BUILD_TESTING: false

優先順位は CLI 引数 > INPUT_* 環境変数 > 設定ファイル > 既定値。
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .archive import DEFAULT_TIMEOUT
from .core.exceptions import ConfigurationError


def default_work_dir() -> Path:
    """GitHub Actions 上では RUNNER_TEMP、それ以外はシステムの一時ディレクトリ."""
    return Path(os.environ.get("RUNNER_TEMP") or tempfile.gettempdir())


@dataclass(frozen=True)
class BuilderConfig:
    work_dir: Path = field(default_factory=default_work_dir)
    cmake: str = "cmake"
    make: str = "make"
    download_timeout: float = DEFAULT_TIMEOUT
    inputs: dict[str, Any] = field(default_factory=dict)


_KEYS = {f.name for f in fields(BuilderConfig)}


def _coerce(data: dict[str, Any], source: Path) -> dict[str, Any]:
    unknown = sorted(set(data) - _KEYS)
    if unknown:
        msg = f"Unknown config keys in {source}: {', '.join(unknown)}. Valid keys: {sorted(_KEYS)}"
        raise ConfigurationError(msg)

    out = dict(data)
    if "work_dir" in out:
        out["work_dir"] = Path(out["work_dir"]).expanduser()
    if "download_timeout" in out:
        try:
            out["download_timeout"] = float(out["download_timeout"])
        except (TypeError, ValueError) as e:
            msg = f"Invalid download_timeout in {source}: {out['download_timeout']!r}"
            raise ConfigurationError(msg) from e
    if "inputs" in out:
        if not isinstance(out["inputs"], dict):
            msg = f"'inputs' in {source} must be a mapping, got {type(out['inputs']).__name__}"
            raise ConfigurationError(msg)
        out["inputs"] = dict(out["inputs"])
    return out


def load_config(config_path: Path) -> BuilderConfig:
    """YAML設定ファイルを読み込む.

    Args:
        config_path: 設定ファイルのパス

    Returns:
        BuilderConfig

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ConfigurationError: ルートがマッピングでない、または未知のキーを含む場合
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Config file {config_path} must contain a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)

    config = BuilderConfig(**_coerce(data, config_path))
    logger.debug(f"Loaded config from {config_path}")
    return config


def resolve_config(config_path: Path | None = None, **overrides: Any) -> BuilderConfig:
    """設定ファイルとCLI引数から最終的な設定を組み立てる.

    値が None のオーバーライドは無視する。
    """
    config = load_config(config_path) if config_path else BuilderConfig()
    changes = {k: v for k, v in overrides.items() if v is not None}
    return replace(config, **changes) if changes else config
