"""ビルドパイプラインの基盤処理群.

- 例外定義
- 外部プロセス実行
- 必須ツールの確認
"""

from .exceptions import (
    ArchiveExtractError,
    ConfigurationError,
    DownloadError,
    MissingInputError,
    MissingToolError,
    ProcessError,
    SourceBuildError,
    SourceRootError,
    UnknownArchiveTypeError,
)
from .runner import ProcessRunner, Runner
from .tools import must_have_bin

__all__ = [
    "SourceBuildError",
    "ArchiveExtractError",
    "ConfigurationError",
    "MissingToolError",
    "MissingInputError",
    "DownloadError",
    "UnknownArchiveTypeError",
    "SourceRootError",
    "ProcessError",
    "ProcessRunner",
    "Runner",
    "must_have_bin",
]
