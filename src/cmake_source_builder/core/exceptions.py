"""Source builder exceptions.

パイプラインの各段階で発生する例外クラスを定義します。
全て SourceBuildError を基底とし、ci.main.run_action で一度だけ捕捉されます。
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class SourceBuildError(Exception):
    """ビルドパイプラインの例外の基底クラス."""


class ConfigurationError(SourceBuildError):
    """設定・実行環境が不正な場合の例外."""


class MissingToolError(ConfigurationError):
    """必要な実行ファイルが PATH 上に見つからない場合の例外.

    Attributes:
        tool: 見つからなかったプログラム名
    """

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"host must have '{tool}' installed")


class MissingInputError(ConfigurationError):
    """必須入力が与えられていない場合の例外.

    Attributes:
        name: 入力名（例: "url", "cmake_args"）
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Input required and not supplied: {name}")


class DownloadError(SourceBuildError):
    """アーカイブのダウンロードに失敗した場合の例外.

    Attributes:
        url: ダウンロード対象URL
        status_code: HTTPステータスコード（接続エラー等では None）
    """

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        message = f"Failed to download {url}: {reason}"
        if status_code is not None:
            message = f"Failed to download {url} (HTTP {status_code}): {reason}"
        super().__init__(message)


class UnknownArchiveTypeError(SourceBuildError):
    """URLの拡張子が対応形式（.tar.gz / .zip / .7z）でない場合の例外."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"unknown archive type: {url}")


class ArchiveExtractError(SourceBuildError):
    """アーカイブの展開に失敗した場合の例外（破損、危険なリンク等）.

    Attributes:
        archive: 展開対象のファイル
    """

    def __init__(self, archive: Path, reason: str) -> None:
        self.archive = archive
        super().__init__(f"Failed to extract {archive}: {reason}")


class SourceRootError(SourceBuildError):
    """展開ディレクトリ直下のエントリが1つでない場合の例外.

    Attributes:
        extraction_dir: 展開先ディレクトリ
        entries: 見つかったエントリ名のリスト（隠しエントリを除く）
        hidden: 数えなかった隠しエントリ名のリスト
    """

    def __init__(
        self, extraction_dir: Path, entries: Sequence[str], hidden: Sequence[str] = ()
    ) -> None:
        self.extraction_dir = extraction_dir
        self.entries = list(entries)
        self.hidden = list(hidden)
        if not self.entries and self.hidden:
            message = (
                f"No non-hidden entries in {extraction_dir} "
                f"(hidden: {', '.join(self.hidden)})"
            )
        elif not self.entries:
            message = f"Archive unpacked nothing into {extraction_dir}"
        else:
            message = (
                f"Expected exactly one top-level entry in {extraction_dir}, "
                f"found {len(self.entries)}: {', '.join(self.entries)}"
            )
        super().__init__(message)


class ProcessError(SourceBuildError):
    """外部プロセスが非ゼロで終了した場合の例外.

    Attributes:
        command: 実行したコマンドライン
        returncode: 終了コード
    """

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"The process '{self.command[0]}' failed with exit code {returncode}"
        )
