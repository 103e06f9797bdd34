"""展開ディレクトリからソースルートを決定する.

ソースアーカイブは通常、バージョン付きの単一ディレクトリに展開される。

    https://github.com/Warchant/blake2s/archive/1.0.0.tar.gz
    -> <extraction_dir>/1.0.0
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .core.exceptions import SourceRootError


def resolve_source_root(extraction_dir: Path) -> Path:
    """展開ディレクトリ直下の唯一のエントリをソースルートとして返す.

    ドットで始まる隠しエントリは数えない。

    Args:
        extraction_dir: アーカイブの展開先ディレクトリ

    Returns:
        ソースルートのパス

    Raises:
        SourceRootError: 直下のエントリが0個または複数の場合
    """
    names = sorted(p.name for p in extraction_dir.iterdir())
    entries = [name for name in names if not name.startswith(".")]
    if len(entries) != 1:
        hidden = [name for name in names if name.startswith(".")]
        raise SourceRootError(extraction_dir, entries, hidden)

    source_root = extraction_dir / entries[0]
    logger.debug(f"Source root: {source_root}")
    return source_root
