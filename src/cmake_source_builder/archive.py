"""ソースアーカイブの取得と展開."""

from __future__ import annotations

import os
import stat
import tarfile
import uuid
import zipfile
from collections.abc import Callable
from pathlib import Path
from urllib.parse import urlsplit

import httpx
from loguru import logger

from .core.exceptions import ArchiveExtractError, DownloadError, UnknownArchiveTypeError
from .core.runner import Runner
from .core.tools import must_have_bin

DEFAULT_TIMEOUT = 300.0

Downloader = Callable[[str, Path], Path]


def _stream_to_file(client: httpx.Client, url: str, dest: Path) -> None:
    with client.stream("GET", url, follow_redirects=True) as r:
        r.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in r.iter_bytes():
                f.write(chunk)


def download_file(
    url: str,
    dest_dir: Path,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """URLをダウンロードして一意な名前のファイルとして保存する.

    Args:
        url: ダウンロード対象URL
        dest_dir: 保存先ディレクトリ
        client: 使用する httpx.Client（None の場合は都度生成）
        timeout: タイムアウト秒数（client 未指定時のみ有効）

    Returns:
        保存したファイルのパス

    Raises:
        DownloadError: HTTPエラーまたは接続エラーの場合
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / str(uuid.uuid4())

    logger.info(f"Downloading {url}")
    logger.debug(f"Destination {dest}")
    try:
        if client is None:
            with httpx.Client(timeout=timeout) as c:
                _stream_to_file(c, url, dest)
        else:
            _stream_to_file(client, url, dest)
    except httpx.HTTPStatusError as e:
        raise DownloadError(url, e.response.reason_phrase, e.response.status_code) from e
    except httpx.HTTPError as e:
        raise DownloadError(url, str(e)) from e

    logger.info(f"Downloaded {dest.stat().st_size} bytes")
    return dest


def extract_tar(archive: Path, dest: Path) -> Path:
    """tar.gz を展開する.

    "data" フィルタにより、絶対パスや展開先の外を指すリンクは拒否される。
    """
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(dest, filter="data")
    except tarfile.TarError as e:
        raise ArchiveExtractError(archive, str(e)) from e
    return dest


def _zip_symlink(zf: zipfile.ZipFile, info: zipfile.ZipInfo, dest: Path, archive: Path) -> None:
    link = dest / info.filename.rstrip("/")
    target = zf.read(info).decode("utf-8")
    resolved = (link.parent / target).resolve()
    if os.path.isabs(target) or not resolved.is_relative_to(dest.resolve()):
        raise ArchiveExtractError(archive, f"{info.filename} links outside the destination: {target}")
    link.parent.mkdir(parents=True, exist_ok=True)
    link.symlink_to(target)


def extract_zip(archive: Path, dest: Path) -> Path:
    """zip を展開する.

    external_attr の上位16bitに Unix モードがあれば、実行ビットとシンボリックリンクを復元する。
    """
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(archive) as zf:
            symlinks = []
            for info in zf.infolist():
                mode = info.external_attr >> 16
                if stat.S_ISLNK(mode):
                    symlinks.append(info)
                    continue
                path = Path(zf.extract(info, dest))
                if mode and not info.is_dir():
                    path.chmod(stat.S_IMODE(mode))
            for info in symlinks:
                _zip_symlink(zf, info, dest, archive)
    except zipfile.BadZipFile as e:
        raise ArchiveExtractError(archive, str(e)) from e
    return dest


def extract_7z(archive: Path, dest: Path, runner: Runner) -> Path:
    """7z コマンドで展開する. 7z が PATH 上に必要."""
    must_have_bin("7z")
    dest.mkdir(parents=True, exist_ok=True)
    runner.run("7z", ["x", archive, f"-o{dest}", "-y"], cwd=dest)
    return dest


def archive_suffix(url: str) -> str | None:
    """URLのパス部分から対応アーカイブ形式の拡張子を判定する.

    Returns:
        ".tar.gz" / ".zip" / ".7z"、対応しない場合は None
    """
    path = urlsplit(url).path
    for suffix in (".tar.gz", ".zip", ".7z"):
        if path.endswith(suffix):
            return suffix
    return None


def download_and_unpack(
    url: str,
    work_dir: Path,
    *,
    runner: Runner,
    download: Downloader = download_file,
) -> Path:
    """アーカイブをダウンロードし、拡張子に応じて展開する.

    形式判定はダウンロード後に行う。ダウンロード済みファイルは削除しない。

    Args:
        url: アーカイブURL
        work_dir: ダウンロード・展開に使う作業ディレクトリ
        runner: 7z 展開に使うプロセスランナー
        download: ダウンロード関数 (url, dest_dir) -> Path

    Returns:
        展開先ディレクトリ

    Raises:
        UnknownArchiveTypeError: 対応していない拡張子の場合
    """
    archive = download(url, work_dir)
    dest = work_dir / str(uuid.uuid4())

    suffix = archive_suffix(url)
    if suffix == ".tar.gz":
        extracted = extract_tar(archive, dest)
    elif suffix == ".zip":
        extracted = extract_zip(archive, dest)
    elif suffix == ".7z":
        extracted = extract_7z(archive, dest, runner)
    else:
        raise UnknownArchiveTypeError(url)

    logger.info(f"Extracted {archive.name} to {extracted}")
    return extracted
