"""cmake_source_builder: ソースアーカイブからCMakeプロジェクトをビルド・インストールする.

取得 → 展開 → ソースルート決定 → cmake → make install → インストール先の報告。
"""

from cmake_source_builder.builder import BuildRequest, BuildResult, build
from cmake_source_builder.cmake import configure_args, parse_cmake_args

__version__ = "0.1.0"

__all__ = [
    "BuildRequest",
    "BuildResult",
    "build",
    "configure_args",
    "parse_cmake_args",
]
