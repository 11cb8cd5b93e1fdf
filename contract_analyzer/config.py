"""
运行配置

分析核心不读取配置 (纯函数)，只有 CLI 与日志使用。
所有字段都可通过 CONTRACT_ANALYZER_ 前缀的环境变量或 .env 覆盖，例如:
    CONTRACT_ANALYZER_JSON_INDENT=0
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyzerSettings(BaseSettings):
    """分析器配置"""

    model_config = SettingsConfigDict(
        env_prefix="CONTRACT_ANALYZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # 忽略 .env 中的额外字段
    )

    # 日志
    log_level: str = "INFO"

    # JSON 输出缩进 (0 表示紧凑输出)
    json_indent: int = 2

    # 项目扫描时跳过的目录
    skip_dirs: List[str] = ["target", "build", ".git", "node_modules"]

    # 单文件大小上限 (字节)，超过则跳过
    max_file_bytes: int = 2 * 1024 * 1024


@lru_cache
def get_settings() -> AnalyzerSettings:
    """获取配置单例"""
    return AnalyzerSettings()
