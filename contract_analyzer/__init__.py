"""
Contract Analyzer - 智能合约源码结构分析器

把 Rust / Move 合约源码解析为与语言无关的结构模型 (ParsedModule):
函数、结构体/资源、常量、导入、文档注释、近似圈复杂度，
以及启发式的语言特性与安全提示。

模块:
- context: 结构提取 (analyze 入口)
- security: 启发式规则表
- config: 运行配置
- cli: 命令行工具
"""

import logging

from .config import get_settings

# 配置 contract_analyzer 命名空间下的日志
# 默认 INFO 级别，与 CLI 共用 AnalyzerSettings (环境变量 CONTRACT_ANALYZER_LOG_LEVEL 或 .env)
_log_level = get_settings().log_level.upper()
_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_package_logger = logging.getLogger("contract_analyzer")
if not _package_logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(_log_format, datefmt="%H:%M:%S"))
    _package_logger.addHandler(_handler)
_package_logger.setLevel(getattr(logging, _log_level, logging.INFO))

from .context import (
    analyze,
    AnalyzerError,
    InvalidInputError,
    Language,
    ModuleKind,
    ParsedConstant,
    ParsedFunction,
    ParsedModule,
    ParsedStruct,
    Visibility,
)

__version__ = "0.1.0"

__all__ = [
    "analyze",
    "AnalyzerError",
    "InvalidInputError",
    "Language",
    "ModuleKind",
    "ParsedConstant",
    "ParsedFunction",
    "ParsedModule",
    "ParsedStruct",
    "Visibility",
]
