"""
源码结构理解模块

包含:
- analyzer: 分析入口与语言分派 (analyze)
- base: 语言提取器接口
- rust_extractor / move_extractor: 各语言提取器
- generic_extractor: 无法识别语言时的回退提取器
- scanning: 函数体定位、复杂度、注释等共用扫描工具
- models: ParsedModule 等数据模型

只做词法/结构近似，深层语义交给下游 (文档生成、LLM 提示、报告)。
"""

from .analyzer import (
    analyze,
    get_extractor,
    detect_language,
    resolve_language,
    AnalyzerError,
    InvalidInputError,
    EXTRACTOR_REGISTRY,
)
from .base import LanguageExtractor
from .models import (
    ComplexityMetrics,
    Language,
    ModuleKind,
    Parameter,
    ParsedConstant,
    ParsedFunction,
    ParsedModule,
    ParsedStruct,
    StructField,
    Visibility,
)

__all__ = [
    # Analyzer
    "analyze",
    "get_extractor",
    "detect_language",
    "resolve_language",
    "AnalyzerError",
    "InvalidInputError",
    "EXTRACTOR_REGISTRY",
    "LanguageExtractor",
    # Models
    "ComplexityMetrics",
    "Language",
    "ModuleKind",
    "Parameter",
    "ParsedConstant",
    "ParsedFunction",
    "ParsedModule",
    "ParsedStruct",
    "StructField",
    "Visibility",
]
