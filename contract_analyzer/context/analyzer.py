"""
源码结构分析入口 (Module Aggregator + Language Dispatcher)

根据语言提示或文件扩展名从注册表选出提取器，汇总函数/结构体/常量、
导入、文档注释与启发式检测结果，生成一个 ParsedModule。

除调用方传入非字符串参数外从不抛异常: 无法识别的语言走通用回退路径，
并在 language_features / security_insights 中显式标记。

Usage:
    from contract_analyzer import analyze

    module = analyze(source, "pool.move")
    print(module.complexity_metrics.function_count)
    data = module.to_dict()
"""

import logging
import ntpath
from typing import Dict, Optional, Union

from .base import LanguageExtractor
from .generic_extractor import GenericExtractor
from .models import ComplexityMetrics, Language, ParsedModule
from .move_extractor import MoveExtractor
from .rust_extractor import RustExtractor
from .scanning import extract_module_doc_comments

logger = logging.getLogger(__name__)


# =============================================================================
# 异常类
# =============================================================================

class AnalyzerError(Exception):
    """分析器异常基类"""
    pass


class InvalidInputError(AnalyzerError):
    """调用方传入的参数类型不正确"""
    def __init__(self, argument: str, value: object):
        self.argument = argument
        self.value = value
        super().__init__(
            f"{argument} 类型无效: 期望 str, 实际为 {type(value).__name__}"
        )


# =============================================================================
# 提取器注册表
# =============================================================================

EXTRACTOR_REGISTRY: Dict[Language, LanguageExtractor] = {
    Language.RUST: RustExtractor(),
    Language.MOVE: MoveExtractor(),
}

FALLBACK_EXTRACTOR = GenericExtractor()


def get_extractor(language: Language) -> LanguageExtractor:
    """按语言取提取器，不支持的语言返回通用回退提取器"""
    return EXTRACTOR_REGISTRY.get(language, FALLBACK_EXTRACTOR)


def detect_language(file_name: str) -> Language:
    """根据文件扩展名推断语言"""
    lowered = file_name.lower()
    for language, extractor in EXTRACTOR_REGISTRY.items():
        if lowered.endswith(extractor.file_extensions):
            return language
    return Language.UNKNOWN


def resolve_language(file_name: str, language: Optional[Union[Language, str]] = None) -> Language:
    """
    确定分析语言

    Args:
        file_name: 文件名 (用于扩展名推断)
        language: 语言提示，可以是 Language 或 "rust"/"move" (不区分大小写)

    Returns:
        Language: 提示无法识别时返回 Language.UNKNOWN
    """
    if language is None:
        return detect_language(file_name)
    if isinstance(language, Language):
        return language
    try:
        return Language(language.strip().lower())
    except ValueError:
        logger.debug(f"未知的语言提示: {language!r}")
        return Language.UNKNOWN


def derive_module_name(file_name: str) -> str:
    """取文件名 (兼容 / 与 \\ 分隔符) 并去掉扩展名"""
    base_name = ntpath.basename(file_name)
    stem, _ = ntpath.splitext(base_name)
    return stem


def count_lines(source: str) -> int:
    return source.count("\n") + 1


# =============================================================================
# 分析入口
# =============================================================================

def analyze(
    source_text: str,
    file_name: str,
    language: Optional[Union[Language, str]] = None,
) -> ParsedModule:
    """
    分析单个源文件

    Args:
        source_text: 源码文本 (可为空字符串)
        file_name: 文件名，只用于模块名与扩展名推断，不需要真实存在
        language: 语言提示 ("rust" / "move")，缺省时按扩展名推断

    Returns:
        ParsedModule: 每次调用新建的结果对象

    Raises:
        InvalidInputError: 参数不是字符串
    """
    if not isinstance(source_text, str):
        raise InvalidInputError("source_text", source_text)
    if not isinstance(file_name, str):
        raise InvalidInputError("file_name", file_name)
    if language is not None and not isinstance(language, (Language, str)):
        raise InvalidInputError("language", language)

    resolved = resolve_language(file_name, language)
    extractor = get_extractor(resolved)

    if extractor is FALLBACK_EXTRACTOR:
        logger.info(f"[Analyzer] {file_name}: 语言无法识别，使用通用解析")
    else:
        logger.debug(f"[Analyzer] {file_name}: 使用 {type(extractor).__name__}")

    functions = extractor.extract_functions(source_text)
    structs = extractor.extract_structs(source_text)
    constants = extractor.extract_constants(source_text)

    metrics = ComplexityMetrics(
        cyclomatic_complexity=sum(f.complexity_score for f in functions),
        function_count=len(functions),
        struct_count=len(structs),
        const_count=len(constants),
    )

    module = ParsedModule(
        name=derive_module_name(file_name),
        module_kind=extractor.module_kind,
        functions=functions,
        structs=structs,
        constants=constants,
        module_doc_comments=extract_module_doc_comments(source_text),
        imports=extractor.extract_imports(source_text),
        dependencies=extractor.extract_dependencies(source_text),
        total_lines=count_lines(source_text),
        complexity_metrics=metrics,
        security_insights=extractor.detect_security_insights(source_text),
        language_features=extractor.detect_features(source_text),
    )

    logger.debug(
        f"[Analyzer] {file_name}: {metrics.function_count} 个函数, "
        f"{metrics.struct_count} 个结构体, {metrics.const_count} 个常量"
    )
    return module
