"""
通用回退提取器

语言无法识别或不受支持时使用。只用三个宽松的函数模式保持输出结构完整，
不做函数体、复杂度或文档注释分析。
"""

import re
from typing import List

from ..security.heuristic_rules import GENERIC_PARSING_INSIGHT, UNKNOWN_LANGUAGE_FEATURE
from .base import LanguageExtractor
from .models import (
    Language,
    ModuleKind,
    ParsedConstant,
    ParsedFunction,
    ParsedStruct,
    Visibility,
)
from .scanning import line_number_at


GENERIC_FUNCTION_PATTERNS = (
    re.compile(r'function\s+(\w+)\s*\('),
    re.compile(r'const\s+(\w+)\s*=\s*(?:async\s+)?\('),
    re.compile(r'(\w+)\s*:\s*(?:async\s+)?\('),
)


class GenericExtractor(LanguageExtractor):
    """回退提取器 (模块类型沿用 rust_crate 以保持结构稳定)"""

    language = Language.UNKNOWN
    module_kind = ModuleKind.RUST_CRATE

    def extract_functions(self, source: str) -> List[ParsedFunction]:
        found = []
        for pattern in GENERIC_FUNCTION_PATTERNS:
            for match in pattern.finditer(source):
                found.append((match.start(), match.group(1)))

        # 按源码位置排序 (同一位置保持模式顺序)
        found.sort(key=lambda item: item[0])

        return [
            ParsedFunction(
                name=name,
                visibility=Visibility.PUBLIC,
                line_number=line_number_at(source, start),
                complexity_score=1,
            )
            for start, name in found
        ]

    def extract_structs(self, source: str) -> List[ParsedStruct]:
        return []

    def extract_constants(self, source: str) -> List[ParsedConstant]:
        return []

    def detect_features(self, source: str) -> List[str]:
        return [UNKNOWN_LANGUAGE_FEATURE]

    def detect_security_insights(self, source: str) -> List[str]:
        return [GENERIC_PARSING_INSIGHT]
