"""
Move 源码结构提取器 (Sui / Aptos)

支持:
- public / public(friend) / public(package) / entry / native 修饰的 fun
- native fun 声明 (无函数体)
- struct abilities: 前置 `has key, store {` 与 Move 2024 后置 `} has copy, drop;`
- const 常量 (Move 没有可变全局变量，is_mutable 恒为 False)
"""

import re
from typing import List, Optional, Set

from ..security.heuristic_rules import MOVE_FEATURE_RULES, MOVE_SECURITY_RULES
from .base import LanguageExtractor
from .models import (
    Language,
    ModuleKind,
    ParsedConstant,
    ParsedFunction,
    ParsedStruct,
    Visibility,
)
from .scanning import (
    calculate_complexity,
    dedupe,
    extract_body,
    line_number_at,
    normalize_whitespace,
    parse_fields,
    parse_parameters,
    preceding_doc_comments,
)


# ============================================================================
# 正则模式
# ============================================================================

# 函数声明
# 旧写法: native public fun foo(): u64;
# 常规:   public(friend) entry fun foo<T: store>(a: u64): bool acquires Pool {
MOVE_FUNCTION_PATTERN = re.compile(
    r'(?<![\w:])'
    r'(?P<native_prefix>native\s+)?'
    r'(?P<visibility>public(?:\s*\([^)]*\))?\s+)?'
    r'(?P<entry>entry\s+)?'
    r'(?P<native>native\s+)?'
    r'fun\s+(?P<name>\w+)'
    r'\s*(?:<(?P<generics>[^(){};]*)>)?'
    r'\s*\((?P<params>[^{;]*?)\)'
    r'(?:\s*:\s*(?P<return_type>[^{;]+?))?'
    r'(?:\s*acquires\s+(?P<acquires>[^{;]+?))?'
    r'\s*(?P<terminator>[{;])'
)

# Move 2024 允许 `mut` 形参
MOVE_PARAM_PREFIX = re.compile(r"^(?:mut\s+)?")

# 结构体 (abilities 可前置或后置)
MOVE_STRUCT_PATTERN = re.compile(
    r'(?<![\w:])'
    r'(?P<visibility>public(?:\s*\([^)]*\))?\s+)?'
    r'struct\s+(?P<name>\w+)'
    r'\s*(?:<(?P<generics>[^{};]*?)>)?'
    r'(?:\s+has\s+(?P<abilities>\w+(?:\s*,\s*\w+)*))?'
    r'\s*\{(?P<fields>[^}]*)\}'
    r'(?:\s*has\s+(?P<postfix_abilities>\w+(?:\s*,\s*\w+)*)\s*;)?'
)

MOVE_CONST_PATTERN = re.compile(
    r'(?<![\w:])'
    r'(?P<visibility>public\s+)?'
    r'const\s+(?P<name>\w+)\s*:\s*'
    r'(?P<type>[^=;]+?)'
    r'\s*=(?!=)\s*'
    r'(?P<value>(?:\[[^\]]*\]|"[^"]*"|[^;\["])+);'
)

# use 语句与 friend 声明
MOVE_IMPORT_PATTERN = re.compile(r'(?<![\w:])(?:use|friend)\s+(?P<path>[^;]+);')

# use <address>::<module> (十六进制或具名地址)
MOVE_DEPENDENCY_PATTERN = re.compile(r'(?<![\w:])use\s+(?:0x[0-9a-fA-F]+|\w+)::(?P<module>\w+)')


def _parse_abilities(*groups: Optional[str]) -> Set[str]:
    abilities: Set[str] = set()
    for group in groups:
        if group:
            abilities.update(a.strip() for a in group.split(","))
    return abilities


class MoveExtractor(LanguageExtractor):
    """Move 提取器"""

    language = Language.MOVE
    module_kind = ModuleKind.MOVE_MODULE
    file_extensions = (".move",)

    FEATURE_RULES = MOVE_FEATURE_RULES
    SECURITY_RULES = MOVE_SECURITY_RULES

    def extract_functions(self, source: str) -> List[ParsedFunction]:
        functions = []

        for match in MOVE_FUNCTION_PATTERN.finditer(source):
            is_native = bool(match.group("native_prefix") or match.group("native"))
            is_entry = bool(match.group("entry"))

            if match.group("terminator") == ";":
                # 只有 native 函数没有函数体
                if not is_native:
                    continue
                body = ""
            else:
                body = extract_body(source, match.end())

            modifiers = []
            if is_entry:
                modifiers.append("entry")
            if is_native:
                modifiers.append("native")

            start = match.start()
            return_type = match.group("return_type")

            functions.append(ParsedFunction(
                name=match.group("name"),
                visibility=Visibility.PUBLIC if match.group("visibility") else Visibility.PRIVATE,
                parameters=parse_parameters(match.group("params"), MOVE_PARAM_PREFIX),
                return_type=normalize_whitespace(return_type) if return_type else None,
                doc_comments=preceding_doc_comments(source, start),
                body_text=body,
                line_number=line_number_at(source, start),
                complexity_score=calculate_complexity(body),
                is_entry_function=is_entry,
                modifiers=modifiers,
            ))

        return functions

    def extract_structs(self, source: str) -> List[ParsedStruct]:
        structs = []

        for match in MOVE_STRUCT_PATTERN.finditer(source):
            abilities = _parse_abilities(
                match.group("abilities"),
                match.group("postfix_abilities"),
            )

            structs.append(ParsedStruct(
                name=match.group("name"),
                fields=parse_fields(match.group("fields")),
                doc_comments=preceding_doc_comments(source, match.start()),
                line_number=line_number_at(source, match.start()),
                has_copy="copy" in abilities,
                has_drop="drop" in abilities,
                has_store="store" in abilities,
                has_key="key" in abilities,
            ))

        return structs

    def extract_constants(self, source: str) -> List[ParsedConstant]:
        constants = []

        for match in MOVE_CONST_PATTERN.finditer(source):
            constants.append(ParsedConstant(
                name=match.group("name"),
                type=normalize_whitespace(match.group("type")),
                visibility=Visibility.PUBLIC if match.group("visibility") else Visibility.PRIVATE,
                is_mutable=False,
                value=match.group("value").strip(),
                doc_comments=preceding_doc_comments(source, match.start()),
                line_number=line_number_at(source, match.start()),
            ))

        return constants

    def extract_imports(self, source: str) -> List[str]:
        return dedupe(
            normalize_whitespace(match.group("path"))
            for match in MOVE_IMPORT_PATTERN.finditer(source)
        )

    def extract_dependencies(self, source: str) -> List[str]:
        return dedupe(match.group("module") for match in MOVE_DEPENDENCY_PATTERN.finditer(source))
