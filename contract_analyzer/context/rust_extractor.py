"""
Rust 源码结构提取器 (Solana / NEAR 合约等)

用单一函数模式扫描全文，impl 块内的方法与自由函数走同一条路径，
每个函数声明只提取一次。
"""

import re
from typing import List

from ..security.heuristic_rules import RUST_FEATURE_RULES, RUST_SECURITY_RULES
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
    parse_tuple_fields,
    preceding_doc_comments,
)


# ============================================================================
# 正则模式
# ============================================================================

# 方括号组 (最多两层嵌套)，如 [u8; 32]、[[u8; 2]; 2]，内部的 ; 不算语句结束
_BRACKETS = r'\[(?:[^\[\]]|\[[^\[\]]*\])*\]'

# 函数声明 (自由函数与 impl 方法)
# 无函数体的 trait 方法声明 `fn f(&self);` 不匹配
RUST_FUNCTION_PATTERN = re.compile(
    r'(?<![\w:])'
    r'(?P<visibility>pub(?:\s*\([^)]*\))?\s+)?'
    r'(?P<modifiers>(?:(?:async|const|unsafe|extern(?:\s+"[^"]*")?)\s+)*)'
    r'fn\s+(?P<name>\w+)'
    r'\s*(?:<(?P<generics>(?:\([^(){};]*\)|[^(){};])*)>)?'
    r'\s*\((?P<params>(?:' + _BRACKETS + r'|[^{;\[])*?)\)'
    r'(?:\s*->\s*(?P<return_type>(?:' + _BRACKETS + r'|[^{;\[])+?))?'
    r'\s*(?:where\b(?:' + _BRACKETS + r'|[^{;\[])*?)?'
    r'\s*\{'
)

RUST_MODIFIER_PATTERN = re.compile(r'async|const|unsafe|extern(?:\s+"[^"]*")?')

# 参数名前的 &、&'a、&mut、mut
RUST_PARAM_PREFIX = re.compile(r"^(?:&\s*(?:'\w+\s+)?)?(?:mut\s+)?")

# 结构体: 具名字段 / 元组 / 单元
RUST_STRUCT_PATTERN = re.compile(
    r'(?<![\w:])'
    r'(?P<visibility>pub(?:\s*\([^)]*\))?\s+)?'
    r'struct\s+(?P<name>\w+)'
    r'\s*(?:<(?P<generics>[^{};]*?)>)?'
    r'(?:'
    r'\s*\((?P<tuple>(?:' + _BRACKETS + r'|[^;{\[])*?)\)\s*(?:where\b[^{;]*?)?;'
    r'|\s*(?:where\b[^{;]*?)?\{(?P<fields>[^}]*)\}'
    r'|\s*;'
    r')'
)

# const / static (类型与值允许包含方括号、字符串与字符字面量中的 ;)
RUST_CONST_PATTERN = re.compile(
    r'(?<![\w:])'
    r'(?P<visibility>pub(?:\s*\([^)]*\))?\s+)?'
    r'(?P<kind>const|static)\s+(?P<mut>mut\s+)?'
    r'(?P<name>\w+)\s*:\s*'
    r'(?P<type>(?:' + _BRACKETS + r'|[^=;\[])+?)'
    r'\s*=(?!=)\s*'
    r'(?P<value>(?:' + _BRACKETS + r'''|"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])'|[^;\["])+);'''
)

# use 语句与 extern crate
RUST_IMPORT_PATTERN = re.compile(
    r'(?<![\w:])(?P<kind>use|extern\s+crate)\s+(?P<path>[^;]+);'
)

RUST_CRATE_ROOT_PATTERN = re.compile(r'^(?:::)?(?P<root>[a-z_][a-z0-9_]*)(?:::|\s+as\b|$)')

# 不算外部依赖的路径根
RUST_LOCAL_ROOTS = {"crate", "self", "super", "std", "core", "alloc"}


def _visibility(group: str) -> Visibility:
    if group and "pub" in group:
        return Visibility.PUBLIC
    return Visibility.PRIVATE


class RustExtractor(LanguageExtractor):
    """Rust 提取器"""

    language = Language.RUST
    module_kind = ModuleKind.RUST_CRATE
    file_extensions = (".rs",)

    FEATURE_RULES = RUST_FEATURE_RULES
    SECURITY_RULES = RUST_SECURITY_RULES

    def extract_functions(self, source: str) -> List[ParsedFunction]:
        functions = []

        for match in RUST_FUNCTION_PATTERN.finditer(source):
            start = match.start()
            body = extract_body(source, match.end())
            return_type = match.group("return_type")

            functions.append(ParsedFunction(
                name=match.group("name"),
                visibility=_visibility(match.group("visibility")),
                parameters=parse_parameters(match.group("params"), RUST_PARAM_PREFIX),
                return_type=normalize_whitespace(return_type) if return_type else None,
                doc_comments=preceding_doc_comments(source, start),
                body_text=body,
                line_number=line_number_at(source, start),
                complexity_score=calculate_complexity(body),
                modifiers=[
                    normalize_whitespace(m)
                    for m in RUST_MODIFIER_PATTERN.findall(match.group("modifiers"))
                ],
            ))

        return functions

    def extract_structs(self, source: str) -> List[ParsedStruct]:
        structs = []

        for match in RUST_STRUCT_PATTERN.finditer(source):
            if match.group("fields") is not None:
                fields = parse_fields(match.group("fields"))
            elif match.group("tuple") is not None:
                fields = parse_tuple_fields(match.group("tuple"))
            else:
                fields = []

            structs.append(ParsedStruct(
                name=match.group("name"),
                fields=fields,
                doc_comments=preceding_doc_comments(source, match.start()),
                line_number=line_number_at(source, match.start()),
            ))

        return structs

    def extract_constants(self, source: str) -> List[ParsedConstant]:
        constants = []

        for match in RUST_CONST_PATTERN.finditer(source):
            constants.append(ParsedConstant(
                name=match.group("name"),
                type=normalize_whitespace(match.group("type")),
                visibility=_visibility(match.group("visibility")),
                is_mutable=bool(match.group("mut")),
                value=match.group("value").strip(),
                doc_comments=preceding_doc_comments(source, match.start()),
                line_number=line_number_at(source, match.start()),
            ))

        return constants

    def extract_imports(self, source: str) -> List[str]:
        return dedupe(
            normalize_whitespace(match.group("path"))
            for match in RUST_IMPORT_PATTERN.finditer(source)
        )

    def extract_dependencies(self, source: str) -> List[str]:
        """extern crate 名称 + use 路径的外部 crate 根"""
        deps = []
        for match in RUST_IMPORT_PATTERN.finditer(source):
            path = normalize_whitespace(match.group("path"))
            if match.group("kind") != "use":
                deps.append(path.split()[0])
                continue
            root = RUST_CRATE_ROOT_PATTERN.match(path)
            if root and root.group("root") not in RUST_LOCAL_ROOTS:
                deps.append(root.group("root"))
        return dedupe(deps)
