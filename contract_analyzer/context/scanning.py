"""
词法扫描辅助函数

各语言提取器共用:
- extract_body: 大括号计数定位函数体
- calculate_complexity: 近似圈复杂度
- preceding_doc_comments / extract_doc_comments: 条目级文档注释 (/// 与 /** */)
- extract_module_doc_comments: 文件头部的模块级注释 (//! 与 /*! */)
- split_top_level / parse_parameters / parse_fields: 参数与字段切分

这里只做词法近似，不是编译器前端。
"""

import re
from typing import Iterable, List, Optional, Pattern

from .models import Parameter, StructField


# ============================================================================
# 正则模式
# ============================================================================

# 圈复杂度关键词 (按单词边界匹配)
COMPLEXITY_KEYWORDS = (
    "if", "else", "while", "for", "loop", "match", "case",
    "and", "or", "try", "catch", "when",
)

COMPLEXITY_KEYWORD_PATTERN = re.compile(
    r"\b(?:" + "|".join(COMPLEXITY_KEYWORDS) + r")\b"
)

# 逻辑运算符和 ? (按字面量匹配)
COMPLEXITY_OPERATOR_PATTERN = re.compile(r"&&|\|\||\?")

ATTRIBUTE_LINE_PATTERN = re.compile(r"#!?\[.*\]")

NAME_TYPE_PATTERN = re.compile(r"^(?P<name>\w+)\s*:\s*(?P<type>.+)$", re.DOTALL)

FIELD_VISIBILITY_PATTERN = re.compile(r"^pub(?:\s*\([^)]*\))?\s+")

_OPENERS = "([{<"
_CLOSERS = ")]}>"


# ============================================================================
# 位置与文本工具
# ============================================================================

def line_number_at(source: str, index: int) -> int:
    """index 处字符所在的行号 (1-indexed)"""
    return source.count("\n", 0, index) + 1


def normalize_whitespace(text: str) -> str:
    """把多行/多空格压缩为单个空格"""
    return " ".join(text.split())


def dedupe(items: Iterable[str]) -> List[str]:
    """去重并保持首次出现的顺序"""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


# ============================================================================
# 函数体与复杂度
# ============================================================================

def extract_body(source: str, start_index: int) -> str:
    """
    从左大括号之后开始，按深度计数截取代码块内容

    深度从 1 开始 (左大括号已被签名消费)。输入在块闭合前结束时，
    返回已累积的内容而不是报错。

    Args:
        source: 完整源码
        start_index: 左大括号之后的第一个字符位置

    Returns:
        str: 块内文本 (去掉首尾空白，不含最外层大括号)
    """
    depth = 1
    i = start_index
    length = len(source)

    while i < length:
        char = source[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return source[start_index:i].strip()
        i += 1

    # 未闭合的代码块
    return source[start_index:].strip()


def calculate_complexity(body: str) -> int:
    """
    近似圈复杂度: 1 + 控制流关键词与逻辑运算符出现次数

    这是有意的高估 (else 与 if 分别计数)，不是标准的判定点计数。
    """
    complexity = 1
    complexity += len(COMPLEXITY_KEYWORD_PATTERN.findall(body))
    complexity += len(COMPLEXITY_OPERATOR_PATTERN.findall(body))
    return complexity


# ============================================================================
# 注释提取
# ============================================================================

def _strip_block_line(text: str) -> str:
    text = text.strip()
    if text.startswith("*"):
        text = text[1:]
    return text.strip()


def extract_doc_comments(text: str) -> List[str]:
    """
    从注释片段中提取条目级文档注释 (/// 行与 /** ... */ 块)

    Args:
        text: 只包含注释的文本片段

    Returns:
        List[str]: 去掉注释标记后的文本行
    """
    comments: List[str] = []
    in_block = False

    for line in text.split("\n"):
        stripped = line.strip()

        if in_block:
            if "*/" in stripped:
                stripped = stripped.split("*/", 1)[0]
                in_block = False
            content = _strip_block_line(stripped)
            if content:
                comments.append(content)
        elif stripped.startswith("///"):
            comments.append(stripped[3:].strip())
        elif stripped.startswith("/**"):
            content = stripped[3:]
            if "*/" in content:
                content = content.split("*/", 1)[0]
            else:
                in_block = True
            content = _strip_block_line(content)
            if content:
                comments.append(content)

    return comments


def preceding_doc_comments(source: str, index: int) -> List[str]:
    """
    提取声明之前紧邻的文档注释

    从声明所在行向上回溯，跳过属性行 (#[...])，收集连续的 /// 行和
    /** */ 块；遇到空行、普通注释或代码即停止。

    Args:
        source: 完整源码
        index: 声明起始位置 (可见性修饰符或关键字)
    """
    line_start = source.rfind("\n", 0, index) + 1
    prefix = source[line_start:index].strip()
    if prefix and not ATTRIBUTE_LINE_PATTERN.fullmatch(prefix):
        # 同一行前面还有代码，不归属任何文档注释
        return []

    lines = source[:line_start].split("\n")[:-1]
    collected: List[str] = []
    i = len(lines) - 1

    while i >= 0:
        stripped = lines[i].strip()

        if stripped.startswith("///") and not stripped.startswith("////"):
            collected.insert(0, lines[i])
            i -= 1
        elif ATTRIBUTE_LINE_PATTERN.fullmatch(stripped):
            i -= 1
        elif stripped.endswith("*/"):
            # 回溯到块注释开头
            j = i
            while j >= 0 and "/*" not in lines[j]:
                j -= 1
            if j < 0 or not lines[j].strip().startswith("/**"):
                break
            collected[0:0] = lines[j:i + 1]
            i = j - 1
        else:
            break

    return extract_doc_comments("\n".join(collected))


def extract_module_doc_comments(source: str) -> List[str]:
    """
    提取文件头部的模块级注释

    收集 //! 行与 /*! */、/** */ 块；跳过空行、普通 // 注释和普通 /* */ 块
    (如许可证头)；遇到第一行代码即停止。
    """
    comments: List[str] = []
    block: Optional[str] = None  # "doc" | "plain"

    for line in source.split("\n"):
        stripped = line.strip()

        if block is not None:
            closed = "*/" in stripped
            if closed:
                stripped = stripped.split("*/", 1)[0]
            if block == "doc":
                content = _strip_block_line(stripped)
                if content:
                    comments.append(content)
            if closed:
                block = None
            continue

        if stripped.startswith("//!"):
            comments.append(stripped[3:].strip())
        elif stripped.startswith("/*!") or stripped.startswith("/**"):
            content = stripped[3:]
            if "*/" in content:
                content = content.split("*/", 1)[0]
            else:
                block = "doc"
            content = _strip_block_line(content)
            if content:
                comments.append(content)
        elif stripped.startswith("/*"):
            if "*/" not in stripped:
                block = "plain"
        elif not stripped or stripped.startswith("//"):
            continue
        else:
            break

    return comments


# ============================================================================
# 参数与字段
# ============================================================================

def split_top_level(text: str, separators: str = ",") -> List[str]:
    """
    按顶层分隔符切分 (忽略 <> () [] {} 内部的分隔符)

    `->` 与 `=>` 中的 `>` 不视为右尖括号。
    """
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    prev = ""

    for char in text:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and not (char == ">" and prev in ("-", "=")):
            depth = max(0, depth - 1)

        if char in separators and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
        prev = char

    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def parse_parameters(params: str, strip_prefix: Optional[Pattern] = None) -> List[Parameter]:
    """
    解析参数列表为 name/type 对

    Args:
        params: 括号内的参数文本
        strip_prefix: 需要在名字前剥离的前缀模式 (如 Rust 的 &、&mut、mut)

    Returns:
        List[Parameter]: 无法识别为 `name: type` 的项 (如 &self) 会被跳过
    """
    parameters: List[Parameter] = []
    if not params or not params.strip():
        return parameters

    for item in split_top_level(params, ","):
        item = normalize_whitespace(item)
        if strip_prefix is not None:
            item = strip_prefix.sub("", item, count=1)
        match = NAME_TYPE_PATTERN.match(item)
        if match:
            parameters.append(Parameter(
                name=match.group("name"),
                type=match.group("type").strip(),
            ))

    return parameters


def parse_fields(body: str) -> List[StructField]:
    """解析结构体字段 (按顶层逗号与换行切分)"""
    fields: List[StructField] = []

    # 先去掉行注释，避免注释里的尖括号干扰深度计数
    body = "\n".join(line.split("//", 1)[0] for line in body.split("\n"))

    for item in split_top_level(body, ",\n"):
        item = normalize_whitespace(item)
        if not item or item.startswith("#"):
            continue
        item = FIELD_VISIBILITY_PATTERN.sub("", item, count=1)
        match = NAME_TYPE_PATTERN.match(item)
        if match:
            fields.append(StructField(
                name=match.group("name"),
                type=match.group("type").strip(),
            ))

    return fields


def parse_tuple_fields(body: str) -> List[StructField]:
    """解析元组结构体字段，字段名为位置序号"""
    fields: List[StructField] = []
    for position, item in enumerate(split_top_level(body, ",")):
        item = FIELD_VISIBILITY_PATTERN.sub("", normalize_whitespace(item), count=1)
        fields.append(StructField(name=str(position), type=item))
    return fields
