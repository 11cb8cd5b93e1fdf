"""
启发式检测规则表

每种语言两张表:
- *_FEATURE_RULES: 语言特性标签 (如 async_functions, struct_abilities)
- *_SECURITY_RULES: 安全提示文本

每条规则对整个文件求值一次，命中即输出一次标签，与出现次数无关。
新增检测只需往表里加一行，不需要改控制流。

使用方式:
    from contract_analyzer.security.heuristic_rules import detect, MOVE_SECURITY_RULES

    insights = detect(MOVE_SECURITY_RULES, source)
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern


@dataclass(frozen=True)
class HeuristicRule:
    """启发式规则定义"""
    pattern: Pattern               # 存在即命中
    label: str                     # 特性标签或安全提示文本
    unless: Optional[Pattern] = None  # 若该模式也存在则不命中

    def matches(self, source: str) -> bool:
        if not self.pattern.search(source):
            return False
        if self.unless is not None and self.unless.search(source):
            return False
        return True


def _rule(pattern: str, label: str, unless: Optional[str] = None) -> HeuristicRule:
    return HeuristicRule(
        pattern=re.compile(pattern),
        label=label,
        unless=re.compile(unless) if unless else None,
    )


def detect(rules: Iterable[HeuristicRule], source: str) -> List[str]:
    """
    按表顺序对全文求值

    Args:
        rules: 规则表
        source: 完整源码

    Returns:
        List[str]: 命中规则的标签 (每条规则至多一次)
    """
    return [rule.label for rule in rules if rule.matches(source)]


# ============================================================================
# Rust
# ============================================================================

RUST_FEATURE_RULES = (
    _rule(r"async\s+fn", "async_functions"),
    _rule(r"unsafe\s+", "unsafe_code"),
    _rule(r"#\[derive\(", "derive_macros"),
    _rule(r"impl\s+.*\s+for\s+", "trait_implementations"),
    _rule(r"macro_rules!", "declarative_macros"),
    _rule(r"\?\s*;", "error_propagation"),
    _rule(r"Box<", "heap_allocation"),
    _rule(r"Rc<|Arc<", "reference_counting"),
    _rule(r"lifetime|<'[a-z_]\w*\s*[,>]", "explicit_lifetimes"),
)

RUST_SECURITY_RULES = (
    _rule(r"unsafe\s+", "Contains unsafe code blocks - requires careful review"),
    _rule(r"unwrap\(\)", "Uses unwrap() which can panic - consider error handling"),
    _rule(r"expect\(", "Uses expect() which can panic - verify error messages"),
    _rule(r"transmute|from_raw", "Uses memory transmutation - high risk operation"),
    _rule(r"ptr::|raw::", "Direct pointer manipulation detected"),
)


# ============================================================================
# Move
# ============================================================================

MOVE_FEATURE_RULES = (
    _rule(r"entry\s+fun", "entry_functions"),
    _rule(r"native\s+fun", "native_functions"),
    _rule(r"has\s+(?:copy|drop|store|key)", "struct_abilities"),
    _rule(r"acquires\s+", "resource_acquisition"),
    _rule(r"move_to<", "resource_operations"),
    _rule(r"borrow_global", "global_storage_access"),
    _rule(r"assert!\(", "assertions"),
    _rule(r"vector::|Vector::", "vector_operations"),
    _rule(r"signer::", "signer_operations"),
)

MOVE_SECURITY_RULES = (
    _rule(
        r"entry\s+fun",
        "Entry function without public visibility - verify access control",
        unless=r"public\s+entry",
    ),
    _rule(r"move_to<.*>\(", "Resource publishing detected - ensure proper authorization"),
    _rule(r"borrow_global_mut<", "Mutable global resource access - review for race conditions"),
    _rule(r"assert!\(", "Assertions present - verify all edge cases are handled"),
    _rule(r"abort\s+", "Explicit abort statements - ensure proper error codes"),
    _rule(
        r"public\s+",
        "Public functions without formal verification specs",
        unless=r"@pre|@post|@aborts_if",
    ),
)


# ============================================================================
# 通用回退
# ============================================================================

UNKNOWN_LANGUAGE_FEATURE = "unknown_language"
GENERIC_PARSING_INSIGHT = "Generic parsing - limited security analysis available"
