"""
安全启发式模块

包含:
- heuristic_rules: 语言特性与安全提示的规则表 (存在性检测，不是漏洞证明)
"""

from .heuristic_rules import (
    HeuristicRule,
    detect,
    RUST_FEATURE_RULES,
    RUST_SECURITY_RULES,
    MOVE_FEATURE_RULES,
    MOVE_SECURITY_RULES,
    UNKNOWN_LANGUAGE_FEATURE,
    GENERIC_PARSING_INSIGHT,
)

__all__ = [
    "HeuristicRule",
    "detect",
    "RUST_FEATURE_RULES",
    "RUST_SECURITY_RULES",
    "MOVE_FEATURE_RULES",
    "MOVE_SECURITY_RULES",
    "UNKNOWN_LANGUAGE_FEATURE",
    "GENERIC_PARSING_INSIGHT",
]
