"""
结构化分析结果的数据模型

每次 analyze() 调用都会重新创建这些对象，调用结束后不再修改。
to_dict() 输出的字段名是下游 (文档生成、安全评分汇总、报告渲染) 依赖的公开契约，
不要随意改名。
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Language(str, Enum):
    """源码语言"""
    RUST = "rust"
    MOVE = "move"
    UNKNOWN = "unknown"


class ModuleKind(str, Enum):
    """模块类型 (通用回退路径也会标记其中之一)"""
    RUST_CRATE = "rust_crate"
    MOVE_MODULE = "move_module"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


# ============================================================================
# 基础记录
# ============================================================================

@dataclass
class Parameter:
    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass
class StructField:
    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass
class ParsedFunction:
    name: str
    visibility: Visibility = Visibility.PRIVATE
    parameters: List[Parameter] = field(default_factory=list)
    return_type: Optional[str] = None
    doc_comments: List[str] = field(default_factory=list)
    body_text: str = ""
    line_number: int = 1
    complexity_score: int = 1
    is_entry_function: bool = False  # 仅 Move
    modifiers: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility.value,
            "parameters": [p.to_dict() for p in self.parameters],
            "return_type": self.return_type,
            "doc_comments": list(self.doc_comments),
            "body_text": self.body_text,
            "line_number": self.line_number,
            "complexity_score": self.complexity_score,
            "is_entry_function": self.is_entry_function,
            "modifiers": list(self.modifiers),
        }


@dataclass
class ParsedStruct:
    name: str
    fields: List[StructField] = field(default_factory=list)
    doc_comments: List[str] = field(default_factory=list)
    line_number: int = 1
    # Move abilities (Rust 结构体恒为 False)
    has_copy: bool = False
    has_drop: bool = False
    has_store: bool = False
    has_key: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "doc_comments": list(self.doc_comments),
            "line_number": self.line_number,
            "has_copy": self.has_copy,
            "has_drop": self.has_drop,
            "has_store": self.has_store,
            "has_key": self.has_key,
        }


@dataclass
class ParsedConstant:
    name: str
    type: str
    visibility: Visibility = Visibility.PRIVATE
    is_mutable: bool = False
    value: str = ""  # 原始右值文本，不做解析
    doc_comments: List[str] = field(default_factory=list)
    line_number: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "visibility": self.visibility.value,
            "doc_comments": list(self.doc_comments),
            "line_number": self.line_number,
            "is_mutable": self.is_mutable,
            "value": self.value,
        }


@dataclass
class ComplexityMetrics:
    cyclomatic_complexity: int = 0
    function_count: int = 0
    struct_count: int = 0
    const_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "function_count": self.function_count,
            "struct_count": self.struct_count,
            "const_count": self.const_count,
        }


# ============================================================================
# 模块 (每个文件一个)
# ============================================================================

@dataclass
class ParsedModule:
    """单个源文件的结构化分析结果"""
    name: str
    module_kind: ModuleKind
    functions: List[ParsedFunction] = field(default_factory=list)
    structs: List[ParsedStruct] = field(default_factory=list)
    constants: List[ParsedConstant] = field(default_factory=list)
    module_doc_comments: List[str] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    total_lines: int = 1
    complexity_metrics: ComplexityMetrics = field(default_factory=ComplexityMetrics)
    security_insights: List[str] = field(default_factory=list)
    language_features: List[str] = field(default_factory=list)

    def to_dict(self, include_body: bool = True) -> Dict[str, Any]:
        """
        转换为 JSON 兼容的字典

        Args:
            include_body: 是否保留函数体文本 (批量导出时可关闭以减小体积)
        """
        functions = []
        for func in self.functions:
            data = func.to_dict()
            if not include_body:
                data.pop("body_text")
            functions.append(data)

        return {
            "name": self.name,
            "module_type": self.module_kind.value,
            "functions": functions,
            "events": [s.to_dict() for s in self.structs],
            "variables": [c.to_dict() for c in self.constants],
            "doc_comments": list(self.module_doc_comments),
            "imports": list(self.imports),
            "dependencies": list(self.dependencies),
            "total_lines": self.total_lines,
            "complexity_metrics": self.complexity_metrics.to_dict(),
            "security_insights": list(self.security_insights),
            "language_features": list(self.language_features),
        }

    def to_json(self, indent: Optional[int] = 2, include_body: bool = True) -> str:
        return json.dumps(self.to_dict(include_body=include_body), indent=indent, ensure_ascii=False)
