"""
语言提取器基类

所有语言提取器必须实现此接口，由 analyzer 通过注册表选择，
而不是按扩展名写 if/else 分支。

设计原则:
1. 无状态 - 提取器实例不保存任何调用间状态，可并发复用
2. 表驱动 - 特性/安全检测由规则表完成，子类只声明表
3. 统一输出 - 所有提取器返回相同的数据模型
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from ..security.heuristic_rules import HeuristicRule, detect
from .models import Language, ModuleKind, ParsedConstant, ParsedFunction, ParsedStruct


class LanguageExtractor(ABC):
    """
    语言提取器基类

    子类声明:
        language: 语言标识
        module_kind: 输出的模块类型
        file_extensions: 用于扩展名推断
        FEATURE_RULES / SECURITY_RULES: 启发式规则表
    """

    language: Language = Language.UNKNOWN
    module_kind: ModuleKind = ModuleKind.RUST_CRATE
    file_extensions: Tuple[str, ...] = ()

    FEATURE_RULES: Sequence[HeuristicRule] = ()
    SECURITY_RULES: Sequence[HeuristicRule] = ()

    @abstractmethod
    def extract_functions(self, source: str) -> List[ParsedFunction]:
        """提取函数声明 (按源码顺序)"""
        pass

    @abstractmethod
    def extract_structs(self, source: str) -> List[ParsedStruct]:
        """提取结构体/资源声明"""
        pass

    @abstractmethod
    def extract_constants(self, source: str) -> List[ParsedConstant]:
        """提取常量/静态变量声明"""
        pass

    def extract_imports(self, source: str) -> List[str]:
        return []

    def extract_dependencies(self, source: str) -> List[str]:
        return []

    def detect_features(self, source: str) -> List[str]:
        """语言特性标签"""
        return detect(self.FEATURE_RULES, source)

    def detect_security_insights(self, source: str) -> List[str]:
        """安全提示"""
        return detect(self.SECURITY_RULES, source)
