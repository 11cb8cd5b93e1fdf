"""
Contract Structure Analyzer CLI

对 Rust / Move 合约源码做结构分析，输出 ParsedModule JSON。

Usage:
    # 分析单个文件
    python -m contract_analyzer.cli.analyze --file ./sources/pool.move

    # 分析整个项目 (递归查找 .rs / .move)
    python -m contract_analyzer.cli.analyze --project ./my-move-project

    # 每个文件输出一行摘要
    python -m contract_analyzer.cli.analyze --project ./my-project --summary
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ..config import get_settings
from ..context import EXTRACTOR_REGISTRY, ParsedModule, analyze

logger = logging.getLogger(__name__)


def find_source_files(project_path: Path, skip_dirs: Iterable[str]) -> List[Path]:
    """递归查找项目中支持的源文件 (按路径排序)"""
    extensions = set()
    for extractor in EXTRACTOR_REGISTRY.values():
        extensions.update(extractor.file_extensions)

    skipped = set(skip_dirs)
    files = []
    for path in project_path.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in extensions:
            continue
        relative_parts = path.relative_to(project_path).parts[:-1]
        if any(part in skipped for part in relative_parts):
            continue
        files.append(path)

    return sorted(files)


def analyze_file(path: Path, language: Optional[str] = None, max_bytes: Optional[int] = None) -> Optional[ParsedModule]:
    """
    读取并分析单个文件

    Args:
        path: 文件路径
        language: 语言提示 (缺省按扩展名推断)
        max_bytes: 文件大小上限

    Returns:
        ParsedModule，读取失败或超过大小上限时返回 None
    """
    try:
        if max_bytes is not None and path.stat().st_size > max_bytes:
            logger.warning(f"跳过过大的文件: {path} ({path.stat().st_size} bytes)")
            return None
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"读取文件失败 {path}: {e}")
        return None

    return analyze(source, str(path), language)


def format_summary(path: str, module: ParsedModule) -> str:
    """单行摘要"""
    metrics = module.complexity_metrics
    return (
        f"{path}: {module.module_kind.value} "
        f"fn={metrics.function_count} struct={metrics.struct_count} "
        f"const={metrics.const_count} cc={metrics.cyclomatic_complexity} "
        f"insights={len(module.security_insights)}"
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Contract Structure Analyzer - Rust / Move 合约源码结构分析",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
    # 分析单个文件
    python -m contract_analyzer.cli.analyze --file ./sources/pool.move

    # 分析整个项目并写入 JSON
    python -m contract_analyzer.cli.analyze --project ./my-project --output report.json

    # 强制按 Move 解析
    python -m contract_analyzer.cli.analyze --file ./pool.txt --language move
        """,
    )

    # 输入源
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "--file", "-f",
        help="分析单个源文件",
    )
    input_group.add_argument(
        "--project", "-p",
        help="分析整个项目目录",
    )

    parser.add_argument(
        "--language", "-l",
        choices=["rust", "move"],
        help="语言提示 (默认按扩展名推断)",
    )

    # 输出选项
    parser.add_argument(
        "--output", "-o",
        help="写入 JSON 文件 (默认输出到 stdout)",
    )
    parser.add_argument(
        "--summary", "-s",
        action="store_true",
        help="每个文件输出一行摘要而不是 JSON",
    )
    parser.add_argument(
        "--no-body",
        action="store_true",
        help="JSON 中不包含函数体文本",
    )

    # 其他选项
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="详细输出",
    )
    parser.add_argument(
        "--name", "-n",
        help="项目名称 (默认从路径推断)",
    )

    args = parser.parse_args(argv)
    settings = get_settings()

    package_logger = logging.getLogger("contract_analyzer")
    if args.verbose:
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    include_body = not args.no_body
    indent = settings.json_indent or None

    # 收集文件
    if args.file:
        file_path = Path(args.file)
        if not file_path.is_file():
            logger.error(f"文件不存在: {args.file}")
            return 1
        base_dir = file_path.parent
        files = [file_path]
    else:
        base_dir = Path(args.project)
        if not base_dir.is_dir():
            logger.error(f"项目目录不存在: {args.project}")
            return 1
        files = find_source_files(base_dir, settings.skip_dirs)
        if not files:
            logger.error(f"未找到 Rust / Move 源文件: {args.project}")
            return 1
        logger.info(f"找到 {len(files)} 个源文件")

    # 逐个分析 (单个文件失败不影响其他文件)
    results = []
    for path in files:
        module = analyze_file(path, args.language, settings.max_file_bytes)
        if module is None:
            continue
        results.append((path.relative_to(base_dir).as_posix(), module))

    if not results:
        logger.error("没有可分析的文件")
        return 1

    # 输出
    if args.summary:
        output = "\n".join(format_summary(path, module) for path, module in results)
    elif args.file:
        output = json.dumps(results[0][1].to_dict(include_body=include_body), indent=indent, ensure_ascii=False)
    else:
        document = {
            "project": args.name or base_dir.resolve().name,
            "files": [
                {"path": path, "module": module.to_dict(include_body=include_body)}
                for path, module in results
            ],
        }
        output = json.dumps(document, indent=indent, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        logger.info(f"结果已写入: {args.output}")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    exit(main())
