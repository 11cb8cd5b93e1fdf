"""
命令行工具

- analyze: 单文件 / 项目结构分析，输出 JSON 或摘要
"""
