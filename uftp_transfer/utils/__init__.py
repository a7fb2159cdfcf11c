"""
工具模块

包含日志配置等辅助功能
"""

from .logger import setup_logging, LOG_FORMAT

__all__ = [
    'setup_logging',
    'LOG_FORMAT'
]
