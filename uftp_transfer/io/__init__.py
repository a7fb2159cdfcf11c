"""
IO 模块

提供配置和报告的写入功能
"""

from .writer import save_csv, save_lines, save_transfer_config

__all__ = [
    'save_csv',
    'save_lines',
    'save_transfer_config'
]
