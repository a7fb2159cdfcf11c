"""
状态检查模块

检查传输配置中的文件在目标系统上是否存在
"""

from .checker import (
    GroupCheck,
    CheckReport,
    check_transfer,
    print_report
)

__all__ = [
    'GroupCheck',
    'CheckReport',
    'check_transfer',
    'print_report'
]
