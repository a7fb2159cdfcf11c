"""
配置生成模块

按 变量 × 年 × 月 生成传输配置
"""

from .filelist import (
    MONTHS,
    PRESETS,
    GenerationStats,
    default_bases,
    expand_filenames,
    build_groups,
    generate_config,
    dunkelflaute_group,
    dunkelflaute_output_name,
    generate_dunkelflaute
)

__all__ = [
    'MONTHS',
    'PRESETS',
    'GenerationStats',
    'default_bases',
    'expand_filenames',
    'build_groups',
    'generate_config',
    'dunkelflaute_group',
    'dunkelflaute_output_name',
    'generate_dunkelflaute'
]
