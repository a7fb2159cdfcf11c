"""
数据写入模块

提供传输配置、文件列表和统计表的保存功能
"""

import os
from typing import Iterable, List, Optional

import pandas as pd
import yaml


def save_csv(df: pd.DataFrame, file_path: str, **kwargs):
    """
    保存 DataFrame 为 CSV 格式

    参数：
    ----------
    df : pd.DataFrame
        要保存的 DataFrame
    file_path : str
        输出文件路径
    **kwargs
        传递给 pandas.to_csv 的其他参数
    """
    # 确保输出目录存在
    os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)

    df.to_csv(file_path, **kwargs)

    print(f"CSV 已保存至: {file_path}")


def save_lines(lines: Iterable[str], file_path: str):
    """逐行写入文本文件"""
    os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)

    with open(file_path, 'w') as f:
        for line in lines:
            f.write(f"{line}\n")


def _comment_block(lines: Optional[List[str]]) -> str:
    if not lines:
        return ''
    return ''.join(f"# {line}".rstrip() + '\n' for line in lines)


def save_transfer_config(
    groups: list,
    file_path: str,
    header: Optional[List[str]] = None,
    footer: Optional[List[str]] = None
):
    """
    保存传输配置为 YAML

    参数：
    ----------
    groups : list of TransferGroup
        传输块
    file_path : str
        输出文件路径
    header : list of str, optional
        文件开头的注释行
    footer : list of str, optional
        文件末尾的注释行
    """
    os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)

    body = yaml.safe_dump(
        {'transfers': [group.to_dict() for group in groups]},
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True
    )

    with open(file_path, 'w') as f:
        f.write(_comment_block(header))
        if header:
            f.write('\n')
        f.write(body)
        if footer:
            f.write('\n')
        f.write(_comment_block(footer))
