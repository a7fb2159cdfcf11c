"""
传输状态检查模块

在目标系统上检查传输配置中的文件是否已经存在
"""

import os
from typing import Callable, List, Optional

import pandas as pd
from tqdm import tqdm

from ..io import save_lines


class GroupCheck:
    """单个传输块的检查结果"""

    def __init__(self, name: str, remote_base: str):
        self.name = name
        self.remote_base = remote_base
        self.found: List[str] = []
        self.missing: List[str] = []

    @property
    def total(self) -> int:
        return len(self.found) + len(self.missing)

    @property
    def completion(self) -> float:
        return len(self.found) / self.total * 100 if self.total else 0.0

    def missing_paths(self) -> List[str]:
        return [os.path.join(self.remote_base, f) for f in self.missing]


class CheckReport:
    """所有传输块的检查结果"""

    def __init__(self, groups: Optional[List[GroupCheck]] = None):
        self.groups = groups or []

    @property
    def total(self) -> int:
        return sum(g.total for g in self.groups)

    @property
    def found(self) -> int:
        return sum(len(g.found) for g in self.groups)

    @property
    def missing(self) -> int:
        return sum(len(g.missing) for g in self.groups)

    def missing_paths(self) -> List[str]:
        """所有缺失文件的完整路径（按配置顺序）"""
        return [path for g in self.groups for path in g.missing_paths()]

    def to_dataframe(self) -> pd.DataFrame:
        """每个传输块一行的统计表"""
        return pd.DataFrame(
            [
                {
                    'name': g.name,
                    'remote_base': g.remote_base,
                    'files': g.total,
                    'found': len(g.found),
                    'missing': len(g.missing),
                    'completion_pct': round(g.completion, 1),
                }
                for g in self.groups
            ],
            columns=['name', 'remote_base', 'files', 'found', 'missing', 'completion_pct']
        )

    def write_missing_report(self, file_path: str) -> int:
        """
        写出缺失文件列表（每行一个完整路径）

        返回：
        ----------
        int
            写出的路径数
        """
        paths = self.missing_paths()
        save_lines(paths, file_path)
        return len(paths)


def check_transfer(
    groups: list,
    exists: Callable[[str], bool] = os.path.exists,
    progress: bool = False
) -> CheckReport:
    """
    检查每个传输块的文件是否存在于 remote_base 下

    参数：
    ----------
    groups : list of TransferGroup
        传输块
    exists : Callable
        存在性检查函数（默认 os.path.exists）
    progress : bool
        是否显示进度条

    返回：
    ----------
    CheckReport
        检查结果
    """
    report = CheckReport()

    for group in groups:
        result = GroupCheck(group.name, group.remote_base)

        for file_path in tqdm(group.files, desc=group.name, unit='file',
                              leave=False, disable=not progress):
            if exists(os.path.join(group.remote_base, file_path)):
                result.found.append(file_path)
            else:
                result.missing.append(file_path)

        report.groups.append(result)

    return report


def print_report(report: CheckReport, show: str = 'missing', max_listed: int = 20):
    """
    打印检查结果

    参数：
    ----------
    report : CheckReport
        检查结果
    show : str
        列出哪些文件（missing, found, all）
    max_listed : int
        缺失文件超过该数量时只列出前 10 个
    """
    for g in report.groups:
        print(f"\n=== {g.name} ===")
        print(f"目标目录: {g.remote_base}")
        print(f"检查文件: {g.total}")
        print(f"  已存在: {len(g.found)}/{g.total} ({g.completion:.1f}%)")
        print(f"  缺失:   {len(g.missing)}/{g.total}")

        if show in ('found', 'all') and g.found:
            print(f"\n  已存在的文件:")
            for f in g.found:
                print(f"    ✓ {f}")

        if show in ('missing', 'all') and g.missing:
            if len(g.missing) <= max_listed:
                print(f"\n  ⚠️  缺失的文件:")
                for f in g.missing:
                    print(f"    - {f}")
            else:
                print(f"\n  ⚠️  {len(g.missing)} 个文件缺失（太多，不全部列出）")
                print(f"    前 10 个:")
                for f in g.missing[:10]:
                    print(f"    - {f}")
                print(f"    ... 以及另外 {len(g.missing) - 10} 个")

    print("\n" + "=" * 80)
    print("总体统计")
    print("=" * 80)
    print(f"检查文件总数: {report.total}")
    if report.total > 0:
        print(f"已存在:       {report.found} ({report.found / report.total * 100:.1f}%)")
        print(f"缺失:         {report.missing} ({report.missing / report.total * 100:.1f}%)")
    else:
        print("已存在:       0")
        print("缺失:         0")
    print("=" * 80)
