"""
传输配置生成模块

按 变量 × 年 × 月 生成模型输出文件列表，写成传输配置 YAML
"""

import os
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..config import TransferGroup, ConfigError
from ..io import save_transfer_config

logger = logging.getLogger(__name__)

MONTHS = [f"{m:02d}" for m in range(1, 13)]

REMOTE_ROOT = "/work/ab0995/ICCP_AWI_hackthon_2025"

# 模型输出的文件命名规则
PRESETS = {
    'oifs': {
        'label': 'OIFS',
        'component': 'oifs',
        'pattern': "atm_reduced_{freq}_{var}_{freq}_{year}{month}-{year}{month}.nc",
        'use_freq': True,
    },
    'oifs_pl': {
        'label': 'OIFS',
        'component': 'oifs',
        'pattern': "atm_reduced_{freq}_pl_{var}_{freq}_pl_{year}{month}-{year}{month}.nc",
        'use_freq': True,
    },
    'fesom': {
        'label': 'FESOM',
        'component': 'fesom',
        'pattern': "{var}.fesom.{year}_{month}.nc",
        'use_freq': False,
    },
}

# dunkelflaute 数据所在的源系统
DUNKELFLAUTE_SOURCES = {
    'aleph': "/scratch/awicm3/TCo1279-DART-{scenario}/outdata/oifs",
    'olaf': "/arch/bm1344/awicm3/TCo1279-DART-{scenario}/outdata/oifs",
}


class GenerationStats:
    """文件存在性统计"""

    def __init__(self):
        self.checked = 0
        self.found = 0
        self.missing = 0


def default_bases(preset: str, case_name: str):
    """返回 (local_base, remote_base) 默认值"""
    component = PRESETS[preset]['component']
    local_base = f"/scratch/awicm3/{case_name}/outdata/{component}"
    remote_base = f"{REMOTE_ROOT}/{case_name}/outdata/{component}"
    return local_base, remote_base


def expand_filenames(
    pattern: str,
    var: str,
    years: Sequence[int],
    months: Sequence[str] = MONTHS,
    freq: str = ''
) -> List[str]:
    """按年、月展开一个变量的文件名"""
    return [
        pattern.format(freq=freq, var=var, year=year, month=month)
        for year in years
        for month in months
    ]


def build_groups(
    preset: str,
    variables: Sequence[str],
    start_year: int,
    end_year: int,
    local_base: str,
    remote_base: str,
    months: Sequence[str] = MONTHS,
    freq: str = '3h',
    check_exists: bool = False,
    exists: Callable[[str], bool] = os.path.isfile,
    stats: Optional[GenerationStats] = None
) -> List[TransferGroup]:
    """
    每个变量生成一个传输块

    参数：
    ----------
    preset : str
        文件命名规则（oifs, oifs_pl, fesom）
    variables : list of str
        变量名
    start_year, end_year : int
        年份范围（含两端）
    local_base, remote_base : str
        本地和远程根目录
    months : list of str
        月份（两位数字）
    freq : str
        输出频率（FESOM 不使用）
    check_exists : bool
        只保留 local_base 下存在的文件
    exists : Callable
        存在性检查函数
    stats : GenerationStats, optional
        存在性统计（check_exists 时更新）

    返回：
    ----------
    list of TransferGroup
    """
    if preset not in PRESETS:
        raise ConfigError(f"未知的文件规则: {preset}（可选: {', '.join(PRESETS)}）")
    if end_year < start_year:
        raise ConfigError(f"结束年份早于起始年份: {start_year}-{end_year}")

    preset_info = PRESETS[preset]
    years = range(start_year, end_year + 1)
    stats = stats if stats is not None else GenerationStats()
    groups = []

    for idx, var in enumerate(variables, 1):
        print(f"  [{idx}/{len(variables)}] 处理变量: {var}")

        if preset_info['use_freq']:
            name = f"{preset_info['label']} {freq} - {var} ({start_year}-{end_year})"
        else:
            name = f"{preset_info['label']} - {var} ({start_year}-{end_year})"

        files = expand_filenames(preset_info['pattern'], var, years, months, freq)

        if check_exists:
            kept = []
            for file_name in files:
                stats.checked += 1
                full_path = os.path.join(local_base, file_name)
                if exists(full_path):
                    kept.append(file_name)
                    stats.found += 1
                else:
                    stats.missing += 1
                    logger.warning("文件不存在: %s", full_path)
            print(f"    → 存在: {len(kept)}, 缺失: {len(files) - len(kept)}")
            files = kept

        groups.append(TransferGroup(name, local_base, remote_base, files))

    return groups


def generate_config(
    preset: str,
    case_name: str,
    variables: Sequence[str],
    start_year: int,
    end_year: int,
    output_file: str,
    local_base: Optional[str] = None,
    remote_base: Optional[str] = None,
    months: Sequence[str] = MONTHS,
    freq: str = '3h',
    check_exists: bool = False,
    exists: Callable[[str], bool] = os.path.isfile
):
    """
    生成传输配置文件

    返回：
    ----------
    (list of TransferGroup, GenerationStats)
    """
    if preset not in PRESETS:
        raise ConfigError(f"未知的文件规则: {preset}（可选: {', '.join(PRESETS)}）")

    default_local, default_remote = default_bases(preset, case_name)
    local_base = local_base or default_local
    remote_base = remote_base or default_remote

    label = PRESETS[preset]['label']
    n_years = end_year - start_year + 1
    expected = len(variables) * n_years * len(months)

    print("=" * 50)
    print(f"{label} 传输配置生成")
    print("=" * 50)
    print(f"Case:     {case_name}")
    print(f"年份:     {start_year} - {end_year}")
    print(f"变量:     {len(variables)}")
    print(f"月份:     每年 {len(months)} 个")
    print(f"输出:     {output_file}")
    print(f"预计文件: {expected}\n")

    stats = GenerationStats()
    groups = build_groups(
        preset, variables, start_year, end_year, local_base, remote_base,
        months=months, freq=freq, check_exists=check_exists, exists=exists, stats=stats
    )
    n_files = sum(len(g.files) for g in groups)

    header = [
        "UFTP Transfer Configuration",
        f"Auto-generated for {label} data",
        "",
        f"Case: {case_name}",
        f"Years: {start_year}-{end_year}",
        f"Generated: {datetime.now().isoformat(timespec='seconds')}",
    ]
    if PRESETS[preset]['use_freq']:
        header.insert(4, f"Frequency: {freq}")

    footer = [
        "=" * 76,
        "Transfer Summary",
        "=" * 76,
        f"Years:         {start_year} to {end_year} ({n_years} years)",
        f"Variables:     {len(variables)}",
        f"Months/year:   {len(months)}",
        f"Total files:   {n_files}",
    ]
    if check_exists:
        footer += [
            f"Files checked: {stats.checked}",
            f"Files missing: {stats.missing} (skipped)",
        ]
    footer += [
        "",
        f"Local base:    {local_base}",
        f"Remote base:   {remote_base}",
        "=" * 76,
    ]

    save_transfer_config(groups, output_file, header=header, footer=footer)

    print(f"\n✅ 配置已生成: {output_file}")
    print(f"   文件数: {n_files}")
    if check_exists and stats.missing:
        print(f"⚠️  {stats.missing} 个文件不存在，已跳过")

    return groups, stats


def dunkelflaute_group(
    scenario: str,
    start_year: int,
    end_year: int,
    source: str = 'aleph',
    var: str = 'tsr'
) -> TransferGroup:
    """dunkelflaute 分析用的辐射变量（tsr, ssrd）传输块"""
    if source not in DUNKELFLAUTE_SOURCES:
        raise ConfigError(f"未知的源系统: {source}（可选: {', '.join(DUNKELFLAUTE_SOURCES)}）")

    local_base = DUNKELFLAUTE_SOURCES[source].format(scenario=scenario)
    remote_base = f"{REMOTE_ROOT}/TCo1279-DART-{scenario}/outdata/oifs"
    files = expand_filenames(
        PRESETS['oifs']['pattern'], var, range(start_year, end_year + 1), freq='3h'
    )

    return TransferGroup(
        f"TCo1279-DART-{scenario} {var} {start_year}-{end_year} from {source}",
        local_base,
        remote_base,
        files
    )


def dunkelflaute_output_name(scenario: str, start_year: int, end_year: int,
                             source: str, var: str) -> str:
    return f"transfer_dunkelflaute_{var}_{scenario}_{start_year}_{end_year}_{source}.yaml"


def generate_dunkelflaute(
    scenario: str,
    start_year: int,
    end_year: int,
    source: str = 'aleph',
    var: str = 'tsr',
    output_file: Optional[str] = None
):
    """生成 dunkelflaute 传输配置，返回 (TransferGroup, 输出文件)"""
    group = dunkelflaute_group(scenario, start_year, end_year, source, var)
    output_file = output_file or dunkelflaute_output_name(scenario, start_year, end_year, source, var)

    header = [
        "UFTP Transfer Configuration for Dunkelflaute Analysis",
        f"Transfer {var} (solar radiation) files for TCo1279-DART-{scenario}",
        f"Source: {source.capitalize()} {group.local_base}",
        f"Destination: Levante {group.remote_base}",
        f"Years: {start_year}-{end_year}",
        f"Variable: {var}",
        f"Generated: {datetime.now().isoformat(timespec='seconds')}",
    ]
    save_transfer_config([group], output_file, header=header)

    print(f"已生成: {output_file}")
    print(f"变量:   {var}")
    print(f"文件:   {len(group.files)} 个月度文件")

    return group, output_file
