"""
运行参数模块

默认参数来自包内的 default.yaml，可依次被
用户参数文件、环境变量和命令行参数覆盖
"""

import os
import copy
from typing import Optional, Mapping

import yaml

from .errors import ConfigError

DEFAULT_SETTINGS_FILE = os.path.join(os.path.dirname(__file__), 'default.yaml')

# 环境变量 -> (节, 键, 类型)
ENV_OVERRIDES = {
    'UFTP_EXECUTABLE': ('uftp', 'executable', str),
    'UFTP_AUTH_SERVER': ('uftp', 'auth_server', str),
    'UFTP_USER': ('uftp', 'user', str),
    'UFTP_KEY': ('uftp', 'key', str),
    'UFTP_THREADS': ('uftp', 'threads', int),
    'UFTP_STREAMS': ('uftp', 'streams', int),
    'UFTP_MAX_RETRIES': ('upload', 'max_retries', int),
    'UFTP_RETRY_DELAY': ('upload', 'retry_delay', float),
}


def _read_yaml(file_path: str) -> dict:
    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"无法读取参数文件 {file_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"参数文件格式错误（应为映射）: {file_path}")
    return data


def merge_settings(base: dict, override: Mapping) -> dict:
    """递归合并两个参数字典，override 优先"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_file: Optional[str] = None, env: Optional[Mapping] = None) -> dict:
    """
    加载运行参数

    参数：
    ----------
    settings_file : str, optional
        用户参数文件（YAML，结构同 default.yaml）
    env : Mapping, optional
        环境变量（默认 os.environ）

    返回：
    ----------
    dict
        合并后的参数
    """
    settings = _read_yaml(DEFAULT_SETTINGS_FILE)

    if settings_file:
        settings = merge_settings(settings, _read_yaml(settings_file))

    env = os.environ if env is None else env
    for var, (section, key, cast) in ENV_OVERRIDES.items():
        if env.get(var):
            try:
                settings.setdefault(section, {})[key] = cast(env[var])
            except ValueError as e:
                raise ConfigError(f"环境变量 {var} 的值无效: {env[var]!r}") from e

    key = settings['uftp'].get('key')
    if key:
        settings['uftp']['key'] = os.path.expanduser(key)

    return settings
