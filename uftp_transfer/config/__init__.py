"""
配置模块

运行参数（default.yaml）与传输配置（transfers 列表）
"""

from .errors import ConfigError

from .settings import (
    load_settings,
    merge_settings,
    DEFAULT_SETTINGS_FILE
)

from .transfer_config import (
    TransferGroup,
    load_transfer_config,
    EXAMPLE_CONFIG
)

__all__ = [
    'ConfigError',
    'load_settings',
    'merge_settings',
    'DEFAULT_SETTINGS_FILE',
    'TransferGroup',
    'load_transfer_config',
    'EXAMPLE_CONFIG'
]
