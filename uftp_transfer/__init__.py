"""
UFTP 气候模式数据传输工具

在 HPC 系统之间传输模式输出文件（调用外部 uftp 客户端）

主要功能：
- 传输配置读取
- 断点续传上传（已完成文件跳过，失败自动重试）
- MD5 校验上传
- 远程目录逐级创建
- 传输状态检查
- 传输配置生成
"""

__version__ = '1.0.0'

# 配置模块
from .config import (
    ConfigError,
    TransferGroup,
    load_settings,
    load_transfer_config
)

# 传输模块
from .transfer import (
    UFTPClient,
    CommandResult,
    TransferManager,
    UploadState,
    UploadSummary,
    calculate_checksum
)

# 状态检查模块
from .status import CheckReport, check_transfer

# 配置生成模块
from .generate import generate_config, generate_dunkelflaute

# 工具模块
from .utils import setup_logging

__all__ = [
    # Version
    '__version__',

    # Config
    'ConfigError',
    'TransferGroup',
    'load_settings',
    'load_transfer_config',

    # Transfer
    'UFTPClient',
    'CommandResult',
    'TransferManager',
    'UploadState',
    'UploadSummary',
    'calculate_checksum',

    # Status
    'CheckReport',
    'check_transfer',

    # Generate
    'generate_config',
    'generate_dunkelflaute',

    # Utils
    'setup_logging'
]
