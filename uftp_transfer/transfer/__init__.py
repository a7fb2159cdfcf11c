"""
文件传输模块

通过 uftp 命令行工具上传文件，支持断点续传和校验
"""

from .local import (
    calculate_checksum,
    get_file_info,
    human_readable_size
)

from .client import (
    UFTPClient,
    CommandResult,
    RemoteDirectoryCache,
    parse_checksum
)

from .manager import (
    TransferManager,
    UploadState,
    UploadSummary,
    default_state_file
)

__all__ = [
    # Local
    'calculate_checksum',
    'get_file_info',
    'human_readable_size',

    # Client
    'UFTPClient',
    'CommandResult',
    'RemoteDirectoryCache',
    'parse_checksum',

    # Manager
    'TransferManager',
    'UploadState',
    'UploadSummary',
    'default_state_file'
]
