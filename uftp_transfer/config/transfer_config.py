"""
传输配置模块

读取 YAML 传输配置（transfers 列表），生成 TransferGroup 对象
"""

import os
from typing import List

import yaml

from .errors import ConfigError

EXAMPLE_CONFIG = '''transfers:
  - name: "OIFS output"
    local_base: "/proj/shared_data/awicm3/TCo1279-DART-1950C/outdata/oifs"
    remote_dir: "/work/ab0246/from_aleph/TCo1279-DART-1950C/outdata/oifs"
    files:
      - "3h/2t/atm_reduced_3h_2t_3h_208901-208901.nc"
      - "3h/2t/atm_reduced_3h_2t_3h_208902-208902.nc"
'''


class TransferGroup:
    """
    传输块：共享同一对本地/远程根目录的一组文件

    files 中的路径都是相对路径
    """

    def __init__(self, name: str, local_base: str, remote_base: str, files: List[str]):
        self.name = name
        self.local_base = local_base
        self.remote_base = remote_base
        self.files = list(files)

    def __repr__(self):
        return (f"TransferGroup(name={self.name!r}, local_base={self.local_base!r}, "
                f"remote_base={self.remote_base!r}, files={len(self.files)})")

    def local_path(self, file_path: str) -> str:
        return os.path.join(self.local_base, file_path)

    def remote_path(self, file_path: str) -> str:
        return f"{self.remote_base.rstrip('/')}/{file_path}"

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'local_base': self.local_base,
            'remote_base': self.remote_base,
            'files': list(self.files),
        }

    @classmethod
    def from_dict(cls, block: dict, index: int = 1):
        """
        从配置块创建 TransferGroup

        两种命名方式都支持：local_base / local_dir，remote_dir / remote_base
        """
        if not isinstance(block, dict):
            raise ConfigError(f"传输块 {index} 格式错误（应为映射）")

        files = block.get('files') or []
        if not isinstance(files, list):
            raise ConfigError(f"传输块 {index} 的 files 应为列表")

        for file_path in files:
            if not isinstance(file_path, str) or os.path.isabs(file_path):
                raise ConfigError(f"传输块 {index} 中的文件路径必须是相对路径: {file_path!r}")

        return cls(
            name=block.get('name', f'Transfer {index}'),
            local_base=block.get('local_base', block.get('local_dir', '')),
            remote_base=block.get('remote_dir', block.get('remote_base', '')),
            files=files
        )


def load_transfer_config(config_file: str) -> List[TransferGroup]:
    """
    读取传输配置

    参数：
    ----------
    config_file : str
        YAML 配置文件路径

    返回：
    ----------
    list of TransferGroup
        按配置顺序排列的传输块
    """
    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"无法读取配置文件: {e}") from e

    if not isinstance(config, dict) or 'transfers' not in config:
        raise ConfigError("配置文件中没有 'transfers' 键")

    return [
        TransferGroup.from_dict(block, idx)
        for idx, block in enumerate(config['transfers'] or [], 1)
    ]
