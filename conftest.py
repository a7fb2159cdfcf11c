"""
测试公共组件

FakeUFTP 代替 uftp 可执行文件，记录所有调用
"""

from types import SimpleNamespace

import pytest

from uftp_transfer.config import TransferGroup
from uftp_transfer.transfer import UFTPClient

AUTH = "https://uftp.example.org:9000/rest/auth/HPC:"


class FakeUFTP:
    """
    假的 uftp 命令

    cp_results: 远程路径 -> 依次返回的返回码列表（用完后返回 0）
    checksums:  远程路径 -> checksum 命令的输出
    bad_dirs:   ls 返回失败的远程目录
    """

    def __init__(self, cp_results=None, checksums=None, bad_dirs=None):
        self.cp_results = {k: list(v) for k, v in (cp_results or {}).items()}
        self.checksums = checksums or {}
        self.bad_dirs = set(bad_dirs or [])
        self.calls = []

    def __call__(self, cmd, stdout=None, stderr=None, text=True):
        self.calls.append(cmd)
        subcommand = cmd[1]
        remote_path = cmd[-1][len(AUTH):]

        if subcommand == 'cp':
            codes = self.cp_results.get(remote_path)
            code = codes.pop(0) if codes else 0
            return SimpleNamespace(returncode=code, stdout=None)

        if subcommand == 'checksum':
            output = self.checksums.get(remote_path)
            if output is None:
                return SimpleNamespace(returncode=1, stdout='')
            return SimpleNamespace(returncode=0, stdout=output)

        if subcommand == 'ls' and remote_path in self.bad_dirs:
            return SimpleNamespace(returncode=2, stdout='')

        return SimpleNamespace(returncode=0, stdout='')

    def commands(self, subcommand):
        return [c for c in self.calls if c[1] == subcommand]

    def uploads(self):
        """cp 调用的远程路径"""
        return [c[-1][len(AUTH):] for c in self.commands('cp')]


@pytest.fixture
def fake_uftp():
    return FakeUFTP()


@pytest.fixture
def make_client():
    def _make(runner):
        return UFTPClient(AUTH, 'b000000', '/home/user/.uftp/key', threads=2, streams=4, runner=runner)
    return _make


@pytest.fixture
def local_files(tmp_path):
    """在 tmp_path/local 下创建文件，返回 (local_base, 创建函数)"""
    local_base = tmp_path / 'local'
    local_base.mkdir()

    def _create(name, content=b''):
        path = local_base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)

    return str(local_base), _create


@pytest.fixture
def make_group():
    def _make(local_base, files, name='OIFS 3h - 2t', remote_base='/work/ab0995/case/outdata/oifs'):
        return TransferGroup(name, local_base, remote_base, files)
    return _make
