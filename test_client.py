#!/usr/bin/env python3
"""
UFTP 客户端测试
"""

import subprocess
from types import SimpleNamespace

from conftest import AUTH, FakeUFTP
from uftp_transfer.transfer import RemoteDirectoryCache, parse_checksum


def test_cp_command_line(make_client):
    """cp 命令包含认证、线程和流参数"""
    fake = FakeUFTP()
    client = make_client(fake)

    assert client.upload('/scratch/a.nc', '/work/x/a.nc')

    assert fake.calls[0] == [
        'uftp', 'cp', '-u', 'b000000', '-i', '/home/user/.uftp/key',
        '-t', '2', '-n', '4', '-v', '/scratch/a.nc', f'{AUTH}/work/x/a.nc'
    ]


def test_checksum_command_and_parsing(make_client):
    fake = FakeUFTP(checksums={'/work/x/a.nc': "MD5 checksum: D41D8CD98F00B204E9800998ECF8427E /work/x/a.nc\n"})
    client = make_client(fake)

    assert client.checksum('/work/x/a.nc') == "d41d8cd98f00b204e9800998ecf8427e"
    assert fake.calls[0][1] == 'checksum'
    assert fake.calls[0][6:8] == ['-a', 'MD5']


def test_checksum_failure_returns_none(make_client):
    client = make_client(FakeUFTP())
    assert client.checksum('/work/x/a.nc') is None


def test_parse_checksum():
    assert parse_checksum("no digest here\n") is None
    assert parse_checksum("") is None
    assert parse_checksum("\n" + "a" * 32) == "a" * 32
    # 33 位不是合法的 MD5
    assert parse_checksum("b" * 33) is None


def test_parse_checksum_digest_length_follows_algorithm():
    sha256 = "C" * 64
    assert parse_checksum(f"SHA-256 checksum: {sha256} /work/x/a.nc", 'SHA-256') == "c" * 64
    assert parse_checksum(sha256, 'sha256') == "c" * 64
    # MD5 长度的摘要不是 SHA-256 结果，反之亦然
    assert parse_checksum("a" * 32, 'SHA-256') is None
    assert parse_checksum(sha256, 'MD5') is None


def test_checksum_uses_algorithm_digest_length(make_client):
    fake = FakeUFTP(checksums={'/work/x/a.nc': "SHA-1 checksum: " + "9" * 40 + "\n"})
    client = make_client(fake)

    assert client.checksum('/work/x/a.nc', 'SHA-1') == "9" * 40
    assert client.checksum('/work/x/a.nc', 'MD5') is None


def test_create_remote_dir_walks_segments(make_client):
    """逐级 mkdir，最后用 ls 确认"""
    fake = FakeUFTP()
    client = make_client(fake)

    assert client.create_remote_dir('/work/ab0995/case')

    mkdirs = [c[-1] for c in fake.commands('mkdir')]
    assert mkdirs == [f'{AUTH}/work', f'{AUTH}/work/ab0995', f'{AUTH}/work/ab0995/case']
    assert [c[-1] for c in fake.commands('ls')] == [f'{AUTH}/work/ab0995/case']


def test_create_remote_dir_ignores_mkdir_errors(make_client):
    """mkdir 失败（目录已存在）不影响结果"""
    def runner(cmd, **kwargs):
        return SimpleNamespace(returncode=1 if cmd[1] == 'mkdir' else 0, stdout='')

    assert make_client(runner).create_remote_dir('/work/a')


def test_directory_cache(make_client):
    fake = FakeUFTP()
    cache = RemoteDirectoryCache(make_client(fake))

    assert cache.ensure('/work/a/')
    assert cache.ensure('/work/a')
    assert '/work/a' in cache
    assert len(fake.commands('ls')) == 1


def test_directory_cache_does_not_remember_failures(make_client):
    fake = FakeUFTP(bad_dirs=['/work/a'])
    cache = RemoteDirectoryCache(make_client(fake))

    assert not cache.ensure('/work/a')
    assert not cache.ensure('/work/a')
    assert len(fake.commands('ls')) == 2


def test_missing_executable(make_client):
    """uftp 不存在时返回 127，不抛出异常"""
    def runner(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    client = make_client(runner)
    assert client.issue('ls', ['x']).returncode == 127
    assert not client.upload('/a', '/b')


def test_capture_flag(make_client):
    seen = {}

    def runner(cmd, stdout=None, stderr=None, text=True):
        seen[cmd[1]] = stdout
        return SimpleNamespace(returncode=0, stdout=None)

    client = make_client(runner)
    client.upload('/a', '/b')
    client.ls('/b')

    assert seen['cp'] is None
    assert seen['ls'] == subprocess.PIPE
