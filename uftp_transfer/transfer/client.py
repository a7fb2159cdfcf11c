"""
UFTP 客户端模块

封装外部 uftp 命令行工具（mkdir, ls, cp, checksum），
所有调用都通过 UFTPClient.issue 这一个入口
"""

import re
import hashlib
import logging
import subprocess
from collections import namedtuple
from typing import Optional, Callable, List

from .local import hash_name

logger = logging.getLogger(__name__)

CommandResult = namedtuple('CommandResult', ['returncode', 'stdout'])

# uftp checksum 输出中的十六进制摘要（长度由算法决定，MD5 为 32 位）
CHECKSUM_PATTERN = r'\b[0-9a-fA-F]{%d}\b'


class UFTPClient:
    """
    uftp 命令行客户端

    外部进程的返回码就是唯一的错误通道，本类不会向调用方抛出异常。
    runner 默认为 subprocess.run，测试时可替换为假的传输工具。
    """

    def __init__(
        self,
        auth_server: str,
        user: str,
        key_file: str,
        threads: int = 4,
        streams: int = 8,
        executable: str = 'uftp',
        runner: Optional[Callable] = None
    ):
        """
        初始化 UFTP 客户端

        参数：
        ----------
        auth_server : str
            认证服务器地址（远程路径直接拼接在其后）
        user : str
            远程用户名（-u）
        key_file : str
            身份密钥文件（-i）
        threads : int
            并行 FTP 连接数（-t）
        streams : int
            每个连接的 TCP 流数（-n）
        executable : str
            uftp 可执行文件
        runner : Callable, optional
            执行外部命令的函数，签名同 subprocess.run
        """
        self.auth_server = auth_server
        self.user = user
        self.key_file = key_file
        self.threads = threads
        self.streams = streams
        self.executable = executable
        self.runner = runner or subprocess.run

    def __str__(self):
        return (f"{self.__class__.__name__}: user={self.user}, key={self.key_file}, "
                f"threads={self.threads}, streams={self.streams}")

    def url(self, remote_path: str) -> str:
        """远程路径转换为 UFTP URL"""
        return f"{self.auth_server}{remote_path}"

    def issue(self, subcommand: str, args: List[str], capture: bool = False) -> CommandResult:
        """
        执行一条 uftp 子命令

        参数：
        ----------
        subcommand : str
            子命令（mkdir, ls, cp, checksum）
        args : list of str
            子命令参数（认证参数会自动添加）
        capture : bool
            是否捕获标准输出；否则输出直接显示在终端

        返回：
        ----------
        CommandResult
            (returncode, stdout)
        """
        cmd = [self.executable, subcommand, '-u', self.user, '-i', self.key_file] + list(args)
        logger.debug("执行命令: %s", ' '.join(cmd))

        try:
            result = self.runner(
                cmd,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.DEVNULL,
                text=True
            )
        except OSError as e:
            logger.error("无法执行 %s: %s", self.executable, e)
            return CommandResult(127, '')

        stdout = result.stdout if capture and result.stdout else ''
        if result.returncode != 0:
            logger.debug("uftp %s 返回码 %d", subcommand, result.returncode)
        return CommandResult(result.returncode, stdout)

    def mkdir(self, remote_path: str) -> bool:
        return self.issue('mkdir', [self.url(remote_path)], capture=True).returncode == 0

    def ls(self, remote_path: str) -> bool:
        return self.issue('ls', [self.url(remote_path)], capture=True).returncode == 0

    def upload(self, local_path: str, remote_path: str) -> bool:
        """
        上传单个文件（uftp cp，进度由 uftp 自己输出）

        返回：
        ----------
        bool
            uftp 返回码是否为 0
        """
        args = [
            '-t', str(self.threads),
            '-n', str(self.streams),
            '-v',
            local_path,
            self.url(remote_path)
        ]
        return self.issue('cp', args).returncode == 0

    def checksum(self, remote_path: str, algorithm: str = 'MD5') -> Optional[str]:
        """
        获取远程文件校验和

        返回：
        ----------
        str or None
            小写的十六进制摘要；命令失败或输出中没有摘要时返回 None
        """
        result = self.issue('checksum', ['-a', algorithm, self.url(remote_path)], capture=True)
        if result.returncode != 0:
            return None
        return parse_checksum(result.stdout, algorithm)

    def create_remote_dir(self, remote_path: str) -> bool:
        """
        逐级创建远程目录，然后用 ls 确认

        每一级 mkdir 的失败都被忽略（目录可能已存在），
        是否成功只取决于最后的 ls。
        """
        current_path = ''
        for part in remote_path.strip('/').split('/'):
            current_path += '/' + part
            self.mkdir(current_path)

        return self.ls(remote_path)


def parse_checksum(output: str, algorithm: str = 'MD5') -> Optional[str]:
    """
    从 uftp checksum 输出中提取第一个摘要

    只接受与算法摘要长度一致的十六进制串（MD5 32 位，SHA-256 64 位）
    """
    digest_length = hashlib.new(hash_name(algorithm)).digest_size * 2
    pattern = re.compile(CHECKSUM_PATTERN % digest_length)
    for line in output.strip().split('\n'):
        match = pattern.search(line)
        if match:
            return match.group(0).lower()
    return None


class RemoteDirectoryCache:
    """
    远程目录缓存

    记录本次运行中已确认存在的目录，避免重复的 mkdir/ls 调用
    """

    def __init__(self, client: UFTPClient):
        self.client = client
        self.created = set()

    def ensure(self, remote_path: str) -> bool:
        """确保远程目录存在（已缓存的目录不再调用 uftp）"""
        remote_path = remote_path.rstrip('/') or '/'
        if remote_path in self.created:
            return True

        if self.client.create_remote_dir(remote_path):
            self.created.add(remote_path)
            return True
        return False

    def __contains__(self, remote_path: str) -> bool:
        return remote_path.rstrip('/') in self.created

    def __len__(self):
        return len(self.created)
