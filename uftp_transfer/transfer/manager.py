"""
文件上传管理器

提供断点续传（已完成文件跳过）、自动重试和 MD5 校验功能
"""

import os
import json
import hashlib
import time
import logging
from datetime import datetime
from typing import Optional, Dict, List, Tuple

from .client import UFTPClient, RemoteDirectoryCache
from .local import calculate_checksum, get_file_info, hash_name, human_readable_size

logger = logging.getLogger(__name__)


def default_state_file(config_file: str) -> str:
    """每个配置文件对应一个状态文件: <配置目录>/.<配置名>.upload_state.json"""
    config_dir = os.path.dirname(os.path.abspath(config_file))
    stem = os.path.splitext(os.path.basename(config_file))[0]
    return os.path.join(config_dir, f".{stem}.upload_state.json")


class UploadState:
    """
    上传状态记录

    远程路径 -> 完成时间。每次更新后立即写回磁盘。
    """

    def __init__(self, state_file: str):
        self.state_file = state_file
        self.state = self._load_state()

    def _load_state(self) -> Dict[str, str]:
        """加载上传状态"""
        if not os.path.exists(self.state_file):
            return {}
        try:
            with open(self.state_file, 'r') as f:
                state = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("状态文件无法读取，按空状态处理: %s (%s)", self.state_file, e)
            return {}
        if not isinstance(state, dict):
            logger.warning("状态文件格式错误，按空状态处理: %s", self.state_file)
            return {}
        return {str(k): str(v) for k, v in state.items()}

    def _save_state(self):
        """保存上传状态"""
        os.makedirs(os.path.dirname(self.state_file) or '.', exist_ok=True)
        tmp_file = f"{self.state_file}.tmp"
        with open(tmp_file, 'w') as f:
            json.dump(self.state, f, indent=2)
        os.replace(tmp_file, self.state_file)

    def is_completed(self, remote_path: str) -> bool:
        return remote_path in self.state

    def mark_completed(self, remote_path: str):
        """记录上传完成并立即保存"""
        self.state[remote_path] = datetime.now().isoformat()
        self._save_state()

    def remove(self, remote_path: str) -> bool:
        """删除一条记录并保存，返回记录是否存在"""
        if remote_path not in self.state:
            return False
        del self.state[remote_path]
        self._save_state()
        return True

    def last_completed(self) -> Optional[Tuple[str, str]]:
        """最近完成的 (远程路径, 时间)"""
        if not self.state:
            return None
        return max(self.state.items(), key=lambda item: item[1])

    def reset(self):
        """清空所有记录（下次运行全部重新上传）"""
        self.state = {}
        if os.path.exists(self.state_file):
            os.remove(self.state_file)
        print(f"✅ 已重置上传状态: {self.state_file}")

    def print_status(self):
        """打印当前上传状态"""
        print("\n" + "=" * 80)
        print("上传状态")
        print("=" * 80)
        print(f"状态文件: {self.state_file}")
        print(f"已完成文件: {len(self.state)}")
        last = self.last_completed()
        if last:
            print(f"最近完成: {last[0]}")
            print(f"   完成时间: {last[1][:19]}")
        print("=" * 80 + "\n")

    def __len__(self):
        return len(self.state)

    def __contains__(self, remote_path: str) -> bool:
        return self.is_completed(remote_path)


class UploadSummary:
    """一次运行的统计结果"""

    def __init__(self):
        self.total = 0
        self.successful = 0
        self.failed = 0
        self.skipped = 0
        self.verified = 0
        self.verification_failed = 0
        self.unverified = 0
        self.failed_groups = 0

    @property
    def has_failures(self) -> bool:
        return self.failed > 0 or self.failed_groups > 0 or self.verification_failed > 0

    @property
    def exit_code(self) -> int:
        return 1 if self.has_failures else 0

    def print_summary(self, verify: bool = False):
        print("\n" + "=" * 80)
        print("上传总结")
        print("=" * 80)
        print(f"文件总数:       {self.total}")
        print(f"上传成功:       {self.successful}")
        print(f"上传失败:       {self.failed}")
        print(f"已跳过(已完成): {self.skipped}")
        if self.failed_groups:
            print(f"跳过的传输块:   {self.failed_groups}")
        if verify:
            print(f"校验通过:       {self.verified}")
            print(f"校验失败:       {self.verification_failed}")
            print(f"未校验:         {self.unverified}")
        print("=" * 80 + "\n")


class TransferManager:
    """
    文件上传管理器（支持断点续传）

    功能：
    - 逐个传输块创建远程目录
    - 跳过状态记录中已完成的文件
    - 失败自动重试（最多 max_retries 次）
    - 可选的 MD5 校验（校验不一致按失败重传）
    - 运行中出现失败时，最后完成的文件从状态中移除，下次重新上传
    """

    def __init__(
        self,
        client: UFTPClient,
        state: Optional[UploadState] = None,
        verify: bool = False,
        max_retries: int = 3,
        retry_delay: float = 0,
        checksum_algorithm: str = 'MD5'
    ):
        """
        初始化上传管理器

        参数：
        ----------
        client : UFTPClient
            uftp 客户端
        state : UploadState, optional
            断点续传状态；为 None 时每次运行全部重新上传
        verify : bool
            上传后是否比对本地和远程校验和
        max_retries : int
            每个文件的最大尝试次数
        retry_delay : float
            重试延迟（秒）
        checksum_algorithm : str
            校验算法
        """
        if max_retries < 1:
            raise ValueError(f"max_retries 必须 >= 1: {max_retries}")
        if hash_name(checksum_algorithm) not in hashlib.algorithms_available:
            raise ValueError(f"不支持的校验算法: {checksum_algorithm}")

        self.client = client
        self.state = state
        self.verify = verify
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.checksum_algorithm = checksum_algorithm

        self.directories = RemoteDirectoryCache(client)
        self.summary = UploadSummary()
        self.last_completed: Optional[str] = None

    def run(self, groups: list) -> UploadSummary:
        """
        依次处理所有传输块

        参数：
        ----------
        groups : list of TransferGroup
            传输块列表

        返回：
        ----------
        UploadSummary
            统计结果
        """
        for group in groups:
            self.upload_group(group)

        if self.summary.has_failures:
            self._invalidate_last_completed()

        return self.summary

    def upload_group(self, group):
        """上传一个传输块中的所有文件"""
        print(f"\n=== {group.name} ===")
        print(f"本地目录: {group.local_base}")
        print(f"远程目录: {group.remote_base}")
        print(f"文件数:   {len(group.files)}")

        print(f"  创建远程目录: {group.remote_base}")
        if not self.directories.ensure(group.remote_base):
            print(f"  ❌ 无法创建或确认远程目录，跳过该传输块")
            print(f"  请检查权限: {group.remote_base}")
            logger.error("远程目录不可用，跳过传输块 %s: %s", group.name, group.remote_base)
            self.summary.failed_groups += 1
            return
        print(f"  ✅ 远程目录就绪")

        for file_path in group.files:
            self.summary.total += 1
            local_full = group.local_path(file_path)
            remote_full = group.remote_path(file_path)

            print(f"\n  [{self.summary.total}] {file_path}")

            if self.state is not None and self.state.is_completed(remote_full):
                print(f"    ⏭️  已上传，跳过")
                self.summary.skipped += 1
                continue

            if not os.path.isfile(local_full):
                print(f"    ❌ 本地文件不存在: {local_full}")
                logger.error("本地文件不存在: %s", local_full)
                self.summary.failed += 1
                continue

            remote_dir = os.path.dirname(remote_full)
            if remote_dir:
                self.directories.ensure(remote_dir)

            self.upload_file(local_full, remote_full)

    def upload_file(self, local_path: str, remote_path: str) -> str:
        """
        上传单个文件（带重试）

        参数：
        ----------
        local_path : str
            本地文件路径
        remote_path : str
            远程文件路径

        返回：
        ----------
        str
            'verified', 'unverified', 'mismatch', 'done' 或 'failed'
        """
        local_checksum = None
        try:
            if self.verify:
                print(f"    计算本地校验和...")
                local_checksum = calculate_checksum(local_path, algorithm=self.checksum_algorithm)
                print(f"    本地 {self.checksum_algorithm}:  {local_checksum}")

            size = human_readable_size(get_file_info(local_path)['size'])
        except OSError as e:
            print(f"    ❌ 无法读取本地文件: {e}")
            logger.error("无法读取本地文件 %s: %s", local_path, e)
            self.summary.failed += 1
            return 'failed'

        status = 'failed'

        for attempt in range(1, self.max_retries + 1):
            if attempt > 1:
                print(f"    🔄 重试 {attempt}/{self.max_retries}")
                if self.retry_delay:
                    time.sleep(self.retry_delay)

            start_time = time.time()
            if not self.client.upload(local_path, remote_path):
                status = 'failed'
                print(f"    ❌ 上传失败 (尝试 {attempt}/{self.max_retries})")
                logger.warning("上传失败 (%d/%d): %s", attempt, self.max_retries, remote_path)
                continue

            print(f"    ✅ 已上传 ({size}, {time.time() - start_time:.1f} s)")

            if not self.verify:
                status = 'done'
                break

            status = self._verify(remote_path, local_checksum, attempt)
            if status != 'mismatch':
                break

        if status == 'failed':
            self.summary.failed += 1
            logger.error("上传失败（已尝试 %d 次）: %s", self.max_retries, remote_path)
            return status

        self.summary.successful += 1
        if status == 'verified':
            self.summary.verified += 1
        elif status == 'unverified':
            self.summary.unverified += 1
        elif status == 'mismatch':
            # 不写入状态，下次运行重新上传
            self.summary.verification_failed += 1
            logger.error("校验和不一致（已尝试 %d 次）: %s", self.max_retries, remote_path)
            return status

        self._record_completed(remote_path)
        logger.info("上传完成 (%s): %s", status, remote_path)
        return status

    def _verify(self, remote_path: str, local_checksum: str, attempt: int) -> str:
        """比对远程和本地校验和"""
        print(f"    校验上传结果...")
        remote_checksum = self.client.checksum(remote_path, self.checksum_algorithm)

        if not remote_checksum:
            print(f"    ⚠️  无法获取远程校验和（跳过校验）")
            return 'unverified'

        print(f"    远程 {self.checksum_algorithm}:  {remote_checksum}")
        if remote_checksum == local_checksum:
            print(f"    ✅ 校验通过")
            return 'verified'

        print(f"    ❌ 校验和不一致！(尝试 {attempt}/{self.max_retries})")
        if attempt < self.max_retries:
            print(f"    重新上传...")
        return 'mismatch'

    def _record_completed(self, remote_path: str):
        self.last_completed = remote_path
        if self.state is not None:
            self.state.mark_completed(remote_path)

    def _invalidate_last_completed(self):
        """
        运行中出现失败时，最后完成的文件可能已损坏：
        从状态中移除，下次运行重新上传
        """
        if self.state is None or self.last_completed is None:
            return
        if self.state.remove(self.last_completed):
            print(f"⚠️  出现失败，最后完成的文件将在下次运行时重新上传: {self.last_completed}")
            logger.warning("从上传状态中移除最后完成的文件: %s", self.last_completed)
