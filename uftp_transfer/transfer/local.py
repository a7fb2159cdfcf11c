"""
本地文件操作模块

提供上传前的本地文件检查和校验和计算
"""

import os
import hashlib


def hash_name(algorithm: str) -> str:
    """uftp 的算法名（MD5, SHA-256）转换为 hashlib 名称（md5, sha256）"""
    return algorithm.lower().replace('-', '')


def calculate_checksum(file_path: str, algorithm: str = 'md5', chunk_size: int = 8192) -> str:
    """
    计算文件校验和

    参数：
    ----------
    file_path : str
        文件路径
    algorithm : str
        哈希算法（md5, sha1, sha256等）
    chunk_size : int
        读取块大小（字节）

    返回：
    ----------
    str
        文件校验和（小写十六进制）
    """
    hash_obj = hashlib.new(hash_name(algorithm))

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hash_obj.update(chunk)

    return hash_obj.hexdigest()


def get_file_info(file_path: str) -> dict:
    """
    获取文件信息

    参数：
    ----------
    file_path : str
        文件路径

    返回：
    ----------
    dict
        文件信息字典
    """
    stat = os.stat(file_path)

    return {
        'path': file_path,
        'name': os.path.basename(file_path),
        'size': stat.st_size,
        'size_mb': stat.st_size / 1024 / 1024,
        'modified_time': stat.st_mtime,
    }


def human_readable_size(size: float, decimal_places: int = 1) -> str:
    """字节数转换为可读字符串"""
    for unit in ['B', 'KiB', 'MiB', 'GiB', 'TiB']:
        if size < 1024.0:
            break
        size /= 1024.0
    return f"{size:.{decimal_places}f} {unit}"
