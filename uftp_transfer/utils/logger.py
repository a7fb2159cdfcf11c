"""
日志模块

为整个包配置统一的日志输出
"""

import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(
    log_file: Optional[str] = None,
    level: int = logging.WARNING,
    name: str = 'uftp_transfer'
) -> logging.Logger:
    """
    配置日志系统

    参数：
    ----------
    log_file : str, optional
        日志文件路径（如果为 None，则输出到控制台）
    level : int
        日志级别
    name : str
        logger 名称（子模块的 logger 会继承该配置）

    返回：
    ----------
    logging.Logger
        已配置的 logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 避免重复添加handler
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    return logger
