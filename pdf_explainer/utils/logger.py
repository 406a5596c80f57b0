"""日志配置模块."""

import sys
from typing import Optional

from loguru import logger

from pdf_explainer.config.settings import settings


def setup_logger(level: Optional[str] = None) -> None:
    """配置日志系统.

    控制台输出讲解流程日志；配置了 LOG_FILE 时另写一份按大小轮转的日志到输出目录。

    Args:
        level: 日志级别，为None时使用 LOG_LEVEL 配置（命令行 --log-level 会覆盖）
    """
    level = (level or settings.log.level).upper()

    # 清除已有的处理器，重复调用时不会重复输出
    logger.remove()

    logger.add(sys.stderr, format=settings.log.format, level=level, colorize=True)

    if settings.log.log_file:
        logger.add(
            settings.output_dir / settings.log.log_file,
            format=settings.log.format,
            level=level,
            rotation=settings.log.rotation,
            retention=settings.log.retention,
            encoding="utf-8",
        )

    logger.debug(f"日志级别: {level}，日志文件: {settings.log.log_file or '未配置'}")
