#!/usr/bin/env python3
"""
核心模块

导出配置类和日志初始化。
"""
from .config import (
    CsvConfig,
    LogConfig,
    Config,
    setup_logging,
    get_config,
    set_config,
    reload_config,
)

__all__ = [
    "CsvConfig",
    "LogConfig",
    "Config",
    "setup_logging",
    "get_config",
    "set_config",
    "reload_config",
]
