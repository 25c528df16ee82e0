#!/usr/bin/env python3
"""
配置管理

使用 YAML 配置文件，支持环境变量覆盖。
分隔符、编码和日志参数都集中在这里。
"""
import os
import logging
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path


@dataclass
class CsvConfig:
    """读写配置"""
    separator: str = "\t"
    read_encoding: str = "utf-8-sig"  # 兼容带 BOM 的文件
    write_encoding: str = "utf-8"


@dataclass
class LogConfig:
    """日志配置"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """总配置"""
    csv: CsvConfig = field(default_factory=CsvConfig)
    log: LogConfig = field(default_factory=LogConfig)

    # 环境变量覆盖
    debug: bool = False

    @classmethod
    def load(cls, path: str = "configs/default.yaml") -> 'Config':
        """从 YAML 文件加载配置

        Args:
            path: 配置文件路径

        Returns:
            Config 对象
        """
        if not os.path.exists(path):
            return cls.from_dict({})

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """从字典创建"""
        csv_data = dict(data.get("csv", {}))
        log_data = data.get("log", {})

        separator = os.getenv("ADDRESS_CSV_SEPARATOR")
        if separator:
            csv_data["separator"] = separator

        return cls(
            csv=CsvConfig(**csv_data),
            log=LogConfig(**log_data),
            debug=os.getenv("ADDRESS_CSV_DEBUG", "").lower() == "1",
        )

    def save(self, path: str):
        """保存配置到 YAML

        Args:
            path: 保存路径
        """
        data = {
            "csv": self.csv.__dict__,
            "log": self.log.__dict__,
        }
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, allow_unicode=True, default_flow_style=False)


def setup_logging(log_config: Optional[LogConfig] = None, debug: bool = False):
    """按配置初始化根日志

    Args:
        log_config: 日志配置，默认取全局配置
        debug: 为 True 时强制 DEBUG 级别
    """
    if log_config is None:
        log_config = get_config().log

    level = logging.DEBUG if debug else getattr(logging, log_config.level.upper(), logging.INFO)
    kwargs: Dict[str, Any] = {"level": level, "format": log_config.format}
    if log_config.file:
        Path(log_config.file).parent.mkdir(parents=True, exist_ok=True)
        kwargs["filename"] = log_config.file
    logging.basicConfig(**kwargs)


# 全局配置实例
_config: Optional[Config] = None


def get_config() -> Config:
    """获取全局配置"""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def set_config(config: Config):
    """设置全局配置"""
    global _config
    _config = config


def reload_config(path: str = "configs/default.yaml"):
    """重新加载配置"""
    global _config
    _config = Config.load(path)
    return _config
