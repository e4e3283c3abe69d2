"""YAML配置文件的读取与写回"""
import os
from typing import Any, Optional
import yaml


class ConfigError(Exception):
    """配置相关错误"""
    pass


class Config:
    """YAML配置文件

    顶层必须是映射，key支持点分隔的嵌套访问。指标计算器从 ``indicators``
    读取指标列表，也通过 ``set`` + ``save`` 把列表写回同一个文件，
    文件中的其他key保持不变。

    Example:
        config = Config("config/indicators.yaml")
        entries = config.get("indicators", [])
    """

    def __init__(self, config_path: str, create: bool = False):
        """打开配置文件

        Args:
            config_path: 配置文件路径
            create: 文件不存在时以空配置开始，首次 ``save`` 时创建文件

        Raises:
            ConfigError: 文件不存在（且未指定create）、YAML格式错误或顶层不是映射
        """
        self.config_path = config_path
        self._data: dict = {}

        if os.path.exists(config_path):
            self._data = self._load(config_path)
        elif not create:
            raise ConfigError(f"配置文件不存在: {config_path}")

    @staticmethod
    def _load(config_path: str) -> dict:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"配置文件格式错误 {config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"配置文件顶层必须是映射: {config_path}")
        return data

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """获取配置值，key支持点分隔，如 "defaults.rsi.period"

        路径中任何一层缺失或不是映射时返回默认值。
        """
        value = self._data
        for k in key.split("."):
            if not isinstance(value, dict) or k not in value:
                return default
            value = value[k]
        return value

    def set(self, key: str, value: Any) -> None:
        """设置配置值，缺失或非映射的中间层会被替换为空映射"""
        *parents, last = key.split(".")
        data = self._data
        for k in parents:
            if not isinstance(data.get(k), dict):
                data[k] = {}
            data = data[k]
        data[last] = value

    def save(self) -> None:
        """写回配置文件，必要时创建所在目录

        Raises:
            ConfigError: 写入失败
        """
        directory = os.path.dirname(self.config_path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    self._data,
                    f,
                    allow_unicode=True,
                    default_flow_style=False,
                    sort_keys=False,
                )
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"保存配置失败 {self.config_path}: {e}") from e
