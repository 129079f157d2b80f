"""
POP3 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .protocols.constants import DEFAULT_PORT, DEFAULT_SSL_PORT

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_TRUE_VALUES = ("true", "1", "t", "yes", "y", "on")
_FALSE_VALUES = ("false", "0", "f", "no", "n", "off", "")


@dataclass(frozen=True)
class Pop3Config:
    """Pop3Core 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: 服务器地址。
        username: 账户名。
        password: 口令。
        port: 服务器端口 (明文通常为 110，TLS 通常为 995)。
        use_ssl: 是否使用 TLS。
        timeout: 传输层单次 I/O 超时 (秒)，None 表示不限。
        unstuff_dots: 多行响应是否去掉转义点。
    """

    host: str
    username: str
    password: str
    port: int = DEFAULT_PORT
    use_ssl: bool = False
    timeout: float | None = DEFAULT_TIMEOUT
    unstuff_dots: bool = False

    def __repr__(self) -> str:
        """
        覆盖默认的 repr，隐藏密码字段，防止日志泄露敏感信息。
        """
        return (
            f"<{self.__class__.__name__} "
            f"server={self.host}:{self.port}, "
            f"username='{self.username}', "
            f"password='******', "
            f"ssl={self.use_ssl}>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> Pop3Config:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        Pop3Config: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _req(key: str) -> str:
            """获取必要字段，缺失或为空则报错"""
            val = raw_data.get(key)
            if val is None or str(val) == "":
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return str(val)

        def _to_bool(key: str, default: bool) -> bool:
            """兼容 TOML 布尔值与环境变量字符串"""
            val = raw_data.get(key, default)
            if isinstance(val, bool):
                return val
            text = str(val).strip().lower()
            if text in _TRUE_VALUES:
                return True
            if text in _FALSE_VALUES:
                return False
            raise ConfigError(f"布尔值无效 '{key}': {val}")

        def _to_port(default: int) -> int:
            val = raw_data.get("port")
            if val is None or str(val) == "":
                return default
            try:
                port = int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"端口格式无效: {val}")
            if not 0 < port < 65536:
                raise ConfigError(f"端口超出范围: {port}")
            return port

        def _to_timeout() -> float | None:
            """0 或空字符串表示不限超时"""
            val = raw_data.get("timeout", DEFAULT_TIMEOUT)
            if val is None or str(val) == "":
                return None
            try:
                timeout = float(val)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效: {val}")
            if timeout < 0:
                raise ConfigError(f"超时不能为负数: {val}")
            return timeout or None

        use_ssl = _to_bool("use_ssl", False)

        # --- 构建对象 ---
        return Pop3Config(
            host=_req("host"),
            username=_req("username"),
            password=_req("password"),
            port=_to_port(DEFAULT_SSL_PORT if use_ssl else DEFAULT_PORT),
            use_ssl=use_ssl,
            timeout=_to_timeout(),
            unstuff_dots=_to_bool("unstuff_dots", False),
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> Pop3Config:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [pop3]: 单账户配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        Pop3Config: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "pop3" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [pop3] 节，忽略 profile='{profile}'。")
        raw_config = data["pop3"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env() -> Pop3Config:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    读取所有以 `POP3_` 开头的已知环境变量，并映射到配置字段。
    例如: `POP3_USERNAME` -> `username`。

    Returns:
        Pop3Config: 配置对象。

    Raises:
        ConfigError: 未检测到任何相关环境变量。
    """
    # 字段映射表 (Config Field -> Env Suffix)
    env_map = {
        "host": "HOST",
        "username": "USERNAME",
        "password": "PASSWORD",
        "port": "PORT",
        "use_ssl": "USE_SSL",
        "timeout": "TIMEOUT",
        "unstuff_dots": "UNSTUFF_DOTS",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"POP3_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 POP3_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
