# src/pop3_core/__init__.py
"""
POP3-Core v1.0.0
同步/异步一体的 POP3 协议事务引擎。
"""

# 暴露阻塞客户端与异步引擎
from .client import Pop3Client

# 暴露核心配置
from .config import (
    Pop3Config,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)
from .core import Pop3Core

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    ArgumentError,
    ConfigError,
    NetworkError,
    Pop3Error,
    ProtocolError,
    StateError,
)
from .models import Mailbox, MessageRecord
from .network import (
    BaseTransport,
    BlockingTransport,
    BlockingTransportAdapter,
    SocketTransport,
    TcpTransport,
)
from .state import SessionState, SessionStatus

__version__ = "1.0.0"

__all__ = [
    "Pop3Core",
    "Pop3Client",
    "Pop3Config",
    "SessionState",
    "SessionStatus",
    "MessageRecord",
    "Mailbox",
    "BaseTransport",
    "BlockingTransport",
    "BlockingTransportAdapter",
    "TcpTransport",
    "SocketTransport",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "Pop3Error",
    "ConfigError",
    "NetworkError",
    "ProtocolError",
    "StateError",
    "ArgumentError",
]
