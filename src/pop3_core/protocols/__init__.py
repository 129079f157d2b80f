# src/pop3_core/protocols/__init__.py
"""
POP3 协议层 (Protocol Layer)

本包负责命令行的纯粹构建 (Build) 与响应解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何状态管理 (State)。
- 不依赖于 core 或 network 层。
"""

from . import constants
from .commands import (
    build_command,
    describe_command,
    is_positive_response,
    parse_list_entry,
    unstuff_line,
)

# 公共 API
__all__ = [
    "constants",
    "build_command",
    "describe_command",
    "is_positive_response",
    "parse_list_entry",
    "unstuff_line",
]
