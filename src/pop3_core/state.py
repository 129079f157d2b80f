"""
POP3 核心库 - 状态模块

负责定义和存储会话的易变状态。
本模块不包含业务逻辑，仅作为数据容器供 Core 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class SessionStatus(Enum):
    """会话的生命周期状态枚举。

    状态流转示意:
    DISCONNECTED --connect(USER/PASS 成功)--> AUTHENTICATED
         ^                                         |
         +---------------disconnect----------------+
    """

    DISCONNECTED = auto()
    """初始与终止状态。未连接，或认证尚未完成。"""

    AUTHENTICATED = auto()
    """USER/PASS 均已成功，可以执行 LIST / TOP / RETR / DELE。"""


@dataclass
class SessionState:
    """存储 POP3 会话的易变状态数据。

    该对象是非持久化的。每个客户端实例只持有一个。

    Attributes:
        status: 当前会话状态。
        host: 最近一次 connect 的目标主机。
        greeting: 服务器欢迎行 (原始文本，含行终止符)。
        last_error: 最近一次发生的错误信息描述，用于 UI 显示。
    """

    status: SessionStatus = SessionStatus.DISCONNECTED
    host: str = ""
    greeting: str = ""
    last_error: str = ""

    @property
    def is_connected(self) -> bool:
        """判断当前是否处于已认证状态。

        Returns:
            bool: 如果已认证返回 True。
        """
        return self.status is SessionStatus.AUTHENTICATED
