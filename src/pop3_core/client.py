# File: src/pop3_core/client.py
"""
POP3 阻塞客户端 (Blocking Facade)

在私有的 asyncio.Runner 上运行 Pop3Core 的同一套协程，
每个方法在调用线程上执行到底，语义与异步版完全一致。
默认使用阻塞 socket 传输 (SocketTransport)。
"""

import asyncio
import logging
from collections.abc import Iterable

from .config import Pop3Config
from .core import Pop3Core, StatusCallback
from .models import Mailbox, MessageRecord
from .network import BaseTransport, BlockingTransport, SocketTransport
from .state import SessionState

logger = logging.getLogger(__name__)


class Pop3Client:
    """POP3 会话客户端 (Blocking)。

    不是线程安全的：一个实例只应在一个线程中使用。
    """

    def __init__(
        self,
        transport: BaseTransport | BlockingTransport | None = None,
        status_callback: StatusCallback | None = None,
        unstuff_dots: bool = False,
    ) -> None:
        """初始化阻塞客户端。

        Args:
            transport: 传输端口。None 时使用 SocketTransport。
            status_callback: 状态回调。
            unstuff_dots: 多行响应是否去掉转义点。

        Raises:
            ArgumentError: transport 不是受支持的传输端口。
        """
        self._core = Pop3Core(
            transport if transport is not None else SocketTransport(),
            status_callback=status_callback,
            unstuff_dots=unstuff_dots,
        )
        self._runner: asyncio.Runner | None = asyncio.Runner()

    @classmethod
    def from_config(
        cls,
        config: Pop3Config,
        status_callback: StatusCallback | None = None,
    ) -> "Pop3Client":
        """按配置创建客户端 (SocketTransport 使用配置中的超时)。"""
        return cls(
            SocketTransport(timeout=config.timeout),
            status_callback=status_callback,
            unstuff_dots=config.unstuff_dots,
        )

    @property
    def core(self) -> Pop3Core:
        return self._core

    @property
    def state(self) -> SessionState:
        return self._core.state

    @property
    def is_connected(self) -> bool:
        return self._core.is_connected

    def _run(self, coro):
        if self._runner is None:
            coro.close()
            raise RuntimeError("客户端已关闭")
        return self._runner.run(coro)

    def connect(
        self,
        host: str,
        username: str,
        password: str,
        port: int | None = None,
        use_ssl: bool = False,
    ) -> None:
        self._run(self._core.connect(host, username, password, port, use_ssl))

    def connect_with(self, config: Pop3Config) -> None:
        self._run(self._core.connect_with(config))

    def disconnect(self) -> None:
        self._run(self._core.disconnect())

    def list(self) -> Mailbox:
        return self._run(self._core.list())

    def retrieve_header(self, message: MessageRecord) -> None:
        self._run(self._core.retrieve_header(message))

    def retrieve_headers(self, messages: Iterable[MessageRecord]) -> None:
        self._run(self._core.retrieve_headers(messages))

    def retrieve(self, message: MessageRecord) -> None:
        self._run(self._core.retrieve(message))

    def retrieve_all(self, messages: Iterable[MessageRecord]) -> None:
        self._run(self._core.retrieve_all(messages))

    def delete(self, message: MessageRecord) -> None:
        self._run(self._core.delete(message))

    def list_and_retrieve_header(self) -> Mailbox:
        return self._run(self._core.list_and_retrieve_header())

    def list_and_retrieve(self) -> Mailbox:
        return self._run(self._core.list_and_retrieve())

    def close(self) -> None:
        """断开会话并释放事件循环 (可重复调用)。"""
        runner = self._runner
        if runner is None:
            return
        try:
            runner.run(self._core.aclose())
        finally:
            self._runner = None
            runner.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
