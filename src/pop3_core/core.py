# File: src/pop3_core/core.py
"""
POP3 核心引擎 (Core Engine)

职责：
1. 资源组装：State + Transport + TransactionEngine。
2. 状态机：DISCONNECTED <-> AUTHENTICATED，所有邮箱操作都先校验状态。
3. 邮箱操作：LIST / TOP / RETR / DELE 及其批量、组合形式。

本类是唯一的实现。挂起点只有传输层的 open/read_line/write_line/close，
阻塞模式 (Pop3Client) 驱动的是同一套协程。
"""

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from .config import Pop3Config
from .engine import TransactionEngine
from .exceptions import ArgumentError, ProtocolError, StateError
from .models import Mailbox, MessageRecord
from .network import BaseTransport, BlockingTransport, TcpTransport, as_async_transport
from .protocols import is_positive_response, parse_list_entry
from .protocols.constants import (
    DEFAULT_PORT,
    DEFAULT_SSL_PORT,
    TOP_HEADER_ONLY_LINES,
    Command,
)
from .state import SessionState, SessionStatus

logger = logging.getLogger(__name__)

# 回调函数类型别名：(新状态, 描述信息)
StatusCallback = Callable[[SessionStatus, str], Any]


class Pop3Core:
    """POP3 会话核心引擎 (Async)。

    一个实例对应一个会话，独占一个传输端口，不可重入。
    """

    def __init__(
        self,
        transport: BaseTransport | BlockingTransport | None = None,
        status_callback: StatusCallback | None = None,
        unstuff_dots: bool = False,
    ) -> None:
        """初始化核心引擎。

        Args:
            transport: 传输端口。None 时使用默认的 TcpTransport；
                阻塞端口会被包装为异步契约。
            status_callback: 初始状态回调。也可以之后使用 add_listener。
            unstuff_dots: 多行响应是否去掉转义点。默认保留服务器原文。

        Raises:
            ArgumentError: transport 不是受支持的传输端口。
        """
        try:
            self._transport = as_async_transport(
                transport if transport is not None else TcpTransport()
            )
        except TypeError as e:
            raise ArgumentError(f"transport 参数无效: {e}") from e

        self._state = SessionState()
        self._engine = TransactionEngine(self._transport, unstuff_dots=unstuff_dots)

        self._listeners: list[StatusCallback] = []
        self._listener_tasks: set[asyncio.Task] = set()
        if status_callback:
            self.add_listener(status_callback)

    @classmethod
    def from_config(
        cls,
        config: Pop3Config,
        status_callback: StatusCallback | None = None,
    ) -> "Pop3Core":
        """按配置创建引擎 (TcpTransport 使用配置中的超时)。"""
        return cls(
            TcpTransport(timeout=config.timeout),
            status_callback=status_callback,
            unstuff_dots=config.unstuff_dots,
        )

    @property
    def state(self) -> SessionState:
        """获取当前会话状态的只读副本。"""
        return replace(self._state)

    @property
    def is_connected(self) -> bool:
        return self._state.is_connected

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    def add_listener(self, callback: StatusCallback) -> None:
        """注册状态变更监听器。"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StatusCallback) -> None:
        """移除状态变更监听器。"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # 会话状态机
    # ------------------------------------------------------------------

    async def connect(
        self,
        host: str,
        username: str,
        password: str,
        port: int | None = None,
        use_ssl: bool = False,
    ) -> None:
        """建立连接并完成 USER/PASS 认证。

        Args:
            host: 服务器地址。
            username: 账户名。
            password: 口令。
            port: 端口。None 时按 use_ssl 取 995 或 110。
            use_ssl: 是否使用 TLS。

        Raises:
            StateError: 会话已认证。传输层不会被重新打开。
            ArgumentError: 缺少主机名或凭据。
            ProtocolError: 欢迎行、USER 或 PASS 未返回 "+OK"。
            NetworkError: 传输层异常 (原样传播)。

        注意: 认证中途失败时不会回滚，连接保持打开但会话仍为 DISCONNECTED，
        调用 disconnect() 或 aclose() 释放连接。
        """
        if self._state.is_connected:
            raise StateError("会话已连接 (already connected)")
        if not host:
            raise ArgumentError("host 不能为空")
        if username is None or password is None:
            raise ArgumentError("username/password 不能为 None")

        if port is None:
            port = DEFAULT_SSL_PORT if use_ssl else DEFAULT_PORT

        if self._transport.is_open:
            logger.warning("检测到上次认证失败遗留的连接，先行关闭")
            await self._transport.close()

        logger.info(f"正在连接 {host}:{port} (TLS={use_ssl})...")
        await self._transport.open(host, port, use_ssl)
        self._state.host = host

        try:
            greeting = await self._transport.read_line()
            if not is_positive_response(greeting):
                raise ProtocolError(f"服务器拒绝会话: {greeting!r}", response=greeting)
            self._state.greeting = greeting

            await self._engine.execute(Command.USER, argument=username)
            await self._engine.execute(Command.PASS, argument=password)
        except ProtocolError as e:
            self._state.last_error = str(e)
            logger.error(f"认证失败: {e}")
            raise

        self._update_status(SessionStatus.AUTHENTICATED, f"已认证 ({username}@{host})")

    async def connect_with(self, config: Pop3Config) -> None:
        """使用配置对象建立连接。"""
        await self.connect(
            config.host,
            config.username,
            config.password,
            port=config.port,
            use_ssl=config.use_ssl,
        )

    async def disconnect(self) -> None:
        """发送 QUIT 并关闭连接。

        未认证时不发送任何命令、不报错，仅释放可能遗留的连接。
        QUIT 失败不会阻止连接关闭与状态重置。
        """
        if not self._state.is_connected:
            if self._transport.is_open:
                await self._transport.close()
            return

        try:
            await self._engine.execute(Command.QUIT)
        except Exception as e:
            self._state.last_error = str(e)
            logger.warning(f"QUIT 过程异常: {e}")
        finally:
            try:
                await self._transport.close()
            finally:
                self._update_status(SessionStatus.DISCONNECTED, "已断开")

    async def aclose(self) -> None:
        """释放会话资源 (等价于 disconnect，可重复调用)。"""
        await self.disconnect()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    # ------------------------------------------------------------------
    # 邮箱操作
    # ------------------------------------------------------------------

    async def list(self) -> Mailbox:
        """执行 LIST，返回按服务器顺序排列的邮件记录。

        Raises:
            ProtocolError: 条目格式错误或序号重复。
        """
        self._ensure_connected()

        await self._engine.execute(Command.LIST)
        # 先完整读完多行响应，再解析，避免解析失败时线路上残留未读数据
        lines = [line async for line in self._engine.collect_until_sentinel()]

        mailbox = Mailbox()
        for line in lines:
            number, size = parse_list_entry(line)
            if mailbox.get(number) is not None:
                raise ProtocolError(f"LIST 序号重复: {number}", response=line)
            mailbox.append(MessageRecord(sequence_number=number, size_bytes=size))

        logger.info(f"LIST 完成: {len(mailbox)} 封邮件, 共 {mailbox.total_size} 字节")
        return mailbox

    async def retrieve_header(self, message: MessageRecord) -> None:
        """执行 TOP n 0，把头部逐行追加到 message.raw_header (不清空旧内容)。"""
        self._ensure_connected()
        _check_record(message)

        await self._engine.execute(
            Command.TOP, message.sequence_number, TOP_HEADER_ONLY_LINES
        )
        async for line in self._engine.collect_until_sentinel():
            message.raw_header += line

    async def retrieve_headers(self, messages: Iterable[MessageRecord]) -> None:
        """按顺序对每条记录执行 retrieve_header，遇到第一个失败即停止。"""
        self._ensure_connected()
        if messages is None:
            raise ArgumentError("messages 不能为 None")

        for message in messages:
            await self.retrieve_header(message)

    async def retrieve(self, message: MessageRecord) -> None:
        """执行 RETR n，把整封邮件逐行追加到 message.raw_message。

        只有多行响应完整读完后才把 retrieved 置为 True。
        """
        self._ensure_connected()
        _check_record(message)

        await self._engine.execute(Command.RETR, message.sequence_number)
        async for line in self._engine.collect_until_sentinel():
            message.raw_message += line
        message.retrieved = True
        logger.debug(f"RETR {message.sequence_number} 完成")

    async def retrieve_all(self, messages: Iterable[MessageRecord]) -> None:
        """按顺序对每条记录执行 retrieve，遇到第一个失败即停止。"""
        self._ensure_connected()
        if messages is None:
            raise ArgumentError("messages 不能为 None")

        for message in messages:
            await self.retrieve(message)

    async def delete(self, message: MessageRecord) -> None:
        """执行 DELE n。服务器在会话结束时真正删除。"""
        self._ensure_connected()
        _check_record(message)

        await self._engine.execute(Command.DELE, message.sequence_number)
        logger.info(f"邮件 {message.sequence_number} 已标记删除")

    async def list_and_retrieve_header(self) -> Mailbox:
        """LIST 后依次获取全部邮件头。"""
        self._ensure_connected()
        mailbox = await self.list()
        await self.retrieve_headers(mailbox)
        return mailbox

    async def list_and_retrieve(self) -> Mailbox:
        """LIST 后依次获取全部邮件。"""
        self._ensure_connected()
        mailbox = await self.list()
        await self.retrieve_all(mailbox)
        return mailbox

    # ------------------------------------------------------------------

    def _ensure_connected(self) -> None:
        if not self._state.is_connected:
            raise StateError("会话未连接 (not connected)")

    def _update_status(self, status: SessionStatus, msg: str) -> None:
        """更新内部状态并通知所有监听器 (协程监听器以 Task 执行)。"""
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")

        for callback in list(self._listeners):
            try:
                if inspect.iscoroutinefunction(callback):
                    task = asyncio.create_task(callback(status, msg))
                    # 持有引用，防止 Task 完成前被回收
                    self._listener_tasks.add(task)
                    task.add_done_callback(self._listener_tasks.discard)
                else:
                    callback(status, msg)
            except Exception as e:
                logger.error(f"回调执行异常: {e}")


def _check_record(message: MessageRecord) -> None:
    if message is None:
        raise ArgumentError("message 不能为 None")
    if not isinstance(message, MessageRecord):
        raise ArgumentError(f"message 类型无效: {type(message).__name__}")
