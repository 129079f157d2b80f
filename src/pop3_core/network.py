# src/pop3_core/network.py
"""
POP3 核心库 - 传输模块 (Network) [Asyncio Edition]

封装 TCP/TLS 连接的建立、按行读写与关闭。
该模块屏蔽了底层 Socket 的复杂性，向会话层提供纯粹的"一行文本"收发接口。

两种实现共享同一契约:
- TcpTransport: 基于 asyncio Streams，读写为挂起点 (await)。
- SocketTransport: 基于阻塞 socket，调用线程一直等待 I/O 完成。
  通过 BlockingTransportAdapter 暴露为异步接口，供同一个 Core 使用。
"""

import abc
import asyncio
import logging
import socket
import ssl
from typing import BinaryIO, Optional

from .exceptions import NetworkError
from .protocols.constants import MAX_LINE_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
# surrogateescape 让无法解码的字节在文本中保留，可通过 encode 还原
DECODE_ERRORS = "surrogateescape"


class BaseTransport(abc.ABC):
    """异步传输端口抽象基类。

    read_line 必须返回恰好一行协议文本 (含行终止符)，连接关闭时返回空字符串。
    """

    @abc.abstractmethod
    async def open(self, host: str, port: int, use_ssl: bool) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def read_line(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    async def write_line(self, line: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def close(self) -> None:
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def is_open(self) -> bool:
        raise NotImplementedError


class BlockingTransport(abc.ABC):
    """阻塞式传输端口抽象基类，语义与 BaseTransport 完全一致。"""

    @abc.abstractmethod
    def open(self, host: str, port: int, use_ssl: bool) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def read_line(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def write_line(self, line: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def is_open(self) -> bool:
        raise NotImplementedError


class TcpTransport(BaseTransport):
    """
    封装 asyncio TCP/TLS 操作的传输端口。
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        encoding: str = DEFAULT_ENCODING,
        ssl_context: Optional[ssl.SSLContext] = None,
    ):
        self.timeout = timeout
        self.encoding = encoding
        self.ssl_context = ssl_context
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_open(self) -> bool:
        return self.writer is not None

    async def open(self, host: str, port: int, use_ssl: bool) -> None:
        """
        建立 TCP 连接，use_ssl 为 True 时在连接上完成 TLS 握手。
        """
        context = None
        if use_ssl:
            context = self.ssl_context or ssl.create_default_context()

        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(
                    host, port, ssl=context, limit=MAX_LINE_LENGTH * 2
                ),
                timeout=self.timeout,
            )
            logger.debug(f"TCP 连接已建立: {host}:{port} (TLS={use_ssl})")
        except asyncio.TimeoutError:
            raise NetworkError(f"连接超时 {host}:{port} ({self.timeout}s)") from None
        except (OSError, ssl.SSLError) as e:
            raise NetworkError(f"连接失败 {host}:{port}: {e}") from e

    async def read_line(self) -> str:
        """
        读取一行 (Async)。

        使用 asyncio.wait_for 实现超时控制。
        """
        if not self.reader:
            raise NetworkError("连接未打开")

        try:
            data = await asyncio.wait_for(self.reader.readline(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise NetworkError(f"接收超时 ({self.timeout}s)") from None
        except (asyncio.LimitOverrunError, ValueError) as e:
            raise NetworkError(f"单行数据超过 {MAX_LINE_LENGTH} 字节") from e
        except OSError as e:
            raise NetworkError(f"接收错误: {e}") from e

        if len(data) > MAX_LINE_LENGTH:
            raise NetworkError(f"单行数据超过 {MAX_LINE_LENGTH} 字节")

        return data.decode(self.encoding, DECODE_ERRORS)

    async def write_line(self, line: str) -> None:
        """
        写入一行并等待缓冲区排空。
        """
        if not self.writer or self.writer.is_closing():
            raise NetworkError("连接未打开")

        try:
            self.writer.write(line.encode(self.encoding, DECODE_ERRORS))
            await asyncio.wait_for(self.writer.drain(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise NetworkError(f"发送超时 ({self.timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e

    async def close(self) -> None:
        """关闭连接 (可重复调用)"""
        writer = self.writer
        self.reader = None
        self.writer = None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except (OSError, ssl.SSLError) as e:
            # 对端已断开时关闭握手可能失败，连接本身已释放
            logger.debug(f"关闭连接时出现异常: {e}")
        logger.debug("TCP 连接已关闭")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class SocketTransport(BlockingTransport):
    """
    封装阻塞 socket 的传输端口。
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        encoding: str = DEFAULT_ENCODING,
        ssl_context: Optional[ssl.SSLContext] = None,
    ):
        self.timeout = timeout
        self.encoding = encoding
        self.ssl_context = ssl_context
        self.sock: Optional[socket.socket] = None
        self.file: Optional[BinaryIO] = None

    @property
    def is_open(self) -> bool:
        return self.sock is not None

    def open(self, host: str, port: int, use_ssl: bool) -> None:
        sock = None
        try:
            sock = socket.create_connection((host, port), self.timeout)
            if use_ssl:
                context = self.ssl_context or ssl.create_default_context()
                sock = context.wrap_socket(sock, server_hostname=host)
        except socket.timeout:
            if sock is not None:
                sock.close()
            raise NetworkError(f"连接超时 {host}:{port} ({self.timeout}s)") from None
        except (OSError, ssl.SSLError) as e:
            if sock is not None:
                sock.close()
            raise NetworkError(f"连接失败 {host}:{port}: {e}") from e

        self.sock = sock
        self.file = sock.makefile("rb")
        logger.debug(f"Socket 连接已建立: {host}:{port} (TLS={use_ssl})")

    def read_line(self) -> str:
        if not self.file:
            raise NetworkError("连接未打开")

        try:
            data = self.file.readline(MAX_LINE_LENGTH + 1)
        except socket.timeout:
            raise NetworkError(f"接收超时 ({self.timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"接收错误: {e}") from e

        if len(data) > MAX_LINE_LENGTH:
            raise NetworkError(f"单行数据超过 {MAX_LINE_LENGTH} 字节")

        return data.decode(self.encoding, DECODE_ERRORS)

    def write_line(self, line: str) -> None:
        if not self.sock:
            raise NetworkError("连接未打开")

        try:
            self.sock.sendall(line.encode(self.encoding, DECODE_ERRORS))
        except socket.timeout:
            raise NetworkError(f"发送超时 ({self.timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e

    def close(self) -> None:
        """关闭连接 (可重复调用)"""
        file, sock = self.file, self.sock
        self.file = None
        self.sock = None
        if file is not None:
            file.close()
        if sock is not None:
            sock.close()
            logger.debug("Socket 连接已关闭")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class BlockingTransportAdapter(BaseTransport):
    """
    阻塞端口到异步契约的适配器。

    每个方法直接在当前线程执行阻塞调用后返回，不会真正让出事件循环。
    """

    def __init__(self, inner: BlockingTransport):
        self.inner = inner

    @property
    def is_open(self) -> bool:
        return self.inner.is_open

    async def open(self, host: str, port: int, use_ssl: bool) -> None:
        self.inner.open(host, port, use_ssl)

    async def read_line(self) -> str:
        return self.inner.read_line()

    async def write_line(self, line: str) -> None:
        self.inner.write_line(line)

    async def close(self) -> None:
        self.inner.close()


def as_async_transport(transport: BaseTransport | BlockingTransport) -> BaseTransport:
    """把任一种传输端口统一为异步契约；其他类型返回 TypeError。"""
    if isinstance(transport, BaseTransport):
        return transport
    if isinstance(transport, BlockingTransport):
        return BlockingTransportAdapter(transport)
    raise TypeError(f"不支持的传输类型: {type(transport).__name__}")
