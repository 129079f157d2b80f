# tests/conftest.py
import sys
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from pop3_core.config import Pop3Config
from pop3_core.network import BaseTransport, BlockingTransport


class ScriptedTransport(BaseTransport):
    """
    按脚本返回响应行的异步传输端口。
    脚本中的 Exception 实例会在读到该位置时抛出；脚本耗尽后返回 "" (EOF)。
    """

    def __init__(self, lines=None):
        self.lines = list(lines or [])
        self.written: list[str] = []
        self.opened: list[tuple] = []
        self.close_count = 0
        self._open = False

    def feed(self, *lines):
        self.lines.extend(lines)

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self, host, port, use_ssl):
        self.opened.append((host, port, use_ssl))
        self._open = True

    async def read_line(self):
        if not self.lines:
            return ""
        item = self.lines.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def write_line(self, line):
        self.written.append(line)

    async def close(self):
        self.close_count += 1
        self._open = False


class ScriptedBlockingTransport(BlockingTransport):
    """ScriptedTransport 的阻塞版本。"""

    def __init__(self, lines=None):
        self.lines = list(lines or [])
        self.written: list[str] = []
        self.opened: list[tuple] = []
        self.close_count = 0
        self._open = False

    def feed(self, *lines):
        self.lines.extend(lines)

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self, host, port, use_ssl):
        self.opened.append((host, port, use_ssl))
        self._open = True

    def read_line(self):
        if not self.lines:
            return ""
        item = self.lines.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def write_line(self, line):
        self.written.append(line)

    def close(self):
        self.close_count += 1
        self._open = False


# 一次成功的 欢迎行 + USER + PASS
LOGIN_OK = ["+OK POP3 ready\r\n", "+OK user accepted\r\n", "+OK logged in\r\n"]


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个标准的 Pop3Config 对象。
    """
    return Pop3Config(
        host="pop.example.com",
        username="test_user",
        password="test_password",
        port=110,
        use_ssl=False,
        timeout=5.0,
        unstuff_dots=False,
    )


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def blocking_transport():
    return ScriptedBlockingTransport()
