# tests/test_engine.py
"""
测试事务引擎:
1. execute() 的写一行/读一行流程与失败判定。
2. collect_until_sentinel() 的结束行处理与中断行为。
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pop3_core.engine import TransactionEngine
from pop3_core.exceptions import NetworkError, ProtocolError


@pytest.fixture
def mock_transport():
    net = MagicMock()
    net.write_line = AsyncMock()
    net.read_line = AsyncMock()
    return net


@pytest.mark.asyncio
async def test_execute_returns_status_line(mock_transport):
    mock_transport.read_line.return_value = "+OK 3 messages\r\n"
    engine = TransactionEngine(mock_transport)

    status = await engine.execute("RETR", 3)

    assert status == "+OK 3 messages\r\n"
    mock_transport.write_line.assert_awaited_once_with("RETR 3\r\n")
    assert mock_transport.read_line.await_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("response", ["-ERR bad\r\n", "OK\r\n", "+ok\r\n", ""])
async def test_execute_failure_carries_raw_response(mock_transport, response):
    mock_transport.read_line.return_value = response
    engine = TransactionEngine(mock_transport)

    with pytest.raises(ProtocolError) as exc:
        await engine.execute("DELE", 1)

    assert exc.value.response == response


@pytest.mark.asyncio
async def test_execute_propagates_transport_error(mock_transport):
    mock_transport.write_line.side_effect = NetworkError("发送失败")
    engine = TransactionEngine(mock_transport)

    with pytest.raises(NetworkError):
        await engine.execute("QUIT")
    mock_transport.read_line.assert_not_awaited()


@pytest.mark.asyncio
async def test_collect_until_sentinel_excludes_sentinel(mock_transport):
    mock_transport.read_line.side_effect = ["a\r\n", "b\r\n", ".\r\n", "next\r\n"]
    engine = TransactionEngine(mock_transport)

    lines = [line async for line in engine.collect_until_sentinel()]

    assert lines == ["a\r\n", "b\r\n"]
    # 结束行之后的数据不应被读取
    assert mock_transport.read_line.await_count == 3


@pytest.mark.asyncio
async def test_collect_keeps_dot_stuffing_by_default(mock_transport):
    mock_transport.read_line.side_effect = ["..dot\r\n", ".\r\n"]
    engine = TransactionEngine(mock_transport)

    lines = [line async for line in engine.collect_until_sentinel()]

    assert lines == ["..dot\r\n"]


@pytest.mark.asyncio
async def test_collect_unstuffs_when_enabled(mock_transport):
    mock_transport.read_line.side_effect = ["..dot\r\n", ".\r\n"]
    engine = TransactionEngine(mock_transport, unstuff_dots=True)

    lines = [line async for line in engine.collect_until_sentinel()]

    assert lines == [".dot\r\n"]


@pytest.mark.asyncio
async def test_collect_eof_before_sentinel(mock_transport):
    mock_transport.read_line.side_effect = ["a\r\n", ""]
    engine = TransactionEngine(mock_transport)

    received = []
    with pytest.raises(ProtocolError):
        async for line in engine.collect_until_sentinel():
            received.append(line)

    assert received == ["a\r\n"]


@pytest.mark.asyncio
async def test_collect_sentinel_requires_exact_terminator(mock_transport):
    # 只有 ".\r\n" 才是结束行
    mock_transport.read_line.side_effect = [".\n", ". \r\n", ".\r\n"]
    engine = TransactionEngine(mock_transport)

    lines = [line async for line in engine.collect_until_sentinel()]

    assert lines == [".\n", ". \r\n"]
