# tests/test_protocol_commands.py
"""
测试协议层的纯函数: 命令构建、成功标记判定、LIST 条目解析与转义点处理。
"""

import pytest

from pop3_core.exceptions import ProtocolError
from pop3_core.protocols import (
    build_command,
    describe_command,
    is_positive_response,
    parse_list_entry,
    unstuff_line,
)
from pop3_core.protocols.constants import Command


@pytest.mark.parametrize(
    "name, number, argument, expected",
    [
        (Command.LIST, None, None, "LIST\r\n"),
        (Command.RETR, 7, None, "RETR 7\r\n"),
        (Command.TOP, 3, "0", "TOP 3 0\r\n"),
        (Command.USER, None, "alice", "USER alice\r\n"),
        (Command.QUIT, None, None, "QUIT\r\n"),
        (Command.PASS, None, "", "PASS \r\n"),
    ],
)
def test_build_command_forms(name, number, argument, expected):
    assert build_command(name, number, argument) == expected


def test_describe_command_masks_password():
    assert describe_command("PASS hunter2\r\n") == "PASS ******"
    assert describe_command("USER alice\r\n") == "USER alice"


@pytest.mark.parametrize(
    "response, expected",
    [
        ("+OK\r\n", True),
        ("+OK 2 messages\r\n", True),
        ("-ERR no such message\r\n", False),
        ("+O\r\n", False),
        ("", False),
        (None, False),
    ],
)
def test_is_positive_response(response, expected):
    assert is_positive_response(response) is expected


def test_parse_list_entry():
    assert parse_list_entry("1 100\r\n") == (1, 100)
    assert parse_list_entry("12 0\r\n") == (12, 0)


@pytest.mark.parametrize(
    "line",
    [
        "1\r\n",
        "a 100\r\n",
        "1 x\r\n",
        "0 10\r\n",
        "2 -5\r\n",
        "1_0 100\r\n",
        "+5 10\r\n",
        "3 1_000\r\n",
        "\u0661 10\r\n",
    ],
)
def test_parse_list_entry_rejects_malformed(line):
    with pytest.raises(ProtocolError) as exc:
        parse_list_entry(line)
    assert exc.value.response == line


def test_unstuff_line():
    assert unstuff_line("..hidden\r\n") == ".hidden\r\n"
    assert unstuff_line(".\r\n") == ".\r\n"
    assert unstuff_line("plain\r\n") == "plain\r\n"
