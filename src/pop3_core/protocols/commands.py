# src/pop3_core/protocols/commands.py
import logging

from ..exceptions import ProtocolError
from .constants import CRLF, DOT_STUFF_PREFIX, OK_MARKER, OK_MARKER_LEN, Command

logger = logging.getLogger(__name__)


def build_command(
    name: str, number: int | None = None, argument: str | None = None
) -> str:
    """构建一行命令文本 (含 CRLF)。

    格式: ``NAME``、``NAME n``、``NAME n EXTRA`` 或 ``NAME EXTRA``。

    Args:
        name: 命令字，如 "RETR"。
        number: 邮件序号操作数 (可选)。
        argument: 附加参数 (可选)。空字符串照常追加，如空口令得到 ``PASS ``。

    Returns:
        str: 待写入传输层的命令行。
    """
    parts = [name]
    if number is not None:
        parts.append(str(number))
    if argument is not None:
        parts.append(argument)
    return " ".join(parts) + CRLF


def describe_command(line: str) -> str:
    """返回可安全写入日志的命令描述 (隐藏 PASS 的口令)。"""
    text = line.rstrip(CRLF)
    if text.startswith(Command.PASS + " "):
        return f"{Command.PASS} ******"
    return text


def is_positive_response(response: str | None) -> bool:
    """判断单行响应是否以成功标记 "+OK" 开头。"""
    if not response:
        return False
    return response[:OK_MARKER_LEN] == OK_MARKER


def parse_list_entry(line: str) -> tuple[int, int]:
    """解析 LIST 多行响应中的一个条目 ``"<n> <size>\\r\\n"``。

    Returns:
        tuple[int, int]: (序号, 字节数)。

    Raises:
        ProtocolError: 条目缺少字段、字段非整数、序号小于 1 或字节数为负。
    """
    fields = line.split()
    if len(fields) < 2:
        raise ProtocolError(f"LIST 条目格式错误: {line!r}", response=line)

    # int() 还接受 "1_0"、"+5" 与非 ASCII 数字，这里只认纯 ASCII 数字
    if not all(f.isascii() and f.isdigit() for f in fields[:2]):
        raise ProtocolError(f"LIST 条目不是整数: {line!r}", response=line)

    number = int(fields[0])
    size = int(fields[1])

    if number < 1 or size < 0:
        raise ProtocolError(f"LIST 条目数值越界: {line!r}", response=line)

    return number, size


def unstuff_line(line: str) -> str:
    """去掉服务器为以 "." 开头的行追加的转义点。"""
    if line.startswith(DOT_STUFF_PREFIX):
        return line[1:]
    return line
