# src/pop3_core/engine.py
"""
POP3 核心库 - 事务引擎 (Transaction Engine)

职责：
1. 事务：格式化命令 -> 写一行 -> 读一行状态 -> 判定 +OK。
2. 多行累积：逐行读取直到结束行 ".\\r\\n"，结束行本身不返回。

所有命令都只能经由 execute() 上线。协议严格同步，同一时刻只允许一个未完成的交换，
因此 collect_until_sentinel() 产出的序列必须在下一个事务开始前被完整消费。
"""

import logging
from collections.abc import AsyncIterator

from .exceptions import ProtocolError
from .network import BaseTransport
from .protocols import (
    build_command,
    describe_command,
    is_positive_response,
    unstuff_line,
)
from .protocols.constants import SENTINEL_LINE

logger = logging.getLogger(__name__)


class TransactionEngine:
    """单连接上的命令/响应事务执行器。"""

    def __init__(self, transport: BaseTransport, unstuff_dots: bool = False) -> None:
        """初始化事务引擎。

        Args:
            transport: 异步传输端口 (由会话独占)。
            unstuff_dots: 是否去掉多行响应中的转义点。默认保留原样。
        """
        self.transport = transport
        self.unstuff_dots = unstuff_dots

    async def read_status(self) -> str:
        """读取一行状态响应并校验成功标记。

        Raises:
            ProtocolError: 响应为空或不以 "+OK" 开头，携带原始文本。
        """
        response = await self.transport.read_line()
        if not is_positive_response(response):
            logger.debug(f"S: {response!r}")
            raise ProtocolError(f"服务器返回失败响应: {response!r}", response=response)
        logger.debug(f"S: {response.rstrip()}")
        return response

    async def execute(
        self,
        name: str,
        number: int | None = None,
        argument: str | None = None,
    ) -> str:
        """执行一个事务。

        Args:
            name: 命令字。
            number: 邮件序号操作数 (可选)。
            argument: 附加参数 (可选)。

        Returns:
            str: 原始状态行 (含行终止符)。

        Raises:
            ProtocolError: 状态行缺失或不是 "+OK"。
            NetworkError: 传输层读写失败 (原样传播)。
        """
        line = build_command(name, number, argument)
        logger.debug(f"C: {describe_command(line)}")
        await self.transport.write_line(line)
        return await self.read_status()

    async def collect_until_sentinel(self) -> AsyncIterator[str]:
        """逐行产出多行响应，直到读到结束行为止 (结束行不产出)。"""
        while True:
            line = await self.transport.read_line()
            if line == SENTINEL_LINE:
                return
            if not line:
                # 对端在结束行之前关闭了连接
                raise ProtocolError("多行响应在结束行之前中断", response=line)
            yield unstuff_line(line) if self.unstuff_dots else line
