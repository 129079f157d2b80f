# example.py
"""
这是一个 Pop3Core API 的最小示例。

它演示了如何将 pop3-core 作为一个库导入到你自己的项目中，
以异步方式列出邮件、读取邮件头，并在结束时自动 QUIT。

运行此示例：
1. 确保已在根目录创建 .env 文件 (POP3_HOST / POP3_USERNAME / POP3_PASSWORD ...)。
2. 确保已安装依赖： pip install -e .
3. 从项目根目录运行： python example.py
"""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from pop3_core import ConfigError, Pop3Core, Pop3Error, SessionStatus, load_config_from_env

# 日志配置开始
logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("Pop3Example")
# 日志配置结束


def on_status_change(status: SessionStatus, msg: str) -> None:
    print(f"\n>>> [Callback] 状态变更: {status.name} | 消息: {msg}\n")


async def main() -> int:
    """
    程序主入口点。
    """
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=True)

    try:
        config = load_config_from_env()
    except ConfigError as ce:
        logger.error(f"配置错误: {ce}")
        return 2

    try:
        # async with 保证任何情况下都会 QUIT 并释放连接
        async with Pop3Core.from_config(config, status_callback=on_status_change) as core:
            await core.connect_with(config)

            mailbox = await core.list_and_retrieve_header()
            for record in mailbox:
                subject = next(
                    (
                        line.rstrip()
                        for line in record.raw_header.splitlines()
                        if line.lower().startswith("subject:")
                    ),
                    "(无主题)",
                )
                logger.info(f"#{record.sequence_number} {record.size_bytes}B {subject}")

    except Pop3Error as e:
        logger.error(f"会话失败: {e}")
        return 1

    return 0


# 程序入口
if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
