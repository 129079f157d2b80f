# src/pop3_core/main.py
"""
POP3-Core 命令行工具。

连接服务器、列出邮件，并按需打印邮件头、取回某封邮件或标记删除。
配置来源优先级: --config 指定的 TOML 文件 > 环境变量 (可由 .env 提供)。
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .client import Pop3Client
from .config import Pop3Config, load_config_from_env, load_config_from_toml
from .exceptions import ConfigError, Pop3Error

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("Pop3CLI")  # CLI 日志记录器


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pop3-core", description="POP3 邮箱查看工具"
    )
    parser.add_argument("--config", type=Path, help="TOML 配置文件路径")
    parser.add_argument("--profile", default="default", help="TOML 中的预设名")
    parser.add_argument(
        "--env-file", type=Path, default=None, help=".env 文件路径 (默认当前目录)"
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--headers", action="store_true", help="打印所有邮件头")
    action.add_argument("--fetch", type=int, metavar="N", help="打印第 N 封邮件全文")
    action.add_argument("--delete", type=int, metavar="N", help="标记删除第 N 封邮件")
    parser.add_argument("--debug", action="store_true", help="输出协议级调试日志")
    return parser


def load_cli_config(args: argparse.Namespace) -> Pop3Config:
    """
    为 CLI 工具加载配置。
    未指定 --config 时查找 .env 文件并从环境变量读取。
    """
    if args.config is not None:
        logger.debug(f"使用配置文件: {args.config}")
        return load_config_from_toml(args.config, args.profile)

    env_path = args.env_file or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=True)
        logger.debug(f"已加载配置文件: {env_path}")
    else:
        logger.debug(f"未找到 .env 文件: {env_path}，直接读取环境变量")

    return load_config_from_env()


def run(client: Pop3Client, config: Pop3Config, args: argparse.Namespace) -> None:
    """执行一次会话: 连接 -> 操作 -> 断开。"""
    with client:
        client.connect_with(config)

        if args.headers:
            mailbox = client.list_and_retrieve_header()
        else:
            mailbox = client.list()

        print(f"共 {len(mailbox)} 封邮件, {mailbox.total_size} 字节")
        for record in mailbox:
            print(f"{record.sequence_number:>5}  {record.size_bytes:>10}")
            if args.headers:
                print(record.raw_header)

        if args.fetch is not None or args.delete is not None:
            number = args.fetch if args.fetch is not None else args.delete
            record = mailbox.get(number)
            if record is None:
                raise Pop3Error(f"邮件 {number} 不存在")
            if args.fetch is not None:
                client.retrieve(record)
                sys.stdout.write(record.raw_message)
            else:
                client.delete(record)
                print(f"邮件 {number} 已标记删除")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO, format=LOG_FORMAT
    )

    try:
        config = load_cli_config(args)
    except ConfigError as ce:
        logger.critical(f"配置错误: {ce}")
        return 2

    logger.info(f"使用配置: {config!r}")

    try:
        run(Pop3Client.from_config(config), config, args)
    except Pop3Error as e:
        logger.error(f"会话失败: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("收到用户中断信号 (Ctrl+C)，准备退出...")
        return 1

    return 0


# 程序入口
if __name__ == "__main__":
    sys.exit(main())
