# tests/test_main.py
"""
测试命令行入口: 配置来源、退出码与各操作的委托。
"""

from unittest.mock import MagicMock, patch

import pytest

from pop3_core import Mailbox, MessageRecord, ProtocolError
from pop3_core.main import main

ENV_KEYS = ("HOST", "USERNAME", "PASSWORD", "PORT", "USE_SSL", "TIMEOUT", "UNSTUFF_DOTS")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # 先 setenv 再 delenv，确保 load_dotenv 写入的变量在测试后被还原
    for suffix in ENV_KEYS:
        monkeypatch.setenv(f"POP3_{suffix}", "")
        monkeypatch.delenv(f"POP3_{suffix}")


@pytest.fixture
def env_file(tmp_path):
    f = tmp_path / ".env"
    f.write_text(
        "POP3_HOST=env.example.com\nPOP3_USERNAME=alice\nPOP3_PASSWORD=secret\n",
        encoding="utf-8",
    )
    return f


@pytest.fixture
def mock_client():
    mailbox = Mailbox([MessageRecord(1, 100), MessageRecord(2, 250)])
    with patch("pop3_core.main.Pop3Client") as client_cls:
        client = client_cls.from_config.return_value
        client.__enter__.return_value = client
        client.__exit__.return_value = False
        client.list.return_value = mailbox
        client.list_and_retrieve_header.return_value = mailbox
        yield client_cls, client, mailbox


def test_list_from_env_file(env_file, mock_client, capsys):
    client_cls, client, _ = mock_client

    assert main(["--env-file", str(env_file)]) == 0

    config = client_cls.from_config.call_args.args[0]
    assert config.host == "env.example.com"
    client.connect_with.assert_called_once_with(config)
    client.list.assert_called_once()
    client.__exit__.assert_called_once()
    assert "共 2 封邮件, 350 字节" in capsys.readouterr().out


def test_headers(env_file, mock_client):
    _, client, _ = mock_client

    assert main(["--env-file", str(env_file), "--headers"]) == 0

    client.list_and_retrieve_header.assert_called_once()
    client.list.assert_not_called()


def test_fetch(env_file, mock_client):
    _, client, mailbox = mock_client

    assert main(["--env-file", str(env_file), "--fetch", "2"]) == 0

    client.retrieve.assert_called_once_with(mailbox.get(2))


def test_delete(env_file, mock_client):
    _, client, mailbox = mock_client

    assert main(["--env-file", str(env_file), "--delete", "1"]) == 0

    client.delete.assert_called_once_with(mailbox.get(1))


def test_fetch_unknown_message(env_file, mock_client):
    _, client, _ = mock_client

    assert main(["--env-file", str(env_file), "--fetch", "9"]) == 1
    client.retrieve.assert_not_called()


def test_protocol_error_exit_code(env_file, mock_client):
    _, client, _ = mock_client
    client.connect_with.side_effect = ProtocolError("拒绝", response="-ERR\r\n")

    assert main(["--env-file", str(env_file)]) == 1


def test_missing_config_exit_code(tmp_path):
    assert main(["--env-file", str(tmp_path / "missing.env")]) == 2


def test_toml_config(tmp_path, mock_client):
    client_cls, _, _ = mock_client
    f = tmp_path / "config.toml"
    f.write_text(
        '[profile.work]\nhost = "t"\nusername = "u"\npassword = "p"\n',
        encoding="utf-8",
    )

    assert main(["--config", str(f), "--profile", "work"]) == 0
    assert client_cls.from_config.call_args.args[0].host == "t"


def test_debug_flag_sets_level(env_file, mock_client):
    with patch("pop3_core.main.logging.basicConfig") as basic_config:
        main(["--env-file", str(env_file), "--debug"])

    assert basic_config.call_args.kwargs["level"] == 10
