# tests/test_models.py
import pytest

from pop3_core.models import Mailbox, MessageRecord


def test_record_defaults():
    record = MessageRecord(sequence_number=1, size_bytes=100)
    assert record.retrieved is False
    assert record.raw_header == ""
    assert record.raw_message == ""


def test_record_identity_fields_are_immutable():
    record = MessageRecord(1, 100)

    with pytest.raises(AttributeError):
        record.sequence_number = 2
    with pytest.raises(AttributeError):
        record.size_bytes = 0

    # 可变字段允许写入
    record.raw_header += "Subject: x\r\n"
    record.retrieved = True
    assert record.raw_header == "Subject: x\r\n"


def test_mailbox_order_and_lookup():
    mailbox = Mailbox()
    mailbox.append(MessageRecord(3, 30))
    mailbox.append(MessageRecord(1, 10))

    assert [r.sequence_number for r in mailbox] == [3, 1]
    assert mailbox[0].sequence_number == 3
    assert len(mailbox) == 2
    assert mailbox.get(1).size_bytes == 10
    assert mailbox.get(2) is None
    assert mailbox.total_size == 40


def test_mailbox_rejects_duplicate_numbers():
    with pytest.raises(ValueError):
        Mailbox([MessageRecord(1, 10), MessageRecord(1, 20)])


def test_mailbox_pending():
    done = MessageRecord(1, 10)
    done.retrieved = True
    todo = MessageRecord(2, 20)
    mailbox = Mailbox([done, todo])

    assert list(mailbox.pending()) == [todo]
