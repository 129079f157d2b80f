"""
POP3 核心库 - 数据模型

MessageRecord 表示服务器 LIST 返回的一个邮箱条目；
Mailbox 是调用方持有的有序集合，按服务器响应顺序保存 MessageRecord。

写入约定: 引擎只会写 retrieved / raw_header / raw_message 三个字段，
sequence_number 与 size_bytes 在创建后不可修改。
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

_IMMUTABLE_FIELDS = ("sequence_number", "size_bytes")


@dataclass
class MessageRecord:
    """客户端侧的单封邮件记录。

    Attributes:
        sequence_number: 服务器分配的序号 (>= 1)，在会话期间稳定。
        size_bytes: 服务器报告的字节数。
        retrieved: RETR 成功完成后置为 True。
        raw_header: TOP n 0 累积的头部文本。重复调用会追加而非替换。
        raw_message: RETR 累积的整封邮件文本，追加语义同上。
    """

    sequence_number: int
    size_bytes: int
    retrieved: bool = False
    raw_header: str = ""
    raw_message: str = ""

    def __setattr__(self, name: str, value) -> None:
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"{name} 在创建后不可修改")
        super().__setattr__(name, value)


@dataclass
class Mailbox(Sequence[MessageRecord]):
    """LIST 结果集合：按服务器顺序排列，可按序号查找。"""

    records: list[MessageRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._index: dict[int, MessageRecord] = {}
        for record in self.records:
            self._register(record)

    def _register(self, record: MessageRecord) -> None:
        if record.sequence_number in self._index:
            raise ValueError(f"序号重复: {record.sequence_number}")
        self._index[record.sequence_number] = record

    def append(self, record: MessageRecord) -> None:
        self._register(record)
        self.records.append(record)

    def get(self, sequence_number: int) -> MessageRecord | None:
        """按服务器序号查找记录，不存在时返回 None。"""
        return self._index.get(sequence_number)

    @property
    def total_size(self) -> int:
        return sum(record.size_bytes for record in self.records)

    def pending(self) -> Iterable[MessageRecord]:
        """尚未 RETR 的记录。"""
        return (record for record in self.records if not record.retrieved)

    def __getitem__(self, index):
        return self.records[index]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[MessageRecord]:
        return iter(self.records)
