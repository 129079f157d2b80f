"""
POP3 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI/GUI）能进行精细的错误处理。
"""


class Pop3Error(Exception):
    """POP3 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 pop3-core 抛出的已知错误。
    """

    pass


class ConfigError(Pop3Error):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host/username/password)。
    2. 字段格式错误 (如端口号非整数、超时时间为负数)。
    3. 找不到配置文件或环境变量。
    """

    pass


class NetworkError(Pop3Error):
    """传输层面的错误 (I/O 级别)。

    触发场景:
    1. 连接被拒绝、DNS 解析失败或 TLS 握手失败。
    2. 读写超时。
    3. 服务器发送的单行数据超过长度上限。
    4. 在未打开的连接上读写。

    注意: 核心层不会重试此类错误，也不会修改它们，直接向上传播。
    """

    pass


class ProtocolError(Pop3Error):
    """协议交互错误 (逻辑级别)。

    触发场景:
    1. 单行响应不以 "+OK" 开头 (如 "-ERR ...")。
    2. 响应为空 (连接已被对端关闭)。
    3. LIST 多行响应中的条目格式错误或序号重复。
    """

    def __init__(self, message: str, response: str | None = None) -> None:
        """初始化协议错误。

        Args:
            message: 错误描述信息。
            response: 服务器返回的原始响应文本。缺失时记为空字符串。
        """
        super().__init__(message)
        self.response = response or ""


class StateError(Pop3Error):
    """状态机错误 (FSM Violation)。

    触发场景:
    1. 在已认证状态下重复调用 connect。
    2. 在未认证状态下调用 LIST / TOP / RETR / DELE 等操作。

    会话状态不会因此类错误而改变。
    """

    pass


class ArgumentError(Pop3Error, ValueError):
    """必要参数缺失或类型不正确。

    触发场景:
    1. 传入的邮件记录为 None。
    2. 注入的传输对象不满足 Transport 接口。
    3. connect 缺少主机名或凭据。
    """

    pass
