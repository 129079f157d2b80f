# src/pop3_core/protocols/constants.py
"""
POP3 协议层 - 常量定义

仅定义协议的结构性常量（命令字、状态标记、行终止符）。
不包含任何默认策略值（如超时时间），这些应由 Config/Transport 注入。
"""

# =========================================================================
# 1. 命令字 (Command Verbs)
# =========================================================================


class Command:
    """客户端会发送的全部命令"""

    USER = "USER"  # 标识账户
    PASS = "PASS"  # 认证
    LIST = "LIST"  # 枚举邮件 (多行响应)
    TOP = "TOP"  # 仅取邮件头 (多行响应)
    RETR = "RETR"  # 取整封邮件 (多行响应)
    DELE = "DELE"  # 标记删除
    QUIT = "QUIT"  # 结束会话


# =========================================================================
# 2. 响应语法 (Response Grammar)
# =========================================================================
OK_MARKER = "+OK"  # 单行成功响应的前 3 个字符
OK_MARKER_LEN = 3

CRLF = "\r\n"
SENTINEL_LINE = "." + CRLF  # 多行响应结束行
DOT_STUFF_PREFIX = ".."  # 服务器对以 "." 开头的正文行的转义

# TOP 命令只取头部时的行数参数
TOP_HEADER_ONLY_LINES = "0"

# =========================================================================
# 3. 连接参数 (Connection)
# =========================================================================
DEFAULT_PORT = 110
DEFAULT_SSL_PORT = 995

# RFC 1939 规定单行最多 512 字节 (含 CRLF)，这里放宽到 2048
MAX_LINE_LENGTH = 2048
