"""
异常定义

预期内的失败 (非法移动、空牌库) 由规则引擎以结果对象返回；
只有损坏的输入和被破坏的不变量以异常形式抛出。
"""


class KlondikeError(Exception):
    """引擎异常基类"""


class InvalidMoveError(KlondikeError):
    """调用方要求移动必须成功时，移动非法"""


class MalformedStateError(KlondikeError, ValueError):
    """序列化状态无法解析或形状非法"""


class InvariantViolation(KlondikeError, AssertionError):
    """游戏状态不变量被破坏 (程序错误)"""
