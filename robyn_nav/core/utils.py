import inspect
import re
import unicodedata
from typing import Any, Callable

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-]+")


def accepts_argument(callback: Callable) -> bool:
    """回调是否接收位置参数（request）"""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return True
    for param in signature.parameters.values():
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False


def call_with_request(callback: Callable, request: Any = None) -> Any:
    """调用回调，回调可以不接收 request"""
    if accepts_argument(callback):
        return callback(request)
    return callback()


def class_basename(value: Any) -> str:
    """类名或 'app.resources.UserResource' 形式的字符串取最后一段"""
    if isinstance(value, type):
        return value.__name__
    if not isinstance(value, str):
        return type(value).__name__
    return value.replace("\\", ".").rsplit(".", 1)[-1]


def words(value: str) -> list:
    spaced = _CAMEL_BOUNDARY.sub(" ", value)
    return [w for w in _SEPARATORS.split(spaced) if w]


def kebab(value: str) -> str:
    return "-".join(w.lower() for w in words(value))


def snake(value: str) -> str:
    return "_".join(w.lower() for w in words(value))


def headline(value: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in words(value))


def plural(value: str) -> str:
    """英文复数（只处理常见规则）"""
    if not value:
        return value
    lower = value.lower()
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        suffix = "ies" if value[-1].islower() else "IES"
        return value[:-1] + suffix
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return value + ("es" if value[-1].islower() else "ES")
    return value + ("s" if value[-1].islower() or value[-1].isdigit() else "S")


def slug(value: str, separator: str = "-") -> str:
    """生成 slug：去掉重音符号、小写、去掉标点、空白替换为分隔符

    非拉丁文字（中文等）保留原字符。
    """
    text = unicodedata.normalize("NFKD", value)
    text = unicodedata.normalize("NFC", "".join(ch for ch in text if not unicodedata.combining(ch)))
    flip = "-" if separator == "_" else "_"
    text = text.replace(flip, separator)
    text = text.replace("@", f"{separator}at{separator}")
    text = re.sub(r"[^" + re.escape(separator) + r"\w\s]", "", text.lower())
    text = text.replace("_", separator) if separator != "_" else text
    text = re.sub(r"[" + re.escape(separator) + r"\s]+", separator, text)
    return text.strip(separator)
