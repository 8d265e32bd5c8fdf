from typing import Optional


class MenuError(Exception):
    """菜单引擎异常基类"""


class ConfigurationError(MenuError, ValueError):
    """菜单配置错误：section 同时设置 collapsible 和 path、用户菜单插入非 MenuItem 等"""


class EvaluationError(MenuError):
    """回调执行失败，保留原始异常"""

    def __init__(self, message: str, node_label: Optional[str] = None):
        super().__init__(message)
        self.node_label = node_label


class AuthorizationEvaluationError(EvaluationError):
    """权限回调抛出异常（不会被当作无权限处理）"""


class BadgeEvaluationError(EvaluationError):
    """徽章回调抛出异常"""


class CacheUnavailableError(MenuError):
    """缓存存储不可用，调用方应降级为不缓存"""
