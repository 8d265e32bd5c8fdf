from .base import BaseRenderer, JsonMenuRenderer, SidebarRenderer

__all__ = [
    'BaseRenderer',
    'JsonMenuRenderer',
    'SidebarRenderer',
]
