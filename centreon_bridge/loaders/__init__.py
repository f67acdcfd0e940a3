"""
加载器模块

包含分页拉取和下拉选项加载组件。
"""

from .pagination import fetch_all_pages
from .options_loader import OptionsLoader, OPTION_SOURCES

__all__ = [
    'fetch_all_pages',
    'OptionsLoader',
    'OPTION_SOURCES'
]
