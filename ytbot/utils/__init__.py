"""
Утилиты для работы с YouTube ссылками и аргументами команд
"""
from .utils import (
    normalize_url,
    extract_video_id,
    is_youtube_url,
    extract_first_argument,
    parse_extra_args
)

__all__ = [
    'normalize_url',
    'extract_video_id',
    'is_youtube_url',
    'extract_first_argument',
    'parse_extra_args'
]
