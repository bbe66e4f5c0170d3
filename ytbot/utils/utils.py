"""
Утилиты для работы с YouTube ссылками и аргументами команд
"""
import re
import shlex
from typing import List, Optional

from ytbot.models.errors import invalid_url_error
from ytbot.models.result import Result
from ytbot.models.video import VideoIdentifier

# Порядок важен: побеждает первый совпавший шаблон
YOUTUBE_URL_PATTERNS = [
    # youtube.com/watch?v=ID
    re.compile(r'(?:https?://)?(?:www\.)?youtube\.com/watch\?v=([A-Za-z0-9_-]{11})(?:&.*)?'),
    # youtu.be/ID
    re.compile(r'(?:https?://)?(?:www\.)?youtu\.be/([A-Za-z0-9_-]{11})(?:\?.*)?'),
    # youtube.com/shorts/ID
    re.compile(r'(?:https?://)?(?:www\.)?youtube\.com/shorts/([A-Za-z0-9_-]{11})(?:\?.*)?'),
    # m.youtube.com/watch?v=ID
    re.compile(r'(?:https?://)?m\.youtube\.com/watch\?v=([A-Za-z0-9_-]{11})(?:&.*)?'),
]


def extract_video_id(url: Optional[str]) -> Optional[str]:
    """
    Извлечение ID видео из YouTube ссылки

    Строка должна целиком совпадать с одним из известных форматов,
    частичных совпадений не бывает.

    Args:
        url: Ссылка в любом поддерживаемом формате

    Returns:
        ID видео из 11 символов или None
    """
    if not url:
        return None
    url = url.strip()
    for pattern in YOUTUBE_URL_PATTERNS:
        match = pattern.fullmatch(url)
        if match:
            return match.group(1)
    return None


def is_youtube_url(url: Optional[str]) -> bool:
    """Проверка, поддерживается ли ссылка"""
    return extract_video_id(url) is not None


def normalize_url(url: Optional[str]) -> Result[VideoIdentifier]:
    """
    Нормализация YouTube ссылки

    youtube.com/watch?v=ID&t=10 -> https://www.youtube.com/watch?v=ID
    youtu.be/ID                 -> https://www.youtube.com/watch?v=ID
    youtube.com/shorts/ID       -> https://www.youtube.com/watch?v=ID
    m.youtube.com/watch?v=ID    -> https://www.youtube.com/watch?v=ID

    Все остальные параметры запроса отбрасываются, поэтому равнозначные
    ссылки дают одинаковый результат.

    Args:
        url: Ссылка от пользователя

    Returns:
        Result с VideoIdentifier или ошибкой invalid-url
    """
    video_id = extract_video_id(url)
    if video_id is None:
        return Result.fail(invalid_url_error(url or ""))
    return Result.ok(VideoIdentifier.from_video_id(video_id, original_url=url.strip()))


def extract_first_argument(args: Optional[str]) -> Optional[str]:
    """
    Первый аргумент команды

    "/yt https://youtu.be/ID лишнее" -> args="https://youtu.be/ID лишнее" -> "https://youtu.be/ID"
    """
    if not args:
        return None
    parts = args.split()
    return parts[0] if parts else None


def parse_extra_args(raw: Optional[str]) -> List[str]:
    """
    Разбор строки дополнительных флагов yt-dlp

    Разделитель - пробелы, одинарные и двойные кавычки группируют
    сегмент с пробелами и убираются. Обратный слэш не экранирует,
    чтобы пути Windows проходили как есть.

    Args:
        raw: Например '--proxy "socks5://127.0.0.1:1080" --sleep-interval 2'

    Returns:
        Список флагов (пустой для пустой строки)

    Raises:
        ValueError: Незакрытая кавычка
    """
    if not raw or not raw.strip():
        return []
    lexer = shlex.shlex(raw, posix=True)
    lexer.whitespace_split = True
    lexer.escape = ''
    lexer.commenters = ''
    return list(lexer)
