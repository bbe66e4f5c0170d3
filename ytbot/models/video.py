"""
Модели видео: идентификатор, метаданные и скачанный файл
Все три неизменяемы, инварианты проверяются при создании
"""
import os
import re
from dataclasses import dataclass
from typing import Optional

VIDEO_ID_LENGTH = 11
VIDEO_ID_PATTERN = re.compile(r'[A-Za-z0-9_-]{11}')
CANONICAL_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"

MAX_TITLE_LENGTH = 256
UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_UPLOADER = "Unknown Uploader"


@dataclass(frozen=True)
class VideoIdentifier:
    """
    Нормализованная ссылка на YouTube видео

    Создается URL-нормализатором (ytbot.utils.normalize_url).

    Attributes:
        video_id: ID видео из 11 символов
        canonical_url: Каноническая ссылка вида https://www.youtube.com/watch?v=ID
        original_url: Ссылка в том виде, в котором ее прислал пользователь
    """
    video_id: str
    canonical_url: str
    original_url: str = ""

    def __post_init__(self):
        if not isinstance(self.video_id, str) or not VIDEO_ID_PATTERN.fullmatch(self.video_id):
            raise ValueError(f"Некорректный ID видео: {self.video_id!r}")
        if self.canonical_url != CANONICAL_URL_TEMPLATE.format(video_id=self.video_id):
            raise ValueError(f"Неканоническая ссылка для {self.video_id}: {self.canonical_url!r}")

    @classmethod
    def from_video_id(cls, video_id: str, original_url: str = "") -> 'VideoIdentifier':
        return cls(
            video_id=video_id,
            canonical_url=CANONICAL_URL_TEMPLATE.format(video_id=video_id),
            original_url=original_url or CANONICAL_URL_TEMPLATE.format(video_id=video_id)
        )


@dataclass(frozen=True)
class VideoMetadata:
    """
    Метаданные видео, полученные до скачивания

    Позволяют проверить длительность и доступность, не скачивая файл.

    Attributes:
        identifier: VideoIdentifier видео
        title: Название (обрезается до 256 символов)
        duration_seconds: Длительность в секундах
        uploader: Имя канала
        thumbnail_url: Ссылка на превью или None
        is_available: Можно ли скачивать видео
    """
    identifier: VideoIdentifier
    title: str
    duration_seconds: int
    uploader: str
    thumbnail_url: Optional[str] = None
    is_available: bool = True

    def __post_init__(self):
        title = (self.title or "").strip() or UNKNOWN_TITLE
        object.__setattr__(self, 'title', title[:MAX_TITLE_LENGTH])
        object.__setattr__(self, 'uploader', (self.uploader or "").strip() or UNKNOWN_UPLOADER)

        if isinstance(self.duration_seconds, bool) or not isinstance(self.duration_seconds, int):
            raise ValueError(f"Длительность должна быть целым числом: {self.duration_seconds!r}")
        if self.duration_seconds < 0:
            raise ValueError(f"Длительность не может быть отрицательной: {self.duration_seconds}")
        if not isinstance(self.is_available, bool):
            raise ValueError(f"is_available должен быть bool: {self.is_available!r}")

    @property
    def video_id(self) -> str:
        return self.identifier.video_id

    @property
    def duration_display(self) -> str:
        """Длительность в формате m:ss"""
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    def format_caption(self) -> str:
        """Подпись к видео для Telegram"""
        return f"{self.title}\nby {self.uploader} ({self.duration_display})"


@dataclass(frozen=True)
class VideoFile:
    """
    Скачанный видеофайл

    Attributes:
        path: Абсолютный путь к файлу
        size_bytes: Размер в байтах (> 0)
    """
    path: str
    size_bytes: int

    def __post_init__(self):
        if not self.path:
            raise ValueError("Путь к файлу не может быть пустым")
        object.__setattr__(self, 'path', os.path.abspath(self.path))
        if isinstance(self.size_bytes, bool) or not isinstance(self.size_bytes, int) or self.size_bytes <= 0:
            raise ValueError(f"Размер файла должен быть положительным: {self.size_bytes!r}")

    @property
    def extension(self) -> str:
        """Расширение в нижнем регистре без точки ('' если его нет)"""
        return os.path.splitext(self.path)[1].lstrip('.').lower()

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)
