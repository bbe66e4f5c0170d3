"""
Контракты внешних систем: загрузчик видео, мессенджер, файловая система
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ytbot.models.result import Result
from ytbot.models.video import VideoFile, VideoIdentifier, VideoMetadata
from ytbot.utils.utils import normalize_url


@dataclass(frozen=True)
class UrlValidation:
    """
    Результат проверки ссылки

    Attributes:
        valid: Принята ли ссылка
        identifier: VideoIdentifier, если ссылка принята
        reason: Причина отказа, если не принята
    """
    valid: bool
    identifier: Optional[VideoIdentifier] = None
    reason: Optional[str] = None


class VideoGateway(ABC):
    """
    Контракт загрузчика видео

    Реализация: YtDlpService. В тестах подменяется фейком.
    """

    def validate_url(self, url: str) -> UrlValidation:
        """
        Проверка ссылки

        Загрузчик - граница доверия, поэтому проверка ссылки доступна через него.
        По умолчанию просто вызывает normalize_url.
        """
        result = normalize_url(url)
        if result.is_error():
            return UrlValidation(valid=False, reason=result.error.message)
        return UrlValidation(valid=True, identifier=result.value)

    @abstractmethod
    def fetch_metadata(self, identifier: VideoIdentifier) -> Result[VideoMetadata]:
        """
        Получить метаданные без скачивания

        Args:
            identifier: Нормализованная ссылка

        Returns:
            Result с VideoMetadata или ошибкой source-error
        """
        pass

    @abstractmethod
    def download_to_file(
        self,
        identifier: VideoIdentifier,
        target_dir: str,
        max_bytes: int
    ) -> Result[VideoFile]:
        """
        Скачать видео в директорию

        Args:
            identifier: Нормализованная ссылка
            target_dir: Директория для файла
            max_bytes: Максимальный размер итогового файла

        Returns:
            Result с VideoFile или ошибкой download-error / file-too-large
        """
        pass


class MessagingGateway(ABC):
    """
    Контракт мессенджера (асинхронный)

    Все методы возвращают Result и не бросают исключений наружу.
    """

    @abstractmethod
    async def send_text(self, chat_id: int, text: str, reply_to: Optional[int] = None) -> Result[int]:
        """Отправить текст, вернуть message_id"""
        pass

    @abstractmethod
    async def send_file(
        self,
        chat_id: int,
        file_path: str,
        caption: Optional[str] = None,
        reply_to: Optional[int] = None,
        duration: Optional[int] = None
    ) -> Result[int]:
        """Отправить видеофайл, вернуть message_id"""
        pass

    @abstractmethod
    async def send_progress(self, chat_id: int, action: str) -> Result[bool]:
        """Показать индикатор действия ('typing', 'upload_video')"""
        pass


class FileSystemGateway(ABC):
    """Контракт файловой системы, ошибки возвращаются как Result"""

    @abstractmethod
    def ensure_directory(self, path: str) -> Result[str]:
        pass

    @abstractmethod
    def delete_if_exists(self, path: str) -> Result[bool]:
        """True если файл был удален, False если его не было"""
        pass

    @abstractmethod
    def get_size(self, path: str) -> Result[int]:
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def delete_directory(self, path: str) -> Result[bool]:
        """Удалить директорию вместе с содержимым. True если она была"""
        pass
