"""
Use case: Получение видео (метаданные -> проверка -> скачивание)
Синхронный, блокирует вызывающий поток на время работы yt-dlp
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from ytbot.models.acquisition_request import AcquisitionRequest
from ytbot.models.constraints import TELEGRAM_MAX_UPLOAD_BYTES, is_downloadable, within_size_limit
from ytbot.models.errors import (
    DomainError,
    file_too_large_error,
    format_error_for_logging,
    invalid_url_error,
    missing_url_error,
    unexpected_error,
)
from ytbot.models.result import Result
from ytbot.models.video import VideoFile, VideoMetadata
from ytbot.services.base import FileSystemGateway, VideoGateway

logger = logging.getLogger(__name__)


@dataclass
class AcquisitionOutcome:
    """
    Итог обработки одного запроса

    Attributes:
        request: Агрегат запроса (None если ссылку не удалось разобрать)
        metadata: Метаданные видео, если успели получить
        video_file: Скачанный файл при успехе
        error: DomainError при ошибке
        work_dir: Личная директория запроса с файлом (удаляется в cleanup)
    """
    request: Optional[AcquisitionRequest] = None
    metadata: Optional[VideoMetadata] = None
    video_file: Optional[VideoFile] = None
    error: Optional[DomainError] = None
    work_dir: Optional[str] = None

    def is_success(self) -> bool:
        return self.error is None and self.video_file is not None


class AcquireVideoUseCase:
    """
    Use case для получения видео по ссылке

    Ведет AcquisitionRequest по состояниям и останавливается на первой
    ошибке. Повторов здесь нет: единственный повтор (запасной формат)
    делает сам загрузчик.
    """

    def __init__(
        self,
        gateway: VideoGateway,
        file_system: FileSystemGateway,
        download_dir: str,
        max_duration_minutes: int,
        max_file_size_bytes: int = TELEGRAM_MAX_UPLOAD_BYTES
    ):
        """
        Args:
            gateway: Загрузчик видео (YtDlpService)
            file_system: Файловая система для временных файлов
            download_dir: Директория для скачивания
            max_duration_minutes: Максимальная длительность видео
            max_file_size_bytes: Максимальный размер файла (лимит Telegram)
        """
        self.gateway = gateway
        self.file_system = file_system
        self.download_dir = download_dir
        self.max_duration_minutes = max_duration_minutes
        self.max_file_size_bytes = max_file_size_bytes

    def execute(
        self,
        raw_url: Optional[str],
        chat_id: int,
        reply_to_message_id: Optional[int] = None
    ) -> AcquisitionOutcome:
        """
        Получить видео

        Args:
            raw_url: Ссылка из команды (может отсутствовать)
            chat_id: ID чата
            reply_to_message_id: ID сообщения для ответа (в группах)

        Returns:
            AcquisitionOutcome с файлом или ошибкой
        """
        if raw_url is None or not raw_url.strip():
            logger.info(f"[AcquireVideo] Ссылка не указана (chat_id={chat_id})")
            return AcquisitionOutcome(error=missing_url_error())

        validation = self.gateway.validate_url(raw_url)
        if not validation.valid:
            logger.info(f"[AcquireVideo] Некорректная ссылка: {raw_url}")
            return AcquisitionOutcome(error=invalid_url_error(raw_url.strip()))

        request = AcquisitionRequest(
            identifier=validation.identifier,
            chat_id=chat_id,
            max_duration_minutes=self.max_duration_minutes,
            reply_to_message_id=reply_to_message_id
        )
        logger.info(f"[AcquireVideo] Новый запрос {request.request_id} для {request.identifier.video_id}")

        # Метаданные
        request.start_fetching_metadata()
        metadata_result = self._call(lambda: self.gateway.fetch_metadata(request.identifier), 'fetch_metadata')
        if metadata_result.is_error():
            return self._fail(request, metadata_result.error)
        metadata = metadata_result.value
        request.attach_metadata(metadata)

        # Проверка ограничений
        check = is_downloadable(metadata, request.max_duration_minutes)
        if check.is_error():
            return self._fail(request, check.error, metadata=metadata)
        request.start_downloading()

        # Скачивание в личную директорию запроса: параллельные запросы
        # одного и того же видео не видят файлы друг друга
        directory = self.file_system.ensure_directory(self.download_dir)
        if directory.is_error():
            return self._fail(request, directory.error, metadata=metadata)
        work_dir = os.path.join(self.download_dir, request.request_id.hex)
        directory = self.file_system.ensure_directory(work_dir)
        if directory.is_error():
            return self._fail(request, directory.error, metadata=metadata)

        download_result = self._call(
            lambda: self.gateway.download_to_file(request.identifier, work_dir, self.max_file_size_bytes),
            'download_to_file'
        )
        if download_result.is_error():
            self._remove_work_dir(work_dir)
            return self._fail(request, download_result.error, metadata=metadata)
        video_file = download_result.value

        # Последняя проверка перед отправкой
        if not within_size_limit(video_file, self.max_file_size_bytes):
            self._remove_work_dir(work_dir)
            error = file_too_large_error(video_file.size_bytes, self.max_file_size_bytes, file_path=video_file.path)
            return self._fail(request, error, metadata=metadata)

        request.complete(video_file)
        logger.info(
            f"[AcquireVideo] ✅ Запрос {request.request_id} выполнен: "
            f"{video_file.path} ({video_file.size_mb:.2f} MB)"
        )
        return AcquisitionOutcome(request=request, metadata=metadata, video_file=video_file, work_dir=work_dir)

    def cleanup(self, outcome: AcquisitionOutcome) -> Result[bool]:
        """
        Удалить скачанный файл вместе с директорией запроса

        Вызывается всегда после попытки отправки, даже неудачной.
        Ошибка удаления только логируется.
        """
        if outcome.work_dir is not None:
            return self._remove_work_dir(outcome.work_dir)
        if outcome.video_file is None:
            return Result.ok(False)
        return self._delete(outcome.video_file.path)

    # ========== Internal ==========

    def _call(self, operation, name: str) -> Result:
        """Вызов загрузчика, неожиданное исключение превращается в system-error"""
        try:
            return operation()
        except Exception as e:
            logger.error(f"[AcquireVideo] ❌ Неожиданная ошибка в {name}: {e}", exc_info=True)
            return Result.fail(unexpected_error(e, name))

    def _fail(
        self,
        request: AcquisitionRequest,
        error: DomainError,
        metadata: Optional[VideoMetadata] = None
    ) -> AcquisitionOutcome:
        request.fail(error.message)
        logger.warning(f"[AcquireVideo] ❌ Запрос {request.request_id} завершился ошибкой: {format_error_for_logging(error)}")
        return AcquisitionOutcome(request=request, metadata=metadata, error=error)

    def _delete(self, path: str) -> Result[bool]:
        result = self.file_system.delete_if_exists(path)
        if result.is_error():
            logger.error(f"[AcquireVideo] ⚠️ Не удалось удалить временный файл: {format_error_for_logging(result.error)}")
        return result

    def _remove_work_dir(self, path: str) -> Result[bool]:
        result = self.file_system.delete_directory(path)
        if result.is_error():
            logger.error(f"[AcquireVideo] ⚠️ Не удалось удалить директорию запроса: {format_error_for_logging(result.error)}")
        return result
