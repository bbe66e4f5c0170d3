"""
AcquisitionRequest - агрегат запроса на скачивание видео
Единственный легальный способ изменить запрос - методы переходов состояния
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ytbot.models.constraints import is_downloadable
from ytbot.models.video import VideoFile, VideoIdentifier, VideoMetadata


class AcquisitionStatus(str, Enum):
    """Состояния запроса на скачивание"""
    PENDING = 'pending'
    FETCHING_METADATA = 'fetching-metadata'
    VALIDATING = 'validating'
    DOWNLOADING = 'downloading'
    COMPLETED = 'completed'
    FAILED = 'failed'


TERMINAL_STATUSES = frozenset({AcquisitionStatus.COMPLETED, AcquisitionStatus.FAILED})


class InvalidTransitionError(RuntimeError):
    """Переход состояния вызван не по порядку (ошибка программиста)"""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AcquisitionRequest:
    """
    Запрос на скачивание одного видео для одного чата

    Жизненный цикл:
        pending -> fetching-metadata -> validating -> downloading -> completed
        failed достижим из любого нетерминального состояния

    Повторов из failed нет: единственный повтор (fallback формата)
    происходит внутри YtDlpService во время downloading.

    Attributes:
        request_id: Уникальный ID запроса
        identifier: VideoIdentifier запрошенного видео
        chat_id: ID чата, из которого пришла команда
        reply_to_message_id: ID сообщения для ответа (None в личке)
        max_duration_minutes: Лимит длительности в минутах
        status: Текущее состояние (AcquisitionStatus)
        metadata: VideoMetadata, начиная с validating
        video_file: VideoFile, только в completed
        error_message: Текст ошибки, только в failed
    """

    def __init__(
        self,
        identifier: VideoIdentifier,
        chat_id: int,
        max_duration_minutes: int,
        reply_to_message_id: Optional[int] = None
    ):
        if not isinstance(identifier, VideoIdentifier):
            raise ValueError(f"identifier должен быть VideoIdentifier: {identifier!r}")
        if isinstance(max_duration_minutes, bool) or not isinstance(max_duration_minutes, int) or max_duration_minutes <= 0:
            raise ValueError(f"max_duration_minutes должен быть положительным целым: {max_duration_minutes!r}")

        self.request_id = uuid.uuid4()
        self.identifier = identifier
        self.chat_id = chat_id
        self.reply_to_message_id = reply_to_message_id
        self.max_duration_minutes = max_duration_minutes
        self.status = AcquisitionStatus.PENDING
        self.metadata: Optional[VideoMetadata] = None
        self.video_file: Optional[VideoFile] = None
        self.error_message: Optional[str] = None
        self.created_at = _now()
        self.updated_at = self.created_at

    def __repr__(self) -> str:
        return (
            f"AcquisitionRequest(id={self.request_id}, video_id={self.identifier.video_id}, "
            f"status={self.status.value})"
        )

    # ========== Transitions ==========

    def start_fetching_metadata(self):
        """pending -> fetching-metadata"""
        self._require_status(AcquisitionStatus.PENDING)
        self._set_status(AcquisitionStatus.FETCHING_METADATA)

    def attach_metadata(self, metadata: VideoMetadata):
        """fetching-metadata -> validating, с сохранением метаданных"""
        self._require_status(AcquisitionStatus.FETCHING_METADATA)
        if not isinstance(metadata, VideoMetadata):
            raise ValueError(f"metadata должен быть VideoMetadata: {metadata!r}")
        self.metadata = metadata
        self._set_status(AcquisitionStatus.VALIDATING)

    def start_downloading(self):
        """
        validating -> downloading

        Переход разрешен только если метаданные проходят проверку ограничений.
        Вызывающий код должен сам проверить is_downloadable() и при отказе
        вызвать fail() с ошибкой валидатора.
        """
        self._require_status(AcquisitionStatus.VALIDATING)
        check = is_downloadable(self.metadata, self.max_duration_minutes)
        if check.is_error():
            raise InvalidTransitionError(
                f"Запрос {self.request_id} не проходит проверку ограничений: {check.error.code.value}"
            )
        self._set_status(AcquisitionStatus.DOWNLOADING)

    def complete(self, video_file: VideoFile):
        """downloading -> completed, с сохранением файла"""
        self._require_status(AcquisitionStatus.DOWNLOADING)
        if not isinstance(video_file, VideoFile):
            raise ValueError(f"video_file должен быть VideoFile: {video_file!r}")
        self.video_file = video_file
        self._set_status(AcquisitionStatus.COMPLETED)

    def fail(self, error_message: str):
        """любое нетерминальное состояние -> failed"""
        if self.is_terminal():
            raise InvalidTransitionError(
                f"Запрос {self.request_id} уже в терминальном состоянии {self.status.value}"
            )
        if not error_message:
            raise ValueError("Сообщение об ошибке не может быть пустым")
        self.error_message = error_message
        self._set_status(AcquisitionStatus.FAILED)

    # ========== Queries ==========

    def is_pending(self) -> bool:
        return self.status == AcquisitionStatus.PENDING

    def is_completed(self) -> bool:
        return self.status == AcquisitionStatus.COMPLETED

    def is_failed(self) -> bool:
        return self.status == AcquisitionStatus.FAILED

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def should_reply_to_original(self) -> bool:
        """Отвечать ли на исходное сообщение (в группах) или просто писать в чат"""
        return self.reply_to_message_id is not None

    # ========== Internal ==========

    def _require_status(self, expected: AcquisitionStatus):
        if self.status != expected:
            raise InvalidTransitionError(
                f"Запрос {self.request_id}: ожидалось состояние {expected.value}, текущее {self.status.value}"
            )

    def _set_status(self, status: AcquisitionStatus):
        self.status = status
        self.updated_at = _now()
