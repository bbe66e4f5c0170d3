"""
Use case: Скачать YouTube видео и отправить его в чат
"""
import asyncio
import logging
from typing import Optional

from ytbot.models.errors import DomainError, format_error_for_user, missing_url_error
from ytbot.models.result import Result
from ytbot.services.base import MessagingGateway
from ytbot.use_cases.acquire_video import AcquireVideoUseCase

logger = logging.getLogger(__name__)


class DownloadAndSendVideoUseCase:
    """
    Use case для команды /yt

    Скачивание выполняется в отдельном потоке, чтобы не блокировать
    event loop бота. Файл удаляется после отправки в любом случае.
    """

    def __init__(self, acquire_use_case: AcquireVideoUseCase, messenger: MessagingGateway):
        """
        Args:
            acquire_use_case: Синхронный use case получения видео
            messenger: Отправка сообщений в Telegram
        """
        self.acquire_use_case = acquire_use_case
        self.messenger = messenger

    async def execute(
        self,
        raw_url: Optional[str],
        chat_id: int,
        reply_to_message_id: Optional[int] = None
    ) -> Result[int]:
        """
        Скачать видео и отправить

        Args:
            raw_url: Ссылка из команды (может отсутствовать)
            chat_id: ID чата
            reply_to_message_id: ID сообщения для ответа (в группах)

        Returns:
            Result с message_id отправленного видео или ошибкой
        """
        if raw_url is None or not raw_url.strip():
            return await self._reply_error(missing_url_error(), chat_id, reply_to_message_id)

        await self.messenger.send_progress(chat_id, 'typing')

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(
            None,
            self.acquire_use_case.execute,
            raw_url,
            chat_id,
            reply_to_message_id
        )

        if not outcome.is_success():
            return await self._reply_error(outcome.error, chat_id, reply_to_message_id)

        try:
            await self.messenger.send_progress(chat_id, 'upload_video')
            sent = await self.messenger.send_file(
                chat_id,
                outcome.video_file.path,
                caption=outcome.metadata.format_caption(),
                reply_to=reply_to_message_id,
                duration=outcome.metadata.duration_seconds
            )
        finally:
            self.acquire_use_case.cleanup(outcome)

        if sent.is_error():
            await self.messenger.send_text(chat_id, format_error_for_user(sent.error), reply_to_message_id)
            return sent

        logger.info(f"[DownloadAndSend] ✅ Видео {outcome.metadata.video_id} отправлено в {chat_id}")
        return sent

    async def _reply_error(self, error: DomainError, chat_id: int, reply_to: Optional[int]) -> Result[int]:
        await self.messenger.send_text(chat_id, format_error_for_user(error), reply_to)
        return Result.fail(error)
