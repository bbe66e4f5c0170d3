"""
TelegramGateway - MessagingGateway поверх aiogram Bot
"""
import logging
from typing import Optional

from aiogram import Bot, types
from aiogram.exceptions import TelegramAPIError
from aiogram.types import FSInputFile

from ytbot.models.errors import send_message_error, upload_error
from ytbot.models.result import Result
from ytbot.services.base import MessagingGateway

logger = logging.getLogger(__name__)

# Лимит Telegram на длину подписи к медиа
MAX_CAPTION_LENGTH = 1024


def _reply_parameters(reply_to: Optional[int]) -> Optional[types.ReplyParameters]:
    if reply_to is None:
        return None
    return types.ReplyParameters(message_id=reply_to, allow_sending_without_reply=True)


class TelegramGateway(MessagingGateway):
    """
    Отправка сообщений и видео через Telegram Bot API

    Исключения aiogram не выходят наружу, они превращаются в transport-error.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_text(self, chat_id: int, text: str, reply_to: Optional[int] = None) -> Result[int]:
        try:
            message = await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                reply_parameters=_reply_parameters(reply_to)
            )
        except TelegramAPIError as e:
            logger.error(f"[TelegramGateway] ❌ Ошибка отправки сообщения в {chat_id}: {e}")
            return Result.fail(send_message_error(chat_id, str(e)))
        except Exception as e:
            logger.error(f"[TelegramGateway] ❌ Неожиданная ошибка отправки сообщения в {chat_id}: {e}", exc_info=True)
            return Result.fail(send_message_error(chat_id, str(e)))
        return Result.ok(message.message_id)

    async def send_file(
        self,
        chat_id: int,
        file_path: str,
        caption: Optional[str] = None,
        reply_to: Optional[int] = None,
        duration: Optional[int] = None
    ) -> Result[int]:
        if caption and len(caption) > MAX_CAPTION_LENGTH:
            caption = caption[:MAX_CAPTION_LENGTH - 1] + "…"

        logger.info(f"[TelegramGateway] Отправляю видео {file_path} в {chat_id}")
        try:
            message = await self.bot.send_video(
                chat_id=chat_id,
                video=FSInputFile(file_path),
                caption=caption,
                duration=duration or None,
                supports_streaming=True,
                reply_parameters=_reply_parameters(reply_to)
            )
        except TelegramAPIError as e:
            logger.error(f"[TelegramGateway] ❌ Ошибка загрузки видео в {chat_id}: {e}")
            return Result.fail(upload_error(chat_id, str(e)))
        except Exception as e:
            logger.error(f"[TelegramGateway] ❌ Неожиданная ошибка загрузки видео в {chat_id}: {e}", exc_info=True)
            return Result.fail(upload_error(chat_id, str(e)))

        logger.info(f"[TelegramGateway] ✅ Видео отправлено (message_id={message.message_id})")
        return Result.ok(message.message_id)

    async def send_progress(self, chat_id: int, action: str) -> Result[bool]:
        try:
            await self.bot.send_chat_action(chat_id=chat_id, action=action)
        except TelegramAPIError as e:
            logger.warning(f"[TelegramGateway] ⚠️ Не удалось отправить индикатор '{action}' в {chat_id}: {e}")
            return Result.fail(send_message_error(chat_id, str(e)))
        except Exception as e:
            logger.error(f"[TelegramGateway] ❌ Неожиданная ошибка индикатора '{action}' в {chat_id}: {e}", exc_info=True)
            return Result.fail(send_message_error(chat_id, str(e)))
        return Result.ok(True)
