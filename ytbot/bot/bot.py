"""
Основной модуль бота - роутер команд и сборка зависимостей
"""
import logging
from typing import Optional

from aiogram import Bot, Dispatcher, F, Router, types
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.filters import Command, CommandObject

from ytbot.config import Settings, load_settings
from ytbot.models.errors import format_error_for_logging
from ytbot.services import LocalFileSystem, TelegramGateway, YtDlpService
from ytbot.use_cases import AcquireVideoUseCase, DownloadAndSendVideoUseCase
from ytbot.utils.utils import extract_first_argument

logger = logging.getLogger(__name__)

START_TEXT = (
    "👋 Привет! Я скачиваю видео с YouTube и присылаю их прямо в чат.\n\n"
    "Отправь /yt и ссылку на видео.\n"
    "Список команд: /help"
)

HELP_TEXT = (
    "Доступные команды:\n"
    "/start - приветствие\n"
    "/help - эта справка\n"
    "/echo <текст> - повторить текст\n"
    "/yt <ссылка> - скачать видео с YouTube\n\n"
    "Поддерживаемые ссылки:\n"
    "• youtube.com/watch?v=VIDEO_ID\n"
    "• youtu.be/VIDEO_ID\n"
    "• youtube.com/shorts/VIDEO_ID\n"
    "• m.youtube.com/watch?v=VIDEO_ID"
)

ECHO_USAGE_TEXT = "Укажите текст. Использование: /echo <текст>"
UNKNOWN_COMMAND_TEXT = "Неизвестная команда. Список команд: /help"

GROUP_CHAT_TYPES = ('group', 'supergroup')

router = Router()


def reply_target(message: types.Message) -> Optional[int]:
    """В группах отвечаем на исходное сообщение, в личке пишем просто в чат"""
    if message.chat.type in GROUP_CHAT_TYPES:
        return message.message_id
    return None


async def _answer(message: types.Message, text: str):
    await message.bot.send_message(
        chat_id=message.chat.id,
        text=text,
        reply_parameters=(
            types.ReplyParameters(message_id=message.message_id, allow_sending_without_reply=True)
            if reply_target(message) is not None else None
        )
    )


# ========== Handlers ==========

@router.message(Command("start"))
async def handle_start(message: types.Message):
    """Обработчик команды /start"""
    await _answer(message, START_TEXT)


@router.message(Command("help"))
async def handle_help(message: types.Message):
    """Обработчик команды /help"""
    await _answer(message, HELP_TEXT)


@router.message(Command("echo"))
async def handle_echo(message: types.Message, command: CommandObject):
    """Обработчик команды /echo"""
    text = (command.args or "").strip()
    await _answer(message, text or ECHO_USAGE_TEXT)


@router.message(Command("yt", "youtube"))
async def handle_youtube(
    message: types.Message,
    command: CommandObject,
    download_use_case: DownloadAndSendVideoUseCase
):
    """Обработчик команды /yt <ссылка>"""
    url = extract_first_argument(command.args)
    logger.info(f"[Bot] /yt от chat_id={message.chat.id}: {url}")
    result = await download_use_case.execute(url, message.chat.id, reply_target(message))
    if result.is_error():
        logger.info(f"[Bot] /yt завершилась ошибкой: {format_error_for_logging(result.error)}")


@router.message(F.text.startswith("/"))
async def handle_unknown_command(message: types.Message):
    """Неизвестная команда"""
    await _answer(message, UNKNOWN_COMMAND_TEXT)


# ========== Wiring ==========

def create_dispatcher(bot: Bot, settings: Settings) -> Dispatcher:
    """
    Сборка диспетчера с зависимостями

    Use case передается в обработчики через workflow data диспетчера.
    """
    gateway = YtDlpService(
        tool_path=settings.yt_dlp_path,
        cookies_path=settings.yt_dlp_cookies_path,
        extra_args=settings.yt_dlp_extra_args
    )
    if not gateway.is_tool_installed():
        logger.warning(f"⚠️ yt-dlp не найден по пути '{settings.yt_dlp_path}', команда /yt работать не будет")

    acquire_use_case = AcquireVideoUseCase(
        gateway=gateway,
        file_system=LocalFileSystem(),
        download_dir=settings.download_dir,
        max_duration_minutes=settings.max_video_duration_minutes
    )

    dp = Dispatcher()
    dp["download_use_case"] = DownloadAndSendVideoUseCase(acquire_use_case, TelegramGateway(bot))
    dp.include_router(router)
    return dp


async def main():
    """Запуск бота"""
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    problems = settings.validate()
    for problem in problems:
        logger.error(f"❌ {format_error_for_logging(problem)}")
    if not settings.bot_token:
        raise ValueError("BOT_TOKEN не найден в .env файле! Создайте .env файл с BOT_TOKEN=ваш_токен")

    settings.log_summary()

    # Увеличенный таймаут для загрузки видео до 50 MB
    session = AiohttpSession(timeout=600)
    bot = Bot(token=settings.bot_token, session=session)
    dp = create_dispatcher(bot, settings)

    logger.info("Бот запущен!")
    logger.info("Ожидаю обновления...")
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
