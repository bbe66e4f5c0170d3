"""
Конфигурация бота из переменных окружения (.env)
"""
import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from ytbot.models.errors import DomainError, invalid_configuration_error, missing_bot_token_error
from ytbot.utils.utils import parse_extra_args

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_DIR = "/tmp/ytbot-downloads"
DEFAULT_YT_DLP_PATH = "yt-dlp"
DEFAULT_MAX_VIDEO_DURATION_MINUTES = 15
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Settings:
    """
    Настройки бота

    Attributes:
        bot_token: Токен Telegram бота (BOT_TOKEN)
        download_dir: Директория для временных файлов (TEMP_DOWNLOAD_DIR)
        yt_dlp_path: Путь к yt-dlp (YT_DLP_PATH)
        yt_dlp_cookies_path: Файл cookies для yt-dlp (YT_DLP_COOKIES_PATH)
        yt_dlp_extra_args: Дополнительные флаги yt-dlp (YT_DLP_EXTRA_ARGS)
        max_video_duration_minutes: Максимальная длительность (MAX_VIDEO_DURATION_MINUTES)
        log_level: Уровень логирования (LOG_LEVEL)
    """
    bot_token: Optional[str] = None
    download_dir: str = DEFAULT_DOWNLOAD_DIR
    yt_dlp_path: str = DEFAULT_YT_DLP_PATH
    yt_dlp_cookies_path: Optional[str] = None
    yt_dlp_extra_args: List[str] = field(default_factory=list)
    max_video_duration_minutes: int = DEFAULT_MAX_VIDEO_DURATION_MINUTES
    log_level: str = DEFAULT_LOG_LEVEL
    errors: List[DomainError] = field(default_factory=list, repr=False)

    def validate(self) -> List[DomainError]:
        """Список ошибок конфигурации (пустой, если все в порядке)"""
        problems = list(self.errors)
        if not self.bot_token:
            problems.append(missing_bot_token_error())
        return problems

    def log_summary(self):
        """Вывести настройки в лог, токен замаскирован"""
        token = f"{self.bot_token[:4]}***" if self.bot_token else "не задан"
        logger.info("Конфигурация бота:")
        logger.info(f"  BOT_TOKEN: {token}")
        logger.info(f"  TEMP_DOWNLOAD_DIR: {self.download_dir}")
        logger.info(f"  YT_DLP_PATH: {self.yt_dlp_path}")
        logger.info(f"  YT_DLP_COOKIES_PATH: {'задан' if self.yt_dlp_cookies_path else 'не задан'}")
        logger.info(f"  YT_DLP_EXTRA_ARGS: {len(self.yt_dlp_extra_args)} флаг(ов)")
        logger.info(f"  MAX_VIDEO_DURATION_MINUTES: {self.max_video_duration_minutes}")


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_duration(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_MAX_VIDEO_DURATION_MINUTES
    try:
        value = int(raw)
    except ValueError:
        logger.warning(
            f"⚠️ MAX_VIDEO_DURATION_MINUTES='{raw}' не число, "
            f"используется {DEFAULT_MAX_VIDEO_DURATION_MINUTES}"
        )
        return DEFAULT_MAX_VIDEO_DURATION_MINUTES
    if value <= 0:
        logger.warning(
            f"⚠️ MAX_VIDEO_DURATION_MINUTES={value} должен быть больше 0, "
            f"используется {DEFAULT_MAX_VIDEO_DURATION_MINUTES}"
        )
        return DEFAULT_MAX_VIDEO_DURATION_MINUTES
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Загрузка настроек

    Args:
        env: Источник переменных. По умолчанию .env + os.environ

    Returns:
        Settings. Ошибки разбора накапливаются и доступны через validate()
    """
    if env is None:
        load_dotenv()
        env = os.environ

    errors = []
    raw_extra_args = _get(env, "YT_DLP_EXTRA_ARGS")
    try:
        extra_args = parse_extra_args(raw_extra_args)
    except ValueError as e:
        logger.warning(f"⚠️ Не удалось разобрать YT_DLP_EXTRA_ARGS: {e}")
        errors.append(invalid_configuration_error("YT_DLP_EXTRA_ARGS", str(e)))
        extra_args = []

    return Settings(
        bot_token=_get(env, "BOT_TOKEN"),
        download_dir=_get(env, "TEMP_DOWNLOAD_DIR") or DEFAULT_DOWNLOAD_DIR,
        yt_dlp_path=_get(env, "YT_DLP_PATH") or DEFAULT_YT_DLP_PATH,
        yt_dlp_cookies_path=_get(env, "YT_DLP_COOKIES_PATH"),
        yt_dlp_extra_args=extra_args,
        max_video_duration_minutes=_parse_duration(_get(env, "MAX_VIDEO_DURATION_MINUTES")),
        log_level=(_get(env, "LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        errors=errors
    )
