"""
Сервисы: контракты внешних систем и их адаптеры
"""
from .base import UrlValidation, VideoGateway, MessagingGateway, FileSystemGateway
from .ytdlp_service import YtDlpService
from .file_system import LocalFileSystem
from .telegram_gateway import TelegramGateway

__all__ = [
    'UrlValidation',
    'VideoGateway',
    'MessagingGateway',
    'FileSystemGateway',
    'YtDlpService',
    'LocalFileSystem',
    'TelegramGateway',
]
