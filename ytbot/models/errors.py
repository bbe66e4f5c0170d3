"""
Доменные ошибки бота
Каждая ошибка создается один раз в месте сбоя и передается наверх без изменений
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Категории ошибок (используются только для группировки и логов)"""
    VALIDATION = 'validation'
    SOURCE = 'source-error'
    DOWNLOAD = 'download-error'
    TRANSPORT = 'transport-error'
    CONFIGURATION = 'configuration-error'
    SYSTEM = 'system-error'


class ErrorCode(str, Enum):
    """Конкретные коды ошибок - по ним выбирается текст для пользователя"""
    INVALID_URL = 'invalid-url'
    MISSING_URL = 'missing-url'
    VIDEO_UNAVAILABLE = 'video-unavailable'
    VIDEO_TOO_LONG = 'video-too-long'
    FILE_TOO_LARGE = 'file-too-large'
    METADATA_FETCH_FAILED = 'metadata-fetch-failed'
    AUTHENTICATION_REQUIRED = 'authentication-required'
    DOWNLOAD_FAILED = 'download-failed'
    TOOL_NOT_FOUND = 'tool-not-found'
    SEND_MESSAGE_FAILED = 'send-message-failed'
    UPLOAD_FAILED = 'upload-failed'
    MISSING_BOT_TOKEN = 'missing-bot-token'
    INVALID_CONFIGURATION = 'invalid-configuration'
    PATH_NOT_DIRECTORY = 'path-not-directory'
    DIRECTORY_CREATION_FAILED = 'directory-creation-failed'
    FILE_DELETION_FAILED = 'file-deletion-failed'
    FILE_NOT_FOUND = 'file-not-found'
    UNEXPECTED_ERROR = 'unexpected-error'


SUPPORTED_URL_FORMATS = [
    'youtube.com/watch?v=VIDEO_ID',
    'youtu.be/VIDEO_ID',
    'youtube.com/shorts/VIDEO_ID',
    'm.youtube.com/watch?v=VIDEO_ID',
]

AUTHENTICATION_SUGGESTED_FIXES = [
    'Обновите cookies и убедитесь, что аккаунт залогинен',
    'Выгрузите cookies через yt-dlp --cookies-from-browser на машине с активной сессией',
    'Используйте другую сеть или прокси (резидентные IP работают лучше)',
    'Обновите yt-dlp до последней версии',
]


@dataclass(frozen=True)
class DomainError:
    """
    Типизированная ошибка домена

    Attributes:
        category: Категория ошибки (ErrorCategory)
        code: Конкретный код ошибки (ErrorCode)
        message: Сообщение для человека
        context: Произвольный контекст (video_id, пути, причины)
        created_at: Время создания ошибки (UTC)
    """
    category: ErrorCategory
    code: ErrorCode
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not isinstance(self.category, ErrorCategory):
            raise ValueError(f"Неизвестная категория ошибки: {self.category!r}")
        if not isinstance(self.code, ErrorCode):
            raise ValueError(f"Неизвестный код ошибки: {self.code!r}")
        if not self.message:
            raise ValueError("Сообщение об ошибке не может быть пустым")

    def __str__(self) -> str:
        return format_error_for_logging(self)


# ========== Validation ==========

def invalid_url_error(provided_url: str) -> DomainError:
    return DomainError(
        ErrorCategory.VALIDATION,
        ErrorCode.INVALID_URL,
        "Ссылка не похожа на YouTube видео.",
        {'provided_url': provided_url, 'supported_formats': list(SUPPORTED_URL_FORMATS)}
    )


def missing_url_error() -> DomainError:
    return DomainError(
        ErrorCategory.VALIDATION,
        ErrorCode.MISSING_URL,
        "Укажите ссылку на YouTube видео. Использование: /yt <ссылка>",
        {'usage_example': '/yt https://www.youtube.com/watch?v=dQw4w9WgXcQ'}
    )


def video_too_long_error(duration_seconds: int, max_duration_minutes: int) -> DomainError:
    return DomainError(
        ErrorCategory.VALIDATION,
        ErrorCode.VIDEO_TOO_LONG,
        f"Видео длится {duration_seconds // 60} мин., "
        f"а максимально допустимо {max_duration_minutes} мин.",
        {'duration_seconds': duration_seconds, 'max_duration_minutes': max_duration_minutes}
    )


def file_too_large_error(
    file_size_bytes: int,
    max_size_bytes: int,
    file_path: Optional[str] = None
) -> DomainError:
    """
    Файл больше лимита Telegram

    Args:
        file_size_bytes: Фактический размер файла
        max_size_bytes: Лимит
        file_path: Путь к уже скачанному файлу (нужен для очистки)
    """
    context = {'file_size_bytes': file_size_bytes, 'max_size_bytes': max_size_bytes}
    if file_path:
        context['file_path'] = file_path
    return DomainError(
        ErrorCategory.VALIDATION,
        ErrorCode.FILE_TOO_LARGE,
        f"Размер видео ({file_size_bytes / (1024 * 1024):.1f} MB) "
        f"превышает лимит Telegram ({max_size_bytes / (1024 * 1024):.1f} MB).",
        context
    )


# ========== Source (YouTube) ==========

def video_unavailable_error(video_id: str, reason: str) -> DomainError:
    return DomainError(
        ErrorCategory.VALIDATION,
        ErrorCode.VIDEO_UNAVAILABLE,
        f"Видео недоступно: {reason}",
        {'video_id': video_id, 'reason': reason}
    )


def metadata_fetch_error(video_id: str, reason: str) -> DomainError:
    return DomainError(
        ErrorCategory.SOURCE,
        ErrorCode.METADATA_FETCH_FAILED,
        f"Не удалось получить информацию о видео: {reason}",
        {'video_id': video_id, 'reason': reason}
    )


def authentication_required_error(video_id: str, reason: str) -> DomainError:
    """
    YouTube требует подтверждения "я не бот" или входа в аккаунт

    Обычно это значит, что IP попал под проверку или cookies устарели.
    В контексте лежит список советов, который показывается пользователю.
    """
    return DomainError(
        ErrorCategory.SOURCE,
        ErrorCode.AUTHENTICATION_REQUIRED,
        f"YouTube требует подтверждения входа: {reason}",
        {
            'video_id': video_id,
            'reason': reason,
            'suggested_fixes': list(AUTHENTICATION_SUGGESTED_FIXES),
        }
    )


# ========== Download ==========

def download_failed_error(video_id: str, reason: str) -> DomainError:
    return DomainError(
        ErrorCategory.DOWNLOAD,
        ErrorCode.DOWNLOAD_FAILED,
        f"Не удалось скачать видео: {reason}",
        {'video_id': video_id, 'reason': reason}
    )


def tool_not_found_error(tool_path: str) -> DomainError:
    return DomainError(
        ErrorCategory.DOWNLOAD,
        ErrorCode.TOOL_NOT_FOUND,
        "yt-dlp не установлен или не найден. Установите его: pip install yt-dlp",
        {'expected_path': tool_path}
    )


# ========== Transport (Telegram) ==========

def send_message_error(chat_id: int, reason: str) -> DomainError:
    return DomainError(
        ErrorCategory.TRANSPORT,
        ErrorCode.SEND_MESSAGE_FAILED,
        f"Не удалось отправить сообщение: {reason}",
        {'chat_id': chat_id, 'reason': reason}
    )


def upload_error(chat_id: int, reason: str) -> DomainError:
    return DomainError(
        ErrorCategory.TRANSPORT,
        ErrorCode.UPLOAD_FAILED,
        f"Не удалось загрузить видео в Telegram: {reason}",
        {'chat_id': chat_id, 'reason': reason}
    )


# ========== Configuration ==========

def missing_bot_token_error() -> DomainError:
    return DomainError(
        ErrorCategory.CONFIGURATION,
        ErrorCode.MISSING_BOT_TOKEN,
        "Переменная окружения BOT_TOKEN не задана.",
        {'required_env_var': 'BOT_TOKEN'}
    )


def invalid_configuration_error(env_var: str, reason: str) -> DomainError:
    return DomainError(
        ErrorCategory.CONFIGURATION,
        ErrorCode.INVALID_CONFIGURATION,
        f"Некорректное значение {env_var}: {reason}",
        {'env_var': env_var, 'reason': reason}
    )


# ========== System ==========

def system_error(code: ErrorCode, message: str, path: str) -> DomainError:
    """Ошибка файловой системы с путем в контексте"""
    return DomainError(ErrorCategory.SYSTEM, code, message, {'path': path})


def unexpected_error(exception: BaseException, operation: str) -> DomainError:
    """Обертка для неожиданного исключения из внешнего инструмента или адаптера"""
    return DomainError(
        ErrorCategory.SYSTEM,
        ErrorCode.UNEXPECTED_ERROR,
        f"Неожиданная ошибка при операции '{operation}': {exception}",
        {
            'operation': operation,
            'exception_type': type(exception).__name__,
            'exception_message': str(exception),
        }
    )


# ========== Formatting ==========

def format_error_for_user(error: DomainError) -> str:
    """
    Текст ошибки для отправки в чат

    Для authentication-required добавляется список советов.
    """
    message = f"❌ {error.message}"
    if error.code == ErrorCode.AUTHENTICATION_REQUIRED:
        fixes = error.context.get('suggested_fixes') or []
        if fixes:
            message += "\n\nПопробуйте:\n" + "\n".join(f"• {fix}" for fix in fixes)
    return message


def format_error_for_logging(error: DomainError) -> str:
    """Строка для логов: [category/code] message | Context: {...}"""
    return f"[{error.category.value}/{error.code.value}] {error.message} | Context: {error.context!r}"
