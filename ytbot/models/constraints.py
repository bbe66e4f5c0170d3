"""
Проверка ограничений на видео: доступность, длительность, размер файла
Чистые функции без побочных эффектов
"""
from ytbot.models.errors import video_too_long_error, video_unavailable_error
from ytbot.models.result import Result
from ytbot.models.video import VideoFile, VideoMetadata

# Лимит Telegram Bot API на отправку файлов
TELEGRAM_MAX_UPLOAD_BYTES = 50 * 1024 * 1024


def is_downloadable(metadata: VideoMetadata, max_duration_minutes: int) -> Result[bool]:
    """
    Можно ли скачивать видео с такими метаданными

    Сначала проверяется доступность, потом длительность: недоступное видео
    отклоняется как недоступное, даже если оно еще и слишком длинное.

    Args:
        metadata: Метаданные видео
        max_duration_minutes: Максимальная длительность в минутах (> 0)

    Returns:
        Result.ok(True) или Result.fail с video-unavailable / video-too-long
    """
    if isinstance(max_duration_minutes, bool) or not isinstance(max_duration_minutes, int) or max_duration_minutes <= 0:
        raise ValueError(f"max_duration_minutes должен быть положительным целым: {max_duration_minutes!r}")

    if not metadata.is_available:
        return Result.fail(video_unavailable_error(metadata.video_id, "Видео недоступно для скачивания"))

    if metadata.duration_seconds > max_duration_minutes * 60:
        return Result.fail(video_too_long_error(metadata.duration_seconds, max_duration_minutes))

    return Result.ok(True)


def within_size_limit(video_file: VideoFile, max_size_bytes: int = TELEGRAM_MAX_UPLOAD_BYTES) -> bool:
    """Помещается ли файл в лимит загрузки Telegram"""
    return video_file.size_bytes <= max_size_bytes
