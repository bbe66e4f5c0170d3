"""
YtDlpService - адаптер VideoGateway поверх утилиты yt-dlp
Вызывает yt-dlp как внешний процесс, без собственного таймаута
"""
import json
import logging
import os
import re
import subprocess
from typing import Any, Dict, List, Optional

from ytbot.models.constraints import within_size_limit
from ytbot.models.errors import (
    authentication_required_error,
    download_failed_error,
    file_too_large_error,
    metadata_fetch_error,
    tool_not_found_error,
    unexpected_error,
)
from ytbot.models.result import Result
from ytbot.models.video import VideoFile, VideoIdentifier, VideoMetadata
from ytbot.services.base import VideoGateway

logger = logging.getLogger(__name__)

# H.264 + AAC в MP4 до 720p: такие файлы Telegram проигрывает везде
PREFERRED_FORMAT_SELECTOR = (
    "bestvideo[height<=720][ext=mp4][vcodec^=avc1]+bestaudio[ext=m4a][acodec^=mp4a]"
    "/bestvideo[height<=720][vcodec^=avc1]+bestaudio[acodec^=mp4a]"
    "/best[height<=720][ext=mp4]"
    "/best"
)

# Запасной вариант до 480p, если основной селектор не сработал
FALLBACK_FORMAT_SELECTOR = (
    "best[height<=480][ext=mp4][vcodec^=avc1][acodec^=mp4a]"
    "/best[height<=480][ext=mp4]"
    "/best"
)

VIDEO_EXTENSIONS = ('.mp4', '.webm', '.mkv', '.mov')

# Отдельный поток формата до слияния: <id>.f136.mp4
FORMAT_STREAM_PATTERN = re.compile(r'\.f\d+\.')

# Фразы, по которым видно, что YouTube требует подтвердить "я не бот"
AUTHENTICATION_MARKERS = (
    "sign in to confirm you're not a bot",
    "confirm you're not a bot",
    "use --cookies-from-browser",
    "use --cookies",
)

# Значения поля availability, при которых скачать видео нельзя
UNAVAILABLE_AVAILABILITY = ('private', 'premium_only', 'subscriber_only', 'needs_auth')


def requires_authentication(output: Optional[str]) -> bool:
    """Есть ли в выводе yt-dlp признак проверки на бота"""
    if not output:
        return False
    lowered = output.lower()
    return any(marker in lowered for marker in AUTHENTICATION_MARKERS)


def _error_text(completed: subprocess.CompletedProcess) -> str:
    text = (completed.stderr or "").strip() or (completed.stdout or "").strip()
    return text or f"yt-dlp завершился с кодом {completed.returncode}"


class YtDlpService(VideoGateway):
    """
    Адаптер загрузчика поверх yt-dlp

    Ответственность:
    - Получение метаданных (режим --dump-json без скачивания)
    - Скачивание с основным и запасным селектором формата
    - Поиск скачанного файла и проверка его размера

    Не хранит состояния кроме конфигурации, поэтому один экземпляр
    можно использовать из нескольких потоков.
    """

    def __init__(
        self,
        tool_path: str = "yt-dlp",
        cookies_path: Optional[str] = None,
        extra_args: Optional[List[str]] = None
    ):
        """
        Args:
            tool_path: Путь к исполняемому файлу yt-dlp
            cookies_path: Файл cookies в формате Netscape (опционально)
            extra_args: Дополнительные флаги, передаются как есть в каждый вызов
        """
        self.tool_path = tool_path
        self.cookies_path = cookies_path
        self.extra_args = list(extra_args or [])

    def build_command(self, args: List[str]) -> List[str]:
        """Команда: yt-dlp [--cookies FILE] [extra_args...] args..."""
        cmd = [self.tool_path]
        if self.cookies_path:
            cmd.extend(['--cookies', self.cookies_path])
        cmd.extend(self.extra_args)
        cmd.extend(args)
        return cmd

    def _run(self, args: List[str], operation: str) -> Result[subprocess.CompletedProcess]:
        """
        Запуск yt-dlp

        Ненулевой код возврата - это не ошибка запуска, его разбирает
        вызывающий метод. Ошибкой здесь считается только невозможность
        запустить процесс.
        """
        cmd = self.build_command(args)
        logger.debug(f"[YtDlpService] Запуск: {' '.join(cmd)}")
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace'
            )
        except FileNotFoundError:
            logger.error(f"[YtDlpService] ❌ yt-dlp не найден: {self.tool_path}")
            return Result.fail(tool_not_found_error(self.tool_path))
        except Exception as e:
            logger.error(f"[YtDlpService] ❌ Ошибка запуска yt-dlp ({operation}): {e}", exc_info=True)
            return Result.fail(unexpected_error(e, operation))
        return Result.ok(completed)

    def is_tool_installed(self) -> bool:
        """Проверка, что yt-dlp запускается (yt-dlp --version)"""
        result = self._run(['--version'], 'version')
        if result.is_error():
            return False
        if result.value.returncode != 0:
            return False
        logger.info(f"[YtDlpService] yt-dlp версии {result.value.stdout.strip()}")
        return True

    # ========== Metadata ==========

    def fetch_metadata(self, identifier: VideoIdentifier) -> Result[VideoMetadata]:
        """
        Получить метаданные видео без скачивания

        Args:
            identifier: Нормализованная ссылка

        Returns:
            Result с VideoMetadata, либо metadata-fetch-failed /
            authentication-required / tool-not-found
        """
        video_id = identifier.video_id
        logger.info(f"[YtDlpService] Получаю метаданные: {identifier.canonical_url}")

        run = self._run(
            ['--dump-json', '--no-download', '--no-playlist', '--no-warnings', identifier.canonical_url],
            'fetch_metadata'
        )
        if run.is_error():
            return Result.fail(run.error)
        completed = run.value

        if completed.returncode != 0:
            output = f"{completed.stderr or ''}\n{completed.stdout or ''}"
            reason = _error_text(completed)
            if requires_authentication(output):
                logger.warning(f"[YtDlpService] ⚠️ YouTube требует подтверждения для {video_id}")
                return Result.fail(authentication_required_error(video_id, reason))
            logger.error(f"[YtDlpService] ❌ Не удалось получить метаданные {video_id}: {reason}")
            return Result.fail(metadata_fetch_error(video_id, reason))

        info = self._parse_json(completed.stdout)
        if info is None:
            logger.error(f"[YtDlpService] ❌ Не удалось разобрать JSON для {video_id}")
            return Result.fail(metadata_fetch_error(video_id, "Не удалось разобрать ответ yt-dlp"))

        try:
            metadata = self.metadata_from_info(identifier, info)
        except (TypeError, ValueError) as e:
            logger.error(f"[YtDlpService] ❌ Некорректные метаданные {video_id}: {e}")
            return Result.fail(metadata_fetch_error(video_id, f"Некорректные метаданные: {e}"))

        logger.info(
            f"[YtDlpService] ✅ Метаданные получены: '{metadata.title}' "
            f"({metadata.duration_display}, доступно: {metadata.is_available})"
        )
        return Result.ok(metadata)

    @staticmethod
    def _parse_json(output: Optional[str]) -> Optional[Dict[str, Any]]:
        """Первый непустой JSON-объект из stdout"""
        if not output:
            return None
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                return None
            return data if isinstance(data, dict) else None
        return None

    @staticmethod
    def metadata_from_info(identifier: VideoIdentifier, info: Dict[str, Any]) -> VideoMetadata:
        """
        Сборка VideoMetadata из словаря yt-dlp

        Видео недоступно, если это прямой эфир или availability
        говорит о приватности или платном доступе.
        """
        duration = info.get('duration') or 0
        availability = (info.get('availability') or '').lower()
        is_available = not info.get('is_live') and not any(
            marker in availability for marker in UNAVAILABLE_AVAILABILITY
        )
        return VideoMetadata(
            identifier=identifier,
            title=info.get('title') or '',
            duration_seconds=int(duration),
            uploader=info.get('uploader') or info.get('channel') or '',
            thumbnail_url=info.get('thumbnail'),
            is_available=is_available
        )

    # ========== Download ==========

    def download_to_file(
        self,
        identifier: VideoIdentifier,
        target_dir: str,
        max_bytes: int
    ) -> Result[VideoFile]:
        """
        Скачать видео в target_dir

        Сначала основной селектор, при ненулевом коде - один повтор
        с запасным. Перед каждой попыткой удаляются файлы <id>* прошлой
        попытки. Размер проверяется после скачивания: слишком большой
        файл остается на диске, путь к нему лежит в контексте ошибки.

        Args:
            identifier: Нормализованная ссылка
            target_dir: Директория для файла
            max_bytes: Максимальный размер итогового файла

        Returns:
            Result с VideoFile, либо download-failed / authentication-required /
            file-too-large / tool-not-found
        """
        video_id = identifier.video_id
        diagnostics = []

        for attempt, selector in enumerate((PREFERRED_FORMAT_SELECTOR, FALLBACK_FORMAT_SELECTOR), start=1):
            logger.info(f"[YtDlpService] Скачиваю {video_id}, попытка {attempt}")
            self.remove_leftovers(video_id, target_dir)
            run =self._run(self._download_args(identifier, target_dir, selector), 'download_to_file')
            if run.is_error():
                return Result.fail(run.error)
            completed = run.value

            if completed.returncode == 0:
                return self._collect_file(video_id, target_dir, max_bytes)

            reason = _error_text(completed)
            diagnostics.append(f"{completed.stderr or ''}\n{completed.stdout or ''}")
            logger.warning(f"[YtDlpService] ⚠️ Попытка {attempt} для {video_id} не удалась: {reason}")

        if requires_authentication("\n".join(diagnostics)):
            logger.warning(f"[YtDlpService] ⚠️ YouTube требует подтверждения для {video_id}")
            return Result.fail(authentication_required_error(video_id, reason))

        logger.error(f"[YtDlpService] ❌ Не удалось скачать {video_id}")
        return Result.fail(download_failed_error(video_id, reason))

    @staticmethod
    def _download_args(identifier: VideoIdentifier, target_dir: str, selector: str) -> List[str]:
        output_template = os.path.join(target_dir, f"{identifier.video_id}.%(ext)s")
        return [
            '-f', selector,
            '-o', output_template,
            '--no-playlist',
            '--no-warnings',
            '--merge-output-format', 'mp4',
            '--recode-video', 'mp4',
            identifier.canonical_url,
        ]

    @staticmethod
    def find_downloaded_file(video_id: str, target_dir: str) -> Optional[str]:
        """
        Поиск скачанного файла по ID видео

        Сначала точное имя <id>.<ext> (MP4 предпочтительнее), затем
        по префиксу, если yt-dlp добавил суффикс. Промежуточные потоки
        вида <id>.f136.mp4 не считаются результатом.
        """
        for ext in VIDEO_EXTENSIONS:
            exact = os.path.join(target_dir, f"{video_id}{ext}")
            if os.path.isfile(exact):
                return exact

        try:
            names = sorted(os.listdir(target_dir))
        except OSError:
            return None

        candidates = [
            name for name in names
            if name.startswith(video_id)
            and not FORMAT_STREAM_PATTERN.search(name[len(video_id):])
            and os.path.splitext(name)[1].lower() in VIDEO_EXTENSIONS
            and os.path.isfile(os.path.join(target_dir, name))
        ]
        if not candidates:
            return None
        candidates.sort(key=lambda name: VIDEO_EXTENSIONS.index(os.path.splitext(name)[1].lower()))
        return os.path.join(target_dir, candidates[0])

    @staticmethod
    def remove_leftovers(video_id: str, target_dir: str) -> None:
        """Удалить файлы <id>* от прошлой попытки, чтобы не принять их за результат"""
        try:
            names = os.listdir(target_dir)
        except OSError:
            return
        for name in names:
            path = os.path.join(target_dir, name)
            if not name.startswith(video_id) or not os.path.isfile(path):
                continue
            try:
                os.remove(path)
                logger.debug(f"[YtDlpService] Удален остаток прошлой попытки: {path}")
            except OSError as e:
                logger.warning(f"[YtDlpService] ⚠️ Не удалось удалить {path}: {e}")

    def _collect_file(self, video_id: str, target_dir: str, max_bytes: int) -> Result[VideoFile]:
        file_path = self.find_downloaded_file(video_id, target_dir)
        if file_path is None:
            logger.error(f"[YtDlpService] ❌ Скачанный файл {video_id} не найден в {target_dir}")
            return Result.fail(download_failed_error(video_id, "Скачанный файл не найден"))

        file_size = os.path.getsize(file_path)
        if file_size == 0:
            logger.error(f"[YtDlpService] ❌ Скачанный файл пустой: {file_path}")
            return Result.fail(download_failed_error(video_id, "Скачанный файл пустой"))

        video_file = VideoFile(path=file_path, size_bytes=file_size)
        if not within_size_limit(video_file, max_bytes):
            logger.warning(
                f"[YtDlpService] ⚠️ Файл слишком большой: {video_file.size_mb:.2f} MB "
                f"(лимит {max_bytes / (1024 * 1024):.2f} MB)"
            )
            return Result.fail(file_too_large_error(file_size, max_bytes, file_path=video_file.path))

        logger.info(f"[YtDlpService] ✅ Видео скачано: {video_file.path} ({video_file.size_mb:.2f} MB)")
        return Result.ok(video_file)
