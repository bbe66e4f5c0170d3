"""
LocalFileSystem - FileSystemGateway поверх локального диска
"""
import logging
import os
import shutil

from ytbot.models.errors import ErrorCode, system_error, unexpected_error
from ytbot.models.result import Result
from ytbot.services.base import FileSystemGateway

logger = logging.getLogger(__name__)


class LocalFileSystem(FileSystemGateway):
    """Операции с временными файлами, ошибки ОС превращаются в system-error"""

    def ensure_directory(self, path: str) -> Result[str]:
        if os.path.exists(path) and not os.path.isdir(path):
            return Result.fail(system_error(
                ErrorCode.PATH_NOT_DIRECTORY,
                f"Путь существует, но это не директория: {path}",
                path
            ))
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            logger.error(f"[LocalFileSystem] ❌ Не удалось создать директорию {path}: {e}")
            return Result.fail(system_error(
                ErrorCode.DIRECTORY_CREATION_FAILED,
                f"Не удалось создать директорию {path}: {e}",
                path
            ))
        return Result.ok(path)

    def delete_if_exists(self, path: str) -> Result[bool]:
        if not path or not os.path.exists(path):
            return Result.ok(False)
        try:
            os.remove(path)
        except OSError as e:
            logger.error(f"[LocalFileSystem] ❌ Не удалось удалить файл {path}: {e}")
            return Result.fail(system_error(
                ErrorCode.FILE_DELETION_FAILED,
                f"Не удалось удалить файл {path}: {e}",
                path
            ))
        logger.debug(f"[LocalFileSystem] Файл удален: {path}")
        return Result.ok(True)

    def delete_directory(self, path: str) -> Result[bool]:
        if not path or not os.path.exists(path):
            return Result.ok(False)
        if not os.path.isdir(path):
            return Result.fail(system_error(
                ErrorCode.PATH_NOT_DIRECTORY,
                f"Путь существует, но это не директория: {path}",
                path
            ))
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.error(f"[LocalFileSystem] ❌ Не удалось удалить директорию {path}: {e}")
            return Result.fail(system_error(
                ErrorCode.FILE_DELETION_FAILED,
                f"Не удалось удалить директорию {path}: {e}",
                path
            ))
        logger.debug(f"[LocalFileSystem] Директория удалена: {path}")
        return Result.ok(True)

    def get_size(self, path: str) -> Result[int]:
        if not os.path.isfile(path):
            return Result.fail(system_error(ErrorCode.FILE_NOT_FOUND, f"Файл не найден: {path}", path))
        try:
            return Result.ok(os.path.getsize(path))
        except OSError as e:
            return Result.fail(unexpected_error(e, 'get_size'))

    def exists(self, path: str) -> bool:
        return bool(path) and os.path.exists(path)
