"""
Тесты для доменных моделей: ошибки, Result, видео
"""
import os
import unittest
from dataclasses import FrozenInstanceError

from ytbot.models.errors import (
    AUTHENTICATION_SUGGESTED_FIXES,
    DomainError,
    ErrorCategory,
    ErrorCode,
    authentication_required_error,
    file_too_large_error,
    format_error_for_logging,
    format_error_for_user,
    invalid_url_error,
    unexpected_error,
    video_too_long_error,
)
from ytbot.models.result import Result
from ytbot.models.video import VideoFile, VideoIdentifier, VideoMetadata

VIDEO_ID = "dQw4w9WgXcQ"


class TestDomainError(unittest.TestCase):
    """Тесты для DomainError и фабрик ошибок"""

    def test_factory_fields(self):
        """Тест: фабрика заполняет категорию, код и контекст"""
        error = video_too_long_error(1200, 15)
        self.assertEqual(error.category, ErrorCategory.VALIDATION)
        self.assertEqual(error.code, ErrorCode.VIDEO_TOO_LONG)
        self.assertEqual(error.context['duration_seconds'], 1200)
        self.assertEqual(error.context['max_duration_minutes'], 15)
        self.assertIsNotNone(error.created_at.tzinfo)

    def test_immutable(self):
        """Тест: ошибку нельзя изменить"""
        error = invalid_url_error("nope")
        with self.assertRaises(FrozenInstanceError):
            error.message = "other"

    def test_empty_message_rejected(self):
        """Тест: пустое сообщение запрещено"""
        with self.assertRaises(ValueError):
            DomainError(ErrorCategory.SYSTEM, ErrorCode.UNEXPECTED_ERROR, "")

    def test_codes_are_kebab_case(self):
        """Тест: значения кодов в kebab-case"""
        self.assertEqual(ErrorCode.AUTHENTICATION_REQUIRED.value, 'authentication-required')
        self.assertEqual(ErrorCategory.SOURCE.value, 'source-error')
        self.assertEqual(ErrorCategory.CONFIGURATION.value, 'configuration-error')

    def test_file_too_large_context(self):
        """Тест: путь к файлу попадает в контекст"""
        error = file_too_large_error(60 * 1024 * 1024, 50 * 1024 * 1024, file_path="/tmp/x.mp4")
        self.assertEqual(error.code, ErrorCode.FILE_TOO_LARGE)
        self.assertEqual(error.context['file_path'], "/tmp/x.mp4")
        self.assertIn("60.0 MB", error.message)

    def test_unexpected_error_is_system_error(self):
        """Тест: неожиданное исключение оборачивается в system-error"""
        error = unexpected_error(RuntimeError("boom"), "fetch_metadata")
        self.assertEqual(error.category, ErrorCategory.SYSTEM)
        self.assertEqual(error.context['exception_type'], 'RuntimeError')
        self.assertEqual(error.context['operation'], 'fetch_metadata')

    def test_format_for_user(self):
        """Тест: сообщение для пользователя"""
        error = invalid_url_error("nope")
        self.assertEqual(format_error_for_user(error), f"❌ {error.message}")

    def test_format_for_user_authentication(self):
        """Тест: для authentication-required добавляется список советов"""
        text = format_error_for_user(authentication_required_error(VIDEO_ID, "Sign in"))
        self.assertIn("Попробуйте:", text)
        for fix in AUTHENTICATION_SUGGESTED_FIXES:
            self.assertIn(f"• {fix}", text)

    def test_format_for_logging(self):
        """Тест: формат для логов"""
        error = video_too_long_error(1200, 15)
        line = format_error_for_logging(error)
        self.assertTrue(line.startswith("[validation/video-too-long] "))
        self.assertIn("Context:", line)


class TestResult(unittest.TestCase):
    """Тесты для Result"""

    def test_ok(self):
        result = Result.ok(42)
        self.assertTrue(result.is_ok())
        self.assertFalse(result.is_error())
        self.assertEqual(result.value, 42)

    def test_fail(self):
        error = invalid_url_error("x")
        result = Result.fail(error)
        self.assertTrue(result.is_error())
        self.assertIs(result.error, error)

    def test_fail_requires_error(self):
        with self.assertRaises(ValueError):
            Result.fail(None)

    def test_value_and_error_conflict(self):
        with self.assertRaises(ValueError):
            Result(value=1, error=invalid_url_error("x"))


class TestVideoModels(unittest.TestCase):
    """Тесты для VideoIdentifier, VideoMetadata, VideoFile"""

    def setUp(self):
        self.identifier = VideoIdentifier.from_video_id(VIDEO_ID)

    def test_identifier_validation(self):
        """Тест: ID из 11 символов и каноническая ссылка"""
        self.assertEqual(self.identifier.canonical_url, f"https://www.youtube.com/watch?v={VIDEO_ID}")
        with self.assertRaises(ValueError):
            VideoIdentifier.from_video_id("short")
        with self.assertRaises(ValueError):
            VideoIdentifier(video_id=VIDEO_ID, canonical_url="https://youtu.be/" + VIDEO_ID)

    def test_metadata_title_trimmed_and_capped(self):
        """Тест: название обрезается и ограничивается 256 символами"""
        metadata = VideoMetadata(self.identifier, "  " + "a" * 300 + "  ", 10, "Channel")
        self.assertEqual(len(metadata.title), 256)
        self.assertTrue(metadata.title.startswith("a"))

    def test_metadata_defaults(self):
        """Тест: пустые название и автор заменяются заглушками"""
        metadata = VideoMetadata(self.identifier, "   ", 0, None)
        self.assertEqual(metadata.title, "Unknown Title")
        self.assertEqual(metadata.uploader, "Unknown Uploader")
        self.assertTrue(metadata.is_available)

    def test_metadata_rejects_negative_duration(self):
        with self.assertRaises(ValueError):
            VideoMetadata(self.identifier, "t", -1, "u")

    def test_metadata_rejects_float_duration(self):
        with self.assertRaises(ValueError):
            VideoMetadata(self.identifier, "t", 1.5, "u")

    def test_caption(self):
        """Тест: подпись к видео"""
        metadata = VideoMetadata(self.identifier, "Never Gonna Give You Up", 212, "Rick Astley")
        self.assertEqual(metadata.duration_display, "3:32")
        self.assertEqual(metadata.format_caption(), "Never Gonna Give You Up\nby Rick Astley (3:32)")

    def test_video_file(self):
        """Тест: абсолютный путь и расширение"""
        video_file = VideoFile("downloads/" + VIDEO_ID + ".MP4", 1024)
        self.assertTrue(os.path.isabs(video_file.path))
        self.assertEqual(video_file.extension, "mp4")

    def test_video_file_rejects_empty(self):
        with self.assertRaises(ValueError):
            VideoFile("/tmp/x.mp4", 0)
        with self.assertRaises(ValueError):
            VideoFile("", 10)


if __name__ == '__main__':
    unittest.main()
