"""
Тесты для агрегата AcquisitionRequest и проверки ограничений
"""
import unittest

from ytbot.models.acquisition_request import AcquisitionRequest, AcquisitionStatus, InvalidTransitionError
from ytbot.models.constraints import TELEGRAM_MAX_UPLOAD_BYTES, is_downloadable, within_size_limit
from ytbot.models.errors import ErrorCategory, ErrorCode
from ytbot.models.video import VideoFile, VideoIdentifier, VideoMetadata

VIDEO_ID = "dQw4w9WgXcQ"


def make_metadata(duration=120, is_available=True):
    return VideoMetadata(
        identifier=VideoIdentifier.from_video_id(VIDEO_ID),
        title="Test Video",
        duration_seconds=duration,
        uploader="Test Channel",
        is_available=is_available
    )


class TestAcquisitionRequest(unittest.TestCase):
    """Тесты переходов состояния"""

    def setUp(self):
        self.request = AcquisitionRequest(
            identifier=VideoIdentifier.from_video_id(VIDEO_ID),
            chat_id=100,
            max_duration_minutes=15
        )

    def test_initial_state(self):
        """Тест: новый запрос в pending"""
        self.assertTrue(self.request.is_pending())
        self.assertFalse(self.request.is_terminal())
        self.assertIsNone(self.request.metadata)
        self.assertIsNone(self.request.video_file)
        self.assertIsNone(self.request.error_message)

    def test_happy_path(self):
        """Тест: полный путь до completed"""
        self.request.start_fetching_metadata()
        self.assertEqual(self.request.status, AcquisitionStatus.FETCHING_METADATA)
        self.request.attach_metadata(make_metadata())
        self.assertEqual(self.request.status, AcquisitionStatus.VALIDATING)
        self.assertIsNotNone(self.request.metadata)
        self.request.start_downloading()
        self.assertEqual(self.request.status, AcquisitionStatus.DOWNLOADING)
        self.request.complete(VideoFile("/tmp/" + VIDEO_ID + ".mp4", 1000))
        self.assertTrue(self.request.is_completed())
        self.assertTrue(self.request.is_terminal())
        self.assertGreaterEqual(self.request.updated_at, self.request.created_at)

    def test_fetching_twice_rejected(self):
        """Тест: повторный переход в fetching-metadata запрещен"""
        self.request.start_fetching_metadata()
        with self.assertRaises(InvalidTransitionError):
            self.request.start_fetching_metadata()

    def test_out_of_order_rejected(self):
        """Тест: переходы не по порядку запрещены"""
        with self.assertRaises(InvalidTransitionError):
            self.request.attach_metadata(make_metadata())
        with self.assertRaises(InvalidTransitionError):
            self.request.start_downloading()
        with self.assertRaises(InvalidTransitionError):
            self.request.complete(VideoFile("/tmp/x.mp4", 1))

    def test_start_downloading_requires_valid_metadata(self):
        """Тест: слишком длинное видео не переходит в downloading"""
        self.request.start_fetching_metadata()
        self.request.attach_metadata(make_metadata(duration=1200))
        with self.assertRaises(InvalidTransitionError):
            self.request.start_downloading()
        self.assertEqual(self.request.status, AcquisitionStatus.VALIDATING)

    def test_fail_from_any_non_terminal_state(self):
        """Тест: failed достижим из любого нетерминального состояния"""
        self.request.fail("ошибка")
        self.assertTrue(self.request.is_failed())
        self.assertEqual(self.request.error_message, "ошибка")

        other = AcquisitionRequest(VideoIdentifier.from_video_id(VIDEO_ID), 1, 15)
        other.start_fetching_metadata()
        other.attach_metadata(make_metadata())
        other.start_downloading()
        other.fail("ошибка скачивания")
        self.assertTrue(other.is_failed())
        self.assertIsNone(other.video_file)

    def test_no_transitions_from_terminal(self):
        """Тест: из failed нет переходов, повторов нет"""
        self.request.fail("ошибка")
        with self.assertRaises(InvalidTransitionError):
            self.request.fail("еще раз")
        with self.assertRaises(InvalidTransitionError):
            self.request.start_fetching_metadata()

    def test_invalid_duration_ceiling(self):
        """Тест: лимит длительности должен быть положительным"""
        identifier = VideoIdentifier.from_video_id(VIDEO_ID)
        with self.assertRaises(ValueError):
            AcquisitionRequest(identifier, 1, 0)
        with self.assertRaises(ValueError):
            AcquisitionRequest(identifier, 1, True)

    def test_should_reply_to_original(self):
        """Тест: ответ на исходное сообщение только если задан reply target"""
        self.assertFalse(self.request.should_reply_to_original())
        group_request = AcquisitionRequest(VideoIdentifier.from_video_id(VIDEO_ID), -100, 15, reply_to_message_id=7)
        self.assertTrue(group_request.should_reply_to_original())

    def test_unique_ids(self):
        other = AcquisitionRequest(VideoIdentifier.from_video_id(VIDEO_ID), 100, 15)
        self.assertNotEqual(self.request.request_id, other.request_id)


class TestConstraints(unittest.TestCase):
    """Тесты для is_downloadable и within_size_limit"""

    def test_accepts_short_video(self):
        result = is_downloadable(make_metadata(duration=120), 15)
        self.assertTrue(result.is_ok())
        self.assertTrue(result.value)

    def test_boundary_accepted(self):
        """Тест: ровно лимит допустим"""
        self.assertTrue(is_downloadable(make_metadata(duration=15 * 60), 15).is_ok())

    def test_too_long(self):
        result = is_downloadable(make_metadata(duration=15 * 60 + 1), 15)
        self.assertEqual(result.error.code, ErrorCode.VIDEO_TOO_LONG)

    def test_unavailable_has_priority(self):
        """Тест: недоступность важнее длительности"""
        result = is_downloadable(make_metadata(duration=5000, is_available=False), 15)
        self.assertEqual(result.error.code, ErrorCode.VIDEO_UNAVAILABLE)
        self.assertEqual(result.error.category, ErrorCategory.VALIDATION)

    def test_invalid_limit(self):
        with self.assertRaises(ValueError):
            is_downloadable(make_metadata(), 0)

    def test_within_size_limit(self):
        self.assertTrue(within_size_limit(VideoFile("/tmp/a.mp4", TELEGRAM_MAX_UPLOAD_BYTES)))
        self.assertFalse(within_size_limit(VideoFile("/tmp/a.mp4", TELEGRAM_MAX_UPLOAD_BYTES + 1)))
        self.assertTrue(within_size_limit(VideoFile("/tmp/a.mp4", 100), max_size_bytes=100))


if __name__ == '__main__':
    unittest.main()
