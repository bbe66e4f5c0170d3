"""
Модели домена: ошибки, результаты, видео и агрегат запроса на скачивание
"""
from .errors import DomainError, ErrorCategory, ErrorCode
from .result import Result
from .video import VideoFile, VideoIdentifier, VideoMetadata
from .constraints import TELEGRAM_MAX_UPLOAD_BYTES, is_downloadable, within_size_limit
from .acquisition_request import AcquisitionRequest, AcquisitionStatus, InvalidTransitionError

__all__ = [
    'DomainError',
    'ErrorCategory',
    'ErrorCode',
    'Result',
    'VideoFile',
    'VideoIdentifier',
    'VideoMetadata',
    'TELEGRAM_MAX_UPLOAD_BYTES',
    'is_downloadable',
    'within_size_limit',
    'AcquisitionRequest',
    'AcquisitionStatus',
    'InvalidTransitionError',
]
