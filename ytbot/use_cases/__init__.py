"""
Use cases для бизнес-логики бота
"""
from ytbot.use_cases.acquire_video import AcquireVideoUseCase, AcquisitionOutcome
from ytbot.use_cases.download_and_send import DownloadAndSendVideoUseCase

__all__ = [
    'AcquireVideoUseCase',
    'AcquisitionOutcome',
    'DownloadAndSendVideoUseCase',
]
