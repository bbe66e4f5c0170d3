"""
ytbot - Telegram бот для скачивания YouTube видео через yt-dlp
"""
__version__ = "0.1.0"
