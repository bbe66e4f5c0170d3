"""
Telegram бот: обработчики команд и запуск polling
"""
