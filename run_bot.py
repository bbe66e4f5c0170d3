"""
Скрипт для запуска бота
Запускать после установки пакета (pip install -e .): python run_bot.py
"""
import asyncio

from ytbot.bot.bot import main

if __name__ == "__main__":
    asyncio.run(main())
