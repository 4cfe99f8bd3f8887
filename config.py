# config.py
# Конфигурация приложения Flask

import os

class Config:
    # Абсолютный путь к базе данных
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "instance", "judging.db")}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get('SECRET_KEY', 'your-secret-key-change-me')  # Замени на случайный ключ в продакшене

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Сколько секунд не повторять уведомление об обновлении лидерборда
    LEADERBOARD_NOTIFY_TTL = int(os.environ.get('LEADERBOARD_NOTIFY_TTL', '60'))
    # Размер пачки строк при массовой раздаче работ
    FANOUT_BATCH_SIZE = int(os.environ.get('FANOUT_BATCH_SIZE', '500'))
    # Таймаут ожидания блокировки SQLite, мс
    SQLITE_BUSY_TIMEOUT_MS = 30000
