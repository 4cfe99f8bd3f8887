# app.py
# Основной файл Flask-приложения с использованием паттерна Application Factory

import logging
import os

from flask import Flask
from config import Config
from extensions import db, migrate, notifier, configure_sqlite
from errors import register_error_handlers
from services.dedupe import ExpiringKeyCache

# Важно импортировать модели здесь, чтобы Alembic (Migrate) мог их видеть
from models import Judge, Event, Submission, SubmissionScore, JudgeEventAssignment, JudgeSubmissionAssignment, AuditRecord

def create_app(config_class=Config):
    # Создаем экземпляр приложения
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    os.makedirs(app.instance_path, exist_ok=True)

    # --- Инициализируем расширения С ПРИЛОЖЕНИЕМ ---
    db.init_app(app)
    migrate.init_app(app, db)
    notifier.init_app(app)
    with app.app_context():
        configure_sqlite(db.engine, app.config.get('SQLITE_BUSY_TIMEOUT_MS', 30000))

    # Дедупликация уведомлений о лидерборде в пределах процесса
    app.extensions['leaderboard_dedupe'] = ExpiringKeyCache(app.config.get('LEADERBOARD_NOTIFY_TTL', 60))

    register_error_handlers(app)

    # --- Регистрируем наши Blueprints (маршруты) ---
    from routes.judges import judges_bp
    from routes.organizer import organizer_bp
    from routes.events import events_bp

    app.register_blueprint(judges_bp)
    app.register_blueprint(organizer_bp)
    app.register_blueprint(events_bp)

    from commands import register_commands
    register_commands(app)

    return app
