# extensions.py
# Файл для хранения экземпляров расширений Flask

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from sqlalchemy import event

from services.notifier import Notifier

db = SQLAlchemy()
migrate = Migrate()
notifier = Notifier()

# Опция соединения: транзакция открывается с блокировкой на запись
WRITE_OPTION = 'judging_write'


def configure_sqlite(engine, busy_timeout_ms):
    """
    Настраивает SQLite для одновременных чтений и записей.

    WAL позволяет читателям не мешать писателю. Чтение идет в обычной
    отложенной транзакции. Запись открывается через begin_write() сразу с
    BEGIN IMMEDIATE: второй писатель ждет busy_timeout, а потом видит уже
    закоммиченное состояние, вместо "database is locked" при повышении блокировки.
    """
    if engine.dialect.name != 'sqlite':
        return

    @event.listens_for(engine, 'connect')
    def _on_connect(dbapi_connection, connection_record):
        # Отключаем собственное управление транзакциями драйвера pysqlite
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f'PRAGMA busy_timeout = {int(busy_timeout_ms)}')
        cursor.execute('PRAGMA foreign_keys = ON')
        cursor.execute('PRAGMA journal_mode = WAL')
        cursor.close()

    @event.listens_for(engine, 'begin')
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_OPTION):
            conn.exec_driver_sql('BEGIN IMMEDIATE')
        else:
            conn.exec_driver_sql('BEGIN')


def begin_write():
    """
    Начинает пишущую транзакцию сессии.

    Уже открытая транзакция (обычно только чтение) фиксируется, чтобы новая
    началась с блокировки на запись. Вызывать до изменения объектов.
    """
    if db.session().in_transaction():
        db.session.commit()
    db.session.connection(execution_options={WRITE_OPTION: True})
