# services/notifier.py
# Доставка событий в реальном времени. Только "выстрелил и забыл":
# ошибка доставки пишется в лог и никогда не доходит до вызывающего.

import logging

logger = logging.getLogger(__name__)


def log_transport(topic, payload):
    logger.info('publish %s: %s', topic, payload)


class Notifier:
    def __init__(self, transport=None):
        self.transport = transport

    def init_app(self, app):
        if self.transport is None:
            self.transport = log_transport
        app.extensions['notifier'] = self

    def publish(self, topic, payload):
        transport = self.transport or log_transport
        try:
            transport(topic, payload)
        except Exception:
            logger.warning('Не удалось доставить событие %s', topic, exc_info=True)
