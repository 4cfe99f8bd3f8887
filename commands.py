# commands.py
# Команды `flask ...` для обслуживания движка судейства

import click

from extensions import db
from services import coordinator, reconciliation


def register_commands(app):

    @app.cli.command('init-db')
    def init_db():
        """Создает таблицы (без миграций)."""
        db.create_all()
        click.echo('Таблицы созданы.')

    @app.cli.command('fan-out')
    @click.argument('event_id', type=int)
    def fan_out(event_id):
        """Раздает работы мероприятия всем назначенным судьям."""
        created = coordinator.fan_out_assignments(event_id)
        click.echo(f'Создано назначений: {created}')

    @app.cli.command('reconcile-mirror')
    @click.argument('event_id', type=int)
    def reconcile_mirror(event_id):
        """Доигрывает рецензии из реестра в зеркало оценок работ."""
        appended = reconciliation.reconcile_mirror(event_id)
        click.echo(f'Дописано оценок: {appended}')
