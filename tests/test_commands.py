# tests/test_commands.py

from models import JudgeSubmissionAssignment


def test_fan_out_command(app, hackathon):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['fan-out', str(hackathon.event.id)])

    assert result.exit_code == 0
    assert 'Создано назначений: 12' in result.output
    assert JudgeSubmissionAssignment.query.count() == 12


def test_reconcile_command(app, hackathon):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['reconcile-mirror', str(hackathon.event.id)])

    assert result.exit_code == 0
    assert 'Дописано оценок: 0' in result.output


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=['init-db'])

    assert result.exit_code == 0
