# tests/conftest.py

import itertools
from types import SimpleNamespace

import pytest

from app import create_app
from config import Config
from extensions import db, notifier
from models import Event, Judge, Submission, SubmissionScore
from services import coordinator


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = 'test-secret'
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'judging.db'}"
        LOG_LEVEL = 'WARNING'

    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_id, role):
        with client.session_transaction() as sess:
            sess['user_id'] = user_id
            sess['user_role'] = role
    return _login


@pytest.fixture
def published():
    # Перехватываем все уведомления вместо логирования
    messages = []
    previous = notifier.transport
    notifier.transport = lambda topic, payload: messages.append((topic, payload))
    yield messages
    notifier.transport = previous


@pytest.fixture
def make_event(app):
    def _make(rounds=None, criteria=None, name='Hackathon'):
        event = Event(name=name, rounds=rounds or [], custom_criteria=criteria or [])
        db.session.add(event)
        db.session.commit()
        return event
    return _make


@pytest.fixture
def make_submission(app):
    team_ids = itertools.count(1)

    def _make(event, team_id=None, project_name=None):
        team_id = team_id if team_id is not None else next(team_ids)
        submission = Submission(
            event_id=event.id,
            team_id=team_id,
            project_name=project_name or f'Project {team_id}'
        )
        db.session.add(submission)
        db.session.commit()
        return submission
    return _make


@pytest.fixture
def make_judge(app):
    user_ids = itertools.count(1000)

    def _make(user_id=None, is_active=True):
        judge = Judge(user_id=user_id if user_id is not None else next(user_ids), expertise=[], is_active=is_active)
        db.session.add(judge)
        db.session.commit()
        return judge
    return _make


@pytest.fixture
def add_mirror_score(app):
    def _add(submission, score, round_id=None, judge_id=1):
        row = SubmissionScore(submission_id=submission.id, judge_id=judge_id, round_id=round_id, score=score)
        db.session.add(row)
        db.session.commit()
        return row
    return _add


@pytest.fixture
def hackathon(make_event, make_submission, make_judge):
    """Мероприятие: 3 назначенных судьи и 4 работы, раздачи еще не было."""
    event = make_event(
        rounds=[
            {'id': 'A', 'weight': 1},
            {'id': 'B', 'weight': 3, 'criteria': [{'id': 'ux', 'max_score': 10}]},
        ],
        criteria=[{'id': 'impact', 'max_score': 10}, {'id': 'ux', 'max_score': 5}]
    )
    submissions = [make_submission(event) for _ in range(4)]
    judges = [make_judge() for _ in range(3)]
    for judge in judges:
        coordinator.assign_judge_to_event(event.id, judge.id, 'Secondary')
    return SimpleNamespace(event=event, submissions=submissions, judges=judges)
