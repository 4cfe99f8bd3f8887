# tests/test_review.py

import threading
import time

import pytest

from errors import ConflictError, DependencyError, NotAssignedOrAlreadyReviewed, NotFoundError, ValidationError
from extensions import db
from models import JudgeSubmissionAssignment, SubmissionScore, STATUS_ASSIGNED, STATUS_REVIEWED
from services import aggregator, coordinator, reconciliation, review
from services.stores import submission_store


@pytest.fixture
def fanned_out(hackathon):
    coordinator.fan_out_assignments(hackathon.event.id)
    return hackathon


def _assignment(judge, submission):
    return JudgeSubmissionAssignment.query.filter_by(judge_id=judge.id, submission_id=submission.id).one()


def _mirror(submission):
    return SubmissionScore.query.filter_by(submission_id=submission.id).all()


class TestSubmitReview:

    def test_marks_reviewed_and_mirrors(self, fanned_out, published):
        judge, submission = fanned_out.judges[0], fanned_out.submissions[0]

        outcome = review.submit_review(judge.id, submission.id, 87.5, 'Хорошо', {'ux': 8}, 'B')

        assert outcome.mirrored is True
        row = _assignment(judge, submission)
        assert row.status == STATUS_REVIEWED
        assert row.score == 87.5
        assert row.feedback == 'Хорошо'
        assert row.criteria == {'ux': 8}
        assert row.round_id == 'B'
        assert row.reviewed_at is not None

        mirror = _mirror(submission)
        assert [(m.judge_id, m.score, m.round_id) for m in mirror] == [(judge.id, 87.5, 'B')]
        assert ('submission:%s' % submission.id, {
            'type': 'review_added',
            'submissionId': submission.id,
            'eventId': fanned_out.event.id,
            'data': {'score': 87.5},
        }) in published

    def test_unassigned_pair_is_rejected_without_writes(self, hackathon):
        judge, submission = hackathon.judges[0], hackathon.submissions[0]

        with pytest.raises(NotAssignedOrAlreadyReviewed):
            review.submit_review(judge.id, submission.id, 50)

        assert JudgeSubmissionAssignment.query.count() == 0
        assert SubmissionScore.query.count() == 0

    def test_second_review_is_conflict_and_keeps_first(self, fanned_out):
        judge, submission = fanned_out.judges[0], fanned_out.submissions[0]
        review.submit_review(judge.id, submission.id, 70, 'first')

        with pytest.raises(ConflictError):
            review.submit_review(judge.id, submission.id, 10, 'second')

        row = _assignment(judge, submission)
        assert (row.score, row.feedback) == (70, 'first')
        assert len(_mirror(submission)) == 1

    def test_other_judges_are_unaffected(self, fanned_out):
        submission = fanned_out.submissions[0]
        review.submit_review(fanned_out.judges[0].id, submission.id, 70)
        review.submit_review(fanned_out.judges[1].id, submission.id, 90)

        statuses = {r.judge_id: r.status for r in JudgeSubmissionAssignment.query.filter_by(submission_id=submission.id)}
        assert statuses == {
            fanned_out.judges[0].id: STATUS_REVIEWED,
            fanned_out.judges[1].id: STATUS_REVIEWED,
            fanned_out.judges[2].id: STATUS_ASSIGNED,
        }

    def test_removed_judge_cannot_review(self, fanned_out):
        judge, submission = fanned_out.judges[0], fanned_out.submissions[0]
        coordinator.remove_judge_from_event(fanned_out.event.id, judge.id)

        with pytest.raises(NotAssignedOrAlreadyReviewed):
            review.submit_review(judge.id, submission.id, 50)
        assert _assignment(judge, submission).status == STATUS_ASSIGNED

    def test_unknown_submission(self, fanned_out):
        with pytest.raises(NotFoundError):
            review.submit_review(fanned_out.judges[0].id, 9999, 50)


class TestValidation:

    @pytest.mark.parametrize('score', [-1, 100.01, True, '80', None, float('nan')])
    def test_score_out_of_range(self, fanned_out, score):
        judge, submission = fanned_out.judges[0], fanned_out.submissions[0]

        with pytest.raises(ValidationError):
            review.submit_review(judge.id, submission.id, score)
        assert _assignment(judge, submission).status == STATUS_ASSIGNED

    @pytest.mark.parametrize('score', [0, 100, 55.5])
    def test_score_bounds_are_inclusive(self, fanned_out, score):
        judge, submission = fanned_out.judges[0], fanned_out.submissions[0]

        review.submit_review(judge.id, submission.id, score)
        assert _assignment(judge, submission).score == score

    def test_unknown_round(self, fanned_out):
        with pytest.raises(ValidationError):
            review.submit_review(fanned_out.judges[0].id, fanned_out.submissions[0].id, 50, round_id='Z')

    def test_unknown_criterion(self, fanned_out):
        with pytest.raises(ValidationError):
            review.submit_review(fanned_out.judges[0].id, fanned_out.submissions[0].id, 50, criteria={'speed': 3})

    def test_criterion_above_max(self, fanned_out):
        # Без раунда действует общая схема мероприятия, где ux не выше 5
        with pytest.raises(ValidationError):
            review.submit_review(fanned_out.judges[0].id, fanned_out.submissions[0].id, 50, criteria={'ux': 8})

    def test_round_criteria_take_precedence(self, fanned_out):
        judge, submission = fanned_out.judges[0], fanned_out.submissions[0]

        review.submit_review(judge.id, submission.id, 50, criteria={'ux': 8}, round_id='B')
        assert _assignment(judge, submission).criteria == {'ux': 8}

    def test_round_without_criteria_uses_event_schema(self, fanned_out):
        with pytest.raises(ValidationError):
            review.submit_review(fanned_out.judges[0].id, fanned_out.submissions[0].id, 50,
                                 criteria={'ux': 3, 'speed': 1}, round_id='A')

    def test_event_without_schema_accepts_any_criteria(self, make_event, make_submission, make_judge):
        event = make_event()
        submission = make_submission(event)
        judge = make_judge()
        coordinator.assign_judge_to_event(event.id, judge.id)
        coordinator.fan_out_assignments(event.id)

        review.submit_review(judge.id, submission.id, 50, criteria={'anything': 1000}, round_id='free')


class TestMirrorFailure:

    def test_ledger_wins_and_reconciliation_repairs(self, fanned_out, monkeypatch):
        judge, submission = fanned_out.judges[0], fanned_out.submissions[0]

        def broken_append(submission_id, entry):
            raise DependencyError()

        monkeypatch.setattr(submission_store, 'append_score', broken_append)
        outcome = review.submit_review(judge.id, submission.id, 64, round_id='A')
        monkeypatch.undo()

        assert outcome.mirrored is False
        assert _assignment(judge, submission).status == STATUS_REVIEWED
        assert _mirror(submission) == []

        assert reconciliation.reconcile_mirror(fanned_out.event.id) == 1
        assert [(m.judge_id, m.score, m.round_id) for m in _mirror(submission)] == [(judge.id, 64, 'A')]
        # Повторная сверка ничего не дописывает
        assert reconciliation.reconcile_mirror(fanned_out.event.id) == 0


class TestConcurrentReviews:

    def test_exactly_one_winner(self, app, fanned_out):
        judge_id = fanned_out.judges[0].id
        submission_id = fanned_out.submissions[0].id
        db.session.commit()
        db.session.close()

        workers = 8
        barrier = threading.Barrier(workers)
        outcomes = []
        lock = threading.Lock()

        def attempt(n):
            with app.app_context():
                barrier.wait()
                try:
                    review.submit_review(judge_id, submission_id, 50 + n, f'attempt {n}')
                    result = ('ok', n)
                except ConflictError:
                    result = ('conflict', n)
                with lock:
                    outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(n,)) for n in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [n for status, n in outcomes if status == 'ok']
        assert len(outcomes) == workers
        assert len(winners) == 1

        row = JudgeSubmissionAssignment.query.filter_by(judge_id=judge_id, submission_id=submission_id).one()
        assert row.score == 50 + winners[0]
        assert row.feedback == f'attempt {winners[0]}'
        assert SubmissionScore.query.filter_by(submission_id=submission_id).count() == 1

    def test_open_read_does_not_delay_review(self, app, fanned_out):
        event_id = fanned_out.event.id
        judge_id = fanned_out.judges[0].id
        submission_id = fanned_out.submissions[0].id
        db.session.commit()
        db.session.close()

        reading = threading.Event()
        release = threading.Event()

        def reader():
            with app.app_context():
                # Транзакция чтения остается открытой, как у запроса до teardown
                aggregator.compute_leaderboard(event_id)
                aggregator.review_progress(event_id)
                reading.set()
                release.wait(10)
                db.session.rollback()

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            assert reading.wait(10)
            started = time.monotonic()
            outcome = review.submit_review(judge_id, submission_id, 50)
            elapsed = time.monotonic() - started
        finally:
            release.set()
            thread.join()

        assert outcome.assignment.status == STATUS_REVIEWED
        assert elapsed < 1
