# services/aggregator.py
# Подсчет результатов. Два независимых пути:
#   compute_event_results - по реестру рецензий (основной источник истины);
#   compute_leaderboard   - по зеркалу оценок в работах (быстрый/наследуемый путь).

import logging
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP

from extensions import notifier
from models import STATUS_REVIEWED
from services import ledger
from services.stores import event_store, submission_store

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def to_decimal(value):
    if isinstance(value, Decimal):
        return value
    # Через str, чтобы 80.125 не превратилось в 80.12499999...
    return Decimal(str(value))


def round_score(value):
    """Округление до сотых, половина - от нуля. Только для итогового значения."""
    return float(to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def mean(values):
    values = [to_decimal(v) for v in values]
    if not values:
        return Decimal(0)
    return sum(values, Decimal(0)) / len(values)


def weighted_score(entries, rounds):
    """
    Взвешенная оценка работы по раундам.

    Раунд без единой оценки не входит ни в числитель, ни в знаменатель.
    Если по раундам оценок нет вовсе, берется простое среднее всех оценок.
    """
    if rounds:
        total = Decimal(0)
        weight_sum = Decimal(0)
        for rd in rounds:
            round_scores = [e.score for e in entries if e.round_id == rd.id]
            if round_scores:
                weight = to_decimal(rd.weight)
                total += weight * mean(round_scores)
                weight_sum += weight
        if weight_sum:
            return total / weight_sum
    return mean([e.score for e in entries])


def _rank(entries, score_key):
    # При равенстве баллов порядок по id работы
    entries.sort(key=lambda e: (-e[score_key], e['submissionId']))
    for position, entry in enumerate(entries, start=1):
        entry['rank'] = position
    return entries


def compute_leaderboard(event_id):
    event = event_store.get_event(event_id)
    submissions = submission_store.list_by_event(event_id)
    scores = submission_store.list_scores([s.id for s in submissions])

    entries = []
    for submission in submissions:
        entries.append({
            'teamId': submission.team_id,
            'submissionId': submission.id,
            'score': round_score(weighted_score(scores.get(submission.id, []), event.rounds)),
        })
    return _rank(entries, 'score')


def compute_event_results(event_id):
    event_store.get_event(event_id)
    reviewed = ledger.list_by_event_status(event_id, STATUS_REVIEWED)
    submissions = {s.id: s for s in submission_store.list_by_event(event_id)}

    by_submission = defaultdict(list)
    for row in reviewed:
        by_submission[row.submission_id].append(row)

    results = []
    for submission_id, rows in by_submission.items():
        submission = submissions.get(submission_id)
        results.append({
            'submissionId': submission_id,
            'teamId': submission.team_id if submission else None,
            'projectName': submission.project_name if submission else None,
            'averageScore': round_score(mean([r.score for r in rows])),
            'reviewCount': len(rows),
            'reviews': [
                {
                    'judgeId': r.judge_id,
                    'score': r.score,
                    'feedback': r.feedback,
                    'criteria': r.criteria,
                    'roundId': r.round_id,
                    'reviewedAt': r.reviewed_at.isoformat() if r.reviewed_at else None,
                }
                for r in rows
            ],
        })
    return _rank(results, 'averageScore')


def review_progress(event_id):
    """Сколько рецензий ожидается, сколько сделано, по каждому судье и в целом."""
    event_store.get_event(event_id)
    judge_ids = [a.judge_id for a in ledger.active_event_assignments(event_id)]
    submissions_count = len(submission_store.list_by_event(event_id))
    rows = ledger.list_by_event_status(event_id)

    per_judge = {judge_id: {'judgeId': judge_id, 'assigned': 0, 'reviewed': 0} for judge_id in judge_ids}
    for row in rows:
        stats = per_judge.setdefault(row.judge_id, {'judgeId': row.judge_id, 'assigned': 0, 'reviewed': 0})
        stats['assigned'] += 1
        if row.status == STATUS_REVIEWED:
            stats['reviewed'] += 1

    expected = len(judge_ids) * submissions_count
    reviewed = sum(1 for row in rows if row.status == STATUS_REVIEWED)
    return {
        'eventId': event_id,
        'expected': expected,
        'assigned': len(rows),
        'reviewed': reviewed,
        'pending': len(rows) - reviewed,
        'completed': expected > 0 and reviewed >= expected,
        'judges': sorted(per_judge.values(), key=lambda s: s['judgeId']),
    }


def judge_analytics(judge_id):
    rows = ledger.list_reviewed_by_judge(judge_id)
    return {
        'reviews': len(rows),
        'averageScore': round_score(mean([r.score for r in rows])),
    }


def publish_leaderboard_update(event_id, dedupe_cache):
    if dedupe_cache.remember(f'leaderboard:{event_id}'):
        return False
    notifier.publish(f'event:{event_id}', {
        'eventId': event_id,
        'type': 'leaderboard_update',
        'message': 'Leaderboard updated',
    })
    return True
