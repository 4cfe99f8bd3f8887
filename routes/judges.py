# routes/judges.py
# Маршруты судьи: очередь работ, рецензии, профиль

from flask import Blueprint

from routes.common import judge_required, current_judge, success
from schemas import JudgeProfileSchema, SubmitReviewSchema, load_body
from services import aggregator, coordinator, judges, review

judges_bp = Blueprint('judges', __name__, url_prefix='/judges')


@judges_bp.route('/profile', methods=['GET'])
@judge_required
def get_profile():
    judge = current_judge(require_active=False)
    return success({'judge': judge.to_dict()})


@judges_bp.route('/profile', methods=['PUT'])
@judge_required
def update_profile():
    changes = load_body(JudgeProfileSchema())
    judge = judges.update_profile(current_judge(), **changes)
    return success({'judge': judge.to_dict()})


@judges_bp.route('/events', methods=['GET'])
@judge_required
def my_events():
    judge = current_judge()
    assignments = coordinator.list_judge_events(judge.id)
    return success({'assignments': [a.to_dict() for a in assignments]})


@judges_bp.route('/submissions/<int:event_id>', methods=['GET'])
@judge_required
def assigned_submissions(event_id):
    judge = current_judge()
    # Пустая очередь достраивается автоматически при первом чтении
    submissions = coordinator.get_assigned_submissions(judge.id, event_id)
    return success({'submissions': submissions})


@judges_bp.route('/review', methods=['POST'])
@judge_required
def submit_review():
    data = load_body(SubmitReviewSchema())
    judge = current_judge()
    outcome = review.submit_review(judge.id, **data)
    return success(outcome.to_dict())


@judges_bp.route('/analytics', methods=['GET'])
@judge_required
def analytics():
    judge = current_judge()
    return success({'totals': aggregator.judge_analytics(judge.id)})
