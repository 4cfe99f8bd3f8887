# routes/organizer.py
# Маршруты организатора: назначение судей, раздача работ, результаты

from flask import Blueprint, session

from routes.common import organizer_required, success
from schemas import AssignJudgeSchema, DesignateJudgeSchema, load_body
from services import aggregator, coordinator, judges, reconciliation

organizer_bp = Blueprint('organizer', __name__, url_prefix='/organizer')


@organizer_bp.route('/judges', methods=['POST'])
@organizer_required
def designate_judge():
    data = load_body(DesignateJudgeSchema())
    judge = judges.designate_judge(actor_id=session['user_id'], **data)
    return success({'judge': judge.to_dict()}, 201)


@organizer_bp.route('/judges/<int:judge_id>/deactivate', methods=['POST'])
@organizer_required
def deactivate_judge(judge_id):
    judge = judges.deactivate_judge(judge_id, actor_id=session['user_id'])
    return success({'judge': judge.to_dict()})


@organizer_bp.route('/assign', methods=['POST'])
@organizer_required
def assign_judge():
    data = load_body(AssignJudgeSchema())
    assignment = coordinator.assign_judge_to_event(
        data['event_id'], data['judge_id'], data['role'], actor_id=session['user_id']
    )
    return success({'assignment': assignment.to_dict()}, 201)


@organizer_bp.route('/judges/<int:judge_id>/event/<int:event_id>', methods=['DELETE'])
@organizer_required
def remove_judge(judge_id, event_id):
    assignment = coordinator.remove_judge_from_event(event_id, judge_id, actor_id=session['user_id'])
    return success({'assignment': assignment.to_dict()})


@organizer_bp.route('/events/<int:event_id>/judges', methods=['GET'])
@organizer_required
def event_judges(event_id):
    assignments = coordinator.list_event_judges(event_id)
    return success({'judges': [a.to_dict() for a in assignments]})


@organizer_bp.route('/events/<int:event_id>/fan-out', methods=['POST'])
@organizer_required
def fan_out(event_id):
    created = coordinator.fan_out_assignments(event_id, actor_id=session['user_id'])
    return success({'created': created})


@organizer_bp.route('/events/<int:event_id>/results', methods=['GET'])
@organizer_required
def event_results(event_id):
    results = aggregator.compute_event_results(event_id)
    return success({'results': results, 'source': 'ledger'})


@organizer_bp.route('/events/<int:event_id>/progress', methods=['GET'])
@organizer_required
def event_progress(event_id):
    return success(aggregator.review_progress(event_id))


@organizer_bp.route('/events/<int:event_id>/reconcile', methods=['POST'])
@organizer_required
def reconcile(event_id):
    appended = reconciliation.reconcile_mirror(event_id, actor_id=session['user_id'])
    return success({'appended': appended})
