# routes/events.py
# Публичные маршруты мероприятия

from flask import Blueprint, current_app

from routes.common import success
from services import aggregator

events_bp = Blueprint('events', __name__, url_prefix='/events')


@events_bp.route('/<int:event_id>/leaderboard', methods=['GET'])
def leaderboard(event_id):
    entries = aggregator.compute_leaderboard(event_id)
    aggregator.publish_leaderboard_update(event_id, current_app.extensions['leaderboard_dedupe'])
    return success({'entries': entries, 'source': 'mirror'})
