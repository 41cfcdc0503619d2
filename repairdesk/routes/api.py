from __future__ import annotations
from flask import Blueprint
from repairdesk.services.tickets import count_open

api_bp = Blueprint('api', __name__)


@api_bp.get('/stats/open')
def open_tickets_count():
    return str(count_open()), 200, {'Content-Type': 'text/plain; charset=utf-8'}
