from __future__ import annotations
from flask import Blueprint
from repairdesk.services import tickets as svc
from repairdesk.services.identity import current_user_name
from repairdesk.utils.rendering import render_page
from repairdesk.utils.timestamps import utcnow

dash_bp = Blueprint('dashboard', __name__)


@dash_bp.get('/')
def dashboard():
    now = utcnow()
    return render_page(
        'dashboard',
        current_user=current_user_name(),
        now=now,
        stats=svc.compute_stats(now),
        tickets=svc.recent_tickets(),
        technicians=svc.list_technicians(),
        workloads=svc.technician_workloads(),
    )
