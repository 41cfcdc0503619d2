from __future__ import annotations
from flask import Blueprint
from repairdesk.constants.statuses import ALL_STATUSES
from repairdesk.services import tickets as svc
from repairdesk.services.identity import current_user_name
from repairdesk.utils.rendering import render_page
from repairdesk.utils.timestamps import utcnow
from repairdesk.utils.validation import parse_int_param

tech_bp = Blueprint('technicians', __name__)


@tech_bp.get('/', strict_slashes=False)
def technician_queue():
    user = current_user_name()
    return render_page(
        'technician_queue',
        current_user=user,
        now=utcnow(),
        technician=svc.find_technician(user),
        tickets=svc.technician_queue(user),
    )


@tech_bp.get('/<ticket_id>')
def technician_ticket_view(ticket_id: str):
    t = svc.get_ticket_or_404(parse_int_param(ticket_id, 'ticket ID'))
    return render_page(
        'ticket_detail',
        current_user=current_user_name(),
        now=utcnow(),
        ticket=t,
        statuses=ALL_STATUSES,
        technician_mode=True,
    )
