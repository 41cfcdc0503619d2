from __future__ import annotations
from flask import Blueprint, request, abort, redirect, url_for, current_app
from repairdesk.constants.statuses import ALL_STATUSES, PRIORITIES, STATUS_NEW, PRIORITY_NORMAL
from repairdesk.models.ticket import Ticket
from repairdesk.services import tickets as svc
from repairdesk.services.identity import current_user_name
from repairdesk.utils.rendering import render_page, render_fragment
from repairdesk.utils.timestamps import utcnow
from repairdesk.utils.validation import parse_int_param, parse_money_cents, parse_quantity, parse_due_date

tickets_bp = Blueprint('tickets', __name__)

HTML = {'Content-Type': 'text/html; charset=utf-8'}


def _is_htmx() -> bool:
    return request.headers.get('HX-Request') == 'true'


def _ticket_id(raw: str) -> int:
    return parse_int_param(raw, 'ticket ID')


def _ticket_fields(form) -> dict:
    fields = {k: form.get(k, '').strip() for k in svc.EDITABLE_FIELDS if k in form}
    if 'status' in form:
        fields['status'] = form.get('status', '').strip()
    if 'estimated_cost' in form:
        fields['estimated_cost_cents'] = parse_money_cents(form.get('estimated_cost'), 'estimated_cost')
    if 'assigned_to' in form:
        fields['assigned_to'] = form.get('assigned_to', '').strip()
    if 'due_date' in form:
        fields['due_date'] = parse_due_date(form.get('due_date'))
    return fields


def _form_page(ticket: Ticket, is_new: bool):
    return render_page(
        'ticket_form',
        current_user=current_user_name(),
        now=utcnow(),
        ticket=ticket,
        is_new=is_new,
        technicians=svc.list_technicians(),
        workloads=svc.technician_workloads(),
        statuses=ALL_STATUSES,
        priorities=PRIORITIES,
    )


@tickets_bp.get('/', strict_slashes=False)
def list_tickets():
    status = request.args.get('status') or None
    search = request.args.get('search') or None
    current_app.logger.info('Listing tickets with status=%s, search=%s', status, search)
    page = svc.list_tickets(status=status, search=search, sort=request.args.get('sort'))
    now = utcnow()
    listing = dict(
        now=now,
        page=page,
        tickets=page.items,
        status=status or '',
        search=search or '',
        sort=request.args.get('sort') or '',
    )
    if _is_htmx():
        # Footer counts and paging links follow the list out of band
        body = render_fragment('ticket_list', **listing) + render_fragment('pagination', oob=True, **listing)
        return body, 200, HTML
    return render_page('tickets', current_user=current_user_name(), statuses=ALL_STATUSES, **listing)


@tickets_bp.get('/new')
def new_ticket_form():
    return _form_page(Ticket(status=STATUS_NEW, priority=PRIORITY_NORMAL), is_new=True)


@tickets_bp.post('/', strict_slashes=False)
def create_ticket():
    fields = _ticket_fields(request.form)
    current_app.logger.info('Creating ticket: %s', fields)
    t = svc.create_ticket(fields, created_by=current_user_name())
    return redirect(url_for('tickets.view_ticket', ticket_id=t.id), code=303)


@tickets_bp.get('/search')
def search_tickets():
    term = request.args.get('search', '')
    current_app.logger.info('Searching tickets: %s', term)
    return render_fragment('ticket_list', tickets=svc.search_tickets(term), now=utcnow()), 200, HTML


@tickets_bp.get('/<ticket_id>')
def view_ticket(ticket_id: str):
    t = svc.get_ticket_or_404(_ticket_id(ticket_id))
    return render_page(
        'ticket_detail',
        current_user=current_user_name(),
        now=utcnow(),
        ticket=t,
        statuses=ALL_STATUSES,
        technician_mode=False,
    )


@tickets_bp.get('/<ticket_id>/edit')
def edit_ticket_form(ticket_id: str):
    t = svc.get_ticket_or_404(_ticket_id(ticket_id))
    return _form_page(t, is_new=False)


@tickets_bp.post('/<ticket_id>')
def update_ticket(ticket_id: str):
    t = svc.get_ticket_or_404(_ticket_id(ticket_id))
    fields = _ticket_fields(request.form)
    current_app.logger.info('Updating ticket %s: %s', t.id, fields)
    svc.update_ticket(t, fields)
    return redirect(url_for('tickets.view_ticket', ticket_id=t.id), code=303)


@tickets_bp.post('/<ticket_id>/status')
def update_ticket_status(ticket_id: str):
    t = svc.get_ticket_or_404(_ticket_id(ticket_id))
    status = request.form.get('status', '').strip()
    if not status:
        abort(400, description='status required')
    current_app.logger.info('Updating ticket %s status to: %s', t.id, status)
    svc.set_status(t, status)
    return render_fragment('status_badge', ticket=t), 200, HTML


@tickets_bp.post('/<ticket_id>/parts')
def add_part(ticket_id: str):
    t = svc.get_ticket_or_404(_ticket_id(ticket_id))
    name = request.form.get('part_name', '').strip()
    if not name:
        abort(400, description='part_name required')
    quantity = parse_quantity(request.form.get('quantity'))
    cost_cents = parse_money_cents(request.form.get('cost'), 'cost')
    current_app.logger.info('Adding part to ticket %s: %s x%d @ %d cents', t.id, name, quantity, cost_cents)
    part = svc.add_part(t, name, quantity, cost_cents, added_by=current_user_name())
    body = render_fragment('part_row', ticket=t, part=part) + render_fragment('cost_summary', ticket=t, oob=True)
    return body, 200, HTML


@tickets_bp.delete('/<ticket_id>/parts/<part_id>')
def delete_part(ticket_id: str, part_id: str):
    t = svc.get_ticket_or_404(_ticket_id(ticket_id))
    pid = parse_int_param(part_id, 'part ID')
    current_app.logger.info('Deleting part %s from ticket %s', pid, t.id)
    svc.delete_part(t, pid)
    # Row swaps out empty; totals refresh out of band
    return render_fragment('cost_summary', ticket=t, oob=True), 200, HTML


@tickets_bp.post('/<ticket_id>/notes')
def add_note(ticket_id: str):
    t = svc.get_ticket_or_404(_ticket_id(ticket_id))
    content = request.form.get('note', '').strip()
    if not content:
        abort(400, description='note required')
    current_app.logger.info('Adding note to ticket %s: %s', t.id, content)
    note = svc.add_note(t, content, author=current_user_name())
    return render_fragment('note_item', note=note), 200, HTML
