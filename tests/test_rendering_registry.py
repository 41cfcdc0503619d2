import logging
import pytest
from jinja2 import DictLoader, Environment
from repairdesk.utils.rendering import (
    TemplateRegistry, TemplateRegistryError, current_registry, render_page, render_fragment, format_money, format_datetime,
)

LAYOUT = '<html><title>{% block title %}{% endblock %}</title><body>{% block content %}{% endblock %}</body></html>'


def _env(extra):
    templates = {'layouts/base.html': LAYOUT}
    templates.update(extra)
    return Environment(loader=DictLoader(templates), autoescape=True)


def test_app_registry_has_every_page_and_fragment(app_instance):
    registry = current_registry()
    assert set(registry.units) == {'dashboard', 'tickets', 'ticket_form', 'ticket_detail', 'technician_queue'}
    assert {'status_badge', 'ticket_list', 'part_row', 'note_item', 'cost_summary', 'stats_cards', 'pagination'} <= set(registry.fragments)
    assert {'title', 'content'} <= registry.layout_blocks


def test_registry_is_read_only(app_instance):
    registry = current_registry()
    with pytest.raises(TypeError):
        registry.units['rogue'] = registry.units['dashboard']
    with pytest.raises(TypeError):
        registry.fragments['rogue'] = registry.fragments['status_badge']


def test_pages_defining_same_block_do_not_collide():
    env = _env({
        'pages/alpha.html': '{% extends "layouts/base.html" %}{% block content %}ALPHA {% include "partials/badge.html" %}{% endblock %}',
        'pages/beta.html': '{% extends "layouts/base.html" %}{% block content %}BETA {% include "partials/badge.html" %}{% endblock %}',
        'partials/badge.html': '<b>{{ label }}</b>',
    })
    registry = TemplateRegistry.build(env)
    alpha = registry.page('alpha').template.render(label='x')
    beta = registry.page('beta').template.render(label='y')
    assert 'ALPHA <b>x</b>' in alpha and 'BETA' not in alpha
    assert 'BETA <b>y</b>' in beta and 'ALPHA' not in beta
    assert registry.fragment('badge').render(label='<z>') == '<b>&lt;z&gt;</b>'


def test_unknown_names_resolve_to_none():
    registry = TemplateRegistry.build(_env({'pages/only.html': '{% extends "layouts/base.html" %}'}))
    assert registry.page('missing') is None
    assert registry.fragment('missing') is None


def test_partial_may_not_redefine_layout_block():
    env = _env({'partials/bad.html': '{% block content %}oops{% endblock %}'})
    with pytest.raises(TemplateRegistryError):
        TemplateRegistry.build(env)


def test_registry_requires_a_layout():
    env = Environment(loader=DictLoader({'pages/a.html': 'hi'}))
    with pytest.raises(TemplateRegistryError):
        TemplateRegistry.build(env)


def test_unknown_page_returns_500_and_logs(app_instance, caplog):
    app_instance.add_url_rule('/_missing', 'missing_page', lambda: render_page('no_such_page', current_user='x'))
    caplog.set_level(logging.ERROR)
    resp = app_instance.test_client().get('/_missing')
    assert resp.status_code == 500
    assert resp.get_data(as_text=True) == 'Internal server error'
    assert any('no_such_page' in r.getMessage() and r.levelno == logging.ERROR for r in caplog.records)


def test_render_failure_returns_500_without_partial_output(app_instance, caplog):
    # dashboard needs `stats`; leaving it out makes the template raise mid-render
    app_instance.add_url_rule('/_broken', 'broken_page', lambda: render_page('dashboard', current_user='x'))
    caplog.set_level(logging.ERROR)
    resp = app_instance.test_client().get('/_broken')
    assert resp.status_code == 500
    body = resp.get_data(as_text=True)
    assert '<html' not in body
    assert body == 'Internal server error'
    assert any('Error rendering template dashboard' in r.getMessage() for r in caplog.records)


def test_unknown_fragment_returns_500(app_instance, caplog):
    app_instance.add_url_rule('/_frag', 'missing_frag', lambda: render_fragment('nope'))
    caplog.set_level(logging.ERROR)
    resp = app_instance.test_client().get('/_frag')
    assert resp.status_code == 500
    assert any('nope' in r.getMessage() for r in caplog.records)


def test_known_page_renders_its_content(client, demo_data):
    resp = client.get('/technician')
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert 'Open Work' in body
    assert '<title>My Queue' in body


def test_money_and_datetime_filters():
    from datetime import datetime
    from decimal import Decimal
    assert format_money(Decimal('1234.5')) == '$1,234.50'
    assert format_money(None) == '$0.00'
    assert format_datetime(datetime(2006, 1, 2, 15, 4)) == 'Jan 2, 2006 3:04 PM'
    assert format_datetime(datetime(2006, 1, 2, 0, 5)) == 'Jan 2, 2006 12:05 AM'
    assert format_datetime(None) == ''
