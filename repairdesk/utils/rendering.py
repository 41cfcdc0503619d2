"""Page and fragment template registry.

Every page under ``pages/`` extends a layout from ``layouts/`` and pulls shared
snippets from ``partials/``. The registry compiles each page once at startup
into its own rendering unit, keyed by the page's file stem, so two pages that
both fill ``content`` never see each other's blocks. Partials are registered
by stem in a separate fragment table and rendered on their own for htmx
responses.

Usage:
    registry = TemplateRegistry.build(app.jinja_env)
    html = render_page('dashboard', stats=stats)
    html = render_fragment('status_badge', ticket=ticket)

Both helpers render to a string before any response is built; a missing name
or a render error is logged and turned into a bare 500.
"""
from __future__ import annotations
import posixpath
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional
from flask import abort, current_app, render_template
from jinja2 import Environment, Template, TemplateError
from repairdesk.utils.timestamps import as_utc, utcnow

LAYOUT_DIR = 'layouts'
PAGE_DIR = 'pages'
PARTIAL_DIR = 'partials'
TEMPLATE_EXT = 'html'


class TemplateRegistryError(Exception):
    pass


@dataclass(frozen=True)
class RenderingUnit:
    name: str
    template: Template


class TemplateRegistry:
    def __init__(self, units: Mapping[str, RenderingUnit], fragments: Mapping[str, Template], layout_blocks: frozenset):
        self.units = MappingProxyType(dict(units))
        self.fragments = MappingProxyType(dict(fragments))
        self.layout_blocks = layout_blocks

    @classmethod
    def build(cls, env: Environment) -> 'TemplateRegistry':
        names = env.list_templates(extensions=[TEMPLATE_EXT])
        layouts = [n for n in names if n.startswith(LAYOUT_DIR + '/')]
        if not layouts:
            raise TemplateRegistryError(f'no layout templates found in {LAYOUT_DIR}/')
        layout_blocks = set()
        for name in layouts:
            layout_blocks.update(env.get_template(name).blocks)

        fragments = {}
        for name in (n for n in names if n.startswith(PARTIAL_DIR + '/')):
            tmpl = env.get_template(name)
            clash = layout_blocks.intersection(tmpl.blocks)
            if clash:
                raise TemplateRegistryError(f'partial {name} redefines layout block(s) {sorted(clash)}')
            fragments[_stem(name)] = tmpl

        units = {}
        for name in (n for n in names if n.startswith(PAGE_DIR + '/')):
            try:
                tmpl = env.get_template(name)
            except TemplateError as e:
                raise TemplateRegistryError(f'parsing {name}: {e}') from e
            units[_stem(name)] = RenderingUnit(name=_stem(name), template=tmpl)
        return cls(units, fragments, frozenset(layout_blocks))

    def page(self, name: str) -> Optional[RenderingUnit]:
        return self.units.get(name)

    def fragment(self, name: str) -> Optional[Template]:
        return self.fragments.get(name)


def _stem(template_name: str) -> str:
    return posixpath.splitext(posixpath.basename(template_name))[0]


def current_registry() -> TemplateRegistry:
    return current_app.extensions['repairdesk.templates']


def render_page(name: str, **context: Any) -> str:
    unit = current_registry().page(name)
    if unit is None:
        current_app.logger.error('Template %s not found', name)
        abort(500)
    try:
        return render_template(unit.template, **context)
    except Exception:
        current_app.logger.exception('Error rendering template %s', name)
        abort(500)


def render_fragment(name: str, **context: Any) -> str:
    tmpl = current_registry().fragment(name)
    if tmpl is None:
        current_app.logger.error('Error rendering partial %s: template not found', name)
        abort(500)
    try:
        return render_template(tmpl, **context)
    except Exception:
        current_app.logger.exception('Error rendering partial %s', name)
        abort(500)


def format_money(value) -> str:
    if value is None:
        value = Decimal('0')
    return '${:,.2f}'.format(Decimal(value))


def format_datetime(value: Optional[datetime]) -> str:
    """``Jan 2, 2006 3:04 PM`` style, in UTC."""
    if value is None:
        return ''
    dt = as_utc(value)
    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day}, {dt.year} {hour}:{dt:%M} {dt:%p}"


def format_date_input(value: Optional[datetime]) -> str:
    """Value for an ``<input type="datetime-local">``."""
    if value is None:
        return ''
    return as_utc(value).strftime('%Y-%m-%dT%H:%M')


def register_filters(env: Environment):
    env.filters['money'] = format_money
    env.filters['datetime'] = format_datetime
    env.filters['date_input'] = format_date_input
    env.globals['utcnow'] = utcnow
