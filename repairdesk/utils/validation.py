"""Request input parsing helpers.

Each helper returns the parsed value or aborts with 400 so handlers stay linear.
"""
from __future__ import annotations
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
from flask import abort

# Upper bounds keep parsed values inside a 64-bit INTEGER column
MAX_ID = 2**63 - 1
MAX_CENTS = 100_000_000_000  # $1,000,000,000.00
MAX_QUANTITY = 100_000


def parse_int_param(raw: Optional[str], field_name: str = 'id') -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        abort(400, description=f'Invalid {field_name}')
    if not 0 <= value <= MAX_ID:
        abort(400, description=f'Invalid {field_name}')
    return value


def parse_money_cents(raw: Optional[str], field_name: str = 'cost', default: int = 0) -> int:
    """Parse a currency amount like ``89.99`` or ``$1,200`` into integer cents.

    Blank input yields ``default``; negative, non-numeric or oversized input
    aborts 400.
    """
    if raw is None or not raw.strip():
        return default
    cleaned = raw.strip().lstrip('$').replace(',', '')
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        abort(400, description=f'{field_name} invalid')
    if not amount.is_finite() or amount < 0:
        abort(400, description=f'{field_name} invalid')
    if amount > Decimal(MAX_CENTS) / 100:
        abort(400, description=f'{field_name} too large')
    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def parse_quantity(raw: Optional[str], field_name: str = 'quantity') -> int:
    if raw is None or not raw.strip():
        return 1
    try:
        qty = int(raw)
    except ValueError:
        abort(400, description=f'{field_name} must be a positive integer')
    if qty < 1:
        abort(400, description=f'{field_name} must be a positive integer')
    if qty > MAX_QUANTITY:
        abort(400, description=f'{field_name} too large')
    return qty


def parse_due_date(raw: Optional[str], field_name: str = 'due_date') -> Optional[datetime]:
    """Accept ``YYYY-MM-DD`` or an ISO datetime (``datetime-local`` inputs). Blank means no deadline."""
    if raw is None or not raw.strip():
        return None
    try:
        dt = datetime.fromisoformat(raw.strip().replace('Z', '+00:00'))
    except ValueError:
        abort(400, description=f'{field_name} invalid')
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

__all__ = ['MAX_ID', 'MAX_CENTS', 'MAX_QUANTITY', 'parse_int_param', 'parse_money_cents', 'parse_quantity', 'parse_due_date']
