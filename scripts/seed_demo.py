#!/usr/bin/env python
"""Idempotent demo data loader for local development.

Usage:
    python scripts/seed_demo.py             # add demo technicians & tickets
    python scripts/seed_demo.py --reset     # delete all tickets/technicians first
    python scripts/seed_demo.py --dry-run   # run logic then rollback (no DB changes)
"""
from __future__ import annotations
import os, sys, argparse, textwrap

# Allow running from repo root
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from repairdesk import create_app, get_db  # noqa: E402
from seeds.demo_tickets import load_demo_data, clear_demo_data  # noqa: E402


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Load RepairDesk demo data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_demo.py\n  start over: seed_demo.py --reset\n  dry run: seed_demo.py --dry-run\n""")
    )
    p.add_argument('--reset', action='store_true', help='Delete existing tickets and technicians before loading')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()
    with app.app_context():
        session = get_db()
        if args.reset:
            clear_demo_data(session)
            print('[INFO] Cleared existing tickets and technicians.')
        added = load_demo_data(session)
        if args.dry_run:
            session.rollback()
            print(f'[DRY-RUN] Would add {added} row(s); rolled back.')
        else:
            session.commit()
            print(f'[INFO] Added {added} row(s).')
    return 0


if __name__ == '__main__':
    sys.exit(main())
