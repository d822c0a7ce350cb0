"""
Management command to recompute the cached payment status of billable residents.

Usage:
    python manage.py refresh_payment_status
    python manage.py refresh_payment_status --branch 3 --date 2025-01-06
"""

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from branches.models import Branch
from payments.services import PaymentService


class Command(BaseCommand):
    help = 'Refresh paid/pending/overdue payment status for active residents'

    def add_arguments(self, parser):
        parser.add_argument('--branch', type=int, help='Only refresh this branch id')
        parser.add_argument('--date', help='Evaluate status as of this date (YYYY-MM-DD)')

    def handle(self, *args, **options):
        today = None
        if options.get('date'):
            try:
                today = datetime.strptime(options['date'], '%Y-%m-%d').date()
            except ValueError:
                raise CommandError(f"Invalid --date '{options['date']}', expected YYYY-MM-DD")

        branches = Branch.objects.filter(is_active=True)
        if options.get('branch'):
            branches = branches.filter(id=options['branch'])
            if not branches.exists():
                raise CommandError(f"Active branch #{options['branch']} not found")

        service = PaymentService()
        total_changed = 0
        for branch in branches:
            changed = service.refresh_all_for_branch(branch.id, today=today)
            total_changed += changed
            self.stdout.write(f"  {branch.name}: {changed} status change(s)")

        self.stdout.write(self.style.SUCCESS(f"\n✓ Payment status refreshed ({total_changed} changed)"))
