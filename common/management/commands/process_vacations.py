"""
Management command to finalize notice-period residents whose vacation date has passed.
The background scheduler runs the same sweep at 00:00 and 06:00; this command
is the manual or crontab equivalent.

Usage:
    python manage.py process_vacations
    python manage.py process_vacations --dry-run --branch 3
    python manage.py process_vacations --date 2025-01-20
"""

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import SchedulerPartialFailure
from residents.services import VacationScheduler


class Command(BaseCommand):
    help = 'Finalize vacations for notice-period residents whose vacation date has arrived'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List residents that would be vacated without changing anything',
        )
        parser.add_argument('--branch', type=int, help='Limit the sweep to one branch id')
        parser.add_argument('--date', help='Run as if today were this date (YYYY-MM-DD)')

    def handle(self, *args, **options):
        today = self._parse_date(options.get('date'))
        branch_id = options.get('branch')
        scheduler = VacationScheduler()
        run_date = scheduler.resolve_today(today)

        self.stdout.write(f"\n{'=' * 60}")
        self.stdout.write(f"  VACATION SWEEP - {run_date.isoformat()}")
        self.stdout.write(f"{'=' * 60}\n")

        if options['dry_run']:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No residents will be vacated\n"))
            overdue = scheduler.list_overdue(branch_id=branch_id, today=run_date)
            for resident in overdue:
                self.stdout.write(
                    f"  - {resident.full_name} ({resident.location}) - due {resident.vacation_date}"
                )
            self.stdout.write(f"\n{len(overdue)} resident(s) would be vacated")
            return

        result = scheduler.process_overdue_vacations(branch_id=branch_id, today=run_date)

        self.stdout.write(f"Processed: {result.processed_count}")
        self.stdout.write(f"Skipped:   {len(result.skipped)}")
        self.stdout.write(f"Failed:    {result.failed_count}")

        try:
            result.raise_for_failures()
        except SchedulerPartialFailure as e:
            for failure in e.failures:
                self.stderr.write(f"  ✗ Resident #{failure['resident_id']}: {failure['error']}")
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS("\n✓ Vacation sweep completed"))

    def _parse_date(self, value):
        if not value:
            return None
        try:
            return datetime.strptime(value, '%Y-%m-%d').date()
        except ValueError:
            raise CommandError(f"Invalid --date '{value}', expected YYYY-MM-DD")
