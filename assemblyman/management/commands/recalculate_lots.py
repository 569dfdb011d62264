"""
Management command to rebuild lot quantities from the move ledger.

Usage:
    python manage.py recalculate_lots
    python manage.py recalculate_lots --dry-run
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db.models import Sum
from django.db.models.functions import Coalesce

from assemblyman.models import Lot


class Command(BaseCommand):
    """Recalculate lot quantity caches command."""

    help = 'Rebuild lot quantities from their moves'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show drifted lots without fixing them'
        )

    def handle(self, *args, **options):
        lots = Lot.objects.select_related('item', 'vendor').annotate(
            ledger=Coalesce(Sum('moves__delta'), Decimal('0'))
        )

        drifted = 0
        for lot in lots:
            if lot.ledger == lot._quantity:
                continue
            drifted += 1
            self.stdout.write(f'{lot}: ledger says {lot.ledger}')
            if not options['dry_run']:
                lot.recalculate()

        if options['dry_run']:
            self.stdout.write(f'{drifted} lot(s) would be recalculated')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{drifted} lot(s) recalculated')
            )
