from datetime import date

from django.core.management.base import BaseCommand

from loans.models import Loan


class Command(BaseCommand):
    help = "Mark active loans whose next due date has passed as overdue"

    def handle(self, *args, **options):
        updated = Loan.objects.filter(
            status=Loan.ACTIVE, next_due_date__lt=date.today()
        ).update(status=Loan.OVERDUE)
        self.stdout.write(self.style.SUCCESS(f"Marked {updated} loans as overdue"))
