import logging

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from books_core.models import Project
from books_core.services.balance import expected_remaining

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = (
        "Recompute each project's remaining_amount from its transactions "
        "and report any drift from the stored value."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--project",
            help="Only check the project with this id.",
        )

    def handle(self, *args, **options):
        projects = Project.objects.order_by("name")
        value = options["project"]
        if value:
            try:
                projects = projects.filter(pk=value)
            except ValidationError:
                raise CommandError(f"'{value}' is not a valid project id")

        drifted = []
        for project in projects:
            expected = expected_remaining(project)
            if expected != project.remaining_amount:
                drifted.append(project)
                logger.error(
                    "Project %s remaining_amount is %s, transactions say %s",
                    project.pk, project.remaining_amount, expected,
                )
                self.stdout.write(self.style.ERROR(
                    f"{project.name}: stored {project.remaining_amount}, "
                    f"expected {expected}"))
            elif options["verbosity"] > 1:
                self.stdout.write(f"{project.name}: {project.remaining_amount} ok")

        if drifted:
            raise CommandError(f"{len(drifted)} project balance(s) out of step")
        self.stdout.write(self.style.SUCCESS("All project balances match their transactions."))
