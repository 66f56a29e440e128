import logging

from ..models import Project
from .money import parse_amount
from .validation import check_project_status, require_text

logger = logging.getLogger(__name__)


def create_project(customer, *, name, estimated_total, **fields) -> Project:
    """
    Open a project for a customer. remaining_amount always starts at
    estimated_total; a remaining_amount passed in fields is overwritten.
    """
    estimated_total = parse_amount(estimated_total, "estimated_total")
    if "status" in fields:
        check_project_status(fields["status"])
    project = Project.objects.create(
        customer=customer,
        name=require_text(name, "name"),
        estimated_total=estimated_total,
        **fields,
    )
    logger.info("Opened project %s for %s at %s", project.pk, customer, estimated_total)
    return project
