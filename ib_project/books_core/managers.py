from decimal import Decimal

from django.contrib.auth.base_user import BaseUserManager
from django.db import models
from django.db.models import Case, F, Sum, When
from django.db.models.functions import Coalesce

from .exceptions import ActivityLogImmutable

ZERO = Decimal("0.00")


# -----------------------------------------
# Transactions
# -----------------------------------------
class TransactionQuerySet(models.QuerySet):
    def credits(self):
        return self.filter(transaction_type="credit")

    def debits(self):
        return self.filter(transaction_type="debit")

    def for_fund_source(self, fund_source):
        return self.filter(fund_source=fund_source)

    def since(self, moment):
        return self.filter(created_at__gte=moment)

    def totals(self):
        """
        Credit and debit sums in one query.
        Returns {"credit": Decimal, "debit": Decimal}; empty sets give 0.00.
        """
        return self.aggregate(
            credit=Coalesce(
                Sum(Case(When(transaction_type="credit", then=F("amount")))),
                ZERO,
            ),
            debit=Coalesce(
                Sum(Case(When(transaction_type="debit", then=F("amount")))),
                ZERO,
            ),
        )

    def net_credit(self):
        # credits minus debits, signed
        agg = self.totals()
        return agg["credit"] - agg["debit"]


class TransactionManager(models.Manager.from_queryset(TransactionQuerySet)):
    pass


# -----------------------------------------
# Projects / advances
# -----------------------------------------
class ProjectQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status="active")

    def total_outstanding(self):
        return self.aggregate(
            total=Coalesce(Sum("remaining_amount"), ZERO)
        )["total"]


class PettyCashAdvanceQuerySet(models.QuerySet):
    # Advances the employee still has to account for
    def outstanding(self):
        return self.filter(status__in=["open", "partially_returned"])


# -----------------------------------------
# Activity log: append-only
# -----------------------------------------
class ActivityLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ActivityLogImmutable("Activity log entries cannot be updated.")

    def delete(self):
        raise ActivityLogImmutable("Activity log entries cannot be deleted.")

    def for_project(self, project_id):
        return self.filter(data__project_id=str(project_id))

    def for_transaction(self, transaction_id):
        return self.filter(data__transaction_id=str(transaction_id))


class ActivityLogManager(models.Manager.from_queryset(ActivityLogQuerySet)):
    pass


# -----------------------------------------
# Users
# -----------------------------------------
class UserManager(BaseUserManager):
    """ Enforce rules around how users are created """

    use_in_migrations = True  # Allow Django to serialize this manager in migrations

    # Private helper used by both `create_user` and `create_superuser`
    def _create_user(self, username, email, password, **extra_fields):
        if not username:  # Username is required
            raise ValueError("The given username must be set")
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)  # Password is hashed
        user.save(using=self._db)
        return user

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, email, password, **extra_fields)

    # Superusers must always have full privileges
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "admin")
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True")
        return self._create_user(username, email, password, **extra_fields)
