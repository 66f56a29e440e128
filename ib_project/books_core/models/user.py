import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models

from ..managers import UserManager


# ---------- Custom User ----------
class User(AbstractUser):
    """
    Operator account. Carries the profile fields (full name, phone, role)
    so there is no separate profile table to keep in sync.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    full_name = models.CharField(max_length=200, blank=True)
    # Optional contact number, can be left empty in forms
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=32, default="user")

    objects = UserManager()

    def __str__(self):
        # Fall back to username if no name is set
        return self.full_name or self.get_full_name() or self.username
