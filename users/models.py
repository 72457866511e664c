# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_ADMIN = "admin"
    ROLE_EDITOR = "editor"

    ROLE_CHOICES = (
        (ROLE_ADMIN, 'Admin'),
        (ROLE_EDITOR, 'Editor'),
    )

    name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(unique=True)

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_EDITOR
    )

    # Storage path under MEDIA_ROOT/users/
    profile_image = models.CharField(max_length=1024, blank=True, null=True)

    def __str__(self):
        return self.name or self.email or self.username

    @property
    def display_name(self):
        return self.name or self.username
