"""
Accounts app models.

A custom User model extending Django's ``AbstractUser``.  Users are not
registered locally: they are created on first sign-in through the Discord
OAuth flow and are keyed by the stable Discord account id.  Each user
holds exactly one role string from ``core.permissions_constants.Roles``,
which the Access Gate reads on every gated request.
"""

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from core.permissions_constants import Roles


def default_role() -> str:
    return getattr(settings, "DEFAULT_USER_ROLE", Roles.OFFICER)


class User(AbstractUser):
    """
    Portal user.

    ``discord_id`` is the external identity; ``username`` and ``avatar``
    are refreshed from the provider on every sign-in while ``role`` is
    only ever changed by an administrator.
    """

    ROLE_CHOICES = [
        (Roles.OFFICER, "Officer"),
        (Roles.STAFF, "Staff"),
        (Roles.ADMIN, "Administrator"),
        (Roles.JUDGE, "Judge"),
    ]

    discord_id = models.CharField(
        max_length=32,
        unique=True,
        null=True,
        blank=True,
        verbose_name="Discord ID",
        help_text="Stable account id issued by Discord.",
    )
    avatar = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Avatar Hash",
    )
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=default_role,
        db_index=True,
        verbose_name="Role",
    )
    national_id = models.CharField(
        max_length=20,
        blank=True,
        default="",
        verbose_name="National ID",
        help_text="Links the user to a citizen record for certificates.",
    )

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def avatar_url(self) -> str | None:
        if not (self.discord_id and self.avatar):
            return None
        return f"https://cdn.discordapp.com/avatars/{self.discord_id}/{self.avatar}.png"
