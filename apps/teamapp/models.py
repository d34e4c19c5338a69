# apps/teamapp/models.py
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.hostapp.models import Host


class SchedulingMode(models.TextChoices):
    COLLECTIVE = "collective", _("Collective")
    ROUND_ROBIN = "round_robin", _("Round Robin")


class Team(models.Model):
    """A group of hosts booked together (collective) or in turn (round robin)"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=255)
    slug = models.SlugField(_("Slug"), max_length=100, unique=True)
    scheduling_mode = models.CharField(
        _("Scheduling Mode"),
        max_length=20,
        choices=SchedulingMode.choices,
        default=SchedulingMode.COLLECTIVE,
    )
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Team")
        verbose_name_plural = _("Teams")
        ordering = ["name"]

    def __str__(self):
        return self.name

    def accepted_members(self):
        return (
            self.members.filter(is_accepted=True, host__is_active=True)
            .select_related("host")
            .order_by("host_id")
        )


class TeamMember(models.Model):
    ROLE_CHOICES = (
        ("owner", _("Owner")),
        ("admin", _("Admin")),
        ("member", _("Member")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey(
        Team,
        on_delete=models.CASCADE,
        related_name="members",
        verbose_name=_("Team"),
    )
    host = models.ForeignKey(
        Host,
        on_delete=models.CASCADE,
        related_name="team_memberships",
        verbose_name=_("Host"),
    )
    role = models.CharField(_("Role"), max_length=10, choices=ROLE_CHOICES, default="member")
    # Only accepted members take part in team scheduling
    is_accepted = models.BooleanField(_("Accepted"), default=False)
    joined_at = models.DateTimeField(_("Joined At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Team Member")
        verbose_name_plural = _("Team Members")
        unique_together = ("team", "host")

    def __str__(self):
        return f"{self.host.name} in {self.team.name}"
