from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class TeamAppConfig(AppConfig):
    name = "apps.teamapp"
    verbose_name = _("Teams")
