from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class EventTypeAppConfig(AppConfig):
    name = "apps.eventtypeapp"
    verbose_name = _("Event Types")
