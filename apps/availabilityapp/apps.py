from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AvailabilityAppConfig(AppConfig):
    name = "apps.availabilityapp"
    verbose_name = _("Availability")

    def ready(self):
        import apps.availabilityapp.signals  # noqa
