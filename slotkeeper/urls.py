"""Slotkeeper project - main URL configuration."""

from django.contrib import admin
from django.db import connection
from django.http import JsonResponse
from django.urls import include, path, re_path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

# -----------------------------------------------------------------------------
# Swagger / ReDoc API schema setup
# -----------------------------------------------------------------------------
schema_view = get_schema_view(
    openapi.Info(
        title="Slotkeeper API",
        default_version="v1",
        description="Availability and booking conflict resolution engine",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)


# -----------------------------------------------------------------------------
# Health check endpoint
# -----------------------------------------------------------------------------
def health(request):
    """Health-check endpoint used by load-balancers; also pings the database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except Exception as e:
        return JsonResponse({"status": "error", "database": str(e)}, status=503)
    return JsonResponse({"status": "ok"})


api_v1_patterns = [
    path("hosts/", include("apps.hostapp.urls")),
    path("event-types/", include("apps.eventtypeapp.urls")),
    path("availability/", include("apps.availabilityapp.urls")),
    path("teams/", include("apps.teamapp.urls")),
    path("bookings/", include("apps.bookingapp.urls")),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", include(api_v1_patterns)),
    re_path(
        r"^api/docs/swagger(?P<format>\.json|\.yaml)$",
        schema_view.without_ui(cache_timeout=0),
        name="schema-json",
    ),
    path("api/docs/", schema_view.with_ui("swagger", cache_timeout=0), name="schema-swagger-ui"),
    path("api/redoc/", schema_view.with_ui("redoc", cache_timeout=0), name="schema-redoc"),
    path("health/", health, name="health_check"),
]
