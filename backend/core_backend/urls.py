"""
URL configuration for core_backend project.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/", include("tables.urls")),
    path("api/", include("products.urls")),
    path("api/", include("discounts.urls")),
    path("api/", include("staff.urls")),
    path("api/", include("payments.urls")),
    path("api/kitchen/", include("kds.urls")),
    path("api/settings/", include("settings.urls")),
]
