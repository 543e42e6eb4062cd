from django.urls import path
from .views import GlobalSettingsViewSet

app_name = "settings"

urlpatterns = [
    path(
        "global/",
        GlobalSettingsViewSet.as_view({"get": "list", "patch": "partial_update"}),
        name="global-settings",
    ),
]
