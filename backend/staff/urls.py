from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import StaffMemberViewSet

app_name = "staff"

router = DefaultRouter()
router.register(r"staff", StaffMemberViewSet, basename="staff")

urlpatterns = [
    path("", include(router.urls)),
]
