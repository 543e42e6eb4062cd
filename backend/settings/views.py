from rest_framework.response import Response

from core_backend.base import BaseAPIView
from .models import GlobalSettings
from .serializers import GlobalSettingsSerializer


class GlobalSettingsViewSet(BaseAPIView):
    """
    GET   /api/settings/global/   current restaurant settings
    PATCH /api/settings/global/   update brand, currency or rates
    """

    def list(self, request):
        return Response(GlobalSettingsSerializer(GlobalSettings.load()).data)

    def partial_update(self, request, pk=None):
        serializer = GlobalSettingsSerializer(GlobalSettings.load(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
