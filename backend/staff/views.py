from rest_framework import mixins, viewsets

from .models import StaffMember
from .serializers import StaffMemberSerializer, StaffMemberCreateSerializer


class StaffMemberViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = StaffMember.objects.filter(is_active=True)
    pagination_class = None

    def get_serializer_class(self):
        if self.action == "create":
            return StaffMemberCreateSerializer
        return StaffMemberSerializer
