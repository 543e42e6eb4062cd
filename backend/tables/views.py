import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.exceptions import error_payload
from orders.consumers import convert_complex_types_to_str
from orders.services import PendingOrderTracker
from .models import TableRecord
from .serializers import TableRecordSerializer
from .services import TableService

logger = logging.getLogger(__name__)


class TableViewSet(BaseViewSet):
    """
    Table management plus the front-of-house pending order view.

    POST /api/tables/<id>/reset/           force the table back to available
    GET  /api/tables/<id>/pending/         kitchen status of the table's order
    POST /api/tables/<id>/pending/serve/   clear a table whose order is ready
    """

    queryset = TableRecord.objects.all()
    serializer_class = TableRecordSerializer
    pagination_class = None
    search_fields = ["name"]
    ordering_fields = ["name", "status", "order_placed_at"]
    ordering = ["name"]
    filterset_fields = ["status"]

    def perform_create(self, serializer):
        serializer.instance = TableService.create_table(serializer.validated_data["name"])

    def perform_update(self, serializer):
        serializer.instance = TableService.rename_table(
            serializer.instance.pk, serializer.validated_data.get("name", serializer.instance.name)
        )

    def perform_destroy(self, instance):
        TableService.delete_table(instance.pk)

    @action(detail=True, methods=["post"])
    def reset(self, request, pk=None):
        table = self.get_object()
        TableService.reset_table(table.pk)
        table.refresh_from_db()
        return Response(self.get_serializer(table).data)

    @action(detail=True, methods=["get"])
    def pending(self, request, pk=None):
        tracker = PendingOrderTracker(self.get_object().pk)
        tracker.refresh()
        return Response(convert_complex_types_to_str(tracker.state()))

    @action(detail=True, methods=["post"], url_path="pending/serve")
    def serve(self, request, pk=None):
        warnings = []
        tracker = PendingOrderTracker(self.get_object().pk, on_warning=warnings.append)
        tracker.refresh()
        if not tracker.mark_as_served():
            return Response(error_payload(warnings[0]), status=status.HTTP_409_CONFLICT)
        tracker.refresh()
        return Response(convert_complex_types_to_str(tracker.state()))
