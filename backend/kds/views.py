import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseAPIView
from core_backend.exceptions import error_payload
from orders.consumers import convert_complex_types_to_str
from .services import KitchenQueueProjector

logger = logging.getLogger(__name__)


class KitchenQueueViewSet(BaseAPIView):
    """
    Kitchen queue for clients without a WebSocket connection.

    GET  /api/kitchen/queue/                 active orders, oldest first
    POST /api/kitchen/queue/<id>/accept/     pending -> in progress
    POST /api/kitchen/queue/<id>/prepared/   serving -> order ready
    """

    lookup_value_regex = r"\d+"

    def _run(self, table_id, transition):
        warnings = []
        projector = KitchenQueueProjector(on_warning=warnings.append)
        updated = getattr(projector, transition)(int(table_id))
        if not updated:
            return Response(error_payload(warnings[0]), status=status.HTTP_409_CONFLICT)
        projector.refresh()
        return Response(convert_complex_types_to_str(projector.state()))

    def list(self, request):
        projector = KitchenQueueProjector()
        projector.refresh()
        return Response(convert_complex_types_to_str(projector.state()))

    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):
        return self._run(pk, "accept_order")

    @action(detail=True, methods=["post"])
    def prepared(self, request, pk=None):
        return self._run(pk, "mark_prepared")
