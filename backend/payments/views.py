from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import ReadOnlyBaseViewSet
from .filters import TransactionFilter
from .models import Transaction
from .serializers import TransactionSerializer
from .services import TransactionLedger


class TransactionViewSet(ReadOnlyBaseViewSet):
    """
    Transaction history, newest first.

    Filter by calendar date with `?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD`
    (both inclusive).
    """

    queryset = Transaction.objects.all()
    serializer_class = TransactionSerializer
    filterset_class = TransactionFilter
    ordering = ["-created_at"]
    ordering_fields = ["created_at", "total"]

    @action(detail=True, methods=["get"])
    def receipt(self, request, pk=None):
        return Response(TransactionLedger.build_receipt(self.get_object()))
