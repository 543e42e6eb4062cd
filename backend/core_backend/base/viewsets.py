from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from ..pagination import StandardPagination


class BaseViewSet(viewsets.ModelViewSet):
    """
    Base ViewSet that provides standard configuration for all ModelViewSets.

    Features:
    - Standard pagination, filtering, search and ordering
    - Domain errors rendered by core_backend.exceptions.pos_exception_handler

    Usage:
        class TableViewSet(BaseViewSet):
            queryset = TableRecord.objects.all()
            serializer_class = TableRecordSerializer
    """

    pagination_class = StandardPagination

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]

    # Default ordering (can be overridden)
    ordering = ['-id']


class ReadOnlyBaseViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Base ViewSet for read-only endpoints (catalog, roster, ledger).
    """

    pagination_class = StandardPagination
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    ordering = ['-id']


class BaseAPIView(viewsets.ViewSet):
    """
    Base class for action-only endpoints that are not backed by a queryset
    (live projections such as the kitchen queue).
    """
