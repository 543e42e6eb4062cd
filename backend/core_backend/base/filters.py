import django_filters
import logging

logger = logging.getLogger(__name__)


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with the calendar-date range every history screen uses.

    `start_date` and `end_date` are inclusive whole days in the active time
    zone, so `?start_date=2025-11-11&end_date=2025-11-11` returns everything
    created on that day.
    """

    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        abstract = True
