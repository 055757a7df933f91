from __future__ import annotations

from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """Page numbers for target listings.

    The default size follows `REST_FRAMEWORK["PAGE_SIZE"]`; clients may ask
    for `?page_size=N`, capped at `max_page_size`.
    """

    page_size = settings.REST_FRAMEWORK.get("PAGE_SIZE", 20)
    page_size_query_param = "page_size"
    max_page_size = 100
