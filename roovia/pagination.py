"""
Pagination for every list endpoint of the portal API.
"""

from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Page number pagination that honours ``?page_size=X``.

    Usage:
        GET /api/properties/               → 20 results (default)
        GET /api/properties/?page_size=100 → 100 results
        GET /api/properties/?page_size=5000 → capped at 1000 results
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 1000
