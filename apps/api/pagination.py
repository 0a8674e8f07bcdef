from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """Page-number pagination with a client-selectable page size."""
    page_size = settings.PAGINATION_SETTINGS['DEFAULT_PAGE_SIZE']
    page_size_query_param = 'page_size'
    max_page_size = settings.PAGINATION_SETTINGS['MAX_PAGE_SIZE']
