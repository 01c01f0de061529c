"""
Base URI of the current request, used for Location headers.
"""

from fastapi import Request

from auto_api.services.domain.auto_read_service import ID_PATTERN


def create_base_uri(request: Request) -> str:
    """
    Scheme, host, port and path of the request without query string and
    without a trailing id segment.

    GET http://localhost:3000/rest/1?x=y -> http://localhost:3000/rest
    """
    url = request.url
    base_path = url.path.rstrip("/")

    head, sep, last = base_path.rpartition("/")
    if sep and head and ID_PATTERN.match(last):
        base_path = head

    return f"{url.scheme}://{url.netloc}{base_path}"
