"""GET / and /index.php — the update API that WordPress sites poll."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from wpup.api.schemas import ErrorResponse
from wpup.server.request import UpdateRequest

logger = logging.getLogger(__name__)
router = APIRouter(tags=["update"])

_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.get("/", responses=_ERRORS)
@router.get("/index.php", responses=_ERRORS, include_in_schema=False)
def update_api(request: Request) -> Response:
    """Serve ``?action=get_metadata&slug=...`` or ``?action=download&slug=...``.

    Sync on purpose: ZIP parsing and file locks block, so this runs in the threadpool.
    """
    update_request = UpdateRequest(
        query=dict(request.query_params),
        headers=dict(request.headers),
        client_ip=request.client.host if request.client else "0.0.0.0",
        http_method=request.method,
    )
    server_url = str(request.base_url)
    return request.app.state.update_server.handle_request(update_request, server_url)
