"""
FastAPI routes for the GitHub App Manifest flow.
"""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import (
    HTMLResponse,
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
    Response,
)
from pydantic import ValidationError

from gamf.api.rendering import render_redirect_page
from gamf.clients import RecordStoreError
from gamf.dependencies import get_manifest_flow_service
from gamf.schemas import CodeResponse, ErrorResponse, StartRequest, StartResponse
from gamf.services import (
    CorruptRecordError,
    ManifestFlowService,
    TokenGenerationError,
    action_url,
)

router = APIRouter()
logger = logging.getLogger(__name__)

FlowService = Annotated[ManifestFlowService, Depends(get_manifest_flow_service)]

HOME_PAGE = """# gamf - GitHub App Manifest Flow

This application enables you to programmatically generate GitHub Apps by
implementing the GitHub App Manifest Flow, so that you don't have to.

## Endpoints

### POST /start

Initiates an app creation flow. Provide the following keys, encoded as JSON:

manifest    - A JSON object, acceptable by GitHub's manifest flow.
target_type - The account type the GitHub App should be created on (user, org).
target_slug - The account slug to create this GitHub App on.
host        - The GitHub instance to use (usually github.com).

A JSON object containing the following keys is returned:

url - The URL to point your browser to; this starts the browser flow.
key - A one-time key used at the end of the flow to retrieve the code.

### POST /code/:key

Returns the GitHub provided code to be exchanged for the app configuration.

key - The key returned by POST /start.

A JSON object containing the following key is returned:

code - The GitHub App Manifest code, used to retrieve the new app configuration.
"""

DONE_PAGE = """# gamf - GitHub App Manifest Flow

All done, please retrieve your GitHub App configuration exchange code via
POST /code using the key provided to you via POST /start.
"""


def _json_error(status: HTTPStatus, message: str) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status)


def _text_error(status: HTTPStatus, message: str) -> PlainTextResponse:
    return PlainTextResponse(f"Error: {message}", status_code=status)


@router.get("/", response_class=PlainTextResponse)
async def home() -> str:
    """Usage documentation."""
    return HOME_PAGE


@router.get("/done", response_class=PlainTextResponse)
async def done() -> str:
    """Landing page once GitHub has handed back the manifest code."""
    return DONE_PAGE


@router.post(
    "/start",
    status_code=HTTPStatus.OK,
    response_model=StartResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def start_manifest_flow(request: Request, service: FlowService) -> Response:
    """
    Register a manifest and return the browser URL plus the one-time key.

    The body is validated before any token is drawn or record written.
    """
    body = await request.body()
    try:
        payload = StartRequest.model_validate_json(body)
    except ValidationError as exc:
        logger.info("Rejected start request: %s", exc.errors(include_url=False))
        return _json_error(HTTPStatus.BAD_REQUEST, "failed to parse request")

    try:
        result = await service.start(payload)
    except TokenGenerationError:
        logger.exception("Random source failed while starting manifest flow")
        return _json_error(
            HTTPStatus.INTERNAL_SERVER_ERROR, "failed to generate a random token"
        )
    except RecordStoreError:
        logger.exception("Failed to store pending manifest")
        return _json_error(HTTPStatus.INTERNAL_SERVER_ERROR, "failed to store payload")

    return JSONResponse(result.model_dump())


@router.get("/redirect/{initiation_key}", response_class=HTMLResponse)
async def redirect_to_github(initiation_key: str, service: FlowService) -> Response:
    """Consume the pending manifest and auto-submit it to GitHub."""
    try:
        pending = await service.redeem_manifest(initiation_key)
    except RecordStoreError:
        logger.exception("Failed to fetch pending manifest")
        return _text_error(HTTPStatus.INTERNAL_SERVER_ERROR, "failed to fetch metadata")
    except CorruptRecordError:
        logger.exception("Pending manifest could not be decoded")
        return _text_error(HTTPStatus.INTERNAL_SERVER_ERROR, "failed to parse metadata")

    if pending is None:
        return _text_error(
            HTTPStatus.NOT_FOUND, "failed to find metadata for the given key"
        )

    page = render_redirect_page(
        action=action_url(pending),
        manifest_json=json.dumps(pending.manifest),
    )
    return HTMLResponse(page)


@router.get("/callback")
async def handle_github_callback(
    service: FlowService,
    state: str | None = Query(default=None, description="State token issued at start."),
    code: str | None = Query(default=None, description="Manifest code from GitHub."),
) -> Response:
    """Hold GitHub's code under the state token and send the browser to /done."""
    if not state or not code:
        return _text_error(HTTPStatus.BAD_REQUEST, "missing state or code parameters.")

    try:
        await service.store_code(state, code)
    except RecordStoreError:
        logger.exception("Failed to store manifest code")
        return _text_error(HTTPStatus.BAD_REQUEST, "failed to store code.")

    return RedirectResponse(url="/done", status_code=HTTPStatus.FOUND)


@router.post(
    "/code/{key}",
    response_model=CodeResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def retrieve_code(key: str, service: FlowService) -> Response:
    """Return the manifest code for ``key`` exactly once."""
    try:
        code = await service.redeem_code(key)
    except RecordStoreError:
        logger.exception("Failed to fetch manifest code")
        return _json_error(HTTPStatus.INTERNAL_SERVER_ERROR, "failed to fetch code")

    if code is None:
        return _json_error(HTTPStatus.NOT_FOUND, "failed to find code for the given key")

    return JSONResponse(CodeResponse(code=code).model_dump())


__all__ = ["router"]
