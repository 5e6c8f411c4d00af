from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from ...http import HttpRequest
from ...models import ErrorResponse, ResultResponse


router = APIRouter(tags=["functions"])

_RESPONSES = {
    200: {"model": ResultResponse},
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


async def _dispatch(name: str, request: Request) -> Response:
    service = request.app.state.services[name]
    http_request = HttpRequest(
        method=request.method,
        headers=dict(request.headers),
        body=await request.body(),
    )
    # Services make blocking upstream calls.
    result = await run_in_threadpool(service.handle, http_request)
    if result.payload is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(status_code=result.status_code, content=result.payload, headers=result.headers)


@router.post("/gemini-ai", responses=_RESPONSES)
async def gemini_ai(request: Request):
    return await _dispatch("gemini-ai", request)


@router.post("/ai-summary", responses=_RESPONSES)
async def ai_summary(request: Request):
    return await _dispatch("ai-summary", request)


@router.post("/image-generator", responses=_RESPONSES)
async def image_generator(request: Request):
    return await _dispatch("image-generator", request)
