"""Service Info Routes — API banner, CORS probe and the /api catch-all.

Invariants:
    - GET /api answers a plain-text banner
    - GET /api/cors-test echoes the request Origin header
    - Any other /api/* path answers a JSON 404 envelope, never the SPA bundle
    - A trailing-slash /api path redirects (307) to the same path without it

Design Decisions:
    - catch_all_router registered after every other API router in main.py
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from userdesk.core.errors import ResourceNotFoundError

router = APIRouter(prefix="/api", tags=["service"])
catch_all_router = APIRouter(include_in_schema=False)


@router.get("", response_class=PlainTextResponse)
async def api_banner():
    return "This is the v1 API"


@router.get("/cors-test")
async def cors_test(request: Request):
    """Lets a browser confirm the CORS policy admits its origin."""
    return {
        "message": "CORS is working!",
        "origin": request.headers.get("origin"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@catch_all_router.api_route(
    "/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
)
async def unknown_api_route(request: Request, path: str):
    if request.url.path.endswith("/"):
        # Catch-all shadows Starlette's redirect_slashes, so redirect here
        stripped = request.url.replace(path=request.url.path.rstrip("/"))
        return RedirectResponse(url=str(stripped), status_code=307)
    raise ResourceNotFoundError("Route", f"/api/{path}")
