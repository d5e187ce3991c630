"""Warehousing FastAPI application.

Web server that processes storage commands synchronously via HTTP. Each
request is wrapped in the warehousing domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from warehousing.domain import warehousing  # noqa: E402
from warehousing.utils.logging import add_context, clear_context  # noqa: E402

warehousing.init()

_DOMAIN_PREFIXES = ("/warehouses", "/zones", "/racks", "/shelves", "/placements", "/cleaning")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Warehousing API",
    description="Storage hierarchy, capacity allocation and shelf cleaning",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the warehousing domain context for each API request."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        clear_context()
        add_context(method=request.method, path=request.url.path, user_id=request.headers.get("x-user-id"))
        with warehousing.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error handling
# ---------------------------------------------------------------------------
from warehousing.api import routers  # noqa: E402
from warehousing.api.errors import install_error_handlers  # noqa: E402

for router in routers:
    app.include_router(router)

install_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"warehousing": {"name": warehousing.name}},
        }
    )
