"""UnitFlow FastAPI application.

Point-of-care logging server for one device. Commands are processed
synchronously via HTTP and every request runs inside the unitflow domain
context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset / "test" → in-memory store
#   - "production"   → SQLite store on the device (run `manage.py setup-db` once)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from unitflow.domain import unitflow  # noqa: E402
from unitflow.utils.logging import add_context, clear_context

unitflow.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="UnitFlow API",
    description="Supply restock and crash-cart check logging",
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
    """Push the unitflow domain context for each request."""
    add_context(method=request.method, path=request.url.path)
    try:
        with unitflow.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from unitflow.api import register_storage_fault_handler, routers  # noqa: E402

for router in routers:
    app.include_router(router)

register_exception_handlers(app)
register_storage_fault_handler(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "unitflow": {"name": unitflow.name},
            },
        }
    )
