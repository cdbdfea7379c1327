from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from unishare.api.routes import documents, essay, internal, lectures, users
from unishare.config import get_settings
from unishare.core.exceptions import global_exception_handler, http_exception_handler, request_validation_exception_handler
from unishare.core.lifespan import lifespan
from unishare.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware

settings = get_settings()

app = FastAPI(title="UniShare Jobs", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

app.add_middleware(
  CORSMiddleware,
  allow_origins=settings.allowed_origins,
  allow_credentials=True,
  allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
  allow_headers=["content-type", "authorization"],
  expose_headers=["content-length", "x-request-id"],
)

# Add exception handlers
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": "0.1.0"}


app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(essay.router, prefix="/api/essay", tags=["essay"])
app.include_router(lectures.router, prefix="/api/lectures", tags=["lectures"])
app.include_router(users.router, prefix="/api/user", tags=["users"])
app.include_router(internal.router, prefix="/internal", tags=["internal"])
