import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .src.routers import audit
from .src.config import settings
from .src.logging import jlog
from .otel import init_tracing

app = FastAPI(title="Translation Audit API", version="1.0.0")
app.include_router(audit.router, prefix="/api")

# Every failure is reported as {"error": "..."}
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    jlog(
        event="audit_rejected",
        path=request.url.path,
        fields=[".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()],
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Missing source or translation"},
    )

os.environ.setdefault("SERVICE_NAME", settings.service_name)
tracer = init_tracing(app, service_name=settings.service_name, service_version="v1")

@app.get("/health")
def health():
    return {"status": "ok", "service": settings.service_name}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
