from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import uvicorn # For the if __name__ == "__main__": block
import os
from dotenv import load_dotenv
import time, uuid

load_dotenv() # Load environment variables from .env file

from core.config import get_settings
from core.log import json_log, now_iso
from app.services.errors import RecipeServiceError
from routers import recipe_router, timer_router

settings = get_settings()

app = FastAPI(title="Pantry Chef")
app.include_router(recipe_router.router)
app.include_router(timer_router.router)


# central error shape
def _error_response(request: Request, *, status_code: int, error: str, code: str) -> JSONResponse:
    rid = getattr(request.state, "req_id", None) or "unknown"
    return JSONResponse(status_code=status_code, content={"error": error, "code": code, "trace": rid}, headers={"X-Req-Id": rid})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "X-Req-Id"],
    expose_headers=["X-Req-Id"],
)


@app.middleware("http")
async def _reqid_and_access_log(request: Request, call_next):
    # 1) assign/propagate req-id
    req_id = request.headers.get("X-Req-Id") or str(uuid.uuid4())
    request.state.req_id = req_id

    # 2) timing  path/method
    start = time.perf_counter()
    path = request.url.path
    method = request.method
    status = 500
    response = None
    try:
        response = await call_next(request)
        status = getattr(response, "status_code", 500)
        return response
    finally:
        latency_ms = round((time.perf_counter() - start) * 1000.0, 2)
        json_log("info", reqId=req_id, method=method, path=path, status=status, latency=latency_ms)
        # always echo the req-id
        if response is not None:
            response.headers["X-Req-Id"] = req_id


# ---------- exception handlers: consistent error shape ----------
@app.exception_handler(RecipeServiceError)
async def _recipe_service_handler(request: Request, exc: RecipeServiceError):
    json_log("warn", reqId=getattr(request.state, "req_id", None), path=request.url.path, status=exc.status_code, code=exc.code)
    return _error_response(request, status_code=exc.status_code, error=exc.message, code=exc.code)


@app.exception_handler(HTTPException)
async def _http_exc_handler(request: Request, exc: HTTPException):
    return _error_response(request, status_code=exc.status_code, error=str(exc.detail), code=f"HTTP_{exc.status_code}")


@app.exception_handler(RequestValidationError)
async def _validation_handler(request: Request, exc: RequestValidationError):
    json_log("warn", reqId=getattr(request.state, "req_id", None), path=request.url.path, status=422, validationErrors=exc.errors())
    return _error_response(request, status_code=422, error="Validation failed", code="VALIDATION_ERROR")


@app.exception_handler(Exception)
async def _unhandled_handler(request: Request, exc: Exception):
    json_log("error", reqId=getattr(request.state, "req_id", None), path=request.url.path, status=500, msg=exc.__class__.__name__)
    return _error_response(request, status_code=500, error="Internal Server Error", code="INTERNAL_SERVER_ERROR")


# ---------------- Health & Readiness ----------------
@app.get("/healthz")
def healthz():
    return {
        "status": "ok",
        "app": "pantry-chef",
        "commit": os.getenv("GIT_SHA", "dev"),
        "time": now_iso(),
    }


def _deps_status():
    # Key presence only; avoids doing a network call here
    return {"gemini_key": "ok" if get_settings().GEMINI_API_KEY else "missing"}


@app.get("/readyz")
def readyz():
    deps = _deps_status()
    overall = "ready" if deps.get("gemini_key") == "ok" else "degraded"
    return {"status": overall, "app": "pantry-chef", "time": now_iso(), "deps": deps}


@app.on_event("startup")
async def startup_event():
    print(">>> FastAPI application startup event triggered.")
    if not get_settings().GEMINI_API_KEY:
        json_log("warn", event="config", msg="GEMINI_API_KEY (or API_KEY) is not set; recipe generation will fail until it is")
    print(">>> FastAPI application startup event finished.")


@app.get("/")
async def root():
    return {"message": "Welcome to Pantry Chef API!"}


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000)) # Default to 8000 if PORT not set
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
