"""
FastAPI 엔트리포인트

- /api/generate-image, /api/process-images
- /public/... : 생성된 이미지/영상 정적 서빙
- 에러 응답은 전부 {"error": "..."} 형태로 통일
"""

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.core.config import settings
from backend.app.api.routes import router as api_router
from backend.app.core.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(title="AI Image to Video Story Maker", version="0.1.0")

# CORS: Streamlit에서 FastAPI 호출
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # 405면 Allow 헤더도 그대로 전달
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = ".".join(str(x) for x in first.get("loc", ()) if x != "body")
    msg = first.get("msg", "invalid request")
    return JSONResponse({"error": f"Invalid request body: {loc + ': ' if loc else ''}{msg}"}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("요청 처리 실패 %s %s", request.method, request.url.path)
    return JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)


app.include_router(api_router)

# 폴더가 없으면 StaticFiles가 시작부터 죽기 때문에 미리 생성해둔다.
Path(settings.PUBLIC_DIR).mkdir(parents=True, exist_ok=True)
app.mount(settings.PUBLIC_URL_PREFIX, StaticFiles(directory=settings.PUBLIC_DIR), name="public")


@app.get("/health")
def health():
    return {"ok": True}
