"""
API 라우터

- POST /api/generate-image : 프롬프트 목록 -> 이미지 폴더
- POST /api/process-images : 이미지 폴더 -> 영상 폴더

둘 다 동기 def: 원격 호출/폴링 대기가 블로킹이라 스레드풀에서 돌게 함
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from backend.app.core.config import Settings, get_settings
from backend.app.core.logger import get_logger
from backend.app.schemas import (
    ErrorResponse,
    GenerateImagesRequest,
    GenerateImagesResponse,
    ProcessImagesRequest,
    ProcessImagesResponse,
)
from backend.app.services.images import generate_images
from backend.app.services.stability import StabilityClient
from backend.app.services.storage import resolve_public_dir, to_public_path
from backend.app.services.video import PollPolicy, process_directory

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["generator"])

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def get_client(cfg: Settings = Depends(get_settings)) -> StabilityClient:
    return StabilityClient.from_settings(cfg)


def get_poll_policy(cfg: Settings = Depends(get_settings)) -> PollPolicy:
    return PollPolicy.from_settings(cfg)


@router.post("/generate-image", response_model=GenerateImagesResponse, responses=ERROR_RESPONSES)
def generate_image(
    body: GenerateImagesRequest,
    cfg: Settings = Depends(get_settings),
    client: StabilityClient = Depends(get_client),
):
    if body.prompts is None:
        raise HTTPException(400, "Prompts are required and must be an array.")

    logger.info("이미지 생성 요청: 프롬프트 %d개", len(body.prompts))
    batch = generate_images(body.prompts, client, cfg)

    return GenerateImagesResponse(folderName=batch.folder_name, images=batch.images)


@router.post("/process-images", response_model=ProcessImagesResponse, responses=ERROR_RESPONSES)
def process_images(
    body: ProcessImagesRequest,
    cfg: Settings = Depends(get_settings),
    client: StabilityClient = Depends(get_client),
    policy: PollPolicy = Depends(get_poll_policy),
):
    name = (body.directory or body.imageDirectoryName or "").strip()
    if not name:
        raise HTTPException(400, "Directory path is required.")

    try:
        image_dir = resolve_public_dir(name, cfg.public_root)
    except ValueError as e:
        raise HTTPException(400, str(e))
    if not image_dir.is_dir():
        raise HTTPException(400, f"Directory not found: {name}")

    logger.info("영상 변환 요청: %s", image_dir)
    batch = process_directory(image_dir, client, policy, cfg)

    return ProcessImagesResponse(
        message="Images processed successfully.",
        videoDirectory=to_public_path(batch.video_dir, cfg.public_root),
    )
