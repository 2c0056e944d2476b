"""
Pydantic 스키마

요청/응답 필드명은 프론트가 쓰던 그대로(camelCase) 유지
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class GenerateImagesRequest(BaseModel):
    prompts: Optional[List[str]] = Field(default=None, description="이미지 프롬프트 목록 (순서대로 tunmi1, tunmi2 ...)")


class GenerateImagesResponse(BaseModel):
    folderName: str = Field(..., description="public 기준 생성 폴더 경로 (예: /tunmi)")
    images: List[str] = Field(default_factory=list, description="생성 성공한 이미지 경로 목록")


class ProcessImagesRequest(BaseModel):
    directory: Optional[str] = Field(default=None, description="public 기준 이미지 폴더 (예: /tunmi)")
    imageDirectoryName: Optional[str] = Field(default=None, description="directory와 같은 의미 (예전 이름)")


class ProcessImagesResponse(BaseModel):
    message: str
    videoDirectory: str = Field(..., description="public 기준 영상 폴더 경로 (예: /tunmi/videos)")


class ErrorResponse(BaseModel):
    error: str
