"""
콘솔에서 쓰는 URL 규칙

영상 폴더는 정적 서빙에서 목록을 못 주므로,
생성 단계에서 받은 이미지 경로로 <이름>.mp4 URL을 역산한다.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import List


def public_url(api_base: str, public_prefix: str, path: str) -> str:
    return f"{api_base.rstrip('/')}{public_prefix}{path}"


def expected_video_paths(images: List[str], video_dir: str) -> List[str]:
    """["/tunmi/tunmi1.png", ...] + "/tunmi/videos" -> ["/tunmi/videos/tunmi1.mp4", ...]"""
    video_dir = video_dir.rstrip("/")
    return [f"{video_dir}/{PurePosixPath(p).stem}.mp4" for p in images]
