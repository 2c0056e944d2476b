#!/usr/bin/env python3
"""
FastAPI(API) + Streamlit(콘솔) 동시 실행

- 호스트/포트/정적 경로는 backend settings(.env)에서 읽음
- 콘솔에는 STORY_API_BASE / STORY_PUBLIC_PREFIX 환경변수로 API 주소를 넘긴다

실행:
  python run.py
"""

from __future__ import annotations

import os
import signal
import socket
import subprocess
import sys
from pathlib import Path
from typing import Dict, List

from backend.app.core.config import Settings, settings

PROJECT_ROOT = Path(__file__).parent
CONSOLE_APP = PROJECT_ROOT / "frontend" / "app.py"

processes: List[subprocess.Popen] = []


def pick_free_port(start: int, end: int, host: str) -> int:
    """start~end 중 bind 가능한 첫 포트 (다 차 있으면 start)"""
    for port in range(start, end + 1):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((host, port))
                return port
            except OSError:
                continue
    return start


def api_command(cfg: Settings, reload: bool = True) -> List[str]:
    cmd = [
        sys.executable, "-m", "uvicorn",
        "backend.app.main:app",
        "--host", cfg.API_HOST,
        "--port", str(cfg.API_PORT),
    ]
    if reload:
        cmd.append("--reload")
    return cmd


def console_command(cfg: Settings, port: int) -> List[str]:
    return [
        sys.executable, "-m", "streamlit",
        "run", str(CONSOLE_APP),
        "--server.port", str(port),
        "--server.address", cfg.API_HOST,
    ]


def console_env(cfg: Settings, base_env: Dict[str, str]) -> Dict[str, str]:
    env = dict(base_env)
    env["STORY_API_BASE"] = cfg.api_base
    env["STORY_PUBLIC_PREFIX"] = cfg.PUBLIC_URL_PREFIX
    return env


def shutdown(*_):
    print("\n🛑 종료 신호 받음. 프로세스 정리 중...")
    for p in processes:
        if p.poll() is None:
            p.terminate()
    for p in processes:
        try:
            p.wait(timeout=5)
        except subprocess.TimeoutExpired:
            p.kill()
    print("✅ 종료 완료")
    sys.exit(0)


def main(cfg: Settings = settings):
    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    api_cmd = api_command(cfg)
    print("🚀 Starting API:", " ".join(api_cmd))
    processes.append(subprocess.Popen(api_cmd, cwd=str(PROJECT_ROOT)))

    port = pick_free_port(cfg.CONSOLE_PORT_START, cfg.CONSOLE_PORT_END, cfg.API_HOST)
    st_cmd = console_command(cfg, port)
    print(f"🚀 Starting console on :{port} (API {cfg.api_base})")
    processes.append(subprocess.Popen(st_cmd, cwd=str(PROJECT_ROOT), env=console_env(cfg, os.environ)))

    for p in processes:
        p.wait()


if __name__ == "__main__":
    main()
