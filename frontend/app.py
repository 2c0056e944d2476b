import os

import requests
import streamlit as st

from links import expected_video_paths, public_url

# run.py가 settings 기준으로 넘겨줌
API_BASE = os.getenv("STORY_API_BASE", "http://127.0.0.1:8000")
PUBLIC_PREFIX = os.getenv("STORY_PUBLIC_PREFIX", "/public")

st.set_page_config(page_title="🎞️ AI 이미지 → 영상 스토리 메이커", layout="centered")

st.title("🎞️ AI 이미지 → 영상 스토리 메이커")
st.caption("✅ 1) 프롬프트로 이미지 생성 → 2) 생성된 폴더 이름으로 영상 변환")

# 1) 이미지 생성
st.subheader("1. 이미지 생성")
prompts_text = st.text_area("프롬프트 (한 줄에 하나)", value="", height=180)

if st.button("🖼️ 이미지 만들기", type="primary"):
    prompts = [line.strip() for line in prompts_text.splitlines() if line.strip()]
    if not prompts:
        st.error("프롬프트를 1개 이상 입력해주세요.")
        st.stop()

    with st.spinner(f"이미지 {len(prompts)}장 생성 중..."):
        try:
            r = requests.post(f"{API_BASE}/api/generate-image", json={"prompts": prompts}, timeout=600)
            r.raise_for_status()
            out = r.json()
        except Exception as e:
            st.error(f"요청 실패: {e}")
            st.stop()

    images = out.get("images", [])
    st.session_state["folder_name"] = out.get("folderName", "")
    st.session_state["images"] = images
    st.success(f"완료! 폴더: {out.get('folderName')} ({len(images)}/{len(prompts)}장)")
    if len(images) < len(prompts):
        st.warning("일부 프롬프트는 생성에 실패해서 빠졌습니다. 백엔드 로그를 확인하세요.")
    for path in images:
        st.image(public_url(API_BASE, PUBLIC_PREFIX, path), caption=path)

# 2) 영상 변환
st.subheader("2. 영상 변환")
st.caption("⏳ 이미지 1장당 최소 5분 이상 걸립니다.")
directory = st.text_input("이미지 폴더 (예: /tunmi)", value=st.session_state.get("folder_name", ""))

if st.button("🎬 영상 만들기"):
    if not directory.strip():
        st.error("폴더 이름은 필수입니다.")
        st.stop()

    with st.spinner("영상 변환 중... (수 분~수십 분)"):
        try:
            r = requests.post(
                f"{API_BASE}/api/process-images",
                json={"directory": directory.strip()},
                timeout=None,
            )
            out = r.json()
            if r.status_code != 200:
                st.error(f"요청 실패: {out.get('error', r.text)}")
                st.stop()
        except Exception as e:
            st.error(f"요청 실패: {e}")
            st.stop()

    st.success(out.get("message", "완료!"))
    video_dir = out.get("videoDirectory")
    if video_dir:
        st.markdown(f"영상 폴더: `{video_dir}`")

        # 생성 단계 폴더와 같을 때만 영상 이름을 알 수 있음
        if directory.strip().strip("/") == st.session_state.get("folder_name", "").strip("/"):
            missing = []
            for path in expected_video_paths(st.session_state.get("images", []), video_dir):
                url = public_url(API_BASE, PUBLIC_PREFIX, path)
                try:
                    found = requests.head(url, timeout=10).status_code == 200
                except requests.RequestException:
                    found = False
                if found:
                    st.video(url)
                    st.caption(path)
                else:
                    missing.append(path)
            if missing:
                st.warning("생성되지 않은 영상: " + ", ".join(missing))
