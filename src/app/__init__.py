"""
App layer: HTTP 수신 서버 (FastAPI + uvicorn).

역할:
- 라우팅, 요청 → 응답 변환 (routes/)
- 리스너 생명주기 start/stop (receiver.py)
- ⚠️ 인증/저장 로직 없음 (core에 위임)
"""
