# lessonhub/__init__.py
"""
Online Teaching Platform Backend

학생/교사 계정과 강의 비디오를 관리하는 백엔드 패키지입니다.

주요 모듈:
- app: Flask 앱 팩토리 (create_app)
- config: 설정 관리
- auth: 세션 토큰 발급/검증, 쿠키 처리
- database: Firestore 저장소
- storage: S3 미디어 업로드
- accounts: 학생/교사 가입, 로그인, 프로필
- videos: 비디오 업로드, 목록, 좋아요, 삭제
- mailer: 메일 발송
- errors: API 오류 정의
- utils: 공통 유틸리티 함수
- api_routes: REST API 엔드포인트
"""

# 패키지 정보
__version__ = "1.0.0"
__description__ = "Online Teaching Platform Backend"
