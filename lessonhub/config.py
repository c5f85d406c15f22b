# lessonhub/config.py

import os

# 환경
ENVIRONMENT = os.environ.get('FLASK_ENV', 'development')
SECRET_KEY = os.environ.get('FLASK_SECRET_KEY', 'supersecret')

# JWT 세션 토큰
JWT_SECRET = os.environ.get('JWT_SECRET', 'supersecretjwt')
JWT_ALGORITHM = 'HS256'
JWT_EXPIRES_HOURS = 24

TOKEN_COOKIE_NAME = 'token'
COOKIE_SECURE = os.environ.get('COOKIE_SECURE', '1') == '1'
COOKIE_SAMESITE = 'None' if COOKIE_SECURE else 'Lax'

# CORS
ALLOWED_ORIGINS = [
    origin for origin in [
        'http://localhost:5173',
        'https://abotl-frontend.vercel.app',
        os.environ.get('FRONTEND_URL', ''),
    ] if origin
]

# S3 호환 미디어 저장소
AWS_ACCESS_KEY = os.environ.get('AWS_ACCESS_KEY', '')
AWS_SECRET_KEY = os.environ.get('AWS_SECRET_KEY', '')
REGION_NAME = os.environ.get('REGION_NAME', 'us-east-1')
BUCKET_NAME = os.environ.get('BUCKET_NAME', '')
S3_ENDPOINT_URL = os.environ.get('S3_ENDPOINT_URL') or None
MEDIA_BASE_URL = os.environ.get('MEDIA_BASE_URL', '')


def firebase_credentials():
    """Firebase 서비스 계정 정보 (환경변수)"""
    return {
        "type": os.environ.get("type", "service_account"),
        "project_id": os.environ["project_id"],
        "private_key_id": os.environ.get("private_key_id", ""),
        "private_key": os.environ["private_key"].replace('\\n', '\n'),
        "client_email": os.environ["client_email"],
        "client_id": os.environ.get("client_id", ""),
        "auth_uri": os.environ.get("auth_uri", "https://accounts.google.com/o/oauth2/auth"),
        "token_uri": os.environ.get("token_uri", "https://oauth2.googleapis.com/token"),
        "auth_provider_x509_cert_url": os.environ.get("auth_provider_x509_cert_url", "https://www.googleapis.com/oauth2/v1/certs"),
        "client_x509_cert_url": os.environ.get("client_x509_cert_url", "")
    }


# 메일
EMAIL_HOST = os.environ.get('EMAIL_HOST', 'smtp.gmail.com')
EMAIL_PORT = int(os.environ.get('EMAIL_PORT', '465'))
EMAIL_USER = os.environ.get('EMAIL_USER', '')
EMAIL_PASS = os.environ.get('EMAIL_PASS', '')

# 업로드 설정
MAX_CONTENT_LENGTH = 500 * 1024 * 1024  # 500MB
VIDEO_FOLDER = 'videos'
THUMBNAIL_FOLDER = 'thumbnails'
PROFILE_IMAGE_FOLDER = 'profiles'
