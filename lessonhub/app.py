# lessonhub/app.py (메인 애플리케이션)
from flask import Flask, request, jsonify, make_response
from werkzeug.exceptions import HTTPException
from datetime import datetime, timezone
import logging
from . import config
from .accounts import AccountManager
from .api_routes import auth_bp, video_bp
from .auth import TokenService
from .database import FirestoreStore, connect_firestore
from .errors import ApiError
from .mailer import Mailer
from .storage import MediaUploader
from .videos import VideoManager

logger = logging.getLogger(__name__)


def default_store():
    return FirestoreStore(connect_firestore(config.firebase_credentials()))


def default_uploader():
    return MediaUploader(
        config.AWS_ACCESS_KEY, config.AWS_SECRET_KEY, config.REGION_NAME, config.BUCKET_NAME,
        endpoint_url=config.S3_ENDPOINT_URL, base_url=config.MEDIA_BASE_URL
    )


def default_mailer():
    return Mailer(config.EMAIL_HOST, config.EMAIL_PORT, config.EMAIL_USER, config.EMAIL_PASS)


def create_app(store=None, uploader=None, mailer=None, tokens=None, settings=None):
    """Flask 앱 생성

    저장소/업로더/메일러는 여기서 한 번 만들어 매니저에 주입한다.
    """
    # 로깅 설정
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    app.config['MAX_CONTENT_LENGTH'] = config.MAX_CONTENT_LENGTH
    app.config['ALLOWED_ORIGINS'] = config.ALLOWED_ORIGINS
    app.config['ENVIRONMENT'] = config.ENVIRONMENT
    app.config.update(settings or {})

    store = store or default_store()
    uploader = uploader or default_uploader()
    app.extensions['lessonhub'] = {
        'tokens': tokens or TokenService(),
        'accounts': AccountManager(store, uploader),
        'videos': VideoManager(store, uploader),
        'mailer': mailer or default_mailer()
    }

    # Blueprint 등록
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(video_bp, url_prefix='/api/teacher')

    @app.before_request
    def preflight():
        if request.method == 'OPTIONS':
            return make_response('', 204)

    # 보안 헤더 + CORS
    @app.after_request
    def after_request(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-XSS-Protection'] = '1; mode=block'

        origin = request.headers.get('Origin')
        if origin and origin in app.config['ALLOWED_ORIGINS']:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers['Access-Control-Allow-Credentials'] = 'true'
            response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
            response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
            response.headers['Access-Control-Expose-Headers'] = 'Set-Cookie'
            response.headers['Vary'] = 'Origin'
        return response

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        if e.status_code >= 500:
            logger.error(f"{request.method} {request.path} 실패: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({'error': 'File too large'}), 413

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({'error': e.description}), e.code
        logger.exception(f"처리되지 않은 오류 ({request.method} {request.path}): {e}")
        return jsonify({'error': str(e) or 'Internal Server Error'}), 500

    # 헬스체크
    @app.route('/health', methods=['GET'])
    def health_check():
        """서비스 상태 확인"""
        return jsonify({
            'status': 'OK',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'environment': app.config['ENVIRONMENT']
        }), 200

    logger.info("✅ 앱 초기화 완료")
    return app
