# lessonhub/errors.py
"""API 오류 정의

매니저 계층은 아래 예외를 던지고, app.py 의 에러 핸들러가
{'error': message} 형태의 JSON 응답으로 변환한다.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class BadRequest(ApiError):
    status_code = 400


class Conflict(ApiError):
    # 기존 클라이언트 호환을 위해 409 가 아닌 400
    status_code = 400


class Unauthorized(ApiError):
    status_code = 401

    def __init__(self, message, reason='unauthorized'):
        super().__init__(message)
        self.reason = reason


class Forbidden(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


class InternalError(ApiError):
    status_code = 500


class TokenError(Exception):
    """세션 토큰 검증 실패"""


class TokenExpired(TokenError):
    pass


class TokenMalformed(TokenError):
    pass


class UploadError(Exception):
    """미디어 업로드 실패"""
