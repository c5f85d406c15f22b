# lessonhub/auth.py
import jwt
from collections import namedtuple
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, current_app, g
from .config import (
    JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRES_HOURS,
    TOKEN_COOKIE_NAME, COOKIE_SECURE, COOKIE_SAMESITE
)
from .errors import TokenExpired, TokenMalformed, Unauthorized

STUDENT = 'student'
TEACHER = 'teacher'
PRINCIPAL_KINDS = (STUDENT, TEACHER)

Claim = namedtuple('Claim', ['kind', 'principal_id'])


def public_record(record):
    """비밀번호를 제외한 레코드 사본"""
    return {k: v for k, v in record.items() if k != 'password'}


class TokenService:
    """서명된 세션 토큰 발급/검증"""

    def __init__(self, secret=JWT_SECRET, algorithm=JWT_ALGORITHM, expires_hours=JWT_EXPIRES_HOURS):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_hours = expires_hours

    def issue(self, kind, record, now=None):
        """principal 토큰 생성"""
        now = now or datetime.now(timezone.utc)
        payload = {
            'kind': kind,
            'sub': str(record['id']),
            'principal': public_record(record),
            'iat': now,
            'exp': now + timedelta(hours=self.expires_hours)
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token):
        """서명과 만료 검증 후 Claim 반환 (종류/id 는 resolve 에서 확인)"""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired(str(e)) from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformed(str(e)) from e

        return Claim(payload.get('kind'), payload.get('sub'))

    def resolve(self, token, kind):
        """쿠키 토큰을 요청한 종류의 Claim 으로 변환 (kind 는 문자열 또는 튜플)

        스냅샷 필드는 신뢰하지 않고 id 와 종류만 사용한다.
        """
        if not token:
            raise Unauthorized('Unauthorized: No token provided', reason='missing_token')
        try:
            claim = self.verify(token)
        except TokenExpired:
            raise Unauthorized('Unauthorized: Invalid or expired token', reason='expired_token')
        except TokenMalformed:
            raise Unauthorized('Unauthorized: Invalid or expired token', reason='malformed_token')

        kinds = kind if isinstance(kind, tuple) else (kind,)
        if claim.kind not in kinds or not claim.principal_id:
            raise Unauthorized('Unauthorized: Invalid token', reason='invalid_claim')
        return claim


def set_session_cookie(response, token, max_age_hours=JWT_EXPIRES_HOURS):
    """세션 쿠키 설정"""
    response.set_cookie(
        TOKEN_COOKIE_NAME, token,
        max_age=max_age_hours * 3600,
        httponly=True, secure=COOKIE_SECURE, samesite=COOKIE_SAMESITE, path='/'
    )
    return response


def expire_session_cookie(response):
    """이미 지난 만료일의 빈 쿠키로 세션 종료"""
    response.set_cookie(
        TOKEN_COOKIE_NAME, '',
        expires=0,
        httponly=True, secure=COOKIE_SECURE, samesite=COOKIE_SAMESITE, path='/'
    )
    return response


def principal_required(kind=None):
    """쿠키 토큰 인증 데코레이터 (g.claim 설정)

    kind 를 생략하면 URL 의 kind 인자를 사용한다.
    """
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            tokens = current_app.extensions['lessonhub']['tokens']
            g.claim = tokens.resolve(request.cookies.get(TOKEN_COOKIE_NAME), kind or kwargs.get('kind'))
            return f(*args, **kwargs)
        return decorated
    return decorator
