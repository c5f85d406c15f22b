from datetime import datetime, timedelta, timezone

import jwt
import pytest

from lessonhub.auth import TokenService, Claim, STUDENT, TEACHER, public_record
from lessonhub.errors import TokenExpired, TokenMalformed, Unauthorized

RECORD = {'id': 'teacher-1', 'username': 'ann', 'email': 'ann@x.com', 'password': 'hash'}


def test_issue_and_verify(tokens):
    token = tokens.issue(TEACHER, RECORD)
    assert tokens.verify(token) == Claim(TEACHER, 'teacher-1')


def test_token_snapshot_has_no_password(tokens):
    token = tokens.issue(TEACHER, RECORD)
    payload = jwt.decode(token, 'test-secret', algorithms=['HS256'])
    assert payload['principal']['username'] == 'ann'
    assert 'password' not in payload['principal']
    assert payload['exp'] - payload['iat'] == 24 * 3600


def test_expired_token(tokens):
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    token = tokens.issue(STUDENT, RECORD, now=issued)
    with pytest.raises(TokenExpired):
        tokens.verify(token)


def test_token_still_valid_before_24_hours(tokens):
    issued = datetime.now(timezone.utc) - timedelta(hours=23)
    token = tokens.issue(STUDENT, RECORD, now=issued)
    assert tokens.verify(token).principal_id == 'teacher-1'


def test_other_secret_is_malformed(tokens):
    token = TokenService(secret='another-secret').issue(STUDENT, RECORD)
    with pytest.raises(TokenMalformed):
        tokens.verify(token)


def test_garbage_is_malformed(tokens):
    with pytest.raises(TokenMalformed):
        tokens.verify('not-a-token')


def signed(payload):
    return jwt.encode(payload, 'test-secret', algorithm='HS256')


def test_signed_token_without_principal_is_invalid_claim(tokens):
    assert tokens.verify(signed({'sub': 'x'})) == Claim(None, 'x')
    with pytest.raises(Unauthorized) as exc:
        tokens.resolve(signed({'sub': 'x'}), STUDENT)
    assert exc.value.reason == 'invalid_claim'
    assert str(exc.value) == 'Unauthorized: Invalid token'


@pytest.mark.parametrize('token_factory, reason', [
    (lambda t: None, 'missing_token'),
    (lambda t: '', 'missing_token'),
    (lambda t: 'garbage', 'malformed_token'),
    (lambda t: t.issue(STUDENT, RECORD, now=datetime.now(timezone.utc) - timedelta(days=2)), 'expired_token'),
    (lambda t: t.issue(TEACHER, RECORD), 'invalid_claim'),
    (lambda t: signed({'kind': STUDENT}), 'invalid_claim'),
    (lambda t: signed({'kind': STUDENT, 'sub': ''}), 'invalid_claim'),
    (lambda t: signed({'kind': 'admin', 'sub': 'x'}), 'invalid_claim'),
])
def test_resolve_reasons(tokens, token_factory, reason):
    with pytest.raises(Unauthorized) as exc:
        tokens.resolve(token_factory(tokens), STUDENT)
    assert exc.value.reason == reason
    assert exc.value.status_code == 401


def test_resolve_matching_kind(tokens):
    token = tokens.issue(STUDENT, RECORD)
    assert tokens.resolve(token, STUDENT) == Claim(STUDENT, 'teacher-1')


def test_resolve_accepts_any_of_several_kinds(tokens):
    token = tokens.issue(TEACHER, RECORD)
    assert tokens.resolve(token, (STUDENT, TEACHER)) == Claim(TEACHER, 'teacher-1')


def test_public_record():
    assert public_record(RECORD) == {'id': 'teacher-1', 'username': 'ann', 'email': 'ann@x.com'}
