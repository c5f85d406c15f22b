# lessonhub/accounts.py
"""학생/교사 계정 관리

가입, 로그인, 프로필 조회/수정/삭제. 두 계정 종류는 같은 흐름을 따르고
컬렉션, 로그인 식별 필드, 종류별 필드만 다르다.

학생은 username 으로, 교사는 email 로 로그인한다. 기존 클라이언트가
이 차이에 의존하므로 통일하지 않는다.
"""
import logging
from werkzeug.security import generate_password_hash, check_password_hash
from .auth import STUDENT, TEACHER
from .config import PROFILE_IMAGE_FOLDER
from .database import STUDENTS, TEACHERS
from .errors import BadRequest, Conflict, NotFound, Unauthorized, UploadError
from .utils import parse_subjects, profile_projection

logger = logging.getLogger(__name__)

COLLECTIONS = {STUDENT: STUDENTS, TEACHER: TEACHERS}
LOGIN_FIELDS = {STUDENT: 'username', TEACHER: 'email'}
UNIQUE_FIELDS = ('username', 'email')


def _label(kind):
    return kind.capitalize()


def _require_text(**values):
    """문자열이 아닌 자격 증명 값 거부 (None 은 허용)"""
    for name, value in values.items():
        if value is not None and not isinstance(value, str):
            raise BadRequest(f"{name} must be a string")


class AccountManager:

    def __init__(self, store, uploader):
        self.store = store
        self.uploader = uploader

    def _upload_image(self, image):
        """프로필 이미지 업로드. 실패해도 계속 진행"""
        if image is None:
            return None
        try:
            return self.uploader.upload(image.data, image.filename, folder=PROFILE_IMAGE_FOLDER)
        except UploadError as e:
            logger.warning(f"프로필 이미지 업로드 실패 (계속 진행): {e}")
            return None

    def _check_unique(self, kind, fields, exclude_id=None):
        collection = COLLECTIONS[kind]
        for field in UNIQUE_FIELDS:
            value = fields.get(field)
            if not value:
                continue
            existing = self.store.find_document(collection, field, value)
            if existing and existing['id'] != exclude_id:
                raise Conflict(f"{field.capitalize()} already exists")

    def _get_principal(self, kind, claim):
        record = self.store.get_document(COLLECTIONS[kind], claim.principal_id)
        if record is None:
            raise NotFound(f"{_label(kind)} not found")
        return record

    def register(self, kind, username, password, email, subjects=None, image=None):
        """계정 생성 후 저장된 레코드 반환"""
        _require_text(username=username, password=password, email=email)
        username = (username or '').strip()
        email = (email or '').strip()
        if not username or not password or not email:
            raise BadRequest('username, password and email are required')

        self._check_unique(kind, {'username': username, 'email': email})

        record = {
            'username': username,
            'password': generate_password_hash(password),
            'email': email,
            'imageURL': self._upload_image(image) or ''
        }
        if kind == STUDENT:
            record['followingTeachers'] = []
        else:
            record['subjects'] = parse_subjects(subjects)
            record['followers'] = []
            record['videos'] = []

        created = self.store.create_document(COLLECTIONS[kind], record)
        logger.info(f"{kind} 가입 완료: {created['id']}")
        return created

    def login(self, kind, identifier, password):
        """자격 증명 확인 후 레코드 반환"""
        _require_text(**{LOGIN_FIELDS[kind]: identifier, 'password': password})
        record = None
        if identifier:
            record = self.store.find_document(COLLECTIONS[kind], LOGIN_FIELDS[kind], identifier)
        if record is None:
            raise NotFound(f"{_label(kind)} not found")
        if not password or not check_password_hash(record['password'], password):
            raise Unauthorized('Invalid password', reason='invalid_password')
        return record

    def get_profile(self, kind, claim):
        return profile_projection(kind, self._get_principal(kind, claim))

    def update_profile(self, kind, claim, fields, image=None):
        """전달된 필드만 반영. 이미지 업로드 실패는 무시

        subjects 키가 있으면 값이 None 이어도 반영한다 (빈 리스트).
        중복 검사는 이미지 업로드 전에 수행한다.
        """
        _require_text(**{name: fields.get(name) for name in ('username', 'email', 'password')})
        record = self._get_principal(kind, claim)

        update = {}
        for field in UNIQUE_FIELDS:
            value = (fields.get(field) or '').strip()
            if value:
                update[field] = value

        password = fields.get('password')
        if password and password.strip():
            update['password'] = generate_password_hash(password)

        if kind == TEACHER and 'subjects' in fields:
            update['subjects'] = parse_subjects(fields.get('subjects'))

        self._check_unique(kind, update, exclude_id=record['id'])

        image_url = self._upload_image(image)
        if image_url:
            update['imageURL'] = image_url

        if not update:
            return profile_projection(kind, record)

        updated = self.store.update_document(COLLECTIONS[kind], record['id'], update)
        logger.info(f"{kind} 프로필 수정: {record['id']} ({', '.join(sorted(update))})")
        return profile_projection(kind, updated)

    def delete_account(self, kind, claim):
        record = self._get_principal(kind, claim)
        self.store.delete_document(COLLECTIONS[kind], record['id'])
        logger.info(f"{kind} 계정 삭제: {record['id']}")
