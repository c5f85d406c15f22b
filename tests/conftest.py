import copy
import itertools
import pytest

from lessonhub.app import create_app
from lessonhub.auth import TokenService
from lessonhub.database import TEACHERS, VIDEOS, utc_now_iso
from lessonhub.errors import UploadError
from lessonhub.utils import MediaFile

TEST_SECRET = 'test-secret'


class MemoryStore:
    """FirestoreStore 와 같은 인터페이스의 메모리 저장소"""

    def __init__(self):
        self.collections = {}
        self._ids = itertools.count(1)
        self._seq = itertools.count(1)
        self.fail_batches = False

    def _col(self, collection):
        return self.collections.setdefault(collection, {})

    def get_document(self, collection, doc_id):
        doc = self._col(collection).get(doc_id)
        return self._public(doc) if doc else None

    def find_document(self, collection, field, value):
        for doc in self._col(collection).values():
            if doc.get(field) == value:
                return self._public(doc)
        return None

    def create_document(self, collection, data):
        now = utc_now_iso()
        doc = dict(copy.deepcopy(data), createdAt=now, updatedAt=now)
        doc['id'] = f"{collection[:-1]}-{next(self._ids)}"
        doc['_seq'] = next(self._seq)
        self._col(collection)[doc['id']] = doc
        return self._public(doc)

    def update_document(self, collection, doc_id, data):
        doc = self._col(collection)[doc_id]
        doc.update(copy.deepcopy(data), updatedAt=utc_now_iso())
        return self._public(doc)

    def delete_document(self, collection, doc_id):
        self._col(collection).pop(doc_id, None)

    def list_videos(self, teacher_id=None):
        videos = [
            v for v in self._col(VIDEOS).values()
            if teacher_id is None or v['teacher'] == teacher_id
        ]
        videos.sort(key=lambda v: v['_seq'], reverse=True)
        return [self._public(v) for v in videos]

    def _commit_batch(self):
        # 배치는 전부 기록되거나 전혀 기록되지 않는다
        if self.fail_batches:
            raise RuntimeError('batch commit failed')

    def create_video_for_teacher(self, teacher_id, data):
        self._commit_batch()
        video = self.create_document(VIDEOS, dict(data, teacher=teacher_id))
        self._col(TEACHERS)[teacher_id]['videos'].append(video['id'])
        return video

    def delete_video_for_teacher(self, teacher_id, video_id):
        self._commit_batch()
        teacher = self._col(TEACHERS).get(teacher_id)
        if teacher:
            teacher['videos'] = [v for v in teacher['videos'] if v != video_id]
        self._col(VIDEOS).pop(video_id, None)

    def change_likes(self, video_id, delta):
        video = self._col(VIDEOS).get(video_id)
        if video is None:
            return None
        video['likes'] = max(0, video.get('likes', 0) + delta)
        return video['likes']

    @staticmethod
    def _public(doc):
        return {k: copy.deepcopy(v) for k, v in doc.items() if k != '_seq'}


class FakeUploader:

    def __init__(self):
        self.uploads = []
        self.failing = set()

    def upload(self, data, filename, folder='uploads'):
        if filename in self.failing or folder in self.failing:
            raise UploadError(f"Upload failed: {filename}")
        self.uploads.append((folder, filename, data))
        return f"https://media.test/{folder}/{filename}"


class FakeMailer:

    def __init__(self):
        self.sent = []
        self.error = None

    def send(self, to, subject, text=None, html=None):
        if self.error:
            raise self.error
        self.sent.append((to, subject, text, html))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def tokens():
    return TokenService(secret=TEST_SECRET)


@pytest.fixture
def app(store, uploader, mailer, tokens):
    app = create_app(store=store, uploader=uploader, mailer=mailer, tokens=tokens,
                     settings={'TESTING': True})
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def media():
    def make(filename, data=b'binary'):
        return MediaFile(filename, data)
    return make