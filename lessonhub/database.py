# lessonhub/database.py

import logging
import firebase_admin
from firebase_admin import credentials, firestore
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

STUDENTS = 'students'
TEACHERS = 'teachers'
VIDEOS = 'videos'


def utc_now_iso():
    return datetime.now(timezone.utc).isoformat()


def connect_firestore(firebase_creds):
    """Firebase Admin SDK 초기화 후 Firestore 클라이언트 반환"""
    try:
        if not firebase_admin._apps:
            cred = credentials.Certificate(firebase_creds)
            firebase_admin.initialize_app(cred)
        client = firestore.client()
        logger.info(f"✅ Firestore 연결 완료 - Project: {firebase_creds.get('project_id')}")
        return client
    except Exception as e:
        logger.error(f"❌ Firestore 연결 실패: {e}")
        raise


def _with_id(doc):
    data = doc.to_dict()
    data['id'] = doc.id
    return data


class FirestoreStore:
    """students / teachers / videos 컬렉션 저장소

    프로세스 시작 시 한 번 생성해서 매니저들에 주입한다.
    """

    def __init__(self, client):
        self.db = client

    # ── 공통 문서 작업 ──

    def get_document(self, collection, doc_id):
        """문서 조회 (없으면 None)"""
        if not doc_id:
            return None
        doc = self.db.collection(collection).document(doc_id).get()
        return _with_id(doc) if doc.exists else None

    def find_document(self, collection, field, value):
        """필드 값이 일치하는 첫 문서"""
        docs = list(
            self.db.collection(collection).where(field, '==', value).limit(1).stream()
        )
        return _with_id(docs[0]) if docs else None

    def create_document(self, collection, data):
        """새 문서 생성 (자동 id)"""
        now = utc_now_iso()
        data = dict(data, createdAt=now, updatedAt=now)
        ref = self.db.collection(collection).document()
        ref.set(data)
        data['id'] = ref.id
        return data

    def update_document(self, collection, doc_id, data):
        """문서 부분 업데이트 후 최신 문서 반환"""
        ref = self.db.collection(collection).document(doc_id)
        ref.update(dict(data, updatedAt=utc_now_iso()))
        return _with_id(ref.get())

    def delete_document(self, collection, doc_id):
        self.db.collection(collection).document(doc_id).delete()

    # ── 비디오 ──

    def list_videos(self, teacher_id=None):
        """비디오 목록 (최신순)"""
        query = self.db.collection(VIDEOS)
        if teacher_id is not None:
            query = query.where('teacher', '==', teacher_id)
        docs = query.order_by('createdAt', direction=firestore.Query.DESCENDING).stream()
        return [_with_id(doc) for doc in docs]

    def create_video_for_teacher(self, teacher_id, data):
        """비디오 생성 + 교사 videos 배열 추가를 하나의 배치로 기록"""
        now = utc_now_iso()
        data = dict(data, teacher=teacher_id, createdAt=now, updatedAt=now)
        video_ref = self.db.collection(VIDEOS).document()
        teacher_ref = self.db.collection(TEACHERS).document(teacher_id)

        batch = self.db.batch()
        batch.set(video_ref, data)
        batch.update(teacher_ref, {
            'videos': firestore.ArrayUnion([video_ref.id]),
            'updatedAt': now
        })
        batch.commit()

        data['id'] = video_ref.id
        return data

    def delete_video_for_teacher(self, teacher_id, video_id):
        """교사 videos 배열 제거 + 비디오 삭제를 하나의 배치로 기록"""
        video_ref = self.db.collection(VIDEOS).document(video_id)
        teacher_ref = self.db.collection(TEACHERS).document(teacher_id)

        batch = self.db.batch()
        if teacher_ref.get().exists:
            batch.update(teacher_ref, {
                'videos': firestore.ArrayRemove([video_id]),
                'updatedAt': utc_now_iso()
            })
        else:
            logger.warning(f"비디오 소유 교사 문서 없음: {teacher_id} (video {video_id})")
        batch.delete(video_ref)
        batch.commit()

    def change_likes(self, video_id, delta):
        """좋아요 수 변경 (0 미만 불가). 비디오가 없으면 None"""
        ref = self.db.collection(VIDEOS).document(video_id)

        @firestore.transactional
        def apply(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                return None
            likes = max(0, (snapshot.to_dict().get('likes') or 0) + delta)
            transaction.update(ref, {'likes': likes, 'updatedAt': utc_now_iso()})
            return likes

        return apply(self.db.transaction())
