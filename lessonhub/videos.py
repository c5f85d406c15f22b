# lessonhub/videos.py
import logging
from .config import VIDEO_FOLDER, THUMBNAIL_FOLDER
from .database import TEACHERS, VIDEOS
from .errors import BadRequest, Forbidden, InternalError, NotFound, UploadError
from .utils import video_summary

logger = logging.getLogger(__name__)


class VideoManager:
    """강의 비디오 업로드/조회/좋아요/삭제"""

    def __init__(self, store, uploader):
        self.store = store
        self.uploader = uploader

    def _get_teacher(self, claim):
        teacher = self.store.get_document(TEACHERS, claim.principal_id)
        if teacher is None:
            raise NotFound('Teacher not found')
        return teacher

    def _upload(self, media, folder, label):
        try:
            return self.uploader.upload(media.data, media.filename, folder=folder)
        except UploadError as e:
            logger.error(f"{label} upload failed: {e}")
            raise InternalError(f"{label} upload failed")

    def upload(self, claim, title, description, category, visibility, video, thumbnail):
        """비디오/썸네일 업로드 후 문서 생성

        업로드 중 하나라도 실패하면 문서를 만들지 않는다.
        """
        teacher = self._get_teacher(claim)

        title = (title or '').strip()
        if not title:
            raise BadRequest('Title is required')
        if video is None:
            raise BadRequest('Video file is required')
        if thumbnail is None:
            raise BadRequest('Thumbnail image is required')

        video_url = self._upload(video, VIDEO_FOLDER, 'Video')
        thumbnail_url = self._upload(thumbnail, THUMBNAIL_FOLDER, 'Thumbnail')

        created = self.store.create_video_for_teacher(teacher['id'], {
            'title': title,
            'description': description or '',
            'videoURL': video_url,
            'thumbnailURL': thumbnail_url,
            'category': category or 'General',
            'visibility': visibility or 'public',
            'likes': 0
        })
        logger.info(f"✅ 비디오 업로드 완료: {created['id']} (teacher {teacher['id']})")
        return video_summary(created)

    def list_all(self):
        """전체 비디오 (최신순, 교사 정보 포함)"""
        videos = self.store.list_videos()
        teachers = {}
        for video in videos:
            teacher_id = video.get('teacher')
            if teacher_id not in teachers:
                teachers[teacher_id] = self.store.get_document(TEACHERS, teacher_id)
            teacher = teachers[teacher_id]
            video['teacher'] = {
                'id': teacher['id'],
                'username': teacher.get('username'),
                'imageURL': teacher.get('imageURL') or ''
            } if teacher else None
        return videos

    def list_mine(self, claim):
        teacher = self._get_teacher(claim)
        return self.store.list_videos(teacher_id=teacher['id'])

    def toggle_like(self, video_id, action):
        """좋아요/취소. 인증 없음, 사용자별 기록 없음"""
        liked = action != 'unlike'
        likes = self.store.change_likes(video_id, 1 if liked else -1)
        if likes is None:
            raise NotFound('Video not found')
        return {
            'message': 'Video liked successfully' if liked else 'Video unliked successfully',
            'likes': likes,
            'isLiked': liked
        }

    def delete(self, claim, video_id):
        """소유 교사만 삭제 가능"""
        video = self.store.get_document(VIDEOS, video_id)
        if video is None:
            raise NotFound('Video not found')
        if video.get('teacher') != claim.principal_id:
            raise Forbidden('Forbidden: You can only delete your own videos')

        self.store.delete_video_for_teacher(claim.principal_id, video_id)
        logger.info(f"비디오 삭제: {video_id} (teacher {claim.principal_id})")
