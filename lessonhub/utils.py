# lessonhub/utils.py

import json
from collections import namedtuple

MediaFile = namedtuple('MediaFile', ['filename', 'data'])


def read_upload(file_storage):
    """multipart 파일을 MediaFile 로 변환 (없거나 비어 있으면 None)"""
    if file_storage is None or not file_storage.filename:
        return None
    data = file_storage.read()
    if not data:
        return None
    return MediaFile(file_storage.filename, data)


def parse_subjects(value):
    """과목 목록 파싱

    JSON 배열 문자열은 디코딩하고, JSON 이 아닌 문자열은 단일 항목 리스트로
    취급한다. 배열이 아닌 JSON 값(숫자, 문자열, null 등)은 빈 리스트.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return [value] if value else []
        if isinstance(parsed, list):
            return [str(v) for v in parsed]
        return []
    return []


def profile_projection(kind, record):
    """프로필 응답 형태"""
    image_url = record.get('imageURL') or ''
    profile = {
        'username': record.get('username'),
        'email': record.get('email'),
        'profileImage': image_url,
        'imageURL': image_url
    }
    if kind == 'teacher':
        profile['subjects'] = record.get('subjects') or []
    return profile


def video_summary(video):
    return {
        'id': video['id'],
        'title': video['title'],
        'videoURL': video['videoURL'],
        'thumbnailURL': video['thumbnailURL']
    }
