# lessonhub/storage.py
import io
import uuid
import logging
import mimetypes
import boto3
from boto3.s3.transfer import TransferConfig
from werkzeug.utils import secure_filename
from .errors import UploadError

logger = logging.getLogger(__name__)

s3_config = TransferConfig(
    multipart_threshold=1024 * 1024 * 25,
    multipart_chunksize=1024 * 1024 * 50,
    max_concurrency=5,
    use_threads=True
)


def build_object_key(folder, filename):
    """업로드 객체 키 생성"""
    safe_name = secure_filename(filename or '') or 'file'
    return f"{folder}/{uuid.uuid4().hex}_{safe_name}"


class MediaUploader:
    """S3 호환 저장소 업로드 (공개 URL 반환)"""

    def __init__(self, access_key, secret_key, region_name, bucket_name,
                 endpoint_url=None, base_url=''):
        self.bucket_name = bucket_name
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self.base_url = base_url.rstrip('/')
        self.s3 = boto3.client(
            's3',
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region_name,
            endpoint_url=endpoint_url
        )

    def public_url(self, key):
        """객체 공개 URL"""
        if self.base_url:
            return f"{self.base_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region_name}.amazonaws.com/{key}"

    def upload(self, data, filename, folder='uploads'):
        """바이트 업로드 후 URL 반환. 실패 시 UploadError"""
        key = build_object_key(folder, filename)
        content_type = mimetypes.guess_type(filename or '')[0] or 'application/octet-stream'
        try:
            self.s3.upload_fileobj(
                io.BytesIO(data), self.bucket_name, key,
                ExtraArgs={'ContentType': content_type},
                Config=s3_config
            )
        except Exception as e:
            logger.error(f"S3 업로드 실패 ({key}): {e}")
            raise UploadError(f"Upload failed: {filename}") from e

        logger.info(f"S3 업로드 완료: {key} ({len(data) / 1024 / 1024:.1f}MB)")
        return self.public_url(key)
