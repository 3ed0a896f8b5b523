"""
Image storage on Firebase Storage.

Uploaded objects are made public and addressed by their
``https://storage.googleapis.com/<bucket>/<path>`` URL, which is what the
database rows keep. Deleting is best effort: the row is the source of truth,
so a missing object or a foreign URL is logged and ignored.
"""
import logging
import time

from firebase_admin import storage as firebase_storage

from services.errors import UpstreamError

logger = logging.getLogger(__name__)

PUBLIC_URL_BASE = "https://storage.googleapis.com"


class FirebaseImageStorage:
    def __init__(self, bucket_name: str | None = None, bucket=None):
        self._bucket_name = bucket_name or None
        self._bucket = bucket

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = firebase_storage.bucket(self._bucket_name)
        return self._bucket

    def public_url(self, path: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self.bucket.name}/{path}"

    def upload(self, content: bytes, content_type: str, path: str) -> str:
        try:
            blob = self.bucket.blob(path)
            blob.upload_from_string(content, content_type=content_type)
            blob.make_public()
        except Exception as exc:
            logger.exception("Image upload to %s failed", path)
            raise UpstreamError("Failed to upload image") from exc
        return self.public_url(path)

    def upload_image(self, content: bytes, filename: str, content_type: str, folder: str = "medicines") -> str:
        path = f"{folder}/{int(time.time() * 1000)}-{filename or 'image'}"
        return self.upload(content, content_type, path)

    def path_from_url(self, url: str | None) -> str | None:
        if not url:
            return None
        prefix = f"{PUBLIC_URL_BASE}/{self.bucket.name}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    def delete(self, url: str | None) -> None:
        try:
            path = self.path_from_url(url)
            if not path:
                return
            self.bucket.blob(path).delete()
        except Exception as exc:
            logger.warning("Image delete skipped for %s: %s", url, exc)
