import asyncio
import io
import logging
import os
import time

from google.cloud import storage  # type: ignore
from google.cloud.exceptions import GoogleCloudError
from PIL import Image, UnidentifiedImageError

from listing_intake.errors import UploadError

logger = logging.getLogger(__name__)

BUCKET_NAME = os.getenv("GOOGLE_CLOUD_STORAGE_BUCKET", "listing_images")
MAX_UPLOAD_BYTES = int(os.getenv("LISTINGS_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
MAX_IMAGE_WIDTH = 1600
CACHE_CONTROL = "public, max-age=3600"


def build_media_path(listing_id: str, slot: str, filename: str | None, now_ms: int | None = None) -> str:
    """
    Object path for one uploaded file: ``{listing_id}/{slot}-{millis}{ext}``.

    ``ext`` is the original extension with its dot, or empty if the file has none.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    extension = os.path.splitext(filename or "")[1]
    return f"{listing_id}/{slot}-{now_ms}{extension}"


def prepare_image(data: bytes, max_width: int = MAX_IMAGE_WIDTH) -> bytes:
    """
    Downsize images wider than ``max_width``, keeping their format.

    The format is kept so the extension in the object path stays truthful.
    Bytes Pillow can't read are returned unchanged.
    """
    try:
        img = Image.open(io.BytesIO(data))
    except UnidentifiedImageError:
        logger.info("Upload is not a readable image, storing it unchanged")
        return data

    original_format = img.format
    if img.width <= max_width or original_format is None:
        return data

    ratio = max_width / img.width
    try:
        img = img.resize((max_width, int(img.height * ratio)), Image.LANCZOS)

        output = io.BytesIO()
        img.save(output, format=original_format, optimize=True)
    except (OSError, KeyError, ValueError) as e:
        # truncated files, or formats Pillow reads but cannot write (e.g. PSD)
        logger.warning(f"Could not resize {original_format} image, storing it unchanged: {e}")
        return data
    return output.getvalue()


class BlobStore:
    """Object storage holding uploaded media. Listings only keep the returned paths."""

    async def put(self, path: str, data: bytes, content_type: str | None) -> str:
        raise NotImplementedError

    async def delete(self, path: str) -> bool:
        raise NotImplementedError


"""
Google Cloud client libraries use Application Default Credentials (ADC), e.g.

export GOOGLE_APPLICATION_CREDENTIALS="/home/me/service-account.json"
"""


class GCSBlobStore(BlobStore):
    """
    Blob store on a Google Cloud Storage bucket.

    The GCS client is blocking, so every call runs in the default thread pool
    to keep the event loop free.
    """

    def __init__(self, bucket_name: str = BUCKET_NAME):
        self.bucket_name = bucket_name

    def _blob(self, path: str):
        client = storage.Client()
        return client.bucket(self.bucket_name).blob(path)

    async def put(self, path: str, data: bytes, content_type: str | None) -> str:
        def _blocking_upload():
            blob = self._blob(path)
            blob.cache_control = CACHE_CONTROL
            blob.upload_from_file(io.BytesIO(data), content_type=content_type, timeout=30)
            return blob.name

        try:
            loop = asyncio.get_running_loop()
            stored_path = await loop.run_in_executor(None, _blocking_upload)
        except GoogleCloudError as e:
            logger.error(f"Google Cloud Storage error for {path}: {e}", exc_info=True)
            raise UploadError("File upload failed: storage service error") from e

        logger.info(f"Successfully uploaded {stored_path} to {self.bucket_name}")
        return stored_path

    async def delete(self, path: str) -> bool:
        def _blocking_delete():
            self._blob(path).delete()

        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, _blocking_delete)
        except Exception as e:
            # Transport and credential errors included: a failed cleanup must not mask the original error
            logger.error(f"Failed to delete {path} from storage: {type(e).__name__}: {e}")
            return False

        logger.info(f"Successfully deleted {path} from {self.bucket_name}")
        return True


def get_blob_store() -> BlobStore:
    return GCSBlobStore()
