# app/services/image_store.py
import base64
import logging
from typing import Dict, Optional

from imagekitio import ImageKit
from imagekitio.exceptions.NotFoundException import NotFoundException
from imagekitio.models.UploadFileRequestOptions import UploadFileRequestOptions

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ImageStoreError(RuntimeError):
    pass


class ImageStore:
    """
    Upload a file into an ImageKit folder, delete by file id.
    """

    def __init__(self, settings: Settings, client: Optional[ImageKit] = None):
        self.settings = settings
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.settings.imagekit_private_key)

    @property
    def client(self) -> ImageKit:
        if self._client is None:
            self._client = ImageKit(
                private_key=self.settings.imagekit_private_key,
                public_key=self.settings.imagekit_public_key,
                url_endpoint=self.settings.imagekit_url_endpoint,
            )
        return self._client

    def upload_image(self, content: bytes, file_name: str, folder: str) -> Dict[str, str]:
        if not self.enabled:
            raise ImageStoreError("Image storage is not configured")

        try:
            result = self.client.upload_file(
                file=base64.b64encode(content).decode(),
                file_name=file_name,
                options=UploadFileRequestOptions(folder=f"/{folder.strip('/')}/", use_unique_file_name=True),
            )
        except Exception as exc:
            logger.exception("Image upload to %s failed", folder)
            raise ImageStoreError("Failed to upload image") from exc

        logger.info("Uploaded image %s to %s", result.file_id, folder)
        return {"url": result.url, "fileId": result.file_id}

    def delete_image(self, file_id: str) -> None:
        if not self.enabled:
            logger.warning("Image storage not configured; skipping delete of %s", file_id)
            return

        try:
            self.client.delete_file(file_id=file_id)
        except NotFoundException:
            logger.info("Image %s already gone", file_id)
        except Exception as exc:
            logger.exception("Image delete failed for %s", file_id)
            raise ImageStoreError(f"Failed to delete image {file_id}") from exc


def get_image_store() -> ImageStore:
    return ImageStore(get_settings())
