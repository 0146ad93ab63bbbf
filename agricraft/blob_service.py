# agricraft/blob_service.py
import logging
import time
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from .config import settings
from .errors import StorageError

logger = logging.getLogger(__name__)

CACHE_CONTROL = "max-age=3600"

_service_client: Optional[BlobServiceClient] = None
_container_ready = False


def _get_client() -> BlobServiceClient:
    global _service_client
    if _service_client is None:
        if not settings.AZURE_STORAGE_CONNECTION_STRING:
            raise StorageError("AZURE_STORAGE_CONNECTION_STRING not set")
        _service_client = BlobServiceClient.from_connection_string(settings.AZURE_STORAGE_CONNECTION_STRING)
    return _service_client


async def _ensure_container() -> ContainerClient:
    global _container_ready
    container = _get_client().get_container_client(settings.AZURE_BLOB_CONTAINER)
    if not _container_ready:
        try:
            await container.create_container()
        except ResourceExistsError:
            pass
        _container_ready = True
    return container


def guess_extension(content_type: Optional[str], filename: Optional[str] = None) -> str:
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    ct = (content_type or "").lower()
    if "jpeg" in ct or "jpg" in ct:
        return "jpg"
    if "png" in ct:
        return "png"
    if "webp" in ct:
        return "webp"
    if "gif" in ct:
        return "gif"
    if "avif" in ct:
        return "avif"
    return "bin"


def build_object_name(prefix: str, user_id: str, filename: str, content_type: Optional[str] = None) -> str:
    """e.g. waste_<user>_<epoch ms>.webp"""
    return f"{prefix}_{user_id}_{int(time.time() * 1000)}.{guess_extension(content_type, filename)}"


def _public_url(blob_name: str, blob_url: str) -> str:
    if not settings.AZURE_BLOB_PUBLIC_BASE:
        return blob_url
    return f"{settings.AZURE_BLOB_PUBLIC_BASE}/{settings.AZURE_BLOB_CONTAINER}/{blob_name}"


async def upload_image(data: bytes, path: str, content_type: Optional[str] = None) -> str:
    """
    Upload bytes to Azure Blob Storage under `path`.
    Existing blobs are never replaced. Returns the public URL.
    """
    try:
        container = await _ensure_container()
        blob = container.get_blob_client(path)
        await blob.upload_blob(
            data,
            overwrite=False,
            content_settings=ContentSettings(
                content_type=content_type or "application/octet-stream",
                cache_control=CACHE_CONTROL,
            ),
        )
    except ResourceExistsError as e:
        raise StorageError(f"Object already exists: {path}") from e
    except AzureError as e:
        raise StorageError(f"Upload failed: {e}") from e

    logger.info("uploaded %s (%d bytes)", path, len(data))
    return _public_url(path, blob.url)


async def delete_image(path: str) -> None:
    try:
        container = await _ensure_container()
        await container.delete_blob(path)
    except ResourceNotFoundError as e:
        raise StorageError(f"Object not found: {path}") from e
    except AzureError as e:
        raise StorageError(f"Delete failed: {e}") from e
