"""
Media Host Client

Image uploads to Cloudinary. The Cloudinary SDK is synchronous, so calls
run in the thread pool.

``upload_images`` is all-or-nothing: if any upload fails, the images that
were already stored are destroyed before the error is raised.
"""

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass

import cloudinary
import cloudinary.uploader
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from eduportal.core.config import settings
from eduportal.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/png", "image/jpeg", "image/webp")

UPLOAD_FAILED_MESSAGE = "Failed to upload images to Cloudinary"


@dataclass(frozen=True)
class UploadedImage:
    """An image stored on the media host."""

    public_id: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def configure_media() -> None:
    """Configure the Cloudinary SDK from settings. Call on startup."""
    if not settings.cloudinary_cloud_name:
        logger.warning("Cloudinary is not configured; image uploads will fail")
        return

    cloudinary.config(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        secure=True,
    )


def find_invalid_image_types(files: Sequence[UploadFile]) -> list[str]:
    """Return the declared content types that are not allowed."""
    return [str(f.content_type) for f in files if f.content_type not in ALLOWED_IMAGE_TYPES]


async def upload_image(file: UploadFile) -> UploadedImage:
    """
    Upload a single image.

    Raises:
        UpstreamError: If the media host rejects or fails the upload
    """
    try:
        result = await run_in_threadpool(
            cloudinary.uploader.upload,
            file.file,
            folder=settings.cloudinary_folder,
            resource_type="image",
        )
    except Exception as e:
        logger.error(f"Cloudinary upload failed for {file.filename}: {e}")
        raise UpstreamError(UPLOAD_FAILED_MESSAGE) from e

    if not result or result.get("error") or not result.get("secure_url"):
        logger.error(f"Cloudinary returned an unusable response for {file.filename}: {result}")
        raise UpstreamError(UPLOAD_FAILED_MESSAGE)

    return UploadedImage(public_id=result["public_id"], url=result["secure_url"])


async def upload_images(files: Sequence[UploadFile]) -> list[UploadedImage]:
    """Upload images in order, destroying earlier uploads if a later one fails."""
    uploaded: list[UploadedImage] = []
    try:
        for file in files:
            uploaded.append(await upload_image(file))
    except UpstreamError:
        await delete_images(uploaded)
        raise

    logger.info(f"Uploaded {len(uploaded)} image(s) to Cloudinary")
    return uploaded


async def delete_images(images: Sequence[UploadedImage]) -> None:
    """
    Best-effort removal of stored images.

    Failures are logged rather than raised; this runs while another error
    is already being reported to the client.
    """
    for image in images:
        try:
            await run_in_threadpool(cloudinary.uploader.destroy, image.public_id)
        except Exception as e:
            logger.warning(f"Could not delete orphaned image {image.public_id}: {e}")

    if images:
        logger.info(f"Removed {len(images)} orphaned image(s) from Cloudinary")
