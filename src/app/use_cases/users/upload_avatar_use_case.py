"""
Upload Avatar Use Case

Replaces the profile photo of the caller's own account.
"""

import logging
import os
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.object_storage import IObjectStorage
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from .authorization import authorize_self
from .dtos import AvatarImage, UserProfile

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
}


def validate_avatar(image: AvatarImage, max_bytes: int) -> Result[None]:
    """Only small JPEG and PNG files are accepted"""
    extension = os.path.splitext(image.filename)[1].lower()
    allowed_extensions = ALLOWED_IMAGE_TYPES.get(image.content_type)
    if allowed_extensions is None or extension not in allowed_extensions:
        return Return.err(Error("INVALID_IMAGE", "File type is not supported"))
    if not image.content:
        return Return.err(Error("INVALID_IMAGE", "File is empty"))
    if len(image.content) > max_bytes:
        return Return.err(
            Error("INVALID_IMAGE", f"File too large. Maximum size: {max_bytes // 1024}KB")
        )
    return Return.ok(None)


async def attach_avatar(
    storage: IObjectStorage, user: User, image: AvatarImage
) -> Result[Optional[str]]:
    """
    Upload the new image and point the user at it.

    The old object is not touched here; its id is returned so the caller can
    release it once the new reference is committed. On upload failure the
    user keeps the old avatar.
    """
    uploaded = await storage.upload(image.content, image.filename, image.content_type)
    if uploaded.is_err():
        return Return.err(uploaded.error)

    previous_object_id = user.avatar_object_id
    user.avatar_url = uploaded.value.url
    user.avatar_object_id = uploaded.value.object_id
    return Return.ok(previous_object_id)


async def release_avatar(storage: IObjectStorage, object_id: Optional[str]) -> None:
    """Best-effort removal of an avatar object no longer referenced"""
    if not object_id:
        return
    released = await storage.destroy(object_id)
    if released.is_err():
        logger.warning(f"Avatar object {object_id} could not be removed")


class UploadAvatarUseCase:
    """
    Use case for uploading a profile photo.

    Business Rules:
    - Only the account owner may upload
    - JPEG/PNG only, bounded size
    - New object is uploaded and saved before the old one is destroyed
    - A new object that could not be saved is destroyed again
    """

    def __init__(self, uow: UnitOfWork, storage: IObjectStorage, max_bytes: int = 1024 * 1024):
        self.uow = uow
        self.storage = storage
        self.max_bytes = max_bytes

    async def execute(
        self, acting_user_id: UUID, target_user_id: UUID, image: AvatarImage
    ) -> Result[UserProfile]:
        allowed = authorize_self(acting_user_id, target_user_id)
        if allowed.is_err():
            return Return.err(allowed.error)

        valid = validate_avatar(image, self.max_bytes)
        if valid.is_err():
            return Return.err(valid.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            attached = await attach_avatar(self.storage, user, image)
            if attached.is_err():
                return Return.err(attached.error)
            uploaded_object_id = user.avatar_object_id

            try:
                user = await self.uow.users.update(user)
                await self.uow.commit()
            except Exception:
                await release_avatar(self.storage, uploaded_object_id)
                raise
            profile = UserProfile.from_entity(user)

        await release_avatar(self.storage, attached.value)
        return Return.ok(profile)
