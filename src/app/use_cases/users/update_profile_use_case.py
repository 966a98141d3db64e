"""
Update Profile Use Case

Partial update of the caller's own account, optionally with a new photo.
"""

import secrets
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.user_repository import UserAlreadyExistsError
from src.app.services.notifications import AccountNotifier
from src.app.services.object_storage import IObjectStorage
from src.app.services.token_issuer import EMAIL_VERIFICATION, ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from .authorization import authorize_self
from .dtos import AvatarImage, UpdateProfileCommand, UserProfile
from .upload_avatar_use_case import attach_avatar, release_avatar, validate_avatar

EMAIL_CHANGED_TITLE = "You updated your email address"
EMAIL_CHANGED_MESSAGE = (
    "If this wasn't you, please change your password immediately."
)


def _provided(value: Optional[str]) -> Optional[str]:
    """Blank form fields mean 'leave unchanged'"""
    if value is None:
        return None
    return value.strip() or None


class UpdateProfileUseCase:
    """
    Use case for updating a profile.

    Business Rules:
    - Only the account owner may update it
    - Only provided, non-blank fields replace existing values
    - New email or phone must not belong to another account
    - Changing the email resets email_verified and sends a new verification
      link to the new address (background, failure logged only)
    - A new image is uploaded and saved before the old one is destroyed
    - A new image whose save fails is destroyed again
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tokens: ITokenIssuer,
        notifier: AccountNotifier,
        storage: IObjectStorage,
        max_image_bytes: int = 1024 * 1024,
    ):
        self.uow = uow
        self.tokens = tokens
        self.notifier = notifier
        self.storage = storage
        self.max_image_bytes = max_image_bytes

    async def execute(
        self,
        acting_user_id: UUID,
        target_user_id: UUID,
        command: UpdateProfileCommand,
        image: Optional[AvatarImage] = None,
        background_tasks=None,
    ) -> Result[UserProfile]:
        allowed = authorize_self(acting_user_id, target_user_id)
        if allowed.is_err():
            return Return.err(allowed.error)

        if image is not None:
            valid = validate_avatar(image, self.max_image_bytes)
            if valid.is_err():
                return Return.err(valid.error)

        name = _provided(command.name)
        email = _provided(command.email)
        phone_number = _provided(command.phone_number)
        if email:
            email = email.lower()

        verification_secret = None
        previous_object_id = None
        uploaded_object_id = None

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            email_changed = email is not None and email != user.email
            phone_changed = phone_number is not None and phone_number != user.phone_number

            if email_changed or phone_changed:
                taken = await self.uow.users.get_by_email_or_phone(
                    email if email_changed else user.email,
                    phone_number if phone_changed else None,
                    exclude_id=user.id,
                )
                if taken:
                    return Return.err(
                        Error("USER_ALREADY_EXISTS", "Email or phone number is already taken")
                    )

            if name:
                user.name = name
            if phone_changed:
                user.phone_number = phone_number
                user.phone_verified = False
            if email_changed:
                user.email = email
                user.email_verified = False
                verification_secret = secrets.token_urlsafe(32)
                user.email_verification_token = verification_secret

            if image is not None:
                attached = await attach_avatar(self.storage, user, image)
                if attached.is_err():
                    return Return.err(attached.error)
                previous_object_id = attached.value
                uploaded_object_id = user.avatar_object_id

            try:
                user = await self.uow.users.update(user)
                await self.uow.commit()
            except UserAlreadyExistsError:
                await release_avatar(self.storage, uploaded_object_id)
                return Return.err(
                    Error("USER_ALREADY_EXISTS", "Email or phone number is already taken")
                )
            except Exception:
                await release_avatar(self.storage, uploaded_object_id)
                raise
            profile = UserProfile.from_entity(user)

        await release_avatar(self.storage, previous_object_id)

        if verification_secret:
            token = self.tokens.issue_purpose_token(
                EMAIL_VERIFICATION, {"secret": verification_secret}
            )
            send_args = (profile.email, profile.name, token, EMAIL_CHANGED_TITLE, EMAIL_CHANGED_MESSAGE)
            if background_tasks is not None:
                background_tasks.add_task(self.notifier.send_verification_quietly, *send_args)
            else:
                await self.notifier.send_verification_quietly(*send_args)

        return Return.ok(profile)
