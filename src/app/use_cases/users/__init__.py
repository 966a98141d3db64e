"""
User Management Use Cases

Operations on the caller's own account.
"""

from .get_profile_use_case import GetProfileUseCase
from .logout_use_case import LogoutUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .upload_avatar_use_case import UploadAvatarUseCase
from .change_password_use_case import ChangePasswordUseCase
from .request_email_verification_use_case import RequestEmailVerificationUseCase
from .delete_account_use_case import DeleteAccountUseCase
from .download_account_data_use_case import DownloadAccountDataUseCase
from .dtos import (
    AccountExport,
    AvatarImage,
    DeleteAccountResponse,
    MessageResponse,
    UpdateProfileCommand,
    UserProfile,
)

__all__ = [
    # Use Cases
    "GetProfileUseCase",
    "LogoutUseCase",
    "UpdateProfileUseCase",
    "UploadAvatarUseCase",
    "ChangePasswordUseCase",
    "RequestEmailVerificationUseCase",
    "DeleteAccountUseCase",
    "DownloadAccountDataUseCase",
    # DTOs
    "UserProfile",
    "AvatarImage",
    "UpdateProfileCommand",
    "MessageResponse",
    "DeleteAccountResponse",
    "AccountExport",
]
