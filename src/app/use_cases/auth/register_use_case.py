import hashlib
import logging
import secrets

from libs.result import Error, Result, Return
from src.app.repositories.user_repository import UserAlreadyExistsError
from src.app.services.notifications import AccountNotifier
from src.app.services.password_hasher import EncodingError, PasswordHasher
from src.app.services.token_issuer import EMAIL_VERIFICATION, ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users.dtos import UserProfile
from src.domain.entities import User
from .dtos import AuthResponse, RegisterCommand

logger = logging.getLogger(__name__)

WELCOME_TITLE = "Welcome!"
WELCOME_MESSAGE = "If you did not create an account, please ignore this email."


def gravatar_url(email: str) -> str:
    """Default avatar derived from the email address"""
    digest = hashlib.md5(email.encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s=200&r=pg&d=mm"


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Reject if the email or phone number is already taken
    2. Hash password with bcrypt
    3. Create User with email_verified=False and a pending verification secret
    4. Commit
    5. Issue a session token
    6. Send the verification email in the background (failure is logged only)
    7. Return the session token and the public profile
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        tokens: ITokenIssuer,
        notifier: AccountNotifier,
    ):
        self.uow = uow
        self.hasher = hasher
        self.tokens = tokens
        self.notifier = notifier

    async def execute(
        self, command: RegisterCommand, background_tasks=None
    ) -> Result[AuthResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with validated fields
            background_tasks: optional scheduler with add_task(func, *args)
                (FastAPI BackgroundTasks); the email is awaited inline without one

        Returns:
            Result[AuthResponse], or Error(USER_ALREADY_EXISTS)
        """
        email = command.email.strip().lower()
        phone_number = (command.phone_number or "").strip() or None

        try:
            password_hash = self.hasher.hash(command.password)
        except EncodingError as e:
            return Return.err(Error("VALIDATION_ERROR", str(e)))

        async with self.uow:
            existing_user = await self.uow.users.get_by_email_or_phone(email, phone_number)
            if existing_user:
                return Return.err(
                    Error("USER_ALREADY_EXISTS", "Email or phone number is already taken")
                )

            verification_secret = secrets.token_urlsafe(32)
            user = User(
                name=command.name.strip(),
                email=email,
                phone_number=phone_number,
                password_hash=password_hash,
                avatar_url=gravatar_url(email),
                email_verified=False,
                email_verification_token=verification_secret,
            )
            try:
                user = await self.uow.users.create(user)
            except UserAlreadyExistsError:
                return Return.err(
                    Error("USER_ALREADY_EXISTS", "Email or phone number is already taken")
                )

            await self.uow.commit()

            logger.info(f"Registered user {user.id}")
            session_token = self.tokens.issue_session(user.id)
            profile = UserProfile.from_entity(user)

        verification_token = self.tokens.issue_purpose_token(
            EMAIL_VERIFICATION, {"secret": verification_secret}
        )
        send_args = (profile.email, profile.name, verification_token, WELCOME_TITLE, WELCOME_MESSAGE)
        if background_tasks is not None:
            background_tasks.add_task(self.notifier.send_verification_quietly, *send_args)
        else:
            await self.notifier.send_verification_quietly(*send_args)

        return Return.ok(AuthResponse(token=session_token, user=profile))
