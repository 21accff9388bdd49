import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.models.user import User, UserRole
from app.auth.repositories.user_repository import UserRepository
from app.auth.schemas.auth import LoginResponse, RegisterRequest
from app.auth.schemas.user import UpdateProfileRequest, UserResponse
from app.core import security
from app.core.exceptions import (
    EmailAlreadyExistsError,
    ForbiddenError,
    InvalidCredentialsError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


class AuthService:
    """Registration, credential checks and profile updates."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def create_user(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.STUDENT,
    ) -> User:
        email = email.lower()
        if self.users.exists_by_email(email):
            raise EmailAlreadyExistsError(email)

        user = User(
            email=email,
            hashed_password=security.get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        try:
            self.users.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise EmailAlreadyExistsError(email) from e
        self.db.refresh(user)

        logger.info("user_created", user_id=str(user.id), role=role.value)
        return user

    def register(self, data: RegisterRequest) -> UserResponse:
        user = self.create_user(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
        )
        return UserResponse.model_validate(user)

    def verify_credentials(self, email: str, password: str) -> User:
        """Return the user owning these credentials, regardless of suspension.

        Deleted accounts and wrong passwords both raise the same
        InvalidCredentialsError so callers cannot tell which e-mails exist.
        """
        user = self.users.get_by_email(email)
        if user is None or user.is_deleted:
            raise InvalidCredentialsError()
        if not security.verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()
        return user

    def login(self, email: str, password: str) -> LoginResponse:
        user = self.verify_credentials(email, password)
        if not user.is_active:
            logger.info("login_rejected_suspended", user_id=str(user.id))
            raise ForbiddenError("Account is suspended")

        access_token = security.create_access_token(security.token_payload_for(user))
        logger.info("user_logged_in", user_id=str(user.id))
        return LoginResponse(access_token=access_token, user=UserResponse.model_validate(user))

    def update_profile(self, user: User, data: UpdateProfileRequest) -> UserResponse:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return UserResponse.model_validate(user)

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not security.verify_password(current_password, user.hashed_password):
            logger.info("password_change_rejected", user_id=str(user.id))
            raise InvalidCredentialsError()
        if current_password == new_password:
            raise ValidationError(
                "New password must differ from the current one", field="new_password"
            )

        user.hashed_password = security.get_password_hash(new_password)
        self.db.commit()
        logger.info("password_changed", user_id=str(user.id))
