from typing import Optional, Tuple

from pymongo.errors import DuplicateKeyError, PyMongoError

from ..models.users import LoginRequest, RegisterRequest, UserRecord, UserRole
from ..utils.errors import (
    AuthenticationError,
    ClientInputError,
    ForbiddenError,
    PortalError,
    ServerError,
)
from ..utils.logging import logger
from ..utils.security import Caller, create_access_token, hash_password, verify_password
from .collection import CollectionService


def issue_token(user: UserRecord) -> str:
    return create_access_token(user_id=user.id, email=user.email, role=UserRole(user.role))


class AuthService(CollectionService):
    """Member accounts and the tokens that identify them."""

    record_model = UserRecord
    label = "User"

    def register(
        self,
        request: RegisterRequest,
        caller: Optional[Caller] = None,
    ) -> Tuple[UserRecord, str]:
        email = (request.email or "").strip().lower()
        password = request.password or ""
        if not email or not password:
            raise ClientInputError("Email and password are required.")

        role = UserRole(request.role) if request.role else UserRole.user
        if role != UserRole.user and (caller is None or not caller.is_admin):
            raise ForbiddenError("Only administrators can assign elevated roles.")

        if self._find_by_email(email) is not None:
            raise ClientInputError("User already exists.")

        try:
            record = UserRecord(email=email, password_hash=hash_password(password), role=role)
        except ValueError as exc:
            raise ClientInputError(str(exc)) from exc

        user = self._insert(record)
        logger.log_step("user_registered", {"user_id": user.id, "role": user.role})
        return user, issue_token(user)

    def login(self, request: LoginRequest) -> Tuple[UserRecord, str]:
        email = (request.email or "").strip().lower()
        password = request.password or ""
        if not email or not password:
            raise ClientInputError("Email and password are required.")

        user = self._find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.log_warning("login_rejected", {"email": email})
            raise AuthenticationError("Invalid credentials.")

        logger.log_step("user_logged_in", {"user_id": user.id})
        return user, issue_token(user)

    def get_user(self, user_id: str) -> UserRecord:
        return self._find_one(user_id)

    def _find_by_email(self, email: str) -> Optional[UserRecord]:
        try:
            document = self.collection.find_one({"email": email})
        except PyMongoError as exc:
            logger.log_error("user_lookup_failed", {"error": str(exc)})
            raise ServerError("Server error while looking up user.") from exc
        return UserRecord.from_mongo(document) if document else None

    def _classify_write_error(self, action: str, exc: Exception) -> PortalError:
        if isinstance(exc, DuplicateKeyError):
            return ClientInputError("User already exists.")
        return super()._classify_write_error(action, exc)
