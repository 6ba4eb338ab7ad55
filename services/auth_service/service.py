import structlog

from shared.exceptions import AuthError, NotFoundError, ValidationError
from shared.security import hash_password, verify_password
from shared.storage import StoreBackedService

from .models import User
from .schemas import UserCreate, UserLogin

logger = structlog.get_logger(__name__)


class AuthService(StoreBackedService):
    """
    Registration and password check. No token or session is issued:
    login only confirms the credentials and returns the user.
    """

    resource = "users"

    async def register(self, data: UserCreate) -> User:
        existing = await self._call(lambda repo: repo.get_by_email(data.email))
        if existing:
            raise ValidationError("User already exists")

        values = data.model_dump()
        values["password"] = hash_password(data.password)
        user = await self._call(lambda repo: repo.create(User(**values)))
        logger.info("user_registered", user_id=user.id)
        return user

    async def login(self, data: UserLogin) -> User:
        user = await self._call(lambda repo: repo.get_by_email(data.email))
        if not user or not verify_password(data.password, user.password):
            logger.info("login_rejected")
            raise AuthError("Invalid credentials")
        return user

    async def get_user(self, user_id: str) -> User:
        user = await self._call(lambda repo: repo.get_by_id(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user
