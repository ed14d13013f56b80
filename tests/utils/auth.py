from jose import jwt
from app.core.config import settings
from app.schemas.token import TokenPayload


def get_user_authentication_headers(
    user_id: str = "user_test", role: str = "user"
) -> dict[str, str]:
    """
    Generates a valid JWT token and authentication headers for a test user.
    """
    payload = TokenPayload(sub=user_id, role=role, exp=9999999999)  # High expiration for tests
    token = jwt.encode(payload.model_dump(), settings.JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def get_admin_authentication_headers(user_id: str = "admin_test") -> dict[str, str]:
    return get_user_authentication_headers(user_id=user_id, role="admin")


def get_internal_headers() -> dict[str, str]:
    return {"X-Internal-Api-Key": settings.INTERNAL_API_KEY}
