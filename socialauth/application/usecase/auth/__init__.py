"""Authentication use cases."""

from .get_auth_url import GetAuthUrlUseCase
from .get_current_user import GetCurrentUserUseCase
from .social_login import SocialLoginUseCase

__all__ = ["GetAuthUrlUseCase", "GetCurrentUserUseCase", "SocialLoginUseCase"]
