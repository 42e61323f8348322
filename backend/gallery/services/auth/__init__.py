from .dto import AuthedUserOut, LoginIn, SignupIn, TokenPairOut, UserPublicOut
from .service import AuthService

__all__ = ["AuthService", "AuthedUserOut", "LoginIn", "SignupIn", "TokenPairOut", "UserPublicOut"]
