from .token_service import JWTTokenService, TokenSettings

__all__ = ["JWTTokenService", "TokenSettings"]
