# sheetlens/auth/__init__.py
from sheetlens.auth.base import IdentityProvider, Principal
from sheetlens.auth.local import LocalIdentityProvider
from sheetlens.core.config import Settings
from sheetlens.store.base import MetadataStore


def build_identity_provider(settings: Settings, store: MetadataStore) -> IdentityProvider:
    provider = settings.IDENTITY_PROVIDER.lower()
    if provider == "local":
        return LocalIdentityProvider(
            store,
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
            password_min_length=settings.PASSWORD_MIN_LENGTH
        )
    if provider == "supabase":
        from sheetlens.auth.supabase import SupabaseIdentityProvider
        return SupabaseIdentityProvider(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            timeout=settings.SUPABASE_TIMEOUT_SECONDS,
            password_min_length=settings.PASSWORD_MIN_LENGTH
        )
    raise ValueError(f"Unknown IDENTITY_PROVIDER: {settings.IDENTITY_PROVIDER}")


__all__ = [
    "IdentityProvider",
    "Principal",
    "LocalIdentityProvider",
    "build_identity_provider",
]
