"""
DearSelf - Store Package
Backend selection for rows and accounts
"""

import logging
from typing import Optional

from dearself.config import AppConfig, Backend
from dearself.core.session import AuthProvider
from dearself.store.base import QuerySpec, RemoteStore, Row, TableQuery

logger = logging.getLogger(__name__)

class BackendFactory:
    """Builds the auth provider and per-user stores for the configured backend"""

    def __init__(self, config: AppConfig, auth_provider: Optional[AuthProvider] = None,
                 local_store: Optional[RemoteStore] = None):
        self.config = config
        self._auth_provider = auth_provider
        self._local_store = local_store

    def auth_provider(self) -> AuthProvider:
        if self._auth_provider is None:
            if self.config.backend is Backend.SUPABASE:
                from dearself.store.supabase_backend import SupabaseAuthProvider
                self._auth_provider = SupabaseAuthProvider.connect(
                    self.config.supabase.url, self.config.supabase.anon_key
                )
            else:
                from dearself.store.local import LocalAuthProvider
                self._auth_provider = LocalAuthProvider(self.config.storage.accounts_path)
            logger.info(f"🔐 Auth provider ready: {self.config.backend.value}")
        return self._auth_provider

    def store_for(self, access_token: Optional[str]) -> RemoteStore:
        """Store scoped to the token's owner (row-level security on Supabase)"""
        if self.config.backend is Backend.SUPABASE:
            from dearself.store.supabase_backend import SupabaseStore
            return SupabaseStore.connect(
                self.config.supabase.url, self.config.supabase.anon_key, access_token
            )

        if self._local_store is None:
            from dearself.store.local import LocalStore
            self._local_store = LocalStore(self.config.storage.store_path)
        return self._local_store

    def release(self, store: RemoteStore) -> None:
        """Close a store handed out by store_for; the shared local store stays open"""
        if store is not self._local_store:
            store.close()

    def close(self) -> None:
        if self._local_store is not None:
            self._local_store.close()
            self._local_store = None

__all__ = [
    'BackendFactory',
    'QuerySpec',
    'RemoteStore',
    'Row',
    'TableQuery',
]
