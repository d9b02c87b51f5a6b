#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Supabase backend
Row store and auth provider on top of the hosted Supabase project

Each store is bound to one user's access token so that row-level security
scopes every query to that user on the server side as well. Stores live for
one request and close their HTTP connection pool afterwards.

Sign-in and sign-up run on a throwaway client: the auth client remembers
the last session it saw, and the shared client must never hold one user's
session while serving another.
"""

import logging
from typing import Callable, List, Optional, Tuple, TypeVar

import httpx
from postgrest import SyncPostgrestClient
from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from dearself.core.exceptions import AuthError, StoreError
from dearself.core.session import AuthProvider, AuthUser
from dearself.store.base import QuerySpec, RemoteStore, Row

logger = logging.getLogger(__name__)

T = TypeVar("T")

REST_PATH = "/rest/v1"

def _run(action: Callable[[], T], description: str) -> T:
    try:
        return action()
    except (APIError, httpx.HTTPError) as e:
        logger.debug(f"Supabase call failed: {description}: {e}")
        raise StoreError(f"{description} failed: {e}") from e

class SupabaseStore(RemoteStore):
    """Translates QuerySpec reads and row mutations to postgrest calls"""

    def __init__(self, client: SyncPostgrestClient):
        self.client = client

    @classmethod
    def connect(cls, url: str, anon_key: str, access_token: Optional[str] = None) -> "SupabaseStore":
        client = SyncPostgrestClient(
            url.rstrip("/") + REST_PATH,
            headers={
                "apikey": anon_key,
                "Authorization": f"Bearer {access_token or anon_key}",
            },
        )
        return cls(client)

    def close(self) -> None:
        self.client.session.close()

    def fetch(self, spec: QuerySpec) -> List[Row]:
        query = self._apply(self.client.table(spec.table).select(spec.columns), spec)
        response = _run(query.execute, f"select from {spec.table}")
        return response.data or []

    def count(self, spec: QuerySpec) -> int:
        query = self.client.table(spec.table).select(spec.columns, count="exact", head=True)
        for op, column, value in spec.filters:
            query = getattr(query, op)(column, value)
        response = _run(query.execute, f"count {spec.table}")
        return response.count or 0

    def insert(self, table: str, row: Row) -> Row:
        response = _run(self.client.table(table).insert(row).execute, f"insert into {table}")
        return response.data[0] if response.data else dict(row)

    def update(self, table: str, row_id: str, fields: Row) -> Optional[Row]:
        query = self.client.table(table).update(fields).eq("id", row_id)
        response = _run(query.execute, f"update {table}")
        return response.data[0] if response.data else None

    def delete(self, table: str, row_id: str) -> None:
        query = self.client.table(table).delete().eq("id", row_id)
        _run(query.execute, f"delete from {table}")

    @staticmethod
    def _apply(query, spec: QuerySpec):
        for op, column, value in spec.filters:
            if op not in ("eq", "gte"):
                raise StoreError(f"Unsupported filter: {op}")
            query = getattr(query, op)(column, value)
        if spec.order_by:
            query = query.order(spec.order_by, desc=spec.descending)
        if spec.limit is not None:
            query = query.limit(spec.limit)
        return query

class SupabaseAuthProvider(AuthProvider):
    """Email/password auth through Supabase Auth"""

    def __init__(self, client: Client, client_factory: Callable[[], Client]):
        self.client = client
        self.client_factory = client_factory

    @classmethod
    def connect(cls, url: str, anon_key: str) -> "SupabaseAuthProvider":
        def new_client() -> Client:
            options = ClientOptions(auto_refresh_token=False, persist_session=False)
            return create_client(url, anon_key, options=options)

        return cls(new_client(), new_client)

    def sign_in(self, email: str, password: str) -> Tuple[AuthUser, str]:
        try:
            response = self.client_factory().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            raise AuthError(str(e)) from e
        if not response.user or not response.session:
            raise AuthError("Invalid login credentials")
        return self._user(response.user), response.session.access_token

    def sign_up(self, email: str, password: str) -> Tuple[AuthUser, Optional[str]]:
        try:
            response = self.client_factory().auth.sign_up({"email": email, "password": password})
        except Exception as e:
            raise AuthError(str(e)) from e
        if not response.user:
            raise AuthError("Sign up failed")
        token = response.session.access_token if response.session else None
        if token is None:
            logger.info(f"📧 Confirmation pending for {email}")
        return self._user(response.user), token

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.debug(f"Token rejected: {e}")
            return None
        if not response or not response.user:
            return None
        return self._user(response.user)

    def sign_out(self, access_token: str) -> None:
        """Revoke this token's session only; the user's other devices stay signed in"""
        try:
            self.client.auth.admin.sign_out(access_token, "local")
        except Exception as e:
            raise AuthError(str(e)) from e

    @staticmethod
    def _user(user) -> AuthUser:
        return AuthUser(id=str(user.id), email=getattr(user, "email", None))
