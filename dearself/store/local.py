#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Local backend
JSON-file store and accounts for development and tests

Behaves like the hosted store from a panel's point of view: ids and
created_at are assigned on insert, rows are filtered and ordered per query,
and no uniqueness is enforced.
"""

import copy
import hashlib
import json
import logging
import secrets
import threading
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytz

from dearself.core.exceptions import AuthError, StoreError
from dearself.core.session import AuthProvider, AuthUser
from dearself.models.enums import Table
from dearself.store.base import QuerySpec, RemoteStore, Row

logger = logging.getLogger(__name__)

def _load_json(file_path: Path) -> Dict:
    """Load a JSON file, empty dict when missing"""
    if not file_path.exists():
        return {}
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise StoreError(f"Corrupted data file {file_path}: {e}") from e

def _save_json(file_path: Path, data: Dict):
    """Write atomically through a temporary file"""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    tmp_path.replace(file_path)

# ===== STORE =====

class LocalStore(RemoteStore):
    """In-memory tables, optionally persisted to one JSON file"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._lock = threading.RLock()
        self._last_created: Optional[datetime] = None
        self.tables: Dict[str, List[Row]] = {table.value: [] for table in Table}

        if self.path:
            for name, rows in _load_json(self.path).items():
                self.tables[name] = rows
            logger.info(f"📂 Local store loaded from {self.path}")

    def fetch(self, spec: QuerySpec) -> List[Row]:
        with self._lock:
            rows = self._matching(spec)
            if spec.order_by:
                rows = sorted(rows, key=lambda row: _sort_key(row.get(spec.order_by)),
                              reverse=spec.descending)
            if spec.limit is not None:
                rows = rows[:spec.limit]

            columns = spec.column_list()
            if columns:
                rows = [{column: row.get(column) for column in columns} for row in rows]
            return copy.deepcopy(rows)

    def count(self, spec: QuerySpec) -> int:
        with self._lock:
            return len(self._matching(spec))

    def insert(self, table: str, row: Row) -> Row:
        with self._lock:
            record = dict(row)
            record.setdefault("id", str(uuid.uuid4()))
            record.setdefault("created_at", self._next_created_at())
            self._commit(table, self._rows(table) + [record])
            return copy.deepcopy(record)

    def update(self, table: str, row_id: str, fields: Row) -> Optional[Row]:
        with self._lock:
            rows = self._rows(table)
            for index, record in enumerate(rows):
                if record.get("id") == row_id:
                    updated = {**record, **fields}
                    self._commit(table, rows[:index] + [updated] + rows[index + 1:])
                    return copy.deepcopy(updated)
            logger.debug(f"update: no row {row_id} in {table}")
            return None

    def delete(self, table: str, row_id: str) -> None:
        with self._lock:
            rows = self._rows(table)
            self._commit(table, [record for record in rows if record.get("id") != row_id])

    def _commit(self, table: str, rows: List[Row]) -> None:
        """Swap in the new rows; the old ones come back if saving fails"""
        previous = self.tables[table]
        self.tables[table] = rows
        try:
            self._persist()
        except StoreError:
            self.tables[table] = previous
            raise

    def _rows(self, table: str) -> List[Row]:
        if table not in self.tables:
            raise StoreError(f"Unknown table: {table}")
        return self.tables[table]

    def _matching(self, spec: QuerySpec) -> List[Row]:
        return [row for row in self._rows(spec.table) if _matches(row, spec.filters)]

    def _next_created_at(self) -> str:
        # Strictly increasing so ordering by created_at follows insertion order
        now = datetime.now(pytz.utc)
        if self._last_created and now <= self._last_created:
            now = self._last_created + timedelta(microseconds=1)
        self._last_created = now
        return now.isoformat()

    def _persist(self) -> None:
        if not self.path:
            return
        try:
            _save_json(self.path, self.tables)
        except OSError as e:
            raise StoreError(f"Saving {self.path} failed: {e}") from e

def _matches(row: Row, filters) -> bool:
    for op, column, value in filters:
        current = row.get(column)
        if op == "eq":
            if current != value:
                return False
        elif op == "gte":
            if current is None or current < value:
                return False
        else:
            raise StoreError(f"Unsupported filter: {op}")
    return True

def _sort_key(value: Any):
    # None sorts first, like NULLS FIRST
    return (value is not None, value if value is not None else "")

# ===== AUTH =====

class LocalAuthProvider(AuthProvider):
    """Accounts with PBKDF2 password hashes and opaque tokens"""

    ITERATIONS = 200_000

    def __init__(self, path: Optional[Path] = None, iterations: int = ITERATIONS):
        self.path = Path(path) if path else None
        self.iterations = iterations
        self._lock = threading.RLock()
        data = _load_json(self.path) if self.path else {}
        self.accounts: Dict[str, Dict] = data.get("accounts", {})
        self.tokens: Dict[str, str] = data.get("tokens", {})

    def sign_up(self, email: str, password: str) -> Tuple[AuthUser, Optional[str]]:
        email = self._normalize(email)
        if len(password or "") < 6:
            raise AuthError("Password must be at least 6 characters")
        with self._lock:
            if email in self.accounts:
                raise AuthError("User already registered")
            salt = secrets.token_hex(16)
            self.accounts[email] = {
                "id": str(uuid.uuid4()),
                "email": email,
                "salt": salt,
                "password_hash": self._hash(password, salt),
            }
            user = self._user(email)
            try:
                token = self._issue(user)
            except StoreError:
                del self.accounts[email]
                raise
            return user, token

    def sign_in(self, email: str, password: str) -> Tuple[AuthUser, str]:
        email = self._normalize(email)
        with self._lock:
            account = self.accounts.get(email)
            if not account or not secrets.compare_digest(
                    account["password_hash"], self._hash(password or "", account["salt"])):
                raise AuthError("Invalid login credentials")
            user = self._user(email)
            return user, self._issue(user)

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        with self._lock:
            user_id = self.tokens.get(access_token)
            if not user_id:
                return None
            for email, account in self.accounts.items():
                if account["id"] == user_id:
                    return self._user(email)
            return None

    def sign_out(self, access_token: str) -> None:
        with self._lock:
            user_id = self.tokens.pop(access_token, None)
            if user_id is None:
                return
            try:
                self._persist()
            except StoreError:
                self.tokens[access_token] = user_id
                raise

    def _issue(self, user: AuthUser) -> str:
        token = secrets.token_urlsafe(32)
        self.tokens[token] = user.id
        try:
            self._persist()
        except StoreError:
            del self.tokens[token]
            raise
        return token

    def _user(self, email: str) -> AuthUser:
        account = self.accounts[email]
        return AuthUser(id=account["id"], email=account["email"])

    def _hash(self, password: str, salt: str) -> str:
        return hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt.encode("utf-8"), self.iterations
        ).hex()

    @staticmethod
    def _normalize(email: str) -> str:
        email = (email or "").strip().lower()
        if "@" not in email:
            raise AuthError("Invalid email address")
        return email

    def _persist(self) -> None:
        if not self.path:
            return
        try:
            _save_json(self.path, {"accounts": self.accounts, "tokens": self.tokens})
        except OSError as e:
            raise StoreError(f"Saving {self.path} failed: {e}") from e
