import pytest

from dearself.core.exceptions import AuthError, StoreError
from dearself.core.session import AuthEvent, AuthSession
from dearself.store.local import LocalAuthProvider

class TestAuthSession:
    def test_sign_up_signs_in(self, auth_provider):
        session = AuthSession(auth_provider)
        events = []
        session.subscribe(lambda event, user: events.append(event))
        user = session.sign_up("Carol@Example.com ", "secret123")
        assert session.is_authenticated
        assert user.email == "carol@example.com"
        assert session.access_token
        assert events == [AuthEvent.SIGNED_IN]

    def test_wrong_password(self, auth_provider, session):
        fresh = AuthSession(auth_provider)
        with pytest.raises(AuthError):
            fresh.sign_in("alice@example.com", "nope")
        assert not fresh.is_authenticated
        assert fresh.loading is False

    def test_sign_in(self, auth_provider, session):
        fresh = AuthSession(auth_provider)
        user = fresh.sign_in("alice@example.com", "secret123")
        assert user.id == session.user_id

    def test_restore(self, auth_provider, session):
        fresh = AuthSession(auth_provider)
        assert fresh.restore(session.access_token) == session.user
        assert fresh.restore("not-a-token") is None
        assert not fresh.is_authenticated

    def test_sign_out_revokes_token(self, auth_provider, session):
        token = session.access_token
        events = []
        session.subscribe(lambda event, user: events.append(event))
        session.sign_out()
        assert not session.is_authenticated
        assert events == [AuthEvent.SIGNED_OUT]
        assert auth_provider.get_user(token) is None

    def test_require_user(self, auth_provider):
        with pytest.raises(AuthError):
            AuthSession(auth_provider).require_user()

    def test_unsubscribe(self, auth_provider):
        session = AuthSession(auth_provider)
        events = []
        unsubscribe = session.subscribe(lambda event, user: events.append(event))
        unsubscribe()
        session.sign_up("dave@example.com", "secret123")
        assert events == []

class TestLocalAuthProvider:
    def test_duplicate_email(self, auth_provider, session):
        with pytest.raises(AuthError):
            auth_provider.sign_up("ALICE@example.com", "another1")

    def test_short_password(self, auth_provider):
        with pytest.raises(AuthError):
            auth_provider.sign_up("eve@example.com", "123")

    def test_invalid_email(self, auth_provider):
        with pytest.raises(AuthError):
            auth_provider.sign_up("not-an-email", "secret123")

    def test_accounts_persist(self, tmp_path):
        path = tmp_path / "accounts.json"
        provider = LocalAuthProvider(path, iterations=1)
        user, token = provider.sign_up("frank@example.com", "secret123")

        reloaded = LocalAuthProvider(path, iterations=1)
        assert reloaded.get_user(token) == user
        assert reloaded.sign_in("frank@example.com", "secret123")[0] == user

    def test_failed_save_keeps_no_account(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        provider = LocalAuthProvider(blocker / "accounts.json", iterations=1)

        with pytest.raises(StoreError):
            provider.sign_up("gina@example.com", "secret123")
        assert provider.accounts == {}
        assert provider.tokens == {}
