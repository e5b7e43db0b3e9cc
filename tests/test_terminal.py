from __future__ import annotations

import io

from rich.console import Console

from cadastro.config import AppConfig
from cadastro.core.auth_context import AuthContext
from cadastro.core.auth_controller import AuthController
from cadastro.core.ports import AuthUser, Screen
from cadastro.core.users_controller import UsersListController
from cadastro.session import InMemoryAuthSessionStore
from cadastro.ui.navigation import StackNavigator
from cadastro.ui.terminal import TerminalApp, create_session_store

from conftest import FakeIdentity


def make_app(identity, form, store, dialogs):
    navigator = StackNavigator(Screen.LOGIN)
    auth = AuthContext(identity)
    auth.start()
    users = UsersListController(store, form, navigator, dialogs)
    console = Console(file=io.StringIO())
    app = TerminalApp(auth, AuthController(identity), form, users, navigator, console)
    return app, auth, navigator


def test_auth_changes_drive_the_current_screen(form, store, dialogs):
    identity = FakeIdentity()
    app, auth, navigator = make_app(identity, form, store, dialogs)
    auth.subscribe(app._on_auth_change)
    assert navigator.current == Screen.LOGIN

    identity.user = AuthUser(uid="uid-1", email="maria@x.com")
    identity._emit()
    assert navigator.current == Screen.FORM

    navigator.navigate(Screen.USERS_LIST)
    identity._emit()
    assert navigator.current == Screen.USERS_LIST

    identity.user = None
    identity._emit()
    assert navigator.stack == [Screen.LOGIN]


def test_session_store_falls_back_to_memory_without_redis():
    config = AppConfig(firebase_api_key="chave", redis_url="")
    assert isinstance(create_session_store(config), InMemoryAuthSessionStore)


def test_session_store_falls_back_when_redis_is_down():
    config = AppConfig(firebase_api_key="chave", redis_url="redis://127.0.0.1:1/0")
    assert isinstance(create_session_store(config), InMemoryAuthSessionStore)
