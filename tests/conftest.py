from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import pytest

from cadastro.core.auth_context import AuthContext
from cadastro.core.errors import AuthError, DocumentStoreError
from cadastro.core.form_controller import FormController
from cadastro.core.form_state import FormField
from cadastro.core.ports import Address, AuthUser, Screen, StoredDocument

SE_ADDRESS = Address(
    street="Praça da Sé",
    neighborhood="Sé",
    city="São Paulo",
    state="SP",
    postal_code="01001000",
)


class FakePostalLookup:
    def __init__(self, result: Optional[Address] = SE_ADDRESS, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[str] = []
        self.gate: Optional[asyncio.Event] = None

    async def lookup(self, postal_code: str) -> Optional[Address]:
        self.calls.append(postal_code)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class FakeDocumentStore:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, ...]] = []
        self.inserted: List[Dict[str, Any]] = []
        self.updated: List[Tuple[str, Dict[str, Any]]] = []
        self.deleted: List[str] = []
        self.documents: Dict[str, StoredDocument] = {}
        self.error: Optional[DocumentStoreError] = None

    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        self.calls.append(("insert", collection))
        if self.error is not None:
            raise self.error
        self.inserted.append(record)
        document_id = f"doc{len(self.inserted)}"
        self.documents[document_id] = StoredDocument(id=document_id, data=record)
        return document_id

    async def update(self, collection: str, document_id: str, record: Dict[str, Any]) -> None:
        self.calls.append(("update", collection, document_id))
        if self.error is not None:
            raise self.error
        self.updated.append((document_id, record))

    async def delete(self, collection: str, document_id: str) -> None:
        self.calls.append(("delete", collection, document_id))
        if self.error is not None:
            raise self.error
        self.deleted.append(document_id)
        self.documents.pop(document_id, None)

    async def list(self, collection: str) -> List[StoredDocument]:
        self.calls.append(("list", collection))
        if self.error is not None:
            raise self.error
        return list(self.documents.values())


class FakeIdentity:
    def __init__(self, user: Optional[AuthUser] = None) -> None:
        self.user = user
        self.listeners: list = []
        self.sign_in_error: Optional[AuthError] = None
        self.create_error: Optional[AuthError] = None
        self.sign_out_error: Optional[AuthError] = None
        self.sign_in_calls: List[Tuple[str, str]] = []
        self.create_calls: List[Tuple[str, str]] = []
        self.sign_out_calls = 0

    def _emit(self) -> None:
        for listener in list(self.listeners):
            listener(self.user)

    async def create_account(self, email: str, password: str) -> AuthUser:
        self.create_calls.append((email, password))
        if self.create_error is not None:
            raise self.create_error
        self.user = AuthUser(uid="new-uid", email=email)
        self._emit()
        return self.user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        self.sign_in_calls.append((email, password))
        if self.sign_in_error is not None:
            raise self.sign_in_error
        self.user = AuthUser(uid="uid-1", email=email)
        self._emit()
        return self.user

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.user = None
        self._emit()

    def on_auth_state_change(self, handler):
        self.listeners.append(handler)
        handler(self.user)

        def unsubscribe() -> None:
            self.listeners.remove(handler)

        return unsubscribe


class FakeNavigator:
    def __init__(self) -> None:
        self.screens: List[Screen] = []
        self.back_count = 0

    def navigate(self, screen: Screen) -> None:
        self.screens.append(screen)

    def go_back(self) -> None:
        self.back_count += 1


class FakeDialogs:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.confirms: List[Tuple[str, str]] = []
        self.alerts: List[Tuple[str, str]] = []

    async def confirm(self, title, message, confirm_label, cancel_label="Cancelar") -> bool:
        self.confirms.append((title, message))
        return self.answer

    async def alert(self, title, message) -> None:
        self.alerts.append((title, message))


@pytest.fixture
def postal_lookup() -> FakePostalLookup:
    return FakePostalLookup()


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity(AuthUser(uid="uid-1", email="admin@x.com"))


@pytest.fixture
def auth(identity: FakeIdentity) -> AuthContext:
    context = AuthContext(identity)
    context.start()
    return context


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def dialogs() -> FakeDialogs:
    return FakeDialogs()


@pytest.fixture
def form(postal_lookup, store, auth, navigator, dialogs) -> FormController:
    return FormController(
        postal_lookup=postal_lookup,
        document_store=store,
        auth=auth,
        navigator=navigator,
        dialogs=dialogs,
        collection="usuarios",
        success_redirect_delay=0.01,
    )


def fill_personal_data(form: FormController) -> None:
    form.update_field(FormField.NAME, "Maria Silva")
    form.update_field(FormField.AGE, "30")
    form.update_field(FormField.ROLE, "Analista")
    form.update_field(FormField.PHONE, "11912345678")
    form.update_field(FormField.EMAIL, "maria@x.com")
    form.update_field(FormField.POSTAL_CODE, "01001000")
