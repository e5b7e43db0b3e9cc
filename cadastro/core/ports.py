"""
Contratos dos colaboradores externos usados pelos controladores.

Os controladores dependem apenas destes protocolos; as implementações
concretas ficam em `infra/`, `storage/` e `ui/`.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol


class ServerTimestamp:
    """
    Marcador para um horário atribuído pelo banco de documentos no momento
    da gravação.
    """

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = ServerTimestamp()


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str
    id_token: str = ""
    refresh_token: str = ""


@dataclass(frozen=True)
class Address:
    """Endereço devolvido pela busca de CEP."""
    street: str
    neighborhood: str
    city: str
    state: str
    postal_code: str = ""


@dataclass
class StoredDocument:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None


class Screen(str, Enum):
    LOGIN = "Login"
    FORM = "FormUsers"
    USERS_LIST = "UsersList"


AuthListener = Callable[[Optional[AuthUser]], None]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    async def create_account(self, email: str, password: str) -> AuthUser:
        ...

    async def sign_in(self, email: str, password: str) -> AuthUser:
        ...

    async def sign_out(self) -> None:
        ...

    def on_auth_state_change(self, handler: AuthListener) -> Unsubscribe:
        ...


class DocumentStore(Protocol):
    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        ...

    async def update(self, collection: str, document_id: str, record: Dict[str, Any]) -> None:
        ...

    async def delete(self, collection: str, document_id: str) -> None:
        ...

    async def list(self, collection: str) -> List[StoredDocument]:
        ...


class PostalLookup(Protocol):
    async def lookup(self, postal_code: str) -> Optional[Address]:
        """Retorna None quando o CEP não existe."""
        ...


class Navigator(Protocol):
    def navigate(self, screen: Screen) -> None:
        ...

    def go_back(self) -> None:
        ...


class Dialogs(Protocol):
    async def confirm(
        self,
        title: str,
        message: str,
        confirm_label: str,
        cancel_label: str = "Cancelar",
    ) -> bool:
        ...

    async def alert(self, title: str, message: str) -> None:
        ...
