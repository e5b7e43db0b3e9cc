"""
Erros vindos dos colaboradores externos e sua tradução para mensagens ao usuário.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class PermissionDenied:
    """O banco de documentos recusou a operação (regras de acesso)."""


@dataclass(frozen=True)
class Unavailable:
    """O banco de documentos não pôde ser alcançado."""


@dataclass(frozen=True)
class Unknown:
    message: str


StoreFailure = Union[PermissionDenied, Unavailable, Unknown]


class DocumentStoreError(Exception):
    """
    Falha de uma operação no banco de documentos.
    Sempre carrega uma das variantes de StoreFailure.
    """

    def __init__(self, failure: StoreFailure) -> None:
        self.failure = failure
        if isinstance(failure, Unknown):
            detail = failure.message
        else:
            detail = type(failure).__name__
        super().__init__(detail)


class PostalLookupError(Exception):
    """Falha de rede ou de leitura da resposta na busca de CEP."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class AuthErrorCode(str, Enum):
    """
    Códigos de erro do provedor de identidade (mesma nomenclatura do Firebase Auth).
    """
    EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
    INVALID_EMAIL = "auth/invalid-email"
    WRONG_PASSWORD = "auth/wrong-password"
    USER_NOT_FOUND = "auth/user-not-found"
    INVALID_CREDENTIAL = "auth/invalid-credential"
    WEAK_PASSWORD = "auth/weak-password"
    NETWORK_REQUEST_FAILED = "auth/network-request-failed"
    TOO_MANY_REQUESTS = "auth/too-many-requests"
    USER_TOKEN_EXPIRED = "auth/user-token-expired"
    INTERNAL_ERROR = "auth/internal-error"


class AuthError(Exception):
    def __init__(self, code: AuthErrorCode, message: str = "") -> None:
        self.code = code
        super().__init__(message or code.value)


def store_failure_message(failure: StoreFailure, action: str = "cadastrar") -> str:
    """
    Converte a falha do banco de documentos na mensagem exibida ao usuário.
    """
    if isinstance(failure, PermissionDenied):
        return "Permissão negada. Verifique as regras do banco de dados."
    if isinstance(failure, Unavailable):
        return "Serviço de banco de dados indisponível. Verifique sua conexão."
    if isinstance(failure, Unknown):
        return f"Erro ao {action}: {failure.message or 'Erro desconhecido'}"
    raise TypeError(f"Falha desconhecida: {failure!r}")


def auth_error_message(code: AuthErrorCode) -> str:
    if code == AuthErrorCode.EMAIL_ALREADY_IN_USE:
        return "Este email já está sendo utilizado"
    if code == AuthErrorCode.INVALID_EMAIL:
        return "Email inválido"
    if code in (
        AuthErrorCode.WRONG_PASSWORD,
        AuthErrorCode.USER_NOT_FOUND,
        AuthErrorCode.INVALID_CREDENTIAL,
    ):
        return "Email ou senha incorretos"
    if code == AuthErrorCode.WEAK_PASSWORD:
        return "A senha deve ter pelo menos 6 caracteres"
    if code == AuthErrorCode.NETWORK_REQUEST_FAILED:
        return "Erro de conexão. Verifique sua internet."
    return "Ocorreu um erro. Tente novamente."
