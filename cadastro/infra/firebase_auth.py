"""
Provedor de identidade sobre a API REST do Firebase Authentication.

Endpoints usados:
- accounts:signUp e accounts:signInWithPassword (Identity Toolkit)
- token (Secure Token) para restaurar a sessão salva com o refresh token
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..core.errors import AuthError, AuthErrorCode
from ..core.ports import AuthListener, AuthUser, Unsubscribe

logger = logging.getLogger(__name__)

FIREBASE_ERROR_CODES = {
    "EMAIL_EXISTS": AuthErrorCode.EMAIL_ALREADY_IN_USE,
    "INVALID_EMAIL": AuthErrorCode.INVALID_EMAIL,
    "MISSING_EMAIL": AuthErrorCode.INVALID_EMAIL,
    "EMAIL_NOT_FOUND": AuthErrorCode.USER_NOT_FOUND,
    "INVALID_PASSWORD": AuthErrorCode.WRONG_PASSWORD,
    "MISSING_PASSWORD": AuthErrorCode.WRONG_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": AuthErrorCode.INVALID_CREDENTIAL,
    "WEAK_PASSWORD": AuthErrorCode.WEAK_PASSWORD,
    "TOO_MANY_ATTEMPTS_TRY_LATER": AuthErrorCode.TOO_MANY_REQUESTS,
    "TOKEN_EXPIRED": AuthErrorCode.USER_TOKEN_EXPIRED,
    "INVALID_REFRESH_TOKEN": AuthErrorCode.USER_TOKEN_EXPIRED,
    "USER_DISABLED": AuthErrorCode.USER_TOKEN_EXPIRED,
    "USER_NOT_FOUND": AuthErrorCode.USER_TOKEN_EXPIRED,
}


def map_firebase_error(message: str) -> AuthErrorCode:
    """
    Converte a mensagem de erro da API REST no código do Firebase Auth.

    Exemplos:
        "EMAIL_EXISTS" → auth/email-already-in-use
        "WEAK_PASSWORD : Password should be at least 6 characters" → auth/weak-password
    """
    key = (message or "").split(":", 1)[0].strip().split(" ", 1)[0]
    return FIREBASE_ERROR_CODES.get(key, AuthErrorCode.INTERNAL_ERROR)


class AuthSessionStore(Protocol):
    def load(self) -> Optional[AuthUser]:
        ...

    def save(self, user: AuthUser) -> None:
        ...

    def clear(self) -> None:
        ...


class IdentityToolkitResponse(BaseModel):
    local_id: str = Field(alias="localId")
    email: str = ""
    id_token: str = Field(default="", alias="idToken")
    refresh_token: str = Field(default="", alias="refreshToken")


class SecureTokenResponse(BaseModel):
    user_id: str
    id_token: str
    refresh_token: str


class FirebaseIdentityProvider:
    """
    Cria contas, faz login e logout no Firebase Authentication e avisa os
    ouvintes a cada mudança do usuário autenticado.
    """

    def __init__(
        self,
        api_key: str,
        session_store: AuthSessionStore,
        identity_base_url: str = "https://identitytoolkit.googleapis.com/v1",
        secure_token_base_url: str = "https://securetoken.googleapis.com/v1",
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._session_store = session_store
        self._identity_base_url = identity_base_url.rstrip("/")
        self._secure_token_base_url = secure_token_base_url.rstrip("/")
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout_seconds)
        self._listeners: List[AuthListener] = []
        self._restored = False
        self.current_user: Optional[AuthUser] = None

    async def restore_session(self) -> Optional[AuthUser]:
        """
        Restaura a sessão salva, renovando o token. Deve ser chamado uma vez
        na inicialização; depois disso os ouvintes recebem o estado inicial.
        """
        saved = await asyncio.to_thread(self._session_store.load)
        user: Optional[AuthUser] = None
        if saved is not None and saved.refresh_token:
            try:
                user = await self._refresh(saved)
                await asyncio.to_thread(self._session_store.save, user)
                logger.info(f"Sessão restaurada: uid={user.uid}")
            except AuthError as e:
                if e.code == AuthErrorCode.NETWORK_REQUEST_FAILED:
                    # Sem rede: mantém a sessão salva, o token é renovado depois
                    logger.warning(f"Sessão restaurada sem renovar token: uid={saved.uid}, error={e}")
                    user = saved
                else:
                    logger.warning(f"Sessão salva inválida, descartando: uid={saved.uid}, code={e.code.value}")
                    await asyncio.to_thread(self._session_store.clear)

        self._restored = True
        self._set_user(user)
        return user

    async def create_account(self, email: str, password: str) -> AuthUser:
        data = await self._post(
            f"{self._identity_base_url}/accounts:signUp",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        user = self._parse_identity_user(data)
        logger.info(f"Conta criada no Firebase: uid={user.uid}")
        await asyncio.to_thread(self._session_store.save, user)
        self._set_user(user)
        return user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        data = await self._post(
            f"{self._identity_base_url}/accounts:signInWithPassword",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        user = self._parse_identity_user(data)
        logger.info(f"Login no Firebase: uid={user.uid}")
        await asyncio.to_thread(self._session_store.save, user)
        self._set_user(user)
        return user

    async def sign_out(self) -> None:
        uid = self.current_user.uid if self.current_user else None
        await asyncio.to_thread(self._session_store.clear)
        self._set_user(None)
        logger.info(f"Logout realizado: uid={uid}")

    def on_auth_state_change(self, handler: AuthListener) -> Unsubscribe:
        self._listeners.append(handler)
        if self._restored:
            handler(self.current_user)

        def unsubscribe() -> None:
            if handler in self._listeners:
                self._listeners.remove(handler)

        return unsubscribe

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _refresh(self, saved: AuthUser) -> AuthUser:
        data = await self._post(
            f"{self._secure_token_base_url}/token",
            data={"grant_type": "refresh_token", "refresh_token": saved.refresh_token},
        )
        try:
            token = SecureTokenResponse.model_validate(data)
        except ValidationError as e:
            raise AuthError(AuthErrorCode.INTERNAL_ERROR, f"Resposta inválida do Secure Token: {e}") from e
        return AuthUser(
            uid=token.user_id,
            email=saved.email,
            id_token=token.id_token,
            refresh_token=token.refresh_token,
        )

    def _parse_identity_user(self, data: Dict[str, Any]) -> AuthUser:
        try:
            parsed = IdentityToolkitResponse.model_validate(data)
        except ValidationError as e:
            raise AuthError(AuthErrorCode.INTERNAL_ERROR, f"Resposta inválida do Identity Toolkit: {e}") from e
        return AuthUser(
            uid=parsed.local_id,
            email=parsed.email,
            id_token=parsed.id_token,
            refresh_token=parsed.refresh_token,
        )

    async def _post(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = await self._client.post(url, params={"key": self._api_key}, json=json, data=data)
        except httpx.HTTPError as e:
            logger.error(f"Falha de rede no Firebase Auth: url={url}, error={type(e).__name__}: {e}")
            raise AuthError(AuthErrorCode.NETWORK_REQUEST_FAILED, str(e)) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.status_code >= 400:
            error = payload.get("error") or {}
            message = error.get("message") if isinstance(error, dict) else str(error)
            message = message or f"HTTP {response.status_code}"
            code = map_firebase_error(message)
            logger.warning(
                f"Firebase Auth recusou a requisição: status={response.status_code}, "
                f"message={message}, code={code.value}"
            )
            raise AuthError(code, message)

        return payload

    def _set_user(self, user: Optional[AuthUser]) -> None:
        self.current_user = user
        for listener in list(self._listeners):
            listener(user)
