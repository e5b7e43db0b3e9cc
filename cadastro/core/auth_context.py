import logging
from typing import List, Optional

from .ports import AuthListener, AuthUser, IdentityProvider, Unsubscribe

logger = logging.getLogger(__name__)


class AuthContext:
    """
    Sessão de autenticação do aplicativo.

    Em vez de um estado global, o usuário logado vive neste objeto, que é
    passado explicitamente para os controladores. A única fonte de verdade
    é a assinatura em `IdentityProvider.on_auth_state_change`, feita em
    `start()` e desfeita em `close()`.
    """

    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity
        self._listeners: List[AuthListener] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self.current_user: Optional[AuthUser] = None
        # Fica True depois da primeira notificação do provedor
        self.ready = False

    @property
    def identity(self) -> IdentityProvider:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._identity.on_auth_state_change(self._handle_change)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        """
        Registra um ouvinte. Se o estado já é conhecido, o ouvinte é
        chamado imediatamente com o usuário atual.
        """
        self._listeners.append(listener)
        if self.ready:
            listener(self.current_user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_out(self) -> None:
        await self._identity.sign_out()

    def _handle_change(self, user: Optional[AuthUser]) -> None:
        self.current_user = user
        self.ready = True
        if user:
            logger.info(f"Usuário autenticado: uid={user.uid}, email={user.email}")
        else:
            logger.info("Nenhum usuário autenticado")
        for listener in list(self._listeners):
            listener(user)
