import asyncio
import logging
from typing import Callable, Optional

from .errors import AuthError, auth_error_message
from .ports import AuthUser, IdentityProvider
from .validators import EMAIL_PATTERN

logger = logging.getLogger(__name__)


class AuthController:
    """
    Estado da tela de acesso: login ou criação de conta.

    A troca de tela após o login não acontece aqui; ela vem da notificação
    do provedor de identidade recebida pelo AuthContext.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        min_password_length: int = 6,
        success_clear_delay: float = 3.0,
    ) -> None:
        self._identity = identity
        self._min_password_length = min_password_length
        self._success_clear_delay = success_clear_delay
        self._pending_clear: Optional[asyncio.TimerHandle] = None

        self.email = ""
        self.password = ""
        self.login_mode = True
        self.submitting = False
        self.error = ""
        self.success = ""

    def toggle_mode(self) -> None:
        self.login_mode = not self.login_mode
        self.error = ""
        self.success = ""

    def validate_inputs(self) -> bool:
        if not self.email.strip():
            self.error = "Por favor, informe seu email"
            return False
        if not EMAIL_PATTERN.fullmatch(self.email.strip()):
            self.error = "Por favor, informe um email válido"
            return False
        if not self.password.strip():
            self.error = "Por favor, informe sua senha"
            return False
        if not self.login_mode and len(self.password) < self._min_password_length:
            self.error = f"A senha deve ter no mínimo {self._min_password_length} caracteres"
            return False
        return True

    async def login(self) -> Optional[AuthUser]:
        if self.submitting or not self.validate_inputs():
            return None

        self.submitting = True
        try:
            user = await self._identity.sign_in(self.email.strip(), self.password)
            self.error = ""
            logger.info(f"Login realizado: uid={user.uid}")
            return user
        except AuthError as e:
            self._handle_auth_error(e)
            return None
        finally:
            self.submitting = False

    async def create_account(self) -> Optional[Callable[[], None]]:
        """
        Cria a conta. Em caso de sucesso retorna a função que cancela a
        limpeza agendada da mensagem de sucesso.
        """
        if self.submitting or not self.validate_inputs():
            return None

        self.submitting = True
        try:
            user = await self._identity.create_account(self.email.strip(), self.password)
            logger.info(f"Conta criada: uid={user.uid}")
            self.success = "Conta criada com sucesso!"
            self.error = ""
            return self._schedule_success_clear()
        except AuthError as e:
            self._handle_auth_error(e)
            return None
        finally:
            self.submitting = False

    def close(self) -> None:
        if self._pending_clear is not None:
            self._pending_clear.cancel()
            self._pending_clear = None

    def _handle_auth_error(self, error: AuthError) -> None:
        logger.error(f"Erro de autenticação: code={error.code.value}, error={error}")
        self.error = auth_error_message(error.code)

    def _schedule_success_clear(self) -> Callable[[], None]:
        self.close()
        loop = asyncio.get_running_loop()
        handle = loop.call_later(self._success_clear_delay, self._clear_success)
        self._pending_clear = handle

        def dispose() -> None:
            handle.cancel()
            if self._pending_clear is handle:
                self._pending_clear = None

        return dispose

    def _clear_success(self) -> None:
        self._pending_clear = None
        self.success = ""
