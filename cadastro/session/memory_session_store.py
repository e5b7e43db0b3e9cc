import logging
from typing import Optional

from ..core.ports import AuthUser

logger = logging.getLogger(__name__)


class InMemoryAuthSessionStore:
    """
    Guarda a sessão de login apenas em memória.
    A sessão se perde quando o aplicativo é encerrado.
    """

    def __init__(self) -> None:
        self._user: Optional[AuthUser] = None

    def load(self) -> Optional[AuthUser]:
        return self._user

    def save(self, user: AuthUser) -> None:
        logger.debug(f"Sessão guardada em memória: uid={user.uid}")
        self._user = user

    def clear(self) -> None:
        self._user = None
