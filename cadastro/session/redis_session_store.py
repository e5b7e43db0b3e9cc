"""
Persistência da sessão de login usando Redis como backend.
Armazena o usuário autenticado serializado em JSON com TTL configurável.
"""
import logging
import json
from typing import Optional
from redis import Redis
from redis.exceptions import RedisError
from ..core.ports import AuthUser

logger = logging.getLogger(__name__)


class RedisAuthSessionStore:
    """
    Guarda a sessão de login no Redis para restaurá-la na próxima abertura
    do aplicativo.

    Armazena a sessão na chave: auth_session:{namespace}
    Com TTL configurável para expiração automática.
    """

    def __init__(
        self,
        redis_url: str = "",
        namespace: str = "default",
        session_ttl_seconds: int = 604800,  # 7 dias padrão
        client: Optional[Redis] = None,
    ) -> None:
        """
        Args:
            redis_url: URL de conexão Redis (ex: redis://localhost:6379/0)
            namespace: Separa sessões de instalações diferentes no mesmo Redis
            session_ttl_seconds: TTL em segundos para expiração da sessão
            client: Cliente Redis já criado (usado no lugar de redis_url)
        """
        self._redis = client if client is not None else Redis.from_url(redis_url, decode_responses=False)
        self._key = f"auth_session:{namespace}"
        self._session_ttl_seconds = session_ttl_seconds

        try:
            self._redis.ping()
            logger.info(
                f"RedisAuthSessionStore inicializado: key={self._key}, "
                f"ttl={session_ttl_seconds}s"
            )
        except RedisError as e:
            logger.error(f"Erro ao conectar ao Redis: {e}")
            raise

    def _serialize(self, user: AuthUser) -> bytes:
        data = {
            "uid": user.uid,
            "email": user.email,
            "id_token": user.id_token,
            "refresh_token": user.refresh_token,
        }
        return json.dumps(data, ensure_ascii=False).encode("utf-8")

    def _deserialize(self, data: bytes) -> AuthUser:
        user_dict = json.loads(data.decode("utf-8"))
        return AuthUser(
            uid=user_dict["uid"],
            email=user_dict.get("email", ""),
            id_token=user_dict.get("id_token", ""),
            refresh_token=user_dict.get("refresh_token", ""),
        )

    def load(self) -> Optional[AuthUser]:
        try:
            data = self._redis.get(self._key)
            if not data:
                return None
            user = self._deserialize(data)
            logger.debug(f"Sessão recuperada do Redis: uid={user.uid}")
            return user
        except RedisError as e:
            logger.error(f"Erro ao recuperar sessão do Redis: key={self._key}, error={e}")
            return None
        except (ValueError, KeyError) as e:
            logger.warning(f"Sessão inválida no Redis, ignorando: key={self._key}, error={e}")
            return None

    def save(self, user: AuthUser) -> None:
        try:
            self._redis.setex(self._key, self._session_ttl_seconds, self._serialize(user))
            logger.debug(
                f"Sessão salva no Redis: uid={user.uid}, ttl={self._session_ttl_seconds}s"
            )
        except RedisError as e:
            logger.error(f"Erro ao salvar sessão no Redis: key={self._key}, error={e}")
            # Não relançar erro: o login continua válido nesta execução

    def clear(self) -> None:
        try:
            self._redis.delete(self._key)
            logger.debug(f"Sessão removida do Redis: key={self._key}")
        except RedisError as e:
            logger.error(f"Erro ao remover sessão do Redis: key={self._key}, error={e}")
