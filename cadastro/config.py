from dataclasses import dataclass
import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """
    Configurações principais da aplicação.

    Segue a ideia de centralizar parâmetros críticos
    para facilitar revisão, testes e mudanças futuras.
    """
    firebase_api_key: str
    identity_base_url: str = "https://identitytoolkit.googleapis.com/v1"
    secure_token_base_url: str = "https://securetoken.googleapis.com/v1"
    viacep_base_url: str = "https://viacep.com.br/ws"
    http_timeout_ms: int = 10000  # timeout em milissegundos para chamadas HTTP
    database_url: str = "sqlite:///./cadastro.db"
    users_collection: str = "usuarios"
    redis_url: str = ""
    session_ttl_seconds: int = 604800  # 7 dias
    success_redirect_delay_ms: int = 2000  # tempo exibindo sucesso antes de ir para a lista
    auth_success_clear_delay_ms: int = 3000
    min_password_length: int = 6
    env: str = "dev"  # "dev" ou "prod"

    @property
    def http_timeout_seconds(self) -> float:
        return self.http_timeout_ms / 1000.0

    @property
    def success_redirect_delay_seconds(self) -> float:
        return self.success_redirect_delay_ms / 1000.0

    @property
    def auth_success_clear_delay_seconds(self) -> float:
        return self.auth_success_clear_delay_ms / 1000.0

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """
        Carrega configuração a partir de variáveis de ambiente.
        Primeiro tenta carregar do arquivo .env, depois do ambiente do sistema.
        Levanta erro explícito se algo crítico faltar.
        """
        load_dotenv()

        api_key = os.getenv("FIREBASE_API_KEY")
        if not api_key:
            raise RuntimeError("Variável de ambiente FIREBASE_API_KEY não definida.")

        env = os.getenv("ENV", "dev").lower()
        if env not in ("dev", "prod"):
            logger.warning(f"ENV inválido '{env}', usando 'dev' como padrão")
            env = "dev"

        redis_url = os.getenv("REDIS_URL", "")
        if env == "prod" and not redis_url.strip():
            logger.warning(
                "⚠️  MODO PRODUÇÃO sem REDIS_URL: a sessão de login "
                "não sobrevive a reinicializações do aplicativo."
            )

        return cls(
            firebase_api_key=api_key,
            identity_base_url=os.getenv(
                "IDENTITY_BASE_URL", "https://identitytoolkit.googleapis.com/v1"
            ),
            secure_token_base_url=os.getenv(
                "SECURE_TOKEN_BASE_URL", "https://securetoken.googleapis.com/v1"
            ),
            viacep_base_url=os.getenv("VIACEP_BASE_URL", "https://viacep.com.br/ws"),
            http_timeout_ms=int(os.getenv("HTTP_TIMEOUT_MS", "10000")),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./cadastro.db"),
            users_collection=os.getenv("USERS_COLLECTION", "usuarios"),
            redis_url=redis_url,
            session_ttl_seconds=int(os.getenv("SESSION_TTL_SECONDS", "604800")),
            success_redirect_delay_ms=int(os.getenv("SUCCESS_REDIRECT_DELAY_MS", "2000")),
            auth_success_clear_delay_ms=int(os.getenv("AUTH_SUCCESS_CLEAR_DELAY_MS", "3000")),
            min_password_length=int(os.getenv("MIN_PASSWORD_LENGTH", "6")),
            env=env,
        )
