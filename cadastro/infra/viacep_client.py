import logging
import time
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ..core.errors import PostalLookupError
from ..core.normalizers import digits_only
from ..core.ports import Address

logger = logging.getLogger(__name__)


class ViaCepResponse(BaseModel):
    cep: str = ""
    logradouro: str = ""
    complemento: str = ""
    bairro: str = ""
    localidade: str = ""
    uf: str = ""
    # Presente apenas quando o CEP não existe ("erro": true)
    erro: Any = None


class ViaCepClient:
    """
    Busca de endereço pelo CEP no serviço ViaCEP.

    Não há retry: uma falha volta para o formulário, e o usuário decide
    se busca de novo.
    """

    def __init__(
        self,
        base_url: str = "https://viacep.com.br/ws",
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout_seconds)

    async def lookup(self, postal_code: str) -> Optional[Address]:
        """
        Retorna o endereço do CEP, ou None quando o ViaCEP responde que
        o CEP não existe.

        Raises:
            PostalLookupError: falha de rede, status HTTP de erro ou resposta ilegível
        """
        url = f"{self._base_url}/{postal_code}/json/"
        start_time = time.time()
        try:
            response = await self._client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise PostalLookupError(
                f"ViaCEP respondeu {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise PostalLookupError(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise PostalLookupError(f"Resposta não-JSON do ViaCEP: {e}") from e

        duration_ms = (time.time() - start_time) * 1000
        logger.debug(f"ViaCEP respondeu: cep={postal_code}, duration_ms={duration_ms:.2f}")

        if not isinstance(payload, dict):
            raise PostalLookupError("Resposta inesperada do ViaCEP")
        if payload.get("erro") in (True, "true"):
            return None

        try:
            data = ViaCepResponse.model_validate(payload)
        except ValidationError as e:
            raise PostalLookupError(f"Resposta inválida do ViaCEP: {e}") from e

        return Address(
            street=data.logradouro,
            neighborhood=data.bairro,
            city=data.localidade,
            state=data.uf,
            postal_code=digits_only(data.cep) or postal_code,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
