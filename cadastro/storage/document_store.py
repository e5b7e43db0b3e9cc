import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import DocumentStoreError, PermissionDenied, StoreFailure, Unavailable, Unknown
from ..core.ports import ServerTimestamp, StoredDocument
from .models import Document

logger = logging.getLogger(__name__)

PERMISSION_MARKERS = ("permission denied", "readonly database", "read-only", "access denied")
UNAVAILABLE_MARKERS = (
    "unable to open",
    "could not connect",
    "connection",
    "timeout",
    "timed out",
    "database is locked",
    "server closed",
)


def classify_error(error: SQLAlchemyError) -> StoreFailure:
    """
    Classifica uma exceção do SQLAlchemy em uma das falhas conhecidas.
    """
    original = getattr(error, "orig", None)
    message = str(original or error)
    lowered = message.lower()

    if getattr(original, "pgcode", None) == "42501" or any(m in lowered for m in PERMISSION_MARKERS):
        return PermissionDenied()
    if isinstance(error, (InterfaceError, DisconnectionError, PoolTimeoutError)):
        return Unavailable()
    if getattr(error, "connection_invalidated", False):
        return Unavailable()
    if isinstance(error, OperationalError) and any(m in lowered for m in UNAVAILABLE_MARKERS):
        return Unavailable()
    return Unknown(message)


def resolve_server_timestamps(value: Any, timestamp: datetime) -> Any:
    """
    Troca os marcadores SERVER_TIMESTAMP (inclusive em dicts aninhados)
    pelo horário atribuído pelo banco, em ISO 8601.
    """
    if isinstance(value, ServerTimestamp):
        return timestamp.isoformat()
    if isinstance(value, dict):
        return {key: resolve_server_timestamps(item, timestamp) for key, item in value.items()}
    if isinstance(value, list):
        return [resolve_server_timestamps(item, timestamp) for item in value]
    return value


class SqlDocumentStore:
    """
    Banco de documentos sobre SQLAlchemy.

    Cada coleção é um conjunto de linhas da tabela `documents`. As operações
    são síncronas no SQLAlchemy e rodam em threads de trabalho para não
    bloquear o loop de eventos.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        return await asyncio.to_thread(self._insert, collection, record)

    async def update(self, collection: str, document_id: str, record: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._update, collection, document_id, record)

    async def delete(self, collection: str, document_id: str) -> None:
        await asyncio.to_thread(self._delete, collection, document_id)

    async def list(self, collection: str) -> List[StoredDocument]:
        return await asyncio.to_thread(self._list, collection)

    def _insert(self, collection: str, record: Dict[str, Any]) -> str:
        logger.debug(f"Inserindo documento: collection={collection}")
        db: Session = self._session_factory()
        try:
            document = Document(id=uuid4().hex, collection=collection, data={})
            db.add(document)
            db.flush()
            # Busca o created_at atribuído pelo banco
            db.refresh(document)
            document.data = resolve_server_timestamps(record, document.created_at)
            db.commit()

            assert document.id is not None, (
                "Document persisted without id! "
                "This indicates a persistence error."
            )
            logger.debug(f"Documento inserido: collection={collection}, id={document.id}")
            return document.id
        except SQLAlchemyError as e:
            db.rollback()
            raise self._store_error("inserir", collection, None, e) from e
        finally:
            db.close()

    def _update(self, collection: str, document_id: str, record: Dict[str, Any]) -> None:
        db: Session = self._session_factory()
        try:
            document = db.get(Document, document_id)
            if document is None or document.collection != collection:
                logger.warning(
                    f"Documento não encontrado para atualizar: "
                    f"collection={collection}, id={document_id}"
                )
                raise DocumentStoreError(Unknown(f"Documento não encontrado: {document_id}"))

            now = db.execute(select(func.now())).scalar_one()
            if isinstance(now, str):
                now = datetime.fromisoformat(now)
            merged = dict(document.data or {})
            merged.update(resolve_server_timestamps(record, now))
            # Reatribui o dict para que o SQLAlchemy detecte a mudança no JSON
            document.data = merged
            document.updated_at = now
            db.commit()
            logger.debug(f"Documento atualizado: collection={collection}, id={document_id}")
        except SQLAlchemyError as e:
            db.rollback()
            raise self._store_error("atualizar", collection, document_id, e) from e
        finally:
            db.close()

    def _delete(self, collection: str, document_id: str) -> None:
        db: Session = self._session_factory()
        try:
            document = db.get(Document, document_id)
            if document is None or document.collection != collection:
                # Excluir um documento inexistente não é erro
                logger.debug(
                    f"Documento já inexistente: collection={collection}, id={document_id}"
                )
                return
            db.delete(document)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise self._store_error("excluir", collection, document_id, e) from e
        finally:
            db.close()

    def _list(self, collection: str) -> List[StoredDocument]:
        db: Session = self._session_factory()
        try:
            rows = db.execute(
                select(Document)
                .where(Document.collection == collection)
                .order_by(Document.created_at, Document.id)
            ).scalars().all()
            return [
                StoredDocument(id=row.id, data=dict(row.data or {}), created_at=row.created_at)
                for row in rows
            ]
        except SQLAlchemyError as e:
            raise self._store_error("listar", collection, None, e) from e
        finally:
            db.close()

    def _store_error(
        self,
        action: str,
        collection: str,
        document_id,
        error: SQLAlchemyError,
    ) -> DocumentStoreError:
        failure = classify_error(error)
        logger.error(
            f"Erro de banco de dados ao {action} documento: collection={collection}, "
            f"id={document_id}, failure={type(failure).__name__}, "
            f"error={type(error).__name__}: {error}",
            exc_info=True,
        )
        return DocumentStoreError(failure)
