from sqlalchemy import Column, String, DateTime, JSON, Index, func
from .database import Base


class Document(Base):
    """
    Documento de uma coleção (ex.: "usuarios").
    O conteúdo fica em `data`; `created_at` é atribuído pelo banco.
    """
    __tablename__ = "documents"

    id = Column(String(32), primary_key=True)
    collection = Column(String(100), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_documents_collection_created_at", "collection", "created_at"),
    )
