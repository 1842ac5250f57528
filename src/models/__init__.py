"""SQLAlchemy ORM models for the person registry.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from src.models.audit import AuditLog
from src.models.base import Base
from src.models.enums import LookupStatus, TipoDocumento, TipoPessoa
from src.models.pessoa import PessoaFisica, PessoaJuridica

__all__ = [
    # Base
    "Base",
    # Models
    "PessoaFisica",
    "PessoaJuridica",
    "AuditLog",
    # Enums
    "TipoPessoa",
    "TipoDocumento",
    "LookupStatus",
]
