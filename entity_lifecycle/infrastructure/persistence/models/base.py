"""Shared ORM columns for every lifecycle-managed table.

RecordColumns is a declarative mixin: each concrete table gets its own
copy of the identity, audit, soft-delete and version columns.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column


class RecordColumns:
    """id / created_at / last_modified_at / deleted_at / version / *_by.

    deleted_at IS NULL marks an active row.  version starts at 0 on insert
    and is advanced only by conditional UPDATEs in SqlLifecycleRepository.
    """

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    last_modified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_modified_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
