"""
Snapshot store backends.

A snapshot store keeps the latest ``RegistrySnapshot`` somewhere that
survives a process restart. Every backend reports failures as
``PersistenceError`` so the lifecycle code has a single thing to surface.
"""

import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError
from sqlalchemy import DateTime, Integer, Text, create_engine, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from ..config.settings import Settings
from ..core.exceptions import PersistenceError
from ..models.domain import RegistrySnapshot

logger = structlog.get_logger(module=__name__)


class BaseSnapshotStore(ABC):
    """Abstract base class for snapshot backends."""

    backend_name = "base"

    @abstractmethod
    def save(self, snapshot: RegistrySnapshot) -> None:
        """
        Persist a snapshot, superseding any earlier one.

        Raises:
            PersistenceError: If the snapshot cannot be written
        """

    @abstractmethod
    def load(self) -> Optional[RegistrySnapshot]:
        """
        Load the most recent snapshot.

        Returns:
            The snapshot, or None if nothing has been persisted yet

        Raises:
            PersistenceError: If stored data cannot be read or decoded
        """

    def close(self) -> None:
        """Release any resources held by the backend."""


class InMemorySnapshotStore(BaseSnapshotStore):
    """Keeps the snapshot in process memory; lost on exit."""

    backend_name = "memory"

    def __init__(self):
        self._payload: Optional[str] = None

    def save(self, snapshot: RegistrySnapshot) -> None:
        self._payload = snapshot.model_dump_json()

    def load(self) -> Optional[RegistrySnapshot]:
        if self._payload is None:
            return None
        return RegistrySnapshot.model_validate_json(self._payload)


class JsonFileSnapshotStore(BaseSnapshotStore):
    """Stores the snapshot as a JSON document on local disk."""

    backend_name = "json"

    def __init__(self, path: str):
        self.path = Path(path)
        self.logger = structlog.get_logger(component="json_snapshot_store", path=str(self.path))

    def save(self, snapshot: RegistrySnapshot) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(snapshot.model_dump_json(), encoding="utf-8")
            # Rename is atomic, so a crash mid-write leaves the previous file intact
            os.replace(tmp_path, self.path)
        except OSError as e:
            self.logger.error("Failed to write snapshot file", error=str(e))
            raise PersistenceError(f"Failed to write snapshot to {self.path}: {e}") from e

        self.logger.info(
            "Snapshot written",
            product_count=len(snapshot.products),
            counter_value=snapshot.counter_value
        )

    def load(self) -> Optional[RegistrySnapshot]:
        if not self.path.exists():
            self.logger.info("No snapshot file found")
            return None

        try:
            payload = self.path.read_text(encoding="utf-8")
            return RegistrySnapshot.model_validate_json(payload)
        except OSError as e:
            self.logger.error("Failed to read snapshot file", error=str(e))
            raise PersistenceError(f"Failed to read snapshot from {self.path}: {e}") from e
        except (ValidationError, UnicodeDecodeError) as e:
            self.logger.error("Snapshot file is corrupt", error=str(e))
            raise PersistenceError(f"Snapshot at {self.path} is corrupt") from e


class Base(DeclarativeBase):
    """Base class for snapshot database models."""
    pass


class SnapshotRecord(Base):
    """One persisted registry snapshot."""

    __tablename__ = "registry_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    counter_value: Mapped[int] = mapped_column(Integer, nullable=False)
    product_count: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)


class SqlSnapshotStore(BaseSnapshotStore):
    """Stores snapshots as rows in a relational database via SQLAlchemy."""

    backend_name = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.logger = structlog.get_logger(component="sql_snapshot_store")

        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
        self.session_maker = sessionmaker(self.engine, expire_on_commit=False)

        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            self.logger.error("Failed to initialise snapshot table", error=str(e))
            raise PersistenceError(f"Failed to initialise snapshot table: {e}") from e

    def save(self, snapshot: RegistrySnapshot) -> None:
        record = SnapshotRecord(
            created_at=snapshot.created_at,
            counter_value=snapshot.counter_value,
            product_count=len(snapshot.products),
            payload=snapshot.model_dump_json()
        )
        with self.session_maker() as session:
            try:
                session.add(record)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                self.logger.error("Failed to store snapshot", error=str(e))
                raise PersistenceError(f"Failed to store snapshot: {e}") from e

        self.logger.info(
            "Snapshot stored",
            snapshot_row_id=record.id,
            product_count=record.product_count,
            counter_value=record.counter_value
        )

    def load(self) -> Optional[RegistrySnapshot]:
        stmt = select(SnapshotRecord).order_by(SnapshotRecord.id.desc()).limit(1)
        try:
            with self.session_maker() as session:
                record = session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error("Failed to load snapshot", error=str(e))
            raise PersistenceError(f"Failed to load snapshot: {e}") from e

        if record is None:
            self.logger.info("No stored snapshot found")
            return None

        try:
            return RegistrySnapshot.model_validate_json(record.payload)
        except ValidationError as e:
            self.logger.error("Stored snapshot is corrupt", snapshot_row_id=record.id, error=str(e))
            raise PersistenceError(f"Stored snapshot {record.id} is corrupt") from e

    def close(self) -> None:
        self.engine.dispose()
        self.logger.info("Snapshot database engine disposed")


def build_snapshot_store(settings: Settings) -> BaseSnapshotStore:
    """Create the snapshot backend selected by ``settings.snapshot_backend``."""
    backend = settings.snapshot_backend
    if backend == "json":
        store: BaseSnapshotStore = JsonFileSnapshotStore(settings.snapshot_path)
    elif backend == "sql":
        store = SqlSnapshotStore(settings.database_url, echo=settings.app_debug)
    elif backend == "memory":
        store = InMemorySnapshotStore()
    else:
        raise ValueError(f"Unknown snapshot backend: {backend}")

    logger.info("Snapshot store created", backend=store.backend_name)
    return store
