"""Persistence adapter for per-user field mappings."""

from __future__ import annotations

import logging
from time import perf_counter

from sqlalchemy import select, text
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.models.base import utcnow
from app.models.field_mapping import FieldMapping, new_mapping_id
from app.services.errors import MappingStoreError

logger = logging.getLogger(__name__)

_NATIVE_UPSERT_DIALECTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class MappingStore:
    """The only component that reads or writes ``field_mappings``.

    One instance is built at process start and shared by all requests; each
    call opens and closes its own session, so calls on different keys never
    coordinate. Same-key writes are serialized by the database: PostgreSQL and
    SQLite use ``INSERT ... ON CONFLICT DO UPDATE``, other dialects fall back
    to find-then-write where a unique violation on insert is converged into an
    update of the row that won.

    Returned rows outlive their session, so the factory must be built with
    ``expire_on_commit=False`` (see ``app.db.session.build_session_factory``).
    """

    def __init__(self, session_factory: sessionmaker, *, native_upsert: bool = True) -> None:
        self._session_factory = session_factory
        self._native_upsert = native_upsert

    def upsert(
        self,
        user_id: str,
        domain: str,
        selector: str,
        profile_field: str,
        dom_id: str | None = None,
        dom_name: str | None = None,
    ) -> FieldMapping:
        """Create or overwrite the mapping for ``(user_id, domain, selector)``."""

        started = perf_counter()
        with self._session_factory() as session:
            try:
                insert_factory = self._insert_factory(session)
                if insert_factory is not None:
                    mapping = self._native(
                        session, insert_factory, user_id, domain, selector, profile_field, dom_id, dom_name
                    )
                else:
                    mapping = self._find_then_write(
                        session, user_id, domain, selector, profile_field, dom_id, dom_name
                    )
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception(
                    "autofill.mapping_upsert_failed user_id=%s domain=%s selector=%s elapsed_ms=%.2f",
                    user_id,
                    domain,
                    selector,
                    (perf_counter() - started) * 1000.0,
                )
                raise MappingStoreError(details=str(exc)) from exc

        logger.info(
            "autofill.mapping_upserted user_id=%s domain=%s selector=%s mapping_id=%s elapsed_ms=%.2f",
            user_id,
            domain,
            selector,
            mapping.id,
            (perf_counter() - started) * 1000.0,
        )
        return mapping

    def find_by_user_and_domain(self, user_id: str, domain: str) -> list[FieldMapping]:
        """Return one user's mappings for one site, ordered by selector."""

        stmt = (
            select(FieldMapping)
            .where(FieldMapping.user_id == user_id, FieldMapping.domain == domain)
            .order_by(FieldMapping.selector.asc())
        )
        try:
            with self._session_factory() as session:
                return list(session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("autofill.mapping_lookup_failed user_id=%s domain=%s", user_id, domain)
            raise MappingStoreError(details=str(exc)) from exc

    def ping(self) -> None:
        """Round-trip a trivial query to prime the connection pool."""

        with self._session_factory() as session:
            session.execute(text("SELECT 1"))

    def _insert_factory(self, session: Session):
        if not self._native_upsert:
            return None
        return _NATIVE_UPSERT_DIALECTS.get(session.get_bind().dialect.name)

    def _native(
        self,
        session: Session,
        insert_factory,
        user_id: str,
        domain: str,
        selector: str,
        profile_field: str,
        dom_id: str | None,
        dom_name: str | None,
    ) -> FieldMapping:
        now = utcnow()
        stmt = insert_factory(FieldMapping).values(
            id=new_mapping_id(),
            user_id=user_id,
            domain=domain,
            selector=selector,
            profile_field=profile_field,
            dom_id=dom_id,
            dom_name=dom_name,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[FieldMapping.user_id, FieldMapping.domain, FieldMapping.selector],
            set_={
                "profile_field": stmt.excluded.profile_field,
                "dom_id": stmt.excluded.dom_id,
                "dom_name": stmt.excluded.dom_name,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        session.execute(stmt)
        return _find_one(session, user_id, domain, selector, required=True)

    def _find_then_write(
        self,
        session: Session,
        user_id: str,
        domain: str,
        selector: str,
        profile_field: str,
        dom_id: str | None,
        dom_name: str | None,
    ) -> FieldMapping:
        existing = _find_one(session, user_id, domain, selector)
        if existing is not None:
            _overwrite(existing, profile_field, dom_id, dom_name)
            session.flush()
            return existing

        created = FieldMapping(
            id=new_mapping_id(),
            user_id=user_id,
            domain=domain,
            selector=selector,
            profile_field=profile_field,
            dom_id=dom_id,
            dom_name=dom_name,
        )
        session.add(created)
        try:
            session.flush()
            return created
        except IntegrityError:
            # A concurrent save created the row first; the insert was the only
            # pending write, so roll back and update the winner instead.
            session.rollback()
            logger.info(
                "autofill.mapping_conflict_converged user_id=%s domain=%s selector=%s",
                user_id,
                domain,
                selector,
            )

        winner = _find_one(session, user_id, domain, selector, required=True)
        _overwrite(winner, profile_field, dom_id, dom_name)
        session.flush()
        return winner


def _find_one(
    session: Session,
    user_id: str,
    domain: str,
    selector: str,
    *,
    required: bool = False,
) -> FieldMapping | None:
    stmt = select(FieldMapping).where(
        FieldMapping.user_id == user_id,
        FieldMapping.domain == domain,
        FieldMapping.selector == selector,
    )
    if required:
        return session.scalars(stmt).one()
    return session.scalars(stmt).one_or_none()


def _overwrite(mapping: FieldMapping, profile_field: str, dom_id: str | None, dom_name: str | None) -> None:
    mapping.profile_field = profile_field
    mapping.dom_id = dom_id
    mapping.dom_name = dom_name
    mapping.updated_at = utcnow()
