"""
Association store: which category each infohash was added under.

Tribler has no notion of categories, so the shim keeps them in SQLite. Every
method runs in its own session and transaction; uniqueness is enforced by the
schema (category.name UNIQUE, torrent.hash PRIMARY KEY), never by a
read-then-write check in Python.
"""
from dataclasses import dataclass
from typing import List

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from tribler_arr_shim.exceptions import CategoryNotFound, DuplicateCategory
from tribler_arr_shim.models import Category, Torrent


@dataclass(frozen=True)
class TorrentAssociation:
    """An infohash and the name of its category."""
    hash: str
    category: str


class AssociationStore:
    """
    Category catalog and torrent -> category associations.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def list_categories(self) -> List[Category]:
        """All categories, ordered by name. Empty list when there are none."""
        async with self._session_factory() as session:
            result = await session.execute(select(Category).order_by(Category.name.asc()))
            return list(result.scalars().all())

    async def get_category(self, name: str) -> Category:
        async with self._session_factory() as session:
            result = await session.execute(select(Category).where(Category.name == name))
            category = result.scalar_one_or_none()
        if category is None:
            raise CategoryNotFound(name)
        return category

    async def add_category(self, name: str, save_path: str) -> bool:
        """
        Create a category if the name is free.

        Returns True when a row was inserted, False when the name already
        existed; in that case the stored save path is left untouched.
        """
        try:
            await self._insert_category(name, save_path)
        except DuplicateCategory:
            logger.debug(f"Category {name!r} already exists, keeping its save path")
            return False
        logger.info(f"Added category {name!r} (savePath={save_path!r})")
        return True

    async def _insert_category(self, name: str, save_path: str):
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    session.add(Category(name=name, save_path=save_path))
            except IntegrityError as e:
                raise DuplicateCategory(name) from e

    async def list_torrents_by_category(self, name: str) -> List[TorrentAssociation]:
        """Associations whose category is named ``name``; empty list if none."""
        stmt = (
            select(Torrent.hash, Category.name)
            .join(Category, Torrent.category_id == Category.id)
            .where(Category.name == name)
            .order_by(Torrent.hash)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [TorrentAssociation(hash=h, category=c) for h, c in result.all()]

    async def list_all_torrents(self) -> List[TorrentAssociation]:
        """Full scan of the torrent table."""
        stmt = (
            select(Torrent.hash, Category.name)
            .outerjoin(Category, Torrent.category_id == Category.id)
            .order_by(Torrent.hash)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [TorrentAssociation(hash=h, category=c or "") for h, c in result.all()]

    async def add_torrent(self, infohash: str, category_name: str) -> bool:
        """
        Associate ``infohash`` with an existing category.

        The category lookup and the insert share one transaction, so a failed
        lookup leaves nothing behind. Raises CategoryNotFound when the category
        is missing. Returns False when the hash is already associated (a
        concurrent add or reconciliation got there first). Any other integrity
        failure propagates.
        """
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    result = await session.execute(
                        select(Category.id).where(Category.name == category_name)
                    )
                    category_id = result.scalar_one_or_none()
                    if category_id is None:
                        raise CategoryNotFound(category_name)
                    session.add(Torrent(hash=infohash, category_id=category_id))
            except IntegrityError:
                # Only a clash on the primary key means "already present"
                if not await self._has_torrent(infohash):
                    raise
                logger.debug(f"Torrent {infohash} already has a category, skipping")
                return False

        logger.info(f"Associated torrent {infohash} with category {category_name!r}")
        return True

    async def _has_torrent(self, infohash: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(select(Torrent.hash).where(Torrent.hash == infohash))
            return result.scalar_one_or_none() is not None

    async def delete_torrent(self, infohash: str):
        """Drop the association for ``infohash``; a missing hash is a no-op."""
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(delete(Torrent).where(Torrent.hash == infohash))
                deleted = result.rowcount

        if deleted:
            logger.info(f"Deleted association for torrent {infohash}")
