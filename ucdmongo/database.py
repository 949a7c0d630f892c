"""Storing the Unicode Character Database in MongoDB."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

import pymongo
from bson import ObjectId
from pymongo import ASCENDING, IndexModel
from pymongo.errors import PyMongoError

from .models import UCD, Block, CodePoint, NameAlias
from .properties import ATTRIBUTES, default_properties

logger = logging.getLogger(__name__)

BATCH_SIZE = 1000

_CONNECT_TIMEOUT = 10
_CLOSE_TIMEOUT = 5
_SHORT_TIMEOUT = 5
_QUERY_TIMEOUT = 10
_WRITE_TIMEOUT = 30
_BULK_TIMEOUT = 60

_TOP_SCRIPTS_LIMIT = 10


class DatabaseError(Exception):
    """A database operation failed."""


@dataclass
class ScriptStat:
    """Number of code points belonging to one script."""

    script: str
    count: int


@dataclass
class DatabaseStats:
    """Document counts of the stored collections."""

    code_point_count: int = 0
    block_count: int = 0
    ucd_count: int = 0
    top_scripts: list[ScriptStat] = field(default_factory=list)


def _ascii_lower(text: str) -> str:
    return "".join(chr(ord(c) + 32) if "A" <= c <= "Z" else c for c in text)


def _contains(text: str, sub: str) -> bool:
    # An equal-length string only matches exactly; longer ones match ignoring ASCII case.
    text_len = len(text.encode("utf-8"))
    sub_len = len(sub.encode("utf-8"))
    if text_len < sub_len:
        return False
    if text == sub:
        return True
    return text_len > sub_len and _ascii_lower(sub) in _ascii_lower(text)


def is_namespace_not_found_error(err: Optional[BaseException]) -> bool:
    """Return True if the error reports a collection that does not exist."""
    if err is None:
        return False
    message = str(err)
    return _contains(message, "NamespaceNotFound") or _contains(message, "ns not found")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _code_point_from_document(document: Mapping[str, Any]) -> CodePoint:
    properties = default_properties()
    for spec in ATTRIBUTES:
        if spec.key in document and document[spec.key] is not None:
            properties[spec.key] = document[spec.key]
    aliases = [
        NameAlias(alias.get("alias", ""), alias.get("type", ""))
        for alias in document.get("name_aliases") or []
    ]
    return CodePoint(
        cp=document.get("cp", "") or "",
        first_cp=document.get("first_cp", "") or "",
        last_cp=document.get("last_cp", "") or "",
        properties=properties,
        name_aliases=aliases,
        id=document.get("_id"),
        created_at=document.get("created_at"),
        updated_at=document.get("updated_at"),
    )


class MongoStore:
    """The ``ucd``, ``code_points`` and ``blocks`` collections of one database."""

    def __init__(self, uri: str, db_name: str, client: Any = None) -> None:
        owns_client = client is None
        if owns_client:
            try:
                client = pymongo.MongoClient(
                    uri, serverSelectionTimeoutMS=_CONNECT_TIMEOUT * 1000
                )
            except PyMongoError as exc:
                raise DatabaseError(f"failed to connect to MongoDB: {exc}") from exc

        try:
            with pymongo.timeout(_CONNECT_TIMEOUT):
                client.admin.command("ping")
        except PyMongoError as exc:
            if owns_client:
                client.close()
            raise DatabaseError(f"failed to ping MongoDB: {exc}") from exc

        self.client = client
        self.database = client[db_name]
        self.ucd = self.database["ucd"]
        self.code_points = self.database["code_points"]
        self.blocks = self.database["blocks"]

    def close(self) -> None:
        """Disconnect from the server."""
        with pymongo.timeout(_CLOSE_TIMEOUT):
            self.client.close()

    def __enter__(self) -> MongoStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def save_ucd(self, ucd: UCD) -> Any:
        """Replace the stored metadata with that of ``ucd``; return the new id."""
        now = _now()
        metadata = UCD(
            xmlns=ucd.xmlns,
            description=ucd.description,
            version=ucd.version,
            created_at=now,
            updated_at=now,
        )
        with pymongo.timeout(_WRITE_TIMEOUT):
            logger.info("Clearing existing UCD metadata...")
            try:
                self.ucd.drop()
            except PyMongoError as exc:
                raise DatabaseError(f"failed to clear existing UCD data: {exc}") from exc

            logger.info("Saving UCD metadata...")
            try:
                result = self.ucd.insert_one(metadata.to_document())
            except PyMongoError as exc:
                raise DatabaseError(f"failed to save UCD: {exc}") from exc

        logger.info("UCD metadata saved with ID: %s", result.inserted_id)
        return result.inserted_id

    def save_code_points(self, code_points: list[CodePoint]) -> None:
        """Replace the stored code points, inserting them in batches.

        Each code point is given a new id and timestamps.
        """
        if not code_points:
            return

        with pymongo.timeout(_BULK_TIMEOUT):
            logger.info("Clearing existing code points...")
            try:
                self.code_points.delete_many({})
            except PyMongoError as exc:
                raise DatabaseError(
                    f"failed to clear existing code points: {exc}"
                ) from exc

            now = _now()
            for point in code_points:
                point.id = ObjectId()
                point.created_at = now
                point.updated_at = now
            documents = [point.to_document() for point in code_points]

            logger.info("Inserting %d code points...", len(documents))
            for start in range(0, len(documents), BATCH_SIZE):
                end = min(start + BATCH_SIZE, len(documents))
                try:
                    self.code_points.insert_many(documents[start:end])
                except PyMongoError as exc:
                    raise DatabaseError(
                        f"failed to insert code points batch {start}-{end}: {exc}"
                    ) from exc
                logger.info("Inserted batch %d-%d", start, end)

        logger.info("Successfully saved %d code points", len(code_points))

    def save_blocks(self, blocks: list[Block]) -> None:
        """Replace the stored blocks; each is given a new id and timestamps."""
        if not blocks:
            return

        with pymongo.timeout(_WRITE_TIMEOUT):
            logger.info("Clearing existing blocks...")
            try:
                self.blocks.delete_many({})
            except PyMongoError as exc:
                raise DatabaseError(f"failed to clear existing blocks: {exc}") from exc

            now = _now()
            for block in blocks:
                block.id = ObjectId()
                block.created_at = now
                block.updated_at = now
            documents = [block.to_document() for block in blocks]

            logger.info("Inserting %d blocks...", len(documents))
            try:
                self.blocks.insert_many(documents)
            except PyMongoError as exc:
                raise DatabaseError(f"failed to insert blocks: {exc}") from exc

        logger.info("Successfully saved %d blocks", len(blocks))

    def _drop_indexes(self, collection: Any, what: str, missing_note: str) -> None:
        try:
            collection.drop_indexes()
        except PyMongoError as exc:
            if not is_namespace_not_found_error(exc):
                raise DatabaseError(f"failed to drop existing {what}: {exc}") from exc
            logger.info(missing_note)

    def create_indexes(self) -> None:
        """Drop and recreate the indexes of the code point and block collections."""
        with pymongo.timeout(_WRITE_TIMEOUT):
            logger.info("Creating indexes...")
            logger.info("Dropping existing indexes...")
            self._drop_indexes(
                self.code_points,
                "indexes",
                "Code points collection doesn't exist yet, skipping index drop",
            )
            self._drop_indexes(
                self.blocks,
                "block indexes",
                "Blocks collection doesn't exist yet, skipping index drop",
            )

            code_point_indexes = [
                IndexModel([("cp", ASCENDING)], sparse=True),
                IndexModel([("name", ASCENDING)]),
                IndexModel([("block", ASCENDING)]),
                IndexModel([("general_category", ASCENDING)]),
                IndexModel([("script", ASCENDING)]),
                IndexModel([("age", ASCENDING)]),
                IndexModel([("first_cp", ASCENDING), ("last_cp", ASCENDING)]),
            ]
            try:
                self.code_points.create_indexes(code_point_indexes)
            except PyMongoError as exc:
                raise DatabaseError(
                    f"failed to create code points indexes: {exc}"
                ) from exc

            block_indexes = [
                IndexModel([("name", ASCENDING)], unique=True),
                IndexModel([("first_cp", ASCENDING), ("last_cp", ASCENDING)]),
            ]
            try:
                self.blocks.create_indexes(block_indexes)
            except PyMongoError as exc:
                raise DatabaseError(f"failed to create blocks indexes: {exc}") from exc

        logger.info("Indexes created successfully")

    def get_code_point_by_cp(self, cp: str) -> Optional[CodePoint]:
        """Return the stored code point with this ``cp`` value, or None."""
        try:
            with pymongo.timeout(_SHORT_TIMEOUT):
                document = self.code_points.find_one({"cp": cp})
        except PyMongoError as exc:
            raise DatabaseError(f"failed to find code point {cp}: {exc}") from exc
        if document is None:
            return None
        return _code_point_from_document(document)

    def get_code_points_by_block(self, block_name: str) -> list[CodePoint]:
        """Return every stored code point of the named block."""
        try:
            with pymongo.timeout(_QUERY_TIMEOUT):
                documents: Iterable[Mapping[str, Any]] = list(
                    self.code_points.find({"block": block_name})
                )
        except PyMongoError as exc:
            raise DatabaseError(
                f"failed to find code points in block {block_name}: {exc}"
            ) from exc
        return [_code_point_from_document(document) for document in documents]

    def get_stats(self) -> DatabaseStats:
        """Return document counts and the scripts with the most code points."""
        stats = DatabaseStats()
        with pymongo.timeout(_QUERY_TIMEOUT):
            try:
                stats.code_point_count = self.code_points.count_documents({})
            except PyMongoError as exc:
                raise DatabaseError(f"failed to count code points: {exc}") from exc
            try:
                stats.block_count = self.blocks.count_documents({})
            except PyMongoError as exc:
                raise DatabaseError(f"failed to count blocks: {exc}") from exc
            try:
                stats.ucd_count = self.ucd.count_documents({})
            except PyMongoError as exc:
                raise DatabaseError(f"failed to count UCD documents: {exc}") from exc

            pipeline = [
                {"$group": {"_id": "$script", "count": {"$sum": 1}}},
                {"$sort": {"count": -1}},
                {"$limit": _TOP_SCRIPTS_LIMIT},
            ]
            try:
                results = list(self.code_points.aggregate(pipeline))
            except PyMongoError as exc:
                raise DatabaseError(f"failed to aggregate by script: {exc}") from exc

        stats.top_scripts = [
            ScriptStat(script=row.get("_id") or "", count=int(row.get("count", 0)))
            for row in results
        ]
        return stats