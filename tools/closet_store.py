"""Record store abstraction and SQLite implementation for items, outfits and trips."""
from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.trip import Trip

Record = Union[ClothingItem, Outfit, Trip]
R = TypeVar("R", ClothingItem, Outfit, Trip)
Predicate = Callable[[R], bool]


class RecordStore:
    """Persistence interface shared by the closet, outfits and trips."""

    def insert(self, record: Record) -> Record:
        raise NotImplementedError

    def get(self, entity_type: Type[R], record_id: str) -> Optional[R]:
        raise NotImplementedError

    def update(self, record: Record) -> Optional[Record]:
        raise NotImplementedError

    def delete(self, entity_type: Type[Record], record_id: str) -> bool:
        raise NotImplementedError

    def query(self, entity_type: Type[R], predicate: Optional[Predicate] = None) -> List[R]:
        raise NotImplementedError

    def count(self, entity_type: Type[Record]) -> int:
        return len(self.query(entity_type))


@dataclass(frozen=True)
class _TableSchema:
    table: str
    id_field: str
    columns: Tuple[str, ...]
    ddl: str


_TABLES: Dict[type, _TableSchema] = {
    ClothingItem: _TableSchema(
        table="clothing_items",
        id_field="item_id",
        columns=(
            "item_id",
            "name",
            "category",
            "subcategory",
            "image_name",
            "image_name_flat",
            "image_name_heels",
            "tags",
            "supported_foot_styles",
        ),
        ddl="""
            CREATE TABLE IF NOT EXISTS clothing_items (
                position INTEGER PRIMARY KEY AUTOINCREMENT,
                item_id TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                category TEXT NOT NULL,
                subcategory TEXT,
                image_name TEXT,
                image_name_flat TEXT,
                image_name_heels TEXT,
                tags TEXT,
                supported_foot_styles TEXT
            );
        """,
    ),
    Outfit: _TableSchema(
        table="outfits",
        id_field="outfit_id",
        columns=(
            "outfit_id",
            "title",
            "item_ids",
            "date",
            "tags",
            "trip_id",
            "foot_style",
            "hair_asset_name",
        ),
        ddl="""
            CREATE TABLE IF NOT EXISTS outfits (
                position INTEGER PRIMARY KEY AUTOINCREMENT,
                outfit_id TEXT NOT NULL UNIQUE,
                title TEXT NOT NULL,
                item_ids TEXT,
                date TEXT,
                tags TEXT,
                trip_id TEXT,
                foot_style TEXT NOT NULL,
                hair_asset_name TEXT NOT NULL
            );
        """,
    ),
    Trip: _TableSchema(
        table="trips",
        id_field="trip_id",
        columns=(
            "trip_id",
            "name",
            "start_date",
            "end_date",
            "location_name",
            "latitude",
            "longitude",
        ),
        ddl="""
            CREATE TABLE IF NOT EXISTS trips (
                position INTEGER PRIMARY KEY AUTOINCREMENT,
                trip_id TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                start_date TEXT NOT NULL,
                end_date TEXT NOT NULL,
                location_name TEXT,
                latitude REAL,
                longitude REAL
            );
        """,
    ),
}


def _schema_for(entity_type: type) -> _TableSchema:
    try:
        return _TABLES[entity_type]
    except KeyError:
        raise TypeError(f"Unsupported record type {entity_type.__name__}") from None


class SQLiteRecordStore(RecordStore):
    """Local SQLite-backed record store. Rows come back in insertion order."""

    def __init__(self, database_path: str | Path = "data/closet.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            for schema in _TABLES.values():
                conn.execute(schema.ddl)

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> Optional[str]:
        return None if values is None else json.dumps([getattr(v, "value", v) for v in values])

    @staticmethod
    def _deserialise_list(raw: Optional[str]) -> Optional[List[object]]:
        return json.loads(raw) if raw else None

    @staticmethod
    def _serialise_calendar(value: Optional[date]) -> Optional[str]:
        return value.isoformat() if value is not None else None

    def _record_to_row(self, record: Record) -> Tuple[object, ...]:
        if isinstance(record, ClothingItem):
            return (
                record.item_id,
                record.name,
                record.category.value,
                record.subcategory.value if record.subcategory else None,
                record.image_name,
                record.image_name_flat,
                record.image_name_heels,
                self._serialise_list(record.tags),
                self._serialise_list(record.supported_foot_styles),
            )
        if isinstance(record, Outfit):
            return (
                record.outfit_id,
                record.title,
                self._serialise_list(record.item_ids),
                self._serialise_calendar(record.date),
                self._serialise_list(record.tags),
                record.trip_id,
                record.foot_style.value,
                record.hair_asset_name,
            )
        return (
            record.trip_id,
            record.name,
            self._serialise_calendar(record.start_date),
            self._serialise_calendar(record.end_date),
            record.location_name,
            record.latitude,
            record.longitude,
        )

    def _row_to_record(self, entity_type: Type[R], row: sqlite3.Row) -> R:
        if entity_type is ClothingItem:
            return ClothingItem(
                item_id=row["item_id"],
                name=row["name"],
                category=row["category"],
                subcategory=row["subcategory"],
                image_name=row["image_name"],
                image_name_flat=row["image_name_flat"],
                image_name_heels=row["image_name_heels"],
                tags=self._deserialise_list(row["tags"]) or [],
                supported_foot_styles=self._deserialise_list(row["supported_foot_styles"]),
            )
        if entity_type is Outfit:
            return Outfit(
                outfit_id=row["outfit_id"],
                title=row["title"],
                item_ids=self._deserialise_list(row["item_ids"]) or [],
                date=datetime.fromisoformat(row["date"]) if row["date"] else None,
                tags=self._deserialise_list(row["tags"]) or [],
                trip_id=row["trip_id"],
                foot_style=row["foot_style"],
                hair_asset_name=row["hair_asset_name"],
            )
        return Trip(
            trip_id=row["trip_id"],
            name=row["name"],
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]),
            location_name=row["location_name"] or "",
            latitude=row["latitude"],
            longitude=row["longitude"],
        )

    def insert(self, record: Record) -> Record:
        schema = _schema_for(type(record))
        placeholders = ", ".join("?" for _ in schema.columns)
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO {schema.table} ({', '.join(schema.columns)}) VALUES ({placeholders})",
                    self._record_to_row(record),
                )
        except sqlite3.IntegrityError as exc:
            record_id = getattr(record, schema.id_field)
            raise ValueError(f"{type(record).__name__} {record_id} already exists") from exc
        return record

    def get(self, entity_type: Type[R], record_id: str) -> Optional[R]:
        schema = _schema_for(entity_type)
        with self._connect() as conn:
            cursor = conn.execute(
                f"SELECT * FROM {schema.table} WHERE {schema.id_field} = ?",
                (record_id,),
            )
            row = cursor.fetchone()
            return self._row_to_record(entity_type, row) if row else None

    def update(self, record: Record) -> Optional[Record]:
        """Write ``record`` over the stored row, keeping its original position."""

        schema = _schema_for(type(record))
        values = self._record_to_row(record)
        assignments = ", ".join(f"{column} = ?" for column in schema.columns[1:])
        with self._connect() as conn:
            cursor = conn.execute(
                f"UPDATE {schema.table} SET {assignments} WHERE {schema.id_field} = ?",
                (*values[1:], values[0]),
            )
            if cursor.rowcount == 0:
                return None
        return record

    def delete(self, entity_type: Type[Record], record_id: str) -> bool:
        schema = _schema_for(entity_type)
        with self._connect() as conn:
            cursor = conn.execute(
                f"DELETE FROM {schema.table} WHERE {schema.id_field} = ?",
                (record_id,),
            )
            return cursor.rowcount > 0

    def query(self, entity_type: Type[R], predicate: Optional[Predicate] = None) -> List[R]:
        schema = _schema_for(entity_type)
        with self._connect() as conn:
            cursor = conn.execute(f"SELECT * FROM {schema.table} ORDER BY position")
            records = [self._row_to_record(entity_type, row) for row in cursor.fetchall()]
        if predicate is None:
            return records
        return [record for record in records if predicate(record)]

    def count(self, entity_type: Type[Record]) -> int:
        schema = _schema_for(entity_type)
        with self._connect() as conn:
            return int(conn.execute(f"SELECT COUNT(*) FROM {schema.table}").fetchone()[0])


__all__ = ["RecordStore", "SQLiteRecordStore", "Record"]
