"""
Cliente de datos compartido.

Un único AsyncIOMotorClient por proceso, construido en el arranque a partir de
MONGODB_URI y MONGODB_SERVICE_KEY. Las rutas no hablan con motor directamente:
usan un constructor de consultas al estilo de los clientes REST de Postgres

    await db.table("favorites").select("id", "note", embed=["pets"]).eq("user_id", uid).execute()

y ``execute()`` nunca lanza por fallos del datastore: devuelve un StoreResult
con ``data``, ``count`` y ``error``.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from .config import Settings
from .errors import StoreError
from .utils import to_id

logger = logging.getLogger(__name__)

# relación embebible -> (tabla, columna local que la referencia)
RELATIONS = {
    "pets": ("pets", "pet_id"),
    "tags": ("tags", "tag_id"),
}

# columna -> tabla referenciada; se comprueban al insertar/actualizar
FOREIGN_KEYS = {
    "favorites": {"pet_id": "pets"},
    "adoption_requests": {"pet_id": "pets"},
    "pet_images": {"pet_id": "pets"},
    "pet_tags": {"pet_id": "pets", "tag_id": "tags"},
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


# valores que pone el propio datastore si no vienen en la fila
COLUMN_DEFAULTS = {
    "favorites": {"created_at": _now},
    "adoption_requests": {"created_at": _now},
}

INDEXES = [
    ("pets", [("name", 1)]),
    ("pet_images", [("pet_id", 1)]),
    ("favorites", [("user_id", 1)]),
    ("adoption_requests", [("user_id", 1), ("created_at", -1)]),
    ("pet_tags", [("pet_id", 1)]),
]

NO_SINGLE_ROW = "JSON object requested, multiple (or no) rows returned"


def _col(column: str) -> str:
    return "_id" if column == "id" else column


def _to_doc(values: Dict[str, Any]) -> Dict[str, Any]:
    return {_col(k): v for k, v in values.items()}


def _like_to_regex(pattern: str) -> str:
    # '%' es el comodín; el resto se busca literal
    return "^" + ".*".join(re.escape(part) for part in pattern.split("%")) + "$"


@dataclass
class StoreResult:
    data: Any = None
    count: Optional[int] = None
    error: Optional[StoreError] = None


class Query:
    """Una operación sobre una tabla. Se construye encadenando y se lanza con execute()."""

    def __init__(self, db: AsyncIOMotorDatabase, table: str):
        self._db = db
        self._table = table
        self._action = "select"
        self._values: Optional[Dict[str, Any]] = None
        self._columns: List[str] = ["*"]
        self._embed: List[str] = []
        self._count: Optional[str] = None
        self._filter: Dict[str, Dict[str, Any]] = {}
        self._sort: List[tuple] = []
        self._skip = 0
        self._limit: Optional[int] = None
        self._single = False

    # ---------- operación ----------
    def select(self, *columns: str, embed=(), count: Optional[str] = None) -> "Query":
        # tras insert/update sólo elige qué columnas devolver
        self._columns = list(columns) or ["*"]
        for name in embed:
            if name not in RELATIONS:
                raise ValueError(f"Unknown relation {name!r}")
        self._embed = list(embed)
        self._count = count
        return self

    def insert(self, values: Dict[str, Any]) -> "Query":
        self._action = "insert"
        self._values = dict(values)
        return self

    def update(self, values: Dict[str, Any]) -> "Query":
        self._action = "update"
        self._values = dict(values)
        return self

    def delete(self) -> "Query":
        self._action = "delete"
        return self

    # ---------- filtros ----------
    def _where(self, column: str, op: str, value: Any) -> "Query":
        self._filter.setdefault(_col(column), {})[op] = value
        return self

    def eq(self, column: str, value: Any) -> "Query":
        return self._where(column, "$eq", value)

    def gte(self, column: str, value: Any) -> "Query":
        return self._where(column, "$gte", value)

    def lte(self, column: str, value: Any) -> "Query":
        return self._where(column, "$lte", value)

    def ilike(self, column: str, pattern: str) -> "Query":
        self._where(column, "$regex", _like_to_regex(pattern))
        return self._where(column, "$options", "i")

    # ---------- orden y paginación ----------
    def order(self, column: str, ascending: bool = True) -> "Query":
        self._sort.append((_col(column), 1 if ascending else -1))
        return self

    def range(self, start: int, end: int) -> "Query":
        """Filas start..end, ambos incluidos."""
        self._skip = max(0, start)
        self._limit = max(0, end - start + 1)
        return self

    def limit(self, n: int) -> "Query":
        self._limit = n
        return self

    def single(self) -> "Query":
        self._single = True
        return self

    # ---------- ejecución ----------
    async def execute(self) -> StoreResult:
        try:
            if self._action == "insert":
                docs = await self._insert()
                count = None
            elif self._action == "update":
                docs = await self._update()
                count = None
            elif self._action == "delete":
                await self._db[self._table].delete_many(self._filter)
                return StoreResult(data=None)
            else:
                docs = await self._fetch(self._filter, paginate=True)
                count = None
                if self._count == "exact":
                    count = await self._db[self._table].count_documents(self._filter)
        except StoreError as exc:
            return StoreResult(error=exc)
        except PyMongoError as exc:
            logger.debug("Driver error on %s.%s", self._table, self._action, exc_info=True)
            return StoreResult(error=StoreError(str(exc)))

        rows = [self._shape(d) for d in docs]
        if self._single:
            if len(rows) != 1:
                return StoreResult(error=StoreError(NO_SINGLE_ROW, code="PGRST116"))
            return StoreResult(data=rows[0], count=count)
        return StoreResult(data=rows, count=count)

    async def _fetch(self, match: Dict[str, Any], paginate: bool) -> List[Dict[str, Any]]:
        pipeline: List[Dict[str, Any]] = [{"$match": match}]
        if paginate:
            if self._sort:
                pipeline.append({"$sort": dict(self._sort)})
            if self._skip:
                pipeline.append({"$skip": self._skip})
            if self._limit is not None:
                if self._limit == 0:
                    return []
                pipeline.append({"$limit": self._limit})
        for name in self._embed:
            table, local = RELATIONS[name]
            pipeline.append({
                "$lookup": {"from": table, "localField": local, "foreignField": "_id", "as": name}
            })
        return await self._db[self._table].aggregate(pipeline).to_list(length=None)

    async def _insert(self) -> List[Dict[str, Any]]:
        doc = _to_doc(self._values)
        doc.setdefault("_id", str(ObjectId()))
        for column, default in COLUMN_DEFAULTS.get(self._table, {}).items():
            if doc.get(column) is None:
                doc[column] = default()
        await self._check_references(doc)
        await self._db[self._table].insert_one(doc)
        return await self._fetch({"_id": doc["_id"]}, paginate=False)

    async def _update(self) -> List[Dict[str, Any]]:
        coll = self._db[self._table]
        matched = await coll.find(self._filter, {"_id": 1}).to_list(length=None)
        ids = [d["_id"] for d in matched]
        values = _to_doc(self._values)
        if ids and values:
            await self._check_references(values)
            await coll.update_many({"_id": {"$in": ids}}, {"$set": values})
        return await self._fetch({"_id": {"$in": ids}}, paginate=False)

    async def _check_references(self, doc: Dict[str, Any]) -> None:
        for column, ref_table in FOREIGN_KEYS.get(self._table, {}).items():
            value = doc.get(column)
            if value is None:
                continue
            found = await self._db[ref_table].find_one({"_id": value}, {"_id": 1})
            if found is None:
                raise StoreError(
                    f'insert or update on table "{self._table}" violates foreign key '
                    f'constraint "{self._table}_{column}_fkey"',
                    code="23503",
                )

    def _shape(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        row = to_id(doc)
        if "*" in self._columns:
            out = {k: v for k, v in row.items() if k not in self._embed}
        else:
            out = {c: row.get(c) for c in self._columns}
        for name in self._embed:
            related = row.get(name) or []
            out[name] = related[0] if related else None
        return out


class Datastore:
    """Handle compartido del proceso; cada llamada a table() crea una consulta nueva."""

    def __init__(self, db: AsyncIOMotorDatabase, client: Optional[AsyncIOMotorClient] = None):
        self._db = db
        self._client = client

    def table(self, name: str) -> Query:
        return Query(self._db, name)

    async def ensure_indexes(self) -> None:
        for table, keys in INDEXES:
            await self._db[table].create_index(keys)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


def connect(settings: Settings) -> Datastore:
    """Crea el cliente a partir de la configuración; falla si faltan credenciales."""
    settings.require_datastore()
    client = AsyncIOMotorClient(
        settings.mongodb_uri,
        username=settings.mongodb_service_user,
        password=settings.mongodb_service_key,
        tz_aware=True,
    )
    logger.info("Datastore configured for database %s", settings.db_name)
    return Datastore(client[settings.db_name], client)


async def get_db(request: Request) -> Datastore:
    return request.app.state.datastore
