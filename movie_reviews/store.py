import dataclasses
import datetime
import logging
import uuid
from collections import defaultdict

import pydantic
from pymongo import DESCENDING

from movie_reviews.errors import ValidationError, driver_errors
from movie_reviews.models import KINDS, Reference

logger = logging.getLogger(__name__)


def utc_now():
    return datetime.datetime.now(datetime.timezone.utc)


def _validation_error(exc):
    first = exc.errors()[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else None
    message = f"{field}: {first['msg']}" if field else first["msg"]
    return ValidationError(message, field=field)


def build_document(kind, payload, *, new_id, now=None):
    try:
        values = kind.schema.model_validate(payload).model_dump()
    except pydantic.ValidationError as exc:
        raise _validation_error(exc) from exc

    document = kind.model(_id=new_id, **values)
    if kind.timestamps:
        document.createdAt = now
        document.updatedAt = now
    return dataclasses.asdict(document)


class EntityStore:
    def __init__(self, db, clock=utc_now):
        self.db = db
        self.clock = clock

    def _collection(self, kind_name):
        return self.db[KINDS[kind_name].collection]

    def ensure_indexes(self):
        for kind in KINDS.values():
            for name in kind.unique:
                with driver_errors():
                    self.db[kind.collection].create_index(name, unique=True)

    def create(self, kind_name, payload):
        kind = KINDS[kind_name]
        document = build_document(
            kind,
            payload,
            new_id=uuid.uuid4().hex,
            now=self.clock() if kind.timestamps else None,
        )
        with driver_errors():
            self.db[kind.collection].insert_one(document)
        logger.info("%s_created id=%s", kind.name, document["_id"])
        return document

    def find_all(self, kind_name, *, projection=None, sort=None, limit=None):
        collection = self._collection(kind_name)
        if limit is not None and limit <= 0:
            return []
        with driver_errors():
            cursor = collection.find({}, projection)
            if sort:
                cursor = cursor.sort(sort)
            if limit is not None:
                cursor = cursor.limit(limit)
            return list(cursor)

    def find_with_expansion(self, kind_name, expand, *, projection=None, sort=None, limit=None):
        ## expand: reference field -> projection of the target (None for all fields)
        kind = KINDS[kind_name]
        refs = kind.references
        for name in expand:
            if name not in refs:
                raise KeyError(f"{kind.name} has no reference field {name!r}")

        records = self.find_all(kind_name, projection=projection, sort=sort, limit=limit)
        for name, ref_projection in expand.items():
            targets = {
                Reference(refs[name], record[name])
                for record in records
                if record.get(name) is not None
            }
            resolved = self._resolve(targets, ref_projection)
            for record in records:
                if record.get(name) is not None:
                    record[name] = resolved.get(Reference(refs[name], record[name]))  ## None if dangling
        return records

    def find_latest(self, kind_name, limit, *, expand=None):
        kind = KINDS[kind_name]
        if not kind.timestamps:
            raise ValueError(f"{kind.name} records carry no createdAt.")
        return self.find_with_expansion(
            kind_name,
            expand or {},
            sort=[("createdAt", DESCENDING)],
            limit=limit,
        )

    def _resolve(self, references, projection=None):
        ids_by_kind = defaultdict(set)
        for ref in references:
            ids_by_kind[ref.kind].add(ref.id)

        # _id is always fetched to key the result, then dropped if excluded
        fetch = None
        drop_id = False
        if projection is not None:
            fetch = {k: v for k, v in projection.items() if k != "_id"} or None
            drop_id = not projection.get("_id", True)

        resolved = {}
        for kind_name, ids in ids_by_kind.items():
            with driver_errors():
                cursor = self._collection(kind_name).find({"_id": {"$in": sorted(ids)}}, fetch)
                for doc in cursor:
                    key = Reference(kind_name, doc["_id"])
                    if drop_id:
                        doc.pop("_id")
                    resolved[key] = doc

        missing = len(references) - len(resolved)
        if missing:
            logger.debug("unresolved_references count=%s", missing)
        return resolved
