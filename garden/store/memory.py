"""In-process store kept in plain lists, persisted to a JSON file on every write."""
import copy
import logging
import operator
import time

from garden.errors import StoreError
from garden.growth import utcnow
from garden.store.base import COLLECTIONS, Store, parse_sort
from garden.store.persistence import load_data, save_data

logger = logging.getLogger(__name__)

OPERATORS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "!=": operator.ne,
}


def _matches(record, filters):
    for field, condition in (filters or {}).items():
        value = record.get(field)
        if isinstance(condition, tuple):
            op, operand = condition
            if value is None or not OPERATORS[op](value, operand):
                return False
        elif value != condition:
            return False
    return True


def _matches_search(record, search, fields):
    if not search:
        return True
    needle = search.lower()
    return any(needle in str(record.get(field) or "").lower() for field in fields)


def _sort_key(field):
    def key(record):
        value = record.get(field)
        return (value is not None, value if value is not None else 0)
    return key


class MemoryStore(Store):
    backend = "memory"

    def __init__(self, data_file=None):
        super().__init__()
        self.data_file = data_file
        self.collections = {name: [] for name in COLLECTIONS}
        self.id_counters = {name: 1 for name in COLLECTIONS + ("users",)}
        self.users = []
        self.sessions = {}

    def load(self):
        """Restore persisted collections. Returns False when there was nothing to load."""
        if not self.data_file:
            return False
        saved = load_data(self.data_file)
        if saved is None:
            return False
        for name in COLLECTIONS:
            self.collections[name] = saved.get(name, [])
        self.id_counters.update(saved.get("idCounters", {}))
        logger.info(
            "Loaded persisted data: %d plants, %d gardens, %d layouts",
            len(self.collections["plants"]),
            len(self.collections["gardens"]),
            len(self.collections["layouts"]),
        )
        return True

    def persist(self):
        if self.data_file:
            return save_data(self.data_file, self.collections, self.id_counters)
        return False

    def generate_id(self, collection):
        counter = self.id_counters.get(collection, 1)
        self.id_counters[collection] = counter + 1
        return f"{collection}_{int(time.time() * 1000)}_{counter}"

    def _records(self, collection):
        try:
            return self.collections[collection]
        except KeyError:
            raise StoreError(f"Unknown collection: {collection}")

    def _index(self, collection, record_id):
        for index, record in enumerate(self._records(collection)):
            if record["_id"] == record_id:
                return index
        return -1

    def _select(self, collection, filters, search, search_fields):
        return [
            r for r in self._records(collection)
            if _matches(r, filters) and _matches_search(r, search, search_fields)
        ]

    def find(self, collection, filters=None, search=None, search_fields=(), sort=None, skip=0, limit=None):
        results = self._select(collection, filters, search, search_fields)
        # stable sorts applied last key first
        for field, descending in reversed(parse_sort(sort)):
            try:
                results.sort(key=_sort_key(field), reverse=descending)
            except TypeError as e:
                raise StoreError(f"Cannot sort {collection} by {field}") from e
        end = None if limit is None else skip + limit
        return copy.deepcopy(results[skip:end])

    def count(self, collection, filters=None, search=None, search_fields=()):
        return len(self._select(collection, filters, search, search_fields))

    def get(self, collection, record_id):
        index = self._index(collection, record_id)
        if index == -1:
            return None
        return copy.deepcopy(self._records(collection)[index])

    def insert(self, collection, record):
        now = utcnow()
        record = copy.deepcopy(record)
        record.setdefault("_id", self.generate_id(collection))
        record.setdefault("createdAt", now)
        record.setdefault("updatedAt", now)
        self._records(collection).append(record)
        self.persist()
        return copy.deepcopy(record)

    def update(self, collection, record_id, changes):
        records = self._records(collection)
        index = self._index(collection, record_id)
        if index == -1:
            return None
        record = dict(records[index])
        record.update(copy.deepcopy({k: v for k, v in changes.items() if k != "_id"}))
        record["updatedAt"] = utcnow()
        records[index] = record
        self.persist()
        return copy.deepcopy(records[index])

    def delete(self, collection, record_id):
        index = self._index(collection, record_id)
        if index == -1:
            return None
        deleted = self._records(collection).pop(index)
        self.persist()
        return deleted

    # --- Users & sessions -------------------------------------------

    def find_user(self, username):
        return next((copy.deepcopy(u) for u in self.users if u["username"] == username), None)

    def get_user(self, user_id):
        return next((copy.deepcopy(u) for u in self.users if u["_id"] == user_id), None)

    def create_user(self, username, password_hash, role="user"):
        counter = self.id_counters["users"]
        self.id_counters["users"] = counter + 1
        user = {
            "_id": f"user_{counter}",
            "username": username,
            "passwordHash": password_hash,
            "role": role,
            "createdAt": utcnow(),
        }
        self.users.append(user)
        return copy.deepcopy(user)

    def create_session(self, token_id, user_id):
        self.sessions[token_id] = {"userId": user_id, "createdAt": utcnow()}
        return dict(self.sessions[token_id])

    def get_session(self, token_id):
        session = self.sessions.get(token_id)
        return dict(session) if session else None

    def delete_session(self, token_id):
        return self.sessions.pop(token_id, None) is not None
