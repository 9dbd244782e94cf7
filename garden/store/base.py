import itertools
import time

COLLECTIONS = ("plants", "gardens", "layouts")


def parse_sort(sort):
    """Turn ``"-createdAt"`` or a list of such specs into (field, descending) pairs."""
    if not sort:
        return []
    if isinstance(sort, str):
        sort = [sort]
    keys = []
    for spec in sort:
        spec = spec.strip()
        if not spec:
            continue
        if spec.startswith("-"):
            keys.append((spec[1:], True))
        else:
            keys.append((spec.lstrip("+"), False))
    return keys


class Store:
    """Interface shared by the memory and SQL backends.

    Records are plain dicts with camelCase keys and an ``_id``. Filters map a
    field to either a value (equality) or an ``(operator, value)`` pair where
    operator is one of ``<``, ``<=``, ``>``, ``>=``, ``!=``.
    """

    backend = None

    def __init__(self):
        self._sequence = itertools.count(1)

    def generate_id(self, collection):
        return f"{collection}_{int(time.time() * 1000)}_{next(self._sequence)}"

    def find(self, collection, filters=None, search=None, search_fields=(), sort=None, skip=0, limit=None):
        raise NotImplementedError

    def count(self, collection, filters=None, search=None, search_fields=()):
        raise NotImplementedError

    def get(self, collection, record_id):
        raise NotImplementedError

    def insert(self, collection, record):
        raise NotImplementedError

    def update(self, collection, record_id, changes):
        raise NotImplementedError

    def delete(self, collection, record_id):
        raise NotImplementedError

    def is_empty(self):
        return all(self.count(name) == 0 for name in COLLECTIONS)

    # --- Users & sessions -------------------------------------------

    def find_user(self, username):
        raise NotImplementedError

    def get_user(self, user_id):
        raise NotImplementedError

    def create_user(self, username, password_hash, role="user"):
        raise NotImplementedError

    def create_session(self, token_id, user_id):
        raise NotImplementedError

    def get_session(self, token_id):
        raise NotImplementedError

    def delete_session(self, token_id):
        raise NotImplementedError

    def ping(self):
        return True


def public_user(user):
    return {"_id": user["_id"], "username": user["username"], "role": user["role"]}
