"""Store backed by Flask-SQLAlchemy models."""
import logging

from sqlalchemy import or_, text
from sqlalchemy.exc import SQLAlchemyError

from garden.errors import StoreError
from garden.extensions import db
from garden.growth import utcnow
from garden.models import Garden, Layout, Plant, Session, User
from garden.store.base import Store, parse_sort

logger = logging.getLogger(__name__)

MODELS = {"plants": Plant, "gardens": Garden, "layouts": Layout}

OPERATORS = {
    "<": lambda column, value: column < value,
    "<=": lambda column, value: column <= value,
    ">": lambda column, value: column > value,
    ">=": lambda column, value: column >= value,
    "!=": lambda column, value: column != value,
}


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Database commit failed")
        raise


class SQLStore(Store):
    backend = "sql"

    def _model(self, collection):
        try:
            return MODELS[collection]
        except KeyError:
            raise StoreError(f"Unknown collection: {collection}")

    def _column(self, model, field):
        column = model.column(field)
        if column is None:
            raise StoreError(f"Cannot query {model.__tablename__} by {field}")
        return column

    def _query(self, collection, filters, search, search_fields):
        model = self._model(collection)
        query = model.query
        for field, condition in (filters or {}).items():
            column = self._column(model, field)
            if isinstance(condition, tuple):
                op, operand = condition
                query = query.filter(column.isnot(None), OPERATORS[op](column, operand))
            else:
                query = query.filter(column == condition)
        if search:
            matches = [self._column(model, f).icontains(search, autoescape=True) for f in search_fields]
            query = query.filter(or_(*matches))
        return model, query

    def find(self, collection, filters=None, search=None, search_fields=(), sort=None, skip=0, limit=None):
        model, query = self._query(collection, filters, search, search_fields)
        for field, descending in parse_sort(sort):
            column = self._column(model, field)
            query = query.order_by(column.desc() if descending else column.asc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [row.to_record() for row in query.all()]

    def count(self, collection, filters=None, search=None, search_fields=()):
        _, query = self._query(collection, filters, search, search_fields)
        return query.count()

    def get(self, collection, record_id):
        row = db.session.get(self._model(collection), record_id)
        return row.to_record() if row else None

    def insert(self, collection, record):
        model = self._model(collection)
        now = utcnow()
        record = dict(record)
        record.setdefault("createdAt", now)
        record.setdefault("updatedAt", now)
        row = model(id=record.get("_id") or self.generate_id(collection))
        row.apply(record)
        db.session.add(row)
        _commit()
        return row.to_record()

    def update(self, collection, record_id, changes):
        row = db.session.get(self._model(collection), record_id)
        if row is None:
            return None
        row.apply(dict(changes, updatedAt=utcnow()))
        _commit()
        return row.to_record()

    def delete(self, collection, record_id):
        row = db.session.get(self._model(collection), record_id)
        if row is None:
            return None
        record = row.to_record()
        db.session.delete(row)
        _commit()
        return record

    def ping(self):
        try:
            db.session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            db.session.rollback()
            return False

    # --- Users & sessions -------------------------------------------

    def find_user(self, username):
        user = User.query.filter_by(username=username).first()
        return user.to_record() if user else None

    def get_user(self, user_id):
        user = db.session.get(User, user_id)
        return user.to_record() if user else None

    def create_user(self, username, password_hash, role="user"):
        user = User(id=self.generate_id("users"), username=username, password_hash=password_hash, role=role)
        db.session.add(user)
        _commit()
        return user.to_record()

    def create_session(self, token_id, user_id):
        session = Session(token_id=token_id, user_id=user_id, created_at=utcnow())
        db.session.add(session)
        _commit()
        return {"userId": user_id, "createdAt": session.created_at}

    def get_session(self, token_id):
        session = db.session.get(Session, token_id)
        if session is None:
            return None
        return {"userId": session.user_id, "createdAt": session.created_at}

    def delete_session(self, token_id):
        session = db.session.get(Session, token_id)
        if session is None:
            return False
        db.session.delete(session)
        _commit()
        return True
