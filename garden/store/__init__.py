from flask import current_app

from garden.errors import StoreError
from garden.extensions import bcrypt, db
from garden.sample_data import seed_sample_data
from garden.store.base import Store, public_user
from garden.store.memory import MemoryStore
from garden.store.sql import SQLStore

__all__ = ["MemoryStore", "SQLStore", "Store", "get_store", "init_store", "public_user"]


def _ensure_admin(store, app):
    username = app.config["ADMIN_USERNAME"]
    if store.find_user(username) is None:
        pw_hash = bcrypt.generate_password_hash(app.config["ADMIN_PASSWORD"]).decode("utf-8")
        store.create_user(username, pw_hash, role="admin")
        app.logger.info("Admin user %r created", username)


def init_store(app):
    backend = app.config["STORE_BACKEND"]
    if backend == "memory":
        app.logger.info("Running in IN-MEMORY mode (with JSON persistence at %s)", app.config["DATA_FILE"])
        store = MemoryStore(app.config["DATA_FILE"])
        if not store.load() and app.config["SEED_SAMPLE_DATA"]:
            seed_sample_data(store)
    elif backend == "sql":
        app.logger.info("Running in SQL mode (%s)", app.config["SQLALCHEMY_DATABASE_URI"])
        store = SQLStore()
    else:
        raise StoreError(f"Unknown store backend: {backend}")

    app.extensions["garden_store"] = store
    with app.app_context():
        if backend == "sql":
            db.create_all()
            if app.config["SEED_SAMPLE_DATA"] and store.is_empty():
                seed_sample_data(store)
        _ensure_admin(store, app)
    return store


def get_store():
    return current_app.extensions["garden_store"]
