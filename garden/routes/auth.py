from flask import Blueprint, current_app, request
from flask_jwt_extended import create_access_token, current_user, get_jti, jwt_required
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from garden.extensions import bcrypt, jwt
from garden.http import failure, success
from garden.store import get_store, public_user

auth_api = Blueprint("auth_api", __name__)


def bearer_token():
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


# --- Token callbacks ------------------------------------------------

@jwt.token_in_blocklist_loader
def session_closed(_header, payload):
    return get_store().get_session(payload["jti"]) is None


@jwt.user_lookup_loader
def load_user(_header, payload):
    return get_store().get_user(payload["sub"])


@jwt.unauthorized_loader
def missing_token(_reason):
    return failure("No token provided", 401)


@jwt.invalid_token_loader
def invalid_token(_reason):
    return failure("Invalid or expired token", 401)


@jwt.revoked_token_loader
@jwt.expired_token_loader
@jwt.user_lookup_error_loader
def rejected_token(_header, _payload):
    return failure("Invalid or expired token", 401)


# --- Endpoints ------------------------------------------------------

@auth_api.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return failure("Username and password are required", 400)
    username = data.get("username")
    password = data.get("password")

    if not username or not password:
        return failure("Username and password are required", 400)

    store = get_store()
    user = store.find_user(username)
    if not user or not bcrypt.check_password_hash(user["passwordHash"], password):
        current_app.logger.info("Failed login for %r", username)
        return failure("Invalid username or password", 401)

    token = create_access_token(identity=user["_id"], additional_claims={"role": user["role"]})
    store.create_session(get_jti(token), user["_id"])
    current_app.logger.info("User %s logged in", user["_id"])
    return success(message="Login successful", token=token, user=public_user(user))


@auth_api.route("/logout", methods=["POST"])
def logout():
    token = bearer_token()
    if token:
        try:
            token_id = get_jti(token)
        except (JWTExtendedException, PyJWTError) as e:
            current_app.logger.info("Logout with unreadable token: %s", e)
        else:
            get_store().delete_session(token_id)
    return success(message="Logged out successfully")


@auth_api.route("/verify", methods=["GET"])
@jwt_required()
def verify():
    return success(user=public_user(current_user))
