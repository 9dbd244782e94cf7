from garden.routes.auth import auth_api
from garden.routes.gardens import gardens_api
from garden.routes.health import health_api
from garden.routes.layouts import layouts_api
from garden.routes.plants import plants_api
from garden.routes.proxy import proxy_api
from garden.routes.system import system_api
from garden.routes.upload import upload_api


def register_blueprints(app):
    app.register_blueprint(auth_api, url_prefix="/api/auth")
    app.register_blueprint(layouts_api, url_prefix="/api/layouts")
    app.register_blueprint(plants_api, url_prefix="/api/plants")
    app.register_blueprint(gardens_api, url_prefix="/api/gardens")
    app.register_blueprint(health_api, url_prefix="/health")
    app.register_blueprint(upload_api)
    app.register_blueprint(system_api)
    app.register_blueprint(proxy_api)
