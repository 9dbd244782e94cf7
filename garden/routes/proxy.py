import requests
from flask import Blueprint, Response, current_app, jsonify, request, stream_with_context

proxy_api = Blueprint("proxy_api", __name__)

HOP_BY_HOP = {
    "connection", "keep-alive", "proxy-authenticate", "proxy-authorization",
    "te", "trailers", "transfer-encoding", "upgrade", "host", "content-length",
    "content-encoding",
}
PROXY_TIMEOUT = 30
METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@proxy_api.route("/jaeger", defaults={"path": ""}, methods=METHODS)
@proxy_api.route("/jaeger/<path:path>", methods=METHODS)
def jaeger(path):
    # the dashboard is served under /jaeger, so the prefix is kept
    target = f"{current_app.config['JAEGER_URL'].rstrip('/')}/jaeger/{path}"
    headers = {k: v for k, v in request.headers.items() if k.lower() not in HOP_BY_HOP}
    current_app.logger.debug("Jaeger proxy: %s /%s -> %s", request.method, path, target)

    try:
        upstream = requests.request(
            request.method, target,
            params=request.args, data=request.get_data(), headers=headers,
            allow_redirects=False, stream=True, timeout=PROXY_TIMEOUT,
        )
    except requests.RequestException as e:
        current_app.logger.error("Jaeger proxy error: %s", e)
        return jsonify({"error": "Jaeger dashboard not available"}), 502

    response_headers = [(k, v) for k, v in upstream.headers.items() if k.lower() not in HOP_BY_HOP]
    return Response(
        stream_with_context(upstream.iter_content(chunk_size=8192)),
        status=upstream.status_code,
        headers=response_headers,
    )
