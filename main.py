import logging

import requests
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from invite_portal.config import AVAILABLE_ROLES, Settings
from invite_portal.credentials import (
    EnvironmentCredentialSource,
    OverrideCredentialSource,
    RuntimeOverrideStore,
    is_configured,
    token_preview,
)
from invite_portal.invites import resolve_and_send_invite

TOKEN_COOKIE = "invite_token"
ACCOUNT_COOKIE = "invite_account_id"
COOKIE_MAX_AGE = 30 * 24 * 3600


class No404Filter(logging.Filter):
    def filter(self, record):
        return not (getattr(record, "status_code", None) == 404)


logging.getLogger("werkzeug").setLevel(logging.ERROR)
logging.getLogger("werkzeug").addFilter(No404Filter())


def get_client_ip_address():
    if "CF-Connecting-IP" in request.headers:
        return request.headers["CF-Connecting-IP"]
    if "X-Forwarded-For" in request.headers:
        return request.headers["X-Forwarded-For"].split(",")[0].strip()
    return request.remote_addr or "unknown"


def create_app(settings=None, override_store=None, session=None):
    settings = settings or Settings.from_env()
    override_store = override_store or RuntimeOverrideStore()
    env_source = EnvironmentCredentialSource.from_settings(settings)
    http = session or requests.Session()

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.logger.setLevel(logging.INFO)
    app.config["INVITE_SETTINGS"] = settings
    app.config["OVERRIDE_STORE"] = override_store

    def runtime_source():
        return override_store.source(env_source)

    def request_source():
        return OverrideCredentialSource(
            runtime_source(),
            token=request.cookies.get(TOKEN_COOKIE),
            account_id=request.cookies.get(ACCOUNT_COOKIE),
        )

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.route("/api/invite", methods=["POST"])
    def send_invites():
        client_ip = get_client_ip_address()
        app.logger.info(f"Invitation request received from IP: {client_ip}")

        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "No JSON data provided"}), 400

        result = resolve_and_send_invite(
            body.get("emails"),
            body.get("role"),
            body.get("resend"),
            request_source(),
            session=http,
            api_base=settings.api_base,
            user_agent=settings.user_agent,
            timeout=settings.timeout,
        )

        if result.success:
            app.logger.info(f"Invitations accepted upstream for request from IP: {client_ip}")
            return jsonify(result.to_dict()), 200

        app.logger.warning(f"Invitation request from IP: {client_ip} failed ({result.kind}): {result.error}")
        if result.kind == "validation":
            status = 400
        else:
            status = result.status_code or 500
        return jsonify(result.to_dict()), status

    @app.route("/api/config")
    def public_config():
        source = request_source()
        _, account_id = source.peek()
        return jsonify(
            {
                "available_roles": list(AVAILABLE_ROLES),
                "account_id": account_id,
                "token_configured": is_configured(source),
            }
        )

    @app.route("/api/admin/config", methods=["GET"])
    def admin_config():
        token, account_id = runtime_source().peek()
        return jsonify(
            {
                "account_id": account_id,
                "token_configured": bool(token),
                "token_preview": token_preview(token),
                "env_token_configured": is_configured(env_source),
                "env_account_id": env_source.account_id,
            }
        )

    @app.route("/api/admin/config", methods=["POST"])
    def update_admin_config():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "No JSON data provided"}), 400

        token = body.get("token")
        account_id = body.get("account_id")
        if not isinstance(token, (str, type(None))) or not isinstance(account_id, (str, type(None))):
            return jsonify({"error": "token and account_id must be strings"}), 400

        override_store.update(token=token, account_id=account_id)
        app.logger.info(f"Runtime configuration updated from IP: {get_client_ip_address()}")

        source = runtime_source()
        _, current_account = source.peek()
        return jsonify(
            {
                "success": True,
                "message": "Configuration updated",
                "token_configured": is_configured(source),
                "account_id": current_account,
            }
        )

    @app.route("/api/session/config", methods=["POST"])
    def set_session_config():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "No JSON data provided"}), 400

        token = body.get("token")
        account_id = body.get("account_id")
        if not isinstance(token, (str, type(None))) or not isinstance(account_id, (str, type(None))):
            return jsonify({"error": "token and account_id must be strings"}), 400

        token = (token or "").strip()
        account_id = (account_id or "").strip()
        response = jsonify({"success": True, "token_configured": bool(token)})
        if token:
            response.set_cookie(TOKEN_COOKIE, token, max_age=COOKIE_MAX_AGE, httponly=True, samesite="Lax")
        if account_id:
            response.set_cookie(ACCOUNT_COOKIE, account_id, max_age=COOKIE_MAX_AGE, httponly=True, samesite="Lax")
        return response

    @app.route("/api/session/config", methods=["DELETE"])
    def clear_session_config():
        response = jsonify({"success": True})
        response.delete_cookie(TOKEN_COOKIE)
        response.delete_cookie(ACCOUNT_COOKIE)
        return response

    @app.route("/health")
    def health():
        return jsonify({"status": "healthy", "token_configured": is_configured(runtime_source())})

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(Exception)
    def server_error(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.error(f"Unhandled error for IP: {get_client_ip_address()}. Error: {str(e)}")
        return jsonify({"error": f"Server error: {str(e)}"}), 500

    return app


app = create_app()


if __name__ == "__main__":
    settings = app.config["INVITE_SETTINGS"]
    app.logger.info(f"Token configured: {'Yes' if settings.token else 'No'}")
    app.logger.info(f"Account ID: {settings.account_id}")
    app.run(debug=True, host=settings.host, port=settings.port)
