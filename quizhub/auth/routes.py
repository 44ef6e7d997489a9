from flask import jsonify, request
from flask_login import login_user, logout_user, login_required, current_user

from quizhub.auth import auth_bp
from quizhub.auth import service
from quizhub.common.access import get_caller, get_optional_caller
from quizhub.common.responses import get_json_body, parse_bool, success, text_value
from quizhub.security import SecurityLogger, rate_limit


@auth_bp.route("/", methods=["GET"])
def auth_root():
    """Simple health/info endpoint for auth API."""
    return jsonify({
        "status": "ok",
        "message": "Auth API is running",
        "endpoints": [
            f"{auth_bp.url_prefix}/register",
            f"{auth_bp.url_prefix}/login",
            f"{auth_bp.url_prefix}/logout",
            f"{auth_bp.url_prefix}/me",
            f"{auth_bp.url_prefix}/username-lookup",
            f"{auth_bp.url_prefix}/username-available",
        ],
    }), 200


@auth_bp.route("/register", methods=["POST"])
def register():
    data = get_json_body()
    user = service.create_user(
        email=data.get("email"),
        password=data.get("password") or "",
        username=data.get("username"),
        first_name=data.get("first_name"),
        last_name=data.get("last_name"),
        role=data.get("role"),
        caller=get_optional_caller(),
    )
    return success(user.to_dict(include_email=True), 201, message="Registration successful")


@auth_bp.route("/login", methods=["POST"])
@rate_limit("login")
def login():
    data = get_json_body()
    identifier = text_value(data.get("identifier") or data.get("email") or data.get("username"), "Identifier")
    password = data.get("password") or ""
    if not isinstance(password, str):
        return jsonify({"success": False, "error": "Password must be a string"}), 400
    remember = parse_bool(data.get("remember"), False)

    if not identifier or not password:
        return jsonify({"success": False, "error": "Username or email and password are required"}), 400

    user = service.authenticate(identifier, password)
    if user is None:
        SecurityLogger.log_failed_login(identifier)
        return jsonify({"success": False, "error": "Invalid login credentials"}), 401

    login_user(user, remember=remember)
    SecurityLogger.log_successful_login(user.id, user.username)
    return success(user.to_dict(include_email=True), message="Login successful")


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return success(None, message="Logged out")


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    get_caller()
    return success(current_user.to_dict(include_email=True))


@auth_bp.route("/username-lookup", methods=["POST"])
@rate_limit("username-lookup")
def username_lookup():
    data = get_json_body()
    return success(service.get_email_from_username(data.get("username")))


@auth_bp.route("/username-available", methods=["GET"])
def username_available():
    return success(service.check_username_availability(request.args.get("username")))
