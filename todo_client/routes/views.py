"""
HTML view routes for the todo client.

Every route builds a :class:`SessionController` over the Flask session
cookie and the configured Task API, performs at most one user action, and
either renders a template or redirects back to the task list. The module
is organised into three sections:

1. **Helper functions** -- controller construction and the
   ``session_required`` decorator.
2. **Authentication routes** -- the combined login/register page, its
   two form targets, and logout.
3. **Task routes** -- create, toggle and delete.

Task-operation failures are surfaced as flash messages; a token the API
rejects sends the user back to the login form.

Routes:
    GET  /health                 - Liveness probe
    GET  /                       - Task list, or the login/register form
    POST /login                  - Log in
    POST /register               - Register
    POST /logout                 - Forget the session
    POST /todos                  - Create a task
    POST /todos/<id>/toggle      - Flip a task's completion flag
    POST /todos/<id>/delete      - Delete a task
"""

from __future__ import annotations

import logging
from functools import wraps

from flask import (
    Blueprint,
    current_app,
    flash,
    g,
    redirect,
    render_template,
    request,
    url_for,
)

from ..api import TaskApiClient
from ..controller import SessionController
from ..errors import AuthError
from ..models import AuthMode, OperationResult
from ..store import FlaskSessionStore

logger = logging.getLogger(__name__)

views_bp = Blueprint("views", __name__)


# =====================================================================
# Helper Functions
# =====================================================================


def _build_controller() -> SessionController:
    """Create a controller bound to this request's session cookie."""
    return SessionController(
        TaskApiClient.from_config(current_app.config),
        FlaskSessionStore(),
        expiry_leeway=int(current_app.config.get("TOKEN_EXPIRY_LEEWAY_SECONDS", 30)),
    )


def _auth_mode(value: str | None) -> AuthMode:
    try:
        return AuthMode(value or AuthMode.LOGIN.value)
    except ValueError:
        return AuthMode.LOGIN


def _render_auth(mode: AuthMode, *, name: str = "", email: str = "", status_code: int = 200):
    """
    Render the combined login/register page.

    Name and email are echoed back so a failed attempt keeps them; the
    password never is.
    """
    return (
        render_template(
            "auth.html",
            mode=mode,
            modes=AuthMode,
            registering=mode is AuthMode.REGISTER,
            name=name,
            email=email,
        ),
        status_code,
    )


def _flash_failure(result: OperationResult) -> None:
    if result.error is not None:
        flash(result.error.message, "error")


def session_required(view_func):
    """
    Decorator that requires a stored session for task routes.

    Adopts the stored session without an extra round trip; the wrapped
    view's own API call validates the token. The controller is stashed on
    ``g.controller``. Without a session the user is sent to the login page.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        controller = _build_controller()
        if controller.resume() is None:
            return redirect(url_for("views.index"))

        g.controller = controller
        return view_func(*args, **kwargs)

    return wrapper


# =====================================================================
# Authentication Routes
# =====================================================================


@views_bp.route("/health", methods=["GET"])
def health_check():
    """Return service health status for liveness probes."""
    return {"status": "healthy", "service": "todo-client"}, 200


@views_bp.route("/", methods=["GET"])
def index():
    """
    Render the task list, or the login form when there is no session.

    Restores the stored session, which issues exactly one fetch. A
    rejected token clears the session and falls back to the login form;
    any other fetch failure renders an empty list with the error flashed.
    """
    controller = _build_controller()
    session = controller.restore_session()
    result = controller.last_fetch
    if session is None:
        if result is not None and result.error is not None:
            flash(result.error.message, "error")
            return _render_auth(AuthMode.LOGIN, status_code=401)
        return _render_auth(_auth_mode(request.args.get("mode")))

    _flash_failure(result)
    return (
        render_template(
            "index.html",
            user=session.user,
            tasks=controller.tasks,
        ),
        200 if result.ok else 502,
    )


def _authenticate(mode: AuthMode):
    """Shared handler for the login and register form targets."""
    credentials = {
        "email": request.form.get("email", "").strip(),
        "password": request.form.get("password", ""),
    }
    if mode is AuthMode.REGISTER:
        credentials["name"] = request.form.get("name", "").strip()

    controller = _build_controller()
    try:
        session = controller.authenticate(mode, credentials)
    except AuthError as error:
        flash(error.message, "error")
        return _render_auth(
            mode,
            name=credentials.get("name", ""),
            email=credentials["email"],
            status_code=error.status_code or 503,
        )

    flash(f"Welcome, {session.user.name or session.user.email}!", "success")
    return redirect(url_for("views.index"))


@views_bp.route("/login", methods=["POST"])
def login_submit():
    """Handle login form submission."""
    return _authenticate(AuthMode.LOGIN)


@views_bp.route("/register", methods=["POST"])
def register_submit():
    """Handle registration form submission."""
    return _authenticate(AuthMode.REGISTER)


@views_bp.route("/logout", methods=["POST"])
def logout():
    """
    Clear the stored session and return to the login page.

    Purely local: the API is not told, so the token stays valid
    server-side until it expires.
    """
    _build_controller().logout()
    flash("Logged out. Session cleared.", "success")
    return redirect(url_for("views.index"))


# =====================================================================
# Task Routes
# =====================================================================


@views_bp.route("/todos", methods=["POST"])
@session_required
def create_task():
    """Create a task; a blank title is ignored."""
    result = g.controller.create(request.form.get("title", ""))
    _flash_failure(result)
    return redirect(url_for("views.index"))


@views_bp.route("/todos/<task_id>/toggle", methods=["POST"])
@session_required
def toggle_task(task_id: str):
    """
    Flip a task's completion flag.

    The form carries the task's current ``completed`` value so the new
    value is its negation.
    """
    previous = request.form.get("completed", "").strip().lower() in {"1", "true", "on"}
    result = g.controller.toggle(task_id, previous)
    _flash_failure(result)
    return redirect(url_for("views.index"))


@views_bp.route("/todos/<task_id>/delete", methods=["POST"])
@session_required
def delete_task(task_id: str):
    """Delete a task."""
    result = g.controller.remove(task_id)
    _flash_failure(result)
    return redirect(url_for("views.index"))
