"""
Local web adapter - aiohttp app that drives the auth and user data services.
Serves a single local user session (the app runs on the user's machine).
"""

import logging
from aiohttp import web
from pydantic import ValidationError

from core.domain.session import SessionContext
from core.services.auth_service import AuthService
from core.services.user_data_service import UserDataService

logger = logging.getLogger(__name__)


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def _read_json(request: web.Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise web.HTTPBadRequest(text='{"error": "Invalid JSON body"}', content_type="application/json")
    if not isinstance(body, dict):
        raise web.HTTPBadRequest(text='{"error": "Expected a JSON object"}', content_type="application/json")
    return body


def create_app(
    auth_service: AuthService,
    user_data_service: UserDataService,
    context: SessionContext,
) -> web.Application:
    """Create aiohttp app with auth and /me routes."""

    def current_user_id() -> str:
        user = auth_service.user
        if user is None:
            raise web.HTTPUnauthorized(text='{"error": "Not signed in"}', content_type="application/json")
        return user.id

    async def handle_health(request: web.Request) -> web.Response:
        return web.json_response({
            "status": "ok",
            "mode": context.mode.value,
            "bootstrap_state": auth_service.state.bootstrap_state.value,
            "authenticated": auth_service.state.is_authenticated,
        })

    # === AUTH ===

    async def handle_login(request: web.Request) -> web.Response:
        body = await _read_json(request)
        email, password = body.get("email"), body.get("password")
        if not email or not password:
            return _error(400, "Email and password are required")

        if not await auth_service.login(email, password):
            return _error(401, "Invalid email or password")
        return web.json_response({"profile": auth_service.user.to_storage(), "mode": context.mode.value})

    async def handle_register(request: web.Request) -> web.Response:
        body = await _read_json(request)
        email, password, name = body.get("email"), body.get("password"), body.get("name")
        if not email or not password or not name:
            return _error(400, "Email, password and name are required")

        if not await auth_service.register(email, password, name):
            return _error(400, "Registration failed")
        return web.json_response({"profile": auth_service.user.to_storage(), "mode": context.mode.value}, status=201)

    async def handle_logout(request: web.Request) -> web.Response:
        await auth_service.logout()
        return web.json_response({"success": True})

    # === PROFILE ===

    async def handle_get_me(request: web.Request) -> web.Response:
        current_user_id()
        return web.json_response({"profile": auth_service.user.to_storage()})

    async def handle_update_me(request: web.Request) -> web.Response:
        current_user_id()
        body = await _read_json(request)
        try:
            profile = await auth_service.update_user(body)
        except ValidationError as e:
            return _error(400, f"Invalid profile update: {e.error_count()} error(s)")
        return web.json_response({"profile": profile.to_storage()})

    # === USER DATA ===

    async def handle_get_data(request: web.Request) -> web.Response:
        data = await user_data_service.load(current_user_id())
        return web.json_response({"userData": data.to_storage()})

    def domain_action(action_name: str, param: str = None):
        """Wrap a UserDataService action as a handler returning {success, userData}"""
        async def handler(request: web.Request) -> web.Response:
            user_id = current_user_id()
            action = getattr(user_data_service, action_name)
            args = (user_id, request.match_info[param]) if param else (user_id,)
            success = await action(*args)
            if not success:
                logger.error(f"[WEB] {action_name} failed for {user_id}")
            data = user_data_service.current(user_id)
            return web.json_response(
                {"success": success, "userData": data.to_storage() if data else None},
                status=200 if success else 500,
            )
        return handler

    app = web.Application()
    app.router.add_get("/health", handle_health)
    app.router.add_post("/auth/login", handle_login)
    app.router.add_post("/auth/register", handle_register)
    app.router.add_post("/auth/logout", handle_logout)
    app.router.add_get("/me", handle_get_me)
    app.router.add_patch("/me", handle_update_me)
    app.router.add_get("/me/data", handle_get_data)
    app.router.add_post("/me/events/{event_id}/join", domain_action("join_event", "event_id"))
    app.router.add_delete("/me/events/{event_id}", domain_action("leave_event", "event_id"))
    app.router.add_post("/me/events/{event_id}/created", domain_action("mark_event_created", "event_id"))
    app.router.add_post("/me/matches/{match_id}/like", domain_action("like_match", "match_id"))
    app.router.add_post("/me/matches/{match_id}/pass", domain_action("pass_match", "match_id"))
    app.router.add_delete("/me/matches/passed", domain_action("reset_passed_matches"))
    app.router.add_post("/me/achievements/{achievement_id}", domain_action("unlock_achievement", "achievement_id"))
    return app
