# --- START OF FILE tools/auth_tools.py ---

from datetime import datetime
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from all_types.request_dtypes import ReqCredentials, validate_form
from context import AppContext, get_app_context
from core.errors import NetworkUnavailable, RequestFailed, ValidationError
from logging_config import get_logger

logger = get_logger(__name__)


async def login(app_ctx: AppContext, email: str, password: str, remember_me: bool, signup: bool = False) -> str:
    action = "Sign-up" if signup else "Login"
    try:
        credentials = validate_form(ReqCredentials, mail=email.strip(), password=password)
    except ValidationError as e:
        return f"❌ {e.message}"

    await app_ctx.storage.ensure_loaded()
    logger.info(f"Attempting {action.lower()} for user {credentials.mail}")
    try:
        if signup:
            mail = await app_ctx.client.signup(credentials, remember_me)
        else:
            mail = await app_ctx.client.login(credentials, remember_me)
    except (RequestFailed, NetworkUnavailable) as e:
        logger.warning(f"{action} failed for {credentials.mail}: {e}")
        return f"❌ {action} failed: {e}"

    await app_ctx.guard.enter("home")
    logger.info(f"Successfully authenticated user {mail}")
    ttl = "24 hours" if remember_me else "1 hour"
    return f"✅ {action} successful for {mail}! Session valid for {ttl}."


async def complete_oauth_login(app_ctx: AppContext, redirect_url: str, remember_me: bool) -> str:
    await app_ctx.storage.ensure_loaded()
    mail = await app_ctx.client.capture_oauth_redirect(redirect_url, remember_me)
    if mail is None:
        return "❌ The redirect URL does not carry a token."
    await app_ctx.guard.enter("home")
    return f"✅ Signed in with Google as {mail or 'unknown user'}."


async def logout(app_ctx: AppContext) -> str:
    await app_ctx.storage.ensure_loaded()
    await app_ctx.client.logout()
    await app_ctx.guard.enter("login")
    return "👋 Logged out. Local session cleared."


def describe_session(app_ctx: AppContext) -> str:
    session = app_ctx.session_store.get_session()
    if session is None:
        return "🔒 No active session."
    expires = datetime.fromtimestamp(session.expires_at_epoch_ms / 1000)
    if not app_ctx.session_store.is_valid():
        return f"⌛ Session for {session.user_identifier} expired at {expires.isoformat(timespec='seconds')}."
    current = app_ctx.context_store.get_current_warehouse()
    lines = [
        f"✅ Logged in as {session.user_identifier}",
        f"Expires: {expires.isoformat(timespec='seconds')}",
    ]
    if current:
        lines.append(f"Current warehouse: {current.name or current.id} ({current.id})")
    return "\n".join(lines)


def register_auth_tools(mcp: FastMCP):
    """
    Registers authentication-related tools with the MCP server.
    """

    logger.info("Registering authentication tools with MCP server")

    @mcp.tool()
    async def user_login(
        email: str = Field(description="The user's email address."),
        password: str = Field(description="The user's password."),
        remember_me: bool = Field(
            default=False, description="Keep the session for 24 hours instead of 1 hour."
        ),
    ) -> str:
        """
        Logs the user in to the cold-chain dashboard.
        This must be done before any warehouse, product, sensor or alert tool.
        """
        try:
            return await login(get_app_context(mcp), email, password, remember_me)
        except Exception:
            logger.exception("An unexpected error occurred during the login process.")
            return "An internal error occurred during login. Please try again later."

    @mcp.tool()
    async def user_signup(
        email: str = Field(description="Email address for the new account."),
        password: str = Field(description="Password, at least 6 characters."),
        remember_me: bool = Field(default=False, description="Keep the session for 24 hours."),
    ) -> str:
        """Creates an account and logs the new user in."""
        try:
            return await login(get_app_context(mcp), email, password, remember_me, signup=True)
        except Exception:
            logger.exception("An unexpected error occurred during sign-up.")
            return "An internal error occurred during sign-up. Please try again later."

    @mcp.tool()
    async def google_login_url() -> str:
        """Returns the URL that starts Google sign-in. Pass the final redirect URL to `complete_google_login`."""
        try:
            return f"🔗 Open this URL to sign in with Google: {get_app_context(mcp).client.google_login_url()}"
        except ValidationError as e:
            return f"❌ {e.message}"

    @mcp.tool()
    async def complete_google_login(
        redirect_url: str = Field(
            description="The URL the browser landed on after Google sign-in (contains ?token=...&mail=...)."
        ),
        remember_me: bool = Field(default=False, description="Keep the session for 24 hours."),
    ) -> str:
        """Captures the session token from a Google sign-in redirect."""
        try:
            return await complete_oauth_login(get_app_context(mcp), redirect_url, remember_me)
        except Exception:
            logger.exception("Error capturing OAuth redirect")
            return "An internal error occurred while completing Google sign-in."

    @mcp.tool()
    async def user_logout() -> str:
        """Logs out and clears the stored session."""
        try:
            return await logout(get_app_context(mcp))
        except Exception:
            logger.exception("Error during logout")
            return "An internal error occurred during logout."

    @mcp.tool()
    async def session_status() -> str:
        """Shows who is logged in, when the session expires and the selected warehouse."""
        app_ctx = get_app_context(mcp)
        await app_ctx.storage.ensure_loaded()
        return describe_session(app_ctx)
