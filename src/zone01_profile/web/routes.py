"""
FastAPI routes for the Zone01 Profile dashboard.

PURPOSE: Thin route handlers that delegate to the loader and presenters.
AI CONTEXT: Routes should be simple - business logic lives in queries,
orchestrator and presenters.

ROUTE STRUCTURE:
- / : Profile page (full HTML); redirects to /login when signed out
- /login : Sign-in form (GET) and form submission (POST)
- /logout : Clears the stored session (POST)
- /charts/* : Standalone SVG charts
- /api/profile : AggregatedUserData as JSON

SESSION MODEL:
Single-user local dashboard. The signed-in state is the SessionStore file
shared with the CLI, so 'zone01-profile login' also signs in the browser.
"""

from __future__ import annotations

import html
from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from ..auth import NETWORK_ERROR_MESSAGE, SignInClient
from ..charts import placeholder_svg, render_audit_ratio, render_xp_timeline
from ..errors import AuthenticationError, ProfileLoadError, TransportError
from ..orchestrator import LOAD_FAILURE_MESSAGE, ProfileLoader
from ..presenters import DashboardPresenter
from ..session import SessionContext
from ..storage import SessionStore

if TYPE_CHECKING:
    from ..models import AggregatedUserData
    from ..presenters import AuditViewModel, LevelViewModel, ProfileOverview

__all__ = [
    "router",
    "LoaderFactory",
    "get_session_store",
    "get_loader_factory",
    "get_sign_in_client",
]

router = APIRouter()

LoaderFactory = Callable[[SessionContext], ProfileLoader]

_SVG_MEDIA_TYPE = "image/svg+xml"
_HTML_MEDIA_TYPE = "text/html; charset=utf-8"

# =============================================================================
# CSS Styles
# =============================================================================

_DASHBOARD_CSS = """
:root {
    --bg: #1a1d2e;
    --surface: #242838;
    --border: #2d3250;
    --text: #e0e4f0;
    --text-muted: #a8b0c8;
    --done: #4ade80;
    --received: #60d0ff;
    --danger: #f87171;
}
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
    font-family: system-ui, -apple-system, sans-serif;
    background: var(--bg);
    color: var(--text);
    line-height: 1.6;
    padding: 1rem;
}
.container { max-width: 1200px; margin: 0 auto; }
header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    margin-bottom: 1.5rem;
    padding-bottom: 1rem;
    border-bottom: 1px solid var(--border);
}
h1 { font-size: 1.5rem; font-weight: 600; }
.grid {
    display: grid;
    grid-template-columns: repeat(auto-fit, minmax(220px, 1fr));
    gap: 1rem;
    margin-bottom: 1.5rem;
}
.panel {
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 0.5rem;
    padding: 1rem;
}
.panel h2 {
    font-size: 1rem;
    font-weight: 500;
    color: var(--text-muted);
    margin-bottom: 0.75rem;
}
.metric { font-size: 2rem; font-weight: 700; }
.metric-label { font-size: 0.875rem; color: var(--text-muted); }
.level-ring { display: flex; justify-content: center; }
.level-ring text { fill: var(--text); font-size: 48px; font-weight: 700; }
.bar-row { display: flex; align-items: center; gap: 0.5rem; margin-top: 0.5rem; }
.bar-label { width: 80px; font-size: 0.875rem; }
.bar-track {
    flex: 1;
    height: 0.75rem;
    background: var(--border);
    border-radius: 0.25rem;
    overflow: hidden;
}
.bar-fill { height: 100%; transition: width 0.3s ease; }
.bar-done { background: var(--done); }
.bar-received { background: var(--received); }
.chart-container { display: flex; justify-content: center; padding: 1rem 0; }
.graph-axis { stroke: var(--text-muted); stroke-width: 2; }
.graph-line { stroke: var(--done); stroke-width: 3; fill: none; }
.graph-area { fill: url(#areaGradient); }
.graph-dot { fill: var(--done); stroke: var(--bg); stroke-width: 2; }
.loading-text { color: var(--text-muted); text-align: center; padding: 2rem; }
.error-message { color: var(--danger); margin-bottom: 1rem; }
form.login { display: flex; flex-direction: column; gap: 0.75rem; max-width: 360px; margin: 4rem auto; }
input {
    padding: 0.6rem;
    border-radius: 0.25rem;
    border: 1px solid var(--border);
    background: var(--bg);
    color: var(--text);
}
button {
    padding: 0.6rem 1rem;
    border: none;
    border-radius: 0.25rem;
    background: var(--done);
    color: var(--bg);
    font-weight: 600;
    cursor: pointer;
}
footer {
    margin-top: 2rem;
    padding-top: 1rem;
    border-top: 1px solid var(--border);
    color: var(--text-muted);
    font-size: 0.875rem;
    text-align: center;
}
"""

# =============================================================================
# Dependency Factory Functions
# =============================================================================


def get_session_store() -> SessionStore:
    """
    Create a SessionStore for the configured session directory.

    Created per request so that a sign-in from the CLI is picked up
    without restarting the dashboard.

    Returns:
        SessionStore using Config.get_session_dir().
    """
    return SessionStore()


def get_loader_factory() -> LoaderFactory:
    """
    Provide the callable that builds a ProfileLoader for a session.

    Business context: Tests override this dependency with a loader backed
    by stubbed queries so routes run without the platform.

    Returns:
        ProfileLoader.for_session.
    """
    return ProfileLoader.for_session


def get_sign_in_client() -> SignInClient:
    """Create a SignInClient for the configured platform domain."""
    return SignInClient()


async def _load_profile(
    store: SessionStore, loader_factory: LoaderFactory
) -> AggregatedUserData | None:
    """
    Load profile data for the stored session.

    Returns:
        AggregatedUserData, or None when nobody is signed in.

    Raises:
        ProfileLoadError: Load aborted; the stored session has been cleared.
    """
    session = store.load()
    if not session.is_authenticated():
        return None
    try:
        return await loader_factory(session).load()
    except ProfileLoadError:
        store.clear()
        raise


# ============================================================================
# Full Page Routes
# ============================================================================


@router.get("/", response_class=HTMLResponse)
async def profile_page(
    store: Annotated[SessionStore, Depends(get_session_store)],
    loader_factory: Annotated[LoaderFactory, Depends(get_loader_factory)],
) -> Response:
    """
    Render the profile page for the signed-in user.

    Business context: This is the dashboard itself. A student either sees
    every card and chart, or is sent back to sign in; there is no partial
    page when a required metric cannot be loaded.

    Args:
        store: SessionStore injected via FastAPI Depends.
        loader_factory: Builds the ProfileLoader for the stored session.

    Returns:
        HTMLResponse with the full page, or a redirect to /login when
        signed out (303) or when the load failed (303, ?error=load).

    Example:
        >>> # GET http://localhost:8000/
        >>> # Returns full HTML profile page
    """
    try:
        data = await _load_profile(store, loader_factory)
    except ProfileLoadError:
        return RedirectResponse("/login?error=load", status_code=303)
    if data is None:
        return RedirectResponse("/login", status_code=303)

    overview = DashboardPresenter(data).get_overview()
    return HTMLResponse(content=_render_profile_html(overview), media_type=_HTML_MEDIA_TYPE)


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    store: Annotated[SessionStore, Depends(get_session_store)],
    error: str | None = None,
) -> Response:
    """
    Render the sign-in form.

    Args:
        store: SessionStore injected via FastAPI Depends.
        error: 'load' after a failed profile load; shows the notice.

    Returns:
        HTMLResponse with the form, or a redirect to / when already signed in.
    """
    if store.load().is_authenticated():
        return RedirectResponse("/", status_code=303)
    message = LOAD_FAILURE_MESSAGE if error == "load" else ""
    return HTMLResponse(content=_render_login_html(message), media_type=_HTML_MEDIA_TYPE)


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    store: Annotated[SessionStore, Depends(get_session_store)],
    client: Annotated[SignInClient, Depends(get_sign_in_client)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    """
    Handle the sign-in form.

    Args:
        store: SessionStore injected via FastAPI Depends.
        client: SignInClient injected via FastAPI Depends.
        username: Login name or e-mail (trimmed).
        password: Account password.

    Returns:
        Redirect to / on success. The form with an error message on
        failure: 401 for missing or rejected credentials, 502 when the
        platform is unreachable, 500 when the session cannot be saved.
    """
    username = username.strip()
    try:
        session = await client.sign_in(username, password)
    except AuthenticationError as e:
        return _login_error(str(e), 401, username)
    except TransportError:
        return _login_error(NETWORK_ERROR_MESSAGE, 502, username)

    if not store.save(session):
        return _login_error("Could not save the session. Please try again!", 500, username)
    return RedirectResponse("/", status_code=303)


@router.post("/logout")
async def logout(
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> RedirectResponse:
    """Clear the stored session and return to the sign-in form."""
    store.clear()
    return RedirectResponse("/login", status_code=303)


# ============================================================================
# Chart Routes
# ============================================================================


@router.get("/charts/xp.svg")
async def xp_chart(
    store: Annotated[SessionStore, Depends(get_session_store)],
    loader_factory: Annotated[LoaderFactory, Depends(get_loader_factory)],
) -> Response:
    """
    Serve the cumulative XP timeline as a standalone SVG.

    Returns:
        image/svg+xml response. A placeholder SVG is served when there is
        no XP data (200) or when no profile can be loaded (401).
    """
    data = await _chart_data(store, loader_factory)
    if data is None:
        return _svg(placeholder_svg("Not signed in"), status_code=401)
    if not data.xp_timeline:
        return _svg(placeholder_svg("No XP data available"))
    return _svg(render_xp_timeline(data.xp_timeline))


@router.get("/charts/audit.svg")
async def audit_chart(
    store: Annotated[SessionStore, Depends(get_session_store)],
    loader_factory: Annotated[LoaderFactory, Depends(get_loader_factory)],
) -> Response:
    """
    Serve the audit ratio donut as a standalone SVG.

    Returns:
        image/svg+xml response. A placeholder SVG is served when there is
        no audit data (200) or when no profile can be loaded (401).
    """
    data = await _chart_data(store, loader_factory)
    if data is None:
        return _svg(placeholder_svg("Not signed in"), status_code=401)
    if data.audit.total <= 0:
        return _svg(placeholder_svg("No audit data available"))
    return _svg(render_audit_ratio(data.audit))


# ============================================================================
# API Routes
# ============================================================================


@router.get("/api/profile")
async def api_profile(
    store: Annotated[SessionStore, Depends(get_session_store)],
    loader_factory: Annotated[LoaderFactory, Depends(get_loader_factory)],
) -> dict[str, Any]:
    """
    Get the loaded profile as JSON for programmatic access.

    Business context: Lets students feed their progress into their own
    tools (spreadsheets, bots) without scraping the page.

    Returns:
        AggregatedUserData.to_dict(): profile, total_xp, level,
        projects_completed, projects, ranking, audits_done, xp_timeline
        and audit.

    Raises:
        HTTPException: 401 when not signed in or when the load failed.

    Example:
        >>> # GET /api/profile
        >>> {"profile": {"id": 1234, "login": "alice", ...}, "total_xp": 412000, ...}
    """
    try:
        data = await _load_profile(store, loader_factory)
    except ProfileLoadError as e:
        raise HTTPException(status_code=401, detail=LOAD_FAILURE_MESSAGE) from e
    if data is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return data.to_dict()


# ============================================================================
# Rendering Helpers
# ============================================================================


async def _chart_data(
    store: SessionStore, loader_factory: LoaderFactory
) -> AggregatedUserData | None:
    """Profile data for a chart route, or None when it cannot be loaded."""
    try:
        return await _load_profile(store, loader_factory)
    except ProfileLoadError:
        return None


def _svg(markup: str, status_code: int = 200) -> Response:
    return Response(content=markup, media_type=_SVG_MEDIA_TYPE, status_code=status_code)


def _login_error(message: str, status_code: int, username: str) -> HTMLResponse:
    return HTMLResponse(
        content=_render_login_html(message, username),
        status_code=status_code,
        media_type=_HTML_MEDIA_TYPE,
    )


def _page(title: str, body: str) -> str:
    """Wrap body markup in the shared HTML document shell."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>
        {_DASHBOARD_CSS}
    </style>
</head>
<body>
    <div class="container">
        {body}
        <footer>
            Zone01 Profile &bull; Powered by FastAPI
        </footer>
    </div>
</body>
</html>"""


def _render_login_html(message: str = "", username: str = "") -> str:
    """
    Render the sign-in page.

    Args:
        message: Error notice shown above the form; empty for none.
        username: Value to pre-fill after a failed attempt.

    Returns:
        Complete HTML document.
    """
    error_html = (
        f'<p class="error-message" id="errorMessage">{html.escape(message)}</p>'
        if message
        else ""
    )
    body = f"""<form class="login panel" method="post" action="/login">
            <h1>Zone01 Profile</h1>
            {error_html}
            <input type="text" name="username" placeholder="Username or e-mail"
                   value="{html.escape(username)}" autocomplete="username">
            <input type="password" name="password" placeholder="Password"
                   autocomplete="current-password">
            <button type="submit">Login</button>
        </form>"""
    return _page("Zone01 Profile - Login", body)


def _render_level_ring(level: LevelViewModel) -> str:
    """SVG ring showing the whole level and progress to the next one."""
    return f"""<svg class="level-ring" viewBox="0 0 220 220" width="180" height="180">
                <circle cx="110" cy="110" r="90" fill="none" stroke="#2d3250" stroke-width="14" />
                <circle id="levelProgressCircle" cx="110" cy="110" r="90" fill="none"
                        stroke="#4ade80" stroke-width="14" stroke-linecap="round"
                        stroke-dasharray="{level.circumference:.2f}"
                        stroke-dashoffset="{level.dash_offset:.2f}"
                        transform="rotate(-90 110 110)" />
                <text id="levelValue" x="110" y="126" text-anchor="middle">{level.whole_level}</text>
            </svg>"""


def _render_audit_panel(audit: AuditViewModel) -> str:
    """Audit card with ratio and done/received bars."""
    return f"""<h2>Audits ratio</h2>
            <div class="metric" id="auditRatioNumber">{audit.ratio_display}</div>
            <div class="bar-row">
                <span class="bar-label">Done</span>
                <div class="bar-track"><div class="bar-fill bar-done" id="auditDoneBar"
                     style="width: {audit.done_percent:.1f}%"></div></div>
                <span id="auditDoneAmount">{audit.done_display}</span>
            </div>
            <div class="bar-row">
                <span class="bar-label">Received</span>
                <div class="bar-track"><div class="bar-fill bar-received" id="auditReceivedBar"
                     style="width: {audit.received_percent:.1f}%"></div></div>
                <span id="auditReceivedAmount">{audit.received_display}</span>
            </div>"""


def _render_profile_html(ov: ProfileOverview) -> str:
    """
    Render the complete profile page from the overview view model.

    Args:
        ov: Overview built by DashboardPresenter.

    Returns:
        Complete HTML document with header, stat cards, level ring, audit
        bars and both charts embedded inline.
    """
    username = html.escape(ov.username)

    return _page(
        f"Zone01 Profile - {ov.username}",
        f"""<header>
            <h1>Welcome, <span id="userLogin">{username}</span>!</h1>
            <form method="post" action="/logout">
                <span id="navUsername" class="metric-label">{username}</span>
                <button type="submit" id="logoutBtn">Logout</button>
            </form>
        </header>

        <div class="grid">
            <div class="panel">
                <h2>Current level</h2>
                <div class="level-ring">{_render_level_ring(ov.level)}</div>
            </div>
            <div class="panel">
                <h2>Total XP</h2>
                <div class="metric" id="totalXP">{ov.total_xp_display}</div>
                <div class="metric-label">Ranking: {ov.ranking.display}</div>
            </div>
            <div class="panel">
                <h2>Projects completed</h2>
                <div class="metric" id="projectsCompleted">{ov.projects_completed}</div>
            </div>
            <div class="panel">
                <h2>Audits done</h2>
                <div class="metric" id="auditsDone">{ov.audits_done}</div>
            </div>
            <div class="panel">
                {_render_audit_panel(ov.audit)}
            </div>
        </div>

        <div class="panel" style="margin-top: 1rem;">
            <h2>XP progress</h2>
            <div class="chart-container" id="xpGraph">{ov.xp_chart}</div>
        </div>

        <div class="panel" style="margin-top: 1rem;">
            <h2>Audit ratio</h2>
            <div class="chart-container" id="auditGraph">{ov.audit_chart}</div>
        </div>""",
    )
