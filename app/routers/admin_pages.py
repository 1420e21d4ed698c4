"""
Admin HTML Pages
================
Login gate in front of the backfill dashboard.

The gate has exactly two outputs: the login form when the session is not
authenticated, the dashboard when it is.
"""

import html
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app import backfill_store, limiter
from app.auth import SESSION_COOKIE, AdminSession, get_admin_session
from app.config import settings as app_settings

logger = logging.getLogger(__name__)

router = APIRouter()

LOGIN_ERROR = "Invalid admin secret."
RUNS_UNAVAILABLE = "Unable to load backfill runs."

_PAGE = """
    <!DOCTYPE html>
    <html>
    <head>
        <title>{title} - Soft Play UK Admin</title>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <meta name="robots" content="noindex">
    </head>
    <body>
        {body}
    </body>
    </html>
    """


def render_login_form(error: Optional[str] = None) -> str:
    error_html = f'<p class="error">{html.escape(error)}</p>' if error else ""
    body = f"""
        <div class="admin-login">
            <h1>Admin Access</h1>
            <p>Enter your admin secret to access the backfill tool.</p>
            <form method="post" action="/admin/login">
                <input type="password" name="secret" placeholder="Admin secret" required autofocus>
                {error_html}
                <button type="submit">Sign In</button>
            </form>
        </div>
    """
    return _PAGE.format(title="Admin Access", body=body)


def render_dashboard(runs: List[Dict[str, Any]], notice: Optional[str] = None) -> str:
    rows = "".join(
        f"<tr><td><a href=\"/api/admin/backfill/runs/{r['runId']}\">#{r['runId']}</a></td>"
        f"<td>{html.escape(r['status'] or '')}</td>"
        f"<td>{html.escape(r['region'] or '')}</td>"
        f"<td>{r['processedCells']}/{r['totalCells']}</td>"
        f"<td>{r['discovered']}</td><td>{r['inserted']}</td><td>{r['updated']}</td>"
        f"<td>{r['failed']}</td></tr>"
        for r in runs
    )
    if not rows:
        rows = '<tr><td colspan="8">No backfill runs yet.</td></tr>'
    notice_html = f'<p class="notice">{html.escape(notice)}</p>' if notice else ""
    body = f"""
        <div class="backfill-dashboard">
            <h1>Venue Backfill</h1>
            <form method="post" action="/admin/logout"><button type="submit">Sign Out</button></form>
            {notice_html}
            <table>
                <thead><tr>
                    <th>Run</th><th>Status</th><th>Region</th><th>Cells</th>
                    <th>Discovered</th><th>Inserted</th><th>Updated</th><th>Failed</th>
                </tr></thead>
                <tbody>{rows}</tbody>
            </table>
        </div>
    """
    return _PAGE.format(title="Backfill", body=body)


def render_backfill_gate(session: AdminSession, runs: List[Dict[str, Any]], notice: Optional[str] = None) -> str:
    if not session.is_authenticated:
        return render_login_form()
    return render_dashboard(runs, notice)


@router.get("/admin/backfill", response_class=HTMLResponse)
async def backfill_page(session: AdminSession = Depends(get_admin_session)):
    runs, notice = [], None
    if session.is_authenticated:
        try:
            runs = await backfill_store.list_runs()
        except Exception:
            logger.exception("Failed to load backfill runs for dashboard")
            notice = RUNS_UNAVAILABLE
    return render_backfill_gate(session, runs, notice)


@router.post("/admin/login")
@limiter.limit(app_settings.admin_login_rate_limit)
async def admin_login(
    request: Request,
    secret: str = Form(...),
    session: AdminSession = Depends(get_admin_session),
):
    if not session.login(secret):
        return HTMLResponse(render_login_form(LOGIN_ERROR), status_code=401)

    response = RedirectResponse("/admin/backfill", status_code=303)
    response.set_cookie(
        SESSION_COOKIE,
        session.token,
        max_age=request.app.state.settings.admin_session_ttl_seconds,
        path="/",
        httponly=True,
        samesite="strict",
    )
    return response


@router.post("/admin/logout")
async def admin_logout(session: AdminSession = Depends(get_admin_session)):
    session.logout()
    response = RedirectResponse("/admin/backfill", status_code=303)
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response
