from __future__ import annotations

import logging
import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from habitpulse import (
    AppState,
    build_dashboard,
    build_history,
    configure_logging,
    create_habit as core_create_habit,
    delete_habit as core_delete_habit,
    format_date_key,
    generate_debrief,
    load_settings,
    load_state,
    now_local,
    parse_date_key,
    prompt_for_date,
    save_state,
    standard_summaries,
    toggle_premium,
    update_habit as core_update_habit,
    upsert_gratitude,
    upsert_log,
    workspace_root as _workspace_root,
)

logger = logging.getLogger(__name__)

configure_logging(load_settings().log_level)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _summary_card(s: dict[str, Any]) -> str:
    top = s["topHabit"]
    top_html = (
        f'<div>Top habit: <b>{_escape(top["name"])}</b> ({top["minutes"]} min)</div>'
        if top else '<div class="muted">No top habit yet</div>'
    )
    return f"""
      <div class="card">
        <h3>{_escape(s["label"])}</h3>
        <div class="muted small">{_escape(s["dateLabel"])}</div>
        <div>Total: <b>{s["totalMinutes"]}</b> min · Avg/habit: {s["averageMinutesPerHabit"]} · Active days: {s["activeDays"]}</div>
        {top_html}
        <div class="muted">{_escape(s["suggestedFocus"])}</div>
      </div>"""


def _render_index(view: dict[str, Any]) -> str:
    day = view["selectedDate"]
    rows = []
    for h in view["habits"]:
        rows.append(
            f"""
          <form method="post" action="/log" class="row">
            <input type="hidden" name="date" value="{_escape(day)}" />
            <input type="hidden" name="habit_id" value="{_escape(h["id"])}" />
            <span>{_escape(h["name"])} <span class="muted small">(importance {h["importance"]})</span></span>
            <input name="minutes" type="text" value="{h["minutes"] or ""}" placeholder="minutes" />
            <button type="submit">Save</button>
          </form>"""
        )

    names = {h["id"]: h["name"] for h in view["habits"]}
    importance = {h["id"]: h["importance"] for h in view["habits"]}
    history = []
    for d in view["history"]:
        items = "".join(
            f'<li>{_escape(names.get(log["habitId"], "Habit"))} · {log["minutes"]} min · '
            f'importance {importance.get(log["habitId"], "-")}</li>'
            for log in d["logs"]
        )
        grat = d["gratitude"]
        grat_html = f'<div class="muted">“{_escape(grat["response"])}”</div>' if grat else ""
        history.append(f'<div class="card"><b>{_escape(d["date"])}</b><ul>{items}</ul>{grat_html}</div>')

    insights = view["insights"]
    insights_html = (
        f'<p>{_escape(insights)}</p>' if insights is not None
        else '<p class="muted">Enable premium insights for a weekly debrief.</p>'
    )

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>HabitPulse</title>
</head>
<body>
  <div class="container">
    <header class="top">
      <h1>HabitPulse</h1>
      <form method="get" action="/"><input type="date" name="date" value="{_escape(day)}" /><button>Go</button></form>
    </header>

    <section class="card">
      <h2>{_escape(view["selectedDateLabel"])}</h2>
      {''.join(rows) if rows else '<div class="muted small">No habits yet. Add one below.</div>'}
      <form method="post" action="/habits" class="row">
        <input name="name" placeholder="New habit" />
        <input name="importance" type="number" min="1" max="5" value="3" />
        <input name="target_minutes" placeholder="target minutes" />
        <button type="submit">Add habit</button>
      </form>
    </section>

    <section class="card">
      <h2>Gratitude</h2>
      <div class="muted">{_escape(view["prompt"]["text"])}</div>
      <form method="post" action="/gratitude">
        <input type="hidden" name="date" value="{_escape(day)}" />
        <textarea name="response" rows="3">{_escape(view["gratitude"])}</textarea>
        <button type="submit">Save reflection</button>
      </form>
    </section>

    <section class="grid">{''.join(_summary_card(s) for s in view["summaries"])}</section>

    <section class="card">
      <h2>Premium debrief</h2>
      <form method="post" action="/premium"><button type="submit">{"Disable" if view["premium"] else "Enable"} premium insights</button></form>
      {insights_html}
    </section>

    <section>
      <h2>History</h2>
      {''.join(history) if history else '<div class="muted small">(no history yet)</div>'}
    </section>
  </div>
</body>
</html>"""


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="HabitPulse UI", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("HABITPULSE_USERNAME", "")
    expected_password = os.environ.get("HABITPULSE_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        logger.warning("Rejected credentials for user %r", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Helpers ───────────────────────────────────────────────────

def _day_or_400(day: str | None) -> str | None:
    if not day:
        return None
    try:
        return format_date_key(parse_date_key(day))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {day}")


def _commit(state: AppState, errors: list[str]) -> None:
    """Persist a mutation, or reject it with the collected errors."""
    if errors:
        not_found = [e for e in errors if e.startswith("Habit not found")]
        raise HTTPException(status_code=404 if not_found else 400, detail="; ".join(errors))
    save_state(state, _workspace_root())


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(date: str | None = None, username: str = Depends(get_current_user)) -> HTMLResponse:
    root = _workspace_root()
    view = build_dashboard(load_state(root), now_local(root), _day_or_400(date))
    return HTMLResponse(_render_index(view))


@app.post("/log")
def form_log(
    date: str = Form(...),
    habit_id: str = Form(...),
    minutes: str = Form(""),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    day = _day_or_400(date)
    state = load_state(_workspace_root())
    _, errors = upsert_log(state, habit_id, day, minutes)
    _commit(state, errors)
    return RedirectResponse(url=f"/?date={day}", status_code=303)


@app.post("/habits")
def form_add_habit(
    name: str = Form(""),
    importance: str = Form("3"),
    target_minutes: str = Form(""),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    state = load_state(_workspace_root())
    _, errors = core_create_habit(state, name, importance, target_minutes)
    _commit(state, errors)
    return RedirectResponse(url="/", status_code=303)


@app.post("/gratitude")
def form_gratitude(
    date: str = Form(...),
    response: str = Form(""),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    day = _day_or_400(date)
    state = load_state(_workspace_root())
    _, errors = upsert_gratitude(state, day, response)
    _commit(state, errors)
    return RedirectResponse(url=f"/?date={day}", status_code=303)


@app.post("/premium")
def form_premium(username: str = Depends(get_current_user)) -> RedirectResponse:
    state = load_state(_workspace_root())
    toggle_premium(state)
    _commit(state, [])
    return RedirectResponse(url="/", status_code=303)


# ── JSON API ──────────────────────────────────────────────────

@app.get("/api/state")
def api_get_state(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Full snapshot dump."""
    return load_state(_workspace_root()).to_dict()


@app.get("/api/dashboard")
def api_dashboard(date: str | None = None, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    return build_dashboard(load_state(root), now_local(root), _day_or_400(date))


@app.get("/api/summaries")
def api_summaries(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Weekly, monthly and yearly rollups ending today."""
    root = _workspace_root()
    state = load_state(root)
    summaries = standard_summaries(state.habits, state.logs, now_local(root))
    return {"summaries": [s.to_dict() for s in summaries]}


@app.get("/api/history")
def api_history(username: str = Depends(get_current_user)) -> dict[str, Any]:
    state = load_state(_workspace_root())
    days = build_history(state.habits, state.logs, state.gratitude)
    return {"count": len(days), "days": [d.to_dict() for d in days]}


@app.get("/api/prompt")
def api_prompt(date: str | None = None, username: str = Depends(get_current_user)) -> dict[str, Any]:
    day = _day_or_400(date) or format_date_key(now_local(_workspace_root()))
    return {"date": day, "prompt": prompt_for_date(day).to_dict()}


@app.get("/api/insights")
def api_insights(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Premium debrief; null while premium insights are disabled."""
    root = _workspace_root()
    state = load_state(root)
    if not state.premium:
        return {"premium": False, "insights": None}
    text = generate_debrief(state.habits, state.logs, state.gratitude, now_local(root))
    return {"premium": True, "insights": text}


@app.post("/api/habits")
def api_create_habit(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Create a new habit."""
    state = load_state(_workspace_root())
    habit, errors = core_create_habit(
        state,
        str(payload.get("name", "")),
        payload.get("importance", 3),
        payload.get("targetMinutes"),
    )
    _commit(state, errors)
    return {"ok": True, "habit": habit.to_dict()}


@app.put("/api/habits/{habit_id}")
def api_update_habit(habit_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Edit a habit's name, importance or target."""
    state = load_state(_workspace_root())
    habit, errors = core_update_habit(state, habit_id, payload)
    _commit(state, errors)
    return {"ok": True, "habit": habit.to_dict()}


@app.delete("/api/habits/{habit_id}")
def api_delete_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    state = load_state(_workspace_root())
    if not core_delete_habit(state, habit_id):
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    _commit(state, [])
    return {"ok": True, "habit_id": habit_id}


@app.put("/api/logs")
def api_upsert_log(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Set minutes for a habit on a day; 0 minutes removes the log."""
    day = _day_or_400(str(payload.get("date", ""))) or format_date_key(now_local(_workspace_root()))
    state = load_state(_workspace_root())
    log, errors = upsert_log(state, str(payload.get("habitId", "")), day, payload.get("minutes"))
    _commit(state, errors)
    return {"ok": True, "log": log.to_dict() if log else None}


@app.put("/api/gratitude")
def api_upsert_gratitude(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Save or clear the gratitude reflection for a day."""
    day = _day_or_400(str(payload.get("date", ""))) or format_date_key(now_local(_workspace_root()))
    state = load_state(_workspace_root())
    entry, errors = upsert_gratitude(state, day, str(payload.get("response", "")))
    _commit(state, errors)
    return {"ok": True, "entry": entry.to_dict() if entry else None}


@app.post("/api/premium/toggle")
def api_toggle_premium(username: str = Depends(get_current_user)) -> dict[str, Any]:
    state = load_state(_workspace_root())
    enabled = toggle_premium(state)
    _commit(state, [])
    return {"ok": True, "premium": enabled}


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    """Serve the web UI; HABITPULSE_HOST / HABITPULSE_PORT override the bind address."""
    import uvicorn

    host = os.environ.get("HABITPULSE_HOST", "127.0.0.1")
    port = int(os.environ.get("HABITPULSE_PORT", "8000"))
    logger.info("Serving HabitPulse on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
