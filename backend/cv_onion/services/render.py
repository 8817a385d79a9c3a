from __future__ import annotations
import re
from datetime import datetime, timezone
from html import escape
from typing import List

from cv_onion.core import MAX_FILE_MB, MIN_JOB_DESCRIPTION_CHARS
from cv_onion.session import MatchSession, SessionState

SCORE_BAR_COLORS = {"green": "#22C55E", "orange": "#F97316", "red": "#EF4444"}

_ALLOWED_TAGS = ("mark", "b", "strong", "em", "u")
_ALLOWED_TAG_RE = re.compile(r"&lt;(/?)(" + "|".join(_ALLOWED_TAGS) + r")&gt;", re.IGNORECASE)

ACCEPT = ".pdf,.doc,.docx,.txt,application/pdf,application/msword,application/vnd.openxmlformats-officedocument.wordprocessingml.document,text/plain"

ON_SUBMIT = (
    "document.getElementById('loading').hidden=false;"
    "document.querySelectorAll('.result,.empty,.alert').forEach(function(e){e.hidden=true;});"
    "this.querySelector('button[type=submit]').disabled=true;"
    "this.querySelector('a.button').classList.add('disabled');"
)


def highlight_html(text: str) -> str:
    """
    Escape model-produced CV text, then restore the bare highlight tags
    (no attributes) and turn newlines into line breaks.
    """
    safe = escape(text or "")
    safe = _ALLOWED_TAG_RE.sub(lambda m: f"<{m.group(1)}{m.group(2).lower()}>", safe)
    return safe.replace("\n", "<br />")


def _badges(items: List[str]) -> str:
    if not items:
        return "<p class='muted'>No specific skills identified.</p>"
    return "".join(f"<span class='pill'>{escape(x)}</span>" for x in items)


def _paragraph(text: str) -> str:
    return f"<p class='pre'>{escape(text) if text else 'N/A'}</p>"


def _field_error(session: MatchSession, name: str) -> str:
    msg = session.field_errors.get(name)
    return f"<p class='field-error'>{escape(msg)}</p>" if msg else ""


def _form(session: MatchSession) -> str:
    busy = " disabled" if session.state == SessionState.SUBMITTING else ""
    file_label = (
        f"<span class='gold'>{escape(session.file_name)}</span>"
        if session.file_name
        else "<span><b>Click to upload</b> a file</span>"
    )
    return f"""
    <div class="panel">
      <h2>Provide Details</h2>
      <div class="muted">Enter the job description and upload your CV to start the analysis.</div>
      <form method="post" action="/" enctype="multipart/form-data" onsubmit="{ON_SUBMIT}">
        <label for="job_description">Job Description</label>
        <textarea id="job_description" name="job_description" rows="8"
          placeholder="Paste the full job description here (min. {MIN_JOB_DESCRIPTION_CHARS} characters)...">{escape(session.job_description)}</textarea>
        {_field_error(session, "job_description")}

        <label for="cv_file">Upload CV</label>
        <div class="drop">{file_label}
          <div class="muted">PDF, DOCX, DOC, TXT (MAX {MAX_FILE_MB}MB)</div>
          <input id="cv_file" name="cv_file" type="file" accept="{ACCEPT}"/>
        </div>
        {_field_error(session, "cv_file")}
        <div class="muted">Note: For best matching results, using a .txt file or ensuring your document is text-selectable is recommended.</div>

        <div class="actions">
          <a class="button outline" href="/">Reset</a>
          <button type="submit"{busy}>Analyze &amp; Match</button>
        </div>
      </form>
    </div>
    """


def _match_panel(session: MatchSession) -> str:
    m = session.match_result
    color = m.color_code.value
    return f"""
    <div class="panel result">
      <h2>Match Result</h2>
      <div class="kpi score-{color}">{m.match_score}%</div>
      <div class="muted">Overall Match Score</div>
      <div class="bar"><div class="fill" role="progressbar" aria-valuenow="{m.match_score}" aria-valuemin="0" aria-valuemax="100"
        style="width:{m.match_score}%; background:{SCORE_BAR_COLORS[color]};"></div></div>
      <h3>Highlighted CV Insights</h3>
      <div class="highlight">{highlight_html(m.highlighted_cv)}</div>
      <div class="muted">This is an AI-generated highlight of your CV against the job description.</div>
    </div>
    """


def _cv_panel(session: MatchSession) -> str:
    a = session.cv_analysis
    return f"""
      <div class="panel">
        <h2>CV Analysis</h2>
        <h4>Key Skills:</h4><div>{_badges(a.skills)}</div>
        <h4>Experience Summary:</h4>{_paragraph(a.experience)}
        <h4>Qualifications:</h4>{_paragraph(a.qualifications)}
      </div>
    """


def _job_panel(session: MatchSession) -> str:
    j = session.job_analysis
    return f"""
      <div class="panel">
        <h2>Job Description Analysis</h2>
        <h4>Required Skills:</h4><div>{_badges(j.required_skills)}</div>
        <h4>Required Experience:</h4>{_paragraph(j.required_experience)}
        <h4>Required Qualifications:</h4>{_paragraph(j.required_qualifications)}
      </div>
    """


def render_page(session: MatchSession) -> str:
    year = datetime.now(timezone.utc).year

    body = _form(session)

    hidden = "" if session.state == SessionState.SUBMITTING else " hidden"
    body += f"""
    <div id="loading" class="panel loading"{hidden}>Hold tight, the AI is working its magic...</div>
    """

    if session.error:
        body += f"""
    <div class="panel alert" role="alert">
      <div class="title">Oops! Something went wrong.</div>
      <div>{escape(session.error)}</div>
    </div>
    """

    if session.match_result:
        body += _match_panel(session)

    panels = ""
    if session.cv_analysis:
        panels += _cv_panel(session)
    if session.job_analysis:
        panels += _job_panel(session)
    if panels:
        body += f'<div class="row result">{panels}</div>'

    if session.state != SessionState.SUBMITTING and not session.has_results and not session.error:
        body += """
    <div class="panel empty">
      <div>Your analysis results will appear here.</div>
      <div class="muted">Fill out the form and click "Analyze &amp; Match" to begin.</div>
    </div>
    """

    html = f"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>CV Onion</title>
  <style>
    body {{
      font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Arial;
      background: #070A12;
      color: #E7E9EE;
      margin: 0; padding: 24px;
    }}
    .wrap {{ max-width: 820px; margin: 0 auto; }}
    header {{ text-align: center; margin-bottom: 24px; }}
    h1 {{ font-size: 40px; margin: 0; color: #D4AF37; }}
    .row {{ display: grid; grid-template-columns: 1fr 1fr; gap: 14px; margin-top: 14px; }}
    .panel {{
      background: rgba(255,255,255,0.03);
      border: 1px solid rgba(255,255,255,0.08);
      border-radius: 16px;
      padding: 14px;
      margin-top: 14px;
    }}
    .muted {{ color: rgba(231,233,238,0.7); font-size: 13px; }}
    .gold {{ color: #D4AF37; }}
    label {{ display: block; font-weight: 600; margin-top: 12px; }}
    textarea {{ width: 100%; box-sizing: border-box; margin-top: 4px; background: #0B0F1A; color: inherit;
      border: 1px solid rgba(255,255,255,0.12); border-radius: 10px; padding: 8px; }}
    .drop {{ border: 2px dashed rgba(255,255,255,0.15); border-radius: 12px; padding: 16px; text-align: center; margin-top: 4px; }}
    .field-error {{ color: #EF4444; font-size: 12px; margin: 4px 0 0; }}
    .actions {{ display: flex; gap: 12px; margin-top: 16px; }}
    .button, button {{ padding: 10px 16px; border-radius: 10px; border: 1px solid #D4AF37; background: #D4AF37;
      color: #070A12; font-weight: 700; text-decoration: none; cursor: pointer; }}
    .button.outline {{ background: transparent; color: #D4AF37; }}
    .button.disabled, button:disabled {{ pointer-events: none; opacity: 0.5; }}
    [hidden] {{ display: none !important; }}
    .kpi {{ font-size: 48px; font-weight: 800; text-align: center; }}
    .score-green {{ color: #22C55E; }}
    .score-orange {{ color: #F97316; }}
    .score-red {{ color: #EF4444; }}
    .bar {{ width: 100%; height: 12px; border-radius: 999px; background: rgba(255,255,255,0.08); overflow: hidden; margin: 8px 0; }}
    .fill {{ height: 12px; border-radius: 999px; }}
    .highlight {{ max-height: 320px; overflow-y: auto; border: 1px solid rgba(255,255,255,0.08); border-radius: 10px; padding: 10px; font-size: 13px; }}
    mark {{ background: rgba(212,175,55,0.35); color: inherit; }}
    .pill {{ display: inline-block; padding: 4px 10px; margin: 2px; border-radius: 999px; border: 1px solid rgba(255,255,255,0.1); background: rgba(0,0,0,0.15); font-size: 12px; }}
    .pre {{ white-space: pre-wrap; font-size: 12px; line-height: 1.5; }}
    .alert {{ border-color: rgba(239,68,68,0.6); }}
    .alert .title {{ font-weight: 700; margin-bottom: 4px; }}
    .loading, .empty {{ text-align: center; }}
    footer {{ text-align: center; margin-top: 32px; }}
    @media (max-width: 820px) {{
      .row {{ grid-template-columns: 1fr; }}
    }}
  </style>
</head>
<body>
  <div class="wrap">
    <header>
      <h1>CV Onion</h1>
      <div class="muted">Peel back the layers of job matching with AI.</div>
    </header>
    <main data-state="{session.state.value}">
    {body}
    </main>
    <footer class="muted">&copy; {year} CV Onion. AI-powered analysis for smarter career moves.</footer>
  </div>
</body>
</html>
"""
    return html
