# portfolio_api/common/utils/email_service.py

import os
import re
from datetime import datetime, timezone
from typing import Any, Dict

import jinja2
from markupsafe import Markup, escape

# portfolio_api/common/utils/email_service.py -> portfolio_api/templates/emails
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
TEMPLATE_DIR = os.path.join(BASE_DIR, "templates", "emails")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def nl2br(value: Any) -> Markup:
    """Escape `value` and turn its line breaks into <br> markers."""
    return Markup(_LINE_BREAK.sub("<br>", str(escape(value))))


def format_timestamp(moment: datetime, seconds: bool = True) -> str:
    """Human readable form, e.g. 'Saturday, October 18, 2026 at 03:25:00 PM UTC'."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    time_format = "%I:%M:%S %p" if seconds else "%I:%M %p"
    date_part = f"{moment.strftime('%A, %B')} {moment.day}, {moment.year}"
    return f"{date_part} at {moment.strftime(time_format)} {moment.strftime('%Z')}".rstrip()


template_loader = jinja2.FileSystemLoader(searchpath=TEMPLATE_DIR)
template_env = jinja2.Environment(
    loader=template_loader,
    autoescape=jinja2.select_autoescape(["html"]),
    undefined=jinja2.StrictUndefined,
)
template_env.filters["nl2br"] = nl2br
template_env.filters["timestamp"] = format_timestamp


def render_template(template_name: str, context: Dict[str, Any]) -> str:
    template = template_env.get_template(template_name)
    return template.render(**context)
