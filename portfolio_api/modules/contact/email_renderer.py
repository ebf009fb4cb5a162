# portfolio_api/modules/contact/email_renderer.py

from dataclasses import dataclass
from datetime import datetime

from portfolio_api.common.config import Settings
from portfolio_api.common.utils.email_service import render_template
from portfolio_api.modules.contact.schemas import ContactSubmission


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class SiteOwner:
    """Who the acknowledgment is signed by."""
    name: str = "Subash S"
    tagline: str = "Full Stack Developer | B.Tech Computer Science Student"
    github_url: str = "https://github.com/Subash-S-66"
    linkedin_url: str = "https://www.linkedin.com/in/subash-s-514aa9373"

    @classmethod
    def from_settings(cls, settings: Settings) -> "SiteOwner":
        return cls(
            name=settings.CONTACT_OWNER_NAME,
            tagline=settings.CONTACT_OWNER_TAGLINE,
            github_url=settings.GITHUB_URL,
            linkedin_url=settings.LINKEDIN_URL,
        )


def render_notification(
    submission: ContactSubmission,
    received_at: datetime,
    recipient: str,
) -> RenderedEmail:
    """Email telling the site owner about a new submission."""
    context = {
        "submission": submission,
        "received_at": received_at,
        "recipient": recipient,
    }
    return RenderedEmail(
        subject=f"Portfolio Contact: {submission.subject}",
        html=render_template("contact_notification.html", context),
        text=render_template("contact_notification.txt", context),
    )


def render_acknowledgment(
    submission: ContactSubmission,
    received_at: datetime,
    recipient: str,
    owner: SiteOwner = SiteOwner(),
) -> RenderedEmail:
    """Thank-you email sent back to the person who submitted the form."""
    context = {
        "submission": submission,
        "received_at": received_at,
        "recipient": recipient,
        "owner": owner,
    }
    return RenderedEmail(
        subject=f"Thank you for contacting me - {submission.subject}",
        html=render_template("contact_acknowledgment.html", context),
        text=render_template("contact_acknowledgment.txt", context),
    )
