"""
Viewing Email Templates
MJML bodies for delivered email plus plain-text bodies used for logging and text parts
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional

# Brand colors - Navy/Amber real estate scheme
THEME = {
    "primary": "#0066cc",
    "primary_dark": "#0052a3",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e5e7eb",
    "warning": "#ffc107",
    "warning_bg": "#fff3cd",
    "danger": "#ef4444",
}


@dataclass(frozen=True)
class ViewingConfirmation:
    """Everything a visitor needs to know about a booked viewing"""

    visitor_name: str
    visitor_email: str
    property_title: str
    property_address: str
    viewing_date: datetime
    viewing_time: str
    duration: int
    agent_name: str
    agent_phone: str
    agent_email: str
    notes: Optional[str] = None


def format_long_date(value: datetime) -> str:
    """e.g. Monday, January 5, 2026"""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def format_short_date(value: datetime) -> str:
    """e.g. Monday, Jan 5"""
    return f"{value:%A}, {value:%b} {value.day}"


def get_base_template(title: str, preview_text: str, header_text: str, content_sections: str) -> str:
    """Base MJML template wrapper for all viewing emails"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['primary']}" padding="30px 20px" border-radius="8px 8px 0 0">
          <mj-column>
            <mj-text align="center" color="#ffffff" font-size="24px" font-weight="600">
              {title}
            </mj-text>
            <mj-text align="center" color="#ffffff" padding="0">
              {header_text}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="{THEME['card_bg']}" padding="30px 40px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="12px" color="#999999">
              This is an automated email. Please do not reply to this message.
              Contact the agent directly for any inquiries.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _detail_row(label: str, value: str) -> str:
    return f"""
    <mj-text padding="4px 0">
      <span style="color: {THEME['text_muted']}; font-weight: 500;">{label}:</span> {escape(value)}
    </mj-text>
    """


def _section_title(text: str) -> str:
    return f"""
    <mj-text font-size="16px" font-weight="600" color="{THEME['primary']}" padding="20px 0 8px 0">
      {text}
    </mj-text>
    """


def viewing_confirmation_template(data: ViewingConfirmation) -> str:
    """Viewing confirmation MJML template"""
    notes_section = ""
    if data.notes:
        notes_section = _section_title("📝 Your Notes") + f"<mj-text>{escape(data.notes)}</mj-text>"

    phone_digits = "".join(ch for ch in data.agent_phone if ch.isdigit())

    content = f"""
    <mj-text>Hi {escape(data.visitor_name)},</mj-text>
    <mj-text>
      Thank you for scheduling a viewing! We're excited to show you this property.
      Here are the details of your confirmed viewing:
    </mj-text>

    {_section_title("📍 Property Details")}
    {_detail_row("Property", data.property_title)}
    {_detail_row("Address", data.property_address)}

    {_section_title("📅 Viewing Schedule")}
    {_detail_row("Date", format_long_date(data.viewing_date))}
    {_detail_row("Time", data.viewing_time)}
    {_detail_row("Duration", f"{data.duration} minutes")}

    {notes_section}

    {_section_title("👤 Agent Information")}
    <mj-text>
      <strong>{escape(data.agent_name)}</strong><br/>
      <strong>Phone:</strong> <a href="tel:{phone_digits}">{escape(data.agent_phone)}</a><br/>
      <strong>Email:</strong> <a href="mailto:{escape(data.agent_email)}">{escape(data.agent_email)}</a>
    </mj-text>

    {_section_title("What to Expect")}
    <mj-text>
      • Please arrive 5-10 minutes early<br/>
      • Bring a valid ID<br/>
      • Feel free to ask questions about the property<br/>
      • The agent will provide detailed information about the area
    </mj-text>

    {_section_title("Need to Reschedule?")}
    <mj-text>
      If you need to change your viewing time, please contact the agent directly using the
      contact information above.
    </mj-text>

    <mj-text>We look forward to seeing you!<br/>Best regards,<br/>The Real Estate Team</mj-text>
    """

    return get_base_template(
        title="Viewing Confirmation",
        preview_text=f"Your viewing of {data.property_title} is scheduled",
        header_text="Your property viewing has been scheduled",
        content_sections=content,
    )


def viewing_confirmation_text(data: ViewingConfirmation) -> str:
    """Plain-text version of the confirmation email"""
    notes = f"YOUR NOTES\n{data.notes}\n\n" if data.notes else ""
    return f"""
VIEWING CONFIRMATION

Hi {data.visitor_name},

Thank you for scheduling a viewing! We're excited to show you this property.

PROPERTY DETAILS
Property: {data.property_title}
Address: {data.property_address}

VIEWING SCHEDULE
Date: {format_long_date(data.viewing_date)}
Time: {data.viewing_time}
Duration: {data.duration} minutes

{notes}AGENT INFORMATION
{data.agent_name}
Phone: {data.agent_phone}
Email: {data.agent_email}

WHAT TO EXPECT
- Please arrive 5-10 minutes early
- Bring a valid ID
- Feel free to ask questions about the property
- The agent will provide detailed information about the area

NEED TO RESCHEDULE?
If you need to change your viewing time, please contact the agent directly using the contact information above.

We look forward to seeing you!

Best regards,
The Real Estate Team

---
This is an automated email. Please do not reply to this message. Contact the agent directly for any inquiries.
""".strip()


def viewing_reminder_template(data: ViewingConfirmation) -> str:
    """24-hour reminder MJML template"""
    content = f"""
    <mj-text>Hi {escape(data.visitor_name)},</mj-text>
    <mj-text>This is a friendly reminder about your scheduled property viewing:</mj-text>
    <mj-text background-color="{THEME['warning_bg']}" padding="16px">
      <strong>{escape(data.property_title)}</strong><br/>{escape(data.property_address)}
    </mj-text>
    <mj-text><strong>Tomorrow ({format_short_date(data.viewing_date)}) at {escape(data.viewing_time)}</strong></mj-text>
    <mj-text>Agent: {escape(data.agent_name)} ({escape(data.agent_phone)})</mj-text>
    <mj-text>See you tomorrow!</mj-text>
    """

    return get_base_template(
        title="Reminder: Property Viewing Tomorrow",
        preview_text=f"Your viewing of {data.property_title} is tomorrow",
        header_text="Your viewing is coming up",
        content_sections=content,
    )


def viewing_reminder_text(data: ViewingConfirmation) -> str:
    return (
        f"Hi {data.visitor_name},\n\n"
        f"This is a friendly reminder about your scheduled property viewing:\n\n"
        f"{data.property_title}\n{data.property_address}\n\n"
        f"Tomorrow ({format_short_date(data.viewing_date)}) at {data.viewing_time}\n"
        f"Agent: {data.agent_name} ({data.agent_phone})\n\n"
        f"See you tomorrow!"
    )


def viewing_cancellation_template(visitor_name: str, property_label: str, viewing_date: datetime) -> str:
    """Viewing cancellation MJML template"""
    content = f"""
    <mj-text>Hi {escape(visitor_name)},</mj-text>
    <mj-text>
      Your viewing of <strong>{escape(property_label)}</strong> scheduled for
      <strong>{format_long_date(viewing_date)}</strong> has been cancelled.
    </mj-text>
    <mj-text>
      If you would like to reschedule, please book a new viewing or contact our team.
    </mj-text>
    <mj-text>Best regards,<br/>The Real Estate Team</mj-text>
    """

    return get_base_template(
        title="Viewing Cancelled",
        preview_text=f"Your viewing of {property_label} has been cancelled",
        header_text="Your property viewing has been cancelled",
        content_sections=content,
    )


def viewing_cancellation_text(visitor_name: str, property_label: str, viewing_date: datetime) -> str:
    return (
        f"Hi {visitor_name},\n\n"
        f"Your viewing of {property_label} scheduled for {format_long_date(viewing_date)} "
        f"has been cancelled.\n\n"
        f"If you would like to reschedule, please book a new viewing or contact our team.\n\n"
        f"Best regards,\nThe Real Estate Team"
    )


def new_inquiry_text(property_label: str, name: str, email: str, phone: Optional[str], message: str) -> str:
    """Owner notification for a new property inquiry"""
    return (
        f"New inquiry for {property_label}\n\n"
        f"From: {name} <{email}>\n"
        f"Phone: {phone or 'N/A'}\n\n"
        f"{message}"
    )
