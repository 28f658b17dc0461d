"""Email templates.

Every builder is a pure function of its arguments. Values are interpolated
verbatim: callers are responsible for escaping anything untrusted.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

BRAND_NAME = "NydArt Advisor"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


# HTML email base template with styling
HTML_BASE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: {header_background}; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
        .content {{ background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }}
        .button {{ display: inline-block; background: {accent}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; margin: 20px 5px; font-weight: bold; }}
        .button-secondary {{ background: #6c757d; }}
        .footer {{ text-align: center; margin-top: 30px; color: #666; font-size: 14px; }}
        .warning {{ background: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; border-radius: 5px; margin: 20px 0; }}
        .highlight {{ background: #e8f4fd; border-left: 4px solid {accent}; padding: 20px; margin: 25px 0; border-radius: 5px; }}
        .details {{ background: #f8f9fa; padding: 15px; border-radius: 5px; margin: 15px 0; }}
        .detail-label {{ font-weight: bold; color: #495057; }}
        .detail-value {{ color: #6c757d; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{heading}</h1>
            <p>{subheading}</p>
        </div>
        <div class="content">
            {content}
        </div>
        <div class="footer">
            {footer}
        </div>
    </div>
</body>
</html>"""

PURPLE_GRADIENT = "linear-gradient(135deg, #667eea 0%, #764ba2 100%)"
RED_GRADIENT = "linear-gradient(135deg, #ff6b6b 0%, #ee5a24 100%)"


def _html_page(
    title: str,
    heading: str,
    subheading: str,
    content: str,
    footer: str,
    header_background: str = PURPLE_GRADIENT,
    accent: str = "#667eea",
) -> str:
    return HTML_BASE.format(
        title=title,
        heading=heading,
        subheading=subheading,
        content=content,
        footer=footer,
        header_background=header_background,
        accent=accent,
    )


def password_reset_email(reset_link: str, brand_name: str = BRAND_NAME) -> RenderedEmail:
    subject = f"Reset Your Password - {brand_name}"
    html = _html_page(
        title="Reset Your Password",
        heading=brand_name,
        subheading="Password Reset Request",
        content=f"""
            <h2>Hello!</h2>
            <p>We received a request to reset your password for your {brand_name} account.</p>
            <div style="text-align: center;">
                <a href="{reset_link}" class="button">Reset Password</a>
            </div>
            <div class="warning">
                <strong>Important:</strong> This link will expire in 1 hour for security reasons.
            </div>
            <p>If you didn't request this password reset, you can safely ignore this email. Your password will remain unchanged.</p>
            <p>If you're having trouble clicking the button, copy and paste this link into your browser:</p>
            <p style="word-break: break-all; color: #667eea;">{reset_link}</p>
        """,
        footer=f"""<p>This email was sent from {brand_name}. Please do not reply to this email.</p>
            <p>If you have any questions, please contact our support team.</p>""",
    )
    text = f"""Reset Your Password - {brand_name}

Hello!

We received a request to reset your password for your {brand_name} account.

Click the following link to reset your password:
{reset_link}

Important: This link will expire in 1 hour for security reasons.

If you didn't request this password reset, you can safely ignore this email. Your password will remain unchanged.

If you're having trouble clicking the link, copy and paste it into your browser.

This email was sent from {brand_name}. Please do not reply to this email.
If you have any questions, please contact our support team."""
    return RenderedEmail(subject=subject, html=html, text=text)


def welcome_email(username: str, login_link: str, brand_name: str = BRAND_NAME) -> RenderedEmail:
    subject = f"Welcome to {brand_name}! 🎨"
    html = _html_page(
        title=f"Welcome to {brand_name}",
        heading=f"🎨 Welcome to {brand_name}!",
        subheading="You're now part of our creative community",
        content=f"""
            <h2>Hello {username}! 👋</h2>
            <p>Welcome to the {brand_name} community! We're thrilled to have you join us on this creative journey.</p>
            <div class="highlight">
                <h3>🎯 What's Next?</h3>
                <p>Your account has been successfully created and you're ready to start exploring the world of digital art and creativity.</p>
            </div>
            <div style="text-align: center;">
                <a href="{login_link}" class="button">Start Your Journey</a>
            </div>
            <h3>🌟 What You Can Do:</h3>
            <ul>
                <li>Create and share your digital artwork</li>
                <li>Connect with fellow artists and creators</li>
                <li>Get personalized art recommendations</li>
                <li>Participate in community challenges</li>
                <li>Access exclusive tutorials and resources</li>
            </ul>
            <div class="highlight">
                <p><strong>💡 Tip:</strong> Complete your profile to get the most out of your {brand_name} experience!</p>
            </div>
            <p>If you have any questions or need help getting started, don't hesitate to reach out to our support team.</p>
            <p>Happy creating! 🎨</p>
            <p><em>The {brand_name} Team</em></p>
        """,
        footer=f"""<p>Welcome to the {brand_name} community! 🎨</p>
            <p>If you have any questions, please contact our support team.</p>""",
    )
    text = f"""Welcome to {brand_name}! 🎨

Hello {username}! 👋

Welcome to the {brand_name} community! We're thrilled to have you join us on this creative journey.

Your account has been successfully created and you're ready to start exploring the world of digital art and creativity.

Start Your Journey: {login_link}

🌟 What You Can Do:
- Create and share your digital artwork
- Connect with fellow artists and creators
- Get personalized art recommendations
- Participate in community challenges
- Access exclusive tutorials and resources

💡 Tip: Complete your profile to get the most out of your {brand_name} experience!

If you have any questions or need help getting started, don't hesitate to reach out to our support team.

Happy creating! 🎨

The {brand_name} Team"""
    return RenderedEmail(subject=subject, html=html, text=text)


def security_alert_email(
    username: str,
    login_time: str,
    device_info: str,
    location: str,
    login_link: str,
    support_link: str,
    brand_name: str = BRAND_NAME,
) -> RenderedEmail:
    subject = f"🔒 Security Alert - New Login Detected - {brand_name}"
    html = _html_page(
        title="Security Alert - New Login",
        heading="🔒 Security Alert",
        subheading="New Login Detected",
        header_background=RED_GRADIENT,
        accent="#ff6b6b",
        content=f"""
            <h2>Hello {username}!</h2>
            <div class="warning">
                <h3>⚠️ New Login Detected</h3>
                <p>We detected a new login to your {brand_name} account. If this was you, you can safely ignore this email.</p>
            </div>
            <div class="details">
                <h4>Login Details:</h4>
                <p><span class="detail-label">Time:</span> <span class="detail-value">{login_time}</span></p>
                <p><span class="detail-label">Device:</span> <span class="detail-value">{device_info}</span></p>
                <p><span class="detail-label">Location:</span> <span class="detail-value">{location}</span></p>
            </div>
            <div class="highlight">
                <h4>🔍 What to do next:</h4>
                <ul>
                    <li><strong>If this was you:</strong> No action needed - your account is secure</li>
                    <li><strong>If this wasn't you:</strong> Change your password immediately and contact support</li>
                    <li><strong>Enable 2FA:</strong> Consider enabling two-factor authentication for extra security</li>
                </ul>
            </div>
            <div style="text-align: center;">
                <a href="{login_link}" class="button">Review Account Activity</a>
                <a href="{support_link}" class="button button-secondary">Contact Support</a>
            </div>
        """,
        footer=f"""<p>This is an automated security alert from {brand_name}.</p>
            <p>If you have any concerns, please contact our support team immediately.</p>""",
    )
    text = f"""🔒 Security Alert - New Login Detected - {brand_name}

Hello {username}!

⚠️ New Login Detected

We detected a new login to your {brand_name} account. If this was you, you can safely ignore this email.

Login Details:
- Time: {login_time}
- Device: {device_info}
- Location: {location}

🔍 What to do next:
- If this was you: No action needed - your account is secure
- If this wasn't you: Change your password immediately and contact support
- Enable 2FA: Consider enabling two-factor authentication for extra security

Review Account Activity: {login_link}
Contact Support: {support_link}

This is an automated security alert from {brand_name}.
If you have any concerns, please contact our support team immediately."""
    return RenderedEmail(subject=subject, html=html, text=text)


def notification_email(
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
    brand_name: str = BRAND_NAME,
) -> RenderedEmail:
    """Generic template used by the multi-channel router."""
    action_url = (data or {}).get("actionUrl")
    action_html = ""
    action_text = ""
    if action_url:
        action_html = f"""
            <div style="text-align: center;">
                <a href="{action_url}" class="button">View Details</a>
            </div>"""
        action_text = f"\n\nView Details: {action_url}"

    html = _html_page(
        title=title,
        heading=brand_name,
        subheading=title,
        content=f"""
            <h2>{title}</h2>
            <p>{message}</p>{action_html}
        """,
        footer=f"""<p>This email was sent from {brand_name}. Please do not reply to this email.</p>
            <p>You can change which notifications you receive in your account settings.</p>""",
    )
    text = f"""{title}

{message}{action_text}

This email was sent from {brand_name}. Please do not reply to this email.
You can change which notifications you receive in your account settings."""
    return RenderedEmail(subject=title, html=html, text=text)


def diagnostic_email(brand_name: str = BRAND_NAME) -> RenderedEmail:
    """Fixed message sent by the service self-test endpoints."""
    return RenderedEmail(
        subject=f"Test Email - {brand_name}",
        html="<p>This is a test email to verify the email service configuration.</p>",
        text="This is a test email to verify the email service configuration.",
    )
