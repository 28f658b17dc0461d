#!/usr/bin/env python
"""
Exercise the Twilio SMS transport against a real phone number.

Sends a basic test SMS, a normal notification SMS and an urgent one to
TEST_PHONE_NUMBER, after printing the Twilio account details.

Run with:
    python scripts/check_sms.py
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.config import settings
from src.services.twilio_sms_service import TwilioSmsService


def report(label: str, outcome) -> None:
    if outcome.success:
        print(f"   ✅ {label} passed (sid: {outcome.message_id})")
    else:
        print(f"   ❌ {label} failed: {outcome.error}")


async def main() -> int:
    sms = TwilioSmsService.from_settings(settings)

    if not sms.configured:
        print("❌ Twilio service not initialized. Check TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER.")
        return 1

    account = await sms.get_account_info()
    if account:
        print(f"Account: {account['accountName']} ({account['status']})")

    phone_number = settings.TEST_PHONE_NUMBER
    if not phone_number:
        print("❌ TEST_PHONE_NUMBER not set (e.g. TEST_PHONE_NUMBER=+1234567890)")
        return 1

    print(f"Testing SMS to: {phone_number}")

    report("Basic SMS", await sms.send_test_sms(phone_number))
    report(
        "Notification SMS",
        await sms.send_notification_sms(
            phone_number,
            "Test Notification",
            "This is a test notification from NydArt Advisor",
            {"priority": "normal"},
        ),
    )
    report(
        "Urgent notification",
        await sms.send_notification_sms(
            phone_number,
            "Security Alert",
            "New login detected on your account",
            {"priority": "urgent"},
        ),
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
