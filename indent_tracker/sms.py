# indent_tracker/sms.py

import logging

import africastalking

from . import config


def send_sms(phone: str, message: str) -> bool:
    """Send one SMS through Africa's Talking. False when not configured or on failure."""
    if not config.AT_USERNAME or not config.AT_API_KEY:
        logging.warning("Africa's Talking credentials missing")
        return False

    try:
        africastalking.initialize(config.AT_USERNAME, config.AT_API_KEY)
        sms = africastalking.SMS
        if config.AT_FROM:
            response = sms.send(message, [phone], sender_id=config.AT_FROM)
        else:
            response = sms.send(message, [phone])
        logging.info("Africa's Talking SMS sent: %s", response)
        return True
    except Exception as e:
        logging.exception("Failed to send SMS via Africa's Talking: %s", e)
        return False
