import logging

import pytest
from twilio.base.exceptions import TwilioException

from app.core.config import Settings
from app.exceptions import DeliveryFailure
from app.infrastructure.sms import build_sms_channel
from app.infrastructure.sms.logging_sms import LoggingSmsChannel
from app.infrastructure.sms.twilio_sms import TwilioSmsChannel


class FakeMessage:
    def __init__(self, status):
        self.sid = "SM123"
        self.status = status


class FakeMessages:
    def __init__(self, status="queued", error=None):
        self.status = status
        self.error = error
        self.created = []

    def create(self, to, from_, body):
        self.created.append((to, from_, body))
        if self.error:
            raise self.error
        return FakeMessage(self.status)


class FakeTwilioClient:
    def __init__(self, **kwargs):
        self.messages = FakeMessages(**kwargs)


def test_log_backend_is_refused_without_debug():
    with pytest.raises(RuntimeError):
        build_sms_channel(Settings(SMS_BACKEND="log", DEBUG=False))


def test_log_backend_with_debug_keeps_nothing(caplog):
    channel = build_sms_channel(Settings(SMS_BACKEND="log", DEBUG=True))
    assert isinstance(channel, LoggingSmsChannel)

    with caplog.at_level(logging.WARNING):
        assert channel.send("+15551234567", "Your login code is 123456.") is True
    assert "+15551234567" in caplog.text
    assert vars(channel) == {}


def test_twilio_backend_requires_credentials():
    with pytest.raises(RuntimeError):
        build_sms_channel(Settings(SMS_BACKEND="twilio", TWILIO_ACCOUNT_SID="", TWILIO_AUTH_TOKEN="", TWILIO_PHONE_NUMBER=""))


def test_unknown_backend_is_refused():
    with pytest.raises(RuntimeError):
        build_sms_channel(Settings(SMS_BACKEND="carrier-pigeon"))


def test_twilio_backend_is_built_from_settings():
    channel = build_sms_channel(Settings(
        SMS_BACKEND="twilio",
        TWILIO_ACCOUNT_SID="AC00000000000000000000000000000000",
        TWILIO_AUTH_TOKEN="token",
        TWILIO_PHONE_NUMBER="+15550000000",
    ))
    assert isinstance(channel, TwilioSmsChannel)
    assert channel.from_number == "+15550000000"


def test_twilio_send_hands_off_message():
    client = FakeTwilioClient()
    channel = TwilioSmsChannel(client, "+15550000000")
    assert channel.send("+15551234567", "hello") is True
    assert client.messages.created == [("+15551234567", "+15550000000", "hello")]


@pytest.mark.parametrize("status", ["failed", "undelivered"])
def test_twilio_failed_status_raises_delivery_failure(status):
    channel = TwilioSmsChannel(FakeTwilioClient(status=status), "+15550000000")
    with pytest.raises(DeliveryFailure):
        channel.send("+15551234567", "hello")


def test_twilio_error_raises_delivery_failure():
    channel = TwilioSmsChannel(FakeTwilioClient(error=TwilioException("boom")), "+15550000000")
    with pytest.raises(DeliveryFailure):
        channel.send("+15551234567", "hello")


def test_twilio_without_sender_raises_delivery_failure():
    channel = TwilioSmsChannel(FakeTwilioClient(), "")
    with pytest.raises(DeliveryFailure):
        channel.send("+15551234567", "hello")
