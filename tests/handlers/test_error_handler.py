# tests/handlers/test_error_handler.py
from unittest.mock import AsyncMock, Mock

import pytest
from telegram import Message
from telegram.error import NetworkError

from filler_bot.handlers import error_handler
from filler_bot.handlers.error_handler import global_error_handler


@pytest.mark.asyncio
async def test_global_error_handler_logs_and_notifies(
    mocker, make_message, make_update
):
    update = make_update(message=make_message())

    context = Mock()
    context.error = Exception("boom")
    context.chat_data = {}
    context.user_data = {}

    reply_mock = mocker.patch.object(Message, "reply_text", AsyncMock())
    logger_mock = mocker.patch("filler_bot.handlers.error_handler.logger.error")

    await global_error_handler(update, context)

    assert logger_mock.called
    reply_mock.assert_awaited_once()
    _, kwargs = reply_mock.call_args
    assert "An unexpected error occurred" in kwargs["text"]
    assert kwargs.get("parse_mode", None) is None


@pytest.mark.asyncio
async def test_global_error_handler_throttles_network_errors(mocker):
    error_handler._LAST_TRANSIENT_LOG.clear()
    warn_mock = mocker.patch("filler_bot.handlers.error_handler.logger.warning")
    error_mock = mocker.patch("filler_bot.handlers.error_handler.logger.error")

    context = Mock()
    context.error = NetworkError("httpx.ReadError")
    context.chat_data = {}
    context.user_data = {}

    await global_error_handler(None, context)
    await global_error_handler(None, context)

    assert warn_mock.call_count == 1
    error_mock.assert_not_called()


@pytest.mark.asyncio
async def test_global_error_handler_without_error(mocker):
    warn_mock = mocker.patch("filler_bot.handlers.error_handler.logger.warning")
    context = Mock()
    context.error = None

    await global_error_handler(None, context)

    warn_mock.assert_called_once()
