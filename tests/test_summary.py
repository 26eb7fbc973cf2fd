"""Tests for the AI order summary."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import cast

import pytest
from openai import OpenAI, OpenAIError

from config import Settings
from core.ai.summary import (
    EMPTY_SUMMARY,
    FAILED_SUMMARY,
    MISSING_KEY_SUMMARY,
    MissingCredentialError,
    SummaryError,
    SummaryGuard,
    build_summary_request,
    format_order_line,
    generate_order_summary,
    summarize_orders,
)
from core.models import OrderStatus, OrderType


class DummyClient:
    def __init__(self, content: str | None = "ملخص الأوردرات", error: Exception | None = None):
        self.calls: list[dict] = []
        self._content = content
        self._error = error

    def _create(self, **kwargs: object):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self._content))])

    @property
    def chat(self):
        return SimpleNamespace(completions=SimpleNamespace(create=self._create))


@pytest.fixture()
def settings(monkeypatch) -> Settings:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    return Settings(openai_api_key="test-key", openai_model="test-model")


def test_generate_summary_uses_injected_client(five_orders, settings):
    client = DummyClient(content="  ملخص  ")

    result = generate_order_summary(
        five_orders,
        client_factory=lambda: cast(OpenAI, client),
        settings=settings,
    )

    assert result == "ملخص"
    [call] = client.calls
    assert call["model"] == "test-model"
    prompt = call["messages"][0]["content"]
    assert "Cement" in prompt
    assert "Client B" in prompt
    assert "$orders" not in prompt


def test_empty_orders_skip_the_model(settings):
    client = DummyClient()

    result = generate_order_summary([], client_factory=lambda: cast(OpenAI, client), settings=settings)

    assert result == EMPTY_SUMMARY
    assert client.calls == []


def test_missing_key_is_reported(monkeypatch, five_orders):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    settings = Settings(openai_api_key=None)

    with pytest.raises(MissingCredentialError):
        generate_order_summary(five_orders, settings=settings)
    assert summarize_orders(five_orders, settings=settings) == MISSING_KEY_SUMMARY
    assert summarize_orders([], settings=settings) == MISSING_KEY_SUMMARY


def test_api_failure_becomes_fallback_message(five_orders, settings):
    client = DummyClient(error=OpenAIError("rate limited"))

    with pytest.raises(SummaryError):
        generate_order_summary(five_orders, client_factory=lambda: cast(OpenAI, client), settings=settings)
    assert summarize_orders(five_orders, client_factory=lambda: cast(OpenAI, client), settings=settings) == FAILED_SUMMARY


def test_blank_response_is_a_failure(five_orders, settings):
    client = DummyClient(content="   ")

    result = summarize_orders(five_orders, client_factory=lambda: cast(OpenAI, client), settings=settings)

    assert result == FAILED_SUMMARY


def test_order_line_uses_arabic_labels(make_order):
    order = make_order(
        "a",
        name="مخبز البركة",
        date="2024-03-15",
        type=OrderType.INCOME,
        status=OrderStatus.COMPLETED,
    )

    line = format_order_line(order)

    assert "استلام" in line
    assert "مكتمل" in line
    assert "لا يوجد" in line
    assert "١٥\u200f/٣\u200f/٢٠٢٤" in line


def test_summary_request_lists_every_order(five_orders):
    request = build_summary_request(five_orders, model="m")

    assert request.order_count == 5
    assert request.prompt.count("\n- ") == 5


def test_guard_runs_summarizer_off_the_event_loop(five_orders):
    guard = SummaryGuard(lambda orders: f"{len(orders)} orders")

    assert asyncio.run(guard.request(five_orders)) == "5 orders"
    assert not guard.in_flight
