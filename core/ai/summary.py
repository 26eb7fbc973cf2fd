"""AI-assisted prose summaries of the projected orders."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Final, Sequence

from openai import OpenAI, OpenAIError

from config import Settings, get_settings
from core.formatting import format_localized_date, status_label, type_label
from core.logging_setup import get_logger
from core.models import Order
from prompts import render_prompt

PROMPT_ORDER_SUMMARY = "order_summary"
MAX_OUTPUT_TOKENS = 600

EMPTY_SUMMARY: Final[str] = "لا توجد أوردرات لتلخيصها."
MISSING_KEY_SUMMARY: Final[str] = "خطأ: مفتاح OpenAI API غير مهيأ. يرجى التأكد من إعداده بشكل صحيح."
FAILED_SUMMARY: Final[str] = "عذراً، حدث خطأ أثناء إنشاء الملخص. يرجى المحاولة مرة أخرى."
_NO_REF: Final[str] = "لا يوجد"

__all__ = [
    "MissingCredentialError",
    "SummaryError",
    "SummaryGuard",
    "SummaryRequest",
    "build_summary_request",
    "format_order_line",
    "generate_order_summary",
    "summarize_orders",
]

_logger = get_logger("order_tracker.summary")


class SummaryError(RuntimeError):
    """Raised when the AI summary cannot be generated."""


class MissingCredentialError(SummaryError):
    """Raised when no OpenAI API key is configured."""


@dataclass(frozen=True, slots=True)
class SummaryRequest:
    prompt: str
    model: str
    order_count: int


def _resolve_openai_client(settings: Settings) -> OpenAI:
    client_kwargs = settings.openai_client_kwargs
    if not client_kwargs.get("api_key"):
        raise MissingCredentialError(
            "Missing OpenAI API key. Set OPENAI_API_KEY or add it to .streamlit/secrets.toml under [openai]."
        )
    return OpenAI(**client_kwargs)


def format_order_line(order: Order) -> str:
    return (
        f"- النوع: {type_label(order.type)}, الاسم: {order.name}, "
        f"المرجع: {order.ref or _NO_REF}, الحالة: {status_label(order.status)}, "
        f"التاريخ: {format_localized_date(order.date)}"
    )


def build_summary_request(orders: Sequence[Order], *, model: str) -> SummaryRequest:
    lines = "\n".join(format_order_line(order) for order in orders)
    prompt = render_prompt(PROMPT_ORDER_SUMMARY, orders=lines)
    return SummaryRequest(prompt=prompt, model=model, order_count=len(orders))


def generate_order_summary(
    orders: Sequence[Order],
    *,
    client_factory: Callable[[], OpenAI] | None = None,
    settings: Settings | None = None,
) -> str:
    """Ask the model for a summary of ``orders``; raises ``SummaryError``."""

    settings = settings or get_settings()
    client = (client_factory or (lambda: _resolve_openai_client(settings)))()

    if not orders:
        return EMPTY_SUMMARY

    request = build_summary_request(orders, model=settings.openai_model)

    try:
        response = client.chat.completions.create(
            model=request.model,
            messages=[{"role": "user", "content": request.prompt}],
            max_tokens=MAX_OUTPUT_TOKENS,
            temperature=0.3,
        )
    except OpenAIError as exc:
        raise SummaryError(f"OpenAI API error: {exc}") from exc

    try:
        text = response.choices[0].message.content or ""
    except (AttributeError, IndexError) as exc:  # pragma: no cover - unexpected SDK output
        raise SummaryError("Unexpected response format from OpenAI API") from exc

    text = text.strip()
    if not text:
        raise SummaryError("OpenAI response was empty")
    return text


def summarize_orders(orders: Sequence[Order], **kwargs) -> str:
    """Like ``generate_order_summary`` but failures become a readable message."""

    try:
        return generate_order_summary(orders, **kwargs)
    except MissingCredentialError as exc:
        _logger.warning("Summary unavailable: %s", exc)
        return MISSING_KEY_SUMMARY
    except SummaryError as exc:
        _logger.error("Summary generation failed: %s", exc)
        return FAILED_SUMMARY


class SummaryGuard:
    """Drops summary requests made while another one is still running."""

    def __init__(self, summarizer: Callable[[Sequence[Order]], str] = summarize_orders) -> None:
        self._summarizer = summarizer
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def request(self, orders: Sequence[Order]) -> str | None:
        if self._in_flight:
            _logger.debug("Summary already in flight; dropping request")
            return None
        self._in_flight = True
        try:
            return await asyncio.to_thread(self._summarizer, list(orders))
        finally:
            self._in_flight = False
