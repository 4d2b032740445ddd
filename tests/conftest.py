"""Shared test fixtures for the print request pipeline test suite."""

from __future__ import annotations

import threading
import time
from types import SimpleNamespace
from typing import Callable

import pytest

from print_request_pipeline.core.field_analyzer import FieldAnalyzer
from print_request_pipeline.core.models import EmailRecord

BASE_URL = "https://archive.test/clinton-emails/"


def make_email(
    email_id: str = "C001",
    *,
    content: str | None = "Please print 200 flyers for the event. Thanks, Jane Doe",
    subject: str | None = "Printing",
) -> EmailRecord:
    return EmailRecord(
        id=email_id,
        href=f"emailid/{email_id}",
        date="2010-05-04",
        subject=subject,
        sender="H",
        to="Jane Doe",
        content=content,
    )


def make_listing_html(rows: list[tuple[str, str, str, str, str]]) -> str:
    """Build a listing page; each row is (id, date, subject, from, to)."""
    body = "".join(
        f"<tr><td><a href=\"emailid/{email_id}\">{email_id}</a></td>"
        f"<td>{date}</td><td>{subject}</td><td>{sender}</td><td>{to}</td></tr>"
        for email_id, date, subject, sender, to in rows
    )
    return (
        "<html><body>"
        "<table class=\"table table-striped search-result\">"
        "<thead><tr><th>Doc #</th><th>Date</th><th>Subject</th><th>From</th><th>To</th></tr></thead>"
        f"<tbody>{body}</tbody>"
        "</table></body></html>"
    )


def make_detail_html(content: str) -> str:
    return (
        "<html><body><div class=\"header\">From: H</div>"
        f"<div class=\"email-content\" id=\"uniquer\">{content}</div>"
        "</body></html>"
    )


class StubModel:
    """Stand-in for a Gemini GenerativeModel."""

    def __init__(self, reply: Callable[[str], str] | str, delay: Callable[[str], float] | None = None):
        self._reply = reply
        self._delay = delay
        self._lock = threading.Lock()
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    def generate_content(self, prompt: str):
        with self._lock:
            self.calls.append(prompt)
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self._delay is not None:
                time.sleep(self._delay(prompt))
            text = self._reply(prompt) if callable(self._reply) else self._reply
            return SimpleNamespace(text=text)
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def stub_model() -> StubModel:
    return StubModel('{"whatIsBeingPrinted":"flyer","whoIsPrinting":"Jane Doe"}')


@pytest.fixture
def analyzer(stub_model: StubModel) -> FieldAnalyzer:
    return FieldAnalyzer(api_key=None, model_name="gemini-test", model=stub_model)
