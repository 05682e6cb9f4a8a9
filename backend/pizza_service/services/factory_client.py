# Overview: HTTP client for the external pizza factory.

"""
Pizza Factory Client

One synchronous POST per order, no retries. Any outcome other than a 2xx
JSON response carrying a jwt is reported as a failed FactoryResult; the
caller decides how to surface it.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from flask import Flask, current_app

EXTENSION_KEY = "factory_client"


@dataclass(frozen=True)
class FactoryResult:
    ok: bool
    jwt: str | None = None
    report_url: str | None = None
    message: str | None = None


class FactoryClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def submit_order(self, diner: dict, order: dict) -> FactoryResult:
        """POST {base_url}/api/order with the API key as bearer credential."""
        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    "/api/order",
                    json={"diner": diner, "order": order},
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as exc:
            return FactoryResult(ok=False, message=f"factory unreachable: {exc}")

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        report_url = body.get("reportUrl")
        if response.is_success and body.get("jwt"):
            return FactoryResult(ok=True, jwt=body["jwt"], report_url=report_url)

        return FactoryResult(
            ok=False,
            report_url=report_url,
            message=body.get("message") or f"factory responded with HTTP {response.status_code}",
        )


def init_app(app: Flask) -> None:
    app.extensions[EXTENSION_KEY] = FactoryClient(
        app.config["FACTORY_URL"],
        app.config["FACTORY_API_KEY"],
        timeout=app.config["FACTORY_TIMEOUT_SECONDS"],
    )


def get_factory_client() -> FactoryClient:
    return current_app.extensions[EXTENSION_KEY]
