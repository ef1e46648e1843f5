"""
M-Pesa (Daraja) gateway client.

Flow for one STK push:
  1. GET  /oauth/v1/generate?grant_type=client_credentials with HTTP Basic
     auth (consumer key/secret) -> short-lived access token. A fresh token is
     fetched for every charge; nothing is kept between calls.
  2. POST /mpesa/stkpush/v1/processrequest with the bearer token. The password
     is base64(shortcode + passkey + timestamp).
  3. The gateway later calls ``CALLBACK_URL`` with the outcome; see
     ``services.handle_mpesa_callback``.

No retries are performed here. Every failure surfaces as GatewayError with the
provider payload when one was returned.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Any

import requests
from django.conf import settings
from django.utils import timezone

from chs_backend.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/v1/generate?grant_type=client_credentials"
STK_PUSH_PATH = "/mpesa/stkpush/v1/processrequest"


@dataclass(frozen=True)
class MpesaConfig:
    base_url: str
    consumer_key: str
    consumer_secret: str
    shortcode: str
    passkey: str
    callback_url: str
    timeout: int = 30

    @classmethod
    def from_settings(cls, values: dict | None = None) -> "MpesaConfig":
        values = values if values is not None else getattr(settings, "MPESA", {})
        return cls(
            base_url=(values.get("BASE_URL") or "").rstrip("/"),
            consumer_key=values.get("CONSUMER_KEY") or "",
            consumer_secret=values.get("CONSUMER_SECRET") or "",
            shortcode=str(values.get("SHORTCODE") or ""),
            passkey=values.get("PASSKEY") or "",
            callback_url=values.get("CALLBACK_URL") or "",
            timeout=int(values.get("TIMEOUT") or 30),
        )


@lru_cache(maxsize=1)
def get_gateway_config() -> MpesaConfig:
    """Process-wide gateway configuration, built once from settings."""
    return MpesaConfig.from_settings()


def normalize_msisdn(phone_number: str) -> str:
    """Return the phone number in 2547XXXXXXXX form expected by Daraja."""
    digits = "".join(ch for ch in str(phone_number) if ch.isdigit())
    if digits.startswith("0") and len(digits) == 10:
        return "254" + digits[1:]
    if len(digits) == 9 and digits[0] in "71":
        return "254" + digits
    return digits


def stk_timestamp(now=None) -> str:
    now = now or timezone.localtime()
    return now.strftime("%Y%m%d%H%M%S")


def stk_password(shortcode: str, passkey: str, timestamp: str) -> str:
    raw = f"{shortcode}{passkey}{timestamp}".encode()
    return base64.b64encode(raw).decode()


def _response_payload(response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"detail": response.text or f"HTTP {response.status_code}"}


class MpesaClient:
    """Blocking Daraja client. One instance can serve many requests."""

    def __init__(self, config: MpesaConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    def get_access_token(self) -> str:
        try:
            response = self.session.get(
                self._url(TOKEN_PATH),
                auth=(self.config.consumer_key, self.config.consumer_secret),
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("M-Pesa access token request failed: %s", exc)
            raise GatewayError("Failed to get M-Pesa access token", error=str(exc))

        payload = _response_payload(response)
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if response.status_code != 200 or not token:
            logger.warning("M-Pesa access token rejected (HTTP %s): %s", response.status_code, payload)
            raise GatewayError("Failed to get M-Pesa access token", error=payload)
        return token

    def build_stk_push_request(
        self,
        *,
        phone_number: str,
        amount: Decimal,
        account_reference: str,
        description: str,
        timestamp: str | None = None,
    ) -> dict[str, Any]:
        timestamp = timestamp or stk_timestamp()
        msisdn = normalize_msisdn(phone_number)
        whole_amount = int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return {
            "BusinessShortCode": self.config.shortcode,
            "Password": stk_password(self.config.shortcode, self.config.passkey, timestamp),
            "Timestamp": timestamp,
            "TransactionType": "CustomerPayBillOnline",
            "Amount": whole_amount,
            "PartyA": msisdn,
            "PartyB": self.config.shortcode,
            "PhoneNumber": msisdn,
            "CallBackURL": self.config.callback_url,
            "AccountReference": account_reference[:12],
            "TransactionDesc": (description or "Health Service Payment")[:13],
        }

    def stk_push(
        self,
        *,
        phone_number: str,
        amount: Decimal,
        account_reference: str,
        description: str = "",
    ) -> dict[str, Any]:
        """Submit an STK push and return the gateway's acceptance payload.

        The returned dict contains ``CheckoutRequestID`` and ``MerchantRequestID``.
        """
        token = self.get_access_token()
        body = self.build_stk_push_request(
            phone_number=phone_number,
            amount=amount,
            account_reference=account_reference,
            description=description,
        )

        try:
            response = self.session.post(
                self._url(STK_PUSH_PATH),
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("M-Pesa STK push request failed: %s", exc)
            raise GatewayError("Error initiating M-Pesa payment", error=str(exc))

        payload = _response_payload(response)
        accepted = (
            response.status_code == 200
            and isinstance(payload, dict)
            and str(payload.get("ResponseCode", "")) == "0"
            and payload.get("CheckoutRequestID")
        )
        if not accepted:
            logger.warning("M-Pesa STK push rejected (HTTP %s): %s", response.status_code, payload)
            raise GatewayError("Error initiating M-Pesa payment", error=payload)

        logger.info(
            "M-Pesa STK push accepted: checkout=%s merchant=%s",
            payload.get("CheckoutRequestID"),
            payload.get("MerchantRequestID"),
        )
        return payload


@lru_cache(maxsize=1)
def get_mpesa_client() -> MpesaClient:
    """Process-wide client; its ``requests.Session`` is shared by every charge."""
    return MpesaClient(get_gateway_config())
