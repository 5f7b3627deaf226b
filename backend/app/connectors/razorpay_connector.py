"""
Razorpay Connector
Handles the interactions with the Razorpay payment gateway

- Gateway order creation (Orders API)
- Payment signature verification (HMAC-SHA256)
"""
import hashlib
import hmac
import logging

import httpx

from app.core.errors import GatewayUnavailable

logger = logging.getLogger(__name__)


def compute_payment_signature(secret: str, gateway_order_id: str, gateway_payment_id: str) -> str:
    """
    Signature the gateway attaches to a completed payment

    HMAC-SHA256 over UTF-8 "<order_id>|<payment_id>" keyed by the shared
    secret, lowercase hex.
    """
    message = f"{gateway_order_id}|{gateway_payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class RazorpayConnector:
    """
    Connector for the Razorpay REST API

    The httpx client is owned by the caller (application lifespan) so that
    connections are pooled across requests and closed on shutdown.
    """

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        client: httpx.AsyncClient,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
    ):
        """
        Initialize Razorpay connector

        Args:
            key_id: Razorpay API key ID
            key_secret: Razorpay API key secret, also the signature secret
            client: Shared async HTTP client
            api_url: API base URL
            timeout: Per-request timeout in seconds
        """
        if not key_id or not key_secret:
            raise ValueError("Razorpay credentials not configured. Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET")

        self.key_id = key_id
        self._key_secret = key_secret
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    async def create_order(self, amount: int, currency: str, receipt: str) -> str:
        """
        Create a gateway-side order

        Args:
            amount: Amount in currency sub-units
            currency: ISO currency code
            receipt: Unique receipt token for this attempt

        Returns:
            Gateway order ID

        Raises:
            GatewayUnavailable: On timeout, transport error, non-2xx status
                or an unusable response body
        """
        payload = {"amount": amount, "currency": currency, "receipt": receipt}

        try:
            response = await self.client.post(
                f"{self.api_url}/orders",
                json=payload,
                auth=(self.key_id, self._key_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Razorpay order creation timed out (receipt={receipt}): {e}")
            raise GatewayUnavailable("Payment gateway timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Razorpay order creation failed (receipt={receipt}): {e}")
            raise GatewayUnavailable("Payment gateway request failed") from e
        except ValueError as e:
            logger.error(f"Razorpay returned invalid JSON (receipt={receipt}): {e}")
            raise GatewayUnavailable("Payment gateway returned an invalid response") from e

        gateway_order_id = data.get("id") if isinstance(data, dict) else None
        if not gateway_order_id:
            logger.error(f"Razorpay response without order id (receipt={receipt}): {data}")
            raise GatewayUnavailable("Payment gateway returned an invalid response")

        logger.info(f"Razorpay order {gateway_order_id} created for {amount} {currency}")
        return gateway_order_id

    def verify_payment_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        """
        Check a payment signature in constant time

        Returns:
            True if the signature was produced with our shared secret
        """
        expected = compute_payment_signature(self._key_secret, gateway_order_id, gateway_payment_id)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
