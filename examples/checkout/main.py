import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from stpapi import APIClient, ClientConfig, StripeError
from stpapi.checkout import SubscriptionResponse, SubscriptionService
from stpapi.logging_config import setup_logging

setup_logging(logging.DEBUG if os.getenv("DEBUG") else logging.INFO)

load_dotenv(Path(__file__).parent.parent.parent / ".env")

CHECKOUT_BACKEND_URL = os.getenv("CHECKOUT_BACKEND_URL", "")

if not CHECKOUT_BACKEND_URL:
    print("\n❌ Error: CHECKOUT_BACKEND_URL not set in .env file")
    print("\nPlease add the URL of your checkout backend to .env file\n")
    exit(1)


class CheckoutHandler:
    def __init__(self) -> None:
        self.result: SubscriptionResponse | None = None
        self.error_message: str | None = None

    def on_result(self, subscription_result: SubscriptionResponse) -> None:
        self.result = subscription_result

    def on_error(self, message: str) -> None:
        self.error_message = message


async def main():
    print("Requesting checkout credentials...")
    print(f"  Backend: {CHECKOUT_BACKEND_URL}")

    service = SubscriptionService(CHECKOUT_BACKEND_URL)
    handler = CheckoutHandler()
    await service.get_subscription_token(handler)
    await service.close()

    if handler.result is None:
        print(f"\n❌ Error: {handler.error_message}")
        return

    result = handler.result
    print("\n✅ Checkout ready")
    print(f"  Customer: {result.customer}")

    async with APIClient(config=ClientConfig.from_env()) as client:
        SubscriptionService.configure_client(result, client)
        print(f"  Testmode: {client.is_testmode}")

        try:
            intent = await client.retrieve_payment_intent(result.payment_intent)
        except StripeError as e:
            print(f"\n❌ Error retrieving PaymentIntent ({e.kind.value}): {e}")
            return

        print("\n📋 PaymentIntent:")
        print(f"  Id: {intent.id}")
        print(f"  Status: {intent.status.value}")
        print(f"  Amount: {intent.amount} {intent.currency}")

        methods = await client.list_payment_methods(result.customer, result.ephemeral_key)
        print(f"\nSaved payment methods: {len(methods.payment_methods)}")
        for payment_method in methods.payment_methods:
            print(f"  {payment_method.id} ({payment_method.type.value})")
        if methods.error is not None:
            print(f"  Some payment methods could not be listed: {methods.error}")


if __name__ == "__main__":
    asyncio.run(main())
