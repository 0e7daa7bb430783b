"""
APIClient - façade over encoder, transport and decoder for every endpoint
"""

import asyncio
import json
import logging
import threading
from typing import Any, Awaitable, Iterable, Mapping, TypeVar

from stpapi.config import APIConfig, ClientConfig
from stpapi.decoder import decode_response
from stpapi.dispatch import Completion, CompletionDispatcher
from stpapi.encoding import (
    augment_nested_hash,
    params_adding_expand,
    params_adding_payment_user_agent,
    to_parameter_tree,
)
from stpapi.exceptions import (
    ClientSecretFormatError,
    InvalidPublishableKeyError,
    StripeError,
    ValidationError,
)
from stpapi.headers import ClientIdentity, default_headers
from stpapi.logging_config import redact_secret
from stpapi.multipart import generate_boundary, multipart_content_type, multipart_form_data
from stpapi.params import (
    BankAccountParams,
    CardParams,
    ConnectAccountParams,
    PaymentIntentParams,
    PaymentMethodParams,
    SetupIntentConfirmParams,
    SourceParams,
    id_from_client_secret,
)
from stpapi.polling import PollerRegistry, SourceCompletion, SourcePoller
from stpapi.telemetry import AnalyticsClient, TelemetryClient, token_type_from_parameters
from stpapi.transport import APIRequest, RawResponse, Transport
from stpapi.types import (
    AppInfo,
    CardBINMetadata,
    Customer,
    EmptyResponse,
    EphemeralKey,
    File,
    FilePurpose,
    FPXBankStatusResponse,
    PaymentIntent,
    PaymentMethod,
    PaymentMethodListResponse,
    PaymentMethodsResult,
    PaymentMethodType,
    SetupIntent,
    Source,
    StripeObject,
    ThreeDS2AuthenticateResponse,
    Token,
)
from stpapi.uploads import (
    ImageConstraintPolicy,
    RejectOversizePolicy,
    max_bytes_for_purpose,
    upload_parts,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=StripeObject)


class APIClient:
    """
    A client for making connections to the Stripe API.

    Every networked operation is a coroutine that returns the decoded object
    or raises a StripeError. Use ``run_with_completion`` to receive the
    outcome as a ``(result, error)`` callback on the designated loop instead.
    """

    _shared: "APIClient | None" = None
    _shared_lock = threading.Lock()
    _did_show_testmode_notice = False

    def __init__(
        self,
        publishable_key: str | None = None,
        config: ClientConfig | None = None,
        http_client: Any = None,
        dispatcher: CompletionDispatcher | None = None,
        telemetry: TelemetryClient | None = None,
        analytics: AnalyticsClient | None = None,
        upload_policy: ImageConstraintPolicy | None = None,
    ) -> None:
        """
        Initialize API client.

        Args:
            publishable_key: Publishable key; falls back to the process default
            config: Client settings (defaults to ``ClientConfig()``)
            http_client: httpx.AsyncClient to share instead of creating one
            dispatcher: Loop on which completion callbacks are delivered
            telemetry: Telemetry client (defaults to one honoring config.telemetry_enabled)
            analytics: Analytics client holding product usage tags
            upload_policy: Byte budget policy for file uploads
        """
        self.config = config or ClientConfig()
        self.identity = ClientIdentity()
        if publishable_key is not None:
            self.publishable_key = publishable_key
        self.dispatcher = dispatcher or CompletionDispatcher()
        self.telemetry = telemetry or TelemetryClient(
            enabled=self.config.telemetry_enabled, url=self.config.telemetry_url
        )
        self.analytics = analytics or AnalyticsClient()
        self.upload_policy = upload_policy or RejectOversizePolicy()
        self._transport = Transport(timeout=self.config.timeout, http_client=http_client)
        self._pollers = PollerRegistry()

    @classmethod
    def shared(cls) -> "APIClient":
        """Process-wide client, created on first use"""
        with cls._shared_lock:
            if cls._shared is None:
                cls._shared = cls()
            return cls._shared

    @classmethod
    def set_shared(cls, client: "APIClient | None") -> None:
        """Replace the process-wide client (None resets it)"""
        with cls._shared_lock:
            cls._shared = client

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Stop all pollers and close the connection pool"""
        self._pollers.stop_all()
        await self.telemetry.drain()
        await self._transport.close()

    # MARK: Identity

    @property
    def publishable_key(self) -> str | None:
        """The client's publishable key, else the process-wide default"""
        return self.identity.publishable_key

    @publishable_key.setter
    def publishable_key(self, value: str | None) -> None:
        if value is not None:
            self.validate_key(value)
        self.identity.api_key = value

    @property
    def stripe_account(self) -> str | None:
        """Connected account on whose behalf requests are made"""
        return self.identity.stripe_account

    @stripe_account.setter
    def stripe_account(self, value: str | None) -> None:
        self.identity.stripe_account = value

    @property
    def app_info(self) -> AppInfo | None:
        return self.identity.app_info

    @app_info.setter
    def app_info(self, value: AppInfo | None) -> None:
        self.identity.app_info = value

    @property
    def betas(self) -> set[str]:
        """Beta flags appended to the Stripe-Version header, e.g. ``{"alipay_beta=v1"}``"""
        return self.identity.betas

    @betas.setter
    def betas(self, value: Iterable[str]) -> None:
        self.identity.betas = set(value)

    @property
    def is_testmode(self) -> bool:
        key = self.publishable_key
        return bool(key) and key.lower().startswith(APIConfig.TESTMODE_KEY_PREFIX)

    @classmethod
    def validate_key(cls, publishable_key: str) -> None:
        """
        Reject keys that can never be used from a client.

        Raises:
            InvalidPublishableKeyError: If the key is empty or is a secret key
        """
        if not publishable_key:
            raise InvalidPublishableKeyError(
                "You must use a valid publishable key. "
                "For more info, see https://stripe.com/docs/keys"
            )
        if publishable_key.startswith(APIConfig.SECRET_KEY_PREFIX):
            raise InvalidPublishableKeyError(
                "You are using a secret key. Use a publishable key instead. "
                "For more info, see https://stripe.com/docs/keys"
            )
        if (
            publishable_key.lower().startswith(APIConfig.TESTMODE_KEY_PREFIX)
            and not cls._did_show_testmode_notice
        ):
            logger.info(
                "You're using your Stripe testmode key. "
                "Make sure to use your livemode key when going to production!"
            )
            cls._did_show_testmode_notice = True

    def default_headers(self, ephemeral_key: EphemeralKey | str | None = None) -> dict[str, str]:
        """Headers common to all API requests for this client"""
        return default_headers(self.identity, ephemeral_key, self.config.livemode_override)

    # MARK: Request plumbing

    def _url(self, endpoint: str) -> str:
        return APIConfig.endpoint_url(self.config.api_url, endpoint)

    async def _send(self, request: APIRequest) -> RawResponse:
        return await self._transport.send(request)

    async def _perform(self, request: APIRequest, object_cls: type[T]) -> T:
        raw = await self._send(request)
        obj, error = decode_response(object_cls, raw)
        if error is not None:
            raise error
        return obj

    async def _get(
        self,
        endpoint: str,
        params: Mapping[str, Any],
        object_cls: type[T],
        ephemeral_key: EphemeralKey | str | None = None,
        url: str | None = None,
    ) -> T:
        request = APIRequest.get(
            url or self._url(endpoint), params, self.default_headers(ephemeral_key)
        )
        return await self._perform(request, object_cls)

    async def _post(
        self,
        endpoint: str,
        params: Mapping[str, Any],
        object_cls: type[T],
        ephemeral_key: EphemeralKey | str | None = None,
    ) -> T:
        request = APIRequest.post(self._url(endpoint), params, self.default_headers(ephemeral_key))
        return await self._perform(request, object_cls)

    def _with_payment_user_agent(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return params_adding_payment_user_agent(params, self.analytics.product_usage)

    def run_with_completion(
        self, operation: Awaitable[Any], completion: Completion[Any]
    ) -> Any:
        """
        Run an operation and deliver ``(result, error)`` to ``completion``
        on the designated loop.

        Example::

            client.run_with_completion(
                client.retrieve_payment_intent(secret),
                lambda intent, error: ...,
            )
        """
        return self.dispatcher.run_with_completion(operation, completion)

    # MARK: Tokens

    async def create_token_with_parameters(self, parameters: Mapping[str, Any]) -> Token:
        """
        Create a token from raw token parameters.

        Args:
            parameters: Parameter tree (e.g. ``{"card": {...}}``)

        Returns:
            Token
        """
        self.analytics.log_token_creation_attempt(token_type_from_parameters(parameters))
        prepared = self._with_payment_user_agent(parameters)
        return await self._post(APIConfig.ENDPOINT_TOKENS, prepared, Token)

    async def _create_token_with_telemetry(self, parameters: Mapping[str, Any]) -> Token:
        params = self.telemetry.add_telemetry_fields(parameters)
        self.telemetry.send_telemetry_data()
        return await self.create_token_with_parameters(params)

    async def create_token_with_card(self, card_params: CardParams) -> Token:
        """Convert card details into a token"""
        return await self._create_token_with_telemetry(to_parameter_tree(card_params))

    async def create_token_with_bank_account(self, bank_account: BankAccountParams) -> Token:
        """Convert bank account details into a token"""
        return await self._create_token_with_telemetry(to_parameter_tree(bank_account))

    async def create_token_with_personal_id_number(self, pii: str) -> Token:
        """Convert a personal identification number into a token"""
        return await self._create_token_with_telemetry({"pii": {"personal_id_number": pii}})

    async def create_token_with_ssn_last4(self, ssn_last4: str) -> Token:
        """Convert the last 4 SSN digits into a token"""
        return await self._create_token_with_telemetry({"pii": {"ssn_last_4": ssn_last4}})

    async def create_token_with_connect_account(self, account: ConnectAccountParams) -> Token:
        """Create an account token (terms-of-service acceptance, legal entity info)"""
        return await self._create_token_with_telemetry(to_parameter_tree(account))

    async def create_token_for_cvc_update(self, cvc: str) -> Token:
        """Convert a CVC into a token"""
        return await self._create_token_with_telemetry({"cvc_update": {"cvc": cvc}})

    # MARK: Upload

    async def upload_image(
        self,
        data: bytes,
        purpose: FilePurpose,
        filename: str = "image.jpg",
        content_type: str = "image/jpeg",
    ) -> File:
        """
        Upload a file for identity verification or dispute evidence.

        The data is passed through ``upload_policy`` with the byte budget for
        ``purpose`` (4MB for identity documents, 8MB for dispute evidence).

        Args:
            data: Encoded image bytes
            purpose: File purpose
            filename: Filename sent with the file part
            content_type: MIME type of the file part

        Returns:
            File
        """
        purpose = FilePurpose(purpose)
        data = self.upload_policy.fit(data, max_bytes_for_purpose(purpose), purpose)
        boundary = generate_boundary()
        body = multipart_form_data(upload_parts(data, purpose, filename, content_type), boundary)
        request = APIRequest.multipart(
            self.config.upload_url,
            body,
            multipart_content_type(boundary),
            self.default_headers(),
        )
        logger.info(f"Uploading {len(data)} bytes for purpose={purpose.value}")
        return await self._perform(request, File)

    # MARK: Sources

    async def create_source(self, source_params: SourceParams) -> Source:
        """
        Create a Source.

        To create a source on a connected account, set ``stripe_account``.
        """
        self.analytics.log_source_creation_attempt(source_params.type)
        if self.config.company_name and not source_params.redirect_merchant_name:
            source_params = source_params.model_copy(
                update={"redirect_merchant_name": self.config.company_name}
            )
        params = self.telemetry.add_telemetry_fields(to_parameter_tree(source_params))
        params = self._with_payment_user_agent(params)
        self.telemetry.send_telemetry_data()
        return await self._post(APIConfig.ENDPOINT_SOURCES, params, Source)

    async def retrieve_source(self, identifier: str, client_secret: str) -> Source:
        """Retrieve the Source with the given id, authorized by its client secret"""
        endpoint = f"{APIConfig.ENDPOINT_SOURCES}/{identifier}"
        return await self._get(endpoint, {"client_secret": client_secret}, Source)

    def start_polling_source(
        self,
        identifier: str,
        client_secret: str,
        timeout: float,
        completion: SourceCompletion,
    ) -> bool:
        """
        Poll a Source until its status is no longer ``pending``.

        ``completion`` fires once with the resolved source, or with the latest
        source and an error on timeout or fetch failure. Timeouts are capped at
        5 minutes. If a poll is already running for ``identifier`` this call
        does nothing.

        Returns:
            True if polling started, False if a poller was already active
        """

        def factory() -> SourcePoller:
            return SourcePoller(
                identifier,
                lambda: self.retrieve_source(identifier, client_secret),
                timeout,
                completion,
                self.dispatcher,
                interval=self.config.poll_interval,
                on_finish=self._pollers.discard,
            )

        return self._pollers.start(identifier, factory)

    def stop_polling_source(self, identifier: str) -> bool:
        """
        Stop polling the Source with the given id.

        The completion passed to ``start_polling_source`` will not be called.
        """
        return self._pollers.stop(identifier)

    def is_polling_source(self, identifier: str) -> bool:
        return self._pollers.is_polling(identifier)

    # MARK: Payment Intents

    async def retrieve_payment_intent(
        self, client_secret: str, expand: Iterable[str] | None = None
    ) -> PaymentIntent:
        """
        Retrieve a PaymentIntent using its client secret.

        With a user key (``uk_``), pass the PaymentIntent id instead.

        Args:
            client_secret: Client secret (or id, for user keys)
            expand: Expandable fields to expand on the result

        Returns:
            PaymentIntent

        Raises:
            ClientSecretFormatError: If ``client_secret`` is malformed
        """
        params: dict[str, Any] = {}
        if self.identity.is_user_key:
            if not client_secret.startswith("pi_"):
                raise ClientSecretFormatError("secret", "identifier")
            identifier = client_secret
        else:
            if not PaymentIntentParams.is_client_secret_valid(client_secret):
                raise ClientSecretFormatError("secret", "client secret")
            identifier = id_from_client_secret(client_secret) or ""
            params["client_secret"] = client_secret

        logger.debug(f"Retrieving PaymentIntent {identifier}")
        params = params_adding_expand(params, expand)
        endpoint = f"{APIConfig.ENDPOINT_PAYMENT_INTENTS}/{identifier}"
        return await self._get(endpoint, params, PaymentIntent)

    def _augment_intent_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        params = augment_nested_hash(
            params,
            APIConfig.SOURCE_DATA_HASH,
            lambda d: self._with_payment_user_agent(self.telemetry.add_telemetry_fields(d)),
        )
        return augment_nested_hash(
            params, APIConfig.PAYMENT_METHOD_DATA_HASH, self._with_payment_user_agent
        )

    async def confirm_payment_intent(
        self, payment_intent_params: PaymentIntentParams, expand: Iterable[str] | None = None
    ) -> PaymentIntent:
        """
        Confirm a PaymentIntent.

        Args:
            payment_intent_params: Confirmation params; ``client_secret`` is required
            expand: Expandable fields to expand on the result

        Returns:
            PaymentIntent

        Raises:
            ClientSecretFormatError: If the client secret is malformed
        """
        if not PaymentIntentParams.is_client_secret_valid(payment_intent_params.client_secret):
            raise ClientSecretFormatError("payment_intent_params.client_secret", "client secret")

        pm_params = payment_intent_params.payment_method_params
        payment_method_type = pm_params.raw_type_string if pm_params else None
        if payment_method_type is None and payment_intent_params.source_params:
            payment_method_type = payment_intent_params.source_params.type
        self.analytics.log_payment_intent_confirmation_attempt(payment_method_type)

        identifier = payment_intent_params.stripe_id or ""
        endpoint = f"{APIConfig.ENDPOINT_PAYMENT_INTENTS}/{identifier}/confirm"

        params = self._augment_intent_params(to_parameter_tree(payment_intent_params))
        params = params_adding_expand(params, expand)
        if self.identity.is_user_key:
            params.pop("client_secret", None)

        logger.info(f"Confirming PaymentIntent {identifier}")
        return await self._post(endpoint, params, PaymentIntent)

    async def cancel_3ds_authentication_for_payment_intent(
        self, payment_intent_id: str, source_id: str
    ) -> PaymentIntent:
        """Report that the web-based 3DS challenge for a PaymentIntent was canceled"""
        endpoint = f"{APIConfig.ENDPOINT_PAYMENT_INTENTS}/{payment_intent_id}/source_cancel"
        return await self._post(endpoint, {"source": source_id}, PaymentIntent)

    # MARK: Setup Intents

    async def retrieve_setup_intent(self, client_secret: str) -> SetupIntent:
        """
        Retrieve a SetupIntent using its client secret.

        Raises:
            ClientSecretFormatError: If ``client_secret`` is malformed
        """
        if not SetupIntentConfirmParams.is_client_secret_valid(client_secret):
            raise ClientSecretFormatError("secret", "client secret")
        identifier = id_from_client_secret(client_secret) or ""
        endpoint = f"{APIConfig.ENDPOINT_SETUP_INTENTS}/{identifier}"
        return await self._get(endpoint, {"client_secret": client_secret}, SetupIntent)

    async def confirm_setup_intent(
        self, setup_intent_params: SetupIntentConfirmParams
    ) -> SetupIntent:
        """
        Confirm a SetupIntent.

        Raises:
            ClientSecretFormatError: If the client secret is malformed
        """
        if not SetupIntentConfirmParams.is_client_secret_valid(setup_intent_params.client_secret):
            raise ClientSecretFormatError("setup_intent_params.client_secret", "client secret")

        pm_params = setup_intent_params.payment_method_params
        self.analytics.log_setup_intent_confirmation_attempt(
            pm_params.raw_type_string if pm_params else None
        )

        identifier = id_from_client_secret(setup_intent_params.client_secret) or ""
        endpoint = f"{APIConfig.ENDPOINT_SETUP_INTENTS}/{identifier}/confirm"
        params = self._augment_intent_params(to_parameter_tree(setup_intent_params))

        logger.info(f"Confirming SetupIntent {identifier}")
        return await self._post(endpoint, params, SetupIntent)

    async def cancel_3ds_authentication_for_setup_intent(
        self, setup_intent_id: str, source_id: str
    ) -> SetupIntent:
        """Report that the web-based 3DS challenge for a SetupIntent was canceled"""
        endpoint = f"{APIConfig.ENDPOINT_SETUP_INTENTS}/{setup_intent_id}/source_cancel"
        return await self._post(endpoint, {"source": source_id}, SetupIntent)

    # MARK: Payment Methods

    async def create_payment_method(
        self, payment_method_params: PaymentMethodParams
    ) -> PaymentMethod:
        """Create a PaymentMethod"""
        self.analytics.log_payment_method_creation_attempt(
            payment_method_params.raw_type_string
        )
        params = self._with_payment_user_agent(to_parameter_tree(payment_method_params))
        return await self._post(APIConfig.ENDPOINT_PAYMENT_METHODS, params, PaymentMethod)

    async def retrieve_fpx_bank_status(self) -> FPXBankStatusResponse:
        """Retrieve the online status of FPX banks"""
        return await self._get(
            APIConfig.ENDPOINT_FPX_STATUS,
            {"account_holder_type": "individual"},
            FPXBankStatusResponse,
        )

    # MARK: Customers

    @staticmethod
    def _customer_id(ephemeral_key: EphemeralKey) -> str:
        customer_id = ephemeral_key.customer_id
        if not customer_id:
            raise ValidationError(f"Ephemeral key {ephemeral_key.id} is not scoped to a customer")
        return customer_id

    async def retrieve_customer(self, ephemeral_key: EphemeralKey) -> Customer:
        """Retrieve the customer an ephemeral key is scoped to"""
        endpoint = f"{APIConfig.ENDPOINT_CUSTOMERS}/{self._customer_id(ephemeral_key)}"
        return await self._get(endpoint, {}, Customer, ephemeral_key=ephemeral_key)

    async def update_customer(
        self, parameters: Mapping[str, Any], ephemeral_key: EphemeralKey
    ) -> Customer:
        """Update the customer an ephemeral key is scoped to"""
        endpoint = f"{APIConfig.ENDPOINT_CUSTOMERS}/{self._customer_id(ephemeral_key)}"
        return await self._post(endpoint, parameters, Customer, ephemeral_key=ephemeral_key)

    async def attach_payment_method(
        self,
        payment_method_id: str,
        ephemeral_key: EphemeralKey | str,
        customer_id: str | None = None,
    ) -> PaymentMethod:
        """
        Attach a PaymentMethod to a customer.

        Args:
            payment_method_id: PaymentMethod to attach
            ephemeral_key: Ephemeral key object, or its bare secret
            customer_id: Required when ``ephemeral_key`` is a bare secret

        Returns:
            The attached PaymentMethod
        """
        if customer_id is None and isinstance(ephemeral_key, EphemeralKey):
            customer_id = self._customer_id(ephemeral_key)
        if not customer_id:
            raise ValidationError("A customer id is required to attach a payment method")
        endpoint = f"{APIConfig.ENDPOINT_PAYMENT_METHODS}/{payment_method_id}/attach"
        return await self._post(
            endpoint, {"customer": customer_id}, PaymentMethod, ephemeral_key=ephemeral_key
        )

    async def detach_payment_method(
        self, payment_method_id: str, ephemeral_key: EphemeralKey | str
    ) -> PaymentMethod:
        """Detach a PaymentMethod from its customer"""
        endpoint = f"{APIConfig.ENDPOINT_PAYMENT_METHODS}/{payment_method_id}/detach"
        return await self._post(endpoint, {}, PaymentMethod, ephemeral_key=ephemeral_key)

    async def list_payment_methods_for_customer(
        self, ephemeral_key: EphemeralKey
    ) -> PaymentMethodsResult:
        """List the card PaymentMethods of the customer an ephemeral key is scoped to"""
        return await self.list_payment_methods(
            self._customer_id(ephemeral_key), ephemeral_key.secret
        )

    async def list_payment_methods(
        self,
        customer_id: str,
        ephemeral_key_secret: str,
        types: Iterable[PaymentMethodType] = (PaymentMethodType.CARD,),
    ) -> PaymentMethodsResult:
        """
        List a customer's PaymentMethods across several types.

        The API lists one type per request, so one request per type is sent
        concurrently. This is a best-effort aggregate, not an atomic result:
        items are collected in completion order and ``error`` holds the last
        error observed, even if other requests succeeded.

        Args:
            customer_id: Customer to list for
            ephemeral_key_secret: Secret of an ephemeral key for the customer
            types: PaymentMethod types to include

        Returns:
            PaymentMethodsResult
        """

        async def fetch(payment_method_type: PaymentMethodType) -> PaymentMethodListResponse:
            params = {"customer": customer_id, "type": PaymentMethodType(payment_method_type)}
            return await self._get(
                APIConfig.ENDPOINT_PAYMENT_METHODS,
                params,
                PaymentMethodListResponse,
                ephemeral_key=ephemeral_key_secret,
            )

        result = PaymentMethodsResult()
        for next_done in asyncio.as_completed([fetch(t) for t in types]):
            try:
                response = await next_done
            except StripeError as e:
                logger.warning(f"Listing payment methods for {customer_id} failed: {e}")
                result.error = e
                continue
            result.payment_methods.extend(response.payment_methods)
        return result

    # MARK: 3DS2

    async def authenticate_3ds2(
        self,
        auth_request_params: Mapping[str, Any],
        source_id: str,
        return_url: str | None,
        max_timeout: int,
    ) -> ThreeDS2AuthenticateResponse:
        """
        Kick off 3DS2 authentication.

        Args:
            auth_request_params: Authentication request parameters from the 3DS2 SDK
            source_id: 3DS2 source id
            return_url: Fallback return URL (optional)
            max_timeout: Challenge timeout in minutes

        Returns:
            ThreeDS2AuthenticateResponse
        """
        app_params = dict(auth_request_params)
        app_params["deviceRenderOptions"] = {
            "sdkInterface": "03",
            "sdkUiType": ["01", "02", "03", "04", "05"],
        }
        app_params["sdkMaxTimeout"] = f"{max_timeout:02d}"

        params = {"app": json.dumps(app_params, indent=2), "source": source_id}
        if return_url is not None:
            params["fallback_return_url"] = return_url

        endpoint = f"{APIConfig.ENDPOINT_3DS2}/authenticate"
        return await self._post(endpoint, params, ThreeDS2AuthenticateResponse)

    async def complete_3ds2_authentication(self, source_id: str) -> bool:
        """
        Report that the 3DS2 challenge flow has finished.

        Returns:
            True if the API answered with HTTP 200
        """
        request = APIRequest.post(
            self._url(f"{APIConfig.ENDPOINT_3DS2}/challenge_complete"),
            {"source": source_id},
            self.default_headers(),
        )
        raw = await self._send(request)
        _, error = decode_response(EmptyResponse, raw)
        if error is not None:
            raise error
        return raw.status_code == 200

    # MARK: Card metadata

    async def retrieve_card_bin_metadata(self, bin_prefix: str) -> CardBINMetadata:
        """
        Retrieve possible BIN ranges for a 6-digit BIN prefix.

        Raises:
            ValidationError: If ``bin_prefix`` is not 6 digits
        """
        if len(bin_prefix) != 6 or not bin_prefix.isdigit():
            raise ValidationError("Requests can only be made with 6-digit BIN prefixes.")
        return await self._get(
            "",
            {"bin_prefix": bin_prefix},
            CardBINMetadata,
            url=self.config.card_metadata_url,
        )

    def __repr__(self) -> str:
        return (
            f"APIClient(publishable_key={redact_secret(self.publishable_key)!r}, "
            f"stripe_account={self.stripe_account!r})"
        )
