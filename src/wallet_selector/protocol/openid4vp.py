"""OpenID4VP protocol plugin

Validates OpenID for Verifiable Presentations authorization requests coming
from the caller and the responses coming back from wallets.

Authorization requests arrive either as a query-string bundle
(``openid4vp://?client_id=...&request_uri=...``) or as an already decoded
parameter map. A request may carry its parameters by reference through
``request_uri``, in which case the referenced JWT-secured authorization
request (JAR) is fetched and decoded once a wallet has been chosen.
Signature verification is never done here; it is delegated to a
``JwtVerifier`` strategy when one is supplied.
"""

import base64
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlsplit

from returns.result import Failure

from wallet_selector.domain import (
    Clock,
    FetchFailed,
    InvalidDescriptor,
    InvalidParameter,
    JwtVerificationOptions,
    MissingCredentialPayload,
    MissingParameter,
    MissingPresentationMechanism,
    ResponseModeOption,
    SignatureInvalid,
    SystemClock,
    parse_verifier_result,
)
from wallet_selector.port.output import JwtVerifier, RequestObjectFetcher
from wallet_selector.protocol.base import ProtocolPlugin

logger = logging.getLogger(__name__)

PROTOCOL_ID = "openid4vp"

JAR_TYPE = "oauth-authz-req+jwt"

# Parameters serialized as JSON inside a query string
JSON_PARAMETERS = ("presentation_definition", "client_metadata", "dcql_query")

PRESENTATION_MECHANISMS = ("request_uri", "presentation_definition", "presentation_definition_uri", "dcql_query")

# Parameters forwarded to a wallet when the request is passed by value
BY_VALUE_PARAMETERS = (
    "response_uri",
    "nonce",
    "state",
    "presentation_definition",
    "presentation_definition_uri",
    "client_metadata",
    "response_mode",
    "dcql_query",
)

ACCEPTED_CLIENT_ID_SCHEME = "x509_san_dns"

DESCRIPTOR_FIELDS = ("id", "format", "path")


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _decode_segment(segment: str, name: str) -> Dict[str, Any]:
    """Base64url-decode a JWS segment into a JSON object"""
    try:
        decoded = json.loads(base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4)))
    except ValueError as e:
        raise InvalidParameter("request_uri", f"undecodable JWT {name}: {e}") from e
    if not isinstance(decoded, dict):
        raise InvalidParameter("request_uri", f"JWT {name} is not a JSON object")
    return decoded


class OpenID4VPPlugin(ProtocolPlugin):
    """
    OpenID4VP plugin.

    Args:
        fetcher: Retrieves ``request_uri`` / ``presentation_definition_uri``
            resources. Without one, by-reference parameters cannot be resolved.
        clock: Source of the preparation timestamp
    """

    def __init__(self, fetcher: Optional[RequestObjectFetcher] = None, clock: Optional[Clock] = None):
        self.fetcher = fetcher
        self.clock = clock or SystemClock()

    @property
    def id(self) -> str:
        return PROTOCOL_ID

    # ======================
    # Requests
    # ======================

    def prepare_request(self, data: Any) -> Dict[str, Any]:
        """
        Parse and validate an authorization request.

        Args:
            data: ``{"url": "openid4vp://?..."}``, a bare URL / query string,
                or a parameter map

        Returns:
            New parameter map with ``protocol`` and ``timestamp`` added

        Raises:
            InvalidParameter: Unparseable input, malformed JSON parameter or
                unknown response_mode
            MissingParameter: No client_id
            MissingPresentationMechanism: None of request_uri,
                presentation_definition, presentation_definition_uri or
                dcql_query
        """
        params = self._parse_authorization_request(data)
        self._validate_authorization_request(params)
        return {**params, "protocol": PROTOCOL_ID, "timestamp": self.clock.isoformat()}

    def _parse_authorization_request(self, data: Any) -> Dict[str, Any]:
        if isinstance(data, str):
            return self._parse_query(data)
        if not isinstance(data, Mapping):
            raise InvalidParameter("request", "OpenID4VP request data must be an object")
        url = data.get("url")
        if isinstance(url, str) and url:
            return self._parse_query(url)
        return dict(data)

    def _parse_query(self, url: str) -> Dict[str, Any]:
        query = urlsplit(url).query if "?" in url else url
        params: Dict[str, Any] = {
            name: values[0] for name, values in parse_qs(query, keep_blank_values=True).items()
        }
        for name in JSON_PARAMETERS:
            if _present(params.get(name)):
                try:
                    params[name] = json.loads(params[name])
                except ValueError as e:
                    raise InvalidParameter(name, f"malformed JSON: {e}") from e
        return params

    def _validate_authorization_request(self, params: Mapping[str, Any]) -> None:
        client_id = params.get("client_id")
        if not _present(client_id):
            raise MissingParameter("client_id")

        client_id = str(client_id)
        scheme = client_id.split(":", 1)[0]
        if scheme != ACCEPTED_CLIENT_ID_SCHEME and not client_id.startswith("https://"):
            logger.warning(
                "OpenID4VP: client_id scheme '%s' may be unsupported, expected '%s' or an https URL",
                scheme,
                ACCEPTED_CLIENT_ID_SCHEME,
            )

        if not any(_present(params.get(name)) for name in PRESENTATION_MECHANISMS):
            raise MissingPresentationMechanism()

        if _present(params.get("request_uri")):
            logger.debug("OpenID4VP: request_uri present, request object resolved after wallet selection")

        response_mode = params.get("response_mode")
        if _present(response_mode) and response_mode not in ResponseModeOption.values():
            raise InvalidParameter(
                "response_mode",
                f"{response_mode}. Must be one of: {', '.join(ResponseModeOption.values())}",
            )

    # ======================
    # By-reference parameters
    # ======================

    async def resolve_request(
        self, request: Dict[str, Any], verifier: Optional[JwtVerifier] = None
    ) -> Dict[str, Any]:
        """Merge the claims of the referenced JAR into ``request``"""
        request_uri = request.get("request_uri")
        if not _present(request_uri):
            return request
        claims = await self.handle_request_uri(str(request_uri), verifier)
        return {**request, **claims}

    async def handle_request_uri(self, uri: str, verifier: Optional[JwtVerifier] = None) -> Dict[str, Any]:
        """
        Fetch and decode a JWT-secured authorization request.

        The token is decoded, not verified; verification is delegated to
        ``verifier`` with the hints found in the token header.

        Args:
            uri: The request_uri
            verifier: Optional verification strategy

        Returns:
            JAR claims plus ``jar_header`` and a ``verified`` marker

        Raises:
            FetchFailed: The resource could not be retrieved
            InvalidParameter: Not a three-segment token, undecodable segment
                or unexpected ``typ``
            SignatureInvalid: The verifier rejected the token
        """
        token = await self._fetch_request_object(uri)

        segments = token.split(".")
        if len(segments) != 3:
            raise InvalidParameter("request_uri", "expected a compact JWT with three segments")

        header = _decode_segment(segments[0], "header")
        payload = _decode_segment(segments[1], "payload")

        typ = header.get("typ")
        if typ is not None and typ != JAR_TYPE:
            raise InvalidParameter("request_uri", f"invalid JWT type {typ}, expected {JAR_TYPE}")

        if verifier is not None:
            await self._verify(token, header, verifier)
            logger.info("OpenID4VP: request object signature verified")
        else:
            logger.warning("OpenID4VP: request object signature not verified, no verifier registered")

        return {**payload, "jar_header": header, "verified": verifier is not None}

    async def _fetch_request_object(self, uri: str) -> str:
        if self.fetcher is None:
            raise FetchFailed(uri, "no request object fetcher configured")
        result = await self.fetcher.fetch_text(uri)
        if isinstance(result, Failure):
            raise result.failure()
        return result.unwrap().strip()

    async def _verify(self, token: str, header: Mapping[str, Any], verifier: JwtVerifier) -> None:
        options = JwtVerificationOptions.from_header(header)
        try:
            result = parse_verifier_result(await verifier.verify(token, options))
        except SignatureInvalid:
            raise
        except Exception as e:
            raise SignatureInvalid(str(e)) from e
        if not result.valid:
            raise SignatureInvalid(result.error)

    async def fetch_presentation_definition(self, uri: str) -> Dict[str, Any]:
        """
        Fetch the presentation definition a ``presentation_definition_uri`` points to.

        Raises:
            FetchFailed: The resource could not be retrieved
            InvalidParameter: The document is not a JSON object
        """
        if self.fetcher is None:
            raise FetchFailed(uri, "no request object fetcher configured")
        result = await self.fetcher.fetch_json(uri)
        if isinstance(result, Failure):
            raise result.failure()
        definition = result.unwrap()
        if not isinstance(definition, dict):
            raise InvalidParameter("presentation_definition", "fetched document is not a JSON object")
        return definition

    # ======================
    # Responses
    # ======================

    def validate_response(self, response: Any) -> Any:
        """
        Validate a wallet response.

        Accepts ``{vp_token, presentation_submission?, state?}`` or
        ``{response}`` (an encrypted envelope, left opaque).

        Returns:
            The response, unchanged

        Raises:
            MissingCredentialPayload: Neither vp_token nor response
            InvalidDescriptor: Malformed presentation_submission
        """
        if not isinstance(response, Mapping):
            raise MissingCredentialPayload("Invalid OpenID4VP response")

        if not _present(response.get("vp_token")) and not _present(response.get("response")):
            raise MissingCredentialPayload()

        submission = response.get("presentation_submission")
        if _present(response.get("vp_token")) and submission is None:
            logger.warning("OpenID4VP: vp_token present but missing presentation_submission")

        if submission is not None:
            self._validate_presentation_submission(submission)

        return response

    def _validate_presentation_submission(self, submission: Any) -> None:
        if not isinstance(submission, Mapping):
            raise InvalidParameter("presentation_submission", "must be an object")
        for field in ("id", "definition_id"):
            if not _present(submission.get(field)):
                raise InvalidDescriptor(None, field)

        descriptor_map = submission.get("descriptor_map")
        if not isinstance(descriptor_map, list) or not descriptor_map:
            raise InvalidDescriptor(None, "descriptor_map")

        for index, descriptor in enumerate(descriptor_map):
            for field in DESCRIPTOR_FIELDS:
                if not isinstance(descriptor, Mapping) or not _present(descriptor.get(field)):
                    raise InvalidDescriptor(index, field)

    # ======================
    # Wallet delivery
    # ======================

    def format_for_wallet(self, request: Dict[str, Any], wallet_endpoint: str) -> Dict[str, Any]:
        """
        Encode the authorization request as a query against the wallet endpoint.

        With a ``request_uri`` only ``client_id`` and ``request_uri`` are sent;
        the wallet fetches the rest itself.
        """
        params = self._wallet_parameters(request)
        separator = "&" if urlsplit(wallet_endpoint).query else "?"
        if wallet_endpoint.endswith(("?", "&")):
            separator = ""
        return {
            "protocol": PROTOCOL_ID,
            "wallet_url": wallet_endpoint,
            "authorization_url": f"{wallet_endpoint}{separator}{urlencode(params)}",
            "request_data": request,
        }

    def _wallet_parameters(self, request: Mapping[str, Any]) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = []
        if _present(request.get("client_id")):
            params.append(("client_id", str(request["client_id"])))

        if _present(request.get("request_uri")):
            params.append(("request_uri", str(request["request_uri"])))
            return params

        for name in BY_VALUE_PARAMETERS:
            value = request.get(name)
            if not _present(value):
                continue
            if name in JSON_PARAMETERS and not isinstance(value, str):
                value = json.dumps(value, separators=(",", ":"))
            params.append((name, str(value)))
        return params

