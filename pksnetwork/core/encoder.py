"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Parameter encoding for outbound requests.

Parameters are serialized through pydantic, so dataclasses, pydantic models
and plain mappings are all accepted. URL encoding flattens the top-level
object into query items using these rules:

- ``str`` values are used as-is
- ``bool`` values become ``"true"`` / ``"false"``
- numbers use their JSON text (``1``, ``2.5``)
- ``None`` values are omitted
- nested lists and objects become compact JSON text
"""

import json
from typing import Any, Dict, List, Tuple
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from pydantic import PydanticUserError, TypeAdapter
from pydantic_core import PydanticSerializationError

from pksnetwork.core.request import ParametersEncoding
from pksnetwork.core.transport import TransportRequest
from pksnetwork.exceptions import NetworkError, NetworkErrorKind
from pksnetwork.logging_config import get_logger

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"
JSON_CONTENT_TYPE = "application/json"


def _type_adapter(parameters: Any) -> TypeAdapter:
    try:
        return TypeAdapter(type(parameters))
    except (PydanticUserError, TypeError, ValueError) as e:
        logger.error(f"Parameters of type {type(parameters).__name__} are not serializable: {e}")
        raise NetworkError(
            NetworkErrorKind.ENCODING_FAILED,
            f"Parameters of type {type(parameters).__name__} are not serializable",
        ) from e


def to_dictionary(parameters: Any) -> Dict[str, Any]:
    """
    Convert a parameters object into a JSON-compatible dictionary.

    Raises:
        NetworkError: ENCODING_FAILED if the object cannot be serialized or
            is not an object at the top level
    """
    adapter = _type_adapter(parameters)
    try:
        data = adapter.dump_python(parameters, mode="json", by_alias=True)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.error(f"Failed to serialize parameters: {e}")
        raise NetworkError(NetworkErrorKind.ENCODING_FAILED, f"Failed to serialize parameters: {e}") from e

    if not isinstance(data, dict):
        raise NetworkError(
            NetworkErrorKind.ENCODING_FAILED,
            f"Parameters must serialize to an object, got {type(data).__name__}",
        )
    return data


def to_json_bytes(parameters: Any) -> bytes:
    """Serialize a parameters object to JSON bytes."""
    adapter = _type_adapter(parameters)
    try:
        return adapter.dump_json(parameters, by_alias=True)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.error(f"Failed to serialize parameters to JSON: {e}")
        raise NetworkError(
            NetworkErrorKind.ENCODING_FAILED, f"Failed to serialize parameters to JSON: {e}"
        ) from e


def stringify_query_value(value: Any) -> str:
    """Render a JSON-compatible value as a query item value."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def to_query_items(parameters: Any) -> List[Tuple[str, str]]:
    """Flatten a parameters object into ``(name, value)`` query items."""
    return [
        (str(key), stringify_query_value(value))
        for key, value in to_dictionary(parameters).items()
        if value is not None
    ]


class ParameterEncoder:
    """Writes request parameters into a ``TransportRequest``."""

    @staticmethod
    def encode(request: TransportRequest, parameters: Any, encoding: ParametersEncoding) -> None:
        """
        Encode ``parameters`` into ``request`` using ``encoding``.

        Mutates the request's URL, body and headers; ``parameters`` is left
        untouched. A Content-Type header already present on the request is
        never overwritten.

        Args:
            request: In-progress transport request
            parameters: Parameters object
            encoding: Encoding kind

        Raises:
            NetworkError: ENCODING_FAILED or INVALID_URL
        """
        encoding = ParametersEncoding(encoding)
        if encoding is ParametersEncoding.URL_ENCODED:
            ParameterEncoder._encode_url_parameters(request, parameters)
        else:
            ParameterEncoder._encode_json_parameters(request, parameters)

    @staticmethod
    def _encode_url_parameters(request: TransportRequest, parameters: Any) -> None:
        try:
            parts = urlsplit(request.url)
        except ValueError as e:
            raise NetworkError(NetworkErrorKind.INVALID_URL, f"Invalid URL '{request.url}': {e}") from e

        query_items = to_query_items(parameters)
        if query_items:
            encoded = urlencode(query_items, quote_via=quote)
            query = f"{parts.query}&{encoded}" if parts.query else encoded
            request.url = urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))

        if request.get_header("Content-Type") is None:
            request.set_header("Content-Type", FORM_CONTENT_TYPE)

    @staticmethod
    def _encode_json_parameters(request: TransportRequest, parameters: Any) -> None:
        request.body = to_json_bytes(parameters)

        if request.get_header("Content-Type") is None:
            request.set_header("Content-Type", JSON_CONTENT_TYPE)
