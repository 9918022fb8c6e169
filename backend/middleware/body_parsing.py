# =============================================================================
# backend/middleware/body_parsing.py - Request Body Parsing
# =============================================================================
# Parses request bodies before any route handler runs:
# - application/json (and */*+json): strict JSON, objects or arrays only
# - application/x-www-form-urlencoded: extended mode, brackets in keys
#   build nested dicts and lists
#
# Parsed values land on request.state.json_body / request.state.form_body.
# A body that cannot be parsed is answered here (400, 413 or 415) and never
# reaches the routes. Rejections are logged as errors outside test mode.
# =============================================================================

import json
import logging
import re
from typing import Any
from urllib.parse import parse_qsl

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from backend.exceptions import should_log_errors

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"

DEFAULT_BODY_LIMIT = 100 * 1024
DEFAULT_PARAMETER_LIMIT = 1000
DEFAULT_DEPTH = 5

_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


class BodyParseError(Exception):
    """Raised when a request body is rejected by one of the parsers."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


# =============================================================================
# JSON
# =============================================================================

def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"Unexpected token {name}")


def parse_json_body(body: bytes, charset: str | None = None) -> Any:
    """
    Parse a JSON request body in strict mode.

    An empty body parses to {}. Only objects and arrays are accepted at
    the top level.

    Raises:
        BodyParseError: 415 for a non-UTF charset, 400 for anything else
    """
    charset = (charset or "utf-8").lower()
    if not charset.startswith("utf-"):
        raise BodyParseError(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            f"Unsupported charset \"{charset.upper()}\"",
        )

    try:
        text = body.decode(charset)
    except (LookupError, UnicodeDecodeError) as e:
        raise BodyParseError(status.HTTP_400_BAD_REQUEST, f"Invalid body encoding: {e}") from e

    text = text.lstrip("\ufeff")
    if not text.strip():
        return {}

    first = text.lstrip()[0]
    if first not in "{[":
        raise BodyParseError(
            status.HTTP_400_BAD_REQUEST,
            f"Unexpected token {first} in JSON: only objects and arrays are accepted",
        )

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise BodyParseError(status.HTTP_400_BAD_REQUEST, f"Malformed JSON body: {e}") from e
    except RecursionError as e:
        raise BodyParseError(status.HTTP_400_BAD_REQUEST, "Malformed JSON body: nested too deeply") from e


# =============================================================================
# URL-encoded (extended)
# =============================================================================

def _split_key(key: str, depth: int) -> list[str]:
    """
    Split "a[b][c]" into ["a", "b", "c"].

    At most `depth` bracket segments are split off; whatever follows stays
    together as one literal key.
    """
    bracket = key.find("[")
    if bracket <= 0:
        return [key]

    segments = [key[:bracket]]
    rest = key[bracket:]
    pos = 0
    while len(segments) <= depth:
        match = _BRACKET_SEGMENT.match(rest, pos)
        if not match:
            break
        segments.append(match.group(1))
        pos = match.end()

    if len(segments) == 1:
        return [key]
    if pos < len(rest):
        segments.append(rest[pos:])
    return segments


def _is_index(key: str) -> bool:
    # ASCII digits only: "²".isdigit() is True but int("²") fails
    return key.isascii() and key.isdigit()


def _next_index(node: dict[str, Any]) -> str:
    indices = [int(k) for k in node if _is_index(k)]
    return str(max(indices) + 1) if indices else "0"


def _insert(root: dict[str, Any], segments: list[str], value: str) -> None:
    node = root
    for position, segment in enumerate(segments):
        if segment == "" and position > 0:
            segment = _next_index(node)

        if position == len(segments) - 1:
            if segment not in node:
                node[segment] = value
            elif isinstance(node[segment], dict):
                existing = node[segment]
                existing[_next_index(existing)] = value
            else:
                # Repeated key: a=1&a=2
                node[segment] = {"0": node[segment], "1": value}
            return

        child = node.get(segment)
        if not isinstance(child, dict):
            child = {} if child is None else {"0": child}
            node[segment] = child
        node = child


def _compact(value: Any) -> Any:
    """Turn dicts keyed only by indices into lists, in index order."""
    if not isinstance(value, dict):
        return value
    items = {k: _compact(v) for k, v in value.items()}
    if items and all(_is_index(k) for k in items):
        return [items[k] for k in sorted(items, key=int)]
    return items


def parse_form_body(
    body: bytes,
    charset: str | None = None,
    parameter_limit: int = DEFAULT_PARAMETER_LIMIT,
    depth: int = DEFAULT_DEPTH,
) -> dict[str, Any]:
    """
    Parse a URL-encoded body into nested structures.

    Example:
        "user[name]=ada&tags[]=x&tags[]=y"
        -> {"user": {"name": "ada"}, "tags": ["x", "y"]}

    Raises:
        BodyParseError: 415 for a non UTF-8 charset, 413 for too many
            parameters, 400 for undecodable bytes
    """
    charset = (charset or "utf-8").lower()
    if charset != "utf-8":
        raise BodyParseError(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            f"Unsupported charset \"{charset.upper()}\"",
        )

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BodyParseError(status.HTTP_400_BAD_REQUEST, f"Invalid body encoding: {e}") from e

    try:
        pairs = parse_qsl(text, keep_blank_values=True, max_num_fields=parameter_limit)
    except ValueError as e:
        raise BodyParseError(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Too many parameters") from e

    root: dict[str, Any] = {}
    for key, value in pairs:
        _insert(root, _split_key(key, depth), value)
    return {key: _compact(value) for key, value in root.items()}


# =============================================================================
# Middleware
# =============================================================================

def _content_type(request: Request) -> tuple[str, str | None]:
    """Return (media type, charset) from the Content-Type header."""
    header = request.headers.get("content-type", "")
    media_type, _, params = header.partition(";")
    charset = None
    for param in params.split(";"):
        name, _, value = param.strip().partition("=")
        if name.lower() == "charset" and value:
            charset = value.strip().strip('"')
    return media_type.strip().lower(), charset


class BodyParsingMiddleware(BaseHTTPMiddleware):
    """
    Parse JSON and URL-encoded bodies before routing.

    Requests with any other content type pass through untouched.
    """

    def __init__(
        self,
        app,
        max_body_size: int = DEFAULT_BODY_LIMIT,
        parameter_limit: int = DEFAULT_PARAMETER_LIMIT,
        depth: int = DEFAULT_DEPTH,
    ):
        super().__init__(app)
        self.max_body_size = max_body_size
        self.parameter_limit = parameter_limit
        self.depth = depth

    async def dispatch(self, request: Request, call_next):
        media_type, charset = _content_type(request)
        is_json = media_type == JSON_MEDIA_TYPE or media_type.endswith("+json")
        is_form = media_type == FORM_MEDIA_TYPE
        if not (is_json or is_form):
            return await call_next(request)

        try:
            body = await self._read_body(request)
            if is_json:
                request.state.json_body = parse_json_body(body, charset)
            else:
                request.state.form_body = parse_form_body(
                    body, charset, self.parameter_limit, self.depth
                )
        except BodyParseError as e:
            if should_log_errors(request):
                logger.error(
                    f"Rejected body on {request.method} {request.url.path} -> {e.status_code}: {e.detail}",
                    exc_info=e,
                )
            return JSONResponse(status_code=e.status_code, content={"detail": e.detail})

        return await call_next(request)

    async def _read_body(self, request: Request) -> bytes:
        declared = request.headers.get("content-length", "")
        if _is_index(declared) and int(declared) > self.max_body_size:
            raise BodyParseError(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request entity too large")

        body = await request.body()
        if len(body) > self.max_body_size:
            raise BodyParseError(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request entity too large")
        return body
