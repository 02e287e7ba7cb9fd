from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, NoReturn

import httpx
import structlog
from pydantic import SecretStr

from znuny_rest_client.adapters.http_util import flatten_query, timeouts_for
from znuny_rest_client.adapters.znuny.attachments import AttachmentStage, read_attachment
from znuny_rest_client.adapters.znuny.errors import (
    AuthError,
    NotFoundError,
    PlatformError,
    ServerError,
    TransportError,
)
from znuny_rest_client.adapters.znuny.models import Credentials, PendingAttachment
from znuny_rest_client.config.redact import scrub_secrets_in_text
from znuny_rest_client.config.settings import Settings
from znuny_rest_client.domain.errors import require_text
from znuny_rest_client.domain.normalize import normalize_keys
from znuny_rest_client.domain.payloads import (
    DEFAULT_COMMUNICATION_CHANNEL,
    DEFAULT_CONTENT_TYPE,
    build_article,
    build_ticket,
)
from znuny_rest_client.domain.ticket_number import format_ticket_number

log = structlog.get_logger(__name__)

_ERROR_KEYS = ("Error", "error")


class AsyncZnunyClient:
    """
    Client for the Znuny GenericTicketConnectorREST web service.

    `base_url` is the web service root, e.g.
    https://znuny.example/otrs/nph-genericinterface.pl/Webservice/GenericTicketConnectorREST

    Credentials travel inside every payload (`UserLogin`/`Password`), not in headers.
    Files staged with `stage_attachment` ride along with the next write request and are
    dropped once that request succeeds. An instance is not meant to be shared between
    concurrently running tasks.
    """

    def __init__(
        self,
        *,
        base_url: str,
        username: str,
        password: str | SecretStr,
        timeout_seconds: float = 10.0,
        verify_tls: bool = True,
        trust_env: bool = False,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        url = httpx.URL(base_url)
        if not url.scheme or not url.host:
            raise ValueError(
                "base_url must include scheme and host, e.g. "
                "https://znuny.example/otrs/nph-genericinterface.pl/Webservice/GenericTicketConnectorREST"
            )

        # Ensure a trailing slash so relative operation paths join below the web service.
        base_path = url.path.rstrip("/") + "/"
        self._base_url = url.copy_with(path=base_path)

        secret = password if isinstance(password, SecretStr) else SecretStr(password)
        self._credentials = Credentials(
            base_url=str(self._base_url),
            username=username,
            password=secret,
        )
        self._attachments = AttachmentStage()

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=timeouts_for(timeout_seconds),
            verify=verify_tls,
            trust_env=trust_env,
            follow_redirects=False,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, http_client: httpx.AsyncClient | None = None
    ) -> AsyncZnunyClient:
        znuny = settings.znuny
        return cls(
            base_url=str(znuny.base_url),
            username=znuny.username,
            password=znuny.password,
            timeout_seconds=znuny.timeout_seconds,
            verify_tls=znuny.verify_tls,
            trust_env=settings.hardening.transport.trust_env,
            http_client=http_client,
        )

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncZnunyClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None:
        await self.aclose()

    # -- attachments -----------------------------------------------------------------

    def stage_attachment(self, file_path: str | Path, file_name: str, mime_type: str) -> None:
        """Queue a file for the next create_ticket/add_article call."""
        self._attachments.add(read_attachment(file_path, file_name, mime_type))

    attach_file_to_next_request = stage_attachment

    @property
    def pending_attachments(self) -> tuple[PendingAttachment, ...]:
        return self._attachments.snapshot()

    def clear_attachments(self) -> None:
        self._attachments.clear()

    # -- operations ------------------------------------------------------------------

    async def create_ticket(
        self,
        title: str,
        customer: str,
        subject: str,
        body: str,
        from_: str | None = None,
        *,
        queue_id: int | None = None,
        queue_name: str | None = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
        communication_channel: str = DEFAULT_COMMUNICATION_CHANNEL,
        extra_ticket_data: Mapping[str, Any] | None = None,
        extra_article_data: Mapping[str, Any] | None = None,
    ) -> Any:
        """TicketCreate: `POST Ticket` with a `Ticket` and a first `Article`."""
        require_text("title", title)
        ticket = build_ticket(
            title,
            customer,
            extra_ticket_data,
            queue_id=queue_id,
            queue_name=queue_name,
        )
        article = build_article(
            title,
            subject,
            body,
            from_,
            content_type,
            communication_channel,
            extra_article_data,
        )

        result = await self.dispatch({"Ticket": ticket, "Article": article}, "Ticket")
        if isinstance(result, dict):
            log.info(
                "znuny.ticket.created",
                ticket_id=result.get("ticketId"),
                ticket_number=result.get("ticketNumber"),
            )
        return result

    async def add_article(
        self,
        ticket_id: int,
        created_by: str,
        subject: str,
        body: str,
        from_: str | None = None,
        *,
        content_type: str = DEFAULT_CONTENT_TYPE,
        communication_channel: str = DEFAULT_COMMUNICATION_CHANNEL,
        extra_article_data: Mapping[str, Any] | None = None,
    ) -> Any:
        """TicketUpdate: `PATCH Ticket/{id}` adding one article and reopening the ticket."""
        article = build_article(
            created_by,
            subject,
            body,
            from_,
            content_type,
            communication_channel,
            extra_article_data,
        )
        request_data = {
            "TicketID": ticket_id,
            "Ticket": {"State": "open"},
            "Article": article,
        }
        result = await self.dispatch(request_data, f"Ticket/{ticket_id}", "PATCH")
        log.info("znuny.article.added", ticket_id=ticket_id)
        return result

    async def get_ticket(self, ticket_id: int, extended: bool = False) -> dict[str, Any]:
        resp = await self.dispatch(
            {"Extended": int(bool(extended))}, f"Ticket/{ticket_id}", "GET"
        )

        tickets = resp.get("ticket") if isinstance(resp, dict) else None
        if not isinstance(tickets, list) or not tickets or not isinstance(tickets[0], dict):
            raise PlatformError(f"Znuny ticket response format unexpected for ticket {ticket_id}")
        return tickets[0]

    async def get_ticket_number(self, ticket_id: int) -> str:
        ticket = await self.get_ticket(ticket_id)
        number = ticket.get("ticketNumber")
        try:
            return format_ticket_number(number)
        except ValueError as exc:
            raise PlatformError(
                f"Znuny returned no usable ticket number for ticket {ticket_id}: {number!r}"
            ) from exc

    async def session_create(self) -> str:
        """Log in and return the SessionID. Useful to check that the credentials work."""
        resp = await self.dispatch({}, "Session")
        session_id = resp.get("sessionId") if isinstance(resp, dict) else None
        if not session_id:
            raise PlatformError("Znuny session response did not contain a SessionID")
        return str(session_id)

    # -- dispatch --------------------------------------------------------------------

    async def dispatch(
        self,
        payload: Mapping[str, Any],
        path: str,
        method: str = "POST",
    ) -> Any:
        """
        Send one request and return the normalized response body.

        GET requests carry the whole payload in the query string because Znuny rejects
        GET bodies (https://bugs.otrs.org/show_bug.cgi?id=14203). Every other method
        sends JSON and includes the staged attachments.
        """
        verb = method.upper()
        body: dict[str, Any] = {
            **payload,
            "UserLogin": self._credentials.username,
            "Password": self._credentials.password.get_secret_value(),
        }
        url = self._base_url.join(path.lstrip("/"))

        consumed: tuple[PendingAttachment, ...] = ()
        if verb == "GET":
            params: list[tuple[str, str]] | None = flatten_query(body)
            json_body: dict[str, Any] | None = None
        else:
            params = None
            consumed = self._attachments.snapshot()
            if consumed:
                body["Attachment"] = [item.to_wire() for item in consumed]
            json_body = body

        log.debug("znuny.request", method=verb, path=path, attachments=len(consumed))
        response = await self._request(verb, url, path=path, params=params, json=json_body)
        data = self._decode(response, path=path)
        self._raise_for_platform_error(data, path=path)

        if verb != "GET":
            self._attachments.discard(consumed)
        log.debug("znuny.response", method=verb, path=path, status=response.status_code)
        return normalize_keys(data)

    async def _request(
        self,
        method: str,
        url: httpx.URL,
        *,
        path: str,
        params: list[tuple[str, str]] | None,
        json: Any | None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(method, url, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Znuny API timeout at {path}",
                detail=scrub_secrets_in_text(str(exc)),
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(
                f"Network error talking to Znuny at {path}: {exc.__class__.__name__}",
                detail=scrub_secrets_in_text(str(exc)),
            ) from exc

        if 200 <= response.status_code < 300:
            return response

        self._raise_for_status(response, path=path)

    def _decode(self, response: httpx.Response, *, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Invalid JSON from Znuny (status={response.status_code}) at {path}",
                status_code=response.status_code,
                detail=_raw_detail(response),
            ) from exc

    def _raise_for_platform_error(self, data: Any, *, path: str) -> None:
        if not isinstance(data, Mapping):
            return

        indicator = None
        for key in _ERROR_KEYS:
            if data.get(key) is not None:
                indicator = data[key]
                break
        if indicator is None:
            return

        message: Any = None
        code: Any = None
        if isinstance(indicator, Mapping):
            message = indicator.get("ErrorMessage") or indicator.get("message")
            code = indicator.get("ErrorCode") or indicator.get("code")
        elif isinstance(indicator, str):
            message = indicator

        text = str(message) if message else "Znuny reported an error"
        log.warning("znuny.platform_error", path=path, code=code)
        raise PlatformError(text, code=str(code) if code is not None else None)

    def _raise_for_status(self, response: httpx.Response, *, path: str) -> NoReturn:
        status = response.status_code
        detail = _raw_detail(response)

        if status in (401, 403):
            raise AuthError(
                f"Znuny auth failed (status={status}) at {path}",
                status_code=status,
                detail=detail,
            )
        if status == 404:
            raise NotFoundError(
                f"Znuny resource not found (status=404) at {path}",
                status_code=status,
                detail=detail,
            )
        if status >= 500:
            raise ServerError(
                f"Znuny server error (status={status}) at {path}",
                status_code=status,
                detail=detail,
            )
        if status >= 400:
            raise TransportError(
                f"Znuny client error (status={status}) at {path}",
                status_code=status,
                detail=detail,
            )

        raise TransportError(
            f"Unexpected Znuny HTTP status={status} at {path}",
            status_code=status,
            detail=detail,
        )


def _raw_detail(response: httpx.Response) -> str:
    return scrub_secrets_in_text(response.text)
