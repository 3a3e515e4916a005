"""Inbound HTTP trigger listener for the automation system."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from aiohttp import web

from partner_deals.dispatch.dispatcher import CommandDispatcher
from partner_deals.errors import (
    AlreadyClaimedError,
    ClaimInProgressError,
    DealClosedError,
    NoBroadcastTargetError,
    NotFoundError,
    ValidationError,
)

log = logging.getLogger(__name__)

DISPATCHER_KEY = web.AppKey("dispatcher", CommandDispatcher)

_CONFLICTS = (AlreadyClaimedError, DealClosedError, ClaimInProgressError)


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Map the exception taxonomy onto HTTP statuses."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except ValidationError as exc:
        return _error(str(exc), 400)
    except NotFoundError as exc:
        return _error(str(exc), 404)
    except _CONFLICTS as exc:
        return _error(str(exc), 409)
    except NoBroadcastTargetError as exc:
        log.error("%s %s: %s", request.method, request.path, exc)
        return _error(str(exc), 500)
    except Exception:
        log.error("Error in %s %s", request.method, request.path, exc_info=True)
        return _error("Internal error.", 500)


async def _payload(request: web.Request) -> dict[str, Any]:
    if not request.can_read_body:
        return {}
    try:
        data = await request.json()
    except json.JSONDecodeError:
        raise ValidationError("Request body must be JSON.") from None
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


# ── Handlers ───────────────────────────────────────────


async def handle_root(request: web.Request) -> web.Response:
    return web.Response(text="Partner Deal Bot OK")


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"ok": True, "ts": datetime.now(timezone.utc).isoformat()})


async def handle_create_deal(request: web.Request) -> web.Response:
    result = await request.app[DISPATCHER_KEY].create_deal(await _payload(request))
    return web.json_response({"ok": True, "messageIds": result.message_ids})


async def handle_create_offer_deal(request: web.Request) -> web.Response:
    result = await request.app[DISPATCHER_KEY].create_deal(
        await _payload(request), offer_only=True
    )
    return web.json_response({"ok": True, "messageIds": result.message_ids})


async def handle_disable_deal(request: web.Request) -> web.Response:
    report = await request.app[DISPATCHER_KEY].disable_deal(await _payload(request))
    body: dict[str, Any] = {"ok": True, "skipped": report.skipped}
    if report.fanout is not None:
        body["disabled"] = report.fanout.disabled
        body["missing"] = report.fanout.missing
    return web.json_response(body)


async def handle_interface_claim(request: web.Request) -> web.Response:
    receipt = await request.app[DISPATCHER_KEY].claim_from_automation(
        await _payload(request)
    )
    return web.json_response(
        {
            "ok": True,
            "message": (
                f"Deal claimed for {receipt.product_name} ({receipt.size})"
                f" – seller {receipt.seller_code}"
            ),
            "inventoryRecordId": receipt.inventory_record_id,
        }
    )


def build_app(dispatcher: CommandDispatcher) -> web.Application:
    app = web.Application(middlewares=[error_middleware], client_max_size=1024**2)
    app[DISPATCHER_KEY] = dispatcher
    app.router.add_get("/", handle_root)
    app.router.add_get("/health", handle_health)
    app.router.add_post("/partner-deal", handle_create_deal)
    app.router.add_post("/partner-offer-deal", handle_create_offer_deal)
    app.router.add_post("/partner-deal/disable", handle_disable_deal)
    app.router.add_post("/interface-claim", handle_interface_claim)
    return app


class HttpListener:
    """Runs the trigger app on a TCP site inside the current event loop."""

    def __init__(self, dispatcher: CommandDispatcher, host: str = "0.0.0.0", port: int = 10000) -> None:
        self._app = build_app(dispatcher)
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()
        log.info("HTTP listener running on %s:%d", self._host, self._port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
