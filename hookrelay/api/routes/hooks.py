"""POST /{provider}/hooks: inbound provider webhooks.

Always answers 200 so the provider never disables the subscription because
of subscriber-side outages.  The body and headers are relayed as raw bytes since
subscribers verify the provider signature against the exact payload.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from starlette.concurrency import run_in_threadpool

from hookrelay.api.deps import get_app_settings, get_dispatcher, get_registry
from hookrelay.core.settings import Settings
from hookrelay.fanout.dispatcher import FanoutDispatcher
from hookrelay.fanout.providers import ProviderName, get_provider
from hookrelay.registry.manager import RegistryManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hooks"])


@router.post("/{provider}/hooks", summary="Relay a provider webhook to all endpoints")
async def receive_hook(
    provider: ProviderName,
    request: Request,
    background_tasks: BackgroundTasks,
    registry: RegistryManager = Depends(get_registry),
    dispatcher: FanoutDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_app_settings),
) -> None:
    body = await request.body()
    headers = request.headers.raw
    target = get_provider(provider)
    logger.info("Received %s webhook (%d bytes)", provider.value, len(body))

    if settings.fanout_in_background:
        # Snapshot now; the session is closed before background tasks run
        urls = await run_in_threadpool(registry.list)
        background_tasks.add_task(dispatcher.deliver, urls, target, headers, body)
    else:
        await dispatcher.broadcast(registry, target, headers, body)
