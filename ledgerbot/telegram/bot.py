from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Optional

from telegram import BotCommand, Update
from telegram.ext import AIORateLimiter, Application, TypeHandler

from ..config import Settings, get_settings
from ..db import SessionLocal, engine, init_db
from ..utils.logging import configure_logging
from .dispatcher import UpdateDispatcher
from .states import build_state_graph
from .transport import TelegramTransport

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = ["message", "callback_query"]

BOT_COMMANDS = [
    BotCommand("start", "Show welcome message"),
    BotCommand("create", "Record a transfer: from to amount description"),
    BotCommand("list", "Browse the transfers of a day"),
]


def _create_application(
    settings: Settings,
    *,
    post_init: Optional[Callable[[Application], Awaitable[None]]] = None,
    post_shutdown: Optional[Callable[[Application], Awaitable[None]]] = None,
) -> Application:
    builder = (
        Application.builder()
        .token(settings.telegram_bot_token)
        .rate_limiter(AIORateLimiter())
        .update_queue(asyncio.Queue(maxsize=settings.update_queue_size))
        .concurrent_updates(False)
    )
    if post_init is not None:
        builder = builder.post_init(post_init)
    if post_shutdown is not None:
        builder = builder.post_shutdown(post_shutdown)
    application = builder.build()

    dispatcher = UpdateDispatcher(
        build_state_graph(),
        SessionLocal,
        TelegramTransport(application.bot),
        settings.operator_id,
    )
    application.add_handler(TypeHandler(Update, dispatcher.handle))
    return application


async def _register_commands(application: Application) -> None:
    try:
        await application.bot.set_my_commands(BOT_COMMANDS)
    except Exception:
        logger.exception("Failed to set Telegram command list.")


_application: Application | None = None
_lock = asyncio.Lock()


async def init_bot() -> None:
    """Initialise the Telegram bot in webhook mode."""
    settings = get_settings()
    if not settings.telegram_bot_token or not settings.operator_id:
        logger.info("Telegram bot token or operator id not configured; skipping bot initialisation.")
        return

    async with _lock:
        global _application
        if _application is not None:
            return

        application = _create_application(settings)
        try:
            await application.initialize()
            await application.start()
            await _register_commands(application)
            if settings.telegram_register_webhook_on_start:
                if not settings.backend_base_url or not settings.telegram_webhook_secret:
                    logger.warning(
                        "BACKEND_BASE_URL or TELEGRAM_WEBHOOK_SECRET missing; not registering webhook."
                    )
                else:
                    webhook_url = (
                        str(settings.backend_base_url).rstrip("/")
                        + f"/api/telegram/webhook/{settings.telegram_webhook_secret}"
                    )
                    await application.bot.set_webhook(
                        url=webhook_url,
                        drop_pending_updates=False,
                        allowed_updates=ALLOWED_UPDATES,
                    )
                    logger.info("Telegram webhook configured at %s", webhook_url)
        except Exception:
            logger.exception("Failed to initialise Telegram bot; bot disabled for this run.")
            with contextlib.suppress(Exception):
                await application.stop()
            with contextlib.suppress(Exception):
                await application.shutdown()
            return

        _application = application


async def handle_update(payload: dict[str, Any]) -> None:
    """Queue a Telegram update forwarded by FastAPI.

    The application's update loop is the only consumer of the queue, so
    updates are processed in arrival order, one at a time.
    """
    async with _lock:
        if _application is None:
            raise RuntimeError("Telegram bot is not initialised.")
        application = _application
    update = Update.de_json(payload, application.bot)
    await application.update_queue.put(update)


async def shutdown_bot() -> None:
    """Tear down the Telegram bot."""
    async with _lock:
        global _application
        if _application is None:
            return
        await _application.stop()
        await _application.shutdown()
        _application = None


async def _polling_post_init(application: Application) -> None:
    await init_db()
    await _register_commands(application)


async def _polling_post_shutdown(application: Application) -> None:
    await engine.dispose()


def run_polling() -> None:
    """Long-poll Telegram until the process is stopped."""
    settings = get_settings()
    configure_logging(settings.log_level)
    if not settings.telegram_bot_token:
        raise SystemExit("TELEGRAM_BOT_TOKEN is required")
    if not settings.operator_id:
        raise SystemExit("OPERATOR_ID is required")

    application = _create_application(
        settings,
        post_init=_polling_post_init,
        post_shutdown=_polling_post_shutdown,
    )
    logger.info("Starting long polling for operator %s", settings.operator_id)
    application.run_polling(allowed_updates=ALLOWED_UPDATES)
