"""
ChorePlan Assistant — Telegram Bot.

Telegram is the only user interface. Users pick chores from the catalog,
choose how many months to plan for, and ask the LLM for a schedule, which
comes back as a weekly grid plus a list of Google Calendar links.

Security-first: unauthorized users are silently ignored.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Coroutine
from zoneinfo import ZoneInfo

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, LinkPreviewOptions, Message, Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
)

from src.bot.formatting import format_chore_list, format_weekly_grid, split_message
from src.config import settings
from src.core.planner import filter_catalog, generate_plan, toggle_selection

if TYPE_CHECKING:
    from src.data.db import CatalogDB, CredentialStore
    from src.data.models import ChoreCatalogEntry

logger = logging.getLogger(__name__)

API_KEY_CREDENTIAL = "llm_api_key"


# ---------------------------------------------------------------------------
# Security: silent-ignore decorator
# ---------------------------------------------------------------------------


def authorized_only(
    func: Callable[..., Coroutine[Any, Any, None]],
) -> Callable[..., Coroutine[Any, Any, None]]:
    """Decorator that silently ignores updates from unauthorized users.

    Does NOT send any response to strangers — the bot must not reveal
    its existence to unauthorized users.
    """

    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = update.effective_user
        if user is None or user.id not in settings.ALLOWED_USER_IDS:
            uid = user.id if user else "unknown"
            logger.warning("Unauthorized access attempt from user_id=%s", uid)
            return  # Silent ignore
        return await func(update, context)

    return wrapper


# ---------------------------------------------------------------------------
# Session state helpers
# ---------------------------------------------------------------------------


def _selected(context: ContextTypes.DEFAULT_TYPE) -> list[ChoreCatalogEntry]:
    return context.user_data.setdefault("selected", [])


def _plan_months(context: ContextTypes.DEFAULT_TYPE) -> int:
    return context.user_data.get("plan_months", settings.DEFAULT_PLAN_MONTHS)


def _current_api_key(context: ContextTypes.DEFAULT_TYPE) -> str | None:
    """The key set via /apikey, falling back to LLM_API_KEY from .env."""
    return context.bot_data.get("api_key") or settings.LLM_API_KEY or None


def _load_catalog(context: ContextTypes.DEFAULT_TYPE) -> list[ChoreCatalogEntry]:
    """Read the catalog; a failed read is logged and treated as empty."""
    catalog: CatalogDB = context.bot_data["catalog"]
    try:
        return catalog.list_all()
    except Exception as exc:
        logger.error("Error fetching chores: %s", exc)
        return []


def _catalog_keyboard(
    entries: list[ChoreCatalogEntry], selected: list[ChoreCatalogEntry],
) -> InlineKeyboardMarkup:
    """Two chores per row; selected ones are ticked."""
    selected_ids = {s.id for s in selected}
    buttons = [
        InlineKeyboardButton(
            f"{'✅ ' if e.id in selected_ids else ''}{e.icon} {e.name}",
            callback_data=f"pick:{e.id}",
        )
        for e in entries
    ]
    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    rows.append([
        InlineKeyboardButton("🧹 Clear", callback_data="clear"),
        InlineKeyboardButton("✨ Generate plan", callback_data="plan"),
    ])
    return InlineKeyboardMarkup(rows)


def _selection_summary(selected: list[ChoreCatalogEntry], months: int) -> str:
    if not selected:
        return "Tap chores to select them."
    names = ", ".join(f"{s.icon} {s.name}" for s in selected)
    return f"Selected ({len(selected)}): {names}\nPlan length: {months} month(s)"


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


@authorized_only
async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start — welcome message."""
    await update.message.reply_text(
        "Welcome to *ChorePlan Assistant*!\n\n"
        "I turn a list of household chores into a weekly plan:\n"
        "• Use /chores to pick chores from the catalog\n"
        "• Use /months to choose how long the plan should run\n"
        "• Use /apikey to store your LLM API key\n"
        "• Use /plan to generate the schedule\n\n"
        "Type /help for the full command list.",
        parse_mode="Markdown",
    )


@authorized_only
async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help — list available commands."""
    await update.message.reply_text(
        "*Available commands:*\n"
        "/chores [search] — Pick chores (search needs 3+ letters)\n"
        "/selected — Show the current selection\n"
        "/clear — Clear the selection\n"
        "/months <n> — Plan for the next n months\n"
        "/apikey <key> — Store your API key (no key clears it)\n"
        "/plan — Generate the chore schedule\n"
        "/help — Show this message",
        parse_mode="Markdown",
    )


@authorized_only
async def cmd_chores(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /chores [search] — show the catalog as toggle buttons."""
    search = " ".join(context.args or [])
    context.user_data["search"] = search

    entries = filter_catalog(_load_catalog(context), search)
    if not entries:
        if search.strip():
            await update.message.reply_text(f'No chores found matching "{search}".')
        else:
            await update.message.reply_text("No chores in the catalog.")
        return

    selected = _selected(context)
    await update.message.reply_text(
        _selection_summary(selected, _plan_months(context)),
        reply_markup=_catalog_keyboard(entries, selected),
    )


@authorized_only
async def cmd_selected(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /selected — show the current selection."""
    await update.message.reply_text(
        _selection_summary(_selected(context), _plan_months(context))
    )


@authorized_only
async def cmd_clear(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /clear — empty the selection."""
    context.user_data["selected"] = []
    await update.message.reply_text("Selection cleared.")


@authorized_only
async def cmd_months(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /months <n> — set the plan duration."""
    usage = f"Usage: /months <1-{settings.MAX_PLAN_MONTHS}>"
    if not context.args:
        await update.message.reply_text(
            f"Current plan length: {_plan_months(context)} month(s).\n{usage}"
        )
        return

    try:
        months = int(context.args[0])
    except ValueError:
        await update.message.reply_text(usage)
        return

    if not 1 <= months <= settings.MAX_PLAN_MONTHS:
        await update.message.reply_text(usage)
        return

    context.user_data["plan_months"] = months
    await update.message.reply_text(f"Plan length set to {months} month(s).")


@authorized_only
async def cmd_apikey(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /apikey [key] — store or clear the LLM API key."""
    credentials: CredentialStore = context.bot_data["credentials"]
    key = " ".join(context.args or []).strip()

    try:
        credentials.set(API_KEY_CREDENTIAL, key)
    except Exception as exc:
        logger.error("/apikey error: %s", exc)
        await update.message.reply_text("Couldn't save the API key. Please try again.")
        return
    context.bot_data["api_key"] = key or None

    # Don't leave the key sitting in the chat history
    try:
        await update.message.delete()
    except Exception as exc:
        logger.warning("Couldn't delete /apikey message: %s", exc)

    if key:
        await update.effective_chat.send_message("🔑 API key saved.")
    else:
        await update.effective_chat.send_message("API key cleared.")


@authorized_only
async def cmd_plan(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /plan — generate the schedule for the current selection."""
    await _run_plan(update.message, context)


# ---------------------------------------------------------------------------
# Callback handlers
# ---------------------------------------------------------------------------


@authorized_only
async def _handle_pick_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Toggle a chore when its button is tapped, then redraw the keyboard."""
    query = update.callback_query
    await query.answer()

    entry_id = int(query.data.split(":")[1])
    catalog: CatalogDB = context.bot_data["catalog"]
    try:
        entry = catalog.get_entry(entry_id)
    except Exception as exc:
        logger.error("Error fetching chore #%d: %s", entry_id, exc)
        entry = None
    if entry is None:
        await query.edit_message_text("That chore is no longer in the catalog.")
        return

    selected = toggle_selection(_selected(context), entry)
    context.user_data["selected"] = selected

    entries = filter_catalog(_load_catalog(context), context.user_data.get("search", ""))
    await query.edit_message_text(
        _selection_summary(selected, _plan_months(context)),
        reply_markup=_catalog_keyboard(entries, selected),
    )


@authorized_only
async def _handle_clear_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    await query.answer()

    context.user_data["selected"] = []
    entries = filter_catalog(_load_catalog(context), context.user_data.get("search", ""))
    await query.edit_message_text(
        _selection_summary([], _plan_months(context)),
        reply_markup=_catalog_keyboard(entries, []),
    )


@authorized_only
async def _handle_plan_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    await query.answer()
    await _run_plan(query.message, context)


# ---------------------------------------------------------------------------
# Plan generation
# ---------------------------------------------------------------------------


async def _run_plan(message: Message, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Generate a plan and reply with the weekly grid and the detailed list.

    Only one request per user may be in flight; the busy flag is cleared
    whatever the outcome.
    """
    if context.user_data.get("busy"):
        await message.reply_text("⏳ Still working on your previous plan. Please wait.")
        return

    selected = list(_selected(context))
    if not selected:
        await message.reply_text("Select at least one chore first. Use /chores.")
        return

    months = _plan_months(context)
    context.user_data["busy"] = True
    context.user_data.pop("plan", None)
    try:
        await message.reply_text(f"Organizing {len(selected)} chore(s) for {months} month(s)...")
        result = await generate_plan(
            selected, months, _current_api_key(context), max_tokens=settings.LLM_MAX_TOKENS,
        )
    finally:
        context.user_data["busy"] = False

    context.user_data["plan"] = result

    if not result.ok:
        for chunk in split_message(result.error):
            await message.reply_text(chunk)
        return

    now = datetime.now(ZoneInfo(settings.TIMEZONE))
    for chunk in split_message(format_weekly_grid(result.weekly)):
        await message.reply_text(chunk, parse_mode="HTML")
    for chunk in split_message(format_chore_list(result.chores, months, now=now)):
        await message.reply_text(
            chunk,
            parse_mode="HTML",
            link_preview_options=LinkPreviewOptions(is_disabled=True),
        )


# ---------------------------------------------------------------------------
# Application wiring
# ---------------------------------------------------------------------------


def build_app(
    catalog: CatalogDB | None = None,
    credentials: CredentialStore | None = None,
) -> Application:
    """Build and configure the Telegram Application with all handlers.

    Args:
        catalog: Chore catalog storage. Defaults to CatalogDB at DATABASE_PATH,
                 seeded with the default chores when empty.
        credentials: Credential storage. Defaults to CredentialStore at DATABASE_PATH.
    """
    from src.data.db import CatalogDB, CredentialStore

    app = ApplicationBuilder().token(settings.TELEGRAM_BOT_TOKEN).build()

    if catalog is None:
        catalog = CatalogDB()
        catalog.seed_defaults()
    if credentials is None:
        credentials = CredentialStore()

    # Store dependencies in bot_data for handler access
    app.bot_data["catalog"] = catalog
    app.bot_data["credentials"] = credentials
    app.bot_data["api_key"] = credentials.get(API_KEY_CREDENTIAL)

    # Commands
    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("chores", cmd_chores))
    app.add_handler(CommandHandler("selected", cmd_selected))
    app.add_handler(CommandHandler("clear", cmd_clear))
    app.add_handler(CommandHandler("months", cmd_months))
    app.add_handler(CommandHandler("apikey", cmd_apikey))
    app.add_handler(CommandHandler("plan", cmd_plan))

    # Inline keyboard
    app.add_handler(CallbackQueryHandler(_handle_pick_callback, pattern=r"^pick:\d+$"))
    app.add_handler(CallbackQueryHandler(_handle_clear_callback, pattern=r"^clear$"))
    app.add_handler(CallbackQueryHandler(_handle_plan_callback, pattern=r"^plan$"))

    logger.info("Telegram bot application built with %d handlers", len(app.handlers[0]))
    return app


def main() -> None:
    """Entry point: build the app and start polling."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Starting ChorePlan Assistant bot...")
    app = build_app()
    app.run_polling()


if __name__ == "__main__":
    main()
