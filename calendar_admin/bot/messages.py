"""User-facing bot texts."""
from calendar_admin.config import DATE_EXAMPLE, DATE_FORMAT_HINT

BUTTON_VIEW = "📅 View calendar"
BUTTON_BLOCK = "🔒 Block date"
BUTTON_UNBLOCK = "🔓 Unblock date"

MAIN_KEYBOARD = {
    "keyboard": [
        [{"text": BUTTON_VIEW}],
        [{"text": BUTTON_BLOCK}],
        [{"text": BUTTON_UNBLOCK}],
    ],
    "resize_keyboard": True,
}

WELCOME = "👋 Welcome! Use the menu to manage blocked dates."
ASK_DATE = f"📝 Enter a date: {DATE_FORMAT_HINT}\n\nExample: {DATE_EXAMPLE}"
CANCELLED = "↩️ Cancelled."
NOTHING_TO_CANCEL = "Nothing to cancel."
UNKNOWN_COMMAND = "🤔 Unknown command. Send /start to open the menu."

NO_DATES = "✅ No blocked dates"
DATES_HEADER = "📅 <b>Blocked dates:</b>\n\n"
DATES_TOTAL = "\n<b>Total:</b> {total}"

INVALID_FORMAT = f"❌ Invalid date. Use: {DATE_FORMAT_HINT}"
BLOCKED = "✅ Date <b>{date}</b> blocked!"
UNBLOCKED = "✅ Date <b>{date}</b> unblocked!"

THROTTLED = "⏳ Too many requests. Try again in {retry_after} s."
UNAUTHORIZED = "⛔ The bot is not authorized to change the calendar."
REJECTED = "❌ {message}"
SERVER_ERROR = "❌ The calendar service failed to process the request."
UNAVAILABLE = "⚠️ Calendar service is unreachable. Please try again later."
