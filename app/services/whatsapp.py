# app/services/whatsapp.py
import re
from typing import Mapping, Optional
from urllib.parse import quote

WA_BASE = "https://wa.me/"
MAX_URL_LENGTH = 2000
TRUNCATED_LENGTH = 1500
TRUNCATION_NOTICE = "\n\n[Message truncated - please provide more details in chat]"

_MARKDOWN_RE = re.compile(r"[*_~`]")
_NEWLINES_RE = re.compile(r"[\r\n]+")


def sanitize_for_whatsapp(text: Optional[str], max_length: int = 500) -> str:
    """
    Strip WhatsApp markdown characters and line breaks, then cap the length.
    Line breaks are flattened so a field cannot inject extra message lines.
    """
    if not text:
        return ""
    cleaned = _MARKDOWN_RE.sub("", text)
    cleaned = _NEWLINES_RE.sub(" ", cleaned).strip()
    return cleaned[:max_length]


def _encode(message: str) -> str:
    # same escaping as JavaScript's encodeURIComponent
    return quote(message, safe="-_.!~*'()")


def build_whatsapp_url(phone_number: str, form: Mapping[str, Optional[str]]) -> str:
    """
    Build a ``wa.me`` link pre-filled with the customer's order details.

    ``form`` uses the quotation survey keys (name, cake_type, occasion, ...).
    Every value is sanitized; if the encoded link would pass 2000 characters
    the message is cut to 1500 characters with a notice appended.
    """

    def field(key: str, max_len: int = 100) -> str:
        return sanitize_for_whatsapp(form.get(key), max_len)

    shape = field("shape")
    if form.get("custom_shape"):
        shape += f" ({field('custom_shape', 50)})"
    flavour = field("flavour")
    if form.get("other_flavour"):
        flavour += f" ({field('other_flavour', 50)})"

    lines = [
        "Hi! 🎂",
        "",
        "I just submitted an order inquiry on your website. Here are my details:",
        "",
        f"Name: {field('name')}",
        f"Cake Type: {field('cake_type')}",
        f"Occasion: {field('occasion')}",
        f"Serving Size: {field('serving_size')}",
        f"Budget: {field('budget')}",
        f"Timeframe: {field('timeframe')}",
        f"Tiers: {field('tiers')}",
        f"Shape: {shape}",
        f"Flavour: {flavour}",
        f"Filling: {field('filling')}",
        f"Finish: {field('finish')}",
        f"Delivery: {field('delivery')}",
    ]
    if form.get("delivery_location"):
        lines.append(f"Delivery Location: {field('delivery_location', 200)}")
    if form.get("notes"):
        lines.extend(["", f"Additional Notes: {field('notes', 300)}"])
    lines.extend(["", "Looking forward to hearing from you! 💜"])

    message = "\n".join(lines)
    base_url = f"{WA_BASE}{phone_number}?text="

    encoded = _encode(message)
    if len(encoded) > MAX_URL_LENGTH - len(base_url):
        encoded = _encode(message[:TRUNCATED_LENGTH] + TRUNCATION_NOTICE)

    return f"{base_url}{encoded}"
