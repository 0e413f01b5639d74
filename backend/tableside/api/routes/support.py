"""Customer support contact routes."""

from urllib.parse import quote

from fastapi import APIRouter

from tableside.core.config import settings

router = APIRouter()


def whatsapp_link(number: str, message: str) -> str:
    digits = "".join(ch for ch in number if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(message)}"


@router.get("/whatsapp")
def whatsapp_support():
    return {
        "url": whatsapp_link(settings.support_whatsapp_number, settings.support_whatsapp_message),
        "number": settings.support_whatsapp_number,
    }
