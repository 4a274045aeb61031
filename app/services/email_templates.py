"""Localized transactional email templates."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

BOOKING_CONFIRMED = "booking_confirmed"
BOOKING_CANCELLED = "booking_cancelled"

SUPPORTED_LOCALES = ("en", "ja", "zh")
DEFAULT_LOCALE = "en"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    body: str


_CONFIRMED = {
    "en": (
        "Booking Confirmed! - Global Beauty",
        "Dear Customer,\n\n"
        "Great news! Your booking has been confirmed!\n\n"
        "Confirmed booking details:\n"
        "- Booking Reference: {access_code}\n"
        "- Clinic: {clinic_name}\n"
        "- Procedure: {procedure}\n"
        "- Date: {date}\n"
        "- Time: {time}\n"
        "{price_line}\n"
        "Please arrive at the clinic 15 minutes before your appointment time.\n\n"
        "If you need to reschedule or cancel, please contact us as soon as possible.\n\n"
        "Best regards,\n"
        "Global Beauty Team",
    ),
    "ja": (
        "予約が確定しました！ - Global Beauty",
        "お客様へ\n\n"
        "予約が確定しましたのでお知らせいたします！\n\n"
        "確定した予約詳細：\n"
        "- 予約番号: {access_code}\n"
        "- クリニック: {clinic_name}\n"
        "- 施術: {procedure}\n"
        "- 日付: {date}\n"
        "- 時間: {time}\n"
        "{price_line}\n"
        "予約時間の15分前にクリニックにお越しください。\n\n"
        "日程の変更やキャンセルが必要な場合は、お早めにご連絡ください。\n\n"
        "よろしくお願いいたします。\n"
        "Global Beauty チーム",
    ),
    "zh": (
        "预约已确认！ - Global Beauty",
        "尊敬的客户，\n\n"
        "好消息！您的预约已确认！\n\n"
        "确认的预约详情：\n"
        "- 预约编号: {access_code}\n"
        "- 诊所: {clinic_name}\n"
        "- 项目: {procedure}\n"
        "- 日期: {date}\n"
        "- 时间: {time}\n"
        "{price_line}\n"
        "请在预约时间前15分钟到达诊所。\n\n"
        "如需改期或取消，请尽快与我们联系。\n\n"
        "此致\n"
        "Global Beauty 团队",
    ),
}

_CANCELLED = {
    "en": (
        "Booking Cancelled - Global Beauty",
        "Dear Customer,\n\n"
        "We're sorry to inform you that your booking has been cancelled.\n\n"
        "Cancelled booking details:\n"
        "- Booking Reference: {access_code}\n"
        "- Clinic: {clinic_name}\n"
        "- Procedure: {procedure}\n\n"
        "{reason_line}\n"
        "If you have any questions or would like to make a new booking, "
        "please don't hesitate to contact us.\n\n"
        "Best regards,\n"
        "Global Beauty Team",
    ),
    "ja": (
        "予約がキャンセルされました - Global Beauty",
        "お客様へ\n\n"
        "誠に申し訳ございませんが、ご予約がキャンセルとなりましたことをお知らせいたします。\n\n"
        "キャンセルされた予約詳細：\n"
        "- 予約番号: {access_code}\n"
        "- クリニック: {clinic_name}\n"
        "- 施術: {procedure}\n\n"
        "{reason_line}\n"
        "ご不明な点がございましたら、または新たにご予約をご希望の場合は、お気軽にお問い合わせください。\n\n"
        "よろしくお願いいたします。\n"
        "Global Beauty チーム",
    ),
    "zh": (
        "预约已取消 - Global Beauty",
        "尊敬的客户，\n\n"
        "很抱歉通知您，您的预约已被取消。\n\n"
        "已取消的预约详情：\n"
        "- 预约编号: {access_code}\n"
        "- 诊所: {clinic_name}\n"
        "- 项目: {procedure}\n\n"
        "{reason_line}\n"
        "如有任何疑问或想重新预约，请随时与我们联系。\n\n"
        "此致\n"
        "Global Beauty 团队",
    ),
}

TEMPLATES: dict[str, dict[str, tuple[str, str]]] = {
    BOOKING_CONFIRMED: _CONFIRMED,
    BOOKING_CANCELLED: _CANCELLED,
}

# Per-locale labels for optional lines
_LABELS = {
    "en": {"price": "Price", "reason": "Reason", "tbc": "To be confirmed"},
    "ja": {"price": "料金", "reason": "理由", "tbc": "確認中"},
    "zh": {"price": "价格", "reason": "原因", "tbc": "待确认"},
}

_CURRENCY_SYMBOLS = {"KRW": "₩", "USD": "$", "JPY": "¥", "CNY": "CN¥"}
_ZERO_DECIMAL_CURRENCIES = {"KRW", "JPY"}


def resolve_locale(locale: str | None) -> str:
    """Unknown locales fall back to English."""
    return locale if locale in SUPPORTED_LOCALES else DEFAULT_LOCALE


def format_date_for_email(value: date, locale: str) -> str:
    """Format a date the way each locale writes it ('March 5, 2026', '2026年3月5日')."""
    if resolve_locale(locale) in ("ja", "zh"):
        return f"{value.year}年{value.month}月{value.day}日"
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_price_for_email(price: float, currency: str = "KRW") -> str:
    symbol = _CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    if currency in _ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{price:,.0f}"
    return f"{symbol}{price:,.2f}"


def render_email(email_type: str, locale: str | None, fields: Mapping[str, Any]) -> RenderedEmail:
    """Render subject and plain-text body for an email type.

    Args:
        email_type: BOOKING_CONFIRMED or BOOKING_CANCELLED
        locale: Recipient locale (falls back to English)
        fields: access_code, clinic_name, procedure, preferred_date and the
            optional confirmed_date, confirmed_time, confirmed_price, cancel_reason

    Returns:
        RenderedEmail: Subject and body

    Raises:
        ValueError: Unknown email type
    """
    if email_type not in TEMPLATES:
        raise ValueError(f"Unknown email type: {email_type}")

    resolved = resolve_locale(locale)
    subject, body = TEMPLATES[email_type][resolved]
    labels = _LABELS[resolved]

    price = fields.get("confirmed_price")
    reason = fields.get("cancel_reason")
    body = body.format(
        access_code=fields["access_code"],
        clinic_name=fields["clinic_name"],
        procedure=fields["procedure"],
        date=fields.get("confirmed_date") or fields["preferred_date"],
        time=fields.get("confirmed_time") or labels["tbc"],
        price_line=f"- {labels['price']}: {price}\n" if price else "",
        reason_line=f"{labels['reason']}: {reason}\n" if reason else "",
    )
    return RenderedEmail(subject=subject, body=body)
