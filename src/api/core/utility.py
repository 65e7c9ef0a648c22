from datetime import datetime, timezone
import re
import secrets
import string
import time
import unicodedata

from sqlmodel import select


def as_utc(dt: datetime | None) -> datetime | None:
    """Naive datetimes (e.g. read back from SQLite) are taken as UTC"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_naive(dt: datetime | None) -> datetime | None:
    """UTC wall time without tzinfo, the form timestamps are stored in"""
    if dt is None:
        return None
    return as_utc(dt).replace(tzinfo=None)


# slug = slugify("Áo Thun Nam")
# print(slug)  # ao-thun-nam
def slugify(text: str) -> str:
    """
    Convert text into a URL-friendly slug.
    Example: "Đầm Dự Tiệc" -> "dam-du-tiec"
    """
    if not text:
        return ""

    # đ/Đ do not decompose under NFKD
    text = text.replace("đ", "d").replace("Đ", "D")

    # Normalize unicode (e.g., remove accents like café → cafe)
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")

    # Lowercase
    text = text.lower()

    # Replace non-alphanumeric characters with hyphens
    text = re.sub(r"[^a-z0-9]+", "-", text)

    # Remove leading/trailing hyphens
    text = text.strip("-")

    return text


def uniqueSlugify(session, model, name: str, slug_field: str = "slug", exclude_id=None) -> str:
    base_slug = slugify(name) or "item"
    slug = base_slug
    counter = 1

    column = getattr(model, slug_field)
    while True:
        statement = select(model).where(column == slug)
        if exclude_id is not None:
            statement = statement.where(model.id != exclude_id)
        if session.exec(statement).first() is None:
            return slug
        slug = f"{base_slug}-{counter}"
        counter += 1


def generate_order_number() -> str:
    """ORD-<epoch ms>-<9 random chars>"""
    alphabet = string.ascii_uppercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"
