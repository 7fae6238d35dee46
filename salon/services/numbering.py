from sqlalchemy import text
from sqlalchemy.orm import Session

from ..models.base import utcnow

INVOICE_KIND = "invoice"
QUOTE_KIND = "quote"


def next_sequence_number(db: Session, kind: str, year: int) -> int:
    db.execute(
        text(
            "INSERT OR IGNORE INTO document_sequences (kind, year, last_number, updated_at) "
            "VALUES (:kind, :year, 0, :updated_at)"
        ),
        {"kind": kind, "year": year, "updated_at": utcnow()},
    )
    db.execute(
        text(
            "UPDATE document_sequences "
            "SET last_number = last_number + 1, updated_at = :updated_at "
            "WHERE kind = :kind AND year = :year"
        ),
        {"kind": kind, "year": year, "updated_at": utcnow()},
    )
    return db.execute(
        text(
            "SELECT last_number FROM document_sequences "
            "WHERE kind = :kind AND year = :year"
        ),
        {"kind": kind, "year": year},
    ).scalar_one()


def format_document_number(number_format: str, prefix: str, year: int, number: int) -> str:
    return (
        number_format.replace("{PREFIX}", prefix)
        .replace("{YEAR}", str(year))
        .replace("{NUMBER}", f"{number:05d}")
    )


def allocate_document_number(
    db: Session, kind: str, prefix: str, number_format: str, year: int | None = None
) -> str:
    year = year or utcnow().year
    number = next_sequence_number(db, kind, year)
    return format_document_number(number_format, prefix, year, number)
