"""Minimal PDF generation for worked calculation reports."""
from __future__ import annotations

from typing import Iterable, List, Tuple

HEADER = "%PDF-1.4\n"
LINE_HEIGHT = 14
TOP = 760
BOTTOM = 60
RIGHT_COLUMN = 300


def _escape(text: str) -> str:
    # Built-in Type1 fonts only cover Latin-1
    text = text.replace("×", "x").replace("÷", "/").replace("√", "sqrt").replace("→", "->")
    text = text.replace("•", "-").replace("Ø", "ph").replace("≤", "<=")
    text = text.encode("latin-1", "replace").decode("latin-1")
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _page_stream(rows: List[Tuple[str, str]]) -> str:
    ops = ["BT", "/F1 10 Tf", f"72 {TOP} Td"]
    for left, right in rows:
        ops.append(f"({_escape(left)}) Tj")
        if right:
            ops.extend([f"{RIGHT_COLUMN} 0 Td", f"({_escape(right)}) Tj", f"-{RIGHT_COLUMN} 0 Td"])
        ops.append(f"0 -{LINE_HEIGHT} Td")
    ops.append("ET")
    return "\n".join(ops)


def _paginate(rows: List[Tuple[str, str]]) -> List[List[Tuple[str, str]]]:
    per_page = (TOP - BOTTOM) // LINE_HEIGHT
    pages = [rows[i:i + per_page] for i in range(0, len(rows), per_page)]
    return pages or [[]]


def render_pdf_table(rows: Iterable[Tuple[str, str]]) -> bytes:
    """Return a PDF document laying *rows* out in two columns, paging as needed."""
    pages = _paginate(list(rows))
    font_id = 3
    first_page_id = 4
    page_ids = [first_page_id + 2 * i for i in range(len(pages))]

    objects: List[str] = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{' '.join(f'{p} 0 R' for p in page_ids)}] /Count {len(pages)} >>",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Courier >>",
    ]
    for page_id, page_rows in zip(page_ids, pages):
        stream = _page_stream(page_rows)
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /Resources << /Font << /F1 {font_id} 0 R >> >> "
            f"/MediaBox [0 0 612 792] /Contents {page_id + 1} 0 R >>"
        )
        objects.append(f"<< /Length {len(stream.encode('latin-1'))} >>\nstream\n{stream}\nendstream")

    body = bytearray(HEADER.encode("latin-1"))
    offsets: List[int] = []
    for number, obj in enumerate(objects, start=1):
        offsets.append(len(body))
        body.extend(f"{number} 0 obj\n{obj}\nendobj\n".encode("latin-1"))

    xref_pos = len(body)
    entries = ["0000000000 65535 f "] + [f"{o:010} 00000 n " for o in offsets]
    body.extend(f"xref\n0 {len(objects) + 1}\n".encode("latin-1"))
    body.extend(("\n".join(entries) + "\n").encode("latin-1"))
    body.extend(
        f"trailer\n<< /Root 1 0 R /Size {len(objects) + 1} >>\nstartxref\n{xref_pos}\n%%EOF\n".encode("latin-1")
    )
    return bytes(body)


def simple_pdf_table(rows: Iterable[Tuple[str, str]], path: str) -> None:
    """Write two-column rows to *path* as a PDF."""
    with open(path, "wb") as fh:
        fh.write(render_pdf_table(rows))
