from __future__ import annotations

import io
import re
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from printpack.models.specs import DerivedImage

log = logging.getLogger("printpack.pdf")

PAGE_MARGIN = 48
FOOTER_HEIGHT = 72
HTTP_LINK = re.compile(r"^https?://", re.IGNORECASE)

RatioSummary = List[Tuple[str, List[str]]]


def ratio_summary(images: Iterable[DerivedImage]) -> RatioSummary:
    """Ratio name -> size names, in first-seen order, one entry per size."""
    summary: dict = {}
    for img in images:
        sizes = summary.setdefault(img.ratio_name, [])
        if img.size_name not in sizes:
            sizes.append(img.size_name)
    return list(summary.items())


class _Writer:
    def __init__(self, pdf: canvas.Canvas, footer: str):
        self.pdf = pdf
        self.footer = footer
        self.width, self.height = letter
        self.page = 1
        self.y = self.height - PAGE_MARGIN

    def ensure(self, needed: float) -> None:
        if self.y - needed < FOOTER_HEIGHT:
            self.finish_page()
            self.pdf.showPage()
            self.page += 1
            self.y = self.height - PAGE_MARGIN

    def finish_page(self) -> None:
        self.pdf.setFont("Helvetica", 9)
        self.pdf.drawString(PAGE_MARGIN, 26, self.footer)
        self.pdf.drawRightString(self.width - PAGE_MARGIN, 26, f"Page {self.page}")

    def line(self, text: str, font: str = "Helvetica", size: float = 12, gap: float = 5) -> None:
        self.ensure(size + gap)
        self.pdf.setFont(font, size)
        self.y -= size
        self.pdf.drawString(PAGE_MARGIN, self.y, text)
        self.y -= gap

    def heading(self, text: str) -> None:
        self.y -= 12
        self.line(text, "Helvetica-Bold", 18, 10)


def generate_instructions_pdf(
    *,
    shop_name: str,
    art_title: str,
    download_link: str,
    ratios: Sequence[Tuple[str, Sequence[str]]],
    preview_jpeg: Optional[bytes] = None,
    thank_you_message: str = "",
    brand: str = "PrintPack",
) -> bytes:
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=letter)
    pdf.setTitle(f"{brand} - Digital Download Guide")
    w = _Writer(pdf, shop_name.strip() or brand)

    w.line(brand.upper(), "Helvetica-Bold", 24, 8)
    title = art_title.strip()
    w.line(f"Artwork: {title}" if title else "Digital art download set", "Helvetica-Oblique", 13)

    w.heading("Artwork preview")
    if preview_jpeg:
        try:
            reader = ImageReader(io.BytesIO(preview_jpeg))
            iw, ih = reader.getSize()
            scale = min((w.width - 2 * PAGE_MARGIN - 80) / iw, 280 / ih, 1)
            dw, dh = iw * scale, ih * scale
            w.ensure(dh + 20)
            w.y -= dh
            pdf.drawImage(reader, (w.width - dw) / 2, w.y, dw, dh)
            w.y -= 20
        except (OSError, ValueError) as e:
            log.warning("Failed to embed preview image in PDF: %s", e)
            w.line("Preview image could not be displayed in the PDF layout.", "Helvetica-Oblique")
    else:
        w.line("No preview image was included.", "Helvetica-Oblique")

    w.heading("Available ratios & sizes")
    if not ratios:
        w.line("Ratios will populate after you generate your final image set.", "Helvetica-Oblique")
    for ratio_name, sizes in ratios:
        w.line(ratio_name, "Helvetica-Bold", 13, 3)
        w.line("Sizes: " + (", ".join(sizes) if sizes else "No sizes recorded"), size=11, gap=9)

    w.heading("Download instructions")
    link = download_link.strip()
    if link and HTTP_LINK.match(link):
        w.line("Download artwork package", "Helvetica-Bold", 12)
        w.line(link, size=10)
        pdf.linkURL(link, (PAGE_MARGIN, w.y, w.width - PAGE_MARGIN, w.y + 40), relative=0)
    elif link:
        w.line(link)
    else:
        w.line("Add a download link to include customer instructions here.", "Helvetica-Oblique")

    lines = [ln.strip() for ln in thank_you_message.splitlines() if ln.strip()]
    if lines:
        w.y -= 16
        for ln in lines:
            w.line(ln, "Helvetica-Oblique", 11)

    w.finish_page()
    pdf.save()
    return buf.getvalue()
