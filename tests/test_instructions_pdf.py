import re

from PIL import Image

from printpack.imaging.encoding import encode_preview
from printpack.imaging.instructions_pdf import generate_instructions_pdf, ratio_summary
from printpack.models.enums import DpiSource, Variant
from printpack.models.specs import DerivedImage


def _img(ratio, size, variant):
    return DerivedImage(ratio, size, variant, 10, 10, 600, DpiSource.DEFAULT, b"")


def test_ratio_summary_lists_each_size_once():
    images = [
        _img("2:3", "4x6", Variant.WATERMARKED), _img("2:3", "4x6", Variant.FINAL),
        _img("2:3", "12x18", Variant.WATERMARKED), _img("2:3", "12x18", Variant.FINAL),
        _img("A", "A4", Variant.WATERMARKED), _img("A", "A4", Variant.FINAL),
    ]
    assert ratio_summary(images) == [("2:3", ["4x6", "12x18"]), ("A", ["A4"])]


def test_pdf_is_generated():
    pdf = generate_instructions_pdf(
        shop_name="Shop",
        art_title="Moon",
        download_link="https://example.com/files",
        ratios=[("2:3", ["4x6", "12x18"]), ("A", ["A4"])],
        preview_jpeg=encode_preview(Image.new("RGB", (800, 1200), (40, 80, 120))),
        thank_you_message="Thank you!\n\nEnjoy your print.",
    )
    assert pdf.startswith(b"%PDF")


def test_pdf_without_optional_parts_spills_onto_pages():
    ratios = [(f"Ratio {i}", [f"Size {j}" for j in range(3)]) for i in range(40)]
    pdf = generate_instructions_pdf(shop_name="", art_title="", download_link="see email",
                                    ratios=ratios)
    assert pdf.startswith(b"%PDF")
    pages = max(int(n) for n in re.findall(rb"/Count (\d+)", pdf))
    assert pages >= 2
