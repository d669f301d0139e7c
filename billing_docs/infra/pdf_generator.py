from __future__ import annotations

import hashlib
import logging
import struct
from io import BytesIO
from typing import Callable, Optional, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from billing_docs.exceptions import AssetLoadFailure
from billing_docs.infra.assets import AssetProvider
from billing_docs.rendering.context import (
    INVOICE_PALETTE,
    FontPair,
    PageGeometry,
    Palette,
    RenderContext,
    Surface,
)

logger = logging.getLogger(__name__)


class CanvasSurface(Surface):
    """reportlab Canvas 위에 그리는 Surface 구현."""

    def __init__(self, pdf_canvas: canvas.Canvas) -> None:
        self._canvas = pdf_canvas

    def draw_text(self, x, y, text, font, size, color) -> None:
        c = self._canvas
        c.setFont(font, size)
        c.setFillColor(color)
        c.drawString(x, y, text)

    def draw_rect(self, x, y, width, height, *, fill=None, stroke=None, stroke_width=1, fill_opacity=1.0) -> None:
        c = self._canvas
        c.saveState()
        if fill is not None:
            c.setFillColor(fill)
            c.setFillAlpha(fill_opacity)
        if stroke is not None:
            c.setStrokeColor(stroke)
            c.setLineWidth(stroke_width)
        c.rect(x, y, width, height, stroke=1 if stroke is not None else 0, fill=1 if fill is not None else 0)
        c.restoreState()

    def draw_line(self, x1, y1, x2, y2, *, color, thickness=1) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(color)
        c.setLineWidth(thickness)
        c.line(x1, y1, x2, y2)
        c.restoreState()

    def draw_image(self, image, x, y, width, height) -> None:
        self._canvas.drawImage(image, x, y, width, height, mask="auto", preserveAspectRatio=True)

    def show_page(self) -> None:
        self._canvas.showPage()


def _register_font(variant: str, data: bytes) -> str:
    # 같은 바이트는 같은 이름 -> 프로세스 전역 레지스트리에 한 번만 등록된다
    name = f"Doc-{variant.capitalize()}-{hashlib.sha1(data).hexdigest()[:12]}"
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(TTFont(name, BytesIO(data)))
    except (TTFError, struct.error) as exc:
        raise AssetLoadFailure(f"Cannot parse {variant} font: {exc}") from exc
    logger.debug("Registered font %s", name)
    return name


def embed_fonts(assets: AssetProvider) -> FontPair:
    """regular/bold TTF 를 읽어 등록하고 폰트 이름 쌍을 반환한다."""

    return FontPair(
        regular=_register_font("regular", assets.load_font("regular")),
        bold=_register_font("bold", assets.load_font("bold")),
    )


def open_logo(data: Optional[bytes]) -> Optional[ImageReader]:
    """로고 바이트를 이미지로 연다. 디코딩에 실패하면 None (텍스트 대체)."""

    if not data:
        return None
    try:
        image = ImageReader(BytesIO(data))
        image.getSize()
    except (OSError, ValueError, SyntaxError) as exc:
        logger.warning("Logo image could not be decoded, falling back to brand text: %s", exc)
        return None
    return image


class PDFGenerator:
    """RenderContext 에 그리는 렌더 함수를 받아 A4 PDF 바이트를 만든다.

    - 폰트는 매 호출 AssetProvider 에서 읽는다 (등록은 해시 이름으로 1회).
    - invariant 모드로 저장하므로 같은 입력은 같은 바이트를 만든다.
    """

    def __init__(self, assets: AssetProvider) -> None:
        self._assets = assets

    def generate(
        self,
        render: Callable[[RenderContext], None],
        *,
        geometry: Optional[PageGeometry] = None,
        palette: Palette = INVOICE_PALETTE,
        title: str = "",
        brand_name: str = "",
    ) -> Tuple[bytes, int]:
        geometry = geometry or PageGeometry()
        fonts = embed_fonts(self._assets)
        logo = open_logo(self._assets.load_logo())

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(geometry.width, geometry.height), invariant=1)
        c.setTitle(title)
        c.setAuthor(brand_name)
        c.setCreator(brand_name)

        ctx = RenderContext(
            surface=CanvasSurface(c),
            fonts=fonts,
            geometry=geometry,
            palette=palette,
            logo=logo,
            brand_name=brand_name,
        )
        render(ctx)
        c.save()

        return buffer.getvalue(), ctx.page_number
