from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth


def rgb255(r: int, g: int, b: int) -> Color:
    return Color(r / 255, g / 255, b / 255)


class Surface(ABC):
    """페이지 그리기 대상. 좌표계는 PDF 와 같이 좌하단 원점, 단위는 pt."""

    @abstractmethod
    def draw_text(self, x: float, y: float, text: str, font: str, size: float, color: Color) -> None:
        """(x, y) 를 baseline 왼쪽 끝으로 텍스트를 그린다."""

    @abstractmethod
    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[Color] = None,
        stroke: Optional[Color] = None,
        stroke_width: float = 1,
        fill_opacity: float = 1.0,
    ) -> None:
        """(x, y) 를 좌하단으로 하는 사각형을 그린다."""

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float, *, color: Color, thickness: float = 1) -> None:
        ...

    @abstractmethod
    def draw_image(self, image: Any, x: float, y: float, width: float, height: float) -> None:
        ...

    @abstractmethod
    def show_page(self) -> None:
        """현재 페이지를 닫고 새 페이지를 연다."""


@dataclass(frozen=True)
class PageGeometry:
    width: float = A4[0]
    height: float = A4[1]
    margin_top: float = 48
    margin_bottom: float = 48
    margin_x: float = 48

    @property
    def top(self) -> float:
        return self.height - self.margin_top

    @property
    def left(self) -> float:
        return self.margin_x

    @property
    def right(self) -> float:
        return self.width - self.margin_x

    @property
    def content_width(self) -> float:
        return self.width - self.margin_x * 2

    @property
    def usable_height(self) -> float:
        return self.top - self.margin_bottom


@dataclass(frozen=True)
class FontPair:
    regular: str
    bold: str


@dataclass(frozen=True)
class Palette:
    text: Color
    muted: Color
    accent: Color
    stroke: Color
    card_background: Color
    header_fill: Color


INVOICE_PALETTE = Palette(
    text=Color(0.15, 0.2, 0.33),
    muted=Color(0.4, 0.4, 0.4),
    accent=Color(0.15, 0.2, 0.33),
    stroke=Color(0.75, 0.75, 0.75),
    card_background=Color(0.97, 0.97, 0.97),
    header_fill=Color(0.9, 0.9, 0.9),
)

CONTRACT_PALETTE = Palette(
    text=rgb255(34, 40, 49),
    muted=rgb255(96, 102, 112),
    accent=rgb255(64, 87, 141),
    stroke=rgb255(214, 222, 241),
    card_background=rgb255(246, 249, 255),
    header_fill=rgb255(230, 236, 248),
)

ORDER_PALETTE = Palette(
    text=Color(0, 0, 0),
    muted=rgb255(90, 90, 90),
    accent=Color(0, 0, 0),
    stroke=rgb255(200, 200, 200),
    card_background=rgb255(248, 248, 248),
    header_fill=rgb255(235, 235, 235),
)


@dataclass
class RenderContext:
    """문서 1건을 그리는 동안의 가변 레이아웃 상태.

    cursor_y 는 위에서 아래로 내려가며, 모든 그리기 함수는 소비한 높이만큼 줄인다.
    생성 호출마다 새로 만들고 저장 후 버린다.
    """

    surface: Surface
    fonts: FontPair
    geometry: PageGeometry = field(default_factory=PageGeometry)
    palette: Palette = INVOICE_PALETTE
    logo: Any = None
    brand_name: str = ""
    cursor_y: float = field(init=False)
    page_number: int = field(init=False, default=1)

    def __post_init__(self) -> None:
        self.cursor_y = self.geometry.top

    @property
    def left(self) -> float:
        return self.geometry.left

    @property
    def right(self) -> float:
        return self.geometry.right

    @property
    def content_width(self) -> float:
        return self.geometry.content_width

    def font(self, bold: bool = False) -> str:
        return self.fonts.bold if bold else self.fonts.regular

    def text_width(self, text: str, font: str, size: float) -> float:
        return stringWidth(text, font, size)

    def fits(self, height: float) -> bool:
        return self.cursor_y - height > self.geometry.margin_bottom

    def new_page(self) -> None:
        self.surface.show_page()
        self.page_number += 1
        self.cursor_y = self.geometry.top

    def move_down(self, amount: float) -> None:
        self.cursor_y -= amount

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font: Optional[str] = None,
        size: float = 12,
        color: Optional[Color] = None,
        align: str = "left",
    ) -> None:
        text_font = font or self.fonts.regular
        draw_x = x
        if align == "right":
            draw_x = x - self.text_width(text, text_font, size)
        elif align == "center":
            draw_x = x - self.text_width(text, text_font, size) / 2
        self.surface.draw_text(draw_x, y, text, text_font, size, color or self.palette.text)
