"""모든 문서 유형이 공유하는 레이아웃 기본 요소.

각 함수는 RenderContext 에 그리고 소비한 높이만큼 커서를 내린다.
복합 요소는 그리기 전에 ensure_height() 로 하단 여백 침범을 막고,
한 페이지보다 긴 표 행과 카드는 줄 단위로 나눠 다음 페이지에 이어 그린다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from reportlab.lib.colors import Color
from reportlab.pdfbase.pdfmetrics import stringWidth

from billing_docs.exceptions import RenderingInvariantViolation
from billing_docs.rendering.context import RenderContext
from billing_docs.rendering.formatting import NOT_AVAILABLE, PLACEHOLDER, normalize_text

logger = logging.getLogger(__name__)

BODY_SIZE = 11
# draw_section_heading 이 내리는 높이 (여백 4 + 제목 12 + 구분선 18)
SECTION_HEADING_HEIGHT = 34
SIGNATURE_CAPTIONS = (
    ("Đại diện công ty", "(Ký, ghi rõ họ tên)"),
    ("Đại diện khách hàng", "(Ký, ghi rõ họ tên)"),
)


# ---------------------------------------------------------------------------
# text measurement / wrapping
# ---------------------------------------------------------------------------


def _split_word(word: str, font: str, size: float, max_width: float) -> List[str]:
    pieces: List[str] = []
    chunk = ""
    for char in word:
        candidate = chunk + char
        if stringWidth(candidate, font, size) <= max_width:
            chunk = candidate
        else:
            if chunk:
                pieces.append(chunk)
            chunk = char
    if chunk:
        pieces.append(chunk)
    return pieces


def _wrap_line(text: str, font: str, size: float, max_width: float) -> List[str]:
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if stringWidth(candidate, font, size) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        if stringWidth(word, font, size) > max_width:
            pieces = _split_word(word, font, size, max_width)
            lines.extend(pieces[:-1])
            current = pieces[-1]
        else:
            current = word
    if current:
        lines.append(current)
    return lines or [""]


def wrap_text(text: Optional[str], font: str, size: float, max_width: float) -> List[str]:
    """단어 단위 greedy 줄바꿈. 항상 1줄 이상을 반환한다.

    max_width 보다 긴 단어는 글자 단위로 쪼개고, 개행 문자는 새 줄로 처리한다.
    """

    if max_width <= 0:
        raise RenderingInvariantViolation(f"Cannot wrap text into non-positive width {max_width}")

    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        lines.extend(_wrap_line(paragraph, font, size, max_width))
    return lines or [""]


# ---------------------------------------------------------------------------
# vertical flow / pagination
# ---------------------------------------------------------------------------


def start_new_page(ctx: RenderContext, carry_heading: Optional[str] = None) -> None:
    ctx.new_page()
    logger.debug("Page break -> page %d", ctx.page_number)
    if carry_heading:
        draw_section_heading(ctx, carry_heading)


def fresh_page_capacity(ctx: RenderContext, carry_heading: Optional[str] = None) -> float:
    """새 페이지에서 (이어지는 제목을 그린 뒤) 남는 높이."""

    capacity = ctx.geometry.usable_height
    if carry_heading:
        capacity -= SECTION_HEADING_HEIGHT
    return capacity


def ensure_height(ctx: RenderContext, height: float, carry_heading: Optional[str] = None) -> bool:
    """height 높이의 블록이 하단 여백에 닿으면 새 페이지를 시작한다.

    페이지를 넘겼으면 True. 새 페이지에도 들어가지 않는 고정 블록은 예외.
    늘어나는 내용(표 행, 카드, 문단)은 호출 쪽에서 줄 단위로 나눠 그린다.
    """

    if ctx.fits(height):
        return False
    capacity = fresh_page_capacity(ctx, carry_heading)
    if height >= capacity:
        raise RenderingInvariantViolation(
            f"Block of height {height:.1f}pt exceeds usable page height {capacity:.1f}pt"
        )
    start_new_page(ctx, carry_heading)
    return True


def draw_paragraph(
    ctx: RenderContext,
    text: str,
    *,
    size: float = BODY_SIZE,
    bold: bool = False,
    color: Optional[Color] = None,
    line_gap: float = 4,
    indent: float = 0,
    after: float = 4,
) -> None:
    font = ctx.font(bold)
    line_height = size + line_gap
    for line in wrap_text(text, font, size, ctx.content_width - indent):
        ensure_height(ctx, line_height)
        ctx.draw_text(line, ctx.left + indent, ctx.cursor_y, font=font, size=size, color=color)
        ctx.move_down(line_height)
    ctx.move_down(after)


def draw_divider(ctx: RenderContext) -> None:
    ensure_height(ctx, 14)
    ctx.surface.draw_line(ctx.left, ctx.cursor_y, ctx.right, ctx.cursor_y, color=ctx.palette.stroke, thickness=1)
    ctx.move_down(18)


def draw_section_heading(ctx: RenderContext, title: str, subtitle: Optional[str] = None) -> None:
    """대문자 강조색 제목 + 구분선. 계약서 섹션에 쓴다."""

    ensure_height(ctx, 40)
    ctx.move_down(4)
    ctx.draw_text(title.upper(), ctx.left, ctx.cursor_y, font=ctx.fonts.bold, size=12, color=ctx.palette.accent)
    ctx.move_down(12)
    draw_divider(ctx)
    if subtitle:
        draw_paragraph(ctx, subtitle, size=10.5, color=ctx.palette.muted)


def draw_heading(ctx: RenderContext, title: str, subtitle: Optional[str] = None, *, size: float = 14) -> None:
    """일반 제목 + 회색 부제. 주문서/청구서 섹션에 쓴다."""

    ensure_height(ctx, 40)
    ctx.move_down(6)
    ctx.draw_text(title, ctx.left, ctx.cursor_y, font=ctx.fonts.bold, size=size)
    ctx.move_down(18)
    if subtitle:
        for line in wrap_text(subtitle, ctx.fonts.regular, BODY_SIZE, ctx.content_width):
            ensure_height(ctx, 14)
            ctx.draw_text(line, ctx.left, ctx.cursor_y, size=BODY_SIZE, color=ctx.palette.muted)
            ctx.move_down(14)
    ctx.move_down(12)


def draw_badge(
    ctx: RenderContext,
    text: str,
    x: float,
    top: float,
    color: Color,
    *,
    align: str = "left",
    size: float = 9,
    height: float = 18,
) -> float:
    """테두리+옅은 배경의 상태 배지를 그리고 폭을 반환한다. top 은 배지 윗변."""

    width = ctx.text_width(text, ctx.fonts.bold, size) + 14
    left = x - width if align == "right" else x
    ctx.surface.draw_rect(left, top - height, width, height, fill=color, stroke=color, fill_opacity=0.1)
    baseline = top - (height + size * 0.7) / 2
    ctx.draw_text(text, left + 7, baseline, font=ctx.fonts.bold, size=size, color=color)
    return width


# ---------------------------------------------------------------------------
# cards
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _CardLine:
    """카드 안의 한 줄. text 가 None 이면 간격만 차지한다."""

    height: float
    text: Optional[str] = None
    font: Optional[str] = None
    size: float = BODY_SIZE
    color: Optional[Color] = None
    badge: Optional[Color] = None

    def draw(self, ctx: RenderContext, x: float, top: float) -> None:
        if self.text is None:
            return
        if self.badge is not None:
            draw_badge(ctx, self.text, x, top, self.badge)
            return
        ctx.draw_text(self.text, x, top - self.size, font=self.font, size=self.size, color=self.color)


def _draw_card(
    ctx: RenderContext,
    lines: Sequence[_CardLine],
    draw_frame: Callable[[float, float], None],
    *,
    x: float,
    padding_y: float,
    carry_heading: Optional[str] = None,
) -> None:
    """카드 줄을 테두리 안에 그린다.

    새 페이지에 통째로 들어가는 카드는 나누지 않는다. 그보다 긴 카드는
    현재 페이지 하단에서 테두리를 닫고 다음 페이지에서 다시 연다.
    """

    total = padding_y * 2 + sum(line.height for line in lines)
    if total < fresh_page_capacity(ctx, carry_heading):
        ensure_height(ctx, total, carry_heading)

    pending = list(lines)
    fresh = False
    while pending:
        available = ctx.cursor_y - ctx.geometry.margin_bottom - padding_y * 2
        count = 0
        used = 0.0
        for line in pending:
            if used + line.height >= available:
                break
            used += line.height
            count += 1

        if count == 0:
            if fresh:
                raise RenderingInvariantViolation(
                    f"Card line of height {pending[0].height:.1f}pt does not fit an empty page"
                )
            start_new_page(ctx, carry_heading)
            fresh = True
            continue

        top = ctx.cursor_y
        height = used + padding_y * 2
        draw_frame(top, height)
        y = top - padding_y
        for line in pending[:count]:
            line.draw(ctx, x, y)
            y -= line.height
        ctx.cursor_y = top - height

        pending = pending[count:]
        if all(line.text is None for line in pending):
            break
        start_new_page(ctx, carry_heading)
        fresh = True


def draw_info_card(
    ctx: RenderContext,
    title: str,
    rows: Sequence[Tuple[str, Optional[str]]],
    *,
    padding_x: float = 18,
    padding_y: float = 16,
    heading_size: float = 13,
    label_size: float = 9.5,
    body_size: float = BODY_SIZE,
    value_gap: float = 3,
) -> None:
    """제목 + (라벨, 값) 행 목록을 담은 배경 카드. 높이는 줄바꿈된 값에 맞춰 늘어난다."""

    inner_width = ctx.content_width - padding_x * 2
    muted = ctx.palette.muted
    lines = [_CardLine(heading_size + 6, title, ctx.fonts.bold, heading_size, ctx.palette.accent)]
    for label, value in rows:
        lines.append(_CardLine(label_size + 2, label.upper(), ctx.fonts.bold, label_size, muted))
        for text in wrap_text(normalize_text(value, NOT_AVAILABLE), ctx.fonts.regular, body_size, inner_width):
            lines.append(_CardLine(body_size + value_gap, text, ctx.fonts.regular, body_size))
        lines.append(_CardLine(8))

    def frame(top: float, height: float) -> None:
        ctx.surface.draw_rect(
            ctx.left,
            top - height,
            ctx.content_width,
            height,
            fill=ctx.palette.card_background,
            stroke=ctx.palette.stroke,
        )

    _draw_card(ctx, lines, frame, x=ctx.left + padding_x, padding_y=padding_y)
    ctx.move_down(24)


@dataclass(frozen=True)
class ServiceCard:
    title: str
    lines: Sequence[str]
    tag: Optional[str] = None
    tag_color: Optional[Color] = None


def draw_service_card(
    ctx: RenderContext,
    card: ServiceCard,
    *,
    accent: Optional[Color] = None,
    carry_heading: Optional[str] = None,
    padding_x: float = 16,
    padding_y: float = 14,
    heading_size: float = 13,
    body_size: float = BODY_SIZE,
) -> None:
    """좌측 강조 띠가 있는 서비스(도메인/호스팅/VPS) 카드."""

    accent = accent or ctx.palette.accent
    inner_width = ctx.content_width - padding_x * 2

    lines = [
        _CardLine(heading_size + 4, text, ctx.fonts.bold, heading_size)
        for text in wrap_text(card.title, ctx.fonts.bold, heading_size, inner_width)
    ]
    if card.tag:
        lines.append(_CardLine(24, card.tag, badge=card.tag_color or accent))
    for value in card.lines:
        for text in wrap_text(value, ctx.fonts.regular, body_size, inner_width):
            lines.append(_CardLine(body_size + 3, text, ctx.fonts.regular, body_size))
        lines.append(_CardLine(4))

    def frame(top: float, height: float) -> None:
        ctx.surface.draw_rect(ctx.left, top - height, ctx.content_width, height, stroke=accent)
        ctx.surface.draw_rect(ctx.left, top - height, 4, height, fill=accent)

    _draw_card(ctx, lines, frame, x=ctx.left + padding_x, padding_y=padding_y, carry_heading=carry_heading)
    ctx.move_down(20)


def draw_signature_block(
    ctx: RenderContext,
    captions: Sequence[Tuple[str, str]] = SIGNATURE_CAPTIONS,
    *,
    gap: float = 40,
    block_height: float = 90,
) -> None:
    ensure_height(ctx, block_height + 30)
    block_width = (ctx.content_width - gap * (len(captions) - 1)) / len(captions)
    top = ctx.cursor_y

    for index, (title, hint) in enumerate(captions):
        x = ctx.left + index * (block_width + gap)
        ctx.surface.draw_rect(x, top - block_height, block_width, block_height, stroke=ctx.palette.stroke)
        ctx.draw_text(title, x + 16, top - 20, font=ctx.fonts.bold, size=11, color=ctx.palette.accent)
        ctx.draw_text(hint, x + 16, top - block_height + 16, size=10, color=ctx.palette.muted)
        ctx.surface.draw_line(
            x + 16,
            top - block_height + 36,
            x + block_width - 16,
            top - block_height + 36,
            color=ctx.palette.stroke,
        )

    ctx.move_down(block_height + 12)


# ---------------------------------------------------------------------------
# tables / columns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    ratio: float
    align: str = "left"


@dataclass(frozen=True)
class ResolvedColumn:
    column: Column
    x: float
    width: float

    def text_x(self, padding: float) -> float:
        if self.column.align == "right":
            return self.x + self.width - padding
        if self.column.align == "center":
            return self.x + self.width / 2
        return self.x + padding


def resolve_columns(columns: Sequence[Column], content_width: float, left: float = 0.0) -> List[ResolvedColumn]:
    """비율로 열 폭(pt)을 계산한다. 반올림 오차는 마지막 열이 흡수한다."""

    if not columns:
        raise RenderingInvariantViolation("Table needs at least one column")
    if abs(sum(column.ratio for column in columns) - 1) > 0.001:
        raise RenderingInvariantViolation("Column ratios must sum to 1")

    resolved: List[ResolvedColumn] = []
    accumulated = 0.0
    for index, column in enumerate(columns):
        if index == len(columns) - 1:
            width = content_width - accumulated
        else:
            width = round(content_width * column.ratio)
        if width <= 0:
            raise RenderingInvariantViolation(f"Column {column.key!r} resolved to width {width}")
        resolved.append(ResolvedColumn(column=column, x=left + accumulated, width=width))
        accumulated += width
    return resolved


def _draw_row(
    ctx: RenderContext,
    resolved: Sequence[ResolvedColumn],
    wrapped: Sequence[List[str]],
    row_height: float,
    *,
    font: str,
    size: float,
    padding: float,
    line_gap: float,
    fill: Optional[Color] = None,
) -> None:
    top = ctx.cursor_y
    bottom = top - row_height
    table_left = resolved[0].x
    table_right = resolved[-1].x + resolved[-1].width

    if fill is not None:
        ctx.surface.draw_rect(table_left, bottom, table_right - table_left, row_height, fill=fill)

    for column, lines in zip(resolved, wrapped):
        y = top - padding - size
        x = column.text_x(padding)
        for line in lines:
            ctx.draw_text(line, x, y, font=font, size=size, align=column.column.align)
            y -= size + line_gap

    stroke = ctx.palette.stroke
    ctx.surface.draw_line(table_left, top, table_right, top, color=stroke, thickness=0.5)
    ctx.surface.draw_line(table_left, bottom, table_right, bottom, color=stroke, thickness=0.5)
    for column in resolved:
        ctx.surface.draw_line(column.x, top, column.x, bottom, color=stroke, thickness=0.5)
    ctx.surface.draw_line(table_right, top, table_right, bottom, color=stroke, thickness=0.5)

    ctx.move_down(row_height)


def draw_table(
    ctx: RenderContext,
    columns: Sequence[Column],
    rows: Sequence[Sequence[str]],
    *,
    header_size: float = 11,
    body_size: float = 10.5,
    padding: float = 6,
    line_gap: float = 4,
    header_height: float = 22,
    min_row_height: float = 20,
    carry_heading: Optional[str] = None,
) -> None:
    """음영 헤더 + 본문 행 테이블.

    각 행 높이는 가장 긴(줄바꿈 후) 셀에 맞춰 늘어난다.
    페이지가 넘어가면 새 페이지에 헤더를 다시 그린다. 헤더를 그린 새 페이지에도
    들어가지 않는 행은 셀 줄을 나눠 여러 페이지에 이어 그린다.
    """

    resolved = resolve_columns(columns, ctx.content_width, ctx.left)
    line_step = body_size + line_gap

    def cell_lines(cells: Sequence[str], font: str, size: float) -> List[List[str]]:
        return [
            wrap_text(cell, font, size, column.width - padding * 2)
            for column, cell in zip(resolved, cells)
        ]

    def row_height_for(wrapped: Sequence[List[str]], size: float, minimum: float) -> float:
        tallest = max(len(lines) for lines in wrapped)
        return max(minimum, tallest * (size + line_gap) + padding + 2)

    def fitting_line_count(available: float) -> int:
        count = int((available - padding - 2) // line_step)
        while count > 0 and max(min_row_height, count * line_step + padding + 2) >= available:
            count -= 1
        return max(count, 0)

    header_wrapped = cell_lines([column.label for column in columns], ctx.fonts.bold, header_size)
    header_row_height = row_height_for(header_wrapped, header_size, header_height)
    row_capacity = fresh_page_capacity(ctx, carry_heading) - header_row_height

    def draw_header() -> None:
        ensure_height(ctx, header_row_height + min_row_height, carry_heading)
        _draw_row(
            ctx,
            resolved,
            header_wrapped,
            header_row_height,
            font=ctx.fonts.bold,
            size=header_size,
            padding=padding,
            line_gap=line_gap,
            fill=ctx.palette.header_fill,
        )

    def draw_body(wrapped: Sequence[List[str]], height: float) -> None:
        _draw_row(
            ctx,
            resolved,
            wrapped,
            height,
            font=ctx.fonts.regular,
            size=body_size,
            padding=padding,
            line_gap=line_gap,
        )

    def next_page() -> None:
        start_new_page(ctx, carry_heading)
        draw_header()

    draw_header()

    for cells in rows:
        if len(cells) != len(resolved):
            raise RenderingInvariantViolation(f"Row has {len(cells)} cells, table has {len(resolved)} columns")
        pending = cell_lines([str(cell) for cell in cells], ctx.fonts.regular, body_size)
        fresh = False
        while True:
            height = row_height_for(pending, body_size, min_row_height)
            if ctx.fits(height):
                draw_body(pending, height)
                break
            if height < row_capacity:
                next_page()
                fresh = True
                continue

            count = fitting_line_count(ctx.cursor_y - ctx.geometry.margin_bottom)
            if count == 0:
                if fresh:
                    raise RenderingInvariantViolation("Table row line does not fit below the repeated header")
                next_page()
                fresh = True
                continue
            head = [lines[:count] for lines in pending]
            pending = [lines[count:] for lines in pending]
            draw_body(head, row_height_for(head, body_size, min_row_height))
            next_page()
            fresh = True


@dataclass(frozen=True)
class InfoLine:
    value: Optional[str]
    label: Optional[str] = None
    color: Optional[Color] = None


@dataclass(frozen=True)
class InfoColumn:
    title: str
    lines: Sequence[InfoLine]
    align: str = "left"


@dataclass
class _PreparedLine:
    lines: List[str]
    height: float
    label: Optional[str] = None
    label_width: float = 0
    color: Optional[Color] = None


def _prepare_column(ctx: RenderContext, column: InfoColumn, width: float, size: float) -> Tuple[List[_PreparedLine], float]:
    source = list(column.lines) or [InfoLine(value=PLACEHOLDER)]
    prepared: List[_PreparedLine] = []
    for line in source:
        value = normalize_text(line.value)
        if line.label is not None and column.align != "right":
            label = f"{line.label.strip() or 'Thông tin'}:"
            label_width = ctx.text_width(label, ctx.fonts.bold, size) + 6
            available = max(width - label_width, width * 0.4)
            value_lines = wrap_text(value, ctx.fonts.regular, size, available)
            height = max(size + 3, len(value_lines) * (size + 3)) + 6
            prepared.append(_PreparedLine(value_lines, height, label, label_width, line.color))
        else:
            if line.label is not None:
                value = f"{line.label}: {value}"
            wrapped = wrap_text(value, ctx.fonts.regular, size, width)
            prepared.append(_PreparedLine(wrapped, len(wrapped) * (size + 3) + 6, color=line.color))

    title_height = 18 if column.title else 0
    return prepared, title_height + sum(line.height for line in prepared)


# (text, x, font, size, color, align)
_RowItem = Tuple[str, float, str, float, Optional[Color], str]


def _column_rows(
    ctx: RenderContext,
    column: InfoColumn,
    prepared: Sequence[_PreparedLine],
    x: float,
    width: float,
    size: float,
) -> List[Tuple[float, List[_RowItem]]]:
    """열을 (내려갈 높이, 같은 baseline 에 그릴 텍스트들) 줄 목록으로 편다."""

    anchor = x + width if column.align == "right" else x
    rows: List[Tuple[float, List[_RowItem]]] = []
    if column.title:
        rows.append((18, [(column.title, anchor, ctx.fonts.bold, 12, None, column.align)]))
    for line in prepared:
        if line.label is None:
            items = [[(text, anchor, ctx.fonts.regular, size, line.color, column.align)] for text in line.lines]
        else:
            value_x = x + line.label_width
            items = [[(text, value_x, ctx.fonts.regular, size, line.color, "left")] for text in line.lines]
            items[0].insert(0, (line.label, x, ctx.fonts.bold, size, None, "left"))
        for index, row in enumerate(items):
            gap = 6 if index == len(items) - 1 else 0
            rows.append((size + 3 + gap, row))
    return rows


def _draw_row_items(ctx: RenderContext, items: Sequence[_RowItem], y: float) -> None:
    for text, x, font, size, color, align in items:
        ctx.draw_text(text, x, y, font=font, size=size, color=color, align=align)


def draw_info_columns(
    ctx: RenderContext,
    left: InfoColumn,
    right: InfoColumn,
    *,
    gap: float = 32,
    size: float = BODY_SIZE,
) -> None:
    """두 열 정보 블록. 각 열 높이를 따로 계산하고 더 높은 쪽에 맞춰 배치한다.

    한 페이지보다 높은 블록은 왼쪽 열, 오른쪽 열 순서로 줄 단위로 흘려 그린다.
    """

    column_width = (ctx.content_width - gap) / 2
    left_prepared, left_height = _prepare_column(ctx, left, column_width, size)
    right_prepared, right_height = _prepare_column(ctx, right, column_width, size)
    section_height = max(left_height, right_height)

    left_rows = _column_rows(ctx, left, left_prepared, ctx.left, column_width, size)
    right_rows = _column_rows(ctx, right, right_prepared, ctx.left + column_width + gap, column_width, size)

    if section_height >= fresh_page_capacity(ctx):
        logger.debug("Info block of %.1fpt is taller than a page, flowing columns", section_height)
        for advance, items in left_rows + right_rows:
            ensure_height(ctx, advance)
            _draw_row_items(ctx, items, ctx.cursor_y)
            ctx.move_down(advance)
        ctx.move_down(18)
        return

    ensure_height(ctx, section_height)
    start_y = ctx.cursor_y
    for rows in (left_rows, right_rows):
        y = start_y
        for advance, items in rows:
            _draw_row_items(ctx, items, y)
            y -= advance

    ctx.cursor_y = start_y - section_height - 18


@dataclass(frozen=True)
class SummaryLine:
    label: str
    value: str
    bold: bool = False


def draw_summary_block(
    ctx: RenderContext,
    lines: Sequence[SummaryLine],
    *,
    side_lines: Sequence[str] = (),
    size: float = 12,
    line_height: float = 18,
    width_ratio: float = 0.42,
) -> None:
    """우측 합계 블록 (라벨 좌측, 값 우측 정렬) + 좌측 보조 정보 줄."""

    summary_width = ctx.content_width * width_ratio
    summary_x = ctx.right - summary_width
    rows = max(len(lines), len(side_lines), 1)
    block_height = rows * line_height + 20

    ensure_height(ctx, block_height)
    y = ctx.cursor_y - 20
    for line in lines:
        font = ctx.font(line.bold)
        ctx.draw_text(f"{line.label}:", summary_x + 14, y, font=font, size=size)
        ctx.draw_text(line.value, ctx.right, y, font=font, size=size, align="right")
        y -= line_height

    y = ctx.cursor_y - 20
    for text in side_lines:
        ctx.draw_text(text, ctx.left, y, size=size)
        y -= line_height

    ctx.move_down(block_height + 16)
