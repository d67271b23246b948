"""
Layout blocks produced by the section renderer.

Flow content is held as ReportLab platypus flowables (`Paragraph`, `Table`).
Every block knows its height for the content width up front, and flow blocks
can be split at a given available height so the assembler can continue them
on the next page. Coordinates passed to `draw` are ReportLab page coordinates
(origin bottom left); `top_y` is the y of the block's top edge.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Sequence, List

from reportlab.lib.enums import TA_LEFT, TA_RIGHT, TA_CENTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, Table, TableStyle

from utils.pdf_utils import FontSet, paragraph_markup, hex_to_color

ALTERNATE_ROW_COLOR = '#f8f9fa'
CELL_PADDING = 4
LINE_SPACING = 1.4
# height offered to flowables when measuring them
MAX_BLOCK_HEIGHT = 14400


@dataclass(frozen=True)
class TextSpec:
    """One logical (unshaped) paragraph and how to set it"""
    text: str
    font: str
    size: float
    color: str = '#000000'
    align: str = 'start'  # start | end | center
    indent: float = 0  # hanging indent of continuation lines


def line_height(size: float) -> float:
    return size * LINE_SPACING


def _alignment(align: str, rtl: bool) -> int:
    if align == 'center':
        return TA_CENTER
    if align == 'end':
        return TA_LEFT if rtl else TA_RIGHT
    return TA_RIGHT if rtl else TA_LEFT


def make_paragraph(spec: TextSpec, width: float, rtl: bool) -> Paragraph:
    style = ParagraphStyle(
        'BlockText',
        fontName=spec.font,
        fontSize=spec.size,
        leading=line_height(spec.size),
        textColor=hex_to_color(spec.color),
        alignment=_alignment(spec.align, rtl),
        allowOrphans=1,
    )
    if spec.indent and not rtl:
        style.leftIndent = spec.indent
        style.firstLineIndent = -spec.indent
    return Paragraph(paragraph_markup(spec.text, spec.font, spec.size, width - spec.indent, rtl), style)


class LayoutBlock:
    """Base class; subclasses set `height`"""

    height: float = 0
    # a block that does not fit ends the page and is dropped instead of carried over
    discard_on_overflow = False

    def draw(self, canv, x: float, top_y: float, width: float):
        raise NotImplementedError

    def split(self, available: float) -> Optional[Tuple['LayoutBlock', 'LayoutBlock']]:
        return None


class SpacerBlock(LayoutBlock):
    discard_on_overflow = True

    def __init__(self, height: float):
        self.height = height

    def draw(self, canv, x, top_y, width):
        pass


class ParagraphBlock(LayoutBlock):
    """Stack of paragraphs, splittable between and inside paragraphs"""

    def __init__(self, paragraphs: Sequence[Paragraph], width: float, rtl: bool, space_after: float = 0):
        self.paragraphs = tuple(paragraphs)
        self.width = width
        self.rtl = rtl
        self.space_after = space_after
        self.height = sum(p.wrap(width, MAX_BLOCK_HEIGHT)[1] for p in self.paragraphs) + space_after

    @property
    def text(self) -> List[str]:
        return [p.getPlainText() for p in self.paragraphs]

    def draw(self, canv, x, top_y, width):
        y = top_y
        for para in self.paragraphs:
            _, h = para.wrap(self.width, MAX_BLOCK_HEIGHT)
            para.drawOn(canv, x, y - h)
            y -= h

    def split(self, available):
        used = 0.0
        for i, para in enumerate(self.paragraphs):
            _, h = para.wrap(self.width, available - used)
            if used + h <= available:
                used += h
                continue
            parts = para.split(self.width, available - used)
            if len(parts) == 2:
                head = self.paragraphs[:i] + (parts[0],)
                tail = (parts[1],) + self.paragraphs[i + 1:]
            elif i > 0:
                head, tail = self.paragraphs[:i], self.paragraphs[i:]
            else:
                return None
            return (ParagraphBlock(head, self.width, self.rtl),
                    ParagraphBlock(tail, self.width, self.rtl, self.space_after))
        return None


@dataclass(frozen=True)
class TableStyleSpec:
    fonts: FontSet
    font_size: float
    header_color: str
    border_color: str
    show_borders: bool
    alternate_rows: bool
    rtl: bool


def _cell(text: str, spec: TableStyleSpec, width: float, bold: bool, color: str) -> Paragraph:
    font = spec.fonts.pick(text, bold)
    return make_paragraph(TextSpec(text, font, spec.font_size, color), width - 2 * CELL_PADDING, spec.rtl)


def build_table(header: Sequence[str], rows: Sequence[Sequence[str]], widths: Sequence[float],
                spec: TableStyleSpec, placeholder: bool = False) -> Table:
    data = [[_cell(text, spec, w, True, '#ffffff') for text, w in zip(header, widths)]]
    for row in rows:
        data.append([_cell(text, spec, w, False, '#000000') for text, w in zip(row, widths)])

    commands = [
        ('BACKGROUND', (0, 0), (-1, 0), hex_to_color(spec.header_color)),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LEFTPADDING', (0, 0), (-1, -1), CELL_PADDING),
        ('RIGHTPADDING', (0, 0), (-1, -1), CELL_PADDING),
        ('TOPPADDING', (0, 0), (-1, -1), CELL_PADDING),
        ('BOTTOMPADDING', (0, 0), (-1, -1), CELL_PADDING),
    ]
    if spec.show_borders:
        commands.append(('GRID', (0, 0), (-1, -1), 0.5, hex_to_color(spec.border_color)))
    if placeholder:
        commands.append(('SPAN', (0, 1), (-1, 1)))
    elif spec.alternate_rows:
        # one command per shaded row so split pieces keep the row parity of the whole table
        fill = hex_to_color(ALTERNATE_ROW_COLOR)
        commands.extend(('BACKGROUND', (0, r), (-1, r), fill) for r in range(2, len(data), 2))
    return Table(data, colWidths=list(widths), repeatRows=1, style=TableStyle(commands))


class TableBlock(LayoutBlock):
    """Platypus table with a header row; splits between rows and repeats the header row.

    `header` and `rows` keep the cell texts in drawing (left to right) order.
    """

    def __init__(self, table: Table, header: Sequence[str], rows: Sequence[Sequence[str]],
                 widths: Sequence[float], row_offset: int = 0, is_continuation: bool = False,
                 placeholder: bool = False):
        self.table = table
        self.header = tuple(header)
        self.rows = tuple(tuple(r) for r in rows)
        self.widths = tuple(widths)
        self.row_offset = row_offset
        self.is_continuation = is_continuation
        self.placeholder = placeholder
        self.width, self.height = table.wrap(sum(self.widths), MAX_BLOCK_HEIGHT)

    @classmethod
    def build(cls, header: Sequence[str], rows: Sequence[Sequence[str]], widths: Sequence[float],
              spec: TableStyleSpec, placeholder: bool = False) -> 'TableBlock':
        return cls(build_table(header, rows, widths, spec, placeholder), header, rows, widths,
                   placeholder=placeholder)

    @property
    def row_numbers(self) -> range:
        """Global indexes of the data rows held by this piece"""
        return range(self.row_offset, self.row_offset + len(self.rows))

    def draw(self, canv, x, top_y, width):
        _, h = self.table.wrap(self.width, MAX_BLOCK_HEIGHT)
        self.table.drawOn(canv, x, top_y - h)

    def split(self, available):
        parts = self.table.split(self.width, available)
        if len(parts) != 2:
            return None
        head_table, tail_table = parts
        count = head_table._nrows - 1
        head = TableBlock(head_table, self.header, self.rows[:count], self.widths,
                          self.row_offset, self.is_continuation, self.placeholder)
        tail = TableBlock(tail_table, self.header, self.rows[count:], self.widths,
                          self.row_offset + count, True, self.placeholder)
        return head, tail


class HeaderBand(LayoutBlock):
    """Company identity drawn in the band above the content area"""

    def __init__(self, paragraphs: Sequence[Paragraph], text_width: float, rtl: bool, band_height: float,
                 logo_path: Optional[str] = None, logo_size: Optional[Tuple[float, float]] = None):
        self.text = ParagraphBlock(paragraphs, text_width, rtl)
        self.rtl = rtl
        self.band_height = band_height
        self.logo_path = logo_path
        self.logo_size = logo_size
        self.height = max(self.text.height, logo_size[1] if logo_size else 0)

    @property
    def paragraphs(self) -> Tuple[Paragraph, ...]:
        return self.text.paragraphs

    @property
    def has_logo(self) -> bool:
        return bool(self.logo_path and self.logo_size)

    def draw(self, canv, x, top_y, width):
        text_x = x
        if self.has_logo:
            logo_w, logo_h = self.logo_size
            # logo on the side opposite to the text start
            logo_x = x if self.rtl else x + width - logo_w
            canv.drawImage(self.logo_path, logo_x, top_y - logo_h, width=logo_w, height=logo_h,
                           preserveAspectRatio=True, mask='auto')
            if self.rtl:
                text_x = x + width - self.text.width
        self.text.draw(canv, text_x, top_y, self.text.width)


class FooterBand(LayoutBlock):
    """Closing text and contact line; the page label is stamped after pagination"""

    def __init__(self, paragraphs: Sequence[Paragraph], width: float, rtl: bool, page_numbers: bool,
                 label_font: str, label_size: float, label_color: str):
        self.text = ParagraphBlock(paragraphs, width, rtl)
        self.rtl = rtl
        self.page_numbers = page_numbers
        self.label_font = label_font
        self.label_size = label_size
        self.label_color = label_color
        self.height = self.text.height
        if page_numbers:
            self.height += line_height(label_size)

    @property
    def paragraphs(self) -> Tuple[Paragraph, ...]:
        return self.text.paragraphs

    def draw(self, canv, x, top_y, width, page_label: Optional[str] = None):
        self.text.draw(canv, x, top_y, width)
        if self.page_numbers and page_label:
            spec = TextSpec(page_label, self.label_font, self.label_size, self.label_color, align='center')
            label = make_paragraph(spec, width, self.rtl)
            _, h = label.wrap(width, MAX_BLOCK_HEIGHT)
            label.drawOn(canv, x, top_y - self.text.height - h)
