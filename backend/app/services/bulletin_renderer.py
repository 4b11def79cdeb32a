"""Paint a BulletinDocument onto an A4 PDF with ReportLab."""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.app.core.app_logger import get_logger
from backend.app.core.exceptions import RenderingError
from backend.app.services.bulletin_service import BulletinDocument, ScoreCell
from backend.app.services.grading import band_for_color

logger = get_logger("bulletins")

HEADER_GREEN = colors.HexColor("#00B050")
TRIMESTER_HEADER = colors.HexColor("#90EE90")
ATELIERS_HEADER = colors.Color(200 / 255.0, 200 / 255.0, 200 / 255.0)
GRID_LINE = colors.black
CONTENT_WIDTH = A4[0] - 30 * mm


def _styles():
    styles = getSampleStyleSheet()
    return {
        "school": ParagraphStyle("School", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=12, spaceAfter=10),
        "contact": ParagraphStyle("Contact", parent=styles["Normal"], fontSize=10, alignment=TA_CENTER, spaceAfter=15),
        "title": ParagraphStyle("BulletinTitle", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=12, alignment=TA_CENTER, spaceAfter=15),
        "bold": ParagraphStyle("Bold10", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=10),
        "legend_title": ParagraphStyle("LegendTitle", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=9, spaceBefore=10, spaceAfter=5),
    }


def _color(cell: ScoreCell):
    band = band_for_color(cell.color)
    return colors.HexColor(band.hex_color) if band else None


def _plain_table(rows, widths, style_commands=()) -> Table:
    table = Table(rows, colWidths=widths)
    table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP"), *style_commands]))
    return table


def _header(document: BulletinDocument, styles) -> list:
    half = CONTENT_WIDTH / 2
    location = _plain_table(
        [["\n".join(document.location_left), "\n".join(document.location_right)]],
        [half, half],
        [("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"), ("FONTSIZE", (0, 0), (-1, -1), 10)],
    )
    class_info = _plain_table(
        [[f"CLASSE: {document.classe}", f"ANNEE SCOLAIRE: {document.academic_year}"]],
        [half, half],
        [
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("ALIGN", (1, 0), (1, 0), "RIGHT"),
        ],
    )
    return [
        Paragraph(escape(document.institution_name), styles["school"]),
        Paragraph(escape(document.institution_contact), styles["contact"]),
        location,
        Spacer(1, 10),
        class_info,
        Spacer(1, 10),
    ]


def _student_name(document: BulletinDocument) -> Table:
    return _plain_table(
        [["NOM DE L'ELEVE", document.student_name]],
        [CONTENT_WIDTH / 3, CONTENT_WIDTH * 2 / 3],
        [
            ("FONTNAME", (0, 0), (0, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.5, GRID_LINE),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ],
    )


def _legend_table(document: BulletinDocument, width: float) -> Table:
    bands = list(document.legend)
    table = Table([[band.label for band in bands]], colWidths=[width / len(bands)] * len(bands))
    commands = [
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_LINE),
    ]
    for index, band in enumerate(bands):
        commands.append(("BACKGROUND", (index, 0), (index, 0), colors.HexColor(band.hex_color)))
    table.setStyle(TableStyle(commands))
    return table


def _subject_table(document: BulletinDocument) -> Table:
    widths = [CONTENT_WIDTH * 0.4, CONTENT_WIDTH * 0.3, CONTENT_WIDTH * 0.3]
    rows = [["DOMAINE D'APPRENTISSAGE", "", document.trimester_label or ""]]
    commands = [
        ("SPAN", (0, 0), (1, 0)),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("BACKGROUND", (2, 0), (2, 0), HEADER_GREEN),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_LINE),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ALIGN", (2, 1), (2, -1), "CENTER"),
    ]
    for offset, row in enumerate(document.subject_rows, start=1):
        rows.append([row.domain if row.domain_span else "", row.subject, row.cell.text])
        if row.domain_span > 1:
            commands.append(("SPAN", (0, offset), (0, offset + row.domain_span - 1)))
        background = _color(row.cell)
        if background is not None:
            commands.append(("BACKGROUND", (2, offset), (2, offset), background))

    legend_row = len(rows)
    rows.append(["SYSTEME DE GRADE", _legend_table(document, widths[1] + widths[2]), ""])
    commands += [
        ("SPAN", (1, legend_row), (2, legend_row)),
        ("FONTNAME", (0, legend_row), (0, legend_row), "Helvetica-Bold"),
        ("LEFTPADDING", (1, legend_row), (2, legend_row), 0),
        ("RIGHTPADDING", (1, legend_row), (2, legend_row), 0),
        ("TOPPADDING", (1, legend_row), (2, legend_row), 0),
        ("BOTTOMPADDING", (1, legend_row), (2, legend_row), 0),
    ]
    table = Table(rows, colWidths=widths)
    table.setStyle(TableStyle(commands))
    return table


def _grid_table(document: BulletinDocument) -> Table:
    first = CONTENT_WIDTH * 4 / (4 + 2 * len(document.grid_headers))
    widths = [first] + [(CONTENT_WIDTH - first) / len(document.grid_headers)] * len(document.grid_headers)
    rows = [["ATELIERS", *document.grid_headers]]
    commands = [
        ("BACKGROUND", (0, 0), (0, 0), ATELIERS_HEADER),
        ("BACKGROUND", (1, 0), (-1, 0), TRIMESTER_HEADER),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("ALIGN", (0, 1), (0, -1), "LEFT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_LINE),
    ]
    for offset, grid_row in enumerate(document.grid, start=1):
        rows.append([grid_row.module_name, *(cell.text for cell in grid_row.cells)])
        for column, cell in enumerate(grid_row.cells, start=1):
            background = _color(cell)
            if background is None:
                commands.append(("BACKGROUND", (column, offset), (column, offset), colors.white))
                continue
            commands += [
                ("BACKGROUND", (column, offset), (column, offset), background),
                ("TEXTCOLOR", (column, offset), (column, offset), colors.white),
                ("FONTNAME", (column, offset), (column, offset), "Helvetica-Bold"),
                ("FONTSIZE", (column, offset), (column, offset), 10),
            ]
    table = Table(rows, colWidths=widths, rowHeights=[None] + [25] * len(document.grid))
    table.setStyle(TableStyle(commands))
    return table


def _comment_box(document: BulletinDocument) -> Table:
    table = Table([["Commentaire"], [document.comment or ""]], colWidths=[CONTENT_WIDTH], rowHeights=[None, 30])
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -1), 0.5, GRID_LINE),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    return table


def _signatures(document: BulletinDocument) -> list:
    parents, teacher, head = document.signatures
    half = CONTENT_WIDTH / 2
    pair = _plain_table([[parents, teacher]], [half, half], [("FONTSIZE", (0, 0), (-1, -1), 9)])
    director = _plain_table(
        [[head]],
        [CONTENT_WIDTH],
        [("FONTSIZE", (0, 0), (-1, -1), 9), ("ALIGN", (0, 0), (-1, -1), "RIGHT")],
    )
    return [Spacer(1, 10), pair, Spacer(1, 20), director]


def _story(document: BulletinDocument) -> list:
    styles = _styles()
    story = _header(document, styles)
    if document.title:
        story.append(Paragraph(escape(document.title), styles["title"]))
    story += [_student_name(document), Spacer(1, 10)]

    if document.is_grid:
        story += [
            _grid_table(document),
            Paragraph("SYSTEME DE GRADE", styles["legend_title"]),
            _legend_table(document, CONTENT_WIDTH * 0.8),
        ]
    else:
        story.append(_subject_table(document))

    if document.show_comment:
        story += [Spacer(1, 10), _comment_box(document)]
    story += _signatures(document)
    return story


def render_bulletin_pdf(document: BulletinDocument) -> bytes:
    """Return the bulletin as PDF bytes; failures surface as RenderingError."""
    buffer = BytesIO()
    try:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=15 * mm,
            rightMargin=15 * mm,
            topMargin=15 * mm,
            bottomMargin=15 * mm,
            title=f"Bulletin {document.student_name}",
        )
        doc.build(_story(document))
    except Exception as exc:
        logger.exception("Failed to render bulletin for %s", document.student_name)
        raise RenderingError(f"Error generating bulletin: {exc}", cause=exc) from exc
    return buffer.getvalue()
