"""Column width negotiation for human-format output.

Every visible column gets the width of its widest cell (tree and group art
included). On a terminal the total is then squeezed to the terminal width,
taking cells from truncating/wrapping columns first. NOEXTREMES columns
whose widest cell is an outlier first drop back to their average width.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .ansi import display_width
from .model import Column

if TYPE_CHECKING:
    from .printer import PrintSession

logger = logging.getLogger(__name__)


def _header_width(session: PrintSession, column: Column) -> int:
    if session.table.no_headings:
        return 0
    return display_width(session.encode(session.header_text(column), column.safechars))


def _minimum_width(session: PrintSession, column: Column) -> int:
    return max(1, _header_width(session, column))


def _shrinkable(session: PrintSession, column: Column) -> bool:
    if column.is_strict_width:
        return False
    return session.table.no_wrap or column.is_trunc or column.is_wrap


def natural_widths(session: PrintSession) -> tuple[dict[int, int], dict[int, int]]:
    """Measure every visible column in print order.

    Returns the widest cell and the average non-empty cell width per column.
    """
    widths = {cl.seqnum: _header_width(session, cl) for cl in session.visible}
    totals = dict.fromkeys(widths, 0)
    counts = dict.fromkeys(widths, 0)
    buf = session.buffer
    for line in session.print_order():
        session.prepare_line(line)
        for cl in session.visible:
            session.cell_to_buffer(line, cl, buf)
            text, width = buf.safe_data(session.table.no_encode, cl.safechars)
            if cl.is_customwrap and text:
                width = max(display_width(chunk) for chunk in cl.iter_chunks(text))
            widths[cl.seqnum] = max(widths[cl.seqnum], width)
            if width:
                totals[cl.seqnum] += width
                counts[cl.seqnum] += 1
    session.reset_lanes()
    averages = {key: totals[key] // counts[key] if counts[key] else 0 for key in widths}
    return widths, averages


def calculate(session: PrintSession) -> None:
    """Assign ``Column.width`` for every visible column."""
    table = session.table
    visible = session.visible
    if not visible:
        return
    widths, averages = natural_widths(session)

    for cl in visible:
        width = widths[cl.seqnum]
        if cl.width_hint >= 1:
            width = max(width, int(cl.width_hint))
        elif cl.width_hint > 0 and session.is_term:
            width = max(width, int(cl.width_hint * session.termwidth))
        cl.width = width

    if not session.is_term:
        return

    total = sum(cl.width for cl in visible) + len(table.colsep) * (len(visible) - 1)
    logger.debug("calculate: total width %d, terminal width %d", total, session.termwidth)
    for cl in visible:
        if total <= session.termwidth:
            break
        if not cl.is_noextremes or cl.is_strict_width:
            continue
        # Extreme: the widest cell is more than twice the average one.
        average = max(averages[cl.seqnum], _minimum_width(session, cl))
        if cl.width > 2 * averages[cl.seqnum] and cl.width > average:
            logger.debug("column %s: extreme width %d reduced to %d", cl.name, cl.width, average)
            total -= cl.width - average
            cl.width = average

    while total > session.termwidth:
        candidates = [
            cl for cl in visible if _shrinkable(session, cl) and cl.width > _minimum_width(session, cl)
        ]
        if not candidates:
            break
        widest = max(candidates, key=lambda cl: cl.width)
        widest.width -= 1
        total -= 1

    if table.maxout and total < session.termwidth:
        visible[-1].width += session.termwidth - total

    for cl in visible:
        logger.debug("column %s: width %d", cl.name, cl.width)
