"""Rich renderer for workload reports.

Transforms SDK JSON output (Workload.to_dict) into formatted Rich tables.
"""

from typing import List

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box


def render_workload(console: Console, data: dict) -> None:
    """Render one workload as Rich tables.

    Args:
        console: Rich Console instance
        data: SDK output from Workload.to_dict()
    """
    teacher = data.get("teacher", {})
    name = f"{teacher.get('first_name', '')} {teacher.get('last_name', '')}".strip()
    title = f"{name} ({teacher.get('code', '?')})" if name else teacher.get("code", "?")

    console.print(Panel(
        f"School year {data.get('school_year', '?')}  |  "
        f"Age relief {_pct(data.get('age_relief_factor1'))} / {_pct(data.get('age_relief_factor2'))}",
        title=title,
        border_style="cyan",
    ))

    _render_courses(console, data.get("courses", {}))
    _render_pool(console, data.get("pool", {}))
    _render_theses(console, data.get("theses", {}))
    _render_postings(console, data.get("postings", {}))
    _render_summary(console, data.get("summary", {}))
    _render_payroll(console, data.get("payroll", {}))
    _render_balance(console, data.get("balance", []))


def _render_courses(console: Console, courses: dict) -> None:
    items = courses.get("items", [])
    if not items:
        return

    table = Table(title="Courses", box=box.ROUNDED)
    table.add_column("Subject", style="bold")
    table.add_column("Classes")
    table.add_column("L 1", justify="right")
    table.add_column("% 1", justify="right")
    table.add_column("L 2", justify="right")
    table.add_column("% 2", justify="right")

    for item in items:
        table.add_row(
            item["subject"],
            ", ".join(item.get("school_classes", [])) or item.get("grade", ""),
            _lessons(item["lessons1"]),
            _pct(item["percent1"]),
            _lessons(item["lessons2"]),
            _pct(item["percent2"]),
        )

    total = courses.get("total", {})
    table.add_section()
    table.add_row(
        "[bold]Total[/bold]", "",
        _lessons(total.get("lessons1")), _pct(total.get("percent1")),
        _lessons(total.get("lessons2")), _pct(total.get("percent2")),
    )
    console.print(table)


def _render_pool(console: Console, pool: dict) -> None:
    items = pool.get("items", [])
    if not items:
        return

    table = Table(title=pool.get("title", "Pool"), box=box.ROUNDED)
    table.add_column("Description", style="bold")
    table.add_column("Type")
    table.add_column("% 1", justify="right")
    table.add_column("% 2", justify="right")

    for item in items:
        table.add_row(item["description"], item.get("type", ""), _pct(item["percent1"]), _pct(item["percent2"]))

    total = pool.get("total", {})
    table.add_section()
    table.add_row("[bold]Total[/bold]", "", _pct(total.get("percent1")), _pct(total.get("percent2")))
    console.print(table)


def _render_theses(console: Console, theses: dict) -> None:
    items = theses.get("items", [])
    if not items:
        return

    table = Table(title="Theses", box=box.ROUNDED)
    table.add_column("Type", style="bold")
    table.add_column("Count", justify="right")
    table.add_column("% each", justify="right")
    table.add_column("%", justify="right")

    for item in items:
        table.add_row(item["description"], f"{item['count']:g}", _pct(item["percent_each"]), _pct(item["percent"]))
    console.print(table)


def _render_postings(console: Console, postings: dict) -> None:
    items = postings.get("items", [])
    if not items:
        return

    table = Table(title="Postings", box=box.ROUNDED)
    table.add_column("Description", style="bold")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Payroll type")
    table.add_column("Lessons", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Age relief", justify="right")

    for item in items:
        details = item.get("details", [])
        if not details:
            table.add_row(item["description"], item.get("start_date") or "", item.get("end_date") or "",
                          "", "", "", "")
        for i, detail in enumerate(details):
            first = i == 0
            table.add_row(
                item["description"] if first else "",
                (item.get("start_date") or "") if first else "",
                (item.get("end_date") or "") if first else "",
                detail["payroll_type"],
                _lessons(detail["lessons"]) if detail["lessons"] else "",
                _pct(detail["percent"]),
                _pct(detail["age_relief"]),
            )

    table.add_section()
    table.add_row("[bold]Total[/bold]", "", "", "", "", _pct(postings.get("total", {}).get("percent")), "")
    console.print(table)


def _render_summary(console: Console, summary: dict) -> None:
    table = Table(title="Summary", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=14)
    table.add_column("% 1", justify="right")
    table.add_column("AR 1", justify="right")
    table.add_column("% 2", justify="right")
    table.add_column("AR 2", justify="right")
    table.add_column("Workload", justify="right")

    rows: List[dict] = list(summary.get("items", []))
    for row in rows:
        table.add_row(*_summary_cells(row))

    total = summary.get("total")
    if total:
        table.add_section()
        cells = _summary_cells(total)
        table.add_row(f"[bold]{cells[0]}[/bold]", *cells[1:])
    console.print(table)


def _summary_cells(row: dict) -> List[str]:
    return [
        row["description"],
        _pct(row["percent1"]),
        _pct(row["age_relief1"]),
        _pct(row["percent2"]),
        _pct(row["age_relief2"]),
        _pct(row["percent_with_age_relief"]),
    ]


def _render_payroll(console: Console, payroll: dict) -> None:
    table = Table(title="Payroll", box=box.ROUNDED)
    table.add_column("Type", style="bold")
    table.add_column("Description")
    table.add_column("L 1", justify="right")
    table.add_column("% 1", justify="right")
    table.add_column("L 2", justify="right")
    table.add_column("% 2", justify="right")

    for item in payroll.get("items", []):
        table.add_row(
            item["payroll_type"],
            item.get("description", ""),
            _lessons(item["lessons1"]) if item["lessons1"] else "",
            _pct(item["percent1"]),
            _lessons(item["lessons2"]) if item["lessons2"] else "",
            _pct(item["percent2"]),
        )

    total = payroll.get("total", {})
    table.add_section()
    table.add_row("[bold]Total[/bold]", "", "", _pct(total.get("percent1")), "", _pct(total.get("percent2")))
    console.print(table)


def _render_balance(console: Console, balance: List[dict]) -> None:
    table = Table(show_header=False, box=box.ROUNDED, title="Balance")
    table.add_column("", style="bold", min_width=18)
    table.add_column("%", justify="right", min_width=10)

    for i, line in enumerate(balance):
        percent = line["percent"]
        text = _pct(percent)
        if i == len(balance) - 1:
            style = "green" if percent >= 0 else "red"
            text = f"[{style}]{text}[/{style}]"
        table.add_row(line["description"], text)
    console.print(table)


def render_balances(console: Console, years: List[dict]) -> None:
    """Render rolled balances: one row per teacher and school year.

    Args:
        console: Rich Console instance
        years: List of {"school_year": code, "teachers": [{code, opening, closing}, ...]}
    """
    table = Table(title="Balances", box=box.ROUNDED)
    table.add_column("School year", style="bold")
    table.add_column("Teacher")
    table.add_column("Opening", justify="right")
    table.add_column("Closing", justify="right")

    for year in years:
        for row in year["teachers"]:
            table.add_row(year["school_year"], row["code"], _pct(row["opening_balance"]), _pct(row["closing_balance"]))
    console.print(table)


def _pct(value) -> str:
    """Format percent value."""
    if value is None:
        return "-"
    return f"{value:,.3f}"


def _lessons(value) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"
