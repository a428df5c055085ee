import csv
import io
import json
from datetime import date
from typing import Any, Dict, List, Optional

from fpdf import FPDF

from mindspend.utils.analyzer import SpendingAnalyzer, as_date, utc_today

CSV_HEADERS = ["Date", "Category", "Amount", "Mood", "Note"]


def clean_note(note: Optional[str]) -> str:
    # Commas become semicolons so a plain split(",") recovers every column
    text = (note or "").replace(",", ";")
    return " ".join(text.splitlines())


def format_amount(amount: Any) -> str:
    return f"{float(amount):.2f}".rstrip("0").rstrip(".")


def export_filename(extension: str, today: Optional[date] = None) -> str:
    return f"expenses_{(today or utc_today()).isoformat()}.{extension}"


def expenses_to_csv(expenses: List[Dict[str, Any]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for e in expenses:
        writer.writerow([
            as_date(e["date"]).isoformat(),
            e["category"],
            format_amount(e["amount"]),
            e.get("mood", ""),
            clean_note(e.get("note")),
        ])
    return output.getvalue()


def expenses_to_json(expenses: List[Dict[str, Any]]) -> str:
    rows = [
        {
            "expense_id": e.get("expense_id"),
            "date": as_date(e["date"]).isoformat(),
            "category": e["category"],
            "amount": float(e["amount"]),
            "mood": e.get("mood"),
            "note": e.get("note", ""),
            "title": e.get("title"),
            "receipt_url": e.get("receipt_url"),
        }
        for e in expenses
    ]
    return json.dumps(rows, indent=2, ensure_ascii=False)


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1; emoji and other symbols are dropped
    return text.encode("latin-1", "ignore").decode("latin-1")


def expenses_to_pdf(expenses: List[Dict[str, Any]], today: Optional[date] = None) -> bytes:
    analyzer = SpendingAnalyzer(today=today)
    generated = analyzer.today.isoformat()

    pdf = FPDF()
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, f"Expense Report - {generated}", new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", "", 12)
    pdf.cell(0, 10, f"Total Spent: ${analyzer.total(expenses):.2f}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 10, f"This Month: ${analyzer.month_total(expenses):.2f}", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(5)

    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 10, "Spending by Category:", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 12)
    for cat, amt in sorted(analyzer.category_totals(expenses).items()):
        pdf.cell(0, 8, f"- {cat}: ${amt:.2f}", new_x="LMARGIN", new_y="NEXT")

    pdf.ln(5)
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 10, "Expenses:", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    for e in expenses:
        line = f"{as_date(e['date']).isoformat()}  {e['category']}  ${float(e['amount']):.2f}  ({e.get('mood', '')})"
        note = clean_note(e.get("note"))
        if note:
            line += f"  {note}"
        pdf.cell(0, 6, _latin1(line), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())
