import json
from datetime import date

from mindspend.utils.export import (
    CSV_HEADERS,
    clean_note,
    export_filename,
    expenses_to_csv,
    expenses_to_json,
    expenses_to_pdf,
    format_amount,
)

expenses = [
    {"expense_id": "e1", "date": "2024-06-15", "category": "Food", "amount": 12.5, "mood": "Happy", "note": "coffee, cake"},
    {"expense_id": "e2", "date": "2024-06-14", "category": "Rent", "amount": 1000, "mood": "Stressed", "note": "June\nrent"},
    {"expense_id": "e3", "date": "2024-06-13", "category": "Other", "amount": 3.99, "mood": "Bored", "note": "treat 🍩"},
]


def test_csv_columns_survive_naive_split():
    lines = expenses_to_csv(expenses).strip().split("\n")
    assert lines[0].split(",") == CSV_HEADERS
    assert len(lines) == len(expenses) + 1

    for line, expense in zip(lines[1:], expenses):
        fields = line.split(",")
        assert len(fields) == 5
        assert fields[0] == expense["date"]
        assert fields[1] == expense["category"]
        assert float(fields[2]) == expense["amount"]
        assert fields[3] == expense["mood"]


def test_csv_note_cleaning():
    lines = expenses_to_csv(expenses).strip().split("\n")
    assert lines[1].endswith("coffee; cake")
    assert lines[2].endswith("June rent")


def test_clean_note():
    assert clean_note(None) == ""
    assert clean_note("a,b,c") == "a;b;c"


def test_format_amount():
    assert format_amount(12.5) == "12.5"
    assert format_amount(1000) == "1000"
    assert format_amount(3.99) == "3.99"
    assert format_amount(1234567.89) == "1234567.89"


def test_json_export():
    rows = json.loads(expenses_to_json(expenses))
    assert [row["expense_id"] for row in rows] == ["e1", "e2", "e3"]
    assert rows[2]["note"] == "treat 🍩"
    assert rows[1]["amount"] == 1000.0


def test_pdf_export():
    content = expenses_to_pdf(expenses, today=date(2024, 6, 15))
    assert content.startswith(b"%PDF")


def test_export_filename():
    assert export_filename("csv", today=date(2024, 6, 15)) == "expenses_2024-06-15.csv"
