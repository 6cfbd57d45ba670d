import os
import sys
import csv
import argparse

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from Program import build_parser, main, parse_month


def test_default_mode_is_upcoming_events():
    args = build_parser().parse_args(['example'])
    assert args.mode == 'UpcomingEvents'
    assert args.date is None


def test_parse_month():
    assert parse_month('2025-05') == (2025, 5)


@pytest.mark.parametrize("value", ['2025-13', 'May', '2025/05'])
def test_parse_month_rejects_bad_values(value):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_month(value)


def test_upcoming_events(capsys):
    main(['example', '--date', '2025-05-01'])
    out = capsys.readouterr().out
    assert "Payday on May 9, 2025 - $2,500.00" in out
    assert "Reminder: Submit Pay Card" in out


def test_calendar(capsys):
    main(['example', '--mode', 'Calendar', '--month', '2025-05'])
    out = capsys.readouterr().out
    assert "May 2025" in out
    assert "Submit Pay Card" in out


def test_month_summary(capsys):
    main(['example', '-m', 'MonthSummary', '--month', '2025-05'])
    out = capsys.readouterr().out
    assert "Total Shifts:" in out
    assert "$1,550.00" in out


def test_overtime(capsys):
    main(['example', '-m', 'Overtime', '--date', '2025-05-15'])
    out = capsys.readouterr().out
    assert "$300.00" in out


def test_tax_breakdown_with_income(capsys):
    main(['example', '-m', 'TaxBreakdown', '--income', '60000'])
    out = capsys.readouterr().out
    assert "$9,365.26" in out
    assert "$39,819.39" in out


def test_tax_breakdown_annualizes_month(capsys):
    main(['example', '-m', 'TaxBreakdown', '--month', '2025-05'])
    out = capsys.readouterr().out
    # 1550.00 of May shift pay x 12
    assert "$18,600.00" in out


def test_export_csv(capsys, tmp_path):
    path = tmp_path / 'may.csv'
    main(['example', '-m', 'ExportCsv', '--start', '2025-05-01', '--end', '2025-05-06', '--output', str(path)])
    assert "Exported 3 shifts" in capsys.readouterr().out
    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))
    assert [r['Date'] for r in rows] == ['2025-05-01', '2025-05-02', '2025-05-05']


def test_missing_profile_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        main(['no-such-profile'])
    assert exc.value.code == 1
    assert "Profile file not found" in capsys.readouterr().out


def test_invalid_date_argument():
    with pytest.raises(SystemExit) as exc:
        main(['example', '--date', 'yesterday'])
    assert exc.value.code == 2


def test_invalid_mode():
    with pytest.raises(SystemExit):
        main(['example', '--mode', 'Paycheck'])


def test_negative_income_reports_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(['example', '-m', 'TaxBreakdown', '--income', '-5'])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_huge_income_reports_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(['example', '-m', 'TaxBreakdown', '--income', '1e30'])
    assert exc.value.code == 1
    assert "gross_income must not exceed" in capsys.readouterr().out
