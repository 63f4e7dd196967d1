import io
import types

import pytest

from balancebeam.csv_import import (
    INVALID_AMOUNT,
    INVALID_TYPE,
    MISSING_FIELD,
    NO_DATA,
    SAMPLE_CSV,
    describe_error,
    items_to_frame,
    parse_csv,
    read_csv_upload,
    sample_csv_bytes,
)
from balancebeam.exceptions import CSVFileTypeError, CSVParseError
from balancebeam.models import ItemKind


def _upload(name, data, mime=''):
    return types.SimpleNamespace(name=name, type=mime, read=io.BytesIO(data).read)


def test_parse_csv_assigns_positional_ids():
    items = parse_csv('Salary,5000,income\nRent,1200,expense')
    assert [item.id for item in items] == ['csv-0', 'csv-1']
    assert [item.category for item in items] == ['Salary', 'Rent']
    assert [item.amount for item in items] == [5000.0, 1200.0]
    assert [item.kind for item in items] == [ItemKind.INCOME, ItemKind.EXPENSE]


def test_parse_csv_trims_fields_and_skips_blank_lines():
    items = parse_csv('\n  Salary , 5000 , income \n\n   \nRent,1200,expense\n')
    assert [item.category for item in items] == ['Salary', 'Rent']
    assert items[1].id == 'csv-1'


def test_parse_csv_ignores_extra_fields():
    items = parse_csv('Salary,5000,income,monthly')
    assert len(items) == 1
    assert items[0].kind is ItemKind.INCOME


def test_parse_csv_rejects_unknown_type():
    with pytest.raises(CSVParseError) as excinfo:
        parse_csv('Salary,5000,bonus')
    assert excinfo.value.line == 1
    assert excinfo.value.reason == INVALID_TYPE


def test_parse_csv_rejects_negative_amount():
    with pytest.raises(CSVParseError) as excinfo:
        parse_csv('Rent,-50,expense')
    assert excinfo.value.line == 1
    assert excinfo.value.reason == INVALID_AMOUNT


def test_parse_csv_type_is_case_sensitive():
    with pytest.raises(CSVParseError) as excinfo:
        parse_csv('Salary,5000,Income')
    assert excinfo.value.reason == INVALID_TYPE


def test_parse_csv_reports_missing_field_on_later_line():
    with pytest.raises(CSVParseError) as excinfo:
        parse_csv('Salary,5000,income\nRent,1200')
    assert excinfo.value.line == 2
    assert excinfo.value.reason == MISSING_FIELD
    assert str(excinfo.value) == 'Line 2: missing field'


@pytest.mark.parametrize('text', ['', '   \n  \n'])
def test_parse_csv_without_lines_reports_no_data(text):
    with pytest.raises(CSVParseError) as excinfo:
        parse_csv(text)
    assert excinfo.value.line == 0
    assert excinfo.value.reason == NO_DATA


def test_describe_error_messages():
    assert describe_error(CSVParseError(3, INVALID_AMOUNT)) == 'Invalid amount on line 3'
    assert describe_error(CSVParseError(1, INVALID_TYPE)) == (
        "Invalid type on line 1. Must be 'income' or 'expense'"
    )
    assert describe_error(CSVParseError(0, NO_DATA)) == 'No budget items found in the CSV data'


def test_sample_csv_parses():
    items = parse_csv(sample_csv_bytes().decode('utf-8'))
    assert len(items) == len(SAMPLE_CSV.splitlines()) == 5


def test_read_csv_upload_decodes_bytes_with_bom():
    upload = _upload('budget.csv', '\ufeffSalary,5000,income'.encode('utf-8'))
    assert parse_csv(read_csv_upload(upload))[0].category == 'Salary'


def test_read_csv_upload_accepts_csv_mime_type():
    upload = _upload('export', b'Rent,1200,expense', mime='text/csv')
    assert read_csv_upload(upload) == 'Rent,1200,expense'


def test_read_csv_upload_rejects_other_files():
    with pytest.raises(CSVFileTypeError, match='Please select a CSV file'):
        read_csv_upload(_upload('budget.xlsx', b'data'))


def test_items_to_frame_preview_columns():
    frame = items_to_frame(parse_csv(SAMPLE_CSV))
    assert list(frame.columns) == ['Category', 'Amount', 'Type']
    assert frame.loc[0, 'Category'] == 'Salary'
    assert frame['Amount'].sum() == 8300.0
    assert items_to_frame([]).empty
