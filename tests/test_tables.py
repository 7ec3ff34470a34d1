import json

import pytest

from gxclient.core.errors import InternalError
from gxclient.core.tables import (
    ColumnDef,
    ColumnType,
    decode_columns,
    decode_table,
    encode_put_table,
)

COLUMNS = [
    ColumnDef(name="Gene", type=ColumnType.TEXT, nullable=False, role="id"),
    ColumnDef(name="Score", type=ColumnType.FLOAT),
]


def test_encode_put_table_is_column_major():
    form = encode_put_table("data/t1", [("TP53", 1.5), ("MYC", None)], COLUMNS)

    assert form["de"] == "data/t1"
    assert json.loads(form["data"]) == [["TP53", "MYC"], [1.5, None]]
    assert json.loads(form["columns"]) == [
        {"name": "Gene", "type": "Text", "nullable": False, "role": "id"},
        {"name": "Score", "type": "Float", "nullable": True},
    ]


def test_encode_put_table_keeps_extra_attributes():
    column = ColumnDef(name="Set", type=ColumnType.SET, attributes={"hidden": True})

    form = encode_put_table("data/t2", [], [column])

    assert json.loads(form["columns"])[0]["hidden"] is True
    assert json.loads(form["data"]) == [[]]


@pytest.mark.parametrize(
    "rows,columns",
    [
        ([("a",)], COLUMNS),
        ([("a", 1)], []),
        ([("a", 1)], [ColumnDef(name="x"), ColumnDef(name="x")]),
        ([("a",)], [ColumnDef(name=" ")]),
    ],
)
def test_encode_put_table_rejects_bad_input(rows, columns):
    with pytest.raises(InternalError):
        encode_put_table("data/t", rows, columns)


def test_decode_table_with_columns():
    columns = {
        "type": 0,
        "values": [{"name": "Gene", "type": "Text"}, {"name": "Score", "type": "Float"}],
    }
    data = {"type": 0, "values": [["TP53", "MYC"], [1.5, 0.2]]}

    table = decode_table(data, columns)

    assert table.column_names == ["Gene", "Score"]
    assert table.rows == (("TP53", 1.5), ("MYC", 0.2))
    assert table.as_dicts()[1] == {"Gene": "MYC", "Score": 0.2}


def test_decode_table_without_columns_numbers_them():
    table = decode_table({"values": [[1, 2], [3]]})

    assert table.column_names == ["column1", "column2"]
    assert table.rows == ((1, 3), (2, None))


def test_decode_table_returns_none_for_advisory():
    assert decode_table({"type": 1, "message": "Table not found"}) is None
    assert decode_table({"values": "not-a-table"}) is None
    assert decode_table({"values": [[1]]}, {"type": 1, "message": "denied"}) is None


def test_decode_columns_unknown_type_reads_as_text():
    columns = decode_columns({"values": [{"name": "X", "type": "Chart", "sortable": True}]})

    assert columns[0].type is ColumnType.TEXT
    assert columns[0].attributes == {"sortable": True}
