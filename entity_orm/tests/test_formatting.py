from entity_orm.formatting import tabulate


def test_pads_every_cell_to_widest_of_its_column():
    result = tabulate([(1, "Yan"), (22, "Mark")], headers=["id", "name"])

    assert result == "\n".join(["| id | name |", "| 1  | Yan  |", "| 22 | Mark |"])


def test_renders_null_values():
    result = tabulate([(3, "Harry Potter", None)], headers=["id", "name", "genre"])

    assert result.splitlines()[1] == "| 3  | Harry Potter | null  |"


def test_renders_headers_only_for_empty_table():
    assert tabulate([], headers=["id", "name"]) == "| id | name |"


def test_renders_nothing_without_headers_and_rows():
    assert tabulate([]) == ""
