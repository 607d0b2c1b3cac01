from typing import List

import attr
from sqlalchemy import Column, ForeignKeyConstraint, MetaData, Table


@attr.s(auto_attribs=True)
class RawTable:
    name: str
    columns: List[Column] = attr.Factory(list)
    constraints: List[ForeignKeyConstraint] = attr.Factory(list)

    def append_column(self, column: Column) -> None:
        self.columns.append(column)

    def append_foreign_key(self, column_name: str, referenced_table: str, referenced_column: str) -> None:
        self.constraints.append(
            ForeignKeyConstraint(
                [column_name], [f"{referenced_table}.{referenced_column}"], name=f"fk_{self.name}_{column_name}"
            )
        )

    def materialize(self, metadata: MetaData) -> Table:
        # AUTOINCREMENT keeps SQLite from reusing keys of deleted rows
        return Table(self.name, metadata, *self.columns, *self.constraints, sqlite_autoincrement=True)
