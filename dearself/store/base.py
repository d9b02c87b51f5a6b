#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Remote store interface
Filtered-query capability over the per-user collections

Panels build queries fluently, the same way they would against the hosted
backend:

    store.table(Table.STEPS_LOGS).select("*").eq("user_id", uid).eq("date", today).first()

A backend only has to implement fetch/count/insert/update/delete over a
QuerySpec. Every backend failure surfaces as StoreError.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from dearself.models.enums import Table

Row = Dict[str, Any]

# ===== QUERY =====

@dataclass
class QuerySpec:
    """Everything a backend needs to run one read"""
    table: str
    columns: str = "*"
    filters: List[Tuple[str, str, Any]] = field(default_factory=list)  # (op, column, value)
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None

    def column_list(self) -> Optional[List[str]]:
        if self.columns.strip() == "*":
            return None
        return [column.strip() for column in self.columns.split(",") if column.strip()]

class TableQuery:
    """Fluent builder bound to one table"""

    def __init__(self, store: "RemoteStore", table: str):
        self.store = store
        self.spec = QuerySpec(table=table)

    def select(self, columns: str = "*") -> "TableQuery":
        self.spec.columns = columns
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        self.spec.filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value: Any) -> "TableQuery":
        self.spec.filters.append(("gte", column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "TableQuery":
        self.spec.order_by = column
        self.spec.descending = desc
        return self

    def limit(self, count: int) -> "TableQuery":
        self.spec.limit = count
        return self

    # --- terminal operations ---

    def execute(self) -> List[Row]:
        return self.store.fetch(self.spec)

    def first(self) -> Optional[Row]:
        """At most one row; None when nothing matches"""
        self.spec.limit = 1
        rows = self.store.fetch(self.spec)
        return rows[0] if rows else None

    def count(self) -> int:
        return self.store.count(self.spec)

    def insert(self, row: Row) -> Row:
        return self.store.insert(self.spec.table, row)

    def update(self, row_id: str, fields: Row) -> Optional[Row]:
        return self.store.update(self.spec.table, row_id, fields)

    def delete(self, row_id: str) -> None:
        self.store.delete(self.spec.table, row_id)

# ===== STORE =====

class RemoteStore(ABC):
    """Per-user collections behind a filtered-query capability"""

    def table(self, name: Union[Table, str]) -> TableQuery:
        if isinstance(name, Table):
            name = name.value
        return TableQuery(self, name)

    @abstractmethod
    def fetch(self, spec: QuerySpec) -> List[Row]:
        ...

    @abstractmethod
    def count(self, spec: QuerySpec) -> int:
        ...

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        ...

    @abstractmethod
    def update(self, table: str, row_id: str, fields: Row) -> Optional[Row]:
        ...

    @abstractmethod
    def delete(self, table: str, row_id: str) -> None:
        ...

    def close(self) -> None:
        pass
