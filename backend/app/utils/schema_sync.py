"""기존 DB에 모델 대비 누락된 컬럼/인덱스를 보강하는 런타임 스키마 동기화 유틸리티."""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.schema import CreateColumn, CreateIndex, MetaData, Table

logger = logging.getLogger(__name__)


def _missing_column_statements(engine: Engine, table: Table, existing_columns: set[str]) -> list[str]:
    preparer = engine.dialect.identifier_preparer
    table_sql = preparer.format_table(table)
    statements = []
    for column in table.columns:
        if column.name in existing_columns or column.primary_key:
            continue
        column_sql = str(CreateColumn(column).compile(dialect=engine.dialect)).strip()
        statements.append(f"ALTER TABLE {table_sql} ADD COLUMN {column_sql}")
    return statements


def sync_missing_schema_objects(engine: Engine, metadata: MetaData) -> list[str]:
    """모델 메타데이터 기준으로 누락된 컬럼/인덱스를 추가하고 적용한 객체 이름을 돌려준다."""
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    applied: list[str] = []

    with engine.begin() as conn:
        for table in metadata.sorted_tables:
            if table.name not in existing_tables:
                continue

            existing_columns = {str(row["name"]) for row in inspector.get_columns(table.name)}
            for statement in _missing_column_statements(engine, table, existing_columns):
                conn.execute(text(statement))
                applied.append(statement)

            existing_indexes = {
                str(row.get("name"))
                for row in inspector.get_indexes(table.name)
                if row.get("name")
            }
            for index in table.indexes:
                if not index.name or index.name in existing_indexes:
                    continue
                conn.execute(CreateIndex(index))
                applied.append(f"CREATE INDEX {index.name}")

    for item in applied:
        logger.info("[schema] applied: %s", item)
    return applied
