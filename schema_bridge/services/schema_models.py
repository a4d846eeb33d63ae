# [파일 설명]
# - 목적: 스키마 메타데이터(테이블/컬럼/관계)와 스냅샷 타입을 정의한다.
# - 제공 기능: 불변 레코드 dataclass와 저장소 프로토콜을 제공한다.
# - 입력/출력: 외부 협력자가 채운 레코드를 그대로 보관한다.
# - 주의 사항: 스냅샷은 검증 중 절대 변경되지 않는다.
# - 연관 모듈: schema_repository, sql_schema_check, sql_join_advisor, sql_validation.
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class Table:
    physical_name: str
    logical_name: str
    database_name: str | None = None
    schema_name: str | None = None
    primary_key: str | None = None
    description: str | None = None

    def matches(self, name: str) -> bool:
        lowered = name.lower()
        return self.physical_name.lower() == lowered or self.logical_name.lower() == lowered


@dataclass(frozen=True)
class Column:
    table_physical_name: str
    physical_name: str
    logical_name: str
    data_type: str
    description: str | None = None

    def matches(self, table: str, column: str) -> bool:
        if table and self.table_physical_name.lower() != table.lower():
            return False
        lowered = column.lower()
        return self.physical_name.lower() == lowered or self.logical_name.lower() == lowered


@dataclass(frozen=True)
class Relation:
    source_table: str
    source_column: str
    target_table: str
    target_column: str

    def join_condition(self) -> str:
        return (
            f"{self.source_table}.{self.source_column} = "
            f"{self.target_table}.{self.target_column}"
        )


class SchemaRepository(Protocol):
    def get_all_tables(self) -> Sequence[Table]: ...

    def get_all_columns(self) -> Sequence[Column]: ...

    def get_all_relations(self) -> Sequence[Relation]: ...


@dataclass(frozen=True)
class SchemaSnapshot:
    """Immutable bundle of tables, columns and relations.

    A snapshot satisfies :class:`SchemaRepository` itself, so it can be passed
    wherever a repository is expected.
    """

    tables: tuple[Table, ...] = field(default_factory=tuple)
    columns: tuple[Column, ...] = field(default_factory=tuple)
    relations: tuple[Relation, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        tables: Iterable[Table] = (),
        columns: Iterable[Column] = (),
        relations: Iterable[Relation] = (),
    ) -> SchemaSnapshot:
        return cls(tuple(tables), tuple(columns), tuple(relations))

    @classmethod
    def from_repository(cls, repository: SchemaRepository) -> SchemaSnapshot:
        if isinstance(repository, SchemaSnapshot):
            return repository
        return cls.build(
            repository.get_all_tables(),
            repository.get_all_columns(),
            repository.get_all_relations(),
        )

    def get_all_tables(self) -> tuple[Table, ...]:
        return self.tables

    def get_all_columns(self) -> tuple[Column, ...]:
        return self.columns

    def get_all_relations(self) -> tuple[Relation, ...]:
        return self.relations
