# [파일 설명]
# - 목적: 스키마 조회 및 SQL 검증 API 라우트와 요청/응답 모델을 정의한다.
# - 제공 기능: SQL 검증/복잡도/성능 분석, 테이블/컬럼/관계 검색, 스냅샷 교체 엔드포인트를 제공한다.
# - 입력/출력: Pydantic 모델로 요청을 수신하고 camelCase 직렬화된 응답을 반환한다.
# - 주의 사항: 원문 SQL은 로깅/응답에 직접 노출하지 않는 흐름을 유지한다.
# - 연관 모듈: schema_bridge.services.* 및 schema_bridge.shared 저장소와 연결된다.
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from schema_bridge.config import get_settings
from schema_bridge.services.schema_models import Column, Relation, SchemaSnapshot, Table
from schema_bridge.services.schema_repository import (
    SchemaSearchError,
    find_columns,
    find_relations,
    find_tables,
    list_tables,
)
from schema_bridge.services.sql_complexity import complexity_level, complexity_score
from schema_bridge.services.sql_performance import analyze_performance
from schema_bridge.services.sql_syntax import SqlglotParser
from schema_bridge.services.sql_validation import validate_sql
from schema_bridge.shared import get_schema_repository

logger = logging.getLogger(__name__)

router = APIRouter()


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# [클래스 설명]
# - 역할: SQL 검증 요청 모델을 정의한다.
# - 제약/주의: 빈 문자열도 허용하며 구문 오류로 보고된다.
class ValidateSqlRequest(CamelModel):
    query: str
    include_analysis: bool = True
    check_performance: bool = False


class ColumnReferenceModel(BaseModel):
    table: str
    column: str


class QueryAnalysisModel(CamelModel):
    tables_referenced: list[str]
    columns_referenced: list[ColumnReferenceModel]
    join_types: list[str]
    has_where_clause: bool
    has_order_by: bool
    has_group_by: bool
    has_having: bool
    has_subqueries: bool
    query_type: str
    estimated_complexity: str


# [클래스 설명]
# - 역할: SQL 검증 보고서 응답 모델을 정의한다.
# - 핵심 동작: isValid는 syntaxErrors/schemaErrors가 모두 비어 있을 때만 true이다.
class ValidationReportModel(CamelModel):
    is_valid: bool
    syntax_errors: list[str]
    schema_errors: list[str]
    warnings: list[str]
    performance_issues: list[str] | None = None
    analysis: QueryAnalysisModel | None = None
    summary: str


class SqlTextRequest(CamelModel):
    query: str


class ComplexityResponse(CamelModel):
    score: int
    level: str


class PerformanceResponse(CamelModel):
    issues: list[str]
    complexity_level: str
    metrics: dict[str, int]


class TableModel(BaseModel):
    physical_name: str
    logical_name: str
    database_name: str | None = None
    schema_name: str | None = None
    primary_key: str | None = None
    description: str | None = None


class ColumnModel(BaseModel):
    table_physical_name: str
    physical_name: str
    logical_name: str
    data_type: str
    description: str | None = None


class RelationModel(BaseModel):
    source_table: str
    source_column: str
    target_table: str
    target_column: str


class SchemaSnapshotModel(BaseModel):
    tables: list[TableModel] = Field(default_factory=list)
    columns: list[ColumnModel] = Field(default_factory=list)
    relations: list[RelationModel] = Field(default_factory=list)


class SnapshotSummary(BaseModel):
    tables: int
    columns: int
    relations: int


class FindTableRequest(BaseModel):
    logical_name: str | None = None
    physical_name: str | None = None
    database_name: str | None = None
    schema_name: str | None = None
    exact_match: bool = False

    @model_validator(mode="after")
    def validate_criteria(self) -> FindTableRequest:
        criteria = (self.logical_name, self.physical_name, self.database_name, self.schema_name)
        if not any(value and value.strip() for value in criteria):
            raise ValueError(
                "Provide at least one of logical_name, physical_name, database_name, schema_name."
            )
        return self


class FindColumnRequest(BaseModel):
    logical_name: str | None = None
    physical_name: str | None = None
    table_name: str | None = None
    exact_match: bool = False

    @model_validator(mode="after")
    def validate_criteria(self) -> FindColumnRequest:
        criteria = (self.logical_name, self.physical_name, self.table_name)
        if not any(value and value.strip() for value in criteria):
            raise ValueError("Provide at least one of logical_name, physical_name, table_name.")
        return self


class FindRelationsRequest(BaseModel):
    table_name: str = Field(..., min_length=1)
    exact_match: bool = False


class TablesResponse(BaseModel):
    tables: list[TableModel]


class ColumnsResponse(BaseModel):
    columns: list[ColumnModel]


class RelationsResponse(BaseModel):
    relations: list[RelationModel]


# [함수 설명]
# - 목적: /sql/validate 엔드포인트 요청을 처리한다.
# - 입력: query, includeAnalysis, checkPerformance
# - 출력: ValidationReport (isValid, syntaxErrors, schemaErrors, warnings, performanceIssues, analysis, summary)
# - 에러 처리: 검증 중 발생한 모든 예외는 보고서 안의 오류 항목으로 변환된다.
# - 보안: 원문 SQL은 로그에 요약 정보로만 기록한다.
@router.post("/sql/validate", response_model=ValidationReportModel)
def sql_validate(request: ValidateSqlRequest) -> ValidationReportModel:
    report = validate_sql(
        request.query,
        get_schema_repository(),
        include_analysis=request.include_analysis,
        check_performance=request.check_performance,
        parser=SqlglotParser(get_settings().sql_dialect),
    )
    return ValidationReportModel(**asdict(report))


@router.post("/sql/complexity", response_model=ComplexityResponse)
def sql_complexity(request: SqlTextRequest) -> ComplexityResponse:
    score = complexity_score(request.query)
    return ComplexityResponse(score=score, level=complexity_level(score))


@router.post("/sql/performance", response_model=PerformanceResponse)
def sql_performance(request: SqlTextRequest) -> PerformanceResponse:
    return PerformanceResponse(**asdict(analyze_performance(request.query)))


@router.get("/schema/tables", response_model=TablesResponse)
def schema_list_tables() -> TablesResponse:
    tables = list_tables(get_schema_repository().snapshot)
    return TablesResponse(tables=[TableModel(**asdict(table)) for table in tables])


@router.post("/schema/tables/search", response_model=TablesResponse)
def schema_find_tables(request: FindTableRequest) -> TablesResponse:
    try:
        tables = find_tables(
            get_schema_repository().snapshot,
            logical_name=request.logical_name,
            physical_name=request.physical_name,
            database_name=request.database_name,
            schema_name=request.schema_name,
            exact_match=request.exact_match,
        )
    except SchemaSearchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return TablesResponse(tables=[TableModel(**asdict(table)) for table in tables])


@router.post("/schema/columns/search", response_model=ColumnsResponse)
def schema_find_columns(request: FindColumnRequest) -> ColumnsResponse:
    try:
        columns = find_columns(
            get_schema_repository().snapshot,
            logical_name=request.logical_name,
            physical_name=request.physical_name,
            table_name=request.table_name,
            exact_match=request.exact_match,
        )
    except SchemaSearchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ColumnsResponse(columns=[ColumnModel(**asdict(column)) for column in columns])


@router.post("/schema/relations/search", response_model=RelationsResponse)
def schema_find_relations(request: FindRelationsRequest) -> RelationsResponse:
    try:
        relations = find_relations(
            get_schema_repository().snapshot,
            table_name=request.table_name,
            exact_match=request.exact_match,
        )
    except SchemaSearchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RelationsResponse(
        relations=[RelationModel(**asdict(relation)) for relation in relations]
    )


# [함수 설명]
# - 목적: 외부 협력자가 채운 스키마 스냅샷으로 메모리 저장소를 교체한다.
# - 입력: tables/columns/relations 레코드 목록
# - 출력: 교체된 스냅샷의 레코드 개수
# - 주의 사항: 진행 중인 검증은 교체 이전 스냅샷을 그대로 사용한다.
@router.put("/schema/snapshot", response_model=SnapshotSummary)
def schema_replace_snapshot(request: SchemaSnapshotModel) -> SnapshotSummary:
    snapshot = SchemaSnapshot.build(
        tables=[Table(**item.model_dump()) for item in request.tables],
        columns=[Column(**item.model_dump()) for item in request.columns],
        relations=[Relation(**item.model_dump()) for item in request.relations],
    )
    get_schema_repository().replace(snapshot)
    return SnapshotSummary(
        tables=len(snapshot.tables),
        columns=len(snapshot.columns),
        relations=len(snapshot.relations),
    )
