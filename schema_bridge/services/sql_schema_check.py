from __future__ import annotations

import logging
from dataclasses import dataclass, field

from schema_bridge.services.schema_models import SchemaSnapshot
from schema_bridge.services.sql_references import ExtractedReferences

logger = logging.getLogger(__name__)


@dataclass
class SchemaCheckResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def check_against_schema(
    references: ExtractedReferences, snapshot: SchemaSnapshot
) -> SchemaCheckResult:
    """Cross-check extracted identifiers against ``snapshot``.

    Unknown tables are errors. Unknown columns are only warnings: an
    unqualified name cannot be pinned to one table when several are in scope.
    """
    result = SchemaCheckResult()

    for table in references.tables:
        if not any(candidate.matches(table) for candidate in snapshot.tables):
            result.errors.append(f"table '{table}' not found in schema")

    for reference in references.columns:
        if any(column.matches(reference.table, reference.column) for column in snapshot.columns):
            continue
        prefix = f"{reference.table}." if reference.table else ""
        result.warnings.append(
            f"column '{prefix}{reference.column}' not found in schema or table context unclear"
        )

    logger.info(
        "check_against_schema: tables=%s columns=%s errors=%s warnings=%s",
        len(references.tables),
        len(references.columns),
        len(result.errors),
        len(result.warnings),
    )
    return result
