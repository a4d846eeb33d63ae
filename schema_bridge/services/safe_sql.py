# [파일 설명]
# - 목적: SQL 요약 정보를 계산해 안전한 로그 출력에 활용한다.
# - 제공 기능: 길이/해시 등의 요약 데이터를 생성한다.
# - 입력/출력: 원문 SQL을 입력으로 받아 요약 dict를 반환한다.
# - 주의 사항: 원문 SQL 자체는 반환하거나 로그에 남기지 않는다.
# - 연관 모듈: 검증 서비스(schema_bridge.services.sql_*)에서 로그 요약에 사용된다.
from __future__ import annotations

import hashlib


# [함수 설명]
# - 목적: 로그에 남길 SQL 요약(길이, 해시 앞 8자리)을 계산한다.
# - 입력: sql: str
# - 출력: len, sha256_8 키를 가진 dict
# - 보안: 원문 SQL 대신 요약 값만 로그에 남기도록 한다.
def summarize_sql(sql: str) -> dict[str, int | str]:
    sql_hash = hashlib.sha256(sql.encode("utf-8", "surrogatepass")).hexdigest()[:8]
    return {"len": len(sql), "sha256_8": sql_hash}
