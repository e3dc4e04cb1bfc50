"""
レコードデコーダ

固定長テキスト1行を解析し、空港プライマリレコードであれば AirportRecord に変換します。

【判定結果（タグ付きの戻り値）】
- Decoded(record): 空港プライマリレコードとして解析成功
- NotApplicable: 別種のレコード（エラーではない。呼び出し側は単に読み飛ばす）
- Malformed(reason): 判別子は一致したが識別子・座標が不正（警告して読み飛ばす）

【判別子】
- 0桁目: レコード種別 S（標準）/ T（テーラード）
- 4桁目: セクションコード P（空港）
- 12桁目: サブセクションコード A（標点）
- 21桁目: 継続レコード番号 0 / 1（プライマリレコード）
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from ..core.airport import AirportRecord
from ..exceptions import RecordParseError
from .fields import (
    parse_cycle_date,
    parse_elevation,
    parse_latitude,
    parse_longitude,
    parse_optional_number,
    parse_text,
)

logger = logging.getLogger(__name__)

RECORD_LENGTH = 132

RECORD_TYPES = ("S", "T")
AIRPORT_SECTION = "P"
REFERENCE_POINT_SUBSECTION = "A"
PRIMARY_CONTINUATION = ("0", "1")


@dataclass(frozen=True)
class Decoded:
    record: AirportRecord


@dataclass(frozen=True)
class NotApplicable:
    pass


@dataclass(frozen=True)
class Malformed:
    reason: str
    line_number: Optional[int] = None


DecodeResult = Union[Decoded, NotApplicable, Malformed]

NOT_APPLICABLE = NotApplicable()


def _matches_discriminator(line: str) -> bool:
    if len(line) <= 21:
        return False
    return (
        line[0] in RECORD_TYPES
        and line[4] == AIRPORT_SECTION
        and line[12] == REFERENCE_POINT_SUBSECTION
        and line[21] in PRIMARY_CONTINUATION
    )


def decode_line(
    line: str, line_number: Optional[int] = None, strict: bool = False
) -> DecodeResult:
    """
    1行をデコードします。

    Args:
        line: 固定長テキストレコード（末尾の改行は含んでいてもよい）
        line_number: 入力ストリーム上の行番号（診断用）
        strict: Trueの場合、Malformedの代わりにRecordParseErrorを送出

    Returns:
        Decoded / NotApplicable / Malformed のいずれか

    Raises:
        RecordParseError: strict=True かつ判別子が一致した行が不正な場合
    """
    line = line.rstrip("\r\n")
    if not _matches_discriminator(line):
        return NOT_APPLICABLE

    result = _decode_airport(line, line_number)
    if strict and isinstance(result, Malformed):
        raise RecordParseError(result.reason, line_number)
    return result


def _decode_airport(line: str, line_number: Optional[int]) -> DecodeResult:
    if len(line) != RECORD_LENGTH:
        return Malformed(
            f"record has length {len(line)}, expected {RECORD_LENGTH}", line_number
        )

    identifier = parse_text(line[6:10], max_len=4)
    if not identifier or " " in identifier:
        return Malformed(f"invalid ICAO identifier {line[6:10]!r}", line_number)

    latitude, reason = parse_latitude(line[32:41])
    if latitude is None:
        return Malformed(f"{identifier}: {reason}", line_number)
    longitude, reason = parse_longitude(line[41:51])
    if longitude is None:
        return Malformed(f"{identifier}: {reason}", line_number)

    # 任意フィールド：解析できなければNone
    ata = parse_text(line[13:16])
    record = AirportRecord(
        identifier=identifier,
        latitude=latitude,
        longitude=longitude,
        name=parse_text(line[93:123]) or "",
        icao_code=parse_text(line[10:12]) or parse_text(line[68:70]) or "",
        ata_designator=ata or None,
        elevation=parse_elevation(line[56:61]),
        longest_runway=parse_optional_number(line[27:30]),
        file_record_number=parse_optional_number(line[123:128]),
        cycle_date=parse_cycle_date(line[128:132]),
    )
    return Decoded(record)


def decode_records(lines: Iterable[str]) -> Iterator[AirportRecord]:
    """
    テキストストリームから空港プライマリレコードを順に取り出します。

    不正な行は警告ログを出して読み飛ばし、ストリーム全体の処理は中断しません。

    Args:
        lines: 行のイテラブル（ファイルオブジェクトなど）

    Yields:
        AirportRecord
    """
    malformed = 0
    for line_number, line in enumerate(lines, start=1):
        result = decode_line(line, line_number)
        if isinstance(result, Decoded):
            yield result.record
        elif isinstance(result, Malformed):
            malformed += 1
            logger.warning("Skipping malformed airport record at line %d: %s",
                           line_number, result.reason)
    if malformed:
        logger.info("Skipped %d malformed airport record(s)", malformed)
