"""
固定長フィールドのデコーダ

ARINC 424レコードの各フィールド（固定カラム）を解析する関数群です。
解析できない場合は None を返し、呼び出し側で必須/任意を判断します。

【規約】
- 英字・英数字フィールドは左詰め、右側は空白で埋められる
- 数値フィールドは先頭ゼロ埋め
"""

from typing import Optional, Tuple

from ..core.airport import Latitude, Longitude


def is_blank(field: str) -> bool:
    """フィールドが空白のみか"""
    return field.strip(" ") == ""


def parse_text(field: str, max_len: Optional[int] = None) -> Optional[str]:
    """
    英数字フィールドを解析（右側の空白を除去）

    Args:
        field: フィールド文字列
        max_len: 許容する最大長（Noneなら制限なし）

    Returns:
        右側空白を除去した文字列。印字不可能な文字を含む場合はNone
    """
    value = field.rstrip(" ")
    if max_len is not None and len(value) > max_len:
        return None
    if not all(" " <= ch <= "~" for ch in value):
        return None
    return value


def parse_number(
    field: str, low: int = 0, high: Optional[int] = None
) -> Optional[int]:
    """
    符号なし整数フィールドを解析

    Args:
        field: 数字のみからなるフィールド
        low: 許容する最小値
        high: 許容する最大値（含む）

    Returns:
        整数値。数字以外を含む、または範囲外の場合はNone
    """
    if not field or not (field.isascii() and field.isdigit()):
        return None
    value = int(field)
    if value < low or (high is not None and value > high):
        return None
    return value


def parse_optional_number(field: str) -> Optional[int]:
    """空白なら None、そうでなければ整数（不正値も None）"""
    if is_blank(field):
        return None
    return parse_number(field.strip(" "))


def parse_elevation(field: str) -> Optional[int]:
    """標高（ft）。先頭の '-' は負値"""
    if len(field) != 5 or is_blank(field):
        return None
    if field[0] == "-":
        value = parse_number(field[1:])
        return None if value is None else -value
    return parse_number(field)


def parse_cycle_date(field: str) -> Optional[Tuple[int, int]]:
    """サイクル日付 YYCC を (年, サイクル) に変換"""
    if len(field) != 4:
        return None
    year = parse_number(field[:2])
    cycle = parse_number(field[2:])
    if year is None or cycle is None:
        return None
    return (year, cycle)


def parse_latitude(field: str) -> Tuple[Optional[Latitude], str]:
    """
    緯度フィールド（Hddmmsscc、9文字）を解析

    Args:
        field: 例 "N33563299"

    Returns:
        (Latitude, "") または (None, 失敗理由)

    Note:
        0°00'00.00" は N のみ、90° は分・秒が0である必要があります。
    """
    if len(field) != 9:
        return None, f"latitude field has length {len(field)}, expected 9"
    hemisphere = field[0]
    if hemisphere not in ("N", "S"):
        return None, f"invalid latitude hemisphere {hemisphere!r}"
    degrees = parse_number(field[1:3], high=90)
    minutes = parse_number(field[3:5], high=59)
    seconds = parse_number(field[5:7], high=59)
    hundredths = parse_number(field[7:9])
    if None in (degrees, minutes, seconds, hundredths):
        return None, f"invalid latitude digits {field!r}"
    rest = (minutes, seconds, hundredths)
    if degrees == 0 and rest == (0, 0, 0) and hemisphere != "N":
        return None, "zero latitude must use hemisphere N"
    if degrees == 90 and rest != (0, 0, 0):
        return None, f"latitude {field!r} exceeds 90 degrees"
    return Latitude(hemisphere, degrees, minutes, seconds, hundredths), ""


def parse_longitude(field: str) -> Tuple[Optional[Longitude], str]:
    """
    経度フィールド（Hdddmmsscc、10文字）を解析

    Args:
        field: 例 "W118242898"

    Returns:
        (Longitude, "") または (None, 失敗理由)

    Note:
        0°00'00.00" は E のみ、180° は E かつ分・秒が0である必要があります。
    """
    if len(field) != 10:
        return None, f"longitude field has length {len(field)}, expected 10"
    hemisphere = field[0]
    if hemisphere not in ("E", "W"):
        return None, f"invalid longitude hemisphere {hemisphere!r}"
    degrees = parse_number(field[1:4], high=180)
    minutes = parse_number(field[4:6], high=59)
    seconds = parse_number(field[6:8], high=59)
    hundredths = parse_number(field[8:10])
    if None in (degrees, minutes, seconds, hundredths):
        return None, f"invalid longitude digits {field!r}"
    rest = (minutes, seconds, hundredths)
    if degrees == 0 and rest == (0, 0, 0) and hemisphere != "E":
        return None, "zero longitude must use hemisphere E"
    if degrees == 180 and (rest != (0, 0, 0) or hemisphere != "E"):
        return None, f"longitude {field!r} exceeds 180 degrees"
    return Longitude(hemisphere, degrees, minutes, seconds, hundredths), ""
