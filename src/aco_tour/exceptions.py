"""
例外モジュール

パッケージ全体で使用する例外クラスを定義します。

【分類】
- ConfigurationError: 実行前に検出される致命的な設定エラー（探索は行わない）
- RecordParseError: 空港レコードの解析失敗（strictモードでのみ送出）
"""


class AcoTourError(Exception):
    """パッケージ固有の例外の基底クラス"""


class ConfigurationError(AcoTourError, ValueError):
    """
    設定エラー

    カタログが小さすぎる、パラメータが範囲外、アリ数・反復数が0など。
    """


class RecordParseError(AcoTourError, ValueError):
    """
    レコード解析エラー

    Attributes:
        reason (str): 失敗理由
        line_number (int | None): 入力ストリーム上の行番号（1始まり）
    """

    def __init__(self, reason: str, line_number=None):
        self.reason = reason
        self.line_number = line_number
        if line_number is None:
            super().__init__(reason)
        else:
            super().__init__(f"line {line_number}: {reason}")
