# services/errors.py


class AnalysisError(Exception):
    """
    解析を中断させるエラーの基底クラス。
    message はそのまま利用者に表示できる文言にしておく。
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(AnalysisError):
    """URL の形式が不正。ネットワークアクセスの前に送出する。"""


class FetchFailureError(AnalysisError):
    """設定されたすべてのプロキシで取得に失敗した。"""


class EmptyContentError(AnalysisError):
    """取得自体は成功したが、使える本文が返ってこなかった。"""
