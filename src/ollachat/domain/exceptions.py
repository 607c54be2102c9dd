"""Domain exceptions."""


class ThreadNotFoundError(Exception):
    """指定したスレッドがコレクションに存在しない場合に発生する例外"""

    def __init__(self, thread_id: str, message: str = "") -> None:
        """初期化

        Args:
            thread_id: 見つからなかったスレッドのID
            message: エラーメッセージ（オプション）
        """
        self.thread_id = thread_id
        super().__init__(message or f"Thread {thread_id} not found")


class FileReadError(Exception):
    """コンテキスト用のファイルを読み込めない場合に発生する例外

    コンテキスト組み立て中は致命的ではなく、該当ファイルの断片を省略する。
    """

    def __init__(self, path: str, message: str = "") -> None:
        """初期化

        Args:
            path: 読み込めなかったファイルのパス
            message: エラーメッセージ（オプション）
        """
        self.path = path
        super().__init__(message or f"Failed to read file {path}")


class CommandExecutionError(Exception):
    """ターミナルコマンドを起動できない場合に発生する例外"""

    def __init__(self, command: str, message: str = "") -> None:
        """初期化

        Args:
            command: 起動に失敗したコマンド
            message: エラーメッセージ（オプション）
        """
        self.command = command
        super().__init__(message or f"Failed to execute command: {command}")
