"""
リサーチキャッシュ

(アイデア, プロファイル) ごとのリサーチ結果と信頼判定を 1 時間保持するインメモリストア。
同一サブジェクトへの同時ミスは 1 回のオーケストレーション実行にまとめる（single-flight）。
"""

import asyncio
import hashlib
import json
import time
from collections.abc import Awaitable, Callable

from src.config.logging import get_logger
from src.models.idea import Idea, UserProfile
from src.models.research import ResearchEntry

logger = get_logger(__name__)


def build_subject_key(idea: Idea, profile: UserProfile) -> str:
    """サブジェクトキーを計算

    アイデア表示名・事業形態・ソート済みの社会課題領域から構成する。
    その他のプロファイル項目が異なっても同じリサーチ対象として扱う。

    Args:
        idea: アイデア
        profile: ユーザープロファイル

    Returns:
        SHA-256 ハッシュ（16進数文字列）
    """
    venture_type = profile.venture_type.value if profile.venture_type else ""
    identity = json.dumps(
        [idea.name, venture_type, sorted(set(profile.causes))],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return hashlib.sha256(identity.encode("utf-8")).hexdigest()


class ResearchCache:
    """TTL 付きリサーチキャッシュ"""

    # キャッシュの有効期限（1 時間）
    TTL_SECONDS = 60 * 60

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: dict[str, ResearchEntry] = {}
        self._in_flight: dict[str, asyncio.Task[ResearchEntry]] = {}
        self._waiters: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def is_valid(self, entry: ResearchEntry) -> bool:
        """エントリが有効期限内か"""
        return self._clock() - entry.created_at < self.TTL_SECONDS

    def get(self, subject_key: str) -> ResearchEntry | None:
        """有効なエントリを取得（期限切れはここで削除してミス扱い）"""
        entry = self._entries.get(subject_key)
        if entry is None:
            return None

        if not self.is_valid(entry):
            logger.debug("Research cache entry expired", extra={"subject_key": subject_key[:12]})
            del self._entries[subject_key]
            return None

        return entry

    def put(self, subject_key: str, entry: ResearchEntry) -> None:
        """エントリを保存"""
        self._entries[subject_key] = entry

    async def get_or_run(
        self,
        subject_key: str,
        run: Callable[[], Awaitable[ResearchEntry]],
    ) -> ResearchEntry:
        """キャッシュを参照し、ミス時は run を実行して結果を保存

        同じキーへの同時ミスは 1 つのタスクを共有する。結果は run が正常終了した
        場合のみ保存され、キャンセル時は何も書き込まない。

        Args:
            subject_key: サブジェクトキー
            run: リサーチを実行してエントリを返すコルーチン関数

        Returns:
            キャッシュ済みまたは新規作成したエントリ
        """
        entry = self.get(subject_key)
        if entry is not None:
            logger.info("Research cache hit", extra={"subject_key": subject_key[:12]})
            return entry

        task = self._in_flight.get(subject_key)
        if task is None:
            logger.info("Research cache miss", extra={"subject_key": subject_key[:12]})
            task = asyncio.ensure_future(self._run_and_store(subject_key, run))
            self._in_flight[subject_key] = task
            task.add_done_callback(lambda done: self._release(subject_key, done))
        else:
            logger.info("Joining in-flight research", extra={"subject_key": subject_key[:12]})

        self._waiters[subject_key] = self._waiters.get(subject_key, 0) + 1
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # 最後の待機者がキャンセルされた場合のみ共有タスクを止める
            if self._waiters.get(subject_key, 0) <= 1 and not task.done():
                task.cancel()
            raise
        finally:
            remaining = self._waiters.get(subject_key, 1) - 1
            if remaining > 0:
                self._waiters[subject_key] = remaining
            else:
                self._waiters.pop(subject_key, None)

    async def _run_and_store(
        self, subject_key: str, run: Callable[[], Awaitable[ResearchEntry]]
    ) -> ResearchEntry:
        entry = await run()
        # キャッシュへの書き込み時刻を作成時刻とする
        entry = entry.model_copy(update={"created_at": self._clock()})
        self.put(subject_key, entry)
        return entry

    def _release(self, subject_key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(subject_key) is task:
            del self._in_flight[subject_key]

    async def close(self) -> None:
        """実行中のリサーチをキャンセルしてキャッシュを破棄"""
        pending = list(self._in_flight.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._in_flight.clear()
        self._waiters.clear()
        self._entries.clear()
        logger.info("Research cache closed")
