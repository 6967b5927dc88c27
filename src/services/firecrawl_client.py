"""
Firecrawl API クライアント

競合サイトをスクレイピングし、メッセージ・価格モデル・ポジショニングを抽出
"""

import asyncio
import re
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel

from src.config.logging import get_logger
from src.config.settings import Settings, get_settings
from src.models.research import CompetitorInsight
from src.services.error_handler import ScrapeAPIError

logger = get_logger(__name__)

# 一度にスクレイピングする URL 数の上限
MAX_SCRAPE_URLS = 3
RAW_CONTENT_LIMIT = 3000

# (キーワード条件, 価格モデル) を先頭から評価
PRICING_RULES = (
    (lambda c: "free" in c and "premium" in c, "Freemium model"),
    (lambda c: "subscription" in c or "/month" in c or "per month" in c, "Subscription-based"),
    (lambda c: "donate" in c or "donation" in c, "Donation-based"),
    (lambda c: "grant" in c or "funded" in c, "Grant/Foundation funded"),
    (lambda c: "free" in c or "no cost" in c, "Free/Open access"),
)

AUDIENCE_PATTERNS = (
    (re.compile(r"for (students|learners|educators)", re.IGNORECASE), "Students/Educators"),
    (re.compile(r"for (nonprofits?|organizations?)", re.IGNORECASE), "Nonprofits/Organizations"),
    (re.compile(r"for (businesses?|companies|enterprises)", re.IGNORECASE), "Businesses"),
    (re.compile(r"for (communities|neighborhoods)", re.IGNORECASE), "Local communities"),
    (re.compile(r"for (families|parents|children)", re.IGNORECASE), "Families"),
    (re.compile(r"for (volunteers?)", re.IGNORECASE), "Volunteers"),
)

DIFFERENTIATOR_PATTERNS = (
    re.compile(r"(?:only|first|unique|unlike|different from)[^.]+", re.IGNORECASE),
    re.compile(r"(?:we believe|our mission|our approach)[^.]+", re.IGNORECASE),
)

_HEADER_RE = re.compile(r"^#{1,3}\s+(.+)$", re.MULTILINE)
_H1_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)


class ScrapedPage(BaseModel):
    """スクレイピング結果"""

    url: str
    title: str = ""
    description: str = ""
    content: str = ""
    success: bool = False
    error: str | None = None


def extract_insights(page: ScrapedPage) -> CompetitorInsight:
    """スクレイピングしたページから競合インサイトを抽出"""
    content = page.content.lower()
    content_lines = [line for line in page.content.split("\n") if line.strip()]

    # タグライン（先頭数行の見出し以外の短い行）
    tagline = ""
    for line in content_lines[:5]:
        if 10 < len(line) < 150 and not line.startswith("#"):
            tagline = line.strip()
            break

    key_messages = [m for m in _HEADER_RE.findall(page.content) if 5 < len(m) < 100]

    pricing_model = next(
        (label for matches, label in PRICING_RULES if matches(content)),
        "Not visible on homepage",
    )
    target_audience = next(
        (label for pattern, label in AUDIENCE_PATTERNS if pattern.search(content)),
        "General public",
    )

    differentiators: list[str] = []
    for pattern in DIFFERENTIATOR_PATTERNS:
        differentiators.extend(m.strip() for m in pattern.findall(page.content)[:2])

    name = page.title.split(" - ")[0].split(" | ")[0].strip()
    if not name:
        first_header = _H1_RE.search(page.content)
        name = first_header.group(1).strip() if first_header else urlparse(page.url).hostname or page.url

    return CompetitorInsight(
        url=page.url,
        name=name,
        tagline=tagline or page.description,
        description=page.description,
        key_messages=tuple(key_messages[:5]),
        target_audience=target_audience,
        pricing_model=pricing_model,
        differentiators=tuple(differentiators[:3]),
        raw_content=page.content[:RAW_CONTENT_LIMIT],
    )


class FirecrawlClient:
    """Firecrawl API クライアント（競合スクレイピング用）"""

    BASE_URL = "https://api.firecrawl.dev/v1"
    SCRAPE_ENDPOINT = "/scrape"

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTPクライアントを取得（遅延初期化）"""
        if not self.settings.firecrawl_api_key:
            raise ScrapeAPIError("Firecrawl API key is not configured")

        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                headers={
                    "Authorization": f"Bearer {self.settings.firecrawl_api_key}",
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(self.settings.scrape_timeout),
            )
        return self._client

    async def close(self) -> None:
        """HTTPクライアントをクローズ"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def scrape_url(self, url: str) -> ScrapedPage:
        """1 件の URL をスクレイピング（失敗は success=False で返す）"""
        client = await self._get_client()

        try:
            response = await client.post(
                self.SCRAPE_ENDPOINT,
                json={
                    "url": url,
                    "formats": ["markdown"],
                    "onlyMainContent": True,
                    "timeout": 30000,
                },
            )
        except httpx.HTTPError as e:
            logger.warning(f"Failed to scrape {url}: {str(e)}")
            return ScrapedPage(url=url, error=str(e))

        if response.status_code != 200:
            logger.warning(f"Firecrawl error for {url}: {response.status_code}")
            return ScrapedPage(url=url, error=f"HTTP {response.status_code}")

        try:
            body = response.json()
            if not body.get("success"):
                return ScrapedPage(url=url, error=str(body.get("error") or "Unknown error"))

            data = body.get("data") or {}
            metadata = data.get("metadata") or {}
            return ScrapedPage(
                url=url,
                title=metadata.get("title") or metadata.get("ogTitle") or "",
                description=metadata.get("description") or metadata.get("ogDescription") or "",
                content=data.get("markdown") or data.get("content") or "",
                success=True,
            )
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Malformed Firecrawl response for {url}: {str(e)}")
            return ScrapedPage(url=url, error=f"Malformed response: {str(e)}")

    async def scrape_competitors(self, urls: list[str]) -> list[CompetitorInsight]:
        """競合 URL を並列にスクレイピングしてインサイトを抽出

        Args:
            urls: 競合 URL（先頭 3 件のみ使用）

        Returns:
            成功したページのインサイト

        Raises:
            ScrapeAPIError: API キーが未設定の場合
        """
        if not urls:
            return []

        targets = urls[:MAX_SCRAPE_URLS]
        pages = await asyncio.gather(*(self.scrape_url(url) for url in targets))

        insights = [extract_insights(page) for page in pages if page.success and page.content]

        logger.info(
            f"Scraped {len(insights)}/{len(targets)} competitor pages",
            extra={"requested": len(targets)},
        )
        return insights
