"""
Perplexity API クライアント

リアルタイム検索による市場調査（市場規模・競合・資金調達動向）を実施
"""

import asyncio
import re
from urllib.parse import urlparse

import httpx

from src.config.logging import get_logger
from src.config.settings import Settings, get_settings
from src.models.research import MarketResearchData, ResearchQueryResult
from src.services.error_handler import ResearchAPIError

logger = get_logger(__name__)

# 競合候補から除外するドメイン（ニュース・SNS・百科事典・行政）
EXCLUDED_DOMAIN_PATTERNS = (
    "wikipedia.org",
    "news.",
    "bbc.",
    "cnn.",
    "nytimes.",
    "washingtonpost.",
    "forbes.",
    "medium.com",
    "linkedin.com",
    "twitter.com",
    "facebook.com",
    "youtube.com",
    "gov.",
    ".gov",
)

FILLER_WORDS = frozenset(
    {
        "a", "an", "the", "for", "to", "and", "or", "that", "which", "with",
        "personalized", "innovative", "revolutionary", "unique", "new",
        "helping", "providing", "offering", "creating", "building",
        "platform", "service", "solution", "app", "tool", "system",
    }
)  # fmt: skip

_URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+")
_COMPETITOR_NAME_PATTERNS = (
    re.compile(
        r"(?:such as|like|including|examples?:?|competitors?:?)\s*"
        r"([A-Z][A-Za-z\s]+(?:,\s*[A-Z][A-Za-z\s]+)*)",
        re.IGNORECASE,
    ),
    re.compile(r"([A-Z][A-Za-z]+(?:\s+[A-Z][A-Za-z]+)*)\s+(?:is|are|has|offers|provides)"),
)

MAX_COMPETITOR_URLS = 5
MAX_COMPETITOR_NAMES = 10


def extract_urls(text: str, citations: list[str]) -> list[str]:
    """回答本文と引用元から競合候補の URL を抽出

    Args:
        text: 回答本文
        citations: 引用 URL

    Returns:
        重複を除いた URL（最大 5 件）
    """
    candidates = list(dict.fromkeys([*citations, *_URL_RE.findall(text)]))

    urls = []
    for url in candidates:
        domain = (urlparse(url).hostname or "").lower()
        if not domain:
            continue
        if any(pattern in domain for pattern in EXCLUDED_DOMAIN_PATTERNS):
            continue
        urls.append(url)

    return urls[:MAX_COMPETITOR_URLS]


def extract_key_terms(description: str, cause_area: str) -> str:
    """アイデア説明から検索用のキーワードを抽出

    Args:
        description: アイデアの説明
        cause_area: 主要な社会課題領域

    Returns:
        Google 検索風の短いキーワード列
    """
    words = [
        word
        for word in re.sub(r"[^\w\s]", " ", description.lower()).split()
        if len(word) > 2 and word not in FILLER_WORDS
    ]
    key_words = words[:5]

    if cause_area and not any(word in cause_area.lower() for word in key_words):
        key_words.append(cause_area.replace("_", " "))

    return " ".join(key_words)


def extract_competitor_names(text: str) -> list[str]:
    """回答本文から組織名・競合名を抽出"""
    names: list[str] = []
    for pattern in _COMPETITOR_NAME_PATTERNS:
        for match in pattern.finditer(text):
            for name in match.group(1).split(","):
                name = name.strip()
                if len(name) > 2:
                    names.append(name)

    return list(dict.fromkeys(names))[:MAX_COMPETITOR_NAMES]


class PerplexityClient:
    """Perplexity API クライアント（市場調査用）"""

    BASE_URL = "https://api.perplexity.ai"
    CHAT_ENDPOINT = "/chat/completions"

    SYSTEM_PROMPT = (
        "You are a market research analyst. Provide specific, factual information with data "
        "points when available. Be concise but comprehensive. Include specific organization "
        "names and URLs when relevant."
    )

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.model = self.settings.perplexity_model
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTPクライアントを取得（遅延初期化）"""
        if not self.settings.perplexity_api_key:
            raise ResearchAPIError("Perplexity API key is not configured")

        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                headers={
                    "Authorization": f"Bearer {self.settings.perplexity_api_key}",
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(self.settings.research_timeout),
            )
        return self._client

    async def close(self) -> None:
        """HTTPクライアントをクローズ"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def search(self, query: str) -> ResearchQueryResult:
        """1 件の検索クエリを実行

        Raises:
            ResearchAPIError: API 呼び出しエラー
        """
        client = await self._get_client()

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            "temperature": 0.2,
            "max_tokens": 1024,
            "return_citations": True,
            "search_recency_filter": "month",
        }

        try:
            response = await client.post(self.CHAT_ENDPOINT, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"Perplexity API timeout: {str(e)}")
            raise ResearchAPIError("Perplexity API request timed out", original_error=e) from e
        except httpx.HTTPError as e:
            logger.error(f"Perplexity API HTTP error: {str(e)}")
            raise ResearchAPIError(f"Perplexity API HTTP error: {str(e)}", original_error=e) from e

        if response.status_code != 200:
            logger.error(
                f"Perplexity API error: {response.status_code}",
                extra={"status_code": response.status_code},
            )
            raise ResearchAPIError(
                f"Perplexity API error: {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            data = response.json()
            choices = data.get("choices") or [{}]
            answer = (choices[0].get("message") or {}).get("content") or ""
            return ResearchQueryResult(
                query=query, answer=answer, citations=data.get("citations") or []
            )
        except (ValueError, TypeError, AttributeError, IndexError) as e:
            logger.error(f"Perplexity API returned a malformed body: {str(e)}")
            raise ResearchAPIError(
                "Perplexity API returned a malformed response", original_error=e
            ) from e

    async def _search_or_empty(self, query: str) -> ResearchQueryResult:
        """検索を実行し、失敗時は空の結果を返す"""
        try:
            return await self.search(query)
        except ResearchAPIError as e:
            logger.warning(f"Perplexity query failed, continuing without it: {e.message}")
            return ResearchQueryResult(query=query)

    async def conduct_market_research(
        self,
        idea_name: str,
        idea_description: str,
        primary_cause: str,
        venture_type: str,
        delivery_format: str,
        location: str | None = None,
    ) -> MarketResearchData:
        """アイデアの市場調査を実施

        ユーザーが実際に検索するような単純なクエリを 3 本並列に実行する。
        個々のクエリの失敗は空の回答として扱う。

        Args:
            idea_name: アイデア名
            idea_description: アイデアの説明（タグライン）
            primary_cause: 主要な社会課題領域
            venture_type: 事業形態
            delivery_format: 提供形態
            location: 所在地（任意）

        Returns:
            市場調査結果

        Raises:
            ResearchAPIError: API キーが未設定の場合
        """
        if not self.settings.perplexity_api_key:
            raise ResearchAPIError("Perplexity API key is not configured")

        key_terms = extract_key_terms(idea_description, primary_cause)
        organization_type = {
            "business": "companies",
            "nonprofit": "nonprofits",
        }.get(venture_type, "organizations")
        region = f" in {location}" if location else ""

        queries = [
            idea_description or idea_name,
            f"{key_terms} {organization_type}{region}",
            f"{key_terms} market size trends",
        ]

        logger.info(
            f"Starting market research for idea: {idea_name}",
            extra={"format": delivery_format, "query_count": len(queries)},
        )

        results = await asyncio.gather(*(self._search_or_empty(query) for query in queries))

        all_citations = [citation for result in results for citation in result.citations]
        all_answers = "\n\n".join(result.answer for result in results)

        research = MarketResearchData(
            market_size=results[0].answer or "Market research unavailable",
            demand_signals=results[0].answer,
            competitor_urls=extract_urls(all_answers, all_citations),
            competitor_names=extract_competitor_names(all_answers),
            funding_landscape=results[2].answer or "Funding research unavailable",
            trends=all_answers,
            raw_responses=list(results),
        )

        logger.info(
            "Market research completed",
            extra={
                "competitor_urls": len(research.competitor_urls),
                "competitor_names": len(research.competitor_names),
            },
        )
        return research
