"""
設定管理モジュール

環境変数を読み込み、アプリケーション全体で使用する設定を提供します。
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Generative Model Configuration
    llm_provider: Literal["gemini", "ollama"] = Field(
        default="gemini", description="コンテンツ生成に使用する LLM プロバイダー"
    )
    gemini_api_key: str = Field(default="", description="Gemini API キー")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini モデル名")
    ollama_api_url: str = Field(default="http://localhost:11434", description="Ollama API URL")
    ollama_model: str = Field(default="qwen3:8b", description="Ollama モデル名")
    llm_timeout: float = Field(default=120.0, description="LLM API タイムアウト（秒）")

    # Market Research (Optional)
    perplexity_api_key: str = Field(default="", description="Perplexity API キー")
    perplexity_model: str = Field(default="sonar-pro", description="Perplexity モデル名")
    research_timeout: float = Field(default=45.0, description="市場調査 API タイムアウト（秒）")

    # Competitor Scraping (Optional)
    firecrawl_api_key: str = Field(default="", description="Firecrawl API キー")
    scrape_timeout: float = Field(default=40.0, description="スクレイピング API タイムアウト（秒）")

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/database.db", description="データベース URL"
    )

    # Application Configuration
    log_level: str = Field(default="INFO", description="ログレベル")
    environment: str = Field(default="development", description="実行環境")

    @property
    def research_enabled(self) -> bool:
        """市場調査プロバイダーが設定されているか"""
        return bool(self.perplexity_api_key)

    @property
    def scraping_enabled(self) -> bool:
        """競合スクレイピングプロバイダーが設定されているか"""
        return bool(self.firecrawl_api_key)


@lru_cache()
def get_settings() -> Settings:
    """設定インスタンスを取得（シングルトン）"""
    return Settings()
