"""
ディープダイブサービスのユニットテスト
"""

from unittest.mock import AsyncMock

import pytest

from src.models.content import (
    DimensionScore,
    MarketingAssets,
    ScoreBreakdown,
    ViabilityReport,
)
from src.models.idea import DeepDiveSection
from src.models.research import ResearchEntry
from src.services.content_dispatcher import ContentDispatcher
from src.services.deep_dive_service import DeepDiveService, validate_request
from src.services.error_handler import DeepDiveRequestError, ErrorCode
from src.services.research_cache import ResearchCache

IDEA = {"name": "Acme", "tagline": "Tool library", "causeAreas": ["climate"]}
PROFILE = {"ventureType": "business", "causes": ["climate"], "commitment": "all_in"}


@pytest.fixture
def orchestrator(rich_research):
    orchestrator = AsyncMock()
    orchestrator.run.return_value = ResearchEntry(
        research=rich_research, research_attempted=True, trust_research=True
    )
    return orchestrator


@pytest.fixture
def dispatcher():
    dispatcher = AsyncMock(spec=ContentDispatcher)
    dispatcher.generate.return_value = MarketingAssets(tagline="Share more")
    return dispatcher


@pytest.fixture
def service(orchestrator, dispatcher):
    return DeepDiveService(ResearchCache(), orchestrator, dispatcher)


@pytest.mark.parametrize(
    "idea,profile,section",
    [
        (None, PROFILE, "plan"),
        (IDEA, None, "plan"),
        (IDEA, PROFILE, None),
        ({}, PROFILE, "plan"),
        ({"tagline": "no name"}, PROFILE, "plan"),
    ],
)
def test_validate_request_missing_fields(idea, profile, section):
    """必須項目の欠落"""
    with pytest.raises(DeepDiveRequestError) as exc_info:
        validate_request(idea, profile, section)

    assert exc_info.value.message == "Missing required fields: idea, profile, or section"


@pytest.mark.parametrize(
    "idea,profile,field",
    [
        ("Acme", PROFILE, "idea"),
        ({"name": ["Acme"]}, PROFILE, "idea"),
        (IDEA, ["weekend"], "profile"),
        (IDEA, {**PROFILE, "causes": "climate"}, "profile"),
    ],
)
def test_validate_request_invalid_field(idea, profile, field):
    """形式不正の項目は項目名付きで拒否する"""
    with pytest.raises(DeepDiveRequestError) as exc_info:
        validate_request(idea, profile, "plan")

    assert exc_info.value.message == f"Invalid field: {field}"


def test_validate_request_unknown_commitment_is_unanswered():
    _, profile, _ = validate_request(IDEA, {**PROFILE, "commitment": "part_time"}, "plan")

    assert profile.commitment is None
    assert profile.commitment_level.value == "steady"

def test_validate_request_invalid_section():
    with pytest.raises(DeepDiveRequestError) as exc_info:
        validate_request(IDEA, PROFILE, "pricing")

    assert exc_info.value.message == "Invalid section: pricing"
    assert exc_info.value.code == ErrorCode.INVALID_SECTION


def test_validate_request_parses_models():
    idea, profile, section = validate_request(IDEA, PROFILE, "roadmap")

    assert idea.name == "Acme"
    assert profile.venture_type.value == "business"
    assert section == DeepDiveSection.ROADMAP


async def test_sections_share_one_research_run(service, orchestrator, dispatcher):
    """同じサブジェクトの複数セクションはリサーチを 1 回だけ実行する"""
    await service.generate(IDEA, PROFILE, "marketing")
    await service.generate(IDEA, {**PROFILE, "budget": "zero"}, "plan")

    assert orchestrator.run.await_count == 1
    assert dispatcher.generate.await_count == 2
    for call in dispatcher.generate.await_args_list:
        # (idea, profile, section, trust_research, entry)
        assert call.args[3] is True
        assert call.args[4].research is not None


async def test_viability_is_normalized(service, dispatcher):
    """事業性レポートにはスコア内訳が付与される"""
    dispatcher.generate.return_value = ViabilityReport(viability_score=7)

    report = await service.generate(IDEA, PROFILE, "viability")

    assert report.score_breakdown is not None
    assert report.score_breakdown.impact_potential is not None


async def test_good_breakdown_is_untouched(service, dispatcher):
    breakdown = ScoreBreakdown(
        market_opportunity=DimensionScore(score=8),
        competition_level=DimensionScore(score=5),
        feasibility=DimensionScore(score=7),
        revenue_potential=DimensionScore(score=6),
        impact_potential=DimensionScore(score=9),
    )
    generated = ViabilityReport(viability_score=7, score_breakdown=breakdown)
    dispatcher.generate.return_value = generated

    assert await service.generate(IDEA, PROFILE, "viability") is generated


async def test_other_sections_are_not_normalized(service, dispatcher):
    content = await service.generate(IDEA, PROFILE, "marketing")

    assert content is dispatcher.generate.return_value


async def test_structural_error_skips_research(service, orchestrator):
    """構造エラーはリサーチ前に拒否する"""
    with pytest.raises(DeepDiveRequestError):
        await service.generate(IDEA, PROFILE, "unknown")

    orchestrator.run.assert_not_called()


async def test_generation_failure_still_returns_content(idea, profile, orchestrator):
    """LLM が失敗してもフォールバックコンテンツを返す"""
    llm_client = AsyncMock()
    llm_client.generate_structured.side_effect = RuntimeError("provider exploded")
    service = DeepDiveService(ResearchCache(), orchestrator, ContentDispatcher(llm_client))

    report = await service.generate(idea, profile, "viability")

    assert isinstance(report, ViabilityReport)
    assert report.score_breakdown is not None
