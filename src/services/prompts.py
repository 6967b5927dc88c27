"""
ディープダイブ用プロンプト

セクションごとのシステムプロンプトと、ベースライン／リサーチ強化版のユーザープロンプトを構築
"""

from src.models.idea import CommitmentLevel, DeepDiveSection, Idea, UserProfile
from src.models.research import ResearchEntry

SYSTEM_PROMPTS: dict[DeepDiveSection, str] = {
    DeepDiveSection.VIABILITY: (
        "You are a viability analyst for social-impact ventures: rigorous but encouraging. "
        "Score honestly on a 1-10 scale, name real competitors, and end with a clear "
        "go / refine / pivot verdict. Respond with JSON only."
    ),
    DeepDiveSection.PLAN: (
        "You are a business planning expert: practical and impact-focused. Write plans a "
        "first-time founder can act on, sized to their budget and commitment. "
        "Respond with JSON only."
    ),
    DeepDiveSection.MARKETING: (
        "You are a copywriter: empowering, specific, and action-oriented. Write copy that "
        "sounds like a real person, never like a press release. Respond with JSON only."
    ),
    DeepDiveSection.ROADMAP: (
        "You are a launch strategist: practical and momentum-focused. Favor free, fast "
        "actions first and tell people what to skip. Respond with JSON only."
    ),
}

COMMITMENT_GUIDANCE: dict[CommitmentLevel, str] = {
    CommitmentLevel.WEEKEND: (
        "The founder has a few weekend hours. Keep everything dramatically simple: no jargon, "
        "no frameworks, just 'here is what to do next'."
    ),
    CommitmentLevel.STEADY: (
        "The founder can give steady part-time effort. Use a structured but accessible format "
        "that fits on three pages."
    ),
    CommitmentLevel.ALL_IN: (
        "The founder is going all in. Use full professional frameworks and quantify wherever "
        "possible."
    ),
}

SECTION_TASKS: dict[DeepDiveSection, str] = {
    DeepDiveSection.VIABILITY: (
        "Produce a viability report: market size, demand analysis, competitors, target "
        "audience, strengths, risks, opportunities, an overall viabilityScore (1-10), a "
        "scoreBreakdown with marketOpportunity, competitionLevel, feasibility, "
        "revenuePotential and impactPotential (each with score and one-line explanation), "
        "a verdict and a recommendation."
    ),
    DeepDiveSection.PLAN: (
        "Produce a business plan: executive summary, mission statement, impact thesis, "
        "revenue streams (or a volunteer plan for community projects), budget plan, "
        "partnerships, operations and impact measurement."
    ),
    DeepDiveSection.MARKETING: (
        "Produce marketing assets: elevator pitch, tagline, landing page headline and "
        "subheadline, social posts (twitter, linkedin, instagram, nextdoor), an email "
        "template and a primary call to action."
    ),
    DeepDiveSection.ROADMAP: (
        "Produce an action roadmap: quick wins, phases with prioritized tasks and "
        "dependencies, and a skip list of things not to do yet."
    ),
}


def describe_idea(idea: Idea, profile: UserProfile) -> str:
    """アイデアとプロファイルの説明ブロック"""
    lines = [
        "## The Idea",
        f"**Name:** {idea.name}",
        f"**Tagline:** {idea.tagline}",
        f"**Problem:** {idea.problem}",
        f"**Audience:** {idea.audience}",
        f"**Impact:** {idea.impact}",
    ]
    if idea.revenue_model:
        lines.append(f"**Revenue model:** {idea.revenue_model}")
    if idea.cause_areas:
        lines.append(f"**Cause areas:** {', '.join(c.replace('_', ' ') for c in idea.cause_areas)}")

    lines.append("")
    lines.append("## The Founder")
    if profile.venture_type:
        lines.append(f"**Venture type:** {profile.venture_type.value}")
    if profile.format:
        lines.append(f"**Format:** {profile.format.value}")
    if profile.location and profile.location.to_query_string():
        lines.append(f"**Location:** {profile.location.to_query_string()}")
    if profile.experience:
        lines.append(f"**Experience:** {profile.experience}")
    if profile.budget:
        lines.append(f"**Budget:** {profile.budget}")
    lines.append(f"**Commitment:** {profile.commitment_level.value}")

    return "\n".join(lines)


def describe_research(entry: ResearchEntry) -> str:
    """リサーチ結果のコンテキストブロック"""
    research = entry.research
    if research is None:
        return ""

    lines = [
        "## Market Research (live web search)",
        f"**Market size:** {research.market_size}",
        f"**Demand signals:** {research.demand_signals}",
        f"**Funding landscape:** {research.funding_landscape}",
    ]
    if research.competitor_names:
        lines.append(f"**Competitors found:** {', '.join(research.competitor_names)}")
    if research.competitor_urls:
        lines.append(f"**Competitor websites:** {', '.join(research.competitor_urls)}")

    for insight in entry.competitor_insights:
        lines.append("")
        lines.append(f"### {insight.name} ({insight.url})")
        if insight.tagline:
            lines.append(f"Tagline: {insight.tagline}")
        lines.append(f"Pricing: {insight.pricing_model}")
        lines.append(f"Audience: {insight.target_audience}")
        if insight.key_messages:
            lines.append(f"Key messages: {'; '.join(insight.key_messages)}")
        if insight.differentiators:
            lines.append(f"Differentiators: {'; '.join(insight.differentiators)}")

    return "\n".join(lines)


def build_baseline_prompt(section: DeepDiveSection, idea: Idea, profile: UserProfile) -> str:
    """リサーチを使わないベースラインのプロンプト"""
    return "\n\n".join(
        [
            describe_idea(idea, profile),
            COMMITMENT_GUIDANCE[profile.commitment_level],
            SECTION_TASKS[section],
        ]
    )


def build_research_prompt(
    section: DeepDiveSection, idea: Idea, profile: UserProfile, entry: ResearchEntry
) -> str:
    """リサーチ結果を根拠として組み込んだプロンプト"""
    return "\n\n".join(
        [
            describe_idea(idea, profile),
            describe_research(entry),
            COMMITMENT_GUIDANCE[profile.commitment_level],
            SECTION_TASKS[section],
            "Ground every claim in the market research above. Cite the competitor websites "
            "you relied on in researchSources, and explain how this idea differs from each "
            "competitor that was researched.",
        ]
    )
