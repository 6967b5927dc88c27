"""
フォールバックコンテンツ

生成に失敗した場合、またはLLMが未設定の場合に返す固定コンテンツ。
コミットメントレベル（weekend / steady / all_in）ごとに内容の粒度を変える。
"""

from collections.abc import Callable

from src.models.content import (
    ActionRoadmap,
    AudienceProfile,
    BudgetItem,
    BusinessPlan,
    Competitor,
    DeepDiveContent,
    EmailTemplate,
    ImpactMetric,
    MarketingAssets,
    Partnership,
    Phase,
    QuickWin,
    RevenueStream,
    RoadmapTask,
    SocialPost,
    ViabilityReport,
    VolunteerPlan,
)
from src.models.idea import CommitmentLevel, DeepDiveSection, Idea, UserProfile, VentureType

# ---------------------------------------------------------------------------
# Viability
# ---------------------------------------------------------------------------


def _weekend_viability(idea: Idea, profile: UserProfile) -> ViabilityReport:
    return ViabilityReport(
        market_size=(
            "Small, local efforts like this work almost everywhere. People like seeing "
            "visible improvements in their own neighborhood."
        ),
        demand_analysis=(
            "Your neighbors already notice the problem every day. Most are waiting for "
            "someone to pick a date and invite them. You can be that someone."
        ),
        competitors=[
            Competitor(
                name="National volunteer networks",
                url="https://www.volunteermatch.org",
                description="Directories that list local volunteer opportunities.",
                strengths=["Provides guides and resources"],
                weaknesses=["Not local: you know your block better"],
            )
        ],
        target_audience=AudienceProfile(
            primary_persona="Neighbors who walk, jog, or bring their kids through the area",
            demographics="Local families, retirees, and anyone nearby",
            pain_points=["Nobody is doing anything about it"],
            motivations=["Want a nicer neighborhood", "Want to meet neighbors"],
        ),
        strengths=["Near-zero startup cost", "Visible results in a single afternoon"],
        risks=[
            "Only a few people show up: that's fine, start anyway",
            "Bad weather: pick a backup date when you post the invite",
        ],
        opportunities=["Could become a monthly habit", "Might inspire nearby blocks"],
        viability_score=8.5,
        verdict="go",
        recommendation=(
            f"Do it. Pick a date for {idea.name}, text fifteen friends personally, and post "
            "the date, time, and place on your neighborhood board. Expect five to ten people."
        ),
    )


def _steady_viability(idea: Idea, profile: UserProfile) -> ViabilityReport:
    return ViabilityReport(
        market_size=(
            "Community programs in this space are a proven model, and local demand usually "
            "exceeds what existing organizations can serve."
        ),
        demand_analysis=(
            "Existing providers are stretched thin and often expensive. Free meeting spaces "
            "such as libraries and community centers make a part-time program realistic."
        ),
        competitors=[
            Competitor(
                name="Paid franchises",
                description="Professional programs with established curricula.",
                strengths=["Established brand", "Trained staff"],
                weaknesses=["Expensive", "Not accessible to the people who need it most"],
            ),
            Competitor(
                name="School and church volunteer programs",
                description="Informal programs run by existing institutions.",
                strengths=["Trusted by families"],
                weaknesses=["Limited hours", "Inconsistent quality"],
            ),
        ],
        target_audience=AudienceProfile(
            primary_persona="Local families who can't afford paid alternatives",
            demographics="Mixed backgrounds, often lower-income households",
            pain_points=["Can't afford existing options", "No time to coordinate help"],
            motivations=["Want reliable, free support", "Want to belong to something local"],
        ),
        strengths=["Clear, proven model", "Free spaces available", "Measurable outcomes"],
        risks=[
            "Volunteer no-shows: build a substitute list from day one",
            "Slow first month: normal, word of mouth takes time",
            "Your own burnout: recruit two helpers before launching",
        ],
        opportunities=["Partner with schools for referrals", "Expand to more locations later"],
        viability_score=7.5,
        verdict="refine",
        recommendation=(
            f"Work on it. Before launching {idea.name}, secure a consistent weekly time slot, "
            "recruit two committed helpers, and find one partner who can refer participants."
        ),
    )


def _all_in_viability(idea: Idea, profile: UserProfile) -> ViabilityReport:
    return ViabilityReport(
        market_size=(
            "The broader market for community-driven services is estimated in the billions "
            "of dollars globally, with peer-to-peer and local-first models growing by double "
            "digits annually. Dense neighborhoods make ideal initial markets."
        ),
        demand_analysis=(
            "Demand signals are strong: online community groups in this space count millions "
            "of members, waitlists for existing programs are common, and the shift toward "
            "local community after the pandemic has accelerated interest."
        ),
        competitors=[
            Competitor(
                name="Large social networks",
                description="General neighborhood networks with marketplace features.",
                strengths=["Wide adoption", "Verified members"],
                weaknesses=["Not purpose-built", "Cluttered with unrelated content"],
            ),
            Competitor(
                name="Volunteer-run local groups",
                description="Informal groups coordinating through chat apps.",
                strengths=["Strong community ethos", "Zero cost"],
                weaknesses=["No consistent workflow", "Depends on a few organizers"],
            ),
            Competitor(
                name="Established nonprofits",
                description="Regional organizations with physical locations.",
                strengths=["Curated services", "Staff support"],
                weaknesses=["Limited hours", "High overhead"],
            ),
        ],
        target_audience=AudienceProfile(
            primary_persona=(
                "A busy 35-year-old who recently moved to the area, values sustainability, "
                "and wants to meet neighbors without a big time commitment."
            ),
            demographics="25-55 years old, urban or suburban, middle income",
            pain_points=["Paying for things used once", "Not knowing neighbors"],
            motivations=["Save money", "Reduce environmental impact", "Build local ties"],
        ),
        strengths=[
            "Clear dual value proposition",
            "Low startup costs with a manual-first approach",
            "Natural network effects as the community grows",
        ],
        risks=[
            "Trust barrier between strangers",
            "Liability questions as operations become complex",
            "Critical mass needed before the service is useful",
        ],
        opportunities=[
            "Partner with apartment complexes as an amenity",
            "Corporate sustainability partnerships",
            "Municipal support for community resilience",
        ],
        viability_score=7.8,
        verdict="refine",
        recommendation=(
            f"Strong concept with clear demand. Validate {idea.name} with a manual pilot: one "
            "building or block, ten founding members, and twenty completed interactions "
            "before building any technology."
        ),
    )


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


def _weekend_plan(idea: Idea, profile: UserProfile) -> BusinessPlan:
    return BusinessPlan(
        executive_summary=(
            f"{idea.name} is a one-day neighborhood effort. Success means people show up, "
            "the work gets done, and everyone leaves feeling good about where they live."
        ),
        mission_statement=f"Make our neighborhood better with {idea.name}, one Saturday at a time.",
        impact_thesis="When neighbors work together on something visible, they want to do more.",
        volunteer_plan=VolunteerPlan(
            roles_needed=["You (organizer)", "People who show up"],
            recruitment_strategy="Text friends personally and post the date on a local board.",
            retention_strategy="Share before/after photos and announce the next date on the spot.",
        ),
        budget_plan=[
            BudgetItem(
                category="Supplies", amount=0, priority="essential", notes="Ask people to bring their own"
            )
        ],
        partnerships=[
            Partnership(
                type="Local",
                description="A nearby cafe or shop that can offer coffee afterward.",
                potential_partners=["Neighborhood cafe"],
            )
        ],
        operations="Pick a date, invite people, show up early, take photos, thank everyone.",
        impact_measurement=[
            ImpactMetric(
                metric="People who showed up",
                target="5-10",
                measurement_method="Count heads",
                frequency="Each event",
            )
        ],
    )


def _steady_plan(idea: Idea, profile: UserProfile) -> BusinessPlan:
    zero_budget = profile.budget == "zero"
    return BusinessPlan(
        executive_summary=(
            f"{idea.name} runs a consistent weekly program using free community space and a "
            "small volunteer team. Year one focuses on reliability: the same time, the same "
            "place, every week."
        ),
        mission_statement=f"{idea.name} provides dependable, free local support every week.",
        impact_thesis=(
            "Consistency builds trust; trust brings participants back; returning participants "
            "produce measurable outcomes."
        ),
        volunteer_plan=VolunteerPlan(
            roles_needed=["Coordinator", "Two regular helpers", "Substitute list"],
            recruitment_strategy="Ask local libraries, schools, and faith groups for referrals.",
            retention_strategy="Short shifts, public thanks, and a clear monthly impact update.",
        ),
        budget_plan=[
            BudgetItem(
                category="Materials",
                amount=0 if zero_budget else 150,
                priority="important",
                notes="Start with donated materials",
            ),
            BudgetItem(
                category="Flyers",
                amount=0 if zero_budget else 50,
                priority="nice_to_have",
                notes="Digital-only outreach is fine at first",
            ),
        ],
        partnerships=[
            Partnership(
                type="Space",
                description="A free, recurring room reservation.",
                potential_partners=["Public library", "Community center"],
            ),
            Partnership(
                type="Referral",
                description="Organizations that can send participants your way.",
                potential_partners=["School counselors", "Faith communities"],
            ),
        ],
        operations=(
            "Weekly sessions at a fixed time. The coordinator confirms helpers two days ahead "
            "and tracks attendance in a shared sheet."
        ),
        impact_measurement=[
            ImpactMetric(
                metric="Weekly participants",
                target="10 by month three",
                measurement_method="Sign-in sheet",
                frequency="Weekly",
            ),
            ImpactMetric(
                metric="Returning participants",
                target="60% return rate",
                measurement_method="Sign-in sheet comparison",
                frequency="Monthly",
            ),
        ],
    )


def _all_in_plan(idea: Idea, profile: UserProfile) -> BusinessPlan:
    zero_budget = profile.budget == "zero"
    is_project = profile.venture_type == VentureType.PROJECT

    plan = BusinessPlan(
        executive_summary=(
            f"{idea.name} addresses an unmet local need with a community-first model. In year "
            "one we will launch in three neighborhoods, reach 200 active members, and prove "
            "the operating model manually before investing in technology."
        ),
        mission_statement=f"{idea.name} builds connected communities where no one faces a problem alone.",
        impact_thesis=(
            "Each successful interaction creates economic, environmental, and social value "
            "that compounds into community resilience."
        ),
        budget_plan=[
            BudgetItem(
                category="Technology (basic tools)",
                amount=0 if zero_budget else 200,
                priority="important",
                notes="Free tiers of forms, spreadsheets, and group chat first",
            ),
            BudgetItem(
                category="Community events",
                amount=0 if zero_budget else 150,
                priority="important",
                notes="Monthly meetups, potluck style",
            ),
            BudgetItem(
                category="Insurance/Legal",
                amount=0 if zero_budget else 300,
                priority="essential",
                notes="Liability waiver review",
            ),
        ],
        partnerships=[
            Partnership(
                type="Distribution",
                description="Property managers and associations share the program with residents.",
                potential_partners=["Apartment management companies", "Neighborhood associations"],
            ),
            Partnership(
                type="Sponsorship",
                description="Local businesses fund the program for community visibility.",
                potential_partners=["Hardware stores", "Credit unions"],
            ),
        ],
        operations=(
            "Members list what they can offer, others request, a coordinator confirms and "
            "follows up. The pilot runs on a group chat and a shared sheet; weekly reviews "
            "catch overdue follow-ups and monthly audits keep quality high."
        ),
        impact_measurement=[
            ImpactMetric(
                metric="Successful interactions",
                target="500 in year one",
                measurement_method="Shared tracking sheet",
                frequency="Weekly",
            ),
            ImpactMetric(
                metric="Active members",
                target="200",
                measurement_method="Member activity tracking",
                frequency="Monthly",
            ),
        ],
    )

    if is_project:
        plan.volunteer_plan = VolunteerPlan(
            roles_needed=["Block captain", "Inventory manager", "Onboarding lead", "Events lead"],
            recruitment_strategy="Start with enthusiastic founding members; each recruits one friend.",
            retention_strategy="Monthly appreciation events and visible impact metrics.",
        )
    else:
        plan.revenue_streams = [
            RevenueStream(
                name="Premium membership",
                description="Priority access and extended services for power users.",
                estimated_revenue="$2,400/year",
                timeline="Month 6",
            ),
            RevenueStream(
                name="Property partnerships",
                description="Complexes offer the program as a resident amenity.",
                estimated_revenue="$6,000/year",
                timeline="Month 9",
            ),
        ]
    return plan


# ---------------------------------------------------------------------------
# Marketing
# ---------------------------------------------------------------------------


def _weekend_marketing(idea: Idea, profile: UserProfile) -> MarketingAssets:
    return MarketingAssets(
        elevator_pitch=f"{idea.name}: this Saturday, a few neighbors, two hours, real results.",
        tagline="Two hours. Real difference.",
        landing_page_headline=f"Join {idea.name} this weekend",
        landing_page_subheadline="Bring a friend. We'll bring the coffee.",
        social_posts=[
            SocialPost(
                platform="nextdoor",
                content=f"Hi neighbors! I'm organizing {idea.name} this Saturday at 9am. Who's in?",
                hashtags=[],
            )
        ],
        email_template=EmailTemplate(
            subject="Saturday morning?",
            body=f"Hey! I'm doing {idea.name} this Saturday at 9. Want to come? Coffee after.",
        ),
        primary_cta="I'm in",
    )


def _steady_marketing(idea: Idea, profile: UserProfile) -> MarketingAssets:
    return MarketingAssets(
        elevator_pitch=(
            f"{idea.name} is a free weekly program run by neighbors for neighbors. Same time, "
            "same place, every week."
        ),
        tagline="Every week. Right here. Free.",
        landing_page_headline=f"{idea.name}: free, every week, close to home",
        landing_page_subheadline="Drop in, meet your neighbors, and get real help.",
        social_posts=[
            SocialPost(
                platform="nextdoor",
                content=f"{idea.name} starts next week at the library. Free, every Tuesday.",
                hashtags=[],
            ),
            SocialPost(
                platform="instagram",
                content=f"Week one of {idea.name} is in the books. Thank you to everyone who came!",
                hashtags=["#community", "#local"],
            ),
        ],
        email_template=EmailTemplate(
            subject=f"{idea.name} starts next week",
            body=(
                f"Hi there,\n\n{idea.name} is launching a free weekly program. We'd love your "
                "help spreading the word or volunteering an hour a month.\n\nThank you!"
            ),
        ),
        primary_cta="Save my spot",
    )


def _all_in_marketing(idea: Idea, profile: UserProfile) -> MarketingAssets:
    return MarketingAssets(
        elevator_pitch=(
            f"{idea.name} turns neighbors into a support network. We make it easy to share "
            "what you have and find what you need, saving money and building real community."
        ),
        tagline=idea.tagline or "Share more. Waste less. Know your neighbors.",
        landing_page_headline="Your neighbors have what you need",
        landing_page_subheadline=(
            f"{idea.name} connects people on your block so nobody has to go it alone."
        ),
        social_posts=[
            SocialPost(
                platform="linkedin",
                content=(
                    f"We're launching {idea.name} to prove that local networks can solve "
                    "everyday problems better than another app. Looking for pilot partners."
                ),
                hashtags=["#socialimpact", "#community"],
            ),
            SocialPost(
                platform="twitter",
                content=f"What if your block worked like a team? {idea.name} is finding out.",
                hashtags=["#community"],
            ),
            SocialPost(
                platform="instagram",
                content="Twenty shares in our first month. This is what community looks like.",
                hashtags=["#shareeconomy", "#neighbors"],
            ),
            SocialPost(
                platform="nextdoor",
                content=f"Founding members wanted for {idea.name}. First meetup next Thursday.",
                hashtags=[],
            ),
        ],
        email_template=EmailTemplate(
            subject=f"Be a founding member of {idea.name}",
            body=(
                f"Hi,\n\nWe're recruiting ten founding members for {idea.name}. Founding "
                "members shape how it works and get first access to everything we build.\n\n"
                "Reply to this email to join."
            ),
        ),
        primary_cta="Become a founding member",
    )


# ---------------------------------------------------------------------------
# Roadmap
# ---------------------------------------------------------------------------


def _weekend_roadmap(idea: Idea, profile: UserProfile) -> ActionRoadmap:
    return ActionRoadmap(
        quick_wins=[
            QuickWin(task="Pick a date and a backup date", timeframe="Today", cost="free"),
            QuickWin(task="Text fifteen friends personally", timeframe="Today", cost="free"),
            QuickWin(task="Post on your neighborhood board", timeframe="This week", cost="free"),
        ],
        phases=[
            Phase(
                name="The day",
                duration="One morning",
                tasks=[
                    RoadmapTask(task="Show up early", priority="critical"),
                    RoadmapTask(task="Take before and after photos", priority="high"),
                    RoadmapTask(
                        task="Announce the next date",
                        priority="medium",
                        dependencies=["Show up early"],
                    ),
                ],
            )
        ],
        skip_list=["A logo", "A website", "Registering an organization"],
    )


def _steady_roadmap(idea: Idea, profile: UserProfile) -> ActionRoadmap:
    return ActionRoadmap(
        quick_wins=[
            QuickWin(task="Reserve a weekly room", timeframe="This week", cost="free"),
            QuickWin(task="Recruit two helpers", timeframe="Two weeks", cost="free"),
        ],
        phases=[
            Phase(
                name="Set up",
                duration="Weeks 1-3",
                tasks=[
                    RoadmapTask(task="Secure a recurring space", priority="critical"),
                    RoadmapTask(task="Build a substitute list", priority="high"),
                ],
            ),
            Phase(
                name="Launch",
                duration="Weeks 4-8",
                tasks=[
                    RoadmapTask(
                        task="Run the first four sessions",
                        priority="critical",
                        dependencies=["Secure a recurring space"],
                    ),
                    RoadmapTask(task="Track attendance", priority="medium"),
                ],
            ),
        ],
        skip_list=["Incorporating before month six", "Paid advertising"],
    )


def _all_in_roadmap(idea: Idea, profile: UserProfile) -> ActionRoadmap:
    zero_budget = profile.budget == "zero"
    return ActionRoadmap(
        quick_wins=[
            QuickWin(task="Interview ten potential members", timeframe="Week 1", cost="free"),
            QuickWin(task="Set up a group chat and shared sheet", timeframe="Week 1", cost="free"),
            QuickWin(
                task="Print door hangers for one block",
                timeframe="Week 2",
                cost="free" if zero_budget else "low",
            ),
        ],
        phases=[
            Phase(
                name="Validate",
                duration="Months 1-2",
                tasks=[
                    RoadmapTask(task="Recruit ten founding members", priority="critical"),
                    RoadmapTask(
                        task="Facilitate twenty successful interactions",
                        priority="critical",
                        dependencies=["Recruit ten founding members"],
                    ),
                ],
            ),
            Phase(
                name="Formalize",
                duration="Months 3-6",
                tasks=[
                    RoadmapTask(task="Draft liability waiver", priority="high", cost="low"),
                    RoadmapTask(task="Sign first partnership", priority="high"),
                ],
            ),
            Phase(
                name="Grow",
                duration="Months 7-12",
                tasks=[
                    RoadmapTask(
                        task="Expand to two more neighborhoods",
                        priority="medium",
                        cost="medium",
                        dependencies=["Sign first partnership"],
                    ),
                ],
            ),
        ],
        skip_list=["Building a custom app", "Raising outside money before validation"],
    )


FallbackBuilder = Callable[[Idea, UserProfile], DeepDiveContent]

FALLBACK_BUILDERS: dict[DeepDiveSection, dict[CommitmentLevel, FallbackBuilder]] = {
    DeepDiveSection.VIABILITY: {
        CommitmentLevel.WEEKEND: _weekend_viability,
        CommitmentLevel.STEADY: _steady_viability,
        CommitmentLevel.ALL_IN: _all_in_viability,
    },
    DeepDiveSection.PLAN: {
        CommitmentLevel.WEEKEND: _weekend_plan,
        CommitmentLevel.STEADY: _steady_plan,
        CommitmentLevel.ALL_IN: _all_in_plan,
    },
    DeepDiveSection.MARKETING: {
        CommitmentLevel.WEEKEND: _weekend_marketing,
        CommitmentLevel.STEADY: _steady_marketing,
        CommitmentLevel.ALL_IN: _all_in_marketing,
    },
    DeepDiveSection.ROADMAP: {
        CommitmentLevel.WEEKEND: _weekend_roadmap,
        CommitmentLevel.STEADY: _steady_roadmap,
        CommitmentLevel.ALL_IN: _all_in_roadmap,
    },
}


def get_fallback_content(
    section: DeepDiveSection, idea: Idea, profile: UserProfile
) -> DeepDiveContent:
    """セクションとコミットメントレベルに応じたフォールバックコンテンツを返す"""
    return FALLBACK_BUILDERS[section][profile.commitment_level](idea, profile)
