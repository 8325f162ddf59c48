from __future__ import annotations

from sink_agents.schemas.marketing import AnalysisResult, Trend
from sink_agents.schemas.news import SelectedArticle


def format_count(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def format_evidence(trend: Trend, limit: int | None = None) -> str:
    evidence = trend.evidence_tweets if limit is None else trend.evidence_tweets[:limit]
    return " | ".join(f'@{item.author}: "{item.text}"' for item in evidence)


def format_marketing_report(analysis: AnalysisResult, company_name: str) -> str:
    lines: list[str] = [f"--- {company_name.upper()} MARKETING INTEL ---\n"]

    if analysis.comment_opportunities:
        lines.append("TARGET COMMENT OPPORTUNITIES\n")
        for opp in analysis.comment_opportunities:
            lines.append(
                f"  @{opp.author} ({format_count(opp.author_followers)} followers)"
                f" | engagement: {format_count(opp.engagement_score)}"
            )
            lines.append(f'  "{opp.tweet_text}"')
            lines.append(f"  {opp.tweet_url}")
            lines.append(f"  Why: {opp.why_comment}")
            lines.append(f"  Draft: {opp.draft_comment}")
            lines.append("")

    if analysis.trends:
        lines.append("TRENDS\n")
        for trend in analysis.trends:
            lines.append(f"  {trend.theme} [{trend.sentiment}] (~{format_count(trend.tweet_count)} tweets)")
            lines.append(f"  Why trending: {trend.why_trending}")
            lines.append(f"  {company_name} relevance: {trend.company_relevance}")
            lines.append(f"  Evidence: {format_evidence(trend, limit=2)}")
            lines.append("")

    if analysis.new_tools:
        lines.append("NEW TOOLS & COMPANIES\n")
        for tool in analysis.new_tools:
            lines.append(f"  {tool.name} - {tool.description}")
            lines.append(f"  {tool.url}")
            lines.append(f"  Relationship: {tool.relationship} | {tool.company_relevance}")
            lines.append("")

    if analysis.tutorial_ideas:
        lines.append("TUTORIAL IDEAS\n")
        for idea in analysis.tutorial_ideas:
            lines.append(
                f'  "{idea.title}" [{idea.effort}] (~{format_count(idea.tweet_count)} tweets showing demand)'
            )
            lines.append(f"  Hook: {idea.the_hook}")
            lines.append(f"  Demand: {idea.demand_signal}")
            lines.append("  Outline:")
            lines.extend(f"    - {step}" for step in idea.outline)
            lines.append("")

    lines.append("SUMMARY\n")
    lines.append(f"  {analysis.run_summary}")

    return "\n".join(lines)


def format_news_digest(articles: list[SelectedArticle]) -> str:
    lines: list[str] = ["--- TOP FINANCIAL NEWS ---\n"]
    for index, article in enumerate(articles, start=1):
        lines.append(f"  {index}. [{article.category.upper()}] {article.title}")
        lines.append(f"  {article.summary}")
        lines.append(f"  {article.url}")
        lines.append("")
    lines.append(f"  {len(articles)} articles selected.")
    return "\n".join(lines)
