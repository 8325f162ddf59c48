from __future__ import annotations

from sink_agents.schemas.config import MarketingAgentConfig
from sink_agents.schemas.news import RawArticle, SelectedArticle


def news_selection_prompt(count: int) -> str:
    return (
        "You are a financial news analyst. From the provided news articles, pick the "
        f"{count} most important ones. For each, provide the original title, URL, a brief "
        "summary, and a category."
    )


def format_articles_for_prompt(articles: list[RawArticle]) -> str:
    return "\n\n".join(
        f"{index}. [URL: {article.url}]\nTitle: {article.title}\nDescription: {article.description or 'N/A'}"
        for index, article in enumerate(articles, start=1)
    )


TRADE_PROPOSAL_PROMPT = (
    "You are a trading analyst. Based on the provided financial news, propose 3-5 trades "
    "(buy or sell) that could be profitable. Consider market sentiment, sector trends, and "
    "potential impacts from the news. Be specific about symbols, actions, and quantities."
)


def trade_proposal_user_prompt(articles: list[SelectedArticle]) -> str:
    summary = "\n\n".join(
        f"{index}. [{article.category.upper()}] {article.title}\n   {article.summary}"
        for index, article in enumerate(articles, start=1)
    )
    return f"Here are today's top financial news:\n\n{summary}\n\nPropose trades based on this news."


def _custom_instructions(config: MarketingAgentConfig) -> str:
    if not config.custom_instructions:
        return ""
    return f"\n\n## Additional Instructions:\n{config.custom_instructions}"


def comment_opportunities_prompt(config: MarketingAgentConfig) -> str:
    name = config.company_name
    return f"""You are a strategic Twitter growth advisor for {name} ({config.company_website}).

{config.company_description}

Context about the founder:
{config.founder_context}

Your job: find 3-5 tweets where a smart comment could turn the author or their audience into followers.

## Ideal targets:
- Our exact audience discussing the exact problems {name} addresses
- Influential builders whose followers are our target users
- Viral conversations in our domain where our perspective would stand out

## A follow-worthy comment:
- Shows deep expertise without being preachy
- Has personality and adds something nobody else in the replies said
- Is short and punchy (1-2 sentences)

## Skip:
- Tweets unrelated to AI agents, developer tools, or production infrastructure
- News accounts, publications, brand accounts, and bot-like aggregators
- Anything where we would sound like every other reply

Only target real humans. Never write generic agreement, never sound like a LinkedIn post, never force a
mention of {name}, and never use hashtags or excessive emojis.

## Output:
Return 3-5 opportunities where our comment could realistically earn followers. Zero is fine if nothing fits.{_custom_instructions(config)}"""


def trends_prompt(config: MarketingAgentConfig) -> str:
    return f"""You are a trend analyst looking for real trends in Twitter data for {config.company_name} ({config.company_website}).

{config.company_description}

Your job: find topics that many people are discussing, not just a few tweets.

## A real trend:
- A tool, technology, technique, debate, or shared problem discussed by multiple different authors
- Appears in at least 5-10 tweets in the dataset
- Is an actual pattern across the data, not one viral tweet

## For each trend:
- Name it specifically and count approximately how many tweets discuss it
- Include 3-5 evidence tweets from different authors
- Explain why it is trending now and assess its sentiment

## Output:
Return only 2-4 real trends. Return fewer or zero if the data has no clear trends.{_custom_instructions(config)}"""


def tools_prompt(config: MarketingAgentConfig) -> str:
    name = config.company_name
    return f"""You are a competitive intelligence agent for {name} ({config.company_website}).

{config.company_description}

Your only job: find new tools, products, and companies mentioned in the Twitter data.

## Look for:
- Product launches, announcements, and shared GitHub repos
- New startups or open source projects gaining traction
- Existing tools getting significant updates

## For each tool:
- Extract the actual name and URL
- Describe what it does in one sentence
- Classify its relationship to {name}: competitor, potential_partner, complementary, or irrelevant
- Include the source tweets where you found it

Only include actual products with a real URL that are relevant to AI agents, developer tools, or
infrastructure.{_custom_instructions(config)}"""


def tutorials_prompt(config: MarketingAgentConfig) -> str:
    name = config.company_name
    return f"""You are a developer content strategist who only creates tutorials with proven demand.

{name}: {config.company_description}

Your job: find 2-3 ultra-specific tutorial ideas that many developers clearly want, based on the tweet data.

## Specific means:
The title describes a complete, usable thing someone can build, not an abstract concept.

## Proven demand means:
Five or more tweets asking how to do something similar, or several developers sharing the same struggle.

## For each tutorial provide:
title, the hook, the demand signal, the tweet count, 3-5 source tweets proving demand, and a 4-6 step outline.

The tutorial must naturally use {name} but be valuable regardless. Do not invent demand that is not in the
data. Return 2-3 ideas at most; zero is fine.{_custom_instructions(config)}"""
