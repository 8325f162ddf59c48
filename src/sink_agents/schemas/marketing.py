from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Sentiment = Literal["hype", "frustration", "curiosity", "fatigue", "debate"]
Relationship = Literal["competitor", "potential_partner", "complementary", "irrelevant"]
Effort = Literal["quick", "medium", "deep"]


class CommentOpportunity(BaseModel):
    tweet_text: str
    tweet_url: str
    author: str
    author_followers: float
    why_comment: str
    draft_comment: str
    engagement_score: float


class TrendEvidence(BaseModel):
    text: str
    url: str
    author: str


class Trend(BaseModel):
    theme: str
    tweet_count: float
    evidence_tweets: list[TrendEvidence]
    why_trending: str
    sentiment: Sentiment
    company_relevance: str


class SourceTweet(BaseModel):
    url: str
    author: str


class NewTool(BaseModel):
    name: str
    description: str
    url: str
    relationship: Relationship
    company_relevance: str
    source_tweets: list[SourceTweet]


class TutorialSourceTweet(BaseModel):
    url: str
    author: str
    relevance: str


class TutorialIdea(BaseModel):
    title: str
    the_hook: str
    demand_signal: str
    tweet_count: float
    source_tweets: list[TutorialSourceTweet]
    outline: list[str]
    effort: Effort


class AnalysisResult(BaseModel):
    comment_opportunities: list[CommentOpportunity] = Field(default_factory=list)
    trends: list[Trend] = Field(default_factory=list)
    new_tools: list[NewTool] = Field(default_factory=list)
    tutorial_ideas: list[TutorialIdea] = Field(default_factory=list)
    run_summary: str = ""

    def counts(self) -> dict[str, int]:
        return {
            "comment_opportunities": len(self.comment_opportunities),
            "trends": len(self.trends),
            "new_tools": len(self.new_tools),
            "tutorial_ideas": len(self.tutorial_ideas),
        }
