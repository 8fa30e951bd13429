from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CitationFormat = Literal["apa7", "ieee"]
CredibilityStatus = Literal["verified", "suspicious", "fake", "unknown"]
Sentiment = Literal["positive", "negative", "neutral"]


class VerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(min_length=1)
    provided_url: str | None = Field(default=None, alias="providedUrl")


class CitationsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str = Field(min_length=1)
    format: CitationFormat
    analyzed_text: str | None = Field(default=None, alias="analyzedText")


class CrossReferenceSource(BaseModel):
    name: str
    status: str
    url: str


class ContentAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sentiment: Sentiment = "neutral"
    bias_score: int = Field(default=30, alias="biasScore")
    factual_claims: int = Field(default=0, alias="factualClaims")
    verified_claims: int = Field(default=0, alias="verifiedClaims")
    reasoning: str = ""


class OracleAnalysis(ContentAnalysis):
    credibility_score: float = Field(alias="credibilityScore")
    warnings: list[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    credibility_score: int = Field(alias="credibilityScore", ge=0, le=100)
    status: CredibilityStatus
    sources: list[CrossReferenceSource]
    analysis: ContentAnalysis
    warnings: list[str] = Field(default_factory=list)
    processing_time: int = Field(default=0, alias="processingTime")


class Citation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    authors: list[str]
    title: str
    journal: str
    year: int
    doi: str
    url: str
    abstract: str
    type: str
    formatted: str
    relevance: str
    key_findings: list[str] = Field(alias="keyFindings")


class CitationsResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    citations: list[Citation]
    format: CitationFormat
    topic: str
    analyzed_text: str = Field(alias="analyzedText")
    search_query: str = Field(alias="searchQuery")
    generated_at: str = Field(alias="generatedAt")
