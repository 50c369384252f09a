"""Prompt builders for brief generation, article writing and quality scoring.

Builders are pure: the same input always renders the same string. Quality
score caching depends on that.
"""
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

MAX_COMPETITIVE_DOCUMENTS = 5
MAX_CITATION_DOCUMENTS = 10
SCORING_CONTENT_CHAR_LIMIT = 8000

JSON_ONLY_INSTRUCTION = "Return ONLY the JSON object, no markdown fences or explanation."

SYSTEM_PROMPTS = {
    "brief_generation": (
        "You are a strategic content intelligence analyst. You analyze competitive landscapes "
        "and generate data-driven content briefs. Always return valid JSON."
    ),
    "content_generation": (
        "You are an expert content writer who creates SEO-optimized, authoritative articles. "
        "You write engaging, well-researched content that ranks in both traditional and AI search. "
        "Always return valid JSON."
    ),
    "quality_scoring": (
        "You are a content quality analyst who provides objective, consistent scoring of content "
        "across multiple dimensions. Always return valid JSON with scores from 0-100."
    ),
}


class BriefPromptInput(BaseModel):
    client_name: str
    client_domain: str
    industry: Optional[str] = None
    brand_voice: Optional[Dict[str, Any]] = None
    target_keywords: Optional[List[str]] = None
    competitive_data: List[Any] = Field(default_factory=list)
    citation_data: List[Any] = Field(default_factory=list)
    target_keyword: str
    content_type: str = "blog_post"


class ContentPromptInput(BaseModel):
    brief_title: str
    target_keyword: str
    content_type: str = "blog_post"
    target_word_count: int = 1500
    target_audience: Optional[str] = None
    unique_angle: Optional[str] = None
    competitive_gap: Optional[str] = None
    required_sections: Optional[List[str]] = None
    semantic_keywords: Optional[List[str]] = None
    internal_links: Optional[List[str]] = None
    authority_signals: Optional[str] = None
    controversial_positions: Optional[str] = None
    brand_voice: Optional[Dict[str, Any]] = None
    serp_content_analysis: Optional[str] = None


class QualityPromptInput(BaseModel):
    content: str
    target_keyword: str
    content_type: str = "blog_post"
    target_word_count: int = 1500
    title: Optional[str] = None
    meta_description: Optional[str] = None


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False, default=str)


def count_words(text: str) -> int:
    return len(text.split())


def build_brief_generation_prompt(data: BriefPromptInput) -> str:
    competitive = data.competitive_data[:MAX_COMPETITIVE_DOCUMENTS]
    citations = data.citation_data[:MAX_CITATION_DOCUMENTS]

    competitive_section = (
        f"## Competitive Intelligence\n{_dump(competitive)}"
        if competitive
        else "## Competitive Intelligence\nNo competitive data available yet."
    )
    citation_section = (
        f"## AI Citation Data\n{_dump(citations)}"
        if citations
        else "## AI Citation Data\nNo AI citation data available yet."
    )
    brand_voice_section = f"\n## Brand Voice Profile\n{_dump(data.brand_voice)}\n" if data.brand_voice else ""
    keywords_section = (
        f"\n## Existing Target Keywords\n{', '.join(data.target_keywords)}\n"
        if data.target_keywords
        else ""
    )

    return f"""You are a strategic content intelligence analyst. Generate a comprehensive content brief for the following:

## Client
- Name: {data.client_name}
- Domain: {data.client_domain}
- Industry: {data.industry or "Not specified"}
{keywords_section}{brand_voice_section}
## Target Keyword
{data.target_keyword}

## Content Type
{data.content_type or "blog_post"}

{competitive_section}

{citation_section}

## Instructions
Analyze the competitive landscape and AI citation opportunities to create a detailed content brief. Return your response as a JSON object with exactly these fields:

{{
  "title": "Compelling, SEO-optimized title",
  "unique_angle": "What makes this content different from competitors",
  "competitive_gap": "Gaps in competitor content we can exploit",
  "target_audience": "Who this content is for",
  "serp_content_analysis": "Analysis of current SERP content for this keyword",
  "authority_signals": "E-E-A-T signals to include",
  "controversial_positions": "Bold takes that differentiate this content",
  "target_word_count": 1500,
  "required_sections": ["Section 1", "Section 2"],
  "semantic_keywords": ["related keyword 1", "related keyword 2"],
  "ai_citation_opportunity": "How to optimize for AI search citation",
  "priority_level": "high|medium|low",
  "competitive_gap_analysis": {{"gaps": [], "opportunities": []}},
  "ai_citation_opportunity_data": {{"platforms": [], "optimization_tips": []}}
}}

{JSON_ONLY_INSTRUCTION}"""


def build_content_generation_prompt(data: ContentPromptInput) -> str:
    sections = ""
    if data.required_sections:
        numbered = "\n".join(f"{i}. {s}" for i, s in enumerate(data.required_sections, start=1))
        sections = f"\n## Required Sections\n{numbered}\n"
    semantic = (
        f"\n## Semantic Keywords to Include\n{', '.join(data.semantic_keywords)}\n"
        if data.semantic_keywords
        else ""
    )
    links = ""
    if data.internal_links:
        joined_links = "\n".join(data.internal_links)
        links = f"\n## Internal Links to Include\n{joined_links}\n"
    brand_voice = f"\n## Brand Voice\n{_dump(data.brand_voice)}\n" if data.brand_voice else ""

    return f"""You are an expert content writer specializing in SEO-optimized, authoritative content that ranks well in both traditional search and AI search engines.

## Content Brief
- Title: {data.brief_title}
- Target Keyword: {data.target_keyword}
- Content Type: {data.content_type}
- Target Word Count: {data.target_word_count}
- Target Audience: {data.target_audience or "General audience"}
- Unique Angle: {data.unique_angle or "Not specified"}
- Competitive Gap: {data.competitive_gap or "Not specified"}
{sections}{semantic}{links}
## Authority & Expertise
{data.authority_signals or "Include relevant E-E-A-T signals"}

## Bold Positions
{data.controversial_positions or "Take well-reasoned positions backed by data"}

## SERP Analysis
{data.serp_content_analysis or "No SERP analysis available"}
{brand_voice}
## Instructions
Write a comprehensive, well-structured article that:
1. Targets the primary keyword naturally (2-3% density)
2. Includes semantic keywords throughout
3. Uses proper heading hierarchy (H2, H3)
4. Includes an engaging introduction with a hook
5. Has a clear, actionable conclusion
6. Is optimized for AI search citation (clear, factual statements)
7. Demonstrates E-E-A-T signals throughout
8. Includes data points and specific examples

Return your response as a JSON object:
{{
  "title": "Final optimized title",
  "meta_description": "155 character max meta description",
  "excerpt": "2-3 sentence excerpt for previews",
  "content": "Full article content in markdown format",
  "internal_links_added": ["links used"],
  "external_references": ["sources referenced"],
  "aeo_optimizations": {{
    "featured_snippet_targets": [],
    "faq_schema_questions": [],
    "clear_definitions": []
  }}
}}

{JSON_ONLY_INSTRUCTION}"""


def build_quality_scoring_prompt(data: QualityPromptInput) -> str:
    return f"""You are a content quality analyst. Score the following content on multiple dimensions.

## Content to Analyze
Title: {data.title or "Untitled"}
Meta Description: {data.meta_description or "None"}
Target Keyword: {data.target_keyword}
Content Type: {data.content_type}
Target Word Count: {data.target_word_count}
Actual Word Count: {count_words(data.content)}

## Content
{data.content[:SCORING_CONTENT_CHAR_LIMIT]}

## Scoring Instructions
Score each dimension from 0-100 and provide specific feedback.

Return a JSON object:
{{
  "overall_score": 0-100,
  "seo_score": 0-100,
  "readability_score": 0-100,
  "authority_score": 0-100,
  "engagement_score": 0-100,
  "aeo_score": 0-100,
  "detailed_feedback": {{
    "strengths": ["strength 1", "strength 2"],
    "improvements": ["improvement 1", "improvement 2"],
    "seo_feedback": "Specific SEO feedback",
    "readability_feedback": "Specific readability feedback",
    "authority_feedback": "E-E-A-T signal feedback",
    "engagement_feedback": "Hook and CTA feedback",
    "aeo_feedback": "AI search optimization feedback"
  }}
}}

Scoring guidelines:
- SEO: keyword usage, heading structure, meta description, internal linking
- Readability: sentence length variety, paragraph structure, transitions, jargon usage
- Authority: E-E-A-T signals, data citations, expert positioning, specificity
- Engagement: hook quality, storytelling, CTAs, visual content suggestions
- AEO: clear definitions, factual statements, FAQ potential, structured data readiness

{JSON_ONLY_INSTRUCTION}"""
