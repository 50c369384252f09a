"""Content generation use cases.

Each use case makes exactly one upstream attempt and lets every error
propagate to the caller unchanged.
"""
import logging
import time
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.briefs.models import BriefStatus, ContentBrief
from src.briefs.workflow import BriefWorkflow
from src.config import settings
from src.content.models import ContentQualityAnalysis, GeneratedContent
from src.content.prompts import (
    SYSTEM_PROMPTS,
    BriefPromptInput,
    ContentPromptInput,
    QualityPromptInput,
    build_brief_generation_prompt,
    build_content_generation_prompt,
    build_quality_scoring_prompt,
    count_words,
)
from src.content.quality_cache import QualityAnalysisCache, fingerprint, get_quality_cache
from src.content.repository import ContentRepository
from src.content.schemas import BriefGenerationOutput, ContentGenerationOutput, QualityScores
from src.llm.parsing import parse_structured_response
from src.llm.providers import ProviderClient, get_provider
from src.llm.schemas import CompletionMetadata
from src.shared.errors import NotFoundError, PreconditionError

logger = logging.getLogger(__name__)

BRIEF_MAX_TOKENS = 2048
CONTENT_MAX_TOKENS = 8192
SCORING_MAX_TOKENS = 2048

GENERATION_PROMPT_CHAR_LIMIT = 5000
META_DESCRIPTION_MAX_LENGTH = 155

REVIEW_ACTIONS = ("approve", "revision")


class ContentEngineService:
    def __init__(
        self,
        db: Optional[AsyncSession],
        repository: Optional[ContentRepository] = None,
        providers: Optional[Dict[str, ProviderClient]] = None,
        cache: Optional[QualityAnalysisCache] = None,
        workflow: Optional[BriefWorkflow] = None,
    ):
        self.db = db
        self.repository = repository or ContentRepository(db)
        self.providers = providers
        self.cache = cache or get_quality_cache()
        self.workflow = workflow or BriefWorkflow(self.repository)

    def _provider(self, name: Optional[str] = None) -> ProviderClient:
        name = name or settings.DEFAULT_PROVIDER
        if self.providers is None:
            return get_provider(name)
        if name not in self.providers:
            raise PreconditionError(f"Unknown model provider {name!r}. Valid: {', '.join(self.providers)}")
        return self.providers[name]

    async def _require_brief(self, brief_id: UUID) -> ContentBrief:
        brief = await self.repository.get_brief(brief_id)
        if not brief:
            raise NotFoundError("Brief", brief_id)
        return brief

    async def _require_content(self, content_id: UUID) -> GeneratedContent:
        content = await self.repository.get_content(content_id)
        if not content:
            raise NotFoundError("Content", content_id)
        return content

    # ------------------------------------------------------------------
    # Brief generation
    # ------------------------------------------------------------------

    async def generate_brief(
        self,
        client_id: UUID,
        target_keyword: str,
        content_type: str = "blog_post",
    ) -> ContentBrief:
        client = await self.repository.get_client(client_id)
        if not client:
            raise NotFoundError("Client", client_id)

        competitive = await self.repository.get_recent_competitive_analyses(client_id)
        citations = await self.repository.get_recent_citations(client_id)

        prompt = build_brief_generation_prompt(
            BriefPromptInput(
                client_name=client.name,
                client_domain=client.domain,
                industry=client.industry,
                brand_voice=client.brand_voice,
                target_keywords=client.target_keywords,
                competitive_data=competitive,
                citation_data=citations,
                target_keyword=target_keyword,
                content_type=content_type or "blog_post",
            )
        )

        result = await self._provider().complete(
            prompt,
            system_prompt=SYSTEM_PROMPTS["brief_generation"],
            max_tokens=BRIEF_MAX_TOKENS,
            metadata=CompletionMetadata(operation="brief_generation", client_id=client_id),
        )
        output = parse_structured_response(result.text, BriefGenerationOutput)

        brief = ContentBrief(
            client_id=client_id,
            title=output.title or f"Brief: {target_keyword}",
            target_keyword=target_keyword,
            content_type=content_type or "blog_post",
            status=BriefStatus.DRAFT,
            unique_angle=output.unique_angle,
            competitive_gap=output.competitive_gap,
            target_audience=output.target_audience,
            serp_content_analysis=output.serp_content_analysis,
            authority_signals=output.authority_signals,
            controversial_positions=output.controversial_positions,
            ai_citation_opportunity=output.ai_citation_opportunity,
            target_word_count=output.target_word_count,
            required_sections=output.required_sections,
            semantic_keywords=output.semantic_keywords,
            priority_level=output.priority_level or "medium",
            competitive_gap_analysis=output.competitive_gap_analysis,
            ai_citation_opportunity_data=output.ai_citation_opportunity_data,
            client_voice_profile=client.brand_voice,
        )
        brief = await self.repository.insert_brief(brief)
        logger.info(f"Generated brief {brief.id} for client {client_id} on '{target_keyword}'")
        return brief

    # ------------------------------------------------------------------
    # Content generation
    # ------------------------------------------------------------------

    async def generate_content(self, brief_id: UUID, model: Optional[str] = None) -> GeneratedContent:
        brief = await self._require_brief(brief_id)
        if brief.status != BriefStatus.APPROVED:
            status = getattr(brief.status, "value", brief.status)
            raise PreconditionError(f"Brief {brief_id} must be approved before generating content (status: {status})")
        provider = self._provider(model)

        await self.workflow.transition(brief, BriefStatus.GENERATING)

        brand_voice = brief.client_voice_profile
        if brand_voice is None:
            client = await self.repository.get_client(brief.client_id)
            brand_voice = client.brand_voice if client else None

        prompt = build_content_generation_prompt(
            ContentPromptInput(
                brief_title=brief.title,
                target_keyword=brief.target_keyword,
                content_type=brief.content_type,
                target_word_count=brief.target_word_count or 1500,
                target_audience=brief.target_audience,
                unique_angle=brief.unique_angle,
                competitive_gap=brief.competitive_gap,
                required_sections=brief.required_sections,
                semantic_keywords=brief.semantic_keywords,
                internal_links=brief.internal_links,
                authority_signals=brief.authority_signals,
                controversial_positions=brief.controversial_positions,
                brand_voice=brand_voice,
                serp_content_analysis=brief.serp_content_analysis,
            )
        )

        started = time.perf_counter()
        result = await provider.complete(
            prompt,
            system_prompt=SYSTEM_PROMPTS["content_generation"],
            max_tokens=CONTENT_MAX_TOKENS,
            metadata=CompletionMetadata(
                operation="content_generation",
                client_id=brief.client_id,
                brief_id=brief.id,
            ),
        )
        elapsed = time.perf_counter() - started

        output = parse_structured_response(result.text, ContentGenerationOutput)

        content = GeneratedContent(
            brief_id=brief.id,
            client_id=brief.client_id,
            title=output.title,
            meta_description=output.meta_description[:META_DESCRIPTION_MAX_LENGTH],
            excerpt=output.excerpt,
            content=output.content,
            word_count=count_words(output.content),
            status="generated",
            ai_model_used=result.model_name,
            generation_prompt=prompt[:GENERATION_PROMPT_CHAR_LIMIT],
            generation_time_seconds=round(elapsed, 3),
            internal_links_added=output.internal_links_added,
            external_references=output.external_references,
            aeo_optimizations=output.aeo_optimizations,
        )
        content = await self.repository.insert_content(content)

        await self.workflow.transition(brief, BriefStatus.GENERATED, {"content_id": content.id})
        logger.info(
            f"Generated content {content.id} for brief {brief.id}: "
            f"{content.word_count} words in {elapsed:.1f}s with {result.model_name}"
        )
        return content

    # ------------------------------------------------------------------
    # Quality scoring
    # ------------------------------------------------------------------

    async def _cached_scores(self, key: str) -> Optional[QualityScores]:
        cached = await self.cache.get(key)
        if cached is None:
            return None
        try:
            return QualityScores.model_validate(cached)
        except ValidationError:
            logger.warning(f"Discarding malformed cached scores for {key}")
            return None

    async def score_content(self, content_id: UUID) -> ContentQualityAnalysis:
        content = await self._require_content(content_id)
        brief = await self.repository.get_brief(content.brief_id)

        target_keyword = brief.target_keyword if brief else ""
        key = fingerprint(content.content, target_keyword)

        scores = await self._cached_scores(key)
        if scores is None:
            prompt = build_quality_scoring_prompt(
                QualityPromptInput(
                    content=content.content,
                    target_keyword=target_keyword,
                    content_type=brief.content_type if brief else "blog_post",
                    target_word_count=(brief.target_word_count if brief else None) or 1500,
                    title=content.title,
                    meta_description=content.meta_description,
                )
            )
            result = await self._provider().complete(
                prompt,
                system_prompt=SYSTEM_PROMPTS["quality_scoring"],
                max_tokens=SCORING_MAX_TOKENS,
                metadata=CompletionMetadata(
                    operation="quality_scoring",
                    client_id=content.client_id,
                    brief_id=content.brief_id,
                    content_id=content.id,
                ),
            )
            scores = parse_structured_response(result.text, QualityScores)
            await self.cache.put(key, scores.model_dump(mode="json"))

        analysis = await self.repository.insert_analysis(
            ContentQualityAnalysis(
                content_id=content.id,
                overall_score=scores.overall_score,
                seo_score=scores.seo_score,
                readability_score=scores.readability_score,
                authority_score=scores.authority_score,
                engagement_score=scores.engagement_score,
                aeo_score=scores.aeo_score,
                detailed_feedback=scores.detailed_feedback.model_dump(),
            )
        )
        await self.repository.update_content(
            content,
            {
                "quality_score": scores.overall_score,
                "readability_score": scores.readability_score,
                "authority_score": scores.authority_score,
                "optimization_score": scores.seo_score,
            },
        )
        logger.info(f"Scored content {content.id}: overall {scores.overall_score}")
        return analysis

    # ------------------------------------------------------------------
    # Review workflow
    # ------------------------------------------------------------------

    async def get_brief(self, brief_id: UUID) -> ContentBrief:
        return await self._require_brief(brief_id)

    async def approve_brief(self, brief_id: UUID, user_id: Optional[UUID] = None) -> ContentBrief:
        return await self.workflow.approve(brief_id, user_id)

    async def revise_brief(self, brief_id: UUID) -> ContentBrief:
        return await self.workflow.revise(brief_id)

    async def start_review(self, brief_id: UUID) -> ContentBrief:
        brief = await self._require_brief(brief_id)
        await self.workflow.transition(brief, BriefStatus.REVIEWING)
        if brief.content_id:
            content = await self.repository.get_content(brief.content_id)
            if content:
                await self.repository.update_content(content, {"status": "reviewing"})
        return brief

    async def submit_review(
        self,
        content_id: UUID,
        action: str,
        reviewer_notes: Optional[str] = None,
        revision_requests: Optional[List[str]] = None,
        review_time_minutes: Optional[float] = None,
        published_url: Optional[str] = None,
    ) -> GeneratedContent:
        if action not in REVIEW_ACTIONS:
            raise PreconditionError(f"Unknown review action {action!r}. Valid: {', '.join(REVIEW_ACTIONS)}")

        content = await self._require_content(content_id)
        brief = await self._require_brief(content.brief_id)
        now = datetime.utcnow()
        updates = {
            "reviewer_notes": reviewer_notes,
            "reviewed_at": now,
            "human_review_time_minutes": review_time_minutes,
        }

        if action == "approve":
            await self.workflow.transition(brief, BriefStatus.PUBLISHED, {"published_url": published_url})
            updates.update(status="published", approved_at=now)
        else:
            notes = reviewer_notes or "; ".join(revision_requests or [])
            await self.workflow.transition(
                brief, BriefStatus.REVISION_REQUESTED, {"revision_notes": notes}
            )
            updates.update(status="revision_requested", revision_requests=revision_requests)

        return await self.repository.update_content(content, updates)

    async def list_content_queue(
        self,
        client_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> List[GeneratedContent]:
        return await self.repository.list_content_queue(client_id=client_id, status=status)
