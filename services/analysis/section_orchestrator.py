"""Fan a captured image out into one completion call per catalog section.

Every section is requested concurrently and settles on its own. The run
waits for all of them (a failed section never cancels its siblings) and
then assembles a single report in catalog order.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from models.analysis_models import AnalysisReport, AnalysisSection, SectionStatus
from models.language import Language
from services.analysis.prompts import ERROR_PREFIX, SECTION_PROMPTS, SECTION_TITLES, section_keys
from services.completion.flowise_client import FlowiseClient
from services.errors import AnalysisError
from utils.media_validation import ensure_image_data_url

LOGGER = logging.getLogger(__name__)

SectionSnapshot = Mapping[str, AnalysisSection]
UpdateCallback = Callable[[SectionSnapshot], Union[None, Awaitable[None]]]


def format_report(sections: Mapping[str, AnalysisSection], language: Language) -> str:
    """Render settled sections as titled blocks in catalog order."""
    prefix = ERROR_PREFIX[language]
    parts = []
    for key in section_keys(language):
        section = sections[key]
        body = section.content if section.status is SectionStatus.COMPLETE else f"{prefix}: {section.error}"
        parts.append(f"{section.title}\n{'-' * len(section.title)}\n{body}\n\n")
    return "".join(parts).strip()


class SectionOrchestrator:
    """Run a multi-section medicine analysis against the completion service."""

    def __init__(self, client: FlowiseClient) -> None:
        if client is None:
            raise ValueError("Completion client is required.")
        self.client = client

    async def analyze(
        self,
        image_data_url: str,
        language: Language | str = Language.EN,
        on_update: Optional[UpdateCallback] = None,
    ) -> AnalysisReport:
        """Analyze an image section by section.

        Args:
            image_data_url: Captured image as a base64 data URL.
            language: Catalog language for prompts, titles and error lines.
            on_update: Optional observer (sync or async) called with a read-only
                snapshot of all sections, once initially and after every settle.

        Returns:
            The settled sections and the assembled report text.

        Raises:
            AnalysisError: If the language is unknown or the image unreadable.
                No completion call is made in that case.
        """
        try:
            lang = Language.parse(language)
        except ValueError as exc:
            raise AnalysisError(str(exc)) from exc
        try:
            ensure_image_data_url(image_data_url)
        except ValueError as exc:
            raise AnalysisError(f"Unable to read captured image: {exc}") from exc

        prompts = SECTION_PROMPTS[lang]
        titles = SECTION_TITLES[lang]
        sections: Dict[str, AnalysisSection] = {
            key: AnalysisSection(key=key, title=titles[key]) for key in section_keys(lang)
        }
        await self._publish(on_update, sections)

        start = time.time()

        async def _run_section(key: str) -> None:
            t0 = time.time()
            try:
                content = await self.client.request(prompts[key], image_data_url)
            except Exception as exc:
                LOGGER.warning("Section '%s' failed after %.3fs: %s", key, time.time() - t0, exc)
                sections[key] = replace(sections[key], status=SectionStatus.ERROR, error=str(exc))
            else:
                sections[key] = replace(sections[key], status=SectionStatus.COMPLETE, content=content)
            await self._publish(on_update, sections)

        tasks = [asyncio.create_task(_run_section(key)) for key in sections]
        await asyncio.gather(*tasks, return_exceptions=True)

        report = format_report(sections, lang)
        ordered = tuple(sections[key] for key in section_keys(lang))
        failed = sum(1 for s in ordered if s.status is SectionStatus.ERROR)
        LOGGER.info(
            "Analysis settled in %.3fs: %d sections, %d failed", time.time() - start, len(ordered), failed
        )
        return AnalysisReport(language=lang, sections=ordered, report=report)

    @staticmethod
    async def _publish(on_update: Optional[UpdateCallback], sections: Dict[str, AnalysisSection]) -> None:
        if on_update is None:
            return
        snapshot: SectionSnapshot = MappingProxyType(dict(sections))
        try:
            result: Any = on_update(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception:
            LOGGER.exception("Section update observer failed")
