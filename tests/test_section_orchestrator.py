import pytest

from conftest import FakeCompletionClient
from models.analysis_models import SectionStatus
from models.language import Language
from services.analysis.prompts import SECTION_PROMPTS, SECTION_TITLES, section_keys
from services.analysis.section_orchestrator import SectionOrchestrator
from services.errors import AnalysisError, RemoteServiceError


def reply_by_section(language=Language.EN, fail=()):
    """Reply with the section key, raising for keys listed in `fail`."""
    by_prompt = {prompt: key for key, prompt in SECTION_PROMPTS[language].items()}

    def _respond(prompt, image, session):
        key = by_prompt[prompt]
        if key in fail:
            raise RemoteServiceError("Failed to get response from Flowise (status 500)", status_code=500)
        return f"{key} details"

    return _respond


def title_order(report: str, language: Language):
    titles = SECTION_TITLES[language]
    return sorted(titles.values(), key=report.index)


class TestSectionOrchestrator:
    @pytest.mark.asyncio
    async def test_report_follows_catalog_order_regardless_of_completion_order(self, image_data_url):
        prompts = SECTION_PROMPTS[Language.EN]
        # Earlier catalog entries settle later.
        delays = {prompts[key]: 0.01 * (len(prompts) - i) for i, key in enumerate(prompts)}
        client = FakeCompletionClient(responder=reply_by_section(), delays=delays)

        result = await SectionOrchestrator(client).analyze(image_data_url, Language.EN)

        expected_titles = [SECTION_TITLES[Language.EN][key] for key in section_keys(Language.EN)]
        assert [s.title for s in result.sections] == expected_titles
        assert title_order(result.report, Language.EN) == expected_titles
        assert result.report.startswith("MEDICINE OVERVIEW\n-----------------\nidentification details")
        assert not result.report.endswith("\n")

    @pytest.mark.asyncio
    async def test_one_call_per_section_with_image_and_no_session(self, image_data_url):
        client = FakeCompletionClient(responder=reply_by_section())
        await SectionOrchestrator(client).analyze(image_data_url, "en")

        assert len(client.calls) == len(section_keys(Language.EN))
        assert {c["prompt"] for c in client.calls} == set(SECTION_PROMPTS[Language.EN].values())
        assert all(c["image"] == image_data_url for c in client.calls)
        assert all(c["session_id"] is None for c in client.calls)

    @pytest.mark.asyncio
    async def test_single_failure_is_captured_and_siblings_complete(self, image_data_url):
        client = FakeCompletionClient(responder=reply_by_section(fail=("safety",)))

        result = await SectionOrchestrator(client).analyze(image_data_url, Language.EN)

        statuses = {s.key: s.status for s in result.sections}
        assert statuses.pop("safety") is SectionStatus.ERROR
        assert set(statuses.values()) == {SectionStatus.COMPLETE}
        assert result.failed_sections == ("safety",)
        assert result.report.count("Error: ") == 1
        assert "SAFETY INFORMATION\n------------------\nError: Failed to get response from Flowise (status 500)" in result.report
        assert result.report.count(" details") == len(section_keys(Language.EN)) - 1

    @pytest.mark.asyncio
    async def test_nepali_errors_use_localized_prefix(self, image_data_url):
        client = FakeCompletionClient(responder=reply_by_section(Language.NP, fail=("dosage",)))

        result = await SectionOrchestrator(client).analyze(image_data_url, Language.NP)

        assert "मात्रा र प्रशासन\n" in result.report
        assert result.report.count("त्रुटि: ") == 1
        assert "Error: " not in result.report

    @pytest.mark.asyncio
    async def test_progress_is_published_initially_and_after_each_settle(self, image_data_url):
        client = FakeCompletionClient(responder=reply_by_section(fail=("storage",)))
        snapshots = []

        await SectionOrchestrator(client).analyze(image_data_url, Language.EN, on_update=snapshots.append)

        count = len(section_keys(Language.EN))
        assert len(snapshots) == count + 1
        assert all(s.status is SectionStatus.LOADING for s in snapshots[0].values())
        settled = [sum(1 for s in snap.values() if s.settled) for snap in snapshots]
        assert settled == list(range(count + 1))
        assert snapshots[-1]["storage"].status is SectionStatus.ERROR
        with pytest.raises(TypeError):
            snapshots[0]["storage"] = None

    @pytest.mark.asyncio
    async def test_async_observer_and_failing_observer_do_not_break_the_run(self, image_data_url):
        client = FakeCompletionClient(responder=reply_by_section())
        seen = []

        async def observer(snapshot):
            seen.append(len(snapshot))
            raise RuntimeError("ui went away")

        result = await SectionOrchestrator(client).analyze(image_data_url, Language.EN, on_update=observer)

        assert len(seen) == len(section_keys(Language.EN)) + 1
        assert result.failed_sections == ()

    @pytest.mark.asyncio
    async def test_unreadable_image_fails_before_any_call(self):
        client = FakeCompletionClient()
        with pytest.raises(AnalysisError):
            await SectionOrchestrator(client).analyze("data:image/png;base64,bm90IGFuIGltYWdl", Language.EN)
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_unknown_language_is_rejected(self, image_data_url):
        client = FakeCompletionClient()
        with pytest.raises(AnalysisError):
            await SectionOrchestrator(client).analyze(image_data_url, "fr")
        assert client.calls == []
