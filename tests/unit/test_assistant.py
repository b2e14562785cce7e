import httpx
import pytest

from transparency.core.exceptions import AssistantUnavailable
from transparency.services.assistant import GENERATE_QUESTIONS_PATH
from transparency.services.assistant import REPORT_ANALYSIS_PATH
from transparency.services.assistant import SCORE_ANSWERS_PATH
from transparency.services.assistant import AssistantClient


async def _questions(client: AssistantClient):
    return await client.generate_questions(
        "rid",
        product_name="EcoMug",
        category="kitchenware",
        attributes={"material": "bamboo"},
    )


@pytest.mark.asyncio
async def test_generate_questions_filters_blank_entries(assistant_client, assistant_stub):
    assistant_stub.respond(GENERATE_QUESTIONS_PATH, {"questions": ["  Where is it made? ", "", "   ", 42, "Who assembles it?"]})

    result = await _questions(assistant_client)

    assert result == ["Where is it made?", "Who assembles it?"]
    path, payload = assistant_stub.calls[0]
    assert path == GENERATE_QUESTIONS_PATH
    assert payload == {
        "productName": "EcoMug",
        "category": "kitchenware",
        "attributes": {"material": "bamboo"},
        "previousAnswers": {},
        "askedQuestions": [],
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body,reason",
    [
        ({"questions": []}, "empty"),
        ({"questions": ["", "  "]}, "empty"),
        ({"questions": "Where is it made?"}, "malformed"),
        ({"items": ["Where is it made?"]}, "malformed"),
        (["Where is it made?"], "malformed"),
        ("not json", "malformed"),
    ],
)
async def test_generate_questions_bad_payloads(assistant_client, assistant_stub, body, reason):
    assistant_stub.respond(GENERATE_QUESTIONS_PATH, body)

    with pytest.raises(AssistantUnavailable) as exc:
        await _questions(assistant_client)
    assert exc.value.reason == reason
    assert exc.value.operation == "generate-questions"


@pytest.mark.asyncio
async def test_non_2xx_status_is_unavailable(assistant_client, assistant_stub):
    assistant_stub.respond(GENERATE_QUESTIONS_PATH, {"questions": ["q"]}, status_code=503)

    with pytest.raises(AssistantUnavailable) as exc:
        await _questions(assistant_client)
    assert exc.value.reason == "status"


@pytest.mark.asyncio
async def test_network_error_is_unavailable(assistant_client, assistant_stub):
    assistant_stub.available = False

    with pytest.raises(AssistantUnavailable) as exc:
        await _questions(assistant_client)
    assert exc.value.reason == "network"


@pytest.mark.asyncio
async def test_timeout_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = AssistantClient(base_url="http://assistant.test", transport=httpx.MockTransport(handler))
    with pytest.raises(AssistantUnavailable) as exc:
        await client.score_answers("rid", product_name="EcoMug", category="kitchenware", answers={})
    assert exc.value.reason == "timeout"
    await client.aclose()


@pytest.mark.asyncio
async def test_score_answers_parses_response(assistant_client, assistant_stub):
    assistant_stub.respond(SCORE_ANSWERS_PATH, {"score": 82, "summary": "Strong material disclosure"})

    result = await assistant_client.score_answers(
        "rid", product_name="EcoMug", category="kitchenware", answers={"material": "bamboo"}
    )

    assert result.score == 82
    assert result.summary == "Strong material disclosure"
    assert assistant_stub.calls[0][1] == {
        "productName": "EcoMug",
        "category": "kitchenware",
        "answers": {"material": "bamboo"},
    }


@pytest.mark.asyncio
async def test_score_answers_allows_missing_fields(assistant_client, assistant_stub):
    assistant_stub.respond(SCORE_ANSWERS_PATH, {})

    result = await assistant_client.score_answers("rid", product_name="EcoMug", category="kitchenware", answers={})

    assert result.score is None
    assert result.summary is None


@pytest.mark.asyncio
@pytest.mark.parametrize("score", ["high", True, [80]])
async def test_score_answers_rejects_non_numeric_score(assistant_client, assistant_stub, score):
    assistant_stub.respond(SCORE_ANSWERS_PATH, {"score": score, "summary": "x"})

    with pytest.raises(AssistantUnavailable) as exc:
        await assistant_client.score_answers("rid", product_name="EcoMug", category="kitchenware", answers={})
    assert exc.value.reason == "malformed"


@pytest.mark.asyncio
async def test_report_analysis_defaults_missing_sections(assistant_client, assistant_stub):
    assistant_stub.respond(
        REPORT_ANALYSIS_PATH,
        {"executiveSummary": "Solid disclosure.", "strengths": ["Clear sourcing"], "concerns": None},
    )

    analysis = await assistant_client.generate_report_analysis(
        "rid", product_name="EcoMug", category="kitchenware", answers={}, transparency_score=None
    )

    assert analysis.executive_summary == "Solid disclosure."
    assert analysis.strengths == ["Clear sourcing"]
    assert analysis.concerns == []
    assert analysis.category_analysis == {}
    assert assistant_stub.calls[0][1]["transparencyScore"] is None


@pytest.mark.asyncio
async def test_report_analysis_rejects_wrong_types(assistant_client, assistant_stub):
    assistant_stub.respond(REPORT_ANALYSIS_PATH, {"strengths": "not a list"})

    with pytest.raises(AssistantUnavailable) as exc:
        await assistant_client.generate_report_analysis(
            "rid", product_name="EcoMug", category="kitchenware", answers={}, transparency_score=70
        )
    assert exc.value.reason == "malformed"
