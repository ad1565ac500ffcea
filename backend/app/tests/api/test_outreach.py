from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.agent.pipeline import PipelineOutcome, PipelineState
from app.core.config import settings
from app.models import Project
from app.tests.utils import make_project, make_user, openai_client_mock


def _create_prospect(client: TestClient, project: Project, **overrides) -> dict:
    body = {"name": " Jane Doe ", "website": "https://jane.blog", "email": "  "}
    body.update(overrides)
    r = client.post(f"{settings.API_V1_STR}/outreach/{project.id}/prospects", json=body)
    assert r.status_code == 200, r.text
    return r.json()


def test_create_prospect_normalizes_fields(client: TestClient, project: Project):
    prospect = _create_prospect(client, project)
    assert prospect["name"] == "Jane Doe"
    assert prospect["email"] is None
    assert prospect["status"] == "Identified"
    assert prospect["last_contacted"] is None

    r = client.get(f"{settings.API_V1_STR}/outreach/{project.id}/prospects")
    assert [p["id"] for p in r.json()] == [prospect["id"]]


def test_create_prospect_rejects_blank_name(client: TestClient, project: Project):
    r = client.post(
        f"{settings.API_V1_STR}/outreach/{project.id}/prospects",
        json={"name": "   ", "website": "https://jane.blog"},
    )
    assert r.status_code == 422


def test_status_change_to_contacted_stamps_time(client: TestClient, project: Project):
    prospect = _create_prospect(client, project)

    r = client.patch(
        f"{settings.API_V1_STR}/outreach/prospects/{prospect['id']}/status", json={"status": "Contacted"}
    )
    assert r.status_code == 200
    assert r.json()["status"] == "Contacted"
    assert r.json()["last_contacted"] is not None


def test_unknown_status_is_rejected(client: TestClient, project: Project):
    prospect = _create_prospect(client, project)
    r = client.patch(
        f"{settings.API_V1_STR}/outreach/prospects/{prospect['id']}/status", json={"status": "Ghosted"}
    )
    assert r.status_code == 422


def test_other_users_prospect_is_not_found(client: TestClient, session: Session):
    stranger_project = make_project(session, make_user(session))
    r = client.get(f"{settings.API_V1_STR}/outreach/{stranger_project.id}/prospects")
    assert r.status_code == 404


def test_generate_email_returns_draft(client: TestClient, project: Project):
    prospect = _create_prospect(client, project)
    mock_client_instance, mock_create = openai_client_mock("Hi Jane,\n\nLoved your post.")

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            r = client.post(f"{settings.API_V1_STR}/outreach/prospects/{prospect['id']}/email")

    assert r.status_code == 200
    assert r.json() == {"prospect_id": prospect["id"], "body": "Hi Jane,\n\nLoved your post."}
    user_prompt = mock_create.call_args.kwargs["messages"][1]["content"]
    assert "Prospect Name: Jane Doe" in user_prompt
    assert f"My Project URL to Promote: {project.site_url}" in user_prompt


def test_generate_email_failure_maps_to_status_code(client: TestClient, project: Project):
    prospect = _create_prospect(client, project)
    outcome = PipelineOutcome(
        kind="outreach_email",
        state=PipelineState.INVALID,
        error_kind="validation",
        message='Failed to generate email for "Jane Doe": Model returned an empty email.',
    )
    with patch("app.api.routes.outreach.run_report_pipeline", AsyncMock(return_value=outcome)):
        r = client.post(f"{settings.API_V1_STR}/outreach/prospects/{prospect['id']}/email")

    assert r.status_code == 502
    assert r.json()["message"].startswith('Failed to generate email for "Jane Doe"')
