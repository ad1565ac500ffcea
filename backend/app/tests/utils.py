import uuid
from unittest.mock import AsyncMock, MagicMock

from sqlmodel import Session

from app.models import Project, User


def make_user(session: Session, email: str | None = None) -> User:
    user = User(email=email or f"{uuid.uuid4().hex[:8]}@example.com", hashed_password="not-a-real-hash")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_project(session: Session, owner: User, site_url: str = "https://example.com") -> Project:
    project = Project(name="Example", site_url=site_url, user_id=owner.id)
    session.add(project)
    session.commit()
    session.refresh(project)
    return project


def openai_client_mock(content: str | None = None, *, side_effect: Exception | None = None):
    """
    Build a stand-in for `AsyncOpenAI()` whose chat.completions.create returns `content`.
    Returns (client_instance, create_mock).
    """
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]

    mock_completions = MagicMock()
    mock_completions.create = AsyncMock(return_value=mock_response, side_effect=side_effect)

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    return mock_client_instance, mock_completions.create


TECHNICAL_AUDIT_PAYLOAD = {
    "audit_results": [
        {
            "category_name": "On-Page SEO",
            "checks": [
                {
                    "check_name": "Title Tag",
                    "status": "PASS",
                    "description": "Title tag is present.",
                    "recommendation": "Keep it.",
                }
            ],
        }
    ]
}

SITE_AUDIT_PAYLOAD = {
    "audit_summary": {
        "site_url": "https://example.com",
        "overall_health_score": 72,
        "executive_summary": "Solid foundation with a few broken links.",
    },
    "findings": [
        {
            "issue_id": "ISSUE-001",
            "category": "Indexability",
            "title": "Broken internal link",
            "severity": "High",
            "description": "The /old-page URL returns 404.",
            "business_impact": "Users and crawlers hit a dead end.",
            "affected_urls": ["https://example.com/old-page"],
            "recommended_action": "Redirect /old-page to /services.",
        }
    ],
}

SERP_SIMULATION_PAYLOAD = {
    "predicted_rank": "8-12",
    "strengths": ["Clear structure"],
    "weaknesses": ["Thin examples"],
    "recommendations": ["Add a comparison table"],
}

CONTENT_BRIEF_PAYLOAD = {
    "target_keyword": "coffee grinders",
    "user_intent": "Commercial research before buying a grinder.",
    "recommended_structure": [{"h2": "Burr vs Blade", "h3s": ["Consistency", "Price"]}],
    "key_entities": ["burr grinder"],
    "people_also_ask": ["Is a burr grinder worth it?"],
}
