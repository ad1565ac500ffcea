import unittest
from unittest.mock import MagicMock, patch

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from app.agent.artifacts import (
    ContentBrief,
    ContentBriefParams,
    SiteAuditParams,
    SiteAuditResult,
)
from app.agent.exceptions import AuthenticationError, PersistenceError
from app.agent.persistence import ReportRecorder, save_content_brief, save_site_audit
from app.models import Audit, ContentBriefRecord
from app.tests.utils import CONTENT_BRIEF_PAYLOAD, SITE_AUDIT_PAYLOAD, make_project, make_user


class ReportRecorderTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        SQLModel.metadata.create_all(self.engine)
        self.session = Session(self.engine)
        self.user = make_user(self.session)
        self.project = make_project(self.session, self.user)

    def tearDown(self):
        self.session.close()
        SQLModel.metadata.drop_all(self.engine)

    async def test_saves_brief_with_explicit_owner(self):
        recorder = ReportRecorder(self.session)
        record = await recorder.save(
            save_content_brief,
            ContentBrief.model_validate(CONTENT_BRIEF_PAYLOAD),
            ContentBriefParams(keyword="Coffee Grinders 2024"),
            owner_id=self.user.id,
            project_id=self.project.id,
        )

        stored = self.session.exec(select(ContentBriefRecord)).one()
        self.assertEqual(stored.id, record.id)
        self.assertEqual(stored.user_id, self.user.id)
        self.assertEqual(stored.project_id, self.project.id)
        # The keyword column mirrors the brief itself, not the request.
        self.assertEqual(stored.target_keyword, "coffee grinders")
        self.assertEqual(stored.target_keyword, stored.brief_data["target_keyword"])
        self.assertEqual(stored.brief_data, CONTENT_BRIEF_PAYLOAD)

    async def test_missing_owner_writes_nothing(self):
        recorder = ReportRecorder(self.session)
        writer = MagicMock()

        with self.assertRaises(AuthenticationError):
            await recorder.save(
                writer,
                SiteAuditResult.model_validate(SITE_AUDIT_PAYLOAD),
                SiteAuditParams(url="https://example.com"),
                owner_id=None,
                project_id=self.project.id,
            )

        writer.assert_not_called()
        self.assertEqual(self.session.exec(select(Audit)).all(), [])

    async def test_store_failure_becomes_persistence_error(self):
        recorder = ReportRecorder(self.session)

        with patch("app.agent.persistence.create_audit", side_effect=RuntimeError("disk I/O error")):
            with self.assertRaises(PersistenceError) as ctx:
                await recorder.save(
                    save_site_audit,
                    SiteAuditResult.model_validate(SITE_AUDIT_PAYLOAD),
                    SiteAuditParams(url="https://example.com"),
                    owner_id=self.user.id,
                    project_id=self.project.id,
                )

        self.assertEqual(ctx.exception.kind, "persistence")
        self.assertEqual(ctx.exception.message, "disk I/O error")
        # The session stays usable after the failed write.
        self.assertEqual(self.session.exec(select(Audit)).all(), [])
