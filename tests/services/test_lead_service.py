"""Tests for lead capture, conversion and metrics bookkeeping."""

import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.models import Base, Lead, System, User
from src.errors import NotFoundError
from src.orchestrator.flow import SystemData, fallback_system
from src.services.lead_service import LeadService, conversion_rate
from src.services.system_service import SystemService
from src.services.template_service import TemplateService


@pytest.fixture
def system(test_db: Session, owner: User) -> System:
    return SystemService(test_db).create_from_chat(
        owner.id, SystemData(target_audience="nutricionistas"), fallback_system(SystemData())
    )


def _metrics(system: System) -> dict:
    return json.loads(system.metrics)


class TestConversionRate:
    def test_zero_leads(self):
        assert conversion_rate(0, 0) == 0

    def test_rounds_half_up(self):
        assert conversion_rate(1, 8) == 13  # 12.5
        assert conversion_rate(1, 3) == 33
        assert conversion_rate(2, 3) == 67

    def test_full_conversion(self):
        assert conversion_rate(4, 4) == 100


class TestCaptureLead:
    def test_stores_payload_and_counts_lead(self, test_db: Session, system: System):
        lead = LeadService(test_db).capture_lead(system.id, {"nome": "Ana", "whatsapp": "11999"})

        assert lead.status == "new"
        assert lead.converted is False
        assert json.loads(lead.data) == {"nome": "Ana", "whatsapp": "11999"}
        assert _metrics(system)["leads"] == 1
        assert _metrics(system)["conversionRate"] == 0

    def test_unknown_system(self, test_db: Session):
        with pytest.raises(NotFoundError) as exc_info:
            LeadService(test_db).capture_lead("missing", {})
        assert exc_info.value.code == "E-1002"
        assert test_db.query(Lead).count() == 0

    def test_counts_are_recomputed_from_lead_rows(self, test_db: Session, system: System):
        system.metrics = json.dumps({"views": 7, "leads": 99, "conversions": 40})
        test_db.commit()

        LeadService(test_db).capture_lead(system.id, {"nome": "Ana"})

        metrics = _metrics(system)
        assert metrics["leads"] == 1
        assert metrics["conversions"] == 0
        assert metrics["conversionRate"] == 0
        assert metrics["views"] == 7


class TestConcurrentCapture:
    @pytest.fixture
    def session_factory(self, tmp_path):
        db_path = tmp_path / "leads.db"
        engine = create_engine(f"sqlite:///{db_path}")
        Base.metadata.create_all(bind=engine)
        factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        with factory() as setup:
            TemplateService(setup).initialize_templates()
            setup.add(User(id="owner-1", email="dono@example.com"))
            setup.commit()
        yield factory
        engine.dispose()

    def test_interleaved_captures_keep_both_counts(self, session_factory):
        with session_factory() as setup:
            system_id = SystemService(setup).create_from_chat(
                "owner-1", SystemData(), fallback_system(SystemData())
            ).id

        with session_factory() as first, session_factory() as second:
            # Both requests have loaded the system before either writes.
            first.get(System, system_id)
            second.get(System, system_id)

            LeadService(second).capture_lead(system_id, {"nome": "Bia"})
            LeadService(first).capture_lead(system_id, {"nome": "Ana"})

        with session_factory() as check:
            metrics = json.loads(check.get(System, system_id).metrics)
            assert check.query(Lead).count() == 2
        assert metrics["leads"] == 2


class TestConvertLead:
    def test_converts_and_updates_rate(self, test_db: Session, system: System, owner: User):
        service = LeadService(test_db)
        first = service.capture_lead(system.id, {"nome": "Ana"})
        service.capture_lead(system.id, {"nome": "Bia"})

        converted = service.convert_lead(first.id, owner.id)

        assert converted.converted is True
        assert converted.status == "converted"
        metrics = _metrics(system)
        assert metrics["leads"] == 2
        assert metrics["conversions"] == 1
        assert metrics["conversionRate"] == 50

    def test_converting_twice_counts_once(self, test_db: Session, system: System, owner: User):
        service = LeadService(test_db)
        lead = service.capture_lead(system.id, {})

        service.convert_lead(lead.id, owner.id)
        service.convert_lead(lead.id, owner.id)

        assert _metrics(system)["conversions"] == 1

    def test_other_users_lead_is_not_found(self, test_db: Session, system: System):
        lead = LeadService(test_db).capture_lead(system.id, {})

        with pytest.raises(NotFoundError) as exc_info:
            LeadService(test_db).convert_lead(lead.id, "intruso")

        assert exc_info.value.code == "E-1003"
        assert test_db.get(Lead, lead.id).converted is False


class TestListUserLeads:
    def test_newest_first_with_limit(self, test_db: Session, system: System, owner: User):
        service = LeadService(test_db)
        ids = []
        for day in (1, 2, 3):
            lead = service.capture_lead(system.id, {"n": day})
            lead.created_at = f"2026-03-0{day}T10:00:00+00:00"
            ids.append(lead.id)
        test_db.commit()

        assert [lead.id for lead in service.list_user_leads(owner.id)] == ids[::-1]
        assert [lead.id for lead in service.list_user_leads(owner.id, limit=2)] == ids[:0:-1]

    def test_excludes_other_owners(self, test_db: Session, system: System):
        LeadService(test_db).capture_lead(system.id, {})
        test_db.add(User(id="outro"))
        test_db.commit()

        assert LeadService(test_db).list_user_leads("outro") == []
