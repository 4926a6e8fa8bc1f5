"""Tests for the questionnaire chat endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from src.api.dependencies import get_generator
from src.api.main import app
from src.db.models import ChatSession
from src.orchestrator.flow.engine import GREETING
from src.services.turn_lock import turn_locks
from tests.helpers.api import OWNER_HEADERS, answer_all, start_session
from tests.helpers.generators import FailingGenerator


class TestStartChat:
    def test_anonymous_session(self, client: TestClient):
        response = client.post("/api/chat/start")

        assert response.status_code == 200
        data = response.json()
        assert data["currentStep"] == 1
        assert data["status"] == "active"
        assert data["systemData"] == {}
        assert "userId" not in data
        assert [m["content"] for m in data["messages"]] == [GREETING]

    def test_identified_session_is_owned(self, client: TestClient):
        response = client.post("/api/chat/start", headers=OWNER_HEADERS)
        assert response.json()["userId"] == "owner-1"


class TestQuestions:
    def test_lists_five_questions(self, client: TestClient):
        response = client.get("/api/chat/questions")

        assert response.status_code == 200
        questions = response.json()
        assert [q["step"] for q in questions] == [1, 2, 3, 4, 5]
        assert questions[0]["type"] == "text_input"
        assert "options" not in questions[0]
        assert questions[1]["options"] == ["5-10kg", "10-20kg", "20-30kg", "30kg+"]


class TestSendMessage:
    def test_first_answer_advances(self, client: TestClient):
        session_id = start_session(client)

        response = client.post(
            f"/api/chat/{session_id}/message", json={"message": "mulheres que querem emagrecer"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["nextStep"] == 2
        assert data["isComplete"] is False
        assert "systemPreview" not in data
        assert data["response"].startswith("Excelente!")

    def test_full_flow_returns_preview(self, client: TestClient, stub_generator):
        session_id = start_session(client)

        bodies = answer_all(client, session_id)

        assert [b.get("nextStep") for b in bodies] == [2, 3, 4, 5, None]
        final = bodies[-1]
        assert final["isComplete"] is True
        preview = final["systemPreview"]
        assert preview["hasSDR"] is True
        assert preview["targetWeight"] == "10-20kg"
        assert preview["conversionMethod"] == "WhatsApp direto"
        assert preview["generated"]["preview"]["buttonText"] == "Calcular agora"
        assert len(stub_generator.calls) == 1

        session = client.get(f"/api/chat/{session_id}").json()
        assert session["currentStep"] == 5
        assert len(session["messages"]) == 11
        assert session["systemData"]["sdrAutomation"] == "Sim, quero conversão máxima!"

    def test_assistant_message_carries_next_options(self, client: TestClient):
        session_id = start_session(client)
        client.post(f"/api/chat/{session_id}/message", json={"message": "empresários"})

        messages = client.get(f"/api/chat/{session_id}").json()["messages"]

        assert messages[-1]["role"] == "assistant"
        assert messages[-1]["options"] == ["5-10kg", "10-20kg", "20-30kg", "30kg+"]

    def test_blank_message_is_400(self, client: TestClient):
        session_id = start_session(client)

        response = client.post(f"/api/chat/{session_id}/message", json={"message": "   "})

        assert response.status_code == 400
        assert response.json()["error_code"] == "E-2002"

    def test_missing_body_is_400(self, client: TestClient):
        session_id = start_session(client)

        response = client.post(f"/api/chat/{session_id}/message")

        assert response.status_code == 400
        assert response.json()["error_code"] == "E-2002"

    def test_unknown_session_is_404(self, client: TestClient):
        response = client.post("/api/chat/nao-existe/message", json={"message": "oi"})

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "E-1001"
        assert body["remediation"]

    def test_step_outside_flow_is_409(self, client: TestClient, test_db: Session):
        session_id = start_session(client)
        test_db.get(ChatSession, session_id).current_step = 6
        test_db.commit()

        response = client.post(f"/api/chat/{session_id}/message", json={"message": "oi"})

        assert response.status_code == 409
        assert response.json()["error_code"] == "E-2003"

    def test_unknown_sessions_leave_no_lock_entries(self, client: TestClient):
        baseline = len(turn_locks)

        for i in range(50):
            response = client.post(f"/api/chat/never-created-{i}/message", json={"message": "oi"})
            assert response.status_code == 404

        assert len(turn_locks) == baseline

    def test_generator_failure_still_completes(self, client: TestClient):
        app.dependency_overrides[get_generator] = FailingGenerator
        session_id = start_session(client)

        final = answer_all(client, session_id)[-1]

        assert final["isComplete"] is True
        preview = final["systemPreview"]["generated"]["preview"]
        assert preview["title"] == "Solução para donos de clínicas de estética"
        assert preview["subtitle"]
        assert preview["buttonText"] == "Quero Saber Mais"


class TestSessions:
    def test_get_unknown_session_is_404(self, client: TestClient):
        assert client.get("/api/chat/nao-existe").status_code == 404

    def test_list_requires_identity(self, client: TestClient):
        response = client.get("/api/chat/sessions")

        assert response.status_code == 401
        assert response.json()["error_code"] == "E-5001"

    def test_list_own_sessions(self, client: TestClient):
        own = start_session(client, OWNER_HEADERS)
        start_session(client)

        response = client.get("/api/chat/sessions", headers=OWNER_HEADERS)

        assert response.status_code == 200
        sessions = response.json()
        assert [s["id"] for s in sessions] == [own]
        assert sessions[0]["messageCount"] == 1
        assert sessions[0]["currentStep"] == 1
