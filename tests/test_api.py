"""
Integration tests for API endpoints
"""
from unittest.mock import patch


def _questions_payload(sample_questions):
    return [q.model_dump(mode="json") for q in sample_questions]


class TestHealthEndpoints:
    def test_health_check(self, client):
        """Test health check endpoint"""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert "status" in data
        assert "timestamp" in data
        assert data["checks"]["generator"]["status"] == "healthy"

    def test_metrics_endpoint(self, client):
        """Test metrics endpoint"""
        client.get("/health")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "http_requests_total" in response.text


class TestGenerateEndpoint:
    def test_generate_from_text(self, client, biology_text):
        response = client.post("/quiz/generate", data={"text": biology_text, "count": "4", "quiz_type": "mcq"})
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 4
        assert [q["id"] for q in data["questions"]] == [1, 2, 3, 4]
        for q in data["questions"]:
            assert q["answer_key"] in q["options"]
            assert "source" not in q

    def test_generate_from_file(self, client, biology_text):
        files = {"file": ("notes.txt", biology_text.encode("utf-8"), "text/plain")}
        response = client.post("/quiz/generate", data={"count": "3", "quiz_type": "truefalse"}, files=files)
        assert response.status_code == 200
        assert all(q["options"] == ["True", "False"] for q in response.json()["questions"])

    def test_multi_select_keys_serialized_as_lists(self, client, biology_text):
        response = client.post("/quiz/generate", data={"text": biology_text, "count": "3",
                                                       "quiz_type": "multiselect"})
        assert response.status_code == 200
        multi = [q for q in response.json()["questions"] if q["kind"] == "multiple-choice-multi"]
        assert multi
        for q in multi:
            assert isinstance(q["answer_key"], list)
            assert set(q["answer_key"]) < set(q["options"])

    def test_seeded_results_cached(self, client, biology_text):
        data = {"text": biology_text, "count": "3", "quiz_type": "mixed", "seed": "90210"}
        first = client.post("/quiz/generate", data=data).json()
        second = client.post("/quiz/generate", data=data).json()
        assert second["cached"] is True
        assert second["questions"] == first["questions"]

    def test_pdf_rejected(self, client):
        files = {"file": ("notes.pdf", b"%PDF-1.4 binary", "application/pdf")}
        response = client.post("/quiz/generate", data={"count": "3"}, files=files)
        assert response.status_code == 400

    def test_missing_text(self, client):
        response = client.post("/quiz/generate", data={"count": "3"})
        assert response.status_code == 400

    def test_invalid_count(self, client, biology_text):
        response = client.post("/quiz/generate", data={"text": biology_text, "count": "0"})
        assert response.status_code == 422

    def test_generation_failure(self, client, biology_text):
        with patch("quizsmith.routers.quiz.generate_questions", side_effect=RuntimeError("boom")):
            response = client.post("/quiz/generate", data={"text": biology_text, "count": "2"})
        assert response.status_code == 500


class TestScoreEndpoint:
    def test_score(self, client, sample_questions):
        payload = {
            "questions": _questions_payload(sample_questions),
            "answers": {"1": "Carbon dioxide", "2": "True", "3": ["carotene", "chlorophyll"]},
        }
        response = client.post("/quiz/score", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 100
        assert data["correct_count"] == 3
        assert data["feedback"].startswith("Excellent!")

    def test_wrong_shape_scores_zero(self, client, sample_questions):
        payload = {"questions": _questions_payload(sample_questions)[:1],
                   "answers": {"1": ["Carbon dioxide"]}}
        response = client.post("/quiz/score", json=payload)
        assert response.json()["score"] == 0


class TestSessionEndpoints:
    def _create(self, client, sample_questions, **extra):
        payload = {"questions": _questions_payload(sample_questions), "name": "Ada Lovelace", **extra}
        response = client.post("/quiz/sessions", json=payload)
        assert response.status_code == 201
        return response.json()

    def test_full_flow(self, client, sample_questions):
        session = self._create(client, sample_questions)
        sid = session["session_id"]
        assert session["remaining_seconds"] == 300

        assert client.put(f"/quiz/sessions/{sid}/answers/1", json={"answer": "Carbon dioxide"}).status_code == 200
        client.put(f"/quiz/sessions/{sid}/answers/3", json={"answer": ["chlorophyll", "carotene"]})
        state = client.get(f"/quiz/sessions/{sid}").json()
        assert state["answers"]["3"] == ["carotene", "chlorophyll"]

        result = client.post(f"/quiz/sessions/{sid}/submit").json()
        assert result["score"] == 67
        assert result["correct_count"] == 2

        report = client.get(f"/quiz/sessions/{sid}/report")
        assert report.status_code == 200
        assert report.text.startswith("Quiz Results for Ada Lovelace")
        assert "quiz-results-ada-lovelace.txt" in report.headers["content-disposition"]

        assert client.delete(f"/quiz/sessions/{sid}").status_code == 204
        assert client.get(f"/quiz/sessions/{sid}").status_code == 404

    def test_clear_answer(self, client, sample_questions):
        sid = self._create(client, sample_questions)["session_id"]
        client.put(f"/quiz/sessions/{sid}/answers/1", json={"answer": "Oxygen"})
        state = client.put(f"/quiz/sessions/{sid}/answers/1", json={"answer": None}).json()
        assert state["answers"] == {}

    def test_unknown_question(self, client, sample_questions):
        sid = self._create(client, sample_questions)["session_id"]
        response = client.put(f"/quiz/sessions/{sid}/answers/42", json={"answer": "x"})
        assert response.status_code == 404

    def test_answer_after_submit_conflicts(self, client, sample_questions):
        sid = self._create(client, sample_questions)["session_id"]
        client.post(f"/quiz/sessions/{sid}/submit")
        response = client.put(f"/quiz/sessions/{sid}/answers/1", json={"answer": "Oxygen"})
        assert response.status_code == 409

    def test_report_before_submit_conflicts(self, client, sample_questions):
        sid = self._create(client, sample_questions)["session_id"]
        assert client.get(f"/quiz/sessions/{sid}/report").status_code == 409

    def test_custom_time_limit(self, client, sample_questions):
        session = self._create(client, sample_questions, time_limit_seconds=30)
        assert session["remaining_seconds"] == 30

    def test_missing_session(self, client):
        assert client.get("/quiz/sessions/does-not-exist").status_code == 404
        assert client.delete("/quiz/sessions/does-not-exist").status_code == 404
