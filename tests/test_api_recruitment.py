import pytest

from hrms.models.notification import Notification
from hrms.models.setting import Setting


@pytest.fixture
def recruiter(make_user, login):
    make_user("hr@acme.com", role="ROLE_RH")
    login("hr@acme.com")


def _job(client, **extra):
    payload = {"title": "Backend", "required_skills": ["Python", "SQL"], "min_experience": 4}
    payload.update(extra)
    resp = client.post('/recruitment/jobs', json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["id"]


def _apply(client, job_id, **data):
    resp = client.post(f'/recruitment/jobs/{job_id}/applications', json=data)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["id"]


def _interview(client, app_id, rating):
    resp = client.post(f'/recruitment/applications/{app_id}/interviews',
                       json={"status": "done", "rating": rating, "scheduled_at": "2024-03-05T10:00"})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def _pool(client):
    job_id = _job(client)
    ada = _apply(client, job_id, first_name="Ada", last_name="L", email="ada@mail.com",
                 skills=["python", "sql"], years_experience=4, rating=4, submitted_at="2024-03-01T09:00:00")
    bob = _apply(client, job_id, first_name="Bob", last_name="M", email="bob@mail.com",
                 skills=["Python"], years_experience=2, rating=3, submitted_at="2024-03-02T09:00:00")
    cy = _apply(client, job_id, first_name="Cy", last_name="N", email="cy@mail.com",
                submitted_at="2024-03-03T09:00:00")
    assert _interview(client, ada, 4)["stage"] == "interviewing"
    _interview(client, bob, 3)
    return job_id, ada, bob, cy


def test_recruitment_requires_hr(client, make_user, login):
    make_user("emp@acme.com")
    login("emp@acme.com")
    assert client.get('/recruitment/jobs').status_code == 403
    assert client.post('/recruitment/jobs', json={"title": "x"}).status_code == 403


def test_job_validation(client, recruiter):
    assert client.post('/recruitment/jobs', json={"department": "IT"}).status_code == 422
    resp = client.post('/recruitment/jobs', json={"title": "x", "scoring_criteria": {"skills": 1}})
    assert resp.status_code == 422
    job_id = _job(client)
    resp = client.patch(f'/recruitment/jobs/{job_id}', json={"status": "published"})
    assert resp.get_json()["status"] == "published"
    assert resp.get_json()["required_skills"] == ["Python", "SQL"]


def test_application_rules(client, recruiter):
    job_id = _job(client)
    _apply(client, job_id, first_name="Ada", last_name="L", email="ada@mail.com")
    resp = client.post(f'/recruitment/jobs/{job_id}/applications',
                       json={"first_name": "Ada", "last_name": "L", "email": "ada@mail.com"})
    assert resp.status_code == 409
    resp = client.post(f'/recruitment/jobs/{job_id}/applications',
                       json={"first_name": "Eve", "last_name": "K", "rating": 7})
    assert resp.status_code == 422
    assert client.post('/recruitment/jobs/999/applications', json={"first_name": "a", "last_name": "b"}).status_code == 404


def test_recalculate_and_rank(client, recruiter):
    job_id, ada, bob, cy = _pool(client)

    resp = client.post(f'/recruitment/jobs/{job_id}/scores/recalculate')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "finished"
    ranking = body["ranking"]
    assert [r["application_id"] for r in ranking] == [ada, bob, cy]
    assert [r["rank"] for r in ranking] == [1, 2, 3]
    # ada 100/100/80/80, bob 50/50/60/60, cy 0/0/0/0
    assert [r["score"] for r in ranking] == [92, 54, 0]
    assert ranking[0]["breakdown"] == {"skills": 100, "experience": 100, "interview": 80, "rating": 80}

    detail = client.get(f'/recruitment/jobs/{job_id}').get_json()
    stored = {a["id"]: (a["score"], a["rank"]) for a in detail["applications"]}
    assert stored == {ada: (92, 1), bob: (54, 2), cy: (0, 3)}
    assert detail["ranked_at"] is not None

    again = client.post(f'/recruitment/jobs/{job_id}/scores/recalculate').get_json()["ranking"]
    assert [(r["application_id"], r["score"]) for r in again] == [(r["application_id"], r["score"]) for r in ranking]


def test_ranking_uses_job_weights(client, recruiter):
    job_id, ada, bob, cy = _pool(client)
    resp = client.patch(f'/recruitment/jobs/{job_id}',
                        json={"scoring_criteria": {"skills": 0, "experience": 0, "interview": 0, "rating": 100}})
    assert resp.status_code == 200
    ranking = client.get(f'/recruitment/jobs/{job_id}/ranking').get_json()["ranking"]
    assert [r["score"] for r in ranking] == [80, 60, 0]


def test_ranking_csv(client, recruiter):
    job_id, ada, bob, cy = _pool(client)
    resp = client.get(f'/recruitment/jobs/{job_id}/ranking.csv')
    assert resp.status_code == 200
    assert resp.mimetype == 'text/csv'
    lines = resp.data.decode('utf-8').splitlines()
    assert lines[0] == "rank,name,email,score,skills,experience,interview,rating,stage"
    assert lines[1].startswith("1,Ada L,ada@mail.com,92,")
    assert len(lines) == 4


def test_reject_sends_mail(client, recruiter, monkeypatch):
    sent = []

    def fake_send(to_email, subject, html):
        sent.append((to_email, subject, html))
        return 202, "msg-1"

    monkeypatch.setattr('hrms.jobs.notify.send_decision', fake_send)
    job_id, ada, bob, cy = _pool(client)

    resp = client.post(f'/recruitment/applications/{cy}/reject', json={"send_email": True})
    assert resp.status_code == 200
    assert resp.get_json()["stage"] == "rejected"
    assert sent[0][0] == "cy@mail.com"
    assert "Backend" in sent[0][1]
    n = Notification.query.one()
    assert n.application_id == cy
    assert n.status_code == 202
    assert n.provider_message_id == "msg-1"

    resp = client.post(f'/recruitment/applications/{bob}/reject', json={"send_email": False})
    assert resp.status_code == 200
    assert len(sent) == 1


def test_stage_change_and_offer_mail(client, recruiter, monkeypatch):
    sent = []
    monkeypatch.setattr('hrms.jobs.notify.send_decision',
                        lambda to, subject, html: sent.append(to) or (202, None))
    job_id, ada, bob, cy = _pool(client)
    resp = client.patch(f'/recruitment/applications/{ada}/stage', json={"stage": "offer", "notify": True})
    assert resp.get_json()["stage"] == "offer"
    assert sent == ["ada@mail.com"]
    assert client.patch(f'/recruitment/applications/{ada}/stage', json={"stage": "lost"}).status_code == 422


def test_org_scoring_weights(client, make_user, login, org):
    make_user("admin@acme.com", role="ROLE_ADMIN")
    login("admin@acme.com")
    resp = client.post('/org/scoring', json={"skills": 40, "experience": 30, "interview": 20, "rating": 10})
    assert resp.status_code == 200
    weights = resp.get_json()["weights"]
    assert weights["skills"] == pytest.approx(0.4)
    assert weights["rating"] == pytest.approx(0.1)
    assert Setting.query.filter_by(org_id=org.id).count() == 4

    resp = client.post('/org/scoring', json={"skills": 1, "experience": 1, "interview": 1, "rating": 1})
    assert resp.get_json()["weights"]["skills"] == pytest.approx(0.25)
    assert Setting.query.filter_by(org_id=org.id).count() == 4
    assert Setting.values_for(org.id, ["SCORING_WEIGHT_RATING", "UNSET"]) == {"SCORING_WEIGHT_RATING": "0.25"}

    resp = client.post('/org/scoring', json={"skills": 0, "experience": 0, "interview": 0, "rating": 0})
    assert resp.status_code == 422
    resp = client.post('/org/scoring', json={"skills": 1})
    assert resp.status_code == 422


def test_org_scoring_requires_admin(client, recruiter):
    assert client.get('/org/scoring').status_code == 403
