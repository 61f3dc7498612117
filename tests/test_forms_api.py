import csv
import io

from .conftest import OTHER_USER, OWNER

FORM_PAYLOAD = {
    "title": "Feedback",
    "shortId": "feedback",
    "published": True,
    "questions": [
        {"id": "mc", "type": "multipleChoice", "title": "Pick one", "required": True, "options": ["A", "B"]},
        {"id": "notes", "type": "shortText", "title": "Notes", "variableName": "comments"},
    ],
}


def create_form(client, **overrides):
    payload = {**FORM_PAYLOAD, **overrides}
    response = client.post("/api/forms", json=payload, headers=OWNER)
    assert response.status_code == 201, response.text
    return response.json()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Formbook backend!"}


def test_create_and_read_form(client):
    form = create_form(client)
    assert form["shortId"] == "feedback"
    assert form["userId"] == 1
    assert form["views"] == 0
    assert [q["type"] for q in form["questions"]] == ["multipleChoice", "shortText"]
    assert form["theme"]["backgroundColor"] == "#ffffff"

    response = client.get(f"/api/forms/{form['id']}", headers=OWNER)
    assert response.status_code == 200
    assert response.json()["title"] == "Feedback"

    listed = client.get("/api/forms", headers=OWNER).json()
    assert [f["id"] for f in listed] == [form["id"]]
    assert client.get("/api/forms", headers=OTHER_USER).json() == []


def test_owner_endpoints_check_identity(client):
    form = create_form(client)
    assert client.get(f"/api/forms/{form['id']}").status_code == 401
    assert client.get(f"/api/forms/{form['id']}", headers={"X-User-Id": "abc"}).status_code == 401
    response = client.get(f"/api/forms/{form['id']}", headers=OTHER_USER)
    assert response.status_code == 403
    assert response.json()["detail"] == "You do not have permission to access this form"
    assert client.get("/api/forms/999", headers=OWNER).status_code == 404


def test_short_ids_are_unique(client):
    create_form(client)
    response = client.post("/api/forms", json=FORM_PAYLOAD, headers=OTHER_USER)
    assert response.status_code == 409


def test_short_id_is_generated_when_missing(client):
    payload = {k: v for k, v in FORM_PAYLOAD.items() if k != "shortId"}
    response = client.post("/api/forms", json=payload, headers=OWNER)
    assert response.status_code == 201
    assert response.json()["shortId"].startswith("form-")


def test_invalid_questions_are_rejected(client):
    bad_choice = {"title": "Bad", "questions": [{"id": "q", "type": "multipleChoice", "title": "?"}]}
    assert client.post("/api/forms", json=bad_choice, headers=OWNER).status_code == 422
    bad_rating = {"title": "Bad", "questions": [{"id": "q", "type": "rating", "title": "?", "maxRating": 11}]}
    assert client.post("/api/forms", json=bad_rating, headers=OWNER).status_code == 422
    unknown = {"title": "Bad", "questions": [{"id": "q", "type": "signature", "title": "?"}]}
    assert client.post("/api/forms", json=unknown, headers=OWNER).status_code == 422


def test_rating_questions_get_the_default_scale(client):
    form = create_form(
        client,
        shortId="rated",
        questions=[{"id": "stars", "type": "rating", "title": "Rate us"}],
    )
    assert form["questions"][0]["maxRating"] == 5


def test_new_form_template(client):
    template = client.get("/api/forms/new", headers=OWNER).json()
    assert template["id"] == 0
    assert template["questions"][0]["id"] == "q1"
    assert template["questions"][0]["type"] == "shortText"


def test_update_and_delete_form(client):
    form = create_form(client)
    response = client.patch(f"/api/forms/{form['id']}", json={"title": "Renamed"}, headers=OWNER)
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"
    assert response.json()["questions"] == form["questions"]

    response = client.patch(f"/api/forms/{form['id']}", json={"title": "Mine"}, headers=OTHER_USER)
    assert response.status_code == 403
    assert response.json()["detail"] == "You do not have permission to modify this form"

    assert client.delete(f"/api/forms/{form['id']}", headers=OWNER).status_code == 204
    assert client.get(f"/api/forms/{form['id']}", headers=OWNER).status_code == 404


def test_public_fetch_counts_views(client):
    create_form(client)
    assert client.get("/api/f/feedback").json()["views"] == 1
    assert client.get("/api/f/feedback").json()["views"] == 2
    assert client.get("/api/f/missing").status_code == 404


def test_unpublished_forms_are_hidden(client):
    form = create_form(client, published=False)
    response = client.get("/api/f/feedback")
    assert response.status_code == 403
    assert response.json()["detail"] == "Form is not published"
    assert client.get("/api/f/feedback/render").status_code == 403
    response = client.post(f"/api/forms/{form['id']}/responses", json={"answers": {"mc": "A"}})
    assert response.status_code == 403


def test_render_published_form(client):
    create_form(client)
    rendered = client.get("/api/f/feedback/render").json()
    assert rendered["preview"] is False
    controls = rendered["controls"]
    assert [c["kind"] for c in controls] == ["choice", "text"]
    assert controls[0]["options"] == ["A", "B"]
    assert controls[0]["readOnly"] is False
    assert controls[1]["inputType"] == "text"


def test_preview_is_read_only_and_ignores_publication(client):
    form = create_form(client, published=False)
    rendered = client.get(f"/api/forms/{form['id']}/preview", headers=OWNER).json()
    assert rendered["preview"] is True
    assert all(c["readOnly"] for c in rendered["controls"])
    assert client.get(f"/api/forms/{form['id']}/preview", headers=OTHER_USER).status_code == 403


def test_submit_response_end_to_end(client):
    form = create_form(client)
    url = f"/api/forms/{form['id']}/responses"

    response = client.post(url, json={"answers": {}})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["message"] == "Invalid response data"
    assert detail["questionIds"] == ["mc"]
    assert detail["reasons"] == {"mc": "required"}

    response = client.post(url, json={"answers": {"mc": "B"}})
    assert response.status_code == 201
    assert response.json()["answers"] == {"mc": "B"}
    assert response.json()["formId"] == form["id"]

    stored = client.get(url, headers=OWNER).json()
    assert [r["answers"] for r in stored] == [{"mc": "B"}]
    assert client.get(url, headers=OTHER_USER).status_code == 403


def test_submit_rejects_bad_answers(client):
    form = create_form(client)
    url = f"/api/forms/{form['id']}/responses"
    response = client.post(url, json={"answers": {"mc": "C", "ghost": "boo"}})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert set(detail["questionIds"]) == {"mc", "ghost"}
    assert detail["reasons"]["mc"] == "'C' is not one of the options"
    assert client.get(url, headers=OWNER).json() == []


def test_duplicate_submissions_are_both_stored(client):
    form = create_form(client)
    url = f"/api/forms/{form['id']}/responses"
    for _ in range(2):
        assert client.post(url, json={"answers": {"mc": "A"}}).status_code == 201
    assert len(client.get(url, headers=OWNER).json()) == 2


def test_export_responses_as_csv(client):
    form = create_form(client)
    client.post(f"/api/forms/{form['id']}/responses", json={"answers": {"mc": ["A", "B"], "notes": "hi"}})

    response = client.get(f"/api/forms/{form['id']}/responses/export", headers=OWNER)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=" in response.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["response_id", "submitted_at", "mc", "comments"]
    assert rows[1][2:] == ["A; B", "hi"]


def test_export_of_a_form_with_a_non_latin_title(client):
    form = create_form(client, title="日本語フォーム")
    client.post(f"/api/forms/{form['id']}/responses", json={"answers": {"mc": "A"}})

    response = client.get(f"/api/forms/{form['id']}/responses/export", headers=OWNER)
    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert disposition.isascii()
    assert disposition.endswith("_responses.csv")
    assert "A" in response.text
