from hrms.extensions import db
from hrms.models.menu_item import MenuItem


def test_health(client):
    assert client.get('/health').get_json() == {"status": "ok"}


def test_first_signup_creates_org_and_super_admin(client):
    resp = client.post('/auth/signup', json={
        "org_name": "Acme", "full_name": "Root", "email": "root@acme.com",
        "password": "password123", "confirm": "password123",
    })
    assert resp.status_code == 201
    assert resp.get_json()["role"] == "ROLE_SUPER_ADMIN"

    # later signups need an authenticated admin
    resp = client.post('/auth/signup', json={
        "email": "hr@acme.com", "password": "password123", "confirm": "password123", "role": "ROLE_RH",
    })
    assert resp.status_code == 401

    resp = client.post('/auth/login', json={"email": "root@acme.com", "password": "password123"})
    assert resp.get_json()["is_super_admin"] is True
    resp = client.post('/auth/signup', json={
        "email": "hr@acme.com", "password": "password123", "confirm": "password123", "role": "ROLE_RH",
    })
    assert resp.status_code == 201
    resp = client.post('/auth/signup', json={
        "email": "hr@acme.com", "password": "password123", "confirm": "password123",
    })
    assert resp.status_code == 409


def test_hr_cannot_create_users(client, make_user, login):
    make_user("hr@acme.com", role="ROLE_RH")
    login("hr@acme.com")
    resp = client.post('/auth/signup', json={
        "email": "new@acme.com", "password": "password123", "confirm": "password123",
    })
    assert resp.status_code == 403


def test_bad_login(client, make_user):
    make_user("emp@acme.com")
    resp = client.post('/auth/login', json={"email": "emp@acme.com", "password": "wrong-password"})
    assert resp.status_code == 401


def test_menus_me_requires_login(client):
    assert client.get('/menus/me').status_code == 401


def test_default_navigation_for_employee(client, make_user, login):
    make_user("emp@acme.com")
    login("emp@acme.com")
    data = client.get('/menus/me').get_json()
    assert [m["id"] for m in data["menus"]] == ["self"]
    assert list(data["sections"]) == ["main"]


def test_super_admin_sees_every_default_group(client, make_user, login):
    make_user("root@acme.com", role="ROLE_SUPER_ADMIN")
    login("root@acme.com")
    data = client.get('/menus/me').get_json()
    assert [m["id"] for m in data["menus"]] == ["self", "team", "talent", "finance", "system"]


def test_menu_crud_and_filtering(client, make_user, login):
    make_user("admin@acme.com", role="ROLE_ADMIN")
    make_user("emp@acme.com")
    make_user("pay@acme.com", permissions=["payroll.view"])

    login("admin@acme.com")
    header = client.post('/menus', json={"name": "Finance & Paie", "icon": "💰"})
    assert header.status_code == 201
    header_id = header.get_json()["id"]
    child = client.post('/menus', json={
        "name": "Gestion Salaires", "path": "/payroll/salaries",
        "parent_id": header_id, "required_permission": "payroll.view",
    })
    assert child.status_code == 201
    child_id = child.get_json()["id"]

    assert client.post('/menus', json={"name": "x", "path": "no-slash"}).status_code == 422
    assert client.post('/menus', json={"name": "x", "path": "/x", "parent_id": 999}).status_code == 422
    assert client.post('/menus', json={"name": "x", "path": "/x", "allowed_roles": ["ROLE_INTERN"]}).status_code == 422

    tree = client.get('/menus').get_json()["menus"]
    assert tree[0]["children"][0]["id"] == child_id

    login("emp@acme.com")
    assert client.get('/menus/me').get_json()["menus"] == []
    assert client.post('/menus', json={"name": "nope", "path": "/nope"}).status_code == 403

    login("pay@acme.com")
    menus = client.get('/menus/me').get_json()["menus"]
    assert [m["name"] for m in menus] == ["Finance & Paie"]
    assert [c["name"] for c in menus[0]["children"]] == ["Gestion Salaires"]

    login("admin@acme.com")
    resp = client.patch(f'/menus/{child_id}', json={"is_active": False})
    assert resp.status_code == 200
    login("pay@acme.com")
    assert client.get('/menus/me').get_json()["menus"] == []


def test_menu_parent_cycles_rejected(client, make_user, login):
    make_user("admin@acme.com", role="ROLE_ADMIN")
    login("admin@acme.com")
    top = client.post('/menus', json={"name": "Top"}).get_json()["id"]
    mid = client.post('/menus', json={"name": "Mid", "parent_id": top}).get_json()["id"]
    leaf = client.post('/menus', json={"name": "Leaf", "path": "/leaf", "parent_id": mid}).get_json()["id"]

    assert client.patch(f'/menus/{top}', json={"parent_id": top}).status_code == 409
    assert client.patch(f'/menus/{top}', json={"parent_id": leaf}).status_code == 409

    resp = client.post('/menus/reorder', json={"items": [{"id": top, "parent_id": leaf}]})
    assert resp.status_code == 409
    assert db.session.get(MenuItem, top).parent_id is None

    resp = client.post('/menus/reorder', json={"items": [{"id": leaf, "sort_order": 3, "parent_id": top}]})
    assert resp.status_code == 200
    assert db.session.get(MenuItem, leaf).parent_id == top

    assert client.delete(f'/menus/{top}').status_code == 200
    assert db.session.get(MenuItem, mid).parent_id is None
    assert db.session.get(MenuItem, leaf).parent_id is None


def test_inconsistent_stored_menu_returns_conflict(client, make_user, login, org):
    user = make_user("emp@acme.com")
    a = MenuItem(org_id=org.id, name="A", path="/a")
    db.session.add(a)
    db.session.flush()
    b = MenuItem(org_id=org.id, name="B", path="/b", parent_id=a.id)
    db.session.add(b)
    db.session.flush()
    a.parent_id = b.id
    db.session.commit()

    login(user.email)
    resp = client.get('/menus/me')
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "menu_inconsistent"
