from fastapi.testclient import TestClient


def follow(client, auth, follower, target_id, **body):
    return client.post(
        "/follow", json={"targetId": target_id, **body}, headers=auth(follower)
    )


def test_follow_is_immediate(client: TestClient, auth, alice, bob):
    r = follow(client, auth, alice, bob.id)
    assert r.status_code == 200
    edge = r.json()
    assert edge["status"] == "accepted"
    assert edge["kind"] == "follow"
    assert edge["level"] == "public"
    assert edge["targetType"] == "user"

    r = client.get(f"/follow/status/user/{bob.id}", headers=auth(alice))
    assert r.json() == {"status": "accepted"}
    r = client.get(f"/follow/status/user/{alice.id}", headers=auth(bob))
    assert r.json() == {"status": "none"}

    r = client.get(f"/follow/count/user/{bob.id}")
    assert r.json() == {"followers": 1, "following": 0}

    r = follow(client, auth, alice, bob.id)
    assert r.status_code == 409
    assert r.json()["detail"] == "Already following."


def test_follow_errors(client: TestClient, auth, alice):
    assert follow(client, auth, alice, alice.id).status_code == 400
    assert follow(client, auth, alice, "ghost").status_code == 404
    r = follow(client, auth, alice, "g1", targetType="planet")
    assert r.status_code == 422
    r = client.post("/follow", json={"targetId": "g1", "targetType": "group"})
    assert r.status_code == 401


def test_follow_group_and_unfollow(client: TestClient, auth, alice, bob):
    for follower in (alice, bob):
        r = follow(client, auth, follower, "g1", targetType="group", level="member")
        assert r.status_code == 200
        assert r.json()["level"] == "member"

    r = client.get("/follow/count/group/g1")
    assert r.json() == {"followers": 2}

    r = client.get("/follow/followers/group/g1", headers=auth(alice))
    assert {row["profile"]["id"] for row in r.json()} == {alice.id, bob.id}

    r = client.get("/follow/following", headers=auth(alice))
    assert [(row["objectId"], row["profile"]) for row in r.json()] == [("g1", None)]

    r = client.delete("/follow/group/g1", headers=auth(alice))
    assert r.status_code == 200
    assert r.json() == {"message": "Unfollowed"}
    assert client.get("/follow/count/group/g1").json() == {"followers": 1}

    r = client.delete("/follow/group/g1", headers=auth(alice))
    assert r.status_code == 404


def test_approval_flow(client: TestClient, auth, alice, bob, carol):
    edge = follow(client, auth, alice, bob.id, requireApproval=True).json()
    assert edge["status"] == "pending"

    r = client.get("/follow/requests", headers=auth(bob))
    assert [row["profile"]["id"] for row in r.json()] == [alice.id]

    r = client.post(f"/follow/accept/{edge['id']}", headers=auth(carol))
    assert r.status_code == 403

    r = client.post(f"/follow/accept/{edge['id']}", headers=auth(bob))
    assert r.status_code == 200
    assert r.json()["status"] == "accepted"
    assert client.get("/follow/requests", headers=auth(bob)).json() == []


def test_rejected_follow_is_blocked(client: TestClient, auth, alice, bob):
    edge = follow(client, auth, alice, bob.id, requireApproval=True).json()

    r = client.post(f"/follow/reject/{edge['id']}", headers=auth(bob))
    assert r.status_code == 200
    assert r.json()["status"] == "blocked"

    r = client.get(f"/follow/status/user/{bob.id}", headers=auth(alice))
    assert r.json() == {"status": "blocked"}

    r = follow(client, auth, alice, bob.id)
    assert r.status_code == 409
    assert r.json()["detail"] == "This relationship is blocked."


def test_friendship_edges_are_not_follow_requests(
    client: TestClient, auth, alice, bob
):
    r = client.post(
        "/friendship/request", json={"targetUserId": bob.id}, headers=auth(alice)
    )
    edge_id = r.json()["id"]

    r = client.post(f"/follow/reject/{edge_id}", headers=auth(bob))
    assert r.status_code == 404
    r = client.post(f"/follow/accept/{edge_id}", headers=auth(bob))
    assert r.status_code == 404


def test_change_level(client: TestClient, auth, alice, bob):
    edge_id = follow(client, auth, alice, "p1", targetType="page").json()["id"]

    r = client.patch(
        f"/follow/{edge_id}/level", json={"level": "moderator"}, headers=auth(bob)
    )
    assert r.status_code == 403

    r = client.patch(
        f"/follow/{edge_id}/level", json={"level": "moderator"}, headers=auth(alice)
    )
    assert r.status_code == 200
    assert r.json()["level"] == "moderator"

    r = client.patch(
        f"/follow/{edge_id}/level", json={"level": "emperor"}, headers=auth(alice)
    )
    assert r.status_code == 422


def test_remove_follower(client: TestClient, auth, alice, bob, carol):
    follow(client, auth, alice, bob.id)

    r = client.delete(f"/follow/followers/{alice.id}", headers=auth(carol))
    assert r.status_code == 404

    r = client.delete(f"/follow/followers/{alice.id}", headers=auth(bob))
    assert r.status_code == 200
    assert r.json() == {"message": "Follower removed"}
    assert client.get(f"/follow/count/user/{bob.id}").json()["followers"] == 0


def test_search_and_suggestions(client: TestClient, auth, alice, bob, carol):
    follow(client, auth, alice, bob.id)

    r = client.get("/follow/search", params={"q": "ar"}, headers=auth(alice))
    found = {row["id"]: row for row in r.json()}
    assert found[bob.id]["relationshipStatus"] == "accepted"
    assert found[bob.id]["isRequester"] is True
    assert found[carol.id]["relationshipStatus"] is None

    r = client.get("/follow/suggestions", headers=auth(alice))
    assert r.status_code == 200
    assert [row["id"] for row in r.json()] == [carol.id]

    r = client.get("/follow/suggestions", params={"limit": 50}, headers=auth(alice))
    assert r.status_code == 422
