"""Post API tests — ownership on delete, likes, comments.

Learn: The first test is the end-to-end ownership scenario: A creates a
post, B may not delete it, A may, and afterwards it's gone.
"""

import uuid

import pytest


async def _post(client, headers, text="Hello world"):
    r = await client.post("/api/posts", json={"text": text}, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


# ═══════════════════════════════════════════════════════════
# Posts
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_only_owner_can_delete_post(client, register):
    alice = await register(name="A", email="a@x.com", password="secret1")
    bob = await register(name="B", email="b@x.com", password="secret2")
    post = await _post(client, alice)

    r = await client.delete(f"/api/posts/{post['id']}", headers=bob)
    assert r.status_code == 403
    assert r.json()["detail"] == {"kind": "forbidden", "msg": "User not authorized"}

    r = await client.delete(f"/api/posts/{post['id']}", headers=alice)
    assert r.status_code == 200
    assert r.json() == {"msg": "Post removed"}

    r = await client.get(f"/api/posts/{post['id']}", headers=alice)
    assert r.status_code == 400
    assert r.json()["detail"] == {"kind": "not_found", "msg": "Post not found"}


@pytest.mark.asyncio
async def test_create_post_copies_author(client, register):
    headers = await register(name="Grace")
    me = (await client.get("/api/auth", headers=headers)).json()

    post = await _post(client, headers, "first!")
    assert post["text"] == "first!"
    assert post["user_id"] == me["id"]
    assert post["name"] == "Grace"
    assert post["avatar"] == me["avatar"]
    assert post["likes"] == []
    assert post["comments"] == []


@pytest.mark.asyncio
async def test_list_posts_newest_first(client, register):
    headers = await register()
    await _post(client, headers, "one")
    await _post(client, headers, "two")

    r = await client.get("/api/posts", headers=headers)
    assert r.status_code == 200
    assert [p["text"] for p in r.json()] == ["two", "one"]


@pytest.mark.asyncio
async def test_posts_require_auth(client):
    r = await client.get("/api/posts")
    assert r.status_code == 401
    r = await client.post("/api/posts", json={"text": "x"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_post_requires_text(client, register):
    headers = await register()
    r = await client.post("/api/posts", json={"text": ""}, headers=headers)
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "text"


@pytest.mark.asyncio
@pytest.mark.parametrize("post_id", [str(uuid.uuid4()), "12345"])
async def test_unknown_post(client, register, post_id):
    headers = await register()
    r = await client.get(f"/api/posts/{post_id}", headers=headers)
    assert r.status_code == 400
    r = await client.delete(f"/api/posts/{post_id}", headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"]["kind"] == "not_found"


# ═══════════════════════════════════════════════════════════
# Likes
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_like_and_unlike(client, register):
    alice = await register()
    bob = await register()
    post = await _post(client, alice)
    bob_id = (await client.get("/api/auth", headers=bob)).json()["id"]

    r = await client.put(f"/api/posts/{post['id']}/like", headers=bob)
    assert r.status_code == 200
    assert [like["user_id"] for like in r.json()] == [bob_id]

    r = await client.put(f"/api/posts/{post['id']}/like", headers=bob)
    assert r.status_code == 400
    assert r.json()["detail"]["msg"] == "Post already liked"

    r = await client.put(f"/api/posts/{post['id']}/like", headers=alice)
    assert len(r.json()) == 2

    r = await client.put(f"/api/posts/{post['id']}/unlike", headers=bob)
    assert r.status_code == 200
    assert bob_id not in [like["user_id"] for like in r.json()]

    r = await client.put(f"/api/posts/{post['id']}/unlike", headers=bob)
    assert r.status_code == 400
    assert r.json()["detail"]["msg"] == "Post has not yet been liked"


@pytest.mark.asyncio
async def test_deleted_user_cannot_like_or_unlike(client, register):
    alice = await register()
    ghost = await register()
    post = await _post(client, alice)
    r = await client.put(f"/api/posts/{post['id']}/like", headers=ghost)
    assert r.status_code == 200

    r = await client.delete("/api/profile", headers=ghost)
    assert r.status_code == 200

    for action in ("like", "unlike"):
        r = await client.put(f"/api/posts/{post['id']}/{action}", headers=ghost)
        assert r.status_code == 400
        assert r.json()["detail"] == {"kind": "not_found", "msg": "User not found"}

    r = await client.get(f"/api/posts/{post['id']}", headers=alice)
    assert r.json()["likes"] == []


@pytest.mark.asyncio
async def test_like_unknown_post(client, register):
    headers = await register()
    r = await client.put(f"/api/posts/{uuid.uuid4()}/like", headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"]["kind"] == "not_found"


# ═══════════════════════════════════════════════════════════
# Comments
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_add_comment(client, register):
    alice = await register(name="Alice")
    bob = await register(name="Bob")
    post = await _post(client, alice)

    r = await client.post(
        f"/api/posts/{post['id']}/comments", json={"text": "nice"}, headers=bob
    )
    assert r.status_code == 200
    comments = r.json()
    assert len(comments) == 1
    assert comments[0]["text"] == "nice"
    assert comments[0]["name"] == "Bob"


@pytest.mark.asyncio
async def test_only_comment_author_can_delete(client, register):
    alice = await register()
    bob = await register()
    post = await _post(client, alice)
    r = await client.post(
        f"/api/posts/{post['id']}/comments", json={"text": "mine"}, headers=alice
    )
    comment_id = r.json()[0]["id"]

    # Post owner or not, Bob didn't write it
    r = await client.delete(
        f"/api/posts/{post['id']}/comments/{comment_id}", headers=bob
    )
    assert r.status_code == 403

    r = await client.delete(
        f"/api/posts/{post['id']}/comments/{comment_id}", headers=alice
    )
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_delete_comment_removes_exactly_the_matched_one(client, register):
    alice = await register()
    post = await _post(client, alice)
    for text in ("first", "second", "third"):
        r = await client.post(
            f"/api/posts/{post['id']}/comments", json={"text": text}, headers=alice
        )
    by_text = {c["text"]: c["id"] for c in r.json()}

    r = await client.delete(
        f"/api/posts/{post['id']}/comments/{by_text['second']}", headers=alice
    )
    assert r.status_code == 200
    assert sorted(c["text"] for c in r.json()) == ["first", "third"]


@pytest.mark.asyncio
async def test_delete_unknown_comment(client, register):
    alice = await register()
    post = await _post(client, alice)
    r = await client.delete(
        f"/api/posts/{post['id']}/comments/{uuid.uuid4()}", headers=alice
    )
    assert r.status_code == 400
    assert r.json()["detail"] == {"kind": "not_found", "msg": "Comment not found"}


@pytest.mark.asyncio
async def test_comment_on_other_post_cannot_be_deleted_via_this_post(client, register):
    alice = await register()
    post_a = await _post(client, alice, "a")
    post_b = await _post(client, alice, "b")
    r = await client.post(
        f"/api/posts/{post_a['id']}/comments", json={"text": "on a"}, headers=alice
    )
    comment_id = r.json()[0]["id"]

    r = await client.delete(
        f"/api/posts/{post_b['id']}/comments/{comment_id}", headers=alice
    )
    assert r.status_code == 400
