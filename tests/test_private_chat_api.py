def test_match_send_history_leave(client):
    first = client.post("/api/private-chat/match", json={"sessionId": "pc-a", "nickname": "Moon"}).json()
    assert first["matched"] is False
    # polling again does not queue twice
    assert client.post("/api/private-chat/match", json={"sessionId": "pc-a"}).json()["matched"] is False

    second = client.post("/api/private-chat/match", json={"sessionId": "pc-b", "nickname": "Sun"}).json()
    assert second["matched"] is True
    assert second["partnerId"] == "pc-a"
    assert second["partnerNickname"] == "Moon"
    room = second["roomId"]

    r = client.post("/api/private-chat/messages", json={"sessionId": "pc-a", "roomId": room, "message": "  hi there  "})
    assert r.status_code == 200
    client.post("/api/private-chat/messages", json={"sessionId": "pc-b", "roomId": room, "message": "hello"})

    history = client.get(f"/api/private-chat/rooms/{room}/messages", params={"sessionId": "pc-b"}).json()
    assert [m["text"] for m in history["messages"]] == ["hi there", "hello"]
    assert history["messages"][0]["senderSessionId"] == "pc-a"

    assert client.post(f"/api/private-chat/rooms/{room}/leave", json={"sessionId": "pc-a"}).status_code == 200
    closed = client.post("/api/private-chat/messages", json={"sessionId": "pc-b", "roomId": room, "message": "still there?"})
    assert closed.status_code == 409

def test_private_chat_guards(client):
    client.post("/api/private-chat/match", json={"sessionId": "pc-c"})
    room = client.post("/api/private-chat/match", json={"sessionId": "pc-d"}).json()["roomId"]

    assert client.post("/api/private-chat/messages", json={"sessionId": "pc-c", "roomId": room, "message": "  "}).status_code == 400
    assert client.post("/api/private-chat/messages", json={"sessionId": "intruder", "roomId": room, "message": "x"}).status_code == 403
    assert client.post("/api/private-chat/messages", json={"sessionId": "pc-c", "roomId": "nope", "message": "x"}).status_code == 404
    assert client.get(f"/api/private-chat/rooms/{room}/messages", params={"sessionId": "intruder"}).status_code == 403
    assert client.post("/api/private-chat/match", json={"sessionId": ""}).status_code == 422
