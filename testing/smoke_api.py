"""
Quick API smoke test against a running EventHub server.
Tests: signup, login, me, create event, join, list, update, delete.

Usage: python testing/smoke_api.py [base_url]
"""

import sys
import uuid

import requests

BASE = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:5000"

email = f"smoke-{uuid.uuid4().hex[:8]}@example.com"

# 1) Signup a user
r = requests.post(f"{BASE}/signup", json={
    "username": "Smoke Test",
    "email": email,
    "photoUrl": None,
    "password": "pass12345"
})
print("SIGNUP:", r.status_code, r.json())

# 2) Login with same credentials
r = requests.post(f"{BASE}/login", json={"email": email, "password": "pass12345"})
print("LOGIN:", r.status_code, r.json())
token = r.json().get("token")
headers = {"Authorization": f"Bearer {token}"}

r = requests.get(f"{BASE}/api/user/me", headers=headers)
print("ME:", r.status_code, r.json())

# 3) Create a new event
r = requests.post(f"{BASE}/api/events", json={
    "title": "First Test Event",
    "name": "Smoke Test",
    "dateTime": "2026-10-20T10:00",
    "location": "Room 101",
    "description": "Simple test",
    "email": email
}, headers=headers)
print("CREATE EVENT:", r.status_code, r.json())
event_id = r.json().get("eventId")

# 4) Join, list, update, delete
r = requests.patch(f"{BASE}/api/events/join/{event_id}")
print("JOIN:", r.status_code, r.json())

r = requests.get(f"{BASE}/api/events/{email}")
print("MY EVENTS:", r.status_code, r.json())

r = requests.put(f"{BASE}/api/events/{event_id}", json={"title": "Renamed"}, headers=headers)
print("UPDATE:", r.status_code, r.json())

r = requests.delete(f"{BASE}/api/events/{event_id}", headers=headers)
print("DELETE:", r.status_code, r.json())

r = requests.delete(f"{BASE}/api/events/{event_id}", headers=headers)
print("DELETE AGAIN (expect 404):", r.status_code, r.json())
