"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags slugs        # Concurrent creates with one title
  locust -f locustfile.py --tags throughput   # Test listing cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
from locust import HttpUser, task, between, tag

# Shared state
EVENT_SLUGS = []
EVENT_IDS = []

SHARED_TITLE = "Load Test Summit"


def random_email():
    return f"load_{random.randint(10000, 99999)}@test.com"


def event_payload(title):
    return {
        "title": title,
        "description": "Synthetic event created by the load test",
        "overview": "Load test overview",
        "image": "https://example.com/banner.png",
        "venue": "Test Hall",
        "location": "Nowhere",
        "date": "2026-06-01",
        "time": "09:00 AM",
        "mode": random.choice(["online", "offline", "hybrid"]),
        "audience": "Testers",
        "agenda": ["Opening", "Talks"],
        "organizer": "Locust",
        "tags": ["load", "test"],
    }


def remember(event):
    if event["slug"] not in EVENT_SLUGS:
        EVENT_SLUGS.append(event["slug"])
        EVENT_IDS.append(event["id"])


class SlugRaceUser(HttpUser):
    """
    TEST 1: Many users create events with the same title at once.

    Run: locust -f locustfile.py --tags slugs -u 50 -r 50 --run-time 20s

    Expect 201s with suffixed slugs (load-test-summit-1, -2, ...) and some
    409s where two writers raced past the slug probe. After the run:
      SELECT slug, COUNT(*) FROM events GROUP BY slug HAVING COUNT(*) > 1;
    must return no rows.
    """
    wait_time = between(0, 0.1)

    @tag("slugs")
    @task
    def create_same_title(self):
        with self.client.post("/api/events", json=event_payload(SHARED_TITLE),
            name="/api/events [same title]",
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                remember(resp.json()["data"])
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Lost the race at the unique index
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice (REDIS_ENABLED=true, then false) and compare latency:
      locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events_cached(self):
        resp = self.client.get("/api/events", name="/api/events [cached]")
        if resp.status_code == 200:
            for event in resp.json().get("data", []):
                remember(event)

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_SLUGS:
            self.client.get(f"/api/events/{random.choice(EVENT_SLUGS)}", name="/api/events/{slug}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def booking_for_missing_event(self):
        with self.client.post("/api/bookings",
            json={"event_id": 999999, "email": random_email()},
            catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def invalid_email(self):
        with self.client.post("/api/bookings",
            json={"event_id": 1, "email": "not-an-email"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def empty_agenda(self):
        payload = event_payload(f"Edge {random.randint(1, 10000)}")
        payload["agenda"] = []
        with self.client.post("/api/events", json=payload, catch_response=True) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/users",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing
      - Some bookings
      - Rare creates
    """
    wait_time = between(1, 3)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/events")
        if resp.status_code == 200:
            for event in resp.json().get("data", []):
                remember(event)

    @task(20)
    def view_event(self):
        if EVENT_SLUGS:
            self.client.get(f"/api/events/{random.choice(EVENT_SLUGS)}", name="/api/events/{slug}")

    @task(10)
    def book_event(self):
        if EVENT_IDS:
            with self.client.post("/api/bookings",
                json={"event_id": random.choice(EVENT_IDS), "email": random_email()},
                catch_response=True
            ) as resp:
                if resp.status_code in (201, 409):
                    resp.success()

    @task(3)
    def create_event(self):
        resp = self.client.post("/api/events", json=event_payload(f"Event {random.randint(1, 10000)}"))
        if resp.status_code == 201:
            remember(resp.json()["data"])
