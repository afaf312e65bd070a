"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags capacity     # Many users, one small event
  locust -f locustfile.py --tags browse       # Read-heavy listing
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import random
from locust import HttpUser, task, between, tag, events
from datetime import datetime, timezone, timedelta

# Shared state
EVENT_IDS = []
CAPACITY_EVENT_ID = None
PASSWORD = "test123"


def random_email():
    return f"load_{random.randint(100000, 999999)}@test.com"


def future_date(days):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("Event Buddy load test starting")
    print("=" * 60)


class SignedInUser(HttpUser):
    """Signs up and signs in on start; the cookie jar keeps the session."""

    abstract = True

    def on_start(self):
        self.email = random_email()
        self.client.get("/signup", params={"email": self.email, "pass": PASSWORD})
        resp = self.client.get("/signin", params={"email": self.email, "pass": PASSWORD})
        self.signed_in = resp.status_code == 200


class CapacityUser(SignedInUser):
    """
    TEST 1: Capacity - many users join an event with 10 places

    Run: locust -f locustfile.py --tags capacity -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM event_memberships WHERE event_id = X;
    Should be <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        super().on_start()
        if self.signed_in and not CAPACITY_EVENT_ID:
            resp = self.client.post("/addEvent", json={
                "title": "Capacity Test Event",
                "description": "10 places only",
                "date": future_date(30),
                "location": "Test",
                "maxAttendees": 10,
            })
            if resp.status_code == 201:
                globals()["CAPACITY_EVENT_ID"] = resp.json()["event"]["ourId"]
                print(f"\nCreated event {CAPACITY_EVENT_ID} with 10 places\n")

    @tag("capacity")
    @task
    def join_small_event(self):
        """Everyone tries to get one of the 10 places."""
        if not CAPACITY_EVENT_ID or not self.signed_in:
            return

        with self.client.post("/joinEvent", json={"ourId": CAPACITY_EVENT_ID}, catch_response=True) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Full, already joined or own event
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class BrowseUser(HttpUser):
    """
    TEST 2: Browsing - open list endpoints

    Run: locust -f locustfile.py --tags browse -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("browse")
    @task(10)
    def list_events(self):
        resp = self.client.get("/")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["ourId"] not in EVENT_IDS:
                    EVENT_IDS.append(event["ourId"])

    @tag("browse")
    @task(3)
    def sorted_events(self):
        ascending = random.choice(["true", "false"])
        self.client.get(f"/sortedEvents?ascending={ascending}", name="/sortedEvents")

    @tag("browse")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(SignedInUser):
    """
    TEST 3: Edge cases - bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    The server should answer every request with a proper error code.
    """
    wait_time = between(0.5, 1.5)

    def expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.post("/joinEvent", json={"ourId": "999999"}, catch_response=True) as resp:
            self.expect(resp, [404])

    @tag("edge")
    @task
    def leave_without_joining(self):
        if not EVENT_IDS:
            return
        with self.client.post("/leaveEvent", json={"ourId": random.choice(EVENT_IDS)},
                              catch_response=True) as resp:
            self.expect(resp, [200, 409])

    @tag("edge")
    @task
    def zero_capacity(self):
        with self.client.post("/addEvent", json={"title": "Nobody", "maxAttendees": 0},
                              catch_response=True) as resp:
            self.expect(resp, [400])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/addEvent", data="not json at all",
                              headers={"Content-Type": "application/json"},
                              catch_response=True) as resp:
            self.expect(resp, [400])

    @tag("edge")
    @task
    def wrong_password(self):
        with self.client.get("/signin", params={"email": self.email, "pass": "wrong"},
                             name="/signin [bad]", catch_response=True) as resp:
            self.expect(resp, [401])


class RealisticUser(SignedInUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some joining and leaving, rare creates.
    """
    wait_time = between(1, 3)

    def on_start(self):
        super().on_start()
        self.joined = set()

    @task(50)
    def browse_events(self):
        resp = self.client.get("/")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["ourId"] not in EVENT_IDS:
                    EVENT_IDS.append(event["ourId"])

    @task(20)
    def view_event(self):
        if EVENT_IDS and self.signed_in:
            self.client.get("/getSpecificEvent", params={"ourId": random.choice(EVENT_IDS)},
                            name="/getSpecificEvent")

    @task(10)
    def join_or_leave(self):
        if not EVENT_IDS or not self.signed_in:
            return
        our_id = random.choice(EVENT_IDS)
        if our_id in self.joined:
            resp = self.client.post("/leaveEvent", json={"ourId": our_id})
            if resp.status_code == 200:
                self.joined.discard(our_id)
        else:
            resp = self.client.post("/joinEvent", json={"ourId": our_id})
            if resp.status_code == 200:
                self.joined.add(our_id)

    @task(5)
    def my_events(self):
        if self.signed_in:
            self.client.get("/myJoinedEvents")
            self.client.get("/myCreatedEvents")

    @task(3)
    def create_event(self):
        if not self.signed_in:
            return
        resp = self.client.post("/addEvent", json={
            "title": f"Event {random.randint(1, 10000)}",
            "description": "Test event",
            "date": future_date(random.randint(1, 90)),
            "location": "Venue",
            "maxAttendees": random.randint(10, 500),
        })
        if resp.status_code == 201:
            EVENT_IDS.append(resp.json()["event"]["ourId"])
