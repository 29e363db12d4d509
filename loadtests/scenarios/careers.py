"""Careers desk load test scenario: applicants and contact messages."""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import application_form, message_data
from loadtests.helpers.state import ApplicantState


class ApplicantJourney(SequentialTaskSet):
    """Browse vacancies -> Apply -> Check status -> Send a message."""

    def on_start(self):
        self.state = ApplicantState()

    @task
    def list_vacancies(self):
        self.client.get("/vacancies", name="GET /vacancies")

    @task
    def apply(self):
        form = application_form()
        with self.client.post("/applications", data=form, catch_response=True, name="POST /applications") as resp:
            if resp.status_code == 201:
                self.state.application_code = resp.json()["application_code"]
                self.state.applicant_email = form["applicant_email"]
            else:
                resp.failure(f"Application failed: {resp.status_code}")
                self.interrupt()

    @task
    def check_status(self):
        with self.client.post(
            "/applications/check-status",
            json={"application_code": self.state.application_code, "email": self.state.applicant_email},
            catch_response=True,
            name="POST /applications/check-status",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Status check failed: {resp.status_code}")

    @task
    def send_message(self):
        self.client.post("/messages", json=message_data(), name="POST /messages")
        self.interrupt()


class ApplicantUser(HttpUser):
    wait_time = between(2.0, 6.0)
    weight = 1
    tasks = [ApplicantJourney]
