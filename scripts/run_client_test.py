#!/usr/bin/env python3
"""API client smoke test for the intake server.

Acts as a pure HTTP client against a live server.  Option labels are read
from ``/api/v1/reference/mappings`` so the generated wizards always use the
same choices the browser would offer.

Each run walks one intake through its whole life:

  1. submit an incomplete wizard        → expect 422 + first_invalid_question
  2. submit a random complete wizard    → expect 201
  3. load it back for edit (``/form``)  → expect the same labels
  4. edit it (PUT)                      → expect 200
  5. staff: status change + analysis    → only with ``--admin-key``
  6. edit again                         → expect 409 once staff moved it

Usage::

    # Install deps (first time only)
    uv pip install httpx rich

    # Owner flow only, 5 random intakes
    uv run python scripts/run_client_test.py -n 5

    # Include staff endpoints
    uv run python scripts/run_client_test.py --admin-key secret -v

    # Reproducible run
    uv run python scripts/run_client_test.py --seed 42
"""

from __future__ import annotations

import argparse
import asyncio
import json
import random
import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx
from rich.console import Console
from rich.table import Table

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Wizard field → reference table it takes its labels from
SINGLE_SELECTS = {
    "q2_target": "target",
    "q3_frequency": "frequency",
    "q4_current_solution": "current_solution",
    "q6_price_range": "price_range",
    "q7_revenue_model": "revenue_model",
    "q8_competition": "competition",
    "q10_first_action": "first_action",
    "q12_return_reason": "return_reason",
    "q14_need_account": "need_account",
    "q16_ai_type": "ai_type",
    "q18_site_type": "site_type",
    "q20_style": "design_style",
    "q21_home_focus": "homepage_focus",
    "q22_output_type": "output_type",
}
MULTI_SELECTS = {
    "q13_return_items": "return_items",
    "q15_store_what": "store_what",
    "q17_integrations": "integrations",
}
# "nothing" must stand alone in these
EXCLUSIVE_FIELDS = {"q13_return_items", "q15_store_what"}
NOTHING_SLUG = "nothing"

PROJECT_NAMES = [
    "Budget Tracker", "Recettes du Marché", "Coach Running", "Garde Partagée",
    "Atelier Céramique", "Suivi Chantier", "Quiz Histoire", "Planning Resto",
]
FREE_TEXT_POOL = [
    "Les gens perdent la trace de leurs dépenses",
    "Trop de temps passé sur des tableurs",
    "Aucun outil simple pour les petites équipes",
    "Les clients oublient leurs rendez-vous",
    "Je ne sais pas encore",
    "Un écran d'accueil, un formulaire, puis un résultat",
]

STAFF_STATUSES = ["under_analysis", "waiting_validation", "approved_for_dev"]


# ---------------------------------------------------------------------------
# APIClient: thin httpx wrapper with identity headers
# ---------------------------------------------------------------------------

class APIClient:
    """Async HTTP client for the intake server API."""

    def __init__(self, base_url: str, timeout: float = 30.0, admin_key: str | None = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._admin_key = admin_key
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def has_admin(self) -> bool:
        return self._admin_key is not None

    async def health_check(self) -> bool:
        """True if the server answers ``/health``."""
        try:
            resp = await self._client.get("/health")  # type: ignore[union-attr]
            return resp.status_code == 200
        except (httpx.ConnectError, httpx.TimeoutException):
            return False

    async def mappings(self) -> dict[str, list[dict]]:
        resp = await self._request("GET", "/api/v1/reference/mappings")
        resp.raise_for_status()
        return resp.json()

    # --- Owner ---

    async def submit(self, user_id: str, form: dict) -> httpx.Response:
        return await self._request("POST", "/api/v1/intakes", user_id=user_id, json=form)

    async def get_form(self, user_id: str, intake_id: str) -> httpx.Response:
        return await self._request("GET", f"/api/v1/intakes/{intake_id}/form", user_id=user_id)

    async def update(self, user_id: str, intake_id: str, form: dict) -> httpx.Response:
        return await self._request(
            "PUT", f"/api/v1/intakes/{intake_id}", user_id=user_id, json=form,
        )

    async def get_intake(self, user_id: str, intake_id: str) -> httpx.Response:
        return await self._request("GET", f"/api/v1/intakes/{intake_id}", user_id=user_id)

    # --- Staff ---

    async def change_status(self, intake_id: str, status: str) -> httpx.Response:
        return await self._request(
            "PATCH", f"/api/v1/admin/intakes/{intake_id}/status",
            admin=True, json={"status": status},
        )

    async def send_analysis(self, intake_id: str, analysis: str, recommendation: str) -> httpx.Response:
        return await self._request(
            "POST", f"/api/v1/admin/intakes/{intake_id}/analysis",
            admin=True, json={"analysis": analysis, "recommendation": recommendation},
        )

    async def stats(self) -> httpx.Response:
        return await self._request("GET", "/api/v1/admin/intakes/stats", admin=True)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        user_id: str | None = None,
        admin: bool = False,
        json: Any = None,
    ) -> httpx.Response:
        """Send a request with identity headers, retry once on timeout."""
        headers: dict[str, str] = {}
        if user_id is not None:
            headers["X-User-ID"] = user_id
        if admin and self._admin_key:
            headers["X-Admin-Key"] = self._admin_key
        try:
            return await self._client.request(method, path, headers=headers, json=json)  # type: ignore[union-attr]
        except httpx.TimeoutException:
            return await self._client.request(method, path, headers=headers, json=json)  # type: ignore[union-attr]


# ---------------------------------------------------------------------------
# FormGenerator: random complete wizards from the reference tables
# ---------------------------------------------------------------------------

class FormGenerator:
    """Generate random label-based wizard snapshots."""

    def __init__(self, rng: random.Random, mappings: dict[str, list[dict]]):
        self._rng = rng
        self._mappings = mappings

    def _labels(self, table: str) -> list[str]:
        return [o["label"] for o in self._mappings[table]]

    def _multi(self, field_name: str, table: str) -> list[str]:
        options = self._mappings[table]
        if field_name in EXCLUSIVE_FIELDS:
            nothing = [o["label"] for o in options if o["slug"] == NOTHING_SLUG]
            if nothing and self._rng.random() < 0.25:
                return nothing
            options = [o for o in options if o["slug"] != NOTHING_SLUG]
            count = self._rng.randint(1, len(options))
        else:
            # Integrations may legitimately be empty
            count = self._rng.randint(0, len(options))
        return [o["label"] for o in self._rng.sample(options, count)]

    def complete(self) -> dict[str, Any]:
        form: dict[str, Any] = {
            "projectName": self._rng.choice(PROJECT_NAMES),
            "q1_problem": self._rng.choice(FREE_TEXT_POOL),
            "q5_interesting": self._rng.choice(FREE_TEXT_POOL),
            "q9_uncertainty": self._rng.choice(FREE_TEXT_POOL),
            "q11_flow_steps": self._rng.choice(FREE_TEXT_POOL),
            "q19_references": "",
            "q23_pitch": self._rng.choice(FREE_TEXT_POOL),
        }
        for field_name, table in SINGLE_SELECTS.items():
            form[field_name] = self._rng.choice(self._labels(table))
        for field_name, table in MULTI_SELECTS.items():
            form[field_name] = self._multi(field_name, table)
        return form

    def incomplete(self) -> tuple[dict[str, Any], str]:
        """A complete form with one required single select blanked.

        Returns the form and the question id expected to be reported first.
        """
        form = self.complete()
        field_name = self._rng.choice(list(SINGLE_SELECTS))
        form[field_name] = ""
        question = "Q" + field_name.split("_", 1)[0][1:]
        return form, question


# ---------------------------------------------------------------------------
# Run bookkeeping
# ---------------------------------------------------------------------------

@dataclass
class RunResult:
    run_index: int
    status: str = "incomplete"  # success / failed / incomplete
    intake_id: str | None = None
    short_title: str | None = None
    final_status: str | None = None
    steps: list[str] = field(default_factory=list)
    error: str | None = None


class IntakeRunner:
    """Drive one intake through the owner (and optionally staff) flow."""

    def __init__(
        self,
        client: APIClient,
        forms: FormGenerator,
        rng: random.Random,
        console: Console,
        verbosity: int,
    ):
        self._client = client
        self._rng = rng
        self._forms = forms
        self._console = console
        self._verbosity = verbosity

    def _expect(self, resp: httpx.Response, code: int, step: str, result: RunResult) -> dict:
        if resp.status_code != code:
            raise AssertionError(
                f"{step}: expected {code}, got {resp.status_code} {resp.text[:200]}"
            )
        result.steps.append(step)
        body = resp.json() if resp.content else {}
        if self._verbosity >= 2:
            self._console.print_json(json.dumps(body, ensure_ascii=False))
        elif self._verbosity >= 1:
            self._console.print(f"    [green]✓[/] {step} ({code})")
        return body

    async def run(self, run_index: int) -> RunResult:
        result = RunResult(run_index=run_index)
        user_id = f"smoke-{uuid.uuid4().hex[:8]}"
        try:
            # 1. Incomplete submission is rejected with the right question
            form, question = self._forms.incomplete()
            body = self._expect(await self._client.submit(user_id, form), 422, "reject incomplete", result)
            if body.get("first_invalid_question") != question:
                raise AssertionError(
                    f"first_invalid_question={body.get('first_invalid_question')!r}, expected {question!r}"
                )

            # 2. Complete submission is stored
            form = self._forms.complete()
            intake = self._expect(await self._client.submit(user_id, form), 201, "submit", result)
            result.intake_id = intake["id"]
            result.short_title = intake["short_title"]

            # 3. Edit mode reproduces the labels
            loaded = self._expect(await self._client.get_form(user_id, intake["id"]), 200, "load form", result)
            for key in SINGLE_SELECTS:
                if loaded.get(key) != form[key]:
                    raise AssertionError(f"{key} round trip: {loaded.get(key)!r} != {form[key]!r}")

            # 4. Owner edit while still submitted
            self._expect(await self._client.update(user_id, intake["id"], self._forms.complete()), 200, "edit", result)
            result.final_status = "submitted"

            if self._client.has_admin:
                # 5. Staff review
                status = self._rng.choice(STAFF_STATUSES)
                self._expect(await self._client.change_status(intake["id"], status), 200, f"status {status}", result)
                sent = self._expect(
                    await self._client.send_analysis(intake["id"], "Marché porteur", "  "),
                    200, "send analysis", result,
                )
                if sent["status"] != "analysis_sent" or sent["recommendation"] is not None:
                    raise AssertionError(f"analysis not stored as expected: {sent}")
                owner_view = self._expect(await self._client.get_intake(user_id, intake["id"]), 200, "owner view", result)
                result.final_status = owner_view["status"]

                # 6. Edit is now refused
                self._expect(await self._client.update(user_id, intake["id"], form), 409, "edit refused", result)

            result.status = "success"
        except AssertionError as exc:
            result.status = "failed"
            result.error = str(exc)
        except httpx.HTTPError as exc:
            result.status = "failed"
            result.error = f"{type(exc).__name__}: {exc}"
        return result


def print_summary(console: Console, results: list[RunResult]) -> None:
    """Print a rich summary table of all runs."""
    console.print()
    console.rule("[bold]Intake Summary")

    table = Table(title="Results by Run", show_lines=True)
    table.add_column("Run", width=4)
    table.add_column("Status", width=8)
    table.add_column("Title", min_width=20)
    table.add_column("Final status", width=16)
    table.add_column("Steps", width=6)

    for r in results:
        status_str = {
            "success": "[green]OK[/]",
            "failed": "[red]FAIL[/]",
        }.get(r.status, "[yellow]INC[/]")
        table.add_row(
            str(r.run_index), status_str, r.short_title or "-",
            r.final_status or "-", str(len(r.steps)),
        )
    console.print(table)

    for r in results:
        if r.status == "failed":
            console.print(f"  [red]run {r.run_index}[/]: {r.error}")


# ---------------------------------------------------------------------------
# CLI + async main
# ---------------------------------------------------------------------------

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="API client smoke test for the intake server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--base-url", default="http://localhost:8080",
                        help="Server base URL (default: http://localhost:8080)")
    parser.add_argument("-n", "--runs", type=int, default=3,
                        help="Number of random intakes (default: 3)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v steps, -vv full JSON)")
    parser.add_argument("--seed", type=int, default=None,
                        help="RNG seed for reproducibility (default: current timestamp)")
    parser.add_argument("--admin-key", default=None,
                        help="X-Admin-Key value; enables the staff steps")
    parser.add_argument("--timeout", type=float, default=30.0,
                        help="HTTP request timeout in seconds (default: 30)")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    console = Console()

    seed = args.seed if args.seed is not None else int(time.time())
    rng = random.Random(seed)
    console.print(f"[dim]RNG seed: {seed}[/]")

    results: list[RunResult] = []
    async with APIClient(args.base_url, timeout=args.timeout, admin_key=args.admin_key) as client:
        if not await client.health_check():
            console.print(f"[red]Server at {args.base_url} is not reachable. Is the server running?[/]")
            sys.exit(1)
        console.print(f"[green]Server health check passed[/] ({args.base_url})")

        forms = FormGenerator(rng, await client.mappings())
        runner = IntakeRunner(client, forms, rng, console, args.verbose)
        for i in range(1, args.runs + 1):
            console.print(f"[bold]Run {i}/{args.runs}[/]")
            results.append(await runner.run(i))

        if client.has_admin:
            stats = await client.stats()
            if stats.status_code == 200:
                console.print(f"[dim]Staff stats: {stats.json()}[/]")

    print_summary(console, results)

    if any(r.status == "failed" for r in results):
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
