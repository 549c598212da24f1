"""
Locust load script for the widget quote endpoints.

Simulates a customer filling in a fence-installation widget:
- Every "keystroke" on the measurement or options fields posts to
  /api/v1/quotes/estimate (live estimate, no distance lookup)
- Once the address is entered, a single /api/v1/quotes/calculate call
  produces the final quote with the drive-time surcharge

Configure with env vars or Locust UI:
- HOST: pass via `--host http://localhost:8000`
- LEADQUOTE_KEYSTROKES: live estimates per simulated form (default 12)
- LEADQUOTE_ADDRESSES: `|`-separated customer addresses to sample from

Run:
  locust -f load/locustfile.py --host http://localhost:8000
"""

from __future__ import annotations

import os
import random
from typing import Dict, List

from locust import HttpUser, task, between


# --- Config -------------------------------------------------------------------

DEFAULT_ADDRESSES = [
    "1200 Barton Springs Rd, Austin, TX",
    "500 E Cesar Chavez St, Austin, TX",
    "3001 S Lamar Blvd, Austin, TX",
    "101 W Main St, Round Rock, TX",
]

KEYSTROKES = int(os.getenv("LEADQUOTE_KEYSTROKES", "12") or 12)
ADDRESSES = [a.strip() for a in os.getenv("LEADQUOTE_ADDRESSES", "").split("|") if a.strip()] or DEFAULT_ADDRESSES

CALCULATOR: Dict = {
    "basePricing": {
        "service_field": "service",
        "prices": {
            "Wood Fence Installation": {"amount": 25, "unit": "linear_foot", "minCharge": 500},
            "Vinyl Fence Installation": {"amount": 35, "unit": "linear_foot", "minCharge": 750},
        },
    },
    "modifiers": [
        {
            "id": "gate",
            "field": "gateCount",
            "type": "perUnit",
            "calculation": {"operation": "add", "amount": 150, "perUnit": True},
        },
        {
            "id": "long_run",
            "field": "linearFeet",
            "type": "threshold",
            "condition": "greaterThan",
            "value": 100,
            "calculation": {"operation": "multiply", "amount": 1.15},
        },
    ],
    "driveTime": {
        "enabled": True,
        "yardAddress": "8800 Burnet Rd, Austin, TX",
        "addressField": "address",
        "pricing": {"type": "perMile", "rate": 2, "freeRadius": 10, "maxDistance": 60},
    },
    "display": {"format": "range", "rangeMultiplier": 1.2},
}


# --- The User Model -----------------------------------------------------------

class WidgetVisitor(HttpUser):
    wait_time = between(0.1, 0.5)

    def _form(self) -> Dict:
        return {
            "service": random.choice(list(CALCULATOR["basePricing"]["prices"])),
            "linearFeet": 0,
            "gateCount": 0,
        }

    @task
    def fill_in_widget(self) -> None:
        form = self._form()
        # Type the measurement digit by digit, then pick a gate count
        digits: List[str] = list(str(random.randint(20, 250)))
        typed = ""
        for i in range(KEYSTROKES):
            if digits:
                typed += digits.pop(0)
                form["linearFeet"] = typed
            else:
                form["gateCount"] = random.randint(0, 3)
            self.client.post(
                "/api/v1/quotes/estimate",
                json={"formData": form, "calculator": CALCULATOR},
                name="/api/v1/quotes/estimate",
            )

        form["address"] = random.choice(ADDRESSES)
        self.client.post(
            "/api/v1/quotes/calculate",
            json={"formData": form, "calculator": CALCULATOR},
            name="/api/v1/quotes/calculate",
        )
