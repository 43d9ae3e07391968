# app/services/quotation.py
"""
Quotation survey wizard.

The customer walks through six steps; the whole state lives in one
``QuotationSurvey`` object that is stored in the session between requests.
Two rules gate progress:

* a budget of "Under R500" blocks leaving step 1 (a wizard-only rule, the
  intake endpoint never looks at budget)
* every confirmation on step 5 must start with "Yes", otherwise the survey
  is disqualified until the customer goes back and reconsiders
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

SERVING_SIZES = [
    "10–20 guests",
    "20–50 guests",
    "50–100 guests",
    "100+ guests",
]

TIMEFRAMES = [
    "Within 5 days (rush order)",
    "1–2 weeks",
    "3–4 weeks",
    "More than a month away",
]

LOW_BUDGET = "Under R500"

BUDGET_RANGES = [
    LOW_BUDGET,
    "R850 – R1,500",
    "R1,500 – R2,500",
    "R2,500 – R5,000",
    "R5,000+ (premium/wedding cakes)",
]

DELIVERY_CHOICES = [
    "Yes — please include delivery",
    "No — I'll pick up from Vaal",
]

TIER_OPTIONS = ["Single tier", "2 tiers", "3 tiers", "4+ tiers", "Not sure — please advise"]

CUSTOM_SHAPE = "Custom shape"
SHAPE_OPTIONS = ["Round", "Square", "Rectangle", "Heart", CUSTOM_SHAPE, "No preference"]

OTHER_FLAVOUR = "Other"
FLAVOUR_OPTIONS = ["Vanilla", "Chocolate", "Red Velvet", "Carrot", "Lemon", "Marble", OTHER_FLAVOUR]

FILLING_OPTIONS = [
    "Buttercream",
    "Cream cheese",
    "Ganache",
    "Fresh cream",
    "Fruit filling",
    "No filling / plain",
    "Not sure — please advise",
]

FINISH_OPTIONS = [
    "Buttercream (textured or smooth)",
    "Fondant",
    "Naked / semi-naked",
    "Ganache drip",
    "Not sure — please advise",
]

TOPPER_OPTIONS = [
    "Yes — I'll provide them",
    "Yes — please include (describe below)",
    "No decorations needed",
]


@dataclass(frozen=True)
class ConfirmationQuestion:
    id: str
    question: str
    options: tuple[str, ...] = ("Yes, I understand", "No")


CONFIRMATION_QUESTIONS = [
    ConfirmationQuestion(
        "deposit",
        "Do you understand that custom cakes require a 50% non-refundable deposit to secure your order?",
    ),
    ConfirmationQuestion(
        "rushFees",
        "Do you understand that orders requested within 5 days of the event will incur rush fees?",
    ),
    ConfirmationQuestion(
        "pricingBasis",
        "Are you aware that cake designs are quoted based on complexity, size, and detail — not just flavour?",
    ),
    ConfirmationQuestion(
        "designVariation",
        "Do you agree that final cake designs may vary slightly from reference images due to the "
        "handcrafted nature of artisan cakes?",
    ),
    ConfirmationQuestion(
        "deliveryFees",
        "Are you prepared to pay delivery fees separately, based on your location distance from Vaal?",
        ("Yes, I understand", "No, I'll arrange pickup instead"),
    ),
    ConfirmationQuestion(
        "cancellation",
        "Do you understand that cancellations made less than 7 days before the event are non-refundable?",
    ),
]

STEP_TITLES = [
    "Order Basics",
    "Size & Shape",
    "Flavour & Filling",
    "Design & Decoration",
    "Confirm Terms",
    "Contact Details",
]
TOTAL_STEPS = len(STEP_TITLES)
CONFIRM_STEP = 5

STEP_FIELDS = {
    1: ("cake_type", "occasion", "timeframe", "serving_size", "budget", "delivery", "delivery_location"),
    2: ("tiers", "shape", "custom_shape"),
    3: ("flavour", "other_flavour", "filling"),
    4: ("finish", "toppers", "topper_details", "reference_link", "color_theme"),
    5: (),
    6: ("name", "contact", "email", "notes"),
}

CONFIRMATION_PREFIX = "confirm_"


@dataclass
class QuotationSurvey:
    step: int = 1
    disqualified: bool = False
    submitted: bool = False
    answers: dict[str, str] = field(default_factory=dict)
    confirmations: dict[str, str] = field(default_factory=dict)

    # ---- state (de)serialization for the session ----

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "disqualified": self.disqualified,
            "submitted": self.submitted,
            "answers": dict(self.answers),
            "confirmations": dict(self.confirmations),
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "QuotationSurvey":
        if not isinstance(data, Mapping):
            return cls()
        step = data.get("step", 1)
        if not isinstance(step, int) or not 1 <= step <= TOTAL_STEPS:
            step = 1
        return cls(
            step=step,
            disqualified=bool(data.get("disqualified", False)),
            submitted=bool(data.get("submitted", False)),
            answers={k: str(v) for k, v in dict(data.get("answers") or {}).items()},
            confirmations={k: str(v) for k, v in dict(data.get("confirmations") or {}).items()},
        )

    # ---- answers ----

    def get(self, key: str) -> str:
        return self.answers.get(key, "")

    def update(self, values: Mapping[str, str]) -> None:
        """Take the answers that belong to the current step; ignore the rest."""
        for key in STEP_FIELDS[self.step]:
            if key in values:
                self.answers[key] = (values.get(key) or "").strip()
        if self.step == CONFIRM_STEP:
            for q in CONFIRMATION_QUESTIONS:
                value = values.get(CONFIRMATION_PREFIX + q.id)
                if value:
                    self.confirmations[q.id] = value

    @property
    def progress(self) -> int:
        return round(self.step / TOTAL_STEPS * 100)

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step - 1]

    @property
    def needs_delivery(self) -> bool:
        return "Yes" in self.get("delivery")

    @property
    def budget_too_low(self) -> bool:
        return self.get("budget") == LOW_BUDGET

    # ---- transitions ----

    def can_proceed(self) -> bool:
        a = self.get
        if self.step == 1:
            return bool(
                a("cake_type")
                and a("serving_size")
                and a("budget")
                and a("delivery")
                and not self.budget_too_low
                and (not self.needs_delivery or a("delivery_location"))
            )
        if self.step == 2:
            return bool(a("tiers") and a("shape") and (a("shape") != CUSTOM_SHAPE or a("custom_shape")))
        if self.step == 3:
            return bool(
                a("flavour") and a("filling") and (a("flavour") != OTHER_FLAVOUR or a("other_flavour"))
            )
        if self.step == 4:
            return bool(a("finish") and a("toppers"))
        if self.step == CONFIRM_STEP:
            return all(self.confirmations.get(q.id) for q in CONFIRMATION_QUESTIONS)
        if self.step == TOTAL_STEPS:
            return bool(a("name") and a("contact") and a("email"))
        return True

    def has_passed_terms(self) -> bool:
        return all(
            self.confirmations.get(q.id, "").startswith("Yes") for q in CONFIRMATION_QUESTIONS
        )

    def next(self) -> bool:
        """
        Advance one step. Returns False when blocked; leaving the
        confirmation step with any "No" answer disqualifies instead.
        """
        if self.disqualified or self.step >= TOTAL_STEPS or not self.can_proceed():
            return False
        if self.step == CONFIRM_STEP and not self.has_passed_terms():
            self.disqualified = True
            return False
        self.step += 1
        return True

    def back(self) -> bool:
        if self.disqualified or self.step <= 1:
            return False
        self.step -= 1
        return True

    def reconsider(self) -> None:
        """Leave the disqualified screen with the confirmations cleared."""
        self.disqualified = False
        self.confirmations = {}

    @property
    def ready_to_submit(self) -> bool:
        return (
            not self.disqualified
            and not self.submitted
            and self.step == TOTAL_STEPS
            and self.can_proceed()
        )

    # ---- output ----

    def compose_notes(self) -> str:
        """Structured block stored in ``additional_notes``."""
        a = self.get
        confirmation_notes = "; ".join(
            f"{q.id}: {self.confirmations.get(q.id) or 'Not answered'}"
            for q in CONFIRMATION_QUESTIONS
        )

        shape = a("shape") + (f" ({a('custom_shape')})" if a("custom_shape") else "")
        flavour = a("flavour") + (f" ({a('other_flavour')})" if a("other_flavour") else "")
        toppers = a("toppers") + (f" - {a('topper_details')}" if a("topper_details") else "")
        design = [
            f"Tiers: {a('tiers')}",
            f"Shape: {shape}",
            f"Flavour: {flavour}",
            f"Filling: {a('filling')}",
            f"Finish: {a('finish')}",
            f"Toppers: {toppers}",
        ]
        if a("reference_link"):
            design.append(f"Reference: {a('reference_link')}")
        if a("color_theme"):
            design.append(f"Color/Theme: {a('color_theme')}")

        lines = [
            f"Budget: {a('budget')}",
            f"Serving Size: {a('serving_size')}",
            f"Timeframe: {a('timeframe')}",
            f"Email: {a('email')}",
            "",
            "=== Design Details ===",
            "\n".join(design),
            "",
            f"Confirmations: {confirmation_notes}",
        ]
        if a("notes"):
            lines.extend(["", f"Additional Notes: {a('notes')}"])
        return "\n".join(lines)

    def to_inquiry(self, today: date) -> dict:
        """
        Payload for the intake pipeline. The survey asks no event date, so
        ``date_needed`` is the day of submission.
        """
        return {
            "name": self.get("name"),
            "contact": self.get("contact"),
            "cake_type": self.get("cake_type"),
            "event_type": self.get("occasion") or None,
            "delivery_option": "delivery" if self.needs_delivery else "pickup",
            "delivery_location": self.get("delivery_location") if self.needs_delivery else None,
            "date_needed": today.isoformat(),
            "additional_notes": self.compose_notes(),
        }

    def whatsapp_form(self) -> dict:
        return {key: self.get(key) for fields in STEP_FIELDS.values() for key in fields}
