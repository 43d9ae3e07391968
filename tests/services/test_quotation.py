"""
Tests for the quotation survey state machine.

Run:
    pytest tests/services/test_quotation.py -v
"""

from datetime import date

import pytest

from app.services.quotation import (
    CONFIRMATION_PREFIX,
    CONFIRMATION_QUESTIONS,
    CONFIRM_STEP,
    LOW_BUDGET,
    TOTAL_STEPS,
    QuotationSurvey,
)
from app.services.validation import validate_inquiry

STEP_ANSWERS = {
    1: {
        "cake_type": "Birthday Cake",
        "occasion": "30th birthday",
        "timeframe": "1–2 weeks",
        "serving_size": "20–50 guests",
        "budget": "R850 – R1,500",
        "delivery": "No — I'll pick up from Vaal",
    },
    2: {"tiers": "2 tiers", "shape": "Round"},
    3: {"flavour": "Chocolate", "filling": "Ganache"},
    4: {"finish": "Fondant", "toppers": "No decorations needed"},
    5: {CONFIRMATION_PREFIX + q.id: "Yes, I understand" for q in CONFIRMATION_QUESTIONS},
    6: {"name": "Jane Doe", "contact": "0821234567", "email": "jane@example.com"},
}


def advance_to(survey: QuotationSurvey, step: int) -> QuotationSurvey:
    while survey.step < step:
        survey.update(STEP_ANSWERS[survey.step])
        assert survey.next(), f"blocked on step {survey.step}"
    return survey


class TestStepOne:

    def test_starts_on_first_step(self):
        survey = QuotationSurvey()

        assert survey.step == 1
        assert survey.title == "Order Basics"
        assert survey.progress == round(100 / TOTAL_STEPS)

    def test_blocked_without_required_answers(self):
        survey = QuotationSurvey()
        survey.update({"cake_type": "Birthday Cake"})

        assert survey.next() is False
        assert survey.step == 1

    def test_low_budget_blocks_progress(self):
        survey = QuotationSurvey()
        survey.update({**STEP_ANSWERS[1], "budget": LOW_BUDGET})

        assert survey.budget_too_low is True
        assert survey.next() is False
        assert survey.disqualified is False

    def test_delivery_requires_location(self):
        survey = QuotationSurvey()
        survey.update({**STEP_ANSWERS[1], "delivery": "Yes — please include delivery"})
        assert survey.next() is False

        survey.update({"delivery_location": "Vanderbijlpark"})
        assert survey.next() is True

    def test_update_ignores_other_steps_fields(self):
        survey = QuotationSurvey()
        survey.update({"name": "Jane", "cake_type": "  Wedding Cake "})

        assert survey.get("name") == ""
        assert survey.get("cake_type") == "Wedding Cake"


class TestLaterSteps:

    def test_custom_shape_needs_description(self):
        survey = advance_to(QuotationSurvey(), 2)
        survey.update({"tiers": "Single tier", "shape": "Custom shape"})
        assert survey.next() is False

        survey.update({"custom_shape": "Number 3"})
        assert survey.next() is True

    def test_other_flavour_needs_description(self):
        survey = advance_to(QuotationSurvey(), 3)
        survey.update({"flavour": "Other", "filling": "Buttercream"})
        assert survey.next() is False

        survey.update({"other_flavour": "Coffee"})
        assert survey.next() is True

    def test_back_keeps_answers(self):
        survey = advance_to(QuotationSurvey(), 3)

        assert survey.back() is True
        assert survey.step == 2
        assert survey.get("tiers") == "2 tiers"

    def test_back_from_first_step_is_noop(self):
        assert QuotationSurvey().back() is False


class TestConfirmations:

    def test_all_questions_must_be_answered(self):
        survey = advance_to(QuotationSurvey(), CONFIRM_STEP)
        first = CONFIRMATION_QUESTIONS[0]
        survey.update({CONFIRMATION_PREFIX + first.id: "Yes, I understand"})

        assert survey.next() is False
        assert survey.disqualified is False

    def test_any_no_disqualifies(self):
        survey = advance_to(QuotationSurvey(), CONFIRM_STEP)
        answers = dict(STEP_ANSWERS[CONFIRM_STEP])
        answers[CONFIRMATION_PREFIX + "deliveryFees"] = "No, I'll arrange pickup instead"
        survey.update(answers)

        assert survey.next() is False
        assert survey.disqualified is True
        assert survey.step == CONFIRM_STEP
        assert survey.back() is False

    def test_reconsider_clears_confirmations(self):
        survey = advance_to(QuotationSurvey(), CONFIRM_STEP)
        survey.update({CONFIRMATION_PREFIX + q.id: "No" for q in CONFIRMATION_QUESTIONS})
        survey.next()

        survey.reconsider()

        assert survey.disqualified is False
        assert survey.confirmations == {}
        assert survey.step == CONFIRM_STEP

    def test_all_yes_moves_to_contact_step(self):
        survey = advance_to(QuotationSurvey(), TOTAL_STEPS)
        assert survey.title == "Contact Details"
        assert survey.progress == 100


class TestSubmission:

    def test_ready_once_contact_details_given(self):
        survey = advance_to(QuotationSurvey(), TOTAL_STEPS)
        assert survey.ready_to_submit is False

        survey.update(STEP_ANSWERS[6])
        assert survey.ready_to_submit is True

    def test_submitted_survey_cannot_resubmit(self):
        survey = advance_to(QuotationSurvey(), TOTAL_STEPS)
        survey.update(STEP_ANSWERS[6])
        survey.submitted = True

        assert survey.ready_to_submit is False

    def test_to_inquiry_passes_validation(self):
        survey = advance_to(QuotationSurvey(), TOTAL_STEPS)
        survey.update({**STEP_ANSWERS[6], "notes": "Purple theme please"})

        payload = survey.to_inquiry(date(2025, 3, 1))
        result = validate_inquiry(payload)

        assert result.valid is True
        assert result.sanitized["date_needed"] == "2025-03-01"
        assert result.sanitized["delivery_option"] == "pickup"
        assert result.sanitized["delivery_location"] is None
        assert result.sanitized["event_type"] == "30th birthday"

    def test_notes_block_contents(self):
        survey = advance_to(QuotationSurvey(), TOTAL_STEPS)
        survey.update({**STEP_ANSWERS[6], "notes": "Purple theme please"})

        notes = survey.compose_notes()

        assert "Budget: R850 – R1,500" in notes
        assert "Email: jane@example.com" in notes
        assert "=== Design Details ===" in notes
        assert "Tiers: 2 tiers" in notes
        assert "deposit: Yes, I understand" in notes
        assert notes.endswith("Additional Notes: Purple theme please")

    def test_delivery_is_carried_into_inquiry(self):
        survey = QuotationSurvey()
        survey.update({
            **STEP_ANSWERS[1],
            "delivery": "Yes — please include delivery",
            "delivery_location": "Vereeniging",
        })

        payload = survey.to_inquiry(date(2025, 3, 1))

        assert payload["delivery_option"] == "delivery"
        assert payload["delivery_location"] == "Vereeniging"


class TestSessionRoundTrip:

    def test_from_dict_restores_state(self):
        survey = advance_to(QuotationSurvey(), 4)

        restored = QuotationSurvey.from_dict(survey.to_dict())

        assert restored == survey

    @pytest.mark.parametrize("data", [None, "junk", {"step": 99}, {"step": "2"}])
    def test_bad_session_data_starts_over(self, data):
        assert QuotationSurvey.from_dict(data).step == 1
